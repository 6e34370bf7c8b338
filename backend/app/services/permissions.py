"""
Contrôle des permissions par rôle.

Le rôle est lu en base à partir de l'email vérifié du demandeur.
- Mise à jour d'abonnement (montant, ou statut de paiement en mode "status") : rôle super.
- Mise à jour de profil : rôle admin ou super.
"""

import logging
from enum import Enum

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import AuthorizationError, InfrastructureError
from app.models.student import Student
from app.schemas.student import StudentUpdateRequest
from app.services.firebase_auth import Principal
from app.services.update_planner import RenewalTrigger

logger = logging.getLogger(__name__)

ROLE_ADMIN = "admin"
ROLE_SUPER = "super"


class RequestKind(str, Enum):
    SUBSCRIPTION = "subscription"
    PROFILE = "profile"


def get_user_role(db: Session, email: str) -> str:
    """Rôle stocké pour cet email. Élève absent ou rôle NULL → chaîne vide."""
    try:
        role = db.execute(
            select(Student.role).where(func.lower(Student.email) == email.lower())
        ).scalar_one_or_none()
    except SQLAlchemyError as exc:
        logger.error("Lecture du rôle impossible pour %s : %s", email, exc)
        raise InfrastructureError("Impossible de vérifier les permissions.") from exc
    return role or ""


def classify_request(request: StudentUpdateRequest, trigger: RenewalTrigger) -> RequestKind:
    if request.amount is not None:
        return RequestKind.SUBSCRIPTION
    if trigger is RenewalTrigger.STATUS and request.payment_status:
        return RequestKind.SUBSCRIPTION
    return RequestKind.PROFILE


def authorize(role: str, kind: RequestKind) -> None:
    """Lève AuthorizationError si le rôle ne permet pas ce type de mise à jour."""
    if kind is RequestKind.SUBSCRIPTION:
        if role != ROLE_SUPER:
            raise AuthorizationError("Seul le rôle 'super' peut modifier l'abonnement.")
        return
    if role not in (ROLE_ADMIN, ROLE_SUPER):
        raise AuthorizationError("Seuls les rôles 'admin' ou 'super' peuvent modifier un élève.")


def authorize_principal(
    db: Session,
    principal: Principal,
    request: StudentUpdateRequest,
    trigger: RenewalTrigger,
) -> str:
    """Vérifie que le demandeur peut effectuer cette mise à jour. Retourne son rôle."""
    role = get_user_role(db, principal.email)
    kind = classify_request(request, trigger)
    try:
        authorize(role, kind)
    except AuthorizationError:
        logger.warning(
            "Mise à jour %s refusée pour %s (rôle %r) sur %s",
            kind.value, principal.email, role, request.email,
        )
        raise
    return role


def can_read_student(role: str, principal: Principal, email: str) -> bool:
    """Un élève lit sa propre fiche ; admin et super lisent toutes les fiches."""
    return principal.email == email.lower() or role in (ROLE_ADMIN, ROLE_SUPER)
