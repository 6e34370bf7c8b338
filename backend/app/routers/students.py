"""
Router pour les élèves.
Mise à jour partielle (POST/PUT /api/v1/students/update) : profil (admin, super)
                                                            ou abonnement (super)
Fiche élève (GET /api/v1/students?email=...)
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.exceptions import AuthorizationError, NotFoundError
from app.schemas.student import MessageResponse, StudentEmail, StudentProfile, StudentUpdateRequest
from app.services import permissions, student_service, student_update_service
from app.services.firebase_auth import Principal, get_current_principal
from app.services.update_planner import RenewalTrigger

router = APIRouter(prefix="/api/v1/students", tags=["Élèves"])


def get_renewal_trigger() -> RenewalTrigger:
    """Dépendance FastAPI : variante de renouvellement configurée (RENEWAL_TRIGGER)."""
    return RenewalTrigger.from_setting(settings.RENEWAL_TRIGGER)


@router.api_route(
    "/update",
    methods=["POST", "PUT"],
    response_model=MessageResponse,
    summary="Mettre à jour un élève (profil ou abonnement)",
)
def update_student(
    data: StudentUpdateRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    trigger: RenewalTrigger = Depends(get_renewal_trigger),
):
    """
    Met à jour les champs fournis d'un élève identifié par son email.
    Les champs absents ou vides ne sont pas modifiés.

    - Avec `amount` > 0 : paiement enregistré, abonnement prolongé d'un an
      (depuis l'expiration actuelle si encore valide, sinon depuis aujourd'hui)
    - Avec `amount` ≤ 0 : seul le montant est enregistré
    - Modifier l'abonnement exige le rôle `super`, le profil `admin` ou `super`
    """
    permissions.authorize_principal(db, principal, data, trigger)

    rows_affected = student_update_service.update_student(db, data, trigger)
    if rows_affected == 0:
        raise NotFoundError("Aucun élève trouvé avec cet email.")

    return MessageResponse(message="Élève mis à jour avec succès.")


@router.get("", response_model=StudentProfile, summary="Fiche d'un élève")
def get_student(
    email: StudentEmail = Query(...),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """
    Retourne la fiche d'un élève avec son statut de paiement (PAID si l'abonnement
    expire aujourd'hui ou plus tard) et les matières de sa classe.
    Un élève ne peut lire que sa propre fiche ; admin et super lisent toutes les fiches.
    """
    role = "" if principal.email == email else permissions.get_user_role(db, principal.email)
    if not permissions.can_read_student(role, principal, email):
        raise AuthorizationError("Accès refusé à la fiche de cet élève.")

    profile = student_service.get_student_profile(db, email)
    if profile is None:
        raise NotFoundError("Élève introuvable.")
    return profile
