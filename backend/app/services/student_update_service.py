"""
Service métier pour la mise à jour partielle d'un élève.

Étapes, dans une seule transaction de la session :
1. Lire sub_exp_date et payment_status de l'élève avec un verrou de ligne (FOR UPDATE),
   pour que deux renouvellements concurrents ne calculent pas la même prolongation
2. Planifier les colonnes à modifier (update_planner)
3. Exécuter un unique UPDATE paramétré, puis commit

Toute erreur SQLAlchemy entraîne un rollback et une InfrastructureError : aucune
modification partielle n'est jamais persistée.
"""

import logging
from datetime import date, datetime
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import InfrastructureError, ValidationError
from app.models.student import Student
from app.schemas.student import StudentUpdateRequest
from app.services.update_planner import RenewalTrigger, plan_update

logger = logging.getLogger(__name__)


def update_student(
    db: Session,
    request: StudentUpdateRequest,
    trigger: RenewalTrigger = RenewalTrigger.AMOUNT,
    today: Optional[date] = None,
    now: Optional[datetime] = None,
) -> int:
    """
    Applique la mise à jour et retourne le nombre de lignes modifiées.
    0 signifie qu'aucun élève ne correspond à l'email (à traduire en 404 par l'appelant).

    Lève ValidationError si la requête ne contient aucun champ à modifier,
    InfrastructureError en cas d'échec BDD.
    """
    email = request.email.lower()
    today = today or date.today()
    now = now or datetime.now()
    logger.info("Mise à jour de l'élève %s", email)

    try:
        snapshot = db.execute(
            select(Student.sub_exp_date, Student.payment_status)
            .where(func.lower(Student.email) == email)
            .with_for_update()
        ).first()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Lecture de sub_exp_date impossible pour %s : %s", email, exc)
        raise InfrastructureError("Échec de lecture de l'élève.") from exc

    existing_expiry, previous_status = snapshot if snapshot is not None else (None, None)

    try:
        plan = plan_update(request, existing_expiry, previous_status, today, now, trigger)
    except ValidationError:
        db.rollback()
        logger.warning("Aucun champ valide à mettre à jour pour %s", email)
        raise

    if snapshot is None:
        db.rollback()
        logger.info("Aucun élève trouvé pour %s", email)
        return 0

    try:
        result = db.execute(
            update(Student)
            .where(func.lower(Student.email) == email)
            .values(**plan.values())
            .execution_options(synchronize_session=False)
        )
        rows_affected = result.rowcount
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Échec de la mise à jour de %s : %s", email, exc, exc_info=True)
        raise InfrastructureError("Échec de la mise à jour de l'élève.") from exc

    logger.info(
        "%d ligne(s) mise(s) à jour pour %s (colonnes : %s)",
        rows_affected, email, ", ".join(plan.columns),
    )
    return rows_affected
