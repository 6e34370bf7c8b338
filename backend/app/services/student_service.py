"""
Lecture de la fiche d'un élève avec statut de paiement et matières dérivés.
"""

from datetime import date
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import InfrastructureError
from app.models.student import Student
from app.schemas.student import StudentProfile
from app.services.catalog import subjects_for_class
from app.services.renewal import is_subscription_active


def get_student_profile(db: Session, email: str, today: Optional[date] = None) -> Optional[StudentProfile]:
    """Retourne la fiche de l'élève, ou None s'il n'existe pas."""
    try:
        student = db.execute(
            select(Student).where(func.lower(Student.email) == email.strip().lower())
        ).scalar_one_or_none()
    except SQLAlchemyError as exc:
        raise InfrastructureError("Échec de lecture de l'élève.") from exc

    if student is None:
        return None

    active = is_subscription_active(student.sub_exp_date, today or date.today())
    return StudentProfile(
        email=student.email,
        name=student.name,
        student_class=student.student_class,
        phone_number=student.phone_number,
        sub_exp_date=student.sub_exp_date,
        updated_by=student.updated_by,
        amount=student.amount,
        payment_time=student.payment_time,
        role=student.role,
        payment_status="PAID" if active else "UNPAID",
        subjects=subjects_for_class(student.student_class),
    )
