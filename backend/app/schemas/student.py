"""
Schémas Pydantic pour les élèves.
"""

import re
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, Field, field_validator

EMAIL_REGEX = re.compile(r"^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$")

# Borne de la colonne students.amount (NUMERIC(10, 2))
MAX_AMOUNT = 99_999_999.99


def normalize_email(v: str) -> str:
    """Email obligatoire, au format valide, normalisé en minuscules (clé d'identité)."""
    v = v.strip()
    if not v:
        raise ValueError("Le paramètre 'email' est obligatoire.")
    if not EMAIL_REGEX.match(v):
        raise ValueError(f"Format email invalide : {v}")
    return v.lower()


# Même règle pour le corps de la mise à jour et le paramètre de lecture
StudentEmail = Annotated[str, AfterValidator(normalize_email)]


class StudentUpdateRequest(BaseModel):
    """
    Mise à jour partielle d'un élève (POST/PUT /students/update).

    Les champs optionnels absents, null ou vides sont normalisés à None :
    None signifie « ne pas modifier cette colonne ».
    """
    email: StudentEmail
    name: Optional[str] = None
    phone_number: Optional[str] = Field(default=None, alias="phoneNumber")
    student_class: Optional[str] = Field(default=None, alias="studentClass")
    amount: Optional[float] = Field(default=None, allow_inf_nan=False, ge=-MAX_AMOUNT, le=MAX_AMOUNT)
    updated_by: Optional[str] = Field(default=None, alias="updatedBy")
    payment_status: Optional[str] = Field(default=None, alias="paymentStatus")

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @field_validator("amount", mode="before")
    @classmethod
    def amount_is_number(cls, v):
        # true → 1.0 et "499" → 499.0 en mode lax : refusés
        if isinstance(v, (bool, str)):
            raise ValueError("Le montant doit être un nombre.")
        return v

    @field_validator("name", "phone_number", "student_class", "updated_by", "payment_status", mode="before")
    @classmethod
    def empty_as_absent(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v

    @field_validator("payment_status")
    @classmethod
    def upper_status(cls, v: Optional[str]) -> Optional[str]:
        return v.upper() if v else v


class MessageResponse(BaseModel):
    message: str


class StudentProfile(BaseModel):
    """Fiche élève retournée par GET /students (statut de paiement et matières dérivés)."""
    email: str
    name: Optional[str] = None
    student_class: Optional[str] = None
    phone_number: Optional[str] = None
    sub_exp_date: Optional[date] = None
    updated_by: Optional[str] = None
    amount: Optional[Decimal] = None
    payment_time: Optional[datetime] = None
    role: Optional[str] = None
    payment_status: str
    subjects: List[str] = []
