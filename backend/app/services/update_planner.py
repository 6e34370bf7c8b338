"""
Planification d'une mise à jour partielle d'élève.

Transforme une requête creuse en liste ordonnée de couples (colonne, valeur),
y compris les colonnes modifiées par effet de bord d'un renouvellement
(payment_time, sub_exp_date, updated_by). Aucune valeur n'est interpolée dans
du SQL : l'exécuteur lie chaque valeur comme paramètre.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from app.exceptions import ValidationError
from app.schemas.student import StudentUpdateRequest
from app.services.renewal import renew

logger = logging.getLogger(__name__)

PAID = "PAID"


class RenewalTrigger(str, Enum):
    """Ce qui déclenche un renouvellement : un montant positif, ou le passage au statut PAID."""
    AMOUNT = "amount"
    STATUS = "status"

    @classmethod
    def from_setting(cls, value: str) -> "RenewalTrigger":
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(
                f"RENEWAL_TRIGGER invalide : {value!r} (attendu : 'amount' ou 'status')."
            ) from None


@dataclass(frozen=True)
class ColumnAssignment:
    column: str
    value: Any


@dataclass
class UpdatePlan:
    assignments: List[ColumnAssignment] = field(default_factory=list)
    renewed: bool = False
    new_expiry: Optional[date] = None

    def add(self, column: str, value: Any) -> None:
        self.assignments.append(ColumnAssignment(column, value))

    @property
    def columns(self) -> List[str]:
        return [a.column for a in self.assignments]

    def values(self) -> Dict[str, Any]:
        return {a.column: a.value for a in self.assignments}


def plan_update(
    request: StudentUpdateRequest,
    existing_expiry: Optional[date],
    previous_status: Optional[str],
    today: date,
    now: datetime,
    trigger: RenewalTrigger = RenewalTrigger.AMOUNT,
) -> UpdatePlan:
    """
    Construit le plan de mise à jour dans l'ordre :
    name, phone_number, student_class, amount | payment_status,
    puis, en cas de renouvellement, payment_time, sub_exp_date, updated_by.

    Lève ValidationError si aucune colonne n'est à modifier.
    """
    plan = UpdatePlan()

    if request.name:
        plan.add("name", request.name)
    if request.phone_number:
        plan.add("phone_number", request.phone_number)
    if request.student_class:
        plan.add("student_class", request.student_class)

    renewal = False
    if trigger is RenewalTrigger.AMOUNT:
        if request.amount is not None:
            plan.add("amount", request.amount)
            renewal = request.amount > 0
            if not renewal:
                logger.info("Montant %s ≤ 0 : ni sub_exp_date ni payment_time modifiés", request.amount)
    else:
        if request.amount is not None:
            plan.add("amount", request.amount)
        if request.payment_status:
            plan.add("payment_status", request.payment_status)
            renewal = request.payment_status == PAID and (previous_status or "").upper() != PAID

    if renewal:
        new_expiry = renew(existing_expiry, today)
        plan.add("payment_time", now)
        plan.add("sub_exp_date", new_expiry)
        if request.updated_by:
            plan.add("updated_by", request.updated_by)
        plan.renewed = True
        plan.new_expiry = new_expiry
        logger.info("Renouvellement : sub_exp_date %s → %s", existing_expiry, new_expiry)

    if not plan.assignments:
        raise ValidationError("Aucun champ valide à mettre à jour.")

    return plan
