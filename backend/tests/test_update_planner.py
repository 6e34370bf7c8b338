"""
Tests unitaires pour la planification des mises à jour partielles.
"""

from datetime import date, datetime

import pytest

from app import exceptions
from app.schemas.student import StudentUpdateRequest
from app.services.update_planner import RenewalTrigger, plan_update

TODAY = date(2024, 6, 1)
NOW = datetime(2024, 6, 1, 10, 30)


# --- Helpers ---

def make_request(**kwargs) -> StudentUpdateRequest:
    kwargs.setdefault("email", "Eleve@EduQuiz.in")
    return StudentUpdateRequest(**kwargs)


def plan(request, existing_expiry=None, previous_status=None, trigger=RenewalTrigger.AMOUNT):
    return plan_update(request, existing_expiry, previous_status, TODAY, NOW, trigger)


# --- Champs de profil ---

def test_nom_seul():
    result = plan(make_request(name="Ravi"))
    assert result.columns == ["name"]
    assert result.values() == {"name": "Ravi"}
    assert result.renewed is False


def test_ordre_des_champs_de_profil():
    """L'ordre est fixe : name, phone_number, student_class."""
    result = plan(make_request(studentClass="CLS10", phoneNumber="9876543210", name="Ravi"))
    assert result.columns == ["name", "phone_number", "student_class"]


def test_champs_vides_ignores():
    """Chaîne vide = absent : seul le téléphone est modifié."""
    result = plan(make_request(name="", phoneNumber="9876543210", studentClass="   "))
    assert result.columns == ["phone_number"]


def test_aucun_champ_leve_validation_error():
    with pytest.raises(exceptions.ValidationError) as exc:
        plan(make_request())
    assert "aucun champ" in exc.value.detail.lower()


def test_uniquement_champs_vides_leve_validation_error():
    with pytest.raises(exceptions.ValidationError):
        plan(make_request(name="", phoneNumber="", studentClass="", updatedBy=""))


def test_updated_by_seul_ne_suffit_pas():
    """updatedBy n'est écrit qu'avec un renouvellement."""
    with pytest.raises(exceptions.ValidationError):
        plan(make_request(updatedBy="admin@eduquiz.in"))


# --- Variante montant ---

def test_montant_positif_renouvelle():
    result = plan(
        make_request(amount=499, updatedBy="super@eduquiz.in"),
        existing_expiry=date(2099, 1, 1),
    )
    assert result.columns == ["amount", "payment_time", "sub_exp_date", "updated_by"]
    values = result.values()
    assert values["amount"] == 499
    assert values["payment_time"] == NOW
    assert values["sub_exp_date"] == date(2100, 1, 1)
    assert values["updated_by"] == "super@eduquiz.in"
    assert result.renewed is True
    assert result.new_expiry == date(2100, 1, 1)


def test_montant_positif_abonnement_expire():
    result = plan(make_request(amount=499), existing_expiry=date(2020, 1, 1))
    assert result.values()["sub_exp_date"] == date(2025, 6, 1)


def test_montant_positif_sans_updated_by():
    result = plan(make_request(amount=100))
    assert "updated_by" not in result.columns
    assert result.values()["sub_exp_date"] == date(2025, 6, 1)


@pytest.mark.parametrize("amount", [0, -50, 0.0])
def test_montant_nul_ou_negatif_enregistre_seulement_le_montant(amount):
    """amount ≤ 0 : ni expiration, ni payment_time, ni updated_by."""
    result = plan(
        make_request(amount=amount, updatedBy="super@eduquiz.in"),
        existing_expiry=date(2099, 1, 1),
    )
    assert result.columns == ["amount"]
    assert result.renewed is False
    assert result.new_expiry is None


def test_profil_et_paiement_combines():
    result = plan(make_request(name="Ravi", studentClass="CLS9", amount=250, updatedBy="s@x.in"))
    assert result.columns == [
        "name", "student_class", "amount", "payment_time", "sub_exp_date", "updated_by",
    ]


def test_variante_montant_ignore_le_statut():
    with pytest.raises(exceptions.ValidationError):
        plan(make_request(paymentStatus="PAID"))


# --- Variante statut ---

def test_passage_a_paid_renouvelle():
    result = plan(
        make_request(paymentStatus="paid", updatedBy="super@eduquiz.in"),
        existing_expiry=date(2099, 1, 1),
        previous_status="UNPAID",
        trigger=RenewalTrigger.STATUS,
    )
    assert result.columns == ["payment_status", "payment_time", "sub_exp_date", "updated_by"]
    assert result.values()["payment_status"] == "PAID"
    assert result.values()["sub_exp_date"] == date(2100, 1, 1)


def test_passage_a_paid_depuis_statut_null():
    result = plan(make_request(paymentStatus="PAID"), previous_status=None, trigger=RenewalTrigger.STATUS)
    assert result.renewed is True


def test_deja_paid_pas_de_renouvellement():
    result = plan(
        make_request(paymentStatus="PAID", updatedBy="super@eduquiz.in"),
        previous_status="PAID",
        trigger=RenewalTrigger.STATUS,
    )
    assert result.columns == ["payment_status"]
    assert result.renewed is False


def test_sortie_de_paid_pas_de_renouvellement():
    result = plan(make_request(paymentStatus="UNPAID"), previous_status="PAID", trigger=RenewalTrigger.STATUS)
    assert result.columns == ["payment_status"]


def test_variante_statut_montant_sans_effet_de_bord():
    result = plan(make_request(amount=499), trigger=RenewalTrigger.STATUS)
    assert result.columns == ["amount"]


# --- Configuration ---

def test_trigger_depuis_configuration():
    assert RenewalTrigger.from_setting("Status ") is RenewalTrigger.STATUS
    assert RenewalTrigger.from_setting("amount") is RenewalTrigger.AMOUNT


def test_trigger_invalide():
    with pytest.raises(ValueError):
        RenewalTrigger.from_setting("monthly")
