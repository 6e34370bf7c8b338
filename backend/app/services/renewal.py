"""
Calcul de la date d'expiration d'abonnement lors d'un renouvellement.

Fonctions pures : aucune lecture BDD ni horloge, la date du jour est un paramètre.
"""

from datetime import date, datetime
from typing import Optional


def _as_date(value):
    if isinstance(value, datetime):
        return value.date()
    return value


def add_one_year(d: date) -> date:
    """Même jour, même mois, l'année suivante. Le 29 février devient le 28 février."""
    try:
        return d.replace(year=d.year + 1)
    except ValueError:
        return d.replace(year=d.year + 1, day=28)


def renew(existing_expiry: Optional[date], today: date) -> date:
    """
    Nouvelle date d'expiration après un paiement.

    - Abonnement encore valide (expire aujourd'hui ou plus tard) → prolongé d'un an
      à partir de l'expiration actuelle : la durée restante n'est pas perdue.
    - Abonnement expiré ou jamais souscrit → aujourd'hui + 1 an.
    """
    existing_expiry = _as_date(existing_expiry)
    today = _as_date(today)
    if existing_expiry is not None and existing_expiry >= today:
        return add_one_year(existing_expiry)
    return add_one_year(today)


def is_subscription_active(expiry: Optional[date], today: date) -> bool:
    expiry = _as_date(expiry)
    return expiry is not None and expiry >= _as_date(today)
