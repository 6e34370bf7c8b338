"""
Vérification des jetons Firebase (Authorization: Bearer <id_token>).

Fournit la dépendance FastAPI get_current_principal : l'email vérifié du
demandeur, normalisé en minuscules. Toute erreur de jeton → AuthenticationError (401),
levée avant tout accès à la BDD.
"""

import json
import logging
from dataclasses import dataclass
from typing import Optional

import firebase_admin
from fastapi import Header
from firebase_admin import auth, credentials
from firebase_admin.exceptions import FirebaseError

from app.config import settings
from app.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class Principal:
    email: str


def init_firebase() -> bool:
    """
    Initialise l'application Firebase depuis FIREBASE_SERVICE_ACCOUNT (JSON).
    Retourne False si la variable est vide : l'API démarre mais refuse tous les jetons.
    """
    if not settings.FIREBASE_SERVICE_ACCOUNT:
        logger.warning("FIREBASE_SERVICE_ACCOUNT non défini : aucun jeton ne pourra être vérifié.")
        return False

    try:
        firebase_admin.get_app()
        return True
    except ValueError:
        pass

    service_account = json.loads(settings.FIREBASE_SERVICE_ACCOUNT)
    firebase_admin.initialize_app(credentials.Certificate(service_account))
    logger.info("Firebase initialisé (projet %s).", service_account.get("project_id"))
    return True


def extract_bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise AuthenticationError("En-tête Authorization manquant.")
    if not authorization.startswith(BEARER_PREFIX):
        raise AuthenticationError("Format de l'en-tête Authorization invalide.")
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise AuthenticationError("Jeton vide.")
    return token


def verify_token(id_token: str) -> Principal:
    try:
        claims = auth.verify_id_token(id_token)
    except (ValueError, FirebaseError) as exc:
        logger.warning("Vérification du jeton Firebase échouée : %s", exc)
        raise AuthenticationError("Jeton invalide ou expiré.") from exc

    email = claims.get("email")
    if not email:
        raise AuthenticationError("Le jeton ne contient pas d'email.")
    return Principal(email=email.strip().lower())


def get_current_principal(authorization: Optional[str] = Header(default=None)) -> Principal:
    """Dépendance FastAPI : retourne le demandeur authentifié."""
    principal = verify_token(extract_bearer_token(authorization))
    logger.info("Utilisateur authentifié : %s", principal.email)
    return principal
