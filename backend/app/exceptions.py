"""
Erreurs métier de l'API.
Chaque classe porte le code HTTP vers lequel main.py la traduit.
"""

from typing import Optional


class AppError(Exception):
    status_code = 500
    default_detail = "Une erreur interne est survenue."

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class AuthenticationError(AppError):
    """Jeton absent, mal formé ou refusé par Firebase."""
    status_code = 401
    default_detail = "Unauthorized"


class AuthorizationError(AppError):
    """Rôle insuffisant pour le type de mise à jour demandé."""
    status_code = 403
    default_detail = "Forbidden"


class ValidationError(AppError):
    status_code = 400
    default_detail = "Requête invalide."


class NotFoundError(AppError):
    status_code = 404
    default_detail = "Ressource introuvable."


class InfrastructureError(AppError):
    """Échec de connexion, de lecture, d'exécution ou de commit côté BDD."""
    status_code = 500
