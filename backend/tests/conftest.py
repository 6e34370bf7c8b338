"""
Configuration partagée pour tous les tests.
Override les dépendances get_db et get_current_principal pour éviter toute
connexion réelle à PostgreSQL ou à Firebase.
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

from app.database import get_db
from app.main import app
from app.services.firebase_auth import Principal, get_current_principal

PRINCIPAL_EMAIL = "super@eduquiz.in"


@pytest.fixture
def mock_db():
    return MagicMock()


@pytest.fixture
def client(mock_db):
    """Client HTTP de test avec la BDD mockée et un utilisateur déjà authentifié."""
    app.dependency_overrides[get_db] = lambda: mock_db
    app.dependency_overrides[get_current_principal] = lambda: Principal(email=PRINCIPAL_EMAIL)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def anon_client(mock_db):
    """Client HTTP de test sans override de l'authentification (jeton Firebase réel exigé)."""
    app.dependency_overrides[get_db] = lambda: mock_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
