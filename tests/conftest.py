# tests/conftest.py
import os
import tempfile

# configure before the app (and its engine) is imported
_tmpdir = tempfile.mkdtemp(prefix="emprende-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_tmpdir}/test.db"
os.environ["ADMIN_PASSWORD"] = "clave-de-prueba"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ENVIRONMENT"] = "test"

import pytest
from fastapi.testclient import TestClient

from emprende.db import Base, engine, SessionLocal
from emprende.main import app
from emprende.storage import get_storage

ADMIN_PASSWORD = "clave-de-prueba"


class FakeStorage:
    def __init__(self):
        self.uploads = {}

    def upload(self, key, data, content_type):
        self.uploads[key] = (data, content_type)
        return f"https://cdn.test/fotos/{key}"


@pytest.fixture(autouse=True)
def fresh_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def storage():
    fake = FakeStorage()
    app.dependency_overrides[get_storage] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_storage, None)


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin(client):
    res = client.post("/api/admin/auth", json={"password": ADMIN_PASSWORD})
    assert res.status_code == 200
    return client


@pytest.fixture
def make_profesional(client):
    def _make(nombre="Ana Pérez", **extra):
        payload = {
            "nombre": nombre,
            "profesion": "Electricista",
            "categoria": "Oficios",
            "whatsapp": "3863 123456",
        }
        payload.update(extra)
        res = client.post("/api/profesionales", json=payload)
        assert res.status_code == 201, res.text
        return res.json()
    return _make


@pytest.fixture
def make_evento(client):
    def _make(titulo="Feria de Emprendedores", **extra):
        payload = {
            "titulo": titulo,
            "categoria": "Feria",
            "fecha": "2030-05-10",
            "lugar": "Plaza principal",
            "organizador": "Municipalidad",
            "whatsapp": "3863111222",
        }
        payload.update(extra)
        res = client.post("/api/eventos", json=payload)
        assert res.status_code == 201, res.text
        return res.json()
    return _make
