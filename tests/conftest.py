import os

# Banco em memória para a aplicação importada nos testes (antes de importar app/main)
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import get_settings
from app.database import Base, enable_sqlite_foreign_keys, get_db
from main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
event.listen(engine, "connect", enable_sqlite_foreign_keys)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(scope="function")
def test_db():
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(test_db):
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


NOVO_CLIENTE = {
    "nome": "Ana",
    "sobrenome": "Souza",
    "sexo": "F",
    "dataNascimento": "1990-05-10",
    "cpf": "12345678900",
    "profissao": "Engenheira",
    "estadoCivil": "Solteira",
    "enderecoRequestDto": {
        "cep": "01310100",
        "logradouro": "Av. Paulista",
        "numero": 1000,
        "bairro": "Bela Vista",
        "cidade": "São Paulo",
        "estado": "SP",
        "pais": "Brasil",
    },
    "contatoRequestDto": {
        "email": "ana@example.com",
        "ddd": 11,
        "ddi": 55,
        "celular": "11912345678",
    },
}


@pytest.fixture
def novo_cliente():
    return {
        **NOVO_CLIENTE,
        "enderecoRequestDto": dict(NOVO_CLIENTE["enderecoRequestDto"]),
        "contatoRequestDto": dict(NOVO_CLIENTE["contatoRequestDto"]),
    }
