import pytest

from app.config import get_settings
from app.services.cliente_service import ClienteService
from app.services.errors import ConfigurationError


class _UnusedSession:
    def request(self, *args, **kwargs):
        raise AssertionError("não deveria chamar a API")


def test_missing_base_url_fails_on_first_call(monkeypatch):
    monkeypatch.delenv("API_BASE_URL", raising=False)
    get_settings.cache_clear()

    # construir o serviço não exige configuração
    service = ClienteService(session=_UnusedSession())

    with pytest.raises(ConfigurationError):
        service.get_all()


def test_base_url_from_environment(monkeypatch):
    monkeypatch.setenv("API_BASE_URL", "http://localhost:5000/api/")
    get_settings.cache_clear()

    assert ClienteService(session=_UnusedSession()).resource_url == "http://localhost:5000/api/clientes"


def test_settings_defaults(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    get_settings.cache_clear()

    settings = get_settings()

    assert settings.LOG_LEVEL == "INFO"
    assert settings.REQUEST_TIMEOUT_SECONDS is None
