"""
Configuração da aplicação.

As configurações são lidas das variáveis de ambiente (e de um arquivo .env, se existir)
usando pydantic-settings.
"""
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configurações globais da aplicação."""

    PROJECT_NAME: str = "Oficina - Clientes e Veículos"
    LOG_LEVEL: str = "INFO"

    # Banco de dados do backend
    DATABASE_URL: str = "sqlite:///./oficina.db"

    # URL base da API consumida pelo ClienteService (ex: "http://localhost:8000")
    # Obrigatória apenas para o serviço; a ausência só é acusada na primeira chamada.
    API_BASE_URL: Optional[str] = None
    REQUEST_TIMEOUT_SECONDS: Optional[float] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
