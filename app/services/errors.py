from typing import Any, Optional


class ClienteServiceError(RuntimeError):
    """Base dos erros levantados pelo ClienteService."""


class ConfigurationError(ClienteServiceError):
    """API_BASE_URL não foi configurada."""


class ApiResponseError(ClienteServiceError):
    """A API respondeu com um status de erro que o serviço não trata."""

    def __init__(self, status_code: int, url: str, payload: Optional[Any] = None):
        super().__init__(f"API respondeu {status_code} para {url}")
        self.status_code = status_code
        self.url = url
        self.payload = payload


class ClienteNaoEncontradoError(ClienteServiceError):
    pass


class AssociacaoNaoEncontradaError(ClienteServiceError):
    pass


class ValidacaoRemotaError(ClienteServiceError):
    """Erro estruturado (title/detail/errors) devolvido pela API."""

    def __init__(self, message: str, payload: Optional[Any] = None):
        super().__init__(message)
        self.payload = payload
