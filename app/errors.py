"""
Respostas de erro estruturadas ("problem details") da API.

Erros de validação e regras de negócio são devolvidos como
{"title", "status", "detail", "errors"}, formato que o ClienteService
usa para montar mensagens legíveis.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

VALIDATION_TITLE = "Um ou mais erros de validação ocorreram."


class ProblemDetailsError(Exception):
    def __init__(
        self,
        status_code: int,
        title: str,
        detail: Optional[str] = None,
        errors: Optional[Dict[str, List[str]]] = None,
    ):
        super().__init__(title)
        self.status_code = status_code
        self.title = title
        self.detail = detail
        self.errors = errors

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"title": self.title, "status": self.status_code}
        if self.detail is not None:
            body["detail"] = self.detail
        if self.errors is not None:
            body["errors"] = self.errors
        return body


async def problem_details_handler(request: Request, exc: ProblemDetailsError) -> JSONResponse:
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.title)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        # ignora o prefixo "body"/"query"/"path" na chave do campo
        location = [str(part) for part in error.get("loc", ())[1:]]
        field = ".".join(location) or "request"
        errors.setdefault(field, []).append(error.get("msg", ""))

    problem = ProblemDetailsError(400, VALIDATION_TITLE, errors=errors)
    return await problem_details_handler(request, problem)
