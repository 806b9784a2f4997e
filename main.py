import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.responses import RedirectResponse
from starlette import status as status_codes

# --- Configuração e logging ---
from app.config import get_settings
from app.logging_config import configure_logging
# ------------------------------

# BANCO DE DADOS
from app.database import engine, Base
from app.database_models import Cliente, ClienteVeiculo, Contato, Endereco, Veiculo  # noqa: F401 (registra as tabelas)
#----------------------------------------------------------
from app.errors import ProblemDetailsError, problem_details_handler, validation_error_handler
from app.routers.clientes import router as clientes_router
from app.routers.veiculos import router as veiculos_router
# ---------------------------------

configure_logging()

# Cria a instância principal do FastAPI
app = FastAPI(title=get_settings().PROJECT_NAME)
Base.metadata.create_all(bind=engine)

# Erros estruturados ("problem details") e erros de validação no mesmo formato
app.add_exception_handler(ProblemDetailsError, problem_details_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)

# Inclui os roteadores (ordem não importa)
app.include_router(clientes_router)
app.include_router(veiculos_router)

# Rota de redirecionamento para a lista de clientes
@app.get("/", include_in_schema=False)
def redirect_to_list():
    return RedirectResponse(
        url=app.url_path_for("list_clientes"),
        status_code=status_codes.HTTP_302_FOUND
    )

@app.get("/status")
def status(request: Request):
    return {
        "status": "ok",
        "host": request.client.host,
        "port": request.url.port or 80,
        "scheme": request.url.scheme,
        "path": request.url.path,
    }

if __name__ == "__main__":
    uvicorn.run(app, host="127.0.0.1", port=8000)
