from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

from app.config import get_settings

# 1. Engine de Conexão
# A string de conexão vem da configuração (DATABASE_URL)
SQLALCHEMY_DATABASE_URL = get_settings().DATABASE_URL

connect_args = {}
if SQLALCHEMY_DATABASE_URL.startswith("sqlite"):
    # 'check_same_thread' é necessário apenas para SQLite
    connect_args["check_same_thread"] = False

engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)


def enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """O SQLite só verifica chaves estrangeiras (e o ON DELETE CASCADE) com o pragma ligado."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


if engine.dialect.name == "sqlite":
    event.listen(engine, "connect", enable_sqlite_foreign_keys)

# 2. Fábrica de Sessões
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# 3. Base Declarativa
# Nossas classes de modelo herdarão desta
Base = declarative_base()

# --- Função helper para obter a sessão ---
def get_db():
    """Função helper para gerenciar a sessão do banco de dados."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
