from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.common import CamelModel

# ----------------------------------------------------
# 1. FILTRO DE CLIENTES
# Usado apenas como parâmetro de chamada (não é persistido).
# ----------------------------------------------------
class ClienteFilter(CamelModel):
    """
    Filtro de listagem de clientes.
    Campos extras (ex: dataCadastro, estadoCivil) são aceitos, mas a API
    não os suporta e eles são ignorados.
    """
    model_config = ConfigDict(extra="allow")

    cpf: Optional[str] = Field(None, description="CPF, com ou sem máscara.")
    nome: Optional[str] = Field(None, description="Nome (ou parte dele).")


# ----------------------------------------------------
# 2. DTOs DE ENTRADA (criação / alteração)
# ----------------------------------------------------
class EnderecoRequestDto(CamelModel):
    cep: Optional[str] = Field(None, pattern=r"^\d{8}$", description="CEP, apenas dígitos.")
    logradouro: Optional[str] = None
    numero: int = Field(0, ge=0)
    bairro: Optional[str] = None
    cidade: Optional[str] = None
    estado: Optional[str] = None
    pais: Optional[str] = None
    complemento: Optional[str] = None
    observacao: Optional[str] = None


class ContatoRequestDto(CamelModel):
    email: Optional[str] = None
    ddd: int = Field(0, ge=0)
    ddi: int = Field(0, ge=0)
    telefone1: Optional[str] = None
    telefone2: Optional[str] = None
    telefone3: Optional[str] = None
    celular: Optional[str] = Field(None, pattern=r"^\d{8,15}$")
    outro: Optional[str] = None
    observacao: Optional[str] = None


class ClienteRequestDto(CamelModel):
    data_cadastro: Optional[datetime] = None
    sexo: Optional[str] = Field(None, max_length=2)
    nome: str = Field(..., min_length=1, max_length=100)
    sobrenome: Optional[str] = Field(None, max_length=100)
    data_nascimento: Optional[date] = None
    cpf: str = Field(..., pattern=r"^\d{11}$", description="CPF com 11 dígitos, sem máscara.")
    profissao: Optional[str] = None
    estado_civil: Optional[str] = None
    endereco_request_dto: Optional[EnderecoRequestDto] = None
    contato_request_dto: Optional[ContatoRequestDto] = None


# ----------------------------------------------------
# 3. RESPOSTA "CRUA" DA API
# Formato em que a API devolve o cliente, antes da normalização:
# datas com hora (ISO-8601) e objetos 'endereco' / 'contato' aninhados,
# que podem vir nulos quando o backend não os inclui.
# Os demais campos não são convertidos: o valor recebido é repassado como veio.
# ----------------------------------------------------
class RawEnderecoResponse(CamelModel):
    model_config = ConfigDict(extra="ignore")

    id_endereco: Optional[Any] = None
    cep: Optional[Any] = None
    logradouro: Optional[Any] = None
    numero: Optional[Any] = None
    bairro: Optional[Any] = None
    cidade: Optional[Any] = None
    estado: Optional[Any] = None
    pais: Optional[Any] = None
    complemento: Optional[Any] = None
    observacao: Optional[Any] = None


class RawContatoResponse(CamelModel):
    model_config = ConfigDict(extra="ignore")

    id_contato: Optional[Any] = None
    email: Optional[Any] = None
    ddd: Optional[Any] = None
    ddi: Optional[Any] = None
    telefone1: Optional[Any] = None
    telefone2: Optional[Any] = None
    telefone3: Optional[Any] = None
    celular: Optional[Any] = None
    outro: Optional[Any] = None
    observacao: Optional[Any] = None


class RawClienteResponse(CamelModel):
    model_config = ConfigDict(extra="ignore")

    id_cliente: Optional[Any] = None
    data_cadastro: Optional[str] = None
    sexo: Optional[Any] = None
    nome: Optional[Any] = None
    sobrenome: Optional[Any] = None
    data_nascimento: Optional[str] = None
    cpf: Optional[Any] = None
    profissao: Optional[Any] = None
    estado_civil: Optional[Any] = None
    tb_endereco_id_endereco: Optional[Any] = None
    tb_contato_id_contato: Optional[Any] = None
    endereco: Optional[RawEnderecoResponse] = None
    contato: Optional[RawContatoResponse] = None

    @field_validator("endereco", "contato", mode="before")
    @classmethod
    def falsy_as_absent(cls, value: Any) -> Any:
        # null, "", 0, false -> ausente; um objeto (mesmo vazio) é mantido
        if isinstance(value, (dict, BaseModel)):
            return value
        if not value:
            return None
        # outro valor "verdadeiro" conta como presente, mas sem nenhum campo
        return {}


# ----------------------------------------------------
# 4. RESPOSTA NORMALIZADA (formato usado pelo front)
# ----------------------------------------------------
class EnderecoResponseDto(CamelModel):
    id_endereco: Optional[Any] = None
    cep: Optional[Any] = None
    logradouro: Optional[Any] = None
    numero: Optional[Any] = None
    bairro: Optional[Any] = None
    cidade: Optional[Any] = None
    estado: Optional[Any] = None
    pais: Optional[Any] = None
    complemento: Optional[Any] = None
    observacao: Optional[Any] = None


class ContatoResponseDto(CamelModel):
    id_contato: Optional[Any] = None
    email: Optional[Any] = None
    ddd: Optional[Any] = None
    ddi: Optional[Any] = None
    telefone1: Optional[Any] = None
    telefone2: Optional[Any] = None
    telefone3: Optional[Any] = None
    celular: Optional[Any] = None
    outro: Optional[Any] = None
    observacao: Optional[Any] = None


class ClienteResponseDto(CamelModel):
    id_cliente: Optional[Any] = None
    data_cadastro: str = Field("", description="Data de cadastro (YYYY-MM-DD) ou vazio.")
    sexo: Optional[Any] = None
    nome: Optional[Any] = None
    sobrenome: Optional[Any] = None
    data_nascimento: str = Field("", description="Data de nascimento (YYYY-MM-DD) ou vazio.")
    cpf: Optional[Any] = None
    profissao: Optional[Any] = None
    estado_civil: Optional[Any] = None
    tb_endereco_id_endereco: Optional[Any] = None
    tb_contato_id_contato: Optional[Any] = None
    endereco_response_dto: Optional[EnderecoResponseDto] = None
    contato_response_dto: Optional[ContatoResponseDto] = None
