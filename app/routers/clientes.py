import logging
import re
from datetime import datetime, time
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload
from starlette import status
from starlette.responses import Response

# --- IMPORTAÇÕES DO BANCO DE DADOS (SQLAlchemy) ---
from app.database import get_db
# Importa os MODELOS DAS TABELAS (para query) e não os Pydantic
from app.database_models import Cliente, ClienteVeiculo, Contato, Endereco, Veiculo
# --------------------------------------------------

# --- IMPORTAÇÕES DE MODELOS (PYDANTIC) ---
from app.errors import ProblemDetailsError
from app.models.cliente import (
    ClienteRequestDto,
    RawClienteResponse,
    RawContatoResponse,
    RawEnderecoResponse,
)
from app.models.cliente_veiculo import ClienteVeiculoResponseDto
from app.models.veiculo import VeiculoResponseDto

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clientes", tags=["clientes"])


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _cliente_payload(cliente: Cliente) -> dict:
    """Serializa o cliente no formato "cru" da API (datas com hora, endereco/contato aninhados)."""
    endereco = None
    if cliente.endereco is not None:
        endereco = RawEnderecoResponse.model_validate(cliente.endereco, from_attributes=True)
    contato = None
    if cliente.contato is not None:
        contato = RawContatoResponse.model_validate(cliente.contato, from_attributes=True)

    raw = RawClienteResponse(
        id_cliente=cliente.id_cliente,
        data_cadastro=_iso(cliente.data_cadastro),
        sexo=cliente.sexo,
        nome=cliente.nome,
        sobrenome=cliente.sobrenome,
        data_nascimento=_iso(cliente.data_nascimento),
        cpf=cliente.cpf,
        profissao=cliente.profissao,
        estado_civil=cliente.estado_civil,
        tb_endereco_id_endereco=cliente.tb_endereco_id_endereco,
        tb_contato_id_contato=cliente.tb_contato_id_contato,
        endereco=endereco,
        contato=contato,
    )
    return raw.model_dump(by_alias=True, mode="json")


def _get_cliente_or_404(db: Session, cliente_id: int) -> Cliente:
    cliente = db.query(Cliente).filter(Cliente.id_cliente == cliente_id).first()
    if not cliente:
        raise HTTPException(status_code=404, detail="Cliente não encontrado")
    return cliente


def _check_cpf_disponivel(db: Session, cpf: str, cliente_id: Optional[int] = None):
    existing = db.query(Cliente).filter(Cliente.cpf == cpf).first()
    if existing and existing.id_cliente != cliente_id:
        raise ProblemDetailsError(
            status.HTTP_409_CONFLICT,
            "CPF já cadastrado",
            detail=f"Já existe um cliente com o CPF {cpf}.",
        )


def _apply_dados(cliente: Cliente, dados: ClienteRequestDto):
    """Copia os dados do DTO para o cliente (e para o endereço/contato aninhados)."""
    if dados.data_cadastro is not None:
        cliente.data_cadastro = dados.data_cadastro
    cliente.sexo = dados.sexo
    cliente.nome = dados.nome
    cliente.sobrenome = dados.sobrenome
    cliente.data_nascimento = (
        datetime.combine(dados.data_nascimento, time.min) if dados.data_nascimento else None
    )
    cliente.cpf = dados.cpf
    cliente.profissao = dados.profissao
    cliente.estado_civil = dados.estado_civil

    if dados.endereco_request_dto is not None:
        if cliente.endereco is None:
            cliente.endereco = Endereco()
        for field, value in dados.endereco_request_dto.model_dump().items():
            setattr(cliente.endereco, field, value)

    if dados.contato_request_dto is not None:
        if cliente.contato is None:
            cliente.contato = Contato()
        for field, value in dados.contato_request_dto.model_dump().items():
            setattr(cliente.contato, field, value)


def _commit(db: Session, cpf: str):
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("Erro de integridade ao salvar cliente: %s", e)
        raise ProblemDetailsError(
            status.HTTP_409_CONFLICT,
            "CPF já cadastrado",
            detail=f"Já existe um cliente com o CPF {cpf}.",
        ) from e


# Rota 1: Listar Clientes
@router.get("", name="list_clientes")
def list_clientes(db: Session = Depends(get_db)):
    clientes = (
        db.query(Cliente)
        .options(joinedload(Cliente.endereco), joinedload(Cliente.contato))
        .order_by(Cliente.nome)
        .all()
    )
    return [_cliente_payload(c) for c in clientes]


# Rota 2: Buscar por CPF (aceita CPF com máscara)
@router.get("/by-cpf/{cpf}", name="get_cliente_by_cpf")
def get_cliente_by_cpf(cpf: str, db: Session = Depends(get_db)):
    cpf_limpo = re.sub(r"\D", "", cpf)
    cliente = db.query(Cliente).filter(Cliente.cpf == cpf_limpo).first()
    if not cliente:
        raise HTTPException(status_code=404, detail="Cliente não encontrado")
    return _cliente_payload(cliente)


# Rota 3: Buscar por nome (ou sobrenome), sem diferenciar maiúsculas
@router.get("/search-by-name", name="search_clientes_by_name")
def search_clientes_by_name(nome: str = Query(...), db: Session = Depends(get_db)):
    termo = nome.strip()
    if not termo:
        raise ProblemDetailsError(
            status.HTTP_400_BAD_REQUEST,
            "Requisição inválida",
            detail="O parâmetro 'nome' não pode ser vazio.",
        )
    padrao = f"%{termo}%"
    clientes = (
        db.query(Cliente)
        .filter(or_(Cliente.nome.ilike(padrao), Cliente.sobrenome.ilike(padrao)))
        .order_by(Cliente.nome)
        .all()
    )
    return [_cliente_payload(c) for c in clientes]


# Rota 4: Exibir um Cliente
@router.get("/{cliente_id}", name="get_cliente")
def get_cliente(cliente_id: int, db: Session = Depends(get_db)):
    return _cliente_payload(_get_cliente_or_404(db, cliente_id))


# Rota 5: Cadastrar Cliente
@router.post("", name="create_cliente", status_code=status.HTTP_201_CREATED)
def create_cliente(dados: ClienteRequestDto, db: Session = Depends(get_db)):
    _check_cpf_disponivel(db, dados.cpf)

    novo_cliente = Cliente()
    _apply_dados(novo_cliente, dados)
    db.add(novo_cliente)
    _commit(db, dados.cpf)
    db.refresh(novo_cliente)

    logger.info("Cliente %s cadastrado", novo_cliente.id_cliente)
    return _cliente_payload(novo_cliente)


# Rota 6: Atualizar Cliente (sem corpo na resposta)
@router.put("/{cliente_id}", name="update_cliente", status_code=status.HTTP_204_NO_CONTENT)
def update_cliente(cliente_id: int, dados: ClienteRequestDto, db: Session = Depends(get_db)):
    cliente = _get_cliente_or_404(db, cliente_id)
    _check_cpf_disponivel(db, dados.cpf, cliente_id)

    _apply_dados(cliente, dados)
    _commit(db, dados.cpf)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Rota 7: Deletar Cliente
@router.delete("/{cliente_id}", name="delete_cliente", status_code=status.HTTP_204_NO_CONTENT)
def delete_cliente(cliente_id: int, db: Session = Depends(get_db)):
    cliente = _get_cliente_or_404(db, cliente_id)

    # O 'cascade="all, delete-orphan"' de Cliente.veiculos_associados
    # remove também as associações com veículos.
    db.delete(cliente)
    db.commit()

    logger.info("Cliente %s removido", cliente_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# --- ASSOCIAÇÕES CLIENTE <-> VEÍCULO ---

# Rota 8: Listar veículos do cliente (204 quando não há nenhum)
@router.get("/{cliente_id}/veiculos", name="list_veiculos_do_cliente")
def list_veiculos_do_cliente(cliente_id: int, db: Session = Depends(get_db)):
    cliente = _get_cliente_or_404(db, cliente_id)

    veiculos = [a.veiculo for a in cliente.veiculos_associados]
    if not veiculos:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    veiculos.sort(key=lambda v: v.id_veiculo)
    return [VeiculoResponseDto.model_validate(v).model_dump(by_alias=True) for v in veiculos]


# Rota 9: Associar veículos ao cliente
# Responde 201 se alguma associação foi criada, ou 200 se todas já existiam.
@router.post("/{cliente_id}/veiculos", name="associate_veiculos")
def associate_veiculos(
    cliente_id: int,
    veiculo_ids: List[int] = Body(...),
    db: Session = Depends(get_db),
):
    cliente = _get_cliente_or_404(db, cliente_id)

    ids = list(dict.fromkeys(veiculo_ids))
    if not ids:
        raise ProblemDetailsError(
            status.HTTP_400_BAD_REQUEST,
            "Requisição inválida",
            detail="Informe ao menos um ID de veículo.",
        )

    existentes = {
        row.id_veiculo
        for row in db.query(Veiculo.id_veiculo).filter(Veiculo.id_veiculo.in_(ids)).all()
    }
    faltando = [i for i in ids if i not in existentes]
    if faltando:
        raise ProblemDetailsError(
            status.HTTP_400_BAD_REQUEST,
            "Veículos não encontrados",
            detail="IDs de veículo inexistentes: " + ", ".join(str(i) for i in faltando),
        )

    ja_associados = {a.tb_veiculo_id_veiculo for a in cliente.veiculos_associados}
    novos = [
        ClienteVeiculo(tb_cliente_id_cliente=cliente_id, tb_veiculo_id_veiculo=i)
        for i in ids
        if i not in ja_associados
    ]
    if novos:
        db.add_all(novos)
        db.commit()
        logger.info("Cliente %s associado aos veículos %s", cliente_id, [n.tb_veiculo_id_veiculo for n in novos])

    associacoes = (
        db.query(ClienteVeiculo)
        .filter(
            ClienteVeiculo.tb_cliente_id_cliente == cliente_id,
            ClienteVeiculo.tb_veiculo_id_veiculo.in_(ids),
        )
        .order_by(ClienteVeiculo.tb_veiculo_id_veiculo)
        .all()
    )
    content = [
        ClienteVeiculoResponseDto.model_validate(a).model_dump(by_alias=True) for a in associacoes
    ]
    return JSONResponse(
        status_code=status.HTTP_201_CREATED if novos else status.HTTP_200_OK,
        content=content,
    )


# Rota 10: Desassociar um veículo do cliente
@router.delete(
    "/{cliente_id}/veiculos/{veiculo_id}",
    name="dissociate_veiculo",
    status_code=status.HTTP_204_NO_CONTENT,
)
def dissociate_veiculo(cliente_id: int, veiculo_id: int, db: Session = Depends(get_db)):
    associacao = db.get(ClienteVeiculo, (cliente_id, veiculo_id))
    if not associacao:
        raise HTTPException(status_code=404, detail="Associação não encontrada")

    db.delete(associacao)
    db.commit()

    logger.info("Veículo %s desassociado do cliente %s", veiculo_id, cliente_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
