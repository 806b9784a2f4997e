import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from starlette import status
from starlette.responses import Response

# --- IMPORTAÇÕES DO BANCO DE DADOS (SQLAlchemy) ---
from app.database import get_db
from app.database_models import Veiculo
# --------------------------------------------------

from app.errors import ProblemDetailsError
from app.models.veiculo import VeiculoRequestDto, VeiculoResponseDto

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/veiculos", tags=["veiculos"])


def _veiculo_payload(veiculo: Veiculo) -> dict:
    return VeiculoResponseDto.model_validate(veiculo).model_dump(by_alias=True)


@router.get("", name="list_veiculos")
def list_veiculos(db: Session = Depends(get_db)):
    veiculos = db.query(Veiculo).order_by(Veiculo.modelo).all()
    return [_veiculo_payload(v) for v in veiculos]


@router.get("/{veiculo_id}", name="get_veiculo")
def get_veiculo(veiculo_id: int, db: Session = Depends(get_db)):
    veiculo = db.query(Veiculo).filter(Veiculo.id_veiculo == veiculo_id).first()
    if not veiculo:
        raise HTTPException(status_code=404, detail="Veículo não encontrado")
    return _veiculo_payload(veiculo)


@router.post("", name="create_veiculo", status_code=status.HTTP_201_CREATED)
def create_veiculo(dados: VeiculoRequestDto, db: Session = Depends(get_db)):
    # Padroniza a placa para a verificação
    placa = dados.placa.upper().strip()

    # --- VERIFICAÇÃO DE DUPLICIDADE ---
    if db.query(Veiculo).filter(Veiculo.placa == placa).first():
        raise ProblemDetailsError(
            status.HTTP_409_CONFLICT,
            "Placa já cadastrada",
            detail=f"A placa '{placa}' já está cadastrada.",
        )

    novo_veiculo = Veiculo(**dados.model_dump(exclude={"placa"}), placa=placa)
    db.add(novo_veiculo)
    db.commit()
    db.refresh(novo_veiculo)

    logger.info("Veículo %s cadastrado (placa %s)", novo_veiculo.id_veiculo, placa)
    return _veiculo_payload(novo_veiculo)


@router.delete("/{veiculo_id}", name="delete_veiculo", status_code=status.HTTP_204_NO_CONTENT)
def delete_veiculo(veiculo_id: int, db: Session = Depends(get_db)):
    veiculo = db.query(Veiculo).filter(Veiculo.id_veiculo == veiculo_id).first()
    if not veiculo:
        raise HTTPException(status_code=404, detail="Veículo não encontrado")

    # As associações com clientes saem junto (cascade em Veiculo.clientes_associados)
    db.delete(veiculo)
    db.commit()

    logger.info("Veículo %s removido", veiculo_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
