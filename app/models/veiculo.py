from typing import Optional

from pydantic import ConfigDict, Field

from app.models.common import CamelModel


class VeiculoRequestDto(CamelModel):
    placa: str = Field(..., min_length=1, max_length=10, description="Placa do veículo.")
    renavam: Optional[str] = None
    chassi: Optional[str] = None
    fabricante: Optional[str] = None
    modelo: str = Field(..., min_length=1)
    motor: Optional[str] = None
    ano: Optional[int] = Field(None, ge=1900)
    combustivel: Optional[str] = None


class VeiculoResponseDto(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id_veiculo: int
    placa: str
    renavam: Optional[str] = None
    chassi: Optional[str] = None
    fabricante: Optional[str] = None
    modelo: Optional[str] = None
    motor: Optional[str] = None
    ano: Optional[int] = None
    combustivel: Optional[str] = None
