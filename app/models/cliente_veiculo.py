from pydantic import ConfigDict, Field

from app.models.common import CamelModel


class ClienteVeiculoResponseDto(CamelModel):
    """Par (cliente, veículo) de uma associação já gravada."""
    model_config = ConfigDict(from_attributes=True)

    tb_cliente_id_cliente: int = Field(..., description="ID do Cliente (parte da chave composta).")
    tb_veiculo_id_veiculo: int = Field(..., description="ID do Veículo (parte da chave composta).")
