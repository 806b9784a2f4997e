from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base dos DTOs trocados com a API.
    Os atributos ficam em snake_case no Python e em camelCase no JSON
    (ex: id_cliente <-> idCliente).
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict:
        """Serializa com os nomes da API, omitindo campos ausentes."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
