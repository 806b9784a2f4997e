"""
Cliente HTTP da API de clientes.

Centraliza as chamadas a /clientes: limpa os dados antes de enviar (CPF, CEP,
celular, campos numéricos), normaliza as respostas (datas sem hora, endereço e
contato aninhados) e decide qual busca usar a partir de um ClienteFilter, já
que a listagem geral da API não aceita filtros.
"""
import json
import logging
import math
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

import requests

from app.config import get_settings
from app.models.cliente import (
    ClienteFilter,
    ClienteRequestDto,
    ClienteResponseDto,
    ContatoResponseDto,
    EnderecoResponseDto,
    RawClienteResponse,
)
from app.models.veiculo import VeiculoResponseDto
from app.services.errors import (
    ApiResponseError,
    AssociacaoNaoEncontradaError,
    ClienteNaoEncontradoError,
    ClienteServiceError,
    ConfigurationError,
    ValidacaoRemotaError,
)

logger = logging.getLogger(__name__)

CPF_LENGTH = 11

_NON_DIGITS = re.compile(r"\D")

# Mesma gramática do Number() do JavaScript: decimal com expoente opcional,
# ou inteiro hexadecimal/octal/binário sem sinal. Sem "_" entre os dígitos.
_DECIMAL = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
_PREFIXED = re.compile(r"0(?:[xX](?P<hex>[0-9a-fA-F]+)|[oO](?P<oct>[0-7]+)|[bB](?P<bin>[01]+))", re.ASCII)
_PREFIX_BASES = {"hex": 16, "oct": 8, "bin": 2}

Number = Union[int, float]


def clean_numeric_string(value: Any) -> Optional[str]:
    """Remove tudo que não for dígito (CPF, CEP, celular). Valores vazios viram None."""
    if not value:
        return None
    return _NON_DIGITS.sub("", str(value))


def _parse_number(text: str) -> Optional[Number]:
    if _DECIMAL.fullmatch(text):
        return float(text)
    prefixed = _PREFIXED.fullmatch(text)
    if prefixed:
        base_name = prefixed.lastgroup
        return int(prefixed.group(base_name), _PREFIX_BASES[base_name])
    return None


def to_number_or_zero(value: Any) -> Number:
    """
    Converte para número; vazio, None ou texto não numérico viram 0.

    Textos seguem as regras do Number() do JavaScript: "1e3" e "0x1A" são
    números, "1_000", "nan" e "inf" não são.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        number = _parse_number(text)
        if number is None:
            return 0
        if isinstance(number, int):
            return number
    else:
        return 0

    if not math.isfinite(number):
        return 0
    return int(number) if number.is_integer() else number


def _date_only(value: Optional[str]) -> str:
    return value.split("T")[0] if value else ""


def format_cliente_response(
    cliente_data: Union[RawClienteResponse, Mapping[str, Any]],
) -> ClienteResponseDto:
    """
    Converte a resposta crua da API no formato usado pelo front.

    As datas perdem a parte de hora. Endereço e contato só são montados se
    vierem na resposta (o backend pode não incluí-los); caso contrário ficam None.
    """
    if isinstance(cliente_data, RawClienteResponse):
        raw = cliente_data
    else:
        raw = RawClienteResponse.model_validate(cliente_data)

    endereco = None
    if raw.endereco is not None:
        endereco = EnderecoResponseDto(**raw.endereco.model_dump())

    contato = None
    if raw.contato is not None:
        contato = ContatoResponseDto(**raw.contato.model_dump())

    return ClienteResponseDto(
        id_cliente=raw.id_cliente,
        data_cadastro=_date_only(raw.data_cadastro),
        sexo=raw.sexo,
        nome=raw.nome,
        sobrenome=raw.sobrenome,
        data_nascimento=_date_only(raw.data_nascimento),
        # o CPF já vem limpo do backend
        cpf=raw.cpf,
        profissao=raw.profissao,
        estado_civil=raw.estado_civil,
        tb_endereco_id_endereco=raw.tb_endereco_id_endereco,
        tb_contato_id_contato=raw.tb_contato_id_contato,
        endereco_response_dto=endereco,
        contato_response_dto=contato,
    )


def _set_cleaned(data: Dict[str, Any], key: str) -> None:
    # vazio/None sai do corpo; texto sem dígitos vai como ""
    if key not in data:
        return
    cleaned = clean_numeric_string(data[key])
    if cleaned is None:
        data.pop(key)
    else:
        data[key] = cleaned


def shape_cliente_payload(
    cliente_data: Union[ClienteRequestDto, Mapping[str, Any]],
) -> Dict[str, Any]:
    """
    Prepara o corpo de criação/alteração de um cliente.

    Aceita um ClienteRequestDto ou um dicionário já com os nomes da API
    (camelCase), como o que vem de um formulário.
    """
    if isinstance(cliente_data, ClienteRequestDto):
        payload = cliente_data.to_json_dict()
    else:
        payload = dict(cliente_data)

    _set_cleaned(payload, "cpf")

    if payload.get("contatoRequestDto") is not None:
        contato = dict(payload["contatoRequestDto"])
        _set_cleaned(contato, "celular")
        contato["ddd"] = to_number_or_zero(contato.get("ddd"))
        contato["ddi"] = to_number_or_zero(contato.get("ddi"))
        payload["contatoRequestDto"] = contato

    if payload.get("enderecoRequestDto") is not None:
        endereco = dict(payload["enderecoRequestDto"])
        _set_cleaned(endereco, "cep")
        endereco["numero"] = to_number_or_zero(endereco.get("numero"))
        payload["enderecoRequestDto"] = endereco

    return payload


def _as_filter(filters: Union[ClienteFilter, Mapping[str, Any], None]) -> Optional[ClienteFilter]:
    if filters is None or isinstance(filters, ClienteFilter):
        return filters
    return ClienteFilter.model_validate(filters)


class ClienteService:
    """
    Operações sobre o recurso de clientes da API.

    Cada método faz uma única chamada (sem retentativas nem cache). O único
    estado guardado é a configuração: URL base, sessão HTTP e timeout.

    A requests.Session não é garantidamente thread-safe. Para chamadas em
    paralelo, crie um ClienteService por thread; sem ``session`` explícita,
    cada instância abre a sua própria sessão.
    """

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        self._base_url = base_url
        self.session = session if session is not None else requests.Session()
        self.timeout_seconds = timeout_seconds

    @property
    def resource_url(self) -> str:
        base_url = self._base_url or get_settings().API_BASE_URL
        if not base_url:
            raise ConfigurationError(
                "API_BASE_URL não está configurada. "
                "Defina a variável de ambiente (ou o .env) antes de usar o ClienteService."
            )
        return f"{base_url.rstrip('/')}/clientes"

    # --- LISTAGENS / FILTROS ---

    def get_all(
        self, filters: Union[ClienteFilter, Mapping[str, Any], None] = None
    ) -> List[ClienteResponseDto]:
        """
        Lista clientes. A API não filtra a listagem geral, então:
        CPF válido sem nome -> busca por CPF; nome sem CPF -> busca por nome;
        qualquer outra combinação -> lista todos (demais campos são ignorados).
        """
        filtro = _as_filter(filters)
        if filtro is not None:
            cpf_limpo = clean_numeric_string(filtro.cpf)
            if filtro.cpf and cpf_limpo and len(cpf_limpo) == CPF_LENGTH and not filtro.nome:
                cliente = self.get_by_cpf(filtro.cpf)
                return [cliente] if cliente is not None else []
            if filtro.nome and not filtro.cpf:
                return self.search_by_name(filtro.nome)

        return self._list_all()

    def listar_paginado_filtrado(
        self, filters: Union[ClienteFilter, Mapping[str, Any], None] = None
    ) -> List[ClienteResponseDto]:
        """
        Igual a get_all, exceto que o CPF tem prioridade sobre o nome e um CPF
        inválido devolve lista vazia em vez de listar todos.
        """
        filtro = _as_filter(filters)

        if filtro is not None and filtro.cpf:
            cpf_limpo = clean_numeric_string(filtro.cpf)
            if cpf_limpo and len(cpf_limpo) == CPF_LENGTH:
                cliente = self.get_by_cpf(cpf_limpo)
                return [cliente] if cliente is not None else []
            logger.warning("CPF fornecido para listar_paginado_filtrado é inválido: %s", filtro.cpf)
            return []

        if filtro is not None and filtro.nome:
            return self.search_by_name(filtro.nome)

        logger.info("Nenhum filtro de CPF ou nome válido fornecido, buscando todos os clientes.")
        return self._list_all()

    def _list_all(self) -> List[ClienteResponseDto]:
        _, payload = self._request("GET")
        return [format_cliente_response(item) for item in payload or []]

    # --- CRUD ---

    def get_by_id(self, cliente_id: int) -> ClienteResponseDto:
        _, payload = self._request("GET", f"/{cliente_id}")
        return format_cliente_response(payload)

    def create(self, cliente_data: Union[ClienteRequestDto, Mapping[str, Any]]) -> ClienteResponseDto:
        _, payload = self._request("POST", json_body=shape_cliente_payload(cliente_data))
        return format_cliente_response(payload)

    def update(
        self, cliente_id: int, cliente_data: Union[ClienteRequestDto, Mapping[str, Any]]
    ) -> None:
        # a API responde 204, sem corpo
        self._request("PUT", f"/{cliente_id}", json_body=shape_cliente_payload(cliente_data))

    def delete(self, cliente_id: int) -> None:
        self._request("DELETE", f"/{cliente_id}")

    def get_by_cpf(self, cpf: Optional[str]) -> Optional[ClienteResponseDto]:
        cpf_limpo = clean_numeric_string(cpf)
        if not cpf_limpo or len(cpf_limpo) != CPF_LENGTH:
            logger.warning("Tentativa de buscar CPF inválido: %s", cpf)
            return None

        try:
            _, payload = self._request("GET", f"/by-cpf/{cpf_limpo}")
        except ApiResponseError as exc:
            if exc.status_code == 404:
                return None
            logger.error("Erro ao buscar cliente por CPF %s: %s", cpf_limpo, exc)
            raise
        except requests.RequestException as exc:
            logger.error("Erro ao buscar cliente por CPF %s: %s", cpf_limpo, exc)
            raise

        return format_cliente_response(payload) if payload else None

    def search_by_name(self, nome: Optional[str]) -> List[ClienteResponseDto]:
        if not nome or not nome.strip():
            return []

        try:
            _, payload = self._request("GET", "/search-by-name", params={"nome": nome})
        except (ApiResponseError, requests.RequestException) as exc:
            logger.error('Erro ao buscar cliente por nome "%s": %s', nome, exc)
            raise

        return [format_cliente_response(item) for item in payload or []]

    # --- ASSOCIAÇÕES CLIENTE <-> VEÍCULO ---

    def get_veiculos_by_cliente_id(self, cliente_id: int) -> List[VeiculoResponseDto]:
        """
        Veículos associados ao cliente. Cliente sem veículos (204) -> [];
        cliente inexistente (404) -> ClienteNaoEncontradoError.
        """
        try:
            status_code, payload = self._request("GET", f"/{cliente_id}/veiculos")
        except ApiResponseError as exc:
            logger.error("Erro ao buscar veículos para o cliente ID %s: %s", cliente_id, exc)
            if exc.status_code == 404:
                raise ClienteNaoEncontradoError(
                    f"Cliente com ID {cliente_id} não encontrado."
                ) from exc
            raise
        except requests.RequestException as exc:
            logger.error("Erro ao buscar veículos para o cliente ID %s: %s", cliente_id, exc)
            raise

        if status_code == 204 or not payload:
            return []
        return [VeiculoResponseDto.model_validate(item) for item in payload]

    def associate_veiculos_with_cliente(self, cliente_id: int, veiculo_ids: Iterable[int]) -> Any:
        """Associa os veículos e devolve as associações (criadas ou já existentes) como vieram da API."""
        try:
            _, payload = self._request(
                "POST", f"/{cliente_id}/veiculos", json_body=list(veiculo_ids)
            )
        except ApiResponseError as exc:
            logger.error("Erro ao associar veículos ao cliente ID %s: %s", cliente_id, exc)
            data = exc.payload
            if isinstance(data, dict) and data.get("title"):
                complemento = data.get("detail") or json.dumps(data.get("errors"), ensure_ascii=False)
                raise ValidacaoRemotaError(
                    f"Falha ao associar veículos: {data['title']} - {complemento}",
                    payload=data,
                ) from exc
            raise
        except requests.RequestException as exc:
            logger.error("Erro ao associar veículos ao cliente ID %s: %s", cliente_id, exc)
            raise

        return payload

    def dissociate_veiculo_from_cliente(self, cliente_id: int, veiculo_id: int) -> None:
        try:
            self._request("DELETE", f"/{cliente_id}/veiculos/{veiculo_id}")
        except ApiResponseError as exc:
            logger.error(
                "Erro ao desassociar veículo ID %s do cliente ID %s: %s", veiculo_id, cliente_id, exc
            )
            if exc.status_code == 404:
                raise AssociacaoNaoEncontradaError(
                    f"Associação entre Cliente ID {cliente_id} e Veículo ID {veiculo_id} não encontrada."
                ) from exc
            raise
        except requests.RequestException as exc:
            logger.error(
                "Erro ao desassociar veículo ID %s do cliente ID %s: %s", veiculo_id, cliente_id, exc
            )
            raise

    # --- TRANSPORTE ---

    def _timeout(self) -> Optional[float]:
        if self.timeout_seconds is not None:
            return self.timeout_seconds
        return get_settings().REQUEST_TIMEOUT_SECONDS

    def _request(
        self,
        method: str,
        path: str = "",
        *,
        params: Optional[Dict[str, Any]] = None,
        json_body: Any = None,
    ) -> Tuple[int, Any]:
        """Faz a chamada e devolve (status, corpo JSON ou None). Status >= 400 vira ApiResponseError."""
        url = f"{self.resource_url}{path}"
        kwargs: Dict[str, Any] = {"params": params, "timeout": self._timeout()}
        if json_body is not None:
            kwargs["json"] = json_body

        response = self.session.request(method, url, **kwargs)

        payload = None
        if response.status_code != 204 and response.content:
            try:
                payload = response.json()
            except ValueError as exc:
                if response.status_code < 400:
                    raise ClienteServiceError(f"A API não devolveu JSON válido para {url}") from exc
                payload = response.text

        if response.status_code >= 400:
            raise ApiResponseError(response.status_code, url, payload)
        return response.status_code, payload
