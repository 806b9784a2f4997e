from app.errors import VALIDATION_TITLE


def _create_cliente(client, dados):
    response = client.post("/clientes", json=dados)
    assert response.status_code == 201, response.text
    return response.json()


def _create_veiculo(client, placa="abc1d23", modelo="Mottu Sport"):
    response = client.post(
        "/veiculos",
        json={"placa": placa, "modelo": modelo, "fabricante": "Mottu", "ano": 2023},
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestClientesCrud:
    def test_create_returns_raw_payload(self, client, novo_cliente):
        body = _create_cliente(client, novo_cliente)

        assert body["idCliente"] is not None
        assert "T" in body["dataCadastro"]
        assert body["dataNascimento"] == "1990-05-10T00:00:00"
        assert body["cpf"] == "12345678900"
        assert body["endereco"]["cep"] == "01310100"
        assert body["endereco"]["numero"] == 1000
        assert body["contato"]["celular"] == "11912345678"
        assert body["tbEnderecoIdEndereco"] == body["endereco"]["idEndereco"]

    def test_create_without_nested_objects(self, client, novo_cliente):
        del novo_cliente["enderecoRequestDto"]
        del novo_cliente["contatoRequestDto"]

        body = _create_cliente(client, novo_cliente)

        assert body["endereco"] is None
        assert body["contato"] is None

    def test_create_duplicate_cpf_conflicts(self, client, novo_cliente):
        _create_cliente(client, novo_cliente)

        response = client.post("/clientes", json={**novo_cliente, "nome": "Outra"})

        assert response.status_code == 409
        assert response.json()["title"] == "CPF já cadastrado"

    def test_create_invalid_payload_returns_problem_details(self, client, novo_cliente):
        novo_cliente["cpf"] = "123.456"
        del novo_cliente["nome"]

        response = client.post("/clientes", json=novo_cliente)

        assert response.status_code == 400
        body = response.json()
        assert body["title"] == VALIDATION_TITLE
        assert set(body["errors"]) >= {"cpf", "nome"}

    def test_list_is_ordered_by_nome(self, client, novo_cliente):
        _create_cliente(client, {**novo_cliente, "nome": "Bruno", "cpf": "11111111111"})
        _create_cliente(client, novo_cliente)

        response = client.get("/clientes")

        assert response.status_code == 200
        assert [c["nome"] for c in response.json()] == ["Ana", "Bruno"]

    def test_get_by_id_and_404(self, client, novo_cliente):
        criado = _create_cliente(client, novo_cliente)

        assert client.get(f"/clientes/{criado['idCliente']}").json()["nome"] == "Ana"
        assert client.get("/clientes/999").status_code == 404

    def test_get_by_cpf_accepts_mask(self, client, novo_cliente):
        _create_cliente(client, novo_cliente)

        response = client.get("/clientes/by-cpf/123.456.789-00")

        assert response.status_code == 200
        assert response.json()["nome"] == "Ana"
        assert client.get("/clientes/by-cpf/99999999999").status_code == 404

    def test_search_by_name_is_case_insensitive(self, client, novo_cliente):
        _create_cliente(client, novo_cliente)
        _create_cliente(client, {**novo_cliente, "nome": "Bruno", "sobrenome": "Lima", "cpf": "11111111111"})

        response = client.get("/clientes/search-by-name", params={"nome": "souz"})

        assert response.status_code == 200
        assert [c["nome"] for c in response.json()] == ["Ana"]

    def test_search_by_blank_name_is_rejected(self, client):
        response = client.get("/clientes/search-by-name", params={"nome": "   "})

        assert response.status_code == 400
        assert response.json()["title"] == "Requisição inválida"

    def test_update_returns_204(self, client, novo_cliente):
        criado = _create_cliente(client, novo_cliente)
        novo_cliente["profissao"] = "Arquiteta"
        novo_cliente["enderecoRequestDto"]["numero"] = 20

        response = client.put(f"/clientes/{criado['idCliente']}", json=novo_cliente)

        assert response.status_code == 204
        assert response.content == b""
        atualizado = client.get(f"/clientes/{criado['idCliente']}").json()
        assert atualizado["profissao"] == "Arquiteta"
        assert atualizado["endereco"]["numero"] == 20
        assert atualizado["endereco"]["idEndereco"] == criado["endereco"]["idEndereco"]

    def test_update_missing_cliente(self, client, novo_cliente):
        assert client.put("/clientes/999", json=novo_cliente).status_code == 404

    def test_delete(self, client, novo_cliente):
        criado = _create_cliente(client, novo_cliente)

        assert client.delete(f"/clientes/{criado['idCliente']}").status_code == 204
        assert client.get(f"/clientes/{criado['idCliente']}").status_code == 404
        assert client.delete(f"/clientes/{criado['idCliente']}").status_code == 404


class TestClienteVeiculos:
    def test_list_veiculos_without_associations_is_204(self, client, novo_cliente):
        criado = _create_cliente(client, novo_cliente)

        response = client.get(f"/clientes/{criado['idCliente']}/veiculos")

        assert response.status_code == 204
        assert response.content == b""

    def test_list_veiculos_of_missing_cliente_is_404(self, client):
        assert client.get("/clientes/999/veiculos").status_code == 404

    def test_associate_creates_then_reports_existing(self, client, novo_cliente):
        cliente_id = _create_cliente(client, novo_cliente)["idCliente"]
        v1 = _create_veiculo(client)["idVeiculo"]
        v2 = _create_veiculo(client, placa="XYZ9K87")["idVeiculo"]

        primeira = client.post(f"/clientes/{cliente_id}/veiculos", json=[v1, v2, v1])
        segunda = client.post(f"/clientes/{cliente_id}/veiculos", json=[v1])

        assert primeira.status_code == 201
        assert primeira.json() == [
            {"tbClienteIdCliente": cliente_id, "tbVeiculoIdVeiculo": v1},
            {"tbClienteIdCliente": cliente_id, "tbVeiculoIdVeiculo": v2},
        ]
        assert segunda.status_code == 200
        assert segunda.json() == [{"tbClienteIdCliente": cliente_id, "tbVeiculoIdVeiculo": v1}]

        veiculos = client.get(f"/clientes/{cliente_id}/veiculos").json()
        assert [v["placa"] for v in veiculos] == ["ABC1D23", "XYZ9K87"]

    def test_associate_missing_veiculo_is_problem_details(self, client, novo_cliente):
        cliente_id = _create_cliente(client, novo_cliente)["idCliente"]

        response = client.post(f"/clientes/{cliente_id}/veiculos", json=[404, 405])

        assert response.status_code == 400
        assert response.json() == {
            "title": "Veículos não encontrados",
            "status": 400,
            "detail": "IDs de veículo inexistentes: 404, 405",
        }

    def test_associate_empty_list_is_rejected(self, client, novo_cliente):
        cliente_id = _create_cliente(client, novo_cliente)["idCliente"]

        response = client.post(f"/clientes/{cliente_id}/veiculos", json=[])

        assert response.status_code == 400
        assert response.json()["detail"] == "Informe ao menos um ID de veículo."

    def test_associate_to_missing_cliente_is_404(self, client):
        veiculo_id = _create_veiculo(client)["idVeiculo"]

        assert client.post("/clientes/999/veiculos", json=[veiculo_id]).status_code == 404

    def test_dissociate(self, client, novo_cliente):
        cliente_id = _create_cliente(client, novo_cliente)["idCliente"]
        veiculo_id = _create_veiculo(client)["idVeiculo"]
        client.post(f"/clientes/{cliente_id}/veiculos", json=[veiculo_id])

        first = client.delete(f"/clientes/{cliente_id}/veiculos/{veiculo_id}")
        second = client.delete(f"/clientes/{cliente_id}/veiculos/{veiculo_id}")

        assert first.status_code == 204
        assert second.status_code == 404
        assert client.get(f"/clientes/{cliente_id}/veiculos").status_code == 204

    def test_deleting_veiculo_drops_association(self, client, novo_cliente):
        cliente_id = _create_cliente(client, novo_cliente)["idCliente"]
        veiculo_id = _create_veiculo(client)["idVeiculo"]
        client.post(f"/clientes/{cliente_id}/veiculos", json=[veiculo_id])

        assert client.delete(f"/veiculos/{veiculo_id}").status_code == 204
        assert client.get(f"/clientes/{cliente_id}/veiculos").status_code == 204


class TestVeiculos:
    def test_create_normalizes_placa_and_rejects_duplicates(self, client):
        criado = _create_veiculo(client, placa=" abc1d23 ")

        assert criado["placa"] == "ABC1D23"
        duplicado = client.post("/veiculos", json={"placa": "ABC1D23", "modelo": "Outro"})
        assert duplicado.status_code == 409

    def test_get_and_list(self, client):
        criado = _create_veiculo(client)

        assert client.get(f"/veiculos/{criado['idVeiculo']}").json()["modelo"] == "Mottu Sport"
        assert len(client.get("/veiculos").json()) == 1
        assert client.get("/veiculos/999").status_code == 404


def test_root_redirects_to_clientes(client):
    response = client.get("/", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == "/clientes"


def test_status(client):
    assert client.get("/status").json()["status"] == "ok"
