from __future__ import annotations

from dataclasses import replace

import pytest
from fastapi.testclient import TestClient

import salesdesk.services.lead_service as lead_service_module
from salesdesk.core.config import get_config
from salesdesk.main import app

PREFIX = get_config().API_PREFIX


@pytest.fixture
def client(session_factory):
    return TestClient(app)


def _payload(**overrides):
    data = {
        "name": "Maria Santos",
        "company_name": "Tech Solutions",
        "email": "maria@tech.com",
        "phone": "(11) 99999-0000",
        "value": "15000",
    }
    data.update(overrides)
    return data


def test_requires_bearer_token(client):
    assert client.get(f"{PREFIX}/leads").status_code == 401
    assert client.get(f"{PREFIX}/leads", headers={"Authorization": "Token abc"}).status_code == 401


def test_read_only_role_cannot_write(client, auth_header):
    response = client.post(f"{PREFIX}/leads", json=_payload(), headers=auth_header(role="user"))
    assert response.status_code == 403


def test_create_advance_to_c7(client, auth_header):
    headers = auth_header(role="sales")
    created = client.post(f"{PREFIX}/leads", json=_payload(), headers=headers)
    assert created.status_code == 201
    lead = created.json()
    assert lead["stage"] == "prospeccao"
    assert lead["value"] == 15000
    assert lead["staleness"] == "normal"

    for _ in range(4):
        response = client.post(f"{PREFIX}/leads/{lead['id']}/advance", headers=headers)
        assert response.status_code == 200

    final = response.json()
    assert final["stage"] == "c7"
    assert final["status"] == "fechado"
    assert final["days_in_stage"] == 0

    history = client.get(f"{PREFIX}/leads/{lead['id']}/history", headers=headers).json()
    assert [row["to_stage"] for row in history] == ["diagnostico", "negociacao", "fechamento", "c7"]


def test_validation_errors_are_422(client, auth_header):
    headers = auth_header(role="sales")
    assert client.post(f"{PREFIX}/leads", json=_payload(value=-10), headers=headers).status_code == 422
    missing = _payload()
    del missing["phone"]
    assert client.post(f"{PREFIX}/leads", json=missing, headers=headers).status_code == 422
    assert client.post(f"{PREFIX}/leads", json=_payload(stage="won"), headers=headers).status_code == 422


def test_search_and_board(client, auth_header):
    headers = auth_header(role="manager")
    client.post(f"{PREFIX}/leads", json=_payload(stage="negociacao", value=15000), headers=headers)
    client.post(
        f"{PREFIX}/leads",
        json=_payload(name="Rui", email="rui@x.com", company_name="Rui ME", stage="negociacao", value=25000),
        headers=headers,
    )

    found = client.get(f"{PREFIX}/leads", params={"search": "maria"}, headers=headers).json()
    assert [lead["name"] for lead in found] == ["Maria Santos"]
    assert len(client.get(f"{PREFIX}/leads", params={"stage": "diagnostico"}, headers=headers).json()) == 0

    board = client.get(f"{PREFIX}/leads/board", headers=headers).json()
    negotiation = next(column for column in board if column["stage"] == "negociacao")
    assert negotiation["count"] == 2
    assert negotiation["total_value"] == 40000
    assert negotiation["over_wip_limit"] is False

    funnel = client.get(f"{PREFIX}/leads/funnel", headers=headers).json()
    assert funnel[0]["count"] == 2
    assert funnel[0]["percentage"] == 100.0


def test_move_rejected_with_409_when_regression_disabled(client, auth_header, monkeypatch):
    headers = auth_header(role="sales")
    lead = client.post(f"{PREFIX}/leads", json=_payload(stage="fechamento"), headers=headers).json()
    strict = replace(get_config(), PIPELINE_ALLOW_REGRESSION=False)
    monkeypatch.setattr(lead_service_module, "get_config", lambda: strict)

    response = client.post(f"{PREFIX}/leads/{lead['id']}/move", json={"stage": "prospeccao"}, headers=headers)

    assert response.status_code == 409
    current = client.get(f"{PREFIX}/leads/{lead['id']}", headers=headers).json()
    assert current["stage"] == "fechamento"


def test_update_and_delete(client, auth_header):
    headers = auth_header(role="manager")
    lead = client.post(f"{PREFIX}/leads", json=_payload(), headers=headers).json()

    updated = client.patch(f"{PREFIX}/leads/{lead['id']}", json={"notes": "call back", "value": "2000,50"}, headers=headers)
    assert updated.status_code == 200
    assert updated.json()["notes"] == "call back"
    assert updated.json()["value"] == 2000.5

    assert client.delete(f"{PREFIX}/leads/{lead['id']}", headers=headers).status_code == 204
    assert client.get(f"{PREFIX}/leads/{lead['id']}", headers=headers).status_code == 404
    assert client.post(f"{PREFIX}/leads/{lead['id']}/advance", headers=headers).status_code == 404
