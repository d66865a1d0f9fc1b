from __future__ import annotations

from dataclasses import dataclass

from salesdesk.core.enums import LeadStage
from salesdesk.utils.orm import orm_to_df
from salesdesk.utils.validators import parse_money


@dataclass
class DummyLead:
    id: str
    name: str
    stage: LeadStage


def test_orm_to_df_renames_id_column_and_flattens_enums():
    items = [DummyLead(id="10", name="Acme", stage=LeadStage.NEGOCIACAO)]
    df = orm_to_df(items, id_column_name="lead_id")
    assert "lead_id" in df.columns
    assert "id" not in df.columns
    assert df.iloc[0]["lead_id"] == "10"
    assert df.iloc[0]["stage"] == "negociacao"


def test_orm_to_df_empty_keeps_requested_columns():
    df = orm_to_df([], columns=["id", "stage"])
    assert df.empty
    assert list(df.columns) == ["id", "stage"]


def test_parse_money_edge_cases():
    assert parse_money(None) == 0.0
    assert parse_money("") == 0.0
    assert parse_money("R$ 10") == 0.0
    assert parse_money("2500.4") == 2500.4
    assert parse_money("1 500,5") == 1500.5
    assert parse_money(-3) == -3.0
    assert parse_money(float("nan")) == 0.0
