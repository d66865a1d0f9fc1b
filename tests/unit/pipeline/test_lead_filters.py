from __future__ import annotations

from dataclasses import dataclass
from itertools import permutations

from salesdesk.core.enums import FILTER_ALL, LeadStage, LeadStatus
from salesdesk.pipeline.filters import filter_leads


@dataclass
class Row:
    name: str
    company_name: str
    email: str
    status: LeadStatus
    stage: LeadStage


LEADS = [
    Row("Maria Santos", "Tech Solutions", "maria@tech.com", LeadStatus.NOVO, LeadStage.PROSPECCAO),
    Row("João Silva", "Inova Ltda", "joao@inova.com", LeadStatus.CONTATO, LeadStage.DIAGNOSTICO),
    Row("Pedro Costa", "Costa & Filhos", "pedro@costa.com", LeadStatus.NEGOCIACAO, LeadStage.NEGOCIACAO),
    Row("Lucia Reis", "Tech Partners", "lucia@partners.com", LeadStatus.NEGOCIACAO, LeadStage.NEGOCIACAO),
]


def test_search_matches_name_case_insensitively():
    result = filter_leads(LEADS, search="maria")
    assert [lead.name for lead in result] == ["Maria Santos"]


def test_search_matches_company_and_email():
    assert len(filter_leads(LEADS, search="TECH")) == 2
    assert [lead.name for lead in filter_leads(LEADS, search="inova.com")] == ["João Silva"]


def test_all_sentinel_and_blank_search_keep_everything():
    assert filter_leads(LEADS, search="", status=FILTER_ALL, stage=FILTER_ALL) == LEADS


def test_predicates_combine_with_and():
    result = filter_leads(LEADS, search="tech", status="negociacao", stage=LeadStage.NEGOCIACAO)
    assert [lead.name for lead in result] == ["Lucia Reis"]


def test_filters_commute_and_are_idempotent():
    criteria = [{"search": "tech"}, {"status": "negociacao"}, {"stage": "negociacao"}]
    outcomes = []
    for order in permutations(criteria):
        rows = LEADS
        for step in order:
            rows = filter_leads(rows, **step)
        outcomes.append(rows)

    assert all(outcome == outcomes[0] for outcome in outcomes)
    combined = filter_leads(LEADS, search="tech", status="negociacao", stage="negociacao")
    assert filter_leads(combined, search="tech", status="negociacao", stage="negociacao") == combined
