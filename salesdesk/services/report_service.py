"""Tabular reports built with pandas."""

from __future__ import annotations

import logging

import pandas as pd
from sqlalchemy import select

from salesdesk.core.enums import LeadStage, LeadStatus
from salesdesk.models import Lead, Profile
from salesdesk.services.base_service import BaseService
from salesdesk.utils.orm import orm_to_df

logger = logging.getLogger(__name__)

UNASSIGNED = "Sem responsável"
REPORT_COLUMNS = ["responsible_id", "responsible_name", "lead_count", "closed_count", "closed_value"]
LEAD_COLUMNS = ["id", "responsible_id", "stage", "status", "value"]


def team_performance_frame(leads: pd.DataFrame, names: dict[str, str]) -> pd.DataFrame:
    """Per responsible: leads owned, leads closed and closed value, best first."""
    if leads.empty:
        return pd.DataFrame(columns=REPORT_COLUMNS)

    frame = leads.copy()
    frame["responsible_id"] = frame["responsible_id"].fillna("")
    frame["value"] = pd.to_numeric(frame["value"], errors="coerce").fillna(0.0)
    frame["closed"] = (frame["stage"] == LeadStage.C7.value) | (frame["status"] == LeadStatus.FECHADO.value)
    frame["closed_value"] = frame["value"].where(frame["closed"], 0.0)

    report = (
        frame.groupby("responsible_id", as_index=False)
        .agg(lead_count=("id", "count"), closed_count=("closed", "sum"), closed_value=("closed_value", "sum"))
        .sort_values(["closed_value", "closed_count", "responsible_id"], ascending=[False, False, True])
        .reset_index(drop=True)
    )
    report["closed_count"] = report["closed_count"].astype(int)
    report["closed_value"] = report["closed_value"].round(2)
    report["responsible_name"] = report["responsible_id"].map(lambda rid: names.get(rid, UNASSIGNED) if rid else UNASSIGNED)
    report["responsible_id"] = report["responsible_id"].map(lambda rid: rid or None)
    return report[REPORT_COLUMNS]


class ReportService(BaseService):
    def team_performance(self) -> pd.DataFrame:
        leads = list(self.db.scalars(select(Lead)).unique())
        names = {profile.id: profile.full_name for profile in self.db.scalars(select(Profile))}
        report = team_performance_frame(orm_to_df(leads, columns=LEAD_COLUMNS), names)
        logger.info("report.team_performance.built", extra={"event": "report.team_performance.built", "rows": len(report)})
        return report

    def team_performance_records(self) -> list[dict]:
        report = self.team_performance()
        return report.astype(object).where(report.notna(), None).to_dict(orient="records")
