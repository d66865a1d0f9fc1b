"""Lead pipeline model: stage order, transitions, derived metrics and filtering."""

from salesdesk.pipeline.filters import filter_leads
from salesdesk.pipeline.metrics import (
    FunnelStep,
    StageSummary,
    board_summary,
    classify_staleness,
    conversion_funnel,
    is_over_wip_limit,
    leads_by_stage,
    stage_value,
)
from salesdesk.pipeline.stages import ORDERED_STAGES, STAGE_RANK, is_terminal, next_stage, parse_stage
from salesdesk.pipeline.state_machine import (
    InvalidTransitionError,
    PipelineStateMachine,
    StateMachine,
    TransitionResult,
)

__all__ = [
    "FunnelStep",
    "InvalidTransitionError",
    "ORDERED_STAGES",
    "PipelineStateMachine",
    "STAGE_RANK",
    "StageSummary",
    "StateMachine",
    "TransitionResult",
    "board_summary",
    "classify_staleness",
    "conversion_funnel",
    "filter_leads",
    "is_over_wip_limit",
    "is_terminal",
    "leads_by_stage",
    "next_stage",
    "parse_stage",
    "stage_value",
]
