"""Startup checks: database reachability and pipeline policy."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from salesdesk.core.config import Config, get_config
from salesdesk.core.exceptions import ConfigurationError
from salesdesk.core.logging_config import configure_logging
from salesdesk.database.db import get_active_database_url, verify_database_connection
from salesdesk.pipeline.stages import INITIAL_STAGE, TERMINAL_STAGE

logger = logging.getLogger(__name__)

# Entry and closing columns collect leads without a capacity cap.
UNCAPPED_STAGES = frozenset({INITIAL_STAGE.value, TERMINAL_STAGE.value})


@dataclass(frozen=True)
class StartupReport:
    env: str
    database_scheme: str
    database_ok: bool
    allow_regression: bool
    wip_limits: dict[str, int] = field(default_factory=dict)


def check_pipeline_policy(config: Config) -> dict[str, int]:
    """Reject WIP caps on uncapped stages and flag caps that always warn."""
    limits = dict(config.PIPELINE_WIP_LIMITS)
    capped = sorted(UNCAPPED_STAGES & set(limits))
    if capped:
        raise ConfigurationError(f"PIPELINE_WIP_LIMITS cannot cap these stages: {', '.join(capped)}")

    for stage, limit in sorted(limits.items()):
        if limit == 0:
            logger.warning(
                "startup.pipeline.wip_limit_zero",
                extra={"event": "startup.pipeline.wip_limit_zero", "stage": stage},
            )
    if not config.PIPELINE_ALLOW_REGRESSION:
        logger.info(
            "startup.pipeline.regression_disabled",
            extra={"event": "startup.pipeline.regression_disabled"},
        )
    return limits


def check_database(config: Config) -> tuple[bool, str]:
    database_ok = verify_database_connection()
    scheme = get_active_database_url().split("://", 1)[0]
    if not database_ok:
        if config.DB_CONNECTIVITY_REQUIRED:
            raise RuntimeError("Database connectivity check failed.")
        logger.warning(
            "startup.database.connectivity_optional_failed",
            extra={"event": "startup.database.connectivity_optional_failed"},
        )
    if config.is_production and scheme == "sqlite":
        logger.warning("startup.production.sqlite_detected", extra={"event": "startup.production.sqlite_detected"})
    return database_ok, scheme


def validate_startup_config(config: Config | None = None) -> StartupReport:
    """Fail fast on a bad pipeline policy, then verify the database."""
    cfg = config or get_config()
    limits = check_pipeline_policy(cfg)
    database_ok, scheme = check_database(cfg)
    report = StartupReport(
        env=cfg.ENV,
        database_scheme=scheme,
        database_ok=database_ok,
        allow_regression=cfg.PIPELINE_ALLOW_REGRESSION,
        wip_limits=limits,
    )
    logger.info(
        "startup.config.validated",
        extra={
            "event": "startup.config.validated",
            "env": report.env,
            "database_url_scheme": report.database_scheme,
            "pipeline_allow_regression": report.allow_regression,
            "pipeline_wip_limits": report.wip_limits,
        },
    )
    return report


def bootstrap() -> StartupReport:
    configure_logging()
    return validate_startup_config()
