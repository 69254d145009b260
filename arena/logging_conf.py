"""
Centralized logging configuration with optional Sentry.io integration.
"""

import logging
from typing import Optional

import sentry_sdk


def setup_logging(
    sentry_dsn: Optional[str] = None,
    sentry_environment: str = "development",
    sentry_traces_sample_rate: float = 0.1,
    log_level: str = "INFO"
) -> None:
    """
    Configure application logging and Sentry integration.

    Args:
        sentry_dsn: Sentry DSN URL (if None, Sentry is disabled)
        sentry_environment: Environment name for Sentry
        sentry_traces_sample_rate: Sampling rate for traces (0.0-1.0)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=(
            "%(asctime)s - %(name)s - %(levelname)s - "
            "%(message)s"
        ),
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    if sentry_dsn:
        from sentry_sdk.integrations.fastapi import FastApiIntegration
        from sentry_sdk.integrations.starlette import StarletteIntegration

        sentry_sdk.init(
            dsn=sentry_dsn,
            environment=sentry_environment,
            traces_sample_rate=sentry_traces_sample_rate,
            integrations=[
                StarletteIntegration(transaction_style="endpoint"),
                FastApiIntegration(transaction_style="endpoint"),
            ],
            attach_stacktrace=True,
            send_default_pii=False,
        )
        logging.info(
            f"Sentry initialized in {sentry_environment} environment"
        )
    else:
        logging.info("Sentry disabled (no DSN provided)")
