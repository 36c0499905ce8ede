"""
Logging setup shared by the CLI and the API.

Handlers and formatters come from `config/logging.yaml`; the effective level is
`app.log_level` (env `DESTSCORE_LOG_LEVEL`) unless the caller passes one, e.g. the
CLI's `--log-level`.
"""

from __future__ import annotations

import copy
import logging.config

from destscore.config.settings import get_logging_config, get_settings


def configure_logging(level: str | None = None) -> str:
    """Apply the packaged logging config; returns the level that was set."""
    effective = (level or get_settings().app.log_level).upper()

    config = copy.deepcopy(get_logging_config())
    config.setdefault("root", {})["level"] = effective
    for handler in config.get("handlers", {}).values():
        handler["level"] = effective

    logging.config.dictConfig(config)
    return effective
