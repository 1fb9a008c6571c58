"""Logging configuration and registry error reporting."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from res_bridge.core.config import get_config
from res_bridge.core.models import RegistryError

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging for processes embedding the client."""
    level_name = (level or get_config().log_level or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
        force=True,
        handlers=[logging.StreamHandler()],
    )
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


class RegistryErrorLogger:
    """Writes a registry `RegistryErrorList` to the log, one line per entry."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or logging.getLogger("RegistryService")

    def log_errors(self, errors: Iterable[RegistryError]) -> None:
        errors = list(errors)
        if not errors:
            self.logger.error("Registry returned a non-success status without an error list")
            return

        warning_count = 0
        for error in errors:
            location = f" (location: {error.location})" if error.location else ""
            if error.is_warning:
                warning_count += 1
                self.logger.warning(
                    "Registry warning [%s]: %s%s", error.error_code, error.code_context, location
                )
            else:
                self.logger.error(
                    "Registry error [%s]: %s%s", error.error_code, error.code_context, location
                )

        self.logger.info(
            "Registry reported %d error(s) and %d warning(s)",
            len(errors) - warning_count,
            warning_count,
        )
