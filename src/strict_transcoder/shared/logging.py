"""Structured logging utilities for the strict transcoder.

Records carry the component that emitted them and an optional correlation
id, so facade and CLI output can be tied back to the call that produced it.
Failures are logged with their machine-readable reason and position.
"""

import logging
from typing import Any, Dict, Optional

from .errors import TranscodingError

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class CorrelationLogger:
    """Thin wrapper over ``logging.Logger`` adding component and correlation fields."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Wrap the standard logger called ``name``.

        Args:
            name: Logger name, usually the module's ``__name__``
            correlation_id: Identifier copied onto every record
            component: Short component label, the last dotted part of
                ``name`` when omitted
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.rsplit(".", 1)[-1]

    def _fields(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        fields = {"component": self.component, "correlation_id": self.correlation_id}
        fields.update(extra or {})
        return fields

    def is_enabled_for(self, level: int) -> bool:
        return self.logger.isEnabledFor(level)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self.logger.debug(message, extra=self._fields(extra))

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self.logger.info(message, extra=self._fields(extra))

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self.logger.warning(message, extra=self._fields(extra))

    def failure(
        self,
        message: str,
        error: Optional[TranscodingError],
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Log a rejected input at WARNING with its reason and position."""
        fields: Dict[str, Any] = {
            "reason": error.reason.value if error is not None else None,
            "position": error.position if error is not None else None,
            "error": str(error),
        }
        fields.update(extra or {})
        self.logger.warning(message, extra=self._fields(fields))


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> CorrelationLogger:
    """Return a ``CorrelationLogger`` for ``name``."""
    return CorrelationLogger(name, correlation_id, component)


def configure_logging(level: str = "WARNING") -> None:
    """Set the root logger to ``level``, installing a handler if it has none.

    Unknown level names fall back to WARNING.
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
    logging.getLogger().setLevel(numeric_level)
