import logging
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class AppLogger:
    """
    Stdlib logger with bound context.

    Every storefront module keeps one module-level instance bound to its
    ``component`` and ``layer``; services bind their own name on top. Context
    is rendered as ``key=value`` pairs after the message so log lines stay
    greppable without a structured-logging backend.
    """

    def __init__(
        self,
        name: str,
        context: Optional[Dict[str, Any]] = None,
        _logger: Optional[logging.Logger] = None,
    ):
        self._logger = _logger or logging.getLogger(name)
        self._name = name
        self._context = context or {}

    @property
    def name(self) -> str:
        return self._name

    @property
    def context(self) -> Dict[str, Any]:
        return dict(self._context)

    def bind(self, **extra: Any) -> "AppLogger":
        """Return a new logger carrying ``extra`` on every line."""
        return AppLogger(self._name, {**self._context, **extra}, _logger=self._logger)

    def debug(self, message: str, **context: Any) -> None:
        self._log(logging.DEBUG, message, context)

    def info(self, message: str, **context: Any) -> None:
        self._log(logging.INFO, message, context)

    def warning(self, message: str, **context: Any) -> None:
        self._log(logging.WARNING, message, context)

    def error(self, message: str, **context: Any) -> None:
        self._log(logging.ERROR, message, context)

    def exception(self, message: str, **context: Any) -> None:
        """Log at ERROR with the active exception's traceback."""
        self._log(logging.ERROR, message, context, exc_info=True)

    def _log(
        self, level: int, message: str, context: Dict[str, Any], exc_info: bool = False
    ) -> None:
        if not self._logger.isEnabledFor(level):
            return
        self._logger.log(
            level, self.render(message, {**self._context, **context}), exc_info=exc_info
        )

    @classmethod
    def render(cls, message: str, context: Mapping[str, Any]) -> str:
        if not context:
            return message
        pairs = " ".join(f"{key}={cls._stringify(value)}" for key, value in context.items())
        return f"{message} | {pairs}"

    @classmethod
    def _stringify(cls, value: Any) -> str:
        if isinstance(value, Enum):
            return str(value.value)
        if value is None or isinstance(value, (str, int, float, bool, Decimal)):
            return str(value)
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        if isinstance(value, Mapping):
            inner = ",".join(f"{k}:{cls._stringify(v)}" for k, v in value.items())
            return "{" + inner + "}"
        if isinstance(value, (list, tuple, set, frozenset)):
            return "[" + ",".join(cls._stringify(v) for v in value) + "]"
        return repr(value)


def get_logger(name: str) -> AppLogger:
    return AppLogger(name)
