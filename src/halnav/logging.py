import logging
from typing import Any, Dict, Optional

# Extras rendered by LogfmtFormatter, in output order.
LOG_EXTRA_FIELDS = (
    "method",
    "url",
    "status",
    "duration_ms",
    "error_type",
)

# Attributes every LogRecord already has; passing them as extra would fail.
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


class LogfmtFormatter(logging.Formatter):
    """Render records as `key=value` pairs; absent extras are left out."""

    def format(self, record: logging.LogRecord) -> str:
        pairs = [
            ("level", record.levelname.lower()),
            ("logger", record.name),
            ("event", record.getMessage()),
        ]
        pairs.extend(
            (key, getattr(record, key))
            for key in LOG_EXTRA_FIELDS
            if getattr(record, key, None) is not None
        )
        if record.exc_info:
            pairs.append(("exc_type", record.exc_info[0].__name__))
        return " ".join(f"{key}={self._quote(val)}" for key, val in pairs if val != "")

    @staticmethod
    def _quote(val: Any) -> str:
        text = str(val)
        if isinstance(val, (bool, int, float)):
            return text
        if " " in text or "=" in text:
            return '"' + text.replace('"', '\\"') + '"'
        return text


def setup_logging(level: str = "INFO") -> None:
    """Replace root handlers with a single logfmt stderr handler."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(LogfmtFormatter())
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


def log_event(
    event: str, logger: Optional[logging.Logger] = None, **fields: Any
) -> None:
    """Log `event` at INFO with `fields` as record attributes."""
    log = logger or logging.getLogger("halnav")
    extra: Dict[str, Any] = {
        k: v for k, v in fields.items() if k not in _RECORD_ATTRS
    }
    log.info(event, extra=extra)


__all__ = ["setup_logging", "log_event", "LogfmtFormatter", "LOG_EXTRA_FIELDS"]
