import logging

# structured fields passed through `extra=` that are worth seeing on one line
CONTEXT_KEYS = (
    "session_id",
    "booking_no",
    "action",
    "field",
    "offset",
    "limit",
    "total",
    "sequence",
    "status",
    "timer_value",
    "label",
    "reason",
    "error",
)


class ContextFormatter(logging.Formatter):
    """Appends the booking-search context carried on a record as `key=value` pairs."""

    def __init__(self, fmt: str | None = None, keys: tuple[str, ...] = CONTEXT_KEYS) -> None:
        super().__init__(fmt)
        self._keys = keys

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        pairs = [
            f"{key}={getattr(record, key)}"
            for key in self._keys
            if getattr(record, key, None) not in (None, "")
        ]
        return f"{line} | {' '.join(pairs)}" if pairs else line


def configure_logging(level: str) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)
    return handler
