"""Logging configuration helpers."""

import logging

CONTEXT_FIELDS = (
    "device_id",
    "connection_id",
    "remote_origin",
    "address",
    "command",
    "transport",
    "frame_type",
)


class ContextFormatter(logging.Formatter):
    """Appends the connection and device context passed through `extra`."""

    def __init__(self) -> None:
        super().__init__("%(levelname)s: %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = [
            f"{name}={getattr(record, name)}"
            for name in CONTEXT_FIELDS
            if getattr(record, name, None) is not None
        ]
        return f"{line} [{' '.join(context)}]" if context else line


def configure_logging(level: str = "INFO") -> None:
    """Configure hub logging with a single stream handler."""
    logger = logging.getLogger("smartlight_hub")
    logger.setLevel(level.upper())
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(ContextFormatter())
    logger.addHandler(handler)
    logger.propagate = False
