"""
Structured logging for plugin-updater.

The host never sees update-check failures (they degrade to "up to date"),
so the log is the only record of them.  Every module logs through structlog::

    import structlog
    logger = structlog.get_logger()

    logger.warning("release_fetch_failed", kind="bad_status", status_code=403)
    # → {"event": "release_fetch_failed", "kind": "bad_status",
    #    "status_code": 403, "level": "warning", "timestamp": "2026-10-19T..."}

GitHub tokens must never reach the output.  ``redact_secrets`` runs on every
event, structlog and stdlib alike: token-named keys are masked, and token
shaped substrings (``ghp_…``, ``github_pat_…``, ``Authorization: token …``)
are masked inside any string value.
"""

from __future__ import annotations

import logging
import re
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog

REDACTED = "[REDACTED]"

_SECRET_KEYS = frozenset({"token", "github_token", "authorization", "password"})
_TOKEN_PATTERNS = (
    re.compile(r"\bgh[pousr]_[A-Za-z0-9]{16,}"),
    re.compile(r"\bgithub_pat_[A-Za-z0-9_]{20,}"),
    re.compile(r"(?i)(\bauthorization:\s*(?:token|bearer)\s+)\S+"),
)


def _mask(text: str) -> str:
    for pattern in _TOKEN_PATTERNS:
        if pattern.groups:
            text = pattern.sub(lambda m: m.group(1) + REDACTED, text)
        else:
            text = pattern.sub(REDACTED, text)
    return text


def redact_secrets(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor: mask GitHub tokens before anything is rendered."""
    for key, value in event_dict.items():
        if key.lower() in _SECRET_KEYS and value:
            event_dict[key] = REDACTED
        elif isinstance(value, str):
            event_dict[key] = _mask(value)
    return event_dict


def _is_ours(handler: logging.Handler) -> bool:
    return isinstance(handler, logging.StreamHandler) and isinstance(
        handler.formatter, structlog.stdlib.ProcessorFormatter
    )


def configure_logging(
    *,
    level: str = "WARNING",
    json_output: bool = False,
) -> None:
    """
    Configure structlog + stdlib logging for the process.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR).
        json_output: JSON lines if True, coloured console output otherwise.

    May be called again, e.g. once the config file has been read: the level
    and the renderer are replaced on the existing handler, none is added.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        redact_secrets,
    ]

    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
        foreign_pre_chain=shared_processors,
    )

    root = logging.getLogger()
    existing = [h for h in root.handlers if _is_ours(h)]
    if existing:
        for handler in existing:
            handler.setStream(sys.stderr)
            handler.setFormatter(formatter)
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    root.setLevel(log_level)

    # httpx logs every request line at INFO, including the release URL.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
