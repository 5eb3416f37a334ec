import logging
import re
from typing import Any, Dict

import structlog

_SECRET_KEYS = {
    "authorization",
    "x-hub-signature-256",
    "signature",
    "signature_header",
    "secret",
    "github_webhook_secret",
}
_URL_PASSWORD = re.compile(r"(://[^:/@\s]+:)[^@\s]+@")


def _configure_stdlib_logging() -> None:
    logging.basicConfig(
        format="%(message)s",
        level=logging.INFO,
    )


def redact_secrets(_logger, _name, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    for k in list(event_dict.keys()):
        if str(k).lower() in _SECRET_KEYS:
            event_dict[k] = "[REDACTED]"
    # database URLs carry credentials
    for k, v in list(event_dict.items()):
        if isinstance(v, str) and "://" in v:
            event_dict[k] = _URL_PASSWORD.sub(r"\1[REDACTED]@", v)
    return event_dict


def configure_structlog() -> None:
    _configure_stdlib_logging()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            redact_secrets,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.INFO),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str):
    return structlog.get_logger(name)
