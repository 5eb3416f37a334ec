import json
from dataclasses import dataclass, field
from typing import Any

from .errors import MalformedPayload


@dataclass(frozen=True)
class ParsedFields:
    """The three fields the receiver reads from any GitHub payload.

    ``document`` keeps the decoded body so it can be stored without a
    second parse.
    """

    action: str | None = None
    repository_name: str | None = None
    sender_login: str | None = None
    document: Any = field(default=None, repr=False, compare=False)


def _string_member(obj: Any, key: str) -> str | None:
    if not isinstance(obj, dict):
        return None
    value = obj.get(key)
    return value if isinstance(value, str) else None


def parse_payload(body: bytes) -> ParsedFields:
    """Extract action, repository full name and sender login from a raw body.

    Only a body that is not JSON at all, or nests too deeply to decode, raises
    ``MalformedPayload``. Missing members, members of the wrong type and
    non-object documents all come back as absent fields.
    """
    try:
        document = json.loads(body)
    except ValueError as exc:
        # covers json.JSONDecodeError and UnicodeDecodeError
        raise MalformedPayload(str(exc)) from exc
    except RecursionError as exc:
        # nesting deeper than the interpreter can decode
        raise MalformedPayload("JSON nested too deeply") from exc

    if not isinstance(document, dict):
        return ParsedFields(document=document)

    return ParsedFields(
        action=_string_member(document, "action"),
        repository_name=_string_member(document.get("repository"), "full_name"),
        sender_login=_string_member(document.get("sender"), "login"),
        document=document,
    )
