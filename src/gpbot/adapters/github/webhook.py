"""Map GitHub `pull_request` webhook payloads to PullRequestEvent records."""

from __future__ import annotations

from typing import Any

from gpbot.core.errors import EventParseError
from gpbot.core.models import PullRequestEvent

# pull_request_target carries the same payload; Actions uses it for PRs from forks.
PULL_REQUEST_EVENTS = frozenset({"pull_request", "pull_request_target"})


def is_pull_request_event(event_name: str | None) -> bool:
    return (event_name or "").strip().lower() in PULL_REQUEST_EVENTS


def parse_pull_request_event(payload: Any) -> PullRequestEvent:
    """Extract the fields the processor needs from a webhook payload.

    Raises EventParseError when required fields are missing or have the wrong type.
    """
    if not isinstance(payload, dict):
        raise EventParseError("Webhook payload must be a JSON object")

    pull_request = _require_dict(payload, "pull_request")
    repository = _require_dict(payload, "repository")
    owner = _require_dict(repository, "owner", prefix="repository.")
    user = pull_request.get("user") or {}
    if not isinstance(user, dict):
        raise EventParseError("pull_request.user must be an object")

    number = payload.get("number", pull_request.get("number"))
    if not isinstance(number, int) or isinstance(number, bool):
        raise EventParseError("number must be an integer")

    merged = pull_request.get("merged")
    if merged is None:
        merged = False
    if not isinstance(merged, bool):
        raise EventParseError("pull_request.merged must be a boolean")

    return PullRequestEvent(
        action=_require_str(payload, "action"),
        merged=merged,
        author_type=str(user.get("type") or ""),
        repo_name=_require_str(repository, "name", prefix="repository."),
        owner_login=_require_str(owner, "login", prefix="repository.owner."),
        pull_request_number=number,
        author_login=str(user.get("login") or ""),
    )


def _require_dict(data: dict, key: str, prefix: str = "") -> dict:
    value = data.get(key)
    if not isinstance(value, dict):
        raise EventParseError(f"{prefix}{key} must be an object")
    return value


def _require_str(data: dict, key: str, prefix: str = "") -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise EventParseError(f"{prefix}{key} must be a non-empty string")
    return value
