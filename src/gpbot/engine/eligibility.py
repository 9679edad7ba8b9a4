"""Decide from event metadata alone whether a pull request event earns a claims check."""

from __future__ import annotations

from gpbot.core.models import ACTION_CLOSED, AUTHOR_TYPE_BOT, PullRequestEvent


def skip_reason(event: PullRequestEvent) -> str | None:
    """Return why the event is ignored, or None if it should be processed.

    Rules are checked in order and the first match wins.
    """
    if event.action != ACTION_CLOSED:
        return "not closed"
    if not event.merged:
        return "not merged"
    # Bot PRs never earn GitPOAPs and would otherwise loop bot-to-bot.
    if event.author_type == AUTHOR_TYPE_BOT:
        return "bot author"
    return None


def should_process(event: PullRequestEvent) -> bool:
    return skip_reason(event) is None
