from __future__ import annotations

from dataclasses import dataclass
from typing import Any

ACTION_CLOSED = "closed"
AUTHOR_TYPE_BOT = "Bot"


@dataclass(frozen=True)
class PullRequestEvent:
    action: str  # "opened" | "closed" | ...
    merged: bool
    author_type: str  # "User" | "Bot" | ...
    repo_name: str
    owner_login: str
    pull_request_number: int
    author_login: str = ""

    @property
    def html_url(self) -> str:
        return f"https://github.com/{self.owner_login}/{self.repo_name}/{self.pull_request_number}"


@dataclass(frozen=True)
class ClaimRequest:
    repo: str
    owner: str
    pull_request_number: int

    @classmethod
    def from_event(cls, event: PullRequestEvent) -> "ClaimRequest":
        return cls(
            repo=event.repo_name,
            owner=event.owner_login,
            pull_request_number=event.pull_request_number,
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "repo": self.repo,
            "owner": self.owner,
            "pullRequestNumber": self.pull_request_number,
        }


@dataclass(frozen=True)
class GitPOAPRef:
    id: int
    poap_event_id: int
    threshold: int


@dataclass(frozen=True)
class Claim:
    id: int
    gitpoap: GitPOAPRef
    name: str
    image_url: str
    description: str


@dataclass(frozen=True)
class CommentResult:
    result: str  # "posted" | "skipped" | "failed"
    html_url: str | None = None
    status: int | None = None
    reason: str | None = None

    @property
    def posted(self) -> bool:
        return self.result == "posted"
