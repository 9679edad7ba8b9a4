from __future__ import annotations

from typing import Protocol, Sequence

from gpbot.core.models import Claim, ClaimRequest, CommentResult
from gpbot.core.modes import MutationPolicy


class AppTokenProvider(Protocol):
    def app_token(self) -> str:
        """Return a token identifying the GitHub App to the GitPOAP API."""


class ClaimsClient(Protocol):
    def fetch_claims(self, request: ClaimRequest, auth_token: str) -> Sequence[Claim]:
        """Request claims for a merged PR. Raises FetchError on failure."""


class CommentWriter(Protocol):
    def post_comment(
        self,
        owner: str,
        repo: str,
        issue_number: int,
        body: str,
        policy: MutationPolicy,
    ) -> CommentResult:
        """Create a comment on an issue or pull request."""
