from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from gpbot.core.errors import FetchError
from gpbot.core.interfaces import AppTokenProvider, ClaimsClient, CommentWriter
from gpbot.core.models import ClaimRequest, PullRequestEvent
from gpbot.core.modes import MutationPolicy
from gpbot.engine.eligibility import skip_reason
from gpbot.engine.rendering import render_comment


class ProcessOutcome(str, Enum):
    INELIGIBLE = "ineligible"
    FETCH_FAILED = "fetch-failed"
    NO_CLAIMS = "no-claims"
    SKIPPED_BY_POLICY = "skipped-by-policy"
    POST_FAILED = "post-failed"
    COMMENTED = "commented"


@dataclass(frozen=True)
class ProcessResult:
    outcome: ProcessOutcome
    claim_count: int = 0
    comment_url: str | None = None
    detail: str | None = None


@dataclass(frozen=True)
class EventProcessor:
    """Handle one pull request event: gate, fetch claims, render, post.

    Each call to process() is independent; nothing is shared between events
    except the injected collaborators.
    """

    token_provider: AppTokenProvider
    claims_client: ClaimsClient
    comment_writer: CommentWriter
    policy: MutationPolicy

    def process(self, event: PullRequestEvent) -> ProcessResult:
        logger = logging.getLogger("EventProcessor")
        reason = skip_reason(event)
        if reason is not None:
            logger.info(
                "Skipping pull request event",
                extra={
                    "reason": reason,
                    "action": event.action,
                    "pr_url": event.html_url,
                    "author": event.author_login,
                },
            )
            return ProcessResult(outcome=ProcessOutcome.INELIGIBLE, detail=reason)

        logger.info("Handling newly merged PR", extra={"pr_url": event.html_url})

        token = self.token_provider.app_token()
        request = ClaimRequest.from_event(event)
        try:
            claims = list(self.claims_client.fetch_claims(request, token))
        except FetchError as exc:
            logger.error(
                "Claims request failed",
                extra={
                    "pr_url": event.html_url,
                    "status_code": exc.status_code,
                    "body": exc.body[:500],
                },
            )
            return ProcessResult(outcome=ProcessOutcome.FETCH_FAILED, detail=str(exc.status_code))

        if not claims:
            logger.info("No new claims were created by this PR", extra={"pr_url": event.html_url})
            return ProcessResult(outcome=ProcessOutcome.NO_CLAIMS)

        logger.info(
            "New claims were created by this PR",
            extra={"pr_url": event.html_url, "count": len(claims)},
        )
        body = render_comment(claims)
        result = self.comment_writer.post_comment(
            event.owner_login,
            event.repo_name,
            event.pull_request_number,
            body,
            self.policy,
        )
        if result.posted:
            logger.info(
                "Posted comment about new claims",
                extra={"pr_url": event.html_url, "comment_url": result.html_url},
            )
            return ProcessResult(
                outcome=ProcessOutcome.COMMENTED,
                claim_count=len(claims),
                comment_url=result.html_url,
            )
        if result.result == "skipped":
            return ProcessResult(
                outcome=ProcessOutcome.SKIPPED_BY_POLICY,
                claim_count=len(claims),
                detail=result.reason,
            )
        return ProcessResult(
            outcome=ProcessOutcome.POST_FAILED,
            claim_count=len(claims),
            detail=result.reason,
        )
