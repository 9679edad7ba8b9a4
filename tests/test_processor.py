"""Tests for the merged-PR claims pipeline."""

import logging

import pytest

from gpbot.core.errors import FetchError, RenderPreconditionError
from gpbot.core.models import Claim, ClaimRequest, CommentResult, GitPOAPRef, PullRequestEvent
from gpbot.core.modes import MutationPolicy, RunMode
from gpbot.engine.processor import EventProcessor, ProcessOutcome


class FakeTokenProvider:
    def __init__(self, calls: list[str]) -> None:
        self.calls = calls

    def app_token(self) -> str:
        self.calls.append("token")
        return "app-jwt"


class FakeClaimsClient:
    def __init__(self, calls: list[str], claims=None, error: FetchError | None = None) -> None:
        self.calls = calls
        self.claims = claims or []
        self.error = error
        self.requests: list[tuple[ClaimRequest, str]] = []

    def fetch_claims(self, request: ClaimRequest, auth_token: str):
        self.calls.append("fetch")
        self.requests.append((request, auth_token))
        if self.error is not None:
            raise self.error
        return self.claims


class FakeCommentWriter:
    def __init__(self, calls: list[str], result: CommentResult | None = None) -> None:
        self.calls = calls
        self.result = result or CommentResult(
            result="posted", html_url="https://github.com/bar/foo/pull/42#issuecomment-1", status=201
        )
        self.comments: list[tuple[str, str, int, str]] = []

    def post_comment(self, owner, repo, issue_number, body, policy) -> CommentResult:
        self.calls.append("post")
        self.comments.append((owner, repo, issue_number, body))
        return self.result


ACTIVE = MutationPolicy(mode=RunMode.ACTIVE, github_write_allowed=True)

LINTER_HERO = Claim(
    id=1,
    gitpoap=GitPOAPRef(id=10, poap_event_id=100, threshold=1),
    name="Linter Hero",
    image_url="https://img/x.png",
    description="...",
)


def _event(**overrides) -> PullRequestEvent:
    fields = {
        "action": "closed",
        "merged": True,
        "author_type": "User",
        "repo_name": "foo",
        "owner_login": "bar",
        "pull_request_number": 42,
        "author_login": "alice",
    }
    fields.update(overrides)
    return PullRequestEvent(**fields)


def _processor(calls, claims=None, error=None, writer_result=None):
    claims_client = FakeClaimsClient(calls, claims=claims, error=error)
    writer = FakeCommentWriter(calls, result=writer_result)
    processor = EventProcessor(
        token_provider=FakeTokenProvider(calls),
        claims_client=claims_client,
        comment_writer=writer,
        policy=ACTIVE,
    )
    return processor, claims_client, writer


def test_merged_pr_with_claim_posts_one_comment() -> None:
    calls: list[str] = []
    processor, claims_client, writer = _processor(calls, claims=[LINTER_HERO])

    result = processor.process(_event())

    assert result.outcome == ProcessOutcome.COMMENTED
    assert result.claim_count == 1
    assert result.comment_url == "https://github.com/bar/foo/pull/42#issuecomment-1"
    assert calls == ["token", "fetch", "post"]
    assert len(writer.comments) == 1
    owner, repo, number, body = writer.comments[0]
    assert (owner, repo, number) == ("bar", "foo", 42)
    assert "https://www.gitpoap.io/gp/10" in body
    assert "Linter Hero" in body
    assert 'src="https://img/x.png"' in body


def test_claim_request_matches_event_fields() -> None:
    calls: list[str] = []
    processor, claims_client, _ = _processor(calls, claims=[LINTER_HERO])

    processor.process(_event(repo_name="gitpoap-bot", owner_login="gitpoap", pull_request_number=7))

    assert claims_client.requests == [
        (ClaimRequest(repo="gitpoap-bot", owner="gitpoap", pull_request_number=7), "app-jwt")
    ]


def test_empty_claims_posts_nothing(caplog) -> None:
    caplog.set_level(logging.INFO)
    calls: list[str] = []
    processor, _, writer = _processor(calls, claims=[])

    result = processor.process(_event())

    assert result.outcome == ProcessOutcome.NO_CLAIMS
    assert "post" not in calls
    assert writer.comments == []
    assert any("No new claims" in record.message for record in caplog.records)


def test_fetch_failure_logs_status_and_posts_nothing(caplog) -> None:
    caplog.set_level(logging.INFO)
    calls: list[str] = []
    processor, _, writer = _processor(calls, error=FetchError(500, "Internal Server Error"))

    result = processor.process(_event())

    assert result.outcome == ProcessOutcome.FETCH_FAILED
    assert writer.comments == []
    errors = [record for record in caplog.records if record.levelno == logging.ERROR]
    assert len(errors) == 1
    assert getattr(errors[0], "status_code", None) == 500
    assert getattr(errors[0], "body", None) == "Internal Server Error"


def test_transport_failure_is_a_fetch_failure() -> None:
    calls: list[str] = []
    processor, _, writer = _processor(calls, error=FetchError(None, "connection refused"))

    result = processor.process(_event())

    assert result.outcome == ProcessOutcome.FETCH_FAILED
    assert writer.comments == []


def test_bot_pr_issues_no_claims_request() -> None:
    calls: list[str] = []
    processor, claims_client, writer = _processor(calls, claims=[LINTER_HERO])

    result = processor.process(_event(author_type="Bot", author_login="renovate[bot]"))

    assert result.outcome == ProcessOutcome.INELIGIBLE
    assert result.detail == "bot author"
    assert calls == []
    assert claims_client.requests == []


@pytest.mark.parametrize(
    "overrides",
    [{"merged": False}, {"action": "opened", "merged": False}, {"action": "edited"}],
)
def test_ineligible_events_issue_no_requests(overrides) -> None:
    calls: list[str] = []
    processor, _, _ = _processor(calls, claims=[LINTER_HERO])

    result = processor.process(_event(**overrides))

    assert result.outcome == ProcessOutcome.INELIGIBLE
    assert calls == []


def test_policy_skip_is_reported() -> None:
    calls: list[str] = []
    processor, _, writer = _processor(
        calls,
        claims=[LINTER_HERO],
        writer_result=CommentResult(result="skipped", reason="skipped (dry-run)"),
    )

    result = processor.process(_event())

    assert result.outcome == ProcessOutcome.SKIPPED_BY_POLICY
    assert result.detail == "skipped (dry-run)"
    assert len(writer.comments) == 1


def test_post_failure_is_reported() -> None:
    calls: list[str] = []
    processor, _, _ = _processor(
        calls,
        claims=[LINTER_HERO],
        writer_result=CommentResult(result="failed", status=403, reason="permission denied"),
    )

    result = processor.process(_event())

    assert result.outcome == ProcessOutcome.POST_FAILED
    assert result.detail == "permission denied"


def test_render_precondition_violation_propagates(monkeypatch) -> None:
    import gpbot.engine.processor as processor_module

    def _broken_render(claims):
        raise RenderPreconditionError("no claims")

    monkeypatch.setattr(processor_module, "render_comment", _broken_render)
    calls: list[str] = []
    processor, _, writer = _processor(calls, claims=[LINTER_HERO])

    with pytest.raises(RenderPreconditionError):
        processor.process(_event())
    assert writer.comments == []


def test_events_are_processed_independently() -> None:
    calls: list[str] = []
    failing, _, _ = _processor(calls, error=FetchError(502, "bad gateway"))
    working, _, writer = _processor([], claims=[LINTER_HERO])

    assert failing.process(_event()).outcome == ProcessOutcome.FETCH_FAILED
    assert working.process(_event()).outcome == ProcessOutcome.COMMENTED
    assert len(writer.comments) == 1
