from __future__ import annotations

import logging

import httpx

from gpbot.core.models import CommentResult
from gpbot.core.modes import MutationPolicy, mutation_skip_reason


class GitHubCommentWriter:
    """Thin executor that creates issue comments on pull requests.

    Comments are only created when MutationPolicy allows GitHub writes.
    """

    def __init__(
        self,
        token: str,
        api_base: str = "https://api.github.com",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._logger = logging.getLogger(self.__class__.__name__)
        self._client = httpx.Client(
            base_url=api_base,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
            },
            timeout=30.0,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "GitHubCommentWriter":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def post_comment(
        self,
        owner: str,
        repo: str,
        issue_number: int,
        body: str,
        policy: MutationPolicy,
    ) -> CommentResult:
        target = f"{owner}/{repo}#{issue_number}"
        skip_reason = mutation_skip_reason(policy, policy.allow_github_mutations)
        if skip_reason:
            self._log_comment(target, result=skip_reason)
            return CommentResult(result="skipped", reason=skip_reason)

        path = f"/repos/{owner}/{repo}/issues/{issue_number}/comments"
        try:
            response = self._client.post(path, json={"body": body})
        except httpx.HTTPError as exc:
            self._log_comment(target, result="failed (network error)", error=str(exc))
            return CommentResult(result="failed", reason="network error")

        if response.status_code in {401, 403, 404}:
            self._log_comment(target, result="failed (permission denied)", status=response.status_code)
            return CommentResult(
                result="failed", status=response.status_code, reason="permission denied"
            )
        if response.status_code >= 300:
            self._log_comment(target, result="failed (http error)", status=response.status_code)
            return CommentResult(result="failed", status=response.status_code, reason="http error")

        html_url = _html_url(response)
        self._log_comment(target, result="posted", status=response.status_code)
        return CommentResult(result="posted", html_url=html_url, status=response.status_code)

    def _log_comment(
        self,
        target: str,
        result: str,
        status: int | None = None,
        error: str | None = None,
    ) -> None:
        self._logger.info(
            "GitHub comment execution",
            extra={"target": target, "result": result, "status": status, "error": error},
        )


def _html_url(response: httpx.Response) -> str | None:
    try:
        data = response.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    url = data.get("html_url")
    return url if isinstance(url, str) else None
