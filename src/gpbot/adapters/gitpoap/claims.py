from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx

from gpbot.core.errors import FetchError
from gpbot.core.models import Claim, ClaimRequest, GitPOAPRef

CREATE_CLAIMS_PATH = "/claims/gitpoap-bot/create"


class GitPOAPClaimsClient:
    """Client for the GitPOAP bot claims endpoint.

    One POST per call; failures surface as FetchError and are never retried here.
    """

    def __init__(
        self,
        api_url: str,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._logger = logging.getLogger(self.__class__.__name__)
        self._client = httpx.Client(
            base_url=api_url.rstrip("/"),
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "GitPOAPClaimsClient":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def fetch_claims(self, request: ClaimRequest, auth_token: str) -> Sequence[Claim]:
        self._logger.debug(
            "Requesting claims",
            extra={
                "repo": request.repo,
                "owner": request.owner,
                "pr_number": request.pull_request_number,
            },
        )
        try:
            response = self._client.post(
                CREATE_CLAIMS_PATH,
                json=request.to_payload(),
                headers={"Authorization": f"Bearer {auth_token}"},
            )
        except httpx.HTTPError as exc:
            raise FetchError(None, str(exc)) from exc

        if response.status_code != 200:
            raise FetchError(response.status_code, response.text)

        try:
            data = response.json()
        except ValueError as exc:
            raise FetchError(response.status_code, response.text) from exc

        new_claims = data.get("newClaims") if isinstance(data, dict) else None
        if not isinstance(new_claims, list):
            raise FetchError(response.status_code, response.text)
        try:
            return [parse_claim(item) for item in new_claims]
        except (KeyError, TypeError, ValueError) as exc:
            raise FetchError(response.status_code, f"Malformed claim record: {exc}") from exc


def parse_claim(item: dict[str, Any]) -> Claim:
    """Build a Claim from one `newClaims` record of the API response."""
    gitpoap = item["gitPOAP"]
    return Claim(
        id=int(item["id"]),
        gitpoap=GitPOAPRef(
            id=int(gitpoap["id"]),
            poap_event_id=int(gitpoap.get("poapEventId") or 0),
            threshold=int(gitpoap.get("threshold") or 0),
        ),
        name=_require_text(item, "name"),
        image_url=_require_text(item, "imageUrl"),
        description=str(item.get("description") or ""),
    )


def _require_text(item: dict[str, Any], key: str) -> str:
    value = item[key]
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{key} must be a non-empty string")
    return value
