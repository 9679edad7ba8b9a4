"""Markdown comment announcing newly created GitPOAP claims."""

from __future__ import annotations

from typing import Sequence

from gpbot.core.errors import RenderPreconditionError
from gpbot.core.models import Claim

GITPOAP_SITE_URL = "https://www.gitpoap.io"
GITPOAP_PAGE_URL = f"{GITPOAP_SITE_URL}/gp"
BADGE_HEIGHT = "200px"


def render_comment(claims: Sequence[Claim]) -> str:
    """Render the PR comment for a non-empty list of claims, in the given order."""
    if not claims:
        raise RenderPreconditionError("Cannot render a claims comment without claims")

    qualifier = "some GitPOAPs" if len(claims) > 1 else "a GitPOAP"
    parts = [
        f"Woohoo, your important contribution to this open-source project has earned you {qualifier}!\n"
    ]
    parts.extend(_claim_block(claim) for claim in claims)
    parts.append(
        f"\n\nHead on over to [GitPOAP.io]({GITPOAP_SITE_URL}) "
        "and connect your GitHub account to mint!"
    )
    return "".join(parts)


def gitpoap_url(claim: Claim) -> str:
    return f"{GITPOAP_PAGE_URL}/{claim.gitpoap.id}"


def _claim_block(claim: Claim) -> str:
    return (
        f"\n[**{claim.name}**]({gitpoap_url(claim)}):\n"
        f'<img alt="{claim.name} GitPOAP Badge" src="{claim.image_url}" height="{BADGE_HEIGHT}">'
    )
