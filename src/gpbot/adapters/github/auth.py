from __future__ import annotations

from gpbot.core.errors import AdapterError


class StaticAppTokenProvider:
    """Serve a pre-minted GitHub App JWT taken from configuration.

    Minting and refreshing the JWT is handled outside this bot.
    """

    def __init__(self, app_token: str) -> None:
        if not app_token:
            raise AdapterError("An app token is required")
        self._app_token = app_token

    def app_token(self) -> str:
        return self._app_token
