from __future__ import annotations


class ConfigError(RuntimeError):
    """Configuration validation or loading error."""


class AdapterError(RuntimeError):
    """Raised for adapter initialization failures."""


class EventParseError(ValueError):
    """Raised when a webhook payload cannot be mapped to a PullRequestEvent."""


class FetchError(RuntimeError):
    """Raised when the GitPOAP API does not return a usable claims response.

    status_code is None for transport failures (no response was received).
    """

    def __init__(self, status_code: int | None, body: str) -> None:
        super().__init__(f"Claims request failed (status={status_code}): {body}")
        self.status_code = status_code
        self.body = body


class RenderPreconditionError(ValueError):
    """Raised when a comment is rendered for an empty claims sequence."""
