from __future__ import annotations

from pydantic import BaseModel, Field, HttpUrl, field_validator

from gpbot.core.modes import MutationPolicy, RunMode


class PermissionConfig(BaseModel):
    write: bool = False


class RuntimeConfig(BaseModel):
    mode: RunMode = RunMode.DRY_RUN
    log_level: str = "INFO"
    # Deployment name for surrounding error reporting, e.g. "production"
    environment: str = "development"
    token_provider: str = "gpbot.adapters.github.auth:StaticAppTokenProvider"
    claims_adapter: str = "gpbot.adapters.gitpoap.claims:GitPOAPClaimsClient"
    github_adapter: str = "gpbot.adapters.github.writer:GitHubCommentWriter"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        if value.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError("Unsupported log level")
        return value.upper()


class GitPOAPConfig(BaseModel):
    api_url: HttpUrl
    timeout_seconds: float = 30.0

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout_seconds must be positive")
        return value


class GitHubConfig(BaseModel):
    token: str
    app_token: str
    api_base: HttpUrl = Field(default="https://api.github.com")
    permissions: PermissionConfig = Field(default_factory=PermissionConfig)

    @field_validator("token", "app_token")
    @classmethod
    def validate_token(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("GitHub tokens must not be empty")
        return value


class BotConfig(BaseModel):
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)
    gitpoap: GitPOAPConfig
    github: GitHubConfig

    def mutation_policy(self) -> MutationPolicy:
        return MutationPolicy(
            mode=self.runtime.mode,
            github_write_allowed=self.github.permissions.write,
        )
