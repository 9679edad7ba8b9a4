from __future__ import annotations

import argparse
import json
import logging
import os
from pathlib import Path
from typing import Any

from gpbot.adapters.github.webhook import is_pull_request_event, parse_pull_request_event
from gpbot.adapters.gitpoap.claims import parse_claim
from gpbot.config.loader import load_config
from gpbot.config.models import BotConfig
from gpbot.core.errors import AdapterError, ConfigError, EventParseError
from gpbot.engine.processor import EventProcessor
from gpbot.engine.rendering import render_comment
from gpbot.logging.setup import configure_logging
from gpbot.plugins.registry import build_adapter


def build_processor(config: BotConfig) -> EventProcessor:
    token_provider = build_adapter(
        config.runtime.token_provider,
        app_token=config.github.app_token,
    )
    claims_client = build_adapter(
        config.runtime.claims_adapter,
        api_url=str(config.gitpoap.api_url),
        timeout=config.gitpoap.timeout_seconds,
    )
    comment_writer = build_adapter(
        config.runtime.github_adapter,
        token=config.github.token,
        api_base=str(config.github.api_base),
    )
    return EventProcessor(
        token_provider=token_provider,
        claims_client=claims_client,
        comment_writer=comment_writer,
        policy=config.mutation_policy(),
    )


def close_processor(processor: EventProcessor) -> None:
    for adapter in (processor.token_provider, processor.claims_client, processor.comment_writer):
        close = getattr(adapter, "close", None)
        if callable(close):
            close()


def _read_json(path: str) -> Any:
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise EventParseError(f"Failed to read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise EventParseError(f"Invalid JSON in {path}: {exc}") from exc


def _handle_event(args: argparse.Namespace) -> int:
    logger = logging.getLogger("CLI")
    config = load_config(args.config)
    configure_logging(config.runtime.log_level)
    logger.info(
        "Loaded configuration",
        extra={"mode": config.runtime.mode.value, "environment": config.runtime.environment},
    )
    if not args.payload:
        raise EventParseError("No payload given (use --payload or set GITHUB_EVENT_PATH)")
    if not is_pull_request_event(args.event_name):
        logger.info("Ignoring non pull_request event", extra={"event_name": args.event_name})
        return 0

    event = parse_pull_request_event(_read_json(args.payload))
    processor = build_processor(config)
    try:
        result = processor.process(event)
    finally:
        close_processor(processor)
    print(result.outcome.value)
    return 0


def _render(args: argparse.Namespace) -> int:
    raw = _read_json(args.claims)
    records = raw.get("newClaims") if isinstance(raw, dict) else raw
    if not isinstance(records, list):
        raise EventParseError("Claims file must hold a list or an object with newClaims")
    try:
        claims = [parse_claim(item) for item in records]
    except (KeyError, TypeError, ValueError) as exc:
        raise EventParseError(f"Malformed claim record: {exc}") from exc
    if not claims:
        logging.getLogger("CLI").error("No claims to render")
        return 1
    print(render_comment(claims))
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="GitPOAP pull request reward bot")
    parser.add_argument("--config", default=None, help="Path to config YAML file")
    sub = parser.add_subparsers(dest="command", required=True)
    handle_p = sub.add_parser("handle-event", help="Process one pull_request webhook payload")
    handle_p.add_argument(
        "--payload",
        default=os.getenv("GITHUB_EVENT_PATH"),
        help="Path to webhook payload JSON (default: $GITHUB_EVENT_PATH)",
    )
    handle_p.add_argument(
        "--event-name",
        default=os.getenv("GITHUB_EVENT_NAME", "pull_request"),
        help="Webhook event name (default: $GITHUB_EVENT_NAME or pull_request)",
    )
    render_p = sub.add_parser("render", help="Preview the comment for a claims JSON file")
    render_p.add_argument("--claims", required=True, help="Path to claims JSON file")

    args = parser.parse_args()
    try:
        if args.command == "handle-event":
            if not args.config:
                parser.error("--config is required for handle-event")
            code = _handle_event(args)
        else:
            configure_logging("INFO")
            code = _render(args)
    except (ConfigError, AdapterError, EventParseError) as exc:
        logging.getLogger("CLI").error("Fatal error: %s", exc)
        raise SystemExit(1) from exc
    except Exception as exc:  # noqa: BLE001
        logging.getLogger("CLI").exception("Unhandled error")
        raise SystemExit(1) from exc
    if code:
        raise SystemExit(code)


if __name__ == "__main__":
    main()
