"""Entry point: run one research or narrative request and print the JSON response."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

import structlog
from pydantic import ValidationError

from movement_research.config import Settings
from movement_research.errors import ConfigurationError
from movement_research.models.request import ResearchRequest
from movement_research.narrative_analysis import NarrativeAnalyst
from movement_research.pipeline import ResearchPipeline

logger = structlog.get_logger()

FAILURE_MESSAGE = "Agentic news research failed"
NARRATIVE_FAILURE_MESSAGE = "Failed to generate AI analysis"


def configure_logging(level: str = "INFO") -> None:
    """Send structlog output to stderr so stdout carries only the response."""
    level_no = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level_no),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _parse_request(payload: dict) -> tuple[ResearchRequest | None, dict | None]:
    try:
        return ResearchRequest.model_validate(payload), None
    except ValidationError as e:
        logger.warning("invalid_request", errors=e.error_count())
        return None, {"error": "Invalid research request", "details": e.errors(include_url=False)}


async def handle_request(payload: dict, pipeline: ResearchPipeline) -> tuple[int, dict]:
    """Run the pipeline for one inbound payload, returning (status_code, body)."""
    request, error = _parse_request(payload)
    if error is not None:
        return 400, error

    try:
        report = await pipeline.run(request)
    except ConfigurationError as e:
        logger.error("configuration_error", error=str(e))
        return 500, {"error": FAILURE_MESSAGE, "details": str(e)}

    return 200, report.to_response(raw_news_preview=pipeline.defaults.raw_news_preview)


async def handle_narrative_request(payload: dict, analyst: NarrativeAnalyst) -> tuple[int, dict]:
    """Produce a prose analysis for one inbound payload, returning (status_code, body)."""
    request, error = _parse_request(payload)
    if error is not None:
        return 400, error

    try:
        analysis = await analyst.analyze(request)
    except ConfigurationError as e:
        logger.error("configuration_error", error=str(e))
        return 500, {"error": NARRATIVE_FAILURE_MESSAGE, "details": str(e)}

    return 200, analysis.to_response()


def build_parser() -> argparse.ArgumentParser:
    request_args = argparse.ArgumentParser(add_help=False)
    request_args.add_argument("--request", help="Path to a request JSON file ('-' for stdin)")
    request_args.add_argument("--symbol")
    request_args.add_argument("--date", help="Trading day, YYYY-MM-DD")
    request_args.add_argument("--open", type=float)
    request_args.add_argument("--high", type=float)
    request_args.add_argument("--low", type=float)
    request_args.add_argument("--close", type=float)
    request_args.add_argument("--volume", type=float)

    parser = argparse.ArgumentParser(
        prog="movement-research",
        description="Investigate why a stock moved on a given trading day.",
    )
    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser(
        "research",
        parents=[request_args],
        help="Run the full news research pipeline",
    )
    commands.add_parser(
        "narrative",
        parents=[request_args],
        help="Write a short prose analysis of the day's price action",
    )
    return parser


def payload_from_args(args: argparse.Namespace) -> dict:
    if args.request:
        if args.request == "-":
            return json.load(sys.stdin)
        with open(args.request, encoding="utf-8") as f:
            return json.load(f)
    return {
        "symbol": args.symbol,
        "date": args.date,
        "ohlc": {
            "open": args.open,
            "high": args.high,
            "low": args.low,
            "close": args.close,
            "volume": args.volume,
        },
    }


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings()
    configure_logging(settings.LOG_LEVEL)

    payload = payload_from_args(args)
    if args.command == "narrative":
        status, body = asyncio.run(handle_narrative_request(payload, NarrativeAnalyst(settings=settings)))
    else:
        status, body = asyncio.run(handle_request(payload, ResearchPipeline(settings=settings)))
    print(json.dumps(body, indent=2, default=str))
    return 0 if status == 200 else 1


if __name__ == "__main__":
    sys.exit(main())
