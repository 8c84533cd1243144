"""Unit tests for the request handler and command-line entry point."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest
import structlog

from movement_research.config import Settings
from movement_research.main import (
    build_parser,
    configure_logging,
    handle_narrative_request,
    handle_request,
    main,
    payload_from_args,
)
from movement_research.models.article import Article
from movement_research.narrative_analysis import NarrativeAnalyst
from movement_research.pipeline import ResearchPipeline


@pytest.fixture
def payload():
    return {
        "symbol": "AAPL",
        "date": "2024-10-11",
        "ohlcData": {"open": 150.00, "high": 158.25, "low": 149.50, "close": 156.80, "volume": 85000000},
    }


@pytest.fixture
def pipeline(settings, defaults, mock_reasoning, mock_news):
    return ResearchPipeline(settings=settings, defaults=defaults, reasoning=mock_reasoning, news_client=mock_news)


# ---------------------------------------------------------------------------
# handle_request()
# ---------------------------------------------------------------------------


class TestHandleRequest:
    async def test_success_response_shape(self, pipeline, mock_reasoning, payload, strategy_json, causality_json):
        mock_reasoning.complete = AsyncMock(side_effect=[strategy_json, causality_json(85)])

        status, body = await handle_request(payload, pipeline)

        assert status == 200
        assert body["agent"] == "agentic-news-research"
        assert body["symbol"] == "AAPL"
        assert body["date"] == "2024-10-11"
        assert body["priceMovement"]["significance"] == "major"
        assert body["aiResearchStrategy"]["timeframeDays"] == 2
        assert body["newsArticlesFound"] == 1
        assert body["aiCausalityAnalysis"]["overallConfidence"] == 85
        assert "aiAdditionalResearchRequest" not in body
        assert body["metadata"]["status"] == "high-confidence"
        assert body["metadata"]["confidenceScore"] == 85
        json.dumps(body)

    async def test_raw_news_capped_at_five(self, pipeline, mock_reasoning, mock_news, payload,
                                           strategy_json, causality_json):
        mock_news.search.return_value = [
            Article(title=f"Story {i}", summary="s", relevance=1 - i / 10) for i in range(7)
        ]
        mock_reasoning.complete = AsyncMock(side_effect=[strategy_json, causality_json(90)])

        _, body = await handle_request(payload, pipeline)

        assert body["newsArticlesFound"] == 7
        assert [a["title"] for a in body["rawNewsData"]] == [f"Story {i}" for i in range(5)]

    async def test_configuration_error_is_500(self, defaults, mock_reasoning, mock_news, payload):
        pipeline = ResearchPipeline(
            settings=Settings(ANTHROPIC_API_KEY=""), defaults=defaults,
            reasoning=mock_reasoning, news_client=mock_news,
        )

        status, body = await handle_request(payload, pipeline)

        assert status == 500
        assert body["error"] == "Agentic news research failed"
        assert "ANTHROPIC_API_KEY" in body["details"]

    @pytest.mark.parametrize(
        "broken",
        [
            {"symbol": "AAPL", "date": "2024-10-11"},
            {"symbol": "AAPL", "date": "not-a-date", "ohlc": {"open": 1, "high": 1, "low": 1, "close": 1, "volume": 1}},
            {"symbol": "AAPL", "date": "2024-10-11", "ohlc": {"open": 0, "high": 1, "low": 1, "close": 1, "volume": 1}},
        ],
    )
    async def test_invalid_request_is_400(self, pipeline, mock_reasoning, broken):
        status, body = await handle_request(broken, pipeline)
        assert status == 400
        assert body["error"] == "Invalid research request"
        mock_reasoning.complete.assert_not_called()


# ---------------------------------------------------------------------------
# handle_narrative_request()
# ---------------------------------------------------------------------------


@pytest.fixture
def analyst(settings, defaults, mock_reasoning):
    return NarrativeAnalyst(settings=settings, defaults=defaults, reasoning=mock_reasoning)


class TestHandleNarrativeRequest:
    async def test_success_response_shape(self, analyst, mock_reasoning, payload):
        mock_reasoning.complete = AsyncMock(return_value="  AAPL closed strongly higher on heavy volume.\n")

        status, body = await handle_narrative_request(payload, analyst)

        assert status == 200
        assert set(body) == {"symbol", "date", "analysis", "ohlcData", "metadata"}
        assert body["analysis"] == "AAPL closed strongly higher on heavy volume."
        assert body["ohlcData"]["close"] == 156.80
        assert body["metadata"]["priceChange"] == pytest.approx(6.80)
        assert body["metadata"]["priceChangePercent"] == pytest.approx(4.5333, abs=1e-3)
        assert body["metadata"]["dayRange"] == pytest.approx(8.75)
        assert body["metadata"]["isPositiveDay"] is True
        json.dumps(body)

    async def test_reasoning_failure_gives_empty_analysis(self, analyst, payload):
        status, body = await handle_narrative_request(payload, analyst)

        assert status == 200
        assert body["analysis"] == ""

    async def test_configuration_error_is_500(self, defaults, mock_reasoning, payload):
        analyst = NarrativeAnalyst(settings=Settings(ANTHROPIC_API_KEY=""), defaults=defaults, reasoning=mock_reasoning)

        status, body = await handle_narrative_request(payload, analyst)

        assert status == 500
        assert body["error"] == "Failed to generate AI analysis"
        mock_reasoning.complete.assert_not_called()

    async def test_invalid_request_is_400(self, analyst, mock_reasoning):
        status, body = await handle_narrative_request({"symbol": "AAPL"}, analyst)

        assert status == 400
        assert body["error"] == "Invalid research request"
        mock_reasoning.complete.assert_not_called()


# ---------------------------------------------------------------------------
# Command line
# ---------------------------------------------------------------------------


class TestCommandLine:
    def test_payload_from_flags(self):
        args = build_parser().parse_args([
            "research",
            "--symbol", "AAPL", "--date", "2024-10-11",
            "--open", "150", "--high", "158.25", "--low", "149.5", "--close", "156.8", "--volume", "85000000",
        ])
        payload = payload_from_args(args)
        assert payload["symbol"] == "AAPL"
        assert payload["ohlc"]["close"] == 156.8

    def test_payload_from_file(self, tmp_path, payload):
        path = tmp_path / "request.json"
        path.write_text(json.dumps(payload))
        args = build_parser().parse_args(["research", "--request", str(path)])
        assert payload_from_args(args) == payload

    def test_main_prints_error_without_key(self, tmp_path, payload, capsys, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "")
        monkeypatch.setenv("ALPHA_VANTAGE_API_KEY", "")
        path = tmp_path / "request.json"
        path.write_text(json.dumps(payload))

        try:
            exit_code = main(["research", "--request", str(path)])
        finally:
            structlog.reset_defaults()

        assert exit_code == 1
        body = json.loads(capsys.readouterr().out)
        assert body["error"] == "Agentic news research failed"

    def test_subcommand_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--symbol", "AAPL"])

    def test_narrative_subcommand(self, tmp_path, payload):
        path = tmp_path / "request.json"
        path.write_text(json.dumps(payload))
        args = build_parser().parse_args(["narrative", "--request", str(path)])
        assert args.command == "narrative"
        assert payload_from_args(args) == payload

    def test_main_narrative_prints_error_without_key(self, tmp_path, payload, capsys, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "")
        path = tmp_path / "request.json"
        path.write_text(json.dumps(payload))

        try:
            exit_code = main(["narrative", "--request", str(path)])
        finally:
            structlog.reset_defaults()

        assert exit_code == 1
        body = json.loads(capsys.readouterr().out)
        assert body["error"] == "Failed to generate AI analysis"


# ---------------------------------------------------------------------------
# configure_logging()
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    @pytest.mark.parametrize("level", ["DEBUG", "info", "WARNING", "VERBOSE", ""])
    def test_any_level_name_configures(self, level):
        try:
            configure_logging(level)
            structlog.get_logger().info("configured")
        finally:
            structlog.reset_defaults()
