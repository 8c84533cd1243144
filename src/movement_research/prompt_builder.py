"""Build prompts for the strategy, causality and follow-up reasoning calls."""

from __future__ import annotations

import datetime
import json

from movement_research.models.article import Article
from movement_research.models.causality import CausalityReport
from movement_research.models.follow_up import SOURCE_CATEGORIES
from movement_research.models.ohlc import OHLC, PriceMovement
from movement_research.models.strategy import ResearchStrategy


def truncate(text: str, max_chars: int) -> str:
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "..."


class PromptBuilder:
    def build_strategy_prompt(
        self,
        symbol: str,
        date: datetime.date,
        ohlc: OHLC,
        movement: PriceMovement,
    ) -> str:
        """Describe the day's move and ask for hypotheses, keywords and a lookback window."""
        parts = []
        parts.append(
            f"Investigate why {symbol} moved {movement.direction} "
            f"{abs(movement.change_percent):.2f}% on {date.isoformat()}."
        )
        parts.append("")

        # --- Price Action ---
        parts.append("<price_action>")
        parts.append(f"Symbol: {symbol}")
        parts.append(f"Price: {ohlc.open} -> {ohlc.close} ({movement.change_percent:.2f}%)")
        parts.append(f"Volume: {ohlc.volume:,.0f} shares ({movement.volume_ratio:.2f}x normal)")
        parts.append(f"High/Low: {ohlc.high}/{ohlc.low}")
        parts.append(f"Significance: {movement.significance}")
        parts.append("</price_action>")

        # --- Tasks ---
        parts.append("<tasks>")
        parts.append("1. Hypothesize what might have caused this movement")
        parts.append("2. Decide which keywords to search news for")
        parts.append("3. Choose how many days back to search")
        parts.append("4. Assess your confidence in finding the cause")
        parts.append("")
        parts.append("Consider whether this is a normal daily fluctuation or a significant move,")
        parts.append("whether the volume suggests news-driven activity, and which catalysts")
        parts.append("typically produce a move of this size for this stock or its sector.")
        parts.append("</tasks>")

        parts.append("<output_format>")
        parts.append("Respond with a single JSON object:")
        parts.append(json.dumps({
            "researchHypotheses": ["hypothesis1", "hypothesis2", "hypothesis3"],
            "searchKeywords": ["keyword1", "keyword2", "keyword3"],
            "timeframeDays": 3,
            "confidenceLevel": "high|medium|low",
            "reasoning": "explanation of strategy",
        }, indent=2))
        parts.append("</output_format>")

        return "\n".join(parts)

    def build_causality_prompt(
        self,
        symbol: str,
        movement: PriceMovement,
        strategy: ResearchStrategy,
        articles: list[Article],
        summary_max_chars: int = 250,
    ) -> str:
        """Enumerate the candidate articles and ask for a per-article causality score."""
        parts = []
        parts.append(
            f"You found {len(articles)} news articles. Analyze whether any could realistically "
            f"explain the {movement.change_percent:.2f}% movement in {symbol}."
        )
        parts.append("")

        parts.append("<hypotheses>")
        for hypothesis in strategy.hypotheses:
            parts.append(f"  - {hypothesis}")
        parts.append("</hypotheses>")

        # --- Articles, sorted by relevance ---
        parts.append("<articles>")
        for i, article in enumerate(articles, start=1):
            parts.append(f'{i}. "{article.title}"')
            parts.append(f"   Source: {article.source} | Published: {article.published_at}")
            parts.append(
                f"   Overall Sentiment: {article.sentiment_label} (Score: {article.sentiment_score})"
            )
            parts.append(f"   Relevance Score: {article.relevance}")
            if article.symbol_sentiment is not None:
                parts.append(
                    f"   {symbol} Specific Sentiment: {article.symbol_sentiment.label} "
                    f"({article.symbol_sentiment.score})"
                )
            parts.append(f"   Summary: {truncate(article.summary, summary_max_chars)}")
            parts.append(f"   URL: {article.url or 'N/A'}")
        parts.append("</articles>")

        parts.append("<tasks>")
        parts.append(f"For each article: could this news realistically move the stock {abs(movement.change_percent):.2f}%?")
        parts.append("Does the timing make sense? Is the source credible and market-moving?")
        parts.append("Are there gaps in the explanation?")
        parts.append("</tasks>")

        parts.append("<output_format>")
        parts.append("Respond with a single JSON object:")
        parts.append(json.dumps({
            "causalAnalysis": [
                {
                    "articleTitle": "Article Title",
                    "causalityScore": 85,
                    "reasoning": "Why this could cause the movement",
                    "timelineMatch": "perfect|good|poor",
                    "marketImpactPotential": "market-moving|moderate|minimal",
                },
            ],
            "overallConfidence": 78,
            "alternativeTheories": ["Theory 1", "Theory 2"],
        }, indent=2))
        parts.append("</output_format>")

        return "\n".join(parts)

    def build_follow_up_prompt(self, movement: PriceMovement, causality: CausalityReport) -> str:
        """Ask what additional evidence would raise confidence in the explanation."""
        parts = []
        parts.append(
            f"Your confidence is only {causality.overall_confidence}% in explaining this "
            f"{movement.change_percent:.2f}% movement."
        )
        parts.append("")

        parts.append("<current_findings>")
        parts.append(json.dumps(causality.model_dump(mode="json", by_alias=True), indent=2))
        parts.append("</current_findings>")

        parts.append("<tasks>")
        parts.append("1. Do you need more specific data sources?")
        parts.append("2. What exactly should be searched for?")
        parts.append("3. Why is the current data insufficient?")
        parts.append(f"Choose source categories only from: {', '.join(SOURCE_CATEGORIES)}")
        parts.append("</tasks>")

        parts.append("<output_format>")
        parts.append("Respond with a single JSON object:")
        parts.append(json.dumps({
            "needsMoreData": True,
            "specificQueries": ["specific search query 1", "query 2"],
            "reasoning": "Why more data is needed",
            "searchSources": ["earnings", "analyst-reports"],
        }, indent=2))
        parts.append("</output_format>")

        return "\n".join(parts)

    def build_narrative_prompt(
        self,
        symbol: str,
        date: datetime.date,
        ohlc: OHLC,
        movement: PriceMovement,
    ) -> str:
        """Ask for a short prose read of the day's price action and volume."""
        direction = "UP" if movement.is_up else "DOWN"
        parts = []
        parts.append(f"Analyze the following stock data for {symbol} on {date.isoformat()}.")
        parts.append("")

        parts.append("<price_data>")
        parts.append(f"Opening Price: ${ohlc.open}")
        parts.append(f"Highest Price: ${ohlc.high}")
        parts.append(f"Lowest Price: ${ohlc.low}")
        parts.append(f"Closing Price: ${ohlc.close}")
        parts.append(f"Volume: {ohlc.volume:,.0f} shares")
        parts.append(f"Price Movement: {direction} {abs(movement.change_percent):.2f}%")
        parts.append("</price_data>")

        parts.append("<tasks>")
        parts.append("1. A brief analysis of this trading day's price action")
        parts.append("2. What the volume might indicate")
        parts.append("3. Possible reasons for this price movement (general market factors)")
        parts.append("4. Key technical observations")
        parts.append("</tasks>")

        parts.append("Keep the response concise but insightful, around 200-300 words,")
        parts.append("in a professional but accessible tone.")

        return "\n".join(parts)
