"""
Response Generator for the Estate Assistant chat widget.

This module maps a user utterance to a canned assistant reply using an ordered
list of keyword-category rules, falling back to a random generic reply when no
rule matches.
"""

from dataclasses import dataclass
import logging
import random
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class ResponseMatch:
    """
    Result of matching an utterance against the response rules.

    Attributes:
        category: Category of the rule that fired, or "fallback"
        response: The reply text
        trigger: The trigger substring that fired, None for fallback
    """
    category: str
    response: str
    trigger: Optional[str] = None


class ResponseGenerator:
    """
    Keyword-triggered canned response generator.

    Rules are evaluated in order and the first rule with a trigger substring
    present in the lower-cased input wins. Input that matches nothing gets a
    reply drawn uniformly from FALLBACK_RESPONSES using the injected RNG.
    """

    # Categories
    INVESTMENT = "investment"
    PROPERTY = "property"
    MARKET = "market"
    NEIGHBORHOOD = "neighborhood"
    FINANCING = "financing"
    FALLBACK = "fallback"

    INVESTMENT_RESPONSE = (
        "Great question about investment opportunities! 📈\n"
        "\n"
        "**Current Market Trends:**\n"
        "• Average ROI: 12-15% annually\n"
        "• Best performing areas: Tech corridors, university districts\n"
        "• Rental yield: 8-12% in prime locations\n"
        "\n"
        "**Investment Tips:**\n"
        "• Focus on growing neighborhoods\n"
        "• Consider properties near transportation hubs\n"
        "• Factor in renovation costs\n"
        "\n"
        "Would you like a detailed analysis of any specific area?"
    )

    PROPERTY_RESPONSE = (
        "I'd be happy to help you find properties! Based on current market data, "
        "here are some recommendations:\n"
        "\n"
        "📍 **Prime Locations Available:**\n"
        "• Downtown area: $450,000 - $750,000\n"
        "• Suburban neighborhoods: $320,000 - $520,000\n"
        "• Waterfront properties: $680,000 - $1.2M\n"
        "\n"
        "What's your preferred location, budget range, and property type?"
    )

    MARKET_RESPONSE = (
        "Here's the latest market analysis: 📊\n"
        "\n"
        "**Current Market Status:**\n"
        "• Property values increased 8.5% this year\n"
        "• Average days on market: 23 days\n"
        "• Inventory levels: Moderate (3.2 months supply)\n"
        "\n"
        "**Price Trends:**\n"
        "• Single family homes: +7.2%\n"
        "• Condos: +9.1%\n"
        "• Luxury properties: +5.8%\n"
        "\n"
        "**Forecast:** Continued steady growth expected through Q4. "
        "Best time to buy or sell?"
    )

    NEIGHBORHOOD_RESPONSE = (
        "I can help you explore different areas! 🏘️\n"
        "\n"
        "**Popular Neighborhoods:**\n"
        "• **Downtown Core:** Urban lifestyle, high appreciation\n"
        "• **Green Valley:** Family-friendly, excellent schools\n"
        "• **Riverside District:** Luxury homes, scenic views\n"
        "• **Tech Hub:** New developments, young professionals\n"
        "\n"
        "**Factors to Consider:**\n"
        "• Commute times\n"
        "• School ratings\n"
        "• Amenities nearby\n"
        "• Future development plans\n"
        "\n"
        "Which area interests you most?"
    )

    FINANCING_RESPONSE = (
        "Let me help you understand financing options: 💰\n"
        "\n"
        "**Current Rates (as of today):**\n"
        "• 30-year fixed: 7.2% - 7.8%\n"
        "• 15-year fixed: 6.8% - 7.4%\n"
        "• FHA loans: 6.9% - 7.5%\n"
        "• VA loans: 6.8% - 7.3%\n"
        "\n"
        "**Pre-qualification Tips:**\n"
        "• Credit score 740+ for best rates\n"
        "• Debt-to-income ratio under 43%\n"
        "• Down payment: 10-20% conventional\n"
        "\n"
        "Would you like me to connect you with our mortgage specialist?"
    )

    # Ordered (category, triggers, response); first match wins.
    # Triggers are tuples so the reported trigger is stable across runs.
    RULES = (
        (INVESTMENT, ("invest", "roi", "return"), INVESTMENT_RESPONSE),
        (PROPERTY, ("property", "house", "apartment"), PROPERTY_RESPONSE),
        (MARKET, ("market", "price", "trend"), MARKET_RESPONSE),
        (NEIGHBORHOOD, ("location", "area", "neighborhood"), NEIGHBORHOOD_RESPONSE),
        (FINANCING, ("loan", "mortgage", "finance"), FINANCING_RESPONSE),
    )

    FALLBACK_RESPONSES = (
        "I understand you're interested in real estate. I can assist with property "
        "searches, market analysis, investment advice, financing options, and "
        "neighborhood information. What specific area would you like to explore?",
        "That's an interesting question! As your real estate AI assistant, I have "
        "access to current market data, property listings, and investment insights. "
        "Could you provide more details about what you're looking for?",
        "I'm here to help with all your real estate needs! Whether you're buying, "
        "selling, investing, or just researching, I can provide personalized "
        "recommendations. What's your main goal right now?",
        "Great question! I specialize in real estate market analysis, property "
        "valuations, investment opportunities, and area insights. Let me know what "
        "specific information would be most valuable to you.",
        "I can help you navigate the real estate market effectively. From property "
        "searches to market trends and investment strategies - what aspect "
        "interests you most?",
    )

    def __init__(self, rng: Optional[random.Random] = None):
        """
        Initialize the response generator.

        Args:
            rng: Random source for fallback selection. Pass a seeded
                random.Random for reproducible replies.
        """
        self.rng = rng if rng is not None else random.Random()

    def match(self, text: str) -> ResponseMatch:
        """
        Match an utterance against the ordered rules.

        Matching is a case-insensitive substring test; punctuation and
        diacritics are left untouched.

        Args:
            text: User utterance

        Returns:
            ResponseMatch with the category, reply text and trigger
        """
        text_lower = text.lower()

        for category, triggers, response in self.RULES:
            trigger = self._find_trigger(text_lower, triggers)
            if trigger is not None:
                logger.info(f"Response rule: {category} (trigger '{trigger}') - {text[:50]}")
                return ResponseMatch(category=category, response=response, trigger=trigger)

        response = self.rng.choice(self.FALLBACK_RESPONSES)
        logger.info(f"Response rule: {self.FALLBACK} - {text[:50]}")
        return ResponseMatch(category=self.FALLBACK, response=response, trigger=None)

    def generate(self, text: str) -> str:
        """
        Produce the assistant reply for an utterance.

        Never raises and never returns an empty string.

        Args:
            text: User utterance

        Returns:
            Reply text
        """
        return self.match(text).response

    @staticmethod
    def _find_trigger(text_lower: str, triggers) -> Optional[str]:
        """Return the first trigger contained in the text, or None."""
        for trigger in triggers:
            if trigger in text_lower:
                return trigger
        return None
