"""Keyword-based intent classification for free-text requests."""

import re

from autodev.config.schema import IntentConfig
from autodev.orchestration.models import Intent


class IntentClassifier:
    """Maps a request to an Intent using ordered keyword rules.

    Each axis is evaluated independently and the first matching rule wins.
    Matching is case-insensitive substring matching, so "rebuild" counts as
    "build". Unmatched axes fall back to defaults; classification never fails.
    """

    def __init__(self, config: IntentConfig | None = None) -> None:
        self.config = config or IntentConfig()
        self._category_patterns = self._compile(self.config.categories)
        self._scope_patterns = self._compile(self.config.scopes)
        self._urgent_pattern = self._pattern(self.config.urgent_keywords)
        self._high_pattern = self._pattern(self.config.high_keywords)

    @staticmethod
    def _pattern(keywords: list[str]) -> re.Pattern[str] | None:
        if not keywords:
            return None
        return re.compile("|".join(re.escape(kw) for kw in keywords), re.IGNORECASE)

    def _compile(self, table: dict[str, list[str]]) -> list[tuple[str, re.Pattern[str]]]:
        """Compile keyword patterns, preserving the table's order."""
        compiled = []
        for name, keywords in table.items():
            pattern = self._pattern(keywords)
            if pattern is not None:
                compiled.append((name, pattern))
        return compiled

    def classify(self, text: str) -> Intent:
        text = text or ""
        return Intent(
            category=self.classify_category(text),
            domain=self.extract_domain(text),
            urgency=self.assess_urgency(text),
            scope=self.determine_scope(text),
            keywords=self.extract_keywords(text),
        )

    def classify_category(self, text: str) -> str:
        for category, pattern in self._category_patterns:
            if pattern.search(text):
                return category
        return "maintain"

    def assess_urgency(self, text: str) -> str:
        if self._urgent_pattern and self._urgent_pattern.search(text):
            return "critical"
        if self._high_pattern and self._high_pattern.search(text):
            return "high"
        return "medium"

    def extract_domain(self, text: str) -> str:
        lowered = text.lower()
        for domain in self.config.domains:
            if domain.lower() in lowered:
                return domain
        return "general"

    def determine_scope(self, text: str) -> str:
        for scope, pattern in self._scope_patterns:
            if pattern.search(text):
                return scope
        return "feature"

    def extract_keywords(self, text: str) -> tuple[str, ...]:
        words = [w for w in text.lower().split() if len(w) >= self.config.min_keyword_length]
        return tuple(words[: self.config.max_keywords])
