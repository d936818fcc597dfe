"""ScriptValidator: checks a candidate script's length and structure."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from fractions import Fraction
from typing import Tuple

from .models import Verdict

logger = logging.getLogger(__name__)

MIN_LENGTH_RATIO = Fraction(7, 10)
MAX_LENGTH_RATIO = Fraction(13, 10)


def count_words(text: str) -> int:
    """Number of whitespace-delimited tokens in `text`."""

    return len(text.split())


@dataclass(frozen=True, slots=True)
class KeywordRule:
    """Passes when any non-blank line contains one of `keywords` (case-insensitive)."""

    name: str
    keywords: Tuple[str, ...]

    def matches(self, text: str) -> bool:
        for line in text.splitlines():
            lowered = line.strip().lower()
            if lowered and any(keyword in lowered for keyword in self.keywords):
                return True
        return False


INTRODUCTION_RULE = KeywordRule("introduction", ("welcome", "today", "let's"))
CONCLUSION_RULE = KeywordRule("conclusion", ("thanks", "subscribe", "comment"))


class ScriptValidator:
    """Grades scripts against a target word count and the intro/outro rules."""

    def __init__(
        self,
        *,
        introduction_rule: KeywordRule = INTRODUCTION_RULE,
        conclusion_rule: KeywordRule = CONCLUSION_RULE,
    ) -> None:
        self._introduction_rule = introduction_rule
        self._conclusion_rule = conclusion_rule

    @staticmethod
    def word_bounds(target_word_count: int) -> Tuple[Fraction, Fraction]:
        """Inclusive (min, max) word counts accepted for `target_word_count`."""

        if target_word_count <= 0:
            raise ValueError("Target word count must be positive.")
        return target_word_count * MIN_LENGTH_RATIO, target_word_count * MAX_LENGTH_RATIO

    def validate(self, text: str, target_word_count: int = 1250) -> Verdict:
        minimum, maximum = self.word_bounds(target_word_count)
        word_count = count_words(text)

        if word_count < minimum:
            verdict = Verdict(
                valid=False,
                word_count=word_count,
                feedback=f"Script is too short ({word_count} words). Target: {target_word_count} words (±30%).",
            )
        elif word_count > maximum:
            verdict = Verdict(
                valid=False,
                word_count=word_count,
                feedback=f"Script is too long ({word_count} words). Target: {target_word_count} words (±30%).",
            )
        elif not (self._introduction_rule.matches(text) and self._conclusion_rule.matches(text)):
            verdict = Verdict(
                valid=False,
                word_count=word_count,
                feedback="Script appears to be missing proper introduction or conclusion.",
            )
        else:
            verdict = Verdict(
                valid=True,
                word_count=word_count,
                feedback=f"Script validation passed. Word count: {word_count} words.",
            )

        logger.debug("Validation verdict: %s", verdict)
        return verdict
