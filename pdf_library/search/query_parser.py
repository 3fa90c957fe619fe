"""
Query parser for FTS5 full-text search.

Turns user input into FTS5 MATCH expressions. Every term is emitted as a
quoted FTS5 string, so FTS5 runs it through the tokenizer that indexed
the documents and no user character can act as syntax.

Basic mode joins the words with OR. Advanced mode also understands
OR, AND, NOT (in any case), "quoted phrases" and prefix* terms.
"""

import re
from typing import List, Optional

from ..core import get_logger

logger = get_logger(__name__)


WORD_PATTERN = re.compile(r"\w+")
ADVANCED_TOKEN = re.compile(r'"(?P<phrase>[^"]*)"(?P<phrase_star>\*?)|(?P<bare>[^\s"]+)')
OPERATORS = ("OR", "AND", "NOT")


class QueryParser:
    """Builds FTS5 MATCH expressions from user queries."""

    def tokenize(self, query: Optional[str]) -> List[str]:
        """
        Split raw input into words.

        Each word is later re-tokenized by FTS5 inside its quotes, so it
        goes through the same tokenizer rules as the indexed text.

        Args:
            query: Raw user input.

        Returns:
            Words in input order, duplicates removed.
        """
        if not query:
            return []

        seen = []
        for word in WORD_PATTERN.findall(query):
            # A bare run of underscores holds no index token.
            if word not in seen and any(char.isalnum() for char in word):
                seen.append(word)
        return seen

    def parse(self, query: Optional[str]) -> str:
        """
        Parse query in basic mode.

        Returns:
            Expression matching documents that contain any word, or an
            empty string if the input has no words.
        """
        return " OR ".join(self._quote(word) for word in self.tokenize(query))

    def parse_advanced(self, query: Optional[str]) -> str:
        """
        Parse query in advanced mode.

        A bare term made of several words ("e-mail") becomes a phrase.
        Operators are passed through as typed, so a dangling operator
        reaches FTS5 and is reported there as a syntax error.

        Returns:
            The expression, or an empty string if nothing searchable remains.
        """
        if not query:
            return ""

        parts = []
        for match in ADVANCED_TOKEN.finditer(query):
            if match.group("bare") is not None:
                part = self._bare_term(match.group("bare"))
            else:
                part = self._phrase(match.group("phrase"), bool(match.group("phrase_star")))

            if part:
                parts.append(part)

        expression = " ".join(parts)
        logger.debug(f"Advanced query {query!r} -> {expression!r}")
        return expression

    def _bare_term(self, token: str) -> str:
        if token.upper() in OPERATORS:
            return token.upper()
        return self._phrase(token.rstrip("*"), token.endswith("*"))

    def _phrase(self, text: str, prefix: bool) -> str:
        words = WORD_PATTERN.findall(text)
        if not words:
            return ""
        return self._quote(" ".join(words)) + ("*" if prefix else "")

    @staticmethod
    def _quote(text: str) -> str:
        return f'"{text}"'


if __name__ == "__main__":
    parser = QueryParser()

    print("=== Basic Mode ===")
    for q in ["quick fox", "règlement (EU) 2024/123", "zzz_no_match", "   "]:
        print(f"  '{q}' -> '{parser.parse(q)}'")

    print("\n=== Advanced Mode ===")
    for q in ["fox or turtle", "fox NOT slow", '"quick fox"', "tur*", "e-mail AND spam"]:
        print(f"  '{q}' -> '{parser.parse_advanced(q)}'")
