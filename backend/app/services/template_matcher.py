"""
Template Keyword Matcher

Scores a free-text search query against the static keyword mapping table
and returns a ranked list of template ids.

Scoring, per (token x mapping x keyword):
- exact match                               -> +3 to every template of the mapping
- token inside keyword or keyword in token  -> +2
When the query yields no usable token (all tokens <= 1 char), the whole
normalised query is tested for keyword containment instead (+1).

Ids are ranked by descending score; equal scores keep discovery order.
Only the top MAX_MATCHES ids are returned.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple, TypeVar

from app.core.exceptions import ValidationError

MAX_MATCHES = 5

EXACT_MATCH_WEIGHT = 3
PARTIAL_MATCH_WEIGHT = 2
FALLBACK_MATCH_WEIGHT = 1

# Whitespace plus ASCII/full-width comma, ideographic comma and semicolons
TOKEN_SPLIT_PATTERN = re.compile(r"[\s,，、;；]+")

T = TypeVar("T")


@dataclass(frozen=True)
class KeywordMapping:
    """Association between a category, its keywords and the templates they boost"""
    category: str
    keywords: Tuple[str, ...]
    template_ids: Tuple[int, ...]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "KeywordMapping":
        return cls(
            category=str(data["category"]),
            keywords=tuple(str(k).strip().lower() for k in data["keywords"] if str(k).strip()),
            template_ids=tuple(int(i) for i in data["template_ids"]),
        )


@dataclass(frozen=True)
class MatchResult:
    ranked_template_ids: Tuple[int, ...] = ()
    matched_categories: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.ranked_template_ids


def normalize_query(query: str) -> str:
    return query.strip().lower()


def tokenize(normalized_query: str) -> List[str]:
    """Split on whitespace and delimiters, dropping single-character tokens"""
    return [token for token in TOKEN_SPLIT_PATTERN.split(normalized_query) if len(token) > 1]


class KeywordMatcher:
    """Stateless matcher over an immutable mapping table"""

    def __init__(self, mappings: Iterable[KeywordMapping]):
        self.mappings: Tuple[KeywordMapping, ...] = tuple(mappings)

    def match(self, query: str) -> MatchResult:
        if not isinstance(query, str):
            raise ValidationError("Search query must be a string", field="query")

        normalized = normalize_query(query)
        tokens = tokenize(normalized)

        scores: Dict[int, int] = {}
        categories: Dict[str, None] = {}

        def boost(mapping: KeywordMapping, weight: int) -> None:
            for template_id in mapping.template_ids:
                scores[template_id] = scores.get(template_id, 0) + weight
            categories.setdefault(mapping.category, None)

        if tokens:
            for token in tokens:
                for mapping in self.mappings:
                    for keyword in mapping.keywords:
                        if token == keyword:
                            boost(mapping, EXACT_MATCH_WEIGHT)
                        elif token in keyword or keyword in token:
                            boost(mapping, PARTIAL_MATCH_WEIGHT)
        elif normalized:
            for mapping in self.mappings:
                for keyword in mapping.keywords:
                    if keyword in normalized:
                        boost(mapping, FALLBACK_MATCH_WEIGHT)

        if not scores:
            return MatchResult()

        # sorted() is stable, so ties keep discovery order
        ranked = sorted(scores, key=lambda template_id: scores[template_id], reverse=True)
        return MatchResult(
            ranked_template_ids=tuple(ranked[:MAX_MATCHES]),
            matched_categories=tuple(categories),
        )


def rank_records(records: Iterable[T], ranked_ids: Sequence[int], key=lambda record: record.id) -> List[T]:
    """Order records fetched from storage by rank; ids storage did not return are skipped"""
    by_id = {key(record): record for record in records}
    return [by_id[template_id] for template_id in ranked_ids if template_id in by_id]
