"""
Context Bridge Similarity Engine

Lexical similarity between two contexts:
- Tag overlap
- Content word overlap (words longer than three characters)
- Weighted combined score, capped at 0.95
- A cheap relatedness predicate that gates pair generation

Usage:
    from intelligence.similarity import SimilarityEngine

    engine = SimilarityEngine()
    if engine.is_related(a, b):
        strength = engine.score(a, b)
"""

from dataclasses import dataclass
from typing import Iterable, List, Set

from core.models import Context


@dataclass(frozen=True)
class SimilarityBreakdown:
    """Component scores for one pair of contexts."""
    tag_similarity: float
    content_similarity: float
    common_tags: frozenset
    common_words: frozenset
    score: float

    def to_dict(self) -> dict:
        return {
            'tagSimilarity': self.tag_similarity,
            'contentSimilarity': self.content_similarity,
            'commonTags': sorted(self.common_tags),
            'commonWords': sorted(self.common_words),
            'score': self.score,
        }


class SimilarityEngine:
    """
    Stateless pairwise scorer.

    All methods are symmetric in their two arguments and return 0 rather than
    raising when tags or content are empty.
    """

    TAG_WEIGHT = 0.6
    CONTENT_WEIGHT = 0.4
    MAX_SCORE = 0.95
    MIN_WORD_LENGTH = 4
    RELATED_MIN_COMMON_WORDS = 3

    KEYWORDS = (
        'ai', 'typescript', 'react', 'nodejs', 'api', 'integration',
        'research', 'development', 'architecture', 'platform', 'system',
    )

    @staticmethod
    def tokenize(content: str) -> List[str]:
        """Lowercased whitespace tokens."""
        return (content or '').lower().split()

    def _significant_words(self, tokens: Iterable[str]) -> Set[str]:
        return {t for t in tokens if len(t) >= self.MIN_WORD_LENGTH}

    def common_tags(self, a: Context, b: Context) -> Set[str]:
        return set(a.tags) & set(b.tags)

    def common_words(self, a: Context, b: Context) -> Set[str]:
        """Distinct content words longer than three characters found in both."""
        return (
            self._significant_words(self.tokenize(a.content))
            & self._significant_words(self.tokenize(b.content))
        )

    def tag_similarity(self, a: Context, b: Context) -> float:
        """|common tags| / max(|tags a|, |tags b|); 0 when either has no tags."""
        if not a.tags or not b.tags:
            return 0.0
        return len(self.common_tags(a, b)) / max(len(a.tags), len(b.tags))

    def content_similarity(self, a: Context, b: Context) -> float:
        """|common words| / max(token count a, token count b)."""
        longest = max(len(self.tokenize(a.content)), len(self.tokenize(b.content)))
        if longest == 0:
            return 0.0
        return len(self.common_words(a, b)) / longest

    def score(self, a: Context, b: Context) -> float:
        """Weighted tag and content similarity in [0, 0.95]."""
        combined = (
            self.TAG_WEIGHT * self.tag_similarity(a, b)
            + self.CONTENT_WEIGHT * self.content_similarity(a, b)
        )
        return min(self.MAX_SCORE, combined)

    def breakdown(self, a: Context, b: Context) -> SimilarityBreakdown:
        """All component scores for a pair, for explaining a connection."""
        return SimilarityBreakdown(
            tag_similarity=self.tag_similarity(a, b),
            content_similarity=self.content_similarity(a, b),
            common_tags=frozenset(self.common_tags(a, b)),
            common_words=frozenset(self.common_words(a, b)),
            score=self.score(a, b),
        )

    def is_related(self, a: Context, b: Context) -> bool:
        """
        True if the contexts share a tag or more than two significant words.

        Callers exclude self-comparison; this predicate does not look at ids.
        """
        if self.common_tags(a, b):
            return True
        return len(self.common_words(a, b)) >= self.RELATED_MIN_COMMON_WORDS

    def find_related(self, context: Context, candidates: Iterable[Context]) -> List[Context]:
        """Candidates related to ``context``, in candidate order, excluding itself."""
        return [
            other for other in candidates
            if other.id != context.id and self.is_related(context, other)
        ]

    def extract_keywords(self, content: str) -> List[str]:
        """Known topic keywords that occur anywhere in the content."""
        lowered = (content or '').lower()
        return [kw for kw in self.KEYWORDS if kw in lowered]
