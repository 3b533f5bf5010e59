"""
Tests for the Similarity Engine

Tests tag/content similarity, the combined score and the relatedness predicate.
"""

import pytest

from intelligence.similarity import SimilarityEngine


@pytest.fixture
def engine():
    return SimilarityEngine()


class TestTagSimilarity:
    """Tests for tag overlap."""

    def test_half_overlap(self, engine, make_context):
        a = make_context('a', tags=['ai', 'research'])
        b = make_context('b', tags=['ai', 'architecture'])

        assert engine.tag_similarity(a, b) == 0.5

    def test_uses_larger_tag_set(self, engine, make_context):
        a = make_context('a', tags=['ai'])
        b = make_context('b', tags=['ai', 'api', 'react', 'nodejs'])

        assert engine.tag_similarity(a, b) == 0.25

    def test_empty_tags_score_zero(self, engine, make_context):
        a = make_context('a', tags=[])
        b = make_context('b', tags=['ai'])

        assert engine.tag_similarity(a, b) == 0.0
        assert engine.tag_similarity(a, make_context('c')) == 0.0


class TestContentSimilarity:
    """Tests for content word overlap."""

    def test_short_words_ignored(self, engine, make_context):
        a = make_context('a', content='the ai api for you')
        b = make_context('b', content='the ai api for me')

        assert engine.content_similarity(a, b) == 0.0

    def test_common_long_words(self, engine, make_context):
        a = make_context('a', content='semantic search engine')
        b = make_context('b', content='semantic search over notes today')

        # semantic, search in common; longest content has 5 tokens
        assert engine.content_similarity(a, b) == pytest.approx(2 / 5)

    def test_case_insensitive(self, engine, make_context):
        a = make_context('a', content='Research Notes')
        b = make_context('b', content='research notes')

        assert engine.content_similarity(a, b) == 1.0

    def test_empty_content_does_not_raise(self, engine, make_context):
        a = make_context('a', content='')
        b = make_context('b', content='')

        assert engine.content_similarity(a, b) == 0.0
        assert engine.score(a, b) == 0.0


class TestScore:
    """Tests for the combined score."""

    def test_documented_example(self, engine, make_context):
        a = make_context('a', tags=['ai', 'research'], content='ai research context')
        b = make_context('b', tags=['ai', 'architecture'], content='ai architecture design')

        expected = min(0.95, 0.6 * 0.5 + 0.4 * engine.content_similarity(a, b))
        assert engine.score(a, b) == pytest.approx(expected)
        assert engine.is_related(a, b)

    def test_capped_at_095(self, engine, make_context):
        a = make_context('a', tags=['ai'], content='identical content words')
        b = make_context('b', tags=['ai'], content='identical content words')

        assert engine.score(a, b) == 0.95

    def test_symmetric_and_bounded(self, engine, make_context):
        contexts = [
            make_context('a', tags=['ai', 'research'], content='research notes about memory memory'),
            make_context('b', tags=['ai'], content='memory persistence research'),
            make_context('c', tags=[], content=''),
            make_context('d', tags=['react', 'nodejs', 'api'], content='react frontend with nodejs backend'),
        ]

        for a in contexts:
            for b in contexts:
                score = engine.score(a, b)
                assert 0.0 <= score <= 0.95
                assert score == engine.score(b, a)

    def test_breakdown(self, engine, make_context):
        a = make_context('a', tags=['ai'], content='semantic search')
        b = make_context('b', tags=['ai', 'api'], content='semantic ranking')

        breakdown = engine.breakdown(a, b)

        assert breakdown.common_tags == frozenset({'ai'})
        assert breakdown.common_words == frozenset({'semantic'})
        assert breakdown.score == engine.score(a, b)
        assert breakdown.to_dict()['commonTags'] == ['ai']


class TestRelatedness:
    """Tests for the relatedness predicate."""

    def test_shared_tag_is_related(self, engine, make_context):
        a = make_context('a', tags=['ai'], content='')
        b = make_context('b', tags=['ai'], content='')

        assert engine.is_related(a, b)

    def test_needs_more_than_two_common_words(self, engine, make_context):
        two = make_context('a', content='memory persistence layer')
        other = make_context('b', content='memory persistence engine')
        three = make_context('c', content='memory persistence engine design')

        assert not engine.is_related(two, other)
        assert engine.is_related(other, three)

    def test_find_related_excludes_self(self, engine, make_context):
        a = make_context('a', tags=['ai'])
        b = make_context('b', tags=['ai'])
        c = make_context('c', tags=['react'])

        related = engine.find_related(a, [a, b, c])

        assert [r.id for r in related] == ['b']


class TestKeywordExtraction:

    def test_extracts_known_keywords(self, engine):
        tags = engine.extract_keywords('Designing a React platform with an API layer')

        assert 'react' in tags
        assert 'platform' in tags
        assert 'api' in tags
        assert 'typescript' not in tags

    def test_empty_content(self, engine):
        assert engine.extract_keywords('') == []
