"""
Tests for the Insight Generator

Covers generation rules, merging with seeded insights, filters and the
query surface over the seeded set.
"""

from datetime import timedelta

import pytest

from core.errors import NotFoundError
from core.models import Insight, InsightType
from intelligence.insights import InsightGenerator
from store import ContextStore

CROSS_CONTEXT_TITLE = 'Multi-Context Pattern Detected'
RECOMMENDATION_TITLE = 'Context Organization Recommendation'


class TestGenerate:
    """Tests for InsightGenerator.generate."""

    @pytest.fixture
    def generator(self, triangle_store, clock):
        return InsightGenerator(triangle_store, clock=clock)

    def test_cross_context_pattern(self, generator):
        insights = generator.generate(['1', '2', '3'])

        cross = [i for i in insights if i.title == CROSS_CONTEXT_TITLE]
        assert len(cross) == 1
        assert cross[0].type == InsightType.PATTERN
        assert cross[0].confidence == 0.75
        assert list(cross[0].related_contexts) == ['1', '2', '3']

    def test_related_work_pattern_per_anchor(self, generator):
        insights = generator.generate(['1', '2', '3'])

        related_work = [i for i in insights if i.title == 'Related Work Pattern']
        assert len(related_work) == 3
        for insight in related_work:
            # two related contexts each: min(0.9, 0.6 + 0.2)
            assert insight.confidence == 0.8
            assert insight.related_contexts[0] == insight.metadata['anchorId']
            assert len(insight.related_contexts) == 3

    def test_sorted_by_confidence(self, generator):
        insights = generator.generate(['1', '2', '3'])
        confidences = [i.confidence for i in insights]

        assert confidences == sorted(confidences, reverse=True)

    def test_recommendation_for_non_empty_selection(self, generator):
        insights = generator.generate(['1'])

        recs = [i for i in insights if i.type == InsightType.RECOMMENDATION]
        assert len(recs) == 1
        assert recs[0].title == RECOMMENDATION_TITLE
        assert recs[0].confidence == 0.75
        assert list(recs[0].related_contexts) == ['1']

    def test_no_cross_context_pattern_below_three(self, generator):
        insights = generator.generate(['1', '2'])

        assert not [i for i in insights if i.title == CROSS_CONTEXT_TITLE]

    def test_empty_selection(self, generator, triangle_store):
        insights = generator.generate([])

        assert insights == []
        assert triangle_store.stats().total_insights == 0

    def test_unknown_ids_dropped(self, generator):
        insights = generator.generate(['missing', 'also-missing'])

        # only the selection-level recommendation survives
        assert [i.type for i in insights] == [InsightType.RECOMMENDATION]
        assert list(insights[0].related_contexts) == ['missing', 'also-missing']

    def test_duplicates_preserved_in_selection(self, generator):
        insights = generator.generate(['1', '1', '2'])

        cross = [i for i in insights if i.title == CROSS_CONTEXT_TITLE]
        assert list(cross[0].related_contexts) == ['1', '1', '2']

    def test_generated_insights_are_stored(self, generator, triangle_store):
        insights = generator.generate(['1', '2', '3'])

        stored_ids = {i.id for i in triangle_store.get_insights()}
        assert {i.id for i in insights} <= stored_ids

    def test_type_filter(self, generator):
        insights = generator.generate(['1', '2', '3'], type='recommendation')

        assert [i.type for i in insights] == [InsightType.RECOMMENDATION]

    def test_min_confidence_filter(self, generator):
        insights = generator.generate(['1', '2', '3'], min_confidence=0.8)

        assert insights
        assert all(i.confidence >= 0.8 for i in insights)

    def test_confidences_in_range(self, generator):
        for insight in generator.generate(['1', '2', '3', '1', '2', '3', '1']):
            assert 0.0 <= insight.confidence <= 1.0

    def test_cross_context_confidence_capped(self, generator):
        ids = [str(n) for n in range(10)]
        cross = [i for i in generator.generate(ids) if i.title == CROSS_CONTEXT_TITLE]

        assert cross[0].confidence == 0.9


class TestTrend:
    """Tests for the recent-activity trend rule."""

    def test_recent_related_context_triggers_trend(self, make_context, fixed_now, clock):
        store = ContextStore([
            make_context('a', tags=['ai', 'research', 'memory', 'notes'], timestamp=fixed_now - timedelta(days=3)),
            make_context('b', tags=['ai'], timestamp=fixed_now - timedelta(hours=2)),
            make_context('c', tags=['react'], timestamp=fixed_now - timedelta(hours=1)),
        ])
        generator = InsightGenerator(store, clock=clock)

        trends = [i for i in generator.generate(['a']) if i.type == InsightType.TREND]

        assert len(trends) == 1
        assert trends[0].confidence == 0.75
        assert list(trends[0].related_contexts) == ['a', 'b']
        assert 'ai, research, memory' in trends[0].description
        assert 'notes' not in trends[0].description

    def test_old_related_contexts_no_trend(self, triangle_store, clock):
        generator = InsightGenerator(triangle_store, clock=clock)

        assert not [i for i in generator.generate(['1']) if i.type == InsightType.TREND]


class TestMergeWithSeed:
    """Tests for merging seeded insights into generation results."""

    def test_seeded_insights_merged(self, seeded_store):
        generator = InsightGenerator(seeded_store)

        ids = [i.id for i in generator.generate(['4'])]

        # insight-2, insight-3 and insight-5 mention context 4
        assert {'insight-2', 'insight-3', 'insight-5'} <= set(ids)
        assert 'insight-1' not in ids
        assert 'insight-4' not in ids

    def test_merged_insights_respect_filters(self, seeded_store):
        generator = InsightGenerator(seeded_store)

        insights = generator.generate(['1', '2'], type='trend', min_confidence=0.7)

        assert [i.id for i in insights] == ['insight-2']

    def test_ties_keep_seed_order(self, fixed_now):
        store = ContextStore(insights=[
            Insight('s1', 'First', 'd', InsightType.CONNECTION, 0.5, ('9',), fixed_now),
            Insight('s2', 'Second', 'd', InsightType.CONNECTION, 0.5, ('9',), fixed_now),
        ])
        generator = InsightGenerator(store)

        insights = generator.generate(['9'], min_confidence=0.0)
        same = [i.title for i in insights if i.confidence == 0.5]

        assert same == ['First', 'Second']

    def test_repeat_generate_does_not_merge_earlier_results(self, triangle_store, clock):
        generator = InsightGenerator(triangle_store, clock=clock)

        first = generator.generate(['1', '2', '3'])
        second = generator.generate(['1', '2', '3'])

        assert len(second) == len(first)
        assert [i.title for i in second].count(CROSS_CONTEXT_TITLE) == 1
        assert [i.title for i in second].count(RECOMMENDATION_TITLE) == 1
        assert not {i.id for i in first} & {i.id for i in second}
        # both runs are still stored
        assert len(triangle_store.get_insights()) == len(first) + len(second)

    def test_repeat_generate_over_seed(self, seeded_store):
        generator = InsightGenerator(seeded_store)

        seed_ids = {i.id for i in seeded_store.get_seed_insights()}

        first = generator.generate(['2', '4'])
        second = generator.generate(['2', '4'])

        assert len(second) == len(first)
        assert [i.id for i in second if i.id in seed_ids] == [
            i.id for i in first if i.id in seed_ids
        ]

    def test_added_insights_not_merged(self, seeded_store):
        generator = InsightGenerator(seeded_store)
        manual = generator.add_insight('Manual', 'd', 'connection', 0.95, ['4'])

        insights = generator.generate(['4'])

        assert manual.id not in {i.id for i in insights}
        assert manual.id in {i.id for i in generator.get_all_insights()}


class TestQueries:
    """Tests for the query surface over the seeded set."""

    @pytest.fixture
    def generator(self, seeded_store):
        return InsightGenerator(seeded_store)

    def test_by_confidence(self, generator):
        insights = generator.get_insights_by_confidence(0.9)

        assert [i.id for i in insights] == ['insight-1']
        assert all(i.confidence >= 0.9 for i in insights)

    def test_by_confidence_inclusive_and_sorted(self, generator):
        insights = generator.get_insights_by_confidence(0.85)

        assert [i.confidence for i in insights] == [0.94, 0.89, 0.87, 0.85]

    def test_by_type(self, generator):
        patterns = generator.get_insights_by_type(InsightType.PATTERN)

        assert [i.id for i in patterns] == ['insight-1', 'insight-3']

    def test_top_insights(self, generator):
        top = generator.get_top_insights(3)

        assert len(top) == 3
        assert [i.confidence for i in top] == [0.94, 0.89, 0.87]

    def test_top_insights_default_and_overflow(self, generator):
        assert len(generator.get_top_insights()) == 5
        assert len(generator.get_top_insights(50)) == 5

    def test_get_insight(self, generator):
        assert generator.get_insight('insight-4').title == 'Collaborative Development Workflow'

    def test_get_insight_missing(self, generator):
        with pytest.raises(NotFoundError):
            generator.get_insight('insight-404')

    def test_add_insight(self, generator):
        created = generator.add_insight(
            'Manual', 'Added by hand', InsightType.CONNECTION, 0.6, ['1'], {'source': 'user'}
        )

        assert generator.get_insight(created.id).metadata == {'source': 'user'}
        assert len(generator.get_all_insights()) == 6
