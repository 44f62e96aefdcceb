from trustgate.services.routing.relevance import (
    CacheRelevanceScorer,
    match_query_to_cache,
    matched_sections,
)
from trustgate.services.routing.types import CacheScope
from trustgate.services.snapshot import AuthoritativeSnapshot, CachedAlert, CachedMedication


def test_matched_sections():
    assert matched_sections("Show my medications") == ["medications"]
    assert matched_sections("Hello there") == []


def test_three_sections_score_highest(full_snapshot):
    match = match_query_to_cache(
        "What medication did I take and what were my lab results last time?", full_snapshot
    )

    assert match.confidence >= 0.95
    assert match.scope == CacheScope(medications=True, labs=True, timeline=True, profile=True)


def test_one_section(full_snapshot):
    match = match_query_to_cache("Show my medications", full_snapshot)

    assert match.confidence == 0.7
    assert match.scope.sections() == ["medications", "profile"]


def test_two_sections(full_snapshot):
    match = match_query_to_cache("List my medications and upcoming appointment", full_snapshot)

    assert match.confidence == 0.85
    assert match.scope.medications and match.scope.appointment


def test_generic_question_gets_full_scope_at_low_confidence(full_snapshot):
    match = match_query_to_cache("Hello there", full_snapshot)

    assert match.confidence == 0.3
    assert match.scope == CacheScope.full()


def test_generic_question_with_empty_snapshot():
    match = match_query_to_cache("Hello there", AuthoritativeSnapshot())

    assert match.confidence == 0.0
    assert match.scope == CacheScope()


def test_keyword_hit_without_data(empty_snapshot):
    match = match_query_to_cache("Show my medications", empty_snapshot)

    assert match.confidence == 0.1
    assert match.scope.medications is True


def test_scope_is_narrowed_to_sections_with_data():
    snapshot = AuthoritativeSnapshot(
        medications=(CachedMedication(name="Metformin", dose="500mg"),)
    )

    match = CacheRelevanceScorer().match("My medications and lab results", snapshot)

    assert match.confidence == 0.85
    assert match.scope.medications is True
    assert match.scope.labs is False
    assert match.scope.profile is True


def test_refine_scope_returns_none_without_data(empty_snapshot):
    assert CacheRelevanceScorer.refine_scope(CacheScope.full(), empty_snapshot) is None


def test_dismissed_alerts_are_not_data():
    snapshot = AuthoritativeSnapshot(
        alerts=(CachedAlert(title="Old reminder", dismissed=True),)
    )

    assert snapshot.has_alerts is False
    assert snapshot.has_data is False
    assert match_query_to_cache("Any alerts?", snapshot).confidence == 0.1
