#!/usr/bin/env python3
"""
Test approximate name matching and the per-level fuzzy index.

Covers:
- Exact (case-insensitive) names score 1.0
- Misspellings above the 0.6 similarity floor
- Terms shorter than 2 characters never match
- Threshold is exclusive, ties keep collection order
"""
from admin_search.utils.matching_utils import dissimilarity, similarity, rank_matches
from admin_search.utils.fuzzy_index import FuzzyIndex


DISTRICTS = [
    {'id': 'D1', 'name': 'Kampala', 'level': 'district', 'parent_id': None},
    {'id': 'D2', 'name': 'Wakiso', 'level': 'district', 'parent_id': None},
    {'id': 'D3', 'name': 'Mbale', 'level': 'district', 'parent_id': None},
    {'id': 'D4', 'name': 'MBALE', 'level': 'district', 'parent_id': None},
]


def test_exact_match_scores_one():
    """Identical names, ignoring case and surrounding whitespace."""
    print("=" * 80)
    print("TEST 1: Exact match")
    print("=" * 80)

    assert dissimilarity("Kampala", "kampala") == 0.0
    assert similarity("  KAMPALA ", "Kampala") == 1.0
    print("✅ PASSED: exact names score 1.0\n")


def test_misspelling_above_floor():
    """'Kampla' is one deletion away from 'Kampala'."""
    print("=" * 80)
    print("TEST 2: Misspelled term")
    print("=" * 80)

    score = similarity("Kampla", "Kampala")
    print(f"  'Kampla' vs 'Kampala': {score:.3f}")
    assert 0.6 < score < 1.0
    assert abs(score - (1 - 1 / 7)) < 1e-9
    print("✅ PASSED\n")


def test_partial_match_ignores_location():
    """A term found inside a longer name matches wherever it occurs."""
    assert similarity("nakawa", "Nakawa Division") == 1.0
    assert similarity("division", "Nakawa Division") == 1.0


def test_partial_match_scored_by_edit_distance():
    """A misspelled term inside a longer name costs one edit per character."""
    print("=" * 80)
    print("TEST 3: Misspelled term inside a longer name")
    print("=" * 80)

    score = similarity("nakawo", "Nakawa Division")
    print(f"  'nakawo' vs 'Nakawa Division': {score:.3f}")
    assert abs(score - (1 - 1 / 6)) < 1e-9

    # Near-full-length terms keep the whole-string score
    assert abs(similarity("Kampla", "Kampala") - (1 - 1 / 7)) < 1e-9
    assert abs(dissimilarity("Kampla", "Kampala", ignore_location=False) - 1 / 7) < 1e-9
    print("✅ PASSED\n")


def test_unrelated_names_rejected():
    index = FuzzyIndex('district', DISTRICTS)
    assert index.search("XYZ123") == []
    assert index.search("Gulu") == []


def test_short_terms_never_match():
    """Minimum match length is 2 characters."""
    index = FuzzyIndex('district', DISTRICTS)

    assert index.search("") == []
    assert index.search("   ") == []
    assert index.search("K") == []
    assert rank_matches("k", ["k", "Kampala"]) == []


def test_index_returns_accepted_hits_best_first():
    index = FuzzyIndex('district', DISTRICTS)
    hits = index.search("Kampla")

    print(f"  Hits: {[(unit['name'], round(score, 3)) for unit, score in hits]}")
    assert hits[0][0]['id'] == 'D1'
    for _, score in hits:
        assert 0.6 < score <= 1.0
    scores = [score for _, score in hits]
    assert scores == sorted(scores, reverse=True)


def test_ties_keep_collection_order():
    """'Mbale' and 'MBALE' both score 1.0; D3 comes before D4 in the list."""
    index = FuzzyIndex('district', DISTRICTS)
    hits = index.search("mbale")

    assert [unit['id'] for unit, _ in hits[:2]] == ['D3', 'D4']
    assert hits[0][1] == hits[1][1] == 1.0


def test_limit_truncates_hits():
    index = FuzzyIndex('district', DISTRICTS)

    assert len(index.search("mbale", limit=1)) == 1
    assert index.search("mbale", limit=0) == []


def test_threshold_is_exclusive():
    """A swapped-in scorer: exactly 0.4 is rejected, 0.39 is accepted."""
    fixed_scores = {'alpha': 0.4, 'beta': 0.39, 'gamma': 0.0}

    def scorer(term, name):
        return fixed_scores[name]

    hits = rank_matches("query", ['alpha', 'beta', 'gamma'], scorer=scorer)
    assert [position for position, _ in hits] == [2, 1]
    assert abs(hits[1][1] - 0.61) < 1e-9


def test_custom_scorer_on_index():
    """The index accepts any (term, name) -> dissimilarity function."""
    def first_letter_scorer(term, name):
        return 0.0 if term[0] == name[0] else 1.0

    index = FuzzyIndex('district', DISTRICTS, scorer=first_letter_scorer)
    hits = index.search("mx")
    assert [unit['id'] for unit, _ in hits] == ['D3', 'D4']


if __name__ == "__main__":
    test_exact_match_scores_one()
    test_misspelling_above_floor()
    test_partial_match_ignores_location()
    test_partial_match_scored_by_edit_distance()
    test_unrelated_names_rejected()
    test_short_terms_never_match()
    test_index_returns_accepted_hits_best_first()
    test_ties_keep_collection_order()
    test_limit_truncates_hits()
    test_threshold_is_exclusive()
    test_custom_scorer_on_index()
    print("=" * 80)
    print("ALL FUZZY MATCHING TESTS PASSED")
    print("=" * 80)
