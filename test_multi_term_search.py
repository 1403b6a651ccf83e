#!/usr/bin/env python3
"""
Test multi-term search: relatedness, hierarchy bonus, ordering.

Dataset: 'Nakawa' exists as a county under Kampala and as a parish
under Wakiso, so "Nakawa, Kampala" must prefer the Kampala one.
"""
from itertools import product

from admin_search.pipeline import search
from admin_search.processors.ranking import are_related, rank_multi_term
from admin_search.processors.term_matcher import match_term
from admin_search.search_context import build_context
from admin_search.utils.data_utils import load_from_records


RECORDS = {
    'district': [
        {'id': 'D1', 'name': 'Kampala'},
        {'id': 'D2', 'name': 'Wakiso'},
    ],
    'county': [
        {'id': 'C1', 'name': 'Nakawa', 'district': 'D1'},
        {'id': 'C2', 'name': 'Kyadondo', 'district': 'D2'},
    ],
    'subcounty': [
        {'id': 'S1', 'name': 'Kiswa', 'county': 'C1'},
        {'id': 'S2', 'name': 'Nangabo', 'county': 'C2'},
    ],
    'parish': [
        {'id': 'P1', 'name': 'Mbuya', 'subcounty': 'S1'},
        {'id': 'P2', 'name': 'Nakawa', 'subcounty': 'S2'},
    ],
    'village': [
        {'id': 'V1', 'name': 'Kinawataka', 'parish': 'P1'},
        {'id': 'V2', 'name': 'Gayaza', 'parish': 'P2'},
    ],
}

CONTEXT = build_context(load_from_records(RECORDS))


def find(results, level, unit_id):
    for result in results:
        if result['type'] == level and result['id'] == unit_id:
            return result
    return None


def test_child_qualified_by_ancestor():
    """'Nakawa, Kampala': the county under Kampala matches both terms."""
    print("=" * 80)
    print("TEST 1: Nakawa, Kampala")
    print("=" * 80)

    results = search(CONTEXT, "Nakawa, Kampala")
    for i, result in enumerate(results, 1):
        print(f"  {i}. {result['name']} ({result['type']}) {result['match_info']}")

    top = results[0]
    assert (top['type'], top['id']) == ('county', 'C1')
    assert top['match_info']['matched_terms'] == 2
    assert top['match_info']['total_terms'] == 2
    assert top['hierarchy_bonus'] == 1.5
    assert top['match_info']['confidence'] == 1.5
    assert top['district'] == 'Kampala'
    assert 'matched_term' not in top

    other_nakawa = find(results, 'parish', 'P2')
    assert other_nakawa is not None
    assert other_nakawa['match_info']['matched_terms'] == 1
    assert other_nakawa['hierarchy_bonus'] == 1.0
    assert other_nakawa['match_info']['confidence'] == 0.25
    print("✅ PASSED\n")


def test_in_separator_gives_same_ranking():
    by_comma = search(CONTEXT, "Nakawa, Kampala")
    by_word = search(CONTEXT, "Nakawa in Kampala")
    assert [(r['type'], r['id']) for r in by_comma] == [(r['type'], r['id']) for r in by_word]


def test_unrelated_qualifier_degrades_gracefully():
    """No 'Elsewhere' unit exists: Nakawa candidates still surface with one match."""
    results = search(CONTEXT, "Nakawa, Elsewhere")

    assert find(results, 'county', 'C1') is not None
    assert find(results, 'parish', 'P2') is not None
    for result in results:
        assert result['match_info']['matched_terms'] == 1
        assert result['match_info']['total_terms'] == 2
        assert result['hierarchy_bonus'] == 1.0


def test_match_count_never_increases_down_the_list():
    for query in ["Nakawa, Kampala", "Nakawa, Wakiso", "Nakawa, Kampala, Kiswa", "Kinawataka at Mbuya"]:
        results = search(CONTEXT, query)
        counts = [result['match_info']['matched_terms'] for result in results]
        assert counts == sorted(counts, reverse=True), f"{query}: {counts}"


def test_other_ancestor_flips_ranking():
    results = search(CONTEXT, "Nakawa, Wakiso")
    top = results[0]
    assert (top['type'], top['id']) == ('parish', 'P2')
    assert top['match_info']['matched_terms'] == 2


def test_seeds_come_from_first_term_only():
    results = search(CONTEXT, "Kampala, Nakawa")
    assert all(result['name'] == 'Kampala' for result in results)


def test_limit_applies_to_multi_term():
    assert len(search(CONTEXT, "Nakawa, Kampala", limit=1)) == 1
    assert search(CONTEXT, "Nakawa, Kampala", limit=0) == []


def test_short_first_term_gives_no_seeds():
    assert search(CONTEXT, "K, Kampala") == []


def test_short_later_term_still_counts():
    """'Nakawa, K': the one-letter term finds nothing but is still one of two terms."""
    results = search(CONTEXT, "Nakawa, K")

    top = results[0]
    assert (top['type'], top['id']) == ('county', 'C1')
    for result in results:
        assert result['match_info']['matched_terms'] == 1
        assert result['match_info']['total_terms'] == 2
        assert result['hierarchy_bonus'] == 1.0
    # (1.0 / 2) * 1.0 * (1 / 2)
    assert top['match_info']['confidence'] == 0.25


def test_relatedness_is_symmetric():
    pool = match_term(CONTEXT, "Nakawa", 30) + match_term(CONTEXT, "Kampala", 30) + match_term(CONTEXT, "Wakiso", 30)
    assert len(pool) >= 3

    for a, b in product(pool, repeat=2):
        assert are_related(a, b) == are_related(b, a)


def test_relatedness_across_levels():
    """A village relates to a county when the county is in its chain."""
    village = {'chain': {'district_id': 'D1', 'county_id': 'C1', 'subcounty_id': 'S1', 'parish_id': 'P1', 'village_id': 'V1'}}
    county = {'chain': {'district_id': 'D1', 'county_id': 'C1', 'subcounty_id': None, 'parish_id': None, 'village_id': None}}
    stranger = {'chain': {'district_id': 'D2', 'county_id': None, 'subcounty_id': None, 'parish_id': 'P1', 'village_id': None}}
    empty = {'chain': {'district_id': None, 'county_id': None, 'subcounty_id': None, 'parish_id': None, 'village_id': None}}

    assert are_related(village, county)
    # Sharing only a parish does not count
    assert not are_related(village, stranger)
    # Missing ids never match each other
    assert not are_related(empty, empty)


def test_only_first_related_candidate_counts():
    seed = {'type': 'county', 'id': 'C1', 'name': 'Nakawa', 'score': 1.0, 'matched_term': 'Nakawa',
            'chain': {'district_id': 'D1', 'county_id': 'C1', 'subcounty_id': None, 'parish_id': None, 'village_id': None}}
    weak = {'score': 0.7, 'chain': {'district_id': 'D1', 'county_id': None, 'subcounty_id': None, 'parish_id': None, 'village_id': None}}
    strong = {'score': 1.0, 'chain': {'district_id': 'D1', 'county_id': None, 'subcounty_id': None, 'parish_id': None, 'village_id': None}}

    results = rank_multi_term([[seed], [weak, strong]], limit=10)

    # (1.0 + 0.7) / 2 * 1.5 * 2/2
    assert results[0]['match_info']['confidence'] == 1.275


if __name__ == "__main__":
    test_child_qualified_by_ancestor()
    test_in_separator_gives_same_ranking()
    test_unrelated_qualifier_degrades_gracefully()
    test_match_count_never_increases_down_the_list()
    test_other_ancestor_flips_ranking()
    test_seeds_come_from_first_term_only()
    test_limit_applies_to_multi_term()
    test_short_first_term_gives_no_seeds()
    test_short_later_term_still_counts()
    test_relatedness_is_symmetric()
    test_relatedness_across_levels()
    test_only_first_related_candidate_counts()
    print("ALL MULTI-TERM TESTS PASSED")
