#!/usr/bin/env python3
"""
Unit tests for the CandidateSelector.
"""

import unittest

from core.config_loader import SelectorConfig
from core.matching.errors import InvalidInput, NotFound, TransientStoreFailure
from core.matching.selector import CandidateSelector
from tests.mocks.matching_mocks import (
    FailingEligibilityDirectory,
    InMemoryAffinityLedger,
    InMemoryProfileDirectory,
    make_profile,
)


def _woman(profile_id, **overrides):
    fields = dict(gender="female", gender_preference="male", age=27)
    fields.update(overrides)
    return make_profile(profile_id, **fields)


class TestSelect(unittest.TestCase):
    """Primary ranked selection."""

    def setUp(self):
        self.requester = make_profile(
            1, age=28, gender="male", gender_preference="female",
            age_range_min=24, age_range_max=35,
            interests=["hiking", "coffee", "jazz"], location="Berlin"
        )
        self.directory = InMemoryProfileDirectory([
            self.requester,
            _woman(2, interests=["hiking", "coffee", "jazz"], location="Berlin", age=28),  # 100
            _woman(3, interests=["hiking"], location="Berlin", age=28),  # 13 + 20 + 20 + 20 = 73
            _woman(4, interests=[], location="Hamburg", age=30),  # 0 + 18 + 0 + 20 = 38
            _woman(5, interests=["hiking"], location="Berlin", age=28),  # ties with 3
            # Not eligible: wrong preference, out of range, or rejects requester's age
            make_profile(6, gender="male", gender_preference="female"),
            _woman(7, age=40),
            _woman(8, age_range_min=30, age_range_max=40),
            _woman(9, gender_preference="female"),
        ])
        self.ledger = InMemoryAffinityLedger()
        self.selector = CandidateSelector(self.directory, self.ledger)

    def test_ranked_by_score_then_id(self):
        results = self.selector.select(1, limit=10)
        self.assertEqual([c.profile.id for c in results], [2, 3, 5, 4])
        self.assertEqual([c.score for c in results], [100, 73, 73, 38])

    def test_each_candidate_carries_breakdown(self):
        results = self.selector.select(1, limit=10)
        top = results[0]
        self.assertEqual(top.breakdown.total, top.score)
        self.assertEqual(top.breakdown.shared_interests, ["hiking", "coffee", "jazz"])

    def test_truncates_to_limit(self):
        results = self.selector.select(1, limit=2)
        self.assertEqual([c.profile.id for c in results], [2, 3])

    def test_overfetches_twice_the_limit(self):
        self.selector.select(1, limit=3)
        self.assertIn(('query_eligible', 6), self.directory.calls)

    def test_excludes_already_liked(self):
        self.ledger.create_edge(1, 2)
        self.ledger.create_edge(1, 5)
        results = self.selector.select(1, limit=10)
        ids = [c.profile.id for c in results]
        self.assertEqual(ids, [3, 4])

    def test_liked_profiles_do_not_starve_the_ranking(self):
        requester = make_profile(
            100, gender="male", gender_preference="female",
            age_range_min=18, age_range_max=100
        )
        directory = InMemoryProfileDirectory(
            [requester] + [_woman(i, age=28) for i in range(101, 111)]
        )
        ledger = InMemoryAffinityLedger()
        ledger.create_edge(100, 101)
        ledger.create_edge(100, 102)
        selector = CandidateSelector(directory, ledger)

        results = selector.select(100, limit=1)

        self.assertEqual([c.profile.id for c in results], [103])
        self.assertIn(('query_eligible', 4), directory.calls)

    def test_loose_selection_skips_past_liked_profiles(self):
        ledger = InMemoryAffinityLedger()
        for liked_id in (2, 3, 5):
            ledger.create_edge(1, liked_id)
        selector = CandidateSelector(self.directory, ledger)

        results = selector.select_loose(1, limit=1)

        self.assertEqual(len(results), 1)
        self.assertNotIn(results[0].profile.id, (2, 3, 5))

    def test_likes_by_others_do_not_exclude(self):
        self.ledger.create_edge(2, 1)
        ids = [c.profile.id for c in self.selector.select(1, limit=10)]
        self.assertIn(2, ids)

    def test_never_returns_requester(self):
        for profile_id in (1, 2, 3):
            ids = [c.profile.id for c in self.selector.select(profile_id, limit=10)]
            self.assertNotIn(profile_id, ids)

    def test_no_eligible_rows_returns_empty(self):
        self.directory.add(make_profile(20, gender="other", gender_preference="other"))
        self.assertEqual(self.selector.select(20, limit=5), [])

    def test_unknown_requester(self):
        with self.assertRaises(NotFound):
            self.selector.select(999, limit=5)

    def test_invalid_limits(self):
        for bad in (0, -1, 2.5, "10", True, 501):
            with self.assertRaises(InvalidInput):
                self.selector.select(1, limit=bad)

    def test_default_limit_from_config(self):
        selector = CandidateSelector(
            self.directory, self.ledger, config=SelectorConfig(default_limit=1)
        )
        results = selector.select(1)
        self.assertEqual(len(results), 1)
        self.assertIn(('query_eligible', 2), self.directory.calls)

    def test_primary_failure_propagates(self):
        directory = FailingEligibilityDirectory(self.directory.profiles.values())
        selector = CandidateSelector(directory, self.ledger)
        with self.assertRaises(TransientStoreFailure):
            selector.select(1, limit=5)


class TestSelectWithFallback(unittest.TestCase):
    """Degraded-mode selection."""

    def setUp(self):
        self.requester = make_profile(
            1, age=28, gender="male", gender_preference="female",
            age_range_min=24, age_range_max=35
        )
        self.profiles = [
            self.requester,
            _woman(2),
            # Only passes the loose filter: does not accept the requester's age
            _woman(3, age_range_min=30, age_range_max=40),
            # Passes the loose filter even though she is not looking for men
            _woman(4, gender_preference="female"),
        ]
        self.ledger = InMemoryAffinityLedger()

    def test_primary_success_is_not_degraded(self):
        selector = CandidateSelector(InMemoryProfileDirectory(self.profiles), self.ledger)
        outcome = selector.select_with_fallback(1, limit=10)
        self.assertFalse(outcome.is_degraded)
        self.assertEqual([c.profile.id for c in outcome.candidates], [2])

    def test_fallback_uses_loose_filter_and_flags_degraded(self):
        directory = FailingEligibilityDirectory(self.profiles)
        selector = CandidateSelector(directory, self.ledger)

        outcome = selector.select_with_fallback(1, limit=10)

        self.assertTrue(outcome.is_degraded)
        self.assertIn("statement timeout", outcome.degraded.reason)
        self.assertIsInstance(outcome.degraded.cause, TransientStoreFailure)
        self.assertEqual(sorted(c.profile.id for c in outcome.candidates), [2, 3, 4])
        self.assertIn(('query_loose', 20), directory.calls)

    def test_fallback_still_excludes_liked(self):
        self.ledger.create_edge(1, 3)
        selector = CandidateSelector(FailingEligibilityDirectory(self.profiles), self.ledger)
        ids = [c.profile.id for c in selector.select_with_fallback(1, limit=10).candidates]
        self.assertNotIn(3, ids)
        self.assertNotIn(1, ids)

    def test_fallback_disabled_raises(self):
        selector = CandidateSelector(
            FailingEligibilityDirectory(self.profiles),
            self.ledger,
            config=SelectorConfig(allow_degraded_fallback=False)
        )
        with self.assertRaises(TransientStoreFailure):
            selector.select_with_fallback(1, limit=10)

    def test_not_found_is_not_masked(self):
        selector = CandidateSelector(FailingEligibilityDirectory(self.profiles), self.ledger)
        with self.assertRaises(NotFound):
            selector.select_with_fallback(42, limit=10)


class TestSelectByInterest(unittest.TestCase):

    def setUp(self):
        self.directory = InMemoryProfileDirectory([
            make_profile(1, interests=["chess", "tea"]),
            make_profile(2, interests=["tea"]),
            make_profile(3, interests=["surfing"]),
            make_profile(4, interests=["chess"]),
            make_profile(5, interests=["tea", "chess"]),
            make_profile(6, interests=[]),
        ])
        self.ledger = InMemoryAffinityLedger()
        self.selector = CandidateSelector(self.directory, self.ledger)

    def test_directory_order(self):
        profiles = self.selector.select_by_interest(1)
        self.assertEqual([p.id for p in profiles], [2, 4, 5])

    def test_limit(self):
        profiles = self.selector.select_by_interest(1, limit=2)
        self.assertEqual([p.id for p in profiles], [2, 4])

    def test_empty_interests(self):
        self.assertEqual(self.selector.select_by_interest(6), [])
        self.assertNotIn('query_by_interest_overlap', [c[0] for c in self.directory.calls])

    def test_liked_profiles_excluded_without_shrinking_limit(self):
        self.ledger.create_edge(1, 2)
        profiles = self.selector.select_by_interest(1, limit=2)
        self.assertEqual([p.id for p in profiles], [4, 5])

    def test_unknown_requester(self):
        with self.assertRaises(NotFound):
            self.selector.select_by_interest(99)


class TestSelectByLocation(unittest.TestCase):

    def setUp(self):
        self.directory = InMemoryProfileDirectory([
            make_profile(1, location="Berlin", latitude=52.5200, longitude=13.4050, max_distance=30),
            make_profile(2, location="Berlin", latitude=52.5310, longitude=13.3840),  # ~1.9 km
            make_profile(3, location="Potsdam", latitude=52.3906, longitude=13.0645),  # ~27 km
            make_profile(4, location="Hamburg", latitude=53.5511, longitude=9.9937),  # ~255 km
            make_profile(5, location="Berlin"),
            make_profile(6, location="Berlin", latitude=52.5000, longitude=13.4000),  # ~2.3 km
            make_profile(7),
        ])
        self.ledger = InMemoryAffinityLedger()
        self.selector = CandidateSelector(self.directory, self.ledger)

    def test_radius_search_nearest_first_then_unplaced_label_matches(self):
        profiles = self.selector.select_by_location(1)
        self.assertEqual([p.id for p in profiles], [2, 6, 3, 5])
        self.assertIn(('query_within_radius', 30), self.directory.calls)

    def test_same_label_outside_radius_is_not_appended(self):
        self.directory.add(make_profile(
            8, location="Berlin", latitude=48.1351, longitude=11.5820
        ))
        profiles = self.selector.select_by_location(1)
        self.assertNotIn(8, [p.id for p in profiles])

    def test_label_lookup_skipped_when_radius_fills_limit(self):
        self.selector.select_by_location(1, limit=3)
        self.assertNotIn('query_by_location_label', [c[0] for c in self.directory.calls])

    def test_non_positive_max_distance_uses_default_radius(self):
        for profile_id, max_distance in ((20, -5), (21, 0), (22, None)):
            self.directory.add(make_profile(
                profile_id, latitude=52.5200, longitude=13.4050, max_distance=max_distance
            ))
            profiles = self.selector.select_by_location(profile_id)
            self.assertIn(('query_within_radius', 50), self.directory.calls)
            self.assertIn(2, [p.id for p in profiles])

    def test_label_match_without_coordinates(self):
        profiles = self.selector.select_by_location(5)
        self.assertEqual([p.id for p in profiles], [1, 2, 6])

    def test_label_match_when_radius_disabled(self):
        selector = CandidateSelector(
            self.directory, self.ledger, config=SelectorConfig(radius_search_enabled=False)
        )
        profiles = selector.select_by_location(1)
        self.assertEqual([p.id for p in profiles], [2, 5, 6])

    def test_no_location_signal(self):
        self.assertEqual(self.selector.select_by_location(7), [])

    def test_liked_excluded(self):
        self.ledger.create_edge(1, 2)
        self.ledger.create_edge(1, 5)
        profiles = self.selector.select_by_location(1)
        self.assertEqual([p.id for p in profiles], [6, 3])

    def test_limit(self):
        profiles = self.selector.select_by_location(1, limit=1)
        self.assertEqual([p.id for p in profiles], [2])


if __name__ == '__main__':
    unittest.main()
