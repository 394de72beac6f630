from __future__ import annotations

import random
import unittest

from sitrep_pipeline.classifiers.markets import (
    classify_category,
    is_conflict_related,
    observed_delta,
    parse_outcome_price,
    round_probability,
    synthetic_delta,
    synthetic_sparkline,
)


class RelevanceTests(unittest.TestCase):
    def test_single_keyword_title_is_relevant(self) -> None:
        self.assertTrue(is_conflict_related("Ukraine", ""))

    def test_keyword_in_description_counts(self) -> None:
        self.assertTrue(is_conflict_related("Will it happen?", "Talks about a CEASEFIRE deal"))

    def test_no_keyword_is_excluded_regardless_of_length(self) -> None:
        description = "A long description about football transfers. " * 200
        self.assertFalse(is_conflict_related("Who wins the league?", description))

    def test_missing_description_is_tolerated(self) -> None:
        self.assertTrue(is_conflict_related("Red Sea shipping", None))


class CategoryTests(unittest.TestCase):
    def test_military_terms_win_first(self) -> None:
        self.assertEqual(classify_category("Will a strike hit before the trade deal?"), "military")

    def test_economic_then_cyber(self) -> None:
        self.assertEqual(classify_category("New sanctions on Iran?"), "economic")
        self.assertEqual(classify_category("Major cyber incident in Taiwan?"), "cyber")

    def test_default_is_political(self) -> None:
        self.assertEqual(classify_category("Ceasefire in Gaza by June?"), "political")


class OutcomePriceTests(unittest.TestCase):
    def test_first_price_scaled_to_percent(self) -> None:
        self.assertAlmostEqual(parse_outcome_price('["0.65", "0.35"]'), 65.0)
        self.assertAlmostEqual(parse_outcome_price(["0.2", "0.8"]), 20.0)

    def test_unparseable_or_empty_is_fifty(self) -> None:
        self.assertEqual(parse_outcome_price(None), 50.0)
        self.assertEqual(parse_outcome_price(""), 50.0)
        self.assertEqual(parse_outcome_price("not json"), 50.0)
        self.assertEqual(parse_outcome_price("[]"), 50.0)
        self.assertEqual(parse_outcome_price('["abc"]'), 50.0)
        self.assertEqual(parse_outcome_price('{"yes": 0.4}'), 50.0)

    def test_out_of_range_prices_are_clamped(self) -> None:
        self.assertEqual(parse_outcome_price('["1.7"]'), 100.0)
        self.assertEqual(parse_outcome_price('["-0.2"]'), 0.0)

    def test_round_probability_one_decimal(self) -> None:
        self.assertEqual(round_probability(65.04), 65.0)
        self.assertEqual(round_probability(101.0), 100.0)


class DeltaTests(unittest.TestCase):
    def test_synthetic_delta_is_flagged_and_consistent(self) -> None:
        rng = random.Random(42)
        for probability in (0.0, 3.2, 50.0, 97.5, 100.0):
            delta = synthetic_delta(probability, rng)
            self.assertTrue(delta.synthetic)
            self.assertGreaterEqual(delta.previous, 0.0)
            self.assertLessEqual(delta.previous, 100.0)
            self.assertLessEqual(abs(delta.change), 5.1)
            self.assertEqual(delta.change, round(round_probability(probability) - delta.previous, 1))

    def test_observed_delta_is_not_synthetic(self) -> None:
        delta = observed_delta(62.0, 55.5)
        self.assertFalse(delta.synthetic)
        self.assertEqual(delta.previous, 55.5)
        self.assertEqual(delta.change, 6.5)

    def test_synthetic_sparkline_stays_in_band(self) -> None:
        sparkline = synthetic_sparkline(95.0, random.Random(1))
        self.assertEqual(len(sparkline), 12)
        for value in sparkline:
            self.assertGreaterEqual(value, 85.0)
            self.assertLessEqual(value, 100.0)


if __name__ == "__main__":
    unittest.main()
