from __future__ import annotations

import unittest

from gitf.fuzzy import SUBSTRING_BASE_SCORE, fuzzy_match_labels, fuzzy_score, substring_index


class FuzzyScoreTests(unittest.TestCase):
    def test_empty_query_scores_zero(self) -> None:
        self.assertEqual(fuzzy_score("", "anything"), 0)

    def test_out_of_order_characters_do_not_match(self) -> None:
        self.assertIsNone(fuzzy_score("ba", "abc"))

    def test_match_is_case_insensitive(self) -> None:
        self.assertIsNotNone(fuzzy_score("GF", "git-finder"))

    def test_contiguous_run_beats_scattered_characters(self) -> None:
        contiguous = fuzzy_score("abc", "abcxxxxx")
        scattered = fuzzy_score("abc", "axxbxxcx")
        self.assertIsNotNone(contiguous)
        self.assertIsNotNone(scattered)
        self.assertGreater(contiguous, scattered)

    def test_word_boundary_hits_are_preferred(self) -> None:
        boundary = fuzzy_score("gf", "git-finder")
        inner = fuzzy_score("gf", "xgxxfxxxxx")
        self.assertGreater(boundary, inner)


class SubstringIndexTests(unittest.TestCase):
    def test_returns_case_insensitive_position(self) -> None:
        self.assertEqual(substring_index("Lib", "mylibrary"), 2)

    def test_returns_none_when_absent(self) -> None:
        self.assertIsNone(substring_index("zz", "mylibrary"))


class FuzzyMatchLabelsTests(unittest.TestCase):
    def test_empty_query_keeps_every_label_in_order(self) -> None:
        labels = ["gamma", "alpha", "beta"]
        self.assertEqual(fuzzy_match_labels("", labels), [(0, 0), (1, 0), (2, 0)])

    def test_substring_hits_exclude_subsequence_only_hits(self) -> None:
        labels = ["a-x-p-i", "api", "my-api-server"]
        matches = fuzzy_match_labels("api", labels)
        self.assertEqual([idx for idx, _score in matches], [1, 2])

    def test_substring_hits_rank_earliest_then_shortest(self) -> None:
        labels = ["webapi", "api-server", "api"]
        matches = fuzzy_match_labels("api", labels)
        self.assertEqual([idx for idx, _score in matches], [2, 1, 0])
        self.assertEqual(matches[0][1], SUBSTRING_BASE_SCORE - 3)
        self.assertEqual(matches[2][1], SUBSTRING_BASE_SCORE - 3 * 50 - 6)

    def test_equal_substring_keys_keep_input_order(self) -> None:
        labels = ["abx", "aby", "abz"]
        matches = fuzzy_match_labels("ab", labels)
        self.assertEqual([idx for idx, _score in matches], [0, 1, 2])

    def test_subsequence_fallback_when_no_label_contains_query(self) -> None:
        labels = ["alpha", "git-finder", "gxxxxxxxxxxxxxxf"]
        matches = fuzzy_match_labels("gf", labels)
        self.assertEqual([idx for idx, _score in matches], [1, 2])
        self.assertGreater(matches[0][1], matches[1][1])

    def test_no_match_returns_empty_list(self) -> None:
        self.assertEqual(fuzzy_match_labels("qqq", ["alpha", "beta"]), [])

    def test_ordering_is_stable_across_calls(self) -> None:
        labels = ["beta", "alpha", "alphabet", "gamma"]
        self.assertEqual(fuzzy_match_labels("al", labels), fuzzy_match_labels("al", labels))


if __name__ == "__main__":
    unittest.main()
