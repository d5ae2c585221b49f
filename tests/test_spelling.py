# tests/test_spelling.py
from nederlearn.spelling import is_acceptable, levenshtein_distance


def test_distance_identical():
    assert levenshtein_distance("appel", "appel") == 0


def test_distance_empty():
    assert levenshtein_distance("", "abc") == 3
    assert levenshtein_distance("abc", "") == 3


def test_distance_classic_examples():
    assert levenshtein_distance("kitten", "sitting") == 3
    assert levenshtein_distance("flaw", "lawn") == 2


def test_distance_is_symmetric():
    assert levenshtein_distance("aple", "apple") == levenshtein_distance("apple", "aple") == 1


def test_case_and_whitespace_insensitive():
    assert is_acceptable("appel", "Appel") is True
    assert is_acceptable("  Appel ", "appel") is True


def test_small_typo_accepted():
    assert is_acceptable("aple", "apple") is True
    assert is_acceptable("sinasappel", "sinaasappel") is True
    assert is_acceptable("vrachtwagn", "vrachtwagen") is True


def test_two_edits_accepted_three_rejected():
    assert is_acceptable("apxlx", "apple") is True
    assert is_acceptable("axxle", "apple") is True
    assert is_acceptable("axxxe", "apple") is False


def test_unrelated_answer_rejected():
    assert is_acceptable("xyz", "apple") is False


def test_short_words_are_loose():
    """A fixed tolerance of 2 lets any two-letter answer match another."""
    assert is_acceptable("ab", "ei") is True


def test_custom_tolerance():
    assert is_acceptable("aple", "apple", tolerance=0) is False
    assert is_acceptable("appel", "apple", tolerance=0) is False
    assert is_acceptable("Apple", "apple", tolerance=0) is True
