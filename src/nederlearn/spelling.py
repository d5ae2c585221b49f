"""Typo-tolerant grading for free-text answers."""
from nederlearn.config import settings


def normalize(text: str) -> str:
    return text.strip().lower()


def levenshtein_distance(a: str, b: str) -> int:
    """Edit distance with unit cost for insert, delete and substitute."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, 1):
        current = [i]
        for j, char_b in enumerate(b, 1):
            if char_a == char_b:
                current.append(previous[j - 1])
            else:
                current.append(1 + min(previous[j - 1], previous[j], current[j - 1]))
        previous = current
    return previous[-1]


def is_acceptable(user_answer: str, correct_answer: str, tolerance: int | None = None) -> bool:
    """Accept an answer within ``tolerance`` edits of the correct one.

    The tolerance is absolute, not scaled by word length, so two-letter
    answers match almost anything of similar length.
    """
    if tolerance is None:
        tolerance = settings.SPELLING_TOLERANCE
    given = normalize(user_answer)
    expected = normalize(correct_answer)
    if given == expected:
        return True
    return levenshtein_distance(given, expected) <= tolerance
