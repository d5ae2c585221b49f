"""Multiple-choice quiz and free-text exam question generation."""
import logging
import random

from nederlearn.catalog import VocabularyCatalog
from nederlearn.config import settings
from nederlearn.errors import StateMismatchError
from nederlearn.models import ExamQuestion, QuizQuestion, Section, VocabItem

logger = logging.getLogger(__name__)


def can_quiz(section: Section) -> bool:
    return len(section.items) >= settings.MIN_ITEMS_FOR_QUIZ


def default_question_count(section: Section) -> int:
    if section.max_questions_per_session:
        return min(settings.QUESTIONS_PER_SESSION, section.max_questions_per_session)
    return settings.QUESTIONS_PER_SESSION


class QuestionGenerator:
    """Builds randomized question sets from the catalog.

    Pass a seeded ``random.Random`` as ``rng`` to get reproducible output.
    """

    def __init__(self, catalog: VocabularyCatalog, rng: random.Random | None = None):
        self.catalog = catalog
        self.rng = rng or random.Random()

    def generate_quiz(self, section: Section, count: int | None = None) -> list[QuizQuestion]:
        """Return up to ``count`` questions for ``section``, or [] if it cannot be quizzed."""
        if not can_quiz(section):
            logger.warning(
                f"Section {section.id} has fewer than {settings.MIN_ITEMS_FOR_QUIZ} items, cannot generate quiz"
            )
            return []
        if count is None:
            count = default_question_count(section)
        selected = self.rng.sample(list(section.items), min(count, len(section.items)))
        return [self.build_question(section, item) for item in selected]

    def build_questions(self, section: Section, question_ids: list[str]) -> list[QuizQuestion]:
        """Rebuild a saved question order. Options are drawn fresh."""
        by_id = {item.id: item for item in section.items}
        missing = [qid for qid in question_ids if qid not in by_id]
        if missing:
            raise StateMismatchError(f"{section.id}: unknown question ids {missing}")
        return [self.build_question(section, by_id[qid]) for qid in question_ids]

    def build_question(self, section: Section, item: VocabItem) -> QuizQuestion:
        distractors = self._pick_distractors(section, item)
        options = list(dict.fromkeys([item.target_word, *distractors]))
        options = options[: settings.OPTIONS_PER_QUESTION]
        self.rng.shuffle(options)
        return QuizQuestion(
            id=item.id,
            correct_answer=item.target_word,
            options=options,
            source_word=item.source_word,
        )

    def _pick_distractors(self, section: Section, item: VocabItem) -> list[str]:
        needed = settings.OPTIONS_PER_QUESTION - 1
        chosen: list[str] = []

        def take(words: list[str]) -> None:
            self.rng.shuffle(words)
            for word in words:
                if len(chosen) >= needed:
                    return
                if word != item.target_word and word not in chosen:
                    chosen.append(word)

        take([other.target_word for other in section.items if other.id != item.id])
        if len(chosen) < needed:
            take([
                other.target_word
                for s in self.catalog.list_sections() if s.id != section.id
                for other in s.items
            ])
        return chosen

    def generate_exam(self, count: int | None = None) -> list[ExamQuestion]:
        """Sample free-text questions from every section."""
        if count is None:
            count = settings.EXAM_QUESTION_COUNT
        pool = self.catalog.all_items()
        selected = self.rng.sample(pool, min(count, len(pool)))
        return [
            ExamQuestion(id=item.id, correct_answer=item.target_word, source_word=item.source_word)
            for item in selected
        ]
