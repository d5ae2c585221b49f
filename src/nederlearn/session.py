"""One quiz or exam run: sequencing, grading, XP and completion."""
import logging
import math

from nederlearn.catalog import VocabularyCatalog
from nederlearn.config import settings
from nederlearn.errors import InsufficientDataError, SessionStateError, StateMismatchError
from nederlearn.models import (
    MODE_EXAM, MODE_QUIZ,
    AnswerFeedback, QuizSessionState, SessionResult, Section,
)
from nederlearn.progress import ProgressStore
from nederlearn.questions import QuestionGenerator
from nederlearn.spelling import is_acceptable

logger = logging.getLogger(__name__)

LOADING = "loading"
IN_PROGRESS = "in_progress"
FEEDBACK = "feedback"
FINISHED = "finished"


def required_to_pass(question_count: int) -> int:
    """Correct answers needed to complete a section: 15 of 30, half of shorter sets."""
    return min(settings.MINIMUM_CORRECT_TO_PASS, math.ceil(question_count / 2))


class SessionController:
    """Drives a single session.

    The front end calls ``submit_answer`` and then, once it has shown the
    feedback for ``FEEDBACK_DELAY_SECONDS``, ``advance``.
    """

    def __init__(self, catalog: VocabularyCatalog, generator: QuestionGenerator, store: ProgressStore):
        self.catalog = catalog
        self.generator = generator
        self.store = store
        self.status = LOADING
        self.mode = None
        self.section_id = None
        self.questions = []
        self.current_index = 0
        self.correct_count = 0
        self.pending = None
        self.result = None
        self.resumed = False

    # --- entry ---

    def start_or_resume_quiz(self, section_id: str) -> bool:
        """Load a section quiz. Returns True when a saved session was resumed."""
        section = self.catalog.require_section(section_id)
        fresh = self.generator.generate_quiz(section)
        if not fresh:
            raise InsufficientDataError(f"Section {section_id} has too few items to quiz")
        self.mode = MODE_QUIZ
        self.section_id = section_id
        self.questions = fresh
        self.current_index = 0
        self.correct_count = 0
        self.resumed = False

        saved = self.store.get_quiz_state(section_id)
        if saved is not None:
            try:
                self.questions = self._restore(section, saved, len(fresh))
                self.current_index = saved.current_index
                self.correct_count = saved.correct_count
                self.resumed = True
                logger.info(f"Resuming {section_id} at question {saved.current_index + 1}/{len(fresh)}")
            except StateMismatchError as e:
                logger.info(f"Discarding saved session for {section_id}: {e}")
                self.store.clear_quiz_state(section_id)
                self.questions = fresh
        self.status = IN_PROGRESS
        return self.resumed

    def _restore(self, section: Section, saved: QuizSessionState, expected: int) -> list:
        if len(saved.question_ids) != expected:
            raise StateMismatchError(f"saved {len(saved.question_ids)} questions, expected {expected}")
        if not 0 <= saved.current_index < expected:
            raise StateMismatchError(f"index {saved.current_index} outside {expected} questions")
        if not 0 <= saved.correct_count <= saved.current_index:
            raise StateMismatchError(f"{saved.correct_count} correct after {saved.current_index} answers")
        return self.generator.build_questions(section, saved.question_ids)

    def start_exam(self) -> None:
        questions = self.generator.generate_exam()
        if not questions:
            raise InsufficientDataError("Catalog has no items for an exam")
        self.mode = MODE_EXAM
        self.section_id = None
        self.questions = questions
        self.current_index = 0
        self.correct_count = 0
        self.resumed = False
        self.status = IN_PROGRESS

    # --- queries ---

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @property
    def current_question(self):
        if self.status in (LOADING, FINISHED):
            return None
        return self.questions[self.current_index]

    @property
    def is_last_question(self) -> bool:
        return self.current_index == len(self.questions) - 1

    @property
    def progress(self) -> float:
        if not self.questions:
            return 0.0
        return (self.current_index + 1) / len(self.questions)

    @property
    def xp_per_correct(self) -> int:
        if self.mode == MODE_EXAM:
            return settings.XP_PER_CORRECT_EXAM
        return settings.XP_PER_CORRECT_QUIZ

    # --- answering ---

    def submit_answer(self, value: str) -> AnswerFeedback | None:
        """Grade the current question. Returns None while feedback is still pending."""
        if self.status == FEEDBACK:
            return None
        if self.status != IN_PROGRESS:
            raise SessionStateError(f"Cannot answer while {self.status}")
        question = self.current_question
        if self.mode == MODE_EXAM:
            if not value.strip():
                return None
            correct = is_acceptable(value, question.correct_answer)
        else:
            correct = value == question.correct_answer

        xp = 0
        if correct:
            self.correct_count += 1
            xp = self.xp_per_correct
            self.store.add_xp(xp)
        self.pending = AnswerFeedback(
            question_id=question.id,
            given=value,
            correct_answer=question.correct_answer,
            correct=correct,
            xp_awarded=xp,
        )
        self.status = FEEDBACK
        # Everything an answer earns is stored before its feedback is shown
        if self.is_last_question:
            self._finalize()
        elif self.mode == MODE_QUIZ:
            self.store.save_quiz_state(QuizSessionState(
                section_id=self.section_id,
                current_index=self.current_index + 1,
                correct_count=self.correct_count,
                question_ids=[q.id for q in self.questions],
            ))
        return self.pending

    def advance(self) -> SessionResult | None:
        """Move past the shown feedback. Returns the result after the last question."""
        if self.status != FEEDBACK:
            raise SessionStateError(f"Nothing to advance from while {self.status}")
        self.pending = None
        if not self.is_last_question:
            self.current_index += 1
            self.status = IN_PROGRESS
            return None
        self.status = FINISHED
        return self.result

    def _finalize(self) -> SessionResult:
        total = len(self.questions)
        score = self.correct_count / total
        if self.mode == MODE_EXAM:
            self.store.record_exam(score)
            passed = score >= settings.EXAM_PASS_THRESHOLD
        else:
            passed = self.correct_count >= required_to_pass(total)
            if passed:
                self.store.complete_section(self.section_id, score)
            else:
                logger.info(
                    f"Section {self.section_id} not passed: {self.correct_count}/{total} "
                    f"(need {required_to_pass(total)})"
                )
            self.store.clear_quiz_state(self.section_id)
        self.result = SessionResult(
            mode=self.mode,
            correct_count=self.correct_count,
            total_questions=total,
            score=score,
            passed=passed,
            xp_gained=self.correct_count * self.xp_per_correct,
            section_id=self.section_id,
            new_badges=self.store.refresh_badges(),
        )
        return self.result
