"""Caller-facing entry point bundling catalog, generator, store and sessions."""
import logging
import random
from dataclasses import dataclass
from typing import Optional

from nederlearn.catalog import VocabularyCatalog
from nederlearn.config import settings
from nederlearn.db import Persistence, SQLitePersistence, init_db
from nederlearn.errors import InsufficientDataError, NotFoundError, SessionStateError
from nederlearn.i18n import Translator
from nederlearn.models import AnswerFeedback, ProgressRecord, Section, SessionResult, UserProfile
from nederlearn.progress import BADGES, ProgressStore
from nederlearn.questions import QuestionGenerator
from nederlearn.session import SessionController

logger = logging.getLogger(__name__)

STARTED = "started"
RESUMED = "resumed"
NOT_FOUND = "not_found"
UNAVAILABLE = "unavailable"


@dataclass
class StartResult:
    status: str
    session: Optional[SessionController] = None

    @property
    def ok(self) -> bool:
        return self.session is not None


class NederLearn:
    """One learner's view of the app. Runs at most one session at a time."""

    def __init__(
        self,
        catalog: VocabularyCatalog,
        persistence: Persistence,
        rng: random.Random | None = None,
        translator: Translator | None = None,
    ):
        self.catalog = catalog
        self.store = ProgressStore(persistence)
        self.generator = QuestionGenerator(catalog, rng)
        self.translator = translator or Translator.from_settings()
        self.session: SessionController | None = None

    @classmethod
    def open(cls, db_path: str | None = None, vocab_path: str | None = None, **kwargs) -> "NederLearn":
        db_path = db_path or settings.DB_PATH
        init_db(db_path)
        catalog = VocabularyCatalog.from_file(vocab_path)
        return cls(catalog, SQLitePersistence(db_path), **kwargs)

    # --- catalog ---

    def load_section(self, section_id: str) -> Section | None:
        return self.catalog.get_section(section_id)

    def section_states(self) -> list[tuple]:
        return self.store.section_states(self.catalog)

    # --- sessions ---

    def start_or_resume_quiz(self, section_id: str) -> StartResult:
        session = SessionController(self.catalog, self.generator, self.store)
        try:
            resumed = session.start_or_resume_quiz(section_id)
        except NotFoundError as e:
            logger.warning(str(e))
            return StartResult(NOT_FOUND)
        except InsufficientDataError as e:
            logger.warning(str(e))
            return StartResult(UNAVAILABLE)
        self.session = session
        return StartResult(RESUMED if resumed else STARTED, session)

    def start_exam(self) -> StartResult:
        session = SessionController(self.catalog, self.generator, self.store)
        try:
            session.start_exam()
        except InsufficientDataError as e:
            logger.warning(str(e))
            return StartResult(UNAVAILABLE)
        self.session = session
        return StartResult(STARTED, session)

    def _active_session(self) -> SessionController:
        if self.session is None:
            raise SessionStateError("No session has been started")
        return self.session

    def submit_answer(self, value: str) -> AnswerFeedback | None:
        return self._active_session().submit_answer(value)

    def advance(self) -> SessionResult | None:
        return self._active_session().advance()

    # --- profile & progress ---

    def init_user(self, display_name: str) -> UserProfile:
        return self.store.init_user(display_name)

    def get_profile(self) -> UserProfile | None:
        return self.store.get_profile()

    def get_progress(self) -> ProgressRecord:
        return self.store.get_progress()

    def unlock_section(self, section_id: str) -> bool:
        if self.catalog.get_section(section_id) is None:
            logger.warning(f"Unlock requested for unknown section {section_id}")
            return False
        return self.store.unlock_section(section_id)

    def can_take_exam(self) -> bool:
        return self.store.can_take_exam(self.catalog)

    def badges(self) -> list[dict]:
        """Badge catalogue with an ``earned`` flag for the current profile."""
        profile = self.get_profile()
        owned = profile.badges if profile else set()
        return [dict(badge, earned=badge["id"] in owned) for badge in BADGES]
