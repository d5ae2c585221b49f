"""Durable learner state: XP, levels, section completion, unlocks and resumable quizzes."""
import json
import logging
import uuid
from datetime import datetime

from nederlearn.catalog import VocabularyCatalog
from nederlearn.config import settings
from nederlearn.db import Persistence
from nederlearn.errors import InsufficientFundsError, PersistenceError
from nederlearn.models import (
    SECTION_ACTIVE, SECTION_COMPLETED, SECTION_LOCKED,
    ProgressRecord, QuizSessionState, SectionProgress, UserProfile,
)

logger = logging.getLogger(__name__)

BADGES = [
    {"id": "first_section", "name": "First Steps", "description": "Complete your first section", "icon": "award"},
    {"id": "perfect_score", "name": "Perfect Score", "description": "Get 100% on a quiz", "icon": "star"},
    {"id": "exam_passed", "name": "Exam Master", "description": "Pass the final exam", "icon": "check-circle"},
    {"id": "level_5", "name": "Rising Star", "description": "Reach level 5", "icon": "trending-up"},
]


def level_for_xp(total_xp: int) -> int:
    return total_xp // settings.XP_PER_LEVEL + 1


def xp_into_level(profile: UserProfile) -> int:
    return profile.total_xp % settings.XP_PER_LEVEL


def xp_to_next_level(profile: UserProfile) -> int:
    return settings.XP_PER_LEVEL - xp_into_level(profile)


def level_progress(profile: UserProfile) -> float:
    return xp_into_level(profile) / settings.XP_PER_LEVEL


def earned_badges(profile: UserProfile, progress: ProgressRecord) -> set[str]:
    earned = set()
    if progress.completed_sections:
        earned.add("first_section")
    if any(sp.score == 1 for sp in progress.section_progress.values()):
        earned.add("perfect_score")
    if progress.exam_completed and progress.exam_best_score >= settings.EXAM_PASS_THRESHOLD:
        earned.add("exam_passed")
    if profile.level >= 5:
        earned.add("level_5")
    return earned


class ProgressStore:
    """Owns the user profile and progress record.

    Every mutation is a read-modify-write against the persistence layer;
    callers must not interleave two mutations.
    """

    def __init__(self, persistence: Persistence, key_prefix: str | None = None):
        self.persistence = persistence
        self.key_prefix = key_prefix or settings.KEY_PREFIX

    # --- keys ---

    @property
    def user_key(self) -> str:
        return f"{self.key_prefix}_user"

    @property
    def progress_key(self) -> str:
        return f"{self.key_prefix}_progress"

    def quiz_state_key(self, section_id: str) -> str:
        return f"{self.key_prefix}_quiz_state_{section_id}"

    def _read(self, key: str) -> dict | None:
        raw = self.persistence.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error(f"Corrupt record at {key}: {e}")
            raise PersistenceError(f"corrupt record at {key}") from e

    def _write(self, key: str, data: dict) -> None:
        self.persistence.set(key, json.dumps(data).encode("utf-8"))

    # --- profile ---

    def init_user(self, display_name: str) -> UserProfile:
        profile = UserProfile(
            id=uuid.uuid4().hex,
            display_name=display_name,
            created_at=datetime.now().isoformat(),
        )
        self.save_profile(profile)
        self.save_progress(ProgressRecord())
        logger.info(f"Created profile {profile.id} for {display_name}")
        return profile

    def get_profile(self) -> UserProfile | None:
        data = self._read(self.user_key)
        return UserProfile.from_dict(data) if data else None

    def save_profile(self, profile: UserProfile) -> None:
        self._write(self.user_key, profile.to_dict())

    def add_xp(self, amount: int) -> UserProfile | None:
        """Add XP and recompute the level. No-op (None) without a profile."""
        if amount < 0:
            raise ValueError(f"XP amount must be non-negative, got {amount}")
        profile = self.get_profile()
        if profile is None:
            return None
        profile.total_xp += amount
        profile.level = level_for_xp(profile.total_xp)
        self.save_profile(profile)
        logger.info(f"+{amount} XP (total {profile.total_xp}, level {profile.level})")
        return profile

    # --- progress ---

    def get_progress(self) -> ProgressRecord:
        data = self._read(self.progress_key)
        return ProgressRecord.from_dict(data) if data else ProgressRecord()

    def save_progress(self, progress: ProgressRecord) -> None:
        self._write(self.progress_key, progress.to_dict())

    def complete_section(self, section_id: str, score: float) -> ProgressRecord:
        """Mark a section completed. Every call counts as an attempt and overwrites the score."""
        if not 0 <= score <= 1:
            raise ValueError(f"score must be within [0, 1], got {score}")
        progress = self.get_progress()
        progress.completed_sections.add(section_id)
        previous = progress.section_progress.get(section_id)
        progress.section_progress[section_id] = SectionProgress(
            completed=True,
            score=score,
            attempts=(previous.attempts if previous else 0) + 1,
        )
        self.save_progress(progress)
        logger.info(f"Section {section_id} completed with score {score:.2f}")
        return progress

    def record_exam(self, score: float) -> ProgressRecord:
        """Store the latest exam score, keeping the best one alongside."""
        if not 0 <= score <= 1:
            raise ValueError(f"score must be within [0, 1], got {score}")
        progress = self.get_progress()
        progress.exam_completed = True
        progress.exam_score = score
        progress.exam_best_score = max(progress.exam_best_score, score)
        self.save_progress(progress)
        logger.info(f"Exam recorded with score {score:.2f}")
        return progress

    def _charge(self, profile: UserProfile, cost: int) -> None:
        if profile.total_xp < cost:
            raise InsufficientFundsError(profile.total_xp, cost)
        profile.total_xp -= cost
        profile.level = level_for_xp(profile.total_xp)

    def unlock_section(self, section_id: str) -> bool:
        """Spend UNLOCK_COST XP to open a locked section.

        The unlock flag is written before the XP deduction so a failed second
        write leaves the learner with the section and their XP.
        """
        cost = settings.UNLOCK_COST
        profile = self.get_profile()
        if profile is None:
            logger.info(f"Unlock of {section_id} refused: no profile")
            return False
        progress = self.get_progress()
        try:
            self._charge(profile, cost)
        except InsufficientFundsError as e:
            logger.info(f"Unlock of {section_id} refused: {e}")
            return False
        progress.unlocked_sections.add(section_id)
        self.save_progress(progress)
        self.save_profile(profile)
        logger.info(f"Section {section_id} unlocked for {cost} XP")
        return True

    def is_section_unlocked(self, section_id: str) -> bool:
        return section_id in self.get_progress().unlocked_sections

    def section_state(
        self, catalog: VocabularyCatalog, section_id: str, progress: ProgressRecord | None = None,
    ) -> str:
        if progress is None:
            progress = self.get_progress()
        if section_id in progress.completed_sections:
            return SECTION_COMPLETED
        index = catalog.section_index(section_id)
        if index == 0:
            return SECTION_ACTIVE
        previous = catalog.list_sections()[index - 1]
        if previous.id in progress.completed_sections or section_id in progress.unlocked_sections:
            return SECTION_ACTIVE
        return SECTION_LOCKED

    def section_states(self, catalog: VocabularyCatalog) -> list[tuple]:
        progress = self.get_progress()
        return [(s, self.section_state(catalog, s.id, progress)) for s in catalog.list_sections()]

    def sections_remaining(self, catalog: VocabularyCatalog) -> int:
        completed = self.get_progress().completed_sections
        return sum(1 for s in catalog.list_sections() if s.id not in completed)

    def can_take_exam(self, catalog: VocabularyCatalog) -> bool:
        return self.sections_remaining(catalog) == 0

    def refresh_badges(self) -> set[str]:
        """Merge newly earned badges into the profile. Returns only the new ones."""
        profile = self.get_profile()
        if profile is None:
            return set()
        new = earned_badges(profile, self.get_progress()) - profile.badges
        if new:
            profile.badges |= new
            self.save_profile(profile)
            logger.info(f"Badges earned: {', '.join(sorted(new))}")
        return new

    # --- resumable quiz sessions ---

    def get_quiz_state(self, section_id: str) -> QuizSessionState | None:
        data = self._read(self.quiz_state_key(section_id))
        return QuizSessionState.from_dict(data) if data else None

    def save_quiz_state(self, state: QuizSessionState) -> None:
        self._write(self.quiz_state_key(state.section_id), state.to_dict())

    def clear_quiz_state(self, section_id: str) -> None:
        self.persistence.remove(self.quiz_state_key(section_id))

    def clear_all(self) -> None:
        """Remove profile, progress and every saved quiz session."""
        keys = [self.user_key, self.progress_key]
        keys += self.persistence.keys_with_prefix(self.quiz_state_key(""))
        self.persistence.remove_many(keys)
        logger.info("All learner state cleared")
