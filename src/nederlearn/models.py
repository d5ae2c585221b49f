"""Data classes for the vocabulary, progress and session model."""
from dataclasses import dataclass, field
from typing import Optional

SECTION_COMPLETED = "completed"
SECTION_ACTIVE = "active"
SECTION_LOCKED = "locked"

MODE_QUIZ = "quiz"
MODE_EXAM = "exam"


@dataclass(frozen=True)
class VocabItem:
    id: str
    source_word: str
    target_word: str
    image_prompt: str = ""


@dataclass(frozen=True)
class Section:
    id: str
    title: str
    items: tuple[VocabItem, ...] = ()
    difficulty: str = "beginner"
    max_questions_per_session: Optional[int] = None


@dataclass
class QuizQuestion:
    id: str
    correct_answer: str
    options: list[str]
    source_word: str


@dataclass
class ExamQuestion:
    id: str
    correct_answer: str
    source_word: str


@dataclass
class UserProfile:
    id: str
    display_name: str
    level: int = 1
    total_xp: int = 0
    badges: set[str] = field(default_factory=set)
    created_at: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "displayName": self.display_name,
            "level": self.level,
            "totalXP": self.total_xp,
            "badges": sorted(self.badges),
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UserProfile":
        return cls(
            id=data["id"],
            display_name=data["displayName"],
            level=data.get("level", 1),
            total_xp=data.get("totalXP", 0),
            badges=set(data.get("badges", [])),
            created_at=data.get("createdAt", ""),
        )


@dataclass
class SectionProgress:
    completed: bool = False
    score: float = 0.0
    attempts: int = 0


@dataclass
class ProgressRecord:
    completed_sections: set[str] = field(default_factory=set)
    section_progress: dict[str, SectionProgress] = field(default_factory=dict)
    exam_completed: bool = False
    exam_score: float = 0.0
    exam_best_score: float = 0.0
    unlocked_sections: set[str] = field(default_factory=set)

    def to_dict(self) -> dict:
        return {
            "completedSections": sorted(self.completed_sections),
            "sectionProgress": {
                section_id: {
                    "sectionId": section_id,
                    "completed": sp.completed,
                    "score": sp.score,
                    "attempts": sp.attempts,
                }
                for section_id, sp in self.section_progress.items()
            },
            "examCompleted": self.exam_completed,
            "examScore": self.exam_score,
            "examBestScore": self.exam_best_score,
            "unlockedSections": sorted(self.unlocked_sections),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ProgressRecord":
        # Older records have no unlockedSections / examBestScore
        return cls(
            completed_sections=set(data.get("completedSections", [])),
            section_progress={
                section_id: SectionProgress(
                    completed=sp.get("completed", False),
                    score=sp.get("score", 0.0),
                    attempts=sp.get("attempts", 0),
                )
                for section_id, sp in data.get("sectionProgress", {}).items()
            },
            exam_completed=data.get("examCompleted", False),
            exam_score=data.get("examScore", 0.0),
            exam_best_score=data.get("examBestScore", data.get("examScore", 0.0)),
            unlocked_sections=set(data.get("unlockedSections") or []),
        )


@dataclass
class QuizSessionState:
    section_id: str
    current_index: int = 0
    correct_count: int = 0
    question_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "sectionId": self.section_id,
            "currentIndex": self.current_index,
            "correctCount": self.correct_count,
            "questionIds": list(self.question_ids),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "QuizSessionState":
        return cls(
            section_id=data["sectionId"],
            current_index=data.get("currentIndex", 0),
            correct_count=data.get("correctCount", 0),
            question_ids=list(data.get("questionIds", [])),
        )


@dataclass
class AnswerFeedback:
    question_id: str
    given: str
    correct_answer: str
    correct: bool
    xp_awarded: int = 0


@dataclass
class SessionResult:
    mode: str
    correct_count: int
    total_questions: int
    score: float
    passed: bool
    xp_gained: int
    section_id: Optional[str] = None
    new_badges: set[str] = field(default_factory=set)
