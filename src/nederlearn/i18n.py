"""Interface strings for the supported app languages."""
from dataclasses import dataclass

from nederlearn.config import settings

TRANSLATIONS = {
    "en": {
        "app.name": "NederLearn",
        "app.subtitle": "Learn Dutch step by step",
        "home.level": "Level",
        "home.totalXP": "Total XP",
        "home.xpNeeded": "{xp} XP needed",
        "home.vocabularySections": "Vocabulary Sections",
        "home.sectionsCompleted": "{completed} of {total} sections completed",
        "home.finalExam": "Final Exam",
        "home.readyForExam": "Ready for the Exam!",
        "home.completeMore": "Complete {count} more sections",
        "home.locked": "Locked",
        "quiz.question": "What is the Dutch word for:",
        "quiz.questionOf": "Question {current} of {total}",
        "quiz.score": "Score",
        "quiz.correct": "Correct!",
        "quiz.incorrect": "Incorrect",
        "quiz.resumed": "Resuming where you left off",
        "quiz.unavailable": "This section does not have enough words for a quiz yet",
        "exam.question": "What is \"{word}\" in Dutch?",
        "exam.hint": "Type your answer in Dutch",
        "exam.correctAnswer": "Correct answer: {answer}",
        "exam.passed": "Exam passed!",
        "exam.failed": "Keep practicing",
        "section.complete": "Section Complete!",
        "section.completed": "Completed",
        "section.active": "Available",
        "section.score": "Your Score",
        "section.xpEarned": "XP Earned",
        "section.fruits": "Fruits",
        "section.vegetables": "Vegetables",
        "section.animals": "Animals",
        "section.numbers": "Numbers",
        "section.colors": "Colors",
        "section.food": "Food & Drinks",
        "section.places": "Places",
        "section.actions": "Daily Actions",
        "section.family": "Family",
        "section.jobs": "Jobs",
        "section.transport": "Transportation",
        "section.correctAnswers": "Correct",
        "section.sectionFailed": "Section Not Passed",
        "section.needMore": "You need at least {count} correct answers to complete this section",
        "section.unlockCost": "Unlock this section for {xp} XP",
        "section.notEnoughXP": "Not Enough XP",
        "section.needXP": "You need {xp} XP to unlock this section",
        "section.unlocked": "Section unlocked!",
        "profile.title": "Profile",
        "profile.level": "Level",
        "profile.totalXP": "Total XP",
        "profile.sectionsCompleted": "Sections Completed",
        "profile.badges": "Badges",
        "profile.progressToLevel": "Progress to Level {level}",
        "profile.xpRemaining": "{xp} XP remaining",
        "profile.memberSince": "Member since {date}",
        "common.error": "Error",
        "common.notFound": "Not found: {id}",
    },
    "ar": {
        "app.name": "NederLearn",
        "app.subtitle": "تعلّم الهولندية خطوة بخطوة",
        "home.level": "المستوى",
        "home.totalXP": "إجمالي نقاط الخبرة",
        "home.xpNeeded": "{xp} نقطة خبرة مطلوبة",
        "home.vocabularySections": "أقسام المفردات",
        "home.sectionsCompleted": "{completed} من {total} أقسام مكتملة",
        "home.finalExam": "الامتحان النهائي",
        "home.readyForExam": "جاهز للامتحان!",
        "home.completeMore": "أكمل {count} أقسام إضافية",
        "home.locked": "مغلق",
        "quiz.question": "ما معنى هذه الكلمة باللغة الهولندية؟",
        "quiz.questionOf": "السؤال {current} من {total}",
        "quiz.score": "النتيجة",
        "quiz.correct": "صحيح!",
        "quiz.incorrect": "خطأ",
        "quiz.resumed": "استئناف من حيث توقفت",
        "quiz.unavailable": "هذا القسم لا يحتوي على كلمات كافية للاختبار بعد",
        "exam.question": "ما هي كلمة \"{word}\" باللغة الهولندية؟",
        "exam.hint": "اكتب إجابتك باللغة الهولندية",
        "exam.correctAnswer": "الإجابة الصحيحة: {answer}",
        "exam.passed": "لقد نجحت في الامتحان!",
        "exam.failed": "واصل التدريب",
        "section.complete": "تم إكمال القسم!",
        "section.completed": "مكتمل",
        "section.active": "متاح",
        "section.unlocked": "تم فتح القسم!",
        "section.score": "نتيجتك",
        "section.xpEarned": "نقاط الخبرة المكتسبة",
        "section.fruits": "الفواكه",
        "section.vegetables": "الخضروات",
        "section.animals": "الحيوانات",
        "section.numbers": "الأرقام",
        "section.colors": "الألوان",
        "section.food": "الطعام والمشروبات",
        "section.places": "الأماكن",
        "section.actions": "الأفعال اليومية",
        "section.family": "العائلة",
        "section.jobs": "المهن",
        "section.transport": "المواصلات",
        "section.correctAnswers": "الإجابات الصحيحة",
        "section.sectionFailed": "لم يتم اجتياز القسم",
        "section.needMore": "تحتاج إلى {count} إجابة صحيحة على الأقل لإكمال هذا القسم",
        "section.unlockCost": "افتح هذا القسم مقابل {xp} نقطة خبرة",
        "section.notEnoughXP": "نقاط الخبرة غير كافية",
        "section.needXP": "تحتاج إلى {xp} نقطة خبرة لفتح هذا القسم",
        "profile.title": "الملف الشخصي",
        "profile.level": "المستوى",
        "profile.totalXP": "إجمالي نقاط الخبرة",
        "profile.sectionsCompleted": "الأقسام المكتملة",
        "profile.badges": "الشارات",
        "profile.progressToLevel": "التقدم نحو المستوى {level}",
        "profile.xpRemaining": "{xp} نقطة خبرة متبقية",
        "profile.memberSince": "عضو منذ {date}",
        "common.error": "خطأ",
        "common.notFound": "غير موجود: {id}",
    },
}

RTL_LOCALES = {"ar"}


@dataclass(frozen=True)
class Translator:
    locale: str = "en"

    def __post_init__(self):
        if self.locale not in TRANSLATIONS:
            raise ValueError(f"Unsupported locale: {self.locale}")

    @classmethod
    def from_settings(cls) -> "Translator":
        return cls(settings.LOCALE)

    @property
    def is_rtl(self) -> bool:
        return self.locale in RTL_LOCALES

    def translate(self, key: str, **params) -> str:
        """Look up ``key``; missing keys fall back to English, then to the key itself."""
        text = TRANSLATIONS[self.locale].get(key) or TRANSLATIONS["en"].get(key, key)
        for name, value in params.items():
            text = text.replace(f"{{{name}}}", str(value))
        return text

    __call__ = translate
