"""Fixed answer vocabularies shared by validation and analytics."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping


class RecordKind(str, Enum):
    """The two survey schemas handled by the system."""

    GENERAL = "general"
    LAWYER = "lawyer"

    @property
    def collection(self) -> str:
        return _COLLECTIONS[self]


_COLLECTIONS = {
    RecordKind.GENERAL: "surveys",
    RecordKind.LAWYER: "lawyer_surveys",
}


@dataclass(frozen=True)
class Vocabulary:
    """Ordered closed set of legal values for a constrained-choice field."""

    name: str
    values: tuple[str, ...]

    def __contains__(self, value: object) -> bool:
        return value in self.values

    def __iter__(self):
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)


@dataclass(frozen=True)
class MultilingualAnswers:
    """Yes/no answers tagged by language code.

    ``answers`` maps a language tag to its ``(affirmative, negative)`` pair.
    ``extra_affirmative`` holds phrasings that only exist on one question.
    """

    name: str
    answers: Mapping[str, tuple[str, str]]
    extra_affirmative: tuple[str, ...] = ()
    _affirmative: frozenset[str] = field(init=False, repr=False, compare=False)
    _negative: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        affirmative = {yes for yes, _ in self.answers.values()}
        affirmative.update(self.extra_affirmative)
        negative = {no for _, no in self.answers.values()}
        object.__setattr__(self, "_affirmative", frozenset(affirmative))
        object.__setattr__(self, "_negative", frozenset(negative))

    @property
    def affirmative(self) -> frozenset[str]:
        return self._affirmative

    @property
    def negative(self) -> frozenset[str]:
        return self._negative

    def is_affirmative(self, value: object) -> bool:
        return isinstance(value, str) and value in self._affirmative

    def as_vocabulary(self) -> Vocabulary:
        values: list[str] = []
        for yes, no in self.answers.values():
            values.extend((yes, no))
        return Vocabulary(self.name, tuple(values))


YES_NO_BY_LANGUAGE: dict[str, tuple[str, str]] = {
    "en": ("Yes", "No"),
    "ar": ("نعم", "لا"),
    "tl": ("Oo", "Hindi"),
    "ur": ("ہاں", "نہیں"),
    "bn": ("হ্যাঁ", "না"),
    "id": ("Ya", "Tidak"),
    "zh": ("是", "否"),
    "so": ("Haa", "Maya"),
    "hi": ("हाँ", "नहीं"),
}

LEGAL_ISSUES_ANSWERS = MultilingualAnswers("legalIssues", YES_NO_BY_LANGUAGE)

# The giveaway question uses a longer phrasing in English and Arabic.
GIVEAWAY_ANSWERS = MultilingualAnswers(
    "giveawayInterest",
    {lang: pair for lang, pair in YES_NO_BY_LANGUAGE.items() if lang not in {"en", "ar"}},
    extra_affirmative=("Yes, I would", "نعم، أرغب"),
)


PROFESSIONAL_STATUS = Vocabulary(
    "professional_status",
    (
        "محامي مستقل (freelancer)",
        "شريك في مكتب محاماة (2-5 محامين)",
        "مكتب محاماة متوسط (6-15 محامي)",
        "شركة محاماة كبيرة (15+ محامي)",
        "محامي موظف وأبحث عن عمل إضافي",
    ),
)

YEARS_EXPERIENCE = Vocabulary(
    "years_experience",
    ("1-3 سنوات", "4-6 سنوات", "7-10 سنوات", "أكثر من 10 سنوات"),
)

DISCOUNT_10_15 = "نعم، أقبل خصم 10-15%"
DISCOUNT_20_25 = "نعم، أقبل خصم 20-25%"
DISCOUNT_30_35 = "نعم، أقبل خصم 30-35%"
DISCOUNT_NONE = "لا، أريد السعر الكامل بدون خصم"

DISCOUNT_ACCEPTANCE = Vocabulary(
    "discount_acceptance",
    (DISCOUNT_10_15, DISCOUNT_20_25, DISCOUNT_30_35, DISCOUNT_NONE),
)

CONSULTATION_PRICE = Vocabulary(
    "current_consultation_price",
    (
        "100-200 ر.س",
        "201-300 ر.س",
        "301-500 ر.س",
        "501-800 ر.س",
        "أكثر من 800 ر.س",
        "لا أقدم استشارات كتابية حالياً",
    ),
)

MOST_IMPORTANT = Vocabulary(
    "most_important",
    (
        "ضمان الدخل الشهري الثابت",
        "عدد الطلبات المعقول (عدم الضغط)",
        "نوعية القضايا (تتوافق مع تخصصي)",
        "المرونة الكاملة في الوقت",
        "سهولة التعامل مع العملاء",
        "أخرى",
    ),
)

BIGGEST_CHALLENGE = Vocabulary(
    "biggest_challenge",
    (
        "صعوبة الحصول على عملاء جدد",
        "عدم انتظام الدخل الشهري",
        "صعوبة تحصيل المستحقات من العملاء",
        "عدم وضوح توقعات العملاء",
        "الوقت المهدر في التسويق والإعلانات",
        "أخرى",
    ),
)

INTEREST_VERY_HIGH = "مهتم جداً - أريد التفاصيل فوراً"
INTEREST_HIGH = "مهتم - أريد معرفة المزيد"

INTEREST_LEVEL = Vocabulary(
    "interest_level",
    (
        INTEREST_VERY_HIGH,
        INTEREST_HIGH,
        "ربما - يعتمد على التفاصيل الأخرى",
        "غير مهتم حالياً",
    ),
)

INTERESTED_TIERS = frozenset({INTEREST_VERY_HIGH, INTEREST_HIGH})

REVIEW_STATUS = Vocabulary(
    "status",
    ("pending", "contacted", "interested", "not_interested", "converted"),
)

DEFAULT_REVIEW_STATUS = "pending"


def is_highly_interested(interest_level: object) -> bool:
    return interest_level in INTERESTED_TIERS


def count_affirmative(values: Iterable[object], answers: MultilingualAnswers) -> int:
    return sum(1 for value in values if answers.is_affirmative(value))
