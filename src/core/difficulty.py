"""
Difficulty vocabulary normalization.

Generated output and user input use mixed vocabulary ("junior", "fácil",
"Hard", ...). Everything is folded onto the closed easy/medium/hard scale;
unknown tokens fall back to medium.
"""

from src.models.question import QuestionDifficulty

_SYNONYMS: dict[str, QuestionDifficulty] = {
    # easy
    "easy": QuestionDifficulty.EASY,
    "junior": QuestionDifficulty.EASY,
    "fácil": QuestionDifficulty.EASY,
    "facil": QuestionDifficulty.EASY,
    # medium
    "medium": QuestionDifficulty.MEDIUM,
    "mid": QuestionDifficulty.MEDIUM,
    "media": QuestionDifficulty.MEDIUM,
    "medio": QuestionDifficulty.MEDIUM,
    # hard
    "hard": QuestionDifficulty.HARD,
    "senior": QuestionDifficulty.HARD,
    "difícil": QuestionDifficulty.HARD,
    "dificil": QuestionDifficulty.HARD,
}

_LABELS: dict[QuestionDifficulty, str] = {
    QuestionDifficulty.EASY: "junior (easy)",
    QuestionDifficulty.MEDIUM: "mid-level (medium)",
    QuestionDifficulty.HARD: "senior (hard)",
}


def normalize_difficulty(token: str | None) -> QuestionDifficulty:
    """Map a free-form difficulty token to easy, medium or hard."""
    if not isinstance(token, str):
        return QuestionDifficulty.MEDIUM
    return _SYNONYMS.get(token.strip().lower(), QuestionDifficulty.MEDIUM)


def difficulty_label(token: str | QuestionDifficulty | None) -> str:
    """Prompt hint for a requested difficulty."""
    level = normalize_difficulty(token.value if isinstance(token, QuestionDifficulty) else token)
    return _LABELS[level]
