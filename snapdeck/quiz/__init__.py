"""Quiz generators."""

from .generators import (
    AdaptiveQuiz,
    QuizDimension,
    QuizItem,
    QuizRound,
    build_fixed_quiz,
    card_value,
    render_worksheet,
)

__all__ = [
    "AdaptiveQuiz",
    "QuizDimension",
    "QuizItem",
    "QuizRound",
    "build_fixed_quiz",
    "card_value",
    "render_worksheet",
]
