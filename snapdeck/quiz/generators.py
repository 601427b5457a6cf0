"""
Quiz generators over an in-memory list of fetched cards.

Fixed quiz: the whole deck, shuffled once, one question per card.
Adaptive quiz: endless multiple-choice rounds with a running score.
"""

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from ..errors import QuizError
from ..models import RemoteCard

CHOICE_COUNT = 6
MIN_ADAPTIVE_CARDS = CHOICE_COUNT


class QuizDimension(Enum):
    """Which field of a card a question shows or asks for."""
    READING = "reading"
    MEANING = "meaning"
    KANJI = "kanji"
    
    @property
    def label(self) -> str:
        return self.value.capitalize()


def card_value(card: RemoteCard, dimension: QuizDimension) -> str:
    """Field of card for dimension. Kana-only cards show their display text as kanji."""
    if dimension is QuizDimension.READING:
        return card.reading
    if dimension is QuizDimension.MEANING:
        return card.meaning
    return card.kanji or card.front


def _require_dimensions(dimensions: Sequence[QuizDimension]) -> List[QuizDimension]:
    selected = list(dict.fromkeys(dimensions))
    if not selected:
        raise QuizError("Select at least one question type.")
    return selected


# =============================================================================
# FIXED QUIZ
# =============================================================================

@dataclass
class QuizItem:
    number: int
    card: RemoteCard
    dimension: QuizDimension
    question: str


def build_fixed_quiz(
    cards: Sequence[RemoteCard],
    dimensions: Sequence[QuizDimension],
    rng: Optional[random.Random] = None,
) -> List[QuizItem]:
    """One question per card, cards shuffled once, dimension picked per card."""
    selected = _require_dimensions(dimensions)
    rng = rng or random.Random()
    shuffled = list(cards)
    rng.shuffle(shuffled)
    
    items = []
    for number, card in enumerate(shuffled, start=1):
        dimension = rng.choice(selected)
        items.append(QuizItem(number, card, dimension, card_value(card, dimension)))
    return items


def render_worksheet(items: Sequence[QuizItem]) -> str:
    """Printable worksheet: a question line followed by a blank answer line."""
    lines = []
    for item in items:
        lines.append(f"{item.number}. [{item.dimension.label}] {item.question}")
        lines.append("   ____________________")
    return "\n".join(lines)


# =============================================================================
# ADAPTIVE QUIZ
# =============================================================================

@dataclass
class QuizRound:
    card: RemoteCard
    question_dimension: QuizDimension
    answer_dimension: QuizDimension
    question: str
    choices: List[str] = field(default_factory=list)
    correct_index: int = 0
    
    @property
    def correct_answer(self) -> str:
        return self.choices[self.correct_index]


class AdaptiveQuiz:
    """
    Infinite multiple-choice quiz with a running correct/total score.
    
    Each round shows one card by a question dimension and offers six
    distinct choices for an answer dimension: the right one plus five
    taken from other cards.
    """
    
    def __init__(
        self,
        cards: Sequence[RemoteCard],
        dimensions: Sequence[QuizDimension],
        rng: Optional[random.Random] = None,
    ) -> None:
        if len(cards) < MIN_ADAPTIVE_CARDS:
            raise QuizError(
                f"The adaptive quiz needs at least {MIN_ADAPTIVE_CARDS} cards "
                f"(loaded {len(cards)})."
            )
        self.cards = list(cards)
        self.dimensions = _require_dimensions(dimensions)
        self.rng = rng or random.Random()
        self.correct = 0
        self.total = 0
        self.current: Optional[QuizRound] = None
    
    @property
    def score(self) -> str:
        return f"{self.correct}/{self.total}"
    
    def reset(self) -> None:
        self.correct = 0
        self.total = 0
        self.current = None
    
    def _pick_dimensions(self):
        answer_dimension = self.rng.choice(self.dimensions)
        others = [d for d in self.dimensions if d is not answer_dimension]
        question_dimension = self.rng.choice(others) if others else answer_dimension
        return question_dimension, answer_dimension
    
    def next_round(self) -> QuizRound:
        """Build and remember the next round."""
        question_dimension, answer_dimension = self._pick_dimensions()
        
        playable = [
            card for card in self.cards
            if card_value(card, question_dimension) and card_value(card, answer_dimension)
        ]
        if not playable:
            raise QuizError("No card has both fields for this question type.")
        card = self.rng.choice(playable)
        answer = card_value(card, answer_dimension)
        
        others = [c for c in self.cards if c is not card]
        self.rng.shuffle(others)
        distractors: List[str] = []
        for other in others:
            value = card_value(other, answer_dimension)
            if value and value != answer and value not in distractors:
                distractors.append(value)
            if len(distractors) == CHOICE_COUNT - 1:
                break
        if len(distractors) < CHOICE_COUNT - 1:
            raise QuizError("Not enough distinct answers in this deck for six choices.")
        
        choices = distractors + [answer]
        self.rng.shuffle(choices)
        self.current = QuizRound(
            card=card,
            question_dimension=question_dimension,
            answer_dimension=answer_dimension,
            question=card_value(card, question_dimension),
            choices=choices,
            correct_index=choices.index(answer),
        )
        return self.current
    
    def answer(self, choice_index: int) -> bool:
        """Score the user's pick for the current round."""
        if self.current is None:
            raise QuizError("No question is active.")
        is_correct = choice_index == self.current.correct_index
        # One score per round
        self.current = None
        self.total += 1
        if is_correct:
            self.correct += 1
        return is_correct
