import random

import pytest

from snapdeck.errors import QuizError
from snapdeck.quiz import (
    AdaptiveQuiz,
    QuizDimension,
    build_fixed_quiz,
    card_value,
    render_worksheet,
)

ALL_DIMENSIONS = [QuizDimension.READING, QuizDimension.MEANING, QuizDimension.KANJI]


def test_card_value_kanji_falls_back_to_front(deck_cards):
    kana_only = deck_cards[4]
    assert card_value(kana_only, QuizDimension.KANJI) == "ありがとう"
    assert card_value(deck_cards[1], QuizDimension.KANJI) == "食"


def test_fixed_quiz_covers_every_card_once(deck_cards):
    items = build_fixed_quiz(deck_cards, [QuizDimension.MEANING], rng=random.Random(3))

    assert [item.number for item in items] == list(range(1, len(deck_cards) + 1))
    assert sorted(item.card.front for item in items) == sorted(card.front for card in deck_cards)
    assert all(item.question == item.card.meaning for item in items)


def test_fixed_quiz_requires_a_dimension(deck_cards):
    with pytest.raises(QuizError):
        build_fixed_quiz(deck_cards, [])


def test_render_worksheet(deck_cards):
    items = build_fixed_quiz(deck_cards[:2], [QuizDimension.READING], rng=random.Random(1))
    lines = render_worksheet(items).splitlines()

    assert len(lines) == 4
    assert lines[0].startswith("1. [Reading] ")
    assert lines[1].strip() == "____________________"


def test_adaptive_quiz_needs_six_cards(deck_cards):
    with pytest.raises(QuizError):
        AdaptiveQuiz(deck_cards[:5], ALL_DIMENSIONS)


def test_adaptive_round_has_six_distinct_choices(deck_cards):
    quiz = AdaptiveQuiz(deck_cards, ALL_DIMENSIONS, rng=random.Random(7))

    for _ in range(20):
        round_ = quiz.next_round()
        assert len(round_.choices) == 6
        assert len(set(round_.choices)) == 6
        assert round_.correct_answer == card_value(round_.card, round_.answer_dimension)
        assert round_.question == card_value(round_.card, round_.question_dimension)
        assert round_.question_dimension is not round_.answer_dimension


def test_single_dimension_asks_and_answers_same_field(deck_cards):
    quiz = AdaptiveQuiz(deck_cards, [QuizDimension.MEANING], rng=random.Random(2))
    round_ = quiz.next_round()
    assert round_.question_dimension is QuizDimension.MEANING
    assert round_.answer_dimension is QuizDimension.MEANING


def test_scoring(deck_cards):
    quiz = AdaptiveQuiz(deck_cards, ALL_DIMENSIONS, rng=random.Random(11))

    round_ = quiz.next_round()
    assert quiz.answer(round_.correct_index) is True
    round_ = quiz.next_round()
    assert quiz.answer((round_.correct_index + 1) % 6) is False

    assert quiz.score == "1/2"
    quiz.reset()
    assert quiz.score == "0/0"


def test_round_is_scored_once(deck_cards):
    quiz = AdaptiveQuiz(deck_cards, ALL_DIMENSIONS, rng=random.Random(5))
    round_ = quiz.next_round()
    quiz.answer(round_.correct_index)

    with pytest.raises(QuizError):
        quiz.answer(round_.correct_index)
    assert quiz.total == 1


def test_not_enough_distinct_answers(deck_cards):
    same_meaning = [card.__class__(card.front, card.reading, card.kanji, "same") for card in deck_cards]
    quiz = AdaptiveQuiz(same_meaning, [QuizDimension.MEANING], rng=random.Random(0))
    with pytest.raises(QuizError):
        quiz.next_round()
