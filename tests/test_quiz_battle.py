"""
Tests for the quiz battle game rules.
"""

import pytest

from backend.features import GameState, QuizBattle
from backend.models import QuizQuestion
from configs import QUIZ_SECONDS_PER_QUESTION, QUIZ_START_HEALTH


def question(n=1):
    return QuizQuestion(
        question=f"Q{n}", options=["a", "b", "c", "d"], correct_answer="b", explanation="because"
    )


@pytest.fixture
def battle():
    game = QuizBattle()
    game.start("Trigonometry", "Grade 10", question())
    return game


class TestScoring:

    def test_start_resets_round(self, battle):
        assert battle.state is GameState.PLAYING
        assert battle.health == QUIZ_START_HEALTH
        assert battle.time_left == QUIZ_SECONDS_PER_QUESTION
        assert battle.score == 0

    def test_streak_bonus(self, battle):
        points = []
        for n in range(3):
            points.append(battle.answer("b").points)
            battle.next_round(question(n + 2))

        assert points == [100, 110, 120]
        assert battle.score == 330
        assert battle.streak == 3
        assert battle.xp_earned == 330
        assert battle.total_xp == 330

    def test_correct_answer_message(self, battle):
        outcome = battle.answer("b")
        assert outcome.correct
        assert outcome.message == "Critical Hit! +100 XP"

    def test_wrong_answer_costs_health_and_streak(self, battle):
        battle.answer("b")
        battle.next_round(question(2))
        outcome = battle.answer("a")

        assert not outcome.correct
        assert outcome.message == "Missed! You took damage."
        assert battle.health == QUIZ_START_HEALTH - 1
        assert battle.streak == 0

    def test_answer_twice_rejected(self, battle):
        battle.answer("b")
        with pytest.raises(RuntimeError):
            battle.answer("b")


class TestGameOver:

    def test_defeated_after_losing_all_health(self, battle):
        for n in range(QUIZ_START_HEALTH):
            outcome = battle.answer("a")
            if not outcome.game_over:
                battle.next_round(question(n + 2))

        assert outcome.game_over
        assert outcome.message == "Defeated!"
        assert battle.state is GameState.RESULT

    def test_times_up(self, battle):
        assert battle.tick(QUIZ_SECONDS_PER_QUESTION - 1) is False
        assert battle.tick() is True
        assert battle.state is GameState.RESULT
        assert battle.result_message == "Time's Up!"

    def test_clock_stops_after_answer(self, battle):
        battle.answer("b")
        assert battle.tick(QUIZ_SECONDS_PER_QUESTION) is False
        assert battle.state is GameState.PLAYING

    def test_high_score_survives_restart(self, battle):
        battle.answer("b")
        battle.next_round(question(2))
        battle.answer("a")
        battle.game_over("Time's Up!")
        assert battle.high_score == 100

        battle.start("Trigonometry", "Grade 10", question())
        assert battle.score == 0
        assert battle.high_score == 100
        assert battle.total_xp == 100

    def test_next_round_requires_playing(self, battle):
        battle.game_over("Defeated!")
        with pytest.raises(RuntimeError):
            battle.next_round(question(2))
