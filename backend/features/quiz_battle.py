"""
Quiz battle game rules.

A battle is a run of multiple-choice questions against the clock:

- the player starts with QUIZ_START_HEALTH hearts and 30 s per question
- a correct answer scores 100 + 10 x current streak and extends the streak
- a wrong answer costs a heart and resets the streak
- the game ends at zero hearts ("Defeated!") or when the clock runs out
  ("Time's Up!")

Question generation is not done here; the caller feeds each question in
with ``next_round``.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from backend.models import QuizQuestion
from configs import (
    QUIZ_START_HEALTH,
    QUIZ_SECONDS_PER_QUESTION,
    QUIZ_BASE_POINTS,
    QUIZ_STREAK_BONUS,
)

logger = logging.getLogger("eduvision.quiz")


class GameState(str, Enum):
    LOBBY = "lobby"
    PLAYING = "playing"
    RESULT = "result"


@dataclass
class AnswerOutcome:
    correct: bool
    points: int
    message: str
    game_over: bool


@dataclass
class QuizBattle:
    """State of one battle plus the player's lifetime stats."""
    topic: str = ""
    grade: str = "Grade 10"
    state: GameState = GameState.LOBBY
    score: int = 0
    streak: int = 0
    health: int = QUIZ_START_HEALTH
    time_left: int = QUIZ_SECONDS_PER_QUESTION
    question: Optional[QuizQuestion] = None
    answered: Optional[str] = None
    result_message: str = ""
    total_xp: int = 0
    high_score: int = 0
    xp_earned: int = 0

    def start(self, topic: str, grade: str, question: QuizQuestion) -> None:
        """Begin a fresh battle; lifetime stats carry over."""
        self.topic = topic
        self.grade = grade
        self.score = 0
        self.streak = 0
        self.health = QUIZ_START_HEALTH
        self.xp_earned = 0
        self.result_message = ""
        self.state = GameState.PLAYING
        self._load_question(question)

    def _load_question(self, question: QuizQuestion) -> None:
        self.question = question
        self.answered = None
        self.time_left = QUIZ_SECONDS_PER_QUESTION

    def next_round(self, question: QuizQuestion) -> None:
        if self.state is not GameState.PLAYING:
            raise RuntimeError("Battle is not in progress")
        self.result_message = ""
        self._load_question(question)

    def answer(self, option: str) -> AnswerOutcome:
        """Score an answer. A second answer to the same question is rejected."""
        if self.state is not GameState.PLAYING or self.question is None:
            raise RuntimeError("Battle is not in progress")
        if self.answered is not None:
            raise RuntimeError("Question already answered")
        self.answered = option

        if option == self.question.correct_answer:
            points = QUIZ_BASE_POINTS + self.streak * QUIZ_STREAK_BONUS
            self.score += points
            self.total_xp += points
            self.xp_earned += points
            self.streak += 1
            self.result_message = f"Critical Hit! +{points} XP"
            return AnswerOutcome(True, points, self.result_message, game_over=False)

        self.health -= 1
        self.streak = 0
        self.result_message = "Missed! You took damage."
        if self.health <= 0:
            self.game_over("Defeated!")
            return AnswerOutcome(False, 0, "Defeated!", game_over=True)
        return AnswerOutcome(False, 0, self.result_message, game_over=False)

    def tick(self, seconds: int = 1) -> bool:
        """Advance the clock; returns True when time ran out and the game ended."""
        if self.state is not GameState.PLAYING or self.answered is not None:
            return False
        self.time_left = max(0, self.time_left - seconds)
        if self.time_left == 0:
            self.game_over("Time's Up!")
            return True
        return False

    def game_over(self, reason: str) -> None:
        self.state = GameState.RESULT
        self.result_message = reason
        if self.score > self.high_score:
            self.high_score = self.score
        logger.info("Quiz battle over (%s): score=%d high=%d", reason, self.score, self.high_score)
