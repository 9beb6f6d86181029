"""
Data models for a quiz session.

Provides type-safe structures for questions, the shuffled question set,
score tracking, session outcomes and quiz configuration.
"""

import math
import random
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional, Tuple

from .errors import EmptyQuestionSetError


DEFAULT_TIMEOUT_SECONDS = 20.0
MAX_TIMEOUT_SECONDS = 24 * 60 * 60


@dataclass(frozen=True)
class QuestionAnswerPair:
    """A single prompt and the answer expected for it."""
    prompt: str
    expected_answer: str


@dataclass(frozen=True)
class QuestionSet:
    """Questions in the order they are asked for one session."""
    pairs: Tuple[QuestionAnswerPair, ...]

    def __post_init__(self):
        if not self.pairs:
            raise EmptyQuestionSetError()

    @staticmethod
    def build(
        pairs: Iterable[QuestionAnswerPair],
        rng: Optional[random.Random] = None,
        source=None
    ) -> 'QuestionSet':
        """
        Build a question set by shuffling the loaded pairs once.

        Args:
            pairs: Pairs in file order
            rng: Random source; seeded from the current time when omitted
            source: Where the pairs came from, used in error messages

        Returns:
            QuestionSet holding a uniform random permutation of the pairs

        Raises:
            EmptyQuestionSetError: If there are no pairs
        """
        shuffled = list(pairs)
        if not shuffled:
            raise EmptyQuestionSetError(source)

        if rng is None:
            rng = random.Random(time.time_ns())
        rng.shuffle(shuffled)
        return QuestionSet(pairs=tuple(shuffled))

    def __len__(self) -> int:
        return len(self.pairs)

    def __iter__(self):
        return iter(self.pairs)


class SessionOutcome(Enum):
    """How a session ended."""
    COMPLETED = "completed"
    TIMED_OUT = "timed_out"


@dataclass
class ScoreState:
    """Counters for one session. Only the interaction loop mutates them."""
    total: int
    correct_count: int = 0
    answered_count: int = 0


class Scorer:
    """Tracks correct answers against one question set."""

    def __init__(self, total: int):
        self.state = ScoreState(total=total)

    def record_answer(self, user_input: str, expected: str) -> bool:
        """
        Score one answer by exact match after trimming the input.

        Returns:
            True if the answer was correct
        """
        if self.state.answered_count >= self.state.total:
            raise ValueError(f"All {self.state.total} questions have already been scored")

        self.state.answered_count += 1
        correct = user_input.strip() == expected
        if correct:
            self.state.correct_count += 1
        return correct

    def snapshot(self) -> Tuple[int, int]:
        """Return (correct_count, total)."""
        return self.state.correct_count, self.state.total


@dataclass(frozen=True)
class SessionResult:
    """The single outcome of a session and the score read when it resolved."""
    outcome: SessionOutcome
    correct: int
    total: int

    @property
    def timed_out(self) -> bool:
        return self.outcome is SessionOutcome.TIMED_OUT


def default_quiz_path() -> Path:
    """Bundled quiz file, resolved against the working directory."""
    return Path.cwd() / "resources" / "problems.csv"


@dataclass
class QuizConfig:
    """
    Configuration for one quiz run.

    Attributes:
        path: Quiz file location (CSV, or Fernet-encrypted CSV with .enc suffix)
        timeout_seconds: Time budget for the whole session
        log_path: Session log file; logging is off when None
    """
    path: Path
    timeout_seconds: float
    log_path: Optional[Path] = None

    @staticmethod
    def from_dict(data: dict) -> 'QuizConfig':
        """Create QuizConfig from dictionary."""
        path = data.get('path')
        log_path = data.get('log_path')
        return QuizConfig(
            path=Path(path) if path else default_quiz_path(),
            timeout_seconds=float(data.get('timeout_seconds', DEFAULT_TIMEOUT_SECONDS)),
            log_path=Path(log_path) if log_path else None
        )

    def validate(self) -> tuple[bool, str]:
        """
        Validate configuration values.

        Returns:
            Tuple of (is_valid, error_message)
        """
        if not math.isfinite(self.timeout_seconds):
            return False, "Timeout must be a finite number of seconds"

        if self.timeout_seconds <= 0:
            return False, "Timeout must be greater than zero"

        if self.timeout_seconds > MAX_TIMEOUT_SECONDS:
            return False, "Timeout must be at most 24 hours"

        return True, ""

    @staticmethod
    def default() -> 'QuizConfig':
        """Return default configuration (bundled quiz, 20 second budget)."""
        return QuizConfig(
            path=default_quiz_path(),
            timeout_seconds=DEFAULT_TIMEOUT_SECONDS
        )
