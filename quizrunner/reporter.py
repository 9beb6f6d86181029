"""Result line formatting for a finished quiz session."""

import sys

from .models import SessionResult


TIMEOUT_PREFIX = "Times up, "


def score_percent(correct: int, total: int) -> int:
    """Whole-number percentage, truncated."""
    if total <= 0:
        raise ValueError("total must be positive")
    return correct * 100 // total


def format_result(result: SessionResult) -> str:
    """
    Build the final result sentence.

    Example:
        "Times up, 3/12 of the questions were correctly answered. Your score is 25"
    """
    message = (
        f"{result.correct}/{result.total} of the questions were correctly answered. "
        f"Your score is {score_percent(result.correct, result.total)}"
    )
    if result.timed_out:
        message = TIMEOUT_PREFIX + message
    return message


def print_results(result: SessionResult, output_stream=None):
    """Write the result line. A timeout interrupts a pending prompt, so start a new line first."""
    out = output_stream if output_stream is not None else sys.stdout
    if result.timed_out:
        out.write("\n")
    out.write(format_result(result) + "\n")
    out.flush()
