"""
Timed quiz session.

The interaction loop reads answers on a background thread while a one-shot
timer counts down the session budget. The coordinator waits for whichever of
the two signals arrives first and reports the result exactly once; the other
thread is abandoned and dies with the process.
"""

import queue
import sys
import threading
from datetime import datetime
from typing import Callable, Optional

from .models import (
    QuestionSet, QuizConfig, Scorer, SessionOutcome, SessionResult
)
from .reporter import print_results


class QuizSession:
    """Manages the state of one quiz run."""

    def __init__(self, config: QuizConfig, question_set: QuestionSet):
        self.config = config
        self.question_set = question_set
        self.scorer = Scorer(len(question_set))
        self.log_path = config.log_path
        self.result: Optional[SessionResult] = None
        self._log_lock = threading.Lock()

    def log(self, event: str, details: str = ""):
        """Append an entry to the session log, if one is configured."""
        if self.log_path is None:
            return

        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        log_entry = f"[{timestamp}] - {event}"
        if details:
            log_entry += f" - {details}"
        log_entry += "\n"

        with self._log_lock:
            with open(self.log_path, 'a', encoding='utf-8') as f:
                f.write(log_entry)


class InteractionLoop:
    """Asks each question in order and scores the answers read from the input stream."""

    def __init__(
        self,
        question_set: QuestionSet,
        scorer: Scorer,
        input_stream,
        output_stream,
        on_complete: Callable[[], None],
        session_logger=None
    ):
        self.question_set = question_set
        self.scorer = scorer
        self.input_stream = input_stream
        self.output_stream = output_stream
        self.on_complete = on_complete
        self.session_logger = session_logger
        self.thread: Optional[threading.Thread] = None
        self.abandoned = threading.Event()
        self._score_lock = threading.Lock()

    def start(self):
        """Run the loop on a daemon thread so a blocked read never holds up exit."""
        self.thread = threading.Thread(
            target=self.run,
            name="quiz-interaction",
            daemon=True
        )
        self.thread.start()

    def run(self):
        total = len(self.question_set)
        for number, pair in enumerate(self.question_set, start=1):
            if self.abandoned.is_set():
                return

            self.output_stream.write(f"{pair.prompt} = ")
            self.output_stream.flush()

            line = self._read_line()
            with self._score_lock:
                if self.abandoned.is_set():
                    return
                if not line:
                    self._log("QUESTION_UNANSWERED", f"Question {number}/{total}: end of input")
                    continue

                correct = self.scorer.record_answer(line, pair.expected_answer)
                self._log("QUESTION_ANSWERED", f"Question {number}/{total}, Correct: {correct}")

        self._log("LOOP_COMPLETE", f"All {total} questions processed")
        self.on_complete()

    def abandon(self):
        """
        Stop scoring once the session has resolved.

        A read already in progress is left blocked; whatever it returns is
        discarded. Waits for an answer being scored right now to finish.
        """
        with self._score_lock:
            self.abandoned.set()

    def _read_line(self) -> str:
        # A closed or broken stream counts as end of input
        try:
            return self.input_stream.readline()
        except (OSError, ValueError):
            return ""

    def _log(self, event: str, details: str):
        if self.session_logger:
            self.session_logger(event, details)


class DeadlineSupervisor:
    """One-shot timer that fires once the session budget has elapsed."""

    def __init__(self, timeout_seconds: float, on_fire: Callable[[], None], session_logger=None):
        self.timeout_seconds = timeout_seconds
        self.on_fire = on_fire
        self.session_logger = session_logger
        self.timer: Optional[threading.Timer] = None

    def start(self):
        self.timer = threading.Timer(self.timeout_seconds, self._fire)
        self.timer.daemon = True
        self.timer.start()

    def cancel(self):
        """Tear down the timer; a no-op once it has fired."""
        if self.timer is not None:
            self.timer.cancel()

    def _fire(self):
        if self.session_logger:
            self.session_logger("DEADLINE_FIRED", f"{self.timeout_seconds:g} seconds elapsed")
        self.on_fire()


class SessionCoordinator:
    """
    Races the interaction loop against the deadline.

    Both workers report into a single queue that is read exactly once, so
    the first signal decides the outcome and any later one is ignored. The
    score is snapshotted only after that, when the loop has either finished
    or is parked on a read nobody will look at again.
    """

    def __init__(
        self,
        session: QuizSession,
        input_stream=None,
        output_stream=None,
        reporter: Callable = print_results
    ):
        self.session = session
        self.input_stream = input_stream if input_stream is not None else sys.stdin
        self.output_stream = output_stream if output_stream is not None else sys.stdout
        self.reporter = reporter
        self.outcome: Optional[SessionOutcome] = None  # None while running
        self._signals: "queue.Queue[SessionOutcome]" = queue.Queue()

        self.interaction_loop = InteractionLoop(
            question_set=session.question_set,
            scorer=session.scorer,
            input_stream=self.input_stream,
            output_stream=self.output_stream,
            on_complete=lambda: self._signals.put(SessionOutcome.COMPLETED),
            session_logger=session.log
        )
        self.deadline = DeadlineSupervisor(
            timeout_seconds=session.config.timeout_seconds,
            on_fire=lambda: self._signals.put(SessionOutcome.TIMED_OUT),
            session_logger=session.log
        )

    def run(self) -> SessionResult:
        """
        Start both workers, wait for the first signal and report the result.

        Returns:
            SessionResult with the winning outcome and the score at that moment
        """
        if self.interaction_loop.thread is not None:
            raise RuntimeError("A quiz session can only be run once")

        total = len(self.session.question_set)
        self.session.log(
            "SESSION_START",
            f"Questions: {total}, Timeout: {self.session.config.timeout_seconds:g}s"
        )

        self.deadline.start()
        self.interaction_loop.start()

        self.outcome = self._signals.get()
        self.deadline.cancel()
        self.interaction_loop.abandon()

        correct, total = self.session.scorer.snapshot()
        result = SessionResult(outcome=self.outcome, correct=correct, total=total)
        self.session.result = result

        event = "SESSION_TIMEOUT" if result.timed_out else "SESSION_COMPLETED"
        self.session.log(event, f"Score: {correct}/{total}")

        self.reporter(result, self.output_stream)
        return result


def run_session(session: QuizSession, input_stream=None, output_stream=None) -> SessionResult:
    """Run one timed session and print its result."""
    coordinator = SessionCoordinator(session, input_stream=input_stream, output_stream=output_stream)
    return coordinator.run()
