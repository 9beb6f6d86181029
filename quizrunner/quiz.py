#!/usr/bin/env python3
"""
Timed Quiz Runner CLI

Loads a quiz file, shuffles its questions and runs one timed session on the
terminal. Scoring stops as soon as the time budget runs out.
"""

import argparse
import getpass
import sys
from pathlib import Path
from typing import List, Optional

from .config_loader import create_sample_config, load_config, parse_duration
from .errors import QuizError
from .loader import is_encrypted, load_pairs
from .models import QuestionSet, QuizConfig, SessionResult
from .session import QuizSession, run_session


def _duration_arg(value: str) -> float:
    try:
        seconds = parse_duration(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))
    if seconds <= 0:
        raise argparse.ArgumentTypeError(f"duration must be positive: '{value}'")
    return seconds


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Timed command-line quiz",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  quiz-runner
  quiz-runner --path resources/problems.csv --timeout 30s
  quiz-runner --path quiz.enc --timeout 1m30s --log session.log
        """
    )
    parser.add_argument(
        "--path",
        help="Path to a CSV quiz file or encrypted .enc quiz file (default: resources/problems.csv)"
    )
    parser.add_argument(
        "--timeout",
        type=_duration_arg,
        help="Quiz duration, e.g. 20s, 1m30s, or plain seconds (default: 20s)"
    )
    parser.add_argument(
        "--config",
        help="Path to a quiz configuration file (default: quiz_config.json next to the package)"
    )
    parser.add_argument(
        "--log",
        help="Append session events to this file"
    )
    parser.add_argument(
        "--create-config",
        metavar="OUT",
        help="Write a sample configuration file and exit"
    )
    return parser


class QuizRunner:
    """Main CLI application controller."""

    def __init__(self, input_stream=None, output_stream=None):
        self.input_stream = input_stream if input_stream is not None else sys.stdin
        self.output_stream = output_stream if output_stream is not None else sys.stdout
        self.config: Optional[QuizConfig] = None
        self.question_set: Optional[QuestionSet] = None
        self.session: Optional[QuizSession] = None

    def _print(self, message: str = ""):
        self.output_stream.write(message + "\n")
        self.output_stream.flush()

    def resolve_config(self, args: argparse.Namespace) -> QuizConfig:
        """
        Merge the configuration file with command-line overrides.

        Raises:
            ValueError: If the resulting configuration is invalid
        """
        config_path = Path(args.config) if args.config else None
        config = load_config(config_path)

        if args.path:
            config.path = Path(args.path)
        if args.timeout is not None:
            config.timeout_seconds = args.timeout
        if args.log:
            config.log_path = Path(args.log)

        is_valid, error_message = config.validate()
        if not is_valid:
            raise ValueError(f"Invalid configuration: {error_message}")
        return config

    def _prompt_secret(self) -> Optional[str]:
        try:
            secret = getpass.getpass(f"Password or key for {self.config.path.name}: ")
        except (KeyboardInterrupt, EOFError):
            return None
        return secret.strip() or None

    def load_quiz(self, secret: Optional[str] = None) -> bool:
        """
        Load and shuffle the quiz questions.

        Returns:
            True if successful, False otherwise
        """
        try:
            pairs = load_pairs(self.config.path, secret)
            self.question_set = QuestionSet.build(pairs, source=self.config.path)
        except QuizError as e:
            self._print(f"Error: {e}")
            return False
        return True

    def start_session(self) -> SessionResult:
        """Run the timed session on the loaded questions."""
        self.session = QuizSession(self.config, self.question_set)
        return run_session(
            self.session,
            input_stream=self.input_stream,
            output_stream=self.output_stream
        )

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Main application entry point."""
        args = build_arg_parser().parse_args(argv)

        if args.create_config:
            create_sample_config(Path(args.create_config))
            return 0

        try:
            self.config = self.resolve_config(args)
        except ValueError as e:
            self._print(f"Error: {e}")
            return 1

        secret = None
        if is_encrypted(self.config.path):
            secret = self._prompt_secret()
            if secret is None:
                self._print(f"Error: a password or key is required to open {self.config.path}")
                return 1

        if not self.load_quiz(secret):
            return 1

        self._print(
            f"Math quiz. Complete {len(self.question_set)} questions "
            f"in {int(self.config.timeout_seconds)} seconds"
        )

        self.start_session()
        return 0


def main():
    """Entry point for the quiz runner."""
    runner = QuizRunner()
    sys.exit(runner.run())


if __name__ == "__main__":
    main()
