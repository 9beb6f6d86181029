#!/usr/bin/env python3
"""
verify_quiz.py - Decrypt a quiz file and list its questions for inspection.

Usage with key file:
    python tools/verify_quiz.py --quiz quizzes/problems.enc --key-file CLASS_A.key

Usage with password:
    python tools/verify_quiz.py --quiz quizzes/problems.enc --password

Usage with plaintext:
    python tools/verify_quiz.py --quiz resources/problems.csv
"""

import argparse
import getpass
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from quizrunner.errors import LoadError
from quizrunner.loader import is_encrypted, load_pairs


def verify_quiz(quiz_file: str, secret: str = None, verbose: bool = False) -> bool:
    """
    Verify a quiz file (encrypted or plaintext).
    Returns True if valid, False otherwise.
    """
    try:
        pairs = load_pairs(Path(quiz_file), secret)
    except LoadError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return False

    if not pairs:
        print(f"[ERROR] No questions found in {quiz_file}", file=sys.stderr)
        return False

    print(f"[OK] {len(pairs)} questions loaded from {quiz_file}")
    if verbose:
        for number, pair in enumerate(pairs, start=1):
            print(f"  {number:3d}. {pair.prompt} = {pair.expected_answer}")
    return True


def main():
    parser = argparse.ArgumentParser(
        description="Validate a quiz file, decrypting it if needed."
    )
    parser.add_argument("--quiz", required=True, help="Quiz file (.csv or .enc)")
    parser.add_argument("--key-file", help="File containing the decryption key")
    parser.add_argument("--password", action="store_true", help="Prompt for a decryption password")
    parser.add_argument("-v", "--verbose", action="store_true", help="List every question and answer")

    args = parser.parse_args()

    secret = None
    if is_encrypted(Path(args.quiz)):
        if args.key_file:
            with open(args.key_file, 'r', encoding='utf-8') as f:
                secret = f.read().strip()
        elif args.password:
            secret = getpass.getpass("Enter decryption password: ")
        else:
            print("[ERROR] Encrypted quiz requires --key-file or --password", file=sys.stderr)
            sys.exit(1)

    sys.exit(0 if verify_quiz(args.quiz, secret, args.verbose) else 1)


if __name__ == "__main__":
    main()
