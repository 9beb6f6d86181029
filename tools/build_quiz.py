#!/usr/bin/env python3
"""
build_quiz.py - Encrypt plaintext CSV quiz files.

Usage with key file:
    python tools/build_quiz.py --in problems.csv --out quizzes/problems.enc --key-file CLASS_A.key

Usage with a freshly generated key file:
    python tools/build_quiz.py --in problems.csv --out quizzes/problems.enc --new-key CLASS_A.key

Usage with password:
    python tools/build_quiz.py --in problems.csv --out quizzes/problems.enc --password
"""

import argparse
import getpass
import hashlib
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from quizrunner.crypto import encrypt_payload, write_new_key
from quizrunner.errors import LoadError
from quizrunner.loader import load_pairs


MIN_PASSWORD_LENGTH = 8


def build_quiz(
    in_file: str,
    out_file: str,
    key_file: str = None,
    password: str = None,
    new_key_file: str = None
) -> int:
    """
    Validate a plaintext CSV quiz and write it encrypted.

    With new_key_file a Fernet key is generated, saved there and used.

    Returns:
        Process exit code
    """
    try:
        pairs = load_pairs(Path(in_file))
    except LoadError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    if not pairs:
        print(f"[ERROR] No questions found in {in_file}", file=sys.stderr)
        return 1
    print(f"[OK] Input CSV validated ({len(pairs)} questions)")

    try:
        with open(in_file, 'rb') as f:
            plaintext = f.read()

        if password is not None:
            final_data = encrypt_payload(plaintext, password=password)
        elif new_key_file is not None:
            key = write_new_key(new_key_file)
            print(f"[OK] Encryption key generated: {new_key_file}")
            final_data = encrypt_payload(plaintext, key=key)
        else:
            with open(key_file, 'rb') as f:
                key = f.read().strip()
            final_data = encrypt_payload(plaintext, key=key)

        sha256_hash = hashlib.sha256(final_data).hexdigest()

        Path(out_file).parent.mkdir(parents=True, exist_ok=True)
        with open(out_file, 'wb') as f:
            f.write(final_data)
    except (OSError, ValueError) as e:
        print(f"[ERROR] Error encrypting quiz: {e}", file=sys.stderr)
        return 1

    print(f"\n[OK] Success: Quiz encrypted")
    print(f"  Input: {in_file} ({len(plaintext)} bytes)")
    print(f"  Output: {out_file} ({len(final_data)} bytes)")
    print(f"  Method: {'Password-based' if password is not None else 'Key file'}")
    print(f"  SHA256: {sha256_hash}")
    if new_key_file is not None:
        print(f"\n[!] Share {new_key_file} only with the people taking the quiz.")
        print(f"    The runner asks for the key when opening the .enc quiz.")
    return 0


def _read_new_password():
    password = getpass.getpass("Enter encryption password: ")
    password_confirm = getpass.getpass("Confirm password: ")

    if password != password_confirm:
        print("[ERROR] Passwords do not match", file=sys.stderr)
        return None

    if len(password) < MIN_PASSWORD_LENGTH:
        print(f"[ERROR] Password must be at least {MIN_PASSWORD_LENGTH} characters", file=sys.stderr)
        return None

    return password


def main():
    parser = argparse.ArgumentParser(
        description="Encrypt a plaintext CSV quiz file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python tools/build_quiz.py --in problems.csv --out quizzes/problems.enc --key-file CLASS_A.key
  python tools/build_quiz.py --in problems.csv --out quizzes/problems.enc --new-key CLASS_A.key
  python tools/build_quiz.py --in problems.csv --out quizzes/problems.enc --password

Notes:
  - Every input row needs a prompt and an answer column
  - Output directory will be created if it doesn't exist
  - The output name must end in .enc for the runner to decrypt it
        """
    )
    parser.add_argument(
        "--in",
        dest="in_file",
        required=True,
        help="Input plaintext CSV file"
    )
    parser.add_argument(
        "--out",
        required=True,
        help="Output encrypted quiz file (.enc)"
    )
    method = parser.add_mutually_exclusive_group(required=True)
    method.add_argument(
        "--key-file",
        help="File containing the encryption key"
    )
    method.add_argument(
        "--new-key",
        metavar="KEY_FILE",
        help="Generate a new key, save it to KEY_FILE and encrypt with it"
    )
    method.add_argument(
        "--password",
        action="store_true",
        help="Use password-based encryption instead of key file"
    )

    args = parser.parse_args()

    password = None
    if args.password:
        password = _read_new_password()
        if password is None:
            sys.exit(1)

    sys.exit(build_quiz(args.in_file, args.out, args.key_file, password, args.new_key))


if __name__ == "__main__":
    main()
