"""
Quiz file loader.

Reads question/answer pairs from a CSV file, or from a Fernet-encrypted CSV
file with the .enc suffix.
"""

import csv
import io
from pathlib import Path
from typing import List, Optional

from cryptography.fernet import InvalidToken

from .crypto import decrypt_payload
from .errors import LoadError
from .models import QuestionAnswerPair


ENCRYPTED_SUFFIX = ".enc"


def is_encrypted(path: Path) -> bool:
    return Path(path).suffix.lower() == ENCRYPTED_SUFFIX


def parse_pairs(text: str, source) -> List[QuestionAnswerPair]:
    """
    Parse CSV text into question/answer pairs.

    The first column is the prompt, the second the expected answer. Blank
    rows are skipped and columns past the second are ignored.

    Raises:
        LoadError: If the CSV is malformed or a row has fewer than two columns
    """
    pairs = []
    reader = csv.reader(io.StringIO(text, newline=''))
    try:
        for row in reader:
            if not row:
                continue
            if len(row) < 2:
                raise LoadError(source, f"row {reader.line_num} has {len(row)} column(s), expected 2")
            pairs.append(QuestionAnswerPair(prompt=row[0], expected_answer=row[1]))
    except csv.Error as e:
        raise LoadError(source, f"malformed CSV at line {reader.line_num}: {e}")

    return pairs


def load_pairs(path: Path, secret: Optional[str] = None) -> List[QuestionAnswerPair]:
    """
    Load question/answer pairs from a quiz file.

    Args:
        path: Path to a .csv file or an encrypted .enc file
        secret: Password or Fernet key; required for .enc files

    Returns:
        Pairs in file order

    Raises:
        LoadError: If the file cannot be read, decrypted or parsed
    """
    path = Path(path)
    try:
        with open(path, 'rb') as f:
            payload = f.read()
    except OSError as e:
        raise LoadError(path, e.strerror or str(e))

    if is_encrypted(path):
        if not secret:
            raise LoadError(path, "a password or key is required for encrypted quiz files")
        try:
            payload = decrypt_payload(payload, secret)
        except (InvalidToken, ValueError):
            raise LoadError(path, "wrong password or key")

    try:
        text = payload.decode('utf-8-sig')
    except UnicodeDecodeError as e:
        raise LoadError(path, f"not valid UTF-8 text ({e.reason})")

    return parse_pairs(text, path)
