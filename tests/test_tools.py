"""
Tests for the quiz file tools.

Tests encrypting and verifying quiz files with the tools/ scripts.
"""

import pytest
from pathlib import Path
from unittest.mock import patch

# Add parent and tools directories to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent.parent / "tools"))

from cryptography.fernet import Fernet

from build_quiz import build_quiz, main as build_quiz_main
from verify_quiz import verify_quiz
from quizrunner.crypto import write_new_key
from quizrunner.loader import load_pairs


@pytest.fixture
def plain_quiz(tmp_path):
    path = tmp_path / "problems.csv"
    path.write_text("5+5,10\n1+1,2\n", encoding='utf-8')
    return path


class TestBuildQuiz:
    """Test quiz encryption."""

    def test_key_file_round_trip(self, plain_quiz, tmp_path):
        """Test that a key-file encrypted quiz loads with the same key."""
        key_file = tmp_path / "class.key"
        write_new_key(key_file)
        out = tmp_path / "quizzes" / "problems.enc"

        exit_code = build_quiz(str(plain_quiz), str(out), key_file=str(key_file))

        assert exit_code == 0
        key = key_file.read_text(encoding='utf-8')
        assert len(load_pairs(out, key)) == 2

    def test_new_key_generated_and_used(self, plain_quiz, tmp_path, capsys):
        """Test that --new-key writes a key file that opens the quiz."""
        key_file = tmp_path / "keys" / "class.key"
        key_file.parent.mkdir()
        out = tmp_path / "problems.enc"

        exit_code = build_quiz(str(plain_quiz), str(out), new_key_file=str(key_file))

        assert exit_code == 0
        key = key_file.read_bytes()
        assert Fernet(key).decrypt(out.read_bytes()) == plain_quiz.read_bytes()
        assert "Encryption key generated" in capsys.readouterr().out

    def test_new_key_option(self, plain_quiz, tmp_path):
        """Test the --new-key command-line option."""
        key_file = tmp_path / "class.key"
        out = tmp_path / "problems.enc"
        argv = ["build_quiz.py", "--in", str(plain_quiz), "--out", str(out), "--new-key", str(key_file)]

        with patch.object(sys, 'argv', argv):
            with pytest.raises(SystemExit) as exc_info:
                build_quiz_main()

        assert exc_info.value.code == 0
        assert len(load_pairs(out, key_file.read_text(encoding='utf-8'))) == 2

    def test_new_key_excludes_key_file(self, plain_quiz, tmp_path):
        """Test that only one encryption method can be chosen."""
        argv = [
            "build_quiz.py", "--in", str(plain_quiz), "--out", str(tmp_path / "q.enc"),
            "--new-key", str(tmp_path / "a.key"), "--key-file", str(tmp_path / "b.key")
        ]

        with patch.object(sys, 'argv', argv):
            with pytest.raises(SystemExit) as exc_info:
                build_quiz_main()

        assert exc_info.value.code == 2

    def test_new_key_not_written_for_invalid_input(self, tmp_path):
        """Test that no key is generated when the CSV is rejected."""
        broken = tmp_path / "broken.csv"
        broken.write_text("1+1\n", encoding='utf-8')
        key_file = tmp_path / "class.key"

        assert build_quiz(str(broken), str(tmp_path / "b.enc"), new_key_file=str(key_file)) == 1
        assert not key_file.exists()

    def test_password_round_trip(self, plain_quiz, tmp_path):
        """Test password encryption and verification."""
        out = tmp_path / "problems.enc"

        assert build_quiz(str(plain_quiz), str(out), password="long enough") == 0
        assert verify_quiz(str(out), "long enough", verbose=True) is True

    def test_rejects_malformed_input(self, tmp_path, capsys):
        """Test that a broken CSV is not encrypted."""
        broken = tmp_path / "broken.csv"
        broken.write_text("1+1\n", encoding='utf-8')
        out = tmp_path / "broken.enc"

        exit_code = build_quiz(str(broken), str(out), key_file=None, password="long enough")

        assert exit_code == 1
        assert not out.exists()
        assert "[ERROR]" in capsys.readouterr().err

    def test_rejects_empty_input(self, tmp_path):
        """Test that an empty CSV is not encrypted."""
        empty = tmp_path / "empty.csv"
        empty.write_text("", encoding='utf-8')

        assert build_quiz(str(empty), str(tmp_path / "empty.enc"), password="long enough") == 1


class TestVerifyQuiz:
    """Test quiz verification."""

    def test_plain_file(self, plain_quiz, capsys):
        """Test verifying a plaintext quiz."""
        assert verify_quiz(str(plain_quiz), verbose=True) is True

        out = capsys.readouterr().out
        assert "2 questions loaded" in out
        assert "5+5 = 10" in out

    def test_wrong_key(self, plain_quiz, tmp_path):
        """Test that a mismatched key fails verification."""
        key_file = tmp_path / "class.key"
        key_file.write_bytes(Fernet.generate_key())
        out = tmp_path / "problems.enc"
        build_quiz(str(plain_quiz), str(out), key_file=str(key_file))

        assert verify_quiz(str(out), Fernet.generate_key().decode('utf-8')) is False
