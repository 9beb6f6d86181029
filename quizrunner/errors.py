"""Exceptions raised while preparing a quiz session."""


class QuizError(Exception):
    """Base class for errors that prevent a quiz session from starting."""


class LoadError(QuizError):
    """The quiz file could not be read, decrypted or parsed."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"failed reading the quiz file {path}: {reason}")


class EmptyQuestionSetError(QuizError):
    """The quiz file yielded no questions."""

    def __init__(self, path=None):
        self.path = path
        where = f" in {path}" if path else ""
        super().__init__(f"no questions found{where}")
