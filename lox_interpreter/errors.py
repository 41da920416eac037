import sys
from typing import List, Optional, TextIO

from .tokens import Token, TokenType


class LoxRuntimeError(RuntimeError):
    """Custom exception for reporting runtime errors."""
    def __init__(self, token: Token, message: str):
        self.token = token
        self.message = message
        super().__init__(self.message)


class ParseError(RuntimeError):
    """
    Raised by the parser when a required token is missing.
    It unwinds the grammar rules back to the declaration loop, which
    synchronizes and carries on with the next statement.
    """
    def __init__(self, token: Token, message: str):
        self.token = token
        self.message = message
        super().__init__(self.message)


class ErrorReporter:
    """
    Collects and prints the diagnostics produced by every stage of the pipeline.

    Scan and parse errors set `had_error`; the caller must not interpret a
    program once that flag is raised. Runtime errors set `had_runtime_error`.
    """
    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream
        self.errors: List[str] = []
        self.runtime_errors: List[str] = []
        self.had_error: bool = False
        self.had_runtime_error: bool = False

    def error(self, line: int, message: str):
        """Reports a scan error at a source line."""
        self._report(line, "", message)

    def token_error(self, token: Token, message: str):
        """Reports a parse error at the offending token."""
        if token.token_type == TokenType.EOF:
            self._report(token.line, " at end", message)
        else:
            self._report(token.line, f" at '{token.lexeme}'", message)

    def runtime_error(self, error: LoxRuntimeError):
        text = f"[line {error.token.line}] Runtime error at '{error.token.lexeme}': {error.message}"
        self.runtime_errors.append(text)
        self.had_runtime_error = True
        print(text, file=self.stream or sys.stderr)

    def reset(self):
        """Forgets everything reported so far; the REPL calls this after each line."""
        self.errors.clear()
        self.runtime_errors.clear()
        self.had_error = False
        self.had_runtime_error = False

    def _report(self, line: int, where: str, message: str):
        text = f"[line {line}] Error{where}: {message}"
        self.errors.append(text)
        self.had_error = True
        print(text, file=self.stream or sys.stderr)
