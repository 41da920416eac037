from typing import List, Any, Optional

from .tokens import Token, TokenType, keywords
from .errors import ErrorReporter


SINGLE_CHAR_TOKENS = {
    '(': TokenType.LEFT_PAREN,
    ')': TokenType.RIGHT_PAREN,
    '{': TokenType.LEFT_BRACE,
    '}': TokenType.RIGHT_BRACE,
    ',': TokenType.COMMA,
    '.': TokenType.DOT,
    '-': TokenType.MINUS,
    '+': TokenType.PLUS,
    ';': TokenType.SEMICOLON,
    '*': TokenType.STAR,
}

# First character -> (token alone, token when followed by '=')
EQUALS_PAIRS = {
    '!': (TokenType.BANG, TokenType.BANG_EQUAL),
    '=': (TokenType.EQUAL, TokenType.EQUAL_EQUAL),
    '<': (TokenType.LESS, TokenType.LESS_EQUAL),
    '>': (TokenType.GREATER, TokenType.GREATER_EQUAL),
}

WHITESPACE = (' ', '\r', '\t', '\n')


class Lexer:
    """
    Turns source text into a flat list of tokens ending with EOF.

    Lexical errors are handed to the reporter and the offending input is
    skipped, so a single pass reports every bad character it meets.
    """
    def __init__(self, source: str, reporter: Optional[ErrorReporter] = None):
        self.source: str = source
        self.reporter: ErrorReporter = reporter if reporter is not None else ErrorReporter()
        self.tokens: List[Token] = []
        self.start: int = 0
        self.current: int = 0
        self.line: int = 1

    def scan_tokens(self) -> List[Token]:
        while not self._is_at_end():
            self.start = self.current
            self._scan_token()

        self.tokens.append(Token(TokenType.EOF, "", None, self.line))
        return self.tokens

    def _scan_token(self):
        char = self._advance()

        if char in SINGLE_CHAR_TOKENS:
            self._add_token(SINGLE_CHAR_TOKENS[char])
        elif char in EQUALS_PAIRS:
            alone, with_equals = EQUALS_PAIRS[char]
            self._add_token(with_equals if self._match('=') else alone)
        elif char == '/':
            self._slash()
        elif char in WHITESPACE:
            pass
        elif char == '"':
            self._string()
        elif self._is_digit(char):
            self._number()
        elif self._is_identifier_start(char):
            self._identifier()
        else:
            self.reporter.error(self.line, f"Unexpected character '{char}'.")

    # --- Lexeme rules ---

    def _slash(self):
        """Division, a // line comment, or a /* block comment */."""
        if self._match('/'):
            while self._peek() != '\n' and not self._is_at_end():
                self._advance()
        elif self._match('*'):
            while not self._is_at_end() and not (self._peek() == '*' and self._peek_next() == '/'):
                self._advance()
            if self._is_at_end():
                self.reporter.error(self.line, "Unterminated block comment.")
                return
            self.current += 2  # */
        else:
            self._add_token(TokenType.SLASH)

    def _string(self):
        while self._peek() != '"' and not self._is_at_end():
            self._advance()

        if self._is_at_end():
            self.reporter.error(self.line, "Unterminated string.")
            return

        self._advance()
        # The token carries the line the string ends on.
        self._add_token(TokenType.STRING, self.source[self.start + 1:self.current - 1])

    def _number(self):
        self._skip_digits()
        # A '.' only belongs to the number when a digit follows it.
        if self._peek() == '.' and self._is_digit(self._peek_next()):
            self._advance()
            self._skip_digits()

        self._add_token(TokenType.NUMBER, float(self.source[self.start:self.current]))

    def _identifier(self):
        while self._is_identifier_start(self._peek()) or self._is_digit(self._peek()):
            self._advance()

        text = self.source[self.start:self.current]
        self._add_token(keywords.get(text, TokenType.IDENTIFIER))

    # --- Cursor helpers ---

    def _advance(self) -> str:
        """Consumes one character. Every newline passes through here, so this is the only place lines are counted."""
        char = self.source[self.current]
        self.current += 1
        if char == '\n':
            self.line += 1
        return char

    def _match(self, expected: str) -> bool:
        if self._peek() != expected:
            return False
        self.current += 1
        return True

    def _peek(self) -> str:
        return self.source[self.current] if self.current < len(self.source) else '\0'

    def _peek_next(self) -> str:
        return self.source[self.current + 1] if self.current + 1 < len(self.source) else '\0'

    def _skip_digits(self):
        while self._is_digit(self._peek()):
            self._advance()

    def _is_at_end(self) -> bool:
        return self.current >= len(self.source)

    def _add_token(self, token_type: TokenType, literal: Any = None):
        self.tokens.append(Token(token_type, self.source[self.start:self.current], literal, self.line))

    @staticmethod
    def _is_digit(char: str) -> bool:
        return '0' <= char <= '9'

    @staticmethod
    def _is_identifier_start(char: str) -> bool:
        return ('a' <= char <= 'z') or ('A' <= char <= 'Z') or char == '_'
