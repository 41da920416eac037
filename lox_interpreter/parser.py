from typing import List, Optional

from .tokens import Token, TokenType
from .errors import ErrorReporter, ParseError
from . import ast_nodes as ast


# Keywords that begin a new declaration or statement. Panic mode stops in front of them.
SYNC_KEYWORDS = (
    TokenType.CLASS,
    TokenType.FUN,
    TokenType.VAR,
    TokenType.FOR,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.PRINT,
    TokenType.RETURN,
)


class Parser:
    """
    The Parser consumes a stream of tokens and produces a list of statements.

    Grammar, lowest to highest precedence:

        program     -> declaration* EOF
        declaration -> "var" IDENTIFIER ( "=" expression )? ";" | statement
        statement   -> "print" expression ";" | "{" declaration* "}" | expression ";"
        expression  -> assignment
        assignment  -> IDENTIFIER "=" assignment | equality
        equality    -> comparison ( ( "!=" | "==" ) comparison )*
        comparison  -> term ( ( ">" | ">=" | "<" | "<=" ) term )*
        term        -> factor ( ( "-" | "+" ) factor )*
        factor      -> unary ( ( "/" | "*" ) unary )*
        unary       -> ( "!" | "-" ) unary | primary
        primary     -> NUMBER | STRING | "true" | "false" | "nil"
                     | IDENTIFIER | "(" expression ")"

    Syntax errors go to the reporter. A declaration that fails to parse is
    dropped and parsing resumes at the next statement boundary, so one call
    to parse() can surface several independent errors.
    """
    def __init__(self, tokens: List[Token], reporter: Optional[ErrorReporter] = None):
        self.tokens: List[Token] = tokens
        self.reporter: ErrorReporter = reporter if reporter is not None else ErrorReporter()
        self.current: int = 0

    def parse(self) -> List[ast.Stmt]:
        """The main entry point, parses a list of statements."""
        statements: List[ast.Stmt] = []
        while not self._is_at_end():
            declaration = self._declaration()
            if declaration is not None:
                statements.append(declaration)
        return statements

    # --- GRAMMAR RULE IMPLEMENTATIONS ---

    def _declaration(self) -> Optional[ast.Stmt]:
        """
        Parses a declaration. This is the single recovery point:
        on a syntax error it synchronizes and returns None.
        """
        start = self.current
        try:
            if self._match(TokenType.VAR):
                return self._var_declaration()
            return self._statement()
        except ParseError:
            self._synchronize(start)
            return None

    def _var_declaration(self) -> ast.Stmt:
        """Parses a variable declaration: 'var' IDENTIFIER ('=' expression)? ';'"""
        name = self._consume(TokenType.IDENTIFIER, "Expect variable name.")

        initializer: Optional[ast.Expr] = None
        if self._match(TokenType.EQUAL):
            initializer = self._expression()

        self._consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return ast.Var(name, initializer)

    def _statement(self) -> ast.Stmt:
        if self._match(TokenType.PRINT):
            return self._print_statement()
        if self._match(TokenType.LEFT_BRACE):
            return ast.Block(self._block())
        return self._expression_statement()

    def _print_statement(self) -> ast.Stmt:
        value = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return ast.Print(value)

    def _block(self) -> List[ast.Stmt]:
        """Parses the declarations of a block up to and including the closing brace."""
        statements: List[ast.Stmt] = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._is_at_end():
            declaration = self._declaration()
            if declaration is not None:
                statements.append(declaration)

        self._consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def _expression_statement(self) -> ast.Stmt:
        """Parses an expression statement: expression ';'"""
        expr = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return ast.Expression(expr)

    def _expression(self) -> ast.Expr:
        return self._assignment()

    def _assignment(self) -> ast.Expr:
        """
        Parses an assignment. The target is parsed as an ordinary expression
        first and only then checked, so 'a = b = c' groups as 'a = (b = c)'.
        """
        expr = self._equality()

        if self._match(TokenType.EQUAL):
            equals = self._previous()
            value = self._assignment()

            if isinstance(expr, ast.Variable):
                return ast.Assign(expr.name, value)

            # Reported but not raised: the parser is not lost, no need to synchronize.
            self._error(equals, "Invalid assignment target.")

        return expr

    def _equality(self) -> ast.Expr:
        """Parses equality expressions (==, !=)."""
        return self._left_associative(self._comparison, TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)

    def _comparison(self) -> ast.Expr:
        """Parses comparison expressions (>, >=, <, <=)."""
        return self._left_associative(
            self._term,
            TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL,
        )

    def _term(self) -> ast.Expr:
        """Parses addition and subtraction expressions (+, -)."""
        return self._left_associative(self._factor, TokenType.MINUS, TokenType.PLUS)

    def _factor(self) -> ast.Expr:
        """Parses multiplication and division expressions (*, /)."""
        return self._left_associative(self._unary, TokenType.SLASH, TokenType.STAR)

    def _left_associative(self, operand, *operators: TokenType) -> ast.Expr:
        """Folds a run of same-level binary operators into left-nested Binary nodes."""
        expr = operand()
        while self._match(*operators):
            operator = self._previous()
            right = operand()
            expr = ast.Binary(expr, operator, right)
        return expr

    def _unary(self) -> ast.Expr:
        """Parses unary expressions (e.g., -x, !y)."""
        if self._match(TokenType.BANG, TokenType.MINUS):
            operator = self._previous()
            right = self._unary()
            return ast.Unary(operator, right)
        return self._primary()

    def _primary(self) -> ast.Expr:
        if self._match(TokenType.FALSE): return ast.Literal(False)
        if self._match(TokenType.TRUE): return ast.Literal(True)
        if self._match(TokenType.NIL): return ast.Literal(None)

        if self._match(TokenType.NUMBER, TokenType.STRING):
            return ast.Literal(self._previous().literal)

        if self._match(TokenType.IDENTIFIER):
            return ast.Variable(self._previous())

        if self._match(TokenType.LEFT_PAREN):
            expr = self._expression()
            self._consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return ast.Grouping(expr)

        raise self._error(self._peek(), "Expect expression.")

    # --- TOKEN CONSUMPTION & UTILITY METHODS ---

    def _match(self, *types: TokenType) -> bool:
        """
        Checks if the current token has any of the given types.
        If so, it consumes the token and returns True.
        """
        for token_type in types:
            if self._check(token_type):
                self._advance()
                return True
        return False

    def _check(self, token_type: TokenType) -> bool:
        """Checks if the current token is of the given type without consuming it."""
        if self._is_at_end():
            return False
        return self._peek().token_type == token_type

    def _advance(self) -> Token:
        """Consumes the current token and returns it."""
        if not self._is_at_end():
            self.current += 1
        return self._previous()

    def _is_at_end(self) -> bool:
        return self._peek().token_type == TokenType.EOF

    def _peek(self) -> Token:
        return self.tokens[self.current]

    def _previous(self) -> Token:
        return self.tokens[self.current - 1]

    # --- ERROR HANDLING & SYNCHRONIZATION ---

    def _consume(self, token_type: TokenType, message: str) -> Token:
        """
        Consumes a token of a specific type. If the next token is not of the
        expected type, it raises a ParseError.
        """
        if self._check(token_type):
            return self._advance()
        raise self._error(self._peek(), message)

    def _error(self, token: Token, message: str) -> ParseError:
        """Reports the error and returns a ParseError for the caller to raise (or not)."""
        self.reporter.token_error(token, message)
        return ParseError(token, message)

    def _synchronize(self, start: int):
        """
        Error recovery. Discards tokens until it finds a statement boundary,
        which helps the parser continue after a syntax error.

        `start` is where the failed declaration began. At least one token past
        it is always consumed, so recovery cannot stall on the same token.
        """
        while not self._is_at_end():
            if self.current > start:
                if self._previous().token_type == TokenType.SEMICOLON:
                    return

                if self._peek().token_type in SYNC_KEYWORDS:
                    return

            self._advance()
