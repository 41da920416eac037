import math
from typing import List, Any, Optional, TextIO

from . import ast_nodes as ast
from .tokens import Token, TokenType
from .errors import ErrorReporter, LoxRuntimeError
from .environment import Environment


def stringify(value: Any) -> str:
    """Converts a runtime value to the text a print statement shows."""
    if value is None: return "nil"
    if isinstance(value, bool): return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value): return "NaN"
        if math.isinf(value): return "Infinity" if value > 0 else "-Infinity"
        text = repr(value)
        if text.endswith(".0"):
            text = text[:-2]
        return text
    return str(value)


class Interpreter(ast.ExprVisitor, ast.StmtVisitor):
    """
    The Interpreter walks the AST and executes the code.

    Runtime values are plain Python objects: float for numbers, str, bool,
    and None for nil. Operand kinds are checked as each operator is applied.
    """
    def __init__(self, reporter: Optional[ErrorReporter] = None, output: Optional[TextIO] = None):
        self.reporter: ErrorReporter = reporter if reporter is not None else ErrorReporter()
        # None means whatever sys.stdout is at the time of the print.
        self.output: Optional[TextIO] = output
        self.globals = Environment()
        self.environment = self.globals

    def interpret(self, statements: List[ast.Stmt], environment: Optional[Environment] = None) -> Environment:
        """
        The main entry point for the interpreter.
        Runs the statements in order, in `environment` if one is given, and
        stops at the first runtime error.
        """
        previous = self.environment
        if environment is not None:
            self.environment = environment
        try:
            for statement in statements:
                self._execute(statement)
        except LoxRuntimeError as error:
            self.reporter.runtime_error(error)
        finally:
            active = self.environment
            self.environment = previous

        return active

    def evaluate(self, expr: ast.Expr) -> Any:
        """Evaluates a single expression in the current environment."""
        return expr.accept(self)

    def _execute(self, stmt: ast.Stmt):
        stmt.accept(self)

    def _execute_block(self, statements: List[ast.Stmt], environment: Environment):
        previous = self.environment
        try:
            self.environment = environment
            for statement in statements:
                self._execute(statement)
        finally:
            self.environment = previous

    # --- STATEMENT VISITOR METHODS ---

    def visit_expression_stmt(self, stmt: ast.Expression):
        self.evaluate(stmt.expression)
        return None

    def visit_print_stmt(self, stmt: ast.Print):
        value = self.evaluate(stmt.expression)
        print(stringify(value), file=self.output)
        return None

    def visit_var_stmt(self, stmt: ast.Var):
        value = None
        if stmt.initializer is not None:
            value = self.evaluate(stmt.initializer)

        self.environment.define(stmt.name.lexeme, value)
        return None

    def visit_block_stmt(self, stmt: ast.Block):
        self._execute_block(stmt.statements, Environment(self.environment))
        return None

    # --- HELPER METHODS FOR RUNTIME CHECKS ---

    def _is_truthy(self, obj: Any) -> bool:
        """False and nil are falsey; 0 and "" are truthy."""
        if obj is None: return False
        if isinstance(obj, bool): return obj
        return True

    def _is_equal(self, a: Any, b: Any) -> bool:
        if a is None and b is None: return True
        if a is None or b is None: return False
        # No coercion between kinds, so true != 1.
        if type(a) is not type(b): return False
        # NaN equals itself, as a value rather than as an IEEE comparison.
        if isinstance(a, float) and math.isnan(a) and math.isnan(b): return True
        return a == b

    def _check_number_operand(self, operator: Token, operand: Any):
        if isinstance(operand, float): return
        raise LoxRuntimeError(operator, "Operand must be a number.")

    def _check_number_operands(self, operator: Token, left: Any, right: Any):
        if isinstance(left, float) and isinstance(right, float): return
        raise LoxRuntimeError(operator, "Operands must be numbers.")

    # --- EXPRESSION VISITOR METHODS ---

    def visit_binary_expr(self, expr: ast.Binary):
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        op_type = expr.operator.token_type

        if op_type == TokenType.MINUS:
            self._check_number_operands(expr.operator, left, right)
            return left - right
        if op_type == TokenType.SLASH:
            self._check_number_operands(expr.operator, left, right)
            if right == 0.0:
                raise LoxRuntimeError(expr.operator, "Cannot divide by zero.")
            return left / right
        if op_type == TokenType.STAR:
            self._check_number_operands(expr.operator, left, right)
            return left * right
        if op_type == TokenType.PLUS:
            if isinstance(left, float) and isinstance(right, float):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise LoxRuntimeError(expr.operator, "Operands must be two numbers or two strings.")

        if op_type == TokenType.GREATER:
            self._check_number_operands(expr.operator, left, right)
            return left > right
        if op_type == TokenType.GREATER_EQUAL:
            self._check_number_operands(expr.operator, left, right)
            return left >= right
        if op_type == TokenType.LESS:
            self._check_number_operands(expr.operator, left, right)
            return left < right
        if op_type == TokenType.LESS_EQUAL:
            self._check_number_operands(expr.operator, left, right)
            return left <= right

        if op_type == TokenType.BANG_EQUAL:
            return not self._is_equal(left, right)
        if op_type == TokenType.EQUAL_EQUAL:
            return self._is_equal(left, right)

        # Unreachable: the parser only builds Binary nodes for the operators above.
        raise LoxRuntimeError(expr.operator, f"Unknown binary operator '{expr.operator.lexeme}'.")

    def visit_grouping_expr(self, expr: ast.Grouping):
        return self.evaluate(expr.expression)

    def visit_literal_expr(self, expr: ast.Literal):
        return expr.value

    def visit_unary_expr(self, expr: ast.Unary):
        right = self.evaluate(expr.right)
        op_type = expr.operator.token_type

        if op_type == TokenType.BANG:
            return not self._is_truthy(right)
        if op_type == TokenType.MINUS:
            self._check_number_operand(expr.operator, right)
            return -right

        raise LoxRuntimeError(expr.operator, f"Unknown unary operator '{expr.operator.lexeme}'.")

    def visit_variable_expr(self, expr: ast.Variable):
        return self.environment.get(expr.name)

    def visit_assign_expr(self, expr: ast.Assign):
        value = self.evaluate(expr.value)
        self.environment.assign(expr.name, value)
        return value
