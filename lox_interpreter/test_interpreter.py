import io
from contextlib import redirect_stdout

import pytest

from .lexer import Lexer
from .parser import Parser
from .interpreter import Interpreter, stringify
from .environment import Environment
from .errors import ErrorReporter, LoxRuntimeError
from .tokens import Token, TokenType


def run_interpreter_test(source_code):
    """
    Runs lexer -> parser -> interpreter and returns the printed lines,
    the reporter and the interpreter.
    """
    reporter = ErrorReporter(stream=io.StringIO())
    tokens = Lexer(source_code, reporter).scan_tokens()
    statements = Parser(tokens, reporter).parse()
    assert not reporter.had_error, reporter.errors

    interpreter = Interpreter(reporter)
    f = io.StringIO()
    with redirect_stdout(f):
        interpreter.interpret(statements)
    return f.getvalue().splitlines(), reporter, interpreter


def printed(source_code):
    lines, reporter, _ = run_interpreter_test(source_code)
    assert not reporter.had_runtime_error, reporter.runtime_errors
    return lines


def runtime_error(source_code):
    """Runs the source, expects exactly one runtime error and returns its message."""
    _, reporter, _ = run_interpreter_test(source_code)
    assert reporter.had_runtime_error
    assert len(reporter.runtime_errors) == 1
    return reporter.runtime_errors[0]


def global_value(interpreter, var_name):
    return interpreter.globals.get(Token(TokenType.IDENTIFIER, var_name, None, 0))


# --- Arithmetic ---

def test_precedence_and_integral_display():
    assert printed("print 1 + 2 * 3;") == ["7"]


def test_left_associative_arithmetic():
    assert printed("print 10 - 4 - 3; print 16 / 4 / 2;") == ["3", "2"]


def test_float_semantics():
    assert printed("print 0.1 + 0.2; print 7 / 2; print 2.50;") == ["0.30000000000000004", "3.5", "2.5"]


def test_grouping_and_negation():
    assert printed("print -(1 + 2) * 3;") == ["-9"]


def test_arithmetic_and_variables():
    _, _, interpreter = run_interpreter_test("""
    var x = 10;
    var y = x * 2 + 5; // Should be 25
    """)
    assert global_value(interpreter, "y") == 25.0


# --- Strings and equality ---

def test_string_concatenation():
    assert printed('print "a" + "b"; var c = "hello"; print c + " world";') == ["ab", "hello world"]


def test_mixed_plus_is_an_error():
    assert runtime_error('print 1 + "b";') == \
        "[line 1] Runtime error at '+': Operands must be two numbers or two strings."


def test_equality_across_kinds():
    assert printed("""
    print 1 == 1.0;
    print "a" == "a";
    print nil == nil;
    print nil == false;
    print true == 1;
    print "1" == 1;
    print 1 != 2;
    print nil != nil;
    """) == ["true", "true", "true", "false", "false", "false", "true", "false"]


def test_comparisons():
    assert printed("print 1 < 2; print 2 <= 2; print 1 > 2; print 3 >= 4;") == ["true", "true", "false", "false"]


def test_comparison_requires_numbers():
    assert runtime_error('print "a" < "b";') == "[line 1] Runtime error at '<': Operands must be numbers."


# --- Truthiness and unary operators ---

def test_truthiness():
    assert printed('print !nil; print !0; print !""; print !true; print !!false;') == \
        ["true", "false", "false", "false", "false"]


def test_negating_a_string_is_an_error():
    assert runtime_error('print -"a";') == "[line 1] Runtime error at '-': Operand must be a number."


def test_arithmetic_requires_numbers():
    assert runtime_error("print true * 2;") == "[line 1] Runtime error at '*': Operands must be numbers."


def test_division_by_zero():
    assert runtime_error("print 1 / 0;") == "[line 1] Runtime error at '/': Cannot divide by zero."


# --- Variables and scopes ---

def test_block_scope_shadowing():
    assert printed("var x = 1; { var x = 2; print x; } print x;") == ["2", "1"]


def test_uninitialized_variable_is_nil():
    assert printed("var a; print a;") == ["nil"]


def test_redeclaration_rebinds():
    assert printed("var a = 1; var a = a + 1; print a;") == ["2"]


def test_assignment_reaches_enclosing_scope():
    assert printed("var a = 1; { { a = 5; } } print a;") == ["5"]


def test_assignment_is_an_expression():
    assert printed("var a; var b; a = b = 3; print a; print b; print a = 4;") == ["3", "3", "4"]


def test_assignment_to_undeclared_variable():
    _, reporter, interpreter = run_interpreter_test("x = 5;")
    assert reporter.runtime_errors == ["[line 1] Runtime error at 'x': Undefined variable 'x'."]
    assert "x" not in interpreter.globals.values


def test_block_variables_do_not_leak():
    assert runtime_error("{ var inner = 1; } print inner;") == \
        "[line 1] Runtime error at 'inner': Undefined variable 'inner'."


# --- Runtime error model ---

def test_runtime_error_stops_remaining_statements():
    lines, reporter, _ = run_interpreter_test('print "before";\nprint nope;\nprint "after";')
    assert lines == ["before"]
    assert reporter.runtime_errors == ["[line 2] Runtime error at 'nope': Undefined variable 'nope'."]


def test_environment_is_restored_after_error_in_block():
    _, reporter, interpreter = run_interpreter_test("var a = 1; { var a = 2; print -nil; }")
    assert reporter.had_runtime_error
    assert interpreter.environment is interpreter.globals
    assert global_value(interpreter, "a") == 1.0


def test_interpret_in_given_environment():
    reporter = ErrorReporter(stream=io.StringIO())
    tokens = Lexer("var b = a * 2;", reporter).scan_tokens()
    statements = Parser(tokens, reporter).parse()

    env = Environment()
    env.define("a", 21.0)
    result = Interpreter(reporter).interpret(statements, env)
    assert result is env
    assert env.values["b"] == 42.0


def test_evaluate_raises_for_callers_to_report():
    reporter = ErrorReporter(stream=io.StringIO())
    tokens = Lexer("missing;", reporter).scan_tokens()
    statement = Parser(tokens, reporter).parse()[0]
    with pytest.raises(LoxRuntimeError):
        Interpreter(reporter).evaluate(statement.expression)


# --- Display ---

@pytest.mark.parametrize("value, text", [
    (None, "nil"),
    (True, "true"),
    (False, "false"),
    (3.0, "3"),
    (-0.5, "-0.5"),
    (1e21, "1e+21"),
    ("1.0", "1.0"),
    (float("nan"), "NaN"),
    (float("-inf"), "-Infinity"),
])
def test_stringify(value, text):
    assert stringify(value) == text


def test_print_writes_to_given_output():
    reporter = ErrorReporter(stream=io.StringIO())
    tokens = Lexer('print "to the buffer"; print 1 + 1;', reporter).scan_tokens()
    statements = Parser(tokens, reporter).parse()

    buffer = io.StringIO()
    stdout = io.StringIO()
    with redirect_stdout(stdout):
        Interpreter(reporter, output=buffer).interpret(statements)
    assert buffer.getvalue() == "to the buffer\n2\n"
    assert stdout.getvalue() == ""


def test_non_finite_numbers():
    # Sixteen factors of 1e20 overflow a double.
    factors = " * ".join(["big"] * 16)
    assert printed(f"""
    var big = 100000000000000000000;
    big = {factors};
    var nan = big - big;
    print nan;
    print big;
    print -big;
    print nan == nan;
    print nan != nan;
    print nan == 1;
    """) == ["NaN", "Infinity", "-Infinity", "true", "false", "false"]
