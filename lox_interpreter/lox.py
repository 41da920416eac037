import sys
from typing import List, Optional

from .lexer import Lexer
from .parser import Parser
from .interpreter import Interpreter, stringify
from .ast_printer import AstPrinter
from .errors import ErrorReporter, LoxRuntimeError
from . import ast_nodes as ast

USAGE = "Usage: lox [--ast] [script]"

# sysexits.h
EX_USAGE = 64
EX_DATAERR = 65
EX_NOINPUT = 66
EX_SOFTWARE = 70


class Lox:
    """Wires the scanner, parser and interpreter together for scripts and the REPL."""
    def __init__(self, print_ast: bool = False):
        self.reporter = ErrorReporter()
        self.interpreter = Interpreter(self.reporter)
        self.print_ast = print_ast

    @property
    def had_error(self) -> bool:
        return self.reporter.had_error

    @property
    def had_runtime_error(self) -> bool:
        return self.reporter.had_runtime_error

    def parse(self, source: str) -> List[ast.Stmt]:
        tokens = Lexer(source, self.reporter).scan_tokens()
        return Parser(tokens, self.reporter).parse()

    def run(self, source: str, echo: bool = False):
        """
        Runs one piece of source. Nothing is executed if scanning or parsing
        reported an error. With `echo`, a lone expression statement has its
        value printed, the way the REPL shows results.
        """
        statements = self.parse(source)
        if self.reporter.had_error:
            return

        if self.print_ast:
            print(AstPrinter().print_program(statements))
            return

        if echo and len(statements) == 1 and isinstance(statements[0], ast.Expression):
            try:
                value = self.interpreter.evaluate(statements[0].expression)
            except LoxRuntimeError as error:
                self.reporter.runtime_error(error)
                return
            print(stringify(value))
            return

        self.interpreter.interpret(statements)

    def run_file(self, path: str) -> int:
        with open(path, "r", encoding="utf-8") as f:
            source = f.read()
        self.run(source)

        if self.had_error: return EX_DATAERR
        if self.had_runtime_error: return EX_SOFTWARE
        return 0

    def run_prompt(self):
        print("Lox REPL (Ctrl+D to exit)")
        while True:
            try:
                line = input("> ")
            except (KeyboardInterrupt, EOFError):
                print("\nExiting.")
                break
            if not line: continue
            # Globals survive between lines, errors do not.
            self.run(line, echo=True)
            self.reporter.reset()


def main(argv: Optional[List[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)

    print_ast = False
    if '--ast' in args:
        args.remove('--ast')
        print_ast = True

    if len(args) > 1:
        print(USAGE)
        return EX_USAGE

    lox = Lox(print_ast=print_ast)
    if args:
        try:
            return lox.run_file(args[0])
        except (OSError, UnicodeDecodeError) as e:
            print(f"Could not read '{args[0]}': {e}", file=sys.stderr)
            return EX_NOINPUT
    lox.run_prompt()
    return 0


if __name__ == "__main__":
    sys.exit(main())
