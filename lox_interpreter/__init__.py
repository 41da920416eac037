from .lexer import Lexer
from .parser import Parser
from .interpreter import Interpreter
from .environment import Environment
from .errors import ErrorReporter, LoxRuntimeError
