from typing import Dict, Any, Optional

from .tokens import Token
from .errors import LoxRuntimeError

class Environment:
    """
    One lexical scope: variable names bound to runtime values.

    `enclosing` points outward to the parent scope (None for globals). The link
    is only followed for lookup and assignment; the interpreter decides when a
    scope is entered and left.
    """
    def __init__(self, enclosing: Optional['Environment'] = None):
        self.values: Dict[str, Any] = {}
        self.enclosing: Optional['Environment'] = enclosing

    def define(self, name: str, value: Any):
        """
        Binds a name in this scope only.
        Redeclaring a name in the same scope simply rebinds it.
        """
        self.values[name] = value

    def get(self, name: Token) -> Any:
        environment = self
        while environment is not None:
            if name.lexeme in environment.values:
                return environment.values[name.lexeme]
            environment = environment.enclosing

        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name: Token, value: Any):
        """
        Overwrites the nearest existing binding of the name.
        Never creates a binding: assigning an undeclared name is an error.
        """
        environment = self
        while environment is not None:
            if name.lexeme in environment.values:
                environment.values[name.lexeme] = value
                return
            environment = environment.enclosing

        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")
