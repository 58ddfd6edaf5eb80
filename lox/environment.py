from __future__ import annotations

from typing import Any, Optional

from lox.common import Token, UndefinedVariableError


class Environment:
    """One scope frame, chained to the frame that encloses it.

    Frames are shared by every closure that captured them, so they live as
    long as the last such closure.
    """

    def __init__(self, enclosing: Optional[Environment] = None):
        self.enclosing = enclosing
        self.values: dict[str, Any] = {}

    def define(self, name: str, value: Any) -> None:
        self.values[name] = value

    def get(self, name: Token) -> Any:
        environment: Optional[Environment] = self
        while environment is not None:
            if name.lexeme in environment.values:
                return environment.values[name.lexeme]
            environment = environment.enclosing
        raise UndefinedVariableError(
            name, f'Undefined variable "{name.lexeme}".')

    def assign(self, name: Token, value: Any) -> None:
        environment: Optional[Environment] = self
        while environment is not None:
            if name.lexeme in environment.values:
                environment.values[name.lexeme] = value
                return
            environment = environment.enclosing
        raise UndefinedVariableError(
            name, f'Undefined variable "{name.lexeme}".')

    def ancestor(self, distance: int) -> Environment:
        environment = self
        for _ in range(distance):
            assert environment.enclosing is not None
            environment = environment.enclosing
        return environment

    def get_at(self, distance: int, name: str) -> Any:
        return self.ancestor(distance).values[name]

    def assign_at(self, distance: int, name: Token, value: Any) -> None:
        self.ancestor(distance).values[name.lexeme] = value
