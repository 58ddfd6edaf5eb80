"""Runtime values: functions, classes and instances."""
from __future__ import annotations

import abc
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional

from lox.common import INITIALIZER, Token, UndefinedPropertyError
from lox.environment import Environment
from lox.stmt import Function, FunctionKind

if TYPE_CHECKING:
    from lox.interpreter import Interpreter


@dataclass(frozen=True)
class Returned:
    """Completion of a ``return`` statement, carried up to the call."""
    value: Any


class LoxCallable(abc.ABC):

    @abc.abstractmethod
    def call(self, interpreter: Interpreter, arguments: list[Any]) -> Any:
        pass

    @abc.abstractmethod
    def arity(self) -> int:
        pass


class NativeFunction(LoxCallable):

    def __init__(self, arity: int, fn: Callable[..., Any]):
        self._arity = arity
        self._fn = fn

    def arity(self) -> int:
        return self._arity

    def call(self, interpreter: Interpreter, arguments: list[Any]) -> Any:
        return self._fn(*arguments)

    def __str__(self) -> str:
        return '<native fn>'


def native_globals() -> dict[str, NativeFunction]:
    return {
        'clock': NativeFunction(0, time.time),
    }


class LoxFunction(LoxCallable):

    def __init__(
            self,
            declaration: Function,
            closure: Environment,
            is_initializer: bool = False):
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer

    @property
    def kind(self) -> FunctionKind:
        return self.declaration.kind

    @property
    def is_getter(self) -> bool:
        return self.declaration.kind == FunctionKind.GETTER

    def call(self, interpreter: Interpreter, arguments: list[Any]) -> Any:
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)
        completion = interpreter.execute_block(
            self.declaration.body, environment)
        if self.is_initializer:
            return self.closure.get_at(0, 'this')
        if completion is not None:
            return completion.value
        return None

    def bind(self, instance: LoxInstance) -> LoxFunction:
        environment = Environment(self.closure)
        environment.define('this', instance)
        return LoxFunction(self.declaration, environment, self.is_initializer)

    def arity(self) -> int:
        return len(self.declaration.params)

    def __str__(self) -> str:
        return f'<fn {self.declaration.name.lexeme}>'


class LoxInstance:

    def __init__(self, klass: Optional[LoxClass]):
        self.klass = klass
        self.fields: dict[str, Any] = {}

    def get(self, name: Token) -> Any:
        """Look up a field, then a method bound to this instance.

        A bound getter is returned as is; the interpreter decides to run it.
        """
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]
        if self.klass is not None:
            method = self.klass.find_method(name.lexeme)
            if method is not None:
                return method.bind(self)
        raise UndefinedPropertyError(
            name, f'Undefined property "{name.lexeme}" on {self}.')

    def set(self, name: Token, value: Any) -> None:
        self.fields[name.lexeme] = value

    def __str__(self) -> str:
        assert self.klass is not None
        return f'{self.klass.name} instance'


class LoxClass(LoxInstance, LoxCallable):
    """A class value.

    The class is itself an instance of a metaclass holding its static
    methods, so ``Math.square(3)`` goes through ordinary property lookup.
    The metaclass chain mirrors the superclass chain, so static methods
    are inherited.
    """

    def __init__(self,
                 name: str,
                 superclass: Optional[LoxClass],
                 methods: dict[str, LoxFunction],
                 class_methods: Optional[dict[str, LoxFunction]] = None,
                 metaclass: bool = False):
        metaclass_value = None
        if not metaclass:
            metaclass_value = LoxClass(
                f'{name} metaclass',
                superclass.klass if superclass is not None else None,
                class_methods or {},
                metaclass=True)
        super().__init__(metaclass_value)
        self.name = name
        self.superclass = superclass
        self.methods = methods

    def find_method(self, name: str) -> Optional[LoxFunction]:
        if name in self.methods:
            return self.methods[name]
        if self.superclass is not None:
            return self.superclass.find_method(name)
        return None

    def call(self, interpreter: Interpreter, arguments: list[Any]) -> Any:
        instance = LoxInstance(self)
        initializer = self.find_method(INITIALIZER)
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)
        return instance

    def arity(self) -> int:
        initializer = self.find_method(INITIALIZER)
        if initializer is None:
            return 0
        return initializer.arity()

    def __str__(self) -> str:
        return self.name
