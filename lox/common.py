import enum
from dataclasses import dataclass
from typing import Union


@enum.unique
class TokenType(enum.Enum):
    # Single character tokens.
    LEFT_PAREN = enum.auto()
    RIGHT_PAREN = enum.auto()
    LEFT_BRACE = enum.auto()
    RIGHT_BRACE = enum.auto()
    COMMA = enum.auto()
    DOT = enum.auto()
    MINUS = enum.auto()
    PLUS = enum.auto()
    SEMICOLON = enum.auto()
    SLASH = enum.auto()
    STAR = enum.auto()

    # One or two character tokens.
    BANG = enum.auto()
    BANG_EQUAL = enum.auto()
    EQUAL = enum.auto()
    EQUAL_EQUAL = enum.auto()
    GREATER = enum.auto()
    GREATER_EQUAL = enum.auto()
    LESS = enum.auto()
    LESS_EQUAL = enum.auto()

    # Literals.
    IDENTIFIER = enum.auto()
    STRING = enum.auto()
    NUMBER = enum.auto()

    # Keywords.
    AND = enum.auto()
    CLASS = enum.auto()
    ELSE = enum.auto()
    FALSE = enum.auto()
    FUN = enum.auto()
    FOR = enum.auto()
    IF = enum.auto()
    NIL = enum.auto()
    OR = enum.auto()
    PRINT = enum.auto()
    RETURN = enum.auto()
    SUPER = enum.auto()
    THIS = enum.auto()
    TRUE = enum.auto()
    VAR = enum.auto()
    WHILE = enum.auto()

    EOF = enum.auto()


KEYWORDS = {k: getattr(TokenType, k.upper()) for k in (
    'and',
    'class',
    'else',
    'false',
    'for',
    'fun',
    'if',
    'nil',
    'or',
    'print',
    'return',
    'super',
    'this',
    'true',
    'var',
    'while'
)}

# Name of the method a class calls when it is called to build an instance.
INITIALIZER = 'init'


@dataclass(frozen=True)
class Token:
    token_type: TokenType
    lexeme: str
    literal: Union[None, str, float]
    line: int

    def __str__(self) -> str:
        return f'{self.token_type} {self.lexeme} {self.literal}'


@dataclass(frozen=True)
class Diagnostic:
    """A static (scan, parse or resolve) error tied to a source line."""
    line: int
    where: str
    message: str

    @classmethod
    def at_token(cls, token: Token, message: str) -> 'Diagnostic':
        if token.token_type == TokenType.EOF:
            return cls(token.line, ' at end', message)
        return cls(token.line, f' at "{token.lexeme}"', message)

    def __str__(self) -> str:
        return f'[line {self.line}] Error{self.where}: {self.message}'


class LoxRuntimeError(RuntimeError):

    def __init__(self, token: Token, msg: str):
        self.token = token
        self.msg = msg
        super().__init__(msg)

    def report(self) -> str:
        return f'[line {self.token.line}] {self.msg}'


class UndefinedVariableError(LoxRuntimeError):
    pass


class UndefinedPropertyError(LoxRuntimeError):
    pass


class OperandTypeError(LoxRuntimeError):
    pass


class DivisionByZeroError(LoxRuntimeError):
    pass


class ArityError(LoxRuntimeError):
    pass


class NotCallableError(LoxRuntimeError):
    pass


class NotAnInstanceError(LoxRuntimeError):
    pass


class InvalidSuperclassError(LoxRuntimeError):
    pass


class StackOverflowError(LoxRuntimeError):
    pass
