from __future__ import annotations

import abc
import enum
from dataclasses import dataclass, field
from typing import Generic, Optional, TypeVar

from lox.common import Token
from lox.expr import Expr, Variable

_T = TypeVar('_T')


class FunctionKind(enum.Enum):
    FUNCTION = enum.auto()
    METHOD = enum.auto()
    # Declared without a parameter list, runs on property access.
    GETTER = enum.auto()
    # Declared with a leading "class", looked up on the class itself.
    STATIC = enum.auto()


class Stmt(abc.ABC):

    @abc.abstractmethod
    def accept(self, visitor: StmtVisitor[_T]) -> _T:
        pass


@dataclass(frozen=True, eq=False)
class Expression(Stmt):
    expression: Expr

    def accept(self, visitor: StmtVisitor[_T]) -> _T:
        return visitor.visit_expression_stmt(self)


@dataclass(frozen=True, eq=False)
class Print(Stmt):
    expression: Expr

    def accept(self, visitor: StmtVisitor[_T]) -> _T:
        return visitor.visit_print_stmt(self)


@dataclass(frozen=True, eq=False)
class Var(Stmt):
    name: Token
    initializer: Optional[Expr]

    def accept(self, visitor: StmtVisitor[_T]) -> _T:
        return visitor.visit_var_stmt(self)


@dataclass(frozen=True, eq=False)
class Block(Stmt):
    statements: list[Stmt]

    def accept(self, visitor: StmtVisitor[_T]) -> _T:
        return visitor.visit_block_stmt(self)


@dataclass(frozen=True, eq=False)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]

    def accept(self, visitor: StmtVisitor[_T]) -> _T:
        return visitor.visit_if_stmt(self)


@dataclass(frozen=True, eq=False)
class While(Stmt):
    condition: Expr
    body: Stmt

    def accept(self, visitor: StmtVisitor[_T]) -> _T:
        return visitor.visit_while_stmt(self)


@dataclass(frozen=True, eq=False)
class Function(Stmt):
    name: Token
    params: list[Token]
    body: list[Stmt]
    kind: FunctionKind = FunctionKind.FUNCTION

    def accept(self, visitor: StmtVisitor[_T]) -> _T:
        return visitor.visit_function_stmt(self)


@dataclass(frozen=True, eq=False)
class Return(Stmt):
    keyword: Token
    value: Optional[Expr]

    def accept(self, visitor: StmtVisitor[_T]) -> _T:
        return visitor.visit_return_stmt(self)


@dataclass(frozen=True, eq=False)
class Class(Stmt):
    name: Token
    superclass: Optional[Variable]
    methods: list[Function]
    class_methods: list[Function] = field(default_factory=list)

    def accept(self, visitor: StmtVisitor[_T]) -> _T:
        return visitor.visit_class_stmt(self)


class StmtVisitor(Generic[_T], abc.ABC):

    @abc.abstractmethod
    def visit_expression_stmt(self, stmt: Expression) -> _T:
        pass

    @abc.abstractmethod
    def visit_print_stmt(self, stmt: Print) -> _T:
        pass

    @abc.abstractmethod
    def visit_var_stmt(self, stmt: Var) -> _T:
        pass

    @abc.abstractmethod
    def visit_block_stmt(self, stmt: Block) -> _T:
        pass

    @abc.abstractmethod
    def visit_if_stmt(self, stmt: If) -> _T:
        pass

    @abc.abstractmethod
    def visit_while_stmt(self, stmt: While) -> _T:
        pass

    @abc.abstractmethod
    def visit_function_stmt(self, stmt: Function) -> _T:
        pass

    @abc.abstractmethod
    def visit_return_stmt(self, stmt: Return) -> _T:
        pass

    @abc.abstractmethod
    def visit_class_stmt(self, stmt: Class) -> _T:
        pass
