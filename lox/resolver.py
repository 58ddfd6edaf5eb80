import enum
from functools import singledispatchmethod
from typing import Optional, Protocol

from lox.common import INITIALIZER, Diagnostic, Token
from lox.expr import (Assign, Binary, Call, Expr, ExprVisitor, Get, Grouping,
                      Literal, Logical, Set, Super, This, Unary, Variable,
                      first_token)
from lox.stmt import (Block, Class, Expression, Function, FunctionKind, If,
                      Print, Return, Stmt, StmtVisitor, Var, While)


class FunctionType(enum.Enum):
    NONE = enum.auto()
    FUNCTION = enum.auto()
    INITIALIZER = enum.auto()
    METHOD = enum.auto()
    GETTER = enum.auto()
    STATIC = enum.auto()


class ClassType(enum.Enum):
    NONE = enum.auto()
    CLASS = enum.auto()
    SUBCLASS = enum.auto()


class DistanceTable(Protocol):
    """Where resolved scope distances go; the interpreter implements it."""

    def resolve(self, expr: Expr, depth: int) -> None:
        ...


_METHOD_TYPES = {
    FunctionKind.METHOD: FunctionType.METHOD,
    FunctionKind.GETTER: FunctionType.GETTER,
    FunctionKind.STATIC: FunctionType.STATIC,
}


class Resolver(StmtVisitor[None], ExprVisitor[None]):
    """Static pass binding every local reference to a scope distance.

    Each scope maps a name to whether its declaration is finished. Names
    not found in any scope are left for the global frame.
    """

    def __init__(self, interpreter: DistanceTable):
        self.interpreter = interpreter
        self.scopes: list[dict[str, bool]] = []
        self.errors: list[Diagnostic] = []
        self.current_function = FunctionType.NONE
        self.current_class = ClassType.NONE

    @singledispatchmethod
    def resolve(self, statements: list[Optional[Stmt]]) -> None:
        for statement in statements:
            if statement is None:
                continue
            if self.scopes:
                self.resolve(statement)
            else:
                self._resolve_top_level(statement)

    @resolve.register
    def _(self, statement: Stmt) -> None:
        statement.accept(self)

    @resolve.register
    def _(self, expr: Expr) -> None:
        expr.accept(self)

    def _resolve_top_level(self, statement: Stmt) -> None:
        try:
            self.resolve(statement)
        except RecursionError:
            token = first_token(statement)
            if token is not None:
                self._error(token, 'Too much nesting.')
            else:
                self.errors.append(Diagnostic(0, '', 'Too much nesting.'))
            self.scopes.clear()
            self.current_function = FunctionType.NONE
            self.current_class = ClassType.NONE

    def _error(self, token: Token, msg: str) -> None:
        self.errors.append(Diagnostic.at_token(token, msg))

    def _begin_scope(self) -> None:
        self.scopes.append({})

    def _end_scope(self) -> None:
        self.scopes.pop()

    def _declare(self, name: Token) -> None:
        if not self.scopes:
            return
        scope = self.scopes[-1]
        if name.lexeme in scope:
            self._error(
                name, 'Already a variable with this name in this scope.')
        scope[name.lexeme] = False

    def _define(self, name: Token) -> None:
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme] = True

    def _resolve_local(self, expr: Expr, name: Token) -> None:
        for depth, scope in enumerate(reversed(self.scopes)):
            if name.lexeme in scope:
                self.interpreter.resolve(expr, depth)
                return

    def _resolve_function(
            self,
            function: Function,
            function_type: FunctionType) -> None:
        enclosing_function = self.current_function
        self.current_function = function_type
        self._begin_scope()
        for param in function.params:
            self._declare(param)
            self._define(param)
        self.resolve(function.body)
        self._end_scope()
        self.current_function = enclosing_function

    def visit_block_stmt(self, stmt: Block) -> None:
        self._begin_scope()
        self.resolve(stmt.statements)
        self._end_scope()

    def visit_var_stmt(self, stmt: Var) -> None:
        self._declare(stmt.name)
        if stmt.initializer is not None:
            self.resolve(stmt.initializer)
        self._define(stmt.name)

    def visit_function_stmt(self, stmt: Function) -> None:
        # Defined before the body so the function can recurse.
        self._declare(stmt.name)
        self._define(stmt.name)
        self._resolve_function(stmt, FunctionType.FUNCTION)

    def visit_class_stmt(self, stmt: Class) -> None:
        enclosing_class = self.current_class
        self.current_class = ClassType.CLASS
        self._declare(stmt.name)
        self._define(stmt.name)

        if stmt.superclass is not None:
            if stmt.name.lexeme == stmt.superclass.name.lexeme:
                self._error(stmt.superclass.name,
                            'A class can\'t inherit from itself.')
            self.current_class = ClassType.SUBCLASS
            self.resolve(stmt.superclass)
            self._begin_scope()
            self.scopes[-1]['super'] = True

        self._begin_scope()
        self.scopes[-1]['this'] = True
        for method in stmt.methods + stmt.class_methods:
            declaration = _METHOD_TYPES[method.kind]
            if (method.kind == FunctionKind.METHOD
                    and method.name.lexeme == INITIALIZER):
                declaration = FunctionType.INITIALIZER
            self._resolve_function(method, declaration)
        self._end_scope()

        if stmt.superclass is not None:
            self._end_scope()
        self.current_class = enclosing_class

    def visit_expression_stmt(self, stmt: Expression) -> None:
        self.resolve(stmt.expression)

    def visit_if_stmt(self, stmt: If) -> None:
        self.resolve(stmt.condition)
        self.resolve(stmt.then_branch)
        if stmt.else_branch is not None:
            self.resolve(stmt.else_branch)

    def visit_print_stmt(self, stmt: Print) -> None:
        self.resolve(stmt.expression)

    def visit_return_stmt(self, stmt: Return) -> None:
        if self.current_function == FunctionType.NONE:
            self._error(stmt.keyword, 'Can\'t return from top-level code.')
        if stmt.value is not None:
            if self.current_function == FunctionType.INITIALIZER:
                self._error(stmt.keyword,
                            'Can\'t return a value from an initializer.')
            self.resolve(stmt.value)

    def visit_while_stmt(self, stmt: While) -> None:
        self.resolve(stmt.condition)
        self.resolve(stmt.body)

    def visit_variable_expr(self, expr: Variable) -> None:
        if self.scopes and self.scopes[-1].get(expr.name.lexeme) is False:
            self._error(expr.name,
                        'Can\'t read local variable in its own initializer.')
        self._resolve_local(expr, expr.name)

    def visit_assign_expr(self, expr: Assign) -> None:
        self.resolve(expr.value)
        self._resolve_local(expr, expr.name)

    def visit_binary_expr(self, expr: Binary) -> None:
        self.resolve(expr.left)
        self.resolve(expr.right)

    def visit_call_expr(self, expr: Call) -> None:
        self.resolve(expr.callee)
        for argument in expr.arguments:
            self.resolve(argument)

    def visit_grouping_expr(self, expr: Grouping) -> None:
        self.resolve(expr.expression)

    def visit_literal_expr(self, expr: Literal) -> None:
        return None

    def visit_logical_expr(self, expr: Logical) -> None:
        self.resolve(expr.left)
        self.resolve(expr.right)

    def visit_unary_expr(self, expr: Unary) -> None:
        self.resolve(expr.right)

    def visit_get_expr(self, expr: Get) -> None:
        self.resolve(expr.obj)

    def visit_set_expr(self, expr: Set) -> None:
        self.resolve(expr.value)
        self.resolve(expr.obj)

    def visit_this_expr(self, expr: This) -> None:
        if self.current_class == ClassType.NONE:
            self._error(expr.keyword,
                        'Can\'t use "this" outside of a class.')
            return
        self._resolve_local(expr, expr.keyword)

    def visit_super_expr(self, expr: Super) -> None:
        if self.current_class == ClassType.NONE:
            self._error(expr.keyword,
                        'Can\'t use "super" outside of a class.')
        elif self.current_class != ClassType.SUBCLASS:
            self._error(expr.keyword,
                        'Can\'t use "super" in a class with no superclass.')
        elif self.current_function == FunctionType.STATIC:
            self._error(expr.keyword,
                        'Can\'t use "super" in a static method.')
        self._resolve_local(expr, expr.keyword)
