"""Debugging aid: prints expression trees in Lisp-like prefix form.

Nothing in the interpreter pipeline calls it.
"""
from typing import Any

from lox.expr import (Assign, Binary, Call, Expr, ExprVisitor, Get, Grouping,
                      Literal, Logical, Set, Super, This, Unary, Variable)


class AstPrinter(ExprVisitor[str]):
    """Renders an expression in parenthesised prefix form, for debugging."""

    def print(self, expr: Expr) -> str:
        return expr.accept(self)

    def _parenthesize(self, name: str, *parts: Any) -> str:
        rendered = [name]
        for part in parts:
            rendered.append(part.accept(self) if isinstance(part, Expr)
                            else str(part))
        return '(' + ' '.join(rendered) + ')'

    def visit_literal_expr(self, expr: Literal) -> str:
        if expr.value is None:
            return 'nil'
        if isinstance(expr.value, bool):
            return str(expr.value).lower()
        if isinstance(expr.value, str):
            return f'"{expr.value}"'
        return str(expr.value)

    def visit_grouping_expr(self, expr: Grouping) -> str:
        return self._parenthesize('group', expr.expression)

    def visit_unary_expr(self, expr: Unary) -> str:
        return self._parenthesize(expr.operator.lexeme, expr.right)

    def visit_binary_expr(self, expr: Binary) -> str:
        return self._parenthesize(expr.operator.lexeme, expr.left, expr.right)

    def visit_logical_expr(self, expr: Logical) -> str:
        return self._parenthesize(expr.operator.lexeme, expr.left, expr.right)

    def visit_variable_expr(self, expr: Variable) -> str:
        return expr.name.lexeme

    def visit_assign_expr(self, expr: Assign) -> str:
        return self._parenthesize('=', expr.name.lexeme, expr.value)

    def visit_call_expr(self, expr: Call) -> str:
        return self._parenthesize('call', expr.callee, *expr.arguments)

    def visit_get_expr(self, expr: Get) -> str:
        return self._parenthesize('.', expr.obj, expr.name.lexeme)

    def visit_set_expr(self, expr: Set) -> str:
        return self._parenthesize(
            '=', Get(expr.obj, expr.name), expr.value)

    def visit_this_expr(self, expr: This) -> str:
        return 'this'

    def visit_super_expr(self, expr: Super) -> str:
        return self._parenthesize('super', expr.method.lexeme)
