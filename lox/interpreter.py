from __future__ import annotations

import sys
from typing import Any, Optional, TextIO

from lox.common import (INITIALIZER, ArityError, DivisionByZeroError,
                        InvalidSuperclassError, LoxRuntimeError,
                        NotAnInstanceError, NotCallableError,
                        OperandTypeError, StackOverflowError, Token,
                        TokenType, UndefinedPropertyError)
from lox.environment import Environment
from lox.expr import (Assign, Binary, Call, Expr, ExprVisitor, Get, Grouping,
                      Literal, Logical, Set, Super, This, Unary, Variable,
                      first_token)
from lox.runtime import (LoxCallable, LoxClass, LoxFunction, LoxInstance,
                         Returned, native_globals)
from lox.stmt import (Block, Class, Expression, Function, FunctionKind, If,
                      Print, Return, Stmt, StmtVisitor, Var, While)

# Statement execution either completes normally (None) or carries a
# pending return value up to the enclosing call.
Completion = Optional[Returned]

# Each guest call costs about ten host frames.
RECURSION_LIMIT = 5000
if sys.getrecursionlimit() < RECURSION_LIMIT:
    sys.setrecursionlimit(RECURSION_LIMIT)


def stringify(obj: Any) -> str:
    if obj is None:
        return 'nil'
    if isinstance(obj, bool):
        return str(obj).lower()
    if isinstance(obj, float):
        text = str(obj)
        if text.endswith('.0'):
            text = text[:-2]
        return text
    return str(obj)


def is_truthy(obj: Any) -> bool:
    if obj is None:
        return False
    if isinstance(obj, bool):
        return obj
    return True


def is_equal(a: Any, b: Any) -> bool:
    # Python would happily report 1.0 == True.
    if type(a) is not type(b):
        return False
    return a == b


class Interpreter(ExprVisitor[Any], StmtVisitor[Completion]):

    def __init__(self,
                 out: Optional[TextIO] = None,
                 err: Optional[TextIO] = None):
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self.globals = Environment()
        self.environment = self.globals
        for name, native in native_globals().items():
            self.globals.define(name, native)
        self.locals: dict[Expr, int] = {}

    def interpret(
            self,
            statements: list[Optional[Stmt]]) -> Optional[LoxRuntimeError]:
        """Run a program, stopping at the first runtime error.

        The error is written to the error sink and returned.
        """
        try:
            for stmt in statements:
                if stmt is not None:
                    self._execute_top_level(stmt)
        except LoxRuntimeError as e:
            print(e.report(), file=self.err)
            return e
        return None

    def _execute_top_level(self, stmt: Stmt) -> None:
        try:
            self._execute(stmt)
        except RecursionError:
            # Deep nesting that never went through a call.
            token = first_token(stmt)
            if token is None:
                token = Token(TokenType.EOF, '', None, 0)
            raise StackOverflowError(token, 'Stack overflow.') from None

    def resolve(self, expr: Expr, depth: int) -> None:
        self.locals[expr] = depth

    def _execute(self, stmt: Stmt) -> Completion:
        return stmt.accept(self)

    def execute_block(self,
                      statements: list[Stmt],
                      environment: Environment) -> Completion:
        previous = self.environment
        try:
            self.environment = environment
            for stmt in statements:
                completion = self._execute(stmt)
                if completion is not None:
                    return completion
        finally:
            self.environment = previous
        return None

    def _evaluate(self, expr: Expr) -> Any:
        return expr.accept(self)

    def visit_expression_stmt(self, stmt: Expression) -> Completion:
        self._evaluate(stmt.expression)
        return None

    def visit_print_stmt(self, stmt: Print) -> Completion:
        value = self._evaluate(stmt.expression)
        print(stringify(value), file=self.out)
        return None

    def visit_var_stmt(self, stmt: Var) -> Completion:
        value = None
        if stmt.initializer is not None:
            value = self._evaluate(stmt.initializer)
        self.environment.define(stmt.name.lexeme, value)
        return None

    def visit_block_stmt(self, stmt: Block) -> Completion:
        return self.execute_block(
            stmt.statements, Environment(self.environment))

    def visit_if_stmt(self, stmt: If) -> Completion:
        if is_truthy(self._evaluate(stmt.condition)):
            return self._execute(stmt.then_branch)
        if stmt.else_branch is not None:
            return self._execute(stmt.else_branch)
        return None

    def visit_while_stmt(self, stmt: While) -> Completion:
        while is_truthy(self._evaluate(stmt.condition)):
            completion = self._execute(stmt.body)
            if completion is not None:
                return completion
        return None

    def visit_function_stmt(self, stmt: Function) -> Completion:
        function = LoxFunction(stmt, self.environment)
        self.environment.define(stmt.name.lexeme, function)
        return None

    def visit_return_stmt(self, stmt: Return) -> Completion:
        value = None
        if stmt.value is not None:
            value = self._evaluate(stmt.value)
        return Returned(value)

    def visit_class_stmt(self, stmt: Class) -> Completion:
        self.environment.define(stmt.name.lexeme, None)
        superclass = None
        if stmt.superclass is not None:
            superclass = self._evaluate(stmt.superclass)
            if not isinstance(superclass, LoxClass):
                raise InvalidSuperclassError(
                    stmt.superclass.name, 'Superclass must be a class.')
            self.environment = Environment(self.environment)
            self.environment.define('super', superclass)
        methods = {
            method.name.lexeme: LoxFunction(
                method,
                self.environment,
                method.kind == FunctionKind.METHOD
                and method.name.lexeme == INITIALIZER)
            for method in stmt.methods
        }
        class_methods = {
            method.name.lexeme: LoxFunction(method, self.environment)
            for method in stmt.class_methods
        }
        klass = LoxClass(stmt.name.lexeme, superclass, methods, class_methods)
        if superclass is not None:
            assert self.environment.enclosing is not None
            self.environment = self.environment.enclosing
        self.environment.assign(stmt.name, klass)
        return None

    def visit_literal_expr(self, expr: Literal) -> Any:
        return expr.value

    def visit_grouping_expr(self, expr: Grouping) -> Any:
        return self._evaluate(expr.expression)

    def visit_unary_expr(self, expr: Unary) -> Any:
        right = self._evaluate(expr.right)
        if expr.operator.token_type == TokenType.MINUS:
            self._check_number_operand(expr.operator, right)
            return -right
        if expr.operator.token_type == TokenType.BANG:
            return not is_truthy(right)
        # Unreachable.
        assert False

    def visit_binary_expr(self, expr: Binary) -> Any:
        left = self._evaluate(expr.left)
        right = self._evaluate(expr.right)
        operator = expr.operator
        token_type = operator.token_type

        if token_type == TokenType.PLUS:
            if _is_number(left) and _is_number(right):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise OperandTypeError(
                operator,
                'Operands of "+" must be two numbers or two strings.')
        if token_type == TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if token_type == TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        self._check_number_operands(operator, left, right)
        if token_type == TokenType.MINUS:
            return left - right
        if token_type == TokenType.STAR:
            return left * right
        if token_type == TokenType.SLASH:
            if right == 0:
                raise DivisionByZeroError(operator, 'Division by zero.')
            return left / right
        if token_type == TokenType.GREATER:
            return left > right
        if token_type == TokenType.GREATER_EQUAL:
            return left >= right
        if token_type == TokenType.LESS:
            return left < right
        if token_type == TokenType.LESS_EQUAL:
            return left <= right
        # Unreachable.
        assert False

    def visit_logical_expr(self, expr: Logical) -> Any:
        left = self._evaluate(expr.left)
        if expr.operator.token_type == TokenType.OR:
            if is_truthy(left):
                return left
        elif not is_truthy(left):
            return left
        return self._evaluate(expr.right)

    def visit_variable_expr(self, expr: Variable) -> Any:
        return self._lookup_variable(expr.name, expr)

    def visit_assign_expr(self, expr: Assign) -> Any:
        value = self._evaluate(expr.value)
        distance = self.locals.get(expr)
        if distance is not None:
            self.environment.assign_at(distance, expr.name, value)
        else:
            self.globals.assign(expr.name, value)
        return value

    def visit_call_expr(self, expr: Call) -> Any:
        callee = self._evaluate(expr.callee)
        if not isinstance(callee, LoxCallable):
            raise NotCallableError(
                expr.paren, 'Can only call functions and classes.')
        arguments = [self._evaluate(argument) for argument in expr.arguments]
        if len(arguments) != callee.arity():
            raise ArityError(
                expr.paren,
                f'Expected {callee.arity()} arguments '
                f'but got {len(arguments)}.')
        return self._call(callee, arguments, expr.paren)

    def _call(self,
              callee: LoxCallable,
              arguments: list[Any],
              token: Token) -> Any:
        # All guest calls pass through here.
        try:
            return callee.call(self, arguments)
        except RecursionError:
            raise StackOverflowError(token, 'Stack overflow.') from None

    def visit_get_expr(self, expr: Get) -> Any:
        obj = self._evaluate(expr.obj)
        if not isinstance(obj, LoxInstance):
            raise NotAnInstanceError(
                expr.name, 'Only instances have properties.')
        value = obj.get(expr.name)
        if isinstance(value, LoxFunction) and value.is_getter:
            return self._call(value, [], expr.name)
        return value

    def visit_set_expr(self, expr: Set) -> Any:
        obj = self._evaluate(expr.obj)
        if not isinstance(obj, LoxInstance):
            raise NotAnInstanceError(expr.name, 'Only instances have fields.')
        value = self._evaluate(expr.value)
        obj.set(expr.name, value)
        return value

    def visit_this_expr(self, expr: This) -> Any:
        return self._lookup_variable(expr.keyword, expr)

    def visit_super_expr(self, expr: Super) -> Any:
        distance = self.locals[expr]
        superclass: LoxClass = self.environment.get_at(distance, 'super')
        # "this" is always bound in the frame just inside "super".
        obj = self.environment.get_at(distance - 1, 'this')
        method = superclass.find_method(expr.method.lexeme)
        if method is None:
            raise UndefinedPropertyError(
                expr.method,
                f'Undefined property "{expr.method.lexeme}" on {superclass}.')
        bound = method.bind(obj)
        if bound.is_getter:
            return self._call(bound, [], expr.method)
        return bound

    def _lookup_variable(self, name: Token, expr: Expr) -> Any:
        distance = self.locals.get(expr)
        if distance is not None:
            return self.environment.get_at(distance, name.lexeme)
        return self.globals.get(name)

    def _check_number_operand(self, operator: Token, operand: Any) -> None:
        if _is_number(operand):
            return
        raise OperandTypeError(
            operator, f'Operand of "{operator.lexeme}" must be a number.')

    def _check_number_operands(
            self,
            operator: Token,
            left: Any,
            right: Any) -> None:
        if _is_number(left) and _is_number(right):
            return
        raise OperandTypeError(
            operator, f'Operands of "{operator.lexeme}" must be numbers.')


def _is_number(obj: Any) -> bool:
    # bool is an int subclass; Lox numbers are always floats.
    return isinstance(obj, float)
