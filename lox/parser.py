from typing import Optional

from lox.common import Diagnostic, Token, TokenType
from lox.expr import (Assign, Binary, Call, Expr, Get, Grouping, Literal,
                      Logical, Set, Super, This, Unary, Variable)
from lox.stmt import (Block, Class, Expression, Function, FunctionKind, If,
                      Print, Return, Stmt, Var, While)

MAX_ARGUMENTS = 255

# Tokens that start a declaration or statement; parsing resumes at them
# after an error.
_STATEMENT_STARTS = (
    TokenType.CLASS,
    TokenType.FUN,
    TokenType.VAR,
    TokenType.FOR,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.PRINT,
    TokenType.RETURN,
)


class ParseError(RuntimeError):
    pass


class Parser:
    """Recursive descent parser producing a list of statements.

    Errors are recorded in ``errors``; a declaration that fails to parse
    shows up as ``None`` in the result of ``parse`` and the parser carries
    on from the next statement boundary.
    """

    def __init__(self, tokens: list[Token]):
        self.tokens = tokens
        self.current = 0
        self.errors: list[Diagnostic] = []

    def parse(self) -> list[Optional[Stmt]]:
        statements: list[Optional[Stmt]] = []
        while not self._is_at_end():
            statements.append(self._declaration())
        return statements

    def _declaration(self) -> Optional[Stmt]:
        try:
            if self._match(TokenType.CLASS):
                return self._class_declaration()
            if self._match(TokenType.FUN):
                return self._function('function', FunctionKind.FUNCTION)
            if self._match(TokenType.VAR):
                return self._var_declaration()
            return self._statement()
        except ParseError:
            self._synchronize()
            return None
        except RecursionError:
            self.errors.append(
                Diagnostic.at_token(self._peek(), 'Too much nesting.'))
            self._synchronize()
            return None

    def _class_declaration(self) -> Class:
        name = self._consume(TokenType.IDENTIFIER, 'Expect class name.')
        superclass = None
        if self._match(TokenType.LESS):
            self._consume(TokenType.IDENTIFIER, 'Expect superclass name.')
            superclass = Variable(self._previous())
        self._consume(TokenType.LEFT_BRACE, 'Expect "{" before class body.')
        methods: list[Function] = []
        class_methods: list[Function] = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._is_at_end():
            if self._match(TokenType.CLASS):
                class_methods.append(
                    self._function('method', FunctionKind.STATIC))
            else:
                methods.append(self._method())
        self._consume(TokenType.RIGHT_BRACE, 'Expect "}" after class body.')
        return Class(name, superclass, methods, class_methods)

    def _method(self) -> Function:
        name = self._consume(TokenType.IDENTIFIER, 'Expect method name.')
        if not self._check(TokenType.LEFT_PAREN):
            self._consume(TokenType.LEFT_BRACE,
                          'Expect "{" before getter body.')
            return Function(name, [], self._block(), FunctionKind.GETTER)
        self._advance()
        parameters = self._parameters()
        self._consume(TokenType.LEFT_BRACE, 'Expect "{" before method body.')
        return Function(name, parameters, self._block(), FunctionKind.METHOD)

    def _function(self, kind_name: str, kind: FunctionKind) -> Function:
        name = self._consume(TokenType.IDENTIFIER, f'Expect {kind_name} name.')
        self._consume(TokenType.LEFT_PAREN,
                      f'Expect "(" after {kind_name} name.')
        parameters = self._parameters()
        self._consume(TokenType.LEFT_BRACE,
                      f'Expect "{{" before {kind_name} body.')
        body = self._block()
        return Function(name, parameters, body, kind)

    def _parameters(self) -> list[Token]:
        # Expects the opening parenthesis to be consumed already.
        parameters: list[Token] = []
        if not self._check(TokenType.RIGHT_PAREN):
            while True:
                if len(parameters) >= MAX_ARGUMENTS:
                    self._error(
                        self._peek(),
                        f'Can\'t have more than {MAX_ARGUMENTS} parameters.')
                parameters.append(self._consume(
                    TokenType.IDENTIFIER, 'Expect parameter name.'))
                if not self._match(TokenType.COMMA):
                    break
        self._consume(TokenType.RIGHT_PAREN, 'Expect ")" after parameters.')
        return parameters

    def _var_declaration(self) -> Var:
        name = self._consume(TokenType.IDENTIFIER, 'Expect variable name.')
        initializer = None
        if self._match(TokenType.EQUAL):
            initializer = self._expression()
        self._consume(TokenType.SEMICOLON,
                      'Expect ";" after variable declaration.')
        return Var(name, initializer)

    def _statement(self) -> Stmt:
        if self._match(TokenType.PRINT):
            return self._print_statement()
        if self._match(TokenType.RETURN):
            return self._return_statement()
        if self._match(TokenType.LEFT_BRACE):
            return Block(self._block())
        if self._match(TokenType.IF):
            return self._if_statement()
        if self._match(TokenType.WHILE):
            return self._while_statement()
        if self._match(TokenType.FOR):
            return self._for_statement()
        return self._expression_statement()

    def _print_statement(self) -> Print:
        value = self._expression()
        self._consume(TokenType.SEMICOLON, 'Expect ";" after value.')
        return Print(value)

    def _return_statement(self) -> Return:
        keyword = self._previous()
        value = None
        if not self._check(TokenType.SEMICOLON):
            value = self._expression()
        self._consume(TokenType.SEMICOLON, 'Expect ";" after return value.')
        return Return(keyword, value)

    def _expression_statement(self) -> Expression:
        expr = self._expression()
        self._consume(TokenType.SEMICOLON, 'Expect ";" after expression.')
        return Expression(expr)

    def _if_statement(self) -> If:
        self._consume(TokenType.LEFT_PAREN, 'Expect "(" after "if".')
        condition = self._expression()
        self._consume(TokenType.RIGHT_PAREN, 'Expect ")" after if condition.')
        then_branch = self._statement()
        else_branch = None
        if self._match(TokenType.ELSE):
            else_branch = self._statement()
        return If(condition, then_branch, else_branch)

    def _while_statement(self) -> While:
        self._consume(TokenType.LEFT_PAREN, 'Expect "(" after "while".')
        condition = self._expression()
        self._consume(TokenType.RIGHT_PAREN, 'Expect ")" after condition.')
        return While(condition, self._statement())

    def _for_statement(self) -> Stmt:
        self._consume(TokenType.LEFT_PAREN, 'Expect "(" after "for".')
        initializer: Optional[Stmt]
        if self._match(TokenType.SEMICOLON):
            initializer = None
        elif self._match(TokenType.VAR):
            initializer = self._var_declaration()
        else:
            initializer = self._expression_statement()
        condition: Optional[Expr] = None
        if not self._check(TokenType.SEMICOLON):
            condition = self._expression()
        self._consume(TokenType.SEMICOLON, 'Expect ";" after loop condition.')
        increment: Optional[Expr] = None
        if not self._check(TokenType.RIGHT_PAREN):
            increment = self._expression()
        self._consume(TokenType.RIGHT_PAREN, 'Expect ")" after for clauses.')
        body = self._statement()

        # Desugar into a while loop wrapped in blocks.
        if increment is not None:
            body = Block([body, Expression(increment)])
        if condition is None:
            condition = Literal(True)
        body = While(condition, body)
        if initializer is not None:
            body = Block([initializer, body])
        return body

    def _block(self) -> list[Stmt]:
        statements: list[Stmt] = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._is_at_end():
            declaration = self._declaration()
            if declaration is not None:
                statements.append(declaration)
        self._consume(TokenType.RIGHT_BRACE, 'Expect "}" after block.')
        return statements

    def _expression(self) -> Expr:
        return self._assignment()

    def _assignment(self) -> Expr:
        expr = self._or()
        if self._match(TokenType.EQUAL):
            equals = self._previous()
            value = self._assignment()
            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            if isinstance(expr, Get):
                return Set(expr.obj, expr.name, value)
            # Reported but not thrown: the parser is not confused.
            self._error(equals, 'Invalid assignment target.')
        return expr

    def _or(self) -> Expr:
        expr = self._and()
        while self._match(TokenType.OR):
            operator = self._previous()
            right = self._and()
            expr = Logical(expr, operator, right)
        return expr

    def _and(self) -> Expr:
        expr = self._equality()
        while self._match(TokenType.AND):
            operator = self._previous()
            right = self._equality()
            expr = Logical(expr, operator, right)
        return expr

    def _binary(self, operand, *operators: TokenType) -> Expr:
        expr = operand()
        while self._match(*operators):
            operator = self._previous()
            right = operand()
            expr = Binary(expr, operator, right)
        return expr

    def _equality(self) -> Expr:
        return self._binary(self._comparison,
                            TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)

    def _comparison(self) -> Expr:
        return self._binary(self._term,
                            TokenType.GREATER,
                            TokenType.GREATER_EQUAL,
                            TokenType.LESS,
                            TokenType.LESS_EQUAL)

    def _term(self) -> Expr:
        return self._binary(self._factor, TokenType.MINUS, TokenType.PLUS)

    def _factor(self) -> Expr:
        return self._binary(self._unary, TokenType.SLASH, TokenType.STAR)

    def _unary(self) -> Expr:
        if self._match(TokenType.BANG, TokenType.MINUS):
            operator = self._previous()
            right = self._unary()
            return Unary(operator, right)
        return self._call()

    def _call(self) -> Expr:
        expr = self._primary()
        while True:
            if self._match(TokenType.LEFT_PAREN):
                expr = self._finish_call(expr)
            elif self._match(TokenType.DOT):
                name = self._consume(TokenType.IDENTIFIER,
                                     'Expect property name after ".".')
                expr = Get(expr, name)
            else:
                break
        return expr

    def _finish_call(self, callee: Expr) -> Call:
        arguments: list[Expr] = []
        if not self._check(TokenType.RIGHT_PAREN):
            while True:
                if len(arguments) >= MAX_ARGUMENTS:
                    self._error(
                        self._peek(),
                        f'Can\'t have more than {MAX_ARGUMENTS} arguments.')
                arguments.append(self._expression())
                if not self._match(TokenType.COMMA):
                    break
        paren = self._consume(TokenType.RIGHT_PAREN,
                              'Expect ")" after arguments.')
        return Call(callee, paren, arguments)

    def _primary(self) -> Expr:
        if self._match(TokenType.FALSE):
            return Literal(False)
        if self._match(TokenType.TRUE):
            return Literal(True)
        if self._match(TokenType.NIL):
            return Literal(None)
        if self._match(TokenType.NUMBER, TokenType.STRING):
            return Literal(self._previous().literal)
        if self._match(TokenType.SUPER):
            keyword = self._previous()
            self._consume(TokenType.DOT, 'Expect "." after "super".')
            method = self._consume(TokenType.IDENTIFIER,
                                   'Expect superclass method name.')
            return Super(keyword, method)
        if self._match(TokenType.THIS):
            return This(self._previous())
        if self._match(TokenType.IDENTIFIER):
            return Variable(self._previous())
        if self._match(TokenType.LEFT_PAREN):
            expr = self._expression()
            self._consume(TokenType.RIGHT_PAREN,
                          'Expect ")" after expression.')
            return Grouping(expr)
        raise self._error(self._peek(), 'Expect expression.')

    def _match(self, *token_types: TokenType) -> bool:
        for token_type in token_types:
            if self._check(token_type):
                self._advance()
                return True
        return False

    def _check(self, token_type: TokenType) -> bool:
        if self._is_at_end():
            return False
        return self._peek().token_type == token_type

    def _advance(self) -> Token:
        if not self._is_at_end():
            self.current += 1
        return self._previous()

    def _is_at_end(self) -> bool:
        return self._peek().token_type == TokenType.EOF

    def _peek(self) -> Token:
        return self.tokens[self.current]

    def _previous(self) -> Token:
        return self.tokens[self.current - 1]

    def _consume(self, token_type: TokenType, msg: str) -> Token:
        if self._check(token_type):
            return self._advance()
        raise self._error(self._peek(), msg)

    def _error(self, token: Token, msg: str) -> ParseError:
        self.errors.append(Diagnostic.at_token(token, msg))
        return ParseError(msg)

    def _synchronize(self) -> None:
        self._advance()
        while not self._is_at_end():
            if self._previous().token_type == TokenType.SEMICOLON:
                return
            if self._peek().token_type in _STATEMENT_STARTS:
                return
            self._advance()
