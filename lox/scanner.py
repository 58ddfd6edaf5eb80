from typing import Union

from lox.common import KEYWORDS, Diagnostic, Token, TokenType

_SINGLE = {
    '(': TokenType.LEFT_PAREN,
    ')': TokenType.RIGHT_PAREN,
    '{': TokenType.LEFT_BRACE,
    '}': TokenType.RIGHT_BRACE,
    ',': TokenType.COMMA,
    '.': TokenType.DOT,
    '-': TokenType.MINUS,
    '+': TokenType.PLUS,
    ';': TokenType.SEMICOLON,
    '*': TokenType.STAR,
}

# Operators that change meaning when followed by "=".
_WITH_EQUAL = {
    '!': (TokenType.BANG, TokenType.BANG_EQUAL),
    '=': (TokenType.EQUAL, TokenType.EQUAL_EQUAL),
    '<': (TokenType.LESS, TokenType.LESS_EQUAL),
    '>': (TokenType.GREATER, TokenType.GREATER_EQUAL),
}

_WHITESPACE = ' \r\t'


class Scanner:
    """Turns source text into tokens, ending with an EOF token.

    Lexical errors are collected in ``errors`` and scanning goes on.
    """

    def __init__(self, source: str):
        self.source = source
        self.tokens: list[Token] = []
        self.errors: list[Diagnostic] = []
        self.start = 0
        self.current = 0
        self.line = 1

    def scan_tokens(self) -> list[Token]:
        while self.current < len(self.source):
            self.start = self.current
            self._scan_token()
        self.tokens.append(Token(TokenType.EOF, '', None, self.line))
        return self.tokens

    def _scan_token(self) -> None:
        c = self._advance()
        if c in _SINGLE:
            self._emit(_SINGLE[c])
        elif c in _WITH_EQUAL:
            plain, with_equal = _WITH_EQUAL[c]
            self._emit(with_equal if self._match('=') else plain)
        elif c == '/':
            self._slash()
        elif c == '\n':
            self.line += 1
        elif c in _WHITESPACE:
            pass
        elif c == '"':
            self._string()
        elif _is_digit(c):
            self._number()
        elif _is_alpha(c):
            self._identifier()
        else:
            self.errors.append(
                Diagnostic(self.line, '', f'Unexpected character: {c}'))

    def _advance(self) -> str:
        self.current += 1
        return self.source[self.current - 1]

    def _peek(self, ahead: int = 0) -> str:
        index = self.current + ahead
        return self.source[index] if index < len(self.source) else ''

    def _match(self, expected: str) -> bool:
        if self._peek() != expected:
            return False
        self.current += 1
        return True

    def _emit(self, token_type: TokenType,
              literal: Union[None, str, float] = None) -> None:
        lexeme = self.source[self.start:self.current]
        self.tokens.append(Token(token_type, lexeme, literal, self.line))

    def _skip_until(self, terminator: str) -> bool:
        """Consume up to and including ``terminator``, counting lines.

        Returns False when the source ends first.
        """
        while not self.source.startswith(terminator, self.current):
            if self.current >= len(self.source):
                return False
            if self._advance() == '\n':
                self.line += 1
        self.current += len(terminator)
        return True

    def _slash(self) -> None:
        if self._match('/'):
            end = self.source.find('\n', self.current)
            self.current = len(self.source) if end == -1 else end
        elif self._match('*'):
            if not self._skip_until('*/'):
                self.errors.append(
                    Diagnostic(self.line, '', 'Unterminated comment.'))
        else:
            self._emit(TokenType.SLASH)

    def _string(self) -> None:
        if not self._skip_until('"'):
            self.errors.append(
                Diagnostic(self.line, '', 'Unterminated string.'))
            return
        self._emit(TokenType.STRING,
                   self.source[self.start + 1:self.current - 1])

    def _number(self) -> None:
        while _is_digit(self._peek()):
            self._advance()
        # A trailing "." without digits is a separate DOT token.
        if self._peek() == '.' and _is_digit(self._peek(1)):
            self._advance()
            while _is_digit(self._peek()):
                self._advance()
        self._emit(TokenType.NUMBER,
                   float(self.source[self.start:self.current]))

    def _identifier(self) -> None:
        while _is_alpha(self._peek()) or _is_digit(self._peek()):
            self._advance()
        text = self.source[self.start:self.current]
        self._emit(KEYWORDS.get(text, TokenType.IDENTIFIER))


def _is_digit(c: str) -> bool:
    return c != '' and '0' <= c <= '9'


def _is_alpha(c: str) -> bool:
    return c.isalpha() or c == '_'
