from __future__ import annotations

import enum
import sys
from typing import Optional, TextIO

from lox.common import Diagnostic
from lox.interpreter import Interpreter
from lox.parser import Parser
from lox.resolver import Resolver
from lox.scanner import Scanner


@enum.unique
class Status(enum.Enum):
    # Values double as process exit codes.
    OK = 0
    STATIC_ERROR = 65
    RUNTIME_ERROR = 70


class Lox:
    """One interpreter session: globals persist across ``run`` calls."""

    def __init__(self,
                 out: Optional[TextIO] = None,
                 err: Optional[TextIO] = None):
        self.interpreter = Interpreter(out=out, err=err)
        self.err = self.interpreter.err

    def run(self, source: str) -> Status:
        scanner = Scanner(source)
        tokens = scanner.scan_tokens()
        parser = Parser(tokens)
        statements = parser.parse()
        if self._report(scanner.errors + parser.errors):
            return Status.STATIC_ERROR
        resolver = Resolver(self.interpreter)
        resolver.resolve(statements)
        if self._report(resolver.errors):
            return Status.STATIC_ERROR
        if self.interpreter.interpret(statements) is not None:
            return Status.RUNTIME_ERROR
        return Status.OK

    def _report(self, errors: list[Diagnostic]) -> bool:
        for error in sorted(errors, key=lambda e: e.line):
            print(error, file=self.err)
        return bool(errors)


def run_file(path: str) -> Status:
    with open(path, 'r') as f:
        data = f.read()
    return Lox().run(data)


def run_prompt(stdin: Optional[TextIO] = None,
               out: Optional[TextIO] = None) -> None:
    stdin = stdin if stdin is not None else sys.stdin
    out = out if out is not None else sys.stdout
    session = Lox(out=out)
    while True:
        print('> ', end='', file=out, flush=True)
        line = stdin.readline()
        if not line.strip():
            break
        session.run(line)


def main(argv: Optional[list[str]] = None) -> None:
    if argv is None:
        argv = sys.argv[1:]
    if len(argv) > 1:
        print('Usage: lox [script]')
        sys.exit(64)
    elif len(argv) == 1:
        sys.exit(run_file(argv[0]).value)
    else:
        run_prompt()


if __name__ == '__main__':
    main()
