import io
from typing import NamedTuple

import pytest

from lox.main import Lox, Status
from lox.parser import Parser
from lox.scanner import Scanner


class Result(NamedTuple):
    status: Status
    out: str
    err: str

    @property
    def lines(self) -> list[str]:
        return self.out.splitlines()


def run_source(source: str) -> Result:
    out = io.StringIO()
    err = io.StringIO()
    status = Lox(out=out, err=err).run(source)
    return Result(status, out.getvalue(), err.getvalue())


def parse_source(source: str):
    parser = Parser(Scanner(source).scan_tokens())
    statements = parser.parse()
    return statements, parser.errors


@pytest.fixture
def run():
    return run_source


@pytest.fixture
def parse():
    return parse_source
