import pytest

from lox.common import Token, TokenType
from lox.expr import Grouping, Variable
from lox.resolver import Resolver
from lox.stmt import Print


class Recorder:

    def __init__(self):
        self.depths = {}

    def resolve(self, expr, depth):
        self.depths[expr] = depth


def _resolve(parse, source):
    statements, errors = parse(source)
    assert errors == []
    recorder = Recorder()
    resolver = Resolver(recorder)
    resolver.resolve(statements)
    return recorder, resolver.errors


def _messages(parse, source):
    _, errors = _resolve(parse, source)
    return [e.message for e in errors]


def test_globals_are_left_unresolved(parse):
    recorder, errors = _resolve(parse, 'var a = 1; print a;')
    assert errors == []
    assert recorder.depths == {}


def test_distances_count_enclosing_scopes(parse):
    recorder, errors = _resolve(parse, '''
        {
          var a = 1;
          {
            var b = 2;
            print a + b;
          }
        }
    ''')
    assert errors == []
    assert sorted((e.name.lexeme, d) for e, d in recorder.depths.items()) == [
        ('a', 1), ('b', 0)]


def test_identical_references_resolve_independently(parse):
    recorder, _ = _resolve(parse, '''
        {
          var x = 1;
          print x;
          {
            var x = 2;
            { print x; }
          }
        }
    ''')
    xs = [e for e in recorder.depths if isinstance(e, Variable)]
    assert len(xs) == 2
    assert sorted(recorder.depths[e] for e in xs) == [0, 1]


def test_closure_binds_by_lexical_position(parse):
    recorder, errors = _resolve(parse, '''
        var a = "global";
        {
          fun show() { print a; }
          var a = "block";
        }
    ''')
    assert errors == []
    # "a" inside show was not yet declared in the block: global.
    assert [e.name.lexeme for e in recorder.depths] == []


def test_this_and_super_are_resolved(parse):
    recorder, errors = _resolve(parse, '''
        class A { m() {} }
        class B < A { m() { super.m(); return this; } }
    ''')
    assert errors == []
    depths = {type(e).__name__: d for e, d in recorder.depths.items()}
    # function scope -> "this" scope -> "super" scope
    assert depths['This'] == 1
    assert depths['Super'] == 2


@pytest.mark.parametrize('source, message', [
    ('{ var a = a; }', 'Can\'t read local variable in its own initializer.'),
    ('{ var a = 1; var a = 2; }',
     'Already a variable with this name in this scope.'),
    ('fun f(a, a) {}', 'Already a variable with this name in this scope.'),
    ('return 1;', 'Can\'t return from top-level code.'),
    ('class A { init() { return 1; } }',
     'Can\'t return a value from an initializer.'),
    ('print this;', 'Can\'t use "this" outside of a class.'),
    ('fun f() { return this; }', 'Can\'t use "this" outside of a class.'),
    ('print super.x;', 'Can\'t use "super" outside of a class.'),
    ('class A { m() { super.m(); } }',
     'Can\'t use "super" in a class with no superclass.'),
    ('class A {} class B < A { class m() { super.m(); } }',
     'Can\'t use "super" in a static method.'),
    ('class A < A {}', 'A class can\'t inherit from itself.'),
])
def test_static_errors(parse, source, message):
    assert _messages(parse, source) == [message]


def test_allowed_patterns(parse):
    assert _messages(parse, '''
        var a = 1;
        var a = 2;
        { var b = 1; { var b = 2; } }
        class A { init() { return; } get { return this; } }
        class M { class make() { return this(); } }
    ''') == []


def test_errors_do_not_stop_resolution(parse):
    assert _messages(parse, '''
        return 1;
        { var a = 1; var a = 2; }
        print this;
    ''') == [
        'Can\'t return from top-level code.',
        'Already a variable with this name in this scope.',
        'Can\'t use "this" outside of a class.',
    ]


def test_function_kind_is_restored_after_nested_function(parse):
    assert _messages(parse, '''
        class A {
          init() {
            fun helper() { return 1; }
            return 2;
          }
        }
    ''') == ['Can\'t return a value from an initializer.']


def test_too_much_nesting_is_reported(parse):
    expr = Variable(Token(TokenType.IDENTIFIER, 'x', None, 4))
    for _ in range(10000):
        expr = Grouping(expr)
    rest, _ = parse('{ var a = 1; print a; }')
    recorder = Recorder()
    resolver = Resolver(recorder)
    resolver.resolve([Print(expr)] + rest)
    assert [str(e) for e in resolver.errors] == [
        '[line 4] Error at "x": Too much nesting.']
    # Later statements resolve from a clean state.
    assert resolver.scopes == []
    assert list(recorder.depths.values()) == [0]
