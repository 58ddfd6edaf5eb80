from lox.main import Status


def test_fields_are_created_on_assignment(run):
    assert run('''
        class Bag {}
        var bag = Bag();
        bag.apples = 3;
        bag.apples = bag.apples + 1;
        print bag.apples;
    ''').lines == ['4']


def test_methods_bind_this(run):
    assert run('''
        class Person {
          init(name) { this.name = name; }
          greet() { return "hi " + this.name; }
        }
        var greet = Person("ada").greet;
        print greet();
    ''').lines == ['hi ada']


def test_fields_shadow_methods(run):
    assert run('''
        class A { m() { return "method"; } }
        var a = A();
        a.m = "field";
        print a.m;
    ''').lines == ['field']


def test_undefined_property_names_the_class(run):
    result = run('class Box {}\nBox().open();')
    assert result.status == Status.RUNTIME_ERROR
    assert result.err == \
        '[line 2] Undefined property "open" on Box instance.\n'


def test_initializer_always_yields_instance(run):
    assert run('''
        class Early {
          init(flag) {
            this.flag = flag;
            if (flag) return;
            this.flag = "late";
          }
        }
        var e = Early(true);
        print e;
        print e.flag;
        print e.init(false);
        print e.flag;
    ''').lines == ['Early instance', 'true', 'Early instance', 'late']


def test_class_arity_comes_from_initializer(run):
    assert run('class P { init(a, b) {} }\nP(1);').err == \
        '[line 2] Expected 2 arguments but got 1.\n'
    assert run('class Q {}\nQ(1);').err == \
        '[line 2] Expected 0 arguments but got 1.\n'


def test_inherited_methods_and_super(run):
    assert run('''
        class Animal {
          init(name) { this.name = name; }
          speak() { return this.name + " makes a sound"; }
          describe() { return "I am " + this.name; }
        }
        class Dog < Animal {
          speak() { return super.speak() + " (woof)"; }
        }
        var d = Dog("rex");
        print d.speak();
        print d.describe();
    ''').lines == ['rex makes a sound (woof)', 'I am rex']


def test_super_skips_overrides_and_keeps_this(run):
    assert run('''
        class A {
          method() { return "A " + this.tag(); }
          tag() { return "a"; }
        }
        class B < A {
          method() { return "B"; }
          tag() { return "b"; }
          test() { return super.method(); }
        }
        class C < B {}
        print C().test();
    ''').lines == ['A b']


def test_inherited_initializer(run):
    assert run('''
        class Base { init(x) { this.x = x; } }
        class Derived < Base {}
        print Derived(5).x;
    ''').lines == ['5']


def test_undefined_super_method(run):
    result = run('''
        class A {}
        class B < A { m() { return super.missing(); } }
        B().m();
    ''')
    assert result.status == Status.RUNTIME_ERROR
    assert 'Undefined property "missing" on A.' in result.err


def test_class_can_refer_to_itself_in_methods(run):
    assert run('''
        class Node {
          init(next) { this.next = next; }
          grow() { return Node(this); }
        }
        print Node(nil).grow().next.next;
    ''').lines == ['nil']


def test_getters_run_on_access(run):
    assert run('''
        class Circle {
          init(radius) { this.radius = radius; }
          area { return 3 * this.radius * this.radius; }
        }
        var c = Circle(2);
        print c.area;
        c.radius = 3;
        print c.area;
    ''').lines == ['12', '27']


def test_inherited_getter_through_super(run):
    assert run('''
        class A { name { return "a"; } }
        class B < A { name { return "b+" + super.name; } }
        print B().name;
    ''').lines == ['b+a']


def test_static_methods(run):
    assert run('''
        class Math {
          class square(n) { return n * n; }
          class self() { return this; }
        }
        print Math.square(4);
        print Math.self();
    ''').lines == ['16', 'Math']


def test_static_methods_are_inherited(run):
    assert run('''
        class Base { class create() { return this(); } }
        class Child < Base {}
        print Child.create();
    ''').lines == ['Child instance']


def test_static_method_not_visible_on_instances(run):
    result = run('class M { class s() {} }\nM().s();')
    assert result.status == Status.RUNTIME_ERROR
    assert result.err == '[line 2] Undefined property "s" on M instance.\n'


def test_instance_method_not_visible_on_class(run):
    result = run('class M { m() {} }\nM.m();')
    assert result.err == '[line 2] Undefined property "m" on M.\n'


def test_bound_methods_remember_their_instance(run):
    assert run('''
        class Counter {
          init() { this.n = 0; }
          bump() { this.n = this.n + 1; return this.n; }
        }
        var a = Counter();
        var b = Counter();
        var bumpA = a.bump;
        bumpA();
        bumpA();
        print a.n;
        print b.bump();
    ''').lines == ['2', '1']


def test_recursive_getter_is_a_stack_overflow(run):
    result = run('class A { g { return this.g; } }\nprint A().g;')
    assert result.status == Status.RUNTIME_ERROR
    assert result.out == ''
    assert result.err.endswith('Stack overflow.\n')


def test_recursive_super_getter_is_a_stack_overflow(run):
    result = run('''
        class A { g { return this.g; } }
        class B < A { g { return super.g; } }
        print B().g;
    ''')
    assert result.status == Status.RUNTIME_ERROR
    assert result.err.endswith('Stack overflow.\n')
