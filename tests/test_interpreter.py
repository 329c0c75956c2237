"""
Testes do interpretador.
"""
import pytest

from lox.ctx import Ctx
from lox.runtime import LoxClass, LoxFunction, LoxInstance, NativeFunction


def test_print_numbers(run):
    stdout, stderr, _ = run("print 1 + 2; print 1 / 3; print 2.5 * 2; print -0.5;")
    assert stdout.splitlines() == ["3", "0.3333333333333333", "5", "-0.5"]
    assert stderr == ""


def test_evaluation_order_is_left_to_right(run):
    src = """
    var log = "";
    fun f(x) { log = log + x; return x; }
    print f("a") + f("b") + f("c");
    print log;
    print 8 / 4 / 2;
    """
    stdout, _, _ = run(src)
    assert stdout.splitlines() == ["abc", "abc", "1"]


def test_closures_share_captured_frame(run):
    src = """
    fun make() {
        var i = 0;
        fun inc() { i = i + 1; return i; }
        fun get() { return i; }
        inc();
        return get;
    }
    var get = make();
    print get();
    """
    stdout, _, _ = run(src)
    assert stdout.splitlines() == ["1"]


def test_closure_counter(run):
    src = "fun make(){ var i=0; fun inc(){ i = i+1; return i; } return inc; } var c = make(); print c(); print c();"
    stdout, _, _ = run(src)
    assert stdout.splitlines() == ["1", "2"]


def test_shadowing(run):
    stdout, _, _ = run('var a = "outer"; { var a = "inner"; print a; } print a;')
    assert stdout.splitlines() == ["inner", "outer"]


def test_renaming_locals_does_not_change_output(run):
    template = """
    fun outer({p}) {{
        var {v} = {p} * 2;
        fun inner() {{ return {v} + 1; }}
        return inner;
    }}
    print outer(5)();
    """
    original, _, _ = run(template.format(p="n", v="x"))
    renamed, _, _ = run(template.format(p="fresh_1", v="fresh_2"))
    assert original == renamed == "11\n"


def test_super_call_mutates_subclass_instance(run):
    src = """
    class A {
        set() { this.value = "from A"; }
    }
    class B < A {
        set() { super.set(); this.other = "from B"; }
    }
    var b = B();
    b.set();
    print b.value;
    print b.other;
    """
    stdout, _, _ = run(src)
    assert stdout.splitlines() == ["from A", "from B"]


def test_super_binds_current_instance_in_deep_chain(run):
    src = """
    class A { name() { return "A:" + this.tag; } }
    class B < A { name() { return "B/" + super.name(); } }
    class C < B { init() { this.tag = "c"; } }
    print C().name();
    """
    stdout, _, _ = run(src)
    assert stdout.splitlines() == ["B/A:c"]


def test_initializer_returns_instance(run):
    src = """
    class Foo {
        init() { this.x = 1; return; }
    }
    var foo = Foo();
    print foo.init();
    print foo.x;
    """
    stdout, _, _ = run(src)
    assert stdout.splitlines() == ["Foo instance", "1"]


def test_fields_shadow_methods(run):
    src = """
    class Foo { m() { return "method"; } }
    var foo = Foo();
    print foo.m();
    foo.m = "field";
    print foo.m;
    """
    stdout, _, _ = run(src)
    assert stdout.splitlines() == ["method", "field"]


def test_return_unwinds_through_blocks_and_loops(run):
    src = """
    var a = "global";
    fun f() {
        var a = "local";
        while (true) {
            for (var i = 0; i < 10; i = i + 1) {
                if (i == 2) { return i; }
            }
        }
    }
    print f();
    print a;
    """
    stdout, _, lox = run(src)
    assert stdout.splitlines() == ["2", "global"]
    assert lox.interpreter.ctx is lox.interpreter.globals


def test_var_redeclaration_in_same_frame_overwrites(run):
    stdout, stderr, _ = run("var a = 1; var a; print a;")
    assert stdout.splitlines() == ["nil"]
    assert stderr == ""


@pytest.mark.parametrize(
    "src, message, line",
    [
        ("print -nil;", "Operand must be a number.", 1),
        ('print 1 - "a";', "Operands must be numbers.", 1),
        ("print nil + nil;", "Operands must be two numbers or two strings.", 1),
        ("print 1 < true;", "Operands must be numbers.", 1),
        ("print x;", "Undefined variable 'x'.", 1),
        ("\nx = 1;", "Undefined variable 'x'.", 2),
        ('"str"();', "Can only call functions and classes.", 1),
        ("fun f() {}\nf(1);", "Expected 0 arguments but got 1.", 2),
        ("class A { init(a, b) {} }\nA(1);", "Expected 2 arguments but got 1.", 2),
        ('"str".len;', "Only instances have properties.", 1),
        ('"str".len = 1;', "Only instances have fields.", 1),
        ("class A {}\nA().x;", "Undefined property 'x'.", 2),
        ("var A = 1; class B < A {}", "Superclass must be a class.", 1),
        ("class A {} class B < A { m() { super.m(); } }\nB().m();", "Undefined property 'm'.", 1),
    ],
)
def test_runtime_errors(run, src, message, line):
    stdout, stderr, lox = run(src)
    assert stderr == f"{message}\n[line {line}]\n"
    assert lox.diagnostics.had_runtime_error
    assert not lox.diagnostics.had_error


def test_runtime_error_halts_execution(run):
    stdout, stderr, _ = run('print "a"; print nil - 1; print "b";')
    assert stdout.splitlines() == ["a"]
    assert stderr.startswith("Operands must be numbers.")


def test_stack_overflow_is_runtime_error(run):
    stdout, stderr, lox = run("fun f() { f(); }\nf();")
    assert stderr == "Stack overflow.\n[line 1]\n"
    assert lox.interpreter.depth == 0
    assert lox.interpreter.ctx is lox.interpreter.globals


def test_equality_semantics(run):
    src = """
    print nil == nil;
    print nil == false;
    print 0 == false;
    print "a" == "a";
    fun f() {}
    print f == f;
    class A {}
    print A() == A();
    """
    stdout, _, _ = run(src)
    assert stdout.splitlines() == ["true", "false", "false", "true", "true", "false"]


def test_clock_builtin(run):
    stdout, stderr, _ = run("var t = clock(); print t > 0; print clock;")
    assert stdout.splitlines() == ["true", "<native fn>"]
    assert stderr == ""


def test_division_by_zero(run):
    stdout, _, _ = run("print 1 / 0; print -1 / 0; print 0 / 0;")
    assert stdout.splitlines() == ["Infinity", "-Infinity", "NaN"]


def test_runtime_objects():
    ctx = Ctx.globals()
    assert isinstance(ctx["clock"], NativeFunction)
    assert ctx["clock"].arity() == 0

    base = LoxClass("Base")
    derived = LoxClass("Derived", base)
    assert derived.get_method("missing") is None
    assert derived.arity() == 0

    instance = LoxInstance(derived)
    instance.set("x", 1.0)
    assert instance.get("x") == 1.0
    with pytest.raises(KeyError):
        instance.get("y")
    assert str(instance) == "Derived instance"


def test_ctx_ancestors():
    root = Ctx.globals()
    child = root.push({"a": 1.0})
    grandchild = child.push()
    assert grandchild.ancestor(2) is root
    assert grandchild.get_at(1, "a") == 1.0
    grandchild.assign_at(1, "a", 2.0)
    assert child["a"] == 2.0
    with pytest.raises(KeyError):
        grandchild.get_at(0, "a")
    assert "clock" in root.pretty()


def test_bound_method_is_lox_function(run):
    _, _, lox = run("class A { m() {} } var m = A().m;")
    bound = lox.interpreter.globals["m"]
    assert isinstance(bound, LoxFunction)
    assert isinstance(bound.closure["this"], LoxInstance)
