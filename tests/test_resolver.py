"""
Testes da resolução estática de variáveis.
"""
import io

from lox.ast import *
from lox.errors import Diagnostics
from lox.parser import parse
from lox.resolver import Resolver, resolve


def resolve_errors(src: str) -> list[str]:
    stream = io.StringIO()
    diagnostics = Diagnostics(stream)
    resolve(parse(src), diagnostics)
    return stream.getvalue().splitlines()


def find(stmts, cls, lexeme):
    for stmt in stmts:
        for node in stmt.walk():
            if isinstance(node, cls) and getattr(node, "name", None) is not None:
                if node.name.lexeme == lexeme:
                    yield node


def test_globals_are_not_in_table():
    stmts = parse("var a = 1; print a;")
    assert resolve(stmts) == {}


def test_local_distances():
    src = """
    {
        var a = 1;
        {
            var b = 2;
            fun f() {
                print a + b;
            }
        }
    }
    """
    stmts = parse(src)
    table = resolve(stmts)
    [a] = find(stmts, Var, "a")
    [b] = find(stmts, Var, "b")
    # escopo da função (0) -> bloco interno (1) -> bloco externo (2)
    assert table[a.id] == 2
    assert table[b.id] == 1


def test_assignment_is_resolved():
    stmts = parse("{ var a; { a = 1; } }")
    table = resolve(stmts)
    [assign] = find(stmts, Assign, "a")
    assert table[assign.id] == 1


def test_this_and_super_distances():
    src = """
    class A { m() {} }
    class B < A {
        m() { super.m(); return this; }
    }
    """
    stmts = parse(src)
    table = resolve(stmts)
    method = stmts[1].methods[0]
    super_expr = method.body[0].expr.callee
    this_expr = method.body[1].expr
    assert table[super_expr.id] == 2
    assert table[this_expr.id] == 1


def test_resolution_is_idempotent():
    src = "fun f(x) { var y = x; { var z = y; return z; } } print f(1);"
    stmts = parse(src)
    first = Resolver().resolve(stmts)
    second = Resolver().resolve(stmts)
    assert first == second
    assert first


def test_static_errors():
    assert resolve_errors("{ var a = a; }") == [
        "[line 1] Error at 'a': Can't read local variable in its own initializer."
    ]
    assert resolve_errors("{ var a; var a; }") == [
        "[line 1] Error at 'a': Already a variable with this name in this scope."
    ]
    assert resolve_errors("return 1;") == [
        "[line 1] Error at 'return': Can't return from top-level code."
    ]
    assert resolve_errors("class A { init() { return 1; } }") == [
        "[line 1] Error at 'return': Can't return a value from an initializer."
    ]
    assert resolve_errors("print this;") == [
        "[line 1] Error at 'this': Can't use 'this' outside of a class."
    ]
    assert resolve_errors("fun f() { super.m(); }") == [
        "[line 1] Error at 'super': Can't use 'super' outside of a class."
    ]
    assert resolve_errors("class A { m() { super.m(); } }") == [
        "[line 1] Error at 'super': Can't use 'super' in a class with no superclass."
    ]
    assert resolve_errors("class A < A {}") == [
        "[line 1] Error at 'A': A class can't inherit from itself."
    ]


def test_errors_do_not_stop_resolution():
    errors = resolve_errors("return 1;\n{ var a; var a; }\nprint this;")
    assert len(errors) == 3


def test_valid_programs_have_no_errors():
    src = """
    var a = a;
    fun f() { return 1; }
    class A { init() { return; } m() { return this; } }
    class B < A { m() { return super.m(); } }
    """
    assert resolve_errors(src) == []
