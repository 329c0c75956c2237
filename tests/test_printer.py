"""
Testes da impressão parentizada da árvore.
"""
from lox.ast import *
from lox.parser import parse
from lox.printer import AstPrinter, pretty
from lox.tokens import Token, TokenType


def test_expression_from_tokens():
    expr = BinOp(
        UnaryOp(Token(TokenType.MINUS, "-", None, 1), Literal(123.0)),
        Token(TokenType.STAR, "*", None, 1),
        Grouping(Literal(45.67)),
    )
    assert AstPrinter().print(expr) == "(* (- 123) (group 45.67))"


def test_literals():
    [stmt] = parse('print nil == "nil" or true;')
    assert pretty(stmt) == "(print (or (== nil nil) true))"


def test_properties_and_calls():
    [stmt] = parse("a.b = c.d(1, 2);")
    assert pretty(stmt) == "(; (.= a b (call (. c d) 1 2)))"


def test_statements():
    src = """
    var x;
    var y = 1;
    if (x) print x; else { x = 2; }
    while (y < 3) y = y + 1;
    fun f(a, b) { return a; }
    class B < A { m() { return super.m(); } n() { return this; } }
    """
    assert [pretty(stmt) for stmt in parse(src)] == [
        "(var x)",
        "(var y 1)",
        "(if x (print x) (block (; (= x 2))))",
        "(while (< y 3) (; (= y (+ y 1))))",
        "(fun f (a b) (return a))",
        "(class B < A (fun m () (return (call (super m)))) (fun n () (return this)))",
    ]


def test_failed_statement_placeholder():
    assert pretty(None) == "<error>"
