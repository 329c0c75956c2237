"""
Impressão da árvore sintática em notação parentizada, útil para depuração.

Ex.: -123 * (45.67) → (* (- 123) (group 45.67))
"""

from typing import Optional

from .ast import *
from .node import Node
from .runtime import show


class AstPrinter:
    def print(self, node: Optional[Node]) -> str:
        match node:
            case None:
                return "<error>"
            case Expr():
                return self.expr(node)
            case Stmt():
                return self.stmt(node)
        raise TypeError(f"unexpected node: {node!r}")

    def expr(self, expr: Expr) -> str:
        match expr:
            case Literal(value):
                return value if isinstance(value, str) else show(value)
            case Grouping(inner):
                return self.parenthesize("group", inner)
            case UnaryOp(op, inner):
                return self.parenthesize(op.lexeme, inner)
            case BinOp(left, op, right) | Logical(left, op, right):
                return self.parenthesize(op.lexeme, left, right)
            case Var(name):
                return name.lexeme
            case Assign(name, value):
                return self.parenthesize(f"= {name.lexeme}", value)
            case Call(callee, _, params):
                return self.parenthesize("call", callee, *params)
            case Getattr(obj, name):
                return f"(. {self.expr(obj)} {name.lexeme})"
            case Setattr(obj, name, value):
                return f"(.= {self.expr(obj)} {name.lexeme} {self.expr(value)})"
            case This():
                return "this"
            case Super(_, method):
                return f"(super {method.lexeme})"
        raise TypeError(f"unexpected expression: {expr!r}")

    def stmt(self, stmt: Stmt) -> str:
        match stmt:
            case Expression(expr):
                return self.parenthesize(";", expr)
            case Print(expr):
                return self.parenthesize("print", expr)
            case VarDef(name, None):
                return f"(var {name.lexeme})"
            case VarDef(name, value):
                return self.parenthesize(f"var {name.lexeme}", value)
            case Block(stmts):
                return self.parenthesize("block", *stmts)
            case If(cond, then, None):
                return self.parenthesize("if", cond, then)
            case If(cond, then, orelse):
                return self.parenthesize("if", cond, then, orelse)
            case While(cond, body):
                return self.parenthesize("while", cond, body)
            case Function(name, params, body):
                names = " ".join(param.lexeme for param in params)
                return self.parenthesize(f"fun {name.lexeme} ({names})", *body)
            case Return(_, None):
                return "(return)"
            case Return(_, expr):
                return self.parenthesize("return", expr)
            case Class(name, None, methods):
                return self.parenthesize(f"class {name.lexeme}", *methods)
            case Class(name, superclass, methods):
                header = f"class {name.lexeme} < {superclass.name.lexeme}"
                return self.parenthesize(header, *methods)
        raise TypeError(f"unexpected statement: {stmt!r}")

    def parenthesize(self, name: str, *nodes: Optional[Node]) -> str:
        parts = [name, *(self.print(node) for node in nodes)]
        return f"({' '.join(parts)})"


def pretty(node: Optional[Node]) -> str:
    return AstPrinter().print(node)
