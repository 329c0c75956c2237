"""
Resolução estática de variáveis.

Percorre a árvore uma única vez, sem avaliá-la, e calcula para cada referência
a variável local quantos escopos separam o uso da declaração. O resultado é uma
tabela id do nó -> distância. Referências ausentes da tabela são globais.
"""

from enum import Enum, auto
from typing import Optional

from .ast import *
from .errors import Diagnostics
from .tokens import Token


class FunctionType(Enum):
    NONE = auto()
    FUNCTION = auto()
    METHOD = auto()
    INITIALIZER = auto()


class ClassType(Enum):
    NONE = auto()
    CLASS = auto()
    SUBCLASS = auto()


class Resolver:
    """
    Mantém uma pilha de escopos locais. Cada escopo mapeia o nome para um
    booleano: False enquanto a variável foi declarada mas ainda não definida,
    True depois que o inicializador foi resolvido.
    """

    def __init__(self, diagnostics: Optional[Diagnostics] = None):
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.scopes: list[dict[str, bool]] = []
        self.locals: dict[int, int] = {}
        self.current_function = FunctionType.NONE
        self.current_class = ClassType.NONE

    def resolve(self, stmts: list[Optional[Stmt]]) -> dict[int, int]:
        for stmt in stmts:
            self.resolve_stmt(stmt)
        return self.locals

    def resolve_stmt(self, stmt: Optional[Stmt]):
        match stmt:
            case None:
                pass
            case Block(stmts):
                self.begin_scope()
                self.resolve(stmts)
                self.end_scope()
            case Class():
                self.resolve_class(stmt)
            case Expression(expr) | Print(expr):
                self.resolve_expr(expr)
            case Function():
                self.declare(stmt.name)
                self.define(stmt.name)
                self.resolve_function(stmt, FunctionType.FUNCTION)
            case If(cond, then, orelse):
                self.resolve_expr(cond)
                self.resolve_stmt(then)
                self.resolve_stmt(orelse)
            case Return(keyword, expr):
                if self.current_function == FunctionType.NONE:
                    self.diagnostics.token_error(keyword, "Can't return from top-level code.")
                if expr is not None:
                    if self.current_function == FunctionType.INITIALIZER:
                        self.diagnostics.token_error(
                            keyword, "Can't return a value from an initializer."
                        )
                    self.resolve_expr(expr)
            case VarDef(name, value):
                self.declare(name)
                if value is not None:
                    self.resolve_expr(value)
                self.define(name)
            case While(cond, body):
                self.resolve_expr(cond)
                self.resolve_stmt(body)
            case _:
                raise TypeError(f"unexpected statement: {stmt!r}")

    def resolve_expr(self, expr: Expr):
        match expr:
            case Literal():
                pass
            case Grouping(inner) | UnaryOp(_, inner):
                self.resolve_expr(inner)
            case BinOp(left, _, right) | Logical(left, _, right):
                self.resolve_expr(left)
                self.resolve_expr(right)
            case Var(name):
                if self.scopes and self.scopes[-1].get(name.lexeme) is False:
                    self.diagnostics.token_error(
                        name, "Can't read local variable in its own initializer."
                    )
                self.resolve_local(expr, name)
            case Assign(name, value):
                self.resolve_expr(value)
                self.resolve_local(expr, name)
            case Call(callee, _, params):
                self.resolve_expr(callee)
                for param in params:
                    self.resolve_expr(param)
            case Getattr(obj, _):
                self.resolve_expr(obj)
            case Setattr(obj, _, value):
                self.resolve_expr(value)
                self.resolve_expr(obj)
            case This(keyword):
                if self.current_class == ClassType.NONE:
                    self.diagnostics.token_error(keyword, "Can't use 'this' outside of a class.")
                    return
                self.resolve_local(expr, keyword)
            case Super(keyword, _):
                if self.current_class == ClassType.NONE:
                    self.diagnostics.token_error(keyword, "Can't use 'super' outside of a class.")
                elif self.current_class != ClassType.SUBCLASS:
                    self.diagnostics.token_error(
                        keyword, "Can't use 'super' in a class with no superclass."
                    )
                self.resolve_local(expr, keyword)
            case _:
                raise TypeError(f"unexpected expression: {expr!r}")

    def resolve_class(self, stmt: Class):
        enclosing_class = self.current_class
        self.current_class = ClassType.CLASS

        self.declare(stmt.name)
        self.define(stmt.name)

        if stmt.superclass is not None:
            if stmt.superclass.name.lexeme == stmt.name.lexeme:
                self.diagnostics.token_error(
                    stmt.superclass.name, "A class can't inherit from itself."
                )
            self.current_class = ClassType.SUBCLASS
            self.resolve_expr(stmt.superclass)

            self.begin_scope()
            self.scopes[-1]["super"] = True

        self.begin_scope()
        self.scopes[-1]["this"] = True

        for method in stmt.methods:
            kind = FunctionType.METHOD
            if method.name.lexeme == "init":
                kind = FunctionType.INITIALIZER
            self.resolve_function(method, kind)

        self.end_scope()
        if stmt.superclass is not None:
            self.end_scope()

        self.current_class = enclosing_class

    def resolve_function(self, function: Function, kind: FunctionType):
        enclosing_function = self.current_function
        self.current_function = kind

        self.begin_scope()
        for param in function.params:
            self.declare(param)
            self.define(param)
        self.resolve(function.body)
        self.end_scope()

        self.current_function = enclosing_function

    def resolve_local(self, expr: Expr, name: Token):
        for distance, scope in enumerate(reversed(self.scopes)):
            if name.lexeme in scope:
                self.locals[expr.id] = distance
                return

    def begin_scope(self):
        self.scopes.append({})

    def end_scope(self):
        self.scopes.pop()

    def declare(self, name: Token):
        if not self.scopes:
            return
        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.diagnostics.token_error(name, "Already a variable with this name in this scope.")
        scope[name.lexeme] = False

    def define(self, name: Token):
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme] = True


def resolve(stmts: list[Optional[Stmt]], diagnostics: Optional[Diagnostics] = None) -> dict[int, int]:
    """
    Resolve o programa e retorna a tabela de distâncias.
    """
    return Resolver(diagnostics).resolve(stmts)
