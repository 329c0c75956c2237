"""
Interpretador que percorre a árvore sintática.

Comandos são executados pelo efeito e expressões são avaliadas em pós-ordem.
O retorno de funções não usa exceções: cada comando devolve None quando
termina normalmente ou um `Returning` carregando o valor de retorno, que é
propagado pelos blocos e laços até a chamada de função mais próxima.
"""

import sys
from dataclasses import dataclass
from typing import Optional, TextIO

from . import runtime as op
from .ast import *
from .ctx import Ctx
from .errors import Diagnostics, LoxError
from .runtime import LoxCallable, LoxClass, LoxFunction, LoxInstance, OperandError, show, truthy
from .tokens import Token, TokenType

DEFAULT_MAX_DEPTH = 200

BINARY_OPS = {
    # Operações matemáticas básicas
    TokenType.PLUS: op.add,
    TokenType.MINUS: op.sub,
    TokenType.STAR: op.mul,
    TokenType.SLASH: op.truediv,
    # Comparações
    TokenType.GREATER: op.gt,
    TokenType.GREATER_EQUAL: op.ge,
    TokenType.LESS: op.lt,
    TokenType.LESS_EQUAL: op.le,
    TokenType.EQUAL_EQUAL: op.eq,
    TokenType.BANG_EQUAL: op.ne,
}

UNARY_OPS = {
    TokenType.MINUS: op.neg,
    TokenType.BANG: op.not_,
}


@dataclass(frozen=True)
class Returning:
    """
    Resultado de um comando interrompido por `return`.
    """

    value: "Value"


class Interpreter:
    def __init__(
        self,
        diagnostics: Optional[Diagnostics] = None,
        stdout: Optional[TextIO] = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.stdout = stdout
        self.max_depth = max_depth
        self.depth = 0
        self.globals = Ctx.globals()
        self.ctx = self.globals
        self.locals: dict[int, int] = {}

        # Cada chamada Lox ocupa vários quadros da pilha do Python
        sys.setrecursionlimit(max(sys.getrecursionlimit(), 50 * max_depth))

    def resolve(self, locals: dict[int, int]):
        """
        Registra as distâncias calculadas pelo resolvedor.
        """
        self.locals.update(locals)

    def interpret(self, stmts: list[Stmt]):
        """
        Executa os comandos em ordem. O primeiro erro de execução é reportado
        e interrompe o programa.
        """
        try:
            for stmt in stmts:
                self.execute(stmt)
        except LoxError as error:
            self.diagnostics.runtime_error(error)

    #
    # COMANDOS
    #
    def execute(self, stmt: Stmt) -> Optional[Returning]:
        match stmt:
            case Expression(expr):
                self.evaluate(expr)
            case Print(expr):
                value = self.evaluate(expr)
                print(show(value), file=self.stdout or sys.stdout)
            case VarDef(name, value):
                value = None if value is None else self.evaluate(value)
                self.ctx.var_def(name.lexeme, value)
            case Block(stmts):
                return self.execute_block(stmts, self.ctx.push())
            case If(cond, then, orelse):
                if truthy(self.evaluate(cond)):
                    return self.execute(then)
                if orelse is not None:
                    return self.execute(orelse)
            case While(cond, body):
                while truthy(self.evaluate(cond)):
                    result = self.execute(body)
                    if result is not None:
                        return result
            case Function(name):
                function = LoxFunction(stmt, self.ctx)
                self.ctx.var_def(name.lexeme, function)
            case Return(_, expr):
                value = None if expr is None else self.evaluate(expr)
                return Returning(value)
            case Class():
                self.execute_class(stmt)
            case _:
                raise TypeError(f"unexpected statement: {stmt!r}")
        return None

    def execute_block(self, stmts: list[Stmt], ctx: Ctx) -> Optional[Returning]:
        """
        Executa os comandos no contexto dado e sempre restaura o contexto
        anterior, inclusive quando um `return` atravessa o bloco.
        """
        previous = self.ctx
        self.ctx = ctx
        try:
            for stmt in stmts:
                result = self.execute(stmt)
                if result is not None:
                    return result
            return None
        finally:
            self.ctx = previous

    def call_function(self, body: list[Stmt], ctx: Ctx) -> "Value":
        result = self.execute_block(body, ctx)
        return None if result is None else result.value

    def execute_class(self, stmt: Class):
        superclass = None
        if stmt.superclass is not None:
            superclass = self.evaluate(stmt.superclass)
            if not isinstance(superclass, LoxClass):
                raise LoxError(stmt.superclass.name, "Superclass must be a class.")

        # O nome é declarado antes para que os métodos possam referenciá-lo
        self.ctx.var_def(stmt.name.lexeme, None)

        ctx = self.ctx
        if superclass is not None:
            ctx = ctx.push({"super": superclass})

        methods = {}
        for method in stmt.methods:
            is_init = method.name.lexeme == "init"
            methods[method.name.lexeme] = LoxFunction(method, ctx, is_init)

        lox_class = LoxClass(stmt.name.lexeme, superclass, methods)
        self.ctx[stmt.name.lexeme] = lox_class

    #
    # EXPRESSÕES
    #
    def evaluate(self, expr: Expr) -> "Value":
        match expr:
            case Literal(value):
                return value
            case Grouping(inner):
                return self.evaluate(inner)
            case UnaryOp(operator, inner):
                value = self.evaluate(inner)
                return self.apply(operator, UNARY_OPS[operator.type], value)
            case BinOp(left, operator, right):
                left_value = self.evaluate(left)
                right_value = self.evaluate(right)
                return self.apply(operator, BINARY_OPS[operator.type], left_value, right_value)
            case Logical(left, operator, right):
                left_value = self.evaluate(left)
                if operator.type == TokenType.OR:
                    if truthy(left_value):
                        return left_value
                elif not truthy(left_value):
                    return left_value
                return self.evaluate(right)
            case Var(name) | This(name):
                return self.lookup_variable(name, expr)
            case Assign(name, value):
                value = self.evaluate(value)
                self.assign_variable(name, expr, value)
                return value
            case Call(callee, paren, params):
                function = self.evaluate(callee)
                args = [self.evaluate(param) for param in params]
                return self.call(function, args, paren)
            case Getattr(obj, name):
                target = self.evaluate(obj)
                if not isinstance(target, LoxInstance):
                    raise LoxError(name, "Only instances have properties.")
                try:
                    return target.get(name.lexeme)
                except KeyError:
                    raise LoxError(name, f"Undefined property '{name.lexeme}'.") from None
            case Setattr(obj, name, value):
                target = self.evaluate(obj)
                if not isinstance(target, LoxInstance):
                    raise LoxError(name, "Only instances have fields.")
                value = self.evaluate(value)
                target.set(name.lexeme, value)
                return value
            case Super(_, method):
                return self.evaluate_super(expr, method)
            case _:
                raise TypeError(f"unexpected expression: {expr!r}")

    def apply(self, operator: Token, function, *values: "Value") -> "Value":
        try:
            return function(*values)
        except OperandError as error:
            raise LoxError(operator, str(error)) from None

    def call(self, function: "Value", args: list["Value"], paren: Token) -> "Value":
        if not isinstance(function, LoxCallable):
            raise LoxError(paren, "Can only call functions and classes.")
        if len(args) != function.arity():
            raise LoxError(paren, f"Expected {function.arity()} arguments but got {len(args)}.")
        if self.depth >= self.max_depth:
            raise LoxError(paren, "Stack overflow.")

        self.depth += 1
        try:
            return function.call(self, args)
        except RecursionError:
            raise LoxError(paren, "Stack overflow.") from None
        finally:
            self.depth -= 1

    def evaluate_super(self, expr: Super, method: Token) -> "Value":
        distance = self.locals[expr.id]
        superclass = self.ctx.get_at(distance, "super")
        # `this` fica sempre um escopo abaixo de `super`
        instance = self.ctx.get_at(distance - 1, "this")

        function = superclass.get_method(method.lexeme)
        if function is None:
            raise LoxError(method, f"Undefined property '{method.lexeme}'.")
        return function.bind(instance)

    def lookup_variable(self, name: Token, expr: Expr) -> "Value":
        distance = self.locals.get(expr.id)
        try:
            if distance is not None:
                return self.ctx.get_at(distance, name.lexeme)
            return self.globals[name.lexeme]
        except KeyError:
            raise LoxError(name, f"Undefined variable '{name.lexeme}'.") from None

    def assign_variable(self, name: Token, expr: Expr, value: "Value"):
        distance = self.locals.get(expr.id)
        try:
            if distance is not None:
                self.ctx.assign_at(distance, name.lexeme, value)
            else:
                self.globals[name.lexeme] = value
        except KeyError:
            raise LoxError(name, f"Undefined variable '{name.lexeme}'.") from None
