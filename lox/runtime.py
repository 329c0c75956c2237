import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Optional

from .ctx import Ctx

if TYPE_CHECKING:
    from .ast import Function, Value
    from .interpreter import Interpreter

__all__ = [
    "add",
    "eq",
    "ge",
    "gt",
    "le",
    "lt",
    "mul",
    "ne",
    "neg",
    "not_",
    "show",
    "sub",
    "truthy",
    "truediv",
    "LoxCallable",
    "LoxClass",
    "LoxFunction",
    "LoxInstance",
    "NativeFunction",
    "OperandError",
]


class OperandError(TypeError):
    """
    Operando com tipo inválido para um operador. O interpretador converte
    em LoxError usando o token do operador.
    """


class LoxCallable(ABC):
    """
    Classe base para todos os valores que podem ser chamados.
    """

    @abstractmethod
    def arity(self) -> int:
        ...

    @abstractmethod
    def call(self, interpreter: "Interpreter", args: list["Value"]) -> "Value":
        ...


@dataclass(eq=False)
class NativeFunction(LoxCallable):
    """
    Função implementada em Python e exposta no escopo global.
    """

    name: str
    n_args: int
    impl: Callable[..., "Value"]

    def arity(self) -> int:
        return self.n_args

    def call(self, interpreter: "Interpreter", args: list["Value"]) -> "Value":
        return self.impl(*args)

    def __str__(self):
        return "<native fn>"


@dataclass(eq=False)
class LoxFunction(LoxCallable):
    """
    Representa uma função lox em tempo de execução: a declaração e o
    contexto em que foi declarada (closure).
    """

    declaration: "Function"
    closure: Ctx
    is_initializer: bool = False

    @property
    def name(self) -> str:
        return self.declaration.name.lexeme

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter: "Interpreter", args: list["Value"]) -> "Value":
        # Associa cada parâmetro ao argumento correspondente num novo escopo
        # cujo pai é a closure, e não o contexto de quem chamou.
        names = (param.lexeme for param in self.declaration.params)
        ctx = self.closure.push(dict(zip(names, args)))

        value = interpreter.call_function(self.declaration.body, ctx)
        if self.is_initializer:
            return self.closure.get_at(0, "this")
        return value

    def bind(self, instance: "LoxInstance") -> "LoxFunction":
        """
        Cria uma nova LoxFunction com 'this' ligado ao objeto especificado.
        """
        ctx = self.closure.push({"this": instance})
        return LoxFunction(self.declaration, ctx, self.is_initializer)

    def __str__(self):
        return f"<fn {self.name}>"


@dataclass(eq=False)
class LoxClass(LoxCallable):
    """
    Classe para representar classes Lox.
    """

    name: str
    base: Optional["LoxClass"] = None
    methods: dict[str, LoxFunction] = field(default_factory=dict)

    def __str__(self):
        return self.name

    def arity(self) -> int:
        init = self.get_method("init")
        return 0 if init is None else init.arity()

    def call(self, interpreter: "Interpreter", args: list["Value"]) -> "Value":
        # Criar uma nova instância e chamar o init, se existir
        instance = LoxInstance(self)
        init = self.get_method("init")
        if init is not None:
            init.bind(instance).call(interpreter, args)
        return instance

    def get_method(self, name: str) -> Optional[LoxFunction]:
        """
        Busca um método na classe atual ou nas bases.
        """
        if name in self.methods:
            return self.methods[name]
        if self.base is not None:
            return self.base.get_method(name)
        return None


class LoxInstance:
    """
    Classe base para todos os objetos Lox.
    """

    def __init__(self, lox_class: LoxClass):
        self.lox_class = lox_class
        self.fields: dict[str, "Value"] = {}

    def __str__(self):
        return f"{self.lox_class.name} instance"

    def get(self, name: str) -> "Value":
        """
        Obtém um campo ou método da instância.

        Lança KeyError se não existir nenhum dos dois.
        """
        if name in self.fields:
            return self.fields[name]

        method = self.lox_class.get_method(name)
        if method is not None:
            return method.bind(self)
        raise KeyError(name)

    def set(self, name: str, value: "Value"):
        """
        Define um campo da instância.
        """
        self.fields[name] = value


def show(value: "Value") -> str:
    """
    Converte valor lox para string.
    """
    if value is None:
        return "nil"
    elif value is True:
        return "true"
    elif value is False:
        return "false"
    elif isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        # Remove .0 se for um número inteiro
        text = repr(value)
        if text.endswith(".0"):
            text = text[:-2]
        return text
    else:
        return str(value)


def truthy(value: "Value") -> bool:
    """
    Converte valor lox para booleano segundo a semântica do lox.
    """
    if value is None or value is False:
        return False
    return True


def is_number(value: "Value") -> bool:
    # bool não é float em Python, então não é preciso tratá-lo à parte
    return isinstance(value, float)


def check_numbers(left: "Value", right: "Value"):
    if not (is_number(left) and is_number(right)):
        raise OperandError("Operands must be numbers.")


# Operações matemáticas para Lox
def add(left: "Value", right: "Value") -> "Value":
    """Soma em Lox - aceita números ou strings"""
    if is_number(left) and is_number(right):
        return left + right
    if isinstance(left, str) and isinstance(right, str):
        return left + right
    raise OperandError("Operands must be two numbers or two strings.")


def sub(left: "Value", right: "Value") -> "Value":
    """Subtração em Lox - aceita apenas números"""
    check_numbers(left, right)
    return left - right


def mul(left: "Value", right: "Value") -> "Value":
    """Multiplicação em Lox - aceita apenas números"""
    check_numbers(left, right)
    return left * right


def truediv(left: "Value", right: "Value") -> "Value":
    """Divisão em Lox - segue o padrão IEEE 754 na divisão por zero"""
    check_numbers(left, right)
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def neg(value: "Value") -> "Value":
    """Negação em Lox - aceita apenas números"""
    if not is_number(value):
        raise OperandError("Operand must be a number.")
    return -value


# Operações de comparação para Lox
def gt(left: "Value", right: "Value") -> bool:
    check_numbers(left, right)
    return left > right


def ge(left: "Value", right: "Value") -> bool:
    check_numbers(left, right)
    return left >= right


def lt(left: "Value", right: "Value") -> bool:
    check_numbers(left, right)
    return left < right


def le(left: "Value", right: "Value") -> bool:
    check_numbers(left, right)
    return left <= right


def eq(left: "Value", right: "Value") -> bool:
    """Igualdade estrita em Lox - não aceita conversões de tipo"""
    # Em Lox, valores de tipos diferentes são sempre diferentes
    if type(left) != type(right):
        return False
    if isinstance(left, (LoxCallable, LoxInstance)):
        return left is right
    return left == right


def ne(left: "Value", right: "Value") -> bool:
    """Desigualdade estrita em Lox"""
    return not eq(left, right)


def not_(value: "Value") -> bool:
    """Negação lógica em Lox"""
    return not truthy(value)
