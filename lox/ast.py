from abc import ABC
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Union

# Declaramos nossa classe base num módulo separado. A classe Node atribui um
# identificador único a cada nó e permite navegar pelos filhos.
from .node import Node
from .tokens import Token

if TYPE_CHECKING:
    from .runtime import LoxCallable, LoxInstance


#
# TIPOS BÁSICOS
#

# Tipos de valores que podem aparecer durante a execução do programa
Value = Union[bool, str, float, None, "LoxCallable", "LoxInstance"]


class Expr(Node, ABC):
    """
    Classe base para expressões.

    Expressões são nós que podem ser avaliados para produzir um valor.
    Também podem ser atribuídos a variáveis, passados como argumentos para
    funções, etc.
    """


class Stmt(Node, ABC):
    """
    Classe base para comandos.

    Comandos são associdos a construtos sintáticos que alteram o fluxo de
    execução do código ou declaram elementos como classes, funções, etc.
    """


#
# EXPRESSÕES
#
@dataclass
class Literal(Expr):
    """
    Representa valores literais no código, ex.: strings, booleanos,
    números, etc.

    Ex.: "Hello, world!", 42, 3.14, true, nil
    """

    value: "Value"


@dataclass
class Grouping(Expr):
    """
    Expressão entre parênteses.

    Ex.: (x + 1)
    """

    expr: Expr


@dataclass
class UnaryOp(Expr):
    """
    Uma operação prefixa com um operando.

    Ex.: -x, !x
    """

    op: Token
    expr: Expr


@dataclass
class BinOp(Expr):
    """
    Uma operação infixa com dois operandos.

    Ex.: x + y, 2 * x, 3.14 > 3
    """

    left: Expr
    op: Token
    right: Expr


@dataclass
class Logical(Expr):
    """
    Operação lógica com curto-circuito.

    Ex.: x and y, x or y
    """

    left: Expr
    op: Token
    right: Expr


@dataclass
class Var(Expr):
    """
    Uma variável no código

    Ex.: x, y, z
    """

    name: Token


@dataclass
class Assign(Expr):
    """
    Atribuição de variável.

    Ex.: x = 42
    """

    name: Token
    value: Expr


@dataclass
class Call(Expr):
    """
    Uma chamada de função.

    Ex.: fat(42)
    """

    callee: Expr
    paren: Token
    params: list[Expr]


@dataclass
class Getattr(Expr):
    """
    Acesso a atributo de um objeto.

    Ex.: x.y
    """

    obj: Expr
    name: Token


@dataclass
class Setattr(Expr):
    """
    Atribuição de atributo de um objeto.

    Ex.: x.y = 42
    """

    obj: Expr
    name: Token
    value: Expr


@dataclass
class This(Expr):
    """
    Acesso ao `this`.

    Ex.: this
    """

    keyword: Token


@dataclass
class Super(Expr):
    """
    Acesso a método da superclasse.

    Ex.: super.x
    """

    keyword: Token
    method: Token


#
# COMANDOS
#
@dataclass
class Expression(Stmt):
    """
    Representa uma expressão usada como comando.

    Ex.: f(x);
    """

    expr: Expr


@dataclass
class Print(Stmt):
    """
    Representa uma instrução de impressão.

    Ex.: print "Hello, world!";
    """

    expr: Expr


@dataclass
class VarDef(Stmt):
    """
    Representa uma declaração de variável.

    Ex.: var x = 42;
    """

    name: Token
    value: Optional[Expr]


@dataclass
class Block(Stmt):
    """
    Representa bloco de comandos.

    Ex.: { var x = 42; print x;  }
    """

    stmts: list[Optional[Stmt]]


@dataclass
class If(Stmt):
    """
    Representa uma instrução condicional.

    Ex.: if (x > 0) { ... } else { ... }
    """

    cond: Expr
    then: Stmt
    orelse: Optional[Stmt] = None


@dataclass
class While(Stmt):
    """
    Representa um laço de repetição. O laço `for` é convertido em `while`
    pelo parser.

    Ex.: while (x > 0) { ... }
    """

    cond: Expr
    body: Stmt


@dataclass
class Function(Stmt):
    """
    Representa uma função ou método.

    Ex.: fun f(x, y) { ... }
    """

    name: Token
    params: list[Token]
    body: list[Optional[Stmt]]


@dataclass
class Return(Stmt):
    """
    Representa uma instrução de retorno.

    Ex.: return x;
    """

    keyword: Token
    expr: Optional[Expr]


@dataclass
class Class(Stmt):
    """
    Representa uma classe.

    Ex.: class B < A { ... }
    """

    name: Token
    superclass: Optional[Var]
    methods: list[Function]
