"""
Implementa o transformador da árvore sintática que converte entre as representações

    lark.Tree -> lox.transformer.Family

usado pelo gerador de código dos nós (lox.codegen). A árvore de entrada vem da
gramática em `nodes.lark`.
"""

from dataclasses import dataclass
from typing import Optional

from lark import Token, Transformer, v_args


@dataclass
class FieldSpec:
    """
    Campo de um nó.

    Ex.: Expr? value
    """

    type: str
    name: str
    quantifier: Optional[str] = None

    @property
    def annotation(self) -> str:
        if self.quantifier == "?":
            return f"Optional[{self.type}]"
        if self.quantifier == "*":
            return f"list[{self.type}]"
        return self.type


@dataclass
class NodeSpec:
    """
    Variante de uma família de nós.

    Ex.: Var : Token name
    """

    name: str
    fields: list[FieldSpec]


@dataclass
class Family:
    """
    Família de nós com uma classe base comum.

    Ex.: Expr { ... }
    """

    name: str
    nodes: list[NodeSpec]


@v_args(inline=True)
class NodeTransformer(Transformer):
    def start(self, *families: Family) -> list[Family]:
        return list(families)

    def family(self, name: str, *nodes: NodeSpec) -> Family:
        return Family(name, list(nodes))

    def node(self, name: str, *fields: FieldSpec) -> NodeSpec:
        return NodeSpec(name, list(fields))

    def field(self, type: str, quantifier: Optional[Token], name: str) -> FieldSpec:
        return FieldSpec(type, name, None if quantifier is None else str(quantifier))

    def NAME(self, token: Token) -> str:
        return str(token)
