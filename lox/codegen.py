"""
Gerador das definições dos nós da árvore sintática.

Lê uma descrição textual das famílias de nós e emite as classes
correspondentes como dataclasses. É uma ferramenta de desenvolvimento: nunca
é usada durante a interpretação.

    python -m lox.codegen -o nodes.py descricao.txt
"""

import argparse
import logging
import sys
from functools import lru_cache
from pathlib import Path
from typing import Optional

from lark import Lark

from .transformer import Family, NodeSpec, NodeTransformer

logger = logging.getLogger(__name__)

GRAMMAR_PATH = Path(__file__).parent / "nodes.lark"

# Descrição das famílias de nós usadas em lox.ast
DEFAULT_NODES = """
Expr {
    Literal  : Value value
    Grouping : Expr expr
    UnaryOp  : Token op, Expr expr
    BinOp    : Expr left, Token op, Expr right
    Logical  : Expr left, Token op, Expr right
    Var      : Token name
    Assign   : Token name, Expr value
    Call     : Expr callee, Token paren, Expr* params
    Getattr  : Expr obj, Token name
    Setattr  : Expr obj, Token name, Expr value
    This     : Token keyword
    Super    : Token keyword, Token method
}

Stmt {
    Expression : Expr expr
    Print      : Expr expr
    VarDef     : Token name, Expr? value
    Block      : Stmt* stmts
    If         : Expr cond, Stmt then, Stmt? orelse
    While      : Expr cond, Stmt body
    Function   : Token name, Token* params, Stmt* body
    Return     : Token keyword, Expr? expr
    Class      : Token name, Var? superclass, Function* methods
}
"""

HEADER = '''\
# Código gerado por lox.codegen. Não edite manualmente.
from __future__ import annotations

from abc import ABC
from dataclasses import dataclass
from typing import Optional

from .node import Node
from .tokens import Token
'''


@lru_cache
def grammar_parser() -> Lark:
    grammar = GRAMMAR_PATH.read_text(encoding="utf-8")
    return Lark(grammar, start="start", parser="lalr")


def parse_description(src: str) -> list[Family]:
    """
    Converte a descrição textual em uma lista de famílias de nós.
    """
    tree = grammar_parser().parse(src)
    return NodeTransformer().transform(tree)


def define_node(base: str, node: NodeSpec) -> str:
    lines = ["@dataclass", f"class {node.name}({base}):"]
    lines.extend(f"    {field.name}: {field.annotation}" for field in node.fields)
    return "\n".join(lines)


def define_family(family: Family) -> str:
    chunks = [f"class {family.name}(Node, ABC):\n    pass"]
    chunks.extend(define_node(family.name, node) for node in family.nodes)
    return "\n\n\n".join(chunks)


def generate(src: str) -> str:
    """
    Gera o código Python das famílias descritas em `src`.
    """
    families = parse_description(src)
    logger.debug("generating %d families", len(families))
    chunks = [HEADER.rstrip("\n")]
    chunks.extend(define_family(family) for family in families)
    return "\n\n\n".join(chunks) + "\n"


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="lox.codegen", description="Generate syntax tree node classes"
    )
    parser.add_argument("description", nargs="?", help="node description file")
    parser.add_argument("-o", "--output", help="output file (default: stdout)")
    args = parser.parse_args(argv)

    if args.description is None:
        src = DEFAULT_NODES
    else:
        src = Path(args.description).read_text(encoding="utf-8")

    code = generate(src)
    if args.output is None:
        sys.stdout.write(code)
    else:
        Path(args.output).write_text(code, encoding="utf-8")
        logger.info("wrote %s", args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
