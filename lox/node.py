"""
Classe base dos nós da árvore sintática.

Cada nó recebe um identificador inteiro único no momento da construção, isto
é, durante a análise sintática. O resolvedor usa esse identificador como chave
da tabela de distâncias, de modo que a identidade do nó (e não o seu conteúdo)
determina a entrada.
"""

import itertools
from dataclasses import dataclass, field, fields
from typing import Iterator

_ids = itertools.count(1)


def next_id() -> int:
    return next(_ids)


@dataclass
class Node:
    id: int = field(default_factory=next_id, init=False, repr=False, compare=False)

    def children(self) -> Iterator["Node"]:
        """
        Itera sobre os nós filhos diretos, na ordem dos campos.
        """
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Node):
                yield value
            elif isinstance(value, list):
                yield from (item for item in value if isinstance(item, Node))

    def walk(self) -> Iterator["Node"]:
        """
        Percorre a subárvore em pré-ordem, incluindo o próprio nó.
        """
        yield self
        for child in self.children():
            yield from child.walk()
