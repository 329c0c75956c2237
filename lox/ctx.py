from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, Optional

if TYPE_CHECKING:
    from .ast import Value

ScopeDict = dict[str, "Value"]


def builtins() -> ScopeDict:
    """
    Funções nativas disponíveis no escopo global.
    """
    import time

    from .runtime import NativeFunction

    return {
        "clock": NativeFunction("clock", 0, lambda: time.time()),
    }


@dataclass(eq=False)
class Ctx:
    """
    Contexto de execução: um dicionário que armazena nomes das variáveis e
    seus respectivos valores, mais uma referência ao contexto que o envolve.

    Contextos formam uma cadeia compartilhada: várias closures podem guardar
    o mesmo contexto e todas observam as mesmas alterações.
    """

    scope: ScopeDict = field(default_factory=dict)
    parent: Optional["Ctx"] = None

    @classmethod
    def globals(cls) -> "Ctx":
        """
        Cria o contexto global, já populado com as funções nativas.
        """
        return cls(builtins(), None)

    def __getitem__(self, key: str) -> "Value":
        """Busca uma variável apenas no escopo atual"""
        try:
            return self.scope[key]
        except KeyError:
            raise KeyError(f"Variável '{key}' não encontrada")

    def __setitem__(self, key: str, value: "Value"):
        """
        Altera o valor de uma variável existente no escopo atual.
        Se a variável não existir, lança KeyError.
        """
        if key not in self.scope:
            raise KeyError(f"Variável '{key}' não foi declarada")
        self.scope[key] = value

    def __contains__(self, name: str) -> bool:
        return name in self.scope

    def var_def(self, key: str, value: "Value" = None):
        """
        Define uma nova variável no escopo atual. Uma declaração repetida no
        mesmo escopo sobrescreve o valor anterior.
        """
        self.scope[key] = value

    def ancestor(self, distance: int) -> "Ctx":
        """
        Retorna o contexto `distance` níveis acima do atual.
        """
        ctx = self
        for _ in range(distance):
            assert ctx.parent is not None, "resolução inconsistente"
            ctx = ctx.parent
        return ctx

    def get_at(self, distance: int, key: str) -> "Value":
        return self.ancestor(distance)[key]

    def assign_at(self, distance: int, key: str, value: "Value"):
        self.ancestor(distance)[key] = value

    def push(self, scope: Optional[ScopeDict] = None) -> "Ctx":
        """Cria um novo contexto com um novo escopo, tendo o contexto atual como pai"""
        return Ctx(scope or {}, self)

    def iter_scopes(self, reverse: bool = False) -> Iterator[ScopeDict]:
        """
        Itera sobre os ambientes do contexto, começando pelo mais interno.
        """
        if reverse:
            if self.parent is not None:
                yield from self.parent.iter_scopes(reverse=True)
            yield self.scope
        else:
            yield self.scope
            if self.parent is not None:
                yield from self.parent.iter_scopes()

    def pretty(self) -> str:
        """
        Representação do contexto como string.
        """
        lines: list[str] = []
        for i, scope in enumerate(self.iter_scopes(reverse=True)):
            lines.append(pretty_scope(scope, i))
        return "\n".join(reversed(lines))

    def __repr__(self) -> str:
        return f"Ctx({list(self.scope)})"


def pretty_scope(env: ScopeDict, index: int) -> str:
    """
    Representa um escopo como string.
    """
    from .runtime import show

    if not env:
        return f"{index:>2}: <empty>"
    items = (f"{k} = {show(v)}" for k, v in sorted(env.items()))
    data = "; ".join(items)
    return f"{index:>2}: {data}"
