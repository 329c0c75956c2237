"""
Erros e coletor de diagnósticos.

Três classes de erro nunca se misturam: erros léxicos/sintáticos, erros
estáticos (resolução) e erros de execução. Os dois primeiros são registrados
no coletor e impedem as etapas seguintes; o erro de execução interrompe o
programa na primeira ocorrência.
"""

import sys
from typing import Optional, TextIO

from .tokens import Token, TokenType


class LoxError(Exception):
    """
    Exceção para erros de execução Lox.

    Guarda o token responsável pelo erro para reportar a linha.
    """

    def __init__(self, token: Token, message: str):
        self.token = token
        self.message = message
        super().__init__(message)


class ParseError(Exception):
    """
    Sinaliza erro sintático dentro do parser. Usado apenas para sincronizar
    o parser no próximo comando.
    """


class Diagnostics:
    """
    Coletor de diagnósticos compartilhado pelas etapas do pipeline.

    O driver consulta `had_error` e `had_runtime_error` depois de cada etapa
    para decidir se continua.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream
        self.had_error = False
        self.had_runtime_error = False
        self.messages: list[str] = []

    def error(self, line: int, message: str):
        self.report(line, "", message)

    def token_error(self, token: Token, message: str):
        if token.type == TokenType.EOF:
            self.report(token.line, " at end", message)
        else:
            self.report(token.line, f" at '{token.lexeme}'", message)

    def report(self, line: int, where: str, message: str):
        self.emit(f"[line {line}] Error{where}: {message}")
        self.had_error = True

    def runtime_error(self, error: LoxError):
        self.emit(f"{error.message}\n[line {error.token.line}]")
        self.had_runtime_error = True

    def emit(self, text: str):
        self.messages.append(text)
        print(text, file=self.stream or sys.stderr)

    def reset(self):
        """
        Limpa as flags de erro. Usado pelo REPL entre linhas.
        """
        self.had_error = False
        self.had_runtime_error = False
        self.messages.clear()
