"""
Driver que conecta as etapas: análise léxica, sintática, resolução e
execução.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

from .errors import Diagnostics
from .interpreter import DEFAULT_MAX_DEPTH, Interpreter
from .lexer import scan
from .parser import Parser
from .printer import pretty
from .resolver import Resolver

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 64
EXIT_DATA_ERROR = 65
EXIT_NO_INPUT = 66
EXIT_SOFTWARE = 70

PROMPT = "> "


class Lox:
    """
    Executa programas Lox. O mesmo interpretador é reaproveitado entre
    chamadas a `run`, de modo que o REPL mantém as variáveis globais.
    """

    def __init__(
        self,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
        print_ast: bool = False,
    ):
        self.stdout = stdout
        self.diagnostics = Diagnostics(stderr)
        self.interpreter = Interpreter(self.diagnostics, stdout, max_depth)
        self.print_ast = print_ast

    def run(self, source: str):
        tokens = scan(source, self.diagnostics)
        logger.debug("scanned %d tokens", len(tokens))

        stmts = Parser(tokens, self.diagnostics).parse()
        logger.debug("parsed %d statements", len(stmts))
        if self.print_ast:
            for stmt in stmts:
                print(pretty(stmt), file=self.stdout or sys.stdout)

        if self.diagnostics.had_error:
            return

        locals = Resolver(self.diagnostics).resolve(stmts)
        logger.debug("resolved %d local references", len(locals))
        if self.diagnostics.had_error:
            return

        self.interpreter.resolve(locals)
        self.interpreter.interpret(stmts)
        logger.debug("global scope:\n%s", self.interpreter.globals.pretty())

    def run_file(self, path: str) -> int:
        """
        Executa um arquivo e retorna o código de saída do processo.
        """
        try:
            source = Path(path).read_text(encoding="utf-8")
        except OSError as error:
            print(f"Could not read file '{path}': {error.strerror}", file=sys.stderr)
            return EXIT_NO_INPUT

        self.run(source)
        if self.diagnostics.had_error:
            return EXIT_DATA_ERROR
        if self.diagnostics.had_runtime_error:
            return EXIT_SOFTWARE
        return EXIT_OK

    def run_prompt(self, stdin: Optional[TextIO] = None) -> int:
        """
        Lê e executa uma linha por vez até o fim da entrada. Erros numa linha
        não afetam as linhas seguintes.
        """
        stdin = stdin or sys.stdin
        out = self.stdout or sys.stdout
        while True:
            out.write(PROMPT)
            out.flush()
            line = stdin.readline()
            if not line:
                out.write("\n")
                break
            self.run(line)
            self.diagnostics.reset()
        return EXIT_OK
