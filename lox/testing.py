"""
Execução de exemplos anotados.

Os arquivos .lox de exemplo descrevem o resultado esperado em comentários:

    print 1 + 2; // expect: 3
    print x;     // expect runtime error: Undefined variable 'x'.
    var 1 = 2;   // Error at '1': Expect variable name.
    // [line 3] Error at end: Expect '}' after block.
"""

import io
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .driver import EXIT_DATA_ERROR, EXIT_OK, EXIT_SOFTWARE, Lox
from .interpreter import Interpreter

EXPECT_OUTPUT = re.compile(r"// expect: ?(.*)")
EXPECT_RUNTIME_ERROR = re.compile(r"// expect runtime error: (.+)")
EXPECT_ERROR = re.compile(r"// (Error.*)")
EXPECT_LINE_ERROR = re.compile(r"// \[line (\d+)\] (Error.*)")


@dataclass
class Example:
    """
    Um programa Lox com as saídas esperadas extraídas dos comentários.
    """

    src: str
    path: Optional[Path] = None
    outputs: list[str] = field(default_factory=list, init=False)
    errors: list[str] = field(default_factory=list, init=False)
    runtime_error: Optional[str] = field(default=None, init=False)
    runtime_error_line: Optional[int] = field(default=None, init=False)

    def __post_init__(self):
        for lineno, line in enumerate(self.src.splitlines(), 1):
            if match := EXPECT_OUTPUT.search(line):
                self.outputs.append(match.group(1))
            elif match := EXPECT_RUNTIME_ERROR.search(line):
                self.runtime_error = match.group(1)
                self.runtime_error_line = lineno
            elif match := EXPECT_LINE_ERROR.search(line):
                self.errors.append(f"[line {match.group(1)}] {match.group(2)}")
            elif match := EXPECT_ERROR.search(line):
                self.errors.append(f"[line {lineno}] {match.group(1)}")

    @classmethod
    def from_file(cls, path: Path) -> "Example":
        return cls(path.read_text(encoding="utf-8"), path=path)

    @property
    def expect_runtime_error(self) -> bool:
        return self.runtime_error is not None

    @property
    def exit_code(self) -> int:
        if self.errors:
            return EXIT_DATA_ERROR
        if self.expect_runtime_error:
            return EXIT_SOFTWARE
        return EXIT_OK

    def eval(self) -> tuple[Interpreter, str, str]:
        """
        Executa o exemplo e retorna o interpretador, a saída padrão e a saída
        de erros.
        """
        stdout, stderr = io.StringIO(), io.StringIO()
        lox = Lox(stdout=stdout, stderr=stderr)
        lox.run(self.src)
        return lox.interpreter, stdout.getvalue(), stderr.getvalue()

    def check(self):
        """
        Executa o exemplo e verifica se o resultado corresponde ao esperado.
        """
        _, stdout, stderr = self.eval()
        assert stdout.splitlines() == self.outputs, f"{self.path}: unexpected output"

        if self.errors:
            assert stderr.splitlines() == self.errors, f"{self.path}: unexpected errors"
        elif self.expect_runtime_error:
            expected = [self.runtime_error, f"[line {self.runtime_error_line}]"]
            assert stderr.splitlines() == expected, f"{self.path}: unexpected runtime error"
        else:
            assert stderr == "", f"{self.path}: unexpected error output"
