"""
Configuração do pytest para os testes do interpretador Lox.
"""
import io
import sys
from pathlib import Path

import pytest

# Garante que a raiz do projeto esteja no sys.path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

EXAMPLES_DIR = PROJECT_ROOT / "exemplos"


@pytest.fixture
def run():
    """
    Executa um programa e retorna (stdout, stderr, lox).
    """
    from lox.driver import Lox

    def run_source(src: str):
        stdout, stderr = io.StringIO(), io.StringIO()
        lox = Lox(stdout=stdout, stderr=stderr)
        lox.run(src)
        return stdout.getvalue(), stderr.getvalue(), lox

    return run_source
