"""
Executa os programas de exemplo em exemplos/ e compara com as saídas
anotadas nos comentários.
"""
import pytest

from lox.__main__ import main
from lox.testing import Example

from conftest import EXAMPLES_DIR

EXAMPLES = sorted(EXAMPLES_DIR.rglob("*.lox"))


def example_id(path):
    return str(path.relative_to(EXAMPLES_DIR).with_suffix(""))


@pytest.mark.parametrize("path", EXAMPLES, ids=example_id)
def test_example(path):
    Example.from_file(path).check()


@pytest.mark.parametrize("path", EXAMPLES, ids=example_id)
def test_example_exit_code(path, capsys):
    example = Example.from_file(path)
    assert main([str(path)]) == example.exit_code


def test_example_parses_expectations():
    src = """
    print 1; // expect: 1
    print x; // expect runtime error: Undefined variable 'x'.
    """
    example = Example(src)
    assert example.outputs == ["1"]
    assert example.expect_runtime_error
    assert example.runtime_error_line == 3
    assert example.exit_code == 70


def test_example_eval_returns_streams():
    interpreter, stdout, stderr = Example('var a = "x"; print a;').eval()
    assert stdout == "x\n"
    assert stderr == ""
    assert interpreter.globals["a"] == "x"
