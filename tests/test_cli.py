"""
Testes da linha de comando e do REPL.
"""
import io

from lox.__main__ import main
from lox.driver import Lox


def write_script(tmp_path, src: str):
    path = tmp_path / "script.lox"
    path.write_text(src, encoding="utf-8")
    return str(path)


def test_run_file_ok(tmp_path, capsys):
    code = main([write_script(tmp_path, "print 1 + 2;")])
    captured = capsys.readouterr()
    assert code == 0
    assert captured.out == "3\n"
    assert captured.err == ""


def test_syntax_error_exit_code(tmp_path, capsys):
    code = main([write_script(tmp_path, "print ;")])
    captured = capsys.readouterr()
    assert code == 65
    assert captured.err == "[line 1] Error at ';': Expect expression.\n"


def test_resolution_error_exit_code(tmp_path, capsys):
    code = main([write_script(tmp_path, 'print "never";\nreturn 1;')])
    captured = capsys.readouterr()
    assert code == 65
    assert captured.out == ""


def test_runtime_error_exit_code(tmp_path, capsys):
    code = main([write_script(tmp_path, "fun f() {}\nf(1);")])
    captured = capsys.readouterr()
    assert code == 70
    assert captured.err == "Expected 0 arguments but got 1.\n[line 2]\n"


def test_missing_file(tmp_path, capsys):
    code = main([str(tmp_path / "missing.lox")])
    captured = capsys.readouterr()
    assert code == 66
    assert "Could not read file" in captured.err


def test_too_many_arguments(capsys):
    assert main(["a.lox", "b.lox"]) == 64


def test_max_depth_option(tmp_path, capsys):
    src = "fun f(n) { if (n > 0) f(n - 1); }\nf(20);\nprint \"done\";"
    assert main(["--max-depth", "10", write_script(tmp_path, src)]) == 70
    assert "Stack overflow." in capsys.readouterr().err

    assert main(["--max-depth", "30", write_script(tmp_path, src)]) == 0
    assert capsys.readouterr().out == "done\n"


def test_print_ast_option(tmp_path, capsys):
    assert main(["--print-ast", write_script(tmp_path, "print 1 + 2;")]) == 0
    assert capsys.readouterr().out == "(print (+ 1 2))\n3\n"


def test_prompt_keeps_state_and_recovers_from_errors():
    stdin = io.StringIO('var a = 1;\nprint undeclared;\nprint a +;\nprint a;\n')
    stdout, stderr = io.StringIO(), io.StringIO()
    lox = Lox(stdout=stdout, stderr=stderr)

    assert lox.run_prompt(stdin) == 0
    assert stdout.getvalue() == "> > > > 1\n> \n"
    assert stderr.getvalue().splitlines() == [
        "Undefined variable 'undeclared'.",
        "[line 1]",
        "[line 1] Error at ';': Expect expression.",
    ]
    assert not lox.diagnostics.had_error
    assert not lox.diagnostics.had_runtime_error


def test_prompt_from_main(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("print 2 * 21;\n"))
    assert main([]) == 0
    assert capsys.readouterr().out == "> 42\n> \n"
