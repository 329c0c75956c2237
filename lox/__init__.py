"""
Interpretador da linguagem Lox.

O código passa por quatro etapas: análise léxica (lox.lexer), análise
sintática (lox.parser), resolução estática de variáveis (lox.resolver) e
execução (lox.interpreter).
"""

from .driver import Lox
from .errors import Diagnostics, LoxError
from .interpreter import Interpreter
from .lexer import scan
from .parser import parse
from .resolver import resolve

__all__ = ["Diagnostics", "Interpreter", "Lox", "LoxError", "parse", "resolve", "scan"]
