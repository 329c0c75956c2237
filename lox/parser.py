"""
Analisador sintático descendente recursivo.

Cada regra da gramática abaixo corresponde a um método do parser. A
precedência dos operadores é codificada pela ordem das regras, da menor para a
maior:

    program     → declaration* EOF
    declaration → classDecl | funDecl | varDecl | statement
    classDecl   → "class" NAME ( "<" NAME )? "{" function* "}"
    funDecl     → "fun" function
    function    → NAME "(" params? ")" block
    varDecl     → "var" NAME ( "=" expression )? ";"
    statement   → exprStmt | forStmt | ifStmt | printStmt | returnStmt
                | whileStmt | block
    expression  → assignment
    assignment  → ( call "." )? NAME "=" assignment | logic_or
    logic_or    → logic_and ( "or" logic_and )*
    logic_and   → equality ( "and" equality )*
    equality    → comparison ( ( "!=" | "==" ) comparison )*
    comparison  → term ( ( ">" | ">=" | "<" | "<=" ) term )*
    term        → factor ( ( "-" | "+" ) factor )*
    factor      → unary ( ( "/" | "*" ) unary )*
    unary       → ( "!" | "-" ) unary | call
    call        → primary ( "(" args? ")" | "." NAME )*
    primary     → NUMBER | STRING | "true" | "false" | "nil" | "this"
                | "(" expression ")" | NAME | "super" "." NAME
"""

from typing import Callable, Optional

from .ast import *
from .errors import Diagnostics, ParseError
from .lexer import scan
from .tokens import Token, TokenType

MAX_ARGS = 255

# Tokens que iniciam uma nova declaração ou comando (ponto de sincronização)
STATEMENT_START = {
    TokenType.CLASS,
    TokenType.FUN,
    TokenType.VAR,
    TokenType.FOR,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.PRINT,
    TokenType.RETURN,
}


def binary_rule(node_cls: type, operand: str, *types: TokenType) -> Callable:
    """
    Fábrica de métodos para regras binárias associativas à esquerda.

    Cada iteração usa o nó construído anteriormente como operando esquerdo,
    produzindo uma árvore inclinada para a esquerda: a op b op c → (a op b) op c.
    """

    def method(self: "Parser") -> Expr:
        expr = getattr(self, operand)()
        while self.match(*types):
            op = self.previous()
            right = getattr(self, operand)()
            expr = node_cls(expr, op, right)
        return expr

    return method


class Parser:
    def __init__(self, tokens: list[Token], diagnostics: Optional[Diagnostics] = None):
        self.tokens = tokens
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.current = 0

    def parse(self) -> list[Optional[Stmt]]:
        """
        Retorna a lista de comandos do programa. Comandos com erro de sintaxe
        aparecem como None.
        """
        stmts = []
        while not self.is_at_end():
            stmts.append(self.declaration())
        return stmts

    #
    # Declarações
    #
    def declaration(self) -> Optional[Stmt]:
        try:
            if self.match(TokenType.CLASS):
                return self.class_declaration()
            if self.match(TokenType.FUN):
                return self.function("function")
            if self.match(TokenType.VAR):
                return self.var_declaration()
            return self.statement()
        except ParseError:
            self.synchronize()
            return None

    def class_declaration(self) -> Class:
        name = self.consume(TokenType.IDENTIFIER, "Expect class name.")

        superclass = None
        if self.match(TokenType.LESS):
            self.consume(TokenType.IDENTIFIER, "Expect superclass name.")
            superclass = Var(self.previous())

        self.consume(TokenType.LEFT_BRACE, "Expect '{' before class body.")
        methods = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.is_at_end():
            methods.append(self.function("method"))
        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after class body.")

        return Class(name, superclass, methods)

    def function(self, kind: str) -> Function:
        name = self.consume(TokenType.IDENTIFIER, f"Expect {kind} name.")
        self.consume(TokenType.LEFT_PAREN, f"Expect '(' after {kind} name.")
        params = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(params) >= MAX_ARGS:
                    self.error(self.peek(), f"Can't have more than {MAX_ARGS} parameters.")
                params.append(self.consume(TokenType.IDENTIFIER, "Expect parameter name."))
                if not self.match(TokenType.COMMA):
                    break
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")

        self.consume(TokenType.LEFT_BRACE, f"Expect '{{' before {kind} body.")
        body = self.block()
        return Function(name, params, body)

    def var_declaration(self) -> VarDef:
        name = self.consume(TokenType.IDENTIFIER, "Expect variable name.")
        value = None
        if self.match(TokenType.EQUAL):
            value = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return VarDef(name, value)

    #
    # Comandos
    #
    def statement(self) -> Stmt:
        if self.match(TokenType.FOR):
            return self.for_statement()
        if self.match(TokenType.IF):
            return self.if_statement()
        if self.match(TokenType.PRINT):
            return self.print_statement()
        if self.match(TokenType.RETURN):
            return self.return_statement()
        if self.match(TokenType.WHILE):
            return self.while_statement()
        if self.match(TokenType.LEFT_BRACE):
            return Block(self.block())
        return self.expression_statement()

    def for_statement(self) -> Stmt:
        """
        Transforma for (init; cond; incr) body em:
        {
            init;
            while (cond) {
                body;
                incr;
            }
        }
        """
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")

        if self.match(TokenType.SEMICOLON):
            init = None
        elif self.match(TokenType.VAR):
            init = self.var_declaration()
        else:
            init = self.expression_statement()

        cond = None
        if not self.check(TokenType.SEMICOLON):
            cond = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after loop condition.")

        incr = None
        if not self.check(TokenType.RIGHT_PAREN):
            incr = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.statement()

        if incr is not None:
            body = Block([body, Expression(incr)])
        if cond is None:
            cond = Literal(True)
        body = While(cond, body)
        if init is not None:
            body = Block([init, body])
        return body

    def if_statement(self) -> If:
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        cond = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")

        then = self.statement()
        orelse = None
        if self.match(TokenType.ELSE):
            orelse = self.statement()
        return If(cond, then, orelse)

    def print_statement(self) -> Print:
        value = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return Print(value)

    def return_statement(self) -> Return:
        keyword = self.previous()
        value = None
        if not self.check(TokenType.SEMICOLON):
            value = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after return value.")
        return Return(keyword, value)

    def while_statement(self) -> While:
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        cond = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after condition.")
        body = self.statement()
        return While(cond, body)

    def block(self) -> list[Optional[Stmt]]:
        stmts = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.is_at_end():
            stmts.append(self.declaration())
        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return stmts

    def expression_statement(self) -> Expression:
        expr = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return Expression(expr)

    #
    # Expressões
    #
    def expression(self) -> Expr:
        return self.assignment()

    def assignment(self) -> Expr:
        expr = self.logic_or()

        if self.match(TokenType.EQUAL):
            equals = self.previous()
            value = self.assignment()

            # O lado esquerdo foi lido como expressão comum e agora é
            # reclassificado como alvo de atribuição.
            if isinstance(expr, Var):
                return Assign(expr.name, value)
            if isinstance(expr, Getattr):
                return Setattr(expr.obj, expr.name, value)

            # Erro reportado sem sincronizar: o parser não está confuso
            self.error(equals, "Invalid assignment target.")

        return expr

    logic_or = binary_rule(Logical, "logic_and", TokenType.OR)
    logic_and = binary_rule(Logical, "equality", TokenType.AND)
    equality = binary_rule(BinOp, "comparison", TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)
    comparison = binary_rule(
        BinOp,
        "term",
        TokenType.GREATER,
        TokenType.GREATER_EQUAL,
        TokenType.LESS,
        TokenType.LESS_EQUAL,
    )
    term = binary_rule(BinOp, "factor", TokenType.MINUS, TokenType.PLUS)
    factor = binary_rule(BinOp, "unary", TokenType.SLASH, TokenType.STAR)

    def unary(self) -> Expr:
        if self.match(TokenType.BANG, TokenType.MINUS):
            op = self.previous()
            return UnaryOp(op, self.unary())
        return self.call()

    def call(self) -> Expr:
        expr = self.primary()
        while True:
            if self.match(TokenType.LEFT_PAREN):
                expr = self.finish_call(expr)
            elif self.match(TokenType.DOT):
                name = self.consume(TokenType.IDENTIFIER, "Expect property name after '.'.")
                expr = Getattr(expr, name)
            else:
                break
        return expr

    def finish_call(self, callee: Expr) -> Call:
        params = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(params) >= MAX_ARGS:
                    self.error(self.peek(), f"Can't have more than {MAX_ARGS} arguments.")
                params.append(self.expression())
                if not self.match(TokenType.COMMA):
                    break
        paren = self.consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
        return Call(callee, paren, params)

    def primary(self) -> Expr:
        if self.match(TokenType.FALSE):
            return Literal(False)
        if self.match(TokenType.TRUE):
            return Literal(True)
        if self.match(TokenType.NIL):
            return Literal(None)
        if self.match(TokenType.NUMBER, TokenType.STRING):
            return Literal(self.previous().literal)
        if self.match(TokenType.SUPER):
            keyword = self.previous()
            self.consume(TokenType.DOT, "Expect '.' after 'super'.")
            method = self.consume(TokenType.IDENTIFIER, "Expect superclass method name.")
            return Super(keyword, method)
        if self.match(TokenType.THIS):
            return This(self.previous())
        if self.match(TokenType.IDENTIFIER):
            return Var(self.previous())
        if self.match(TokenType.LEFT_PAREN):
            expr = self.expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)

        raise self.error(self.peek(), "Expect expression.")

    #
    # Funções auxiliares
    #
    def match(self, *types: TokenType) -> bool:
        for type in types:
            if self.check(type):
                self.advance()
                return True
        return False

    def consume(self, type: TokenType, message: str) -> Token:
        if self.check(type):
            return self.advance()
        raise self.error(self.peek(), message)

    def check(self, type: TokenType) -> bool:
        if self.is_at_end():
            return False
        return self.peek().type == type

    def advance(self) -> Token:
        if not self.is_at_end():
            self.current += 1
        return self.previous()

    def is_at_end(self) -> bool:
        return self.peek().type == TokenType.EOF

    def peek(self) -> Token:
        return self.tokens[self.current]

    def previous(self) -> Token:
        return self.tokens[self.current - 1]

    def error(self, token: Token, message: str) -> ParseError:
        self.diagnostics.token_error(token, message)
        return ParseError(message)

    def synchronize(self):
        """
        Descarta tokens até o fim do comando atual ou até o início de uma nova
        declaração.
        """
        self.advance()
        while not self.is_at_end():
            if self.previous().type == TokenType.SEMICOLON:
                return
            if self.peek().type in STATEMENT_START:
                return
            self.advance()


def parse(src: str, diagnostics: Optional[Diagnostics] = None) -> list[Optional[Stmt]]:
    """
    Converte código fonte em lista de comandos.
    """
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()
    tokens = scan(src, diagnostics)
    return Parser(tokens, diagnostics).parse()
