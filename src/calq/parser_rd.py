"""
Recursive Descent Parser for calq

Structure:
- Lexer: Token stream from source
- Parser: Recursive descent, one method per precedence level
- AST: lark Tree/Token nodes (see calq.tree)
"""

from typing import List, Optional

from lark import Tree, Token

from .lexer_rd import tokenize
from .token_types import TT, Tok
from .types import SymbolTable

# ============================================================================
# Parser
# ============================================================================

class ParseError(Exception):
    """Parse error with position info"""
    def __init__(self, message: str, token: Optional[Tok] = None):
        self.message = message
        self.token = token
        self.line = token.line if token else None
        self.column = token.column if token else None
        super().__init__(
            f"{message} at line {token.line}, col {token.column}" if token else message
        )

_ASSIGN_OPS = (TT.ASSIGN, TT.WALRUS)
_SEPARATORS = (TT.NEWLINE, TT.SEMI)

class Parser:
    """
    Recursive descent parser for calq.

    Expression precedence (lowest to highest):
    1. add (+, -)
    2. mul (*, /)
    3. unary (-, +)
    4. pow (^, **), right associative; -2^2 is -(2^2)
    5. unit suffix (deg, °, rad)
    6. primary (literals, identifiers, calls, parens)

    Function declarations are registered in the symbol table as soon as they
    are parsed, before any statement is evaluated.
    """

    def __init__(self, tokens: List[Tok], symbol_table: Optional[SymbolTable] = None):
        self.tokens = tokens
        self.pos = 0
        self.current = tokens[0] if tokens else Tok(TT.EOF, None, 0, 0)
        self.symbol_table = symbol_table

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def peek(self, offset: int = 0) -> Tok:
        """Look ahead at token"""
        idx = self.pos + offset
        if idx < len(self.tokens):
            return self.tokens[idx]
        return Tok(TT.EOF, None, 0, 0)

    def advance(self) -> Tok:
        """Consume current token and move to next"""
        prev = self.current
        self.pos += 1
        if self.pos < len(self.tokens):
            self.current = self.tokens[self.pos]
        else:
            self.current = Tok(TT.EOF, None, 0, 0)
        return prev

    def check(self, *types: TT) -> bool:
        """Check if current token matches any of the given types"""
        return self.current.type in types

    def match(self, *types: TT) -> bool:
        """Check and consume if current token matches"""
        if self.check(*types):
            self.advance()
            return True
        return False

    def expect(self, token_type: TT, message: Optional[str] = None) -> Tok:
        """Consume token of expected type or raise error"""
        if not self.check(token_type):
            msg = message or f"Expected {token_type.name}, got {self.current.type.name}"
            raise ParseError(msg, self.current)
        return self.advance()

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> List[Tree]:
        """Parse entire program into a statement list"""
        stmts: List[Tree] = []

        while self.match(*_SEPARATORS):
            pass

        while not self.check(TT.EOF):
            stmts.append(self.parse_statement())

            if self.check(TT.EOF):
                break

            if not self.check(*_SEPARATORS):
                raise ParseError(f"Unexpected {self.current.type.name} after statement", self.current)

            while self.match(*_SEPARATORS):
                pass

        return stmts

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Tree:
        """
        Parse a single statement:
        - name(params) = expr   (function declaration)
        - name = expr           (variable declaration)
        - expr
        """
        if self.check(TT.IDENT):
            nxt = self.peek(1)

            if nxt.type in _ASSIGN_OPS:
                return self.parse_var_decl()

            if nxt.type == TT.LPAR and self._scan_assign_after_parens(self.pos + 1):
                return self.parse_fn_decl()

        expr = self.parse_expr()
        return Tree('expr_stmt', [expr])

    def parse_var_decl(self) -> Tree:
        """Parse variable declaration: name = expr"""
        name = self.expect(TT.IDENT)
        self.advance()  # = or :=
        value = self.parse_expr()
        return Tree('var_decl', [Token('IDENT', name.value), value])

    def parse_fn_decl(self) -> Tree:
        """Parse function declaration: name(params) = expr"""
        name = self.expect(TT.IDENT)

        self.expect(TT.LPAR)
        params = self.parse_param_list()
        self.expect(TT.RPAR)

        if not self.match(*_ASSIGN_OPS):
            raise ParseError("Expected '=' after function parameters", self.current)

        body = self.parse_expr()
        decl = Tree('fn_decl', [Token('IDENT', name.value), params, body])

        if self.symbol_table is not None:
            self.symbol_table.insert(SymbolTable.fn_key(name.value), decl)

        return decl

    def parse_param_list(self) -> Tree:
        """Parse parameter list: [IDENT (, IDENT)*]"""
        params: List[Token] = []

        if self.check(TT.RPAR):
            return Tree('paramlist', params)

        tok = self.expect(TT.IDENT, "Expected parameter name")
        params.append(Token('IDENT', tok.value))

        while self.match(TT.COMMA):
            tok = self.expect(TT.IDENT, "Expected parameter name")
            params.append(Token('IDENT', tok.value))

        return Tree('paramlist', params)

    def _scan_assign_after_parens(self, start_pos: int) -> bool:
        """Look ahead from a '(' token to find its matching ')' followed by an assignment."""
        depth = 0
        idx = start_pos

        while idx < len(self.tokens):
            tok = self.tokens[idx]

            if tok.type == TT.LPAR:
                depth += 1
            elif tok.type == TT.RPAR:
                depth -= 1
                if depth == 0:
                    nxt = self.tokens[idx + 1] if idx + 1 < len(self.tokens) else None
                    return nxt is not None and nxt.type in _ASSIGN_OPS
            elif tok.type in (TT.NEWLINE, TT.SEMI, TT.EOF):
                return False

            idx += 1

        return False

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expr(self) -> Tree:
        """Parse expression (top level)"""
        return self.parse_add_expr()

    def parse_add_expr(self) -> Tree:
        """Parse addition/subtraction: mul (('+' | '-') mul)*"""
        left = self.parse_mul_expr()

        while self.check(TT.PLUS, TT.MINUS):
            op = self.advance()
            right = self.parse_mul_expr()
            left = Tree('binary', [left, Token(op.type.name, op.value), right])

        return left

    def parse_mul_expr(self) -> Tree:
        """Parse multiplication/division: unary (('*' | '/') unary)*"""
        left = self.parse_unary_expr()

        while self.check(TT.STAR, TT.SLASH):
            op = self.advance()
            right = self.parse_unary_expr()
            left = Tree('binary', [left, Token(op.type.name, op.value), right])

        return left

    def parse_unary_expr(self) -> Tree:
        """Parse unary sign: ('-' | '+') unary | pow"""
        if self.check(TT.MINUS, TT.PLUS):
            op = self.advance()
            operand = self.parse_unary_expr()
            return Tree('unary', [Token(op.type.name, op.value), operand])

        return self.parse_pow_expr()

    def parse_pow_expr(self) -> Tree:
        """Parse power: postfix (POW unary)?, right associative"""
        base = self.parse_postfix_expr()

        if self.check(TT.POW):
            op = self.advance()
            exponent = self.parse_unary_expr()
            return Tree('binary', [base, Token('POW', op.value), exponent])

        return base

    def parse_postfix_expr(self) -> Tree:
        """Parse unit suffixes: primary (DEG | RAD)*"""
        expr = self.parse_primary_expr()

        while self.check(TT.DEG, TT.RAD):
            suffix = self.advance()
            expr = Tree('unit', [expr, Token(suffix.type.name, suffix.value)])

        return expr

    def parse_primary_expr(self) -> Tree:
        """Parse primary: NUMBER | IDENT | IDENT(args) | (expr)"""
        if self.check(TT.NUMBER):
            tok = self.advance()
            return Tree('literal', [Token('NUMBER', tok.value)])

        if self.check(TT.IDENT):
            tok = self.advance()
            name = Token('IDENT', tok.value)

            if self.match(TT.LPAR):
                args = self.parse_arg_list()
                self.expect(TT.RPAR, "Expected ')' after arguments")
                return Tree('fn_call', [name, Tree('arglist', args)])

            return Tree('var', [name])

        if self.match(TT.LPAR):
            inner = self.parse_expr()
            self.expect(TT.RPAR, "Expected ')'")
            return Tree('group', [inner])

        if self.check(TT.EOF):
            raise ParseError("Unexpected end of input", self.current)

        raise ParseError(f"Unexpected token {self.current.type.name}", self.current)

    def parse_arg_list(self) -> List[Tree]:
        """Parse call arguments: [expr (, expr)*]"""
        args: List[Tree] = []

        if self.check(TT.RPAR):
            return args

        args.append(self.parse_expr())

        while self.match(TT.COMMA):
            args.append(self.parse_expr())

        return args


def parse_source(source: str, symbol_table: Optional[SymbolTable] = None) -> List[Tree]:
    """Tokenize and parse source into a statement list."""
    tokens = tokenize(source)
    parser = Parser(tokens, symbol_table)

    try:
        return parser.parse()
    except RecursionError:
        raise ParseError("Expression nested too deeply", parser.current) from None
