"""Statement parser for BASIC program lines.

Parsing is a two-stage pipeline:

1. **Tokenizing**: `linebasic.lexer.tokenize` turns the line text into
   tokens. It owns all character-level rules (keyword case folding,
   two-character comparators, REM remarks).

2. **Parsing**: the tokens are fed to a Lark LALR parser through a small
   custom lexer adapter, so the grammar below works directly on the
   tokenizer's token types (declared with `%declare`). The parse tree is
   turned into AST nodes by `ASTTransformer`.

Arithmetic has a single precedence level: `expr` is an operand followed
by any number of (operator, operand) pairs, kept flat in an `Expr` node
and folded left to right when evaluated.
`parse_line` is the public entry point.
"""

from __future__ import annotations

from typing import List

from lark import Lark, Transformer_NonRecursive
from lark import Token as LarkToken
from lark.exceptions import UnexpectedInput, VisitError
from lark.lexer import Lexer as LarkLexer

from .ast import (
    Node, Number, Variable, Negate, Expr, Condition,
    LetStmt, PrintStmt, InputStmt, IfStmt, GotoStmt,
    WhileStmt, WendStmt, EndStmt, RemStmt,
)
from .errors import BasicError, BasicSyntaxError
from .lexer import Token, TokenType, tokenize


BASIC_GRAMMAR = r"""
    ?start: statement

    ?statement: let_stmt
              | assign_stmt
              | print_stmt
              | input_stmt
              | if_stmt
              | goto_stmt
              | while_stmt
              | wend_stmt
              | end_stmt
              | rem_stmt

    let_stmt: LET IDENTIFIER EQUALS expr EOL
    assign_stmt: IDENTIFIER EQUALS expr EOL
    print_stmt: PRINT (STRING | IDENTIFIER) EOL
    input_stmt: INPUT IDENTIFIER EOL
    if_stmt: IF condition THEN NUMBER [ELSE NUMBER] EOL
    goto_stmt: GOTO NUMBER EOL
    while_stmt: WHILE condition EOL
    wend_stmt: WEND EOL
    end_stmt: END EOL
    rem_stmt: REM EOL

    condition: expr comparator expr
    ?comparator: EQUALS | LESS | LESS_EQUAL | GREATER | GREATER_EQUAL | NOT_EQUAL

    // No precedence: every arithmetic operator binds at the same level
    expr: operand ((PLUS | MINUS | MULTIPLY | DIVIDE | MODULO) operand)*

    ?operand: NUMBER                        -> number
            | IDENTIFIER                    -> variable
            | LEFT_PAREN expr RIGHT_PAREN   -> group
            | MINUS operand                 -> negate

    %declare LEFT_PAREN RIGHT_PAREN PLUS MINUS MULTIPLY DIVIDE MODULO
    %declare EQUALS LESS LESS_EQUAL GREATER GREATER_EQUAL NOT_EQUAL
    %declare IDENTIFIER STRING NUMBER
    %declare LET PRINT INPUT IF THEN ELSE ENDIF WHILE WEND END REM GOTO
    %declare EOL
"""


class TokenStreamLexer(LarkLexer):
    """Lark lexer that replays tokens produced by `tokenize`.

    Each Lark token keeps the typed value of the source token (a float for
    numbers, the unquoted text for strings, the remark for REM) and its
    index in the token list as `start_pos`, so errors can point back at
    the original lexeme.
    """
    def __init__(self, lexer_conf):
        pass

    def lex(self, data: List[Token]):
        for position, token in enumerate(data):
            value = token.value if token.value is not None else token.lexeme
            yield LarkToken(token.type.name, value, start_pos=position,
                            line=token.line, column=token.column)


BASIC_PARSER = Lark(
    BASIC_GRAMMAR,
    parser='lalr',
    lexer=TokenStreamLexer,
    maybe_placeholders=False,
)


def line_number(token: LarkToken) -> int:
    """Convert a NUMBER token used as a jump target into a line number."""
    value = token.value
    if not float(value).is_integer() or value < 1:
        raise BasicSyntaxError(f"invalid line number {value!r}")
    return int(value)


class ASTTransformer(Transformer_NonRecursive):
    """Transforms the raw parse tree into an AST.

    Runs without recursion, so deeply parenthesized operands cannot
    exhaust the Python stack.
    """

    def let_stmt(self, items):
        # LET name = expr EOL
        return LetStmt(name=items[1].value, expr=items[3], explicit=True)

    def assign_stmt(self, items):
        return LetStmt(name=items[0].value, expr=items[2], explicit=False)

    def print_stmt(self, items):
        argument = items[1]
        if argument.type == 'STRING':
            return PrintStmt(text=argument.value)
        return PrintStmt(variable=argument.value)

    def input_stmt(self, items):
        return InputStmt(name=items[1].value)

    def if_stmt(self, items):
        # IF condition THEN n [ELSE m] EOL
        condition = items[1]
        target = line_number(items[3])
        else_target = line_number(items[5]) if len(items) > 5 else None
        return IfStmt(condition, target, else_target)

    def goto_stmt(self, items):
        return GotoStmt(line_number(items[1]))

    def while_stmt(self, items):
        return WhileStmt(items[1])

    def wend_stmt(self, items):
        return WendStmt()

    def end_stmt(self, items):
        return EndStmt()

    def rem_stmt(self, items):
        # the REM token carries the remark text as its value
        return RemStmt(items[0].value)

    def condition(self, items):
        left, op, right = items
        return Condition(op=str(op.value), left=left, right=right)

    def expr(self, items):
        # items pattern: operand (op operand)*
        if len(items) == 1:
            return items[0]
        rest = [(str(items[i].value), items[i + 1]) for i in range(1, len(items), 2)]
        return Expr(first=items[0], rest=rest)

    def number(self, items):
        return Number(float(items[0].value))

    def variable(self, items):
        return Variable(items[0].value)

    def group(self, items):
        return items[1]

    def negate(self, items):
        return Negate(items[1])


def describe_unexpected(err: UnexpectedInput, tokens: List[Token]) -> str:
    token = getattr(err, 'token', None)
    position = getattr(token, 'start_pos', None)
    if position is None or not 0 <= position < len(tokens):
        return "unexpected end of line"
    source_token = tokens[position]
    if source_token.type is TokenType.EOL:
        if position == 0:
            return "empty statement"
        return "unexpected end of line"
    return f"unexpected {source_token.lexeme!r} at column {source_token.column}"


def parse_tokens(tokens: List[Token]) -> Node:
    """Parse the tokens of one program line into a statement node.

    Grammar violations raise BasicSyntaxError.
    """
    try:
        tree = BASIC_PARSER.parse(tokens)
    except UnexpectedInput as e:
        raise BasicSyntaxError(describe_unexpected(e, tokens)) from e
    try:
        return ASTTransformer().transform(tree)
    except VisitError as e:
        if isinstance(e.orig_exc, BasicError):
            raise e.orig_exc from None
        raise


def parse_line(source: str) -> Node:
    """Tokenize and parse one program line."""
    return parse_tokens(tokenize(source))
