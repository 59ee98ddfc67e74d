"""Abstract Syntax Tree (AST) definitions for BASIC program lines.

Every program line parses into exactly one statement node. An operator
chain is kept flat as an `Expr`: a first operand followed by (operator,
operand) pairs, because all arithmetic operators share one precedence
level and evaluate left to right.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple


@dataclass
class Node:
    """Base class for all AST nodes."""
    pass


# Expressions

@dataclass
class Number(Node):
    value: float


@dataclass
class Variable(Node):
    name: str


@dataclass
class Negate(Node):
    operand: Node


@dataclass
class Expr(Node):
    first: Node
    rest: List[Tuple[str, Node]]  # (operator, operand); operator is one of '+', '-', '*', '/', '%'


@dataclass
class Condition(Node):
    op: str  # one of '<', '<=', '>', '>=', '=', '<>'
    left: Node
    right: Node


# Statements

@dataclass
class LetStmt(Node):
    name: str
    expr: Node
    explicit: bool = True  # False for the bare `X = ...` form


@dataclass
class PrintStmt(Node):
    text: Optional[str] = None      # string literal to emit
    variable: Optional[str] = None  # or variable whose value to emit


@dataclass
class InputStmt(Node):
    name: str


@dataclass
class IfStmt(Node):
    condition: Condition
    target: int
    else_target: Optional[int] = None


@dataclass
class GotoStmt(Node):
    target: int


@dataclass
class WhileStmt(Node):
    condition: Condition


@dataclass
class WendStmt(Node):
    pass


@dataclass
class EndStmt(Node):
    pass


@dataclass
class RemStmt(Node):
    text: str = ''
