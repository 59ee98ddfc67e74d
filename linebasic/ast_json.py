"""JSON serialization for BASIC statement ASTs.

This module converts AST dataclasses into plain Python dict/list
structures suitable for JSON encoding, for the `--emit-ast` CLI mode.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

from .ast import (
    Number,
    Variable,
    Negate,
    Expr,
    Condition,
    LetStmt,
    PrintStmt,
    InputStmt,
    IfStmt,
    GotoStmt,
    WhileStmt,
    WendStmt,
    EndStmt,
    RemStmt,
)
from .errors import BasicError, BasicSyntaxError
from .parser import parse_line


def ast_to_obj(node: Any) -> Any:
    # Primitives
    if node is None:
        return None
    if isinstance(node, (int, float, str, bool)):
        return node

    if isinstance(node, Number):
        return {"type": "Number", "value": node.value}
    if isinstance(node, Variable):
        return {"type": "Variable", "name": node.name}
    if isinstance(node, Negate):
        return {"type": "Negate", "operand": ast_to_obj(node.operand)}
    if isinstance(node, Expr):
        return {
            "type": "Expr",
            "first": ast_to_obj(node.first),
            "rest": [{"op": op, "operand": ast_to_obj(operand)} for op, operand in node.rest],
        }
    if isinstance(node, Condition):
        return {"type": "Condition", "op": node.op, "left": ast_to_obj(node.left), "right": ast_to_obj(node.right)}
    if isinstance(node, LetStmt):
        return {"type": "LetStmt", "name": node.name, "expr": ast_to_obj(node.expr), "explicit": node.explicit}
    if isinstance(node, PrintStmt):
        return {"type": "PrintStmt", "text": node.text, "variable": node.variable}
    if isinstance(node, InputStmt):
        return {"type": "InputStmt", "name": node.name}
    if isinstance(node, IfStmt):
        return {
            "type": "IfStmt",
            "condition": ast_to_obj(node.condition),
            "target": node.target,
            "else_target": node.else_target,
        }
    if isinstance(node, GotoStmt):
        return {"type": "GotoStmt", "target": node.target}
    if isinstance(node, WhileStmt):
        return {"type": "WhileStmt", "condition": ast_to_obj(node.condition)}
    if isinstance(node, WendStmt):
        return {"type": "WendStmt"}
    if isinstance(node, EndStmt):
        return {"type": "EndStmt"}
    if isinstance(node, RemStmt):
        return {"type": "RemStmt", "text": node.text}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def program_to_obj(program: Mapping[int, str]) -> List[Dict[str, Any]]:
    """Parse every line of a program and serialize the statements in line order.

    Parse errors propagate as BasicError with the failing line number set.
    """
    result: List[Dict[str, Any]] = []
    for number in sorted(program):
        try:
            stmt = parse_line(program[number])
            entry = {"line": number, "statement": ast_to_obj(stmt)}
        except RecursionError:
            raise BasicSyntaxError("expression nested too deeply", number) from None
        except BasicError as err:
            err.line_number = number
            raise
        result.append(entry)
    return result
