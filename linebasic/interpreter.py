"""Interpreter for line-numbered BASIC programs.

This module implements the evaluator, the statement executor and the
program driver. A run tokenizes and parses each line as it is reached,
executes the statement against the run's symbol store and asks the
control-flow engine for the next line. Every run gets its own
`RunContext`, so no variables survive from one run to the next.
"""

from __future__ import annotations

import builtins
import math
import sys
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, TextIO, Union

from .ast import (
    Node, Number, Variable, Negate, Expr, Condition,
    LetStmt, PrintStmt, InputStmt, IfStmt, GotoStmt,
    WhileStmt, WendStmt, EndStmt, RemStmt,
)
from .environment import SymbolStore
from .errors import (
    BasicError, BasicSyntaxError, BasicArithmeticError,
    InvalidJumpError, StepLimitError,
)
from .flow import ADVANCE, TERMINATE, ControlFlow, Directive, JumpTo, LineIndex
from .lexer import detokenize, tokenize
from .parser import parse_tokens
from .program import Program
from .values import parse_number, to_string


@dataclass(frozen=True)
class Completed:
    pass


@dataclass(frozen=True)
class Aborted:
    kind: str
    message: str
    line_number: Optional[int] = None

    @classmethod
    def from_error(cls, err: BasicError) -> 'Aborted':
        return cls(err.kind, err.message, err.line_number)

    def __str__(self) -> str:
        if self.line_number is None:
            return f"{self.kind}: {self.message}"
        return f"{self.kind} at line {self.line_number}: {self.message}"


RunStatus = Union[Completed, Aborted]


@dataclass
class RunResult:
    output: List[str]
    status: RunStatus
    variables: Dict[str, float] = field(default_factory=dict)

    @property
    def completed(self) -> bool:
        return isinstance(self.status, Completed)


@dataclass
class RunContext:
    """State owned by one run: variables, control flow, output and trace file."""
    program: Mapping[int, str]
    symbols: SymbolStore
    flow: ControlFlow
    output: List[str] = field(default_factory=list)
    statements: Dict[int, Node] = field(default_factory=dict)
    debug_fp: Optional[TextIO] = None

    @classmethod
    def for_program(cls, program: Mapping[int, str]) -> 'RunContext':
        index = LineIndex(program.keys())
        return cls(program, SymbolStore(), ControlFlow(program, index))

    def close_debug(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None


class Interpreter:
    """Runs BASIC programs; holds configuration only, never run state."""
    def __init__(self, debug_level: int = 0, debug_file: Optional[str] = None,
                 input_fn: Optional[Callable[[str], str]] = None,
                 max_steps: Optional[int] = None):
        self.debug_level = debug_level
        self.debug_file = debug_file
        self.input_fn = input_fn
        self.max_steps = max_steps

    def debug(self, msg: str, ctx: RunContext):
        if self.debug_level > 0:
            if self.debug_file:
                if ctx.debug_fp is None:
                    ctx.debug_fp = open(self.debug_file, 'a', encoding='utf-8')
                ctx.debug_fp.write(msg + '\n')
                ctx.debug_fp.flush()
            else:
                print(msg, file=sys.stderr)

    # Public API
    def run(self, program: Mapping[int, str],
            should_stop: Optional[Callable[[], bool]] = None) -> RunResult:
        """Execute a whole program and report its output and final status.

        Errors never escape: the first BasicError stops the run and is
        reported as an Aborted status carrying the failing line number. An
        expression too deeply nested to evaluate aborts as a SyntaxError.
        The trace file, if any, is closed however the run ends.
        """
        ctx = RunContext.for_program(program)
        steps = 0
        status: RunStatus = Completed()
        cursor = ctx.flow.first_line()
        try:
            self.debug(f"run started: {len(program)} lines", ctx)
            while cursor is not None:
                if should_stop is not None and should_stop():
                    status = Aborted('Cancelled', 'run cancelled', cursor)
                    break
                steps += 1
                try:
                    if self.max_steps is not None and steps > self.max_steps:
                        raise StepLimitError(f'more than {self.max_steps} lines executed')
                    try:
                        directive = self.execute_line(cursor, ctx)
                    except RecursionError:
                        raise BasicSyntaxError('expression nested too deeply') from None
                except BasicError as err:
                    err.line_number = cursor
                    status = Aborted.from_error(err)
                    break
                cursor = ctx.flow.next_line(cursor, directive)
            variables = ctx.symbols.snapshot()
            if isinstance(status, Aborted):
                self.debug(f"run aborted: {status}", ctx)
            else:
                self.debug("run completed", ctx)
        finally:
            ctx.symbols.clear()
            ctx.flow.reset()
            ctx.close_debug()
        return RunResult(ctx.output, status, variables)

    def execute_line(self, line_number: int, ctx: RunContext) -> Directive:
        """Parse (once per run) and execute the statement at `line_number`."""
        text = ctx.program[line_number]
        self.debug(f"Executing line {line_number}: {text}", ctx)
        stmt = ctx.statements.get(line_number)
        if stmt is None:
            tokens = tokenize(text)
            if self.debug_level >= 3:
                self.debug(f"tokens: {detokenize(tokens)}", ctx)
            stmt = parse_tokens(tokens)
            ctx.statements[line_number] = stmt
        return self.execute(stmt, line_number, ctx)

    def execute(self, node: Node, line_number: int, ctx: RunContext) -> Directive:
        if isinstance(node, LetStmt):
            value = self.evaluate(node.expr, ctx.symbols)
            ctx.symbols.set(node.name, value)
            if self.debug_level >= 2:
                self.debug(f"LET {node.name} = {to_string(value)}", ctx)
            return ADVANCE
        if isinstance(node, PrintStmt):
            if node.text is not None:
                ctx.output.append(node.text)
                return ADVANCE
            value = ctx.symbols.lookup(node.variable)
            if value is None:
                ctx.output.append(f"Undefined variable: {node.variable}")
            else:
                ctx.output.append(to_string(value))
            return ADVANCE
        if isinstance(node, InputStmt):
            reader = self.input_fn or builtins.input
            try:
                reply = reader('? ')
            except EOFError:
                reply = ''
            try:
                value = parse_number(reply)
            except ValueError as e:
                raise BasicSyntaxError(str(e))
            ctx.symbols.set(node.name, value)
            return ADVANCE
        if isinstance(node, IfStmt):
            truthy = self.evaluate_condition(node.condition, ctx.symbols)
            if self.debug_level >= 3:
                self.debug(f"if condition -> {truthy}", ctx)
            if truthy:
                return JumpTo(node.target)
            if node.else_target is not None:
                return JumpTo(node.else_target)
            return ADVANCE
        if isinstance(node, GotoStmt):
            if node.target not in ctx.flow.index:
                raise InvalidJumpError(f'GOTO target line {node.target} does not exist')
            if self.debug_level >= 2:
                self.debug(f"GOTO {node.target}", ctx)
            return JumpTo(node.target)
        if isinstance(node, WhileStmt):
            guard = self.evaluate_condition(node.condition, ctx.symbols)
            directive = ctx.flow.enter_loop(line_number, guard)
            if self.debug_level >= 2:
                self.debug(f"WHILE at {line_number}: guard {guard} -> {directive}", ctx)
            return directive
        if isinstance(node, WendStmt):
            return ctx.flow.end_loop(line_number)
        if isinstance(node, EndStmt):
            return TERMINATE
        if isinstance(node, RemStmt):
            return ADVANCE
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def evaluate(self, node: Node, symbols: SymbolStore) -> float:
        if isinstance(node, Number):
            return node.value
        if isinstance(node, Variable):
            return symbols.get(node.name)
        if isinstance(node, Negate):
            return -self.evaluate(node.operand, symbols)
        if isinstance(node, Expr):
            # left fold over the (operator, operand) pairs
            value = self.evaluate(node.first, symbols)
            for op, operand in node.rest:
                value = self.apply_binary_op(op, value, self.evaluate(operand, symbols))
            return value
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def evaluate_condition(self, node: Condition, symbols: SymbolStore) -> bool:
        left = self.evaluate(node.left, symbols)
        right = self.evaluate(node.right, symbols)
        return self.compare(node.op, left, right)

    def apply_binary_op(self, op: str, a: float, b: float) -> float:
        if op == '+':
            return a + b
        if op == '-':
            return a - b
        if op == '*':
            return a * b
        if op == '/':
            if b == 0:
                raise BasicArithmeticError('division by zero')
            return a / b
        if op == '%':
            if b == 0:
                raise BasicArithmeticError('modulo by zero')
            # remainder takes the sign of the dividend
            return math.fmod(a, b)
        raise BasicSyntaxError(f'unknown operator {op}')

    def compare(self, op: str, a: float, b: float) -> bool:
        if op == '<':
            return a < b
        if op == '<=':
            return a <= b
        if op == '>':
            return a > b
        if op == '>=':
            return a >= b
        if op == '=':
            return a == b
        if op == '<>':
            return a != b
        raise BasicSyntaxError(f'unknown comparator {op}')


def run_program(source: str, **options: Any) -> RunResult:
    """Convenience function to run a program from listing text.

    Keyword options are passed to `Interpreter`.
    """
    program = Program.from_listing(source)
    interpreter = Interpreter(**options)
    return interpreter.run(program)
