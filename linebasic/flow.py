"""Control flow for line-numbered programs.

Every executed statement hands back a directive telling the driver how
to move the cursor: `Advance` to the next line in order, `JumpTo` a
given line, or `Terminate` the run. `ControlFlow` resolves directives to
the next line number and owns the run's WHILE/WEND loop bookkeeping.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Optional, Union

from .errors import UnmatchedLoopError
from .lexer import TokenType, leading_keyword


@dataclass(frozen=True)
class Advance:
    pass


@dataclass(frozen=True)
class JumpTo:
    line: int


@dataclass(frozen=True)
class Terminate:
    pass


Directive = Union[Advance, JumpTo, Terminate]

ADVANCE = Advance()
TERMINATE = Terminate()


class LineIndex:
    """Sequential positions of the line numbers of one program snapshot."""
    def __init__(self, numbers):
        self.numbers: List[int] = sorted(numbers)
        self.positions: Dict[int, int] = {number: i for i, number in enumerate(self.numbers)}

    def __contains__(self, number: int) -> bool:
        return number in self.positions

    def __len__(self) -> int:
        return len(self.numbers)

    def first(self) -> Optional[int]:
        return self.numbers[0] if self.numbers else None

    def position(self, number: int) -> int:
        return self.positions[number]

    def successor(self, number: int) -> Optional[int]:
        """Smallest line number strictly greater than `number`."""
        i = bisect.bisect_right(self.numbers, number)
        return self.numbers[i] if i < len(self.numbers) else None

    def following(self, number: int) -> Iterator[int]:
        """Line numbers after `number`, in order."""
        i = bisect.bisect_right(self.numbers, number)
        return iter(self.numbers[i:])


class ControlFlow:
    """Moves the execution cursor for a single run of a program."""
    def __init__(self, program: Mapping[int, str], index: Optional[LineIndex] = None):
        self.program = program
        self.index = index if index is not None else LineIndex(program.keys())
        # line numbers of the WHILE statements whose bodies are executing
        self.loop_stack: List[int] = []

    def reset(self):
        self.loop_stack.clear()

    def first_line(self) -> Optional[int]:
        return self.index.first()

    def next_line(self, current: int, directive: Directive) -> Optional[int]:
        """Resolve a directive into the next cursor value; None ends the run."""
        if isinstance(directive, Advance):
            return self.index.successor(current)
        if isinstance(directive, JumpTo):
            # only IF/ELSE produce unchecked targets; a missing one ends the run
            if directive.line in self.index:
                return directive.line
            return None
        if isinstance(directive, Terminate):
            return None
        raise TypeError(f"unknown directive {directive!r}")

    def enter_loop(self, line: int, guard: bool) -> Directive:
        """Decide where a WHILE statement at `line` continues."""
        if guard:
            if not self.loop_stack or self.loop_stack[-1] != line:
                self.loop_stack.append(line)
            return ADVANCE
        if self.loop_stack and self.loop_stack[-1] == line:
            self.loop_stack.pop()
        wend_line = self.find_wend(line)
        after = self.index.successor(wend_line)
        if after is None:
            return TERMINATE
        return JumpTo(after)

    def end_loop(self, line: int) -> Directive:
        """Send a WEND at `line` back to the WHILE that opened its loop."""
        if not self.loop_stack:
            raise UnmatchedLoopError(f"WEND at line {line} without matching WHILE")
        return JumpTo(self.loop_stack[-1])

    def find_wend(self, line: int) -> int:
        """Find the WEND closing the WHILE at `line`, skipping nested loops."""
        depth = 0
        for number in self.index.following(line):
            keyword = leading_keyword(self.program[number])
            if keyword is TokenType.WHILE:
                depth += 1
            elif keyword is TokenType.WEND:
                if depth == 0:
                    return number
                depth -= 1
        raise UnmatchedLoopError(f"WHILE at line {line} without matching WEND")
