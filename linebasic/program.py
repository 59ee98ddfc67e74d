"""Line tables for BASIC programs.

A program is a mapping from positive line numbers to the source text of
one statement. `Program` keeps its lines sorted by number regardless of
the order they were entered, and reads and writes the plain text
listing format used for program files: one `<number> <code>` pair per
line.
"""

from __future__ import annotations

import bisect
from collections.abc import Mapping
from typing import Dict, Iterable, Iterator, List, Optional, Tuple


class Program(Mapping):
    """Editable line table, iterated in ascending line order."""
    def __init__(self, lines: Optional[Iterable[Tuple[int, str]]] = None):
        self._lines: Dict[int, str] = {}
        self._numbers: List[int] = []
        if lines is not None:
            for number, text in lines:
                self.set_line(number, text)

    def __getitem__(self, number: int) -> str:
        return self._lines[number]

    def __iter__(self) -> Iterator[int]:
        return iter(list(self._numbers))

    def __len__(self) -> int:
        return len(self._numbers)

    def __repr__(self) -> str:
        return f"Program({len(self)} lines)"

    def set_line(self, number: int, text: str):
        """Add or replace a line. Blank text deletes the line."""
        if not isinstance(number, int) or isinstance(number, bool) or number < 1:
            raise ValueError(f'line number must be a positive integer, got {number!r}')
        text = text.strip()
        if not text:
            self.delete_line(number)
            return
        if number not in self._lines:
            bisect.insort(self._numbers, number)
        self._lines[number] = text

    def delete_line(self, number: int):
        if number in self._lines:
            del self._lines[number]
            self._numbers.remove(number)

    def clear(self):
        self._lines.clear()
        self._numbers.clear()

    def to_listing(self) -> str:
        return ''.join(f"{number} {self._lines[number]}\n" for number in self._numbers)

    @classmethod
    def from_listing(cls, source: str) -> 'Program':
        return cls(parse_listing(source))


def parse_listing_line(text: str) -> Tuple[int, str]:
    """Split one listing line into its line number and statement text."""
    stripped = text.strip()
    head, _, code = stripped.partition(' ')
    if not (head.isascii() and head.isdigit()) or int(head) < 1:
        raise ValueError(f'invalid program line {text.rstrip()!r}: expected "<number> <code>"')
    return int(head), code.strip()


def parse_listing(source: str) -> List[Tuple[int, str]]:
    """Parse listing text into (number, code) pairs, skipping blank lines.

    A later line with the same number replaces an earlier one when the
    pairs are loaded into a Program.
    """
    lines: List[Tuple[int, str]] = []
    for text in source.splitlines():
        if not text.strip():
            continue
        lines.append(parse_listing_line(text))
    return lines
