# linebasic package
# This package provides an interpreter for a line-numbered BASIC dialect.
from .errors import BasicError
from .interpreter import run_program, Interpreter, RunResult, Completed, Aborted
from .program import Program

__all__ = [
    'run_program',
    'Interpreter',
    'RunResult',
    'Completed',
    'Aborted',
    'Program',
    'BasicError',
]
