from typing import Optional


class BasicError(Exception):
    """Base class for errors raised while running a BASIC program.

    `kind` names the error in run reports. The driver fills in
    `line_number` once it knows which line failed.
    """
    kind = 'BasicError'

    def __init__(self, message: str, line_number: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line_number = line_number

    def __str__(self) -> str:
        if self.line_number is None:
            return f"{self.kind}: {self.message}"
        return f"{self.kind} at line {self.line_number}: {self.message}"


class LexError(BasicError):
    kind = 'LexError'


class BasicSyntaxError(BasicError):
    kind = 'SyntaxError'


class UndefinedVariableError(BasicError):
    kind = 'UndefinedVariableError'


class BasicArithmeticError(BasicError, ArithmeticError):
    kind = 'ArithmeticError'


class InvalidJumpError(BasicError):
    kind = 'InvalidJumpError'


class UnmatchedLoopError(BasicError):
    kind = 'UnmatchedLoopError'


class StepLimitError(BasicError):
    kind = 'StepLimitError'
