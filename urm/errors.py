"""Exceptions raised by the URM parser and machine."""

from enum import Enum
from typing import Any


class ErrorCode(Enum):
    NONE = 0
    MISSING_INPUT = 1
    MALFORMED_INPUT = 2
    MISSING_OUTPUT = 3
    MALFORMED_OUTPUT = 4
    UNRECOGNIZED_INSTRUCTION = 5
    INVALID_REGISTER = 6
    INVALID_JUMP = 7
    DUPLICATE_INPUT = 8
    INPUT_ARITY = 9
    INVALID_INPUT = 10
    STEP_LIMIT = 11


class URMError(Exception):
    code = ErrorCode.NONE


# === PARSE-TIME ERRORS ===

class ParseError(URMError, ValueError):
    """Base class for errors in program text. Carries the offending line."""
    reason = "parse error"

    def __init__(self, line_number: int, text: str = "", detail: str = ""):
        self.line_number = line_number
        self.text = text
        self.detail = detail
        super().__init__(self._message())

    def _message(self) -> str:
        msg = self.reason
        if self.detail:
            msg += f" ({self.detail})"
        if self.line_number:
            msg += f" at line {self.line_number}"
        if self.text:
            msg += f": {self.text!r}"
        return msg


class MissingInputDeclaration(ParseError):
    code = ErrorCode.MISSING_INPUT
    reason = "missing input declaration 'in(R1, ...)'"


class MalformedInputDeclaration(ParseError):
    code = ErrorCode.MALFORMED_INPUT
    reason = "malformed input declaration"


class MissingOutputDeclaration(ParseError):
    code = ErrorCode.MISSING_OUTPUT
    reason = "missing output declaration 'out(R<k>)'"


class MalformedOutputDeclaration(ParseError):
    code = ErrorCode.MALFORMED_OUTPUT
    reason = "malformed output declaration"


class UnrecognizedInstruction(ParseError):
    code = ErrorCode.UNRECOGNIZED_INSTRUCTION
    reason = "unrecognized instruction"


class InvalidRegisterIndex(ParseError):
    code = ErrorCode.INVALID_REGISTER
    reason = "invalid register index"


class InvalidJumpTarget(ParseError):
    code = ErrorCode.INVALID_JUMP
    reason = "invalid jump target"

    def __init__(self, line_number: int, target: int, text: str = "", detail: str = ""):
        self.target = target
        super().__init__(line_number, text, detail or f"target {target}")


class DuplicateInputRegister(ParseError):
    code = ErrorCode.DUPLICATE_INPUT
    reason = "duplicate input register"

    def __init__(self, line_number: int, register: int, text: str = ""):
        self.register = register
        super().__init__(line_number, text, f"R{register}")


# === RUN-TIME ERRORS ===

class URMRuntimeError(URMError):
    pass


class InputArityMismatch(URMRuntimeError, ValueError):
    code = ErrorCode.INPUT_ARITY

    def __init__(self, expected: int, got: int):
        self.expected = expected
        self.got = got
        super().__init__(f"program expects {expected} inputs, but {got} were provided")


class InvalidInputValue(URMRuntimeError, ValueError):
    code = ErrorCode.INVALID_INPUT

    def __init__(self, index: int, value: Any):
        self.index = index
        self.value = value
        super().__init__(f"input #{index + 1} must be a non-negative integer, got {value!r}")


class StepLimitExceeded(URMRuntimeError):
    code = ErrorCode.STEP_LIMIT

    def __init__(self, limit: int, pc: int = 0):
        self.limit = limit
        self.pc = pc
        super().__init__(f"step limit of {limit} exceeded (pc={pc})")
