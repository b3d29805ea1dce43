"""
URM - Unlimited Register Machine interpreter
============================================
- Parser for the six-instruction URM language with in(...)/out(...) declarations
- Two-pass validation: jump targets checked against the finished program
- Saturating decrement, registers default to 0, unbounded register indices
- Optional step trace and step limit
"""

from .errors import (
    DuplicateInputRegister,
    ErrorCode,
    InputArityMismatch,
    InvalidInputValue,
    InvalidJumpTarget,
    InvalidRegisterIndex,
    MalformedInputDeclaration,
    MalformedOutputDeclaration,
    MissingInputDeclaration,
    MissingOutputDeclaration,
    ParseError,
    StepLimitExceeded,
    UnrecognizedInstruction,
    URMError,
    URMRuntimeError,
)
from .instructions import INSTRUCTIONS, Instruction, Op, Program
from .machine import (
    DEFAULTS,
    MachineState,
    RunResult,
    TraceEntry,
    URMachine,
    format_registers,
    format_trace,
    listing,
    run,
)
from .parser import URMParser, parse, parse_file

__version__ = '0.1.0'
