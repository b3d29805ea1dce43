"""
Parser for URM program text.

    in(R1, R2)              # first meaningful line: input registers
    if R2 == 0 goto 5;      # 1
    R2--;                   # 2
    R1++;                   # 3
    goto 1;                 # 4
    out(R1)                 # last meaningful line: output register

Instruction lines are numbered from 1. A jump to len(instructions) + 1
lands on the out(...) line and halts the machine.
"""

import logging
import re
from typing import List, Optional, Tuple

from .errors import (
    DuplicateInputRegister,
    InvalidJumpTarget,
    InvalidRegisterIndex,
    MalformedInputDeclaration,
    MalformedOutputDeclaration,
    MissingInputDeclaration,
    MissingOutputDeclaration,
    UnrecognizedInstruction,
)
from .instructions import Instruction, Op, Program

logger = logging.getLogger(__name__)

# (physical line number, raw line, cleaned line)
SourceLine = Tuple[int, str, str]

_REG = r'R(\w*)'
_TARGET = r'([0-9]+)'

PATTERNS = [
    (Op.INC, re.compile(_REG + r'\s*\+\+')),
    (Op.DEC, re.compile(_REG + r'\s*--')),
    (Op.ZERO, re.compile(_REG + r'\s*=\s*0')),
    (Op.JZ, re.compile(r'if\s+' + _REG + r'\s*==\s*0\s+goto\s+' + _TARGET)),
    (Op.JNZ, re.compile(r'if\s+' + _REG + r'\s*!=\s*0\s+goto\s+' + _TARGET)),
    (Op.JUMP, re.compile(r'goto\s+' + _TARGET)),
]

IN_KEYWORD = re.compile(r'in\b')
OUT_KEYWORD = re.compile(r'out\b')
DECL_BODY = re.compile(r'(?:in|out)\s*\((.*)\)')
DECL_REGISTER = re.compile(_REG)
DIGITS = re.compile(r'[0-9]+')


def strip_comment(line: str) -> str:
    return line.split('#', 1)[0].strip()


def _strip_terminator(clean: str) -> str:
    if clean.endswith(';'):
        return clean[:-1].rstrip()
    return clean


def _register(token: str, line_num: int, raw: str) -> int:
    if not DIGITS.fullmatch(token):
        raise InvalidRegisterIndex(line_num, raw.strip(), f"R{token}")
    index = int(token)
    if index == 0:
        raise InvalidRegisterIndex(line_num, raw.strip(), "registers start at R1")
    return index


class URMParser:

    @staticmethod
    def meaningful_lines(source: str) -> List[SourceLine]:
        lines = []
        for line_num, raw_line in enumerate(source.split('\n'), start=1):
            raw_line = raw_line.rstrip('\r')
            clean = strip_comment(raw_line)
            if clean:
                lines.append((line_num, raw_line, clean))
        return lines

    @staticmethod
    def parse_declaration(line: SourceLine, keyword: re.Pattern,
                          missing: type, malformed: type) -> List[int]:
        line_num, raw, clean = line
        text = raw.strip()
        if not keyword.match(clean):
            raise missing(line_num, text)
        body = DECL_BODY.fullmatch(_strip_terminator(clean))
        if body is None:
            raise malformed(line_num, text)

        registers = []
        for token in body.group(1).split(','):
            match = DECL_REGISTER.fullmatch(token.strip())
            if match is None:
                raise malformed(line_num, text, f"bad register {token.strip()!r}")
            registers.append(_register(match.group(1), line_num, raw))
        return registers

    @staticmethod
    def parse_instruction(line: SourceLine) -> Instruction:
        line_num, raw, clean = line
        body = _strip_terminator(clean)
        for op, pattern in PATTERNS:
            match = pattern.fullmatch(body)
            if match is None:
                continue
            if op is Op.JUMP:
                return Instruction(op, target=int(match.group(1)))
            register = _register(match.group(1), line_num, raw)
            target: Optional[int] = int(match.group(2)) if op in (Op.JZ, Op.JNZ) else None
            return Instruction(op, register, target)
        raise UnrecognizedInstruction(line_num, raw.strip())

    @staticmethod
    def parse(source: str) -> Program:
        """
        Two-pass parser.
        Pass 1 builds the instruction list, pass 2 checks jump targets
        against the finished list so forward jumps need no fixups.
        """
        lines = URMParser.meaningful_lines(source)
        if not lines:
            raise MissingInputDeclaration(0, "", "empty program")

        inputs = URMParser.parse_declaration(
            lines[0], IN_KEYWORD, MissingInputDeclaration, MalformedInputDeclaration)
        if len(lines) < 2:
            raise MissingOutputDeclaration(lines[0][0], "", "program ends after in(...)")
        outputs = URMParser.parse_declaration(
            lines[-1], OUT_KEYWORD, MissingOutputDeclaration, MalformedOutputDeclaration)
        if len(outputs) != 1:
            raise MalformedOutputDeclaration(lines[-1][0], lines[-1][1].strip(), "expected exactly one register")

        seen = set()
        for register in inputs:
            if register in seen:
                raise DuplicateInputRegister(lines[0][0], register, lines[0][1].strip())
            seen.add(register)

        # First pass: build instructions
        body = lines[1:-1]
        instructions = [URMParser.parse_instruction(line) for line in body]

        # Second pass: validate jump targets, halt line included
        halt_line = len(instructions) + 1
        for (line_num, raw, _), instr in zip(body, instructions):
            if instr.is_jump and not 1 <= instr.target <= halt_line:
                raise InvalidJumpTarget(line_num, instr.target, raw.strip(),
                                        f"target {instr.target} outside 1..{halt_line}")

        program = Program(tuple(instructions), tuple(inputs), outputs[0])
        logger.debug("parsed %d instructions, inputs=%s, output=R%d",
                     len(program), list(program.input_registers), program.output_register)
        return program


def parse(source: str) -> Program:
    return URMParser.parse(source)


def parse_file(path) -> Program:
    with open(path, encoding='utf-8') as f:
        return URMParser.parse(f.read())
