from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Iterator, Optional, Tuple

from .errors import InvalidJumpTarget


class Op(Enum):
    INC = auto()
    DEC = auto()
    ZERO = auto()
    JZ = auto()
    JNZ = auto()
    JUMP = auto()


class OpCategory(Enum):
    ARITH = auto()    # Writes a register
    CONTROL = auto()  # Sets the program counter


@dataclass(frozen=True)
class OpInfo:
    name: str
    syntax: str
    category: OpCategory
    has_register: bool = True
    has_target: bool = False

    def signature(self) -> str:
        """Return a visual signature showing the operation type"""
        return "→" if self.category is OpCategory.CONTROL else "≈"


# Syntax templates double as the canonical rendering of each form
INSTRUCTIONS: Dict[Op, OpInfo] = {
    Op.INC: OpInfo('Increment', 'R{register}++', OpCategory.ARITH),
    Op.DEC: OpInfo('Decrement', 'R{register}--', OpCategory.ARITH),
    Op.ZERO: OpInfo('Zero', 'R{register} = 0', OpCategory.ARITH),
    Op.JZ: OpInfo('JumpIfZero', 'if R{register} == 0 goto {target}',
                  OpCategory.CONTROL, has_target=True),
    Op.JNZ: OpInfo('JumpIfNonZero', 'if R{register} != 0 goto {target}',
                   OpCategory.CONTROL, has_target=True),
    Op.JUMP: OpInfo('Jump', 'goto {target}', OpCategory.CONTROL, has_register=False, has_target=True),
}


@dataclass(frozen=True)
class Instruction:
    op: Op
    register: Optional[int] = None
    target: Optional[int] = None

    def __post_init__(self):
        info = INSTRUCTIONS[self.op]
        if info.has_register != (self.register is not None):
            raise TypeError(f"{info.name} {'requires' if info.has_register else 'takes no'} register")
        if info.has_target != (self.target is not None):
            raise TypeError(f"{info.name} {'requires' if info.has_target else 'takes no'} target")

    @classmethod
    def increment(cls, register: int) -> 'Instruction':
        return cls(Op.INC, register)

    @classmethod
    def decrement(cls, register: int) -> 'Instruction':
        return cls(Op.DEC, register)

    @classmethod
    def zero(cls, register: int) -> 'Instruction':
        return cls(Op.ZERO, register)

    @classmethod
    def jump_if_zero(cls, register: int, target: int) -> 'Instruction':
        return cls(Op.JZ, register, target)

    @classmethod
    def jump_if_nonzero(cls, register: int, target: int) -> 'Instruction':
        return cls(Op.JNZ, register, target)

    @classmethod
    def jump(cls, target: int) -> 'Instruction':
        return cls(Op.JUMP, target=target)

    @property
    def info(self) -> OpInfo:
        return INSTRUCTIONS[self.op]

    @property
    def is_jump(self) -> bool:
        return self.target is not None

    def __str__(self) -> str:
        return self.info.syntax.format(register=self.register, target=self.target) + ";"

    def describe(self, line_number: int) -> str:
        return f"{line_number}: {self}"


@dataclass(frozen=True)
class Program:
    """A parsed URM program. Instructions are addressed from 1."""
    instructions: Tuple[Instruction, ...]
    input_registers: Tuple[int, ...]
    output_register: int

    def __post_init__(self):
        # Accept any sequence but store tuples so the program stays hashable
        object.__setattr__(self, 'instructions', tuple(self.instructions))
        object.__setattr__(self, 'input_registers', tuple(self.input_registers))
        for line, instr in enumerate(self.instructions, start=1):
            if instr.is_jump and not 1 <= instr.target <= self.halt_line:
                raise InvalidJumpTarget(line, instr.target, str(instr),
                                        f"target {instr.target} outside 1..{self.halt_line}")

    def __len__(self) -> int:
        return len(self.instructions)

    def __getitem__(self, line: int) -> Instruction:
        if not 1 <= line <= len(self.instructions):
            raise IndexError(f"no instruction at line {line}")
        return self.instructions[line - 1]

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self.instructions)

    @property
    def halt_line(self) -> int:
        return len(self.instructions) + 1

    def input_line(self) -> str:
        return "in(" + ", ".join(f"R{r}" for r in self.input_registers) + ")"

    def output_line(self) -> str:
        return f"out(R{self.output_register})"

    def to_source(self) -> str:
        lines = [self.input_line()]
        lines.extend(str(instr) for instr in self.instructions)
        lines.append(self.output_line())
        return "\n".join(lines) + "\n"
