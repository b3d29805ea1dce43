"""
URM execution engine.

Registers hold natural numbers and default to 0. DEC at 0 is a no-op.
The machine halts when pc moves past the last instruction, either by
falling through or by jumping to the halt line (len(program) + 1).
Divergent programs run forever unless a step limit is set.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from .errors import InputArityMismatch, InvalidInputValue, StepLimitExceeded
from .instructions import Instruction, Op, Program

logger = logging.getLogger(__name__)

# === MACHINE DEFAULTS ===

DEFAULTS = {
    'max_steps': None,        # None = unbounded
    'listing_context': 2,     # lines shown either side of pc in a windowed listing
    'step_width': 4,
    'pc_width': 3,
    'instr_width': 24,
}

# === STATE ===

@dataclass
class MachineState:
    pc: int = 1
    registers: Dict[int, int] = field(default_factory=dict)
    steps: int = 0
    halted: bool = False


@dataclass(frozen=True)
class TraceEntry:
    step: int
    pc: int
    instruction: Instruction
    registers: Dict[int, int]


@dataclass(frozen=True)
class RunResult:
    registers: Dict[int, int]
    output_register: int
    output: int
    steps: int
    trace: Tuple[TraceEntry, ...] = ()


# === MACHINE ===

class URMachine:
    def __init__(self, max_steps: Optional[int] = DEFAULTS['max_steps'], debug: bool = False):
        if max_steps is not None and max_steps < 0:
            raise ValueError(f"max_steps must be >= 0, got {max_steps}")
        self.max_steps = max_steps
        self.debug = debug
        self.program: Optional[Program] = None
        self.state = MachineState()
        self.execution_trace: List[TraceEntry] = []

    def reset(self):
        self.program = None
        self.state = MachineState()
        self.execution_trace = []

    def load(self, program: Program, inputs: Sequence[int]):
        """Reset the machine and seed the input registers."""
        inputs = list(inputs)
        expected = len(program.input_registers)
        if len(inputs) != expected:
            raise InputArityMismatch(expected, len(inputs))
        for i, value in enumerate(inputs):
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise InvalidInputValue(i, value)

        self.reset()
        self.program = program
        self.state.registers = dict(zip(program.input_registers, inputs))

    def read(self, register: int) -> int:
        return self.state.registers.get(register, 0)

    def check_steps(self):
        if self.max_steps is not None and self.state.steps >= self.max_steps:
            raise StepLimitExceeded(self.max_steps, self.state.pc)

    def execute_instruction(self, instr: Instruction):
        regs = self.state.registers
        op = instr.op

        if op is Op.INC:
            regs[instr.register] = self.read(instr.register) + 1
            self.state.pc += 1
        elif op is Op.DEC:
            regs[instr.register] = max(0, self.read(instr.register) - 1)
            self.state.pc += 1
        elif op is Op.ZERO:
            regs[instr.register] = 0
            self.state.pc += 1
        elif op is Op.JZ:
            self.state.pc = instr.target if self.read(instr.register) == 0 else self.state.pc + 1
        elif op is Op.JNZ:
            self.state.pc = instr.target if self.read(instr.register) != 0 else self.state.pc + 1
        elif op is Op.JUMP:
            self.state.pc = instr.target
        else:
            raise ValueError(f"Unknown op {op!r}")

    def _advance(self) -> Optional[Tuple[int, Instruction]]:
        if self.program is None:
            raise RuntimeError("no program loaded")
        if self.state.halted:
            return None
        if self.state.pc > len(self.program):
            self.state.halted = True
            logger.debug("halted at pc=%d after %d steps", self.state.pc, self.state.steps)
            return None

        self.check_steps()
        pc = self.state.pc
        instr = self.program[pc]
        self.execute_instruction(instr)
        self.state.steps += 1
        return pc, instr

    def step(self) -> Optional[TraceEntry]:
        """Execute one instruction. Returns None once the machine has halted."""
        executed = self._advance()
        if executed is None:
            return None
        pc, instr = executed
        return TraceEntry(self.state.steps, pc, instr, dict(self.state.registers))

    def steps(self, program: Program, inputs: Sequence[int]) -> Iterator[TraceEntry]:
        self.load(program, inputs)
        while True:
            entry = self.step()
            if entry is None:
                return
            yield entry

    def execute(self, program: Program, inputs: Sequence[int]) -> RunResult:
        self.load(program, inputs)
        while not self.state.halted:
            if self.debug:
                entry = self.step()
                if entry is not None:
                    self.execution_trace.append(entry)
            else:
                self._advance()

        registers = dict(self.state.registers)
        registers.setdefault(program.output_register, 0)
        return RunResult(
            registers=registers,
            output_register=program.output_register,
            output=registers[program.output_register],
            steps=self.state.steps,
            trace=tuple(self.execution_trace),
        )

    def get_state(self) -> Dict:
        return {
            'pc': self.state.pc,
            'registers': self.state.registers.copy(),
            'steps': self.state.steps,
            'halted': self.state.halted,
        }

    def dump_trace(self) -> str:
        return format_trace(self.execution_trace)


def run(program: Program, inputs: Sequence[int], debug: bool = False,
        max_steps: Optional[int] = DEFAULTS['max_steps']) -> RunResult:
    return URMachine(max_steps=max_steps, debug=debug).execute(program, inputs)


# === RENDERING ===

def format_registers(registers: Mapping[int, int]) -> str:
    if not registers:
        return "(empty)"
    return " ".join(f"R{r}={v}" for r, v in registers.items())


def format_trace(trace: Sequence[TraceEntry]) -> str:
    if not trace:
        return "No execution trace"
    sw, pw, iw = DEFAULTS['step_width'], DEFAULTS['pc_width'], DEFAULTS['instr_width']
    lines = []
    for entry in trace:
        sig = entry.instruction.info.signature()
        lines.append(
            f"step {entry.step:0{sw}d} | pc {entry.pc:0{pw}d} | "
            f"{sig} {str(entry.instruction):<{iw}} | {format_registers(entry.registers)}"
        )
    return "\n".join(lines)


def listing(program: Program, pc: Optional[int] = None, context: Optional[int] = None) -> str:
    """
    Numbered program listing. Line 0 is in(...), the halt line is out(...).
    With pc set, that line is marked '->' and only `context` lines either
    side of it are shown (DEFAULTS['listing_context'] when context is None).
    """
    rows = [(0, program.input_line())]
    rows.extend((n, str(instr)) for n, instr in enumerate(program.instructions, start=1))
    rows.append((program.halt_line, program.output_line()))

    if pc is not None:
        if context is None:
            context = DEFAULTS['listing_context']
        rows = [row for row in rows if abs(row[0] - pc) <= context]

    width = len(str(program.halt_line))
    lines = []
    for n, text in rows:
        marker = "->" if n == pc else "  "
        lines.append(f"{marker} {n:>{width}}: {text}")
    return "\n".join(lines)
