from random import Random

import pytest

from chip8.architecture import Architecture
from chip8.devices import FrameBuffer, KeyState
from chip8.state import MachineState


class FixedRandom:
    """
    Stand-in for random.Random that always rolls the same byte
    """

    def __init__(self, value):
        self.value = value

    def randint(self, a, b):
        return self.value


@pytest.fixture
def state():
    return MachineState(rng=Random(1234))


@pytest.fixture
def screen():
    return FrameBuffer()


@pytest.fixture
def keys():
    return KeyState()


@pytest.fixture
def cpu(screen, keys):
    return Architecture(screen, keys)


@pytest.fixture
def run(cpu, state):
    """
    Write opcodes at the current PC and execute that many cycles
    """

    def _run(*opcodes):
        address = state.CpuRegisters['PC']
        for offset, opcode in enumerate(opcodes):
            state.memory[address + offset * 2] = opcode >> 8
            state.memory[address + offset * 2 + 1] = opcode & 0xFF

        for _ in opcodes:
            cpu.RUN_CYCLE(state)

    return _run
