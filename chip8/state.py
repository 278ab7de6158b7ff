import logging
from random import Random

from chip8.exceptions import BadFontException, RomTooLargeException
from chip8.fonts import FONT, FONT_SIZE, FONT_START_ADDR

logger = logging.getLogger(__name__)


class MachineState:
    # Constants:
    MAX_MEMORY = 4096
    ADDRESS_MASK = 0x0FFF
    PROGRAM_COUNTER_START = 0x200
    STACK_DEPTH = 16
    NUM_REGISTERS = 16

    def __init__(self, rng=None):

        # The CHIP-8 had 4k (4096 bytes) of memory
        self.memory = bytearray(self.MAX_MEMORY)

        # The CHIP-8 had a series of registers as follows:
        #
        #   1 x 16-bit index register        (I)
        #   1 x 16-bit program counter       (PC)
        #   1 x 8-bit delay timer            (DT)
        #   1 x 8-bit sound timer            (ST)
        #
        #   16 x 8-bit general registers     (V0 - VF)
        #
        # A bytearray refuses anything outside 0-255, so every register write
        # has to be wrapped by the caller before it lands here
        self.GeneralRegisters = bytearray(self.NUM_REGISTERS)

        self.CpuRegisters = {
            'I': 0,
            'PC': self.PROGRAM_COUNTER_START,
        }

        self.Timers = {
            'DT': 0,
            'ST': 0,
        }

        # Saved return addresses, most recent call last
        self.Stack = []

        # Anything with randint(a, b) works, pass random.Random(seed) for
        # reproducible runs
        self.rng = rng if rng is not None else Random()

        self.RESET()

    def RESET(self):
        """
        Blanks out registers, stack and timers and resets the PC to its initial value.
        Memory is left alone so a loaded ROM and font survive a reset.
        """
        for i in range(self.NUM_REGISTERS):
            self.GeneralRegisters[i] = 0

        self.CpuRegisters['PC'] = self.PROGRAM_COUNTER_START
        self.CpuRegisters['I'] = 0

        del self.Stack[:]

        self.Timers['DT'] = 0
        self.Timers['ST'] = 0

    def LOAD_ROM(self, data, offset=PROGRAM_COUNTER_START):
        """
        Copy a program image verbatim into memory, starting at offset
        """
        capacity = self.MAX_MEMORY - offset
        if len(data) > capacity:
            raise RomTooLargeException(len(data), capacity)

        self.memory[offset:offset + len(data)] = data
        logger.debug("Loaded %d bytes at %03X", len(data), offset)

    def LOAD_ROMFILE(self, filename, offset=PROGRAM_COUNTER_START):
        """
        Load the ROM indicated by the filename into memory.
        """
        with open(filename, 'rb') as rom:
            self.LOAD_ROM(rom.read(), offset)

    def LOAD_FONT(self, font=FONT, offset=FONT_START_ADDR):
        """
        Load the hexadecimal digit sprites into the reserved area
        """
        if len(font) != FONT_SIZE:
            raise BadFontException(len(font), FONT_SIZE)

        self.memory[offset:offset + len(font)] = font
        logger.debug("Loaded %d byte font at %03X", len(font), offset)

    def UPDATE_TIMERS(self):
        """
        Decrement both the sound and delay timer, never below 0.
        Called by the host once per frame (60 Hz).
        """
        if self.Timers['DT'] > 0:
            self.Timers['DT'] -= 1

        if self.Timers['ST'] > 0:
            self.Timers['ST'] -= 1

    def READ(self, address):
        return self.memory[address & self.ADDRESS_MASK]

    def WRITE(self, address, value):
        self.memory[address & self.ADDRESS_MASK] = value

    # Debug functions
    def DUMP_MEMORY(self):
        """
        Log every non-zero byte of memory
        """
        for index, value in enumerate(self.memory):
            if value != 0:
                logger.debug("Index: %03X, value: %02X", index, value)
