import logging

from chip8.exceptions import (
    Chip8Exception,
    StackOverflowException,
    StackUnderflowException,
    UnknownOpCodeException,
)
from chip8.fonts import FONT_GLYPH_SIZE, FONT_START_ADDR
from chip8.instruction import decode

logger = logging.getLogger(__name__)


class Architecture:
    """
    The execution engine. It owns no machine state of its own, every call
    to RUN_CYCLE borrows a MachineState for the duration of one instruction.

    The screen and keyboard are shared with the host, which keeps them
    alive and flushes the screen between frames.
    """

    # Constants:
    SPRITE_WIDTH = 8
    FLAG_REGISTER = 0xF

    def __init__(self, screen, keyboard):

        self.screen = screen
        self.keyboard = keyboard

        # The instruction being executed and the address it was fetched from
        self.CurrentOperand = None
        self.CurrentAddress = 0

        # The Operations function by looking at the most significant nibble
        # (The first character after 0x), then the next 3 nibbles are used to define
        # The parameters of the operation (so 0x1333 = JMP 333)
        self.OperationLookupTable = {
            0x0: self.SYS,                         # SUBFUNCTION DEFINED BELOW (CLEAR, RETURN)
            0x1: self.JMP_ADDR,                    # 1NNN - JUMP NNN           (JUMP TO ADDRESS)
            0x2: self.JMP_SBR,                     # 2NNN - CALL NNN           (JUMP TO SUBROUTINE)
            0x3: self.SKIP_REG_E_VAL,              # 3SNN - SKE  VS, NN        (SKIP IF VS == NN)
            0x4: self.SKIP_REG_NE_VAL,             # 4SNN - SKNE VS, NN        (SKIP IF VS != NN)
            0x5: self.SKIP_REG_E_REG,              # 5ST0 - SKE  VS, VT        (SKIP IF VS == VT)
            0x6: self.LD_VAL_REG,                  # 6SNN - LOAD VS, NN        (LOAD NN INTO VS)
            0x7: self.ADD_VAL_REG,                 # 7SNN - ADD  VS, NN        (ADD NN TO VS)
            0x8: self.ELI,                         # SUBFUNCTION DEFINED BELOW (Execute Logical Instruction)
            0x9: self.SKIP_REG_NE_REG,             # 9ST0 - SKNE VS, VT        (SKIP IF VS != VT)
            0xA: self.LD_I_VAL,                    # ANNN - LOAD I, NNN        (LOAD NNN INTO I)
            0xB: self.JMP_V0_VAL,                  # BNNN - JUMP [V0] + NNN    (JUMP TO [V0] + NNN)
            0xC: self.RND_REG,                     # CTNN - RAND VT, NN        (LOAD RANDOM NUMBER INTO VT AFTER AND WITH NN)
            0xD: self.DRAW,                        # DSTN - DRAW VS, VT, N     (DRAW AT VS, VT, N ROWS OF SPRITE IN I)
            0xE: self.KBRD,                        # SUBFUNCTION DEFINED BELOW (Keyboard Routine)
            0xF: self.MSC,                         # SUBFUNCTION DEFINED BELOW (Miscellaneous Routine)
        }

        #  self.SYS gets called when 0x0NNN is loaded into the CPU
        #  The last byte is used to define the system instruction
        self.SYSLookup = {
            0xE0: self.CLEAR,                      # 00E0 - CLS            (CLEAR THE DISPLAY)
            0xEE: self.RETURN,                     # 00EE - RTS            (RETURN FROM SUBROUTINE)
        }

        #  As defined above, self.ELI get called when 0x8NNN is loaded into the CPU
        #  The last nibble is used to define the logical instruction
        self.ELILookup = {
            0x0: self.LD_REG_REG,                  # 8ST0 - LOAD VS, VT   (LOAD VT INTO VS)
            0x1: self.OR,                          # 8ST1 - OR   VS, VT   (LOGICAL 'OR' OF VS AND VT)
            0x2: self.AND,                         # 8ST2 - AND  VS, VT   (LOGICAL 'AND' OF VS AND VT)
            0x3: self.XOR,                         # 8ST3 - XOR  VS, VT   (LOGICAL 'XOR' OF VS AND VT)
            0x4: self.ADD_REG_REG,                 # 8ST4 - ADD  VS, VT   (ADD VT TO VS)
            0x5: self.SUB_REG_REG,                 # 8ST5 - SUB  VS, VT   (VS = VS - VT)
            0x6: self.R_SHFT_REG,                  # 8SN6 - SHR  VS       (RIGHT SHIFT VS)
            0x7: self.SUBN_REG_REG,                # 8ST7 - SUBN VS, VT   (VS = VT - VS)
            0xE: self.L_SHFT_REG,                  # 8SNE - SHL  VS       ( LEFT SHIFT VS)
        }

        #  self.KBRD gets called when 0xENNN is loaded into the CPU
        #  The last nibble is used to define the keyboard instruction
        self.KBRDLookup = {
            0x1: self.SKIP_KEY_UP,                 # ESA1 - SKUP VS       (IF KEY IN VS NOT PRESSED, SKIP LINE)
            0xE: self.SKIP_KEY_DOWN,               # ES9E - SKPR VS       (IF KEY IN VS IS PRESSED, SKIP LINE)
        }

        #  As defined above, self.MSC get called when 0xFNNN is loaded into the CPU
        #  The last byte is used to define the logical instruction
        self.MSCLookup = {
            0x07: self.LD_DT_REG,                   # FT07 - LOAD VT, DT    (LOAD DT INTO VT)
            0x0A: self.WAIT_KEYPRESS,               # FT0A - KEYD VT        (WAIT FOR KEYPRESS, LOAD INTO VT)
            0x15: self.LD_REG_DT,                   # FS15 - LOAD DT, VS    (LOAD VS INTO DT)
            0x18: self.LD_REG_ST,                   # FS18 - LOAD ST, VS    (LOAD VS INTO ST)
            0x1E: self.ADD_REG_I,                   # FS1E - ADD  I, VS     (ADD VS TO I)
            0x29: self.LD_I_REG,                    # FS29 - LOAD I, VS     (LOAD SPRITE IN VS INTO I)
            0x33: self.STR_BCD_MEM,                 # FS33 - BCD            (STORE BINARY CODED DECIMAL IN VS INTO MEMORY)
            0x55: self.STR_REG_MEM,                 # FS55 - STOR [I], VS   (STORE V0 to VX INTO MEMORY[I])
            0x65: self.LD_REG_MEM,                  # FS65 - LOAD VS, [I]   (LOAD V0 to VX FROM MEMORY[I])
        }

    def RUN_CYCLE(self, state):
        """
        Fetch, decode and execute the instruction at [PC].

        The PC is moved past the instruction before it runs, so jumps and
        calls simply overwrite it and skips only add another 2. If the
        instruction raises, the PC is put back on the faulting instruction.

        Returns the decoded instruction.
        """

        # Getting the byte at index [PC]
        # Shifting it 8 bits to the left to make it most significant
        # Adding the next byte to it for subinstructions
        address = state.CpuRegisters['PC']
        operand = decode((state.READ(address) << 8) | state.READ(address + 1))

        self.CurrentOperand = operand
        self.CurrentAddress = address
        state.CpuRegisters['PC'] = (address + 2) & state.ADDRESS_MASK

        logger.debug("Execute %03X: %04X", address, operand.raw)

        try:
            self.OperationLookupTable[operand.op_type](state, operand)
        except Chip8Exception:
            state.CpuRegisters['PC'] = address
            raise

        return operand

    def DISPATCH(self, table, selector, state, op):
        try:
            handler = table[selector]
        except KeyError:
            # If operation not found, throw exception
            raise UnknownOpCodeException(op.raw, self.CurrentAddress) from None

        handler(state, op)

    @staticmethod
    def SKIP(state):
        state.CpuRegisters['PC'] = (state.CpuRegisters['PC'] + 2) & state.ADDRESS_MASK

    def SET_FLAG(self, state, value):
        state.GeneralRegisters[self.FLAG_REGISTER] = value

    def SYS(self, state, op):
        """
        Opcodes starting with a 0 are one of the following instructions:
            00E0 - Clear the display
            00EE - Return from subroutine

        Everything else (including 0NNN machine code calls) is rejected.
        """
        self.DISPATCH(self.SYSLookup, op.nn, state, op)

    def ELI(self, state, op):
        """
        Defining the ELI Operation from the Lookup Table
        """
        self.DISPATCH(self.ELILookup, op.n, state, op)

    def KBRD(self, state, op):
        """
        Runs the correct keyboard routine based on the last nibble
        """
        self.DISPATCH(self.KBRDLookup, op.n, state, op)

    def MSC(self, state, op):
        """
        Will execute the subroutines defined in self.MSCLookup
        """
        self.DISPATCH(self.MSCLookup, op.nn, state, op)

    def CLEAR(self, state, op):
        """
        Called by 00E0 instruction, every cell goes to the secondary color
        """
        self.screen.CLEAR()

    def RETURN(self, state, op):
        """
        Called by 00EE instruction

        Return from subroutine. Pop the last saved address off of the stack,
        and set the program counter to the value popped.
        """
        if not state.Stack:
            raise StackUnderflowException(op.raw, self.CurrentAddress)

        state.CpuRegisters['PC'] = state.Stack.pop()

    def JMP_ADDR(self, state, op):
        """
        Jump instruction to address

        0x1NNN = JUMP TO NNN
        """
        state.CpuRegisters['PC'] = op.nnn

    def JMP_SBR(self, state, op):
        """
        Jump instruction to subroutine. Save the current program counter on the stack,
        then jump to NNN

        0x2NNN - CALL NNN Subroutine
        """
        if len(state.Stack) >= state.STACK_DEPTH:
            raise StackOverflowException(op.raw, self.CurrentAddress, state.STACK_DEPTH)

        state.Stack.append(state.CpuRegisters['PC'])
        state.CpuRegisters['PC'] = op.nnn

    def SKIP_REG_E_VAL(self, state, op):
        """
        Triggered by 0x3SNN = SKIP IF REGISTER VS == NN
        """
        if state.GeneralRegisters[op.x] == op.nn:
            self.SKIP(state)

    def SKIP_REG_NE_VAL(self, state, op):
        """
        Triggered by 0x4SNN = SKIP IF REGISTER VS != NN
        """
        if state.GeneralRegisters[op.x] != op.nn:
            self.SKIP(state)

    def SKIP_REG_E_REG(self, state, op):
        """
        Triggered by 0x5ST0 = SKIP IF REGISTER VS == VT
        """
        if state.GeneralRegisters[op.x] == state.GeneralRegisters[op.y]:
            self.SKIP(state)

    def SKIP_REG_NE_REG(self, state, op):
        """
        Triggered by 0x9ST0 = SKIP IF REGISTER VS != VT
        """
        if state.GeneralRegisters[op.x] != state.GeneralRegisters[op.y]:
            self.SKIP(state)

    def LD_VAL_REG(self, state, op):
        """
        Triggered by 0x6SNN = LOAD NN into VS
        """
        state.GeneralRegisters[op.x] = op.nn

    def ADD_VAL_REG(self, state, op):
        """
        Triggered by 0x7SNN = VS = [VS] + NN
        Wraps around on overflow, VF is left untouched
        """
        state.GeneralRegisters[op.x] = (state.GeneralRegisters[op.x] + op.nn) & 0xFF

    def LD_REG_REG(self, state, op):
        """
        PART OF ELI: Triggered by 0x8ST0 = VS = [VT]
        """
        state.GeneralRegisters[op.x] = state.GeneralRegisters[op.y]

    def OR(self, state, op):
        """
        PART OF ELI: Triggered by 0x8ST1 = VS = VS | VT
        """
        state.GeneralRegisters[op.x] |= state.GeneralRegisters[op.y]

    def AND(self, state, op):
        """
        PART OF ELI: Triggered by 0x8ST2 = VS = VS & VT
        """
        state.GeneralRegisters[op.x] &= state.GeneralRegisters[op.y]

    def XOR(self, state, op):
        """
        PART OF ELI: Triggered by 0x8ST3 = VS = VS ^ VT
        """
        state.GeneralRegisters[op.x] ^= state.GeneralRegisters[op.y]

    def ADD_REG_REG(self, state, op):
        """
        PART OF ELI: Triggered by 0x8ST4 = VS = VS + [VT]
        If carry is generated, we need to set the carry flag in VF (hardcoded)
        """
        added_value = state.GeneralRegisters[op.x] + state.GeneralRegisters[op.y]

        state.GeneralRegisters[op.x] = added_value & 0xFF
        self.SET_FLAG(state, 1 if added_value > 0xFF else 0)

    def SUB_REG_REG(self, state, op):
        """
        PART OF ELI: Triggered by 0x8ST5 = VS = [VS] - [VT]

        Need to set the carry flag in VF (hardcoded) if a borrow is not generated
        """
        first = state.GeneralRegisters[op.x]
        second = state.GeneralRegisters[op.y]

        state.GeneralRegisters[op.x] = (first - second) & 0xFF
        self.SET_FLAG(state, 1 if first >= second else 0)

    def SUBN_REG_REG(self, state, op):
        """
        PART OF ELI: Triggered by 0x8ST7 = VS = [VT] - [VS]

        Need to set the carry flag in VF (hardcoded) if a borrow is not generated
        """
        first = state.GeneralRegisters[op.x]
        second = state.GeneralRegisters[op.y]

        state.GeneralRegisters[op.x] = (second - first) & 0xFF
        self.SET_FLAG(state, 1 if second >= first else 0)

    def R_SHFT_REG(self, state, op):
        """
        PART OF ELI: Triggered by 0x8S06 = VS = VS >> 1 and VF = VS & 0x1 (bit 0 not byte 0)
        """
        value = state.GeneralRegisters[op.x]

        state.GeneralRegisters[op.x] = value >> 1
        self.SET_FLAG(state, value & 0x1)

    def L_SHFT_REG(self, state, op):
        """
        PART OF ELI: Triggered by 0x8S0E = VS = VS << 1 and VF = VS & 0x80 (bit 7 not byte 7)
        """
        value = state.GeneralRegisters[op.x]

        state.GeneralRegisters[op.x] = (value << 1) & 0xFF
        self.SET_FLAG(state, (value & 0x80) >> 7)

    def LD_I_VAL(self, state, op):
        """
        Triggered by 0xANNN = LOAD NNN into I
        """
        state.CpuRegisters['I'] = op.nnn

    def JMP_V0_VAL(self, state, op):
        """
        Triggered by 0xBNNN = JUMP to [V0] + NNN
        """
        state.CpuRegisters['PC'] = (op.nnn + state.GeneralRegisters[0x0]) & state.ADDRESS_MASK

    def RND_REG(self, state, op):
        """
        Triggered by 0xCSNN = Generate a random number, AND it with NN and save in VS
        Random number must be between 0 and 255
        """
        state.GeneralRegisters[op.x] = state.rng.randint(0, 255) & op.nn

    def SKIP_KEY_DOWN(self, state, op):
        """
        PART OF KBRD - Triggered by 0xES9E = SKIP IF THE KEY IN VS IS PRESSED
        """
        if self.keyboard.IS_KEY_DOWN(state.GeneralRegisters[op.x]):
            self.SKIP(state)

    def SKIP_KEY_UP(self, state, op):
        """
        PART OF KBRD - Triggered by 0xESA1 = SKIP IF THE KEY IN VS IS NOT PRESSED
        """
        if not self.keyboard.IS_KEY_DOWN(state.GeneralRegisters[op.x]):
            self.SKIP(state)

    def LD_DT_REG(self, state, op):
        """
        PART OF MSC - Triggered by 0xFS07 = LOAD DT INTO VS
        """
        state.GeneralRegisters[op.x] = state.Timers['DT']

    def WAIT_KEYPRESS(self, state, op):
        """
        PART OF MSC - Triggered by 0xFS0A = WAIT FOR KEYPRESS, STORE KEYPRESS INTO VS

        Nothing blocks here: the lowest held key is stored, and if no key is
        held the PC is wound back so this instruction runs again next cycle.
        The host keeps drawing frames and polling input in between.
        """
        for code in range(16):
            if self.keyboard.IS_KEY_DOWN(code):
                state.GeneralRegisters[op.x] = code
                return

        state.CpuRegisters['PC'] = (state.CpuRegisters['PC'] - 2) & state.ADDRESS_MASK

    def LD_REG_DT(self, state, op):
        """
        PART OF MSC - Triggered by 0xFS15 = LOAD VS INTO DT
        """
        state.Timers['DT'] = state.GeneralRegisters[op.x]

    def LD_REG_ST(self, state, op):
        """
        PART OF MSC - Triggered by 0xFS18 = LOAD VS INTO ST
        """
        state.Timers['ST'] = state.GeneralRegisters[op.x]

    def ADD_REG_I(self, state, op):
        """
        PART OF MSC - Triggered by 0xFS1E = I = [VS] + [I]

        VF is set when the sum leaves the 12-bit address space and is
        otherwise left as it was.
        """
        added_value = state.CpuRegisters['I'] + state.GeneralRegisters[op.x]

        if added_value > state.ADDRESS_MASK:
            self.SET_FLAG(state, 1)

        state.CpuRegisters['I'] = added_value & state.ADDRESS_MASK

    def LD_I_REG(self, state, op):
        """
        PART OF MSC - Triggered by 0xFS29 = POINT I AT THE FONT SPRITE FOR THE DIGIT IN VS
        All font sprites are 5 bytes long, so the location of the sprite is base + index*5
        """
        state.CpuRegisters['I'] = FONT_START_ADDR + state.GeneralRegisters[op.x] * FONT_GLYPH_SIZE

    def STR_BCD_MEM(self, state, op):
        """
        PART OF MSC - Triggered by 0xFS33 = TAKE Value in VS and place as follow into memory:

            N*10^2 = self.memory[i]
            N*10^1 = self.memory[i+1]
            N*10^0 = self.memory[i+2]

        """
        value = state.GeneralRegisters[op.x]
        address = state.CpuRegisters['I']

        state.WRITE(address, value // 100)
        state.WRITE(address + 1, (value // 10) % 10)
        state.WRITE(address + 2, value % 10)

    def STR_REG_MEM(self, state, op):
        """
        PART OF MSC - Triggered by 0xFS55 = STORE V0-VS INTO MEMORY AT [I], I is unchanged
        """
        for i in range(op.x + 1):
            state.WRITE(state.CpuRegisters['I'] + i, state.GeneralRegisters[i])

    def LD_REG_MEM(self, state, op):
        """
        PART OF MSC - Triggered by 0xFS65 = LOAD V0-VS FROM MEMORY AT [I], I is unchanged
        """
        for i in range(op.x + 1):
            state.GeneralRegisters[i] = state.READ(state.CpuRegisters['I'] + i)

    def DRAW(self, state, op):
        """
        The draw method for actually drawing output to the screen
        Triggered by DSTN - DRAW VS, VT, N

        Works by checking what sprite is saved in the index register ([I])
        at the x and y coordinates, where x = [VS], y = [VT].

        The starting point wraps around the screen, but the sprite itself is
        clipped at the right and bottom edges. The drawing works by XORing the
        individual pixels: any lit pixel that gets turned off sets VF to 1.
        The N value is used to define the height of the sprite and the width is
        hardcoded to be 8-bits

        Since the index register points to memory, say the memory looks like this:

        self.memory[0]:     0 1 1 1 1 1 0 0
        self.memory[1]:     0 1 0 0 0 0 0 0
        self.memory[2]:     0 1 0 0 0 0 0 0
        self.memory[3]:     0 1 1 1 1 1 0 0
        self.memory[4]:     0 1 0 0 0 0 0 0
        self.memory[5]:     0 1 0 0 0 0 0 0
        self.memory[6]:     0 1 1 1 1 1 0 0

        where the 1's form the shape of an E, then having the index point to self.memory[0]
        and N as 7 would tell the emulator to draw the E by iterating from 0-6 in the memory
        """
        width = self.screen.WIDTH
        height = self.screen.HEIGHT

        x = state.GeneralRegisters[op.x] % width
        y = state.GeneralRegisters[op.y] % height

        self.SET_FLAG(state, 0)

        for y_layer in range(op.n):

            y_coordinate = y + y_layer
            if y_coordinate >= height:
                break

            pixel_row = state.READ(state.CpuRegisters['I'] + y_layer)

            for x_layer in range(self.SPRITE_WIDTH):

                x_coordinate = x + x_layer
                if x_coordinate >= width:
                    break

                if not (pixel_row >> (7 - x_layer)) & 0x1:
                    continue

                if self.screen.PIXEL_IS_PRIMARY(y_coordinate, x_coordinate):
                    self.SET_FLAG(state, 1)
                    self.screen.WRITE_PIXEL(y_coordinate, x_coordinate, False)
                else:
                    self.screen.WRITE_PIXEL(y_coordinate, x_coordinate, True)
