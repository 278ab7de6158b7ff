class Chip8Exception(Exception):
    """
    Base class for every error raised by the interpreter
    """


class UnknownOpCodeException(Chip8Exception):
    """
    Raised when an opcode does not map to any known instruction
    """

    def __init__(self, opcode, address=None):
        self.opcode = opcode
        self.address = address
        message = "Unknown opcode: {:04X}".format(opcode)
        if address is not None:
            message += " at address {:03X}".format(address)
        super().__init__(message)


class StackUnderflowException(Chip8Exception):
    """
    Raised by 00EE when there is no subroutine to return from
    """

    def __init__(self, opcode, address=None):
        self.opcode = opcode
        self.address = address
        message = "Stack underflow: opcode {:04X}".format(opcode)
        if address is not None:
            message += " at address {:03X}".format(address)
        super().__init__(message)


class StackOverflowException(Chip8Exception):
    """
    Raised by 2NNN when the call stack is already full
    """

    def __init__(self, opcode, address=None, depth=16):
        self.opcode = opcode
        self.address = address
        self.depth = depth
        message = "Stack overflow ({} entries): opcode {:04X}".format(depth, opcode)
        if address is not None:
            message += " at address {:03X}".format(address)
        super().__init__(message)


class RomTooLargeException(Chip8Exception):
    """
    Raised when a program image does not fit into memory
    """

    def __init__(self, size, capacity):
        self.size = size
        self.capacity = capacity
        super().__init__("ROM is {} bytes, only {} bytes available".format(size, capacity))


class BadFontException(Chip8Exception):
    """
    Raised when a font image is not exactly one 5 byte glyph per hex digit
    """

    def __init__(self, size, expected):
        self.size = size
        self.expected = expected
        super().__init__("Font is {} bytes, expected {}".format(size, expected))
