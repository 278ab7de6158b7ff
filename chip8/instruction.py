class Instruction(object):
    """
    A single decoded 16-bit CHIP-8 word.

    Every instruction is split into nibbles, the first nibble selects the
    operation family and the remaining three are its parameters:

        0xDXYN
          |||+-- N   (bits 3-0)
          ||+--- Y   (bits 7-4)
          |+---- X   (bits 11-8)
          +----- OP  (bits 15-12)

        NN  = the low byte      (bits 7-0)
        NNN = the low 12 bits   (bits 11-0)
    """

    __slots__ = ('raw', 'op_type', 'x', 'y', 'n')

    def __init__(self, raw):
        self.raw = raw & 0xFFFF
        self.op_type = (self.raw & 0xF000) >> 12
        self.x = (self.raw & 0x0F00) >> 8
        self.y = (self.raw & 0x00F0) >> 4
        self.n = self.raw & 0x000F

    @property
    def nn(self):
        return self.raw & 0x00FF

    @property
    def nnn(self):
        return self.raw & 0x0FFF

    def __eq__(self, other):
        return isinstance(other, Instruction) and other.raw == self.raw

    def __hash__(self):
        return hash(self.raw)

    def __repr__(self):
        return 'Instruction(0x{:04X})'.format(self.raw)


def decode(raw):
    """
    Decode a raw 16-bit word, never fails
    """
    return Instruction(raw)
