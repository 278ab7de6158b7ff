"""
The narrow contracts the interpreter talks to its peripherals through,
plus in-memory versions of each for headless runs and tests.

The interpreter never owns a device: the host hands them to the
Architecture and keeps them alive for as long as it runs cycles.
"""

from abc import ABC, abstractmethod

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
NUM_KEYS = 16


class DisplaySink(ABC):
    """
    A 64 x 32 grid of cells addressed by (row, col), each cell is either
    the primary (lit) or the secondary (unlit) color
    """

    WIDTH = DISPLAY_WIDTH
    HEIGHT = DISPLAY_HEIGHT

    @abstractmethod
    def WRITE_PIXEL(self, row, col, primary):
        pass

    @abstractmethod
    def PIXEL_IS_PRIMARY(self, row, col):
        pass

    @abstractmethod
    def CLEAR(self):
        pass


class InputSource(ABC):

    @abstractmethod
    def IS_KEY_DOWN(self, code):
        """
        True if the hexadecimal keypad key code (0x0 - 0xF) is currently held
        """


class AudioSink(ABC):
    """
    Both calls must be safe to repeat
    """

    @abstractmethod
    def TONE_ON(self):
        pass

    @abstractmethod
    def TONE_OFF(self):
        pass


class FrameBuffer(DisplaySink):

    def __init__(self):
        self.cells = [[False] * self.WIDTH for _ in range(self.HEIGHT)]

    def WRITE_PIXEL(self, row, col, primary):
        self.cells[row][col] = bool(primary)

    def PIXEL_IS_PRIMARY(self, row, col):
        return self.cells[row][col]

    def CLEAR(self):
        """
        Sets every cell to the secondary color
        """
        for row in self.cells:
            for col in range(self.WIDTH):
                row[col] = False

    def LIT_PIXELS(self):
        """
        Coordinates (row, col) of every primary cell, top to bottom
        """
        return [
            (row, col)
            for row in range(self.HEIGHT)
            for col in range(self.WIDTH)
            if self.cells[row][col]
        ]

    def RENDER(self, on='#', off='.'):
        return '\n'.join(
            ''.join(on if cell else off for cell in row) for row in self.cells
        )


class KeyState(InputSource):
    """
    Keypad whose keys are pressed and released programmatically
    """

    def __init__(self):
        self.keys = [False] * NUM_KEYS

    def PRESS(self, code):
        self.keys[code] = True

    def RELEASE(self, code):
        self.keys[code] = False

    def IS_KEY_DOWN(self, code):
        return 0 <= code < NUM_KEYS and self.keys[code]


class SilentSpeaker(AudioSink):

    def __init__(self):
        self.playing = False

    def TONE_ON(self):
        self.playing = True

    def TONE_OFF(self):
        self.playing = False
