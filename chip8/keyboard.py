import pygame
from pygame import key

from chip8.devices import InputSource

# Hexadecimal keypad laid over the left hand side of a QWERTY keyboard:
#
#   1 2 3 C        1 2 3 4
#   4 5 6 D   ->   Q W E R
#   7 8 9 E        A S D F
#   A 0 B F        Z X C V
KEY_MAPPINGS = {
    0x0: pygame.K_x,
    0x1: pygame.K_1,
    0x2: pygame.K_2,
    0x3: pygame.K_3,
    0x4: pygame.K_q,
    0x5: pygame.K_w,
    0x6: pygame.K_e,
    0x7: pygame.K_a,
    0x8: pygame.K_s,
    0x9: pygame.K_d,
    0xA: pygame.K_z,
    0xB: pygame.K_c,
    0xC: pygame.K_4,
    0xD: pygame.K_r,
    0xE: pygame.K_f,
    0xF: pygame.K_v,
}


class Keyboard(InputSource):
    """
    Reads the keypad straight from pygame's key state, which is refreshed
    every time the host pumps the event queue
    """

    def __init__(self, mappings=None):
        self.mappings = mappings if mappings is not None else KEY_MAPPINGS

    def IS_KEY_DOWN(self, code):
        if code not in self.mappings:
            return False

        # Get array of all pressed keys
        ALL_PRESSED_KEYS = key.get_pressed()
        return bool(ALL_PRESSED_KEYS[self.mappings[code]])
