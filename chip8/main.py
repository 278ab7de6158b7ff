import argparse
import logging
import os
import sys

import pygame

from chip8.architecture import Architecture
from chip8.devices import SilentSpeaker
from chip8.exceptions import Chip8Exception
from chip8.keyboard import Keyboard
from chip8.screen import Screen
from chip8.speaker import Speaker
from chip8.state import MachineState

logger = logging.getLogger(__name__)


class Emulator:

    # Timers tick and the screen is flushed once per frame
    FRAME_RATE = 60

    def __init__(self, rom, scale=15, cycles_per_frame=11, primary_color=0xFFFFFFFF,
                 secondary_color=0x000000FF, font_file=None, tone=440):
        self.ROM_FILE = rom
        self.FONT_FILE = font_file
        self.SCALE = scale
        self.CYCLES_PER_FRAME = cycles_per_frame
        self.PRIMARY_COLOR = primary_color
        self.SECONDARY_COLOR = secondary_color
        self.TONE = tone

    def CREATE_STATE(self):
        state = MachineState()

        if self.FONT_FILE:
            with open(self.FONT_FILE, 'rb') as font:
                state.LOAD_FONT(font.read())
        else:
            state.LOAD_FONT()

        state.LOAD_ROMFILE(self.ROM_FILE)
        return state

    def CREATE_SPEAKER(self):
        try:
            return Speaker(self.TONE)
        except pygame.error as error:
            logger.warning("No audio device, running without sound: %s", error)
            return SilentSpeaker()

    def RUN_FRAME(self, cpu, state, speaker):
        """
        One 60 Hz frame: tick the timers, let the sound timer gate the
        tone, then run a batch of instructions
        """
        state.UPDATE_TIMERS()

        if state.Timers['ST'] > 0:
            speaker.TONE_ON()
        else:
            speaker.TONE_OFF()

        for _ in range(self.CYCLES_PER_FRAME):
            cpu.RUN_CYCLE(state)

    @staticmethod
    def POLL_EVENTS():
        """
        Pump the pygame event queue, False once the user asked to quit
        """
        running = True

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False

            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                running = False

        return running

    def main(self):
        state = self.CREATE_STATE()

        pygame.init()

        screen = Screen(SCALE=self.SCALE, PRIMARY=self.PRIMARY_COLOR, SECONDARY=self.SECONDARY_COLOR)
        screen.SET_TITLE(os.path.basename(self.ROM_FILE))
        speaker = self.CREATE_SPEAKER()
        CPU = Architecture(screen, Keyboard())

        clock = pygame.time.Clock()

        try:
            while self.POLL_EVENTS():
                self.RUN_FRAME(CPU, state, speaker)
                screen.UPDATE()
                clock.tick(self.FRAME_RATE)
        finally:
            speaker.TONE_OFF()
            pygame.quit()


def parse_hex_color(value):
    """
    Accepts RGBA strings like "0xFF0000FF" or "FF0000FF"
    """
    text = value.strip()
    if text[:2] in ('0x', '0X'):
        text = text[2:]

    try:
        color = int(text, 16)
    except ValueError:
        raise argparse.ArgumentTypeError("invalid hex color '{}'".format(value)) from None

    if not 0 <= color <= 0xFFFFFFFF:
        raise argparse.ArgumentTypeError("hex color '{}' does not fit in RGBA".format(value))

    return color


def positive_int(value):
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError("invalid integer '{}'".format(value)) from None

    if number <= 0:
        raise argparse.ArgumentTypeError("{} is not a positive integer".format(value))

    return number


def build_parser():
    parser = argparse.ArgumentParser(prog='chip8', description='CHIP-8 emulator')
    parser.add_argument('rom', help='path to a ROM')
    parser.add_argument('--scale', type=positive_int, default=15,
                        help='scale factor for the 64 x 32 screen (default: %(default)s)')
    parser.add_argument('--cycles-per-frame', type=positive_int, default=11,
                        help='instructions executed per 60 Hz frame (default: %(default)s)')
    parser.add_argument('--primary-color', type=parse_hex_color, default=0xFFFFFFFF,
                        help='RGBA hex color of lit pixels (default: 0xFFFFFFFF)')
    parser.add_argument('--secondary-color', type=parse_hex_color, default=0x000000FF,
                        help='RGBA hex color of unlit pixels (default: 0x000000FF)')
    parser.add_argument('--font-file', default=None,
                        help='replace the built-in font with this 80 byte image')
    parser.add_argument('--tone', type=positive_int, default=440,
                        help='buzzer frequency in Hz (default: %(default)s)')
    parser.add_argument('--log-level', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='logging level (default: %(default)s)')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=args.log_level, format="[%(levelname)s]:  %(message)s", stream=sys.stdout)

    emulator = Emulator(
        rom=args.rom,
        scale=args.scale,
        cycles_per_frame=args.cycles_per_frame,
        primary_color=args.primary_color,
        secondary_color=args.secondary_color,
        font_file=args.font_file,
        tone=args.tone,
    )

    try:
        emulator.main()
    except OSError as error:
        logger.error("Could not load: %s", error)
        return 1
    except pygame.error as error:
        logger.error("pygame failed: %s", error)
        return 1
    except Chip8Exception as error:
        logger.error("Halted: %s", error)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
