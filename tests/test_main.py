import argparse
import logging

import pygame
import pytest

from chip8.architecture import Architecture
from chip8.devices import FrameBuffer, KeyState, SilentSpeaker
from chip8.exceptions import BadFontException, UnknownOpCodeException
from chip8.fonts import FONT, FONT_START_ADDR
from chip8.main import Emulator, build_parser, main, parse_hex_color


@pytest.mark.parametrize('text, value', [
    ('0xFF0000FF', 0xFF0000FF),
    ('0X000000ff', 0x000000FF),
    ('00FF00FF', 0x00FF00FF),
    ('  0x1  ', 0x1),
])
def test_parse_hex_color(text, value):
    assert parse_hex_color(text) == value


@pytest.mark.parametrize('text', ['red', '0x', '0x1FFFFFFFF', '-0x1'])
def test_parse_hex_color_rejects(text):
    with pytest.raises(argparse.ArgumentTypeError):
        parse_hex_color(text)


def test_parser_defaults():
    args = build_parser().parse_args(['game.ch8'])

    assert args.rom == 'game.ch8'
    assert args.scale == 15
    assert args.cycles_per_frame == 11
    assert args.primary_color == 0xFFFFFFFF
    assert args.secondary_color == 0x000000FF
    assert args.font_file is None
    assert args.tone == 440
    assert args.log_level == 'WARNING'


def test_parser_rejects_bad_color(capsys):
    with pytest.raises(SystemExit):
        build_parser().parse_args(['game.ch8', '--primary-color', 'nope'])


def test_create_state_loads_font_and_rom(tmp_path):
    rom = tmp_path / 'game.ch8'
    rom.write_bytes(b'\x60\x2A')

    state = Emulator(str(rom)).CREATE_STATE()

    assert state.memory[FONT_START_ADDR:FONT_START_ADDR + len(FONT)] == FONT
    assert state.memory[0x200:0x202] == b'\x60\x2A'


def test_create_state_with_custom_font(tmp_path):
    rom = tmp_path / 'game.ch8'
    rom.write_bytes(b'\x00\xE0')
    font = tmp_path / 'font.bin'
    font.write_bytes(bytes(range(80)))

    state = Emulator(str(rom), font_file=str(font)).CREATE_STATE()

    assert state.memory[FONT_START_ADDR:FONT_START_ADDR + 80] == bytes(range(80))


def test_run_frame_ticks_timers_runs_cycles_and_gates_tone(tmp_path):
    rom = tmp_path / 'game.ch8'
    # V0 = 3, ST = V0, then loop forever
    rom.write_bytes(b'\x60\x03\xF0\x18\x12\x04')

    emulator = Emulator(str(rom), cycles_per_frame=3)
    state = emulator.CREATE_STATE()
    cpu = Architecture(FrameBuffer(), KeyState())
    speaker = SilentSpeaker()

    emulator.RUN_FRAME(cpu, state, speaker)

    # The tone is gated before this frame's instructions set ST
    assert state.Timers['ST'] == 3
    assert state.CpuRegisters['PC'] == 0x204
    assert not speaker.playing

    emulator.RUN_FRAME(cpu, state, speaker)

    assert state.Timers['ST'] == 2
    assert speaker.playing

    emulator.RUN_FRAME(cpu, state, speaker)
    emulator.RUN_FRAME(cpu, state, speaker)

    assert state.Timers['ST'] == 0
    assert not speaker.playing


def test_run_frame_propagates_errors(tmp_path):
    rom = tmp_path / 'game.ch8'
    rom.write_bytes(b'\xFF\xFF')

    emulator = Emulator(str(rom))
    state = emulator.CREATE_STATE()

    with pytest.raises(UnknownOpCodeException):
        emulator.RUN_FRAME(Architecture(FrameBuffer(), KeyState()), state, SilentSpeaker())


def test_main_reports_missing_rom(tmp_path, caplog):
    with caplog.at_level(logging.ERROR, logger='chip8.main'):
        code = main([str(tmp_path / 'missing.ch8')])

    assert code == 1
    assert 'Could not load' in caplog.text


@pytest.mark.parametrize('option', ['--scale', '--cycles-per-frame', '--tone'])
@pytest.mark.parametrize('value', ['0', '-3', 'two'])
def test_parser_rejects_non_positive_numbers(option, value):
    with pytest.raises(SystemExit):
        build_parser().parse_args(['game.ch8', option, value])


def test_create_state_rejects_oversized_font(tmp_path):
    rom = tmp_path / 'game.ch8'
    rom.write_bytes(b'\x00\xE0')
    font = tmp_path / 'font.bin'
    font.write_bytes(bytes(5000))

    with pytest.raises(BadFontException):
        Emulator(str(rom), font_file=str(font)).CREATE_STATE()


def test_main_reports_bad_font(tmp_path, caplog):
    rom = tmp_path / 'game.ch8'
    rom.write_bytes(b'\x00\xE0')
    font = tmp_path / 'font.bin'
    font.write_bytes(b'')

    with caplog.at_level(logging.ERROR, logger='chip8.main'):
        code = main([str(rom), '--font-file', str(font)])

    assert code == 1
    assert 'Font is 0 bytes, expected 80' in caplog.text


def test_main_reports_pygame_errors(tmp_path, monkeypatch, caplog):
    def no_display(self):
        raise pygame.error('No available video device')

    monkeypatch.setattr(Emulator, 'main', no_display)

    with caplog.at_level(logging.ERROR, logger='chip8.main'):
        code = main([str(tmp_path / 'game.ch8')])

    assert code == 1
    assert 'No available video device' in caplog.text
