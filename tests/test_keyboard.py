from collections import defaultdict

import pygame

from chip8.keyboard import KEY_MAPPINGS, Keyboard


def held(*pygame_keys):
    return lambda: defaultdict(bool, {k: True for k in pygame_keys})


def test_mapping_covers_the_keypad():
    assert sorted(KEY_MAPPINGS) == list(range(16))
    assert len(set(KEY_MAPPINGS.values())) == 16


def test_pressed_key_is_reported(monkeypatch):
    monkeypatch.setattr('chip8.keyboard.key.get_pressed', held(pygame.K_w))
    keyboard = Keyboard()

    assert keyboard.IS_KEY_DOWN(0x5)
    assert not keyboard.IS_KEY_DOWN(0x6)


def test_unknown_codes_are_never_pressed(monkeypatch):
    monkeypatch.setattr('chip8.keyboard.key.get_pressed', held(*KEY_MAPPINGS.values()))
    keyboard = Keyboard()

    assert not keyboard.IS_KEY_DOWN(0x10)
    assert not keyboard.IS_KEY_DOWN(0xFF)


def test_custom_mapping(monkeypatch):
    monkeypatch.setattr('chip8.keyboard.key.get_pressed', held(pygame.K_UP))
    keyboard = Keyboard({0x2: pygame.K_UP})

    assert keyboard.IS_KEY_DOWN(0x2)
    assert not keyboard.IS_KEY_DOWN(0x5)
