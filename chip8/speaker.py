import logging

import numpy as np
import pygame

from chip8.devices import AudioSink

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100
VOLUME = 4096


class Speaker(AudioSink):
    """
    A looping square wave on the pygame mixer
    """

    def __init__(self, tone=440):
        self.tone = tone
        self.playing = False

        pygame.mixer.init(SAMPLE_RATE, -16, 1, 512)
        self.sound = pygame.sndarray.make_sound(self.BUILD_WAVE())

    def BUILD_WAVE(self):
        """
        One second of square wave, shaped for whatever the mixer actually opened
        """
        frequency, _, channels = pygame.mixer.get_init()

        period = max(int(frequency / self.tone), 2)
        one_cycle = np.where(np.arange(period) < period // 2, VOLUME, -VOLUME)
        wave = np.resize(one_cycle, (frequency,)).astype(np.int16)

        if channels > 1:
            wave = np.repeat(wave.reshape(-1, 1), channels, axis=1)

        return wave

    def TONE_ON(self):
        if not self.playing:
            logger.debug("Tone on")
            self.sound.play(loops=-1)
            self.playing = True

    def TONE_OFF(self):
        if self.playing:
            logger.debug("Tone off")
            self.sound.stop()
            self.playing = False
