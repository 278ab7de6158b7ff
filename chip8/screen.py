from pygame import display, HWSURFACE, DOUBLEBUF, Color, draw

from chip8.devices import FrameBuffer


class Screen(FrameBuffer):
    """
    The pygame window. Cell state lives in the inherited FrameBuffer, the
    surface is only ever written to, and UPDATE pushes it to the display.
    """

    PIXEL_OFF = Color(0, 0, 0, 255)
    PIXEL_ON = Color(255, 255, 255, 255)

    def __init__(self, SCALE=1, PRIMARY=None, SECONDARY=None):
        super().__init__()

        # Setting the screen class scale and colors
        self.SCALE = SCALE
        self.PIXEL_ON = Color(PRIMARY) if PRIMARY is not None else self.PIXEL_ON
        self.PIXEL_OFF = Color(SECONDARY) if SECONDARY is not None else self.PIXEL_OFF

        #  Initialize a variable to hold the surface but don't use it
        self.SURFACE = None

        # Initialize the screen
        self.INITIALIZE()

    def INITIALIZE(self):

        # Initialize the display from pygame
        display.init()

        # Set the surface
        self.SURFACE = display.set_mode(((self.WIDTH * self.SCALE), (self.HEIGHT * self.SCALE)), HWSURFACE | DOUBLEBUF)

        # Setting the title of the display
        display.set_caption('CHIP-8 Emulator')

        # Clear the display, run update on it
        self.CLEAR()
        self.UPDATE()

    def WRITE_PIXEL(self, row, col, primary):
        super().WRITE_PIXEL(row, col, primary)

        # Setting pixel coordinates
        x_origin = col * self.SCALE
        y_origin = row * self.SCALE

        color = self.PIXEL_ON if primary else self.PIXEL_OFF
        draw.rect(self.SURFACE, color, (x_origin, y_origin, self.SCALE, self.SCALE))

    def CLEAR(self):
        """
        Sets the entire screen to the secondary color (PIXEL_OFF)
        """
        super().CLEAR()
        self.SURFACE.fill(self.PIXEL_OFF)

    def UPDATE(self):
        display.flip()

    def SET_TITLE(self, title):
        display.set_caption('CHIP-8 Emulator - {}'.format(title))

    @staticmethod
    def DECONSTRUCTOR():
        """
        Destroys the current screen object.
        """
        display.quit()
