from chip8.architecture import Architecture
from chip8.devices import (
    AudioSink,
    DisplaySink,
    FrameBuffer,
    InputSource,
    KeyState,
    SilentSpeaker,
)
from chip8.exceptions import (
    BadFontException,
    Chip8Exception,
    RomTooLargeException,
    StackOverflowException,
    StackUnderflowException,
    UnknownOpCodeException,
)
from chip8.instruction import Instruction, decode
from chip8.state import MachineState

__version__ = '1.0.0'
