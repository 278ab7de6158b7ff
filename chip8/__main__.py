import sys

from chip8.main import main

sys.exit(main())
