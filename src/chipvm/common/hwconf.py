MEMORY_SIZE = 0x1000
FONT_BASE = 0x050
FONT_GLYPH_SIZE = 5
PROGRAM_BASE = 0x200                            # Execution starts here
PROGRAM_MAX_SIZE = MEMORY_SIZE - PROGRAM_BASE

SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32
SPRITE_WIDTH = 8

REGISTER_COUNT = 16
FLAG_REGISTER = 0xF
STACK_DEPTH = 16                                # Conventional hardware call depth
KEY_COUNT = 16

CYCLES_PER_FRAME = 10                           # Instructions per timer tick
FRAME_RATE = 60                                 # Timer ticks per second
DISPLAY_SCALE = 10
WINDOW_TITLE = 'CHIP-8'

FOREGROUND = (255, 255, 255)
BACKGROUND = (0, 0, 0)

# Logical key 0x0..0xF -> pygame key name
KEY_LAYOUT = (
    'x', '1', '2', '3',
    'q', 'w', 'e', 'a',
    's', 'd', 'z', 'c',
    '4', 'r', 'f', 'v',
)
