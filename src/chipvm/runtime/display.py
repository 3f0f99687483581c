from typing import TypeAlias

from chipvm.common.hwconf import SCREEN_WIDTH, SCREEN_HEIGHT, SPRITE_WIDTH


Framebuffer: TypeAlias = tuple[tuple[int, ...], ...]


class Display:
    width: int
    height: int
    pixels: bytearray  # Row-major, one byte per pixel

    def __init__(self, width: int = SCREEN_WIDTH, height: int = SCREEN_HEIGHT):
        self.width = width
        self.height = height
        self.pixels = bytearray(width * height)

    def clear(self):
        self.pixels[:] = bytes(len(self.pixels))

    def pixel(self, x: int, y: int) -> int:
        return self.pixels[(y % self.height) * self.width + (x % self.width)]

    def draw(self, x: int, y: int, sprite: bytes) -> bool:
        """
        XORs sprite rows onto the buffer with (x, y) as the top-left corner.
        Coordinates wrap on both axes. Returns True when any lit pixel was turned off.
        """

        collision = False

        for row, bits in enumerate(sprite):
            line = ((y + row) % self.height) * self.width

            for col in range(SPRITE_WIDTH):
                if not bits & (0x80 >> col):
                    continue

                inx = line + (x + col) % self.width

                if self.pixels[inx]:
                    collision = True

                self.pixels[inx] ^= 1

        return collision

    def snapshot(self) -> Framebuffer:
        w = self.width

        return tuple(
            tuple(self.pixels[r * w:(r + 1) * w])
            for r in range(self.height)
        )

    def lit(self) -> int:
        return sum(self.pixels)
