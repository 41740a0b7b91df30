from dataclasses import dataclass, field

import numpy as np

from frame import InvalidDimensions, MalformedInput


TILE_WIDTH = 8
TILE_HEIGHT = 8

# Tile pixels are indexed [col, row]; every step below works on the last two
# axes so it applies to a single tile or a whole grid of them at once.
COLUMN_ORDER = [0, 1, 4, 5, 2, 3, 6, 7]
ROW_ORDER = [1, 3, 0, 2, 5, 7, 4, 6]
ROW_ORDER_INVERSE = np.argsort(ROW_ORDER)


@dataclass
class Tile:
    offx: int
    offy: int
    pixels: np.ndarray = field(repr=False)


def check_dimensions(width, height):
    if width <= 0 or height <= 0 or width % TILE_WIDTH or height % TILE_HEIGHT:
        raise InvalidDimensions(
            f'Image size {width}x{height} is not a positive multiple of {TILE_WIDTH}x{TILE_HEIGHT}'
        )


def rotate_blocks(tiles):
    """Rotate every 2x2 block 90 degrees counter-clockwise.

    UL takes UR, UR takes DR, DR takes DL and DL takes UL.
    """
    out = np.empty_like(tiles)
    out[..., 0::2, 0::2] = tiles[..., 1::2, 0::2]
    out[..., 1::2, 0::2] = tiles[..., 1::2, 1::2]
    out[..., 1::2, 1::2] = tiles[..., 0::2, 1::2]
    out[..., 0::2, 1::2] = tiles[..., 0::2, 0::2]
    return out


def unrotate_blocks(tiles):
    out = np.empty_like(tiles)
    out[..., 1::2, 0::2] = tiles[..., 0::2, 0::2]
    out[..., 1::2, 1::2] = tiles[..., 1::2, 0::2]
    out[..., 0::2, 1::2] = tiles[..., 1::2, 1::2]
    out[..., 0::2, 0::2] = tiles[..., 0::2, 1::2]
    return out


def swap_quadrants(tiles):
    """Swap the upper-right 4x4 quadrant with the lower-left one."""
    half_w = TILE_WIDTH // 2
    half_h = TILE_HEIGHT // 2
    out = tiles.copy()
    out[..., half_w:, :half_h] = tiles[..., :half_w, half_h:]
    out[..., :half_w, half_h:] = tiles[..., half_w:, :half_h]
    return out


def shuffle_columns(tiles):
    # columns 2,3 trade places with columns 4,5
    return tiles[..., COLUMN_ORDER, :]


def shuffle_rows(tiles):
    return tiles[..., ROW_ORDER]


def unshuffle_rows(tiles):
    return tiles[..., ROW_ORDER_INVERSE]


def unscramble(tiles):
    tiles = rotate_blocks(tiles)
    tiles = swap_quadrants(tiles)
    tiles = shuffle_columns(tiles)
    return shuffle_rows(tiles)


def scramble(tiles):
    tiles = unshuffle_rows(tiles)
    tiles = shuffle_columns(tiles)
    tiles = swap_quadrants(tiles)
    return unrotate_blocks(tiles)


class TiledImage:
    def __init__(self, tiles):
        self.tiles = tiles

    @classmethod
    def from_pixels(cls, pixels, width, height):
        """Split a flat color stream into unscrambled tiles.

        Tiles are consumed left to right, top to bottom, and each one is
        filled column by column.
        """
        check_dimensions(width, height)
        pixels = np.asarray(pixels, dtype=np.uint32)
        count = width * height
        if len(pixels) < count:
            raise MalformedInput(f'Expected {count} pixels for {width}x{height}, got {len(pixels)}')
        if len(pixels) > count:
            print(f'WARNING: Ignoring {len(pixels) - count} trailing pixels')

        rows, cols = height // TILE_HEIGHT, width // TILE_WIDTH
        grid = unscramble(pixels[:count].reshape(rows, cols, TILE_WIDTH, TILE_HEIGHT))
        return cls([
            Tile(tx * TILE_WIDTH, ty * TILE_HEIGHT, grid[ty, tx])
            for ty in range(rows)
            for tx in range(cols)
        ])
