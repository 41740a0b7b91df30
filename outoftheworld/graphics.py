import argparse
import pathlib

import numpy as np
from PIL import Image

from frame import InvalidDimensions, MalformedInput, encode_pixels, read_frame, write_footer
from tiles import TILE_HEIGHT, TILE_WIDTH, TiledImage, check_dimensions, scramble


__version__ = '0.1.0'

FALLBACK_STEM = 'output'


def assemble(tiled: TiledImage, width, height) -> np.ndarray:
    raster = np.zeros((height, width), dtype=np.uint32)
    for tile in tiled.tiles:
        # tile pixels are [col, row], the raster is [y, x]
        raster[tile.offy:tile.offy + TILE_HEIGHT, tile.offx:tile.offx + TILE_WIDTH] = tile.pixels.T
    return raster


def mirror(raster):
    return np.fliplr(raster).copy()


def to_rgb(raster) -> Image.Image:
    """Convert a raster of packed 0x00RRGGBB colors to an RGB image."""
    height, width = raster.shape
    rgb = np.stack([(raster >> 16) & 0xFF, (raster >> 8) & 0xFF, raster & 0xFF], axis=-1)
    return Image.frombytes('RGB', (width, height), rgb.astype(np.uint8).tobytes())


def from_rgb(im: Image.Image) -> np.ndarray:
    rgb = np.asarray(im.convert('RGB'), dtype=np.uint32)
    return rgb[..., 0] << 16 | rgb[..., 1] << 8 | rgb[..., 2]


def check_logical_size(width, height, logical_width, logical_height):
    if not (0 < logical_width <= width and 0 < logical_height <= height):
        raise InvalidDimensions(
            f'Logical size {logical_width}x{logical_height} does not fit in {width}x{height}'
        )


def crop_logical(im: Image.Image, logical_width, logical_height) -> Image.Image:
    check_logical_size(*im.size, logical_width, logical_height)
    return im.crop((0, 0, logical_width, logical_height))


def decode_frame(data: bytes):
    footer, pixels = read_frame(data)
    check_dimensions(footer.width, footer.height)
    check_logical_size(footer.width, footer.height, footer.logical_width, footer.logical_height)

    tiled = TiledImage.from_pixels(pixels, footer.width, footer.height)
    im = to_rgb(mirror(assemble(tiled, footer.width, footer.height)))
    return im, crop_logical(im, footer.logical_width, footer.logical_height)


def encode_frame(im: Image.Image, logical_size=None, reserved=bytes(4)) -> bytes:
    width, height = im.size
    check_dimensions(width, height)
    logical_width, logical_height = logical_size or im.size
    check_logical_size(width, height, logical_width, logical_height)

    raster = mirror(from_rgb(im))
    rows, cols = height // TILE_HEIGHT, width // TILE_WIDTH
    grid = raster.reshape(rows, TILE_HEIGHT, cols, TILE_WIDTH).transpose(0, 2, 3, 1)
    pixels = scramble(grid).reshape(-1)
    return encode_pixels(pixels) + write_footer(width, height, logical_width, logical_height, reserved)


def output_paths(path: pathlib.Path):
    stem = path.stem or FALLBACK_STEM
    return path.parent / f'{stem}-full.png', path.parent / f'{stem}-logical.png'


def main(argv=None):
    parser = argparse.ArgumentParser(description='Out of the World - Image Decoder')
    parser.add_argument(
        'input',
        help='Path to input binary file. No wildcards, nor multiple files.',
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    args = parser.parse_args(argv)

    path = pathlib.Path(args.input)
    print(path)
    try:
        full, logical = decode_frame(path.read_bytes())
        print('full', full.size, 'logical', logical.size)
        full_path, logical_path = output_paths(path)
        full.save(full_path)
        print(full_path)
        logical.save(logical_path)
        print(logical_path)
    except (OSError, MalformedInput, InvalidDimensions) as exc:
        parser.exit(1, f'error: {exc}\n')


if __name__ == '__main__':
    main()
