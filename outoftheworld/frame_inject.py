import argparse
import pathlib

from PIL import Image

from frame import InvalidDimensions, MalformedInput
from graphics import decode_frame, encode_frame


VERIFY = True


def parse_size(text):
    try:
        width, height = (int(x) for x in text.lower().split('x'))
    except ValueError:
        raise argparse.ArgumentTypeError(f'Expected WIDTHxHEIGHT, got {text!r}')
    return width, height


def parse_reserved(text):
    try:
        reserved = bytes.fromhex(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f'Expected hex digits, got {text!r}')
    if len(reserved) != 4:
        raise argparse.ArgumentTypeError(f'Expected 4 bytes, got {len(reserved)}')
    return reserved


def main(argv=None):
    parser = argparse.ArgumentParser(description='Pack a decoded PNG back into an Out of the World frame dump')
    parser.add_argument('image', help='Full-size PNG, as written by graphics.py')
    parser.add_argument('output', help='Path of the frame dump to write')
    parser.add_argument('--logical', type=parse_size, default=None, help='Logical size as WIDTHxHEIGHT, defaults to the image size')
    parser.add_argument('--reserved', type=parse_reserved, default=bytes(4), help='Reserved footer bytes as 8 hex digits')
    args = parser.parse_args(argv)

    print(args.image)
    try:
        with Image.open(args.image) as im:
            im = im.convert('RGB')
        data = encode_frame(im, args.logical, args.reserved)
        if VERIFY:
            full, _ = decode_frame(data)
            assert full.tobytes() == im.tobytes()
        pathlib.Path(args.output).write_bytes(data)
        print(args.output)
    except (OSError, MalformedInput, InvalidDimensions) as exc:
        parser.exit(1, f'error: {exc}\n')


if __name__ == '__main__':
    main()
