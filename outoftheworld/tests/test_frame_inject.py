import numpy as np
import pytest
from PIL import Image

from frame import read_footer
from frame_inject import main
from graphics import decode_frame


def write_image(path, width, height):
    rgb = np.random.default_rng(3).integers(0, 256, size=(height, width, 3), dtype=np.uint8)
    im = Image.frombytes('RGB', (width, height), rgb.tobytes())
    im.save(path)
    return im


def test_inject_round_trip(tmp_path):
    im = write_image(tmp_path / 'edited-full.png', 16, 8)
    output = tmp_path / 'edited.raw'
    main([str(tmp_path / 'edited-full.png'), str(output), '--logical', '12x4', '--reserved', 'deadbeef'])

    data = output.read_bytes()
    footer = read_footer(data)
    assert footer.reserved == b'\xde\xad\xbe\xef'
    assert (footer.logical_width, footer.logical_height) == (12, 4)
    full, logical = decode_frame(data)
    assert full.tobytes() == im.tobytes()
    assert logical.size == (12, 4)


def test_inject_defaults_to_image_size(tmp_path):
    write_image(tmp_path / 'in.png', 8, 16)
    main([str(tmp_path / 'in.png'), str(tmp_path / 'out.raw')])
    footer = read_footer((tmp_path / 'out.raw').read_bytes())
    assert footer == (bytes(4), 8, 16, 8, 16)


def test_inject_rejects_unaligned_image(tmp_path, capsys):
    write_image(tmp_path / 'in.png', 10, 8)
    with pytest.raises(SystemExit) as excinfo:
        main([str(tmp_path / 'in.png'), str(tmp_path / 'out.raw')])
    assert excinfo.value.code == 1
    assert 'error:' in capsys.readouterr().err
    assert not (tmp_path / 'out.raw').exists()


@pytest.mark.parametrize('option', [['--logical', '12'], ['--logical', 'axb'], ['--reserved', 'abcd'], ['--reserved', 'zz']])
def test_inject_bad_options(tmp_path, option):
    write_image(tmp_path / 'in.png', 8, 8)
    with pytest.raises(SystemExit) as excinfo:
        main([str(tmp_path / 'in.png'), str(tmp_path / 'out.raw'), *option])
    assert excinfo.value.code == 2
