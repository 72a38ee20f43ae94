"""Tests for slice loading and saving"""

import numpy as np
import pytest
from PIL import Image, ImageCms

from slice_dither.image_io import load_image_rgba, save_slice


@pytest.fixture
def srgb_icc(tmp_path):
    path = tmp_path / "srgb.icc"
    path.write_bytes(ImageCms.ImageCmsProfile(ImageCms.createProfile("sRGB")).tobytes())
    return path


def _rgb(h=3, w=4):
    out = np.zeros((h, w, 3), dtype=np.uint8)
    out[0] = (0, 255, 255)
    out[1] = (255, 255, 255)
    return out


def test_load_rgb_png_gets_opaque_alpha(tmp_path):
    path = tmp_path / "in.png"
    Image.fromarray(_rgb()).save(path)
    rgba = load_image_rgba(path)
    assert rgba.shape == (3, 4, 4)
    assert rgba.dtype == np.uint8
    assert np.all(rgba[..., 3] == 255)
    np.testing.assert_array_equal(rgba[..., :3], _rgb())


def test_load_keeps_alpha(tmp_path):
    path = tmp_path / "in.png"
    rgba = np.full((2, 2, 4), 200, dtype=np.uint8)
    rgba[0, 0, 3] = 0
    Image.fromarray(rgba).save(path)
    loaded = load_image_rgba(path)
    assert loaded[0, 0, 3] == 0
    assert loaded[1, 1, 3] == 200


def test_save_tiff_lzw_round_trip(tmp_path):
    path = save_slice(tmp_path / "out.tif", _rgb())
    assert path.suffix == ".tif"
    with Image.open(path) as im:
        assert im.mode == "RGB"
        assert im.info.get("compression") == "tiff_lzw"
        np.testing.assert_array_equal(np.array(im), _rgb())


def test_unknown_suffix_becomes_tiff(tmp_path):
    path = save_slice(tmp_path / "out.jpg", _rgb())
    assert path.name == "out.tif"
    assert path.exists()


def test_png_output(tmp_path):
    path = save_slice(tmp_path / "out.png", _rgb())
    with Image.open(path) as im:
        assert im.format == "PNG"


def test_icc_profile_embedded(tmp_path, srgb_icc):
    path = save_slice(tmp_path / "out.tif", _rgb(), icc_profile=srgb_icc)
    with Image.open(path) as im:
        assert im.info.get("icc_profile") == srgb_icc.read_bytes()
        np.testing.assert_array_equal(np.array(im), _rgb())


def test_missing_icc_profile_warns(tmp_path, capsys):
    path = save_slice(tmp_path / "out.tif", _rgb(), icc_profile=tmp_path / "nope.icc")
    assert path.exists()
    assert "[warn]" in capsys.readouterr().out


def test_rejects_non_rgb(tmp_path):
    with pytest.raises(TypeError):
        save_slice(tmp_path / "out.tif", np.zeros((2, 2, 4), dtype=np.uint8))
