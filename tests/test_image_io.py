"""Tests for the Pillow-backed codec and the compositor."""

import io

import pytest
from PIL import ExifTags, Image

from photostream.domain.data_models import FitTransform
from photostream.imaging.geometry import center_crop_fit, contain_fit
from photostream.imaging.image_io import decode_approx, decode_full
from photostream.imaging.processing import apply_fit, composite, resolve_resample
from photostream.shared.errors import DecodeError

# ============================================================================
# DECODE TESTS
# ============================================================================


def test_decode_approx_subsamples_png(make_image):
    path = make_image(800, 600)

    image = decode_approx(path, 100, 100)

    assert image.size == (200, 150)


def test_decode_approx_uses_jpeg_draft(make_image):
    path = make_image(1600, 1200, fmt="JPEG")

    image = decode_approx(path, 200, 200)

    assert image.size == (400, 300)


def test_decode_approx_never_upscales(make_image):
    path = make_image(30, 20)

    image = decode_approx(path, 100, 100)

    assert image.size == (30, 20)


def test_decode_approx_accepts_str_path(make_image):
    path = make_image(64, 64)

    assert decode_approx(str(path), 32, 32).size == (32, 32)


def test_decode_full_from_stream(make_image):
    path = make_image(120, 80, color=(10, 20, 30))
    stream = io.BytesIO(path.read_bytes())

    image = decode_full(stream)

    assert image.size == (120, 80)
    assert image.getpixel((5, 5)) == (10, 20, 30)
    assert not stream.closed


def test_decode_full_writes_into_matching_reuse_buffer(make_image):
    path = make_image(40, 30, color=(1, 2, 3))
    reuse = Image.new("RGB", (40, 30), (0, 0, 0))

    image = decode_full(path, reuse)

    assert image is reuse
    assert reuse.getpixel((0, 0)) == (1, 2, 3)


def test_decode_full_allocates_when_reuse_does_not_match(make_image):
    path = make_image(40, 30, color=(1, 2, 3))
    reuse = Image.new("RGB", (10, 10), (9, 9, 9))

    image = decode_full(path, reuse)

    assert image is not reuse
    assert image.size == (40, 30)
    assert reuse.getpixel((0, 0)) == (9, 9, 9)


def test_decode_missing_file_raises(tmp_path):
    with pytest.raises(DecodeError, match="not found"):
        decode_full(tmp_path / "missing.png")


def test_decode_garbage_raises(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"this is not an image")

    with pytest.raises(DecodeError) as exc_info:
        decode_approx(path, 10, 10)

    assert "pillow" in str(exc_info.value)


def test_decode_garbage_stream_raises():
    with pytest.raises(DecodeError):
        decode_full(io.BytesIO(b"\x00" * 64))


def test_exif_orientation_is_applied(tmp_path):
    path = tmp_path / "rotated.jpg"
    exif = Image.Exif()
    exif[ExifTags.Base.Orientation] = 6
    Image.new("RGB", (200, 100), (50, 50, 50)).save(path, exif=exif)

    assert decode_full(path).size == (100, 200)
    assert decode_full(path, exif_transpose=False).size == (200, 100)
    # The bound refers to the upright image.
    assert decode_approx(path, 50, 100).size == (50, 100)


# ============================================================================
# COMPOSITOR TESTS
# ============================================================================


def test_composite_center_crop_keeps_middle_band(banded_image):
    with Image.open(banded_image) as img:
        source = img.convert("RGB")
    transform = center_crop_fit(source.width, source.height, 40, 40)

    result = composite(source, transform, resolve_resample("NEAREST"))

    assert result.size == (40, 40)
    assert result.mode == "RGB"
    colors = {color for _, color in result.getcolors()}
    assert colors == {(255, 0, 0)}


def test_composite_contain_fit_allocates_scaled_size():
    source = Image.new("RGBA", (200, 100), (0, 128, 0, 255))
    transform = contain_fit(200, 100, 50, 50)

    result = composite(source, transform)

    assert result.size == (50, 25)
    assert result.mode == "RGBA"
    assert result.getpixel((49, 24)) == (0, 128, 0, 255)


def test_apply_fit_returns_source_when_size_matches():
    source = Image.new("RGB", (40, 40))
    transform = center_crop_fit(40, 40, 40, 40)

    assert apply_fit(source, transform, resolve_resample("NEAREST")) is source


def test_apply_fit_composites_non_identity_transform_of_matching_size():
    source = Image.new("RGB", (40, 40), (10, 20, 30))
    source.paste((200, 0, 0), (0, 0, 20, 40))
    transform = FitTransform(1.0, 1.0, -20.0, 0.0, 40, 40)

    result = apply_fit(source, transform, resolve_resample("NEAREST"))

    assert result is not source
    assert result.size == (40, 40)
    assert result.getpixel((0, 0)) == (10, 20, 30)
    assert result.getpixel((30, 10)) == (0, 0, 0)


def test_resolve_resample_rejects_unknown_filter():
    assert resolve_resample("bilinear") == Image.Resampling.BILINEAR
    with pytest.raises(ValueError):
        resolve_resample("LANCZOS9000")


def test_decode_approx_handles_palette_images(tmp_path):
    path = tmp_path / "palette.png"
    Image.new("RGB", (400, 400), (0, 0, 255)).convert("P").save(path)

    image = decode_approx(path, 100, 100)

    assert image.size == (100, 100)
    assert image.mode == "RGB"
