"""
Integration tests for converter.pipeline

Test Coverage:
- convert_image(): end-to-end raster and SVG conversions
- Warning policy: advisory vs strict
- "No valid sizes" no-op
- Idempotent re-runs
- Fail-fast: no output on error
- Stage and per-size timings
"""
import logging
import pytest
from ico_toolkit.converter import ConversionConfig, ResizeFilter, convert_image
from ico_toolkit.core.errors import AbortedByWarning, DecodeError, NotAFileError
from ico_toolkit.core.models import WarningKind


def _config(output_dir, **kwargs):
    return ConversionConfig(output_dir=output_dir, **kwargs)


def test_upscale_scenario_writes_three_frames(sample_image, output_dir, ico_entries):
    """128x128 source with [16, 32, 256]: warns about upscale, still writes."""
    # Arrange
    config = _config(output_dir, sizes=(16, 32, 256), resize_filter=ResizeFilter.CUBIC)

    # Act
    result = convert_image(sample_image, config)

    # Assert
    assert result.written
    assert [w.kind for w in result.warnings] == [WarningKind.UPSCALE_REQUESTED]
    assert result.output_path == output_dir / "source.ico"
    assert ico_entries(result.output_path) == [(16, 16), (32, 32), (256, 256)]
    assert result.frame_count == 3


def test_default_sizes(make_png, output_dir, ico_entries):
    source = make_png(256, 256, name="big.png")

    result = convert_image(source, _config(output_dir))

    assert result.warnings == []
    sizes = [w for w, _ in ico_entries(result.output_path)]
    assert sizes == [16, 20, 24, 32, 40, 48, 64, 96, 128, 256]


def test_clamped_sizes_continue(sample_image, output_dir, ico_entries):
    result = convert_image(sample_image, _config(output_dir, sizes=(64, 16, 300, 0, 16)))

    assert result.sizes == [16, 64]
    assert [w.kind for w in result.warnings] == [WarningKind.SIZES_CLAMPED]
    assert ico_entries(result.output_path) == [(16, 16), (64, 64)]


def test_no_valid_sizes_is_noop(sample_image, output_dir, caplog):
    """All sizes out of range: error-level message, no exception, no file."""
    with caplog.at_level(logging.ERROR):
        result = convert_image(sample_image, _config(output_dir, sizes=(0, 500)))

    assert not result.written
    assert result.frame_count == 0
    assert not (output_dir / "source.ico").exists()
    assert "No sizes were marked for the icon" in caplog.text


def test_no_valid_sizes_strict_aborts_on_clamp(sample_image, output_dir):
    with pytest.raises(AbortedByWarning):
        convert_image(sample_image, _config(output_dir, sizes=(0, 500), strict=True))

    assert not (output_dir / "source.ico").exists()


def test_second_run_is_byte_identical(sample_image, output_dir):
    config = _config(output_dir, sizes=(16, 48, 128))

    first = convert_image(sample_image, config)
    first_bytes = first.output_path.read_bytes()
    second = convert_image(sample_image, config)

    assert second.output_path.read_bytes() == first_bytes
    assert first.warnings == []
    assert [w.kind for w in second.warnings] == [WarningKind.OUTPUT_EXISTS]


def test_strict_existing_output_is_not_overwritten(sample_image, output_dir):
    existing = output_dir / "source.ico"
    existing.write_bytes(b"keep me")

    with pytest.raises(AbortedByWarning):
        convert_image(sample_image, _config(output_dir, sizes=(16,), strict=True))

    assert existing.read_bytes() == b"keep me"


def test_strict_upscale_writes_nothing(sample_image, output_dir):
    with pytest.raises(AbortedByWarning) as excinfo:
        convert_image(sample_image, _config(output_dir, sizes=(16, 256), strict=True))

    assert excinfo.value.warning.kind is WarningKind.UPSCALE_REQUESTED
    assert list(output_dir.iterdir()) == []


def test_strict_non_square_writes_nothing(make_png, output_dir):
    source = make_png(200, 100, name="wide.png")

    with pytest.raises(AbortedByWarning):
        convert_image(source, _config(output_dir, sizes=(16,), strict=True))

    assert list(output_dir.iterdir()) == []


def test_non_square_is_stretched(make_png, output_dir, ico_entries):
    source = make_png(200, 100, name="wide.png")

    result = convert_image(source, _config(output_dir, sizes=(16, 32)))

    assert [w.kind for w in result.warnings] == [WarningKind.NON_SQUARE_INPUT]
    assert ico_entries(result.output_path) == [(16, 16), (32, 32)]


def test_missing_source(tmp_path, output_dir):
    with pytest.raises(NotAFileError):
        convert_image(tmp_path / "missing.png", _config(output_dir))


def test_undecodable_source_writes_nothing(tmp_path, output_dir):
    source = tmp_path / "junk.png"
    source.write_bytes(b"junk")

    with pytest.raises(DecodeError):
        convert_image(source, _config(output_dir, sizes=(16,)))

    assert list(output_dir.iterdir()) == []


@pytest.mark.parametrize("resize_filter", list(ResizeFilter))
def test_every_filter_converts(sample_image, output_dir, ico_entries, resize_filter):
    result = convert_image(
        sample_image, _config(output_dir, sizes=(16, 64), resize_filter=resize_filter)
    )

    assert ico_entries(result.output_path) == [(16, 16), (64, 64)]


def test_progress_and_success_logged(sample_image, output_dir, caplog):
    with caplog.at_level(logging.INFO, logger="ico_toolkit"):
        convert_image(sample_image, _config(output_dir, sizes=(16, 32)))

    assert "with sizes [16, 32]..." in caplog.text
    assert "Icon saved to" in caplog.text


def test_timings_recorded(sample_image, output_dir):
    result = convert_image(sample_image, _config(output_dir, sizes=(16, 32)))

    assert list(result.timings.stage_timings) == [
        "validate", "decode", "resize", "encode", "write",
    ]
    assert sorted(result.timings.size_timings) == [16, 32]
    assert set(result.timings.size_timings[32]) == {"resize", "encode"}


def test_timing_summary_logged_at_debug(sample_image, output_dir, caplog):
    with caplog.at_level(logging.DEBUG, logger="ico_toolkit"):
        convert_image(sample_image, _config(output_dir, sizes=(16,)))

    assert "=== Conversion Timing Summary ===" in caplog.text
    assert "slowest stage:" in caplog.text
    assert "16px  resize" in caplog.text


def test_default_output_dir_is_cwd(sample_image, tmp_path, monkeypatch):
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)

    result = convert_image(sample_image, ConversionConfig(sizes=(16,)))

    assert (workdir / "source.ico").is_file()
    assert result.output_path.name == "source.ico"


def test_svg_scenario_strict_no_warnings(requires_cairo, make_svg, output_dir, ico_entries):
    """64x64 SVG with [16, 64] in strict mode: rendered once at 64, no warnings."""
    source = make_svg(width="64", height="64", name="logo.svg")

    result = convert_image(source, _config(output_dir, sizes=(16, 64), strict=True))

    assert result.warnings == []
    assert result.output_path == output_dir / "logo.ico"
    assert ico_entries(result.output_path) == [(16, 16), (64, 64)]


def test_svg_rendered_at_largest_size(requires_cairo, make_svg, output_dir, monkeypatch):
    import cairosvg.surface

    calls = []

    class RecordingSurface(cairosvg.surface.PNGSurface):
        def __init__(self, tree, output, dpi, **kwargs):
            calls.append((kwargs.get("output_width"), kwargs.get("output_height")))
            super().__init__(tree, output, dpi, **kwargs)

    monkeypatch.setattr(cairosvg.surface, "PNGSurface", RecordingSurface)
    source = make_svg(width="64", height="64")

    convert_image(source, _config(output_dir, sizes=(16, 64)))

    assert calls == [(64, 64)]


def test_svg_non_square_document_warns(requires_cairo, make_svg, output_dir):
    source = make_svg(width="100", height="50")

    result = convert_image(source, _config(output_dir, sizes=(32,)))

    assert [w.kind for w in result.warnings] == [WarningKind.NON_SQUARE_INPUT]
    assert result.written
