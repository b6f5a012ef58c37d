import pytest
import struct
import sys
from pathlib import Path
from PIL import Image

# Add src to sys.path so we can import ico_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())


def _cairo_available() -> bool:
    try:
        import cairosvg  # noqa: F401
    except (ImportError, OSError):
        return False
    return True


CAIRO_AVAILABLE = _cairo_available()


# Common test fixtures
@pytest.fixture
def requires_cairo():
    """Skip SVG rendering tests when cairo is missing."""
    if not CAIRO_AVAILABLE:
        pytest.skip("CairoSVG or the cairo library is not installed")


@pytest.fixture
def make_png(tmp_path: Path):
    """Factory writing an RGBA PNG of the given size and returning its path."""
    def _make(width: int, height: int, name: str = "source.png") -> Path:
        img = Image.new("RGBA", (width, height), color=(200, 40, 40, 255))
        # Quadrant so resampling has something to blend
        img.paste((20, 80, 220, 128), (0, 0, width // 2, height // 2))
        path = tmp_path / name
        img.save(path)
        return path
    return _make


@pytest.fixture
def sample_image(make_png):
    """A 128x128 square PNG."""
    return make_png(128, 128)


@pytest.fixture
def make_svg(tmp_path: Path):
    """Factory writing an SVG document and returning its path."""
    def _make(width="64", height="64", view_box=None, name="vector.svg", body=None) -> Path:
        attrs = ['xmlns="http://www.w3.org/2000/svg"']
        if width is not None:
            attrs.append(f'width="{width}"')
        if height is not None:
            attrs.append(f'height="{height}"')
        if view_box is not None:
            attrs.append(f'viewBox="{view_box}"')
        content = body or '<rect x="0" y="0" width="100%" height="100%" fill="#3366cc"/>'
        path = tmp_path / name
        path.write_text(f"<svg {' '.join(attrs)}>{content}</svg>", encoding="utf-8")
        return path
    return _make


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Separate directory for written icons."""
    out = tmp_path / "out"
    out.mkdir()
    return out


@pytest.fixture
def ico_entries():
    """Read (width, height) of each directory entry, in file order."""
    def _read(path: Path):
        data = path.read_bytes()
        reserved, kind, count = struct.unpack_from("<HHH", data, 0)
        assert (reserved, kind) == (0, 1)
        entries = []
        for i in range(count):
            width, height = struct.unpack_from("<BB", data, 6 + 16 * i)
            # 0 means 256
            entries.append((width or 256, height or 256))
        return entries
    return _read


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop console handlers a CLI test attached to captured streams."""
    yield
    import logging
    logger = logging.getLogger("ico_toolkit")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
