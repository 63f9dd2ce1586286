import numpy as np
import pytest

from imgproof.repositories.font_repository import FontRepository
from imgproof.exceptions import InvalidParameterError


@pytest.fixture(scope="module")
def font_repository():
    return FontRepository()


def test_rasterizes_visible_glyph(font_repository):
    glyph = font_repository.rasterize("A", 24)
    assert glyph.coverage.size > 0
    assert glyph.coverage.min() >= 0.0 and glyph.coverage.max() <= 1.0
    assert glyph.coverage.max() > 0.5
    assert glyph.ascent > 0 and glyph.descent >= 0
    assert glyph.top < 0
    assert glyph.advance > 0


def test_coverage_callback_matches_mask(font_repository):
    glyph = font_repository.rasterize("M", 20)
    row, col = np.unravel_index(np.argmax(glyph.coverage), glyph.coverage.shape)
    dx, dy = int(col) + glyph.left, int(row) + glyph.top
    assert glyph.coverage_at(dx, dy) == pytest.approx(glyph.coverage.max())
    assert glyph.coverage_at(glyph.left - 1, glyph.top) == 0.0


def test_whitespace_only_advances(font_repository):
    glyph = font_repository.rasterize(" ", 20)
    assert glyph.coverage.size == 0 or glyph.coverage.max() == 0.0
    assert glyph.advance > 0


def test_larger_size_gives_larger_glyph(font_repository):
    small = font_repository.rasterize("H", 12)
    large = font_repository.rasterize("H", 36)
    assert large.coverage.shape[0] > small.coverage.shape[0]


def test_rejects_non_positive_size(font_repository):
    with pytest.raises(InvalidParameterError):
        font_repository.rasterize("A", 0)


def test_missing_font_file_is_an_input_error():
    with pytest.raises(InvalidParameterError):
        FontRepository(font_path="/nonexistent/font.ttf").rasterize("A", 12)
