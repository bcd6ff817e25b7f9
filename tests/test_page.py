"""Test module for pathortho.page

The tests are run using pytest.
"""

import gzip

import pytest

from pathortho.orthogonalizer import orthogonalize
from pathortho.page import OrthoSvgPage
from pathortho.path import ClosedPath

RECTANGLE = ClosedPath([(0.0, 0.0), (10.0, 0.0), (10.0, 5.0), (0.0, 5.0), (0.0, 0.0)])
NEAR_SQUARE = ClosedPath([(0.0, 0.0), (10.0, 0.1), (10.1, 10.0), (0.0, 9.9), (0.0, 0.0)])


class TestOrthoSvgPage:
    """Test class for OrthoSvgPage."""

    def test_svg_path_string(self):
        assert OrthoSvgPage.svg_path_string(RECTANGLE) == "M 0.0 0.0 L 10.0 0.0 L 10.0 5.0 L 0.0 5.0 Z"

    def test_svg_path_string_open(self):
        path = ClosedPath([(0.0, 0.0), (1.0, 2.0)])
        assert OrthoSvgPage.svg_path_string(path) == "M 0.0 0.0 L 1.0 2.0"
        assert OrthoSvgPage.svg_path_string(ClosedPath()) == ""

    def test_box_with_margin(self):
        page = OrthoSvgPage(RECTANGLE.bounding_box)
        assert page.box.extent == pytest.approx((-0.5, -0.5, 10.5, 5.5))
        assert page.stroke_width == pytest.approx(0.02)

    def test_save_as(self, tmp_path):
        page = OrthoSvgPage.from_paths(NEAR_SQUARE, [orthogonalize(NEAR_SQUARE)])
        filename = tmp_path / "preview.svg"
        page.save_as(str(filename), include_debug_layer=True, pretty=True)
        content = filename.read_text(encoding="utf-8")
        assert "<svg" in content
        assert "scale(1,-1)" in content
        assert 'inkscape:label="main"' in content
        assert 'inkscape:label="debug"' in content
        assert content.count("<path") == 2
        assert content.count("<circle") == 4

    def test_save_without_debug_layer(self, tmp_path):
        page = OrthoSvgPage.from_paths(NEAR_SQUARE, [orthogonalize(NEAR_SQUARE)])
        filename = tmp_path / "preview.svg"
        page.save_as(str(filename))
        content = filename.read_text(encoding="utf-8")
        assert 'inkscape:label="debug"' not in content
        assert "<circle" not in content

    def test_save_compressed(self, tmp_path):
        page = OrthoSvgPage.from_paths(RECTANGLE, [RECTANGLE])
        filename = tmp_path / "preview.svgz"
        page.save_as(str(filename), compressed=True)
        content = gzip.decompress(filename.read_bytes()).decode("utf-8")
        assert "<svg" in content

    def test_page_stays_reusable(self):
        """Assembling for output leaves the page itself untouched."""
        page = OrthoSvgPage.from_paths(RECTANGLE, [RECTANGLE])
        first = page.to_string(include_debug_layer=True)
        page.add_path(NEAR_SQUARE, stroke="green")
        second = page.to_string(include_debug_layer=True)
        assert first.count('id="root"') == 1
        assert second.count('id="root"') == 1
        assert second.count("<path") == first.count("<path") + 1
        assert len(page.drawing.elements) == len(OrthoSvgPage(RECTANGLE.bounding_box).drawing.elements)
