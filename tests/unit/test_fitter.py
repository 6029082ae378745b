"""Unit tests for canvas fitting."""

import pytest

from glyphsmith.config import FitConfig
from glyphsmith.core.fitter import fit
from glyphsmith.domain import Character, FontMetrics, Path, PathType, Point, Segment
from glyphsmith.exceptions import DegenerateGeometryError


def rect(x0: float, y0: float, x1: float, y1: float) -> Path:
    corners = [Point(x0, y0), Point(x1, y0), Point(x1, y1), Point(x0, y1)]
    return Path("r", PathType.OUTLINE, segment_groups=[[Segment.corner(c) for c in corners]])


class TestFit:
    """Tests for fit."""

    def test_fits_and_centres(self) -> None:
        transform = fit([rect(0, 0, 100, 200)], 500, 0)
        assert transform.scale == pytest.approx(2.1)
        assert not transform.is_empty
        top_left = transform.apply(Point(0, 0))
        bottom_right = transform.apply(Point(100, 200))
        assert top_left.y == pytest.approx(40)
        assert bottom_right.y == pytest.approx(460)
        assert (top_left.x + bottom_right.x) / 2 == pytest.approx(250)

    def test_scale_is_capped(self) -> None:
        transform = fit([rect(0, 0, 10, 10)], 500, 0)
        assert transform.scale == 4.0
        assert transform.apply(Point(5, 5)) == Point(250, 250)

    def test_custom_margin_and_cap(self) -> None:
        config = FitConfig(canvas_margin=0, max_scale=10)
        transform = fit([rect(0, 0, 100, 100)], 300, 0, config=config)
        assert transform.scale == pytest.approx(3.0)

    def test_stroke_thickness_enlarges_box(self) -> None:
        line = Path("l", PathType.LINE, points=[Point(0, 0), Point(100, 100)])
        thin = fit([line], 500, 0)
        thick = fit([line], 500, 20)
        assert thick.scale < thin.scale

    def test_empty_input(self) -> None:
        transform = fit([], 400, 15)
        assert transform.is_empty
        assert transform.scale == 1.0
        assert (transform.tx, transform.ty) == (200, 200)

    def test_zero_size_box_is_centred(self) -> None:
        point = Path("l", PathType.LINE, points=[Point(10, 20)])
        transform = fit([point], 500, 0)
        assert transform.is_empty
        assert transform.apply(Point(10, 20)) == Point(250, 250)

    def test_non_positive_canvas_raises(self) -> None:
        with pytest.raises(DegenerateGeometryError):
            fit([rect(0, 0, 1, 1)], 0, 0)

    def test_metric_band_included(self) -> None:
        metrics = FontMetrics(top_line_y=300, base_line_y=700)
        transform = fit([rect(0, 400, 100, 500)], 500, 0, metrics=metrics)
        # Box spans the 400 unit band, not the 100 unit ink
        assert transform.scale == pytest.approx(420 / 400)

    def test_metric_band_can_be_disabled(self) -> None:
        metrics = FontMetrics(top_line_y=300, base_line_y=700)
        config = FitConfig(include_metric_band=False)
        transform = fit([rect(0, 400, 100, 500)], 500, 0, metrics=metrics, config=config)
        assert transform.scale == pytest.approx(4.0)

    def test_side_bearings_included(self) -> None:
        metrics = FontMetrics(top_line_y=0, base_line_y=100, default_lsb=50, default_rsb=50)
        character = Character("o", unicode=111, lsb=150)
        transform = fit([rect(0, 0, 100, 100)], 500, 0, character=character, metrics=metrics)
        # 150 + 100 + 50 wide
        assert transform.scale == pytest.approx(420 / 300)
        assert transform.apply(Point(-150, 0)).x == pytest.approx(40)
