import math

import numpy as np
import pytest

from ar_tryon.core.canvas import OverlayCanvas
from ar_tryon.core.renderer import OverlayRenderer
from ar_tryon.models import Placement

from conftest import RecordingSurface, make_asset

RED = (0, 0, 255, 255)


def centered(width=0.2, height=0.1, angle=0.0, y_offset_percent=0.0):
    return Placement(center_x=0.5, center_y=0.5, angle=angle, width=width,
                     height=height, y_offset_percent=y_offset_percent)


def test_render_call_sequence():
    surface = RecordingSurface(200, 100)
    asset = make_asset(width=20, height=10)

    drawn = OverlayRenderer().render(surface, centered(angle=0.3), asset)

    assert drawn
    assert surface.names() == ['clear_rect', 'save', 'translate', 'rotate', 'draw_image', 'restore']
    assert surface.calls[0] == ('clear_rect', 0, 0, 200, 100)
    assert surface.calls[2] == ('translate', 100.0, 50.0)
    assert surface.calls[3] == ('rotate', 0.3)
    # 40x20 px, 중심 기준
    _, x, y, w, h = surface.calls[4]
    assert (x, y, w, h) == pytest.approx((-20.0, -10.0, 40.0, 20.0))


def test_vertical_offset_is_percent_of_surface_height():
    surface = RecordingSurface(200, 100)

    OverlayRenderer().render(surface, centered(y_offset_percent=10.0), make_asset())

    assert surface.calls[2] == ('translate', 100.0, pytest.approx(60.0))


def test_render_without_placement_only_clears():
    surface = RecordingSurface(200, 100)

    drawn = OverlayRenderer().render(surface, None, make_asset())

    assert not drawn
    assert surface.names() == ['clear_rect']


def test_transform_is_restored_when_drawing_fails():
    class FailingSurface(RecordingSurface):
        def draw_image(self, image, x, y, w, h):
            raise RuntimeError("draw failed")

    surface = FailingSurface(200, 100)

    with pytest.raises(RuntimeError):
        OverlayRenderer().render(surface, centered(), make_asset())

    assert surface.names()[-1] == 'restore'


def test_canvas_draws_centered_image():
    canvas = OverlayCanvas(200, 100)

    OverlayRenderer().render(canvas, centered(), make_asset(width=20, height=10, bgra=RED))

    # 40x20 px 사각형: x 80~120, y 40~60
    assert canvas.layer[50, 100].tolist() == list(RED)
    assert canvas.layer[45, 85, 3] == 255
    assert canvas.layer[10, 10, 3] == 0
    assert canvas.layer[50, 70, 3] == 0
    assert canvas.save_depth == 0
    assert np.allclose(canvas.transform, np.eye(3))


def test_rotation_pivots_about_center():
    canvas = OverlayCanvas(200, 100)
    asset = make_asset(width=20, height=10, bgra=RED)

    OverlayRenderer().render(canvas, centered(angle=math.pi / 2), asset)

    # 90도 회전 후 20x40 px: x 90~110, y 30~70
    assert canvas.layer[50, 100, 3] == 255
    assert canvas.layer[35, 100, 3] == 255
    assert canvas.layer[50, 85, 3] == 0


def test_render_twice_is_identical():
    canvas = OverlayCanvas(160, 120)
    renderer = OverlayRenderer()
    asset = make_asset(width=30, height=15, bgra=(0, 255, 0, 128))
    placement = centered(width=0.4, height=0.2, angle=0.2)

    renderer.render(canvas, placement, asset)
    first = canvas.layer.copy()
    renderer.render(canvas, placement, asset)

    assert np.array_equal(first, canvas.layer)


def test_render_without_placement_clears_stale_overlay():
    canvas = OverlayCanvas(160, 120)
    renderer = OverlayRenderer()
    renderer.render(canvas, centered(), make_asset())
    assert not canvas.is_blank()

    renderer.render(canvas, None, None)

    assert canvas.is_blank()
