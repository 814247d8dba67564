import logging
import threading

import numpy as np
import pytest

from ar_tryon.core.asset_cache import AssetCache
from ar_tryon.core.canvas import OverlayCanvas
from ar_tryon.models import CatalogEntry, FrameEvent
from ar_tryon.processing import OverlayPipeline, ProductCatalog, TryOnSession
from ar_tryon.utils.exceptions import AssetLoadError, InvalidIndexGroup

from conftest import RecordingSurface, make_face, wait_until

CATALOG = ProductCatalog([
    CatalogEntry("glasses1", "glasses"),
    CatalogEntry("hat1", "hat"),
    CatalogEntry("shoes1", "shoes"),
])


def image_loader(product_id):
    if product_id.endswith("missing"):
        raise FileNotFoundError(product_id)
    image = np.zeros((50, 100, 4), dtype=np.uint8)
    image[:, :] = (0, 0, 255, 255)
    return image


@pytest.fixture
def cache():
    cache = AssetCache(image_loader, max_workers=2)
    cache.preload(["glasses1", "hat1", "shoes1"])
    yield cache
    cache.close()


@pytest.fixture
def session():
    return TryOnSession()


@pytest.fixture
def pipeline(cache):
    return OverlayPipeline(CATALOG, cache, retry_interval=0.0)


def test_draws_selected_product(pipeline, session, face_event):
    surface = RecordingSurface(640, 480)
    session.set_product("glasses1")

    assert pipeline.process_frame(face_event, surface, session)
    assert 'draw_image' in surface.names()


def test_no_product_selected_only_clears(pipeline, session, face_event):
    surface = RecordingSurface(640, 480)

    assert not pipeline.process_frame(face_event, surface, session)
    assert surface.names() == ['clear_rect']


@pytest.mark.parametrize("event", [None, FrameEvent(faces=[])])
def test_no_face_only_clears(pipeline, session, event):
    surface = RecordingSurface(640, 480)
    session.set_product("glasses1")

    assert not pipeline.process_frame(event, surface, session)
    assert surface.names() == ['clear_rect']


def test_only_first_face_is_used(pipeline, session):
    surface = RecordingSurface(200, 100)
    session.set_product("glasses1")
    event = FrameEvent(faces=[make_face(), make_face(left_eye=(0.1, 0.1), right_eye=(0.2, 0.1))])

    pipeline.process_frame(event, surface, session)

    assert ('translate', 100.0, 50.0) in surface.calls


def test_unknown_family_skips_draw_and_logs_once(pipeline, session, face_event, caplog):
    surface = RecordingSurface(640, 480)
    session.set_product("shoes1")

    with caplog.at_level(logging.WARNING, logger="ar_tryon.processing.pipeline"):
        for _ in range(3):
            assert not pipeline.process_frame(face_event, surface, session)

    assert 'draw_image' not in surface.names()
    assert set(surface.names()) == {'clear_rect'}
    warnings = [r for r in caplog.records if "shoes1" in r.getMessage()]
    assert len(warnings) == 1


def test_feature_not_detected_skips_draw(pipeline, session):
    surface = RecordingSurface(640, 480)
    session.set_product("glasses1")
    event = FrameEvent(faces=[make_face()[:300]])

    assert not pipeline.process_frame(event, surface, session)
    assert surface.names() == ['clear_rect']


def test_loading_asset_skips_frame_then_draws():
    release = threading.Event()

    def slow_loader(product_id):
        release.wait(timeout=5)
        return image_loader(product_id)

    cache = AssetCache(slow_loader, max_workers=1)
    pipeline = OverlayPipeline(CATALOG, cache)
    session = TryOnSession()
    session.set_product("hat1")
    event = FrameEvent(faces=[make_face()])
    try:
        assert not pipeline.process_frame(event, RecordingSurface(), session)
        assert cache.is_loading("hat1")

        release.set()
        assert wait_until(lambda: "hat1" in cache)
        assert pipeline.process_frame(event, RecordingSurface(), session)
    finally:
        release.set()
        cache.close()


def test_asset_failure_is_reported_to_application(cache, session, face_event):
    errors = []
    pipeline = OverlayPipeline(CATALOG, cache, on_asset_error=errors.append, retry_interval=0.0)
    session.set_product("glasses_missing")
    surface = RecordingSurface()

    def frame_reports_error():
        pipeline.process_frame(face_event, surface, session)
        return bool(errors)

    assert wait_until(frame_reports_error)
    assert isinstance(errors[0], AssetLoadError)
    assert errors[0].product_id == "glasses_missing"
    assert 'draw_image' not in surface.names()


def test_failed_asset_waits_for_retry_interval(cache, session, face_event):
    errors = []
    pipeline = OverlayPipeline(CATALOG, cache, on_asset_error=errors.append, retry_interval=60.0)
    session.set_product("glasses_missing")

    assert wait_until(lambda: pipeline.process_frame(face_event, RecordingSurface(), session) or errors)

    for _ in range(5):
        pipeline.process_frame(face_event, RecordingSurface(), session)

    assert len(errors) == 1
    assert not cache.is_loading("glasses_missing")


def test_adjustment_changes_apply_on_next_frame(pipeline, session, face_event):
    session.set_product("glasses1")
    first = RecordingSurface(200, 100)
    pipeline.process_frame(face_event, first, session)

    session.set_adjustment("rotation", 90.0)
    second = RecordingSurface(200, 100)
    pipeline.process_frame(face_event, second, session)

    rotate_first = [c for c in first.calls if c[0] == 'rotate'][0]
    rotate_second = [c for c in second.calls if c[0] == 'rotate'][0]
    assert rotate_second[1] - rotate_first[1] == pytest.approx(np.pi / 2)


def test_clear_is_independent_of_frames(pipeline, session, face_event):
    canvas = OverlayCanvas(320, 240)
    session.set_product("glasses1")
    pipeline.process_frame(face_event, canvas, session)
    assert not canvas.is_blank()

    pipeline.clear(canvas)

    assert canvas.is_blank()


def test_invalid_index_table_fails_at_startup(cache):
    tables = {'glasses': {'LEFT_EYE': [33, 900], 'RIGHT_EYE': [362]}}

    with pytest.raises(InvalidIndexGroup):
        OverlayPipeline(CATALOG, cache, feature_tables=tables)


def test_empty_index_group_fails_at_startup(cache):
    with pytest.raises(InvalidIndexGroup):
        OverlayPipeline(CATALOG, cache, feature_tables={'hat': {'FOREHEAD': []}})
