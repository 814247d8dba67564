import pytest

from ar_tryon.config.settings import AdjustmentLimits, AssetConfig, CameraConfig, DetectionConfig
from ar_tryon.utils.config_loader import Config, get_config


def test_default_config_sections():
    config = get_config()

    assert config.get('mediapipe.detection.max_num_faces') == 1
    assert config.mediapipe.detection.refine_landmarks is True
    assert config.camera.width == 1280
    assert config.get('missing.key', 'fallback') == 'fallback'


def test_config_file_override(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("camera:\n  width: 640\n  height: 480\n", encoding='utf-8')

    config = Config(str(path))

    assert config.camera.width == 640
    assert CameraConfig.from_config(config) == CameraConfig(width=640, height=480)


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        Config(str(tmp_path / "nope.yaml"))


def test_invalid_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("camera: [unclosed\n", encoding='utf-8')

    with pytest.raises(ValueError):
        Config(str(path))


def test_unknown_attribute():
    with pytest.raises(AttributeError):
        get_config().not_a_section


def test_detection_config_validation():
    assert DetectionConfig.from_config().min_detection_confidence == 0.5

    with pytest.raises(ValueError):
        DetectionConfig(min_detection_confidence=1.5)
    with pytest.raises(ValueError):
        DetectionConfig(max_num_faces=0)


def test_asset_paths():
    config = AssetConfig(directory="public/images", extension="png")

    assert config.path_for("hat1").as_posix() == "public/images/hat1.png"
    assert AssetConfig.from_config().preload == ['glasses1', 'glasses2', 'glasses3', 'hat1', 'hat2']


def test_adjustment_limits_from_config():
    limits = AdjustmentLimits.from_config()

    assert limits.clamp('y_offset', -50) == -20.0
    assert limits.step('scale') == 0.05


def test_environment_override(tmp_path, monkeypatch):
    path = tmp_path / "custom.yaml"
    path.write_text("frame_loop:\n  queue_size: 3\n", encoding='utf-8')
    monkeypatch.setenv("AR_TRYON_CONFIG_PATH", str(path))

    config = Config()

    assert config.get('frame_loop.queue_size') == 3
    assert 'camera.width' not in config


def test_module_loggers_share_package_handlers():
    from ar_tryon.utils import get_logger

    assert get_logger("ar_tryon.core.renderer").parent.name in ("ar_tryon.core", "ar_tryon")
    assert get_logger("__main__").name == "ar_tryon.main"


def test_relative_asset_directory_follows_config_file(tmp_path, monkeypatch):
    path = tmp_path / "conf" / "config.yaml"
    path.parent.mkdir()
    path.write_text("assets:\n  directory: ../images\n", encoding='utf-8')
    monkeypatch.chdir(tmp_path / "conf")

    config = AssetConfig.from_config(Config(str(path)))

    assert config.directory == (tmp_path / "images").resolve()
    assert config.path_for("hat1") == (tmp_path / "images" / "hat1.png").resolve()


def test_absolute_asset_directory_is_kept(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(f"assets:\n  directory: {(tmp_path / 'shop').as_posix()}\n", encoding='utf-8')

    assert AssetConfig.from_config(Config(str(path))).directory == tmp_path / "shop"


def test_bundled_sample_images_are_found():
    config = AssetConfig.from_config()

    for product_id in config.preload:
        assert config.path_for(product_id).is_file()
