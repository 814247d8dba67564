"""
Configuration Loader Module
ar_tryon/config.yaml (또는 AR_TRYON_CONFIG_PATH)을 읽어 설정값을 제공
"""
import os
import yaml
from pathlib import Path
from typing import Any, Dict, Optional

CONFIG_ENV_VAR = 'AR_TRYON_CONFIG_PATH'

_MISSING = object()


def default_config_path() -> Path:
    """환경 변수가 있으면 그 경로, 없으면 패키지에 포함된 config.yaml"""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return Path(__file__).resolve().parent.parent / "config.yaml"


class ConfigSection:
    """
    중첩된 설정 딕셔너리 뷰

    - section.camera.width 처럼 속성으로 접근
    - section.get('camera.width', 1280) 처럼 점(.) 경로로 접근
    """

    def __init__(self, data: Dict[str, Any]):
        self._data = data

    def _lookup(self, key_path: str) -> Any:
        value: Any = self._data
        for key in key_path.split('.'):
            if not isinstance(value, dict) or key not in value:
                return _MISSING
            value = value[key]
        return value

    @staticmethod
    def _wrap(value: Any) -> Any:
        return ConfigSection(value) if isinstance(value, dict) else value

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        점(.) 경로로 설정값 가져오기

        Example:
            >>> config.get('mediapipe.detection.max_num_faces')
            1
        """
        value = self._lookup(key_path)
        return default if value is _MISSING else value

    def __getattr__(self, name: str):
        if name.startswith('_'):
            raise AttributeError(name)

        value = self._lookup(name)
        if value is _MISSING:
            raise AttributeError(f"{self.__class__.__name__} has no key '{name}'")
        return self._wrap(value)

    def __contains__(self, key_path: str) -> bool:
        return self._lookup(key_path) is not _MISSING

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._data)

    def __repr__(self):
        return f"ConfigSection({list(self._data)})"


class Config(ConfigSection):
    """
    YAML 설정 파일

    Usage:
        config = Config()
        config.assets.directory          # 'assets/images'
        config.get('camera.width', 640)  # 1280
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Args:
            config_path: YAML 파일 경로 (None이면 default_config_path())

        Raises:
            FileNotFoundError: 파일 없음
            ValueError: YAML 형식 오류
        """
        self.config_path = Path(config_path) if config_path else default_config_path()
        super().__init__({})
        self.reload()

    def reload(self):
        """설정 파일 다시 읽기"""
        if not self.config_path.is_file():
            raise FileNotFoundError(
                f"Config file not found: {self.config_path} "
                f"(set {CONFIG_ENV_VAR} to use another file)"
            )

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML format in {self.config_path}: {e}")

        if not isinstance(data, dict):
            raise ValueError(f"Top level of {self.config_path} must be a mapping")
        self._data = data

    def __repr__(self):
        return f"Config(path={self.config_path})"


# Singleton
_global_config: Optional[Config] = None


def get_config() -> Config:
    """프로세스 전역 Config (처음 호출 시 로드)"""
    global _global_config

    if _global_config is None:
        _global_config = Config()

    return _global_config


def reload_config() -> Config:
    """전역 설정 다시 로드 (환경 변수 변경 반영)"""
    global _global_config
    _global_config = Config()
    return _global_config
