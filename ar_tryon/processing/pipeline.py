"""
프레임별 오버레이 파이프라인

landmark 이벤트 → feature 요약 → 배치 계산 → 렌더링
"""

import time
from concurrent.futures import Future
from dataclasses import replace
from typing import Callable, Dict, Mapping, Optional, Sequence

from ..config.constants import FEATURE_INDEX_GROUPS, LANDMARK_COUNT
from ..config.settings import AssetConfig
from ..core.asset_cache import AssetCache
from ..core.placement import compute_placement
from ..core.renderer import OverlayRenderer
from ..models import FrameEvent, Placement, ProductAsset, ProductFamily
from ..utils import get_logger
from ..utils.exceptions import AssetLoadError, FeatureNotDetected, UnknownProductFamily
from ..utils.validators import validate_feature_tables
from .catalog import ProductCatalog
from .session import TryOnSession

logger = get_logger(__name__)

AssetErrorHandler = Callable[[AssetLoadError], None]


class OverlayPipeline:
    """
    프레임 단위 오버레이 파이프라인

    프레임마다 캔버스를 지우고, 선택된 상품과 첫 번째 얼굴이 있으면
    배치를 계산해 그린다. 프레임 단위 실패(feature 미검출, 알 수 없는
    상품군, 로드 중인 이미지)는 해당 프레임 그리기만 건너뛴다.
    """

    def __init__(
        self,
        catalog: ProductCatalog,
        asset_cache: AssetCache,
        renderer: Optional[OverlayRenderer] = None,
        feature_tables: Mapping[str, Mapping[str, Sequence[int]]] = FEATURE_INDEX_GROUPS,
        landmark_count: int = LANDMARK_COUNT,
        on_asset_error: Optional[AssetErrorHandler] = None,
        retry_interval: Optional[float] = None
    ):
        """
        Args:
            catalog: 상품 카탈로그
            asset_cache: 상품 이미지 캐시
            renderer: 렌더러 (None이면 기본 OverlayRenderer)
            feature_tables: 상품군별 FeatureIndexGroup 테이블
            landmark_count: 검출기 랜드마크 개수
            on_asset_error: 이미지 로드 실패 알림 콜백 (프레임 스레드에서 호출)
            retry_interval: 로드 실패 후 재시도 최소 간격 (초)

        Raises:
            InvalidIndexGroup: 인덱스 테이블 설정 오류
        """
        validate_feature_tables(feature_tables, landmark_count)

        self.catalog = catalog
        self.asset_cache = asset_cache
        self.renderer = renderer or OverlayRenderer()
        self.feature_tables = feature_tables
        self.on_asset_error = on_asset_error
        self.retry_interval = AssetConfig().retry_interval if retry_interval is None else retry_interval

        self._reported_families = set()
        self._pending: Dict[str, Future] = {}
        self._failed_at: Dict[str, float] = {}

    def process_frame(self, event: Optional[FrameEvent], surface, session: TryOnSession) -> bool:
        """
        한 프레임 처리

        Args:
            event: 검출기 프레임 이벤트 (None 또는 얼굴 없음 → 오버레이 없음)
            surface: 그리기 대상 캔버스
            session: 상품 선택 및 조정값

        Returns:
            상품을 그렸으면 True
        """
        # 조정값은 프레임 시작 시 한 번만 읽음
        product_id = session.selection.product_id
        adjustments = replace(session.adjustments)

        landmarks = event.first_face if event is not None else None
        placement: Optional[Placement] = None
        asset: Optional[ProductAsset] = None

        family = self._family_of(product_id) if product_id and landmarks else None
        if family is not None:
            asset = self._resolve_asset(product_id)
            if asset is not None:
                placement = self._compute(family, landmarks, adjustments, asset)

        return self.renderer.render(surface, placement, asset)

    def clear(self, surface):
        """외부에서 호출하는 캔버스 지우기 (카메라 정지 등)"""
        self.renderer.clear(surface)
        logger.debug("Overlay cleared")

    def _family_of(self, product_id: str) -> Optional[ProductFamily]:
        try:
            return self.catalog.family_of(product_id)
        except UnknownProductFamily as e:
            # 설정 오류는 상품별로 한 번만 기록
            if product_id not in self._reported_families:
                self._reported_families.add(product_id)
                logger.warning(f"Skipping product {product_id}: {e}")
            return None

    def _compute(self, family, landmarks, adjustments, asset) -> Optional[Placement]:
        try:
            return compute_placement(family, landmarks, adjustments, asset.size, self.feature_tables)
        except UnknownProductFamily as e:
            if family not in self._reported_families:
                self._reported_families.add(family)
                logger.warning(f"No placement calculator: {e}")
            return None
        except FeatureNotDetected as e:
            logger.debug(f"Skipping frame: {e}")
            return None

    def _resolve_asset(self, product_id: str) -> Optional[ProductAsset]:
        """
        캐시된 이미지 반환

        없으면 로드를 시작하고 이번 프레임은 건너뛴다 (대기하지 않음).
        로드 실패는 한 번씩 on_asset_error로 전달되고, retry_interval 이후
        다음 참조 시 다시 로드한다.
        """
        asset = self.asset_cache.get(product_id)
        if asset is not None:
            self._pending.pop(product_id, None)
            return asset

        future = self._pending.get(product_id)
        if future is None:
            failed_at = self._failed_at.get(product_id)
            if failed_at is not None and time.monotonic() - failed_at < self.retry_interval:
                return None
            future = self.asset_cache.load(product_id)
            self._pending[product_id] = future

        if not future.done():
            return None

        del self._pending[product_id]
        error = future.exception()
        if error is None:
            self._failed_at.pop(product_id, None)
            return future.result()

        self._failed_at[product_id] = time.monotonic()
        if self.on_asset_error is not None:
            self.on_asset_error(error)
        return None
