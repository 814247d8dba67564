# -*- coding: utf-8 -*-
"""
Product image cache with deduplicated concurrent loads
"""

import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Callable, Dict, Iterable, Optional

import numpy as np

from ..config.settings import AssetConfig
from ..models import ProductAsset
from ..utils import get_logger
from ..utils.exceptions import AssetLoadError
from ..utils.image_utils import decode_image_bytes

logger = get_logger(__name__)

ImageLoader = Callable[[str], np.ndarray]


class ImageDirectoryLoader:
    """
    상품 ID → '<directory>/<id><extension>' 파일을 읽어 BGRA로 디코딩
    """

    def __init__(self, config: AssetConfig):
        self.config = config

    def __call__(self, product_id: str) -> np.ndarray:
        path = self.config.path_for(product_id)
        return decode_image_bytes(path.read_bytes())


class AssetCache:
    """
    상품 이미지 캐시

    - 로드 완료된 이미지는 프로세스 수명 동안 유지 (eviction 없음)
    - 같은 ID에 대한 동시 요청은 하나의 진행 중 Future를 공유 (singleflight)
    - 실패한 ID는 캐시에 남지 않으며 다음 참조 시 다시 로드
    """

    def __init__(self, loader: Optional[ImageLoader] = None, max_workers: int = 4):
        """
        Args:
            loader: 상품 ID → 디코딩된 이미지 (None이면 설정의 assets 디렉토리 사용)
            max_workers: 로드 스레드 개수
        """
        self.loader = loader or ImageDirectoryLoader(AssetConfig.from_config())
        self._assets: Dict[str, ProductAsset] = {}
        self._in_flight: Dict[str, Future] = {}
        self._lock = threading.Lock()
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="asset-loader")

    def load(self, product_id: str) -> Future:
        """
        상품 이미지 로드

        캐시에 있으면 완료된 Future를, 로드 중이면 진행 중인 같은 Future를,
        그 외에는 새 로드를 시작해 반환한다.

        Returns:
            Future[ProductAsset], 실패 시 AssetLoadError
        """
        with self._lock:
            asset = self._assets.get(product_id)
            if asset is not None:
                done: Future = Future()
                done.set_result(asset)
                return done

            future = self._in_flight.get(product_id)
            if future is not None and not future.done():
                return future

            logger.info(f"Loading product image: {product_id}")
            future = self._executor.submit(self._fetch, product_id)
            self._in_flight[product_id] = future

        # 완료된 Future는 add_done_callback이 즉시 호출하므로 lock 밖에서 등록
        future.add_done_callback(lambda f, pid=product_id: self._forget(pid, f))
        return future

    def get(self, product_id: str) -> Optional[ProductAsset]:
        """캐시된 이미지 반환 (없으면 None, 로드는 시작하지 않음)"""
        with self._lock:
            return self._assets.get(product_id)

    def is_loading(self, product_id: str) -> bool:
        with self._lock:
            future = self._in_flight.get(product_id)
        return future is not None and not future.done()

    def preload(self, product_ids: Iterable[str], timeout: Optional[float] = None) -> Dict[str, AssetLoadError]:
        """
        여러 상품 이미지를 미리 로드하고 모두 끝날 때까지 대기

        개별 실패는 치명적이지 않으며, 실패한 ID는 첫 사용 시 다시 로드된다.

        Returns:
            {product_id: AssetLoadError} 실패 목록
        """
        futures = {product_id: self.load(product_id) for product_id in dict.fromkeys(product_ids)}
        wait(list(futures.values()), timeout=timeout)

        failures: Dict[str, AssetLoadError] = {}
        for product_id, future in futures.items():
            if not future.done():
                continue
            error = future.exception()
            if error is not None:
                failures[product_id] = error

        loaded = sum(1 for f in futures.values() if f.done() and f.exception() is None)
        logger.info(f"Preloaded {loaded}/{len(futures)} product images")
        for product_id, error in failures.items():
            logger.warning(f"Preload failed for {product_id}: {error}")

        return failures

    def close(self):
        """로드 스레드 종료"""
        self._executor.shutdown(wait=True)

    def __contains__(self, product_id: str) -> bool:
        return self.get(product_id) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._assets)

    def _fetch(self, product_id: str) -> ProductAsset:
        try:
            asset = ProductAsset(product_id, self.loader(product_id))
        except Exception as e:
            logger.error(f"Failed to load product image {product_id}: {e}")
            raise AssetLoadError(product_id, str(e)) from e

        with self._lock:
            self._assets[product_id] = asset

        logger.info(f"Loaded product image {product_id} ({asset.width}x{asset.height})")
        return asset

    def _forget(self, product_id: str, future: Future):
        with self._lock:
            if self._in_flight.get(product_id) is future:
                del self._in_flight[product_id]

