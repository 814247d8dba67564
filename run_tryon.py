#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
AR Try-On - 실시간 웹캠 상품 오버레이

Architecture:
- 캡처 스레드: Camera → FaceMesh → FrameEvent → FrameLoop.submit()
- 메인 스레드: FrameLoop.run() → OverlayPipeline → OverlayCanvas → OpenCV 디스플레이

Keys:
    1-9  상품 선택 (카탈로그 순서)      0  상품 해제
    + -  크기                          w s  위/아래
    a d  회전                          r    조정값 초기화
    c    오버레이 지우기                q    종료
"""

import argparse
import threading
import time
from dataclasses import replace

import cv2

from ar_tryon.config.settings import AssetConfig, CameraConfig
from ar_tryon.core import AssetCache, ImageDirectoryLoader, OverlayCanvas
from ar_tryon.processing import FrameLoop, OverlayPipeline, ProductCatalog, TryOnSession
from ar_tryon.processing.camera import CameraFeed
from ar_tryon.processing.landmark_source import FaceMeshLandmarkSource
from ar_tryon.utils import get_config, get_logger, setup_logging

logger = get_logger(__name__)

# key → (adjustment, direction)
ADJUSTMENT_KEYS = {
    ord('+'): ('scale', 1), ord('='): ('scale', 1), ord('-'): ('scale', -1),
    ord('w'): ('y_offset', -1), ord('s'): ('y_offset', 1),
    ord('a'): ('rotation', -1), ord('d'): ('rotation', 1),
}


class TryOnApp:
    """
    실시간 AR 착용 뷰어

    Features:
    - 상품 이미지 미리 로드
    - 키보드로 상품 선택 및 조정
    - FPS 및 현재 상태 표시
    """

    def __init__(self, camera_config: CameraConfig, asset_config: AssetConfig, product_id: str = None):
        config = get_config()

        self.camera = CameraFeed(camera_config)
        self.asset_config = asset_config
        self.catalog = ProductCatalog.from_config()
        self.cache = AssetCache(ImageDirectoryLoader(asset_config), max_workers=asset_config.max_workers)
        self.session = TryOnSession.from_config()
        self.pipeline = OverlayPipeline(
            self.catalog,
            self.cache,
            on_asset_error=self.on_asset_error,
            retry_interval=asset_config.retry_interval
        )
        self.canvas = OverlayCanvas(camera_config.width, camera_config.height)
        self.loop = FrameLoop(
            self.pipeline,
            self.canvas,
            self.session,
            queue_size=config.get('frame_loop.queue_size', 1)
        )

        if product_id:
            self.session.set_product(product_id)

        self.status = ""
        self.window_name = "AR Try-On"
        self._stop_event = threading.Event()

        # 성능 측정
        self.fps = 0.0
        self.last_fps_time = None
        self.frame_count_in_interval = 0

    def on_asset_error(self, error):
        """이미지 로드 실패 → 화면 상태 표시"""
        self.status = f"Image unavailable: {error.product_id}"

    def capture_worker(self):
        """카메라 프레임 → 랜드마크 검출 → 채널"""
        try:
            with FaceMeshLandmarkSource() as source:
                for frame_number, frame in self.camera.frames():
                    if self._stop_event.is_set():
                        break
                    self.loop.submit(source.detect(frame, frame_number))
        except Exception as e:
            logger.error(f"Capture stopped: {e}")
        finally:
            self.loop.stop()

    def update_fps(self):
        current_time = time.time()
        if self.last_fps_time is None:
            self.last_fps_time = current_time

        self.frame_count_in_interval += 1
        if current_time - self.last_fps_time >= 1.0:
            self.fps = self.frame_count_in_interval / (current_time - self.last_fps_time)
            self.last_fps_time = current_time
            self.frame_count_in_interval = 0

    def on_frame(self, event, drawn: bool):
        """FrameLoop 콜백: 합성 후 디스플레이, 키 처리"""
        frame = event.image
        if frame is None:
            return True

        self.update_fps()

        height, width = frame.shape[:2]
        if (self.canvas.width, self.canvas.height) != (width, height):
            # 캔버스는 비디오 크기를 따라감, 다음 프레임부터 그림
            self.canvas.resize(width, height)
            display_image = frame.copy()
        else:
            display_image = self.canvas.composite(frame)

        adjustments = self.session.adjustments
        lines = [
            f"FPS: {self.fps:.1f}",
            f"Product: {self.session.product_id or '-'}",
            f"scale {adjustments.scale:.2f}  y {adjustments.y_offset:+.0f}%  "
            f"rot {adjustments.rotation:+.0f}deg",
        ]
        if self.status:
            lines.append(self.status)
        for i, text in enumerate(lines):
            cv2.putText(display_image, text, (10, 30 + 30 * i),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.7, (0, 255, 0), 2)

        cv2.imshow(self.window_name, display_image)
        return self.handle_key(cv2.waitKey(1) & 0xFF)

    def handle_key(self, key: int) -> bool:
        """키 입력 처리 (False → 종료)"""
        if key == ord('q'):
            return False

        products = self.catalog.ids()
        if ord('1') <= key <= ord('9'):
            index = key - ord('1')
            if index < len(products):
                self.session.set_product(products[index])
                self.status = ""
        elif key == ord('0'):
            self.session.set_product(None)
        elif key in ADJUSTMENT_KEYS:
            kind, direction = ADJUSTMENT_KEYS[key]
            self.session.nudge(kind, direction)
        elif key == ord('r'):
            self.session.adjustments.reset(self.session.defaults)
        elif key == ord('c'):
            self.session.set_product(None)
            self.loop.clear()

        return True

    def run(self):
        """메인 실행 루프"""
        print("=" * 80)
        print("  AR Try-On")
        print("=" * 80)

        failures = self.cache.preload(self.asset_config.preload)
        for product_id in failures:
            print(f"⚠️  Product image unavailable: {product_id}")

        print("Products: " + ", ".join(
            f"{i + 1}={product_id}" for i, product_id in enumerate(self.catalog.ids())))
        print("Keys: 1-9 select, 0 none, +/- scale, w/s move, a/d rotate, r reset, c clear, q quit")
        print("=" * 80)

        cv2.namedWindow(self.window_name, cv2.WINDOW_NORMAL)
        worker = threading.Thread(target=self.capture_worker, name="capture", daemon=True)

        try:
            self.camera.open()
            worker.start()
            self.loop.run(on_frame=self.on_frame)
        except KeyboardInterrupt:
            print("\n⚠️  Keyboard interrupt")
        finally:
            self._stop_event.set()
            if worker.is_alive():
                worker.join(timeout=2.0)
            self.camera.release()
            self.cache.close()
            cv2.destroyAllWindows()

            print(f"Frames processed: {self.loop.frames_processed}, dropped: {self.loop.frames_dropped}")


def main():
    """메인 엔트리 포인트"""
    parser = argparse.ArgumentParser(description="Real-time AR product try-on")
    parser.add_argument('--camera', type=int, default=None, help="camera device id")
    parser.add_argument('--width', type=int, default=None, help="capture width")
    parser.add_argument('--height', type=int, default=None, help="capture height")
    parser.add_argument('--assets', type=str, default=None, help="product image directory")
    parser.add_argument('--product', type=str, default=None, help="initially selected product id")
    parser.add_argument('--log-level', type=str, default=None, help="override logging.level (e.g. DEBUG)")
    args = parser.parse_args()

    if args.log_level:
        setup_logging(level=args.log_level)

    camera_config = CameraConfig.from_config()
    overrides = {
        key: value for key, value in
        (('device_id', args.camera), ('width', args.width), ('height', args.height))
        if value is not None
    }
    camera_config = replace(camera_config, **overrides)

    asset_config = AssetConfig.from_config()
    if args.assets:
        asset_config = replace(asset_config, directory=args.assets)

    TryOnApp(camera_config, asset_config, args.product).run()


if __name__ == "__main__":
    main()
