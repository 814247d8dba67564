# -*- coding: utf-8 -*-
"""
Frame loop adapter: single-consumer channel of landmark events
"""

import queue
import threading
from typing import Callable, Optional

from ..models import FrameEvent
from ..utils import get_logger
from .pipeline import OverlayPipeline
from .session import TryOnSession

logger = get_logger(__name__)

# run() 종료 신호
_STOP = object()

FrameCallback = Callable[[FrameEvent, bool], Optional[bool]]


class FrameLoop:
    """
    프레임 이벤트 채널

    - 생산자(카메라/검출 스레드)는 submit()으로 이벤트를 넣는다
    - 소비자 하나가 run()에서 이벤트를 꺼내 파이프라인을 동기 실행
    - 채널이 가득 차면 가장 오래된 이벤트를 버림 (오래된 프레임은 큐에 쌓지 않음)
    - stop()은 소비자를 종료하고 캔버스를 지운다
    """

    def __init__(
        self,
        pipeline: OverlayPipeline,
        surface,
        session: TryOnSession,
        queue_size: int = 1
    ):
        """
        Args:
            pipeline: 프레임 파이프라인
            surface: 그리기 대상 캔버스
            session: 상품 선택 및 조정값
            queue_size: 대기 가능한 최대 이벤트 수
        """
        if queue_size < 1:
            raise ValueError("queue_size must be >= 1")

        self.pipeline = pipeline
        self.surface = surface
        self.session = session
        self._queue: "queue.Queue" = queue.Queue(maxsize=queue_size)
        self._surface_lock = threading.Lock()
        self._running = False

        self.frames_processed = 0
        self.frames_dropped = 0

    @property
    def running(self) -> bool:
        return self._running

    def submit(self, event: FrameEvent) -> bool:
        """
        이벤트 전달 (블로킹 없음)

        Returns:
            기존 이벤트를 버렸으면 False
        """
        dropped = False
        while True:
            try:
                self._queue.put_nowait(event)
                return not dropped
            except queue.Full:
                try:
                    stale = self._queue.get_nowait()
                except queue.Empty:
                    continue
                if stale is _STOP:
                    # 종료 요청은 버리지 않음
                    self._queue.put_nowait(stale)
                    return False
                dropped = True
                self.frames_dropped += 1

    def process(self, event: Optional[FrameEvent]) -> bool:
        """이벤트 하나를 현재 스레드에서 바로 처리"""
        with self._surface_lock:
            drawn = self.pipeline.process_frame(event, self.surface, self.session)
        self.frames_processed += 1
        return drawn

    def run(self, on_frame: Optional[FrameCallback] = None):
        """
        소비자 루프 (stop() 호출 전까지 블로킹)

        Args:
            on_frame: 프레임 처리 후 호출 (event, drawn). False를 반환하면 종료
        """
        self._running = True
        logger.info("Frame loop started")
        try:
            while True:
                event = self._queue.get()
                if event is _STOP:
                    break

                drawn = self.process(event)
                if on_frame is not None and on_frame(event, drawn) is False:
                    break
        finally:
            self._running = False
            self.clear()
            logger.info(
                f"Frame loop stopped (processed={self.frames_processed}, "
                f"dropped={self.frames_dropped})"
            )

    def stop(self):
        """소비자 종료 요청 (채널이 가득 차 있으면 대기 중인 이벤트를 버림)"""
        while True:
            try:
                self._queue.put_nowait(_STOP)
                break
            except queue.Full:
                try:
                    self._queue.get_nowait()
                except queue.Empty:
                    pass
        self.clear()

    def clear(self):
        """캔버스 지우기 (프레임 전달과 무관)"""
        with self._surface_lock:
            self.pipeline.clear(self.surface)
