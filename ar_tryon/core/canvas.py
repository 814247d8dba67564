# -*- coding: utf-8 -*-
"""
2D immediate-mode drawing surface over a BGRA numpy layer

비디오 프레임 위에 겹쳐지는 투명 오버레이 레이어.
clear_rect / save / restore / translate / rotate / draw_image 연산을 제공하고
composite()로 BGR 프레임에 합성한다.
"""

import math
from typing import List

import cv2
import numpy as np

from ..utils.validators import validate_image


class OverlayCanvas:
    """
    투명 BGRA 오버레이 캔버스

    Features:
    - 3x3 affine 변환 행렬 + save/restore 스택
    - draw_image: 현재 변환으로 이미지를 warpAffine 후 source-over 합성
    - composite: 오버레이를 BGR 비디오 프레임에 알파 블렌딩
    """

    def __init__(self, width: int, height: int):
        """
        Args:
            width: 캔버스 너비 (픽셀)
            height: 캔버스 높이 (픽셀)
        """
        self.layer = np.zeros((0, 0, 4), dtype=np.uint8)
        self._matrix = np.eye(3)
        self._stack: List[np.ndarray] = []
        self.resize(width, height)

    @property
    def width(self) -> int:
        return int(self.layer.shape[1])

    @property
    def height(self) -> int:
        return int(self.layer.shape[0])

    @property
    def transform(self) -> np.ndarray:
        """현재 변환 행렬 (3x3 복사본)"""
        return self._matrix.copy()

    @property
    def save_depth(self) -> int:
        return len(self._stack)

    def resize(self, width: int, height: int):
        """캔버스 크기 변경 (내용과 변환 상태 초기화)"""
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas size must be positive, got {width}x{height}")
        self.layer = np.zeros((int(height), int(width), 4), dtype=np.uint8)
        self._matrix = np.eye(3)
        self._stack.clear()

    def clear_rect(self, x: float, y: float, w: float, h: float):
        """디바이스 픽셀 영역을 투명하게 지움 (변환 행렬 미적용)"""
        x0 = max(int(math.floor(x)), 0)
        y0 = max(int(math.floor(y)), 0)
        x1 = min(int(math.ceil(x + w)), self.width)
        y1 = min(int(math.ceil(y + h)), self.height)
        if x1 > x0 and y1 > y0:
            self.layer[y0:y1, x0:x1] = 0

    def save(self):
        self._stack.append(self._matrix.copy())

    def restore(self):
        # 빈 스택에서의 restore는 무시 (canvas 2D 동작과 동일)
        if self._stack:
            self._matrix = self._stack.pop()

    def translate(self, tx: float, ty: float):
        self._matrix = self._matrix @ np.array([
            [1.0, 0.0, tx],
            [0.0, 1.0, ty],
            [0.0, 0.0, 1.0],
        ])

    def rotate(self, angle: float):
        """angle: radians, 화면 좌표계 기준 시계 방향(y축 아래)"""
        c, s = math.cos(angle), math.sin(angle)
        self._matrix = self._matrix @ np.array([
            [c, -s, 0.0],
            [s, c, 0.0],
            [0.0, 0.0, 1.0],
        ])

    def draw_image(self, image: np.ndarray, x: float, y: float, w: float, h: float):
        """
        이미지를 로컬 좌표 사각형 [x, y, w, h]에 그림

        Args:
            image: BGRA 이미지 (H, W, 4)
            x, y: 로컬 좌표계 좌상단
            w, h: 로컬 좌표계 크기
        """
        validate_image(image)
        if w <= 0 or h <= 0:
            return

        image_h, image_w = image.shape[:2]
        local = np.array([
            [w / image_w, 0.0, x],
            [0.0, h / image_h, y],
            [0.0, 0.0, 1.0],
        ])
        full = self._matrix @ local

        # 변환된 사각형의 bounding box만 warp
        corners = np.array([
            [0, 0, 1], [image_w, 0, 1], [0, image_h, 1], [image_w, image_h, 1]
        ], dtype=np.float64).T
        mapped = full @ corners
        x0 = max(int(math.floor(mapped[0].min())), 0)
        y0 = max(int(math.floor(mapped[1].min())), 0)
        x1 = min(int(math.ceil(mapped[0].max())), self.width)
        y1 = min(int(math.ceil(mapped[1].max())), self.height)
        if x1 <= x0 or y1 <= y0:
            return

        offset = np.array([
            [1.0, 0.0, -x0],
            [0.0, 1.0, -y0],
            [0.0, 0.0, 1.0],
        ])
        warped = cv2.warpAffine(
            image, (offset @ full)[:2], (x1 - x0, y1 - y0),
            flags=cv2.INTER_LINEAR,
            borderMode=cv2.BORDER_CONSTANT,
            borderValue=(0, 0, 0, 0)
        )
        self._blend_over(self.layer[y0:y1, x0:x1], warped)

    def composite(self, frame: np.ndarray) -> np.ndarray:
        """
        오버레이 레이어를 BGR 프레임에 합성한 새 프레임 반환

        Args:
            frame: BGR 비디오 프레임 (캔버스와 같은 크기)
        """
        validate_image(frame)
        if frame.shape[:2] != self.layer.shape[:2]:
            raise ValueError(
                f"Frame size {frame.shape[1]}x{frame.shape[0]} does not match "
                f"canvas size {self.width}x{self.height}"
            )

        alpha = self.layer[..., 3:4].astype(np.float32) / 255.0
        blended = frame[..., :3].astype(np.float32) * (1.0 - alpha) \
            + self.layer[..., :3].astype(np.float32) * alpha
        return np.clip(blended + 0.5, 0, 255).astype(np.uint8)

    def is_blank(self) -> bool:
        return not self.layer[..., 3].any()

    @staticmethod
    def _blend_over(dst: np.ndarray, src: np.ndarray):
        """source-over 합성 (dst를 제자리에서 갱신)"""
        src_a = src[..., 3:4].astype(np.float32) / 255.0
        dst_a = dst[..., 3:4].astype(np.float32) / 255.0
        out_a = src_a + dst_a * (1.0 - src_a)

        src_rgb = src[..., :3].astype(np.float32)
        dst_rgb = dst[..., :3].astype(np.float32)
        out_rgb = (src_rgb * src_a + dst_rgb * dst_a * (1.0 - src_a)) / np.maximum(out_a, 1e-6)

        dst[..., :3] = np.clip(out_rgb + 0.5, 0, 255).astype(np.uint8)
        dst[..., 3:4] = np.clip(out_a * 255.0 + 0.5, 0, 255).astype(np.uint8)
