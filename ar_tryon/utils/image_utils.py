# -*- coding: utf-8 -*-
"""
Image utility functions for product asset decoding
"""

import numpy as np
import cv2

from .exceptions import InvalidImageError
from .validators import validate_image


def decode_image_bytes(data: bytes) -> np.ndarray:
    """
    인코딩된 이미지 바이트(PNG/JPEG 등)를 BGRA 이미지로 디코딩

    Args:
        data: 이미지 파일 바이트

    Returns:
        numpy array (H, W, 4) BGRA

    Raises:
        InvalidImageError: 디코딩 실패
    """
    if not data:
        raise InvalidImageError("Image data is empty")

    image = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_UNCHANGED)
    if image is None:
        raise InvalidImageError(f"Failed to decode image ({len(data)} bytes)")

    return to_bgra(image)


def to_bgra(image: np.ndarray) -> np.ndarray:
    """
    Grayscale / BGR / BGRA 이미지를 4채널 BGRA로 변환

    알파 채널이 없는 이미지는 완전 불투명(255)으로 처리
    """
    validate_image(image)

    if image.dtype == np.uint16:
        # 16-bit PNG
        image = (image >> 8).astype(np.uint8)
    elif image.dtype != np.uint8:
        raise InvalidImageError(f"Unsupported image dtype: {image.dtype}")

    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGRA)
    if image.shape[2] == 1:
        return cv2.cvtColor(image[:, :, 0], cv2.COLOR_GRAY2BGRA)
    if image.shape[2] == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2BGRA)
    return image
