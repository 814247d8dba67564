"""입력 검증 유틸리티 함수"""

from typing import Mapping, Sequence

import numpy as np

from .exceptions import InvalidImageError, InvalidIndexGroup


def validate_image(image: np.ndarray) -> None:
    """
    이미지 유효성 검증

    Args:
        image: 검증할 이미지 (numpy array)

    Raises:
        InvalidImageError: 이미지가 유효하지 않은 경우
    """
    if image is None:
        raise InvalidImageError("Image is None")

    if not isinstance(image, np.ndarray):
        raise InvalidImageError(f"Image must be numpy.ndarray, got {type(image)}")

    if image.size == 0:
        raise InvalidImageError("Image is empty")

    if len(image.shape) not in [2, 3]:
        raise InvalidImageError(f"Image must be 2D or 3D, got shape {image.shape}")

    if len(image.shape) == 3 and image.shape[2] not in [1, 3, 4]:
        raise InvalidImageError(f"Image channels must be 1, 3, or 4, got {image.shape[2]}")


def validate_index_group(name: str, indices: Sequence[int], landmark_count: int = 468) -> None:
    """
    FeatureIndexGroup 검증

    Args:
        name: 그룹 이름 (예: 'LEFT_EYE')
        indices: 랜드마크 인덱스 목록
        landmark_count: 검출기가 반환하는 랜드마크 개수

    Raises:
        InvalidIndexGroup: 빈 그룹이거나 범위를 벗어난 인덱스가 있는 경우
    """
    if not indices:
        raise InvalidIndexGroup(name)

    for index in indices:
        if not 0 <= index < landmark_count:
            raise InvalidIndexGroup(name, index, landmark_count)


def validate_feature_tables(
    tables: Mapping[str, Mapping[str, Sequence[int]]],
    landmark_count: int = 468
) -> None:
    """상품군별 FeatureIndexGroup 테이블 전체 검증"""
    for family, groups in tables.items():
        for name, indices in groups.items():
            validate_index_group(f"{family}.{name}", indices, landmark_count)
