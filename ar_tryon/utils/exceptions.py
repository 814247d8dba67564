"""커스텀 예외 클래스 정의"""

from typing import Optional


class TryOnException(Exception):
    """기본 예외 클래스"""
    pass


class FeatureNotDetected(TryOnException):
    """필수 랜드마크 그룹이 현재 프레임에 없음 (프레임 스킵)"""

    def __init__(self, group: str):
        super().__init__(f"Feature group not detected: {group}")
        self.group = group


class UnknownProductFamily(TryOnException):
    """카탈로그에 등록되지 않은 상품군"""

    def __init__(self, family, product_id: Optional[str] = None):
        message = f"Unknown product family: {family!r}"
        if product_id is not None:
            message += f" (product {product_id!r})"
        super().__init__(message)
        self.family = family
        self.product_id = product_id


class AssetLoadError(TryOnException):
    """상품 이미지 로드/디코딩 실패"""

    def __init__(self, product_id: str, reason: str = ""):
        message = f"Unable to load product image: {product_id}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
        self.product_id = product_id
        self.reason = reason


class InvalidIndexGroup(TryOnException):
    """FeatureIndexGroup 설정 오류 (시작 시 검증)"""

    def __init__(self, group: str, index=None, landmark_count: Optional[int] = None):
        if index is None:
            message = f"Feature group {group!r} is empty"
        else:
            message = (f"Feature group {group!r} references index {index}, "
                       f"valid range is [0, {landmark_count})")
        super().__init__(message)
        self.group = group
        self.index = index


class InvalidImageError(TryOnException):
    """잘못된 이미지 입력 예외"""
    pass


class ConfigurationError(TryOnException):
    """설정 오류 예외"""
    pass
