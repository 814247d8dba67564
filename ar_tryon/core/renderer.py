"""Placement + ProductAsset → 캔버스 합성"""

from typing import Optional

from ..models import Placement, ProductAsset
from ..utils import get_logger

logger = get_logger(__name__)


class OverlayRenderer:
    """
    상품 이미지 렌더러

    매 프레임 캔버스 전체를 지운 뒤 배치 중심으로 이동, 회전하고
    이미지를 중심 기준 [-w/2, -h/2, w, h]에 그린다.
    변환 상태는 save/restore로 감싸 다음 그리기 연산에 새지 않는다.

    surface는 width, height, clear_rect, save, restore, translate,
    rotate, draw_image를 제공하는 객체 (OverlayCanvas)
    """

    def clear(self, surface):
        """캔버스 전체 지우기 (프레임 전달과 무관하게 호출 가능)"""
        surface.clear_rect(0, 0, surface.width, surface.height)

    def render(
        self,
        surface,
        placement: Optional[Placement] = None,
        asset: Optional[ProductAsset] = None
    ) -> bool:
        """
        한 프레임 렌더링

        Args:
            surface: 그리기 대상 캔버스
            placement: 이번 프레임 배치 (None이면 지우기만)
            asset: 상품 이미지 (None이면 지우기만)

        Returns:
            이미지를 그렸으면 True
        """
        self.clear(surface)

        if placement is None or asset is None:
            return False

        center_x, center_y, width, height = placement.to_pixels(surface.width, surface.height)

        surface.save()
        try:
            surface.translate(center_x, center_y)
            surface.rotate(placement.angle)
            surface.draw_image(asset.image, -width / 2, -height / 2, width, height)
        finally:
            surface.restore()

        logger.debug(
            f"Rendered {asset.product_id} at ({center_x:.1f}, {center_y:.1f}) "
            f"size {width:.1f}x{height:.1f}"
        )
        return True
