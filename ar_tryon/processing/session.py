"""애플리케이션 소유 상태: 상품 선택 + 조정값"""

from typing import Dict, Optional

from ..config.settings import AdjustmentLimits
from ..models import AdjustmentKind, AdjustmentState, ProductSelection
from ..utils import get_logger
from ..utils.config_loader import Config, get_config

logger = get_logger(__name__)


class TryOnSession:
    """
    상품 선택 및 조정값 보관

    파이프라인에는 참조로 전달되며, 변경은 다음 프레임부터 반영된다.
    """

    def __init__(
        self,
        defaults: Optional[Dict[str, float]] = None,
        reset_on_select: bool = True,
        limits: Optional[AdjustmentLimits] = None
    ):
        """
        Args:
            defaults: 조정 기본값 {'scale', 'y_offset', 'rotation'}
            reset_on_select: 상품 변경 시 조정값 초기화 여부
            limits: 조정값 범위 (None이면 범위 제한 없음)
        """
        self.defaults = dict(defaults or {})
        self.reset_on_select = reset_on_select
        self.limits = limits
        self.selection = ProductSelection()
        self.adjustments = AdjustmentState()
        self.adjustments.reset(self.defaults)

    @classmethod
    def from_config(cls, config: Optional[Config] = None) -> 'TryOnSession':
        config = config or get_config()
        return cls(
            defaults=config.get('adjustments.defaults', {}),
            reset_on_select=config.get('adjustments.reset_on_select', True),
            limits=AdjustmentLimits.from_config(config)
        )

    @property
    def product_id(self) -> Optional[str]:
        return self.selection.product_id

    def set_product(self, product_id: Optional[str]):
        """상품 선택 (None이면 오버레이 해제)"""
        self.selection.product_id = product_id
        if self.reset_on_select:
            self.adjustments.reset(self.defaults)
        logger.debug(f"Product selected: {product_id}")

    def set_adjustment(self, kind, value: float) -> float:
        """
        조정값 변경

        Returns:
            실제 적용된 값 (범위 제한 후)
        """
        kind = AdjustmentKind(kind.value if isinstance(kind, AdjustmentKind) else kind)
        value = float(value)
        if self.limits is not None:
            value = self.limits.clamp(kind.value, value)
        self.adjustments.set(kind, value)
        logger.debug(f"Adjustment {kind.value} = {value}")
        return value

    def nudge(self, kind, direction: int) -> float:
        """키 입력 한 번만큼 조정값 증감 (direction: +1 / -1)"""
        kind = AdjustmentKind(kind.value if isinstance(kind, AdjustmentKind) else kind)
        step = (self.limits or AdjustmentLimits()).step(kind.value)
        current = getattr(self.adjustments, kind.value)
        return self.set_adjustment(kind, round(current + direction * step, 6))
