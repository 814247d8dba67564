"""Core overlay engine components"""

from .feature_aggregator import summarize
from .asset_cache import AssetCache, ImageDirectoryLoader
from .placement import compute_placement
from .canvas import OverlayCanvas
from .renderer import OverlayRenderer

__all__ = [
    'summarize',
    'AssetCache',
    'ImageDirectoryLoader',
    'compute_placement',
    'OverlayCanvas',
    'OverlayRenderer',
]
