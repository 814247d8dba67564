"""Processing layer components"""

from .catalog import ProductCatalog
from .session import TryOnSession
from .pipeline import OverlayPipeline
from .frame_loop import FrameLoop

__all__ = [
    'ProductCatalog',
    'TryOnSession',
    'OverlayPipeline',
    'FrameLoop',
]
