"""
Data models for the overlay engine.
"""
from .overlay_models import (
    AdjustmentKind,
    AdjustmentState,
    CatalogEntry,
    FeatureSize,
    FeatureSummary,
    FrameEvent,
    Landmark,
    LandmarkSet,
    Placement,
    Point3D,
    ProductAsset,
    ProductFamily,
    ProductSelection,
)

__all__ = [
    'AdjustmentKind', 'AdjustmentState', 'CatalogEntry', 'FeatureSize',
    'FeatureSummary', 'FrameEvent', 'Landmark', 'LandmarkSet', 'Placement',
    'Point3D', 'ProductAsset', 'ProductFamily', 'ProductSelection',
]
