"""
AR Try-On Overlay
MediaPipe 랜드마크 기반 상품(안경, 모자) 오버레이 엔진
"""

__version__ = "0.1.0"
