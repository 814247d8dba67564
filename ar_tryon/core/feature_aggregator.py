"""랜드마크 그룹 요약 (평균 위치 + bounding box)"""

from typing import Optional, Sequence

from ..models import FeatureSize, FeatureSummary, LandmarkSet, Point3D


def summarize(
    landmarks: Optional[LandmarkSet],
    indices: Optional[Sequence[int]]
) -> Optional[FeatureSummary]:
    """
    FeatureIndexGroup에 속한 랜드마크를 하나의 요약으로 축약

    position은 선택된 랜드마크의 단순 산술 평균, size는 x/y 축 정렬
    bounding box의 (width, height).

    Args:
        landmarks: 한 얼굴의 랜드마크 목록 (x, y, z 속성을 가진 객체)
        indices: 랜드마크 인덱스 목록

    Returns:
        FeatureSummary, 그룹이 비었거나 랜드마크가 없으면 None
        (현재 프레임에서 feature 미검출)
    """
    if not landmarks or not indices:
        return None

    count = len(landmarks)
    if any(not 0 <= index < count for index in indices):
        return None

    points = [landmarks[index] for index in indices]
    xs = [p.x for p in points]
    ys = [p.y for p in points]
    n = len(points)

    position = Point3D(
        x=sum(xs) / n,
        y=sum(ys) / n,
        z=sum(p.z for p in points) / n,
    )
    size = FeatureSize(width=max(xs) - min(xs), height=max(ys) - min(ys))

    return FeatureSummary(position=position, size=size)
