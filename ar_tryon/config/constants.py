"""얼굴 랜드마크 인덱스 및 오버레이 상수 정의"""

from typing import Dict, List

# MediaPipe FaceMesh 랜드마크 개수 (검출기 계약)
LANDMARK_COUNT = 468

# 상품군별 FeatureIndexGroup 테이블
FEATURE_INDEX_GROUPS: Dict[str, Dict[str, List[int]]] = {
    'glasses': {
        # 눈 주변 주요 포인트
        'LEFT_EYE': [33, 133, 160, 159, 158, 157, 173, 243],
        'RIGHT_EYE': [362, 398, 384, 385, 386, 387, 388, 466],
        # 콧등 위 포인트
        'NOSE_BRIDGE': [168, 6, 197, 195, 5],
    },
    'hat': {
        # 이마 포인트 (10번 중복은 원래 테이블 그대로)
        'FOREHEAD': [10, 151, 9, 8, 107, 66, 105, 104, 103, 67, 109, 10],
        # 머리 상단 포인트
        'TOP_HEAD': [10, 109, 67, 103, 104, 105, 66, 107, 9, 8, 55, 65, 10],
    },
}

# 안경: 눈 사이 거리 대비 폭 (바깥 눈꼬리를 약간 넘도록)
GLASSES_WIDTH_FACTOR = 2.5

# 모자: 이마 폭 대비 폭
HAT_WIDTH_FACTOR = 1.5

# 모자: 이마 라인 위로 올리는 정규화 오프셋
HAT_VERTICAL_BIAS = 0.05

# 이름 기반 상품군 추론용 prefix
FAMILY_ID_PREFIXES: Dict[str, str] = {
    'hat': 'hat',
    'glasses': 'glasses',
}
