"""상품 카탈로그 (상품 ID → 상품군)"""

from typing import Dict, Iterable, Iterator, List, Optional

from ..config.constants import FAMILY_ID_PREFIXES
from ..models import CatalogEntry, ProductFamily
from ..utils.config_loader import Config, get_config
from ..utils.exceptions import UnknownProductFamily


class ProductCatalog:
    """
    상품 카탈로그

    설정에 없는 ID는 이름 prefix로 상품군을 추론한다 ('hat1' → hat).
    """

    def __init__(self, entries: Iterable[CatalogEntry] = ()):
        self._entries: Dict[str, CatalogEntry] = {}
        for entry in entries:
            self._entries[entry.product_id] = entry

    @classmethod
    def from_config(cls, config: Optional[Config] = None) -> 'ProductCatalog':
        config = config or get_config()
        items = config.get('catalog', []) or []
        return cls(CatalogEntry(str(item['id']), str(item['family'])) for item in items)

    def family_of(self, product_id: str) -> ProductFamily:
        """
        상품군 조회

        Raises:
            UnknownProductFamily: 카탈로그 상품군이 잘못되었거나 추론 불가
        """
        entry = self._entries.get(product_id)
        if entry is not None:
            return ProductFamily.parse(entry.family, product_id)

        for family, prefix in FAMILY_ID_PREFIXES.items():
            if product_id.startswith(prefix):
                return ProductFamily.parse(family, product_id)

        raise UnknownProductFamily(None, product_id)

    def ids(self) -> List[str]:
        return list(self._entries)

    def __contains__(self, product_id: str) -> bool:
        return product_id in self._entries

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)
