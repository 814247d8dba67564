import pytest

from ar_tryon.models import CatalogEntry, ProductFamily
from ar_tryon.processing import ProductCatalog
from ar_tryon.utils.exceptions import UnknownProductFamily


def test_configured_catalog():
    catalog = ProductCatalog.from_config()

    assert catalog.ids() == ['glasses1', 'glasses2', 'glasses3', 'hat1', 'hat2']
    assert catalog.family_of('glasses2') is ProductFamily.GLASSES
    assert catalog.family_of('hat1') is ProductFamily.HAT


def test_family_inferred_from_id_prefix():
    catalog = ProductCatalog()

    assert catalog.family_of('hat9') is ProductFamily.HAT
    assert catalog.family_of('glasses_round') is ProductFamily.GLASSES


def test_misconfigured_family():
    catalog = ProductCatalog([CatalogEntry('boots1', 'SHOES')])

    with pytest.raises(UnknownProductFamily) as info:
        catalog.family_of('boots1')

    assert info.value.family == 'SHOES'
    assert info.value.product_id == 'boots1'


def test_unknown_product():
    with pytest.raises(UnknownProductFamily):
        ProductCatalog().family_of('scarf1')
