"""
Shared test fixtures — fresh store per test, sample materials.
"""

import pytest

from slabquote.config import Settings
from slabquote.store import QuotationStore


def _sample_material(**overrides):
    """A complete, valid material payload (as a form would submit it)."""
    data = {
        "name": "Branco Siena",
        "type": "granite",
        "finishing": "polished",
        "price_per_unit": 100.0,
        "quantity": 1,
        "dimensions": {"width": 2.90, "height": 1.90},
        "details": None,
    }
    data.update(overrides)
    return data


@pytest.fixture
def settings():
    """Settings isolated from any .env / environment overrides."""
    return Settings(
        COMPANY_NAME="",
        SELLER_NAME="",
        DEFAULT_VALID_DAYS=7,
        MAX_INSTALLMENTS=12,
        DEFAULT_WIDTH_M=2.90,
        DEFAULT_HEIGHT_M=1.90,
        DEFAULT_MEASURE_MESSAGE="Medidas nominais; cobrança pela medição real.",
        _env_file=None,
    )


@pytest.fixture
def store(settings):
    return QuotationStore(settings=settings)


@pytest.fixture
def acme_store(store):
    """Store with company/client filled and one 2.90 x 1.90 granite slab at R$100/m²."""
    store.update_quotation({"company": "Acme", "client": "Bob"})
    store.add_material(_sample_material())
    return store
