"""
The fixed CTRM product catalog.

The catalog is known at build time and never mutated at runtime.  Its
declaration order is part of the contract: the recommendation selector
breaks score ties by this order, so reordering ``PRODUCTS`` changes which
product wins a tie.
"""

from __future__ import annotations

from typing import Optional, Sequence

from ctrm_advisor.models.product import Product


class CatalogConfigurationError(RuntimeError):
    """Raised when the catalog or rule table violates a build-time invariant.

    This is never a user-input error; it means the shipped configuration is
    broken and must be fixed in code.
    """


PRODUCTS: tuple[Product, ...] = (
    Product(
        id="aspect",
        name="Aspect",
        description=(
            "A cloud-native CTRM solution designed for rapid setup and deployment, "
            "ideal for small to mid-size companies in metals, oil, and agriculture."
        ),
        key_strengths=(
            "Cloud-native", "Fast setup", "Metals focus", "Oil focus",
            "Agri-commodities focus", "Small to medium size",
        ),
    ),
    Product(
        id="rightangle",
        name="RightAngle",
        description=(
            "The industry-leading choice for energy firms with complex physical "
            "logistics, supply chain management, and inventory needs."
        ),
        key_strengths=(
            "Energy focus", "Physical logistics", "Oil & Gas focus",
            "Power & Utilities focus",
        ),
    ),
    Product(
        id="triplepoint",
        name="TriplePoint",
        description=(
            "A powerful platform for companies requiring advanced, sophisticated "
            "risk management capabilities across multiple commodities."
        ),
        key_strengths=("Advanced risk", "Multi-commodity", "Enterprise scale"),
    ),
    Product(
        id="openlink",
        name="Openlink",
        description=(
            "The premier solution for large, global enterprises with complex, "
            "multi-commodity trading and risk management requirements."
        ),
        key_strengths=(
            "Complex trading", "Multi-commodity", "Enterprise scale",
            "Global operations", "Financial services",
        ),
    ),
    Product(
        id="allegro",
        name="Allegro",
        description=(
            "A real-time ETRM platform optimized for the fast-paced demands of "
            "energy and power trading, including renewables and utilities."
        ),
        key_strengths=(
            "Real-time trading", "Energy focus", "Power & Utilities focus",
            "ETRM Integration",
        ),
    ),
)

PRODUCT_IDS: tuple[str, ...] = tuple(p.id for p in PRODUCTS)


def get_product_by_id(
    product_id: str,
    catalog: Sequence[Product] = PRODUCTS,
) -> Optional[Product]:
    """Return the catalog entry with ``product_id``, or ``None``."""
    for product in catalog:
        if product.id == product_id:
            return product
    return None


def validate_catalog(catalog: Sequence[Product]) -> None:
    """Assert the catalog can back a dual recommendation.

    Raises:
        CatalogConfigurationError: If fewer than two entries are present or
            product ids are not unique.
    """
    if len(catalog) < 2:
        raise CatalogConfigurationError(
            f"catalog must contain at least 2 products, got {len(catalog)}."
        )
    ids = [p.id for p in catalog]
    if len(set(ids)) != len(ids):
        raise CatalogConfigurationError(f"catalog product ids are not unique: {ids}.")
