"""
Recommendation selector: turns a score vector into an ideal fit and a strong
alternative.

Ranking
-------
Products are sorted by score descending.  Ties are broken by catalog
declaration order (earlier wins), which makes the result reproducible as
long as ``catalog.PRODUCTS`` keeps its order.

Rank 0 is the ideal fit, rank 1 the strong alternative.  Both are distinct
by construction because each catalog entry appears once in the ranking.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from ctrm_advisor.catalog import PRODUCTS, CatalogConfigurationError, validate_catalog
from ctrm_advisor.models.answers import UserAnswers
from ctrm_advisor.models.product import Product
from ctrm_advisor.models.recommendation import RecommendationResult
from ctrm_advisor.recommendations.scorer import score


@dataclass(frozen=True)
class RankedProduct:
    """One catalog entry with its score and 0-based rank."""

    product: Product
    score:   int
    rank:    int


def rank_products(
    scores:  Mapping[str, int],
    catalog: Sequence[Product] = PRODUCTS,
) -> list[RankedProduct]:
    """Rank every catalog product by score, descending, ties by catalog order.

    Products missing from ``scores`` are ranked with a score of 0; ``select()``
    rejects such a vector, this helper only orders what it is given.
    """
    ordered = sorted(
        enumerate(catalog),
        key=lambda item: (-scores.get(item[1].id, 0), item[0]),
    )
    return [
        RankedProduct(product=product, score=scores.get(product.id, 0), rank=rank)
        for rank, (_, product) in enumerate(ordered)
    ]


def select(
    scores:  Mapping[str, int],
    catalog: Sequence[Product] = PRODUCTS,
) -> RecommendationResult:
    """Pick the ideal fit (rank 0) and strong alternative (rank 1).

    Args:
        scores:  Score vector from ``scorer.score()``.
        catalog: Catalog the scores were computed over.

    Returns:
        RecommendationResult with distinct ``ideal`` and ``strong``.

    Raises:
        CatalogConfigurationError: If the catalog has fewer than 2 entries,
            or ``scores`` does not hold exactly one entry per catalog id.
    """
    validate_catalog(catalog)
    catalog_ids = {p.id for p in catalog}
    if set(scores) != catalog_ids:
        missing = sorted(catalog_ids - set(scores))
        unknown = sorted(set(scores) - catalog_ids)
        raise CatalogConfigurationError(
            f"Score vector does not match the catalog: missing={missing} unknown={unknown}."
        )
    ranked = rank_products(scores, catalog)
    return RecommendationResult(
        ideal=ranked[0].product,
        strong=ranked[1].product,
        scores={p.id: scores[p.id] for p in catalog},
    )


def recommend(
    answers: UserAnswers,
    catalog: Sequence[Product] = PRODUCTS,
) -> RecommendationResult:
    """Score ``answers`` and select the top two products in one call."""
    return select(score(answers, catalog), catalog)
