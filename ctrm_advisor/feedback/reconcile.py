"""
Feedback reconciliation: validate raw feedback form input into a ``Feedback``.

Reconciliation never raises for bad user input.  It returns a
``ReconciliationResult`` carrying either the constructed feedback or a list
of human-readable reasons; the caller blocks submission until ``ok`` is True.

Rules for the "inaccurate" path
-------------------------------
    1. A corrected ideal product is required and must be in the catalog.
    2. A corrected strong alternative is optional; when set it must be in the
       catalog and differ from the ideal.
    3. Every priority weight is clamped into [0, 100] on input (negative,
       missing or non-numeric -> 0) BEFORE the total is checked.
    4. Weights must total exactly 100.

The "accurate" path only needs the follow-up suggestion text; when fetching
it failed the neutral placeholder is stored instead.

``CorrectionDraft`` models the product picker in the correction form: one
product cannot hold both roles, so assigning it to one role clears it from
the other.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field, replace
from typing import Any, Literal, Mapping, Optional, Sequence

from ctrm_advisor.catalog import PRODUCTS
from ctrm_advisor.models.feedback import (
    WEIGHT_TOTAL,
    AccurateFeedback,
    Feedback,
    InaccurateFeedback,
    UserCorrection,
)
from ctrm_advisor.models.product import Product
from ctrm_advisor.taxonomy.answer_taxonomy import FeedbackRating, RankingFactor

CorrectionRole = Literal["ideal", "strong"]

NEUTRAL_SUGGESTION = (
    "Thanks for confirming the recommendation. A solution specialist can walk "
    "you through next steps and a tailored demo."
)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class CorrectionDraft:
    """In-progress ideal/strong correction as the prospect clicks products."""

    ideal:  Optional[str] = None
    strong: Optional[str] = None

    def select(self, product_id: str, role: CorrectionRole) -> "CorrectionDraft":
        """Return a new draft with ``product_id`` toggled for ``role``.

        If the product currently holds the other role, that role is cleared.
        Selecting the product already held by ``role`` unselects it.
        """
        other: CorrectionRole = "strong" if role == "ideal" else "ideal"
        draft = self
        if getattr(draft, other) == product_id:
            draft = replace(draft, **{other: None})
        if getattr(draft, role) == product_id:
            return replace(draft, **{role: None})
        return replace(draft, **{role: product_id})


@dataclass
class RawFeedbackInput:
    """Feedback form contents exactly as submitted (values may be any JSON type).

    Attributes:
        rating:               ``"accurate"`` or ``"inaccurate"``.
        comment:              Free text (inaccurate path only).
        corrected_ideal:      Product id chosen as ideal, or ``None``.
        corrected_strong:     Product id chosen as strong alternative, or ``None``.
        priority_weights:     Ranking factor key -> raw form value (any type).
        generated_suggestion: Suggestion text shown after accurate feedback,
                              or ``None`` when fetching it failed.
    """

    rating: Any
    comment: Any = None
    corrected_ideal: Any = None
    corrected_strong: Any = None
    priority_weights: Any = field(default_factory=dict)
    generated_suggestion: Optional[str] = None


@dataclass
class ReconciliationResult:
    """Outcome of reconciling one ``RawFeedbackInput``."""

    feedback: Optional[Feedback] = None
    errors:   list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.feedback is not None and not self.errors


def clamp_weight(value: Any) -> int:
    """Clamp one raw weight into ``[0, 100]``.

    Strings are read up to the first non-digit (``"35%"`` -> 35); floats are
    truncated; negative, empty, or non-numeric values become 0.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            return 0
        number = int(value)
    elif isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match is None:
            return 0
        number = int(match.group(1))
    else:
        return 0
    return max(0, min(WEIGHT_TOTAL, number))


def normalize_weights(
    raw: Any,
) -> tuple[dict[RankingFactor, int], list[str]]:
    """Clamp every ranking factor's weight; missing factors default to 0.

    Returns:
        (weights, errors); errors lists unknown factor keys, or a single
        reason when ``raw`` is not a mapping at all.
    """
    if not isinstance(raw, Mapping):
        zeros = {f: 0 for f in RankingFactor}
        return zeros, ["Priority weights must map each ranking factor to a number."]
    errors: list[str] = []
    known = {f.value for f in RankingFactor}
    for key in raw:
        if str(key) not in known:
            errors.append(f"Unknown ranking factor '{key}'.")
    weights = {f: clamp_weight(raw.get(f.value)) for f in RankingFactor}
    return weights, errors


def weight_total(weights: Mapping[Any, int]) -> int:
    return sum(weights.values())


def _clean_text(value: Any) -> Optional[str]:
    """Form value as stripped text, or ``None`` when missing or blank.

    Non-string values (a JSON number posted as a product id) are rendered
    with ``str()`` so they are validated like any other text.
    """
    if value is None:
        return None
    text = value if isinstance(value, str) else str(value)
    return text.strip() or None


def reconcile_accurate(generated_suggestion: Optional[str]) -> ReconciliationResult:
    """Build accurate feedback, substituting the placeholder for a failed fetch."""
    text = _clean_text(generated_suggestion) or NEUTRAL_SUGGESTION
    return ReconciliationResult(feedback=AccurateFeedback(generated_suggestion=text))


def reconcile_inaccurate(
    raw: RawFeedbackInput,
    catalog: Sequence[Product] = PRODUCTS,
) -> ReconciliationResult:
    """Validate an inaccurate-feedback submission.

    Returns:
        ReconciliationResult with ``InaccurateFeedback`` when every rule
        passes, otherwise ``feedback=None`` and one reason per violation.
    """
    catalog_ids = {p.id for p in catalog}
    errors: list[str] = []

    ideal = _clean_text(raw.corrected_ideal)
    strong = _clean_text(raw.corrected_strong)

    if ideal is None:
        errors.append("Please select at least one product as your 'Ideal Fit'.")
    elif ideal not in catalog_ids:
        errors.append(f"Unknown product '{ideal}' selected as 'Ideal Fit'.")

    if strong is not None:
        if strong not in catalog_ids:
            errors.append(f"Unknown product '{strong}' selected as 'Strong Alternative'.")
        elif strong == ideal:
            errors.append("'Strong Alternative' must be a different product from 'Ideal Fit'.")

    weights, weight_errors = normalize_weights(raw.priority_weights)
    errors.extend(weight_errors)
    total = weight_total(weights)
    if total != WEIGHT_TOTAL:
        errors.append(f"The total priority weight must equal 100% (currently {total}%).")

    if errors:
        return ReconciliationResult(errors=errors)

    comment = _clean_text(raw.comment)
    feedback = InaccurateFeedback(
        comment=comment,
        user_correction=UserCorrection(ideal=ideal, strong=strong),
        priority_weights=weights,
    )
    return ReconciliationResult(feedback=feedback)


def reconcile(
    raw: RawFeedbackInput,
    catalog: Sequence[Product] = PRODUCTS,
) -> ReconciliationResult:
    """Dispatch on ``raw.rating`` and validate.

    An unrecognised rating is reported as a validation error, not raised.
    """
    rating = (_clean_text(raw.rating) or "").lower()
    if rating == FeedbackRating.ACCURATE:
        return reconcile_accurate(raw.generated_suggestion)
    if rating == FeedbackRating.INACCURATE:
        return reconcile_inaccurate(raw, catalog)
    return ReconciliationResult(
        errors=[f"Feedback rating must be 'accurate' or 'inaccurate', got '{raw.rating}'."]
    )
