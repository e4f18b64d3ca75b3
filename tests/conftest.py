"""
Shared pytest fixtures for the CTRM Advisor test suite.

Provides:
  - Answer-set fixtures, including the two reference scenarios
    (enterprise financial-services and small metals startup).
  - ``FakeChatModel``: a stand-in for the chat model injected into
    ``JustificationGenerator`` (records prompts, returns canned replies).
  - ``RecordingSink``: an in-memory ``FeedbackSink``.
  - Environment isolation so a developer's real API key or CTRM_ADVISOR_*
    overrides never leak into tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

import pytest

from ctrm_advisor.catalog import PRODUCTS, get_product_by_id
from ctrm_advisor.integrations.sheets_sink import PersistenceError
from ctrm_advisor.models.answers import BudgetRange, UserAnswers
from ctrm_advisor.models.feedback import FeedbackRecord
from ctrm_advisor.models.recommendation import RecommendationResult
from ctrm_advisor.taxonomy.answer_taxonomy import (
    CurrentSystem,
    GoLiveTimeline,
    Industry,
    Integration,
    OrgSize,
    Priority,
    Region,
    TradingType,
)


# ── Environment isolation ─────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "GEMINI_API_KEY",
        "CTRM_ADVISOR_SCRIPT_URL",
        "CTRM_ADVISOR_MODEL",
        "CTRM_ADVISOR_LOG_LEVEL",
        "CTRM_ADVISOR_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)


# ── Test doubles ──────────────────────────────────────────────────────────────

@dataclass
class FakeMessage:
    content: Any


@dataclass
class FakeChatModel:
    """Minimal chat model: ``invoke(messages)`` returns ``reply`` or raises ``error``."""

    reply: Any = "Generated justification."
    error: Optional[Exception] = None
    calls: list[list[Any]] = field(default_factory=list)

    def invoke(self, messages: list[Any]) -> FakeMessage:
        self.calls.append(list(messages))
        if self.error is not None:
            raise self.error
        return FakeMessage(content=self.reply)


@dataclass
class RecordingSink:
    """In-memory sink; fails the first ``fail_times`` calls with PersistenceError."""

    fail_times: int = 0
    records: list[FeedbackRecord] = field(default_factory=list)
    attempts: int = 0

    def persist(self, record: FeedbackRecord) -> None:
        self.attempts += 1
        if self.attempts <= self.fail_times:
            raise PersistenceError("sheet unavailable")
        self.records.append(record)


@pytest.fixture
def fake_llm() -> FakeChatModel:
    return FakeChatModel()


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


# ── Answer fixtures ───────────────────────────────────────────────────────────

@pytest.fixture
def enterprise_finserv_answers() -> UserAnswers:
    """Large financial-services firm with a seven-figure budget."""
    return UserAnswers(
        org_size=OrgSize.ENTERPRISE,
        industry=Industry.FINANCIAL_SERVICES,
        trading_type=TradingType.FINANCIAL,
        users=500,
        expected_budget=BudgetRange(min=1_200_000, max=1_500_000),
        go_live_timeline=GoLiveTimeline.MONTHS_12_PLUS,
    )


@pytest.fixture
def small_metals_answers() -> UserAnswers:
    """Small metals startup that needs to go live quickly on a small budget."""
    return UserAnswers(
        org_size=OrgSize.SMALL,
        industry=Industry.METALS,
        users=10,
        expected_budget=BudgetRange(min=10_000, max=30_000),
        go_live_timeline=GoLiveTimeline.WITHIN_3_MONTHS,
        current_system=CurrentSystem.NONE,
    )


@pytest.fixture
def full_answers() -> UserAnswers:
    """Every question answered, including multi-selects."""
    return UserAnswers(
        industry=Industry.POWER_AND_UTILITIES,
        org_size=OrgSize.MEDIUM,
        users=75,
        expected_budget=BudgetRange(min=200_000, max=400_000),
        go_live_timeline=GoLiveTimeline.MONTHS_3_TO_6,
        trading_type=TradingType.PHYSICAL,
        current_system=CurrentSystem.MANUAL,
        priorities=frozenset({Priority.RISK, Priority.TRADING}),
        region=Region.EUROPE,
        integrations=frozenset({Integration.MARKET_DATA_FEEDS, Integration.ERP}),
    )


@pytest.fixture
def sample_result() -> RecommendationResult:
    """An openlink / triplepoint recommendation."""
    return RecommendationResult(
        ideal=get_product_by_id("openlink"),
        strong=get_product_by_id("triplepoint"),
        scores={p.id: 0 for p in PRODUCTS} | {"openlink": 12, "triplepoint": 8},
    )


@pytest.fixture
def balanced_weights() -> dict[str, int]:
    """Raw priority weights that total exactly 100."""
    return {
        "priorities": 30,
        "expectedBudget": 20,
        "goLiveTimeline": 10,
        "users": 10,
        "tradingType": 20,
        "integrations": 10,
    }
