"""
Answer taxonomy for the CTRM lead-qualification questionnaire.

Every enumerated questionnaire answer is a ``StrEnum`` whose value is the
exact label shown to the prospect (and written to the feedback sheet):

  - ``Industry``        — commodity focus (6 values)
  - ``OrgSize``         — organisation scale (3 values)
  - ``GoLiveTimeline``  — desired go-live window, ordered shortest first
  - ``TradingType``     — physical, financial, or both
  - ``CurrentSystem``   — what the prospect runs today
  - ``Priority``        — key business priorities (multi-select)
  - ``Region``          — primary geography
  - ``Integration``     — required system integrations (multi-select)

``RankingFactor`` names the six factors a prospect re-weights when they tell
us the recommendation was wrong.  ``FeedbackRating`` tags the two feedback
variants.

This module has NO imports from any other ``ctrm_advisor`` package.
"""

from enum import StrEnum


class Industry(StrEnum):
    """Industry or commodity focus."""

    OIL_AND_GAS = "Oil & Gas"
    POWER_AND_UTILITIES = "Power & Utilities"
    METALS = "Metals"
    AGRI_COMMODITIES = "Agri-Commodities"
    FINANCIAL_SERVICES = "Financial Services"
    MULTI_COMMODITY = "Multi-Commodity"


class OrgSize(StrEnum):
    """Organisation size bucket."""

    SMALL = "Small/Startup"
    MEDIUM = "Medium"
    ENTERPRISE = "Enterprise"


class GoLiveTimeline(StrEnum):
    """Desired go-live window.  Declaration order is shortest to longest."""

    WITHIN_3_MONTHS = "Within 3 months"
    MONTHS_3_TO_6 = "3-6 months"
    MONTHS_6_TO_12 = "6-12 months"
    MONTHS_12_PLUS = "12+ months"


class TradingType(StrEnum):
    """Kind of trading the prospect engages in."""

    PHYSICAL = "Physical"
    FINANCIAL = "Financial"
    BOTH = "Both"


class CurrentSystem(StrEnum):
    """The prospect's current trade-capture setup."""

    MANUAL = "Manual/Spreadsheets"
    IN_HOUSE = "In-house Tool"
    OTHER_CTRM = "Other CTRM System"
    NONE = "None"


class Priority(StrEnum):
    """Key business priorities.  A prospect may select any subset."""

    TRADING = "Trading"
    RISK = "Risk"
    LOGISTICS = "Logistics"
    SETTLEMENTS = "Settlements"
    REGULATORY_COMPLIANCE = "Regulatory Compliance"
    ACCOUNTING = "Accounting"
    FORECASTING = "Forecasting"
    ETRM_INTEGRATION = "ETRM Integration"


class Region(StrEnum):
    """Primary operating geography."""

    NORTH_AMERICA = "North America"
    EUROPE = "Europe"
    APAC = "APAC"
    MENA = "MENA"
    SOUTH_AMERICA = "South America"
    GLOBAL = "Global"


class Integration(StrEnum):
    """Existing systems the CTRM must integrate with."""

    ERP = "ERP"
    RISK_ENGINES = "Risk Engines"
    MARKET_DATA_FEEDS = "Market Data Feeds"
    NONE = "None"
    OTHER = "Other"


class RankingFactor(StrEnum):
    """Factors a prospect distributes 100% of importance across.

    Values are the answer-field keys used in the feedback sheet's
    ``priorityWeights`` JSON column.
    """

    PRIORITIES = "priorities"
    """Key business priorities (Trading, Risk, etc.)."""

    EXPECTED_BUDGET = "expectedBudget"
    """Annual budget."""

    GO_LIVE_TIMELINE = "goLiveTimeline"
    """Go-live timeline."""

    USERS = "users"
    """Number of business users."""

    TRADING_TYPE = "tradingType"
    """Trading style (physical vs. financial)."""

    INTEGRATIONS = "integrations"
    """System integration needs."""


RANKING_FACTOR_LABELS: dict[RankingFactor, str] = {
    RankingFactor.PRIORITIES:       "Key Business Priorities (Trading, Risk, etc.)",
    RankingFactor.EXPECTED_BUDGET:  "Annual Budget",
    RankingFactor.GO_LIVE_TIMELINE: "Go-Live Timeline",
    RankingFactor.USERS:            "Number of Users",
    RankingFactor.TRADING_TYPE:     "Trading Style (Physical vs. Financial)",
    RankingFactor.INTEGRATIONS:     "System Integration Needs",
}


class FeedbackRating(StrEnum):
    """Whether the prospect agreed with the recommendation."""

    ACCURATE = "accurate"
    INACCURATE = "inaccurate"
