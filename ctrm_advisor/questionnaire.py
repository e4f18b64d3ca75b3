"""
Questionnaire definition: the ten questions, their input kinds and options.

The flow itself (widgets, step animation) lives in whatever front end drives
it; this module only describes the questions and provides helpers shared by
every front end, including the interactive ``ctrm-advisor ask`` command.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Mapping

from ctrm_advisor.models.answers import UserAnswers
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

QuestionKind = Literal["select", "multiselect", "number", "budget-range", "dropdown"]

DEFAULT_USERS = 50
USERS_MIN = 1
USERS_MAX = 1000


@dataclass(frozen=True)
class Question:
    """One questionnaire step.

    Attributes:
        id:      ``UserAnswers`` field name the answer is stored under.
        text:    Prompt shown to the prospect.
        kind:    Input kind.
        options: Allowed values for select/multiselect/dropdown; empty otherwise.
    """

    id: str
    text: str
    kind: QuestionKind
    options: tuple[str, ...] = ()


def _values(enum_cls) -> tuple[str, ...]:
    return tuple(member.value for member in enum_cls)


QUESTIONS: tuple[Question, ...] = (
    Question("industry", "What is your industry or commodity focus?", "select", _values(Industry)),
    Question("org_size", "What is your organization size?", "select", _values(OrgSize)),
    Question("users", "How many business users do you have?", "number"),
    Question("expected_budget", "What's your expected annual budget? (USD)", "budget-range"),
    Question("go_live_timeline", "What is your desired go-live timeline?", "select", _values(GoLiveTimeline)),
    Question("trading_type", "What type of trading do you engage in?", "select", _values(TradingType)),
    Question("current_system", "What is your current system setup?", "select", _values(CurrentSystem)),
    Question(
        "priorities",
        "What are your key priorities? (select all that apply)",
        "multiselect",
        _values(Priority),
    ),
    Question(
        "region",
        "What geography or region do you primarily operate in?",
        "dropdown",
        _values(Region),
    ),
    Question(
        "integrations",
        "Do you require integration with any existing systems? (select all that apply)",
        "multiselect",
        _values(Integration),
    ),
)


def default_answers() -> UserAnswers:
    """The answer set a fresh questionnaire starts from."""
    return UserAnswers(users=DEFAULT_USERS)


def answers_from_mapping(data: Mapping[str, Any]) -> UserAnswers:
    """Validate a raw answers mapping (snake_case or camelCase keys).

    Raises:
        pydantic.ValidationError: On unknown option values, a negative budget,
            ``min > max``, a user count below 1, or an
            unknown key.
    """
    return UserAnswers.model_validate(dict(data))


def is_answer_complete(question: Question, answers: UserAnswers) -> bool:
    """Whether the prospect may move past ``question``.

    multiselect needs at least one option; number is always valid once set;
    budget-range needs at least one bound; select/dropdown need a value.
    """
    value = getattr(answers, question.id)
    if question.kind == "multiselect":
        return len(value) > 0
    if question.kind == "budget-range":
        return not value.is_empty
    return value is not None
