"""
Justification text generator — prose explaining a recommendation.

Two framings:
  - ``generate_comparison(answers, ideal, strong)``: why the ideal fit wins
    and when the strong alternative would be better.
  - ``generate_suggestion(answers, product)``: a follow-up next step shown
    after the prospect confirms the recommendation.

The generator talks to any OpenAI-compatible chat endpoint through
``langchain_openai.ChatOpenAI`` (default: Gemini's OpenAI-compatible API).

Neither method raises.  When the service is disabled, has no API key, or the
call fails, a deterministic template built only from local data (product
name, key strengths, the prospect's priorities) is returned instead, so the
caller never blocks on text generation.

Credential setup (.env, gitignored)::

    GEMINI_API_KEY=your_key     # or whichever variable [justification].api_key_env names
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from langchain_core.messages import HumanMessage, SystemMessage

from ctrm_advisor.config import JustificationConfig
from ctrm_advisor.integrations.prompts import (
    COMPARISON_PROMPT,
    SUGGESTION_PROMPT,
    SYSTEM_PROMPT,
)
from ctrm_advisor.models.answers import UserAnswers
from ctrm_advisor.models.product import Product
from ctrm_advisor.reporting.formatters import answer_fields

logger = logging.getLogger(__name__)


# ── Fallback templates ────────────────────────────────────────────────────────


def _priorities_phrase(answers: UserAnswers) -> str:
    priorities = answers.sorted_priorities()
    if not priorities:
        return "your core business requirements"
    return ", ".join(p.value for p in priorities)


def _scale_phrase(answers: UserAnswers) -> str:
    if answers.org_size is None:
        return "your organization's scale"
    return f"your organization's scale of '{answers.org_size.value}'"


def fallback_comparison_text(
    answers: UserAnswers,
    ideal: Product,
    strong: Product,
) -> str:
    """Template justification for the ideal/strong pair.

    Always names both products, the ideal's key strengths, and the
    prospect's stated priorities.
    """
    return (
        f"Based on your focus on {_priorities_phrase(answers)} and {_scale_phrase(answers)}, "
        f"{ideal.name} is an excellent choice. Its capabilities in "
        f"{', '.join(ideal.key_strengths)} align closely with your requirements. "
        f"{strong.name} is a strong alternative, with strengths in "
        f"{', '.join(strong.key_strengths)}."
    )


def fallback_suggestion_text(answers: UserAnswers, product: Product) -> str:
    """Template follow-up suggestion for a confirmed product."""
    return (
        f"Start with a scoped pilot of {product.name} centred on "
        f"{_priorities_phrase(answers)}, drawing on its strengths in "
        f"{', '.join(product.key_strengths)}. A solution specialist can help you "
        f"plan the rollout around your go-live timeline."
    )


# ── Generator ─────────────────────────────────────────────────────────────────


class JustificationGenerator:
    """Generates recommendation prose, degrading to templates on any failure.

    Usage::

        generator = JustificationGenerator(config.justification)
        text = generator.generate_comparison(answers, result.ideal, result.strong)

    Tests (and callers with their own model) may inject any object exposing
    ``invoke(messages) -> message-with-.content`` via ``llm``.
    """

    def __init__(
        self,
        config: Optional[JustificationConfig] = None,
        llm: Optional[Any] = None,
    ) -> None:
        self.config = config or JustificationConfig()
        self._llm = llm

    @property
    def is_configured(self) -> bool:
        """True when a model is injected or the service is enabled with a key."""
        if self._llm is not None:
            return True
        return self.config.enabled and self.config.api_key() is not None

    def _get_llm(self) -> Any:
        if self._llm is None:
            from langchain_openai import ChatOpenAI

            logger.debug(
                "Using OpenAI-compatible provider: %s at %s",
                self.config.model, self.config.base_url,
            )
            self._llm = ChatOpenAI(
                model=self.config.model,
                api_key=self.config.api_key(),
                base_url=self.config.base_url,
                temperature=self.config.temperature,
                timeout=self.config.timeout_seconds,
                max_retries=self.config.max_retries,
            )
        return self._llm

    def _invoke(self, prompt: str) -> Optional[str]:
        """Call the model; ``None`` on any failure or empty reply."""
        try:
            response = self._get_llm().invoke(
                [SystemMessage(content=SYSTEM_PROMPT.strip()), HumanMessage(content=prompt)]
            )
        except Exception as exc:
            logger.warning("Justification generation failed: %s", exc)
            return None

        text = _message_text(getattr(response, "content", response))
        if not text:
            logger.warning("Justification generation returned empty text.")
            return None
        return text

    def generate_comparison(
        self,
        answers: UserAnswers,
        ideal: Product,
        strong: Product,
    ) -> str:
        """Explain the ideal fit versus the strong alternative."""
        if not self.is_configured:
            logger.info("Justification service not configured; using fallback text.")
            return fallback_comparison_text(answers, ideal, strong)

        prompt = COMPARISON_PROMPT.format(
            **answer_fields(answers),
            ideal_name=ideal.name,
            ideal_description=ideal.description,
            ideal_strengths=", ".join(ideal.key_strengths),
            strong_name=strong.name,
            strong_description=strong.description,
            strong_strengths=", ".join(strong.key_strengths),
        )
        return self._invoke(prompt) or fallback_comparison_text(answers, ideal, strong)

    def generate_suggestion(self, answers: UserAnswers, product: Product) -> str:
        """Suggest a next step for a prospect who confirmed ``product``."""
        if not self.is_configured:
            logger.info("Justification service not configured; using fallback suggestion.")
            return fallback_suggestion_text(answers, product)

        prompt = SUGGESTION_PROMPT.format(
            **answer_fields(answers),
            product_name=product.name,
            product_description=product.description,
            product_strengths=", ".join(product.key_strengths),
        )
        return self._invoke(prompt) or fallback_suggestion_text(answers, product)


def _message_text(content: Any) -> str:
    """Flatten a chat message ``content`` (str or list of parts) to stripped text."""
    if isinstance(content, str):
        return content.strip()
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(str(part.get("text", "")))
        return "".join(parts).strip()
    return ""
