from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from .language import detect
from .llm import LLMClient, LLMError, LLMUnavailable, build_messages
from .models import DashboardContext
from .rules import resolve_with_rule
from .templates import render

LOGGER = logging.getLogger(__name__)


def _fallback(utterance: str, context: DashboardContext) -> Dict[str, Any]:
    flags = detect(utterance)
    try:
        rule, text = resolve_with_rule(utterance, context, flags)
    except Exception:
        LOGGER.exception("rule engine failed; answering with help text")
        rule, text = "default", render("default", flags.language)
    return {"text": text, "meta": {"source": "rules", "rule": rule, "language": flags.language}}


def answer_query(utterance: str,
                 context: DashboardContext,
                 client: Optional[LLMClient] = None) -> Dict[str, Any]:
    """
    Ask the language model first when a configured client is given, then
    fall back to the rule engine. Returns {"text", "meta"}; never raises.
    """
    q = (utterance or "").strip()

    # 1) Hosted model (optional)
    if client is not None:
        try:
            text = client.chat(build_messages(q, context))
            return {"text": text, "meta": {"source": "llm", "model": client.model}}
        except LLMUnavailable as e:
            LOGGER.info("LLM not configured (%s); using rule engine", e)
        except LLMError as e:
            LOGGER.warning("LLM call failed (%s); using rule engine", e)
        except Exception:
            LOGGER.exception("unexpected LLM failure; using rule engine")

    # 2) Deterministic rules
    return _fallback(q, context)


def answer(utterance: str, context: DashboardContext, client: Optional[LLMClient] = None) -> str:
    return answer_query(utterance, context, client)["text"]
