from __future__ import annotations

import logging
from typing import Dict, List, Optional

from salesdash.config import LLM_ENABLED, LLM_HOST, LLM_MODEL
from salesdash.models import DashboardContext
from salesdash.templates import fmt_int, fmt_pct

LOGGER = logging.getLogger(__name__)


class LLMUnavailable(RuntimeError):
    """No model configured, or the client library cannot be loaded."""


class LLMError(RuntimeError):
    """The model was reached but the call failed or returned nothing usable."""


class LLMClient:
    """
    Thin wrapper around Ollama's /chat. Built explicitly by the caller and
    connected lazily on first use; an unconfigured client raises
    LLMUnavailable instead of touching the network.
    """

    def __init__(self, model: str = LLM_MODEL, host: Optional[str] = None, enabled: bool = True):
        self.model = model
        self.host = host or None
        self.enabled = enabled
        self._client = None

    @classmethod
    def from_env(cls) -> "LLMClient":
        return cls(model=LLM_MODEL, host=LLM_HOST, enabled=bool(LLM_HOST) or LLM_ENABLED)

    @classmethod
    def unconfigured(cls) -> "LLMClient":
        return cls(enabled=False)

    @property
    def configured(self) -> bool:
        return bool(self.enabled and self.model)

    def _connect(self):
        if not self.configured:
            raise LLMUnavailable("language model is not configured")
        if self._client is None:
            try:
                import ollama  # type: ignore
            except ImportError as e:
                raise LLMUnavailable("ollama is not installed or not importable") from e
            self._client = ollama.Client(host=self.host) if self.host else ollama.Client()
        return self._client

    def chat(self, messages: List[Dict[str, str]]) -> str:
        client = self._connect()
        try:
            r = client.chat(model=self.model, messages=messages)  # type: ignore
        except Exception as e:
            # Most common: server not running or model not pulled yet
            raise LLMError(f"{e} (try `ollama pull {self.model}`)") from e
        msg = r.get("message") or {}
        text = (msg.get("content") or "").strip()
        if not text:
            raise LLMError("empty response from model")
        return text


# ---------- Prompt ----------
def context_summary(context: DashboardContext) -> str:
    """Bilingual text block with the totals and one line per store."""
    lines = [
        f"- Total Sales: {fmt_int(context.total_sales)} EGP (إجمالي المبيعات)",
        f"- Total Orders: {context.total_orders} (إجمالي الطلبات)",
        f"- Avg Order Value: {fmt_int(context.avg_order_value)} EGP (متوسط قيمة الطلب)",
        "",
        "**Store Performance:**",
    ]
    for s in context.store_performance:
        lines.append(
            f"- {s.name}: {fmt_int(s.sales)} EGP ({s.orders} orders, "
            f"{fmt_pct(s.progress)}% of target {fmt_int(s.target)} EGP)"
        )
    return "\n".join(lines)


SYSTEM_PROMPT = """أنت مساعد ذكي لنظام إدارة المبيعات لشركة cstore.
You are an AI assistant for cstore's sales dashboard.

**CRITICAL INSTRUCTIONS:**
1. DETECT the language the user is asking in and respond ONLY in that SAME language
2. If user asks in Arabic (العربية) → respond in Arabic ONLY
3. If user asks in Franco-Arabic (Franko/Arabizi like "3aez" or "eh") → respond in Franco-Arabic ONLY
4. If user asks in English → respond in English ONLY
5. Use the dashboard data provided to answer questions accurately
6. Be conversational and helpful
7. For Franco-Arabic, use numbers for Arabic letters (3=ع, 2=أ, 7=ح, 5=خ, 8=ق, 9=ص, 6=ط)

**Store Information:**
- Dark Store (الفرع المظلم)
- Heliopolis (فرع مصر الجديدة)
- Tagmo (فرع التجمع)
- Maadi (فرع المعادي)

**Current Dashboard Data:**
{summary}

**REMEMBER:**
- Respond in the SAME language as the user's question
- If they say "hi", "hey", "مرحبا", "هاي", etc., greet them and ask what they want to know
- Match their language style exactly"""

ACKNOWLEDGEMENT = (
    "فهمت! سأجيب بنفس اللغة التي تستخدمها. "
    "Fahemt! Ha respond bel logha elly enta test5demha. "
    "Understood! I will respond in the same language you use."
)


def build_messages(utterance: str, context: DashboardContext) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT.format(summary=context_summary(context))},
        {"role": "assistant", "content": ACKNOWLEDGEMENT},
        {"role": "user", "content": utterance},
    ]
