"""Natural-language insight about a month's consumption.

One-shot call to the Gemini ``generateContent`` REST endpoint. The dashboard
must render even when the service is down, so every failure path returns the
fixed fallback string instead of raising.
"""

import json
import logging

import httpx

from condoflow.core.config import settings
from condoflow.schemas.reconciliation import ConsumptionMetrics

logger = logging.getLogger(__name__)

FALLBACK_INSIGHT = "Mantenha o monitoramento para otimizar gastos."
EMPTY_RESPONSE_INSIGHT = "Dados analisados com sucesso."
NO_DATA_INSIGHT = "Sem dados de leitura para este mês."
MAX_INSIGHT_LENGTH = 150


def build_prompt(metrics: ConsumptionMetrics) -> str:
    payload = json.dumps(metrics.model_dump(by_alias=True), ensure_ascii=False)
    return (
        "Analise o seguinte resumo de consumo de condomínio e forneça um insight "
        f"curto (máx {MAX_INSIGHT_LENGTH} caracteres) em português sobre a eficiência: "
        f"{payload}"
    )


def _extract_text(body: dict) -> str:
    """First candidate's text parts joined; raises a lookup or type error on malformed bodies."""
    parts = body["candidates"][0]["content"]["parts"]
    return "".join(part.get("text", "") for part in parts).strip()


def analyze_consumption(
    metrics: ConsumptionMetrics,
    client: httpx.Client | None = None,
) -> str:
    """Short insight for the dashboard, or the fallback on any failure."""
    if not settings.GEMINI_API_KEY:
        logger.info("GEMINI_API_KEY not configured; using fallback insight")
        return FALLBACK_INSIGHT

    url = f"{settings.GEMINI_BASE_URL}/models/{settings.GEMINI_MODEL}:generateContent"
    request_body = {"contents": [{"parts": [{"text": build_prompt(metrics)}]}]}

    owns_client = client is None
    http = client or httpx.Client(timeout=settings.GEMINI_TIMEOUT_SECONDS)
    try:
        response = http.post(
            url,
            params={"key": settings.GEMINI_API_KEY},
            json=request_body,
        )
        response.raise_for_status()
        text = _extract_text(response.json())
    except (
        httpx.HTTPError,
        ValueError,
        KeyError,
        IndexError,
        TypeError,
        AttributeError,
    ) as exc:
        logger.warning("Insight generation failed for %s: %s", metrics.month, exc)
        return FALLBACK_INSIGHT
    finally:
        if owns_client:
            http.close()

    return text or EMPTY_RESPONSE_INSIGHT
