# services/tip_client.py
"""
Smart tip generation over an OpenAI-compatible chat-completion API.

Environment Variables:
- OPENAI_API_KEY: API key; without it every tip is the canned fallback
- OPENAI_MODEL: Model name (default: gpt-4o-mini)
- OPENAI_BASE_URL: API base URL (default: https://api.openai.com/v1)

Tip generation never fails the request: any LLM error yields the fallback.
"""
import json
import logging
import os
import re
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel

logger = logging.getLogger("wellness-api.tips")

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_BASE_URL = "https://api.openai.com/v1"

SYSTEM_PROMPT = "You are a helpful health assistant. Keep advice general and non-medical."
USER_PROMPT = (
    "Based on this data, give one concise, encouraging wellness tip.\n"
    "Profile: {profile}\n"
    "Scores: {scores}"
)
TEMPERATURE = 0.7
MAX_TOKENS = 160

FALLBACK_TIP = (
    "You'll see personalized tips here once you register/login. "
    "Try one small improvement today: get 20-30 minutes of outdoor daylight "
    "before noon and aim for a consistent bedtime."
)

PRODUCT_LINKS: Dict[str, str] = {
    "sightc": "https://sightsage.com/collections/bestsellers/products/sightc-natural-dry-eye-supplement",
    "blueberry": "https://sightsage.com/products/blueberry-gummy",
    "adaptogen": "https://sightsage.com/products/adaptogen-x",
    "superfood": "https://sightsage.com/products/superfoods-wellness-tea",
    "default": "https://sightsage.com/collections/bestsellers",
}

_URL_PATTERN = re.compile(r"https?://[^\s)]+", re.IGNORECASE)


class CallToAction(BaseModel):
    url: str
    label: str


class TipResult(BaseModel):
    tip: str
    cta: CallToAction
    fallback: bool = False


def pick_product(text: str) -> CallToAction:
    """Product link for the first catalog product mentioned in the text."""
    s = (text or "").lower()
    if "sightc" in s:
        return CallToAction(url=PRODUCT_LINKS["sightc"], label="Buy SightC")
    if "blueberry" in s:
        return CallToAction(url=PRODUCT_LINKS["blueberry"], label="Buy Blueberry Gummies")
    if "adaptogen" in s:
        return CallToAction(url=PRODUCT_LINKS["adaptogen"], label="Buy AdaptogenX")
    if "superfood" in s or "wellness blend" in s:
        return CallToAction(url=PRODUCT_LINKS["superfood"], label="Buy Superfood Wellness Blend")
    return CallToAction(url=PRODUCT_LINKS["default"], label="Shop SightSage")


def extract_first_url(text: str) -> Optional[str]:
    match = _URL_PATTERN.search(text or "")
    return match.group(0).rstrip(".,") if match else None


def call_to_action(tip: str) -> CallToAction:
    """
    CTA for a generated tip.

    A link written into the tip wins; its label comes from the product the
    link (or the tip) names.
    """
    url = extract_first_url(tip)
    pick = pick_product(f"{url or ''} {tip}")
    if url:
        return CallToAction(url=url, label=pick.label)
    return pick


def fallback_result() -> TipResult:
    return TipResult(tip=FALLBACK_TIP, cta=pick_product(""), fallback=True)


class TipClient:
    """
    Chat-completion client producing one wellness tip per call.

    Args:
        api_key: API key (defaults to OPENAI_API_KEY)
        model: Model name (defaults to OPENAI_MODEL or gpt-4o-mini)
        base_url: API base URL (defaults to OPENAI_BASE_URL)
        timeout: Request timeout in seconds
        transport: Optional httpx transport (tests inject httpx.MockTransport)
    """

    DEFAULT_TIMEOUT = 20.0

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else os.getenv("OPENAI_API_KEY", "")
        self.model = model or os.getenv("OPENAI_MODEL", DEFAULT_MODEL)
        self.base_url = (base_url or os.getenv("OPENAI_BASE_URL") or DEFAULT_BASE_URL).rstrip("/")
        self.timeout = timeout
        self._transport = transport
        if not self.api_key:
            logger.warning("OPENAI_API_KEY not configured - tips will use the fallback")

    def build_messages(self, profile: Dict[str, Any], scores: Dict[str, Any]):
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {
                "role": "user",
                "content": USER_PROMPT.format(
                    profile=json.dumps(profile, default=str),
                    scores=json.dumps(scores, default=str),
                ),
            },
        ]

    async def _complete(self, profile: Dict[str, Any], scores: Dict[str, Any]) -> Optional[str]:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(
                f"{self.base_url}/chat/completions",
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "model": self.model,
                    "messages": self.build_messages(profile, scores),
                    "temperature": TEMPERATURE,
                    "max_tokens": MAX_TOKENS,
                },
            )
        if response.status_code != 200:
            logger.warning(f"Tip completion failed with status {response.status_code}")
            return None
        choices = response.json().get("choices") or []
        if not choices:
            return None
        content = (choices[0].get("message") or {}).get("content") or ""
        return content.strip() or None

    async def generate(self, profile: Dict[str, Any], scores: Dict[str, Any]) -> TipResult:
        """Generate a tip; returns the canned fallback on any failure."""
        if not self.api_key:
            return fallback_result()
        try:
            tip = await self._complete(profile, scores)
        except (httpx.HTTPError, ValueError, AttributeError) as e:
            logger.warning(f"Tip completion error: {type(e).__name__}: {e}")
            tip = None
        if not tip:
            return fallback_result()
        return TipResult(tip=tip, cta=call_to_action(tip), fallback=False)
