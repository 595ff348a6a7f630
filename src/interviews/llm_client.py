from __future__ import annotations

import hashlib
import json
import logging
import os
import re
import time

import httpx

from pipeline.errors import CollaboratorCallError, ValidationError

# ---------------------------------------------------------------------------
# Provider registry: maps short names to (base_url, env_var, model_id)
# ---------------------------------------------------------------------------
PROVIDERS = {
    "groq": {
        "base_url": "https://api.groq.com/openai/v1",
        "env_key": "GROQ_API_KEY",
        "default_model": "llama-3.3-70b-versatile",
    },
    "deepseek": {
        "base_url": "https://api.deepseek.com/v1",
        "env_key": "DEEPSEEK_API_KEY",
        "default_model": "deepseek-chat",
    },
    "openrouter": {
        "base_url": "https://openrouter.ai/api/v1",
        "env_key": "OPENROUTER_API_KEY",
        "default_model": "mistralai/mistral-nemo",
    },
    "google": {
        "base_url": "https://generativelanguage.googleapis.com/v1beta/openai",
        "env_key": "GOOGLE_API_KEY",
        "default_model": "gemini-2.0-flash",
    },
    "openai": {
        "base_url": "https://api.openai.com/v1",
        "env_key": "OPENAI_API_KEY",
        "default_model": "gpt-4o-mini",
    },
}

logger = logging.getLogger(__name__)


def strip_code_fences(text: str) -> str:
    """Extract JSON from an LLM response that may contain markdown fences or preamble."""
    m = re.search(r"```(?:json)?\s*\n?(.*?)```", text, re.DOTALL)
    if m:
        return m.group(1).strip()
    for start_char, end_char in [("{", "}"), ("[", "]")]:
        idx = text.find(start_char)
        if idx != -1:
            ridx = text.rfind(end_char)
            if ridx > idx:
                return text[idx : ridx + 1]
    return text.strip()


class LLMClient:
    """Async wrapper for chat completions against OpenAI-compatible endpoints.

    Each call is attempted exactly once. Transport failures, non-2xx statuses and
    malformed completion payloads all surface as CollaboratorCallError.
    """

    def __init__(
        self,
        provider: str = "groq",
        model: str | None = None,
        api_key: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        if provider not in PROVIDERS:
            raise ValueError(f"Unknown provider '{provider}'. Choose from: {list(PROVIDERS)}")

        info = PROVIDERS[provider]
        self.provider = provider
        self.base_url = info["base_url"]
        self.model = model or info["default_model"]
        self._api_key = api_key or os.getenv(info["env_key"])

        if not self._api_key:
            raise ValidationError(
                f"No API key for provider '{provider}'. "
                f"Set {info['env_key']} or pass api_key="
            )

        if timeout is None:
            timeout = 60.0 if provider == "deepseek" else 30.0
        self._timeout = timeout
        self._shared_client = http_client
        self._owns_client = http_client is None
        self.last_metrics: dict[str, int | float | None] = {}

    @staticmethod
    def _estimate_tokens(text: str) -> int:
        # Rough fallback for providers that do not return usage.
        if not text:
            return 0
        return max(1, len(text) // 4)

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.9,
        max_tokens: int = 500,
    ) -> str:
        started_at = time.monotonic()
        input_tokens = self._estimate_tokens(system_prompt) + self._estimate_tokens(user_prompt)
        output_tokens = 0

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

        client = await self._get_http_client()
        try:
            response = await client.post(f"{self.base_url}/chat/completions", headers=headers, json=payload)
        except httpx.HTTPError as exc:
            self._record(started_at, input_tokens, output_tokens, None)
            raise CollaboratorCallError(f"Request to provider '{self.provider}' failed: {exc}") from exc

        if response.status_code >= 400:
            self._record(started_at, input_tokens, output_tokens, response.status_code)
            raise CollaboratorCallError(
                f"Provider '{self.provider}' returned HTTP {response.status_code}: {response.text[:200]}"
            )

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
            usage = data.get("usage", {}) if isinstance(data, dict) else {}
            if isinstance(usage, dict):
                prompt_tokens = usage.get("prompt_tokens")
                completion_tokens = usage.get("completion_tokens")
                if isinstance(prompt_tokens, int):
                    input_tokens = prompt_tokens
                if isinstance(completion_tokens, int):
                    output_tokens = completion_tokens
        except (ValueError, KeyError, TypeError, IndexError) as exc:
            self._record(started_at, input_tokens, output_tokens, response.status_code)
            raise CollaboratorCallError("Invalid completion payload from LLM provider.") from exc

        if content is None:
            self._record(started_at, input_tokens, output_tokens, response.status_code)
            raise CollaboratorCallError("LLM provider returned an empty completion.")

        if output_tokens <= 0:
            output_tokens = self._estimate_tokens(str(content))
        self._record(started_at, input_tokens, output_tokens, response.status_code)
        return str(content).strip()

    async def complete_json(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.2,
        max_tokens: int = 4000,
    ) -> str:
        """Like complete(), but returns the response with any code fences stripped.

        The text is not guaranteed to be valid JSON; callers parse and validate it.
        """
        raw = await self.complete(system_prompt, user_prompt, temperature, max_tokens)
        return strip_code_fences(raw)

    def _record(self, started_at: float, input_tokens: int, output_tokens: int, status: int | None) -> None:
        latency_ms = (time.monotonic() - started_at) * 1000.0
        self.last_metrics = {
            "input_tokens": input_tokens,
            "output_tokens": output_tokens,
            "http_status_code": status,
            "latency_ms": latency_ms,
        }
        logger.debug(
            "llm.complete provider=%s model=%s input_tokens=%s output_tokens=%s latency_ms=%.2f http_status_code=%s",
            self.provider,
            self.model,
            input_tokens,
            output_tokens,
            latency_ms,
            status,
        )

    async def _get_http_client(self) -> httpx.AsyncClient:
        if self._shared_client is None:
            self._shared_client = httpx.AsyncClient(timeout=self._timeout)
            self._owns_client = True
        return self._shared_client

    async def aclose(self) -> None:
        if self._shared_client is not None and self._owns_client:
            await self._shared_client.aclose()
            self._shared_client = None

    async def __aenter__(self):
        await self._get_http_client()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


# ---------------------------------------------------------------------------
# Mock client for tests / offline demo
# ---------------------------------------------------------------------------
class MockLLMClient(LLMClient):
    """Deterministic mock LLM for tests and offline runs."""

    def __init__(self, model: str = "mock/model", **kwargs):
        # Skip parent __init__ entirely: mock needs no API key/client state.
        self.model = model
        self.provider = "mock"
        self.base_url = ""
        self._api_key = "mock"
        self._timeout = 0.0
        self._shared_client = None
        self._owns_client = False
        self.last_metrics = {}
        self.calls: list[tuple[str, str]] = []

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.9,
        max_tokens: int = 500,
    ) -> str:
        del temperature, max_tokens
        self.calls.append((system_prompt, user_prompt))
        digest = hashlib.sha256(f"{system_prompt}||{user_prompt}".encode()).hexdigest()
        idx = int(digest[:8], 16)

        if "CONCEPT OPTIMIZATION ANALYSIS" in user_prompt:
            return self._mock_consolidation(user_prompt)
        if "THEMATIC ANALYSIS" in user_prompt:
            return self._mock_thematic_analysis(user_prompt)
        return self._mock_answer(system_prompt, idx)

    async def aclose(self) -> None:
        # Mock never allocates network resources.
        return None

    async def _get_http_client(self):
        return None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    def _mock_answer(self, system_prompt: str, idx: int) -> str:
        variants = [
            "I love that it keeps things simple, it would fit into my morning routine without any trouble.",
            "It sounds interesting, but I would have to see whether it really works in this weather.",
            "Honestly the price worries me, premium products get expensive quickly and I have to be careful.",
            "My family would notice the scent first, and if it lasts all day that would be excellent.",
            "I don't like switching brands I trust, so it would need to prove itself before I change.",
            "I am curious about the ingredients, I would try a small size before buying the big one.",
        ]
        answer = variants[idx % len(variants)]
        # Price-sensitive personas mention cost more often.
        if "Price sensitivity: 9" in system_prompt or "Price sensitivity: 10" in system_prompt:
            answer = f"{answer} Still, the cost is what decides it for me."
        return answer

    @staticmethod
    def _mock_thematic_analysis(prompt: str) -> str:
        lowered = prompt.lower()
        lines = ["Summary: the participant weighed everyday practicality against cost."]
        if "price" in lowered or "expensive" in lowered or "cost" in lowered:
            lines.append("- Price sensitivity: cost is a deciding factor before trying the product")
        if "scent" in lowered:
            lines.append("- Sensory appeal: a lasting scent is a strong motivator")
        if "trust" in lowered or "switching" in lowered:
            lines.append("- Brand loyalty: switching requires proof of results")
        if len(lines) == 1:
            lines.append("- General interest: open to trying it with a clear benefit")
        return "\n".join(lines)

    @staticmethod
    def _mock_consolidation(prompt: str) -> str:
        interviews = prompt.count("--- INTERVIEW ")
        lowered = prompt.lower()
        price_mentions = lowered.count("expensive") + lowered.count("price") + lowered.count("cost")
        recommendation = "REFINE" if price_mentions > interviews else "GO"
        payload = {
            "decision": {
                "recommendation": recommendation,
                "confidence": 72 if recommendation == "GO" else 64,
                "reasoning": f"Based on {interviews} interviews, the concept resonates but value must be made clear.",
                "nextSteps": ["Clarify the core benefit", "Test price points", "Validate with real consumers"],
            },
            "insights": [
                {
                    "category": "IMPORTANT",
                    "title": "Benefit clarity",
                    "description": "Participants understood the idea but asked for proof of results.",
                    "evidence": ["It would need to prove itself before I change."],
                    "actionItems": ["Add a visible proof point to the claim"],
                    "impact": "MEDIUM",
                }
            ],
            "keyFindings": {
                "strengthPoints": ["Fits existing routines"],
                "weaknessPoints": ["Value for money is unclear"],
                "surprisingFindings": ["Scent matters more than expected"],
            },
            "targetOptimization": {
                "messaging": ["Lead with the everyday benefit"],
                "positioning": ["Affordable upgrade to the current routine"],
                "features": ["Offer a trial size"],
                "pricing": ["Stay close to current price anchors"],
            },
            "researchRecommendations": {
                "mustValidate": ["Price acceptance"],
                "segments": ["Current brand users", "Price-sensitive shoppers"],
                "methodology": ["Home-use test with a monadic design"],
            },
        }
        return "```json\n" + json.dumps(payload, indent=2) + "\n```"
