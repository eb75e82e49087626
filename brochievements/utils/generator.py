from __future__ import annotations

import logging
from typing import Optional, Protocol

import aiohttp

from .. import config
from ..strings import S

log = logging.getLogger(__name__)


class GeneratorError(RuntimeError):
    """The completion API answered, but not with usable text."""


class Generator(Protocol):
    async def generate(self, prompt: str) -> str: ...


class OpenAIGenerator:
    """Single-shot chat completion: fixed system role + one user prompt."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        api_key: str,
        *,
        model: str = config.OPENAI_MODEL,
        base_url: str = config.OPENAI_BASE_URL,
        temperature: float = config.OPENAI_TEMPERATURE,
    ):
        self.session = session
        self.model = model
        self.temperature = temperature
        self._url = f"{base_url.rstrip('/')}/chat/completions"
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    def _payload(self, prompt: str) -> dict:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": S("ai.system")},
                {"role": "user", "content": prompt},
            ],
            "temperature": self.temperature,
        }

    async def generate(self, prompt: str) -> str:
        async with self.session.post(
            self._url,
            json=self._payload(prompt),
            headers=self._headers,
        ) as resp:
            if resp.status != 200:
                txt = (await resp.text())[:200]
                raise GeneratorError(
                    f"completion HTTP {resp.status}" + (f" ({txt})" if txt else "")
                )
            data = await resp.json()

        try:
            text = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            raise GeneratorError("empty completion response") from None
        if not isinstance(text, str) or not text.strip():
            raise GeneratorError("completion returned no text")
        return text.strip()


def generator_from_env(session: aiohttp.ClientSession) -> Optional[OpenAIGenerator]:
    """Build the generator when an API key is configured; None disables rewrites."""
    if not config.OPENAI_API_KEY:
        log.info("AI disabled: OPENAI_API_KEY not set")
        return None
    log.info("AI enabled (model=%s)", config.OPENAI_MODEL)
    return OpenAIGenerator(session, config.OPENAI_API_KEY)
