# pitchthesis/core/llm.py
import openai
from openai import OpenAI

from pitchthesis.config import Settings
from pitchthesis.core.errors import ModelError

def _client(cfg: Settings) -> OpenAI:
    # max_retries=0: a failed call drops straight to the fallback thesis
    return OpenAI(
        api_key=cfg.xai_api_key,
        base_url=cfg.llm_api_base,
        timeout=cfg.llm_timeout_seconds,
        max_retries=0,
    )

def chat_complete(system: str, user: str, *, cfg: Settings, max_tokens: int = 900) -> str:
    """
    One blocking chat completion against the configured OpenAI-compatible endpoint.
    Raises ModelError on transport/API failure or an empty body.
    """
    try:
        resp = _client(cfg).chat.completions.create(
            model=cfg.llm_model,
            messages=[{"role": "system", "content": system}, {"role": "user", "content": user}],
            temperature=cfg.llm_temperature,
            max_tokens=max_tokens,
        )
    except openai.APIError as e:
        raise ModelError(f"completion request failed: {e}") from e

    if not resp or not resp.choices:
        raise ModelError("completion returned no choices")
    content = (resp.choices[0].message.content or "").strip()
    if not content:
        raise ModelError("empty completion response")
    return content
