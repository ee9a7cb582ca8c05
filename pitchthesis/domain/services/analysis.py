# pitchthesis/domain/services/analysis.py
import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from pitchthesis.config import Settings
from pitchthesis.core.errors import ModelError, ValidationError
from pitchthesis.core.llm import chat_complete
from pitchthesis.core.logging import get_logger
from pitchthesis.core.observability import THESIS_PROVENANCE

log = get_logger("analysis")

PLACEHOLDER_THESIS = (
    "Investment Thesis (Placeholder):\n"
    "The deck suggests a solution targeting a clear market need. "
    "Initial traction and defined target market indicate potential for growth. "
    "Recommend continued validation and iterative go-to-market based on presented metrics."
)
FALLBACK_HEADER = "Investment Thesis (Fallback):\n"
FALLBACK_CHARS = 600

SYSTEM_PROMPT = "You are a rigorous VC analyst providing structured investment theses."
USER_PROMPT = (
    "You are a professional VC analyst. Based on the following pitch deck text, craft a concise "
    "investment thesis (250-400 words) covering Market, Problem, Solution, Traction, Moat, "
    "Go-to-Market, Risks, and Financial Outlook. Keep it objective and actionable.\n\n"
    "TEXT:\n{text}"
)

# system + user prompt, one completion
Completion = Callable[[str, str], str]


class CredentialStatus(str, Enum):
    VALID = "valid"
    MISSING = "missing"
    MALFORMED = "malformed"


class Provenance(str, Enum):
    MODEL = "model-generated"
    FALLBACK_NO_CREDENTIAL = "fallback-no-credential"
    FALLBACK_MODEL_ERROR = "fallback-model-error"


@dataclass(frozen=True)
class AnalysisResult:
    thesis: str
    provenance: Provenance


def credential_status(key: Optional[str], prefix: str) -> CredentialStatus:
    key = (key or "").strip()
    if not key:
        return CredentialStatus.MISSING
    if not key.startswith(prefix):
        return CredentialStatus.MALFORMED
    return CredentialStatus.VALID


def fallback_thesis(text: str) -> str:
    return f"{FALLBACK_HEADER}{text[:FALLBACK_CHARS]}..."


class AnalysisStage:
    """
    Extracted text -> thesis narrative.

    Only empty input is an error. A missing or malformed credential yields the
    fixed placeholder; a failing, slow or empty completion yields the truncated
    input. The caller always gets non-empty text.
    """

    def __init__(self, cfg: Settings, completion: Optional[Completion] = None):
        self.cfg = cfg
        self._completion = completion or (lambda system, user: chat_complete(system, user, cfg=cfg))

    async def _complete(self, text: str) -> str:
        prompt = USER_PROMPT.format(text=text)
        # plain executor thread: on timeout we stop waiting, the call is abandoned
        try:
            content = await asyncio.wait_for(
                asyncio.to_thread(self._completion, SYSTEM_PROMPT, prompt),
                timeout=self.cfg.llm_timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise ModelError(f"completion timed out after {self.cfg.llm_timeout_seconds}s") from e
        except ModelError:
            raise
        except Exception as e:
            # the completion service is untrusted; anything it throws is a model failure
            raise ModelError(f"completion failed: {e}") from e
        if not (content or "").strip():
            raise ModelError("empty completion response")
        return content.strip()

    async def run(self, text: Optional[str]) -> AnalysisResult:
        if not text or not text.strip():
            raise ValidationError("Text is required for analysis.")

        status = credential_status(self.cfg.xai_api_key, self.cfg.llm_key_prefix)
        if status is not CredentialStatus.VALID:
            log.info("analysis_fallback", extra={"provenance": Provenance.FALLBACK_NO_CREDENTIAL.value, "credential": status.value})
            THESIS_PROVENANCE.labels(provenance=Provenance.FALLBACK_NO_CREDENTIAL.value).inc()
            return AnalysisResult(PLACEHOLDER_THESIS, Provenance.FALLBACK_NO_CREDENTIAL)

        try:
            thesis = await self._complete(text)
        except ModelError as e:
            log.warning("analysis_fallback", extra={"provenance": Provenance.FALLBACK_MODEL_ERROR.value, "error": str(e)})
            THESIS_PROVENANCE.labels(provenance=Provenance.FALLBACK_MODEL_ERROR.value).inc()
            return AnalysisResult(fallback_thesis(text), Provenance.FALLBACK_MODEL_ERROR)

        log.info("analysis_done", extra={"provenance": Provenance.MODEL.value, "words": len(thesis.split())})
        THESIS_PROVENANCE.labels(provenance=Provenance.MODEL.value).inc()
        return AnalysisResult(thesis, Provenance.MODEL)
