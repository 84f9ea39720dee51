"""
LLM prompt construction, chat-completion client and response parsing
"""
import json
import re
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from app.config import Settings
from app.core.exceptions import ConfigurationError, ModelInvocationError, SchemaParseError
from app.models.analysis import AnalysisResult
from app.models.entities import AnalysisPrompt
from app.utils.logger import get_logger

logger = get_logger(__name__)


class PromptEngine:
    """Builds the analysis prompt around extracted resume text"""

    SYSTEM_INSTRUCTION = (
        "You are a resume analyzer and interview question generator. "
        "Return only valid JSON."
    )

    OUTPUT_SCHEMA = """{{
  "candidate_profile": {{
    "experience_level": "entry/mid/senior",
    "key_skills": ["skill1", "skill2"],
    "primary_domain": "main field",
    "years_of_experience": "X years"
  }},
  "interview_questions": [
    {{
      "id": 1,
      "question": "detailed question",
      "expected_answer": "key points to look for",
      "difficulty": "easy/medium/hard",
      "type": "technical/behavioral",
      "skill_tested": "specific skill"
    }}
  ]
}}"""

    TEMPLATE = """You are an expert resume analyzer and interview question generator.

Here's a resume:
{resume_text}

Analyze this resume and provide:
1. A summary of the candidate's profile
2. Key skills identified
3. Experience level assessment
4. {question_count} relevant interview questions

Return your response in this exact JSON format:
""" + OUTPUT_SCHEMA + """

Rules:
- experience_level must be exactly one of: entry, mid, senior
- difficulty must be exactly one of: easy, medium, hard
- type must be exactly one of: technical, behavioral
- id is an integer starting at 1
- Return only the JSON object. No markdown, no explanations, no text outside the JSON."""

    def __init__(self, question_count: int = 5):
        self.question_count = question_count

    def build(self, extracted_text: str) -> AnalysisPrompt:
        """Compose the prompt; the resume text is embedded verbatim"""
        user_prompt = self.TEMPLATE.format(
            resume_text=extracted_text,
            question_count=self.question_count
        )
        return AnalysisPrompt(system=self.SYSTEM_INSTRUCTION, user=user_prompt)


class ChatCompletionClient:
    """
    Client for an OpenAI-compatible chat completions API (Groq by default)

    Makes exactly one request per call. Transport and service failures
    surface as ModelInvocationError and are never retried here.
    """

    service_name = "groq"

    def __init__(
        self,
        api_key: Optional[str],
        model: Optional[str],
        api_base: str,
        timeout: Optional[float] = None,
        temperature: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(base_url=api_base, timeout=timeout)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        http_client: Optional[httpx.AsyncClient] = None
    ) -> "ChatCompletionClient":
        return cls(
            api_key=settings.GROQ_API_KEY,
            model=settings.MODEL,
            api_base=settings.LLM_API_BASE,
            timeout=settings.LLM_TIMEOUT,
            temperature=settings.LLM_TEMPERATURE,
            http_client=http_client
        )

    def _build_payload(self, prompt: AnalysisPrompt, model: str) -> Dict[str, Any]:
        payload = {
            "model": model,
            "messages": [
                {"role": "system", "content": prompt.system},
                {"role": "user", "content": prompt.user}
            ]
        }
        if self.temperature is not None:
            payload["temperature"] = self.temperature
        return payload

    async def generate(self, prompt: AnalysisPrompt, model: Optional[str] = None) -> str:
        """
        Send the prompt and return the raw completion text

        Args:
            prompt: Composed analysis prompt
            model: Model identifier; defaults to the configured one

        Returns:
            Raw message content from the first choice

        Raises:
            ConfigurationError: If the API key or model is not configured
            ModelInvocationError: On transport errors, non-2xx responses or malformed bodies
        """
        model = model or self.model
        if not self.api_key:
            raise ConfigurationError("GROQ_API_KEY")
        if not model:
            raise ConfigurationError("MODEL")

        logger.info(
            "model_invocation_started",
            service=self.service_name,
            model=model,
            prompt_length=len(prompt.user)
        )

        try:
            response = await self._client.post(
                "chat/completions",
                json=self._build_payload(prompt, model),
                headers={"Authorization": f"Bearer {self.api_key}"}
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.error(
                "model_invocation_rejected",
                service=self.service_name,
                model=model,
                status_code=status_code
            )
            raise ModelInvocationError(
                f"{self.service_name} API returned HTTP {status_code}",
                service_name=self.service_name,
                api_response_code=status_code
            ) from e
        except httpx.HTTPError as e:
            logger.error(
                "model_invocation_transport_error",
                service=self.service_name,
                model=model,
                error=str(e),
                error_type=type(e).__name__
            )
            raise ModelInvocationError(
                f"Could not reach {self.service_name} API: {e}",
                service_name=self.service_name,
                details={"error_type": type(e).__name__}
            ) from e

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ModelInvocationError(
                f"Unexpected response body from {self.service_name} API",
                service_name=self.service_name,
                api_response_code=response.status_code
            ) from e

        if not isinstance(content, str) or not content.strip():
            raise ModelInvocationError(
                f"Empty response from {self.service_name} API",
                service_name=self.service_name,
                api_response_code=response.status_code
            )

        logger.info(
            "model_invocation_completed",
            service=self.service_name,
            model=model,
            response_length=len(content)
        )
        return content

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


class ResponseParser:
    """Cleans raw model output and validates it against AnalysisResult"""

    LEADING_FENCE = re.compile(r"^```(?:json)?[ \t]*\n?", re.IGNORECASE)
    TRAILING_FENCE = re.compile(r"\n?[ \t]*```$")

    def strip_fences(self, raw_text: str) -> str:
        """Trim whitespace and remove a surrounding code fence, if any"""
        cleaned = raw_text.strip()
        cleaned = self.LEADING_FENCE.sub("", cleaned, count=1)
        cleaned = self.TRAILING_FENCE.sub("", cleaned, count=1)
        return cleaned.strip()

    def parse(self, cleaned_text: str) -> AnalysisResult:
        """
        Parse cleaned text into an AnalysisResult

        Raises:
            SchemaParseError: If the text is not JSON or does not match the schema
        """
        try:
            payload = json.loads(cleaned_text)
        except (json.JSONDecodeError, RecursionError) as e:
            raise SchemaParseError(
                f"Model response is not valid JSON: {e}",
                raw_excerpt=cleaned_text[:200]
            ) from e

        try:
            return AnalysisResult.model_validate(payload)
        except PydanticValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in error['loc']) or 'response'}: {error['msg']}"
                for error in e.errors()
            )
            raise SchemaParseError(
                f"Model response does not match the analysis schema: {problems}"
            ) from e

    def normalize(self, raw_text: str) -> AnalysisResult:
        return self.parse(self.strip_fences(raw_text))
