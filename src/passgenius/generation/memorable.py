"""Memorable password generation backed by a Gemini model.

The model is asked for a short phrase of two or three unrelated words with
an uppercase letter, a number and a special character, e.g. ``RainyCat$23``.
Its answer is validated against MEMORABLE_POLICY before being returned.
"""
import logging
from typing import Any, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from pydantic import BaseModel, Field, ValidationError

from ..config import DEFAULT_GEMINI_MODEL
from .policy import GenerationError, PasswordPolicy, MEMORABLE_POLICY

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = """You are an expert in creating memorable, yet secure passwords.
Create a password based on the topic: {topic}.

The password should be a short phrase of 2-3 unrelated words.
It must include at least one uppercase letter, one number, and one special character.
The total length should be between 12 and 16 characters.

Example for topic "Google":
HappyDolphin!8

Example for topic "My Bank":
RainyCat$23

Do not use the topic directly in the password.
Generate a password for the topic: {topic}.

Respond with JSON of the form {{"password": "<the password>"}}.
"""


class GeneratedPassword(BaseModel):
    password: str = Field(description="The generated memorable password.")


class MemorableGenerator:
    """Asks a Gemini model for a memorable password."""

    def __init__(
        self,
        client: Any = None,
        api_key: Optional[str] = None,
        model: str = DEFAULT_GEMINI_MODEL,
        policy: PasswordPolicy = MEMORABLE_POLICY,
    ):
        """Initialize the generator.

        Args:
            client: A ``google.genai.Client``; created from ``api_key`` when omitted
            api_key: Gemini API key
            model: Model name
            policy: Policy the model's answer must satisfy
        """
        self._client = client
        self.api_key = api_key
        self.model = model
        self.policy = policy

    @property
    def client(self) -> Any:
        if self._client is None:
            if not self.api_key:
                raise GenerationError("No Gemini API key configured (set GEMINI_API_KEY)")
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def generate(self, topic: str) -> str:
        """Generate a memorable password for the topic.

        Raises:
            GenerationError: If the call fails or the answer is not acceptable
        """
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=PROMPT_TEMPLATE.format(topic=topic),
                config={
                    'response_mime_type': 'application/json',
                    'response_schema': GeneratedPassword,
                },
            )
        except genai_errors.APIError as e:
            logger.error(f"Gemini request failed: {e}")
            raise GenerationError(f"Password service request failed: {e}") from e
        except (httpx.HTTPError, OSError) as e:
            logger.error(f"Could not reach Gemini: {e}")
            raise GenerationError(f"Password service unreachable: {e}") from e

        text = getattr(response, 'text', None)
        if not text:
            raise GenerationError("Password service returned an empty response")
        try:
            output = GeneratedPassword.model_validate_json(text)
        except ValidationError as e:
            raise GenerationError(f"Password service returned malformed output: {e}") from e

        password = output.password.strip()
        return self.policy.check(password, topic)
