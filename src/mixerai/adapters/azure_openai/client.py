import json
import logging
from typing import Any, Dict, List, Optional

from openai import AzureOpenAI, OpenAIError

from mixerai.exceptions import AIServiceError
from mixerai.settings import AzureOpenAISettings

logger = logging.getLogger(__name__)


def strip_code_fences(raw: str) -> str:
    """Remove a surrounding ```json ... ``` fence if the model added one."""
    text = raw.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


class AzureOpenAIClient:
    def __init__(self,
                 settings: AzureOpenAISettings,
                 timeout: float = 30.0,
                 max_retries: int = 2):
        """
        Wraps the openai SDK's AzureOpenAI chat completions client.

        Retries on connection errors and 429/5xx are handled by the SDK.
        """
        self.settings = settings
        self.deployment = settings.deployment
        self.client = AzureOpenAI(
            azure_endpoint=str(settings.endpoint),
            api_key=settings.api_key.get_secret_value(),
            api_version=settings.api_version,
            timeout=timeout,
            max_retries=max_retries,
        )

    def complete(
        self,
        messages: List[Dict[str, Any]],
        max_tokens: int = 500,
        temperature: float = 0.7,
        json_mode: bool = False,
    ) -> str:
        """
        Run a chat completion and return the message text.

        Raises:
            AIServiceError: provider error or empty completion
        """
        kwargs: Dict[str, Any] = {
            "model": self.deployment,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = self.client.chat.completions.create(**kwargs)
        except OpenAIError as e:
            logger.error(f"Azure OpenAI request failed: {e}")
            raise AIServiceError(f"AI API request failed: {e}") from e

        if not response.choices:
            raise AIServiceError("AI API returned no choices")
        content = response.choices[0].message.content
        if not content:
            raise AIServiceError("AI API returned an empty completion")
        return content

    def complete_text(self, system_prompt: str, user_prompt: str, max_tokens: int = 500) -> Optional[str]:
        """
        Text completion for short copy. Returns None instead of raising so
        callers can decide how to degrade.
        """
        try:
            return self.complete(
                [
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                max_tokens=max_tokens,
            )
        except AIServiceError as e:
            logger.warning(f"Text completion failed: {e}")
            return None

    def complete_json(self, system_prompt: str, user_content: Any, max_tokens: int = 800) -> Any:
        """
        Completion expected to be a JSON document.

        ``user_content`` may be a string or a list of content parts
        (text + image_url) for vision requests.

        Raises:
            AIServiceError: provider failure or unparseable JSON
        """
        raw = self.complete(
            [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
            max_tokens=max_tokens,
            temperature=0.4,
            json_mode=True,
        )
        try:
            return json.loads(strip_code_fences(raw))
        except json.JSONDecodeError as e:
            logger.warning(f"AI returned non-JSON content: {raw[:200]}")
            raise AIServiceError(f"AI API returned invalid JSON: {e}") from e
