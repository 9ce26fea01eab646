import json
import logging
import asyncio
from typing import Any, Optional
from openai import OpenAI
from config import get_settings

logger = logging.getLogger("llm_service")


class LLMService:
    """Multimodal LLM wrapper over an OpenAI-compatible chat completions API."""

    def __init__(self, client: Optional[OpenAI] = None, model: Optional[str] = None):
        settings = get_settings()
        self.client = client or OpenAI(
            base_url=settings.LLM_BASE_URL,
            api_key=settings.LLM_API_KEY,
        )
        self.model = model or settings.LLM_MODEL

    async def generate(
        self,
        prompt: str,
        system_instruction: str = "",
        image_base64: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 4096,
        json_mode: bool = False,
    ) -> str:
        """Generate text content, optionally grounded on one JPEG image."""
        messages = []
        if system_instruction:
            messages.append({"role": "system", "content": system_instruction})

        if image_base64:
            messages.append({
                "role": "user",
                "content": [
                    {"type": "image_url", "image_url": {"url": f"data:image/jpeg;base64,{image_base64}"}},
                    {"type": "text", "text": prompt},
                ],
            })
        else:
            messages.append({"role": "user", "content": prompt})

        try:
            response = await asyncio.to_thread(
                self.client.chat.completions.create,
                model=self.model,
                messages=messages,
                temperature=temperature,
                max_completion_tokens=max_tokens,
                **({"response_format": {"type": "json_object"}} if json_mode else {}),
            )
            return response.choices[0].message.content or ""
        except Exception as e:
            logger.error(f"LLM generation error: {e}")
            raise

    async def generate_json(
        self,
        prompt: str,
        system_instruction: str = "",
        image_base64: Optional[str] = None,
        temperature: float = 0.2,
        max_tokens: int = 8192,
    ) -> Any:
        """Generate structured JSON output (object or array)."""
        system = system_instruction or ""
        system += "\n\nIMPORTANT: Respond ONLY with valid JSON. No markdown, no code blocks, no explanation."

        response = await self.generate(
            prompt,
            system_instruction=system,
            image_base64=image_base64,
            temperature=temperature,
            max_tokens=max_tokens,
            json_mode=True,
        )
        return parse_json_response(response)


def parse_json_response(response: str) -> Any:
    """Decode a model reply, tolerating a surrounding markdown code fence."""
    cleaned = response.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    if cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    cleaned = cleaned.strip()

    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"JSON parse error: {e}\nResponse: {cleaned[:500]}")
        raise ValueError(f"LLM returned invalid JSON: {e}")


# Singleton
_llm_service = None


def get_llm_service() -> LLMService:
    global _llm_service
    if _llm_service is None:
        _llm_service = LLMService()
    return _llm_service
