"""OpenAI Responses API client for structured generation."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from nutrition_coach.errors import AIServiceError
from nutrition_coach.services.analysis import LLMClient


@dataclass
class OpenAILLMClient(LLMClient):
    """LLM client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAILLMClient":
        """Create an OpenAI client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        name: str,
        prompt: str,
        schema: dict[str, object],
        image_data_url: str | None = None,
    ) -> str:
        """Call OpenAI Responses API with structured outputs."""
        content: list[dict[str, object]] = [{"type": "input_text", "text": prompt}]
        if image_data_url:
            content.append({"type": "input_image", "image_url": image_data_url})
        request_payload: dict[str, object] = {
            "model": model,
            "input": [{"role": "user", "content": content}],
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": name,
                    "strict": True,
                    "schema": schema,
                }
            },
            "store": store,
        }
        if reasoning_effort:
            request_payload["reasoning"] = {"effort": reasoning_effort}

        response = await self.client.responses.create(**request_payload)
        output_text = response.output_text
        if not output_text:
            raise AIServiceError("OpenAI returned an empty response")
        return output_text

    async def close(self) -> None:
        await self.client.close()
