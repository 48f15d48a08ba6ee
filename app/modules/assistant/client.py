"""
Cliente de chat completions (OpenAI o API compatible) con soporte de tool calling.

Los servicios reciben el cliente como dependencia de FastAPI (`get_ai_client`),
lo que permite reemplazarlo en tests con `app.dependency_overrides`.
"""
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import openai
from fastapi import HTTPException, status

from app.core.config import settings

logger = logging.getLogger(__name__)


class AIServiceError(HTTPException):
    """Fallo del proveedor de IA (502)."""

    def __init__(self, detail: str = "El servicio de IA no respondió correctamente"):
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)


@dataclass
class ToolCall:
    id: str
    name: str
    arguments: Dict[str, Any]


@dataclass
class AIResponse:
    content: str
    tool_calls: List[ToolCall] = field(default_factory=list)
    finish_reason: str = "stop"


def tool_to_openai_format(name: str, description: str, parameters: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "type": "function",
        "function": {
            "name": name,
            "description": description,
            "parameters": parameters,
        },
    }


class AIClient:
    """Envoltorio síncrono sobre `openai.OpenAI`."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        vision_model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ):
        self.model = model or settings.AI_CHAT_MODEL
        self.vision_model = vision_model or settings.AI_VISION_MODEL
        self.max_tokens = max_tokens or settings.AI_MAX_TOKENS
        self.temperature = settings.AI_TEMPERATURE if temperature is None else temperature

        client_kwargs: Dict[str, Any] = {"api_key": api_key or settings.OPENAI_API_KEY}
        base_url = base_url or settings.OPENAI_BASE_URL
        if base_url:
            client_kwargs["base_url"] = base_url
        self._client = openai.OpenAI(**client_kwargs)

    def _parse_response(self, response) -> AIResponse:
        choice = response.choices[0]
        message = choice.message
        tool_calls = []

        for tc in message.tool_calls or []:
            try:
                arguments = json.loads(tc.function.arguments or "{}")
            except json.JSONDecodeError:
                logger.warning(f"Tool call {tc.function.name} with invalid JSON arguments")
                arguments = {}
            tool_calls.append(ToolCall(id=tc.id, name=tc.function.name, arguments=arguments))

        return AIResponse(
            content=message.content or "",
            tool_calls=tool_calls,
            finish_reason=choice.finish_reason or "stop",
        )

    def chat(
        self,
        messages: List[Dict[str, Any]],
        tools: Optional[List[Dict[str, Any]]] = None,
        model: Optional[str] = None,
        json_mode: bool = False,
    ) -> AIResponse:
        """
        Ejecutar una llamada de chat completions.

        `messages` ya viene en formato OpenAI (incluido el mensaje de sistema).
        """
        kwargs: Dict[str, Any] = {
            "model": model or self.model,
            "messages": messages,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }
        if tools:
            kwargs["tools"] = tools
            kwargs["tool_choice"] = "auto"
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        logger.debug(f"AI request: model={kwargs['model']} messages={len(messages)} tools={len(tools or [])}")
        try:
            response = self._client.chat.completions.create(**kwargs)
        except openai.APIError as e:
            logger.error(f"AI provider error: {e}")
            raise AIServiceError()

        parsed = self._parse_response(response)
        logger.info(f"AI response: finish_reason={parsed.finish_reason} tool_calls={len(parsed.tool_calls)}")
        return parsed

    def complete_json(self, system_prompt: str, user_content: Any, model: Optional[str] = None) -> Dict[str, Any]:
        """Pedir una respuesta JSON y decodificarla."""
        response = self.chat(
            [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
            model=model,
            json_mode=True,
        )
        try:
            data = json.loads(response.content)
        except json.JSONDecodeError:
            logger.error("AI returned a non-JSON payload")
            raise AIServiceError("La respuesta del servicio de IA no es JSON válido")
        if not isinstance(data, dict):
            raise AIServiceError("La respuesta del servicio de IA no es un objeto JSON")
        return data


def get_ai_client() -> AIClient:
    """Dependencia de FastAPI: 503 cuando no hay API key configurada."""
    if not settings.ai_enabled:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="El asistente de IA no está configurado (OPENAI_API_KEY)"
        )
    return AIClient()
