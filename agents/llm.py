"""
Chat model access shared by every AI adapter.

A ModelChain holds an ordered list of chat models built from the
``CRISP_MODEL_PRIORITY`` setting. Each call tries them in order, once each;
the first non-empty reply wins. Providers without an API key are skipped when
the chain is built.
"""
import json
import logging
import re
from typing import Dict, Any, List, Optional, Tuple

from langchain_anthropic import ChatAnthropic
from langchain_core.messages import SystemMessage, HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI

from config import get_llm_config, get_model_priority

logger = logging.getLogger(__name__)

JSON_FENCE = re.compile(r"```json\s*(\{[\s\S]*?\})\s*```")
PLAIN_FENCE = re.compile(r"```\s*(\{[\s\S]*?\})\s*```")
JSON_SPAN = re.compile(r"\{[\s\S]*\}")
THINK_BLOCK = re.compile(r"<think>[\s\S]*?</think>")


class ModelChainError(RuntimeError):
    """Raised when every model in the chain failed or none is configured."""


def build_chat_model(provider: str, model: str, settings: Dict[str, Any],
                     temperature: float, max_tokens: int):
    """Construct the LangChain chat model for one ``provider:model`` entry."""
    if provider in ("openrouter", "deepseek"):
        # Both speak the OpenAI chat-completions protocol
        return ChatOpenAI(
            model=model,
            api_key=settings["api_key"],
            base_url=settings["base_url"],
            temperature=temperature,
            max_tokens=max_tokens,
        )
    if provider == "gemini":
        return ChatGoogleGenerativeAI(
            model=model,
            google_api_key=settings["api_key"],
            temperature=temperature,
            max_output_tokens=max_tokens,
        )
    if provider == "anthropic":
        return ChatAnthropic(
            model=model,
            api_key=settings["api_key"],
            temperature=temperature,
            max_tokens=max_tokens,
        )
    raise ValueError(f"Unknown model provider '{provider}'")


def response_text(content) -> str:
    """Flatten a chat model's content (string or list of content blocks)."""
    if isinstance(content, str):
        return content
    parts = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


def extract_json(text: str) -> Dict[str, Any]:
    """
    Pull a JSON object out of a model reply.

    Tries a ```json fence, then a plain fence, then the outermost {...} span.
    Raises ValueError when nothing parses.
    """
    text = THINK_BLOCK.sub("", text or "")
    for pattern in (JSON_FENCE, PLAIN_FENCE, JSON_SPAN):
        match = pattern.search(text)
        if not match:
            continue
        candidate = match.group(1) if match.groups() else match.group(0)
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed
    raise ValueError("No JSON object found in model response")


class ModelChain:
    """Priority-ordered chat models with one attempt per model."""

    def __init__(self, models: List[Tuple[str, Any]]):
        self.models = models

    @classmethod
    def from_config(cls, temperature: Optional[float] = None,
                    max_tokens: Optional[int] = None) -> "ModelChain":
        config = get_llm_config()
        temperature = config["temperature"] if temperature is None else temperature
        max_tokens = config["max_tokens"] if max_tokens is None else max_tokens

        models = []
        for provider, model in get_model_priority():
            settings = config["providers"][provider]
            if not settings.get("api_key"):
                logger.debug("Skipping %s:%s, no API key configured", provider, model)
                continue
            models.append((
                f"{provider}:{model}",
                build_chat_model(provider, model, settings, temperature, max_tokens),
            ))
        return cls(models)

    @property
    def available(self) -> bool:
        return bool(self.models)

    @property
    def model_names(self) -> List[str]:
        return [name for name, _ in self.models]

    def invoke(self, system_prompt: str, user_prompt: str) -> str:
        """Return the first non-empty reply, or raise ModelChainError."""
        if not self.models:
            raise ModelChainError("No AI models are configured")

        messages = [
            SystemMessage(content=system_prompt),
            HumanMessage(content=user_prompt),
        ]

        errors = []
        for name, llm in self.models:
            try:
                response = llm.invoke(messages)
                text = response_text(response.content)
                if not text.strip():
                    raise ValueError("empty response")
                logger.debug("Model %s answered", name)
                return text
            except Exception as e:
                logger.warning("Model %s failed: %s", name, e)
                errors.append(f"{name}: {e}")

        logger.error("All %d models failed", len(self.models))
        raise ModelChainError("All models failed: " + "; ".join(errors))

    def invoke_json(self, system_prompt: str, user_prompt: str) -> Dict[str, Any]:
        return extract_json(self.invoke(system_prompt, user_prompt))
