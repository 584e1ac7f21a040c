"""
Configuration for the Crisp Interview Assistant.

Settings come from environment variables (optionally via a .env file in the
project root). Model priority is an ordered, comma-separated list of
``provider:model`` entries; providers are tried in that order on every call.
"""
import os
import logging
from pathlib import Path
from typing import Dict, Any, List, Tuple

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).parent
load_dotenv(PROJECT_ROOT / ".env")

# Provider credentials
OPENROUTER_API_KEY = os.environ.get("OPENROUTER_API_KEY", "")
OPENROUTER_BASE_URL = os.environ.get("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")
DEEPSEEK_API_KEY = os.environ.get("DEEPSEEK_API_KEY", "")
DEEPSEEK_BASE_URL = os.environ.get("DEEPSEEK_BASE_URL", "https://api.deepseek.com/v1")
GOOGLE_API_KEY = os.environ.get("GOOGLE_API_KEY", "")
ANTHROPIC_API_KEY = os.environ.get("ANTHROPIC_API_KEY", "")

DEFAULT_MODEL_PRIORITY = ",".join([
    "openrouter:deepseek/deepseek-r1-distill-llama-70b:free",
    "openrouter:deepseek/deepseek-chat:free",
    "openrouter:google/gemini-2.0-flash-exp:free",
    "openrouter:meta-llama/llama-3.1-8b-instruct:free",
])
MODEL_PRIORITY = os.environ.get("CRISP_MODEL_PRIORITY", DEFAULT_MODEL_PRIORITY)

LLM_TEMPERATURE = float(os.environ.get("LLM_TEMPERATURE", "0.7"))
LLM_MAX_TOKENS = int(os.environ.get("LLM_MAX_TOKENS", "2048"))

# Interview settings
DEFAULT_ROLE = os.environ.get("CRISP_ROLE", "Full Stack Developer")
TIMER_ENABLED = os.environ.get("CRISP_TIMER_ENABLED", "true").lower() in ("1", "true", "yes")

# Client-local persistence
STORAGE_DIR = os.environ.get("CRISP_STORAGE_DIR", str(PROJECT_ROOT / ".crisp"))
INTERVIEW_STORAGE_KEY = "crisp-interview-storage"

# API
CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get(
        "CORS_ORIGINS",
        "http://localhost:5173,http://localhost:3000,http://127.0.0.1:5173,http://127.0.0.1:3000",
    ).split(",")
    if origin.strip()
]

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

SUPPORTED_PROVIDERS = ("openrouter", "deepseek", "gemini", "anthropic")


def setup_logging(level: str = None) -> None:
    """Configure the root logger once for CLI, API and UI entry points."""
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_model_priority(raw: str) -> List[Tuple[str, str]]:
    """
    Parse ``provider:model`` entries.

    Only the first colon separates provider from model, so OpenRouter ids
    such as ``deepseek/deepseek-chat:free`` survive intact.
    """
    entries = []
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        if ":" not in item:
            raise ValueError(f"Model entry must look like provider:model, got '{item}'")
        provider, model = item.split(":", 1)
        provider = provider.strip().lower()
        if provider not in SUPPORTED_PROVIDERS:
            raise ValueError(f"Unknown model provider '{provider}'")
        entries.append((provider, model.strip()))
    return entries


def get_model_priority() -> List[Tuple[str, str]]:
    return parse_model_priority(MODEL_PRIORITY)


def get_llm_config() -> Dict[str, Any]:
    """
    Get LLM configuration.

    Returns:
        Dictionary with provider credentials and generation defaults
    """
    return {
        "temperature": LLM_TEMPERATURE,
        "max_tokens": LLM_MAX_TOKENS,
        "providers": {
            "openrouter": {"api_key": OPENROUTER_API_KEY, "base_url": OPENROUTER_BASE_URL},
            "deepseek": {"api_key": DEEPSEEK_API_KEY, "base_url": DEEPSEEK_BASE_URL},
            "gemini": {"api_key": GOOGLE_API_KEY},
            "anthropic": {"api_key": ANTHROPIC_API_KEY},
        },
    }
