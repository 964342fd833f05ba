"""
Configuration module for the RAG core.
Manages environment variables, the optional JSON settings file and validation.

Precedence (lowest to highest): dataclass defaults, settings file, environment.

Settings file shape:
    {
      "ollama": {"base_url": ..., "embedding_model": ..., "chat_model": ...},
      "retrieval": {"top_k": 5, "threshold": 0.72, ...},
      "chunking": {"mode": "adaptive", "word": {...}, "adaptive": {...}, "semantic": {...}},
      "embedding": {"provider": "ollama", ...},
      "llm": {"provider": "ollama", ...}
    }

Keys may be snake_case, camelCase or PascalCase. Unknown keys are rejected.
"""

import json
import logging
import os
import re
from dataclasses import dataclass, field, fields
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from chunking.adaptive_chunker import AdaptiveChunkingConfig
from chunking.semantic_chunker import SemanticChunkingConfig
from shared.errors import ConfigurationError

logger = logging.getLogger(__name__)

SETTINGS_FILE_ENV = "RAG_SETTINGS_FILE"

CHUNKING_MODES = ("word", "adaptive", "semantic")
MODE_ALIASES = {"aisemantic": "semantic"}
EMBEDDING_PROVIDERS = ("ollama", "sentence_transformers")
LLM_PROVIDERS = ("ollama", "openai")
VECTOR_STORES = ("memory", "chroma")


@dataclass
class OllamaSettings:
    """Ollama server and model selection."""
    base_url: str = "http://localhost:11434"
    embedding_model: str = "nomic-embed-text"
    chat_model: str = "llama3.1"
    timeout: float = 120.0


@dataclass
class RetrievalSettings:
    """Retrieval and store configuration."""
    top_k: int = 5
    threshold: float = 0.72
    max_context_tokens: Optional[int] = None  # None = include every retrieved chunk
    vector_store: str = "memory"
    collection_name: str = "docs_v1"


@dataclass
class WordChunkingSettings:
    window_size: int = 180
    overlap: int = 40


@dataclass
class ChunkingSettings:
    """Chunking strategy configuration."""
    mode: str = "adaptive"
    word: WordChunkingSettings = field(default_factory=WordChunkingSettings)
    adaptive: AdaptiveChunkingConfig = field(default_factory=AdaptiveChunkingConfig)
    semantic: SemanticChunkingConfig = field(default_factory=SemanticChunkingConfig)


@dataclass
class EmbeddingSettings:
    """Embedding backend - version this with your index."""
    provider: str = "ollama"
    model_name: str = "all-MiniLM-L6-v2"  # sentence_transformers only
    normalize: bool = True


@dataclass
class LLMSettings:
    """Answering backend configuration."""
    provider: str = "ollama"
    model: str = "gpt-4.1-mini"  # openai only; Ollama uses ollama.chat_model
    api_key: str = ""
    temperature: float = 0.0
    max_tokens: int = 2048
    timeout: float = 30.0


@dataclass
class Settings:
    """Main application settings."""

    log_level: str = "INFO"
    ollama: OllamaSettings = field(default_factory=OllamaSettings)
    retrieval: RetrievalSettings = field(default_factory=RetrievalSettings)
    chunking: ChunkingSettings = field(default_factory=ChunkingSettings)
    embedding: EmbeddingSettings = field(default_factory=EmbeddingSettings)
    llm: LLMSettings = field(default_factory=LLMSettings)

    def validate(self) -> "Settings":
        self.chunking.mode = normalize_mode(self.chunking.mode)
        _check_choice("embedding.provider", self.embedding.provider, EMBEDDING_PROVIDERS)
        _check_choice("llm.provider", self.llm.provider, LLM_PROVIDERS)
        _check_choice("retrieval.vector_store", self.retrieval.vector_store, VECTOR_STORES)

        word = self.chunking.word
        if word.window_size <= 0:
            raise ConfigurationError("chunking.word.window_size must be positive.")
        if word.overlap < 0 or word.overlap >= word.window_size:
            raise ConfigurationError(
                "chunking.word.overlap must be in [0, window_size)."
            )
        if not -1.0 <= self.retrieval.threshold <= 1.0:
            raise ConfigurationError("retrieval.threshold must be within [-1, 1].")
        if self.retrieval.max_context_tokens is not None and self.retrieval.max_context_tokens <= 0:
            raise ConfigurationError("retrieval.max_context_tokens must be positive.")

        self.chunking.adaptive.validate()
        self.chunking.semantic.validate()
        return self


def normalize_mode(mode: str) -> str:
    """Map a chunking mode (case-insensitive, aliases allowed) to its canonical name."""
    key = (mode or "").strip().lower()
    key = MODE_ALIASES.get(key, key)
    if key not in CHUNKING_MODES:
        raise ConfigurationError(
            f"Unknown chunking mode {mode!r}; expected one of {', '.join(CHUNKING_MODES)}."
        )
    return key


def _check_choice(name: str, value: str, choices) -> None:
    if value not in choices:
        raise ConfigurationError(
            f"Unknown {name} {value!r}; expected one of {', '.join(choices)}."
        )


_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def _to_snake(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def _coerce(name: str, value: Any, current: Any) -> Any:
    """Convert a file or environment value to the type of the current value."""
    try:
        if current is None or value is None:
            return value
        if isinstance(current, bool):
            if isinstance(value, bool):
                return value
            if isinstance(value, str) and value.strip().lower() in ("true", "1", "yes", "on"):
                return True
            if isinstance(value, str) and value.strip().lower() in ("false", "0", "no", "off"):
                return False
            raise ValueError(value)
        if isinstance(current, int):
            if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
                raise ValueError(value)
            return int(value)
        if isinstance(current, float):
            if isinstance(value, bool):
                raise ValueError(value)
            return float(value)
        if isinstance(current, str):
            if not isinstance(value, str):
                raise ValueError(value)
            return value
    except (TypeError, ValueError):
        raise ConfigurationError(f"Invalid value for {name}: {value!r}")
    return value


def _apply_section(target: Any, data: Mapping[str, Any], section: str) -> None:
    """Set dataclass attributes from a mapping, recursing into nested sections."""
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"Settings section {section!r} must be an object.")

    known = {f.name for f in fields(target)}
    for raw_key, value in data.items():
        key = _to_snake(raw_key)
        name = f"{section}.{key}" if section else key
        if key not in known:
            raise ConfigurationError(f"Unknown setting {name!r}.")

        current = getattr(target, key)
        if hasattr(current, "__dataclass_fields__"):
            _apply_section(current, value, name)
        elif key == "max_context_tokens" and value is not None:
            setattr(target, key, _coerce(name, value, 0))
        else:
            setattr(target, key, _coerce(name, value, current))


def load_settings_file(path: str) -> Dict[str, Any]:
    """Read a JSON settings file."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read settings file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Settings file {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file {path} must contain a JSON object.")
    return data


# (environment variable, dotted settings path)
ENV_OVERRIDES = (
    ("RAG_LOG_LEVEL", "log_level"),
    ("RAG_OLLAMA_BASE_URL", "ollama.base_url"),
    ("RAG_OLLAMA_EMBEDDING_MODEL", "ollama.embedding_model"),
    ("RAG_OLLAMA_CHAT_MODEL", "ollama.chat_model"),
    ("RAG_OLLAMA_TIMEOUT", "ollama.timeout"),
    ("RAG_TOP_K", "retrieval.top_k"),
    ("RAG_THRESHOLD", "retrieval.threshold"),
    ("RAG_MAX_CONTEXT_TOKENS", "retrieval.max_context_tokens"),
    ("RAG_VECTOR_STORE", "retrieval.vector_store"),
    ("RAG_COLLECTION_NAME", "retrieval.collection_name"),
    ("RAG_CHUNKING_MODE", "chunking.mode"),
    ("RAG_PLANNER_MODEL", "chunking.semantic.model"),
    ("RAG_EMBEDDING_PROVIDER", "embedding.provider"),
    ("RAG_EMBEDDING_MODEL", "embedding.model_name"),
    ("RAG_LLM_PROVIDER", "llm.provider"),
    ("RAG_LLM_MODEL", "llm.model"),
    ("OPENAI_API_KEY", "llm.api_key"),
)


def _apply_env(settings: Settings, environ: Mapping[str, str]) -> None:
    for env_name, path in ENV_OVERRIDES:
        value = environ.get(env_name)
        if value is None or value == "":
            continue
        *parents, leaf = path.split(".")
        target = settings
        for parent in parents:
            target = getattr(target, parent)
        current = getattr(target, leaf)
        if leaf == "max_context_tokens":
            current = 0
        setattr(target, leaf, _coerce(env_name, value, current))


def load_settings(
    path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """
    Build validated settings.

    Args:
        path: Optional JSON settings file (defaults to $RAG_SETTINGS_FILE)
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Validated Settings

    Raises:
        ConfigurationError: On unreadable files, unknown keys or invalid values
    """
    environ = os.environ if environ is None else environ
    settings = Settings()

    settings_path = path or environ.get(SETTINGS_FILE_ENV)
    if settings_path:
        if not Path(settings_path).is_file():
            raise ConfigurationError(f"Settings file not found: {settings_path}")
        _apply_section(settings, load_settings_file(settings_path), "")
        logger.info(f"Loaded settings from {settings_path}")

    _apply_env(settings, environ)
    return settings.validate()


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return load_settings()
