"""
LLM Collaborators Module.

Backends reached only through narrow protocols:
- Embedder (embeddings.base): OllamaEmbedder
- Answerer (llm.base): OllamaAnswerer, OpenAIAnswerer
- ChunkPlanner (chunking.semantic_chunker): OllamaChunkPlanner

Usage:
    from llm import OllamaAnswerer, OllamaClient

    client = OllamaClient("http://localhost:11434")
    answer = OllamaAnswerer(client, model="llama3.1").ask(prompt)
"""

from .base import Answerer
from .chunk_planner import OllamaChunkPlanner, build_user_prompt, parse_plan_response
from .ollama_client import OllamaAnswerer, OllamaClient, OllamaConfig, OllamaEmbedder
from .openai_client import OpenAIAnswerer, OpenAIConfig

__all__ = [
    "Answerer",
    "OllamaClient",
    "OllamaConfig",
    "OllamaEmbedder",
    "OllamaAnswerer",
    "OllamaChunkPlanner",
    "build_user_prompt",
    "parse_plan_response",
    "OpenAIAnswerer",
    "OpenAIConfig",
]
