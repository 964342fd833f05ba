"""
LLM chunk planner over Ollama /api/chat.

The model only sees numbered paragraphs and answers with paragraph indices;
it never returns text. The resulting plan is validated by the chunker.
"""

import json
import logging
import re
from typing import Any, Dict, List, Sequence

from chunking.paragraph_splitter import Paragraph
from chunking.plan_validator import ChunkPlan, PlanItem
from chunking.semantic_chunker import SemanticChunkingConfig
from shared.errors import PlanningError

from .ollama_client import OllamaClient, extract_message_content

logger = logging.getLogger(__name__)

_JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")


def format_paragraphs(paragraphs: Sequence[Paragraph], max_chars: int) -> str:
    """Render paragraphs as ``p{i}: \"\"\"text\"\"\"`` lines."""
    lines = []
    for i, paragraph in enumerate(paragraphs):
        text = paragraph.text
        if max_chars > 0 and len(text) > max_chars:
            text = text[:max_chars]
        lines.append(f'p{i}: """{text}"""\n')
    return "".join(lines)


def build_user_prompt(
    paragraphs: Sequence[Paragraph], config: SemanticChunkingConfig
) -> str:
    """Substitute the sizing placeholders and the paragraph block."""
    return (
        config.user_prompt_template.replace("{{targetWords}}", str(config.target_words))
        .replace("{{minWords}}", str(config.min_words))
        .replace("{{maxWords}}", str(config.max_words))
        .replace("{{paragraphs}}", format_paragraphs(paragraphs, config.max_paragraph_chars))
    )


def parse_plan_response(content: str) -> ChunkPlan:
    """
    Parse the model's JSON answer into a ChunkPlan.

    Models sometimes wrap JSON in prose or code fences; if direct parsing
    fails, the outermost ``{...}`` block is tried.

    Raises:
        PlanningError: If no usable chunk list can be read
    """
    if not content or not content.strip():
        raise PlanningError("Planner returned empty content.")

    data = _load_json(content)

    chunks = data.get("chunks") if isinstance(data, dict) else None
    if not isinstance(chunks, list) or not chunks:
        raise PlanningError("Planner returned no chunks.")

    items: List[PlanItem] = []
    for entry in chunks:
        if not isinstance(entry, dict):
            raise PlanningError("Planner returned a malformed chunk entry.")
        indices = entry.get("paragraphs") or []
        if not isinstance(indices, list):
            raise PlanningError("Planner returned a malformed paragraph list.")
        title = entry.get("title")
        items.append(
            PlanItem(
                paragraph_indices=tuple(indices),
                title=title if isinstance(title, str) else None,
            )
        )

    return ChunkPlan(items=items)


def _load_json(content: str) -> Dict[str, Any]:
    try:
        return json.loads(content)
    except json.JSONDecodeError:
        pass

    match = _JSON_OBJECT_PATTERN.search(content)
    if match:
        try:
            return json.loads(match.group())
        except json.JSONDecodeError:
            pass

    raise PlanningError("Planner returned invalid JSON.")


class OllamaChunkPlanner:
    """
    ChunkPlanner that asks an Ollama chat model to group paragraphs.

    Usage:
        planner = OllamaChunkPlanner(OllamaClient())
        chunker = SemanticChunker(planner)
    """

    def __init__(self, client: OllamaClient):
        self.client = client

    def plan(
        self, paragraphs: Sequence[Paragraph], config: SemanticChunkingConfig
    ) -> ChunkPlan:
        """
        Request a plan for the given paragraphs.

        Raises:
            PlanningError: On backend failure, timeout or unusable response
        """
        if not paragraphs:
            raise PlanningError("No paragraphs to plan.")
        if len(paragraphs) > config.max_paragraphs_per_request:
            raise PlanningError("Paragraph count exceeds max_paragraphs_per_request.")

        payload = {
            "model": config.model,
            "stream": False,
            "messages": [
                {"role": "system", "content": config.system_prompt},
                {"role": "user", "content": build_user_prompt(paragraphs, config)},
            ],
        }

        data = self.client.post(
            "/api/chat",
            payload,
            timeout=config.request_timeout,
            error_cls=PlanningError,
        )
        plan = parse_plan_response(extract_message_content(data))
        logger.debug(
            f"Planner grouped {len(paragraphs)} paragraphs into {len(plan.items)} chunks"
        )
        return plan
