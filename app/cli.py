"""
Command-line entry point.

    rag-core chunk FILE [--mode word|adaptive|semantic]
        Print each chunk with its word count, then a size report.

    rag-core ask PATH [PATH ...]
        Index files/directories, then answer questions interactively.
        An empty line exits.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional

from chunking.base import count_words
from chunking.chunk_eval_tools import evaluate_chunk_sizes
from context.answer_orchestrator import AnswerOrchestrator
from shared.errors import RagError

from .config import CHUNKING_MODES, Settings, load_settings
from .factory import build_chunker, build_components

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rag-core", description="Chunk, index and query documents"
    )
    parser.add_argument("--settings", help="JSON settings file")
    parser.add_argument("--log-level", help="Logging level (default from settings)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    chunk_parser = subparsers.add_parser("chunk", help="Preview chunks for a file")
    chunk_parser.add_argument("file", help="Text or markdown file")
    chunk_parser.add_argument(
        "--mode", choices=list(CHUNKING_MODES) + ["aisemantic"], help="Chunking mode"
    )

    ask_parser = subparsers.add_parser("ask", help="Index documents and ask questions")
    ask_parser.add_argument("paths", nargs="+", help="Files or directories to index")

    return parser


def run_chunk(
    settings: Settings,
    file: str,
    mode: Optional[str] = None,
    output_fn: Callable[[str], None] = print,
) -> int:
    path = Path(file)
    text = path.read_text(encoding="utf-8")
    chunker = build_chunker(settings, mode=mode)
    chunks = chunker.chunk(path.stem, text)

    for chunk in chunks:
        output_fn(f"--- {chunk.id} ({count_words(chunk.text)} words) ---")
        output_fn(chunk.text)
        output_fn("")

    limits = settings.chunking.adaptive
    report = evaluate_chunk_sizes(
        chunks,
        min_words=limits.min_words,
        max_words=limits.max_words,
        target_words=limits.target_words,
    )
    output_fn(
        f"{report.total_chunks} chunks: avg {report.avg_words:.0f} words "
        f"(min {report.min_words}, max {report.max_words}, std {report.std_words:.0f})"
    )
    for recommendation in report.recommendations:
        output_fn(f"- {recommendation}")
    return 0


def run_interactive(
    orchestrator: AnswerOrchestrator,
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
) -> None:
    """Question loop: empty line or EOF exits, failures are reported and skipped."""
    output_fn("Ask a question (empty line to exit).")
    while True:
        try:
            question = input_fn("> ")
        except EOFError:
            break
        if not question or not question.strip():
            break

        try:
            output_fn(orchestrator.ask(question))
        except RagError as e:
            output_fn(f"Request failed: {e}")


def run_ask(
    settings: Settings,
    paths: List[str],
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
) -> int:
    components = build_components(settings)

    output_fn("Indexing documents...")
    stats = components.indexer.index_files(paths)
    for error in stats.errors:
        output_fn(f"Skipped: {error}")

    output_fn(
        f"Ready. Indexed {stats.total_chunks} chunks from {stats.successful} documents. "
        f"TopK={settings.retrieval.top_k}, threshold={settings.retrieval.threshold}."
    )
    run_interactive(components.orchestrator, input_fn=input_fn, output_fn=output_fn)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.settings)
    except RagError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    configure_logging(args.log_level or settings.log_level)

    try:
        if args.command == "chunk":
            return run_chunk(settings, args.file, mode=args.mode)
        return run_ask(settings, args.paths)
    except (OSError, RagError) as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
