"""CLI helper to run construction-item extraction on a local PDF."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from takeoff.config import get_settings
from takeoff.errors import ConstructionExtractionError, PDFExtractionError
from takeoff.llm_client import AIProvider, create_default_client
from takeoff.services.construction_extraction import run_construction_extraction
from takeoff.services.pdf_text import extract_pdf_text
from takeoff.utils.logging import configure_logging


async def _run(path: Path, provider: AIProvider) -> int:
    settings = get_settings()
    try:
        extracted = extract_pdf_text(path.read_bytes(), filename=path.name)
    except PDFExtractionError as exc:
        print(exc)
        return 1
    print(f"Pages: {extracted.pages}  characters: {len(extracted.text)}")

    try:
        run = await run_construction_extraction(
            extracted.text,
            provider=provider,
            llm=create_default_client(settings),
            settings=settings,
        )
    except ConstructionExtractionError as exc:
        print("\nExtraction failed:", exc)
        return 1

    print(f"Strategy: {run.recovery.strategy}")
    for name, reason in run.recovery.failures:
        print(f"  - {name}: {reason}")
    result = run.result
    print(f"\n{result.document_type}: {result.summary}")
    print("\nItems:")
    for item in result.extracted_items:
        print(f"  {item.quantity}\t{item.item_type}\t{item.model_number}\t{item.page_reference}")
    print("\nRecommendations:")
    for line in result.recommendations:
        print(f"  - {line}")
    print(f"\n{run.message}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("pdf", type=Path, help="Path to a local PDF file")
    parser.add_argument(
        "--provider",
        choices=[provider.value for provider in AIProvider],
        default=get_settings().default_provider,
        help="LLM provider to use",
    )
    args = parser.parse_args()
    configure_logging()
    sys.exit(asyncio.run(_run(args.pdf, AIProvider(args.provider))))


if __name__ == "__main__":  # pragma: no cover - manual tool
    main()
