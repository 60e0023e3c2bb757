#!/usr/bin/env python3
"""
Fact check a piece of text from the command line (the popup's "paste text" flow).

Usage:
    python scripts/fact_check.py "The Eiffel Tower is 330 metres tall."
    python scripts/fact_check.py --stdin < claim.txt
    python scripts/fact_check.py --raw saved_backend_output.txt   # parse only, no API calls
"""
import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from factcheck_aggregator.errors import FactCheckError
from factcheck_aggregator.log import setup_logging
from factcheck_aggregator.parsing.report_parser import parse_report
from factcheck_aggregator.pipeline.run import run_fact_check
from factcheck_aggregator.rendering.citations import linkify, markdown_link
from factcheck_aggregator.rendering.plain_text import format_for_clipboard


def main():
    parser = argparse.ArgumentParser(description="AI fact check for a piece of text")
    parser.add_argument("text", nargs="?", help="Text to fact check")
    parser.add_argument("--stdin", action="store_true", help="Read the text from stdin")
    parser.add_argument("--context", default="", help="Surrounding page text")
    parser.add_argument("--url", default="", help="Page URL")
    parser.add_argument("--raw", type=Path, help="Parse a saved backend response instead of querying")
    args = parser.parse_args()

    load_dotenv()
    setup_logging()

    if args.raw:
        report = parse_report(args.raw.read_text(encoding="utf-8"))
        report = report.model_copy(update={
            "fact_check": linkify(report.fact_check, report.sources, markdown_link),
            "context": linkify(report.context, report.sources, markdown_link),
        })
        print(format_for_clipboard(report))
        return

    text = sys.stdin.read() if args.stdin else args.text
    if not text or not text.strip():
        parser.error("no text given")

    try:
        report = asyncio.run(run_fact_check(text.strip(), args.context, args.url, render=markdown_link))
    except FactCheckError as e:
        print(f"Error: {e.user_message}", file=sys.stderr)
        sys.exit(1)

    print(format_for_clipboard(report))


if __name__ == "__main__":
    main()
