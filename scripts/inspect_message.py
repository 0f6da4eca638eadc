#!/usr/bin/env python
"""Inspect how a message body is classified and cut.

Usage:
    python scripts/inspect_message.py reply.txt                  # Plain-text body
    python scripts/inspect_message.py reply.html --html          # Markup body
    python scripts/inspect_message.py reply.html --html --positions
"""

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from quoteless import QuotationExtractor
from quoteless.pipeline.checkpoints import Checkpointer, find_checkpoints, iter_positions, strip_checkpoints
from quoteless.pipeline.html import DEFAULT_NODE_LIMIT
from quoteless.pipeline.markup import clone, parse
from quoteless.pipeline.plain import PlainTextPipeline, find_delimiter, preprocess, split_lines
from quoteless.pipeline.projector import FlatteningProjector
from quoteless.pipeline.resolver import Resolution


def print_line_table(
    lines: list[str],
    markers: str,
    resolution: Resolution,
    line_checkpoints: list[list[int]] | None = None,
) -> None:
    """Print every line with its marker and whether it was cut."""
    print("LINES (marker, cut, checkpoints):")
    print(f"  {'#':>4} {'M':<2} {'Cut':<4} {'Checkpoints':<16} Text")
    print(f"  {'-'*4} {'-'*2} {'-'*4} {'-'*16} {'-'*50}")

    for i, (line, marker) in enumerate(zip(lines, markers)):
        is_cut = resolution.was_cut and resolution.first_cut <= i <= resolution.last_cut
        checkpoints = ",".join(str(c) for c in line_checkpoints[i]) if line_checkpoints else ""
        text_preview = line[:50] + "..." if len(line) > 50 else line
        print(f"  {i:>4} {marker:<2} {'x' if is_cut else '':<4} {checkpoints:<16} {text_preview}")


def print_resolution(resolution: Resolution) -> None:
    print()
    print(f"Rule: {resolution.rule or '-'}")
    print(f"Cut: {resolution.first_cut}..{resolution.last_cut}" if resolution.was_cut else "Cut: none")
    print(f"Splitter lines: {list(resolution.splitter_lines)}")
    print(f"Forwarded: {resolution.is_forwarded}")


def inspect_plain(body: str) -> None:
    pipeline = PlainTextPipeline()
    lines = split_lines(preprocess(body, find_delimiter(body)))
    markers = pipeline.classifier.classify(lines)
    resolution = pipeline.resolver.resolve(lines, markers)

    print_line_table(lines, markers, resolution)
    print_resolution(resolution)


def inspect_html(body: str, node_limit: int, show_positions: bool) -> None:
    tree = parse(body)

    if show_positions:
        print("POSITIONS (checkpoint, depth, tag):")
        for checkpoint, (element, depth, is_closing) in enumerate(iter_positions(tree)):
            print(f"  {checkpoint:>4} {'  ' * depth}{'/' if is_closing else ''}{element.tag}")
        print()

    scratch = clone(tree)
    count = Checkpointer(node_limit).stamp(scratch)
    print(f"Checkpoints: {count} (limit {node_limit})")
    if count >= node_limit:
        print("Tree too large for the checkpoint method")
        return
    print()

    projected = FlatteningProjector().project(scratch).splitlines()
    line_checkpoints = [find_checkpoints(line) for line in projected]
    lines = [strip_checkpoints(line) for line in projected]

    pipeline = PlainTextPipeline()
    markers = pipeline.classifier.classify(lines)
    resolution = pipeline.resolver.resolve(lines, markers)

    print_line_table(lines, markers, resolution, line_checkpoints)
    print_resolution(resolution)


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("path", type=Path, help="File holding the message body")
    parser.add_argument("--html", action="store_true", help="Treat the body as markup")
    parser.add_argument("--node-limit", type=int, default=DEFAULT_NODE_LIMIT)
    parser.add_argument("--positions", action="store_true", help="List tree positions (markup only)")
    parser.add_argument("--debug", action="store_true", help="Show pipeline debug logging")
    args = parser.parse_args()

    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    body = args.path.read_text(encoding="utf-8")

    print(f"Message: {args.path}")
    print("=" * 80)
    print()

    extractor = QuotationExtractor(node_limit=args.node_limit)
    if args.html:
        inspect_html(body, args.node_limit, args.positions)
        result = extractor.extract_from_html(body)
        print(f"Checkpoints used: {result.did_use_checkpoints}")
        print(f"Too long: {result.is_too_long}")
    else:
        inspect_plain(body)
        result = extractor.extract_from_plain(body)

    print(f"Quote found: {result.did_find_quote}")
    print()
    print("=" * 80)
    print("RESULT")
    print("=" * 80)
    print(result.body)


if __name__ == "__main__":
    main()
