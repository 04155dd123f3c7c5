"""
Command-line entry point of the reference estimation engine.

Usage:
    Estimate (reads one JSON object from stdin):
        echo '{"sqft": 1800, "bedrooms": 3, "bathrooms": 2, "location": "94107"}' \\
            | python -m house_price_pro.engine --model-dir model

    Metrics:
        python -m house_price_pro.engine --model-dir model --metrics

stdout carries exactly one JSON document and nothing else. Diagnostics go to
stderr, and any failure exits with status 1.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import IO, Optional

from house_price_pro.engine.bundle import describe_metrics, estimate, load_bundle, load_metrics

logger = logging.getLogger("house_price_pro.engine")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="house_price_pro.engine",
        description="Estimate a house price from JSON features on stdin, or report model metrics.",
    )
    parser.add_argument("--model-dir", default="model", help="Directory holding the model bundle")
    parser.add_argument(
        "--metrics", action="store_true", help="Print model metrics instead of an estimate"
    )
    return parser


def run(args: argparse.Namespace, stdin: IO[str], stdout: IO[str]) -> None:
    model_dir = Path(args.model_dir)

    if args.metrics:
        document = describe_metrics(load_metrics(model_dir))
    else:
        features = json.load(stdin)
        if not isinstance(features, dict):
            raise ValueError("Expected a JSON object of property features on stdin")
        document = estimate(load_bundle(model_dir), features)

    json.dump(document, stdout)
    stdout.write("\n")
    stdout.flush()


def main(
    argv: Optional[list[str]] = None,
    stdin: Optional[IO[str]] = None,
    stdout: Optional[IO[str]] = None,
) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    args = build_parser().parse_args(argv)

    try:
        run(args, stdin or sys.stdin, stdout or sys.stdout)
    except Exception as exc:
        logger.error("Estimation engine failed: %s", exc)
        return 1
    return 0
