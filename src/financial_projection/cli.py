"""
Command-line entry point.

Usage:
    financial-model inputs.yaml
    financial-model inputs.json --mode investor --years 7
    financial-model inputs.yaml --json > model.json

Exit codes:
    0  model built
    1  input file missing or unreadable
    2  input validation failed
"""

import sys
import json
import logging
import argparse
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .config import DEFAULT_MODE, DEFAULT_PROJECTION_YEARS, SUPPORTED_MODES
from .models.financial_model import FinancialModel, InputValidationError
from .utils.statement_printer import print_statements, print_summary

logger = logging.getLogger(__name__)


def load_input_document(path: Path) -> Dict[str, Any]:
    """
    Load a JSON or YAML input document.

    YAML is a superset of JSON, so both are parsed with yaml.safe_load.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the document is not a mapping
    """
    with open(path, "r") as file:
        document = yaml.safe_load(file)

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ValueError(f"Input document {path} must contain a mapping")
    return document


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='financial-model',
        description='Build a three-statement projection and DCF valuation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  financial-model inputs.yaml                   # Founder defaults fill gaps
  financial-model inputs.json --mode investor   # All investor fields required
  financial-model inputs.yaml --json            # Machine-readable output
        """
    )

    parser.add_argument('input', type=Path, help='JSON or YAML input document')
    parser.add_argument('--mode', choices=SUPPORTED_MODES, default=DEFAULT_MODE,
                        help=f'Input schema (default: {DEFAULT_MODE})')
    parser.add_argument('--years', type=int, default=DEFAULT_PROJECTION_YEARS,
                        help=f'Projection years (default: {DEFAULT_PROJECTION_YEARS})')
    parser.add_argument('--json', action='store_true', help='Print the full output as JSON')
    parser.add_argument('--lenient', action='store_true',
                        help='Build the model even when validation reports errors')
    parser.add_argument('--verbose', '-v', action='store_true', help='Log progress at INFO level')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        raw_inputs = load_input_document(args.input)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"\n❌ Error: could not read {args.input}: {e}", file=sys.stderr)
        return 1

    model = FinancialModel(
        raw_inputs,
        mode=args.mode,
        projection_years=args.years,
        strict=not args.lenient,
    )

    try:
        output = model.build_model()
    except InputValidationError as e:
        print("\n❌ Input validation failed:", file=sys.stderr)
        for error in e.errors:
            print(f"  - {error}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps(output.to_dict(), indent=2, default=str))
    else:
        print_statements(output.statements)
        print_summary(output.summary, output.valuation)

    return 0


if __name__ == "__main__":
    sys.exit(main())
