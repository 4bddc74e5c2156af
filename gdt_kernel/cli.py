#!/usr/bin/env python3
"""
GD&T kernel command line.

Validates feature control frames, runs tolerance calculators and
stack-up analyses on JSON documents and prints JSON results.

Exit codes: 0 success, 1 invalid frame / failed calculation, 2 unreadable
or malformed input.
"""

import argparse
import dataclasses
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from gdt_kernel.core.config import get_settings
from gdt_kernel.core.gdt import (
    Characteristic,
    RuleCategory,
    calculate,
    get_rules,
    get_rules_by_category,
    parse_calculator_input,
    parse_fcf,
    validate_by_category,
    validate_fcf,
)
from gdt_kernel.core.gdt.calculators import supported_characteristics
from gdt_kernel.core.stackup import (
    AnalysisMethod,
    analyze_stackup,
    compare_all_methods,
    parse_stackup_analysis,
    validate_stackup_input,
)
from gdt_kernel.utils.logging import setup_logging
from gdt_kernel.utils.serialize import to_jsonable

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_BAD_INPUT = 2


class InputError(Exception):
    """Input document could not be read or parsed."""


def _load_json(path: str) -> Dict[str, Any]:
    try:
        if path == "-":
            return json.load(sys.stdin)
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except OSError as exc:
        raise InputError(f"Cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise InputError(f"Invalid JSON in {path}: {exc}") from exc


def _emit(payload: Any) -> None:
    print(json.dumps(to_jsonable(payload), indent=2, ensure_ascii=False))


def cmd_validate(args: argparse.Namespace) -> int:
    fcf = parse_fcf(_load_json(args.file))
    if args.category:
        issues = validate_by_category(fcf, RuleCategory(args.category))
        _emit({"category": args.category, "issues": issues})
        return EXIT_FAILED if any(i.severity.value == "error" for i in issues) else EXIT_OK
    result = validate_fcf(fcf)
    _emit(result)
    return EXIT_OK if result.valid else EXIT_FAILED


def cmd_calculate(args: argparse.Namespace) -> int:
    characteristic = Characteristic(args.characteristic)
    data = parse_calculator_input(characteristic, _load_json(args.file))
    response = calculate(characteristic, data)
    if response.success:
        _emit({"success": True, "result": response.result})
        return EXIT_OK
    _emit({"success": False, "errors": response.errors})
    return EXIT_FAILED


def cmd_stackup(args: argparse.Namespace) -> int:
    analysis = parse_stackup_analysis(_load_json(args.file))
    if args.method:
        analysis = dataclasses.replace(analysis, analysis_method=AnalysisMethod(args.method))
    report = validate_stackup_input(analysis)
    if args.compare:
        results = compare_all_methods(analysis)
        _emit({"validation": report, "results": results})
        return EXIT_OK if all(r.passes_acceptance_criteria for r in results.values()) else EXIT_FAILED
    response = analyze_stackup(analysis)
    if not response.success:
        _emit({"success": False, "validation": report, "errors": response.errors})
        return EXIT_FAILED
    _emit({"success": True, "validation": report, "result": response.result})
    return EXIT_OK if response.result.passes_acceptance_criteria else EXIT_FAILED


def cmd_rules(args: argparse.Namespace) -> int:
    rules = get_rules_by_category(RuleCategory(args.category)) if args.category else get_rules()
    _emit(
        [
            {
                "code": r.code,
                "category": r.category,
                "severity": r.severity,
                "description": r.description,
            }
            for r in rules
        ]
    )
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gdt-kernel", description="GD&T frame validation and tolerance analysis"
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default from settings)")
    sub = parser.add_subparsers(dest="command", required=True)

    categories = [c.value for c in RuleCategory]

    p_validate = sub.add_parser("validate", help="Validate a feature control frame")
    p_validate.add_argument("file", help="FCF JSON file ('-' for stdin)")
    p_validate.add_argument("--category", choices=categories, help="Only run one rule category")
    p_validate.set_defaults(func=cmd_validate)

    p_calc = sub.add_parser("calculate", help="Run a tolerance calculator")
    p_calc.add_argument(
        "characteristic", choices=[c.value for c in supported_characteristics()]
    )
    p_calc.add_argument("file", help="Calculator input JSON file ('-' for stdin)")
    p_calc.set_defaults(func=cmd_calculate)

    p_stack = sub.add_parser("stackup", help="Run a tolerance stack-up")
    p_stack.add_argument("file", help="Stack-up JSON file ('-' for stdin)")
    p_stack.add_argument("--method", choices=[m.value for m in AnalysisMethod])
    p_stack.add_argument("--compare", action="store_true", help="Compare all methods")
    p_stack.set_defaults(func=cmd_stackup)

    p_rules = sub.add_parser("rules", help="List registered FCF rules")
    p_rules.add_argument("--category", choices=categories)
    p_rules.set_defaults(func=cmd_rules)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = get_settings()
    setup_logging(args.log_level or settings.LOG_LEVEL, json_output=settings.LOG_JSON)

    try:
        return args.func(args)
    except InputError as exc:
        logger.debug("Input rejected", extra={"source": args.command})
        print(str(exc), file=sys.stderr)
        return EXIT_BAD_INPUT
    except ValidationError as exc:
        logger.debug("Schema validation failed", extra={"source": args.command})
        print(str(exc), file=sys.stderr)
        return EXIT_BAD_INPUT


if __name__ == "__main__":
    sys.exit(main())
