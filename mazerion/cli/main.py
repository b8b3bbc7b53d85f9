"""
Command-line interface for the Mazerion calculators.

Usage:
    python -m mazerion list [--category Basic] [--json]
    python -m mazerion info abv
    python -m mazerion calc abv -p og=1.050 -p fg=1.010 [--json]
    python -m mazerion calc brix_to_sg -m 20:brix
    python -m mazerion batch --input requests.json [--output results.json]
    python -m mazerion summary --input results.json
    python -m mazerion convert 5 gallons liters
    python -m mazerion serve [--port 8000]
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from mazerion import __version__
from mazerion.cli.readable_output import (
    print_calculator_info,
    print_calculator_list,
    print_readable_output,
    print_result,
)
from mazerion.config import Settings, configure_logging, load_settings
from mazerion.core.calculator import parse_decimal
from mazerion.core.errors import CalcError, CalcParseError, ConfigError
from mazerion.core.measurement import Measurement
from mazerion.core.units import Unit, convert
from mazerion.engine import CalcEngine
from mazerion.models.inputs import BatchRequest
from mazerion.models.outputs import BatchResponse, CalcResponse

logger = logging.getLogger(__name__)


def parse_unit(text: str) -> Unit:
    """Match a unit by value (``brix``) or symbol (``°Bx``), case-insensitive."""
    needle = text.strip().lower()
    for unit in Unit:
        if needle in (unit.value, unit.symbol.lower()):
            return unit
    raise argparse.ArgumentTypeError(
        f"unknown unit '{text}' (choose from: {', '.join(u.value for u in Unit)})"
    )


def parse_param(text: str) -> tuple[str, str]:
    key, sep, value = text.partition("=")
    if not sep or not key.strip():
        raise argparse.ArgumentTypeError(f"expected key=value, got '{text}'")
    return key.strip(), value.strip()


def parse_measurement(text: str) -> Measurement:
    raw_value, sep, raw_unit = text.rpartition(":")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected VALUE:UNIT, got '{text}'")
    try:
        value = parse_decimal("measurement", raw_value)
    except CalcParseError:
        raise argparse.ArgumentTypeError(f"invalid measurement value '{raw_value}'")
    return Measurement.new(value, parse_unit(raw_unit))


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mazerion",
        description="Mazerion - brewing, mead-making and winemaking calculators.",
    )
    parser.add_argument("--version", action="version", version=f"mazerion {__version__}")
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a TOML settings file (default: $MAZERION_CONFIG)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # list command
    list_parser = subparsers.add_parser("list", help="List available calculators")
    list_parser.add_argument(
        "--category", "-c",
        default=None,
        help="Only show calculators in this category",
    )
    list_parser.add_argument("--json", action="store_true", help="Print JSON")

    # info command
    info_parser = subparsers.add_parser("info", help="Describe one calculator")
    info_parser.add_argument("calculator_id", help="Calculator id, e.g. abv")

    # calc command
    calc_parser = subparsers.add_parser("calc", help="Run one calculator")
    calc_parser.add_argument("calculator_id", help="Calculator id, e.g. abv")
    calc_parser.add_argument(
        "--param", "-p",
        type=parse_param,
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Input parameter (repeatable)",
    )
    calc_parser.add_argument(
        "--measurement", "-m",
        type=parse_measurement,
        action="append",
        default=[],
        metavar="VALUE:UNIT",
        help="Typed measurement, e.g. 20:brix (repeatable)",
    )
    calc_parser.add_argument("--json", action="store_true", help="Print JSON")

    # batch command
    batch_parser = subparsers.add_parser(
        "batch",
        help="Run calculations from a JSON file",
    )
    batch_parser.add_argument(
        "--input", "-i",
        type=Path,
        required=True,
        help="JSON file: a list of requests or {\"requests\": [...]}",
    )
    batch_parser.add_argument(
        "--output", "-o",
        type=Path,
        default=None,
        help="Path to save JSON results (prints to stdout if not specified)",
    )

    # summary command
    summary_parser = subparsers.add_parser(
        "summary",
        help="Print a readable summary of a batch results file",
    )
    summary_parser.add_argument("--input", "-i", type=Path, required=True)

    # convert command
    convert_parser = subparsers.add_parser("convert", help="Convert a value between units")
    convert_parser.add_argument("value", help="Numeric value")
    convert_parser.add_argument("from_unit", type=parse_unit, help="Source unit, e.g. gallons")
    convert_parser.add_argument("to_unit", type=parse_unit, help="Target unit, e.g. liters")

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Start the FastAPI web server")
    serve_parser.add_argument(
        "--host",
        default=None,
        help="Host to bind to (default: from settings, 127.0.0.1)",
    )
    serve_parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help="Port to listen on (default: from settings, 8000)",
    )
    serve_parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )

    return parser


def cmd_list(args: argparse.Namespace, engine: CalcEngine) -> int:
    """List calculators."""
    try:
        if args.category:
            calculators = engine.calculators_by_category(args.category)
        else:
            calculators = engine.list_calculators()
    except CalcError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps([c.model_dump() for c in calculators], indent=2))
    else:
        print_calculator_list(calculators)
        print(f"\n{len(calculators)} calculators", file=sys.stderr)
    return 0


def cmd_info(args: argparse.Namespace, engine: CalcEngine) -> int:
    """Describe a calculator."""
    try:
        info = engine.get_info(args.calculator_id)
    except CalcError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    print_calculator_info(info)
    return 0


def cmd_calc(args: argparse.Namespace, engine: CalcEngine) -> int:
    """Run one calculator."""
    # A repeated -p keeps its first value, as CalcInput lookups do
    params: dict[str, str] = {}
    for key, value in args.param:
        params.setdefault(key, value)
    try:
        measurements = [Measurement.checked(m.value, m.unit) for m in args.measurement]
        result = engine.run(args.calculator_id, params, measurements)
    except CalcError as e:
        print(f"Error ({e.kind}): {e.message}", file=sys.stderr)
        return 1

    response = CalcResponse.from_result(args.calculator_id, result)
    if args.json:
        print(response.model_dump_json(indent=2))
    else:
        print_result(response)
    return 0


def cmd_batch(args: argparse.Namespace, engine: CalcEngine) -> int:
    """Run a batch of calculations from a JSON file."""
    try:
        with open(args.input) as f:
            data = json.load(f)
        if isinstance(data, list):
            data = {"requests": data}
        request = BatchRequest.model_validate(data)
        items = engine.run_batch(request.requests)
    except FileNotFoundError:
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON in {args.input}: {e}", file=sys.stderr)
        return 1
    except ValidationError as e:
        print(f"Validation Error: {e}", file=sys.stderr)
        return 1
    except CalcError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    response = BatchResponse.from_items(items)
    output_json = response.model_dump_json(indent=2)
    if args.output:
        with open(args.output, "w") as f:
            f.write(output_json)
        print(f"Results saved to {args.output}", file=sys.stderr)
    else:
        print(output_json)

    print(
        f"Batch: {response.succeeded} succeeded, {response.failed} failed",
        file=sys.stderr,
    )
    return 0


def cmd_summary(args: argparse.Namespace, engine: CalcEngine) -> int:
    """Summarize a saved batch results file."""
    try:
        print_readable_output(args.input)
    except FileNotFoundError:
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON in {args.input}: {e}", file=sys.stderr)
        return 1
    return 0


def cmd_convert(args: argparse.Namespace, engine: CalcEngine) -> int:
    """Convert a value between physical units."""
    try:
        value = parse_decimal("value", args.value)
        converted = convert(value, args.from_unit, args.to_unit)
    except CalcError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    source = Measurement.new(value, args.from_unit)
    target = Measurement.new(converted, args.to_unit)
    print(f"{source.display()} = {target.display()}")
    return 0


def cmd_serve(args: argparse.Namespace, settings: Settings) -> int:
    """Start the FastAPI web server."""
    try:
        import uvicorn
    except ImportError as e:
        print(f"Error: Missing dependency: {e}", file=sys.stderr)
        print("Install with: pip install uvicorn fastapi", file=sys.stderr)
        return 1

    host = args.host or settings.host
    port = args.port or settings.port
    print(f"\nStarting {settings.app_name} API", file=sys.stderr)
    print(f"API: http://{host}:{port}/", file=sys.stderr)
    print(f"Docs: http://{host}:{port}/docs", file=sys.stderr)
    print("\nPress Ctrl+C to stop\n", file=sys.stderr)

    uvicorn.run(
        "mazerion.api.server:app",
        host=host,
        port=port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )
    return 0


def cli(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    configure_logging("DEBUG" if args.verbose else settings.log_level)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "serve":
        return cmd_serve(args, settings)

    commands = {
        "list": cmd_list,
        "info": cmd_info,
        "calc": cmd_calc,
        "batch": cmd_batch,
        "summary": cmd_summary,
        "convert": cmd_convert,
    }

    handler = commands.get(args.command)
    if handler:
        logger.debug("Running command %s", args.command)
        return handler(args, CalcEngine(settings=settings))
    else:
        parser.print_help()
        return 1


def main():
    """Console script entrypoint wrapper."""
    return cli()


if __name__ == "__main__":
    sys.exit(cli())
