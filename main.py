"""
Menh Scoring Engine - Main Entry Point
======================================
Serve the API or analyze a file of phone numbers from the command line.

Usage:
    python main.py serve                          # Start server on port 8000
    python main.py serve --port 8080 --reload     # Custom port, dev mode
    python main.py analyze --menh Kim             # sodienthoai.txt -> result.txt
    python main.py analyze numbers.txt --menh Hoa --mode AbsoluteBalance
    python main.py analyze numbers.txt --config my_config.json -o ranked.txt

API Documentation:
    http://localhost:8000/docs        # Swagger UI
    http://localhost:8000/redoc       # ReDoc
"""

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from menh_engine.config.logging import configure_logging
from menh_engine.config.settings import RUNTIME_CONFIG
from menh_engine.engine import NumberAnalysisEngine, format_results
from menh_engine.errors import ConfigError
from menh_engine.models.analysis_config import create_default_analysis_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Menh Scoring Engine")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the API server")
    serve.add_argument(
        "--host",
        type=str,
        default="0.0.0.0",
        help="Host to bind the server to (default: 0.0.0.0)",
    )
    serve.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to run the server on (default: 8000)",
    )
    serve.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    serve.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of worker processes (default: 1)",
    )

    analyze = subparsers.add_parser("analyze", help="Rank the numbers in a text file")
    analyze.add_argument(
        "input",
        nargs="?",
        default="sodienthoai.txt",
        help="File with one phone number per line (default: sodienthoai.txt)",
    )
    analyze.add_argument(
        "-o",
        "--output",
        default="result.txt",
        help="Where to write the ranked numbers (default: result.txt)",
    )
    analyze.add_argument(
        "--menh",
        default="Kim",
        help="Your menh: Kim, Moc, Thuy, Hoa or Tho (default: Kim)",
    )
    analyze.add_argument(
        "--mode",
        default="Compatibility",
        choices=["Compatibility", "AbsoluteBalance"],
        help="Scoring mode (default: Compatibility)",
    )
    analyze.add_argument(
        "--config",
        help="JSON file with configuration fields that override the defaults",
    )
    analyze.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    analyze.add_argument("--log-json", action="store_true", help="JSON log lines")

    return parser


def run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    configure_logging(level=RUNTIME_CONFIG["log_level"], log_json=RUNTIME_CONFIG["log_json"])

    print(f"""
    ╔══════════════════════════════════════════════════════════════╗
    ║                   MENH SCORING ENGINE                        ║
    ╠══════════════════════════════════════════════════════════════╣
    ║  Server starting on http://{args.host}:{args.port}
    ║  API Docs: http://localhost:{args.port}/docs
    ║  Health:   http://localhost:{args.port}/api/health
    ╚══════════════════════════════════════════════════════════════╝
    """)

    uvicorn.run(
        "menh_engine.api.endpoints:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        workers=args.workers if not args.reload else 1,
    )
    return 0


def run_analyze(args: argparse.Namespace) -> int:
    configure_logging(verbose=args.verbose, log_json=args.log_json)

    input_path = Path(args.input)
    try:
        raw_text = input_path.read_text(encoding="utf-8")
    except OSError as exc:
        print(f"Error: cannot read '{input_path}': {exc}", file=sys.stderr)
        return 1

    try:
        overrides = {}
        if args.config:
            overrides = json.loads(Path(args.config).read_text(encoding="utf-8"))
            if not isinstance(overrides, dict):
                raise ValueError("expected a JSON object")
        config = create_default_analysis_config(
            user_menh=overrides.pop("user_menh", args.menh),
            mode=overrides.pop("mode", args.mode),
            overrides=overrides,
        )
    except (OSError, ValueError) as exc:
        print(f"Error: cannot load config '{args.config}': {exc}", file=sys.stderr)
        return 1
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    print(f"Menh: {config.user_menh.value}  Mode: {config.mode.value}")

    batch = NumberAnalysisEngine(config).analyze_batch(raw_text)

    print(f"Found {batch.passed} valid numbers out of {batch.parsed} parsed.")
    for reason, count in sorted(batch.rejected_by.items()):
        print(f"  rejected by {reason}: {count}")

    output = format_results(batch.results)
    Path(args.output).write_text(output + "\n" if output else "", encoding="utf-8")

    print(f"Wrote sorted results to {args.output}")
    print(f"Time: {batch.processing_time_ms:.2f}ms")
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.command == "serve":
        return run_serve(args)
    return run_analyze(args)


if __name__ == "__main__":
    sys.exit(main())
