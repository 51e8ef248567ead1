"""Command-line interface for page2md."""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console

from . import __version__
from .core.converter import convert_blocking
from .formatting import error_message, format_text_document
from .logging_config import setup_logging, uvicorn_log_config
from .models.api import ConvertResponse
from .models.config import ServiceConfig


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="page2md",
        description="Fetch a web page, extract the article and convert it to Markdown",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run the HTTP service (PORT env var or --port, default 8087)
  page2md serve

  # Convert one page and print the Markdown
  page2md convert https://example.com/post

  # Print the same plain-text document GET /?r=<url> returns
  page2md convert https://example.com/post --format text
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        metavar="FILE",
        help="YAML configuration file",
    )
    common.add_argument(
        "--user-agent",
        type=str,
        help="Custom User-Agent string",
    )
    common.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Fetch timeout in seconds (default: 30)",
    )
    common.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )
    common.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only log errors",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", parents=[common], help="Run the HTTP service")
    serve.add_argument("--host", type=str, default=None, help="Interface to bind (default: 0.0.0.0)")
    serve.add_argument("--port", "-p", type=int, default=None, help="Port to listen on (default: 8087)")

    convert = subparsers.add_parser("convert", parents=[common], help="Convert a single URL")
    convert.add_argument("url", help="Page to convert")
    convert.add_argument(
        "--format",
        "-f",
        choices=["markdown", "json", "text"],
        default="markdown",
        help="Output format (default: markdown)",
    )

    return parser


def build_config(args: argparse.Namespace) -> ServiceConfig:
    """Layer config file, environment and command-line flags, in that order."""
    config = ServiceConfig.from_yaml_file(args.config) if args.config else ServiceConfig()
    config = config.with_env()

    data = config.model_dump()
    if args.user_agent:
        data["network"]["user_agent"] = args.user_agent
    if args.timeout is not None:
        data["network"]["timeout"] = args.timeout
    if getattr(args, "host", None):
        data["server"]["host"] = args.host
    if getattr(args, "port", None) is not None:
        data["server"]["port"] = args.port

    if args.verbose:
        data["log_level"] = "DEBUG"
    elif args.quiet:
        data["log_level"] = "ERROR"

    return ServiceConfig.model_validate(data)


def run_server(config: ServiceConfig) -> int:
    """Serve the application with uvicorn until interrupted."""
    import uvicorn

    from .server import create_app

    app = create_app(config)
    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
        log_config=uvicorn_log_config(config.log_level),
    )
    return 0


def run_convert(args: argparse.Namespace, config: ServiceConfig) -> int:
    """Convert one URL and print it in the requested format."""
    console = Console(stderr=True)

    ctx = convert_blocking(args.url, config)

    if not ctx.ok:
        message, _ = error_message(ctx)
        if args.format == "json":
            print(json.dumps(ConvertResponse(error=message).to_body(), ensure_ascii=False))
        else:
            console.print(f"[red]Error:[/red] {message}")
        return 1

    markdown = ctx.markdown or ""
    if args.format == "json":
        print(json.dumps(ConvertResponse(markdown=markdown).to_body(), ensure_ascii=False))
    elif args.format == "text":
        sys.stdout.write(format_text_document(ctx.article, markdown))
    else:
        sys.stdout.write(markdown)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    console = Console(stderr=True)
    try:
        config = build_config(args)
    except Exception as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        return 1

    level = config.log_level
    stream = sys.stdout
    if args.command == "convert":
        # Converted output owns stdout
        stream = sys.stderr
        if level == "INFO":
            level = "WARNING"

    setup_logging(
        level=level,
        log_file=str(config.log_file) if config.log_file else None,
        stream=stream,
    )

    if args.command == "serve":
        return run_server(config)
    return run_convert(args, config)


if __name__ == "__main__":
    sys.exit(main())
