#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2gmi/cli.py
"""Command-line interface for html2gmi.

Examples
--------
Convert a saved page, resolving relative links against its original URL:
    $ html2gmi page.html --base-url https://example.com/articles/1

Read from stdin and write to a file:
    $ curl -s https://example.com/ | html2gmi - --base-url https://example.com/ -o page.gmi

List the links found in a page instead of printing Gemtext:
    $ html2gmi page.html --list-links

Use environment variables for defaults:
    $ export HTML2GMI_PARSER=lxml
    $ export HTML2GMI_NO_DEFER=true
    $ html2gmi page.html
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Optional

from html2gmi.api import html_to_gemtext
from html2gmi.exceptions import DependencyError, Html2GmiError
from html2gmi.logging_utils import configure_logging
from html2gmi.models import ConvertedContent
from html2gmi.options import GemtextOptions

logger = logging.getLogger(__name__)

ENV_PREFIX = "HTML2GMI_"
TRUE_VALUES = ("true", "1", "yes", "on")

EXIT_SUCCESS = 0
EXIT_CONVERSION_ERROR = 1
EXIT_INPUT_ERROR = 2


def get_env_var_value(key: str) -> Optional[str]:
    """Get environment variable with HTML2GMI_ prefix.

    Parameters
    ----------
    key : str
        The parameter name (e.g., 'base_url', 'no-links')

    Returns
    -------
    Optional[str]
        Environment variable value or None if not set

    """
    return os.environ.get(f"{ENV_PREFIX}{key.upper().replace('-', '_')}")


def apply_env_vars_to_parser(parser: argparse.ArgumentParser) -> None:
    """Apply environment variables as defaults to parser arguments.

    Command-line arguments still take precedence over environment variables.
    Invalid values are logged and ignored.
    """
    for action in parser._actions:
        if not action.dest or action.dest in ("help", "version", "input"):
            continue

        env_value = get_env_var_value(action.dest)
        if env_value is None:
            continue

        env_key = f"{ENV_PREFIX}{action.dest.upper()}"
        if isinstance(action, argparse._StoreTrueAction):
            action.default = env_value.lower() in TRUE_VALUES
        elif action.choices:
            if env_value in action.choices:
                action.default = env_value
            else:
                logger.warning(f"Invalid choice for {env_key}: {env_value}. Choices: {list(action.choices)}")
        else:
            action.default = env_value


def _get_version() -> str:
    """Get the version of the html2gmi package."""
    try:
        return version("html2gmi")
    except PackageNotFoundError:
        return "unknown"


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="html2gmi",
        description="Convert HTML documents to Gemtext.",
        epilog="Every option can also be set with an HTML2GMI_<OPTION> environment variable.",
    )

    parser.add_argument("input", nargs="?", default="-", help="HTML file to convert, or '-' for stdin (default)")
    parser.add_argument("--base-url", help="Absolute URL of the page, used to resolve relative links and images")
    parser.add_argument("-o", "--out", help="Write Gemtext to this file instead of stdout")

    conversion = parser.add_argument_group("conversion options")
    conversion.add_argument(
        "--no-links", action="store_true", help="Render anchors as plain text, without link lines or footnotes"
    )
    conversion.add_argument(
        "--allow-duplicate-links", action="store_true", help="Render a URL as a link every time it appears"
    )
    conversion.add_argument("--no-images", action="store_true", help="Do not render or collect images")
    conversion.add_argument(
        "--no-defer", action="store_true", help="Render <aside> and <nav> inline instead of after the main content"
    )
    conversion.add_argument(
        "--parser",
        choices=["html.parser", "html5lib", "lxml"],
        default="html.parser",
        help="BeautifulSoup tree builder (default: html.parser)",
    )

    listing = parser.add_argument_group("listing options")
    listing.add_argument(
        "--list-links", action="store_true", help="Print the collected links instead of the Gemtext"
    )
    listing.add_argument(
        "--list-images", action="store_true", help="Print the collected images instead of the Gemtext"
    )

    logging_group = parser.add_argument_group("logging options")
    logging_group.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Set logging level (default: WARNING)",
    )
    logging_group.add_argument("--log-file", help="Also write log messages to this file")
    logging_group.add_argument(
        "--trace", action="store_true", help="Verbose trace logging with timestamps and logger names"
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {_get_version()}")

    apply_env_vars_to_parser(parser)
    return parser


def build_options(parsed_args: argparse.Namespace) -> GemtextOptions:
    """Map parsed arguments to conversion options."""
    return GemtextOptions(
        render_links=not parsed_args.no_links,
        allow_duplicate_links=parsed_args.allow_duplicate_links,
        include_images=not parsed_args.no_images,
        defer_secondary_content=not parsed_args.no_defer,
        html_parser=parsed_args.parser,
    )


def read_input(source: str) -> bytes:
    """Read raw HTML bytes from a file path or stdin ('-').

    Raises
    ------
    OSError
        If the file cannot be read
    ValueError
        If no data was received

    """
    if source == "-":
        data = sys.stdin.buffer.read()
    else:
        data = Path(source).read_bytes()

    if not data:
        raise ValueError(f"No data received from {'stdin' if source == '-' else source}")
    return data


def format_listing(result: ConvertedContent, links: bool, images: bool) -> str:
    """Format the collected links and/or images as tab-separated lines."""
    lines: list[str] = []
    if links:
        lines.extend(f"{link.order_detected}\t{link.url}\t{link.text}" for link in result.links)
    if images:
        lines.extend(f"{image.source}\t{image.caption}" for image in result.images)
    return "\n".join(lines)


def main(args: Optional[list[str]] = None) -> int:
    """Run the command-line tool.

    Returns
    -------
    int
        0 on success, 1 when the conversion fails, 2 for unreadable input or
        invalid options

    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    configure_logging(parsed_args.log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)

    try:
        options = build_options(parsed_args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    try:
        html = read_input(parsed_args.input)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    try:
        result = html_to_gemtext(html, base_url=parsed_args.base_url, options=options)
    except DependencyError as e:
        print(f"Missing dependency: {e}", file=sys.stderr)
        return EXIT_CONVERSION_ERROR
    except Html2GmiError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONVERSION_ERROR

    if parsed_args.list_links or parsed_args.list_images:
        output = format_listing(result, parsed_args.list_links, parsed_args.list_images)
    else:
        output = result.gemtext

    if parsed_args.out:
        output_path = Path(parsed_args.out)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(output + "\n", encoding="utf-8")
        except OSError as e:
            print(f"Error writing {output_path}: {e}", file=sys.stderr)
            return EXIT_CONVERSION_ERROR
        logger.info(f"Converted {parsed_args.input} -> {output_path}")
    else:
        print(output)

    return EXIT_SUCCESS


__all__ = ["create_parser", "main"]
