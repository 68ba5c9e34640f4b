"""
Command line entry point, invoked by the host during a build.
"""
import argparse
import logging
import sys

from mdfront import __version__
from mdfront.common.book_io import check_version, read_payload, write_book
from mdfront.common.errors import FrontmatterError
from mdfront.preprocessor import FrontmatterPreprocessor


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration. Stdout is reserved for the book."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)]
    )


def supports_command(args: argparse.Namespace) -> int:
    """Execute supports command."""
    preprocessor = FrontmatterPreprocessor()
    return 0 if preprocessor.supports(args.renderer) else 1


def run_command(args: argparse.Namespace) -> int:
    """Run as a preprocessor: book in on stdin, book out on stdout."""
    try:
        context, book = read_payload(sys.stdin)
        check_version(context)

        preprocessor = FrontmatterPreprocessor()
        processed = preprocessor.run(context, book)
        write_book(processed, sys.stdout)
        return 0

    except FrontmatterError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="mdbook-frontmatter",
        description="mdBook preprocessor for validating or fixing frontmatter against a JSON schema",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    supports_parser = subparsers.add_parser("supports", help="Check if this preprocessor supports a renderer")
    supports_parser.add_argument("renderer", help="The renderer to check")

    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if args.command == "supports":
        return supports_command(args)
    return run_command(args)


if __name__ == "__main__":
    sys.exit(main())
