# APICompare v1.0.0
#!/usr/bin/env python3
"""
APICompare CLI

Command-line interface for checking a proposed API descriptor against
its reference. Exit status of ``compare`` is 1 when breaking problems are
found, so it can gate a CI job directly.
"""
import argparse
import json
import logging
import sys
from pathlib import Path

EXIT_OK = 0
EXIT_BREAKING = 1
EXIT_ERROR = 2


def _load(path: str):
    from comparator import parse_descriptor_file

    parsed = parse_descriptor_file(path)
    if parsed is None:
        print(f"Error: Could not load descriptor {path}", file=sys.stderr)
    return parsed


def compare_files(
    reference_path: str,
    proposed_path: str,
    compare_breaking: bool = True,
    compare_designed: bool = True,
    as_json: bool = False
) -> int:
    """Compare two descriptor files and print the problems."""
    from comparator import APICompareError, compare_apis, format_report
    from config import settings

    reference = _load(reference_path)
    proposed = _load(proposed_path)
    if reference is None or proposed is None:
        return EXIT_ERROR

    try:
        report = compare_apis(
            reference.descriptor,
            proposed.descriptor,
            compare_breaking_api_changes=compare_breaking,
            compare_designed_api_changes=compare_designed
        )
    except APICompareError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    if as_json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print(format_report(
            report,
            reference_path,
            proposed_path,
            app_name=settings.APP_NAME,
            app_version=settings.APP_VERSION
        ))

    return EXIT_BREAKING if report.is_breaking else EXIT_OK


def up_convert_file(path: str, output: str = None) -> int:
    """Write the nested-tree form of a (legacy) descriptor."""
    from comparator import is_legacy_descriptor, up_convert

    parsed = _load(path)
    if parsed is None:
        return EXIT_ERROR
    if not isinstance(parsed.descriptor.get("phetioElements"), dict):
        print(f"Error: {path} has no 'phetioElements' map", file=sys.stderr)
        return EXIT_ERROR

    if not is_legacy_descriptor(parsed.descriptor):
        print(f"ℹ️  {path} is already in the current format", file=sys.stderr)

    converted = json.dumps(up_convert(parsed.descriptor), indent=2)
    if output:
        Path(output).write_text(converted + "\n", encoding="utf-8")
        print(f"Wrote {output}", file=sys.stderr)
    else:
        print(converted)
    return EXIT_OK


def show_info(path: str) -> int:
    """Print summary information about a descriptor."""
    from comparator import compute_descriptor_hash

    parsed = _load(path)
    if parsed is None:
        return EXIT_ERROR

    print(f"\n{parsed.filename}")
    print("-" * 60)
    print(f"  Name:     {parsed.name}")
    print(f"  Format:   {parsed.format}")
    print(f"  Version:  {parsed.version or 'N/A'}")
    print(f"  Elements: {parsed.element_count}")
    print(f"  Types:    {parsed.type_count}")
    print(f"  SHA-256:  {compute_descriptor_hash(parsed.descriptor)}")
    print()
    return EXIT_OK


def run_server(host: str = "0.0.0.0", port: int = 8000, reload: bool = False, workers: int = 1):
    """Run the FastAPI server."""
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=host,
        port=port,
        reload=reload,
        workers=workers if not reload else 1  # reload mode requires single worker
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="API compatibility gate",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # compare
    compare_parser = subparsers.add_parser("compare", help="Compare a proposed API against a reference API")
    compare_parser.add_argument("reference", help="Reference (ground truth) descriptor file")
    compare_parser.add_argument("proposed", help="Proposed descriptor file")
    compare_parser.add_argument("--no-breaking", action="store_true", help="Skip breaking change checks")
    compare_parser.add_argument("--no-designed", action="store_true", help="Skip designed API checks")
    compare_parser.add_argument("--json", action="store_true", help="Print problems as JSON")

    # up-convert
    convert_parser = subparsers.add_parser("up-convert", help="Convert a legacy descriptor to the tree format")
    convert_parser.add_argument("file", help="Descriptor file")
    convert_parser.add_argument("--output", "-o", help="Write to this file instead of stdout")

    # info
    info_parser = subparsers.add_parser("info", help="Show descriptor summary")
    info_parser.add_argument("file", help="Descriptor file")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.add_argument("--workers", type=int, default=1, help="Number of worker processes")

    return parser


def main(argv=None) -> int:
    from config import settings

    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level="DEBUG" if args.verbose else settings.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if not args.command:
        parser.print_help()
        return EXIT_OK

    if args.command == "compare":
        return compare_files(
            args.reference,
            args.proposed,
            compare_breaking=settings.COMPARE_BREAKING_API_CHANGES and not args.no_breaking,
            compare_designed=settings.COMPARE_DESIGNED_API_CHANGES and not args.no_designed,
            as_json=args.json
        )
    elif args.command == "up-convert":
        return up_convert_file(args.file, args.output)
    elif args.command == "info":
        return show_info(args.file)
    elif args.command == "serve":
        run_server(args.host, args.port, args.reload, args.workers)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
