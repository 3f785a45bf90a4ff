import argparse
import sys
import webbrowser
from pathlib import Path

from tlparse.config import DEFAULT_OUTPUT_DIR, ParseConfig
from tlparse.core.errors import DiscoveryError, TlparseError
from tlparse.core.logging import set_verbose
from tlparse.core.serialization import write_output_tree
from tlparse.pipeline import INDEX_HTML, check_strict, parse_path
from tlparse.ranks.orchestrator import handle_all_ranks, setup_output_directory
from tlparse.serve.server import StaticFileServer


def latest_log(directory: Path) -> Path:
    """Most recently modified regular file in `directory`."""
    if not directory.is_dir():
        raise DiscoveryError(f"Input path {directory} is not a directory (required when using --latest)")
    files = [p for p in directory.iterdir() if p.is_file()]
    if not files:
        raise DiscoveryError(f"No files found in directory {directory}")
    return max(files, key=lambda p: p.stat().st_mtime)


def build_config(args) -> ParseConfig:
    env = ParseConfig.from_env()
    return ParseConfig(
        strict=args.strict or env.strict,
        strict_compile_id=args.strict_compile_id or env.strict_compile_id,
        custom_header_html=args.custom_header_html,
        verbose=args.verbose or env.verbose,
        plain_text=args.plain_text or env.plain_text,
        export=args.export,
        inductor_provenance=args.inductor_provenance,
    )


def handle_single_log(args, config: ParseConfig) -> Path:
    log_path = latest_log(Path(args.path)) if args.latest else Path(args.path)
    out = setup_output_directory(Path(args.out), args.overwrite)
    print(f"Parsing {log_path} -> {out}")
    result = parse_path(log_path, config)
    check_strict(result, config, log_path)
    write_output_tree(out, result.files)
    print(f"Done. {result.stats.summary()}")
    return out / INDEX_HTML


def handle_all_ranks_html(args, config: ParseConfig) -> Path:
    print(f"Parsing all rank logs in {args.path} -> {args.out}")
    landing = handle_all_ranks(
        config, Path(args.path), Path(args.out),
        overwrite=args.overwrite, max_workers=args.jobs,
    )
    print(f"Done. Landing page: {landing}")
    return landing


def handle_run(args):
    if args.all_ranks_html and args.latest:
        raise TlparseError("--latest cannot be used with --all-ranks-html")

    config = build_config(args)
    set_verbose(config.verbose)

    if args.all_ranks_html:
        main_page = handle_all_ranks_html(args, config)
    else:
        main_page = handle_single_log(args, config)

    # --serve replaces opening the browser
    if not args.no_browser and not args.serve:
        webbrowser.open(main_page.resolve().as_uri())

    if args.serve:
        server = StaticFileServer(Path(args.out), port=args.port)
        server.start()
        print(f"Serving {args.out} at {server.url}")
        print("Press Ctrl+C to stop")
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            print("Stopping server.")
        finally:
            server.stop()


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="tlparse",
        description="Parse structured PyTorch trace logs into a static HTML report."
    )
    parser.add_argument("path", type=str, help="Log file, or a directory with --latest / --all-ranks-html.")
    parser.add_argument("--latest", action="store_true", help="Parse the most recently modified log in the directory.")
    parser.add_argument("-o", "--out", type=str, default=DEFAULT_OUTPUT_DIR, help=f"Output directory (default: {DEFAULT_OUTPUT_DIR}).")
    parser.add_argument("--overwrite", action="store_true", help="Delete the output directory if it already exists.")
    parser.add_argument("--strict", action="store_true", help="Exit non-zero if unrecognized or malformed log lines are found.")
    parser.add_argument("--strict-compile-id", action="store_true", help="Exit non-zero if some log lines have no compile id.")
    parser.add_argument("--no-browser", action="store_true", help="Don't open a browser at the end.")
    parser.add_argument("--custom-header-html", type=str, default="", help="HTML inserted at the top of every report page.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output.")
    parser.add_argument("-p", "--plain-text", action="store_true", help="Also write a plain-text summary for diffing.")
    parser.add_argument("-e", "--export", action="store_true", help="Only index export diagnostics.")
    parser.add_argument("-i", "--inductor-provenance", action="store_true", help="Keep inductor provenance tracking artifacts.")
    parser.add_argument("--all-ranks-html", action="store_true", help="Parse every rank log in the directory and write a landing page.")
    parser.add_argument("--jobs", type=int, default=1, help="Ranks to process in parallel with --all-ranks-html.")
    parser.add_argument("--serve", action="store_true", help="Serve the output directory over HTTP when done.")
    parser.add_argument("--port", type=int, help="Port for --serve (default: first free port in 8000-8099).")
    parser.set_defaults(func=handle_run)

    args = parser.parse_args(argv)

    try:
        args.func(args)
    except TlparseError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
