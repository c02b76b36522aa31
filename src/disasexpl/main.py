import sys
import os
import argparse
from rich.console import Console
from .engine import DisassemblyEngine
from .ui.app import run_tui
from .utils.config import ConfigManager
from .utils.highlighter import highlight_listing


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(description="disasexpl: compiler output next to its source")
    parser.add_argument("listing", nargs="?", help="Assembly (.s/.S) or objdump listing to show")
    parser.add_argument("--source", help="Source file the listing was compiled from")
    parser.add_argument("--workspace", help="Workspace folder for path associations (default: cwd)")
    parser.add_argument("--binary", action="store_true", default=None, help="Parse objdump -d -l output")
    parser.add_argument("--no-trim", dest="trim", action="store_false", default=None, help="Keep original whitespace")
    parser.add_argument("--comment-only", dest="comment_only_stripped", action="store_true", default=None,
                        help="Drop lines that only hold a comment")
    parser.add_argument("--keep-directives", dest="directives_stripped", action="store_false", default=None,
                        help="Keep assembler directives")
    parser.add_argument("--keep-labels", dest="dead_labels_stripped", action="store_false", default=None,
                        help="Keep labels nothing refers to")
    parser.add_argument("--hide-functions", dest="hide_function_pattern", metavar="REGEX",
                        help="Binary mode: hide functions whose name matches")
    parser.add_argument("--print", dest="print_only", action="store_true",
                        help="Print the cleaned listing and exit instead of opening the viewer")
    parser.add_argument("--no-watch", dest="watch", action="store_false", help="Do not reload on save")
    return parser


def run(argv=None):
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not args.listing and not args.source:
        print("Error: No listing or source file specified.")
        print("Usage: disasexpl <listing.s> [--source file.c]")
        sys.exit(1)

    if args.source:
        args.source = os.path.abspath(args.source)
        if not os.path.exists(args.source):
            print(f"Error: File not found: {args.source}")
            sys.exit(1)

    config = ConfigManager()
    filter_config = config.filter_config(
        trim=args.trim,
        binary=args.binary,
        comment_only_stripped=args.comment_only_stripped,
        directives_stripped=args.directives_stripped,
        dead_labels_stripped=args.dead_labels_stripped,
        hide_function_pattern=args.hide_function_pattern,
    )

    engine = DisassemblyEngine(
        listing_file=os.path.abspath(args.listing) if args.listing else None,
        source_file=args.source,
        config_manager=config,
        filter_config=filter_config,
        workspace_folder=args.workspace,
    )

    if args.print_only:
        engine.refresh()
        console = Console(highlight=False)
        console.print(highlight_listing(engine.state.asm_lines, engine.state.label_definitions))
        if engine.state.has_errors:
            print(engine.state.error, file=sys.stderr)
            sys.exit(1)
        return

    try:
        run_tui(engine, watch=args.watch)
    except KeyboardInterrupt:
        pass
    except Exception as e:
        print(f"Fatal Error: {e}")
        sys.exit(1)

if __name__ == "__main__":
    run()
