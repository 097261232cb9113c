# ============================================================================
# SOURCEFILE: cli.py
# RELPATH: assetfs/src/assetfs/cli.py
# PROJECT: assetfs
# VERSION: 1.0.0
# DESCRIPTION: Command-line interface: generate, inspect, serve
# ============================================================================

"""Command-Line Interface for assetfs."""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from assetfs import __version__
from assetfs.config import ConfigManager
from assetfs.exceptions import AssetFSError
from assetfs.generator import generate, load_module
from assetfs.logging import StructuredLogger, configure_utf8_logging, new_session
from assetfs.models import sorted_items

DEFAULT_CONFIG_FILE = "assetfs_config.json"


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="assetfs",
        description="Embed a directory tree in a Python module and serve it as a read-only filesystem"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", type=Path, default=Path(DEFAULT_CONFIG_FILE),
                        help="configuration file (default: %(default)s)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # GENERATE
    parser_generate = subparsers.add_parser("generate", help="write a generated module")
    parser_generate.add_argument("--id", dest="identifier", metavar="IDENTIFIER",
                                 help="name of the generated FileSystem variable")
    parser_generate.add_argument("--out", type=Path, metavar="FILENAME",
                                 help="write generated code to FILENAME")
    parser_generate.add_argument("--dir", dest="directory", type=Path, metavar="DIRECTORY",
                                 help="use local DIRECTORY as filesystem root")
    parser_generate.add_argument("--pkg", dest="package", metavar="NAME",
                                 help="package name recorded in the generated module")
    parser_generate.add_argument("--log-dir", type=Path,
                                 help="write a JSON session log to this directory")

    # INSPECT
    parser_inspect = subparsers.add_parser("inspect", help="list the files in a generated module")
    parser_inspect.add_argument("module", type=Path)
    parser_inspect.add_argument("--id", dest="identifier")

    # SERVE
    parser_serve = subparsers.add_parser("serve", help="serve a generated module over HTTP")
    parser_serve.add_argument("module", type=Path)
    parser_serve.add_argument("--id", dest="identifier")
    parser_serve.add_argument("--host")
    parser_serve.add_argument("--port", type=int)

    return parser


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    configure_utf8_logging()

    try:
        parser = build_parser()
        args = parser.parse_args(argv)
        config = ConfigManager(args.config)

        if args.command == "generate":
            handle_generate(args, config)
        elif args.command == "inspect":
            handle_inspect(args, config)
        elif args.command == "serve":
            handle_serve(args, config)

        sys.exit(0)

    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        sys.exit(130)

    except AssetFSError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)


def _session_logger(args, config: ConfigManager) -> Optional[StructuredLogger]:
    if args.log_dir:
        return new_session(str(args.log_dir))
    if config.get("logging.enabled", False):
        return new_session(config.get("logging.log_dir", "logs"))
    return None


def handle_generate(args, config: ConfigManager):
    """Handler for generate command."""
    if args.identifier:
        config.set("generate.identifier", args.identifier)
    if args.out:
        config.set("generate.output", str(args.out))
    if args.directory:
        config.set("generate.directory", str(args.directory))
    if args.package is not None:
        config.set("generate.package", args.package)
    config.validate()

    result = generate(
        config.get("generate.identifier"),
        config.get("generate.output"),
        config.get("generate.directory"),
        config.get("generate.package"),
        logger=_session_logger(args, config),
    )

    print(f"Generated: {result.out}")
    print(f"  Identifier: {result.identifier}")
    print(f"  Files: {result.file_count} ({result.text_count} text, {result.byte_count} bytes)")
    print(f"  Total size: {result.total_bytes} bytes")


def handle_inspect(args, config: ConfigManager):
    """Handler for inspect command."""
    identifier = args.identifier or config.get("generate.identifier", "assets")
    fs = load_module(args.module, identifier)

    for key, info in sorted_items(dict(fs.content)):
        print(f"{info.mode:07o}  {info.size:>10}  {info.kind:<5}  "
              f"{info.mod_time_datetime().isoformat()}  {key}")
    print(f"{len(fs)} files")


def handle_serve(args, config: ConfigManager):
    """Handler for serve command."""
    from assetfs.server import serve

    identifier = args.identifier or config.get("generate.identifier", "assets")
    host = args.host or config.get("serve.host", "127.0.0.1")
    port = args.port if args.port is not None else config.get("serve.port", 12345)

    fs = load_module(args.module, identifier)
    serve(fs, host, port)


if __name__ == "__main__":
    main()
