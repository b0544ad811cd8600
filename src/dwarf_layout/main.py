"""Main entry point for the DWARF layout inspector."""

import argparse
import sys
import traceback
from pathlib import Path
from typing import NoReturn, Optional

from .application import LayoutInspector
from .domain.services import SearchFilter
from .infrastructure.config import Config
from .infrastructure.logging import LoggerSetup, get_logger, log_timing


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Print the memory layout of C++ classes from the DWARF debug "
        "information of a shared object",
        epilog="""
Examples:
  # Every sized class in the default binary
  dwarf-layout

  # One class by name
  dwarf-layout --shared-object libcoreclr.so --name Thread

  # Classes deriving directly from a base
  dwarf-layout --shared-object libcoreclr.so --base-class Object

  # Classes holding a data member of a given type
  dwarf-layout --shared-object libcoreclr.so --contains MethodTable

  # Structs and unions too, including those nested in namespaces
  dwarf-layout --shared-object app.so --include-structs --recurse-namespaces

  # Using .env file for configuration
  echo 'SHARED_OBJECT_PATH=/opt/game/libcoreclr.so' > .env
  dwarf-layout --name Thread
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--shared-object",
        dest="shared_object_path",
        type=Path,
        metavar="PATH",
        help="Binary to inspect (default: SHARED_OBJECT_PATH or the Stardew Valley "
        "libcoreclr.so under $HOME)",
    )
    parser.add_argument(
        "--name",
        dest="class_name",
        metavar="NAME",
        help="Only print classes with exactly this name",
    )
    parser.add_argument(
        "--base-class",
        dest="base_class_name",
        metavar="NAME",
        help="Only print classes with a direct base class of this name",
    )
    parser.add_argument(
        "--contains",
        dest="contained_class_name",
        metavar="NAME",
        help="Only print classes with a data member of this (typedef-expanded) type",
    )
    parser.add_argument(
        "--include-structs",
        action="store_true",
        help="Also consider struct and union types, not only classes",
    )
    parser.add_argument(
        "--recurse-namespaces",
        action="store_true",
        help="Also consider types declared inside namespaces",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output with debug logs on stderr",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        metavar="DIR",
        help="Also write a debug log file to this directory",
    )
    return parser.parse_args(argv)


@log_timing
def main(argv: Optional[list[str]] = None) -> NoReturn:
    """Main entry point printing class layouts from DWARF debug information."""
    args = parse_args(argv)

    try:
        config = Config.from_args(
            shared_object_path=args.shared_object_path,
            verbose=args.verbose,
            log_dir=args.log_dir,
        )
        config.validate()
    except Exception as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    LoggerSetup.initialize(config.log_dir, verbose=config.verbose)
    logger = get_logger(__name__)
    logger.debug(f"Shared object: {config.shared_object_path}")

    search_filter = SearchFilter(
        class_name=args.class_name,
        base_class_name=args.base_class_name,
        contained_class_name=args.contained_class_name,
    )
    logger.debug(f"Search filter: {search_filter}")

    try:
        shared_object_path = config.shared_object_path
        if shared_object_path is None:
            raise ValueError("No shared object path configured")
        with LayoutInspector(shared_object_path) as inspector:
            printed = inspector.dump(
                search_filter,
                include_structs=args.include_structs,
                recurse_namespaces=args.recurse_namespaces,
            )
    except Exception as e:
        sys.stdout.flush()
        logger.error(f"Fatal error while inspecting {config.shared_object_path}: {e}")
        if config.verbose:
            traceback.print_exc()
        sys.exit(1)

    logger.info(f"Printed {printed} class layout(s)")
    sys.exit(0)


if __name__ == "__main__":
    main()
