import argparse
import logging
import sys
from typing import Optional, Sequence

from partkit import (
    ConfigSyntaxError,
    find_all_by_name,
    format_hierarchy,
    get_string,
    load_config,
)

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _node_counts(node) -> str:
    return f"{len(node.values)} value(s), {len(node.nodes)} node(s)"


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Inspect part config files")
    parser.add_argument("path", help="Path to the config file")
    parser.add_argument(
        "--find",
        help="List every node with this name",
    )
    parser.add_argument(
        "--value",
        help="With --find, print this key's value for each node found",
    )
    parser.add_argument(
        "--details",
        action="store_true",
        help="Show value and child node counts in the hierarchy",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    logger.info("Parsing config from %s", args.path)
    try:
        root = load_config(args.path)
    except (OSError, ConfigSyntaxError) as exc:
        logger.error("Could not load %s: %s", args.path, exc)
        raise SystemExit(1)

    print("Hierarchy:")
    print(format_hierarchy(root, describe=_node_counts if args.details else None))

    if args.find:
        matches = find_all_by_name(root, args.find)
        logger.info("Found %d node(s) named %s", len(matches), args.find)
        print(f"Nodes named {args.find}: {len(matches)}")
        for idx, node in enumerate(matches):
            if args.value:
                print(f"  [{idx}] {args.value} = {get_string(node, args.value, '(missing)')}")
            else:
                print(f"  [{idx}] {node.name} ({_node_counts(node)})")


if __name__ == "__main__":
    main(sys.argv[1:])
