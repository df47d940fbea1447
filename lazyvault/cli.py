"""Command-line front door for lazyvault.

Parses subcommands, loads settings from the environment, and dispatches to
discovery, single-secret lookup, or the interactive picker.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace

from .discovery.walker import TreeWalker
from .errors import LazyVaultError
from .runtime import run_interactive
from .runtime.app import build_client
from .runtime.config import Settings, load_settings
from .runtime.logs import configure_logging
from .store.types import normalize_container, normalize_root

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazyvault",
        description="Discover and inspect secrets in a key/value secret store.",
    )
    parser.add_argument(
        "--mount",
        default=None,
        help="Key/value mount to browse. Defaults to $VAULT_MOUNT.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    tree = subparsers.add_parser("tree", help="Print every secret path under PATH.")
    tree.add_argument("path", nargs="?", default="/", help="Container path to walk. Defaults to the mount root.")

    get = subparsers.add_parser("get", help="Print one secret as JSON.")
    get.add_argument("path", help="Secret path, e.g. /team/service/db.")

    interactive = subparsers.add_parser("interactive", help="Fuzzy-find a secret and print it as JSON.")
    interactive.add_argument("--no-color", action="store_true", help="Disable colors in the secret pane.")

    subparsers.add_parser("mounts", help="List key/value mounts visible to the token.")
    return parser


def _settings(args: argparse.Namespace) -> Settings:
    if args.mount is not None:
        return replace(load_settings(require_mount=False), mount=args.mount)
    return load_settings(require_mount=args.command != "mounts")


def _cmd_tree(settings: Settings, args: argparse.Namespace) -> int:
    client = build_client(settings)
    walker = TreeWalker(client, settings.mount, max_workers=settings.walk_workers)
    for path in sorted(walker.discover(normalize_container(args.path))):
        print(path)
    return 0


def _cmd_get(settings: Settings, args: argparse.Namespace) -> int:
    client = build_client(settings)
    secret = client.get_secret(settings.mount, normalize_root(args.path))
    print(secret.to_json())
    return 0


def _cmd_interactive(settings: Settings, args: argparse.Namespace) -> int:
    secret = run_interactive(settings, no_color=args.no_color)
    if secret is not None:
        print(secret.to_json())
    return 0


def _cmd_mounts(settings: Settings, _args: argparse.Namespace) -> int:
    for mount in build_client(settings).list_mounts():
        print(mount)
    return 0


COMMANDS = {
    "tree": _cmd_tree,
    "get": _cmd_get,
    "interactive": _cmd_interactive,
    "mounts": _cmd_mounts,
}


def main(argv: list[str] | None = None) -> int:
    """Parse CLI arguments, run one subcommand, and return the exit status.

    Configuration and store errors are reported as one line on stderr with
    exit status 1.
    """
    args = build_parser().parse_args(argv)
    configure_logging()
    try:
        settings = _settings(args)
        return COMMANDS[args.command](settings, args)
    except LazyVaultError as exc:
        logger.error("%s failed: %s", args.command, exc)
        print(str(exc), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
