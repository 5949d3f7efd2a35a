# Main Entry Point - Vault Inspection CLI
#
# Thin presentation layer over the vault core:
#   citadel-strongbox list VAULT
#   citadel-strongbox show VAULT ACCOUNT [--identity-file FILE] [--reveal]

import argparse
import sys
from typing import List, Optional

from . import __version__
from .core import StrongboxError, configure_logging, get_settings
from .vault import Store, print_vault_entries


def _cmd_list(args: argparse.Namespace) -> int:
    names = print_vault_entries(args.vault, render=print)
    if not names:
        print("(vault is empty)", file=sys.stderr)
    return 0


def _cmd_show(args: argparse.Namespace) -> int:
    store = Store(args.vault, args.account, identity_file=args.identity_file)
    with store.decrypt_from_file() as record:
        print(f"username: {record.username}")
        if args.reveal:
            with store.reveal_password(record) as password:
                print(f"password: {password.expose_secret().tobytes().decode('utf-8', errors='replace')}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for citadel-strongbox."""
    parser = argparse.ArgumentParser(
        prog="citadel-strongbox",
        description="Inspect a Citadel Strongbox credential vault",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"Citadel Strongbox v{__version__}",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List account names in a vault")
    list_parser.add_argument("vault", help="Vault directory (or name under STRONGBOX_HOME)")
    list_parser.set_defaults(func=_cmd_list)

    show_parser = subparsers.add_parser("show", help="Show one account")
    show_parser.add_argument("vault", help="Vault directory (or name under STRONGBOX_HOME)")
    show_parser.add_argument("account", help="Account name")
    show_parser.add_argument(
        "--identity-file",
        default=None,
        help="File holding the decryption identity (default: STRONGBOX_IDENTITY_FILE)",
    )
    show_parser.add_argument(
        "--reveal",
        action="store_true",
        help="Also print the decrypted password",
    )
    show_parser.set_defaults(func=_cmd_show)

    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level, settings.log_json)

    try:
        return args.func(args)
    except StrongboxError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
