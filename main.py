# main.py

"""Entry point for the storefront application (TUI or headless CLI)."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging
from src.models.display_state import SortOrder

logger = logging.getLogger("storefront.main")


def _add_format_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="storefront",
        description="Browse the product catalog, manage favorites and cart.",
        epilog="Run without a command to launch the interactive TUI.",
    )
    commands = parser.add_subparsers(dest="command")

    list_cmd = commands.add_parser("list", help="List catalog products.")
    list_cmd.add_argument(
        "-c", "--category", default=None,
        help="Exact category to keep (default: all).",
    )
    list_cmd.add_argument(
        "-s", "--search", default=None,
        help="Case-insensitive title search.",
    )
    list_cmd.add_argument(
        "--sort",
        choices=[o.value for o in SortOrder],
        default=SortOrder.PRICE_ASC.value,
        help="Sort order (default: price_asc).",
    )
    _add_format_flag(list_cmd)

    show_cmd = commands.add_parser(
        "show", help="Show one product with related items."
    )
    show_cmd.add_argument("product_id", type=int)

    fav_cmd = commands.add_parser("favorite", help="Toggle a favorite.")
    fav_cmd.add_argument("product_id", type=int)

    favs_cmd = commands.add_parser("favorites", help="List favorites.")
    _add_format_flag(favs_cmd)

    cart_cmd = commands.add_parser("cart", help="Manage the cart.")
    cart_actions = cart_cmd.add_subparsers(dest="cart_action", required=True)
    cart_add = cart_actions.add_parser("add", help="Add a product.")
    cart_add.add_argument("product_id", type=int)
    cart_add.add_argument("-q", "--quantity", type=int, default=1)
    _add_format_flag(cart_add)
    cart_remove = cart_actions.add_parser("remove", help="Remove a line.")
    cart_remove.add_argument("product_id", type=int)
    _add_format_flag(cart_remove)
    cart_set = cart_actions.add_parser("set", help="Set a line quantity.")
    cart_set.add_argument("product_id", type=int)
    cart_set.add_argument("quantity", type=int)
    _add_format_flag(cart_set)
    cart_show = cart_actions.add_parser("show", help="Show the cart.")
    _add_format_flag(cart_show)

    commands.add_parser("checkout", help="Trigger checkout.")
    return parser


def _run_tui() -> None:
    """Launch the interactive Textual TUI."""
    from src.ui.app import StorefrontApp

    app = StorefrontApp()
    try:
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        app.session.close()
        logger.info("storefront TUI shutting down")


def _run_cli(args: argparse.Namespace) -> None:
    """Run one headless command and exit."""
    from src.cli.runner import run_command

    exit_code = asyncio.run(run_command(args))
    sys.exit(exit_code)


def main() -> None:
    """Route to TUI (no command) or a headless command."""
    log_file = setup_logging()
    logger.info("storefront starting, log file: %s", log_file)

    args = build_parser().parse_args()
    if args.command is None:
        _run_tui()
    else:
        _run_cli(args)


if __name__ == "__main__":
    main()
