# src/cli/runner.py

"""Headless storefront commands built on the session engine."""

import argparse
import json
import logging
import sys
from collections.abc import Sequence

from rich.console import Console
from rich.table import Table

from src.models.cart_line import CartLine
from src.models.display_state import LoadPhase
from src.models.product import Product
from src.services.session import StorefrontSession

logger = logging.getLogger("storefront.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def product_to_dict(
    p: Product, favorites: frozenset[int] = frozenset(),
) -> dict[str, object]:
    """Serialise a product to a plain dict for JSON output."""
    return {
        "id": p.id,
        "title": p.title,
        "price": str(p.price),
        "category": p.category,
        "rating": p.rating.rate if p.rating else None,
        "reviews": p.rating.count if p.rating else 0,
        "image": p.image,
        "favorite": p.id in favorites,
    }


def _cart_to_dict(session: StorefrontSession) -> dict[str, object]:
    lines: list[dict[str, object]] = []
    for line in session.cart_lines:
        product = session.product(line.product_id)
        lines.append(
            {
                "productId": line.product_id,
                "title": product.title if product else None,
                "quantity": line.quantity,
                "priceSnapshot": str(line.price_snapshot),
                "lineTotal": str(line.line_total),
            }
        )
    return {
        "lines": lines,
        "items": session.cart_count,
        "total": str(session.cart_total),
    }


def _emit_json(payload: object) -> None:
    json.dump(payload, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def _print_products(
    products: Sequence[Product], favorites: frozenset[int],
) -> None:
    """Render a Rich table of products to stdout."""
    table = Table(
        title="Catalog",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Title", max_width=60)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Rating", justify="center")
    table.add_column("Category", style="magenta")
    table.add_column("♥", justify="center")

    for p in products:
        table.add_row(
            str(p.id),
            p.title[:60],
            f"${p.price:,.2f}",
            f"{p.rating.rate:.1f} ({p.rating.count})" if p.rating else "—",
            p.category,
            "♥" if p.id in favorites else "",
        )

    Console().print(table)


def _print_cart(session: StorefrontSession) -> None:
    table = Table(title="Cart", title_style="bold cyan")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Title", max_width=50)
    table.add_column("Qty", justify="right")
    table.add_column("Price", justify="right")
    table.add_column("Line total", justify="right", style="green")

    for line in session.cart_lines:
        product = session.product(line.product_id)
        table.add_row(
            str(line.product_id),
            product.title[:50] if product else "(not in catalog)",
            str(line.quantity),
            f"${line.price_snapshot:,.2f}",
            f"${line.line_total:,.2f}",
        )
    table.add_section()
    table.add_row(
        "", "Total", str(session.cart_count), "",
        f"${session.cart_total:,.2f}",
    )
    Console().print(table)


def _catalog_ready(session: StorefrontSession) -> bool:
    """Report a failed fetch on stderr; return whether browsing can proceed."""
    if session.phase is LoadPhase.FAILED:
        _err.print(f"[red]Catalog unavailable: {session.load_error}[/red]")
        return False
    return True


def _report_write_failure(session: StorefrontSession) -> None:
    error = (
        session.cart_engine.last_error
        or session.favorites_engine.last_error
    )
    if error is not None:
        _err.print(f"[yellow]Not saved: {error}[/yellow]")


# ── Commands ─────────────────────────────────────────────


def cmd_list(session: StorefrontSession, args: argparse.Namespace) -> int:
    if not _catalog_ready(session):
        return 1
    if args.category:
        session.set_category(args.category)
    if args.search:
        session.set_search(args.search)
    session.set_sort(args.sort)

    products = session.derived_list
    _err.print(
        f"[green]✓ {len(products)} of {len(session.catalog)} products[/green]"
    )
    if args.output_format == "table":
        _print_products(products, session.favorites)
    else:
        _emit_json([product_to_dict(p, session.favorites) for p in products])
    return 0


def cmd_show(session: StorefrontSession, args: argparse.Namespace) -> int:
    if not _catalog_ready(session):
        return 1
    state = session.open_product(args.product_id)
    product = state.selected_product
    if product is None:
        _err.print(f"[red]Unknown product: {args.product_id}[/red]")
        return 1
    payload = product_to_dict(product, session.favorites)
    payload["description"] = product.description
    payload["images"] = list(product.images)
    payload["related"] = [
        product_to_dict(p, session.favorites)
        for p in state.related_products
    ]
    _emit_json(payload)
    return 0


def cmd_favorite(session: StorefrontSession, args: argparse.Namespace) -> int:
    favorites = session.toggle_favorite(args.product_id)
    state = "added to" if args.product_id in favorites else "removed from"
    _err.print(f"[green]Product {args.product_id} {state} favorites[/green]")
    _report_write_failure(session)
    return 0


def cmd_favorites(session: StorefrontSession, args: argparse.Namespace) -> int:
    favorites = session.favorites
    products = [p for p in session.catalog if p.id in favorites]
    if args.output_format == "table":
        _print_products(products, favorites)
    else:
        _emit_json(sorted(favorites))
    return 0


def cmd_cart(session: StorefrontSession, args: argparse.Namespace) -> int:
    before: tuple[CartLine, ...] = session.cart_lines
    action = args.cart_action
    if action == "add":
        if not _catalog_ready(session):
            return 1
        after = session.add_to_cart(args.product_id, args.quantity)
    elif action == "remove":
        after = session.remove_from_cart(args.product_id)
    elif action == "set":
        after = session.update_quantity(args.product_id, args.quantity)
    else:
        after = before

    if action != "show" and after == before:
        _err.print("[yellow]Cart unchanged.[/yellow]")
    _report_write_failure(session)

    if args.output_format == "table":
        _print_cart(session)
    else:
        _emit_json(_cart_to_dict(session))
    return 0


def cmd_checkout(session: StorefrontSession, args: argparse.Namespace) -> int:
    if not session.cart_lines:
        _err.print("[yellow]Cart is empty.[/yellow]")
        return 1
    session.checkout()
    _err.print(
        f"[bold]Checkout requested[/bold] for {session.cart_count} items, "
        f"total ${session.cart_total:,.2f}"
    )
    return 0


COMMANDS = {
    "list": cmd_list,
    "show": cmd_show,
    "favorite": cmd_favorite,
    "favorites": cmd_favorites,
    "cart": cmd_cart,
    "checkout": cmd_checkout,
}


async def run_command(args: argparse.Namespace) -> int:
    """Start a session, run one command and return an exit code."""
    handler = COMMANDS[args.command]
    session = StorefrontSession()
    try:
        await session.start()
        return handler(session, args)
    finally:
        session.close()
