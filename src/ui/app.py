# src/ui/app.py

"""Terminal UI for the storefront."""

import logging
from typing import cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.timer import Timer
from textual.widgets import (
    DataTable,
    Footer,
    Header,
    Input,
    Select,
    Static,
)

from src.config.settings import Settings
from src.models.cart_line import CartLine
from src.models.display_state import LoadPhase, SortOrder
from src.models.product import Product
from src.services.session import StorefrontSession
from src.ui.product_screen import ProductScreen

logger = logging.getLogger("storefront.ui")

SORT_LABELS: list[tuple[str, SortOrder]] = [
    ("Price: Low to High", SortOrder.PRICE_ASC),
    ("Price: High to Low", SortOrder.PRICE_DESC),
    ("Rating: Best first", SortOrder.RATING_DESC),
]


class StorefrontApp(App[object]):
    """Terminal UI for browsing the catalog, favorites and cart."""

    CSS_PATH = "styles.css"
    TITLE = "Storefront"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("f", "toggle_favorite", "Favorite"),
        Binding("a", "add_to_cart", "Add to cart"),
        Binding("c", "toggle_cart", "Cart"),
        Binding("x", "checkout", "Checkout"),
    ]

    def __init__(self, session: StorefrontSession | None = None) -> None:
        super().__init__()
        self.session = session or StorefrontSession()
        self.session.cart_engine.on_cart_visible.append(self._on_cart_visible)
        self._cart_timer: Timer | None = None

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        yield Header()
        yield Container(
            Horizontal(
                Input(placeholder="Search products...", id="search_input"),
                Select(
                    [("All Categories", "all")],
                    value="all",
                    allow_blank=False,
                    id="category_select",
                ),
                Select(
                    [(label, order.value) for label, order in SORT_LABELS],
                    value=self.session.display.sort_order.value,
                    allow_blank=False,
                    id="sort_select",
                ),
                id="filters",
            ),
            Static("Ready", id="status"),
            Horizontal(
                cast(
                    DataTable[str | Text],
                    DataTable(
                        id="results_table",
                        zebra_stripes=True,
                        cursor_type="row",
                    ),
                ),
                Static("", id="cart_panel"),
                id="body",
            ),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Configure the table and start the catalog fetch."""
        table = self._table()
        table.add_columns("♥", "Title", "Price", "Rating", "Category")
        self.run_worker(self._start_session(), exclusive=True, group="catalog")

    async def _start_session(self) -> None:
        status = self.query_one("#status", Static)
        status.update("⏳ Loading catalog...")
        await self.session.start()

        if self.session.phase is LoadPhase.FAILED:
            status.update(
                f"❌ Catalog unavailable: {self.session.load_error}"
            )
            self.notify("Could not load the catalog", severity="error")
        else:
            categories = self.query_one("#category_select", Select)
            categories.set_options(
                [("All Categories", "all")]
                + [(c.title(), c) for c in self.session.categories]
            )
        self.populate_table()
        self._refresh_cart_panel()

    # ── Browse inputs ────────────────────────────────────

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "search_input":
            self.session.set_search(event.value)
            self.populate_table()

    def on_select_changed(self, event: Select.Changed) -> None:
        if not isinstance(event.value, str):
            return
        if event.select.id == "category_select":
            self.session.set_category(str(event.value))
        elif event.select.id == "sort_select":
            self.session.set_sort(str(event.value))
        self.populate_table()

    # ── Results table ────────────────────────────────────

    def _table(self) -> DataTable[str | Text]:
        return cast(
            DataTable[str | Text],
            self.query_one("#results_table", DataTable),
        )

    def populate_table(self) -> None:
        """Fill the DataTable with the current derived list."""
        table = self._table()
        table.clear()
        favorites = self.session.favorites
        for p in self.session.derived_list:
            table.add_row(
                Text("♥", style="bold red") if p.id in favorites else "",
                p.title[:60],
                f"${p.price:,.2f}",
                f"⭐ {p.rating.rate:.1f}" if p.rating else "",
                p.category,
                key=str(p.id),
            )

        if self.session.phase is LoadPhase.LOADED:
            self.query_one("#status", Static).update(
                f"✅ Showing {table.row_count} of "
                f"{len(self.session.catalog)} products"
            )

    def _current_product(self) -> Product | None:
        table = self._table()
        products = self.session.derived_list
        if 0 <= table.cursor_row < len(products):
            return products[table.cursor_row]
        return None

    def on_data_table_row_selected(
        self, event: DataTable.RowSelected
    ) -> None:
        """Open the product view for the selected row."""
        if event.row_key.value is None:
            return
        self.session.open_product(int(event.row_key.value))
        self.push_screen(
            ProductScreen(self.session),
            callback=self._on_product_closed,
        )

    def _on_product_closed(self, _result: None) -> None:
        self.populate_table()

    # ── Actions ──────────────────────────────────────────

    def action_toggle_favorite(self) -> None:
        product = self._current_product()
        if product is None:
            return
        row = self._table().cursor_row
        self.session.toggle_favorite(product.id)
        self.populate_table()
        self._table().move_cursor(row=row)
        if self.session.favorites_engine.last_error is not None:
            self.notify("Favorites not saved", severity="warning")

    def action_add_to_cart(self) -> None:
        product = self._current_product()
        if product is None:
            return
        self.session.add_to_cart(product.id)
        if self.session.cart_engine.last_error is not None:
            self.notify("Cart not saved", severity="warning")

    def action_toggle_cart(self) -> None:
        panel = self.query_one("#cart_panel", Static)
        if panel.display:
            self._hide_cart()
        else:
            self._show_cart(auto_hide=False)

    def action_checkout(self) -> None:
        if not self.session.cart_lines:
            self.notify("Your cart is empty", severity="warning")
            return
        self.session.checkout()
        self.notify(
            f"Checkout requested: ${self.session.cart_total:,.2f}"
        )

    # ── Cart panel ───────────────────────────────────────

    def _on_cart_visible(self, _lines: tuple[CartLine, ...]) -> None:
        self._show_cart(auto_hide=True)

    def _show_cart(self, auto_hide: bool) -> None:
        if self._cart_timer is not None:
            self._cart_timer.stop()
            self._cart_timer = None
        self._refresh_cart_panel()
        self.query_one("#cart_panel", Static).display = True
        if auto_hide:
            self._cart_timer = self.set_timer(
                Settings.CART_PANEL_SECONDS, self._hide_cart
            )

    def _hide_cart(self) -> None:
        if self._cart_timer is not None:
            self._cart_timer.stop()
            self._cart_timer = None
        self.query_one("#cart_panel", Static).display = False

    def _refresh_cart_panel(self) -> None:
        lines = [f"🛒 Cart ({self.session.cart_count} items)", ""]
        for line in self.session.cart_lines:
            product = self.session.product(line.product_id)
            title = product.title[:24] if product else f"#{line.product_id}"
            lines.append(f"{line.quantity} × {title}")
            lines.append(f"    ${line.line_total:,.2f}")
        lines.append("")
        lines.append(f"Total: ${self.session.cart_total:,.2f}")
        self.query_one("#cart_panel", Static).update("\n".join(lines))
