# src/ui/product_screen.py

"""Modal product view with image cycling and related products."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import OptionList, Static
from textual.widgets.option_list import Option

from src.services.session import StorefrontSession


class ProductScreen(ModalScreen[None]):
    """Details of the session's selected product."""

    BINDINGS = [
        Binding("escape", "close", "Close"),
        Binding("left", "prev_image", "Prev image"),
        Binding("right", "next_image", "Next image"),
        Binding("f", "toggle_favorite", "Favorite"),
        Binding("a", "add_to_cart", "Add to cart"),
    ]

    def __init__(self, session: StorefrontSession) -> None:
        super().__init__()
        self.session = session

    def compose(self) -> ComposeResult:
        yield Vertical(
            Static("", id="product_title"),
            Static("", id="product_image"),
            Static("", id="product_details"),
            Static("Related products", id="related_heading"),
            OptionList(id="related_list"),
            id="product_dialog",
        )

    def on_mount(self) -> None:
        self.refresh_view()

    def refresh_view(self) -> None:
        """Redraw every field from the session's selection state."""
        state = self.session.selection
        product = state.selected_product
        if product is None:
            return

        favorite = "♥ " if product.id in self.session.favorites else ""
        self.query_one("#product_title", Static).update(
            f"{favorite}{product.title}"
        )

        images = product.images
        if images:
            image_text = (
                f"Image {state.image_index + 1}/{len(images)}: "
                f"{images[state.image_index]}"
            )
        else:
            image_text = "No image"
        self.query_one("#product_image", Static).update(image_text)

        rating = (
            f"⭐ {product.rating.rate:.1f} ({product.rating.count} reviews)"
            if product.rating
            else "Not rated"
        )
        line = self.session.cart_engine.line_for(product.id)
        in_cart = f"  |  In cart: {line.quantity}" if line else ""
        self.query_one("#product_details", Static).update(
            f"${product.price:,.2f}  |  {product.category}  |  "
            f"{rating}{in_cart}\n\n{product.description}"
        )

        related = self.query_one("#related_list", OptionList)
        related.clear_options()
        related.add_options(
            [
                Option(f"{p.title[:50]}  ${p.price:,.2f}", id=str(p.id))
                for p in state.related_products
            ]
        )

    def on_option_list_option_selected(
        self, event: OptionList.OptionSelected
    ) -> None:
        if event.option_id is None:
            return
        self.session.select_related(int(event.option_id))
        self.refresh_view()

    def action_close(self) -> None:
        self.session.close_product()
        self.dismiss(None)

    def action_prev_image(self) -> None:
        self.session.prev_image()
        self.refresh_view()

    def action_next_image(self) -> None:
        self.session.next_image()
        self.refresh_view()

    def action_toggle_favorite(self) -> None:
        product = self.session.selection.selected_product
        if product is not None:
            self.session.toggle_favorite(product.id)
            self.refresh_view()

    def action_add_to_cart(self) -> None:
        product = self.session.selection.selected_product
        if product is not None:
            self.session.add_to_cart(product.id)
            self.refresh_view()
