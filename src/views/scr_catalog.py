from typing import Optional

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.events import ScreenResume
from textual.widgets import Button, DataTable, Input, Label, Select

from api.errors import ApiError, AuthorizationError
from store.query import ListingMode
from store.sweets import SweetsController
from utils.constants import MESSAGES, PRICE_RANGE, SWEET_CATEGORIES
from utils.messages import SweetsPublishedMessage
from utils.pure import format_price, showing_range, stock_label
from views.base_screen import BaseScreen
from views.modal_quantity import QuantityModal


def _parse_price(text: str) -> Optional[float]:
    try:
        return float(text) if text.strip() else None
    except ValueError:
        return None


class CatalogScreen(BaseScreen):
    """
    Browse and search sweets, buy them.

    Typing in any filter switches the listing to search mode; clearing all
    of them returns to the paginated listing.
    """

    BINDINGS = [
        Binding("f5", "refresh", "Refresh", show=True),
        Binding("ctrl+l", "clear_filters", "Clear Filters", show=True),
    ]

    def __init__(self) -> None:
        super().__init__()
        state = self.app.state
        self.controller = SweetsController(
            state.client, state.session, state.settings.page_size
        )
        self.controller.subscribe(
            lambda: self.post_message(SweetsPublishedMessage())
        )

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical(id="div-filters"):
            yield Input(
                id="input-search", placeholder="Start typing to search sweets..."
            )
            with Horizontal(id="hort-filters"):
                yield Select(
                    [(c, c) for c in SWEET_CATEGORIES],
                    prompt="All categories",
                    id="select-category",
                )
                yield Input(
                    placeholder=f"Min ${PRICE_RANGE[0]:.0f}",
                    id="input-min-price",
                    type="number",
                )
                yield Input(
                    placeholder=f"Max ${PRICE_RANGE[1]:.0f}",
                    id="input-max-price",
                    type="number",
                )
                yield Button("Clear", id="btn-clear")
        yield DataTable(id="table-sweets")
        with Horizontal(id="hort-pager"):
            yield Button("<", id="btn-prev")
            yield Input("1", id="input-page", type="integer")
            yield Label(" / 1", id="label-total-page-cnt")
            yield Button(">", id="btn-next")
            yield Select(
                [(f"{n} / page", n) for n in self.app.state.settings.page_size_options],
                value=self.app.state.settings.page_size,
                allow_blank=False,
                id="select-page-size",
            )
            yield Label("", id="label-showing")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("ID", "Name", "Category", "Price", "In Stock")

        self.query_one("#input-search").focus()

    @on(ScreenResume)
    def handle_resume(self) -> None:
        self.fetch_listing()

    @work(exclusive=True, group="listing")
    async def fetch_listing(self) -> None:
        """
        Fetch for the current query; the result arrives by message.
        Callers apply their query change before starting this worker.
        """
        try:
            await self.controller.fetch()
        except AuthorizationError:
            # the app reacts to the ended session and shows the login screen
            return
        except ApiError as e:
            self.notify(e.message, severity="error")

    @on(SweetsPublishedMessage)
    def render_listing(self) -> None:
        ctl = self.controller
        table = self.query_one(DataTable)
        table.loading = ctl.loading
        if ctl.loading:
            return

        table.clear()
        for s in ctl.sweets:
            table.add_row(
                s.id,
                s.name,
                s.category,
                format_price(s.price),
                stock_label(s.quantity),
                key=str(s.id),
            )

        pagination = ctl.pagination
        total_pages = max(pagination.total_pages, 1)
        searching = ctl.mode is ListingMode.SEARCH
        self.query_one("#input-page", Input).value = str(pagination.page)
        self.query_one("#label-total-page-cnt", Label).update(f" / {total_pages}")
        self.query_one("#btn-prev", Button).disabled = searching or pagination.page <= 1
        self.query_one("#btn-next", Button).disabled = (
            searching or pagination.page >= total_pages
        )
        self.query_one("#label-showing", Label).update(
            ctl.error or showing_range(pagination, len(ctl.sweets))
        )

    # ---------------------------
    # Filters
    # ---------------------------

    @on(Input.Changed, "#input-search")
    def handle_search_typed(self, message: Input.Changed) -> None:
        self.controller.query.set_filters({"query": message.value})
        self.fetch_listing()

    @on(Select.Changed, "#select-category")
    def handle_category(self, message: Select.Changed) -> None:
        category = message.value if isinstance(message.value, str) else ""
        self.controller.query.set_filters({"category": category})
        self.fetch_listing()

    @on(Input.Changed, "#input-min-price")
    @on(Input.Changed, "#input-max-price")
    def handle_price(self, message: Input.Changed) -> None:
        if message.value.strip() and _parse_price(message.value) is None:
            return
        bound = "min_price" if message.input.id == "input-min-price" else "max_price"
        self.controller.query.set_filters({bound: _parse_price(message.value)})
        self.fetch_listing()

    @on(Button.Pressed, "#btn-clear")
    def action_clear_filters(self) -> None:
        with self.prevent(Input.Changed, Select.Changed):
            self.query_one("#input-search", Input).value = ""
            self.query_one("#input-min-price", Input).value = ""
            self.query_one("#input-max-price", Input).value = ""
            self.query_one("#select-category", Select).clear()
        self.controller.query.clear()
        self.fetch_listing()

    def action_refresh(self) -> None:
        self.fetch_listing()

    # ---------------------------
    # Pager
    # ---------------------------

    @on(Button.Pressed, "#btn-prev")
    def handle_prev(self) -> None:
        self.controller.query.set_page(self.controller.query.page - 1)
        self.fetch_listing()

    @on(Button.Pressed, "#btn-next")
    def handle_next(self) -> None:
        self.controller.query.set_page(self.controller.query.page + 1)
        self.fetch_listing()

    @on(Input.Submitted, "#input-page")
    def handle_page_input(self, message: Input.Submitted) -> None:
        if not message.value.isdigit():
            return
        page = max(1, min(int(message.value), self.controller.pagination.total_pages))
        self.controller.query.set_page(page)
        self.fetch_listing()

    @on(Select.Changed, "#select-page-size")
    def handle_page_size(self, message: Select.Changed) -> None:
        size = int(message.value)
        if size != self.controller.query.page_size:
            self.controller.query.set_page_size(size)
            self.fetch_listing()

    # ---------------------------
    # Purchase
    # ---------------------------

    @on(DataTable.RowSelected, "#table-sweets")
    @work(exclusive=True, group="purchase")
    async def handle_purchase(self, message: DataTable.RowSelected) -> None:
        sweet = self.controller.find(int(message.row_key.value))
        if sweet is None:
            return

        qty = await self.app.push_screen_wait(QuantityModal(sweet, "purchase"))
        if not qty:
            return

        try:
            await self.controller.purchase(sweet.id, qty)
        except AuthorizationError:
            return
        except ApiError as e:
            self.notify(e.message, severity="error")
            return
        self.notify(MESSAGES["PURCHASE_SUCCESS"])
