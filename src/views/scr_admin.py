from __future__ import annotations

from typing import Optional

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.events import ScreenResume
from textual.widgets import Button, DataTable, Label, Markdown

from api.errors import ApiError, AuthorizationError
from api.models import Sweet
from store.sweets import SweetsController
from utils.constants import MESSAGES
from utils.messages import SweetsPublishedMessage
from utils.pure import format_price, inventory_stats, markdown_table, stock_label
from views.base_screen import BaseScreen
from views.modal_dialog import ConfirmDialogModal
from views.modal_quantity import QuantityModal
from views.modal_sweet_form import SweetFormModal


class AdminScreen(BaseScreen):
    """
    Inventory management for administrators: stats, add / edit / delete and
    restock. Every action is also refused by the controller for non-admins.
    """

    BINDINGS = [
        Binding("a", "add", "Add", show=True),
        Binding("e", "edit", "Edit", show=True),
        Binding("r", "restock", "Restock", show=True),
        Binding("delete", "delete", "Delete", show=True),
        Binding("f5", "refresh", "Refresh", show=True),
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
        with Vertical():
            yield Markdown("", id="md-stats")
            yield DataTable(id="table-admin")
            with Horizontal(id="hort-admin-controls"):
                yield Button("Add Sweet", id="btn-add", variant="success")
                yield Button("Edit", id="btn-edit")
                yield Button("Restock", id="btn-restock", variant="primary")
                yield Button("Delete", id="btn-delete", variant="error")
                yield Button("Refresh", id="btn-refresh")
                yield Button("<", id="btn-prev")
                yield Label("1 / 1", id="label-page")
                yield Button(">", id="btn-next")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("ID", "Name", "Category", "Price", "In Stock")

    @on(ScreenResume)
    def handle_resume(self) -> None:
        self.reload()

    @on(Button.Pressed, "#btn-refresh")
    def action_refresh(self) -> None:
        self.reload()

    @work(exclusive=True, group="listing")
    async def reload(self) -> None:
        try:
            await self.controller.fetch()
        except AuthorizationError:
            return
        except ApiError as e:
            self.notify(e.message, severity="error")

    @on(SweetsPublishedMessage)
    async def render_inventory(self) -> None:
        ctl = self.controller
        table = self.query_one(DataTable)
        table.loading = ctl.loading
        if ctl.loading:
            return

        cursor_row = table.cursor_row
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
        if ctl.sweets:
            table.move_cursor(row=min(cursor_row, len(ctl.sweets) - 1))

        stats = inventory_stats(ctl.sweets)
        md = "### Inventory on this page\n\n" + markdown_table(
            ["Total Products", "Total Value", "Out of Stock", "Low Stock"],
            [
                [
                    stats["total_products"],
                    format_price(stats["total_value"]),
                    stats["out_of_stock"],
                    stats["low_stock"],
                ]
            ],
            ["c", "c", "c", "c"],
        )
        if ctl.error:
            md += f"\n\n**{ctl.error}**"
        await self.query_one("#md-stats", Markdown).update(md)

        pagination = ctl.pagination
        total_pages = max(pagination.total_pages, 1)
        label = f"{pagination.page} / {total_pages}"
        self.query_one("#label-page", Label).update(label)
        self.query_one("#btn-prev", Button).disabled = pagination.page <= 1
        self.query_one("#btn-next", Button).disabled = pagination.page >= total_pages

    @on(Button.Pressed, "#btn-prev")
    def handle_prev(self) -> None:
        self.controller.query.set_page(self.controller.query.page - 1)
        self.reload()

    @on(Button.Pressed, "#btn-next")
    def handle_next(self) -> None:
        self.controller.query.set_page(self.controller.query.page + 1)
        self.reload()

    def _selected(self) -> Optional[Sweet]:
        table = self.query_one(DataTable)
        if table.row_count == 0:
            self.notify("Select a sweet first.", severity="warning")
            return None
        sweet_id = table.get_row_at(table.cursor_row)[0]
        return self.controller.find(sweet_id)

    # ---------------------------
    # Admin actions
    # ---------------------------

    @on(Button.Pressed, "#btn-add")
    @work(exclusive=True, group="admin-action")
    async def action_add(self) -> None:
        created = await self.app.push_screen_wait(SweetFormModal(self.controller.add))
        if created:
            self.notify(MESSAGES["SWEET_ADDED"])

    @on(Button.Pressed, "#btn-edit")
    @work(exclusive=True, group="admin-action")
    async def action_edit(self) -> None:
        sweet = self._selected()
        if sweet is None:
            return

        def submit(fields):
            return self.controller.update(sweet.id, fields)

        updated = await self.app.push_screen_wait(SweetFormModal(submit, sweet))
        if updated:
            self.notify(MESSAGES["SWEET_UPDATED"])

    @on(Button.Pressed, "#btn-restock")
    @work(exclusive=True, group="admin-action")
    async def action_restock(self) -> None:
        sweet = self._selected()
        if sweet is None:
            return
        qty = await self.app.push_screen_wait(QuantityModal(sweet, "restock"))
        if not qty:
            return
        try:
            await self.controller.restock(sweet.id, qty)
        except AuthorizationError:
            return
        except ApiError as e:
            self.notify(e.message, severity="error")
            return
        self.notify(MESSAGES["RESTOCK_SUCCESS"])

    @on(Button.Pressed, "#btn-delete")
    @work(exclusive=True, group="admin-action")
    async def action_delete(self) -> None:
        sweet = self._selected()
        if sweet is None:
            return
        if not await self.app.push_screen_wait(
            ConfirmDialogModal(
                f"Delete '{sweet.name}'? This action cannot be undone.", tone="error"
            )
        ):
            return
        try:
            await self.controller.delete(sweet.id)
        except AuthorizationError:
            return
        except ApiError as e:
            self.notify(e.message, severity="error")
            return
        self.notify(MESSAGES["SWEET_DELETED"])
