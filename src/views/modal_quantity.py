from typing import Literal, Optional

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.validation import Number
from textual.widgets import Button, Input, Label, MarkdownViewer

from api.models import Sweet
from utils.pure import sweet_markdown


class QuantityModal(ModalScreen[Optional[int]]):
    """
    Sweet detail plus an amount picker, used for purchase and restock.
    Dismisses with the chosen amount, or None if cancelled.
    Purchases are capped at the stock currently shown.
    """

    BINDINGS = [Binding("escape", "cancel", "Go Back", show=True)]

    qty = reactive(1, init=False)

    def __init__(self, sweet: Sweet, action: Literal["purchase", "restock"]) -> None:
        super().__init__()
        self._sweet = sweet
        self._action = action
        self._max_qty = sweet.quantity if action == "purchase" else None

    def compose(self) -> ComposeResult:
        with Horizontal(id="hort-sweet-detail"):
            yield MarkdownViewer(
                sweet_markdown(self._sweet), show_table_of_contents=False
            )
            with Vertical():
                yield Label(
                    "Purchase Quantity" if self._action == "purchase" else "Add Stock"
                )
                with Horizontal():
                    yield Button("-", id="btn-sub-qty")
                    yield Input(
                        value="1",
                        id="input-qty",
                        type="integer",
                        validators=[Number(minimum=1, maximum=self._max_qty)],
                    )
                    yield Button("+", id="btn-add-qty")
                with Horizontal():
                    yield Button("Go Back", id="btn-quit")
                    yield Button(
                        self._action.capitalize(), id="btn-confirm", variant="primary"
                    )

    def on_mount(self) -> None:
        if self._action == "purchase" and not self._sweet.in_stock:
            btn_confirm = self.query_one("#btn-confirm", Button)
            btn_confirm.label = "Out of Stock"
            btn_confirm.disabled = True
            btn_confirm.variant = "warning"
            self.query_one("#btn-add-qty", Button).disabled = True
        self.watch_qty(self.qty)
        self.query_one("#input-qty").focus()

    def validate_qty(self, qty: int) -> int:
        qty = max(qty, 1)
        if self._max_qty is not None:
            qty = min(qty, max(self._max_qty, 1))
        return qty

    def watch_qty(self, qty: int) -> None:
        self.query_one("#btn-sub-qty", Button).disabled = qty <= 1
        if self._max_qty is not None:
            self.query_one("#btn-add-qty", Button).disabled = qty >= self._max_qty
        input_qty = self.query_one("#input-qty", Input)
        if input_qty.value != str(qty):
            input_qty.value = str(qty)

    @on(Input.Changed, "#input-qty")
    def handle_qty_typed(self, message: Input.Changed) -> None:
        if message.value and message.input.is_valid:
            self.qty = int(message.value)

    @on(Button.Pressed, "#btn-add-qty")
    def handle_add_qty(self):
        self.qty += 1

    @on(Button.Pressed, "#btn-sub-qty")
    def handle_sub_qty(self):
        self.qty -= 1

    @on(Input.Submitted, "#input-qty")
    @on(Button.Pressed, "#btn-confirm")
    def handle_confirm(self):
        if self.query_one("#btn-confirm", Button).disabled:
            return
        self.dismiss(self.qty)

    @on(Button.Pressed, "#btn-quit")
    def action_cancel(self):
        self.dismiss(None)
