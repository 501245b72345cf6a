from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Select, TextArea

from api.errors import ApiError, ValidationError
from api.models import Sweet, validate_sweet_fields
from utils.constants import SWEET_CATEGORIES

SubmitFn = Callable[[Mapping[str, Any]], Awaitable[Sweet]]

FIELDS = ("name", "category", "price", "quantity", "description", "image")


class SweetFormModal(ModalScreen[Optional[Sweet]]):
    """
    Add / edit form for a sweet.

    `submit` performs the actual request. The modal stays open on failure,
    showing the error next to the offending fields, and dismisses with the
    sweet the backend returned on success.
    """

    BINDINGS = [Binding("escape", "cancel", "Cancel", show=True)]

    def __init__(self, submit: SubmitFn, sweet: Optional[Sweet] = None) -> None:
        super().__init__()
        self._submit = submit
        self._sweet = sweet

    def compose(self) -> ComposeResult:
        sweet = self._sweet
        with Vertical(id="div-sweet-form"):
            title = f"Edit {sweet.name}" if sweet else "Add New Sweet"
            yield Label(title, id="label-form-title")
            with VerticalScroll():
                yield Label("Name")
                yield Input(sweet.name if sweet else "", id="input-name")
                yield Label("", id="error-name", classes="field-error")

                yield Label("Category")
                preset = {}
                if sweet and sweet.category in SWEET_CATEGORIES:
                    preset["value"] = sweet.category
                yield Select(
                    [(c, c) for c in SWEET_CATEGORIES],
                    prompt="Choose a category",
                    id="select-category",
                    **preset,
                )
                yield Label("", id="error-category", classes="field-error")

                with Horizontal(id="hort-price-qty"):
                    with Vertical():
                        yield Label("Price ($)")
                        yield Input(
                            f"{sweet.price:.2f}" if sweet else "",
                            id="input-price",
                            type="number",
                        )
                        yield Label("", id="error-price", classes="field-error")
                    with Vertical():
                        yield Label("Quantity")
                        yield Input(
                            str(sweet.quantity) if sweet else "0",
                            id="input-quantity",
                            type="integer",
                        )
                        yield Label("", id="error-quantity", classes="field-error")

                yield Label("Description")
                yield TextArea(
                    (sweet.description or "") if sweet else "", id="input-description"
                )
                yield Label("", id="error-description", classes="field-error")

                yield Label("Image URL")
                yield Input(
                    (sweet.image or "") if sweet else "",
                    placeholder="https://...",
                    id="input-image",
                )
                yield Label("", id="error-image", classes="field-error")

            yield Label("", id="label-form-error")
            with Horizontal(id="hort-form-btns"):
                yield Button("Cancel", id="btn-cancel")
                yield Button(
                    "Save" if sweet else "Add Sweet", id="btn-save", variant="primary"
                )

    def on_mount(self) -> None:
        self.query_one("#input-name").focus()

    def _values(self) -> Dict[str, Any]:
        category = self.query_one("#select-category", Select).value
        return {
            "name": self.query_one("#input-name", Input).value,
            "category": category if isinstance(category, str) else "",
            "price": self.query_one("#input-price", Input).value,
            "quantity": self.query_one("#input-quantity", Input).value,
            "description": self.query_one("#input-description", TextArea).text,
            "image": self.query_one("#input-image", Input).value,
        }

    def _show_errors(self, message: str, field_errors: Mapping[str, str]) -> None:
        self.query_one("#label-form-error", Label).update(message)
        for field in FIELDS:
            self.query_one(f"#error-{field}", Label).update(field_errors.get(field, ""))

    @on(Button.Pressed, "#btn-save")
    @work(exclusive=True)
    async def handle_save(self) -> None:
        values = self._values()
        try:
            validate_sweet_fields(values)
            saved = await self._submit(values)
        except ValidationError as e:
            self._show_errors(e.message, e.field_errors)
            return
        except ApiError as e:
            self._show_errors(e.message, {})
            return
        self.dismiss(saved)

    @on(Button.Pressed, "#btn-cancel")
    def action_cancel(self) -> None:
        self.dismiss(None)
