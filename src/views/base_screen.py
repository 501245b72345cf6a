from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Label, ListItem, ListView, Markdown

from utils.messages import UserLogoutMessage
from utils.pure import markdown_table
from views.modal_dialog import ConfirmDialogModal, QuitDialogModal


class Sidebar(Container):
    def compose(self) -> ComposeResult:
        yield Label("Signed in as", id="label-info-1")
        yield Markdown("", id="md-userinfo")
        yield Button("Log out", id="btn-logout", variant="error")
        yield Label("Menu", id="label-info-2")
        yield ListView(id="list-menu")

    async def refresh_session_info(self) -> None:
        """Re-read identity and menu from the session, e.g. after a re-login."""
        identity = self.app.state.session.identity
        if identity is None:
            return

        rows = [
            ["User", identity.username],
            ["Email", identity.email or "-"],
            ["Role", "Administrator" if identity.is_admin else "Customer"],
        ]
        await self.query_one("#md-userinfo", Markdown).update(
            markdown_table(["", ""], rows)
        )

        list_menu = self.query_one("#list-menu", ListView)
        await list_menu.clear()
        await list_menu.extend(
            [
                ListItem(Label(title), id="list-menu-item-" + mode)
                for mode, title in self.app.menu_modes().items()
            ]
        )
        self.highlight_item(self.app.current_mode)

    async def on_list_view_selected(self, event: ListView.Selected):
        selected_mode = event.item.id.removeprefix("list-menu-item-")
        self.highlight_item(self.app.current_mode)
        if self.app.current_mode != selected_mode:
            await self.app.switch_mode(selected_mode)

    @on(Button.Pressed, "#btn-logout")
    @work
    async def handle_logout(self):
        if await self.app.push_screen_wait(
            ConfirmDialogModal("Are you sure you want to log out?")
        ):
            self.post_message(UserLogoutMessage())

    def highlight_item(self, mode: str):
        for item in self.query_one("#list-menu", ListView).children:
            item.highlighted = item.id == "list-menu-item-" + mode


class BaseScreen(Screen):
    """
    Inherited by all screens, contains common elements like
    headers, footers, sidebar, and keybindings.
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit App", show=True),
    ]

    def __init__(self):
        super().__init__()
        self.configure()

    def configure(
        self,
        header_sub_title: str = "",
        show_sidebar: bool = True,
    ) -> None:
        self.app.title = "Sweet Shop"
        self.sub_title = header_sub_title
        for mode, title in self.app.MODE_TITLES.items():
            if isinstance(self, self.app.MODES[mode]):
                self.sub_title = title

        self._show_sidebar = show_sidebar

    def compose(self) -> ComposeResult:
        if self._show_sidebar:
            yield Sidebar()
        yield Header()
        yield Footer(show_command_palette=False)

    async def on_screen_resume(self) -> None:
        if self._show_sidebar:
            await self.query_one(Sidebar).refresh_session_info()

    @work()
    async def action_quit(self):
        await self.app.push_screen_wait(QuitDialogModal())
