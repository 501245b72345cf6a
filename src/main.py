from typing import Dict

from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import LoadingIndicator

from utils.config import Settings, settings
from utils.constants import MESSAGES
from utils.logger import get_logger
from utils.messages import (
    QuitRequestedMessage,
    SessionEndedMessage,
    UserLogoutMessage,
)
from utils.state import AppState
from views.scr_admin import AdminScreen
from views.scr_catalog import CatalogScreen
from views.scr_login import LoginScreen

_logger = get_logger(__name__)


class SweetShopApp(App):
    BINDINGS = [
        Binding("ctrl+t", "switch_light", "Toggle Theme", show=True),
    ]

    MODES = {
        "catalog": CatalogScreen,
        "admin": AdminScreen,
    }

    MODE_TITLES = {"catalog": "Browse Sweets", "admin": "Admin Panel"}
    CUSTOMER_MODES = ("catalog",)
    ADMIN_MODES = ("catalog", "admin")

    CSS_PATH = [
        "styles/index.tcss",
        "styles/login.tcss",
        "styles/catalog.tcss",
        "styles/admin.tcss",
    ]

    state: AppState

    def __init__(self, config: Settings = settings):
        super().__init__()
        self.state = AppState(config)
        self.state.session.add_listener(
            lambda reason: self.post_message(SessionEndedMessage(reason))
        )

    def compose(self) -> ComposeResult:
        yield LoadingIndicator()

    async def on_mount(self) -> None:
        self.state.session.restore()
        self.main_flow()

    def menu_modes(self) -> Dict[str, str]:
        modes = self.ADMIN_MODES if self.state.session.is_admin else self.CUSTOMER_MODES
        return {mode: self.MODE_TITLES[mode] for mode in modes}

    def action_switch_light(self):
        if self.theme == "textual-dark":
            self.theme = "solarized-light"
        else:
            self.theme = "textual-dark"
        self.notify(f"Theme changed to {self.theme}")

    @on(UserLogoutMessage)
    def handle_user_logout(self):
        self.state.logout()

    @on(SessionEndedMessage)
    def handle_session_ended(self, message: SessionEndedMessage):
        if message.reason == "expired":
            self.notify(MESSAGES["UNAUTHORIZED"], severity="error")
        else:
            self.notify(MESSAGES["LOGOUT_SUCCESS"])
        self.main_flow()

    @on(QuitRequestedMessage)
    def handle_quit(self):
        self.exit()

    @work(exclusive=True, group="main-flow")
    async def main_flow(self):
        if not self.state.session.is_authenticated:
            await self.push_screen_wait(LoginScreen())

        _logger.info(f"Entering shop as {self.state.session.identity.role}.")
        await self.switch_mode("catalog")


def run() -> None:
    SweetShopApp().run()


if __name__ == "__main__":
    run()
