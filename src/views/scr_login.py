from textual import on, work
from textual.app import ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Button, Input, Label, Select, TabbedContent, TabPane

from api.errors import ApiError, ValidationError
from utils.constants import MESSAGES, ROLE_ADMIN, ROLE_USER
from views.base_screen import BaseScreen
from views.modal_dialog import DialogModal, QuitDialogModal


class LoginScreen(BaseScreen):
    """
    Login and sign up. Dismisses once a session has been started.
    """

    def __init__(self):
        super().__init__()
        self.configure(header_sub_title="Login", show_sidebar=False)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with TabbedContent(id="super-tab-loginscr"):
            with TabPane("Login", id="tab-login"):
                with Vertical(id="div-login"):
                    yield Label("Username or Email")
                    yield Input(placeholder="jane@example.com", id="input-login-user")
                    yield Label("Password")
                    yield Input(
                        placeholder="*********", password=True, id="input-login-pwd"
                    )
                    with Horizontal(id="div-login-btns"):
                        yield Button("Quit", id="btn-quit")
                        yield Button("Login", id="btn-login", variant="primary")

            with TabPane("Sign up", id="tab-signup"):
                with Vertical(id="div-reg"):
                    yield Label("Username")
                    yield Input(placeholder="jane", id="input-reg-name")
                    yield Label("Email")
                    yield Input(placeholder="jane@example.com", id="input-reg-email")
                    yield Label("Password")
                    yield Input(
                        placeholder="*********", password=True, id="input-reg-pwd"
                    )
                    yield Label("Account Type")
                    yield Select(
                        [("Customer", ROLE_USER), ("Administrator", ROLE_ADMIN)],
                        value=ROLE_USER,
                        allow_blank=False,
                        id="select-reg-role",
                    )
                    with Container(id="div-reg-btns"):
                        yield Button("Register", id="btn-reg", variant="primary")

    def on_mount(self):
        self.query_one("#input-login-user").focus()

    @on(Input.Submitted, "#input-login-pwd")
    @on(Button.Pressed, "#btn-login")
    @work(exclusive=True)
    async def handle_login_submit(self) -> None:
        user = self.query_one("#input-login-user", Input).value.strip()
        pwd = self.query_one("#input-login-pwd", Input).value

        if not user or not pwd:
            self.notify("Username or password cannot be empty!", severity="error")
            return

        try:
            identity = await self.app.state.login(user, pwd)
        except ApiError as e:
            self.notify(e.message, severity="error")
            input_login_pwd = self.query_one("#input-login-pwd", Input)
            input_login_pwd.value = ""
            input_login_pwd.focus()
            input_login_pwd.add_class("-invalid")
            return

        self.notify(f"{MESSAGES['LOGIN_SUCCESS']} ({identity.username})")
        self.dismiss()

    @on(Input.Submitted, "#input-reg-pwd")
    @on(Button.Pressed, "#btn-reg")
    @work(exclusive=True)
    async def handle_registration_submit(self) -> None:
        name = self.query_one("#input-reg-name", Input).value.strip()
        email = self.query_one("#input-reg-email", Input).value.strip()
        pwd = self.query_one("#input-reg-pwd", Input).value
        role = self.query_one("#select-reg-role", Select).value

        if not name or not email or not pwd:
            self.notify("Make sure all inputs are filled.", severity="error")
            return

        try:
            await self.app.state.register(name, email, pwd, str(role))
        except ValidationError as e:
            details = "; ".join(f"{k}: {v}" for k, v in e.field_errors.items())
            self.notify(f"{e.message} {details}".strip(), severity="error")
            return
        except ApiError as e:
            self.notify(e.message, severity="error")
            return

        await self.app.push_screen_wait(DialogModal(MESSAGES["REGISTER_SUCCESS"]))

        self.query_one(TabbedContent).active = "tab-login"
        self.query_one("#input-login-user", Input).value = name
        input_login_pwd = self.query_one("#input-login-pwd", Input)
        input_login_pwd.value = pwd
        input_login_pwd.focus()

    @on(Button.Pressed, "#btn-quit")
    def handle_quit_(self) -> None:
        self.app.push_screen(QuitDialogModal())
