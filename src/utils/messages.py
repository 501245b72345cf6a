from textual.message import Message


class QuitRequestedMessage(Message):
    """
    broadcasted when the app is about to quit
    """

    bubble = True


class UserLogoutMessage(Message):
    """
    posted by the sidebar once the user confirmed logging out
    """

    bubble = True


class SessionEndedMessage(Message):
    """
    Fired at app level when the session is torn down, either by logout or
    because the backend rejected the credential (reason == "expired").
    """

    bubble = True

    def __init__(self, reason: str) -> None:
        super().__init__()
        self.reason = reason


class SweetsPublishedMessage(Message):
    """
    Posted to a screen whenever its listing controller publishes new state
    (loading flag, fresh results, a local patch or an error)
    """

    bubble = False
