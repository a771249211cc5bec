"""Intent errors - failures that may be shown directly to the user."""


class IntentError(Exception):
    """Base class for errors raised while running an intent.

    ``display_message`` is meant for direct user presentation. Errors
    without one are reported as a generic failure.
    """

    default_display_message: str | None = None

    def __init__(self, message: str, display_message: str | None = None):
        super().__init__(message)
        self.display_message = display_message or self.default_display_message


class UnknownIntent(IntentError):
    """No handler registered under the requested name. Internal error."""


class NoPriorIntent(IntentError):
    default_display_message = "No previous intent available to name"


class UnknownNickname(IntentError):
    def __init__(self, name: str):
        super().__init__(f"Unknown nickname: {name}", f'No nickname "{name}" found')
        self.name = name


class UnknownPageName(IntentError):
    def __init__(self, name: str):
        super().__init__(f"Unknown page name: {name}", f'No page named "{name}" found')
        self.name = name


class InvalidCount(IntentError):
    def __init__(self, text):
        super().__init__(
            f"Could not resolve count: {text!r}",
            f'"{text}" is not a number of things to name',
        )
        self.text = text


class InsufficientHistory(IntentError):
    def __init__(self, requested: int, available: int):
        super().__init__(
            "Not enough history to save",
            f"There are not {requested} things to name (there are only {available})",
        )
        self.requested = requested
        self.available = available


class NoActiveRoutine(IntentError):
    default_display_message = "Command not available"


class NothingPaused(IntentError):
    default_display_message = "Command not available"
