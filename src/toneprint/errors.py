"""Error taxonomy for catalog lookups."""


class ToneprintError(Exception):
    pass


class ProviderError(ToneprintError):
    """A catalog call failed (non-2xx response or network failure)."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class AuthExpired(ProviderError):
    """Credentials are invalid or expired and a refresh did not fix it.

    Callers should prompt the user to reconnect their account.
    """

    def __init__(self, message: str = "Spotify credentials expired", status: int | None = 401):
        super().__init__(message, status)
