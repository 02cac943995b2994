"""Domain errors raised by the account and user directory services."""


class AccountError(Exception):
    """Base class for rejected-precondition failures; carries a human-readable message."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidCredentialsError(AccountError):
    """Unknown email or wrong password. Both cases share one message."""

    def __init__(self, message: str = "Invalid email or password.") -> None:
        super().__init__(message)


class AccountExistsError(AccountError):
    """An account with the given email is already registered."""

    def __init__(self, message: str = "An account with this email already exists.") -> None:
        super().__init__(message)


class UserNotFoundError(AccountError):
    """No user matches the given id or email."""

    def __init__(self, message: str = "User not found.") -> None:
        super().__init__(message)
