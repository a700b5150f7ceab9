# auth/errors.py


class BackendError(Exception):
    """
    Any failed call against Supabase (auth API or database).
    `message` keeps the text the backend returned.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthApiError(BackendError):
    def __init__(self, message: str, status: int = 0):
        super().__init__(message)
        self.status = status


class PasswordValidationError(ValueError):
    def __init__(self, title: str, message: str):
        super().__init__(message)
        self.title = title
        self.message = message
