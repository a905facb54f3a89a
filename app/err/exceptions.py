"""Simple wrappers for the failure states observed while polling the router"""


class NoCredentialsError(Exception):
    """Exception for missing router address/credentials."""

    def __init__(self, message, status_code=None, payload=None):
        super().__init__(message, status_code, payload)


class RouterNotOkError(Exception):
    """Exception for non-200/OK responses from the router, even after a retry."""

    def __init__(self, message, status_code=None, payload=None):
        super().__init__(message, status_code, payload)
        self.status_code = status_code
