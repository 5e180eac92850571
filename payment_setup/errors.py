class PaymentSetupError(ValueError):
    """Payload cannot be decoded into a payment setup."""


class MalformedPayloadError(PaymentSetupError):
    """Payload is not a JSON object (empty, oversize, bad encoding or bad JSON)."""


class MissingFieldError(PaymentSetupError):
    """A required field is absent or null."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Missing required field '{path}'.")


class InvalidFieldError(PaymentSetupError):
    """A required field is present but has the wrong type or format."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid field '{path}': {reason}.")
