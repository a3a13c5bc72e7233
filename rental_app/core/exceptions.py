class RentalAppError(Exception):
    """Base class for expected, user-facing failures."""

    status_code: int = 500

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message()
        super().__init__(self.message)

    @classmethod
    def default_message(cls) -> str:
        return cls.__name__


class NotConfigured(RentalAppError):
    status_code = 500


class NotFound(RentalAppError):
    status_code = 404


class AlreadyPaid(RentalAppError):
    status_code = 400

    @classmethod
    def default_message(cls) -> str:
        return "Payment already paid"


class InvalidTransition(RentalAppError):
    status_code = 409


class ActiveLeaseExists(RentalAppError):
    status_code = 409

    @classmethod
    def default_message(cls) -> str:
        return "Unit already has an active lease"


class SignatureVerificationFailed(RentalAppError):
    status_code = 400


class StoreUnavailable(RentalAppError):
    status_code = 503

    @classmethod
    def default_message(cls) -> str:
        return "Temporary issue while accessing data. Please try again shortly."


class MalformedRecord(RentalAppError):
    status_code = 500


class ProviderError(RentalAppError):
    status_code = 502

    @classmethod
    def default_message(cls) -> str:
        return "Payment provider request failed"


class InvalidRequest(RentalAppError):
    status_code = 400
