import stripe
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

# Checked in order; the first matching class wins.
FRIENDLY_MESSAGES: list[tuple[type[Exception], str]] = [
    (IntegrityError, "This change conflicts with an existing record."),
    (OperationalError, "The payments database is busy. Please try again shortly."),
    (SQLAlchemyError, "Temporary issue while accessing data. Please try again shortly."),
    (stripe.APIConnectionError, "The payment provider could not be reached. Please try again later."),
    (stripe.StripeError, "The payment provider rejected the request. Please try again later."),
    (TimeoutError, "The request took too long. Please try again later."),
    (KeyError, "Some required information is missing."),
    (ValueError, "Invalid data received. Please check your input and try again."),
]

DEFAULT_MESSAGE = "Something went wrong on our end. Please try again."


def get_friendly_message(error: Exception) -> str:
    for error_type, msg in FRIENDLY_MESSAGES:
        if isinstance(error, error_type):
            return msg
    return DEFAULT_MESSAGE
