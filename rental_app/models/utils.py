import secrets
import string
import uuid
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal

from .enums import PaymentMethod, PaymentProvider, PaymentStatus

_ALPHANUM = string.ascii_lowercase + string.digits


def new_id() -> str:
    return uuid.uuid4().hex


def random_token(length: int, alphabet: str = _ALPHANUM) -> str:
    return "".join(secrets.choice(alphabet) for _ in range(length))


def synthetic_tx_ref() -> str:
    return f"TX-{random_token(8)}"


def mandate_reference() -> str:
    return f"MND-{random_token(6, string.ascii_uppercase + string.digits)}"


def to_minor_units(amount) -> int:
    """Convert a major-unit amount (e.g. euros) to integer cents, half-up."""
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def provider_for_method(method: PaymentMethod) -> PaymentProvider:
    if method == PaymentMethod.SEPA_MANDATE:
        return PaymentProvider.SEPA
    return PaymentProvider.MOCK


def clamp_due_day(day: int) -> int:
    return min(max(day, 1), 28)


def effective_status(
    status: PaymentStatus, due_date: date, today: date, grace_days: int
) -> PaymentStatus:
    if status == PaymentStatus.PENDING and due_date + timedelta(days=grace_days) < today:
        return PaymentStatus.LATE
    return status


def is_active_on(start_date: date, end_date: date | None, today: date) -> bool:
    if start_date > today:
        return False
    return end_date is None or end_date >= today
