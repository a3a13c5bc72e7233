from enum import Enum


class UnitStatus(str, Enum):
    VACANT = "vacant"
    OCCUPIED = "occupied"


class PaymentMethod(str, Enum):
    SEPA_MANDATE = "SEPA_MANDATE"
    MANUAL = "MANUAL"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    LATE = "late"
    FAILED = "failed"


class PaymentProvider(str, Enum):
    MOCK = "MOCK"
    SEPA = "SEPA"
    STRIPE = "STRIPE"


class AssetType(str, Enum):
    BOILER = "boiler"
    AC = "ac"
    EXTINGUISHER = "extinguisher"
    OTHER = "other"


class NotificationType(str, Enum):
    PAYMENT_REMINDER = "payment-reminder"


class StripeEventType(str, Enum):
    CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"


# "late" is derived at read time and never stored, so it has no outgoing edges.
PAYMENT_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.PAID, PaymentStatus.FAILED}),
    PaymentStatus.FAILED: frozenset({PaymentStatus.PAID, PaymentStatus.PENDING}),
    PaymentStatus.PAID: frozenset(),
    PaymentStatus.LATE: frozenset(),
}
