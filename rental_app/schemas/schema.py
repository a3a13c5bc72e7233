from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

import phonenumbers
from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)

from models.enums import (
    AssetType,
    NotificationType,
    PaymentMethod,
    PaymentProvider,
    PaymentStatus,
    UnitStatus,
)


def normalize_phone(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    try:
        parsed = phonenumbers.parse(value, "IT")
    except phonenumbers.NumberParseException:
        raise ValueError("Invalid phone number format. Use e.g. +39 333 123 4567")
    if not phonenumbers.is_valid_number(parsed):
        raise ValueError("Invalid phone number. Use e.g. +39 333 123 4567")
    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)


# Store records: decoded, validated shapes of persisted rows.


class OwnerRecord(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class UnitRecord(BaseModel):
    id: str
    owner_id: str
    address: str
    city: Optional[str] = None
    rooms: Optional[int] = None
    m2: Optional[Decimal] = None
    rent_ask: Optional[Decimal] = None
    status: UnitStatus
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class TenantRecord(BaseModel):
    id: str
    owner_id: str
    name: str
    email: str
    phone: Optional[str] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class LeaseRecord(BaseModel):
    id: str
    unit_id: str
    tenant_id: str
    start_date: date
    end_date: Optional[date] = None
    rent: Decimal
    due_day: int = Field(..., ge=1, le=28)
    payment_method: PaymentMethod
    mandate_ref: Optional[str] = None
    tenant_email: Optional[str] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class PaymentRecord(BaseModel):
    id: str
    lease_id: str
    amount: Decimal
    due_date: date
    status: PaymentStatus
    provider: Optional[PaymentProvider] = None
    tx_ref: Optional[str] = None
    failure_reason: Optional[str] = None
    created_at: datetime
    paid_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)

    @model_validator(mode="after")
    def paid_fields_match_status(self):
        is_paid = self.status == PaymentStatus.PAID
        if is_paid != (self.paid_at is not None):
            raise ValueError("paid_at must be set exactly when status is paid")
        if is_paid and not self.tx_ref:
            raise ValueError("tx_ref is required on a paid payment")
        return self


class PaymentOut(PaymentRecord):
    effective_status: PaymentStatus


class AssetRecord(BaseModel):
    id: str
    unit_id: str
    type: AssetType
    next_certification_date: Optional[date] = None
    provider_pref: Optional[str] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class NotificationRecord(BaseModel):
    id: str
    type: NotificationType
    lease_id: str
    payment_id: str
    to: Optional[str] = None
    message: str
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


# Request payloads.


class OwnerUpsert(BaseModel):
    email: EmailStr
    name: Optional[str] = Field(None, min_length=2)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class UnitBase(BaseModel):
    address: str = Field(..., min_length=5)
    city: Optional[str] = None
    rooms: int = Field(..., ge=1, le=20)
    m2: Decimal = Field(..., ge=10, le=1000)
    rent_ask: Decimal = Field(..., ge=100, le=10000)

    @field_validator("address", "city", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value


class UnitCreate(UnitBase):
    owner_id: str
    status: UnitStatus = UnitStatus.VACANT


class UnitUpdate(BaseModel):
    address: Optional[str] = Field(None, min_length=5)
    city: Optional[str] = None
    rooms: Optional[int] = Field(None, ge=1, le=20)
    m2: Optional[Decimal] = Field(None, ge=10, le=1000)
    rent_ask: Optional[Decimal] = Field(None, ge=100, le=10000)
    status: Optional[UnitStatus] = None


class AssetInput(BaseModel):
    type: AssetType
    next_certification_date: Optional[date] = None
    provider_pref: Optional[str] = None


class AssetUpdate(BaseModel):
    type: Optional[AssetType] = None
    next_certification_date: Optional[date] = None
    provider_pref: Optional[str] = None


class UnitWithAssetsCreate(BaseModel):
    unit: UnitCreate
    assets: List[AssetInput] = Field(default_factory=list)


class TenantBase(BaseModel):
    name: str = Field(..., min_length=2)
    email: EmailStr
    phone: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value: str):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, value: Optional[str]):
        return normalize_phone(value)


class TenantCreate(TenantBase):
    owner_id: str


class TenantUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, value: Optional[str]):
        return normalize_phone(value)


class LeaseCreate(BaseModel):
    unit_id: str
    tenant_id: str
    start_date: date
    end_date: Optional[date] = None
    rent: Decimal = Field(..., ge=100, le=10000, decimal_places=2)
    due_day: int = Field(..., ge=1, le=28)
    payment_method: PaymentMethod
    mandate_ref: Optional[str] = None
    tenant_email: Optional[EmailStr] = None

    @model_validator(mode="after")
    def validate_dates(self):
        if self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must be after start_date")
        return self


class LeaseUpdate(BaseModel):
    end_date: Optional[date] = None
    rent: Optional[Decimal] = Field(None, ge=100, le=10000, decimal_places=2)
    due_day: Optional[int] = Field(None, ge=1, le=28)
    payment_method: Optional[PaymentMethod] = None
    mandate_ref: Optional[str] = None
    tenant_email: Optional[EmailStr] = None


class LeaseTerminate(BaseModel):
    end_date: date


class ManualPaymentConfirm(BaseModel):
    payment_id: str = Field(..., alias="paymentId", min_length=1)
    tx_ref: Optional[str] = Field(None, alias="txRef")
    model_config = ConfigDict(populate_by_name=True)


class PaymentFailInput(BaseModel):
    reason: Optional[str] = None


# Responses.


class DueRunResult(BaseModel):
    created: int = 0
    skipped: bool = False
    reason: Optional[str] = None
    existing: int = 0
    failed: int = 0


class CheckoutOut(BaseModel):
    url: str


class ReconcileResult(BaseModel):
    payment_id: str
    status: PaymentStatus
    changed: bool
