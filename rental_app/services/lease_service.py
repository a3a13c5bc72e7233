import logging
from datetime import date

from core.exceptions import ActiveLeaseExists, InvalidRequest, NotFound
from models.enums import PaymentMethod, UnitStatus
from models.utils import clamp_due_day, mandate_reference
from repos.lease_repo import LeaseRepo
from repos.tenant_repo import TenantRepo
from repos.unit_repo import UnitRepo
from schemas.schema import LeaseCreate, LeaseRecord, LeaseTerminate, LeaseUpdate

logger = logging.getLogger(__name__)


class LeaseService:
    def __init__(self, db, today: date):
        self.today = today
        self.lease_repo: LeaseRepo = LeaseRepo(db)
        self.unit_repo: UnitRepo = UnitRepo(db)
        self.tenant_repo: TenantRepo = TenantRepo(db)

    async def get_lease(self, lease_id: str) -> LeaseRecord:
        lease = await self.lease_repo.get(lease_id)
        if not lease:
            raise NotFound("Lease not found")
        return lease

    async def create_lease(self, payload: LeaseCreate) -> LeaseRecord:
        unit = await self.unit_repo.get(payload.unit_id)
        if not unit:
            raise NotFound("Unit not found")

        tenant = await self.tenant_repo.get(payload.tenant_id)
        if not tenant:
            raise NotFound("Tenant not found")

        if tenant.owner_id != unit.owner_id:
            raise InvalidRequest("Tenant and unit belong to different owners")

        if await self.lease_repo.get_open_for_unit(unit.id, self.today):
            raise ActiveLeaseExists()

        mandate_ref = payload.mandate_ref
        if payload.payment_method == PaymentMethod.SEPA_MANDATE and not mandate_ref:
            mandate_ref = mandate_reference()

        lease = await self.lease_repo.create(
            unit_id=unit.id,
            tenant_id=tenant.id,
            start_date=payload.start_date,
            end_date=payload.end_date,
            rent=payload.rent,
            due_day=clamp_due_day(payload.due_day),
            payment_method=payload.payment_method,
            mandate_ref=mandate_ref,
            tenant_email=payload.tenant_email or tenant.email,
        )
        await self.unit_repo.set_status(unit.id, UnitStatus.OCCUPIED)

        logger.info(f"Created lease {lease.id} on unit {unit.id} for tenant {tenant.id}")
        return lease

    async def update_lease(self, lease_id: str, payload: LeaseUpdate) -> LeaseRecord:
        lease = await self.get_lease(lease_id)
        values = payload.model_dump(exclude_unset=True)
        if "due_day" in values:
            values["due_day"] = clamp_due_day(values["due_day"])
        if values.get("end_date") and values["end_date"] < lease.start_date:
            raise InvalidRequest("end_date must be after start_date")

        await self.lease_repo.update(lease_id, values)
        return await self.get_lease(lease_id)

    async def terminate_lease(self, lease_id: str, payload: LeaseTerminate) -> LeaseRecord:
        lease = await self.get_lease(lease_id)
        if payload.end_date < lease.start_date:
            raise InvalidRequest("end_date must be after start_date")

        await self.lease_repo.update(lease_id, {"end_date": payload.end_date})
        if payload.end_date < self.today:
            await self.unit_repo.set_status(lease.unit_id, UnitStatus.VACANT)

        logger.info(f"Terminated lease {lease_id} effective {payload.end_date}")
        return await self.get_lease(lease_id)

    async def list_by_unit(self, unit_id: str) -> list[LeaseRecord]:
        if not await self.unit_repo.get(unit_id):
            raise NotFound("Unit not found")
        return await self.lease_repo.list_by_unit(unit_id)

    async def get_active_lease(self, unit_id: str) -> LeaseRecord:
        lease = await self.lease_repo.get_open_for_unit(unit_id, self.today)
        if not lease:
            raise NotFound("Unit has no active lease")
        return lease
