# shop_manager/database/repositories/repairs_repo.py
"""
Repair jobs: intake, listing and status changes.

Statuses form a closed set (REPAIR_STATUSES). Moving a job into a terminal
status stamps date_completed; every other transition leaves it as it was.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import ClassVar, List, Optional, Sequence

from ...constants import REPAIR_INITIAL_STATUS, REPAIR_STATUSES, REPAIR_TERMINAL_STATUSES
from ...utils.helpers import now_str
from ...utils.validators import one_of, parse_money, require_text
from ...errors import DomainError, NotFoundError
from ..ids import next_id
from ..record_store import RecordStore
from .customers_repo import CustomersRepo
from .fields import as_float, as_int, money_field, pad, record_id


@dataclass
class Repair:
    id: int
    customer_id: int
    device: str
    problem: str
    status: str
    cost_estimate: float
    date_received: str
    date_completed: str = ""

    FIELDS: ClassVar[tuple] = (
        "id", "customer_id", "device", "problem", "status",
        "cost_estimate", "date_received", "date_completed",
    )

    def to_fields(self) -> List[str]:
        return [
            str(self.id),
            str(self.customer_id),
            self.device,
            self.problem,
            self.status,
            money_field(self.cost_estimate),
            self.date_received,
            self.date_completed,
        ]

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> "Repair":
        f = pad(fields, len(cls.FIELDS))
        return cls(
            id=record_id(f[0]),
            customer_id=as_int(f[1]),
            device=f[2],
            problem=f[3],
            status=f[4],
            cost_estimate=as_float(f[5]),
            date_received=f[6],
            date_completed=f[7],
        )


class RepairsRepo:
    def __init__(self, store: RecordStore[Repair], customers: CustomersRepo):
        self.store = store
        self.customers = customers

    def list_repairs(self) -> list[Repair]:
        return list(self.store.scan())

    def get(self, repair_id: int) -> Optional[Repair]:
        return self.store.find_by_id(int(repair_id))

    def create(self, customer_id: int, device: str, problem: str, cost_estimate) -> Repair:
        self.customers.require(customer_id)
        repair = Repair(
            id=0,
            customer_id=int(customer_id),
            device=require_text(device, "Device"),
            problem=require_text(problem, "Problem description"),
            status=REPAIR_INITIAL_STATUS,
            cost_estimate=parse_money(cost_estimate, "Cost estimate"),
            date_received=now_str(),
        )
        repair.id = next_id(self.store)
        self.store.append(repair)
        return repair

    def set_status(self, repair_id: int, new_status: str) -> Repair:
        """
        Validate `new_status` first, then rewrite the job in place. Raises
        ValidationError for an unknown status and NotFoundError for an unknown
        id; neither touches the file.
        """
        status = one_of(new_status, REPAIR_STATUSES, "Repair status")
        stamp = now_str() if status in REPAIR_TERMINAL_STATUSES else None
        updated: list[Repair] = []

        def apply(r: Repair) -> Repair:
            new = replace(r, status=status, date_completed=stamp or r.date_completed)
            updated.append(new)
            return new

        if self.store.mutate_all(lambda r: r.id == repair_id, apply) == 0:
            raise NotFoundError(f"Repair #{repair_id} not found.")
        return updated[0]


__all__ = ["Repair", "RepairsRepo", "DomainError"]
