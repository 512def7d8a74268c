# shop_manager/database/repositories/assemblies_repo.py
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import ClassVar, List, Optional, Sequence

from ...constants import ASSEMBLY_INITIAL_STATUS, ASSEMBLY_STATUSES
from ...utils.helpers import now_str
from ...utils.validators import one_of, parse_money, require_text
from ...errors import DomainError, NotFoundError
from ..ids import next_id
from ..record_store import RecordStore
from .customers_repo import CustomersRepo
from .fields import as_float, as_int, money_field, pad, record_id


@dataclass
class Assembly:
    id: int
    customer_id: int
    description: str
    price: float
    status: str
    date: str

    FIELDS: ClassVar[tuple] = ("id", "customer_id", "description", "price", "status", "date")

    def to_fields(self) -> List[str]:
        return [
            str(self.id),
            str(self.customer_id),
            self.description,
            money_field(self.price),
            self.status,
            self.date,
        ]

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> "Assembly":
        f = pad(fields, len(cls.FIELDS))
        return cls(
            id=record_id(f[0]),
            customer_id=as_int(f[1]),
            description=f[2],
            price=as_float(f[3]),
            status=f[4],
            date=f[5],
        )


class AssembliesRepo:
    def __init__(self, store: RecordStore[Assembly], customers: CustomersRepo):
        self.store = store
        self.customers = customers

    def list_assemblies(self) -> list[Assembly]:
        return list(self.store.scan())

    def get(self, assembly_id: int) -> Optional[Assembly]:
        return self.store.find_by_id(int(assembly_id))

    def create(self, customer_id: int, description: str, price) -> Assembly:
        """New orders start as Pending, dated now."""
        self.customers.require(customer_id)
        order = Assembly(
            id=0,
            customer_id=int(customer_id),
            description=require_text(description, "Description"),
            price=parse_money(price, "Price"),
            status=ASSEMBLY_INITIAL_STATUS,
            date=now_str(),
        )
        order.id = next_id(self.store)
        self.store.append(order)
        return order

    def set_status(self, assembly_id: int, new_status: str) -> Assembly:
        status = one_of(new_status, ASSEMBLY_STATUSES, "Assembly status")
        updated: list[Assembly] = []

        def apply(a: Assembly) -> Assembly:
            new = replace(a, status=status)
            updated.append(new)
            return new

        if self.store.mutate_all(lambda a: a.id == assembly_id, apply) == 0:
            raise NotFoundError(f"Assembly order #{assembly_id} not found.")
        return updated[0]


__all__ = ["Assembly", "AssembliesRepo", "DomainError"]
