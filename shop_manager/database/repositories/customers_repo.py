from __future__ import annotations
from dataclasses import dataclass
from typing import ClassVar, List, Sequence

from ...utils.validators import require_text
from ...errors import DomainError, NotFoundError
from ..ids import next_id
from ..record_store import RecordStore
from .fields import pad, record_id


@dataclass
class Customer:
    id: int
    name: str
    phone: str
    email: str
    address: str

    FIELDS: ClassVar[tuple] = ("id", "name", "phone", "email", "address")

    def to_fields(self) -> List[str]:
        return [str(self.id), self.name, self.phone, self.email, self.address]

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> "Customer":
        f = pad(fields, len(cls.FIELDS))
        return cls(id=record_id(f[0]), name=f[1], phone=f[2], email=f[3], address=f[4])


class CustomersRepo:
    def __init__(self, store: RecordStore[Customer]):
        self.store = store

    # ---- Queries ----------------------------------------------------------

    def list_customers(self) -> list[Customer]:
        return list(self.store.scan())

    def search(self, term: str) -> list[Customer]:
        """
        Case-insensitive substring match over name/phone/email.
        """
        needle = (term or "").strip().casefold()
        return [
            c for c in self.store.scan()
            if needle in c.name.casefold()
            or needle in c.phone.casefold()
            or needle in c.email.casefold()
        ]

    def get(self, customer_id: int) -> Customer | None:
        return self.store.find_by_id(int(customer_id))

    def require(self, customer_id: int) -> Customer:
        c = self.get(customer_id)
        if c is None:
            raise NotFoundError(f"Customer #{customer_id} not found.")
        return c

    # ---- Mutations --------------------------------------------------------

    def create(self, name: str, phone: str, email: str, address: str) -> Customer:
        """
        Insert a new customer. Name, phone, email and address are required.
        """
        customer = Customer(
            id=0,
            name=require_text(name, "Name"),
            phone=require_text(phone, "Phone"),
            email=require_text(email, "Email"),
            address=require_text(address, "Address"),
        )
        customer.id = next_id(self.store)
        self.store.append(customer)
        return customer


__all__ = ["Customer", "CustomersRepo", "DomainError"]
