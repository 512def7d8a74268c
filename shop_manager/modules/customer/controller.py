from __future__ import annotations

from ..base_module import BaseModule
from ...database.repositories.customers_repo import Customer
from ...utils.permissions import Session, requires


class CustomerController(BaseModule):
    @property
    def repo(self):
        return self.repos.customers

    def list_customers(self, session: Session) -> list[Customer]:
        return self.repo.list_customers()

    def search_customers(self, session: Session, term: str) -> list[Customer]:
        return self.repo.search(term)

    @requires("can_manage_customers")
    def add_customer(self, session: Session, name: str, phone: str, email: str, address: str) -> Customer:
        customer = self.repo.create(name, phone, email, address)
        self.log.info("%s added customer #%d (%s)", session.username, customer.id, customer.name)
        return customer
