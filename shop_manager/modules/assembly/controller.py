from __future__ import annotations

from ..base_module import BaseModule
from ...database.repositories.assemblies_repo import Assembly
from ...utils.permissions import Session, requires


class AssemblyController(BaseModule):
    @property
    def repo(self):
        return self.repos.assemblies

    @requires("can_manage_sales")
    def create_assembly(self, session: Session, customer_id: int, description: str, price) -> Assembly:
        order = self.repo.create(int(customer_id), description, price)
        self.log.info("%s opened assembly order #%d", session.username, order.id)
        return order

    @requires("can_manage_sales")
    def list_assemblies(self, session: Session) -> list[Assembly]:
        return self.repo.list_assemblies()

    @requires("can_manage_sales")
    def set_assembly_status(self, session: Session, assembly_id: int, new_status: str) -> Assembly:
        order = self.repo.set_status(int(assembly_id), new_status)
        self.log.info("%s moved assembly order #%d to %s", session.username, order.id, order.status)
        return order
