from __future__ import annotations

from ..base_module import BaseModule
from ...database.repositories.repairs_repo import Repair
from ...utils.permissions import Session, requires


class RepairController(BaseModule):
    """
    Repair jobs. Service work has no flag of its own, so every operation
    is gated on the sales capability.
    """

    @property
    def repo(self):
        return self.repos.repairs

    @requires("can_manage_sales")
    def create_repair(self, session: Session, customer_id: int, device: str, problem: str, cost_estimate) -> Repair:
        repair = self.repo.create(int(customer_id), device, problem, cost_estimate)
        self.log.info("%s booked repair #%d for customer #%d", session.username, repair.id, repair.customer_id)
        return repair

    @requires("can_manage_sales")
    def list_repairs(self, session: Session) -> list[Repair]:
        return self.repo.list_repairs()

    @requires("can_manage_sales")
    def set_repair_status(self, session: Session, repair_id: int, new_status: str) -> Repair:
        repair = self.repo.set_status(int(repair_id), new_status)
        self.log.info("%s moved repair #%d to %s", session.username, repair.id, repair.status)
        return repair
