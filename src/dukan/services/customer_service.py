from __future__ import annotations

import logging
import uuid

from dukan.domain.errors import NotFoundError, ValidationError
from dukan.domain.models import Customer

log = logging.getLogger(__name__)


class CustomerService:
    def __init__(self, repo):
        self.repo = repo

    def list_customers(self) -> list[Customer]:
        return self.repo.list_customers()

    def get_customer(self, customer_id: str) -> Customer:
        c = self.repo.get_customer_by_id(customer_id)
        if not c:
            raise NotFoundError("Customer not found.")
        return c

    def add_customer(self, name: str, phone: str) -> Customer:
        name = (name or "").strip()
        phone = (phone or "").strip()
        if not name or not phone:
            raise ValidationError("Name and phone are required.")

        customer = Customer(id=uuid.uuid4().hex, name=name, phone=phone, debt=0.0)
        customers = self.repo.list_customers()
        customers.append(customer)
        self.repo.save_customers(customers)
        log.info("customer_added id=%s", customer.id)
        return customer

    def find_by_name_substring(self, query: str) -> list[Customer]:
        # Case-sensitive, like the sale screen's customer lookup.
        query = query or ""
        return [c for c in self.repo.list_customers() if query in c.name]

    def total_outstanding_debt(self) -> float:
        return sum(c.debt for c in self.repo.list_customers() if c.debt > 0)
