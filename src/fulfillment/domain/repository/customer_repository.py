"""Abstract repository for the Customer aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from fulfillment.domain.model.customer import Customer


class CustomerRepository(ABC):

    @abstractmethod
    def get_by_id(self, customer_id: int) -> Customer | None:
        """Return a customer by its ID, or None if not found."""

    @abstractmethod
    def add(self, customer: Customer) -> None:
        """Persist a new customer, assigning its id."""

    @abstractmethod
    def save(self, customer: Customer) -> None:
        """Persist changes to an existing customer."""
