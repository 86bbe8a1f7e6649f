"""Application services: Add Customer and Deactivate Customer use cases."""

from __future__ import annotations

from collections.abc import Callable

from fulfillment.application.dto import CustomerDTO, customer_to_dto
from fulfillment.application.parsing import clean_optional_text
from fulfillment.domain.exceptions import EntityNotFoundError
from fulfillment.domain.model.customer import Customer
from fulfillment.domain.repository.audit_sink import AuditAction
from fulfillment.domain.repository.unit_of_work import UnitOfWork


class AddCustomerHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(
        self,
        name: str,
        contact_person: str | None = None,
        email: str | None = None,
        phone: str | None = None,
        address: str | None = None,
        actor: str | None = None,
    ) -> CustomerDTO:
        customer = Customer.create(
            name,
            contact_person=clean_optional_text(contact_person),
            email=clean_optional_text(email),
            phone=clean_optional_text(phone),
            address=clean_optional_text(address),
            created_by=actor,
        )
        with self._uow_factory() as uow:
            uow.customers.add(customer)
            uow.audit.record(
                actor,
                AuditAction.CREATE_CUSTOMER,
                "customers",
                customer.id,
                None,
                customer.snapshot(),
            )
            uow.commit()
        return customer_to_dto(customer)


class DeactivateCustomerHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, customer_id: int, actor: str | None = None) -> None:
        """Existing orders are untouched; new orders are refused."""
        with self._uow_factory() as uow:
            customer = uow.customers.get_by_id(customer_id)
            if customer is None:
                raise EntityNotFoundError(f"Customer #{customer_id} not found")
            before = customer.snapshot()
            if not customer.deactivate():
                return
            uow.customers.save(customer)
            uow.audit.record(
                actor,
                AuditAction.DEACTIVATE_CUSTOMER,
                "customers",
                customer.id,
                before,
                customer.snapshot(),
            )
            uow.commit()
