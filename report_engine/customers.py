"""Customer Registry - customer profiles used as context by the customer-aware analysis."""
import logging
import uuid
from typing import Iterable

from pydantic import ValidationError

from report_engine.errors import RecordNotFoundError
from report_engine.registry import SelectionSet
from report_engine.schemas import CustomerFields, CustomerRecord
from report_engine.store import KeyValueStore

logger = logging.getLogger(__name__)


class CustomerRegistry:
    def __init__(self, store: KeyValueStore, storage_key: str):
        self.store = store
        self.storage_key = storage_key
        self.selection = SelectionSet()
        self._customers: list[CustomerRecord] = []

    def load(self) -> list[CustomerRecord]:
        customers = []
        for raw in self.store.load(self.storage_key):
            try:
                customers.append(CustomerRecord.model_validate(raw))
            except ValidationError as e:
                logger.warning("Skipping unreadable stored customer: %s", e)
        self._customers = customers
        return list(customers)

    def _commit(self, customers: list[CustomerRecord]) -> None:
        self.store.save(self.storage_key, [c.model_dump(mode="json", by_alias=True) for c in customers])
        self._customers = customers

    def add(self, fields: CustomerFields) -> CustomerRecord:
        customer = CustomerRecord(id=uuid.uuid4().hex[:12], **fields.model_dump())
        self._commit(self._customers + [customer])
        return customer

    def update(self, customer_id: str, fields: CustomerFields) -> CustomerRecord:
        for i, existing in enumerate(self._customers):
            if existing.id == customer_id:
                updated = CustomerRecord(id=customer_id, **fields.model_dump())
                customers = list(self._customers)
                customers[i] = updated
                self._commit(customers)
                return updated
        raise RecordNotFoundError("Customer", customer_id)

    def remove(self, ids: Iterable[str]) -> list[CustomerRecord]:
        doomed = set(ids)
        removed = [c for c in self._customers if c.id in doomed]
        if removed:
            self._commit([c for c in self._customers if c.id not in doomed])
            self.selection.discard(doomed)
        return removed

    def get(self, customer_id: str) -> CustomerRecord:
        for customer in self._customers:
            if customer.id == customer_id:
                return customer
        raise RecordNotFoundError("Customer", customer_id)

    def all(self) -> list[CustomerRecord]:
        return list(self._customers)

    def selected(self) -> list[CustomerRecord]:
        return [c for c in self._customers if c.id in self.selection]
