from typing import ContextManager, Generic, Iterable, List, Optional, TypeVar

from ..schemas.bricks import Brick, BrickCreate, BrickPatch
from ..schemas.invoices import Invoice, InvoiceCreate, InvoicePatch
from ..schemas.laborers import Laborer, LaborerCreate, LaborerPatch
from ..schemas.orders import Order, OrderCreate, OrderPatch
from ..schemas.settings import Setting
from ..schemas.tractors import Tractor, TractorCreate, TractorPatch


RecordT = TypeVar("RecordT")
CreateT = TypeVar("CreateT")
PatchT = TypeVar("PatchT")


class DuplicateKeyError(ValueError):
    """A unique field (e.g. a tractor registration number) is already taken."""


class Repository(Generic[RecordT, CreateT, PatchT]):
    def list(self) -> List[RecordT]:
        raise NotImplementedError

    def get(self, id: str) -> Optional[RecordT]:
        raise NotImplementedError

    def create(self, data: CreateT) -> RecordT:
        raise NotImplementedError

    def update(self, id: str, patch: PatchT) -> Optional[RecordT]:
        raise NotImplementedError

    def delete(self, id: str) -> bool:
        raise NotImplementedError


class BrickRepository(Repository[Brick, BrickCreate, BrickPatch]):
    def update_stock(self, id: str, new_stock: int) -> Optional[Brick]:
        # No floor check here: callers decide whether negative stock is allowed
        return self.update(id, BrickPatch(current_stock=new_stock))


class TractorRepository(Repository[Tractor, TractorCreate, TractorPatch]):
    def list_available(self) -> List[Tractor]:
        return [t for t in self.list() if t.status == "available"]


class LaborerRepository(Repository[Laborer, LaborerCreate, LaborerPatch]):
    def list_active(self) -> List[Laborer]:
        return [laborer for laborer in self.list() if laborer.status == "active"]


class OrderRepository(Repository[Order, OrderCreate, OrderPatch]):
    def list_by_status(self, status: str) -> List[Order]:
        return [o for o in self.list() if o.status == status]


class InvoiceRepository(Repository[Invoice, InvoiceCreate, InvoicePatch]):
    def get_by_order_id(self, order_id: str) -> Optional[Invoice]:
        for invoice in self.list():
            if invoice.order_id == order_id:
                return invoice
        return None


class SettingRepository:
    def list(self) -> List[Setting]:
        raise NotImplementedError

    def update_settings(self, items: Iterable[Setting]) -> List[Setting]:
        raise NotImplementedError

    def as_mapping(self) -> dict:
        return {s.key: s.value for s in self.list()}


class EntityStore:
    """Owns every entity collection; handlers receive one instance per process."""

    bricks: BrickRepository
    tractors: TractorRepository
    laborers: LaborerRepository
    orders: OrderRepository
    invoices: InvoiceRepository
    settings: SettingRepository

    def transaction(self) -> ContextManager[None]:
        """Make the repository calls made inside the block all-or-nothing."""
        raise NotImplementedError

    def close(self) -> None:
        pass
