"""
Typed errors raised by the warehouse services.

Every error carries a machine-readable ``code`` and the HTTP ``status_code``
the API layer answers with, plus the offending identifiers as attributes so
callers never have to parse the message.

    WarehouseError
    +-- DuplicateSlotError         DUPLICATE_SLOT          409
    +-- DuplicateSkuError          DUPLICATE_SKU           409
    +-- SlotOccupiedError          SLOT_OCCUPIED           409
    +-- UnknownSlotError           UNKNOWN_SLOT            404
    +-- SlotConflictError          SLOT_CONFLICT           409
    +-- RecordNotFoundError        RECORD_NOT_FOUND        404
    +-- InsufficientQuantityError  INSUFFICIENT_QUANTITY   409
    +-- InvalidQuantityError       INVALID_QUANTITY        422
"""

from __future__ import annotations

from typing import Optional


class WarehouseError(Exception):
    code: str = "WAREHOUSE_ERROR"
    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"detail": self.message, "code": self.code}


class DuplicateSlotError(WarehouseError):
    code = "DUPLICATE_SLOT"
    status_code = 409

    def __init__(self, slot_id: str):
        self.slot_id = slot_id
        super().__init__(f"Slot {slot_id} already exists")


class DuplicateSkuError(WarehouseError):
    code = "DUPLICATE_SKU"
    status_code = 409

    def __init__(self, sku: str):
        self.sku = sku
        super().__init__(f"SKU {sku} is already registered in the catalog")


class SlotOccupiedError(WarehouseError):
    code = "SLOT_OCCUPIED"
    status_code = 409

    def __init__(self, slot_id: str):
        self.slot_id = slot_id
        super().__init__(f"Slot {slot_id} is occupied and cannot be deleted")


class UnknownSlotError(WarehouseError):
    code = "UNKNOWN_SLOT"
    status_code = 404

    def __init__(self, slot_id: str):
        self.slot_id = slot_id
        super().__init__(f"Slot {slot_id} does not exist")


class SlotConflictError(WarehouseError):
    """Receiving into a slot already held by another (SKU, lot)."""

    code = "SLOT_CONFLICT"
    status_code = 409

    def __init__(
        self,
        slot_id: str,
        sku: str,
        lot_number: str,
        held_sku: Optional[str] = None,
        held_lot: Optional[str] = None,
    ):
        self.slot_id = slot_id
        self.sku = sku
        self.lot_number = lot_number
        self.held_sku = held_sku
        self.held_lot = held_lot
        if held_sku is None:
            msg = (
                f"Slot {slot_id} is flagged occupied but holds no stock record; "
                f"refusing SKU {sku} lot {lot_number}"
            )
        else:
            msg = (
                f"Slot {slot_id} holds SKU {held_sku} lot {held_lot}; "
                f"cannot receive SKU {sku} lot {lot_number}"
            )
        super().__init__(msg)


class RecordNotFoundError(WarehouseError):
    code = "RECORD_NOT_FOUND"
    status_code = 404

    def __init__(
        self,
        *,
        record_id: Optional[str] = None,
        sku: Optional[str] = None,
        slot_id: Optional[str] = None,
    ):
        self.record_id = record_id
        self.sku = sku
        self.slot_id = slot_id
        if record_id is not None:
            msg = f"Stock record {record_id} not found"
        else:
            msg = f"No stock of SKU {sku} at slot {slot_id}"
        super().__init__(msg)


class InsufficientQuantityError(WarehouseError):
    code = "INSUFFICIENT_QUANTITY"
    status_code = 409

    def __init__(self, sku: str, slot_id: str, requested: int, available: int):
        self.sku = sku
        self.slot_id = slot_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Cannot dispatch {requested} of SKU {sku} from slot {slot_id}: "
            f"only {available} available"
        )


class InvalidQuantityError(WarehouseError, ValueError):
    code = "INVALID_QUANTITY"
    status_code = 422

    def __init__(self, quantity: object):
        self.quantity = quantity
        super().__init__(f"Quantity must be a positive integer, got {quantity!r}")


__all__ = [
    "WarehouseError",
    "DuplicateSlotError",
    "DuplicateSkuError",
    "SlotOccupiedError",
    "UnknownSlotError",
    "SlotConflictError",
    "RecordNotFoundError",
    "InsufficientQuantityError",
    "InvalidQuantityError",
]
