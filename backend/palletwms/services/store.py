from __future__ import annotations

import threading
from dataclasses import dataclass, field

from palletwms.services.catalog import CatalogRegistry
from palletwms.services.ledger import InventoryLedger
from palletwms.services.slots import SlotRegistry


@dataclass
class WarehouseStore:
    """The single owned state of one warehouse session.

    Callers that mutate must hold ``lock``; the ledger and registries assume
    one writer at a time.
    """

    slots: SlotRegistry = field(default_factory=SlotRegistry)
    catalog: CatalogRegistry = field(default_factory=CatalogRegistry)
    ledger: InventoryLedger = field(init=False)
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def __post_init__(self) -> None:
        self.ledger = InventoryLedger(self.slots)
