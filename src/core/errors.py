# src/core/errors.py
"""
Domänfel för lager- och offertflödet.

Alla fel ärver från InventoryError så att API-lagret kan fånga dem på ett
ställe och översätta till HTTP-svar.
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class InventoryError(Exception):
    """Basklass för alla domänfel."""


class NotFound(InventoryError):
    def __init__(self, entity: str, entity_id: Any) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} hittades inte")


class InsufficientStock(InventoryError):
    """
    Nytt lagersaldo skulle bli negativt.

    Bär med sig vilken produkt det gäller och hur mycket som fanns/begärdes,
    så att anroparen kan visa ett begripligt meddelande.
    """

    def __init__(
        self,
        product_id: int,
        available: int,
        requested: int,
        product_name: Optional[str] = None,
    ) -> None:
        self.product_id = product_id
        self.product_name = product_name
        self.available = available
        self.requested = requested
        label = product_name or f"produkt {product_id}"
        super().__init__(
            f"Otillräckligt lager för {label}: {available} i lager, {requested} begärt"
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "error": "insufficient_stock",
            "product_id": self.product_id,
            "product_name": self.product_name,
            "available": self.available,
            "requested": self.requested,
            "message": str(self),
        }


class StoreFailure(InventoryError):
    """En läs- eller skrivoperation mot databasen misslyckades."""

    def __init__(self, operation: str, message: str) -> None:
        self.operation = operation
        super().__init__(message)


class QuoteNotConvertible(InventoryError):
    def __init__(self, quote_id: int, status: str) -> None:
        self.quote_id = quote_id
        self.status = status
        super().__init__(
            f"Offert {quote_id} har status '{status}' och kan inte konverteras till order"
        )


class InvalidStatusTransition(InventoryError):
    def __init__(self, current: str, requested: str) -> None:
        self.current = current
        self.requested = requested
        super().__init__(f"Ogiltig statusövergång: {current} -> {requested}")


class AmountOutOfRange(InventoryError):
    """Ett belopp är inte ett ändligt tal eller för stort för att avrundas."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"Beloppet {value!r} ligger utanför tillåtet intervall")
