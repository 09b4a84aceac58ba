# app/models/entity.py
from enum import Enum
from typing import Dict, Tuple


class EntityKind(str, Enum):
    PART = "part"
    ORDER = "order"
    SUPPLIER = "supplier"
    INVENTORY_ITEM = "inventory-item"
    BOM = "bom"


class EntitySchema:
    """GraphQL names and field selection for one entity kind."""

    def __init__(self, type_name: str, single: str, plural: str, fields: Tuple[str, ...]):
        self.type_name = type_name
        self.single = single
        self.plural = plural
        self.fields = fields

    @property
    def selection(self) -> str:
        return " ".join(self.fields)


ENTITY_SCHEMAS: Dict[EntityKind, EntitySchema] = {
    EntityKind.PART: EntitySchema(
        "Part", "part", "parts",
        ("id", "name", "description", "type", "status"),
    ),
    EntityKind.ORDER: EntitySchema(
        "Order", "order", "orders",
        ("id", "customer_id", "items", "priority", "due_date", "status"),
    ),
    EntityKind.SUPPLIER: EntitySchema(
        "Supplier", "supplier", "suppliers",
        ("id", "name", "contact_info", "status"),
    ),
    EntityKind.INVENTORY_ITEM: EntitySchema(
        "InventoryItem", "inventoryItem", "inventoryItems",
        ("id", "quantity", "location", "status"),
    ),
    EntityKind.BOM: EntitySchema(
        "ABom", "abom", "aboms",
        ("id", "name", "description", "version", "status", "created_at", "updated_at",
         "items { id part_id quantity unit notes }"),
    ),
}
