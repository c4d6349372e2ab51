"""Item, inventory, payment and pagination models."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from bson import ObjectId


def _f(default=None, *, factory=None, json=None, validate=None):
    meta = {}
    if json:
        meta["json"] = json
    if validate:
        meta["validate"] = validate
    if factory is not None:
        return field(default_factory=factory, metadata=meta)
    return field(default=default, metadata=meta)


@dataclass
class PaginateReq:
    start: str = _f("", validate="max=64")
    limit: int = _f(0, validate="required,min=2,max=10")


@dataclass
class FirstPaginate:
    href: str = ""
    start: str = ""


@dataclass
class NextPaginate:
    href: str = ""


@dataclass
class PaginateRes:
    data: Any = None
    limit: int = 0
    total: int = 0
    first: FirstPaginate = _f(factory=FirstPaginate)
    next: NextPaginate = _f(factory=NextPaginate)

    def to_dict(self) -> dict:
        """Return the JSON shape; the first-page href key is ``Href``."""
        return {
            "data": self.data,
            "limit": self.limit,
            "total": self.total,
            "first": {"Href": self.first.href, "start": self.first.start},
            "next": {"href": self.next.href},
        }


@dataclass
class KafkaOffset:
    offset: int = 0


@dataclass
class Item:
    id: Optional[ObjectId] = _f(None, json="_id")
    title: str = ""
    price: float = 0.0
    damage: int = 0
    image_url: str = ""
    usage_status: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_document(self) -> dict:
        """Return the stored document; ``_id`` is left out when unset."""
        doc = {} if self.id is None else {"_id": self.id}
        doc.update(
            title=self.title,
            price=self.price,
            damage=self.damage,
            image_url=self.image_url,
            usage_status=self.usage_status,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
        return doc


@dataclass
class CreateItemReq:
    title: str = _f("", validate="required,max=64")
    price: float = _f(0.0, validate="required")
    image_url: str = _f("", validate="required,max=255")
    damage: int = _f(0, validate="required")


@dataclass
class ItemShowCase:
    item_id: str = ""
    title: str = ""
    price: float = 0.0
    damage: int = 0
    image_url: str = ""


@dataclass
class ItemSearchReq(PaginateReq):
    title: str = ""


@dataclass
class ItemUpdateReq:
    title: str = _f("", validate="required,max=64")
    price: float = _f(0.0, validate="required")
    image_url: str = _f("", validate="required,max=255")
    damage: int = _f(0, validate="required")


@dataclass
class EnableOrDisableItemReq:
    usage_status: bool = False


@dataclass
class Inventory:
    id: str = _f("", json="_id")
    player_id: str = ""
    item_id: str = ""


@dataclass
class UpdateInventoryReq:
    player_id: str = _f("", validate="required,max=64")
    item_id: str = _f("", validate="required,max=64")


@dataclass
class ItemInInventory:
    inventory_id: str = ""
    item: Optional[ItemShowCase] = None

    def to_dict(self) -> dict:
        """Return the JSON shape with the item's fields inlined."""
        out = {"inventory_id": self.inventory_id}
        if self.item is not None:
            out.update(dataclasses.asdict(self.item))
        return out


@dataclass
class PlayerInventory:
    player_id: str = ""
    paginate: Optional[PaginateRes] = None

    def to_dict(self) -> dict:
        """Return the JSON shape with the pagination fields inlined."""
        out = {"player_id": self.player_id}
        if self.paginate is not None:
            out.update(self.paginate.to_dict())
        return out


@dataclass
class ItemServiceReqDatum:
    item_id: str = _f("", validate="required,max=64")
    price: float = 0.0


@dataclass
class ItemServiceReq:
    items: Optional[list] = _f(None, validate="required")