"""Pydantic schemas for persisted and imported JSON records.

These models validate the JSON stored under each record key and the JSON
files used to provision inventory lists. Field names on disk are camelCase
(articleNumber, expectedQuantity, ...); Python code uses the domain
dataclasses in stocktake.domain.models.

Record layout:
    inventory_lists          -> InventoryListsRecord   (list of lists)
    scanned_items_<listId>   -> ScanLedgerRecord       (articleNumber -> count)
    missing_items_<listId>   -> MissingItemsRecord     (list of report lines)
    last_sync                -> SyncStateRecord        (ISO-8601 string)
"""

from __future__ import annotations

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    RootModel,
    model_validator,
)
from pydantic.alias_generators import to_camel

from stocktake.domain.models import (
    ExpectedItem,
    InventoryList,
    MissingItem,
)


class _CamelModel(BaseModel):
    """Base model that reads and writes camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class ExpectedItemSchema(_CamelModel):
    """One expected item inside an inventory list."""

    article_number: str = Field(min_length=1)
    description: str = ""
    expected_quantity: NonNegativeInt = 0
    image_path: str = ""

    @classmethod
    def from_domain(cls, item: ExpectedItem) -> ExpectedItemSchema:
        return cls(
            article_number=item.article_number,
            description=item.description,
            expected_quantity=item.expected_quantity,
            image_path=item.image_path,
        )

    def to_domain(self) -> ExpectedItem:
        return ExpectedItem(
            article_number=self.article_number,
            description=self.description,
            expected_quantity=self.expected_quantity,
            image_path=self.image_path,
        )


class InventoryListSchema(_CamelModel):
    """One inventory list definition.

    Article numbers must be unique within a list; a list that repeats one is
    rejected rather than resolved by lookup order.
    """

    id: str = Field(min_length=1)
    name: str
    description: str = ""
    items: list[ExpectedItemSchema] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_unique_articles(self) -> InventoryListSchema:
        seen: set[str] = set()
        duplicates: set[str] = set()
        for item in self.items:
            if item.article_number in seen:
                duplicates.add(item.article_number)
            seen.add(item.article_number)
        if duplicates:
            raise ValueError(
                f"duplicate article numbers in list {self.id!r}: "
                f"{', '.join(sorted(duplicates))}"
            )
        return self

    @classmethod
    def from_domain(cls, inventory_list: InventoryList) -> InventoryListSchema:
        return cls(
            id=inventory_list.id,
            name=inventory_list.name,
            description=inventory_list.description,
            items=[ExpectedItemSchema.from_domain(item) for item in inventory_list.items],
        )

    def to_domain(self) -> InventoryList:
        return InventoryList(
            id=self.id,
            name=self.name,
            description=self.description,
            items=tuple(item.to_domain() for item in self.items),
        )


class InventoryListsRecord(RootModel[list[InventoryListSchema]]):
    """Root schema for the inventory_lists record and for import files.

    List ids must be unique across the collection.
    """

    @model_validator(mode="after")
    def _check_unique_ids(self) -> InventoryListsRecord:
        seen: set[str] = set()
        for inventory_list in self.root:
            if inventory_list.id in seen:
                raise ValueError(f"duplicate inventory list id: {inventory_list.id!r}")
            seen.add(inventory_list.id)
        return self


class RawInventoryListsRecord(RootModel[list[dict[str, Any]]]):
    """Lenient root schema used to read the stored collection entry by entry."""


class ScanLedgerRecord(RootModel[dict[str, NonNegativeInt]]):
    """Root schema for a scanned_items_<listId> record.

    Structure: {"<articleNumber>": <count>, ...}
    """


class MissingItemSchema(ExpectedItemSchema):
    """One line of a persisted missing-items report."""

    scanned_quantity: NonNegativeInt = 0
    missing: int = 0

    @classmethod
    def from_domain(cls, item: MissingItem) -> MissingItemSchema:  # type: ignore[override]
        return cls(
            article_number=item.article_number,
            description=item.description,
            expected_quantity=item.expected_quantity,
            image_path=item.image_path,
            scanned_quantity=item.scanned_quantity,
            missing=item.missing,
        )

    def to_domain(self) -> MissingItem:  # type: ignore[override]
        return MissingItem(
            article_number=self.article_number,
            description=self.description,
            expected_quantity=self.expected_quantity,
            image_path=self.image_path,
            scanned_quantity=self.scanned_quantity,
            missing=self.missing,
        )


class MissingItemsRecord(RootModel[list[MissingItemSchema]]):
    """Root schema for a missing_items_<listId> record."""


class SyncStateRecord(RootModel[str]):
    """Root schema for the last_sync record (an ISO-8601 timestamp)."""
