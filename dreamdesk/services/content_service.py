"""
Per-user content collections: notes, business ideas, library resources.

Every create and delete is followed by the matching counter update on the
owner's profile. The steps run in order (store write, then counter) and are
not transactional.
"""

import logging
from dataclasses import dataclass
from typing import Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel

from dreamdesk.models.content import BusinessIdea, ContentItem, LibraryResource, Note
from dreamdesk.models.user import StatKind
from dreamdesk.services.document_store import DocumentStore
from dreamdesk.services.query import Constraint, order_by, where
from dreamdesk.services.user_sync import CONTENT_COLLECTIONS, OWNER_FIELD, UserSyncService, utcnow

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT", bound=ContentItem)


class ContentNotFoundError(Exception):
    """The item does not exist or belongs to another user."""


@dataclass(frozen=True)
class ContentKind(Generic[ItemT]):
    stat_kind: StatKind
    model: Type[ItemT]
    label: str

    @property
    def collection(self) -> str:
        return CONTENT_COLLECTIONS[self.stat_kind]


NOTES = ContentKind(StatKind.NOTES, Note, "Note")
IDEAS = ContentKind(StatKind.IDEAS, BusinessIdea, "Idea")
RESOURCES = ContentKind(StatKind.RESOURCES, LibraryResource, "Resource")


def matches_search(item: ContentItem, search: str) -> bool:
    """Case-insensitive match on title, description/content or any tag."""
    needle = search.lower()
    texts = [getattr(item, "title", ""), getattr(item, "description", ""), getattr(item, "content", "")]
    if any(needle in (t or "").lower() for t in texts):
        return True
    return any(needle in tag.lower() for tag in item.tags)


class ContentService(Generic[ItemT]):
    """CRUD for one content kind, scoped to the acting user."""

    def __init__(self, store: DocumentStore, user_sync: UserSyncService, kind: ContentKind[ItemT]):
        self.store = store
        self.user_sync = user_sync
        self.kind = kind

    async def list(self, user_id: str, category: Optional[str] = None, search: Optional[str] = None) -> List[ItemT]:
        """Items owned by the user, most recently updated first."""
        constraints: List[Constraint] = [where(OWNER_FIELD, "==", user_id)]
        if category and category != "all":
            constraints.append(where("category", "==", category))
        constraints.append(order_by("updatedAt", "desc"))
        records = await self.store.get_all(self.kind.collection, constraints)
        items = [self.kind.model.model_validate(r) for r in records]
        if search:
            items = [i for i in items if matches_search(i, search)]
        return items

    async def create(self, user_id: str, data: BaseModel) -> ItemT:
        now = utcnow()
        body = {
            **data.model_dump(by_alias=True, mode="json"),
            OWNER_FIELD: user_id,
            "createdAt": now,
            "updatedAt": now,
        }
        record = await self.store.create(self.kind.collection, body)
        await self.user_sync.update_stats(user_id, self.kind.stat_kind, 1)
        logger.info("Created %s %s for user %s", self.kind.label.lower(), record["id"], user_id)
        return self.kind.model.model_validate(record)

    async def _owned_record(self, user_id: str, item_id: str) -> dict:
        record = await self.store.get_by_id(self.kind.collection, item_id)
        if record is None or record.get(OWNER_FIELD) != user_id:
            raise ContentNotFoundError(f"{self.kind.label} not found")
        return record

    async def get(self, user_id: str, item_id: str) -> ItemT:
        return self.kind.model.model_validate(await self._owned_record(user_id, item_id))

    async def update(self, user_id: str, item_id: str, changes: BaseModel) -> ItemT:
        """Write the fields present in changes and refresh updatedAt."""
        record = await self._owned_record(user_id, item_id)
        body = {**changes.model_dump(by_alias=True, exclude_none=True, mode="json"), "updatedAt": utcnow()}
        await self.store.update(self.kind.collection, item_id, body)
        return self.kind.model.model_validate({**record, **body})

    async def delete(self, user_id: str, item_id: str) -> None:
        await self._owned_record(user_id, item_id)
        await self.store.delete(self.kind.collection, item_id)
        await self.user_sync.update_stats(user_id, self.kind.stat_kind, -1)
        logger.info("Deleted %s %s for user %s", self.kind.label.lower(), item_id, user_id)
