"""
User profile synchronization with the identity provider.

Keeps the "users" document for each Clerk identity up to date while carrying
forward the app-local state (preferences, content counters) that Clerk knows
nothing about. Also owns the per-user counters and the cascade delete.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Optional

from dreamdesk.models.user import (
    IdentityUser,
    Preferences,
    PreferencesUpdate,
    StatKind,
    UserProfile,
    UserStats,
    from_epoch_ms,
)
from dreamdesk.services.document_store import DocumentStore
from dreamdesk.services.query import where

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"

# Owned content per counter kind; also the cascade-delete order
CONTENT_COLLECTIONS: Dict[StatKind, str] = {
    StatKind.NOTES: "notes",
    StatKind.IDEAS: "businessIdeas",
    StatKind.RESOURCES: "libraryResources",
}

OWNER_FIELD = "userId"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def display_name(first_name: Optional[str], last_name: Optional[str]) -> str:
    """First and last name joined and trimmed; "User" when both are empty."""
    return f"{first_name or ''} {last_name or ''}".strip() or "User"


def _to_document(profile: UserProfile) -> dict:
    return profile.model_dump(by_alias=True, exclude={"id"}, mode="python")


def _identity_fields(profile: UserProfile) -> dict:
    """Profile fields owned by the identity provider; app-local state is excluded."""
    return profile.model_dump(by_alias=True, exclude={"id", "preferences", "stats"}, mode="python")


class UserSyncService:
    """Profile reads/writes for one document store."""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def sync_profile(self, identity: IdentityUser) -> UserProfile:
        """
        Create or refresh the profile for an identity.

        Identity fields (email, names, avatar, sign-in time) are recomputed
        from the event every time. Preferences and stats are only defaulted
        on first creation; a re-sync writes the identity fields alone, so
        counter and preference writes racing with it are kept.
        """
        primary = identity.email_addresses[0] if identity.email_addresses else None
        email = primary.email_address if primary else ""
        email_verified = bool(primary and primary.verification and primary.verification.status == "verified")
        now = utcnow()

        existing = await self.get_profile(identity.id)

        profile = UserProfile(
            id=identity.id,
            email=email,
            first_name=identity.first_name,
            last_name=identity.last_name,
            full_name=display_name(identity.first_name, identity.last_name),
            image_url=identity.image_url,
            created_at=from_epoch_ms(identity.created_at) or (existing.created_at if existing else now),
            updated_at=now,
            last_sign_in_at=from_epoch_ms(identity.last_sign_in_at),
            email_verified=email_verified,
            preferences=existing.preferences if existing else Preferences(),
            stats=existing.stats if existing else UserStats(),
        )

        if existing:
            await self.store.update(USERS_COLLECTION, identity.id, _identity_fields(profile))
            logger.info("Updated profile for user %s", identity.id)
            return await self.get_profile(identity.id) or profile

        await self.store.create(USERS_COLLECTION, _to_document(profile), id=identity.id)
        logger.info("Created profile for user %s", identity.id)
        return profile

    async def get_profile(self, user_id: str) -> Optional[UserProfile]:
        record = await self.store.get_by_id(USERS_COLLECTION, user_id)
        if record is None:
            return None
        return UserProfile.model_validate(record)

    async def update_stats(self, user_id: str, kind: StatKind, delta: int = 1) -> None:
        """
        Add delta (+1 or -1) to one content counter, never going below zero.

        Uses the store's atomic floored increment, so concurrent creates and
        deletes for the same user cannot lose updates. Missing profiles are
        left alone.
        """
        if delta not in (1, -1):
            raise ValueError(f"Counter delta must be +1 or -1, got {delta}")
        kind = StatKind(kind)
        now = utcnow()
        changed = await self.store.increment(
            USERS_COLLECTION,
            user_id,
            f"stats.{kind.field}",
            delta,
            extra={"updatedAt": now},
            floor=0,
        )
        if not changed:
            # Already at zero (or no profile): only the timestamp moves
            await self.store.update(USERS_COLLECTION, user_id, {"updatedAt": now})
        logger.debug("Stats %s for user %s adjusted by %d (applied=%s)", kind.value, user_id, delta, changed)

    async def update_preferences(self, user_id: str, changes: PreferencesUpdate) -> Optional[UserProfile]:
        """Merge the set fields of changes over the stored preferences."""
        profile = await self.get_profile(user_id)
        if profile is None:
            return None
        merged = profile.preferences.model_copy(update=changes.model_dump(exclude_none=True))
        profile.preferences = merged
        profile.updated_at = utcnow()
        await self.store.update(
            USERS_COLLECTION,
            user_id,
            {"preferences": merged.model_dump(by_alias=True), "updatedAt": profile.updated_at},
        )
        return profile

    async def delete_user(self, user_id: str) -> None:
        """
        Delete everything the user owns, then the profile.

        Runs notes, ideas, resources, profile in that order. There is no
        rollback: if a step fails, earlier deletions stay done and the error
        propagates before the remaining steps run.
        """
        for kind, collection in CONTENT_COLLECTIONS.items():
            deleted = await self.store.delete_where(collection, [where(OWNER_FIELD, "==", user_id)])
            logger.info("Deleted %d %s for user %s", deleted, kind.value, user_id)
        await self.store.delete(USERS_COLLECTION, user_id)
        logger.info("Deleted profile for user %s", user_id)
