"""API key repository for DynamoDB operations."""

from datetime import datetime, timezone
from typing import Any, Optional

from keygate.auth.api_key import digest_api_key, verify_api_key
from keygate.config import settings
from keygate.models.api_key import ApiKeyRecord
from keygate.repositories.base import BaseRepository
from keygate.utils.lookup_cache import LookupCache


def serialize_api_key(record: ApiKeyRecord) -> dict[str, Any]:
    """
    Convert an ApiKeyRecord to a DynamoDB item.

    Args:
        record: Record to serialize

    Returns:
        Item dictionary without None values
    """
    return record.model_dump(mode="json", exclude_none=True)


class ApiKeyRepository(BaseRepository):
    """
    Repository for API key records in DynamoDB.

    Records are found by the content of the raw key: the SHA-256 digest
    selects candidates through the digest index and the bcrypt hash
    confirms the match. The project id embedded in the key is never used
    for lookup.
    """

    def __init__(
        self,
        table_name: str | None = None,
        cache: LookupCache[ApiKeyRecord] | None = None,
    ) -> None:
        """
        Initialize ApiKeyRepository with the api keys table.

        Args:
            table_name: Table name (defaults to settings)
            cache: Lookup cache (creates one from settings if None)
        """
        super().__init__(table_name or settings.dynamodb_table_api_keys)
        self.index_name = settings.api_key_digest_index
        self.cache = cache or LookupCache(settings.lookup_cache_ttl_seconds)

    async def find_by_credential(self, api_key: str) -> Optional[ApiKeyRecord]:
        """
        Find the record matching a raw API key.

        Args:
            api_key: Raw API key as presented by the client

        Returns:
            ApiKeyRecord if a stored key matches, None otherwise
        """
        digest = digest_api_key(api_key)
        cached = self.cache.get(digest)
        if cached is not None:
            return cached

        items = await self.query_index(
            self.index_name,
            "key_digest = :digest",
            {":digest": digest},
        )
        for item in items:
            if verify_api_key(api_key, item.get("key_hash", "")):
                record = ApiKeyRecord(**item)
                self.cache.set(digest, record)
                return record

        return None

    async def increment_usage(self, record: ApiKeyRecord) -> int:
        """
        Atomically count one accepted request against a key.

        Uses a DynamoDB ADD so concurrent increments never lose updates.

        Args:
            record: Record whose usage to increment

        Returns:
            The usage count after the increment
        """
        now = datetime.now(timezone.utc).isoformat()
        attributes = await self.update_item(
            key={"key_id": record.key_id},
            update_expression="ADD usage_count :one SET last_used_at = :now",
            expression_values={":one": 1, ":now": now},
            condition_expression="attribute_exists(key_id)",
        )
        return int(attributes.get("usage_count", 0))

    async def create(self, record: ApiKeyRecord) -> ApiKeyRecord:
        """
        Create a new API key record in DynamoDB.

        Args:
            record: ApiKeyRecord to store

        Returns:
            The created ApiKeyRecord
        """
        await self.put_item(serialize_api_key(record))
        return record

