# portfolio_api/services/contact_service.py
"""
Contact message handling.

Messages live in one list under ``contact-messages``, newest first.
Unlike the other sections, individual messages are mutated (status and
importance) and deleted. Bulk operations check every id before writing
anything, so a batch either applies completely or not at all.
"""
import logging
import secrets
import string
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from portfolio_api.core.exceptions import not_found_error, validation_error
from portfolio_api.services.kv_store import KeyValueStore
from portfolio_api.services.validation_service import ContentValidator, ValidationResult

logger = logging.getLogger(__name__)

CONTACT_MESSAGES_KEY = "contact-messages"
ID_ALPHABET = string.ascii_lowercase + string.digits
ID_SUFFIX_LENGTH = 9
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

Message = Dict[str, Any]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _raise_if_invalid(result: ValidationResult, field: str = None) -> None:
    if not result.valid:
        raise validation_error(result.message, field=field)


class ContactService:
    """
    CRUD for contact messages.

    Args:
        store: Key-value store
        validator: Content validator
        clock: Returns the current UTC datetime
    """

    def __init__(
        self,
        store: KeyValueStore,
        validator: Optional[ContentValidator] = None,
        clock: Callable[[], datetime] = utc_now
    ):
        self.store = store
        self.validator = validator or ContentValidator()
        self._clock = clock

    def _new_id(self, now: datetime) -> str:
        suffix = "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_SUFFIX_LENGTH))
        millis = (now - EPOCH) // timedelta(milliseconds=1)
        return f"contact-{millis}-{suffix}"

    async def list_messages(self) -> List[Message]:
        return await self.store.read(CONTACT_MESSAGES_KEY) or []

    async def _save(self, messages: List[Message]) -> None:
        await self.store.write(CONTACT_MESSAGES_KEY, messages)

    async def create_message(self, payload: Any) -> Message:
        """
        Store a contact form submission.

        Only name, email, subject and message are taken from the payload;
        id, createdAt, status and isImportant are assigned here.

        Raises:
            ValidationError: If the submission is incomplete or malformed
        """
        _raise_if_invalid(self.validator.validate_contact_message(payload))

        now = self._clock()
        message = {
            "name": payload["name"],
            "email": payload["email"],
            "subject": payload["subject"],
            "message": payload["message"],
            "id": self._new_id(now),
            "createdAt": now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "status": "unread",
            "isImportant": False,
        }

        messages = await self.list_messages()
        messages.insert(0, message)
        await self._save(messages)

        logger.info(f"📨 New contact message {message['id']}")
        return message

    async def _update_one(self, message_id: str, changes: Dict[str, Any]) -> Message:
        messages = await self.list_messages()

        for index, message in enumerate(messages):
            if message.get("id") == message_id:
                messages[index] = {**message, **changes}
                await self._save(messages)
                return messages[index]

        raise not_found_error("Contact message not found", resource=CONTACT_MESSAGES_KEY, missing_ids=[message_id])

    async def _update_many(self, ids: List[str], changes: Dict[str, Any]) -> List[Message]:
        if not ids:
            raise validation_error("IDs array must not be empty", field="ids")

        messages = await self.list_messages()
        existing = {m.get("id") for m in messages}

        missing = [i for i in ids if i not in existing]
        if missing:
            raise not_found_error(
                f"Some messages were not found: {', '.join(missing)}",
                resource=CONTACT_MESSAGES_KEY,
                missing_ids=missing
            )

        wanted = set(ids)
        updated = []
        for index, message in enumerate(messages):
            if message.get("id") in wanted:
                messages[index] = {**message, **changes}
                updated.append(messages[index])

        await self._save(messages)
        return updated

    async def update_status(self, message_id: str, status: str) -> Message:
        _raise_if_invalid(self.validator.validate_status(status), field="status")
        return await self._update_one(message_id, {"status": status})

    async def bulk_update_status(self, ids: List[str], status: str) -> List[Message]:
        _raise_if_invalid(self.validator.validate_status(status), field="status")
        updated = await self._update_many(ids, {"status": status})
        logger.info(f"Marked {len(updated)} contact messages as {status}")
        return updated

    async def set_important(self, message_id: str, is_important: bool) -> Message:
        _raise_if_invalid(self.validator.validate_important_flag(is_important), field="isImportant")
        return await self._update_one(message_id, {"isImportant": is_important})

    async def bulk_set_important(self, ids: List[str], is_important: bool) -> List[Message]:
        _raise_if_invalid(self.validator.validate_important_flag(is_important), field="isImportant")
        updated = await self._update_many(ids, {"isImportant": is_important})
        logger.info(f"Set isImportant={is_important} on {len(updated)} contact messages")
        return updated

    async def delete_message(self, message_id: str) -> None:
        messages = await self.list_messages()
        remaining = [m for m in messages if m.get("id") != message_id]

        if len(remaining) == len(messages):
            raise not_found_error("Contact message not found", resource=CONTACT_MESSAGES_KEY, missing_ids=[message_id])

        await self._save(remaining)
        logger.info(f"🗑️ Deleted contact message {message_id}")

    async def bulk_delete(self, ids: List[str]) -> int:
        """
        Delete every listed message that exists.

        Returns:
            Number of messages deleted

        Raises:
            ValidationError: If ids is empty
            NotFoundError: If none of the ids exist
        """
        if not ids:
            raise validation_error("IDs array must not be empty", field="ids")

        messages = await self.list_messages()
        wanted = set(ids)
        remaining = [m for m in messages if m.get("id") not in wanted]
        deleted = len(messages) - len(remaining)

        if deleted == 0:
            raise not_found_error(
                f"No messages were found with the provided IDs: {', '.join(ids)}",
                resource=CONTACT_MESSAGES_KEY,
                missing_ids=list(ids)
            )

        await self._save(remaining)
        logger.info(f"🗑️ Deleted {deleted} contact messages")
        return deleted
