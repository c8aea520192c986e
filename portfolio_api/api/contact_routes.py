"""Contact message endpoints.

POST is the public contact form; listing, updating and deleting are
admin-only. PUT and DELETE accept either a single ``id`` or an ``ids``
array for bulk operations.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Request

from portfolio_api.api.deps import get_contact_service
from portfolio_api.core.exceptions import validation_error
from portfolio_api.core.rate_limit_config import RATE_LIMITS, limiter
from portfolio_api.core.security import require_admin
from portfolio_api.services.contact_service import ContactService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/admin/contact-messages", tags=["contact"])


def _id_list(value: Any) -> List[str]:
    if not isinstance(value, list) or not all(isinstance(i, str) for i in value):
        raise validation_error("ids must be an array of strings", field="ids")
    if not value:
        raise validation_error("IDs array must not be empty", field="ids")
    return value


@router.get("", dependencies=[Depends(require_admin)])
async def list_messages(contacts: ContactService = Depends(get_contact_service)):
    return await contacts.list_messages()


@router.post("", status_code=201)
@limiter.limit(RATE_LIMITS["contact_create"])
async def create_message(
    request: Request,
    payload: Any = Body(...),
    contacts: ContactService = Depends(get_contact_service),
):
    return await contacts.create_message(payload)


@router.put("", dependencies=[Depends(require_admin)])
async def update_messages(
    body: Dict[str, Any] = Body(...),
    contacts: ContactService = Depends(get_contact_service),
):
    if body.get("ids") is not None:
        ids = _id_list(body["ids"])

        if "status" in body:
            return await contacts.bulk_update_status(ids, body["status"])
        if "isImportant" in body:
            return await contacts.bulk_set_important(ids, body["isImportant"])

        raise validation_error("Either status or isImportant is required for bulk operations")

    message_id = body.get("id")
    if not message_id or not isinstance(message_id, str):
        raise validation_error("Message id or ids array is required", field="id")

    if "status" in body:
        return await contacts.update_status(message_id, body["status"])
    if "isImportant" in body:
        return await contacts.set_important(message_id, body["isImportant"])

    raise validation_error("Either status or isImportant must be provided")


@router.delete("", dependencies=[Depends(require_admin)])
async def delete_messages(
    id: Optional[str] = Query(None),
    body: Optional[Dict[str, Any]] = Body(None),
    contacts: ContactService = Depends(get_contact_service),
):
    if body and body.get("ids") is not None:
        deleted = await contacts.bulk_delete(_id_list(body["ids"]))
        return {"success": True, "deletedCount": deleted}

    if not id:
        raise validation_error("Message id or ids array is required", field="id")

    await contacts.delete_message(id)
    return {"success": True}
