"""
Contact form: anonymous submissions, read back by admins.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from souq.api.v1.deps import get_db
from souq.models.contact import ContactMessage
from souq.schemas.common import SuccessResponse
from souq.schemas.contact import ContactCreate

router = APIRouter(prefix="/contact", tags=["contact"])
logger = logging.getLogger(__name__)


@router.post("", response_model=SuccessResponse)
async def send_contact_message(
    body: ContactCreate,
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    message = ContactMessage(**body.model_dump())
    db.add(message)
    await db.commit()
    logger.info("Contact message %d received", message.id)
    return SuccessResponse(message="Message received")
