from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import ValidationError
from app.core.role_guards import RequestContext, feature_guard, optional_user, require_admin
from app.models.notification import DeviceToken, Notification
from app.schemas.catalog import MessageOut
from app.schemas.misc import DeviceTokenIn, NotificationIn, NotificationOut, NotificationSentOut
from app.services.push import PushyGateway, get_push_gateway

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/notifications",
    tags=["notifications"],
    dependencies=[Depends(feature_guard("ENABLE_NOTIFICATIONS"))],
)


@router.post("/send", response_model=NotificationSentOut)
def send_notification(
    payload: NotificationIn,
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
    push: PushyGateway = Depends(get_push_gateway),
) -> NotificationSentOut:
    tokens = list(db.scalars(select(DeviceToken.token).order_by(DeviceToken.id)).all())
    if not tokens:
        raise ValidationError("No registered tokens found")

    results = push.send_many(tokens, payload.title, payload.body)

    db.add(Notification(title=payload.title, body=payload.body))
    db.commit()

    logger.info(f"Push '{payload.title}' sent to {len(results)} devices")
    return NotificationSentOut(message="Notifications sent successfully", results=results)


@router.get("/", response_model=List[NotificationOut])
def list_notifications(db: Session = Depends(get_db)) -> List[NotificationOut]:
    rows = db.scalars(select(Notification).order_by(desc(Notification.created_at), desc(Notification.id))).all()
    return [NotificationOut.model_validate(n) for n in rows]


@router.post("/tokens", response_model=MessageOut, status_code=201)
def store_token(
    payload: DeviceTokenIn,
    ctx: Optional[RequestContext] = Depends(optional_user),
    db: Session = Depends(get_db),
) -> MessageOut:
    token = payload.token.strip()
    row = db.scalar(select(DeviceToken).where(DeviceToken.token == token))
    if row:
        # повторная регистрация устройства — только привязка к пользователю
        if ctx is not None:
            row.user_id = ctx.user_id
    else:
        db.add(DeviceToken(token=token, user_id=ctx.user_id if ctx else None))
    db.commit()
    return MessageOut(message="Token stored successfully")
