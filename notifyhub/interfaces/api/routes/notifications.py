"""Endpoints and websocket handler for realtime notifications."""

from __future__ import annotations

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    Request,
    Response,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from sqlalchemy.orm import Session

from notifyhub.application.channels import DispatchScheduler
from notifyhub.application.use_cases.notifications import (
    acknowledge_notifications,
    count_unread,
    delete_notification as delete_notification_uc,
    delete_recipient_notifications,
    get_notification as get_notification_uc,
    list_notifications as list_notifications_uc,
    list_recipient_notifications,
    list_unread_notifications,
    mark_all_as_read,
    mark_as_read,
)
from notifyhub.application.use_cases.push_subscriptions import (
    get_user_subscriptions,
    remove_subscription,
    save_subscription,
)
from notifyhub.domain.entities import (
    Notification,
    NotificationPriority,
    NotificationType,
    PushSubscription,
    PushSubscriptionKeys,
)
from notifyhub.domain.exceptions import NotificationNotFoundError
from notifyhub.infrastructure.database import get_tenant_router, validate_tenant_id
from notifyhub.infrastructure.notifications import (
    RealtimeEventPublisher,
    notification_manager,
    serialize_notification,
    user_room,
)
from notifyhub.interfaces.api.dependencies import (
    get_current_user_id,
    get_publisher,
    get_scheduler,
    get_tenant_db,
    resolve_current_user_id,
)
from notifyhub.interfaces.api.schemas import (
    NotificationBulkResult,
    NotificationCountRead,
    NotificationPageRead,
    NotificationRead,
    PushPublicKeyRead,
    PushSubscriptionCreate,
    PushSubscriptionKeysPayload,
    PushSubscriptionList,
    PushSubscriptionRead,
    PushSubscriptionResponse,
    PushUnsubscribeResponse,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead(
        id=notification.id or "",
        title=notification.title,
        message=notification.message,
        type=notification.type,
        priority=notification.priority,
        entity_id=notification.entity_id,
        entity_type=notification.entity_type,
        metadata=notification.metadata or {},
        is_read=notification.is_read,
        email_subject=notification.email_subject,
        created_at=notification.created_at,
        updated_at=notification.updated_at,
    )


def _subscription_to_schema(subscription: PushSubscription) -> PushSubscriptionRead:
    return PushSubscriptionRead(
        id=subscription.id or "",
        user_id=subscription.user_id,
        endpoint=subscription.endpoint,
        keys=PushSubscriptionKeysPayload(
            p256dh=subscription.keys.p256dh, auth=subscription.keys.auth
        ),
        user_agent=subscription.user_agent,
        device_id=subscription.device_id,
        created_at=subscription.created_at,
        updated_at=subscription.updated_at,
    )


def _not_found(exc: NotificationNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.get("/", response_model=NotificationPageRead)
def list_notifications(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    is_read: bool | None = Query(default=None),
    type: NotificationType | None = Query(default=None),
    priority: NotificationPriority | None = Query(default=None),
    db: Session = Depends(get_tenant_db),
    user_id: str = Depends(get_current_user_id),
) -> NotificationPageRead:
    """Return one page of the caller's notifications, newest first."""

    result = list_notifications_uc(
        db,
        entity_id=user_id,
        page=page,
        limit=limit,
        is_read=is_read,
        notification_type=type,
        priority=priority,
    )
    return NotificationPageRead(
        data=[_notification_to_schema(item) for item in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
        last_page=result.last_page,
        has_next_page=result.has_next_page,
        has_prev_page=result.has_prev_page,
    )


@router.get("/unread-count", response_model=NotificationCountRead)
def get_unread_count(
    db: Session = Depends(get_tenant_db),
    user_id: str = Depends(get_current_user_id),
) -> NotificationCountRead:
    return NotificationCountRead(count=count_unread(db, user_id))


@router.put("/read-all", response_model=NotificationBulkResult)
def read_all_notifications(
    db: Session = Depends(get_tenant_db),
    user_id: str = Depends(get_current_user_id),
    publisher: RealtimeEventPublisher = Depends(get_publisher),
) -> NotificationBulkResult:
    """Mark every unread notification of the caller as read."""

    count = mark_all_as_read(db, user_id, publisher=publisher)
    return NotificationBulkResult(
        count=count, message=f"{count} notifications marked as read"
    )


@router.post(
    "/push/subscribe",
    response_model=PushSubscriptionResponse,
    status_code=status.HTTP_201_CREATED,
)
def subscribe_to_push(
    payload: PushSubscriptionCreate,
    request: Request,
    db: Session = Depends(get_tenant_db),
    user_id: str = Depends(get_current_user_id),
) -> PushSubscriptionResponse:
    """Register the browser subscription of the caller."""

    try:
        subscription = save_subscription(
            db,
            user_id,
            endpoint=payload.endpoint,
            keys=PushSubscriptionKeys(p256dh=payload.keys.p256dh, auth=payload.keys.auth),
            user_agent=payload.user_agent or request.headers.get("user-agent"),
            device_id=payload.device_id,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return PushSubscriptionResponse(
        message="Push subscription saved",
        subscription=_subscription_to_schema(subscription),
    )


@router.delete("/push/unsubscribe", response_model=PushUnsubscribeResponse)
def unsubscribe_from_push(
    endpoint: str = Query(..., min_length=1),
    db: Session = Depends(get_tenant_db),
    user_id: str = Depends(get_current_user_id),
) -> PushUnsubscribeResponse:
    removed = remove_subscription(db, user_id, endpoint)
    message = "Push subscription removed" if removed else "Push subscription not found"
    return PushUnsubscribeResponse(message=message, removed=removed)


@router.get("/push/subscriptions", response_model=PushSubscriptionList)
def list_push_subscriptions(
    db: Session = Depends(get_tenant_db),
    user_id: str = Depends(get_current_user_id),
) -> PushSubscriptionList:
    subscriptions = get_user_subscriptions(db, user_id)
    return PushSubscriptionList(
        subscriptions=[_subscription_to_schema(item) for item in subscriptions],
        count=len(subscriptions),
    )


@router.get("/push/public-key", response_model=PushPublicKeyRead)
def get_push_public_key(
    scheduler: DispatchScheduler = Depends(get_scheduler),
) -> PushPublicKeyRead:
    """Expose the VAPID public key browsers need to subscribe."""

    return PushPublicKeyRead(public_key=scheduler.dispatcher.push.public_key)


@router.get("/user/{recipient_id}", response_model=list[NotificationRead])
def list_notifications_for_user(
    recipient_id: str,
    db: Session = Depends(get_tenant_db),
    _: str = Depends(get_current_user_id),
) -> list[NotificationRead]:
    notifications = list_recipient_notifications(db, entity_id=recipient_id)
    return [_notification_to_schema(item) for item in notifications]


@router.delete("/user/{recipient_id}", response_model=NotificationBulkResult)
def delete_notifications_for_user(
    recipient_id: str,
    db: Session = Depends(get_tenant_db),
    _: str = Depends(get_current_user_id),
) -> NotificationBulkResult:
    count = delete_recipient_notifications(db, recipient_id)
    return NotificationBulkResult(count=count, message=f"{count} notifications deleted")


@router.get("/{notification_id}", response_model=NotificationRead)
def get_notification(
    notification_id: str,
    db: Session = Depends(get_tenant_db),
    _: str = Depends(get_current_user_id),
) -> NotificationRead:
    try:
        notification = get_notification_uc(db, notification_id)
    except NotificationNotFoundError as exc:
        raise _not_found(exc) from exc
    return _notification_to_schema(notification)


@router.put("/{notification_id}/read", response_model=NotificationRead)
def read_notification(
    notification_id: str,
    db: Session = Depends(get_tenant_db),
    _: str = Depends(get_current_user_id),
    publisher: RealtimeEventPublisher = Depends(get_publisher),
) -> NotificationRead:
    try:
        notification = mark_as_read(db, notification_id, publisher=publisher)
    except NotificationNotFoundError as exc:
        raise _not_found(exc) from exc
    return _notification_to_schema(notification)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notification_id: str,
    db: Session = Depends(get_tenant_db),
    _: str = Depends(get_current_user_id),
) -> Response:
    try:
        delete_notification_uc(db, notification_id)
    except NotificationNotFoundError as exc:
        raise _not_found(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _acknowledge(tenant_id: str | None, user_id: str, ids: list[object]) -> None:
    notification_ids = [item for item in ids if isinstance(item, str)]
    with get_tenant_router().session_scope(tenant_id) as session:
        acknowledge_notifications(session, user_id, notification_ids)


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint that streams notifications to the authenticated user."""

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=1008)
        return

    tenant_id = websocket.query_params.get("tenant") or None
    try:
        user_id = resolve_current_user_id(token)
        if tenant_id is not None:
            validate_tenant_id(tenant_id)
        with get_tenant_router().session_scope(tenant_id) as session:
            pending_notifications = list_unread_notifications(session, user_id)
    except (HTTPException, ValueError):
        await websocket.close(code=1008)
        return

    room = user_room(user_id)
    await notification_manager.join(room, websocket)
    try:
        if pending_notifications:
            await websocket.send_json(
                {
                    "type": "init",
                    "data": [serialize_notification(n) for n in pending_notifications],
                }
            )
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list) and ids:
                    _acknowledge(tenant_id, user_id, ids)
                continue
    except WebSocketDisconnect:
        notification_manager.leave(room, websocket)
    except Exception:
        notification_manager.leave(room, websocket)
        raise
