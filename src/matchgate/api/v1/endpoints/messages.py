# src/matchgate/api/v1/endpoints/messages.py
"""Conversation endpoints for the matchgate API."""

from fastapi import APIRouter, Query, status
from sqlalchemy.orm import Session

from matchgate.api.v1.dependencies import (
    CurrentIdentityDep,
    ResolverDep,
    SessionDep,
    resolve_or_raise,
)
from matchgate.core.errors import AccessDenied
from matchgate.models import ConversationMessage, MatchRecord, pair_key
from matchgate.schemas.message import MessageCreate, MessageResponse
from matchgate.services.conversation import ConversationService
from matchgate.services.identity import IdentityResolver
from matchgate.services.relationship import RelationshipScope

router = APIRouter(prefix="/conversations", tags=["messages"])


def _get_match(db: Session, resolver: IdentityResolver, viewer: str, opaque_id: str) -> MatchRecord:
    """Return the match between the viewer and the resolved counterpart."""
    counterpart = resolve_or_raise(resolver, opaque_id, RelationshipScope.matched(db, viewer))
    match = db.get(MatchRecord, pair_key(viewer, counterpart))
    if match is None:
        raise AccessDenied("conversation")
    return match


def _serialize(
    service: ConversationService,
    resolver: IdentityResolver,
    match: MatchRecord,
    message: ConversationMessage,
    viewer: str,
) -> MessageResponse:
    return MessageResponse(
        id=message.id,
        sender_id=resolver.opaque_for(message.sender),
        from_self=message.sender == viewer,
        text=service.render(match, message),
        created_at=message.created_at,
    )


@router.post(
    "/{opaque_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_message(
    opaque_id: str,
    payload: MessageCreate,
    current_identity: CurrentIdentityDep,
    db: SessionDep,
    resolver: ResolverDep,
) -> MessageResponse:
    """Encrypt and store a message for a match."""
    match = _get_match(db, resolver, current_identity, opaque_id)
    service = ConversationService(db)
    message = service.send(match, current_identity, payload.text)
    return _serialize(service, resolver, match, message, current_identity)


@router.get("/{opaque_id}/messages", response_model=list[MessageResponse])
async def get_messages(
    opaque_id: str,
    current_identity: CurrentIdentityDep,
    db: SessionDep,
    resolver: ResolverDep,
    limit: int = Query(100, ge=1, le=500),
) -> list[MessageResponse]:
    """Return the conversation with a match, decrypted for display."""
    match = _get_match(db, resolver, current_identity, opaque_id)
    service = ConversationService(db)
    return [
        _serialize(service, resolver, match, message, current_identity)
        for message in service.history(match, limit=limit)
    ]
