import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import JSONResponse

from app.core.errors import UpstreamError, error_body
from app.schemas.talkjs import (
    Conversation,
    ConversationListResponse,
    ConversationResponse,
    ParticipantRequest,
)
from app.services.talkjs_client import TalkJSClient, get_talkjs_client, quote_segment

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get(
    "/conversations",
    response_model=ConversationListResponse,
    response_model_exclude_unset=True,
)
async def list_conversations(
    key_type: Optional[str] = Query(default=None, alias="keyType"),
    talkjs: TalkJSClient = Depends(get_talkjs_client),
):
    """Lista todas las conversaciones, con su último mensaje si lo hay."""
    data = await talkjs.call("/conversations", "GET", key_type)
    conversations = [Conversation.from_talkjs(conv) for conv in (data or {}).get("data") or []]
    return ConversationListResponse(data=conversations)


@router.put("/conversations/{conversation_id}/participants/{user_id}")
async def upsert_participant(
    conversation_id: str,
    user_id: str,
    payload: Optional[ParticipantRequest] = Body(default=None),
    key_type: Optional[str] = Query(default=None, alias="keyType"),
    talkjs: TalkJSClient = Depends(get_talkjs_client),
):
    """Agrega o actualiza un participante (access / notify) de una conversación."""
    body = payload.model_dump(exclude_none=True) if payload else {}
    try:
        data = await talkjs.call(
            f"/conversations/{quote_segment(conversation_id)}/participants/{quote_segment(user_id)}",
            "PUT",
            key_type,
            body,
        )
    except UpstreamError as e:
        logger.error(
            "Error agregando/actualizando participante %s en conversación %s: %s",
            user_id, conversation_id, e.message,
        )
        raise
    return JSONResponse(status_code=200, content=data)


@router.delete("/conversations/{conversation_id}/participants/{user_id}")
async def remove_participant(
    conversation_id: str,
    user_id: str,
    key_type: Optional[str] = Query(default=None, alias="keyType"),
    talkjs: TalkJSClient = Depends(get_talkjs_client),
):
    """Quita un participante de una conversación."""
    try:
        data = await talkjs.call(
            f"/conversations/{quote_segment(conversation_id)}/participants/{quote_segment(user_id)}",
            "DELETE",
            key_type,
        )
    except UpstreamError as e:
        logger.error(
            "Error quitando participante %s de conversación %s: %s",
            user_id, conversation_id, e.message,
        )
        raise
    # TalkJS puede responder 204 sin cuerpo
    return JSONResponse(status_code=200, content=data)


@router.get(
    "/conversations/{conversation_id}",
    response_model=ConversationResponse,
    response_model_exclude_unset=True,
    responses={404: {"description": "Conversación no encontrada"}},
)
async def get_conversation(
    conversation_id: str,
    key_type: Optional[str] = Query(default=None, alias="keyType"),
    talkjs: TalkJSClient = Depends(get_talkjs_client),
):
    """Detalle de una conversación y su último mensaje."""
    try:
        data = await talkjs.call(f"/conversations/{quote_segment(conversation_id)}", "GET", key_type)
    except UpstreamError as e:
        logger.error("Error obteniendo conversación %s: %s", conversation_id, e.message)
        if e.is_not_found:
            return JSONResponse(
                status_code=404,
                content=error_body(f"Conversación con ID {conversation_id} no encontrada."),
            )
        raise

    if not isinstance(data, dict):
        return JSONResponse(
            status_code=404,
            content=error_body("Conversación no encontrada o datos inválidos."),
        )
    return ConversationResponse(data=Conversation.from_talkjs(data))
