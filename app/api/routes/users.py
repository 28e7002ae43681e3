import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import JSONResponse

from app.core.errors import UpstreamError, error_body
from app.schemas.talkjs import KeyType, UserConversationsResponse, UserListResponse
from app.services.talkjs_client import TalkJSClient, get_talkjs_client, quote_segment

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/users/{user_id}/conversations", response_model=UserConversationsResponse)
async def list_user_conversations(
    user_id: str,
    key_type: Optional[str] = Query(default=None, alias="keyType"),
    talkjs: TalkJSClient = Depends(get_talkjs_client),
):
    """Conversaciones en las que participa un usuario (datos crudos de TalkJS)."""
    try:
        data = await talkjs.call(f"/users/{quote_segment(user_id)}/conversations", "GET", key_type)
    except UpstreamError as e:
        logger.error("Error obteniendo conversaciones del usuario %s: %s", user_id, e.message)
        if e.is_not_found:
            return JSONResponse(
                status_code=404,
                content=error_body(f"Conversaciones del usuario con ID {user_id} no encontradas."),
            )
        raise
    return UserConversationsResponse(conversations=(data or {}).get("data") or [])


@router.get("/v1/{app_id}/users/{user_id}")
async def get_user(
    app_id: str,
    user_id: str,
    talkjs: TalkJSClient = Depends(get_talkjs_client),
):
    """
    Detalle de un usuario. El segmento {app_id} se usa como selector de
    entorno ('prod' -> prod, cualquier otro -> dev), no como appId real.
    """
    try:
        return await talkjs.call(f"/users/{quote_segment(user_id)}", "GET", app_id)
    except UpstreamError as e:
        logger.error("Error en /v1/%s/users/%s: %s", app_id, user_id, e.message)
        raise


@router.get("/users", response_model=UserListResponse)
async def list_users(
    response: Response,
    key_type: Optional[str] = Query(default=None, alias="keyType"),
    talkjs: TalkJSClient = Depends(get_talkjs_client),
):
    """
    Lista completa de usuarios, recorriendo la paginación de TalkJS.
    Si una página falla se devuelve lo obtenido hasta ese momento y el
    header X-Users-Complete queda en "false".
    """
    logger.info("Obteniendo usuarios para el entorno: %s", KeyType.resolve(key_type).value)
    result = await talkjs.fetch_all_users(key_type)
    response.headers["X-Users-Complete"] = "true" if result.complete else "false"
    return UserListResponse(users=result.users)
