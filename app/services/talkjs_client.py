import logging
import urllib.parse
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

import httpx

from app.core.config import Settings, settings
from app.core.errors import UpstreamError
from app.schemas.talkjs import KeyType
from app.services.talkjs_auth import TalkJSTokenMinter

logger = logging.getLogger(__name__)

# Máximo que acepta TalkJS en /users
USERS_PAGE_SIZE = 100

_BODY_METHODS = {"POST", "PUT", "PATCH"}


@dataclass
class UsersFetchResult:
    users: List[Dict[str, Any]] = field(default_factory=list)
    complete: bool = True


def quote_segment(value: str) -> str:
    return urllib.parse.quote(str(value), safe="")


class TalkJSClient:
    def __init__(self, settings: Settings, minter: Optional[TalkJSTokenMinter] = None):
        self.base_url = settings.TALKJS_API_BASE_URL.rstrip("/")
        self.timeout = settings.TALKJS_TIMEOUT_SECONDS
        self.minter = minter or TalkJSTokenMinter(settings)

    def build_url(self, app_id: str, endpoint: str) -> str:
        return f"{self.base_url}/v1/{app_id}{endpoint}"

    async def call(
        self,
        endpoint: str,
        method: str = "GET",
        key_type: Union[KeyType, str, None] = KeyType.DEV,
        body: Optional[Any] = None,
    ) -> Any:
        """
        Llama a cualquier endpoint de TalkJS con un token recién firmado.
        endpoint: sufijo que va después de /v1/{appId}, ej: "/conversations".
        """
        env = KeyType.resolve(key_type)
        method = method.upper()
        creds = self.minter.credentials_for(env)
        token = self.minter.sign(creds)
        url = self.build_url(creds.app_id, endpoint)
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }
        payload = body if method in _BODY_METHODS else None

        logger.info("TalkJS %s %s (env=%s)", method, endpoint, env.value)
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.request(method, url, headers=headers, json=payload)
        except httpx.HTTPError as e:
            logger.error("Error llamando a TalkJS %s %s: %s", method, endpoint, e)
            raise UpstreamError(f"Error de conexión con TalkJS: {e}") from e

        if not resp.is_success:
            try:
                data = resp.json()
            except ValueError:
                data = resp.text or None
            logger.error("TalkJS error (%s) en %s %s: %s", resp.status_code, method, endpoint, data)
            raise UpstreamError(
                f"Request failed with status code {resp.status_code}",
                status=resp.status_code,
                body=data,
            )

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            # Sin status: un 2xx con cuerpo inválido no se reenvía como éxito
            logger.error("TalkJS respondió %s sin JSON válido en %s %s", resp.status_code, method, endpoint)
            raise UpstreamError("Respuesta de TalkJS no es JSON válido", body=resp.text) from e

    async def fetch_all_users(self, key_type: Union[KeyType, str, None] = KeyType.DEV) -> UsersFetchResult:
        """
        Recorre /users con paginación por cursor (startingAfter) hasta agotar.
        Si falla una página se corta y se devuelve lo acumulado (complete=False).
        """
        env = KeyType.resolve(key_type)
        # Credenciales faltantes abortan el request; no se tratan como página fallida
        self.minter.credentials_for(env)

        result = UsersFetchResult()
        starting_after: Optional[str] = None
        logger.info("Obteniendo todos los usuarios (env=%s)", env.value)

        while True:
            params = {"limit": USERS_PAGE_SIZE}
            if starting_after:
                params["startingAfter"] = starting_after
            endpoint = f"/users?{urllib.parse.urlencode(params)}"

            try:
                page = await self.call(endpoint, "GET", env)
            except UpstreamError as e:
                logger.warning("Error al obtener página de usuarios, se corta la paginación: %s", e.message)
                result.complete = False
                break

            users = (page or {}).get("data") or []
            if not users:
                logger.info("Página sin usuarios; fin de la paginación")
                break

            result.users.extend(users)
            starting_after = users[-1].get("id")
            logger.info("Usuarios acumulados: %d (startingAfter=%s)", len(result.users), starting_after)

            if len(users) < USERS_PAGE_SIZE:
                break
            if not starting_after:
                logger.warning("El último usuario de la página no tiene id; no se puede seguir paginando")
                result.complete = False
                break

        logger.info("Total de usuarios obtenidos: %d", len(result.users))
        return result

    async def list_all_users(self, key_type: Union[KeyType, str, None] = KeyType.DEV) -> List[Dict[str, Any]]:
        result = await self.fetch_all_users(key_type)
        return result.users


def get_talkjs_client() -> TalkJSClient:
    return TalkJSClient(settings)
