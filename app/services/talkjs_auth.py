import logging
import time
from dataclasses import dataclass
from typing import Optional, Union

import jwt

from app.core.config import Settings
from app.core.errors import ConfigurationError
from app.schemas.talkjs import KeyType

logger = logging.getLogger(__name__)

TOKEN_TTL_SECONDS = 30
TOKEN_ALGORITHM = "HS256"


@dataclass(frozen=True)
class TalkJSCredentials:
    app_id: str
    secret_key: str


class TalkJSTokenMinter:
    """
    Firma tokens de aplicación para la REST API de TalkJS.
    Se genera uno nuevo por cada llamada; nunca se cachean.
    """

    def __init__(self, settings: Settings):
        self._credentials = {
            KeyType.DEV: TalkJSCredentials(
                app_id=settings.TALKJS_APP_ID_DEV,
                secret_key=settings.TALKJS_SECRET_KEY_DEV,
            ),
            KeyType.PROD: TalkJSCredentials(
                app_id=settings.TALKJS_APP_ID_PRO,
                secret_key=settings.TALKJS_SECRET_KEY_PRO,
            ),
        }

    def credentials_for(self, key_type: Union[KeyType, str, None]) -> TalkJSCredentials:
        env = KeyType.resolve(key_type)
        creds = self._credentials[env]
        if not creds.app_id or not creds.secret_key:
            logger.error("Claves de TalkJS mal configuradas para el entorno %s", env.value)
            raise ConfigurationError(f"API keys not configured for {env.value} environment.")
        return creds

    def mint(self, key_type: Union[KeyType, str, None] = KeyType.DEV, now: Optional[int] = None) -> str:
        return self.sign(self.credentials_for(key_type), now=now)

    def sign(self, creds: TalkJSCredentials, now: Optional[int] = None) -> str:
        """Firma con credenciales ya resueltas por credentials_for."""
        issued_at = int(time.time()) if now is None else now
        payload = {
            "tokenType": "app",
            "iss": creds.app_id,
            "iat": issued_at,
            "exp": issued_at + TOKEN_TTL_SECONDS,
        }
        return jwt.encode(payload, creds.secret_key, algorithm=TOKEN_ALGORITHM)
