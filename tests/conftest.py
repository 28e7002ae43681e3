"""Fixtures compartidos: settings con credenciales de prueba y cliente ASGI."""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.config import Settings
from app.main import create_app
from app.services.talkjs_client import TalkJSClient, get_talkjs_client

DEV_APP_ID = "devApp123"
DEV_SECRET = "sk_test_dev_secret"
PROD_APP_ID = "prodApp456"
PROD_SECRET = "sk_live_prod_secret"
TALKJS_HOST = "api.talkjs.com"


def make_settings(**overrides: object) -> Settings:
    values = {
        "TALKJS_APP_ID_DEV": DEV_APP_ID,
        "TALKJS_SECRET_KEY_DEV": DEV_SECRET,
        "TALKJS_APP_ID_PRO": PROD_APP_ID,
        "TALKJS_SECRET_KEY_PRO": PROD_SECRET,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def test_settings() -> Settings:
    return make_settings()


@pytest.fixture
def talkjs_client(test_settings: Settings) -> TalkJSClient:
    return TalkJSClient(test_settings)


@pytest.fixture
async def client(
    talkjs_client: TalkJSClient, tmp_path: Path
) -> AsyncIterator[AsyncClient]:
    app = create_app(make_settings(LOG_DIR=str(tmp_path)))
    app.dependency_overrides[get_talkjs_client] = lambda: talkjs_client

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
