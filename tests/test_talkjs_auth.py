"""Tests del firmado de tokens de aplicación de TalkJS."""

from __future__ import annotations

import jwt
import pytest

from conftest import DEV_APP_ID, DEV_SECRET, PROD_APP_ID, PROD_SECRET, make_settings

from app.core.errors import ConfigurationError
from app.schemas.talkjs import KeyType
from app.services.talkjs_auth import TOKEN_TTL_SECONDS, TalkJSTokenMinter


def _decode(token: str, secret: str) -> dict:
    return jwt.decode(token, secret, algorithms=["HS256"], options={"verify_exp": False})


def test_dev_token_claims() -> None:
    minter = TalkJSTokenMinter(make_settings())

    claims = _decode(minter.mint(KeyType.DEV, now=1_700_000_000), DEV_SECRET)

    assert claims["tokenType"] == "app"
    assert claims["iss"] == DEV_APP_ID
    assert claims["iat"] == 1_700_000_000
    assert claims["exp"] - claims["iat"] == TOKEN_TTL_SECONDS == 30


def test_prod_token_uses_prod_credentials() -> None:
    minter = TalkJSTokenMinter(make_settings())

    token = minter.mint("prod")
    claims = jwt.decode(token, PROD_SECRET, algorithms=["HS256"], issuer=PROD_APP_ID)

    assert claims["exp"] - claims["iat"] == 30
    with pytest.raises(jwt.InvalidSignatureError):
        _decode(token, DEV_SECRET)


@pytest.mark.parametrize("key_type", [None, "", "staging", "PROD", "devApp123"])
def test_unknown_environment_behaves_like_dev(key_type: object) -> None:
    minter = TalkJSTokenMinter(make_settings())

    assert minter.credentials_for(key_type) == minter.credentials_for(KeyType.DEV)
    assert minter.mint(key_type, now=100) == minter.mint(KeyType.DEV, now=100)


@pytest.mark.parametrize(
    ("overrides", "key_type"),
    [
        ({"TALKJS_APP_ID_DEV": ""}, "dev"),
        ({"TALKJS_SECRET_KEY_DEV": ""}, "dev"),
        ({"TALKJS_APP_ID_PRO": ""}, "prod"),
        ({"TALKJS_SECRET_KEY_PRO": ""}, "prod"),
        ({"TALKJS_SECRET_KEY_DEV": ""}, "anything-else"),
    ],
)
def test_missing_credentials_raise_configuration_error(overrides: dict, key_type: str) -> None:
    minter = TalkJSTokenMinter(make_settings(**overrides))

    with pytest.raises(ConfigurationError) as exc_info:
        minter.mint(key_type)

    assert exc_info.value.status_code == 500


def test_missing_prod_credentials_do_not_affect_dev() -> None:
    minter = TalkJSTokenMinter(make_settings(TALKJS_APP_ID_PRO="", TALKJS_SECRET_KEY_PRO=""))

    claims = _decode(minter.mint("dev"), DEV_SECRET)

    assert claims["iss"] == DEV_APP_ID


def test_sign_uses_resolved_credentials() -> None:
    minter = TalkJSTokenMinter(make_settings())
    creds = minter.credentials_for("prod")

    claims = _decode(minter.sign(creds, now=50), PROD_SECRET)

    assert claims == {"tokenType": "app", "iss": PROD_APP_ID, "iat": 50, "exp": 80}
