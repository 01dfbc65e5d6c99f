"""Tests for access tokens and password hashing."""

from datetime import timedelta
from uuid import uuid4

import pytest
from jose import jwt

from rd_prediction.core.config import Settings
from rd_prediction.core.exceptions import AuthenticationException
from rd_prediction.infrastructure.security import JWTService, PasswordHandler


@pytest.fixture
def jwt_service(test_settings: Settings) -> JWTService:
    return JWTService(test_settings)


@pytest.fixture(scope="module")
def password_handler() -> PasswordHandler:
    return PasswordHandler(["bcrypt"])


class TestJWTService:
    def test_token_carries_claims(self, jwt_service):
        user_id = uuid4()

        payload = jwt_service.decode_token(jwt_service.create_access_token(user_id, roles=["user"]))

        assert payload.user_id == user_id
        assert payload.type == "access"
        assert payload.roles == ["user"]
        assert payload.jti
        assert payload.exp > payload.iat

    def test_tokens_are_unique(self, jwt_service):
        user_id = uuid4()
        assert jwt_service.create_access_token(user_id) != jwt_service.create_access_token(user_id)

    def test_expired_token(self, jwt_service):
        token = jwt_service.create_access_token(uuid4(), expires_delta=timedelta(seconds=-10))

        with pytest.raises(AuthenticationException, match="Token has expired"):
            jwt_service.decode_token(token)

    def test_token_signed_with_other_key(self, jwt_service):
        forged = jwt.encode(
            {"sub": str(uuid4()), "type": "access", "iat": 0, "exp": 4102444800},
            "some-other-secret",
            algorithm="HS256",
        )

        with pytest.raises(AuthenticationException, match="Invalid token"):
            jwt_service.decode_token(forged)

    def test_garbage_token(self, jwt_service):
        with pytest.raises(AuthenticationException, match="Invalid token"):
            jwt_service.decode_token("not.a.token")

    def test_wrong_token_type(self, jwt_service):
        token = jwt.encode(
            {"sub": str(uuid4()), "type": "refresh", "iat": 0, "exp": 4102444800},
            jwt_service.secret_key,
            algorithm=jwt_service.algorithm,
        )

        with pytest.raises(AuthenticationException, match="Invalid token type"):
            jwt_service.decode_token(token)

    def test_subject_must_be_a_user_id(self, jwt_service):
        token = jwt_service.create_access_token("not-a-uuid")

        with pytest.raises(AuthenticationException, match="Invalid token"):
            jwt_service.decode_token(token)


class TestPasswordHandler:
    def test_hash_and_verify(self, password_handler):
        hashed = password_handler.get_password_hash("s3cret-pass")

        assert hashed != "s3cret-pass"
        assert password_handler.verify_password("s3cret-pass", hashed)
        assert not password_handler.verify_password("wrong-pass", hashed)

    def test_malformed_hash_does_not_verify(self, password_handler):
        assert password_handler.verify_password("anything", "not-a-real-hash") is False
