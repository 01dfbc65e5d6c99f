"""
Jose JWT adapter.

Adapts the python-jose library for JWT operations so the rest of the service
never imports jose directly.
"""

from typing import Any, cast

from jose import ExpiredSignatureError, JWTError, jwt

# Re-export common exceptions to avoid direct dependency on jose
__all__ = ["ExpiredSignatureError", "JWTError", "decode", "encode"]


def encode(
    claims: dict[str, Any],
    key: str,
    algorithm: str = "HS256",
    headers: dict[str, Any] | None = None,
) -> str:
    """
    Encode a set of claims into a signed JWT.

    Args:
        claims: Payload to encode
        key: Key to sign the token with
        algorithm: Algorithm to use for signing
        headers: Additional headers to include

    Returns:
        Encoded JWT token as a string
    """
    return cast(str, jwt.encode(claims, key, algorithm=algorithm, headers=headers))


def decode(
    token: str,
    key: str,
    algorithms: list[str] | None = None,
    audience: str | None = None,
    issuer: str | None = None,
) -> dict[str, Any]:
    """
    Decode a JWT and return its claims.

    Raises:
        ExpiredSignatureError: If the token has expired
        JWTError: If the token is otherwise invalid
    """
    if algorithms is None:
        algorithms = ["HS256"]

    options = {
        "verify_signature": True,
        "verify_aud": audience is not None,
        "verify_iss": issuer is not None,
        "verify_exp": True,
        "verify_iat": True,
        "leeway": 0,
    }
    return cast(
        dict[str, Any],
        jwt.decode(
            token,
            key,
            algorithms=algorithms,
            audience=audience,
            issuer=issuer,
            options=options,
        ),
    )
