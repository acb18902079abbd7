import json
import logging
import os
import time
import urllib.request
from typing import Any, Dict, List

from dotenv import load_dotenv
from fastapi import HTTPException, Request, status
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError, JWTError

load_dotenv()

logger = logging.getLogger("auth")

# === Cognito Configuration ===
COGNITO_REGION = os.getenv("COGNITO_REGION", "eu-north-1")
COGNITO_USER_POOL_ID = os.getenv("COGNITO_USER_POOL_ID")
COGNITO_APP_CLIENT_ID = os.getenv("COGNITO_APP_CLIENT_ID")

COGNITO_ISSUER = f"https://cognito-idp.{COGNITO_REGION}.amazonaws.com/{COGNITO_USER_POOL_ID}"
COGNITO_JWKS_URL = f"{COGNITO_ISSUER}/.well-known/jwks.json"

JWKS_TTL_SECONDS = 60 * 60 * 24

# Cognito's public keys, refreshed once a day
jwks_cache = {
    "keys": [],
    "expiration_time": 0,
}


def get_jwks() -> List[Dict[str, Any]]:
    """Return Cognito's JSON Web Key Set, fetching it when the cached copy has expired."""
    if jwks_cache["keys"] and time.time() < jwks_cache["expiration_time"]:
        return jwks_cache["keys"]

    logger.info(f"Fetching JWKS from: {COGNITO_JWKS_URL}")
    try:
        with urllib.request.urlopen(COGNITO_JWKS_URL, timeout=10) as response:
            jwks_data = json.loads(response.read().decode("utf-8"))
    except (OSError, ValueError) as e:
        logger.error(f"Error fetching JWKS: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not fetch Cognito public keys for token validation."
        )

    jwks_cache["keys"] = jwks_data["keys"]
    jwks_cache["expiration_time"] = time.time() + JWKS_TTL_SECONDS
    return jwks_cache["keys"]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def get_current_user(request: Request) -> Dict[str, Any]:
    """
    FastAPI dependency validating the Cognito JWT from the Authorization header.

    Returns the token claims. Ledger routes declare it through `dependencies=`;
    tests override it.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise _unauthorized("Authorization header is missing")

    # The token is expected to be in the format "Bearer <token>"
    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise _unauthorized("Invalid authorization header format")

    token = parts[1]
    try:
        unverified_header = jwt.get_unverified_header(token)
    except JWTError:
        raise _unauthorized("Invalid token header")

    rsa_key = next((key for key in get_jwks() if key.get("kid") == unverified_header.get("kid")), None)
    if rsa_key is None:
        raise _unauthorized("Unable to find a matching public key to verify the token")

    try:
        return jwt.decode(
            token,
            rsa_key,
            algorithms=["RS256"],
            audience=COGNITO_APP_CLIENT_ID,
            issuer=COGNITO_ISSUER,
        )
    except ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except JWTClaimsError as e:
        raise _unauthorized(f"Invalid token claims: {e}")
    except JWTError as e:
        raise _unauthorized(f"Token validation failed: {e}")


def get_user_identifier(user: Dict[str, Any]) -> str:
    """Best human-readable id in the token claims, for log lines."""
    return user.get("email") or user.get("cognito:username") or user.get("username") or user.get("sub") or "unknown"
