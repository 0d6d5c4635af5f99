import logging

import jwt
from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

logger = logging.getLogger(__name__)
security = HTTPBearer()


def decode_token(token: str, secret: str, algorithm: str = "HS256", audience=None) -> dict:
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            audience=audience,
            options={"verify_aud": audience is not None},
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")


def get_current_user_id(request: Request,
                        credentials: HTTPAuthorizationCredentials = Depends(security)) -> str:
    """Resolve the bearer token's subject to the id of a stored user"""
    settings = request.app.state.settings
    payload = decode_token(
        credentials.credentials,
        settings.jwt_secret,
        settings.jwt_algorithm,
        settings.jwt_audience,
    )
    auth0_id = payload.get("sub")
    if not auth0_id:
        raise HTTPException(status_code=401, detail="Invalid token")

    user = request.app.state.users.find_by_auth0_id(auth0_id)
    if not user:
        logger.info(f"No user registered for subject {auth0_id}")
        raise HTTPException(status_code=401, detail="User not found")
    return str(user["_id"])
