from typing import Optional
from jose import jwt, JWTError
from fastapi import HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from pydantic import BaseModel

# auto_error is off so the dependency can decide whether a token is required
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token", auto_error=False)

class TokenData(BaseModel):
    id: Optional[str] = None
    email: Optional[str] = None

def _credentials_exception(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )

def verify_token(token: str, secret: str) -> TokenData:
    if not secret:
        raise _credentials_exception()
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=["HS256"],
            options={"verify_aud": False},
        )
    except JWTError:
        raise _credentials_exception()

    user_id: Optional[str] = payload.get("sub")
    if user_id is None:
        raise _credentials_exception()
    return TokenData(id=user_id, email=payload.get("email"))
