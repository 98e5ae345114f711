from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from signalpay.core.config import Settings, get_settings
from signalpay.core.security import TokenData, oauth2_scheme, verify_token
from signalpay.services.payment_service import PaymentService

# The payment service is built once at startup (see signalpay.main.lifespan) and
# shared read-only across requests. Tests override this dependency with a
# service wired to a fake gateway.

def get_payment_service(request: Request) -> PaymentService:
    return request.app.state.payment_service

def get_current_user_conditional(
    token: Optional[str] = Depends(oauth2_scheme),
    settings: Settings = Depends(get_settings),
) -> Optional[TokenData]:
    """
    Returns the current user if authentication is enabled and the token is valid.
    If authentication is disabled via settings, returns None.
    """
    if not settings.ENABLE_AUTH:
        return None

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return verify_token(token, settings.JWT_SECRET)

def ensure_same_user(current_user: Optional[TokenData], user_id: Optional[str]) -> None:
    if current_user is not None and current_user.id != user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Token does not match userId")
