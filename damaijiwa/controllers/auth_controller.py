from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from damaijiwa.core.exceptions import AuthenticationError, PersistenceError
from damaijiwa.schemas.base import SuccessResponse
from damaijiwa.schemas.user import MeResponse, AuthUrlResponse
from damaijiwa.services.session_service import SessionBinder, get_session_binder
from damaijiwa.utils.response import success_response, oauth_success_page
import logging

logger = logging.getLogger("auth_controller")

router = APIRouter(tags=["auth"])

# Mounted without the API prefix, the provider redirects here
callback_router = APIRouter(tags=["auth"])

@router.get("/me", response_model=MeResponse)
async def get_me(binder: SessionBinder = Depends(get_session_binder)):
    return MeResponse(user=binder.current_user())

@router.post("/auth/anonymous", response_model=MeResponse)
async def login_anonymous(binder: SessionBinder = Depends(get_session_binder)):
    try:
        user = binder.establish_anonymous()
    except PersistenceError as e:
        raise PersistenceError("Failed to create anonymous session", e.details) from e
    return MeResponse(user=user)

@router.get("/auth/google/url", response_model=AuthUrlResponse)
async def google_auth_url(binder: SessionBinder = Depends(get_session_binder)):
    return AuthUrlResponse(url=binder.authorization_url())

@router.post("/logout", response_model=SuccessResponse)
async def logout(binder: SessionBinder = Depends(get_session_binder)):
    binder.terminate()
    return success_response()

@callback_router.get("/auth/google/callback")
async def google_callback(code: str = None, binder: SessionBinder = Depends(get_session_binder)):
    if not code:
        return PlainTextResponse("No code provided", status_code=400)
    try:
        await binder.exchange_oauth_code(code)
    except (AuthenticationError, PersistenceError) as e:
        logger.error(f"OAuth Error: {e.message} ({e.details})")
        return PlainTextResponse("Authentication failed", status_code=500)
    return oauth_success_page()
