from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from config import settings
from domain import HandshakePurpose, OAuthProvider
from errors import ExpiredOrUnknownStateError
from schemas import HandshakeTokenResponse, OAuthCallbackResponse, OAuthStartResponse
from services.handshake_store import HandshakeStateStore

from .dependencies import get_handshake_store

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _default_redirect() -> str:
    return f"{settings.web_app_base_url.rstrip('/')}/profile"


@router.get("/csrf", response_model=HandshakeTokenResponse)
async def issue_csrf_token(
    store: HandshakeStateStore = Depends(get_handshake_store),
) -> HandshakeTokenResponse:
    issued = store.issue(HandshakePurpose.FORM_SUBMIT)
    return HandshakeTokenResponse(token=issued.token, nonce=issued.nonce)


@router.get("/{provider}/start", response_model=OAuthStartResponse)
async def start_oauth(
    provider: OAuthProvider,
    redirect: Optional[str] = Query(default=None),
    store: HandshakeStateStore = Depends(get_handshake_store),
) -> OAuthStartResponse:
    issued = store.issue(HandshakePurpose.OAUTH, provider=provider, redirect_target=redirect)
    return OAuthStartResponse(provider=provider, state=issued.token, nonce=issued.nonce)


@router.get("/{provider}/callback", response_model=OAuthCallbackResponse)
async def oauth_callback(
    provider: OAuthProvider,
    state: Optional[str] = Query(default=None),
    code: Optional[str] = Query(default=None),
    store: HandshakeStateStore = Depends(get_handshake_store),
) -> OAuthCallbackResponse:
    if not code or not state:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Missing code/state"
        )
    try:
        record = store.require(
            state,
            expected_provider=provider,
            expected_purpose=HandshakePurpose.OAUTH,
        )
    except ExpiredOrUnknownStateError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid or expired state"
        ) from exc
    return OAuthCallbackResponse(
        provider=provider,
        nonce=record.nonce,
        redirect_to=record.redirect_target or _default_redirect(),
    )
