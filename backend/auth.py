import secrets

from fastapi import Header, HTTPException, Request, status


def _bearer_token(authorization: str | None) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing auth token"
        )
    return authorization.split(" ", 1)[1]


def _check_token(presented: str, expected: str | None) -> None:
    # An unset token locks the route rather than opening it.
    if not expected or not secrets.compare_digest(presented.encode(), expected.encode()):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Invalid auth token"
        )


async def require_admin(
    request: Request,
    authorization: str | None = Header(default=None),
) -> None:
    token = _bearer_token(authorization)
    _check_token(token, request.app.state.admin_api_token)


async def require_payment_provider(
    request: Request,
    authorization: str | None = Header(default=None),
) -> None:
    token = _bearer_token(authorization)
    _check_token(token, request.app.state.payment_webhook_token)
