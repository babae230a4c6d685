"""
Twitch sign-in endpoints.

- GET /auth/twitchtv - Start OAuth flow
- GET /auth/twitchtv/callback - Handle callback, sign the user in
- GET /auth/me - Current signed-in user
- GET /auth/logout - Clear the session

Route functions are plain `def`: the Twitch calls are blocking and run in
the server's threadpool.
"""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import RedirectResponse

from twitch_auth.oauth.dependencies import CurrentUser, Service


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/twitchtv")
def request_phase(request: Request, service: Service):
    """
    Start OAuth2 authorization flow.

    Redirects the user to Twitch's authorization page. Accepts optional
    `scope` and `state` query params.
    """
    return service.login(request)


@router.get("/twitchtv/callback", name="twitchtv_callback")
def callback_phase(request: Request, service: Service):
    """
    Handle OAuth2 callback from Twitch.

    Exchanges the code, fetches the user and stores a summary in the
    session. Failures are turned into a 401 by the AuthenticationFailed
    handler in main.py.
    """
    auth = service.authenticate(request)

    request.session["user"] = {
        "uid": auth.uid,
        "provider": auth.provider,
        "name": auth.info.name,
        "email": auth.info.email,
        "image": auth.info.image,
    }

    logger.info(
        f"Signed in {auth.provider} user",
        extra={"uid": auth.uid, "provider": auth.provider},
    )

    return RedirectResponse(url="/auth/me", status_code=status.HTTP_302_FOUND)


@router.get("/me")
def me(user: CurrentUser):
    """Return the current signed-in user."""
    return {"status": "success", "user": user}


@router.get("/logout")
def logout(request: Request):
    """Clear session and redirect to home."""
    request.session.clear()
    return RedirectResponse(url="/", status_code=status.HTTP_302_FOUND)
