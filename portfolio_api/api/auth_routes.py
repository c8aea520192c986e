"""Admin authentication endpoints.

POST /api/admin/login    email + password -> session cookie
POST /api/admin/logout   revoke session, clear cookie
GET  /api/admin/verify   {"authenticated": bool}
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from portfolio_api.api.deps import get_auth_service, get_authorizer
from portfolio_api.core.rate_limit_config import RATE_LIMITS, limiter
from portfolio_api.core.security import (
    SESSION_COOKIE_NAME,
    SESSION_TTL_SECONDS,
    AuthService,
    RequestAuthorizer,
    extract_token,
)
from portfolio_api.core.security.auth_service import MISSING_CREDENTIALS

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/admin", tags=["auth"])


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


def _set_session_cookie(request: Request, response: JSONResponse, token: str, max_age: int) -> None:
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        max_age=max_age,
        path="/",
        httponly=True,
        secure=request.app.state.settings.is_production,
        samesite="lax",
    )


@router.post("/login")
@limiter.limit(RATE_LIMITS["login"])
async def login(
    request: Request,
    body: LoginRequest,
    auth: AuthService = Depends(get_auth_service),
):
    if not body.email or not body.password:
        raise HTTPException(status_code=400, detail=MISSING_CREDENTIALS)

    result = await auth.login(body.email, body.password)
    if not result.success:
        raise HTTPException(status_code=401, detail=result.error)

    response = JSONResponse({"success": True, "message": "Login successful"})
    _set_session_cookie(request, response, result.token, SESSION_TTL_SECONDS)
    return response


@router.post("/logout")
async def logout(request: Request, auth: AuthService = Depends(get_auth_service)):
    token = extract_token(request.cookies, request.headers)
    await auth.logout(token)

    response = JSONResponse({"success": True, "message": "Logout successful"})
    _set_session_cookie(request, response, "", 0)
    return response


@router.get("/verify")
async def verify(request: Request, authorizer: RequestAuthorizer = Depends(get_authorizer)):
    result = await authorizer.verify_auth(request)
    return {"authenticated": result.authenticated}
