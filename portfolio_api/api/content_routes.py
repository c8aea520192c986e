"""Portfolio content endpoints.

Admin (edit) endpoints live under /api/admin and return the stored
documents unchanged. Public endpoints under /api/portfolio return the
sorted views with ETag revalidation.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request

from portfolio_api.api.caching import etag_response
from portfolio_api.api.deps import get_content_service, get_portfolio_service
from portfolio_api.core.security import require_admin
from portfolio_api.services.content_service import ContentService
from portfolio_api.services.portfolio_service import PortfolioService

logger = logging.getLogger(__name__)

admin_router = APIRouter(prefix="/api/admin", tags=["content"])
public_router = APIRouter(prefix="/api/portfolio", tags=["portfolio"])


def _found(value: Any, what: str) -> Any:
    if value is None:
        raise HTTPException(status_code=404, detail=f"{what} not found")
    return value


# =============================================================================
# ADMIN
# =============================================================================

@admin_router.get("/personal-info", dependencies=[Depends(require_admin)])
async def get_personal_info(content: ContentService = Depends(get_content_service)):
    return _found(await content.get_personal_info(), "Personal info")


@admin_router.put("/personal-info", dependencies=[Depends(require_admin)])
async def update_personal_info(
    data: Any = Body(...),
    content: ContentService = Depends(get_content_service),
):
    return await content.update_personal_info(data)


@admin_router.get("/experiences")
async def get_experiences(content: ContentService = Depends(get_content_service)):
    return _found(await content.get_experiences(), "Experiences")


@admin_router.put("/experiences", dependencies=[Depends(require_admin)])
async def update_experiences(
    data: Any = Body(...),
    content: ContentService = Depends(get_content_service),
):
    return await content.update_experiences(data)


@admin_router.get("/projects")
async def get_projects(content: ContentService = Depends(get_content_service)):
    return _found(await content.get_projects(), "Projects")


@admin_router.put("/projects", dependencies=[Depends(require_admin)])
async def update_projects(
    data: Any = Body(...),
    content: ContentService = Depends(get_content_service),
):
    return await content.update_projects(data)


@admin_router.get("/skills")
async def get_skills(content: ContentService = Depends(get_content_service)):
    return _found(await content.get_skills(), "Skills")


@admin_router.put("/skills", dependencies=[Depends(require_admin)])
async def update_skills(
    data: Any = Body(...),
    content: ContentService = Depends(get_content_service),
):
    return await content.update_skills(data)


@admin_router.get("/stats", dependencies=[Depends(require_admin)])
async def get_dashboard_stats(portfolio: PortfolioService = Depends(get_portfolio_service)):
    return await portfolio.dashboard_stats()


# =============================================================================
# PUBLIC
# =============================================================================

@public_router.get("/personal-info")
async def public_personal_info(request: Request, portfolio: PortfolioService = Depends(get_portfolio_service)):
    return etag_response(request, _found(await portfolio.personal_info(), "Personal info"))


@public_router.get("/skills")
async def public_skills(request: Request, portfolio: PortfolioService = Depends(get_portfolio_service)):
    return etag_response(request, _found(await portfolio.skills(), "Skills"))


@public_router.get("/experiences")
async def public_experiences(request: Request, portfolio: PortfolioService = Depends(get_portfolio_service)):
    return etag_response(request, _found(await portfolio.experiences(), "Experiences"))


@public_router.get("/projects")
async def public_projects(request: Request, portfolio: PortfolioService = Depends(get_portfolio_service)):
    return etag_response(request, _found(await portfolio.projects(), "Projects"))
