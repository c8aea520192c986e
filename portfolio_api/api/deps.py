"""FastAPI dependencies that hand out the services wired in ``create_app``."""

from fastapi import Request

from portfolio_api.core.security import AuthService, RequestAuthorizer
from portfolio_api.services.contact_service import ContactService
from portfolio_api.services.content_service import ContentService
from portfolio_api.services.portfolio_service import PortfolioService


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_authorizer(request: Request) -> RequestAuthorizer:
    return request.app.state.authorizer


def get_content_service(request: Request) -> ContentService:
    return request.app.state.content_service


def get_contact_service(request: Request) -> ContactService:
    return request.app.state.contact_service


def get_portfolio_service(request: Request) -> PortfolioService:
    return request.app.state.portfolio_service
