"""
CSRF token endpoint for the admin front-end.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from cms_api.schemas import CSRFTokenOutput
from shared.config.settings import settings
from shared.security import issue_csrf_token, set_csrf_cookie

router = APIRouter(prefix="/api", tags=["security"])


@router.get("/csrf", response_model=CSRFTokenOutput)
def get_csrf_token() -> JSONResponse:
    """
    Issue a double-submit token.

    The token is set as a cookie and returned in the body; mutating admin
    requests must send it back in the CSRF header.
    """
    token = issue_csrf_token()
    body = CSRFTokenOutput(csrf_token=token, header_name=settings.csrf_header_name)
    response = JSONResponse(content=body.model_dump())
    set_csrf_cookie(response, token)
    return response
