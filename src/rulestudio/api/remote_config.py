from fastapi import APIRouter
from pydantic import BaseModel

from rulestudio.integrations.remote_config import URLValidationResult, resolve_to_raw_url, validate_url

router = APIRouter()


class URLValidationRequest(BaseModel):
    url: str


class URLValidationResponse(BaseModel):
    result: URLValidationResult
    resolved_url: str | None = None


@router.post("/remote-config/validate", response_model=URLValidationResponse)
async def validate_remote_config_url(request: URLValidationRequest):
    result = validate_url(request.url)
    resolved = resolve_to_raw_url(request.url) if result is URLValidationResult.VALID else None
    return URLValidationResponse(result=result, resolved_url=resolved)
