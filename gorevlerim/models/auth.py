from pydantic import BaseModel


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    scope: str = "tasks"


class OAuthErrorResponse(BaseModel):
    error: str  # invalid_request, unsupported_grant_type, invalid_grant, server_error
    error_description: str | None = None
