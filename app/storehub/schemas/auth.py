from pydantic import BaseModel, model_validator


class LoginRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {"email": "owner@demo.example.com", "password": "Pass1234!"},
                {"username_or_email": "owner", "password": "Pass1234!"},
            ]
        }
    }

    email: str | None = None
    username_or_email: str | None = None
    password: str

    @model_validator(mode="after")
    def ensure_identifier(self):
        if not self.email and not self.username_or_email:
            raise ValueError("email or username_or_email is required")
        return self


class TokenResponse(BaseModel):
    model_config = {
        "json_schema_extra": {
            "example": {
                "success": True,
                "access_token": "<jwt>",
                "token_type": "bearer",
                "expires_at": "2026-01-01T00:00:00",
                "trace_id": "trace-123",
            }
        }
    }

    success: bool = True
    access_token: str
    token_type: str = "bearer"
    expires_at: str
    trace_id: str


class LogoutResponse(BaseModel):
    success: bool = True
    message: str
    trace_id: str


class IdentityResponse(BaseModel):
    success: bool = True
    user_id: str
    username: str
    email: str
    role: str
    role_level: int
    tenant_id: str
    sector_id: str | None = None
    two_factor_enabled: bool
    two_factor_verified: bool
    trace_id: str
