"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
"""

from pydantic import BaseModel, Field

from credential_registry.domain.ports import CredentialStatus


class AuthorizeIssuerRequest(BaseModel):
    """Request model for issuer authorization."""

    issuer: str = Field(..., min_length=1, description="Principal to authorize")
    organization_name: str = Field(..., description="Organization name, stored verbatim")


class IssuerResponse(BaseModel):
    """Response model for an issuer record."""

    issuer: str
    authorized: bool
    organization_name: str
    issued_count: int


class IssueCredentialRequest(BaseModel):
    """Request model for credential issuance."""

    holder: str = Field(..., description="Principal receiving the credential")
    skill_name: str = Field(..., description="Skill the credential attests")
    credential_ref: str = Field("", description="Opaque reference to off-system metadata")
    expiry: int = Field(0, ge=0, description="Expiry as UNIX seconds, 0 for never")


class IssueCredentialResponse(BaseModel):
    """Response model for successful issuance."""

    credential_id: int


class VerificationResponse(BaseModel):
    """Response model for credential verification."""

    credential_id: int
    is_valid: bool
    holder: str
    issuer: str
    skill_name: str
    issue_date: int


class CredentialResponse(BaseModel):
    """Response model for the full stored credential record."""

    credential_id: int
    holder: str
    issuer: str
    skill_name: str
    credential_ref: str
    issue_date: int
    expiry: int
    revoked: bool
    status: CredentialStatus


class RevokeResponse(BaseModel):
    """Response model for successful revocation."""

    message: str
    credential_id: int


class HolderCredentialsResponse(BaseModel):
    """Response model for a holder's credential index."""

    holder: str
    credential_ids: list[int]


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
