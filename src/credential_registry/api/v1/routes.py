"""
API v1 routes.

Defines REST endpoints for the Credential Registry API:
- POST /v1/issuers                        - Authorize an issuer (admin only)
- GET  /v1/issuers/{principal}            - Read an issuer record
- POST /v1/credentials                    - Issue a credential (authorized issuers)
- GET  /v1/credentials/{id}               - Read the full credential record
- GET  /v1/credentials/{id}/verify        - Public validity check
- POST /v1/credentials/{id}/revoke        - Revoke a credential (original issuer)
- GET  /v1/holders/{holder}/credentials   - List a holder's credential ids
"""

from fastapi import APIRouter, Depends, HTTPException, status

from credential_registry.api.dependencies import get_caller_principal, get_registry
from credential_registry.api.models import (
    AuthorizeIssuerRequest,
    CredentialResponse,
    ErrorResponse,
    HolderCredentialsResponse,
    IssueCredentialRequest,
    IssueCredentialResponse,
    IssuerResponse,
    RevokeResponse,
    VerificationResponse,
)
from credential_registry.domain.exceptions import (
    AlreadyAuthorized,
    AlreadyRevoked,
    CredentialNotFound,
    InvalidHolder,
    InvalidInput,
    Unauthorized,
)
from credential_registry.domain.registry import CredentialRegistry

router = APIRouter(tags=["v1"])


@router.post(
    "/issuers",
    response_model=IssuerResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        401: {"model": ErrorResponse, "description": "Missing caller principal"},
        403: {"model": ErrorResponse, "description": "Caller is not the admin"},
        409: {"model": ErrorResponse, "description": "Issuer already authorized"},
    },
    summary="Authorize an issuer",
    description="Admin-only. Grants a principal the right to issue credentials "
    "on behalf of an organization.",
)
async def authorize_issuer(
    request_data: AuthorizeIssuerRequest,
    caller: str = Depends(get_caller_principal),
    registry: CredentialRegistry = Depends(get_registry),
) -> IssuerResponse:
    try:
        registry.authorize_issuer(caller, request_data.issuer, request_data.organization_name)
    except Unauthorized:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the admin may authorize issuers",
        ) from None
    except AlreadyAuthorized:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Issuer already authorized",
        ) from None

    issuer = registry.get_issuer(request_data.issuer)
    return IssuerResponse(
        issuer=issuer.principal,
        authorized=issuer.authorized,
        organization_name=issuer.organization_name,
        issued_count=issuer.issued_count,
    )


@router.get(
    "/issuers/{principal}",
    response_model=IssuerResponse,
    summary="Get an issuer",
    description="Unknown principals are reported as unauthorized with empty fields.",
)
async def get_issuer(
    principal: str,
    registry: CredentialRegistry = Depends(get_registry),
) -> IssuerResponse:
    issuer = registry.get_issuer(principal)
    return IssuerResponse(
        issuer=issuer.principal,
        authorized=issuer.authorized,
        organization_name=issuer.organization_name,
        issued_count=issuer.issued_count,
    )


@router.post(
    "/credentials",
    response_model=IssueCredentialResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid holder or empty skill name"},
        401: {"model": ErrorResponse, "description": "Missing caller principal"},
        403: {"model": ErrorResponse, "description": "Caller is not an authorized issuer"},
        422: {"description": "Validation error"},
    },
    summary="Issue a credential",
    description="Authorized issuers only. Mints a credential for a holder and "
    "returns its id.",
)
async def issue_credential(
    request_data: IssueCredentialRequest,
    caller: str = Depends(get_caller_principal),
    registry: CredentialRegistry = Depends(get_registry),
) -> IssueCredentialResponse:
    try:
        credential_id = registry.issue_credential(
            caller,
            request_data.holder,
            request_data.skill_name,
            request_data.credential_ref,
            request_data.expiry,
        )
    except Unauthorized:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Caller is not an authorized issuer",
        ) from None
    except InvalidHolder:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid holder",
        ) from None
    except InvalidInput:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Skill name must not be empty",
        ) from None
    return IssueCredentialResponse(credential_id=credential_id)


@router.get(
    "/credentials/{credential_id}",
    response_model=CredentialResponse,
    responses={404: {"model": ErrorResponse, "description": "Credential not found"}},
    summary="Get a credential",
)
async def get_credential(
    credential_id: int,
    registry: CredentialRegistry = Depends(get_registry),
) -> CredentialResponse:
    try:
        credential = registry.get_credential(credential_id)
    except CredentialNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Credential not found",
        ) from None
    return CredentialResponse(
        credential_id=credential.id,
        holder=credential.holder,
        issuer=credential.issuer,
        skill_name=credential.skill_name,
        credential_ref=credential.credential_ref,
        issue_date=credential.issue_date,
        expiry=credential.expiry,
        revoked=not credential.is_valid,
        status=credential.status(registry.now()),
    )


@router.get(
    "/credentials/{credential_id}/verify",
    response_model=VerificationResponse,
    summary="Verify a credential",
    description="Public and read-only. Unknown ids are reported as not valid "
    "with empty fields rather than as an error.",
)
async def verify_credential(
    credential_id: int,
    registry: CredentialRegistry = Depends(get_registry),
) -> VerificationResponse:
    verification = registry.verify_credential(credential_id)
    return VerificationResponse(
        credential_id=credential_id,
        is_valid=verification.is_valid,
        holder=verification.holder,
        issuer=verification.issuer,
        skill_name=verification.skill_name,
        issue_date=verification.issue_date,
    )


@router.post(
    "/credentials/{credential_id}/revoke",
    response_model=RevokeResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Missing caller principal"},
        403: {"model": ErrorResponse, "description": "Caller did not issue this credential"},
        409: {"model": ErrorResponse, "description": "Credential already revoked"},
    },
    summary="Revoke a credential",
    description="Only the principal that issued the credential may revoke it. Irreversible.",
)
async def revoke_credential(
    credential_id: int,
    caller: str = Depends(get_caller_principal),
    registry: CredentialRegistry = Depends(get_registry),
) -> RevokeResponse:
    try:
        registry.revoke_credential(caller, credential_id)
    except Unauthorized:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the issuing principal may revoke this credential",
        ) from None
    except AlreadyRevoked:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Credential already revoked",
        ) from None
    return RevokeResponse(message="Credential revoked", credential_id=credential_id)


@router.get(
    "/holders/{holder}/credentials",
    response_model=HolderCredentialsResponse,
    summary="List a holder's credentials",
    description="Ids in issuance order, including revoked and expired credentials.",
)
async def get_holder_credentials(
    holder: str,
    registry: CredentialRegistry = Depends(get_registry),
) -> HolderCredentialsResponse:
    return HolderCredentialsResponse(
        holder=holder,
        credential_ids=registry.get_holder_credentials(holder),
    )
