"""
App Invite API Routes

Issue, inspect, list and redeem application invitations.
"""

from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from src.api.error import ClientError, ServerError
from src.app.services.app_invite_options import AppInviteOptions
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.app_invite import (
    AcceptInvitationCommand,
    AcceptInvitationResponse,
    AcceptInvitationUseCase,
    AppInvitationDetailResponse,
    AppInviteErrorCode,
    CancelInvitationUseCase,
    GetAppInvitationUseCase,
    InvitationResponse,
    InviteUserCommand,
    InviteUserResponse,
    InviteUserUseCase,
    ListInvitationsResponse,
    ListInvitationsUseCase,
    RejectInvitationUseCase,
)
from src.depends import (
    get_app_invite_options,
    get_current_user,
    get_optional_current_user,
    get_unit_of_work,
)
from src.domain.entities import FilterOperator, SearchOperator, SortDirection

router = APIRouter(prefix="/app-invitations", tags=["App Invitations"])


class InviteUserRequest(BaseModel):
    """
    Invite user HTTP request payload

    Omit email for a public invitation.
    """

    email: Optional[EmailStr] = Field(None, description="Invitee email (personal invitation)")
    name: Optional[str] = Field(None, max_length=255, description="Prefilled invitee name")
    resend: bool = Field(False, description="Refresh an existing pending invitation")
    domain_whitelist: Optional[Union[str, List[str]]] = Field(
        None, description="Domains allowed to accept a public invitation"
    )


class AcceptInvitationRequest(BaseModel):
    """
    Accept invitation HTTP request payload

    Extra keys are passed through as additional user fields.
    """

    model_config = ConfigDict(extra="allow")

    email: Optional[EmailStr] = Field(None, description="Invitee email (required for public invitations)")
    name: Optional[str] = Field(None, max_length=255, description="Invitee name")
    password: Optional[str] = Field(None, description="Account password (min 8 chars)")


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=InviteUserResponse,
)
async def invite_user(
    request: InviteUserRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    options: AppInviteOptions = Depends(get_app_invite_options),
):
    """
    Invite User

    Creates a personal (email set) or public invitation. With resend=true an
    existing pending invitation for the same email is refreshed instead.

    Raises:
        - 400 Bad Request: INVALID_DOMAIN_WHITELIST
        - 401 Unauthorized: Invalid or expired JWT, USER_NOT_FOUND
        - 403 Forbidden: FORBIDDEN
        - 409 Conflict: ALREADY_INVITED
        - 500 Internal Server Error: EMAIL_SENDER_NOT_CONFIGURED, server error
    """
    command = InviteUserCommand(
        inviter_id=current_user["user_id"],
        email=request.email,
        name=request.name,
        resend=request.resend,
        domain_whitelist=request.domain_whitelist,
    )

    use_case = InviteUserUseCase(uow, options)
    result = await use_case.execute(command)

    if result.is_err():
        error = result.error
        if error.code == AppInviteErrorCode.INVALID_DOMAIN_WHITELIST:
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == AppInviteErrorCode.USER_NOT_FOUND:
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code == AppInviteErrorCode.FORBIDDEN:
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        elif error.code == AppInviteErrorCode.ALREADY_INVITED:
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        raise ServerError(error)

    return result.value


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    response_model=ListInvitationsResponse,
)
async def list_invitations(
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    limit: int = Query(100, ge=1, description="Maximum number of invitations to return"),
    offset: int = Query(0, ge=0, description="Number of invitations to skip"),
    search_field: Optional[str] = Query(None, description="email, name or domainWhitelist"),
    search_operator: Optional[SearchOperator] = Query(None),
    search_value: Optional[str] = Query(None),
    filter_field: Optional[str] = Query(None, description="Any invitation field"),
    filter_operator: Optional[FilterOperator] = Query(None),
    filter_value: Optional[str] = Query(None),
    sort_by: Optional[str] = Query(None, description="Any invitation field"),
    sort_direction: Optional[SortDirection] = Query(None),
):
    """
    List Invitations

    Returns the caller's invitations. One search clause and one filter clause
    may be combined (ANDed).

    Raises:
        - 400 Bad Request: INVALID_QUERY
        - 401 Unauthorized: Invalid or expired JWT
        - 500 Internal Server Error: Server error
    """
    use_case = ListInvitationsUseCase(uow)
    result = await use_case.execute(
        current_user["user_id"],
        dict(
            limit=limit,
            offset=offset,
            search_field=search_field,
            search_operator=search_operator,
            search_value=search_value,
            filter_field=filter_field,
            filter_operator=filter_operator,
            filter_value=filter_value,
            sort_by=sort_by,
            sort_direction=sort_direction,
        ),
    )

    if result.is_err():
        error = result.error
        if error.code == AppInviteErrorCode.INVALID_QUERY:
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


@router.get(
    "/{invitation_id}",
    status_code=status.HTTP_200_OK,
    response_model=AppInvitationDetailResponse,
)
async def get_app_invitation(
    invitation_id: str,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Get App Invitation

    Public: invitees look up their invitation before accepting it.

    Raises:
        - 404 Not Found: INVITATION_NOT_FOUND
        - 500 Internal Server Error: Server error
    """
    use_case = GetAppInvitationUseCase(uow)
    result = await use_case.execute(invitation_id)

    if result.is_err():
        error = result.error
        if error.code == AppInviteErrorCode.INVITATION_NOT_FOUND:
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


@router.post(
    "/{invitation_id}/accept",
    status_code=status.HTTP_200_OK,
    response_model=AcceptInvitationResponse,
)
async def accept_invitation(
    invitation_id: str,
    request: AcceptInvitationRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    options: AppInviteOptions = Depends(get_app_invite_options),
):
    """
    Accept Invitation

    Creates the invitee's account; signs them in when auto sign-in is on.

    Raises:
        - 400 Bad Request: EMAIL_REQUIRED, INVALID_PASSWORD, INVALID_FIELD
        - 403 Forbidden: EMAIL_MISMATCH, DOMAIN_NOT_ALLOWED
        - 404 Not Found: INVITATION_NOT_FOUND
        - 409 Conflict: INVITATION_NOT_PENDING, USER_ALREADY_EXISTS
        - 410 Gone: INVITATION_EXPIRED
        - 500 Internal Server Error: Server error
    """
    command = AcceptInvitationCommand(
        invitation_id=invitation_id,
        email=request.email,
        name=request.name,
        password=request.password,
        additional_fields=dict(request.model_extra or {}),
    )

    use_case = AcceptInvitationUseCase(uow, options)
    result = await use_case.execute(command)

    if result.is_err():
        error = result.error
        if error.code in (
            AppInviteErrorCode.EMAIL_REQUIRED,
            AppInviteErrorCode.INVALID_PASSWORD,
            AppInviteErrorCode.INVALID_FIELD,
        ):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code in (
            AppInviteErrorCode.EMAIL_MISMATCH,
            AppInviteErrorCode.DOMAIN_NOT_ALLOWED,
        ):
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        elif error.code == AppInviteErrorCode.INVITATION_NOT_FOUND:
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code in (
            AppInviteErrorCode.INVITATION_NOT_PENDING,
            AppInviteErrorCode.USER_ALREADY_EXISTS,
        ):
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        elif error.code == AppInviteErrorCode.INVITATION_EXPIRED:
            raise ClientError(error, status_code=status.HTTP_410_GONE)
        raise ServerError(error)

    return result.value


@router.post(
    "/{invitation_id}/reject",
    status_code=status.HTTP_200_OK,
    response_model=InvitationResponse,
)
async def reject_invitation(
    invitation_id: str,
    current_user: Optional[dict] = Depends(get_optional_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Reject Invitation

    Declines a personal invitation. Works without signing in.

    Raises:
        - 400 Bad Request: INVITATION_NOT_PERSONAL
        - 401 Unauthorized: Invalid or expired JWT (when one is sent)
        - 403 Forbidden: FORBIDDEN (signed-in user is not the invitee)
        - 404 Not Found: INVITATION_NOT_FOUND
        - 409 Conflict: INVITATION_NOT_PENDING
        - 410 Gone: INVITATION_EXPIRED
        - 500 Internal Server Error: Server error
    """
    user_id = current_user["user_id"] if current_user else None

    use_case = RejectInvitationUseCase(uow)
    result = await use_case.execute(invitation_id, user_id)

    if result.is_err():
        error = result.error
        if error.code == AppInviteErrorCode.INVITATION_NOT_PERSONAL:
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == AppInviteErrorCode.FORBIDDEN:
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        elif error.code == AppInviteErrorCode.INVITATION_NOT_FOUND:
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == AppInviteErrorCode.INVITATION_NOT_PENDING:
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        elif error.code == AppInviteErrorCode.INVITATION_EXPIRED:
            raise ClientError(error, status_code=status.HTTP_410_GONE)
        raise ServerError(error)

    return result.value


@router.post(
    "/{invitation_id}/cancel",
    status_code=status.HTTP_200_OK,
    response_model=InvitationResponse,
)
async def cancel_invitation(
    invitation_id: str,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    options: AppInviteOptions = Depends(get_app_invite_options),
):
    """
    Cancel Invitation

    Withdraws a pending invitation. By default only the inviter may cancel.

    Raises:
        - 401 Unauthorized: Invalid or expired JWT, USER_NOT_FOUND
        - 403 Forbidden: FORBIDDEN
        - 404 Not Found: INVITATION_NOT_FOUND
        - 409 Conflict: INVITATION_NOT_PENDING
        - 410 Gone: INVITATION_EXPIRED
        - 500 Internal Server Error: Server error
    """
    use_case = CancelInvitationUseCase(uow, options)
    result = await use_case.execute(invitation_id, current_user["user_id"])

    if result.is_err():
        error = result.error
        if error.code == AppInviteErrorCode.USER_NOT_FOUND:
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code == AppInviteErrorCode.FORBIDDEN:
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        elif error.code == AppInviteErrorCode.INVITATION_NOT_FOUND:
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == AppInviteErrorCode.INVITATION_NOT_PENDING:
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        elif error.code == AppInviteErrorCode.INVITATION_EXPIRED:
            raise ClientError(error, status_code=status.HTTP_410_GONE)
        raise ServerError(error)

    return result.value
