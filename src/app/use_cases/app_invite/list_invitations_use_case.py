"""
List Invitations Use Case

Lists the caller's invitations with search, filter, sort and pagination.
"""

from typing import Any, Dict

from src.app.services.unit_of_work import UnitOfWork
from src.domain.invitation_query import InvalidQueryError, InvitationQuery
from src.libs.result import Error, Result, Return

from .dtos import InvitationResponse, ListInvitationsResponse
from .errors import AppInviteErrorCode


class ListInvitationsUseCase:
    """
    Use case for listing invitations created by a user.

    Business Rules:
    - Only the caller's own invitations are listed
    - limit defaults to 100, offset to 0
    - One search clause (email, name, domainWhitelist) and one filter
      clause, ANDed
    - Search is case-insensitive and treats % and _ literally
    - lt/lte/gt/gte filters only on expiresAt and createdAt
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, inviter_id: str, query_params: Dict[str, Any]
    ) -> Result[ListInvitationsResponse]:
        """
        Execute list invitations use case.

        Args:
            inviter_id: User ID of the caller
            query_params: Raw query keyword arguments for InvitationQuery.build

        Returns:
            Result with ListInvitationsResponse DTO, or Error(INVALID_QUERY)
        """
        try:
            query = InvitationQuery.build(**query_params)
        except InvalidQueryError as e:
            return Return.err(Error(AppInviteErrorCode.INVALID_QUERY, str(e)))

        async with self.uow:
            invitations, total = await self.uow.invitations.list_by_inviter(
                inviter_id, query
            )

            return Return.ok(
                ListInvitationsResponse(
                    invitations=[
                        InvitationResponse.from_entity(invitation)
                        for invitation in invitations
                    ],
                    total=total,
                    limit=query.limit,
                    offset=query.offset,
                )
            )
