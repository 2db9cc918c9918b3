from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.invitation_repository import IInvitationRepository
from src.domain.entities import (
    AppInvitation,
    FilterOperator,
    InvitationStatus,
    SearchOperator,
    SortDirection,
)
from src.domain.invitation_query import FilterClause, InvitationQuery, SearchClause


class InvitationRepository(IInvitationRepository):
    """Invitation repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, invitation_id: str) -> Optional[AppInvitation]:
        """Get invitation by ID"""
        stmt = select(AppInvitation).where(AppInvitation.id == invitation_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_pending_by_inviter_and_email(
        self, inviter_id: str, email: str
    ) -> Optional[AppInvitation]:
        """Get the most recent pending invitation by inviter and email"""
        stmt = (
            select(AppInvitation)
            .where(
                AppInvitation.inviter_id == inviter_id,
                func.lower(AppInvitation.email) == email.lower(),
                AppInvitation.status == InvitationStatus.pending,
            )
            .order_by(AppInvitation.created_at.desc())
            .limit(1)
        )
        result = await self.session.exec(stmt)
        return result.first()

    async def list_by_inviter(
        self, inviter_id: str, query: InvitationQuery
    ) -> Tuple[List[AppInvitation], int]:
        """
        List invitations created by an inviter.

        Search and filter clauses are ANDed with the inviter condition;
        total counts every match, ignoring limit/offset.
        """
        conditions = [AppInvitation.inviter_id == inviter_id]
        if query.search is not None:
            conditions.append(self._search_condition(query.search))
        if query.filter is not None:
            conditions.append(self._filter_condition(query.filter))

        count_stmt = select(func.count()).select_from(AppInvitation).where(*conditions)
        total = (await self.session.exec(count_stmt)).one()

        sort_column = getattr(AppInvitation, query.sort_by)
        if query.sort_direction == SortDirection.desc:
            order = (sort_column.desc(), AppInvitation.id.desc())
        else:
            order = (sort_column.asc(), AppInvitation.id.asc())

        stmt = (
            select(AppInvitation)
            .where(*conditions)
            .order_by(*order)
            .offset(query.offset)
            .limit(query.limit)
        )
        result = await self.session.exec(stmt)
        return list(result.all()), total

    async def create(self, invitation: AppInvitation) -> AppInvitation:
        """Create a new invitation"""
        self.session.add(invitation)
        await self.session.flush()
        await self.session.refresh(invitation)
        return invitation

    async def update(self, invitation: AppInvitation) -> AppInvitation:
        """Update existing invitation"""
        self.session.add(invitation)
        await self.session.flush()
        await self.session.refresh(invitation)
        return invitation

    async def transition_status(
        self,
        invitation: AppInvitation,
        to_status: InvitationStatus,
        expected: InvitationStatus = InvitationStatus.pending,
    ) -> bool:
        """Compare-and-set the status in a single UPDATE"""
        stmt = (
            update(AppInvitation)
            .where(
                AppInvitation.id == invitation.id,
                AppInvitation.status == expected,
            )
            .values(status=to_status)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        if result.rowcount != 1:
            return False
        await self.session.refresh(invitation)
        return True

    @staticmethod
    def _search_condition(search: SearchClause):
        # Case-insensitive; autoescape makes % and _ in the value literal
        column = func.lower(getattr(AppInvitation, search.field))
        value = search.value.lower()
        if search.operator == SearchOperator.starts_with:
            return column.startswith(value, autoescape=True)
        if search.operator == SearchOperator.ends_with:
            return column.endswith(value, autoescape=True)
        return column.contains(value, autoescape=True)

    @staticmethod
    def _filter_condition(clause: FilterClause):
        column = getattr(AppInvitation, clause.field)
        value = clause.value
        if value is None:
            if clause.operator == FilterOperator.ne:
                return column.is_not(None)
            return column.is_(None)
        if clause.operator == FilterOperator.ne:
            return column != value
        if clause.operator == FilterOperator.lt:
            return column < value
        if clause.operator == FilterOperator.lte:
            return column <= value
        if clause.operator == FilterOperator.gt:
            return column > value
        if clause.operator == FilterOperator.gte:
            return column >= value
        return column == value
