"""
Invitation Query

Validated list query: pagination plus at most one search clause, one
filter clause and one sort key. Search and filter are ANDed.
"""

from datetime import UTC, datetime
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)

from .entities.enums import (
    FilterOperator,
    InvitationStatus,
    SearchOperator,
    SortDirection,
)

DEFAULT_LIMIT = 100
DEFAULT_OFFSET = 0
DEFAULT_SORT_FIELD = "created_at"

# Public field name (camelCase or snake_case) -> entity attribute
INVITATION_FIELDS = {
    "id": "id",
    "name": "name",
    "email": "email",
    "inviterId": "inviter_id",
    "inviter_id": "inviter_id",
    "status": "status",
    "domainWhitelist": "domain_whitelist",
    "domain_whitelist": "domain_whitelist",
    "expiresAt": "expires_at",
    "expires_at": "expires_at",
    "createdAt": "created_at",
    "created_at": "created_at",
}

SEARCHABLE_FIELDS = frozenset({"email", "name", "domain_whitelist"})
ORDERED_FIELDS = frozenset({"expires_at", "created_at"})
ORDERING_OPERATORS = frozenset(
    {FilterOperator.lt, FilterOperator.lte, FilterOperator.gt, FilterOperator.gte}
)

_datetime_adapter = TypeAdapter(datetime)
_status_adapter = TypeAdapter(InvitationStatus)


class InvalidQueryError(ValueError):
    """Raised when a list query cannot be built"""


def resolve_field(name: str) -> str:
    try:
        return INVITATION_FIELDS[name]
    except KeyError:
        raise InvalidQueryError(f"Unknown field: {name}") from None


class SearchClause(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: str
    operator: SearchOperator = SearchOperator.contains
    value: str

    @field_validator("field")
    @classmethod
    def validate_field(cls, name: str) -> str:
        field = resolve_field(name)
        if field not in SEARCHABLE_FIELDS:
            raise InvalidQueryError(
                f"Field {name} is not searchable. "
                "Must be one of: email, name, domainWhitelist"
            )
        return field


class FilterClause(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: str
    operator: FilterOperator = FilterOperator.eq
    value: Any = None

    @field_validator("field")
    @classmethod
    def validate_field(cls, name: str) -> str:
        return resolve_field(name)

    @field_validator("value")
    @classmethod
    def coerce_value(cls, value: Any, info: ValidationInfo) -> Any:
        field = info.data.get("field")
        if value is None or field is None:
            return value
        if field in ORDERED_FIELDS:
            try:
                parsed = _datetime_adapter.validate_python(value)
            except ValidationError:
                raise InvalidQueryError(f"Invalid datetime for {field}: {value}") from None
            if parsed.tzinfo is not None:
                # Stored timestamps are naive UTC
                parsed = parsed.astimezone(UTC).replace(tzinfo=None)
            return parsed
        if field == "status":
            try:
                return _status_adapter.validate_python(value)
            except ValidationError:
                raise InvalidQueryError(f"Invalid status: {value}") from None
        return str(value)

    @model_validator(mode="after")
    def check_operator(self) -> "FilterClause":
        if self.operator in ORDERING_OPERATORS and self.field not in ORDERED_FIELDS:
            raise InvalidQueryError(
                f"Operator {self.operator.value} is only supported on expiresAt and createdAt"
            )
        return self


class InvitationQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    limit: int = Field(DEFAULT_LIMIT, ge=1)
    offset: int = Field(DEFAULT_OFFSET, ge=0)
    search: Optional[SearchClause] = None
    filter: Optional[FilterClause] = None
    sort_by: str = DEFAULT_SORT_FIELD
    sort_direction: SortDirection = SortDirection.asc

    @field_validator("sort_by")
    @classmethod
    def validate_sort_by(cls, name: str) -> str:
        return resolve_field(name)

    @classmethod
    def build(
        cls,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        search_field: Optional[str] = None,
        search_operator: Optional[str] = None,
        search_value: Optional[str] = None,
        filter_field: Optional[str] = None,
        filter_operator: Optional[str] = None,
        filter_value: Any = None,
        sort_by: Optional[str] = None,
        sort_direction: Optional[str] = None,
    ) -> "InvitationQuery":
        """
        Validate raw query parameters.

        Omitted (None) parameters take their defaults.

        Raises:
            InvalidQueryError: unknown field or operator, ordering operator on
                an unordered field, or a filter value that cannot be coerced
        """
        search = None
        if search_field is not None or search_value is not None:
            if search_field is None or search_value is None:
                raise InvalidQueryError(
                    "searchField and searchValue must be provided together"
                )
            search = _without_none(
                field=search_field, operator=search_operator, value=search_value
            )
        elif search_operator is not None:
            raise InvalidQueryError("searchField and searchValue are required when searching")

        filter_clause = None
        if filter_field is not None:
            filter_clause = _without_none(
                field=filter_field, operator=filter_operator, value=filter_value
            )
        elif filter_operator is not None or filter_value is not None:
            raise InvalidQueryError("filterField is required when filtering")

        try:
            return cls.model_validate(
                _without_none(
                    limit=limit,
                    offset=offset,
                    search=search,
                    filter=filter_clause,
                    sort_by=sort_by,
                    sort_direction=sort_direction,
                )
            )
        except ValidationError as e:
            raise InvalidQueryError(_describe(e)) from None


def _without_none(**values: Any) -> dict:
    return {key: value for key, value in values.items() if value is not None}


def _describe(exc: ValidationError) -> str:
    messages = []
    for error in exc.errors():
        cause = error.get("ctx", {}).get("error")
        if isinstance(cause, InvalidQueryError):
            messages.append(str(cause))
        else:
            location = ".".join(str(part) for part in error["loc"])
            messages.append(f"{location}: {error['msg']}")
    return "; ".join(messages)
