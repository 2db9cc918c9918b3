"""
App Invite Options

Host-supplied configuration of the invitation service. Plain values come
from ApplicationConfig; callables (permission predicates, the email sender)
are passed in by the host when building the app.
"""

from typing import Any, Dict, Literal, Mapping, Optional, Type, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    create_model,
)

from src.domain.entities import User

from .invitation_email import LoggingInvitationEmailSender, SendInvitationEmail
from .permissions import (
    ConstantPermission,
    InvitationPermission,
    InviterOnlyPermission,
    PermissionSetting,
    build_permission,
)

DEFAULT_INVITATION_EXPIRES_IN = 60 * 60 * 48

_FIELD_ANNOTATIONS = {
    "string": StrictStr,
    "number": Union[StrictInt, StrictFloat],
    "boolean": StrictBool,
}


class InvalidFieldError(ValueError):
    """Additional user field missing or of the wrong type"""


class AdditionalField(BaseModel):
    """Extra user attribute captured when an invitation is accepted"""

    model_config = ConfigDict(frozen=True)

    type: Literal["string", "number", "boolean"] = "string"
    required: bool = False
    default: Any = None


def build_additional_fields_model(fields: Mapping[str, AdditionalField]) -> Type[BaseModel]:
    """Pydantic model validating accept payload extras against the declarations"""
    definitions: Dict[str, Any] = {}
    for name, definition in fields.items():
        annotation = _FIELD_ANNOTATIONS[definition.type]
        if definition.required and definition.default is None:
            definitions[name] = (annotation, ...)
        elif definition.required:
            definitions[name] = (annotation, definition.default)
        else:
            definitions[name] = (Optional[annotation], definition.default)
    return create_model(
        "AdditionalFields", __config__=ConfigDict(extra="forbid"), **definitions
    )


class AppInviteOptions(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    allow_user_to_create_invitation: PermissionSetting = True
    # None: only the inviter may cancel
    allow_user_to_cancel_invitation: PermissionSetting = None
    invitation_expires_in: int = Field(DEFAULT_INVITATION_EXPIRES_IN, gt=0)
    send_invitation_email: Optional[SendInvitationEmail] = None
    auto_sign_in: bool = True
    # Template with an {invitation_id} placeholder
    invitation_accept_url: Optional[str] = None
    additional_fields: Dict[str, AdditionalField] = Field(default_factory=dict)
    access_token_expires_minutes: int = 15

    _can_create: InvitationPermission = PrivateAttr()
    _can_cancel: InvitationPermission = PrivateAttr()
    _additional_fields_model: Type[BaseModel] = PrivateAttr()

    def model_post_init(self, __context: Any) -> None:
        self._can_create = build_permission(
            self.allow_user_to_create_invitation, ConstantPermission(True)
        )
        self._can_cancel = build_permission(
            self.allow_user_to_cancel_invitation, InviterOnlyPermission()
        )
        self._additional_fields_model = build_additional_fields_model(
            self.additional_fields
        )

    @property
    def can_create(self) -> InvitationPermission:
        return self._can_create

    @property
    def can_cancel(self) -> InvitationPermission:
        return self._can_cancel

    @classmethod
    def from_config(cls, config, **overrides) -> "AppInviteOptions":
        """Build options from ApplicationConfig, host callables passed as overrides"""
        values: Dict[str, Any] = dict(
            invitation_expires_in=int(config.INVITATION_EXPIRES_IN),
            auto_sign_in=bool(config.INVITATION_AUTO_SIGN_IN),
            invitation_accept_url=config.INVITATION_ACCEPT_URL or None,
            access_token_expires_minutes=int(config.ACCESS_TOKEN_EXPIRES_MINUTES),
        )
        if config.INVITATION_EMAIL_BACKEND == "log":
            values["send_invitation_email"] = LoggingInvitationEmailSender()
        elif config.INVITATION_EMAIL_BACKEND not in ("none", None):
            raise ValueError(
                f"Unknown INVITATION_EMAIL_BACKEND: {config.INVITATION_EMAIL_BACKEND}"
            )
        values.update(overrides)
        return cls(**values)

    def accept_url(self, invitation_id: str) -> Optional[str]:
        if not self.invitation_accept_url:
            return None
        return self.invitation_accept_url.format(invitation_id=invitation_id)

    def resolve_additional_fields(self, provided: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Validate extra user fields against the declared additional fields.

        Returns:
            Declared fields with defaults applied, unset optional fields left out

        Raises:
            InvalidFieldError: unknown field, missing required field or bad type
        """
        try:
            resolved = self._additional_fields_model.model_validate(dict(provided))
        except ValidationError as e:
            raise InvalidFieldError(self._describe(e)) from None
        return resolved.model_dump(exclude_none=True)

    def _describe(self, exc: ValidationError) -> str:
        errors = exc.errors()
        unknown = sorted(str(e["loc"][0]) for e in errors if e["type"] == "extra_forbidden")
        if unknown:
            return f"Unknown field: {', '.join(unknown)}"
        name = str(errors[0]["loc"][0])
        if errors[0]["type"] == "missing":
            return f"Field {name} is required"
        return f"Field {name} must be a {self.additional_fields[name].type}"

    async def may_create(self, user: User, invitation_type) -> bool:
        return await self.can_create.allows(user, invitation_type)

    async def may_cancel(self, user: User, invitation) -> bool:
        return await self.can_cancel.allows(user, invitation)
