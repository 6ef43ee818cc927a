"""Pydantic models for users and user identifiers."""

from pydantic import BaseModel, ConfigDict, Field

from threadinbox.errors.exceptions import ValidationError


class UserSpec(BaseModel):
    """Identifies a user across identity realms, e.g. ``1@github.com``."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=0)
    domain: str = ""

    def __str__(self) -> str:
        return f"{self.id}@{self.domain}"

    @property
    def is_authenticated(self) -> bool:
        return self.id != 0

    @classmethod
    def parse(cls, value: str) -> "UserSpec":
        """Parse the canonical ``"{id}@{domain}"`` form."""
        id_part, sep, domain = value.partition("@")
        if not sep:
            raise ValidationError(f"user spec {value!r} is not of form id@domain")
        if not (id_part.isascii() and id_part.isdecimal()):
            raise ValidationError(f"user spec {value!r} has a non-numeric id")
        return cls(id=int(id_part), domain=domain)


class User(BaseModel):
    """Display attributes for a user, as returned by an identity resolver."""

    spec: UserSpec
    login: str
    avatar_url: str = ""
    html_url: str = ""

    @classmethod
    def fallback(cls, spec: UserSpec) -> "User":
        """Deterministic stand-in used when a user cannot be resolved."""
        return cls(spec=spec, login=str(spec))
