from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

DEFAULT_VERSION = "latest"


class CanonicalLibraryId(BaseModel):
    """A ``name@version`` identifier, used as the cache and dispatch key."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str = DEFAULT_VERSION

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v:
            raise ValueError("library name must not be empty")
        return v

    @field_validator("version")
    @classmethod
    def default_version(cls, v: str) -> str:
        return v or DEFAULT_VERSION

    @classmethod
    def parse(cls, raw: str) -> CanonicalLibraryId:
        """Split ``raw`` on its first ``@``.

        A leading ``@`` belongs to an npm scope (``@types/node@20.1.0``) and is
        kept as part of the name.
        """
        scope = "@" if raw.startswith("@") else ""
        name, _, version = raw.removeprefix("@").partition("@")
        return cls(name=scope + name if name else "", version=version)

    def __str__(self) -> str:
        return f"{self.name}@{self.version}"
