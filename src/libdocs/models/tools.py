from __future__ import annotations

from pydantic import BaseModel, Field, ValidationError, field_validator

from libdocs.models.library import CanonicalLibraryId


class ResolveLibraryIdInput(BaseModel):
    library_name: str = Field(max_length=500)

    @field_validator("library_name")
    @classmethod
    def validate_library_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("libraryName must not be empty")
        return v


class ResolveLibraryIdOutput(BaseModel):
    library_id: str = Field(serialization_alias="libraryId")


class GetLibraryDocsInput(BaseModel):
    library_id: str = Field(max_length=500)
    topic: str | None = Field(default=None, max_length=200)
    tokens: int

    @field_validator("library_id")
    @classmethod
    def validate_library_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("libraryId must not be empty")
        try:
            CanonicalLibraryId.parse(v)
        except ValidationError as exc:
            raise ValueError("libraryId must look like 'name@version'") from exc
        return v

    @field_validator("topic")
    @classmethod
    def blank_topic_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class GetLibraryDocsOutput(BaseModel):
    docs: str
