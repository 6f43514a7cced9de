from __future__ import annotations

from typing import Any

from pydantic import BaseModel, model_validator


class PackageMetadata(BaseModel):
    """The subset of an npm registry document the generic fallback relies on."""

    name: str
    version: str | None = None
    description: str | None = None
    repository_url: str | None = None

    @model_validator(mode="before")
    @classmethod
    def from_registry_document(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "repository_url" in data:
            return data

        version = data.get("version")
        dist_tags = data.get("dist-tags")
        if isinstance(dist_tags, dict) and dist_tags.get("latest"):
            version = dist_tags["latest"]

        # "repository" is either a bare URL string or {"type": "git", "url": ...}
        repository = data.get("repository")
        if isinstance(repository, dict):
            repository = repository.get("url")

        description = data.get("description")
        return {
            "name": data.get("name"),
            "version": version,
            "description": description if isinstance(description, str) else None,
            "repository_url": repository if isinstance(repository, str) and repository else None,
        }
