"""Tag domain service."""

from typing import Optional

from opstrack.database.base import Database
from opstrack.domain.entities import Tag as TagEntity
from opstrack.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    duplicate_tag_name,
    tag_name_not_found,
    tag_not_found,
)


class TagService:
    """Service for managing tags."""

    def __init__(self, db: Database):
        """Initialize tag service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_tag(self, name: str, color: Optional[str] = None) -> int:
        """Create a tag.

        Raises:
            ValidationError: If the name is empty
            ConflictError: If a tag with that name exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Tag name cannot be empty")
        if self.db.get_tag_by_name(name) is not None:
            raise ConflictError(duplicate_tag_name(name))
        return self.db.create_tag(name=name, color=color)

    def get_tag(self, tag_id: int) -> TagEntity:
        """Get tag by ID.

        Raises:
            NotFoundError: If the tag does not exist
        """
        tag = self.db.get_tag(tag_id)
        if tag is None:
            raise NotFoundError(tag_not_found(tag_id))
        return tag

    def get_tag_by_name(self, name: str) -> TagEntity:
        """Get tag by name.

        Raises:
            NotFoundError: If the tag does not exist
        """
        tag = self.db.get_tag_by_name(name)
        if tag is None:
            raise NotFoundError(tag_name_not_found(name))
        return tag

    def list_tags(self) -> list[TagEntity]:
        """List all tags ordered by name."""
        return self.db.list_tags()
