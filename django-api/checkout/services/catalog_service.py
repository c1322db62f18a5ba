"""Content catalog service.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

from checkout.domain import Content, ContentId
from checkout.domain.errors import ContentNotFoundError, InvalidIdError, ValidationError
from checkout.stores.interfaces import ContentPage, ContentStore

MAX_PAGE_SIZE = 50


def parse_content_id(content_id: str) -> ContentId:
    try:
        return ContentId.from_string(content_id)
    except (ValueError, TypeError, AttributeError):
        raise InvalidIdError("content") from None


class CatalogService:
    """Service for content catalog reads."""

    def __init__(self, store: ContentStore) -> None:
        self._store = store

    def list_contents(self, page: int = 1, limit: int = 10, tag: str | None = None) -> ContentPage:
        """Return one page of contents, newest first.

        Raises:
            ValidationError: If page or limit is out of range.
        """
        if page < 1:
            raise ValidationError("page must be at least 1")
        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}")
        return self._store.list_contents(page=page, limit=limit, tag=tag)

    def get_content(self, content_id: str) -> Content:
        """Return a content by ID.

        Raises:
            InvalidIdError: If the content_id is not a valid UUID.
            ContentNotFoundError: If the content does not exist.
        """
        content = self._store.get_content(parse_content_id(content_id))
        if content is None:
            raise ContentNotFoundError(content_id)
        return content
