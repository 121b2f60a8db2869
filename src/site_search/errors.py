"""Search error taxonomy."""


class SearchError(Exception):
    """Base class for failures surfaced by the search engine."""


class RecallFailure(SearchError):
    """The content store could not return candidates for one entity type."""

    def __init__(self, entity_type: str, message: str | None = None):
        """Initialize with the entity type whose recall failed."""
        self.entity_type = entity_type
        super().__init__(message or f"Candidate recall failed for {entity_type}")
