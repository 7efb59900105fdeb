from tagflow.exceptions import TagFlowError


class TokenError(TagFlowError):
    """Base exception class for token resolution errors."""


class EntityLoadError(TokenError):
    """
    Raised by entity loaders that cannot load an entity type at all.

    The token resolver treats it like a missing entity: the text is still
    substituted, without context for that type.
    """

    def __init__(self, entity_type: str, message: str = ""):
        self.entity_type = entity_type
        super().__init__(f"Entity type '{entity_type}': {message or 'no storage available'}")
