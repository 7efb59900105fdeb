from tagflow.exceptions import TagFlowError


class MatcherError(TagFlowError):
    """Base exception class for tracking matcher errors."""


class MatcherRegistrationError(MatcherError):
    """Exception raised when matcher registration fails."""


class MatcherLoadError(MatcherError):
    """Exception raised when a configured matcher cannot be instantiated."""

    def __init__(self, matcher_name: str, message: str = ""):
        self.matcher_name = matcher_name
        super().__init__(f"Matcher '{matcher_name}': {message or 'not registered'}")
