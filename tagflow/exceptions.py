"""
TagFlow exception hierarchy.

This module defines the core exceptions used throughout TagFlow, organized
hierarchically with clear inheritance paths. Subsystems (vars, access, tokens,
j2, cli) define their own exceptions on top of TagFlowError.
"""

###############################################################################
# ROOT EXCEPTION
###############################################################################


class TagFlowError(Exception):
    """
    Root exception class for all TagFlow errors.

    This exception serves as the base class for the entire exception hierarchy.
    It should never be raised directly but rather inherited from.
    """


###############################################################################
# CORE EXCEPTIONS
###############################################################################


class CoreError(TagFlowError):
    """
    Base exception class for core functionality errors.

    These relate to fundamental operations of the rendering pipeline itself.
    """

    def __init__(self, message: str = "", component: str = ""):
        prefix = f"{component}: " if component else ""
        super().__init__(f"{prefix}{message}")
        self.component = component


class NotConfiguredError(CoreError):
    """
    Raised when rendering is requested for variables that were never configured.

    Reaching this means a caller skipped the top-level guard in
    VariableFormatter.render_markup(); it is a usage error, not a runtime condition.
    """

    def __init__(self, message: str = "", component: str = ""):
        super().__init__(
            message or "Analytics tracking is not configured so variables can not be rendered.",
            component=component,
        )


###############################################################################
# SETTINGS EXCEPTIONS
###############################################################################


class SettingsError(TagFlowError):
    """
    Base exception class for settings-related errors.

    These relate to loading and validating TagFlow's own configuration.
    """

    def __init__(self, message: str = "", setting: str = ""):
        prefix = f"Setting '{setting}': " if setting else ""
        super().__init__(f"{prefix}{message}")
        self.setting = setting


###############################################################################
# RESOURCE EXCEPTIONS
###############################################################################


class ResourceError(TagFlowError):
    """
    Base exception class for resource access errors.

    These relate to file, module, and other resource access issues.
    """

    def __init__(self, message: str = "", resource_type: str = "", resource_name: str = ""):
        prefix = f"{resource_type} '{resource_name}': " if resource_type and resource_name else ""
        super().__init__(f"{prefix}{message}")
        self.resource_type = resource_type
        self.resource_name = resource_name


class ContributorLoadError(ResourceError):
    """Raised when a configured variable contributor cannot be imported."""

    def __init__(self, message: str = "", contributor_path: str = ""):
        super().__init__(message, resource_type="Contributor", resource_name=contributor_path)
