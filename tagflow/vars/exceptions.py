"""
Variable system exceptions.

This module defines exceptions specific to variable sets and their contributors.
"""

from tagflow.constants import VALID_SECTIONS
from tagflow.exceptions import TagFlowError

###############################################################################
# VARIABLE EXCEPTIONS
###############################################################################


class VariableError(TagFlowError):
    """
    Base exception class for variable-related errors.

    These relate to building, merging and accessing variable sets.
    """

    def __init__(self, message: str = "", var_name: str = "", section: str = ""):
        prefix = ""
        if var_name:
            prefix = f"Variable '{var_name}'"
            if section:
                prefix += f" in section '{section}'"
            prefix += ": "

        super().__init__(f"{prefix}{message}")
        self.var_name = var_name
        self.section = section


class InvalidSectionError(VariableError, ValueError):
    """Raised when writing to a section name outside of the declared sections."""

    def __init__(self, section: str, var_name: str = ""):
        valid = ", ".join(s.value for s in VALID_SECTIONS)
        super().__init__(f"'{section}' is not a valid section. Valid sections: {valid}.", var_name=var_name)
        self.section = str(section)


###############################################################################
# CONTRIBUTOR EXCEPTIONS
###############################################################################


class ContributorError(VariableError):
    """Base exception class for variable contributor errors."""


class ContributorRegistrationError(ContributorError):
    """Raised when two different contributor classes claim the same name."""
