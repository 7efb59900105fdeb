"""
TagFlow Variables System

This package holds the tracking variable model and how it is assembled:
- VariableSet / NullVariableSet, the configured and unconfigured variants
- Contributors that add sectioned variables from code
- VariablesFactory, which merges settings and contributions for a request
"""

from tagflow.vars.contributors import (
    CONTRIBUTOR_REGISTRY,
    VariableContributor,
    import_contributors,
    load_contributors,
    merge_contributions,
)
from tagflow.vars.exceptions import InvalidSectionError, VariableError
from tagflow.vars.factory import VariablesFactory
from tagflow.vars.variables import (
    LoadedVariables,
    NullVariableSet,
    SectionVariables,
    VariableSet,
    VariableValue,
    validate_section,
)

__all__ = [
    "CONTRIBUTOR_REGISTRY",
    "InvalidSectionError",
    "LoadedVariables",
    "NullVariableSet",
    "SectionVariables",
    "VariableContributor",
    "VariableError",
    "VariableSet",
    "VariableValue",
    "VariablesFactory",
    "import_contributors",
    "load_contributors",
    "merge_contributions",
    "validate_section",
]
