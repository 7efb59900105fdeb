import logging
from collections.abc import Sequence
from typing import Any

from tagflow.constants import NOT_CONFIGURED_WARNING, Section
from tagflow.logger import logger as tagflow_logger
from tagflow.settings import TagFlowSettings
from tagflow.vars.contributors import (
    VariableContributor,
    import_contributors,
    load_contributors,
    merge_contributions,
)
from tagflow.vars.variables import LoadedVariables, NullVariableSet, VariableSet

logger = logging.getLogger(__name__)


class VariablesFactory:
    """
    Builds the VariableSet for a request from settings and contributors.

    Merge order (later wins for the same variable name):
    1. Contributor variables, merged across contributors (see merge_contributions)
    2. Admin-configured extra variables, written into the 'variables' section
    """

    def __init__(
        self,
        settings: TagFlowSettings,
        contributors: Sequence[VariableContributor] | None = None,
        warning_logger: Any = None,
    ) -> None:
        """
        Args:
            settings: The loaded TagFlow settings.
            contributors: Contributors to invoke. When None, the classes listed in
                          settings.contributors are imported and every registered
                          contributor is used.
            warning_logger: Receives the not-configured warning. Defaults to the
                            TagFlow logger.
        """
        self.settings = settings
        self._contributors = contributors
        self.warning_logger = warning_logger or tagflow_logger

    @property
    def contributors(self) -> list[VariableContributor]:
        if self._contributors is None:
            import_contributors(self.settings.contributors)
            self._contributors = load_contributors()
        return list(self._contributors)

    def load(self) -> LoadedVariables:
        """
        Load the analytics variables.

        Returns:
            A new VariableSet, or a NullVariableSet when the script location or
            version is missing. In the latter case a single warning is logged.
        """
        if not self.settings.is_configured:
            self.warning_logger.warning(NOT_CONFIGURED_WARNING)
            return NullVariableSet()

        variables = VariableSet(self.settings.js_file_location, self.settings.version)

        if self.settings.image_file_location:
            variables.set_no_js(self.settings.image_file_location)

        if self.settings.codesnippet:
            variables.set_code_snippet(self.settings.codesnippet)

        contributors = self.contributors
        variables.set_all_sections(merge_contributions(c.variables() for c in contributors))
        logger.debug(f"Merged variables from {len(contributors)} contributor(s)")

        for extra in self.settings.extra_variables:
            variables.set_variable(Section.VARIABLES, extra.name, extra.value)

        return variables
