import copy
from collections.abc import Mapping, Sequence
from typing import Union

from tagflow.constants import Section, VALID_SECTIONS
from tagflow.vars.exceptions import InvalidSectionError

# A variable value is a single string, or an ordered list of candidates when
# several sources contributed the same variable.
VariableValue = Union[str, Sequence[str]]
SectionVariables = dict[str, VariableValue]


def validate_section(section: str | Section, var_name: str = "") -> Section:
    """Return the Section for a section name, rejecting undeclared names.

    Args:
        section: A Section or its string value.
        var_name: Variable being written, for the error message.

    Raises:
        InvalidSectionError: If the name is not one of the declared sections.
    """
    try:
        return Section(section)
    except ValueError as e:
        raise InvalidSectionError(str(section), var_name=var_name) from e


def _normalize_value(value: object) -> VariableValue:
    if isinstance(value, (list, tuple)):
        return ["" if item is None else str(item) for item in value]
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


class VariableSet:
    """
    The static facts of a tracking snippet plus its sectioned variables.

    A VariableSet is filled by VariablesFactory and then treated as read-only:
    rendering always produces a new instance through from_variables().

    Sections are always present and always ordered header, variables, footer.
    """

    def __init__(self, js_file_location: str, version: str):
        """
        Args:
            js_file_location: The URL of the tracking JavaScript.
            version: The version of the tracking JavaScript.
        """
        self._js_file_location = js_file_location
        self._version = version
        self._code_snippet = ""
        self._image_file_location = ""
        self._sections: dict[Section, SectionVariables] = {section: {} for section in VALID_SECTIONS}

    @property
    def js_file_location(self) -> str:
        return self._js_file_location

    @property
    def version(self) -> str:
        return self._version

    @property
    def code_snippet(self) -> str:
        return self._code_snippet

    @property
    def image_file_location(self) -> str:
        return self._image_file_location

    def set_code_snippet(self, code_snippet: str) -> None:
        self._code_snippet = code_snippet

    def set_no_js(self, image_file_location: str) -> None:
        """Set the URL of the no-JavaScript image tracker."""
        self._image_file_location = image_file_location

    def set_all_sections(self, sections: Mapping[str, Mapping[str, VariableValue]]) -> None:
        """Replace every section named in ``sections``.

        Sections not named keep their current variables.
        """
        for section, variables in sections.items():
            self.set_section(section, variables)

    def set_section(self, section: str | Section, variables: Mapping[str, VariableValue]) -> None:
        """Replace the variables of a single section."""
        section = validate_section(section)
        self._sections[section] = {}
        for name, value in variables.items():
            self.set_variable(section, name, value)

    def set_variable(self, section: str | Section, name: str, value: VariableValue) -> None:
        """Set a single variable, overwriting any previous value.

        Raises:
            InvalidSectionError: If ``section`` is not a declared section.
        """
        section = validate_section(section, var_name=name)
        self._sections[section][name] = _normalize_value(value)

    def get_section(self, section: str | Section) -> SectionVariables:
        """Return a copy of one section's variables."""
        return copy.deepcopy(self._sections[validate_section(section)])

    def get_variables(self) -> dict[Section, SectionVariables]:
        """Return a copy of all variables, keyed by section in emission order."""
        return copy.deepcopy(self._sections)

    @classmethod
    def from_variables(
        cls, variables: "VariableSet", sections: Mapping[str, Mapping[str, VariableValue]]
    ) -> "VariableSet":
        """
        Create a new VariableSet with the settings of an existing one.

        Args:
            variables: The VariableSet to copy the static facts from.
            sections: The variables to set on the new instance.

        Returns:
            A new VariableSet; ``variables`` is left untouched.
        """
        new = cls(variables.js_file_location, variables.version)
        new.set_code_snippet(variables.code_snippet)
        new.set_no_js(variables.image_file_location)
        new._sections = variables.get_variables()
        new.set_all_sections(sections)
        return new

    def __repr__(self) -> str:
        counts = ", ".join(f"{section.value}={len(vars_)}" for section, vars_ in self._sections.items())
        return f"VariableSet({self._js_file_location!r}, {self._version!r}, {counts})"


class NullVariableSet:
    """
    Marker for a site whose tracking settings are incomplete.

    Not a VariableSet: code receiving a LoadedVariables value must check which
    of the two it holds before rendering. Its accessors mirror VariableSet's
    read side and return empty values so templates can still inspect it.
    """

    js_file_location = ""
    version = ""
    code_snippet = ""
    image_file_location = ""

    def get_section(self, section: str | Section) -> SectionVariables:
        return {}

    def get_variables(self) -> dict[Section, SectionVariables]:
        return {}

    def __repr__(self) -> str:
        return "NullVariableSet()"


LoadedVariables = Union[VariableSet, NullVariableSet]
