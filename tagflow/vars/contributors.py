import importlib
from collections.abc import Iterable, Mapping
from typing import Any, ClassVar

from tagflow.exceptions import ContributorLoadError
from tagflow.vars.exceptions import ContributorRegistrationError
from tagflow.vars.variables import VariableValue, validate_section

CONTRIBUTOR_REGISTRY: dict[str, type["VariableContributor"]] = {}


class VariableContributor:
    """Base class for code that contributes tracking variables.

    Any subclass defining a contributor_name is registered automatically when
    the class is defined (at import time), in definition order.

    Example:
        class PageTypeContributor(VariableContributor):
            contributor_name = "page_type"

            def variables(self) -> dict[str, dict[str, VariableValue]]:
                return {"variables": {"s.pageType": "[node:type]"}}

    Attributes:
        contributor_name: Unique identifier for this contributor. Required for registration.
    """

    contributor_name: ClassVar[str | None] = None

    def __init_subclass__(cls, **kwargs: Any):
        """Register contributor subclasses when they are defined.

        Raises:
            ContributorRegistrationError: If a different class already registered
                                          the same contributor_name.
        """
        super().__init_subclass__(**kwargs)

        if not getattr(cls, "contributor_name", None):
            return

        existing_class = CONTRIBUTOR_REGISTRY.get(cls.contributor_name)
        if existing_class is not None and existing_class is not cls:
            raise ContributorRegistrationError(
                f"Contributor name '{cls.contributor_name}' is already registered "
                f"by {existing_class.__module__}.{existing_class.__name__}. "
                f"Cannot register {cls.__module__}.{cls.__name__}"
            )

        CONTRIBUTOR_REGISTRY[cls.contributor_name] = cls

    def variables(self) -> Mapping[str, Mapping[str, VariableValue]]:
        """Return variables keyed by section name, then by variable name."""
        return {}


def merge_contributions(
    contributions: Iterable[Mapping[str, Mapping[str, VariableValue]]],
) -> dict[str, dict[str, VariableValue]]:
    """
    Merge the output of several contributors.

    Variables defined by a single contributor keep their value. When more than
    one contributor defines the same variable, the entry becomes the ordered
    list of every candidate, in contribution order, so the last contributor is
    last in the list.

    Args:
        contributions: Section mappings, in contributor order.

    Returns:
        The merged sections.

    Raises:
        InvalidSectionError: If a contribution names an undeclared section.
    """
    merged: dict[str, dict[str, VariableValue]] = {}
    for contribution in contributions:
        for section_name, variables in (contribution or {}).items():
            section = validate_section(section_name).value
            target = merged.setdefault(section, {})
            for name, value in (variables or {}).items():
                if name not in target:
                    target[name] = value
                    continue
                target[name] = _as_list(target[name]) + _as_list(value)
    return merged


def _as_list(value: VariableValue) -> list[str]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def import_contributors(dotted_paths: Iterable[str]) -> list[type[VariableContributor]]:
    """
    Import contributor classes by dotted path so they register themselves.

    Args:
        dotted_paths: Paths like "mysite.analytics.PageTypeContributor".

    Returns:
        The imported classes.

    Raises:
        ContributorLoadError: If a path cannot be imported or is not a contributor.
    """
    classes = []
    for dotted_path in dotted_paths:
        try:
            module_path, class_name = dotted_path.rsplit(".", 1)
            module = importlib.import_module(module_path)
            contributor_class = getattr(module, class_name)
        except (ImportError, AttributeError, ValueError) as e:
            raise ContributorLoadError(f"Failed to import contributor: {e!s}", dotted_path) from e

        if not (isinstance(contributor_class, type) and issubclass(contributor_class, VariableContributor)):
            raise ContributorLoadError("Not a VariableContributor subclass", dotted_path)
        classes.append(contributor_class)
    return classes


def load_contributors() -> list[VariableContributor]:
    """Instantiate every registered contributor, in registration order."""
    return [contributor_class() for contributor_class in CONTRIBUTOR_REGISTRY.values()]
