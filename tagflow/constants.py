import re
from enum import Enum

try:
    # Python 3.11+ provides StrEnum
    from enum import StrEnum
except ImportError:

    class StrEnum(str, Enum):
        """Compatibility StrEnum for Python < 3.11"""

        def __str__(self) -> str:
            return str(self.value)


class Section(StrEnum):
    """
    The fixed groups that partition tracking variables by emission position.

    Declaration order is the order sections are emitted relative to the main
    code snippet: header variables come first, then the snippet, then the
    main variables and finally the footer variables.
    """

    HEADER = "header"
    VARIABLES = "variables"
    FOOTER = "footer"


# Sections in their fixed insertion order.
VALID_SECTIONS: tuple[Section, ...] = tuple(Section)


class RoleTrackingType(StrEnum):
    """
    Policy used by the role matcher.

    Attributes:
        INCLUSIVE: Only users holding one of the tracked roles are tracked.
        EXCLUSIVE: Users holding one of the tracked roles are NOT tracked.
    """

    INCLUSIVE = "inclusive"
    EXCLUSIVE = "exclusive"

    @classmethod
    def _missing_(cls, value: object) -> "RoleTrackingType | None":
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        return None


# Placeholder of the form [entity_type:field:path].
TOKEN_PATTERN = re.compile(r"\[([^\s\[\]:]*):([^\s\[\]]*)\]")

# Token vocabulary names that differ from the entity type they load.
TOKEN_TYPE_ALIASES: dict[str, str] = {"term": "taxonomy_term"}

# Separator between the segments of a token field path.
TOKEN_PATH_SEPARATOR = ":"

# Field type carrying per-entity snippet overrides.
DEFAULT_ANALYTICS_FIELD_TYPE = "adobe_analytics"

# Keys read from the first value of an analytics field.
FIELD_INCLUDE_MAIN_SNIPPET = "include_main_codesnippet"
FIELD_INCLUDE_SECTION_VARIABLES = "include_custom_variables"
FIELD_CUSTOM_SNIPPET = "codesnippet"

TAGFLOW_DEFAULT_SETTINGS_FILE = "tagflow.yaml"
TAGFLOW_SETTINGS_ENV_VAR = "TAGFLOW_SETTINGS"
TAGFLOW_DEFAULT_MATCHERS = ["admin_route", "role"]
TAGFLOW_DEFAULT_LOGGER = {"directory": ".tagflow/logs", "level": "INFO"}

# Keys whose values are masked in logs and CLI tables.
PROTECTED_KEYWORDS = ("password", "secret", "access_token", "api_key", "apikey", "private_key")

NOT_CONFIGURED_WARNING = (
    "Analytics tracking is installed but missing required configuration settings "
    "(js_file_location and version). Nothing will be rendered."
)
