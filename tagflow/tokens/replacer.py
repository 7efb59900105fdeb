from collections.abc import Mapping, Sequence
from typing import Any

from jinja2 import Environment, Undefined
from markupsafe import escape

from tagflow.constants import TOKEN_PATH_SEPARATOR, TOKEN_PATTERN, TOKEN_TYPE_ALIASES


class Jinja2TokenReplacer:
    """Default token replacer resolving [type:field:path] against context data.

    Each placeholder looks up its type in the context data (through the type
    aliases, so [term:name] reads the 'taxonomy_term' entry), then walks the
    field path one segment at a time using the Jinja2 environment's attribute
    and item lookup. Values are escaped with MarkupSafe when sanitizing.

    This only covers plain attribute paths. Applications with a richer token
    vocabulary pass their own TokenReplacer.
    """

    def __init__(self, environment: Environment | None = None):
        # Only the lookup helpers of the environment are used; nothing is compiled.
        self.environment = environment or Environment(autoescape=False)  # noqa: S701

    def replace(self, text: str, data: Mapping[str, Any], clear: bool = False, sanitize: bool = False) -> str:
        """Substitute every placeholder in ``text``.

        Args:
            text: Text containing placeholders.
            data: Context objects keyed by token or entity type.
            clear: Remove unresolved placeholders instead of leaving them as-is.
            sanitize: HTML-escape substituted values.

        Returns:
            The substituted text.
        """

        def _substitute(match) -> str:
            value = self.lookup(data, match.group(1), match.group(2))
            if value is None:
                return "" if clear else match.group(0)
            return str(escape(value)) if sanitize else value

        return TOKEN_PATTERN.sub(_substitute, text)

    def lookup(self, data: Mapping[str, Any], token_type: str, path: str) -> str | None:
        """Return the string value of one placeholder, or None if unresolved."""
        if not token_type or not path:
            return None

        obj = data.get(TOKEN_TYPE_ALIASES.get(token_type, token_type), data.get(token_type))
        for segment in path.split(TOKEN_PATH_SEPARATOR):
            if obj is None:
                return None
            obj = self._get(obj, segment)
            if isinstance(obj, Undefined):
                return None

        return self._stringify(obj)

    def _get(self, obj: Any, segment: str) -> Any:
        if isinstance(obj, Mapping):
            return self.environment.getitem(obj, segment)
        if isinstance(obj, Sequence) and not isinstance(obj, str) and segment.isdigit():
            return self.environment.getitem(obj, int(segment))
        return self.environment.getattr(obj, segment)

    @staticmethod
    def _stringify(value: Any) -> str | None:
        if value is None or callable(value):
            return None
        if isinstance(value, (list, tuple)):
            return ", ".join(str(item) for item in value if item is not None)
        if isinstance(value, Mapping):
            return None
        return str(value)
