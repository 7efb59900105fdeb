import logging
from typing import Any

from pydantic import BaseModel, ConfigDict

from tagflow.access import AccessAggregator, AccessVote, TrackingMatcher, load_matchers
from tagflow.collaborators import EntityLoader, FieldIntrospector, PathRouter, RouteMatch, TokenReplacer
from tagflow.constants import DEFAULT_ANALYTICS_FIELD_TYPE
from tagflow.rendering import EntityOverride, SnippetComposer, VariableRenderer, extract_entity_override
from tagflow.settings import TagFlowSettings
from tagflow.tokens import Jinja2TokenReplacer, TokenResolver, normalize_token_type
from tagflow.vars import LoadedVariables, NullVariableSet, VariableSet

logger = logging.getLogger(__name__)


class DisplayPayload(BaseModel):
    """What the page layer needs to print the tracking code."""

    model_config = ConfigDict(frozen=True)

    script_url: str
    script_version: str
    image_url: str = ""
    formatted_variables: str = ""


class VariableFormatter:
    """
    Formats analytics variables into the tracking code for one request.

    A formatter holds request-scoped state (matchers, token context
    overrides) and must not be shared between requests.
    """

    def __init__(
        self,
        variables: LoadedVariables,
        replacer: TokenReplacer,
        path_router: PathRouter,
        entity_loader: EntityLoader,
        route_match: RouteMatch,
        field_introspector: FieldIntrospector,
        analytics_field_type: str = DEFAULT_ANALYTICS_FIELD_TYPE,
    ) -> None:
        """
        Args:
            variables: The variables to format, as returned by VariablesFactory.load().
            replacer: Token substitution service.
            path_router: Current path and path -> route parameters.
            entity_loader: Loads entities referenced by route parameters.
            route_match: The current route with upcast entity parameters.
            field_introspector: Finds entity types carrying analytics fields.
            analytics_field_type: Field type holding per-entity overrides.
        """
        self.variables = variables
        self.route_match = route_match
        self.field_introspector = field_introspector
        self.analytics_field_type = analytics_field_type
        self.resolver = TokenResolver(replacer, path_router, entity_loader)

        self._tracking_matchers: list[TrackingMatcher] = []
        self._token_data_overrides: dict[str, Any] = {}
        self._aggregator = AccessAggregator()

    @classmethod
    def for_request(
        cls,
        variables: LoadedVariables,
        request: Any,
        settings: TagFlowSettings,
        replacer: TokenReplacer | None = None,
    ) -> "VariableFormatter":
        """
        Build a formatter whose collaborators are all served by ``request``.

        The matchers listed in settings.matchers are loaded and added in order.

        Args:
            variables: The loaded variables.
            request: Object implementing every collaborator protocol, such as
                     tagflow.request.StaticRequest.
            settings: The TagFlow settings.
            replacer: Token replacer; defaults to Jinja2TokenReplacer.
        """
        formatter = cls(
            variables,
            replacer or Jinja2TokenReplacer(),
            path_router=request,
            entity_loader=request,
            route_match=request,
            field_introspector=request,
            analytics_field_type=settings.analytics_field_type,
        )
        for matcher in load_matchers(settings.matchers, settings, request):
            formatter.add_tracking_matcher(matcher)
        return formatter

    @property
    def tracking_matchers(self) -> list[TrackingMatcher]:
        return list(self._tracking_matchers)

    def add_tracking_matcher(self, tracking_matcher: TrackingMatcher) -> None:
        """Add a matcher for determining if a request should be tracked."""
        self._tracking_matchers.append(tracking_matcher)

    def add_token_context(self, entity: Any, entity_type: str) -> None:
        """
        Add an entity to use when rendering tokens of ``entity_type``.

        It takes precedence over any entity derived from the request path.
        """
        self._token_data_overrides[normalize_token_type(entity_type)] = entity

    def render_markup(self) -> DisplayPayload | None:
        """
        Build the display payload for the current request.

        Returns:
            None when tracking is not configured or a matcher forbids it.
        """
        if isinstance(self.variables, NullVariableSet):
            return None

        if self.access().is_forbidden:
            logger.debug("Tracking code suppressed by a tracking matcher")
            return None

        return DisplayPayload(
            script_url=self.variables.js_file_location,
            script_version=self.variables.version,
            image_url=self.variables.image_file_location,
            formatted_variables=self.get_formatted_variables(),
        )

    def access(self) -> AccessVote:
        """
        Determine if tracking should be skipped.

        Tracking is skipped only when a matcher forbids it; with no matchers,
        or only neutral votes, the request is tracked.
        """
        return self._aggregator.evaluate(self._tracking_matchers)

    def get_formatted_variables(self) -> str:
        """Render all sections and snippets into the final tracking code."""
        entity_override = self.extract_entity_overrides()
        composer = SnippetComposer(self.resolver, self._token_data_overrides)
        return composer.compose(self.render(), entity_override)

    def extract_entity_overrides(self) -> EntityOverride:
        """Overrides of the entity shown on the current route, or the defaults."""
        return extract_entity_override(self.field_introspector, self.route_match, self.analytics_field_type)

    def render(self) -> VariableSet:
        """
        Return a new VariableSet with tokens replaced and names escaped.

        Raises:
            NotConfiguredError: If tracking is not configured.
        """
        return VariableRenderer(self.resolver, self._token_data_overrides).render(self.variables)
