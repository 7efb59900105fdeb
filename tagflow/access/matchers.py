import logging
from collections.abc import Iterable
from typing import Any

from tagflow.access.base import AccessVote, TrackingMatcher
from tagflow.collaborators import AdminContext, CurrentUser
from tagflow.constants import RoleTrackingType

logger = logging.getLogger(__name__)


class AdminRouteMatcher(TrackingMatcher):
    """Skip tracking on administration pages."""

    matcher_name = "admin_route"

    def __init__(self, admin_context: AdminContext):
        self.admin_context = admin_context

    @classmethod
    def create(cls, settings: Any, request: Any) -> "AdminRouteMatcher":
        return cls(request)

    def access(self) -> AccessVote:
        if self.admin_context.is_admin_route():
            logger.debug("This is an administration page.")
            return AccessVote.FORBIDDEN
        return AccessVote.NEUTRAL


class RoleMatcher(TrackingMatcher):
    """
    Skip tracking based on the roles of the current user.

    With the inclusive policy, users holding a tracked role are tracked. With
    the exclusive policy (the default), users holding a tracked role are not.
    A user holding none of the tracked roles is tracked under both policies.
    """

    matcher_name = "role"

    def __init__(
        self,
        current_user: CurrentUser,
        track_roles: Iterable[str] = (),
        tracking_type: RoleTrackingType | str = RoleTrackingType.EXCLUSIVE,
    ):
        self.current_user = current_user
        self.track_roles = [role for role in track_roles if role]
        self.tracking_type = RoleTrackingType(tracking_type)

    @classmethod
    def create(cls, settings: Any, request: Any) -> "RoleMatcher":
        return cls(request, settings.track_roles, settings.role_tracking_type)

    def access(self) -> AccessVote:
        user_roles = set(self.current_user.get_roles())
        intersection = [role for role in self.track_roles if role in user_roles]

        if not intersection or self.tracking_type is RoleTrackingType.INCLUSIVE:
            return AccessVote.ALLOWED

        logger.debug(f"The current user holds excluded role(s): {', '.join(intersection)}")
        return AccessVote.FORBIDDEN
