"""Channel subscription / publishing checks built on generic permission decisions."""
from __future__ import annotations

from typing import TYPE_CHECKING

from mp_authz.kernel.security.principal import Principal

if TYPE_CHECKING:
    from mp_authz.application.authorization.service import AuthorizationService

__all__ = ["ChannelPolicy"]


class ChannelPolicy:
    """Answers channel questions via owner ``"<prefix>.<channel id>"``.

    Activity names and the framework owner come from the service settings.
    """

    def __init__(self, service: "AuthorizationService") -> None:
        self._service = service
        self._settings = service.settings

    def channel_owner(self, channel_id: int | str) -> str:
        return f"{self._settings.channel_owner_prefix}.{channel_id}"

    def can_principal_subscribe(self, principal: Principal, channel_id: int | str) -> bool:
        return self._service.does_principal_have_permission(
            principal,
            self.channel_owner(channel_id),
            self._settings.subscribe_activity,
        )

    def can_principal_render(self, principal: Principal, channel_id: int | str) -> bool:
        return self.can_principal_subscribe(principal, channel_id)

    def can_principal_publish(self, principal: Principal) -> bool:
        return self._service.does_principal_have_permission(
            principal,
            self._settings.framework_owner,
            self._settings.publish_activity,
        )
