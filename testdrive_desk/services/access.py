"""Actor roles as supplied by the identity provider."""

from dataclasses import dataclass

from testdrive_desk.core.domain_exceptions import Unauthenticated, Unauthorized

ADMIN_ROLE = "ADMIN"
USER_ROLE = "USER"


@dataclass(frozen=True)
class Actor:
    actor_id: str | None
    role: str = USER_ROLE

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


def require_user(actor: Actor) -> str:
    if not actor.actor_id:
        raise Unauthenticated("You must be logged in.")
    return actor.actor_id


def require_admin(actor_role: str | None) -> None:
    if actor_role != ADMIN_ROLE:
        raise Unauthorized("Unauthorized access.")
