"""Request dependencies shared by the routers."""

from fastapi import Header

from testdrive_desk.services.access import USER_ROLE, Actor


def get_actor(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> Actor:
    """Identity as forwarded by the upstream identity provider."""
    role = (x_user_role or USER_ROLE).strip().upper()
    actor_id = x_user_id.strip() if x_user_id else None
    return Actor(actor_id=actor_id or None, role=role)
