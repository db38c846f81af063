from gorevlerim.exceptions import OwnerResolutionError
from gorevlerim.models.tasks import Owner, OwnerType
from gorevlerim.services import store


def resolve_owner(group_id: str | None, user_id: str) -> Owner:
    """Return the explicit group, or the user's personal group when none is given."""
    if group_id:
        return Owner(id=group_id, type=OwnerType.GROUP)

    group = store.select_maybe_one(
        "groups", {"created_by": user_id, "is_personal": True}, columns="id",
    )
    if not group:
        raise OwnerResolutionError("No personal group found. Is TODO_USER_ID correct?")
    return Owner(id=group["id"], type=OwnerType.GROUP)


def request_owner(owner_id: str | None, owner_type: OwnerType | None, user_id: str) -> Owner:
    """Owner named by HTTP request fields, defaulting to the user themself."""
    return Owner(id=owner_id or user_id, type=owner_type or OwnerType.USER)
