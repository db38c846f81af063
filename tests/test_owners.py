import pytest

from gorevlerim.exceptions import OwnerResolutionError
from gorevlerim.models.tasks import Owner, OwnerType
from gorevlerim.services.owners import request_owner, resolve_owner
from conftest import PERSONAL_GROUP_ID, USER_ID


class TestResolveOwner:
    def test_explicit_group_verbatim(self, fake_store):
        owner = resolve_owner("group-42", USER_ID)
        assert owner == Owner(id="group-42", type=OwnerType.GROUP)

    def test_explicit_group_not_checked(self, fake_store):
        assert resolve_owner("does-not-exist", USER_ID).id == "does-not-exist"

    def test_personal_group(self, fake_store, personal_group):
        fake_store.add("groups", id="shared", created_by=USER_ID, is_personal=False)
        owner = resolve_owner(None, USER_ID)
        assert owner == Owner(id=PERSONAL_GROUP_ID, type=OwnerType.GROUP)

    def test_personal_group_of_other_user_ignored(self, fake_store):
        fake_store.add("groups", id="theirs", created_by="user-2", is_personal=True)
        with pytest.raises(OwnerResolutionError):
            resolve_owner(None, USER_ID)

    def test_no_personal_group(self, fake_store):
        with pytest.raises(OwnerResolutionError, match="No personal group"):
            resolve_owner(None, USER_ID)


class TestRequestOwner:
    def test_defaults_to_user(self):
        assert request_owner(None, None, USER_ID) == Owner(id=USER_ID, type=OwnerType.USER)

    def test_explicit_owner(self):
        owner = request_owner("group-7", OwnerType.GROUP, USER_ID)
        assert owner == Owner(id="group-7", type=OwnerType.GROUP)
