import pytest

from stationery_tracker import settings
from stationery_tracker.core.auth import AuthStore, UserRole, hash_password, verify_password
from stationery_tracker.errors import (
    AuthError,
    DuplicateUserError,
    ProtectedUserError,
    SelfDeletionError,
)


@pytest.fixture
def auth(storage):
    return AuthStore(storage)


def test_password_hashes_are_salted():
    first, second = hash_password("secret"), hash_password("secret")
    assert first != second
    assert verify_password("secret", first)
    assert not verify_password("wrong", first)


def test_default_admin_can_log_in(auth, storage):
    assert not auth.is_authenticated
    assert not auth.login("admin", "wrong")
    assert auth.login(" Admin ", settings.DEFAULT_ADMIN_PASSWORD)

    assert auth.current_user.is_admin
    assert AuthStore(storage).current_user.username == "admin"

    auth.logout()
    assert AuthStore(storage).current_user is None


def test_add_and_delete_users(auth, storage):
    user = auth.add_user("bob", "pw")
    assert user.role is UserRole.USER
    assert [u.username for u in AuthStore(storage).users] == ["admin", "bob"]

    with pytest.raises(DuplicateUserError):
        auth.add_user("BOB", "other")
    with pytest.raises(AuthError):
        auth.add_user("  ", "pw")

    admin = auth.login("admin", settings.DEFAULT_ADMIN_PASSWORD)
    auth.delete_user(user.id, acting_user_id=admin.id)
    assert [u.username for u in auth.users] == ["admin"]
    assert [u.username for u in AuthStore(storage).users] == ["admin"]


def test_users_cannot_delete_themselves(auth):
    bob = auth.add_user("bob", "pw", UserRole.ADMIN)
    assert auth.login("bob", "pw") == bob

    with pytest.raises(SelfDeletionError):
        auth.delete_user(bob.id)
    with pytest.raises(SelfDeletionError):
        auth.delete_user(bob.id, acting_user_id=bob.id)
    assert auth.find_user(bob.id) == bob


def test_deleting_the_saved_session_user_logs_out(auth):
    bob = auth.add_user("bob", "pw")
    auth.login("bob", "pw")

    auth.delete_user(bob.id, acting_user_id="default-admin")

    assert not auth.is_authenticated


def test_primary_admin_is_protected(auth):
    admin = auth.users[0]
    with pytest.raises(ProtectedUserError):
        auth.delete_user(admin.id)
    assert auth.users == [admin]


def test_unreadable_users_are_skipped(storage):
    storage.set(settings.USERS_KEY, [{"username": "no-id"}, "junk"])
    storage.set(settings.SESSION_KEY, "ghost")

    auth = AuthStore(storage)

    assert [u.username for u in auth.users] == ["admin"]
    assert not auth.is_authenticated


def test_each_login_gets_its_own_user(auth, storage):
    bob = auth.add_user("bob", "pw")

    first = auth.login("admin", settings.DEFAULT_ADMIN_PASSWORD)
    second = auth.login("bob", "pw")

    # Callers keep the returned id; a later login doesn't change who they are
    assert auth.find_user(first.id).is_admin
    assert auth.find_user(second.id) == bob
    assert AuthStore(storage).current_user == bob
