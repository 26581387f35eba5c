import pytest
from rest_framework_simplejwt.tokens import AccessToken

from infrastructure.container import container
from marketplace.models import Favorite, Item
from marketplace.tests.factories import FavoriteFactory, ItemFactory, UserFactory
from utils.service_base import ErrorCodes

STRONG_PASSWORD = "Tr1cky-Harbor-42"


@pytest.fixture
def auth_service():
    return container.auth_service()


@pytest.mark.unit
@pytest.mark.django_db
class TestRegister:
    def test_register_issues_tokens_with_identity_claims(self, auth_service):
        result = auth_service.register("alice", "Alice@Example.com", STRONG_PASSWORD, STRONG_PASSWORD)

        assert result.ok is True
        auth = result.value
        assert auth.message == "Registration successful"
        assert auth.user.email == "alice@example.com"
        assert auth.user.check_password(STRONG_PASSWORD)
        claims = AccessToken(auth.access_token)
        assert claims["user_id"] == str(auth.user.pk)
        assert claims["username"] == "alice"
        assert claims["email"] == "alice@example.com"

    def test_missing_fields(self, auth_service):
        result = auth_service.register("alice", "", STRONG_PASSWORD, STRONG_PASSWORD)

        assert result.error == ErrorCodes.VALIDATION_ERROR

    def test_duplicate_username(self, auth_service):
        UserFactory(username="alice")

        result = auth_service.register("alice", "new@example.com", STRONG_PASSWORD, STRONG_PASSWORD)

        assert result.error == ErrorCodes.VALIDATION_ERROR
        assert result.error_detail == "Username already exists"

    def test_duplicate_email_is_case_insensitive(self, auth_service):
        UserFactory(email="taken@example.com")

        result = auth_service.register("bob", "TAKEN@example.com", STRONG_PASSWORD, STRONG_PASSWORD)

        assert result.error_detail == "Email already exists"

    def test_password_confirmation_mismatch(self, auth_service):
        result = auth_service.register("bob", "bob@example.com", STRONG_PASSWORD, "something-else-9")

        assert result.error_detail == "Passwords do not match."

    def test_weak_password(self, auth_service):
        result = auth_service.register("bob", "bob@example.com", "123", "123")

        assert result.error == ErrorCodes.VALIDATION_ERROR

    def test_invalid_email(self, auth_service):
        result = auth_service.register("bob", "not-an-email", STRONG_PASSWORD, STRONG_PASSWORD)

        assert result.error_detail == "Enter a valid email address."


@pytest.mark.unit
@pytest.mark.django_db
class TestLogin:
    @pytest.fixture
    def user(self, db):
        user = UserFactory(username="carol", email="carol@example.com")
        user.set_password(STRONG_PASSWORD)
        user.save()
        return user

    def test_login_by_username(self, auth_service, user):
        result = auth_service.login("carol", STRONG_PASSWORD)

        assert result.ok is True
        assert result.value.message == "Login successful"
        assert result.value.user == user

    def test_login_by_email(self, auth_service, user):
        assert auth_service.login("CAROL@example.com", STRONG_PASSWORD).value.user == user

    def test_unknown_user(self, auth_service, user):
        result = auth_service.login("nobody", STRONG_PASSWORD)

        assert result.error == ErrorCodes.UNAUTHORIZED
        assert result.error_detail == "User not found"

    def test_wrong_password(self, auth_service, user):
        result = auth_service.login("carol", "wrong-password")

        assert result.error == ErrorCodes.UNAUTHORIZED
        assert result.error_detail == "Password is incorrect"

    def test_inactive_user(self, auth_service, user):
        user.is_active = False
        user.save()

        assert auth_service.login("carol", STRONG_PASSWORD).error_detail == "Account is disabled"

    def test_missing_identifier(self, auth_service):
        assert auth_service.login("", STRONG_PASSWORD).error == ErrorCodes.VALIDATION_ERROR


@pytest.mark.unit
@pytest.mark.django_db
class TestProfile:
    def test_public_profile_lists_items(self, auth_service):
        owner = UserFactory()
        item = ItemFactory(seller=owner)

        result = auth_service.get_profile(owner.username)

        assert result.ok is True
        assert result.value.is_owner is False
        assert [found.pk for found in result.value.items] == [item.pk]
        assert result.value.liked_items is None

    def test_owner_sees_liked_items(self, auth_service):
        owner = UserFactory()
        liked = FavoriteFactory(user=owner).item

        result = auth_service.get_profile(owner.username, viewer=owner)

        assert result.value.is_owner is True
        assert [found.pk for found in result.value.liked_items] == [liked.pk]

    def test_unknown_profile(self, auth_service):
        assert auth_service.get_profile("ghost").error == ErrorCodes.NOT_FOUND

    def test_update_own_profile(self, auth_service):
        user = UserFactory()

        result = auth_service.update_profile(user.pk, user, {"bio": "Collector", "location": "Porto"})

        assert result.ok is True
        assert result.value.message == "User updated successfully"
        user.refresh_from_db()
        assert user.bio == "Collector"
        assert user.location == "Porto"

    def test_cannot_update_someone_else(self, auth_service):
        user = UserFactory()

        result = auth_service.update_profile(user.pk, UserFactory(), {"bio": "Hacked"})

        assert result.error == ErrorCodes.FORBIDDEN

    def test_update_to_taken_username(self, auth_service):
        UserFactory(username="taken")
        user = UserFactory()

        result = auth_service.update_profile(user.pk, user, {"username": "taken"})

        assert result.error == ErrorCodes.VALIDATION_ERROR


@pytest.mark.unit
@pytest.mark.django_db
class TestDeleteAccount:
    def test_delete_clears_favorite_caches(self, auth_service):
        user = UserFactory()
        item = ItemFactory()
        container.favorite_service().add_favorite(user, item.pk)
        own_item = ItemFactory(seller=user)

        result = auth_service.delete_account(user.pk, user)

        assert result.ok is True
        item.refresh_from_db()
        assert item.favourited_by == []
        assert not Favorite.objects.exists()
        # Items survive with the seller reference cleared
        assert Item.objects.get(pk=own_item.pk).seller is None

    def test_cannot_delete_someone_else(self, auth_service):
        user = UserFactory()

        result = auth_service.delete_account(user.pk, UserFactory())

        assert result.error == ErrorCodes.FORBIDDEN
