"""
AuthService - identity collaborator.

Sign-up, sign-in (username or email), public profiles and owner-gated
profile edit/delete. Every successful sign-up, sign-in or profile edit issues
a fresh JWT pair whose access token carries ``user_id``, ``username`` and
``email`` claims.
"""

from typing import Any, Dict, Optional

from django.contrib.auth import get_user_model
from django.contrib.auth.models import update_last_login
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from django.db import IntegrityError, transaction
from django.db.models import Q

from authentication.api.serializers.jwt_serializers import CustomRefreshToken
from authentication.infra.observability import metrics
from utils.logging_utils import describe_user, mask_value
from utils.ownership import require_owner
from utils.service_base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from utils.tracing import get_tracer

from .results import AuthResult, ProfileResult

User = get_user_model()
tracer = get_tracer(__name__)

PROFILE_FIELDS = ("username", "email", "bio", "location", "profile_pic")


class AuthService(BaseService):
    """
    Authentication service encapsulating account business logic.

    Collaborators are injected by the container: the store handle, the
    catalog (to list a profile's items) and the favorite service (liked
    items, and clearing favorites before an account is deleted).
    """

    def __init__(self, store, catalog_service, favorite_service):
        super().__init__()
        self.store = store
        self.catalog_service = catalog_service
        self.favorite_service = favorite_service

    def _users(self):
        return self.store.manager(User)

    @staticmethod
    def _issue_tokens(user, message: str = "") -> AuthResult:
        refresh = CustomRefreshToken.for_user(user)
        return AuthResult(
            user=user,
            access_token=str(refresh.access_token),
            refresh_token=str(refresh),
            message=message,
        )

    @staticmethod
    def _password_errors(password: str, user=None) -> Optional[str]:
        try:
            validate_password(password, user=user)
        except DjangoValidationError as e:
            return " ".join(e.messages)
        return None

    @BaseService.log_performance
    def register(
        self,
        username: Optional[str],
        email: Optional[str],
        password: Optional[str],
        password_confirmation: Optional[str],
    ) -> ServiceResult[AuthResult]:
        """
        Create an account and sign it in.

        Errors: VALIDATION_ERROR for missing fields, a taken username or
        email, a confirmation mismatch or a weak password.
        """
        with tracer.start_as_current_span("auth.register"):
            username = (username or "").strip()
            email = (email or "").strip().lower()

            if not username or not email or not password:
                metrics.registration_failed.labels(reason="missing_fields").inc()
                return service_err(ErrorCodes.VALIDATION_ERROR, "Username, email and password are required")

            users = self._users()
            if users.filter(username=username).exists():
                metrics.registration_failed.labels(reason="username_exists").inc()
                return service_err(ErrorCodes.VALIDATION_ERROR, "Username already exists")
            if users.filter(email__iexact=email).exists():
                metrics.registration_failed.labels(reason="email_exists").inc()
                return service_err(ErrorCodes.VALIDATION_ERROR, "Email already exists")

            if password != password_confirmation:
                metrics.registration_failed.labels(reason="password_mismatch").inc()
                return service_err(ErrorCodes.VALIDATION_ERROR, "Passwords do not match.")

            try:
                validate_email(email)
            except DjangoValidationError:
                metrics.registration_failed.labels(reason="invalid_email").inc()
                return service_err(ErrorCodes.VALIDATION_ERROR, "Enter a valid email address.")

            password_error = self._password_errors(password, User(username=username, email=email))
            if password_error:
                metrics.registration_failed.labels(reason="invalid_password").inc()
                return service_err(ErrorCodes.VALIDATION_ERROR, password_error)

            try:
                with self.store.atomic():
                    user = users.create_user(username=username, email=email, password=password)
            except IntegrityError:
                # Lost a race with a concurrent sign-up for the same username/email
                metrics.registration_failed.labels(reason="duplicate").inc()
                return service_err(ErrorCodes.VALIDATION_ERROR, "Username or email already exists")
            except Exception as e:
                metrics.registration_total.labels(status="failed").inc()
                return self.internal_error("registering user", e)

            metrics.registration_total.labels(status="success").inc()
            self.logger.info(f"Registered {describe_user(user)}")
            return service_ok(self._issue_tokens(user, "Registration successful"))

    @BaseService.log_performance
    def login(self, identifier: Optional[str], password: Optional[str]) -> ServiceResult[AuthResult]:
        """Authenticate by username or email. Errors: VALIDATION_ERROR, UNAUTHORIZED."""
        with tracer.start_as_current_span("auth.login"):
            identifier = (identifier or "").strip()
            if not identifier or not password:
                metrics.login_failed.labels(reason="missing_fields").inc()
                return service_err(ErrorCodes.VALIDATION_ERROR, "Identifier and password are required")

            user = self._users().filter(Q(username=identifier) | Q(email__iexact=identifier)).first()
            if user is None:
                metrics.login_total.labels(status="failed").inc()
                metrics.login_failed.labels(reason="user_not_found").inc()
                self.logger.info(f"Login failed for {mask_value(identifier)}: user not found")
                return service_err(ErrorCodes.UNAUTHORIZED, "User not found")

            if not user.check_password(password):
                metrics.login_total.labels(status="failed").inc()
                metrics.login_failed.labels(reason="wrong_password").inc()
                return service_err(ErrorCodes.UNAUTHORIZED, "Password is incorrect")

            if not user.is_active:
                metrics.login_total.labels(status="failed").inc()
                metrics.login_failed.labels(reason="inactive").inc()
                return service_err(ErrorCodes.UNAUTHORIZED, "Account is disabled")

            update_last_login(None, user)
            metrics.login_total.labels(status="success").inc()
            return service_ok(self._issue_tokens(user, "Login successful"))

    @BaseService.log_performance
    def get_profile(self, username: str, viewer=None) -> ServiceResult[ProfileResult]:
        """Public profile by username. The owner also sees their email and liked items."""
        user = self._users().filter(username=username).first()
        if user is None:
            return service_err(ErrorCodes.NOT_FOUND, "User not found")

        items_result = self.catalog_service.list_items({"seller": user.pk})
        if not items_result.ok:
            return items_result

        profile = ProfileResult(user=user, items=items_result.value)
        if require_owner(user, viewer) is None:
            favorites_result = self.favorite_service.list_favorites_for_user(user)
            if not favorites_result.ok:
                return favorites_result
            profile.is_owner = True
            profile.liked_items = favorites_result.value
        return service_ok(profile)

    @BaseService.log_performance
    def update_profile(self, user_id, caller, data: Dict[str, Any]) -> ServiceResult[AuthResult]:
        """Owner-gated profile edit. Returns the user with a fresh token pair."""
        user = self._users().filter(pk=user_id).first()
        if user is None:
            return service_err(ErrorCodes.NOT_FOUND, "User not found")

        denied = require_owner(user, caller, message="You can only update your own profile")
        if denied:
            return denied

        changes = {field: data[field] for field in PROFILE_FIELDS if field in data and data[field] is not None}

        if "username" in changes:
            changes["username"] = str(changes["username"]).strip()
            if not changes["username"]:
                return service_err(ErrorCodes.VALIDATION_ERROR, "Username cannot be empty")
            if self._users().filter(username=changes["username"]).exclude(pk=user.pk).exists():
                return service_err(ErrorCodes.VALIDATION_ERROR, "Username already exists")

        if "email" in changes:
            changes["email"] = str(changes["email"]).strip().lower()
            try:
                validate_email(changes["email"])
            except DjangoValidationError:
                return service_err(ErrorCodes.VALIDATION_ERROR, "Enter a valid email address.")
            if self._users().filter(email__iexact=changes["email"]).exclude(pk=user.pk).exists():
                return service_err(ErrorCodes.VALIDATION_ERROR, "Email already exists")

        try:
            with self.store.atomic():
                for field, value in changes.items():
                    setattr(user, field, value)
                if changes:
                    user.save(update_fields=list(changes.keys()))
        except IntegrityError:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Username or email already exists")
        except Exception as e:
            return self.internal_error(f"updating profile {user_id}", e)

        self.logger.info(f"Updated profile fields {sorted(changes.keys())} for {describe_user(user)}")
        return service_ok(self._issue_tokens(user, "User updated successfully"))

    @BaseService.log_performance
    def delete_account(self, user_id, caller) -> ServiceResult[None]:
        """
        Owner-gated account deletion.

        The user's favorites are removed through the favorite primitive first
        so no item cache keeps a dangling id. Items, offers and reviews keep
        their rows with a null user reference.
        """
        user = self._users().filter(pk=user_id).first()
        if user is None:
            return service_err(ErrorCodes.NOT_FOUND, "User not found")

        denied = require_owner(user, caller, message="You can only delete your own account")
        if denied:
            return denied

        try:
            with self.store.atomic():
                cleared = self.favorite_service.clear_user_favorites(user)
                if not cleared.ok:
                    transaction.set_rollback(True, using=self.store.alias)
                    return cleared
                user.delete()
        except Exception as e:
            return self.internal_error(f"deleting account {user_id}", e)

        metrics.account_deleted_total.inc()
        self.logger.info(f"Deleted account {user_id} ({cleared.value} favorites cleared)")
        return service_ok(None)
