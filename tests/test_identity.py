"""Bearer token -> Identity."""

from datetime import timedelta

import pytest
from jose import jwt

from storefront.domain.errors import Unauthorized


class TestIdentityResolver:
    def test_resolves_user_claims(self, resolver, token):
        identity = resolver.resolve(token("u-1", "u1@shop.test", firstName="Ola"))

        assert identity.user_id == "u-1"
        assert identity.email == "u1@shop.test"
        assert identity.first_name == "Ola"
        assert identity.is_admin is False

    def test_admin_from_allow_list(self, resolver, token):
        identity = resolver.resolve(token("admin-1", "ADMIN@shop.test"))
        assert identity.is_admin is True

    def test_admin_from_claim(self, resolver, token):
        identity = resolver.resolve(token("u-2", "ops@shop.test", isAdmin=True))
        assert identity.is_admin is True

    def test_wrong_signature_is_rejected(self, resolver):
        forged = jwt.encode({"userId": "u-1", "email": "u1@shop.test"}, "other-secret", algorithm="HS256")
        with pytest.raises(Unauthorized):
            resolver.resolve(forged)

    def test_expired_token_is_rejected(self, resolver, token):
        with pytest.raises(Unauthorized):
            resolver.resolve(token("u-1", "u1@shop.test", expires_in=timedelta(minutes=-5)))

    def test_missing_user_claim_is_rejected(self, resolver):
        incomplete = jwt.encode({"email": "u1@shop.test"}, "test-secret", algorithm="HS256")
        with pytest.raises(Unauthorized):
            resolver.resolve(incomplete)

    def test_garbage_is_rejected(self, resolver):
        with pytest.raises(Unauthorized):
            resolver.resolve("not-a-jwt")

    def test_non_string_email_is_rejected(self, resolver, token):
        with pytest.raises(Unauthorized):
            resolver.resolve(token("u-1", 123))

    def test_object_user_claim_is_rejected(self, resolver, token):
        with pytest.raises(Unauthorized):
            resolver.resolve(token({"id": "u-1"}, "u1@shop.test"))

    def test_non_string_name_is_rejected(self, resolver, token):
        with pytest.raises(Unauthorized):
            resolver.resolve(token("u-1", "u1@shop.test", firstName=["Ola"]))
