"""
Tests for bcrypt password hashing.
"""

from finance_tracker.services.password_hasher import PasswordHasher


class TestHash:

    def test_hash_is_not_the_password(self, password_hasher):
        hashed = password_hasher.hash("s3cret-pass")
        assert hashed != "s3cret-pass"
        assert "s3cret-pass" not in hashed

    def test_same_password_hashes_differently(self, password_hasher):
        """Each hash carries its own random salt."""
        assert password_hasher.hash("s3cret-pass") != password_hasher.hash("s3cret-pass")

    def test_hash_embeds_cost_factor(self):
        hasher = PasswordHasher(rounds=5)
        assert hasher.hash("s3cret-pass").startswith("$2b$05$")

    def test_unicode_password(self, password_hasher):
        hashed = password_hasher.hash("senha-çãé-🔑")
        assert password_hasher.verify("senha-çãé-🔑", hashed) is True


class TestVerify:

    def test_correct_password_verifies(self, password_hasher):
        hashed = password_hasher.hash("s3cret-pass")
        assert password_hasher.verify("s3cret-pass", hashed) is True

    def test_wrong_password_fails(self, password_hasher):
        hashed = password_hasher.hash("s3cret-pass")
        assert password_hasher.verify("other-pass", hashed) is False

    def test_verifies_hash_made_with_other_cost(self, password_hasher):
        """Cost comes from the stored hash, not from the hasher."""
        hashed = PasswordHasher(rounds=5).hash("s3cret-pass")
        assert password_hasher.verify("s3cret-pass", hashed) is True

    def test_malformed_hash_returns_false(self, password_hasher):
        assert password_hasher.verify("s3cret-pass", "not-a-bcrypt-hash") is False
        assert password_hasher.verify("s3cret-pass", "") is False

    def test_dummy_verify_does_not_raise(self, password_hasher):
        assert password_hasher.dummy_verify("anything") is None

    def test_password_past_bcrypt_limit_does_not_match(self, password_hasher):
        """bcrypt reads 72 bytes; anything appended must not still log in."""
        password = "x" * 72
        hashed = password_hasher.hash(password)

        assert password_hasher.verify(password, hashed) is True
        assert password_hasher.verify(password + "anything", hashed) is False
