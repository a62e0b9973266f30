"""
Tests for password hashing.
"""
from profilehub.core.security import PasswordHasher

hasher = PasswordHasher(rounds=4)


def test_hash_is_not_plaintext():
    digest = hasher.hash("pw123")
    assert digest != "pw123"
    assert digest.startswith("$2")


def test_hash_is_salted():
    assert hasher.hash("pw123") != hasher.hash("pw123")


def test_verify():
    digest = hasher.hash("pw123")
    assert hasher.verify("pw123", digest)
    assert not hasher.verify("wrong", digest)


def test_verify_empty_inputs():
    digest = hasher.hash("pw123")
    assert not hasher.verify("", digest)
    assert not hasher.verify("pw123", "")


def test_verify_malformed_hash_is_false():
    assert not hasher.verify("pw123", "not-a-bcrypt-hash")
