"""Tests for alchemy_provider.framework.hashing module."""

import pytest

from alchemy_provider.framework.hashing import ScryptHasher


@pytest.fixture
def hasher() -> ScryptHasher:
    return ScryptHasher(n=2**8)


def test_make_and_check(hasher: ScryptHasher) -> None:
    hashed = hasher.make("secret")

    assert hashed.startswith("scrypt$256$8$1$")
    assert hasher.check("secret", hashed)
    assert not hasher.check("Secret", hashed)


def test_same_value_gets_different_salts(hasher: ScryptHasher) -> None:
    assert hasher.make("secret") != hasher.make("secret")


@pytest.mark.parametrize(
    "hashed",
    [
        "",
        "plain-text",
        "bcrypt$1$2$3$00$00",
        "scrypt$x$8$1$00$00",
        "scrypt$256$8$1$zz$00",
        "scrypt$3$8$1$00ff$00ff",
        "scrypt$256$0$1$00ff$00ff",
    ],
)
def test_check_rejects_malformed_hashes(hasher: ScryptHasher, hashed: str) -> None:
    assert not hasher.check("secret", hashed)


def test_needs_rehash(hasher: ScryptHasher) -> None:
    hashed = hasher.make("secret")

    assert not hasher.needs_rehash(hashed)
    assert ScryptHasher(n=2**10).needs_rehash(hashed)
    assert hasher.needs_rehash("garbage")
