"""Unit tests for simpdb.optional.Optional."""

import pytest

from simpdb import NotFoundError, Optional


def test_of_is_valid_and_truthy():
    """Optional.of wraps a present value."""
    found = Optional.of("Harry")
    assert found.valid
    assert found
    assert found.value == "Harry"


def test_empty_is_invalid_and_falsy():
    """Optional.empty carries no value."""
    missing = Optional.empty()
    assert not missing.valid
    assert not missing
    assert missing.value is None


def test_present_falsy_value_is_still_valid():
    """Presence is tracked by the flag, not by the truthiness of the value."""
    zero = Optional.of(0)
    assert zero.valid
    assert zero
    assert zero.unwrap() == 0


def test_unwrap_empty_raises_not_found():
    """unwrap() on an absent value raises NotFoundError."""
    with pytest.raises(NotFoundError):
        Optional.empty().unwrap()


def test_or_else():
    """or_else returns the value if present, the default otherwise."""
    assert Optional.of(1).or_else(2) == 1
    assert Optional.empty().or_else(2) == 2


def test_equality_and_repr():
    """Optionals compare by value and flag and have a readable repr."""
    assert Optional.of(3) == Optional.of(3)
    assert Optional.empty() == Optional()
    assert Optional.of(3) != Optional.empty()
    assert repr(Optional.of(3)) == "Optional.of(3)"
    assert repr(Optional.empty()) == "Optional.empty()"


def test_is_immutable():
    """Optionals are frozen."""
    found = Optional.of(1)
    with pytest.raises(AttributeError):
        found.value = 2  # type: ignore[misc]
