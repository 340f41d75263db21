"""Tests for relay id decoding."""

import pytest

from kickstarter_pamphlet.api.ids import decompose_id, encode_id


def test_decompose_reward_id():
    assert decompose_id("UmV3YXJkLTgxOTAzMjA=") == 8_190_320


def test_decompose_without_padding():
    assert decompose_id("UmV3YXJkLTgxOTAzMjA") == 8_190_320


def test_encode_is_inverse():
    token = encode_id("Backing", 1_234)
    assert token == "QmFja2luZy0xMjM0"
    assert decompose_id(token) == 1_234


@pytest.mark.parametrize(
    "token",
    [None, "", 42, "%%%", "UmV3YXJk", "UmV3YXJkLWFiYw==", encode_id("Reward", "²")],
)
def test_decompose_invalid(token):
    assert decompose_id(token) is None
