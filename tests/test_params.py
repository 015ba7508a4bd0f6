import pytest

from zkanchor.constant import DEFAULT_BIT_WIDTH, DEFAULT_DEPTH, DEFAULT_PROTOCOL_TAG
from zkanchor.errors import ConfigError, ParameterMismatchError
from zkanchor.params import ProtocolParams


def test_defaults():
    params = ProtocolParams()

    assert params.curve == "BN254"
    assert params.depth == DEFAULT_DEPTH
    assert params.bit_width == DEFAULT_BIT_WIDTH
    assert params.tag == DEFAULT_PROTOCOL_TAG
    assert params.capacity == 1 << DEFAULT_DEPTH
    assert params.tag_element.value == DEFAULT_PROTOCOL_TAG


def test_invalid_params():
    with pytest.raises(ConfigError):
        ProtocolParams(curve="P256")

    with pytest.raises(ConfigError):
        ProtocolParams(depth=0)

    with pytest.raises(ParameterMismatchError):
        ProtocolParams(bit_width=0)

    # 2^254 exceeds the BN254 scalar field
    with pytest.raises(ParameterMismatchError):
        ProtocolParams(bit_width=253)

    ProtocolParams(bit_width=252)

    p = ProtocolParams().field.modulus
    with pytest.raises(ParameterMismatchError):
        ProtocolParams(tag=p)


def test_parameter_mismatch_is_config_error():
    with pytest.raises(ConfigError):
        ProtocolParams(bit_width=1000)


def test_fingerprint():
    a = ProtocolParams(depth=4, bit_width=16)
    b = ProtocolParams(depth=4, bit_width=16)
    c = ProtocolParams(depth=4, bit_width=16, tag=7)
    d = ProtocolParams(curve="BLS12_381", depth=4, bit_width=16)

    assert a == b
    assert len(a.fingerprint) == 32
    assert a.fingerprint == b.fingerprint
    assert a.fingerprint != c.fingerprint
    assert a.fingerprint != d.fingerprint

    a.ensure_compatible(b)
    with pytest.raises(ParameterMismatchError):
        a.ensure_compatible(c)
    with pytest.raises(ParameterMismatchError):
        a.ensure_fingerprint(d.fingerprint)


def test_from_env(monkeypatch):
    monkeypatch.setenv("ZKANCHOR_CURVE", "bls12_381")
    monkeypatch.setenv("ZKANCHOR_TREE_DEPTH", "8")
    monkeypatch.setenv("ZKANCHOR_RANGE_BITS", "32")
    monkeypatch.setenv("ZKANCHOR_DOMAIN_TAG", "0x1234")

    params = ProtocolParams.from_env()

    assert params == ProtocolParams("BLS12_381", 8, 32, 0x1234)


def test_from_env_invalid(monkeypatch):
    monkeypatch.setenv("ZKANCHOR_TREE_DEPTH", "deep")

    with pytest.raises(ConfigError):
        ProtocolParams.from_env()
