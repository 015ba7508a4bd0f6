from enum import Enum
from py_ecc import optimized_bls12_381, optimized_bn128

from .errors import ConfigError


class CurveType(Enum):
    BN128 = optimized_bn128
    BN254 = optimized_bn128
    ALT_BN128 = optimized_bn128
    BLS12_381 = optimized_bls12_381


class EllipticCurve:
    """
    Pairing-friendly curve whose scalar field hosts the circuit arithmetic

    Args:
        curve: `BN254` (alias `BN128`, `ALT_BN128`) or `BLS12_381`
    """

    def __init__(self, curve: str):
        try:
            module = CurveType[curve.upper()].value
        except KeyError as exc:
            raise ConfigError(f"Unsupported curve: {curve}") from exc

        self.name = curve.upper()
        self.curve = module.optimized_curve
        self.order = self.curve.curve_order
        self.field_modulus = self.curve.field_modulus

    def __repr__(self):
        return f"EllipticCurve({self.name})"


def supported_curves():
    """Names accepted by `EllipticCurve`"""
    return [c.name for c in CurveType]
