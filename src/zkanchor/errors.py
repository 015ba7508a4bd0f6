class ZkAnchorError(Exception):
    """Base class of every error raised by zkanchor"""


class FieldError(ZkAnchorError):
    """Raised when field arithmetic or encoding fails"""


class FieldOverflowError(FieldError):
    """Raised when a value does not fit into the requested bit width"""


class NotInvertibleError(FieldError):
    """Raised when inverting zero"""


class NonCanonicalEncodingError(FieldError):
    """Raised when bytes do not decode to a canonical field element"""


class MerkleError(ZkAnchorError):
    """Raised when a Merkle tree operation fails"""


class TooManyLeavesError(MerkleError):
    """Raised when more than 2^depth leaves are inserted"""


class IndexOutOfRangeError(MerkleError):
    """Raised when a path is requested for a slot that holds no leaf"""


class PathLengthMismatchError(MerkleError):
    """Raised when a path does not match the tree depth"""


class AnchorMismatchError(ZkAnchorError):
    """Raised when a recomputed anchor differs from the claimed one"""


class RangeError(ZkAnchorError):
    """Raised when a range statement cannot be encoded"""


class OutOfRangeError(RangeError):
    """Raised when the value lies outside [lo, hi]"""


class InvalidRangeError(RangeError):
    """Raised when the range itself is malformed (lo > hi or too wide)"""


class WitnessError(ZkAnchorError):
    """Raised when a witness cannot be assembled or does not satisfy the statement"""


class ShapeMismatchError(WitnessError):
    """Raised when witness components have the wrong length"""


class UnsatisfiedWitnessError(WitnessError):
    """Raised when a witness fails the pre-flight check before proving"""


class ConfigError(ZkAnchorError):
    """Raised when protocol parameters are invalid"""


class ParameterMismatchError(ConfigError):
    """Raised when parameters are unsound or differ between components"""


class BackendError(ZkAnchorError):
    """Raised when the external proving backend fails"""
