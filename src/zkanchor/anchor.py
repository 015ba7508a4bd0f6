"""
Anchor derivation

The anchor binds a tree root and a range query to one protocol context:
`anchor = Poseidon(root, lo, hi, tag)` with the capacity element set to the
anchor domain, which keeps it apart from node hashing.
"""

from typing import Union

from .constant import ANCHOR_DOMAIN
from .errors import AnchorMismatchError
from .field import FieldElement
from .poseidon import get_poseidon

Element = Union[int, FieldElement]


def derive_anchor(root: FieldElement, lo: Element, hi: Element, tag: Element) -> FieldElement:
    """
    Derive the anchor of (`root`, `lo`, `hi`) under domain `tag`.
    The field is taken from `root`.
    """
    if not isinstance(root, FieldElement):
        raise TypeError(f"Root must be a FieldElement, got {type(root)}")

    poseidon = get_poseidon(root.field, 4)
    return poseidon.hash([root, lo, hi, tag], ANCHOR_DOMAIN)


def ensure_anchor(
    claimed: FieldElement, root: FieldElement, lo: Element, hi: Element, tag: Element
) -> FieldElement:
    """
    Recompute the anchor and compare with `claimed`

    Raises:
        AnchorMismatchError: the claimed anchor belongs to another root, range or tag
    """
    expected = derive_anchor(root, lo, hi, tag)
    if root.field(claimed) != expected:
        raise AnchorMismatchError(
            f"Claimed anchor {claimed} does not match root {root} and range [{lo}, {hi}]"
        )
    return expected
