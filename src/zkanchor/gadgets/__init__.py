from .bitify import BitsToNum, NumToBits
from .merkle import MerklePathGadget
from .poseidon import Poseidon

__all__ = ["BitsToNum", "NumToBits", "MerklePathGadget", "Poseidon"]
