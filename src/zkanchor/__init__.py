from .anchor import derive_anchor, ensure_anchor
from .backend import (
    AnchoredRangeProver,
    AnchoredRangeVerifier,
    Proof,
    ProvingBackend,
    VerificationResult,
)
from .circuit import AnchoredRangeCircuit
from .field import Field, FieldElement
from .merkle import MerkleHasher, MerklePath, MerkleTree, compute_root, verify_path
from .params import ProtocolParams
from .range_encoder import BitDecomposition, RangeQuery, RangeWitness, encode
from .verifier import CheckResult, FailureReason, NativeVerifier
from .witness import PublicInputs, Witness, WitnessAssembler

__all__ = [
    "derive_anchor",
    "ensure_anchor",
    "AnchoredRangeProver",
    "AnchoredRangeVerifier",
    "Proof",
    "ProvingBackend",
    "VerificationResult",
    "AnchoredRangeCircuit",
    "Field",
    "FieldElement",
    "MerkleHasher",
    "MerklePath",
    "MerkleTree",
    "compute_root",
    "verify_path",
    "ProtocolParams",
    "BitDecomposition",
    "RangeQuery",
    "RangeWitness",
    "encode",
    "CheckResult",
    "FailureReason",
    "NativeVerifier",
    "PublicInputs",
    "Witness",
    "WitnessAssembler",
]
