"""
Prover and verifier around an external proving backend

The backend only ever sees a compiled `R1CS` and plain integer witness
vectors. Everything that can be checked natively is checked before it is
called.
"""

from __future__ import annotations
import logging
import struct
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Union

from .anchor import derive_anchor
from .arithmetization import R1CS
from .circuit import AnchoredRangeCircuit
from .errors import BackendError, InvalidRangeError, ShapeMismatchError, UnsatisfiedWitnessError
from .field import FieldElement
from .merkle import MerkleTree
from .params import ProtocolParams
from .range_encoder import RangeQuery, encode
from .verifier import CheckResult, FailureReason, NativeVerifier
from .witness import PublicInputs, WitnessAssembler

logger = logging.getLogger(__name__)

FINGERPRINT_SIZE = 32

# verifier outcomes share the native checker's result type
VerificationResult = CheckResult


class ProvingBackend(ABC):
    """Capability interface of a proving system over R1CS"""

    @abstractmethod
    def prove(self, r1cs: R1CS, public_witness: list, private_witness: list) -> bytes:
        ...

    @abstractmethod
    def verify(self, r1cs: R1CS, public_witness: list, blob: bytes) -> bool:
        ...


@dataclass(frozen=True)
class Proof:
    fingerprint: bytes
    public: PublicInputs
    blob: bytes

    def to_bytes(self) -> bytes:
        return (
            self.fingerprint
            + self.public.to_bytes()
            + struct.pack(">I", len(self.blob))
            + self.blob
        )

    @classmethod
    def from_bytes(cls, data: bytes, params: ProtocolParams) -> Proof:
        n_public = 3 * params.field.byte_length
        header = FINGERPRINT_SIZE + n_public + 4
        if len(data) < header:
            raise ShapeMismatchError(f"Proof must hold at least {header} bytes")

        fingerprint = data[:FINGERPRINT_SIZE]
        public = PublicInputs.from_bytes(
            data[FINGERPRINT_SIZE : FINGERPRINT_SIZE + n_public], params.field
        )
        (length,) = struct.unpack(">I", data[header - 4 : header])
        blob = data[header:]
        if len(blob) != length:
            raise ShapeMismatchError(f"Proof blob should be {length} bytes, got {len(blob)}")

        return cls(fingerprint, public, blob)


class AnchoredRangeProver:
    """
    Args:
        params: protocol parameters shared with the verifier
        backend: proving system producing the opaque proof blob
    """

    def __init__(self, params: ProtocolParams, backend: ProvingBackend):
        self.params = params
        self.backend = backend
        self.assembler = WitnessAssembler(params)
        self.native = NativeVerifier(params)
        self.circuit = AnchoredRangeCircuit(params)

    def prove(self, tree: MerkleTree, index: int, query: RangeQuery) -> Proof:
        params = self.params

        params.field.ensure_same(tree.field)
        if tree.depth != params.depth:
            raise ShapeMismatchError(
                f"Tree depth {tree.depth} differs from configured depth {params.depth}"
            )
        query.validate(params.bit_width)

        leaf = tree.leaf(index)
        path = tree.path_for(index)
        range_witness = encode(leaf, query.lo, query.hi, params.bit_width)

        anchor = derive_anchor(tree.root, query.lo, query.hi, params.tag_element)
        public = PublicInputs(anchor, query.lo, query.hi)
        witness = self.assembler.assemble(leaf, path, range_witness)

        check = self.native.diagnose(public, witness)
        if not check:
            raise UnsatisfiedWitnessError(f"Native check failed: {check.reason.value}")

        cs = self.circuit.synthesize(public, witness)
        r1cs = cs.compile()
        if not r1cs.is_sat(cs.public_witness, cs.private_witness):
            raise UnsatisfiedWitnessError(
                f"Constraint rows {cs.unsatisfied()[:8]} are not satisfied"
            )

        try:
            blob = self.backend.prove(r1cs, cs.public_witness, cs.private_witness)
        except Exception as exc:
            raise BackendError(f"Backend failed to prove: {exc}") from exc

        if not isinstance(blob, (bytes, bytearray)):
            raise BackendError(f"Backend returned {type(blob)} instead of bytes")

        logger.debug("proved leaf %d against %d constraints", index, r1cs.n_constraints)
        return Proof(params.fingerprint, public, bytes(blob))


class AnchoredRangeVerifier:
    """
    Args:
        params: protocol parameters shared with the prover
        backend: proving system that checks the opaque proof blob
    """

    def __init__(self, params: ProtocolParams, backend: ProvingBackend):
        self.params = params
        self.backend = backend
        self.circuit = AnchoredRangeCircuit(params)
        self._r1cs: Optional[R1CS] = None

    @property
    def r1cs(self) -> R1CS:
        if self._r1cs is None:
            self._r1cs = self.circuit.setup_shape()
        return self._r1cs

    def verify(
        self, root: Union[int, FieldElement], query: RangeQuery, proof: Proof
    ) -> VerificationResult:
        params = self.params
        field = params.field

        params.ensure_fingerprint(proof.fingerprint)
        root = field(root)

        try:
            query.validate(params.bit_width)
        except InvalidRangeError as exc:
            logger.info("rejected proof: %s", exc)
            return VerificationResult.reject(FailureReason.INVALID_RANGE, str(exc))

        expected = PublicInputs(
            derive_anchor(root, query.lo, query.hi, params.tag_element),
            field(query.lo),
            field(query.hi),
        )
        if proof.public != expected:
            logger.info("rejected proof: anchor does not match root and range")
            return VerificationResult.reject(
                FailureReason.ANCHOR_MISMATCH,
                "proof was not issued for this root and range",
            )

        public_witness = [1] + [x.value for x in expected.to_vector()]
        try:
            accepted = self.backend.verify(self.r1cs, public_witness, proof.blob)
        except Exception as exc:
            raise BackendError(f"Backend failed to verify: {exc}") from exc

        if not accepted:
            logger.warning("backend rejected proof")
            return VerificationResult.reject(FailureReason.BACKEND_REJECTED)

        return VerificationResult.accept()
