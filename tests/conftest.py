import hashlib

import pytest

from zkanchor.backend import ProvingBackend
from zkanchor.merkle import MerkleTree
from zkanchor.params import ProtocolParams


class DigestBackend(ProvingBackend):
    """
    Stand-in proving system: refuses unsatisfiable witnesses and binds the
    blob to the circuit shape and public inputs
    """

    def __init__(self):
        self.proved = []

    @staticmethod
    def _blob(r1cs, public_witness):
        h = hashlib.sha256(r1cs.digest())
        for x in public_witness:
            h.update(x.to_bytes(64, "big"))
        return h.digest()

    def prove(self, r1cs, public_witness, private_witness):
        if not r1cs.is_sat(public_witness, private_witness):
            raise ValueError("witness does not satisfy the constraint system")
        blob = self._blob(r1cs, public_witness)
        self.proved.append(blob)
        return blob

    def verify(self, r1cs, public_witness, blob):
        return blob == self._blob(r1cs, public_witness)


@pytest.fixture(scope="session")
def params():
    return ProtocolParams(depth=4, bit_width=16)


@pytest.fixture(scope="session")
def field(params):
    return params.field


@pytest.fixture(scope="session")
def tree(params):
    tree = MerkleTree.from_params(params)
    tree.build(list(range(10)))
    return tree


@pytest.fixture
def backend():
    return DigestBackend()
