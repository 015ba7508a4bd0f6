# Capacity element of the Poseidon state, one per hashing site
MERKLE_NODE_DOMAIN = 1
MERKLE_EMPTY_DOMAIN = 2
ANCHOR_DOMAIN = 3

# Poseidon x^alpha S-box and round counts for ~254-bit fields at 128-bit security.
# Partial rounds are indexed by t - 2 (t = number of inputs + 1)
SBOX_ALPHA = 5
N_ROUNDS_F = 8
N_ROUNDS_P = [56, 57, 56, 60, 60, 63, 64, 63, 60, 66, 60, 65, 70, 60, 64, 68]

DEFAULT_DEPTH = 16
DEFAULT_BIT_WIDTH = 64
DEFAULT_PROTOCOL_TAG = int.from_bytes(b"zkanchor/v1", "big")

# Levels narrower than this are hashed inline instead of through joblib
PARALLEL_LEVEL_THRESHOLD = 2048
