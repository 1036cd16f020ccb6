"""Expansion of (seed, key hash) into a pseudo-random double via SHA-1."""
import hashlib
import struct

from keysample.errors import DigestUnavailableError
from keysample.hashing import INT32_MAX

DIGEST_ALGORITHM = "sha1"

_SEED_AND_KEY = struct.Struct(">ii")
_DIGEST_PREFIX = struct.Struct(">i")


def ensure_digest_available() -> None:
    """Fail fast when the runtime refuses SHA-1 (e.g. a locked-down FIPS build)."""
    try:
        hashlib.new(DIGEST_ALGORITHM, usedforsecurity=False)
    except (ValueError, TypeError) as e:
        raise DigestUnavailableError(
            f"{DIGEST_ALGORITHM} digest is not available in this runtime"
        ) from e


def digest_int(seed: int, input_hash: int) -> int:
    """First four bytes of SHA-1(seed || input_hash) as a signed int32."""
    buf = _SEED_AND_KEY.pack(seed, input_hash)
    digest = hashlib.new(DIGEST_ALGORITHM, buf, usedforsecurity=False).digest()
    return _DIGEST_PREFIX.unpack_from(digest)[0]


def expand(seed: int, input_hash: int) -> float:
    """Map (seed, input_hash) to a double in roughly [0, 1).

    The affine map is ``((d / INT32_MAX) + 1) / 2``. For ``d == INT32_MIN`` the
    result is ``-0.5 / INT32_MAX``, a hair below zero. Existing samples were
    drawn with this exact formula, so the value is returned unclamped.
    """
    d = digest_int(seed, input_hash)
    return ((d / INT32_MAX) + 1) / 2
