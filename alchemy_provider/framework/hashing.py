"""Password hashing with scrypt."""

import hashlib
import hmac
import secrets


class ScryptHasher:
    """Hash passwords as ``scrypt$n$r$p$salt$digest`` strings.

    Args:
        n: CPU/memory cost factor, a power of two.
        r: Block size.
        p: Parallelization factor.
        salt_size: Random salt length in bytes.
    """

    algorithm = "scrypt"

    def __init__(self, n: int = 2**14, r: int = 8, p: int = 1, salt_size: int = 16):
        self.n = n
        self.r = r
        self.p = p
        self.salt_size = salt_size

    def make(self, value: str) -> str:
        salt = secrets.token_bytes(self.salt_size)
        digest = self._digest(value, salt, self.n, self.r, self.p)
        return f"{self.algorithm}${self.n}${self.r}${self.p}${salt.hex()}${digest.hex()}"

    def check(self, value: str, hashed_value: str) -> bool:
        parsed = self._parse(hashed_value)
        if parsed is None:
            return False
        n, r, p, salt, expected = parsed
        try:
            digest = self._digest(value, salt, n, r, p)
        except ValueError:
            # cost parameters scrypt refuses
            return False
        return hmac.compare_digest(digest, expected)

    def needs_rehash(self, hashed_value: str) -> bool:
        parsed = self._parse(hashed_value)
        if parsed is None:
            return True
        n, r, p, salt, _ = parsed
        return (n, r, p, len(salt)) != (self.n, self.r, self.p, self.salt_size)

    def _parse(self, hashed_value: str) -> tuple[int, int, int, bytes, bytes] | None:
        parts = hashed_value.split("$")
        if len(parts) != 6 or parts[0] != self.algorithm:
            return None
        try:
            return int(parts[1]), int(parts[2]), int(parts[3]), bytes.fromhex(parts[4]), bytes.fromhex(parts[5])
        except ValueError:
            return None

    @staticmethod
    def _digest(value: str, salt: bytes, n: int, r: int, p: int) -> bytes:
        return hashlib.scrypt(value.encode(), salt=salt, n=n, r=r, p=p, dklen=64)
