"""
Short Code Generation

Random short codes drawn from the base62 alphabet [0-9a-zA-Z], which is a
subset of the accepted short code alphabet [A-Za-z0-9_-]. Generated codes
never start or end with punctuation, while custom codes may use '_' and '-'.

Why random rather than counter-based?
- Codes are not enumerable from one another
- No coordination between service instances is needed; the unique index
  on short_code settles the rare collision and the allocator retries
"""

import secrets
import string

BASE62_CHARS = string.digits + string.ascii_lowercase + string.ascii_uppercase
SHORT_CODE_ALPHABET = BASE62_CHARS + "_-"

DEFAULT_CODE_LENGTH = 7


class ShortCodeGenerator:
    """Generate random short codes of a fixed length."""

    def __init__(self, length: int = DEFAULT_CODE_LENGTH, alphabet: str = BASE62_CHARS):
        if length < 1:
            raise ValueError("Short code length must be positive")
        if not alphabet or any(ch not in SHORT_CODE_ALPHABET for ch in alphabet):
            raise ValueError("Alphabet must be a non-empty subset of [A-Za-z0-9_-]")
        self.length = length
        self.alphabet = alphabet

    def generate(self) -> str:
        """Return a new random code (uses the secrets CSPRNG)."""
        return ''.join(secrets.choice(self.alphabet) for _ in range(self.length))

    @property
    def code_space(self) -> int:
        """Number of distinct codes this generator can produce."""
        return len(self.alphabet) ** self.length
