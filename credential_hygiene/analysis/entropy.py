"""Character-pool entropy estimate for stored passwords."""
import math
import string

LOWERCASE_POOL = 26
UPPERCASE_POOL = 26
DIGIT_POOL = 10
# Conservative size for everything outside [a-zA-Z0-9].
SYMBOL_POOL = 32

DEFAULT_WEAK_THRESHOLD = 50


def alphabet_size(password: str) -> int:
    """Return the size of the character pool a password draws from.

    Parameters
    ----------
    password : str
        The password to inspect.

    Returns
    -------
    int
        Sum of the pool sizes of every character class present.

    """
    size = 0
    if any(c in string.ascii_lowercase for c in password):
        size += LOWERCASE_POOL
    if any(c in string.ascii_uppercase for c in password):
        size += UPPERCASE_POOL
    if any(c in string.digits for c in password):
        size += DIGIT_POOL
    if any(c not in string.ascii_letters and c not in string.digits for c in password):
        size += SYMBOL_POOL
    return size


def estimate_entropy_bits(password: str) -> int:
    """Estimate password strength in bits, assuming uniformly random characters.

    ``length * log2(alphabet)`` rounded half up. An empty password scores 0.
    """
    if not password:
        return 0
    size = alphabet_size(password)
    if size == 0:
        return 0
    return math.floor(len(password) * math.log2(size) + 0.5)


def is_weak(entropy_bits: int, threshold: int = DEFAULT_WEAK_THRESHOLD) -> bool:
    """Whether an estimate falls strictly below the weak threshold."""
    return entropy_bits < threshold
