"""
Random sources for the Scavenger engine.

Every random decision the engine makes (cell picks, loot rolls, enemy
fallback ordering) goes through one of these objects, so a run is exactly
reproducible from its seed.

Sources:
- Random: seeded XorShift128 with a call counter (tests, replays, CLI seeds)
- SystemRandom: OS entropy, the default for live play

Both expose the same surface:
- random_int(n)            -> [0, n] inclusive
- random_int_range(a, b)   -> [a, b] inclusive
- random_float()           -> [0, 1)
- random_boolean()         -> True / False
"""

from typing import List, Optional, Sequence, TypeVar
import random as py_random

T = TypeVar("T")

_MASK_64 = 0xFFFFFFFFFFFFFFFF


class XorShift128:
    """
    64-bit xorshift generator behind every seeded run.

    Two words of state; a map, its loot rolls and every enemy fallback
    order are a pure function of them.
    """

    def __init__(self, seed: int, seed1: Optional[int] = None):
        """
        Args:
            seed: Run seed, or the first state word when seed1 is given
            seed1: Second state word, used by copy() to clone a generator
        """
        if seed1 is not None:
            self.seed0 = seed & _MASK_64
            self.seed1 = seed1 & _MASK_64
        else:
            # All-zero state never leaves zero
            if seed == 0:
                seed = -0x8000000000000000
            self.seed0 = self._scramble(seed)
            self.seed1 = self._scramble(self.seed0)

    @staticmethod
    def _scramble(x: int) -> int:
        """Spread a run seed across all 64 bits (murmur3 fmix64)."""
        x = x & _MASK_64
        x ^= x >> 33
        x = (x * 0xff51afd7ed558ccd) & _MASK_64
        x ^= x >> 33
        x = (x * 0xc4ceb9fe1a85ec53) & _MASK_64
        x ^= x >> 33
        return x

    def _step(self) -> int:
        """Advance the state and return the next 64-bit word."""
        s1 = self.seed0
        s0 = self.seed1
        self.seed0 = s0
        s1 ^= (s1 << 23) & _MASK_64
        self.seed1 = (s1 ^ s0 ^ (s1 >> 17) ^ (s0 >> 26)) & _MASK_64
        return (self.seed0 + self.seed1) & _MASK_64

    def next_int(self, bound: int) -> int:
        """Uniform cell / roll index in [0, bound)."""
        if bound <= 0:
            raise ValueError("bound must be positive")

        # Reject the short tail so small bounds stay unbiased
        while True:
            bits = self._step() >> 1
            val = bits % bound
            if bits - val + (bound - 1) < (1 << 63):
                return int(val)

    def next_float(self) -> float:
        """Uniform float in [0, 1) from the top 24 bits."""
        return (self._step() >> 40) / (1 << 24)

    def next_boolean(self) -> bool:
        return (self._step() & 1) != 0

    def copy(self) -> 'XorShift128':
        return XorShift128(self.seed0, self.seed1)


class Random:
    """
    Seeded random source with a call counter.

    The counter tracks how many values have been drawn, so a source can be
    restored to the exact same point by re-seeding with
    Random(seed, counter).
    """

    def __init__(self, seed: int, counter: int = 0):
        """
        Initialize RNG with seed and optional counter.

        Args:
            seed: 64-bit seed value
            counter: Number of calls to skip ahead
        """
        self.seed = seed
        self._rng = XorShift128(seed)
        self.counter = 0

        for _ in range(counter):
            self.random_int(999)

    def random_int(self, range_val: int) -> int:
        """Random int in [0, range_val] INCLUSIVE."""
        if range_val < 0:
            raise ValueError("range_val must be non-negative")
        self.counter += 1
        return self._rng.next_int(range_val + 1)

    def random_int_range(self, start: int, end: int) -> int:
        """Random int in [start, end] INCLUSIVE."""
        self.counter += 1
        return start + self._rng.next_int(end - start + 1)

    def random_float(self) -> float:
        """Random float in [0, 1)."""
        self.counter += 1
        return self._rng.next_float()

    def random_boolean(self, chance: Optional[float] = None) -> bool:
        """
        Random boolean.

        With no argument: 50% chance. With a float: next_float() < chance.
        """
        self.counter += 1
        if chance is None:
            return self._rng.next_boolean()
        return self._rng.next_float() < chance

    def copy(self) -> 'Random':
        """Create a copy with same state."""
        new = Random.__new__(Random)
        new.seed = self.seed
        new._rng = self._rng.copy()
        new.counter = self.counter
        return new

    def __repr__(self) -> str:
        return f"Random(seed={self.seed}, counter={self.counter})"


class SystemRandom:
    """Random source backed by the operating system's entropy pool."""

    def __init__(self):
        self._rng = py_random.SystemRandom()
        self.counter = 0

    def random_int(self, range_val: int) -> int:
        if range_val < 0:
            raise ValueError("range_val must be non-negative")
        self.counter += 1
        return self._rng.randint(0, range_val)

    def random_int_range(self, start: int, end: int) -> int:
        self.counter += 1
        return self._rng.randint(start, end)

    def random_float(self) -> float:
        self.counter += 1
        return self._rng.random()

    def random_boolean(self, chance: Optional[float] = None) -> bool:
        self.counter += 1
        if chance is None:
            chance = 0.5
        return self._rng.random() < chance


def random_choice(items: Sequence[T], rng) -> T:
    """Pick one element uniformly. `items` must be non-empty."""
    return items[rng.random_int(len(items) - 1)]


def shuffled(items: Sequence[T], rng) -> List[T]:
    """
    Fisher-Yates shuffle returning a new list.

    The input sequence is left untouched.
    """
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = rng.random_int(i)
        result[i], result[j] = result[j], result[i]
    return result


# Seed strings are base 35: digits then A-Z without the letter O
SEED_ALPHABET = "0123456789ABCDEFGHIJKLMNPQRSTUVWXYZ"


def seed_to_long(seed_string: str) -> int:
    """
    Numeric run seed for a shareable seed string such as "WEB1".

    Case is ignored and O is read as zero. Characters outside the alphabet
    are dropped. An all-digit string is taken as the number itself.
    """
    if seed_string.lstrip('-').isdigit():
        return int(seed_string)

    value = 0
    for char in seed_string.upper().replace("O", "0"):
        digit = SEED_ALPHABET.find(char)
        if digit == -1:
            continue
        value = value * len(SEED_ALPHABET) + digit
    return value


def long_to_seed(seed_long: int) -> str:
    """Shareable seed string for a numeric run seed (negatives wrap to 64 bits)."""
    if seed_long == 0:
        return "0"

    base = len(SEED_ALPHABET)
    leftover = seed_long & _MASK_64
    chars = []
    while leftover:
        leftover, digit = divmod(leftover, base)
        chars.append(SEED_ALPHABET[digit])
    return ''.join(reversed(chars))


def new_seed() -> int:
    """Draw a fresh non-negative 63-bit seed from system entropy."""
    return py_random.SystemRandom().getrandbits(63)
