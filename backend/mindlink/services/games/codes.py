import random
import string


class RoomCodeGenerator:
    """Draws short room codes. Uniqueness is the registry's job."""

    def __init__(self, length=4, alphabet=string.ascii_uppercase, rng=None):
        self.length = length
        self.alphabet = alphabet
        self._rng = rng or random.SystemRandom()

    def generate(self) -> str:
        return ''.join(self._rng.choice(self.alphabet) for _ in range(self.length))
