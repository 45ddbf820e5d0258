#!/usr/bin/env python3
"""Source of randomness for key generation and proofs

Everything secret (key shares, the random exponent ω of a decryption proof)
is drawn from a `RandomGenerator`. By default it wraps `random.SystemRandom`,
which reads from the operating system and can be shared between threads.
Tests may inject a seeded `random.Random` to get reproducible values.
"""
import random


class RandomGenerator:
    """Secure random source

    Attributes:
        source (random.Random): the underlying generator
    """
    def __init__(self, source=None):
        """Constructor

        Arguments:
            source (random.Random, optional): the generator to draw from;
                defaults to `random.SystemRandom()`
        """
        if source is None:
            source = random.SystemRandom()
        self.source = source

    def random_in_zq(self, q):
        """Draw an element of Z_q

        Arguments:
            q (int): the order of the group

        Returns:
            int: a uniformly random integer from `[0, q)`
        """
        return self.source.randrange(q)

    def random_bytes(self, n):
        """Draw `n` random bytes

        Arguments:
            n (int): the number of bytes

        Returns:
            bytes: a byte string of length `n`
        """
        return self.source.getrandbits(8*n).to_bytes(n, 'big') if n else b''
