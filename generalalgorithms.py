#!/usr/bin/env python3
"""General algorithms of the algebraic foundation

Group membership tests, deterministic derivation of independent generators
and the Fiat-Shamir challenges used to make the proofs non-interactive.

All the hashing goes through `rec_hash()`, which gives one canonical byte
encoding to the values hashed together in a proof (integers, strings, byte
strings, nested sequences of those, and model objects through their
`elements_to_hash()` view).
"""
import hashlib

import util


# tag byte prefixed to the encoding of each kind of value
_TAG_BYTES = b'\x00'
_TAG_STR = b'\x01'
_TAG_INT = b'\x02'
_TAG_SEQUENCE = b'\x03'


def _digest(tag, data):
    return hashlib.sha256(tag + data).digest()


def rec_hash(*values):
    """Recursive SHA-256 hash of structured values

    Each value is hashed with a tag byte giving its kind; a sequence also
    carries its length, on 8 bytes, before the hashes of its elements.
    Several arguments are hashed as a single tuple.

    Arguments:
        *values: `bytes`, `str`, `int`, `list` or `tuple` of such values, or
            objects exposing `elements_to_hash()`

    Returns:
        bytes: the SHA-256 digest
    """
    if len(values) == 1:
        value = values[0]
    else:
        value = values

    if hasattr(value, 'elements_to_hash'):
        value = value.elements_to_hash()

    if isinstance(value, (bytes, bytearray)):
        return _digest(_TAG_BYTES, bytes(value))
    if isinstance(value, str):
        return _digest(_TAG_STR, value.encode('utf-8'))
    if isinstance(value, bool):
        raise TypeError('cannot hash a boolean')
    if isinstance(value, int):
        if value < 0:
            raise TypeError('cannot hash a negative integer')
        return _digest(_TAG_INT, util.int_to_bytes(value))
    if isinstance(value, (list, tuple)):
        length = len(value).to_bytes(8, 'big')
        return _digest(_TAG_SEQUENCE, length + b''.join(rec_hash(v) for v in value))
    raise TypeError('cannot hash value of type {}'.format(type(value).__name__))


class GeneralAlgorithms:
    """Algorithms depending only on the public encryption group

    Attributes:
        encryption_group (elgamal.EncryptionGroup): the group G_q
        generators (list): cache of the generators already derived
    """
    def __init__(self, encryption_group):
        self.encryption_group = encryption_group
        self.generators = []

    def is_member(self, x):
        """Tests whether `x` is an element of G_q"""
        return x in self.encryption_group

    def is_in_zq(self, x):
        """Tests whether `x` is an element of Z_q"""
        return isinstance(x, int) and 0 <= x < self.encryption_group.q

    def get_generators(self, n):
        """Derive `n` independent generators of G_q

        The generators are obtained by hashing a fixed label with their index
        and a counter, then raising the result to the cofactor `(p-1)/q` to
        land in G_q. Nobody knows the discrete logarithm of one with respect
        to another.

        Arguments:
            n (int): the number of generators

        Returns:
            list: the `n` first generators (int); always the same for a given
                group
        """
        eg = self.encryption_group
        cofactor = (eg.p - 1) // eg.q
        # extend a copy and swap it in, so that concurrent checks never see
        # a partially built cache
        generators = list(self.generators)
        for i in range(len(generators), n):
            x = 0
            h_i = 1
            while h_i in (0, 1):
                x += 1
                h_i = util.bytes_to_int(rec_hash('chVote', i, x)) % eg.p
                h_i = util.powmod(h_i, cofactor, eg.p)
            generators.append(h_i)
        if len(generators) > len(self.generators):
            self.generators = generators
        return generators[:n]

    def _challenge_modulus(self, tau):
        return min(2**tau, self.encryption_group.q)

    def get_nizkp_challenge(self, y, t, tau):
        """Fiat-Shamir challenge for the public values `y` and commitments `t`

        Arguments:
            y: the public inputs of the proof
            t: the commitments of the proof
            tau (int): security parameter, the challenge has at most `tau`
                bits

        Returns:
            int: an element of Z_q
        """
        return util.bytes_to_int(rec_hash(y, t)) % self._challenge_modulus(tau)

    def get_nizkp_challenges(self, n, y, tau):
        """`n` independent Fiat-Shamir challenges for the public values `y`

        Arguments:
            n (int): the number of challenges
            y: the public inputs
            tau (int): security parameter

        Returns:
            list: `n` elements of Z_q
        """
        modulus = self._challenge_modulus(tau)
        H = rec_hash(y)
        return [
            util.bytes_to_int(rec_hash(H, i)) % modulus
            for i in range(n)
        ]
