#!/usr/bin/env python3
"""ElGamal encryption over a prime-order subgroup of Z_p*

This module holds the data model shared by the mix-net algorithms (the
encryption group, the keys and the ciphertexts) and the key establishment
primitives: each authority generates its own key pair with
`KeyEstablishment.generate_keypair()`, and the public key shares are
multiplied together by `KeyEstablishment.get_public_key()` into the joint
public key used to encrypt the ballots.

Ciphertexts are pairs `(a, b)` with `a = m·pk^r` and `b = g^r`; thus, the
partial decryption share of an authority holding `sk_j` is `b^sk_j`.
"""
import math

import util
from randomness import RandomGenerator


class EncryptionGroup:
    """The subgroup G_q of order q of Z_p*

    Attributes:
        p (int): prime modulus
        q (int): prime order of the subgroup, divides `p - 1`
        g (int): generator of G_q
        h (int): second, independent generator of G_q
    """
    def __init__(self, p, q, g, h):
        """Constructor

        Raises:
            util.InvalidInput: if the parameters do not describe a subgroup
                of prime order q of Z_p* with two generators
        """
        util.check_argument(util.is_prime(p), 'p must be prime')
        util.check_argument(util.is_prime(q), 'q must be prime')
        util.check_argument((p - 1) % q == 0, 'q must divide p - 1')
        self.p = p
        self.q = q
        self.g = g
        self.h = h
        util.check_argument(g != 1 and g in self, 'g must be a generator of G_q')
        util.check_argument(h != 1 and h in self, 'h must be a generator of G_q')

    def __contains__(self, x):
        """Is x in the group? can be used by writing 'x in group'"""
        return isinstance(x, int) and 1 <= x < self.p and util.powmod(x, self.q, self.p) == 1

    def __eq__(self, other):
        if not isinstance(other, EncryptionGroup):
            return NotImplemented
        return (self.p, self.q, self.g, self.h) == (other.p, other.q, other.g, other.h)

    def __hash__(self):
        return hash((self.p, self.q, self.g, self.h))

    def __repr__(self):
        return 'EncryptionGroup(p={}, q={}, g={}, h={})'.format(self.p, self.q, self.g, self.h)

    def to_dict(self):
        return {'p': str(self.p), 'q': str(self.q), 'g': str(self.g), 'h': str(self.h)}

    @classmethod
    def from_dict(cls, data):
        return cls(int(data['p']), int(data['q']), int(data['g']), int(data['h']))


class EncryptionPublicKey:
    """ElGamal public key (or public key share of one authority)

    Attributes:
        public_key (int): the group element `g^sk`
        encryption_group (EncryptionGroup): the group the key belongs to
    """
    def __init__(self, public_key, encryption_group):
        self.public_key = public_key
        self.encryption_group = encryption_group

    def elements_to_hash(self):
        return self.public_key

    def __eq__(self, other):
        if not isinstance(other, EncryptionPublicKey):
            return NotImplemented
        return self.public_key == other.public_key and self.encryption_group == other.encryption_group

    def __hash__(self):
        return hash((self.public_key, self.encryption_group))

    def __repr__(self):
        return 'EncryptionPublicKey({})'.format(self.public_key)

    def to_dict(self):
        return {'public_key': str(self.public_key), 'encryption_group': self.encryption_group.to_dict()}

    @classmethod
    def from_dict(cls, data):
        return cls(int(data['public_key']), EncryptionGroup.from_dict(data['encryption_group']))


class EncryptionPrivateKey:
    """ElGamal secret key (or secret key share of one authority)

    Attributes:
        private_key (int): the exponent `sk` from Z_q
        encryption_group (EncryptionGroup): the group the key belongs to
    """
    def __init__(self, private_key, encryption_group):
        self.private_key = private_key
        self.encryption_group = encryption_group

    def __repr__(self):
        # do not leak the secret in logs
        return 'EncryptionPrivateKey(<hidden>)'

    def to_dict(self):
        return {'private_key': str(self.private_key), 'encryption_group': self.encryption_group.to_dict()}

    @classmethod
    def from_dict(cls, data):
        return cls(int(data['private_key']), EncryptionGroup.from_dict(data['encryption_group']))


class Encryption:
    """ElGamal ciphertext

    Attributes:
        a (int): `m·pk^r mod p`
        b (int): `g^r mod p`
    """
    def __init__(self, a, b):
        self.a = a
        self.b = b

    def elements_to_hash(self):
        return self.a, self.b

    def __eq__(self, other):
        if not isinstance(other, Encryption):
            return NotImplemented
        return self.a == other.a and self.b == other.b

    def __hash__(self):
        return hash((self.a, self.b))

    def __repr__(self):
        return 'Encryption(a={}, b={})'.format(self.a, self.b)

    def to_dict(self):
        return {'a': str(self.a), 'b': str(self.b)}

    @classmethod
    def from_dict(cls, data):
        return cls(int(data['a']), int(data['b']))


def encrypt(public_key, m, r):
    """Encrypt the group element `m` with randomization `r`

    Arguments:
        public_key (EncryptionPublicKey): the (joint) public key
        m (int): the message, an element of G_q
        r (int): the randomization, an element of Z_q

    Returns:
        Encryption: `(m·pk^r, g^r)`
    """
    eg = public_key.encryption_group
    a = m * util.powmod(public_key.public_key, r, eg.p) % eg.p
    b = util.powmod(eg.g, r, eg.p)
    return Encryption(a, b)


def reencrypt(public_key, e, r_prime):
    """Re-randomize the ciphertext `e` without changing its plaintext

    Arguments:
        public_key (EncryptionPublicKey): the public key `e` was encrypted for
        e (Encryption): the ciphertext
        r_prime (int): the additional randomization, an element of Z_q

    Returns:
        Encryption: `(a·pk^r', b·g^r')`
    """
    eg = public_key.encryption_group
    a = e.a * util.powmod(public_key.public_key, r_prime, eg.p) % eg.p
    b = e.b * util.powmod(eg.g, r_prime, eg.p) % eg.p
    return Encryption(a, b)


class KeyEstablishment:
    """Key pair generation and combination of the authorities' public keys"""
    def __init__(self, random_generator=None):
        """Constructor

        Arguments:
            random_generator (RandomGenerator, optional): source of the
                random bytes; a new `RandomGenerator` by default
        """
        if random_generator is None:
            random_generator = RandomGenerator()
        self.random_generator = random_generator

    def generate_keypair(self, eg):
        """Generate a key pair for one authority

        The secret key is read from twice as many random bytes as needed to
        represent q, then reduced modulo q. The extra bytes reduce the bias of
        the reduction; the distribution of `sk` is close to, but not exactly,
        uniform on `[0, q)`.

        Arguments:
            eg (EncryptionGroup): the group in which to generate the keys

        Returns:
            tuple: pair of two elements, usually named respectively `pk`
                (`EncryptionPublicKey`) and `sk` (`EncryptionPrivateKey`)
        """
        byte_length = math.ceil(eg.q.bit_length() / 8)
        random_bytes = self.random_generator.random_bytes(2 * byte_length)
        sk = util.bytes_to_int(random_bytes) % eg.q
        pk = util.powmod(eg.g, sk, eg.p)
        return EncryptionPublicKey(pk, eg), EncryptionPrivateKey(sk, eg)

    @staticmethod
    def get_public_key(*public_keys):
        """Combine public key shares into the joint public key

        The combination is a product in G_q, so it does not depend on the
        order of the shares.

        Arguments:
            *public_keys (EncryptionPublicKey): the shares of the authorities

        Returns:
            EncryptionPublicKey: the joint public key

        Raises:
            util.InvalidInput: if no share is given or if the shares do not
                all belong to the same encryption group
        """
        util.check_argument(len(public_keys) > 0, 'at least one public key share is required')
        eg = public_keys[0].encryption_group
        util.check_argument(
            all(key.encryption_group == eg for key in public_keys),
            'all public key shares must belong to the same encryption group',
        )
        public_key = util.prod((key.public_key for key in public_keys), eg.p)
        return EncryptionPublicKey(public_key, eg)
