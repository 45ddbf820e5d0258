#!/usr/bin/env python3
"""Threshold decryption of the mixed ciphertexts

Once the last shuffle has been checked, each authority `j` publishes the
partial decryptions `b_i^sk_j` of the final ciphertexts along with a proof
that it used the secret key share matching its public key share `pk_j`
(equality of discrete logarithms, made non-interactive with Fiat-Shamir).
The plaintexts are recovered by combining the partial decryptions of all the
authorities.

The main entry point of this module is `DecryptionAuthority`.
"""
import logging

import util
from generalalgorithms import GeneralAlgorithms
from proofs import DecryptionProof
from randomness import RandomGenerator

logger = logging.getLogger(__name__)


class DecryptionAuthority:
    """Decryption side of a mixing authority

    Attributes:
        public_parameters (parameters.PublicParameters): the election setup
        general_algorithms (GeneralAlgorithms): membership tests and
            challenges for the encryption group
        random_generator (RandomGenerator): source of the proof randomness
    """
    def __init__(self, public_parameters, general_algorithms=None, random_generator=None):
        if general_algorithms is None:
            general_algorithms = GeneralAlgorithms(public_parameters.encryption_group)
        if random_generator is None:
            random_generator = RandomGenerator()
        self.public_parameters = public_parameters
        self.general_algorithms = general_algorithms
        self.random_generator = random_generator

    def _map(self, func, iterable):
        return util.parallel_map(func, iterable, self.public_parameters.n_workers)

    def _check_encryptions(self, bold_e):
        ga = self.general_algorithms
        util.check_argument(
            all(self._map(lambda e: ga.is_member(e.a) and ga.is_member(e.b), bold_e)),
            "all e_i's must be in G_q^2",
        )

    def get_partial_decryptions(self, bold_e, sk_j):
        """Partially decrypt a list of ciphertexts

        Arguments:
            bold_e (list): the ciphertexts (`elgamal.Encryption`)
            sk_j (int): the secret key share of this authority

        Returns:
            list: the partial decryptions `b_i^sk_j mod p` (int), in the order
                of `bold_e`

        Raises:
            util.InvalidInput: if a ciphertext is not in G_q^2
        """
        self._check_encryptions(bold_e)
        p = self.public_parameters.encryption_group.p
        return self._map(lambda e: util.powmod(e.b, sk_j, p), bold_e)

    def _challenge(self, pk_j, bold_e, bold_b_prime, t):
        tau = self.public_parameters.security_parameters.tau
        bold_b = [e.b for e in bold_e]
        y = (pk_j, bold_b, list(bold_b_prime))
        return self.general_algorithms.get_nizkp_challenge(y, list(t), tau)

    def gen_decryption_proof(self, sk_j, pk_j, bold_e, bold_b_prime):
        """Prove that the partial decryptions were computed with `sk_j`

        The proof shows knowledge of `sk_j` such that `pk_j = g^sk_j` and
        `b'_i = b_i^sk_j` for every ciphertext.

        Arguments:
            sk_j (int): the secret key share of this authority
            pk_j (int): the corresponding public key share
            bold_e (list): the ciphertexts (`elgamal.Encryption`)
            bold_b_prime (list): the partial decryptions (int)

        Returns:
            proofs.DecryptionProof: the proof `(t, s)`

        Raises:
            util.SizeMismatch: if `bold_b_prime` does not have the length of
                `bold_e`
            util.InvalidInput: if `sk_j` is not in Z_q or any other value is
                not in G_q
        """
        ga = self.general_algorithms
        util.check_size(len(bold_b_prime) == len(bold_e), 'the length of bold_b_prime should be identical to that of bold_e')
        util.check_argument(ga.is_in_zq(sk_j), 'sk_j must be in Z_q')
        util.check_argument(ga.is_member(pk_j), 'pk_j must be in G_q')
        self._check_encryptions(bold_e)
        util.check_argument(
            all(self._map(ga.is_member, bold_b_prime)),
            "all b_prime_i's must be in G_q",
        )

        eg = self.public_parameters.encryption_group
        p, q, g = eg.p, eg.q, eg.g
        omega = self.random_generator.random_in_zq(q)

        t_0 = util.powmod(g, omega, p)
        t = [t_0] + self._map(lambda e: util.powmod(e.b, omega, p), bold_e)
        c = self._challenge(pk_j, bold_e, bold_b_prime, t)
        s = (omega + c * sk_j) % q
        return DecryptionProof(t, s)

    def check_decryption_proof(self, pi_prime, pk_j, bold_e, bold_b_prime):
        """Check the decryption proof of one authority

        Arguments:
            pi_prime (proofs.DecryptionProof): the proof to check
            pk_j (int): the public key share of the authority
            bold_e (list): the ciphertexts (`elgamal.Encryption`)
            bold_b_prime (list): the partial decryptions (int) published by
                the authority

        Returns:
            bool: `True` if and only if the proof is valid

        Raises:
            util.SizeMismatch: if `bold_b_prime` does not have the length of
                `bold_e`, or if the proof does not have `N+1` commitments
            util.InvalidInput: if a value is not in G_q (resp. Z_q)
        """
        ga = self.general_algorithms
        N = len(bold_e)
        t, s = pi_prime.t, pi_prime.s
        util.check_size(len(bold_b_prime) == N, 'the length of bold_b_prime should be identical to that of bold_e')
        util.check_size(len(t) == N + 1, 't should contain N+1 elements')
        util.check_argument(ga.is_member(pk_j), 'pk_j must be in G_q')
        self._check_encryptions(bold_e)
        util.check_argument(all(self._map(ga.is_member, bold_b_prime)), "all b_prime_i's must be in G_q")
        util.check_argument(all(self._map(ga.is_member, t)), "all t_i's must be in G_q")
        util.check_argument(ga.is_in_zq(s), 's must be in Z_q')

        eg = self.public_parameters.encryption_group
        p, g = eg.p, eg.g
        c = self._challenge(pk_j, bold_e, bold_b_prime, t)

        t_prime_0 = util.powmod(g, s, p) * util.powmod(pk_j, -c, p) % p
        t_prime = [t_prime_0] + self._map(
            lambda i: util.powmod(bold_e[i].b, s, p) * util.powmod(bold_b_prime[i], -c, p) % p,
            range(N),
        )
        if list(t) != t_prime:
            logger.error('Invalid decryption proof found')
            return False
        logger.debug('Valid decryption proof for %d partial decryptions', N)
        return True

    def check_decryption_proofs(self, bold_pi_prime, bold_pk, bold_e, bold_B_prime, j):
        """Check the decryption proofs of all the other authorities

        Arguments:
            bold_pi_prime (list): the decryption proofs, one per authority
            bold_pk (list): the public key shares (int), one per authority
            bold_e (list): the ciphertexts (`elgamal.Encryption`)
            bold_B_prime (list): the partial decryptions, one list per
                authority
            j (int): the index of the calling authority, whose own proof is
                not checked

        Returns:
            bool: `True` if every proof of the other authorities is valid

        Raises:
            util.InvalidInput: if the lists do not have one entry per
                authority or `j` is not a valid authority index
        """
        s = self.public_parameters.s
        util.check_size(len(bold_pi_prime) == s, 'there should be as many proofs as there are authorities')
        util.check_size(len(bold_pk) == s, 'there should be as many public key shares as there are authorities')
        util.check_size(len(bold_B_prime) == s, 'there should be as many lists of partial decryptions as there are authorities')
        util.check_argument(
            isinstance(j, int) and 0 <= j < s,
            'the index of the authority should be valid with respect to the number of authorities',
        )

        indices = [i for i in range(s) if i != j]

        def check(i):
            is_valid = self.check_decryption_proof(bold_pi_prime[i], bold_pk[i], bold_e, bold_B_prime[i])
            if not is_valid:
                logger.error('Invalid decryption proof from authority %d', i)
            return is_valid

        if self.public_parameters.n_workers <= 1:
            return all(check(i) for i in indices)
        return all(self._map(check, indices))

    def get_decryptions(self, bold_e, bold_B_prime):
        """Combine the partial decryptions of all the authorities

        Arguments:
            bold_e (list): the ciphertexts (`elgamal.Encryption`)
            bold_B_prime (list): the partial decryptions, one list per
                authority, each in the order of `bold_e`

        Returns:
            list: the plaintexts `a_i / ∏_j b'_{j,i}` (elements of G_q)

        Raises:
            util.InvalidInput: if there is not one list per authority, if a
                list does not have the length of `bold_e`, or if a ciphertext
                or a partial decryption is not in G_q
        """
        s = self.public_parameters.s
        N = len(bold_e)
        util.check_size(len(bold_B_prime) == s, 'there should be as many lists of partial decryptions as there are authorities')
        util.check_size(
            all(len(bold_b_prime) == N for bold_b_prime in bold_B_prime),
            'every list of partial decryptions should have length N',
        )
        self._check_encryptions(bold_e)
        ga = self.general_algorithms
        util.check_argument(
            all(self._map(lambda bold_b_prime: all(ga.is_member(b) for b in bold_b_prime), bold_B_prime)),
            'all partial decryptions must be in G_q',
        )
        p = self.public_parameters.encryption_group.p

        def decrypt(i):
            b_prime = util.prod((bold_b_prime[i] for bold_b_prime in bold_B_prime), p)
            return bold_e[i].a * util.invert(b_prime, p) % p

        return self._map(decrypt, range(N))
