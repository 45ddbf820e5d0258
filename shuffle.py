#!/usr/bin/env python3
"""Verification of the shuffle proofs of the mixing authorities

Each of the `s` authorities permutes and re-encrypts the list of ciphertexts
it receives and publishes a proof that its output is a shuffle of its input
(proof of Wikström, as made non-interactive with Fiat-Shamir). Every
authority then checks the proofs of all the others before taking part in the
decryption.

The main entry points are `ShuffleVerifier.check_shuffle_proof()` for a
single mix and `ShuffleVerifier.check_shuffle_proofs()` for the whole chain.

Calling a check with inconsistent sizes or with values outside of G_q / Z_q
raises `util.InvalidInput`; a well-formed but wrong proof only makes the
check return `False`.
"""
import logging

import util
from generalalgorithms import GeneralAlgorithms

logger = logging.getLogger(__name__)


def augment(first, rest):
    """Return a new list made of `first` followed by the elements of `rest`

    Used to index `[e_0, E_1, …, E_s]` and `[h, ĉ_1, …, ĉ_N]` directly, so
    that element `i` of `rest` is found at index `i + 1` of the result.
    """
    augmented = [first]
    augmented.extend(rest)
    return augmented


class ShuffleVerifier:
    """Checks the shuffle proofs of the mixing authorities

    Attributes:
        public_parameters (parameters.PublicParameters): the election setup
        general_algorithms (GeneralAlgorithms): membership tests, generators
            and challenges for the encryption group
    """
    def __init__(self, public_parameters, general_algorithms=None):
        """Constructor

        Arguments:
            public_parameters (parameters.PublicParameters): the election
                setup
            general_algorithms (GeneralAlgorithms, optional): built from the
                encryption group of the parameters if not provided
        """
        if general_algorithms is None:
            general_algorithms = GeneralAlgorithms(public_parameters.encryption_group)
        self.public_parameters = public_parameters
        self.general_algorithms = general_algorithms

    def _map(self, func, iterable):
        return util.parallel_map(func, iterable, self.public_parameters.n_workers)

    def check_shuffle_proofs(self, bold_pi, e_0, bold_E, public_key, j):
        """Check the shuffle proofs of all the other authorities

        Arguments:
            bold_pi (list): the shuffle proofs (`proofs.ShuffleProof`), one
                per authority
            e_0 (list): the ciphertexts (`elgamal.Encryption`) given to the
                first authority
            bold_E (list): the lists of re-encryptions, one per authority;
                `bold_E[i]` is the output of authority `i`
            public_key (elgamal.EncryptionPublicKey): the joint public key
            j (int): the index of the calling authority, whose own proof is
                not checked

        Returns:
            bool: `True` if every proof of the other authorities is valid

        Raises:
            util.InvalidInput: if the numbers of proofs and of lists do not
                match the number of authorities, if a list does not have the
                length of `e_0`, or if `j` is not a valid authority index
        """
        s = self.public_parameters.s
        N = len(e_0)
        util.check_size(len(bold_pi) == s, 'there should be as many proofs as there are authorities')
        util.check_size(len(bold_E) == s, 'there should be as many lists of re-encryptions as there are authorities')
        util.check_size(
            all(len(bold_e) == N for bold_e in bold_E),
            'every re-encryption list should have length N',
        )
        util.check_argument(
            isinstance(j, int) and 0 <= j < s,
            'the index of the authority should be valid with respect to the number of authorities',
        )

        # e_0 goes at index 0, so authority i turns tmp_bold_e[i] into tmp_bold_e[i+1]
        tmp_bold_e = augment(e_0, bold_E)
        indices = [i for i in range(s) if i != j]

        def check(i):
            is_valid = self.check_shuffle_proof(bold_pi[i], tmp_bold_e[i], tmp_bold_e[i + 1], public_key)
            if not is_valid:
                logger.error('Invalid shuffle proof from authority %d', i)
            return is_valid

        if self.public_parameters.n_workers <= 1:
            return all(check(i) for i in indices)
        return all(self._map(check, indices))

    def _check_members(self, values, message):
        ga = self.general_algorithms
        util.check_argument(all(self._map(ga.is_member, values)), message)

    def _check_in_zq(self, values, message):
        ga = self.general_algorithms
        util.check_argument(all(self._map(ga.is_in_zq, values)), message)

    def check_shuffle_proof(self, pi, bold_e, bold_e_prime, public_key):
        """Check the proof that `bold_e_prime` is a shuffle of `bold_e`

        Arguments:
            pi (proofs.ShuffleProof): the proof of the shuffle
            bold_e (list): the input ciphertexts (`elgamal.Encryption`)
            bold_e_prime (list): the permuted re-encryptions
            public_key (elgamal.EncryptionPublicKey): the joint public key

        Returns:
            bool: `True` if and only if the proof is valid for this shuffle

        Raises:
            util.SizeMismatch: if a sequence of the proof or `bold_e_prime`
                does not have the length of `bold_e`, or `t_4` is not a pair
            util.InvalidInput: if a value is not in G_q (resp. Z_q) when it
                should be
        """
        eg = self.public_parameters.encryption_group
        p, q, g, h = eg.p, eg.q, eg.g, eg.h
        tau = self.public_parameters.security_parameters.tau
        ga = self.general_algorithms
        pk = public_key.public_key

        N = len(bold_e)
        bold_c = pi.bold_c
        bold_c_hat = pi.bold_c_hat
        t_1, t_2, t_3, t_4, t_hat = pi.t.t_1, pi.t.t_2, pi.t.t_3, pi.t.t_4, pi.t.t_hat
        s_1, s_2, s_3, s_4 = pi.s.s_1, pi.s.s_2, pi.s.s_3, pi.s.s_4
        s_hat, s_prime = pi.s.s_hat, pi.s.s_prime

        # size checks
        util.check_size(len(bold_e_prime) == N, 'the length of bold_e_prime should be identical to that of bold_e')
        util.check_size(len(bold_c) == N, 'the length of bold_c should be identical to that of bold_e')
        util.check_size(len(bold_c_hat) == N, 'the length of bold_c_hat should be identical to that of bold_e')
        util.check_size(len(t_4) == 2, 't_4 should contain two elements')
        util.check_size(len(t_hat) == N, 'the length of t_hat should be identical to that of bold_e')
        util.check_size(len(s_hat) == N, 'the length of s_hat should be identical to that of bold_e')
        util.check_size(len(s_prime) == N, 'the length of s_prime should be identical to that of bold_e')

        # validity checks
        util.check_argument(ga.is_member(t_1), 't_1 must be in G_q')
        util.check_argument(ga.is_member(t_2), 't_2 must be in G_q')
        util.check_argument(ga.is_member(t_3), 't_3 must be in G_q')
        self._check_members(t_4, 't_4_1 and t_4_2 must be in G_q')
        self._check_members(t_hat, "all t_hat_i's must be in G_q")
        util.check_argument(ga.is_in_zq(s_1), 's_1 must be in Z_q')
        util.check_argument(ga.is_in_zq(s_2), 's_2 must be in Z_q')
        util.check_argument(ga.is_in_zq(s_3), 's_3 must be in Z_q')
        util.check_argument(ga.is_in_zq(s_4), 's_4 must be in Z_q')
        self._check_in_zq(s_hat, "all s_hat_i's must be in Z_q")
        self._check_in_zq(s_prime, "all s_prime_i's must be in Z_q")
        self._check_members(bold_c, "all c_i's must be in G_q")
        self._check_members(bold_c_hat, "all c_hat_i's must be in G_q")
        self._check_members([x for e in bold_e for x in (e.a, e.b)], "all e_i's must be in G_q^2")
        self._check_members([x for e in bold_e_prime for x in (e.a, e.b)], "all e_prime_i's must be in G_q^2")
        util.check_argument(ga.is_member(pk), 'pk must be in G_q')

        # challenges
        bold_h = ga.get_generators(N)
        bold_u = ga.get_nizkp_challenges(N, (bold_e, bold_e_prime, bold_c), tau)
        y = (bold_e, bold_e_prime, bold_c, bold_c_hat, pk)
        c = ga.get_nizkp_challenge(y, pi.t.elements_to_hash(), tau)

        # c̄ = ∏ c_i / ∏ h_i
        c_bar = util.prod(bold_c, p) * util.invert(util.prod(bold_h, p), p) % p

        # ĉ = ĉ_N / h^u, with ĉ_0 = h so that N = 0 gives ĉ = 1
        u = util.prod(bold_u, q)
        tmp_bold_c_hat = augment(h, bold_c_hat)
        c_hat = tmp_bold_c_hat[N] * util.powmod(h, -u, p) % p

        c_tilde = util.prod(self._map(lambda i: util.powmod(bold_c[i], bold_u[i], p), range(N)), p)
        e_prime_1 = util.prod(self._map(lambda i: util.powmod(bold_e[i].a, bold_u[i], p), range(N)), p)
        e_prime_2 = util.prod(self._map(lambda i: util.powmod(bold_e[i].b, bold_u[i], p), range(N)), p)

        t_prime_1 = util.powmod(c_bar, -c, p) * util.powmod(g, s_1, p) % p
        t_prime_2 = util.powmod(c_hat, -c, p) * util.powmod(g, s_2, p) % p

        h_i_s_prime_i = util.prod(self._map(lambda i: util.powmod(bold_h[i], s_prime[i], p), range(N)), p)
        t_prime_3 = util.powmod(c_tilde, -c, p) * util.powmod(g, s_3, p) * h_i_s_prime_i % p

        a_prime_i_s_prime_i = util.prod(
            self._map(lambda i: util.powmod(bold_e_prime[i].a, s_prime[i], p), range(N)), p
        )
        t_prime_4_1 = util.powmod(e_prime_1, -c, p) * util.powmod(pk, -s_4, p) * a_prime_i_s_prime_i % p
        b_prime_i_s_prime_i = util.prod(
            self._map(lambda i: util.powmod(bold_e_prime[i].b, s_prime[i], p), range(N)), p
        )
        t_prime_4_2 = util.powmod(e_prime_2, -c, p) * util.powmod(g, -s_4, p) * b_prime_i_s_prime_i % p

        t_hat_prime = self._map(
            lambda i: util.powmod(tmp_bold_c_hat[i + 1], -c, p)
            * util.powmod(g, s_hat[i], p)
            * util.powmod(tmp_bold_c_hat[i], s_prime[i], p) % p,
            range(N),
        )

        checks = [
            ('t_1', t_1 == t_prime_1),
            ('t_2', t_2 == t_prime_2),
            ('t_3', t_3 == t_prime_3),
            ('t_4_1', t_4[0] == t_prime_4_1),
            ('t_4_2', t_4[1] == t_prime_4_2),
            ('t_hat', all(t_hat[i] == t_hat_prime[i] for i in range(N))),
        ]
        failed = [name for name, ok in checks if not ok]
        if failed:
            logger.error('Invalid proof found: mismatch on %s', ', '.join(failed))
            return False
        logger.debug('Valid shuffle proof for %d ciphertexts', N)
        return True
