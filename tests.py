#!/usr/bin/env python3
import io
import os
import json
import random
import tempfile
import unittest
import itertools
import contextlib
from unittest import mock

import cli
import util
import elgamal
import shuffle
import parameters
import decryption
import generalalgorithms
from randomness import RandomGenerator
from proofs import (
    CommitmentChain, DecryptionProof, ShuffleProof, ShuffleProofS, ShuffleProofT,
)

DEFAULT_GROUP = parameters.default_encryption_group()

# p = 2q + 1 with q = 1439; 4 and 9 are squares, hence generators of G_q
TOY_GROUP = elgamal.EncryptionGroup(2879, 1439, 4, 9)


def make_parameters(eg=DEFAULT_GROUP, s=3, tau=128, n_workers=1):
    return parameters.PublicParameters(eg, parameters.SecurityParameters(tau), s, n_workers)


def encrypt_messages(public_key, exponents, rand):
    """Encrypt g^x for each x of `exponents`"""
    eg = public_key.encryption_group
    return [
        elgamal.encrypt(public_key, util.powmod(eg.g, x, eg.p), rand.randrange(eg.q))
        for x in exponents
    ]


def gen_shuffle(public_key, bold_e, rand, psi=None, zero_randomness=False):
    """Permute and re-encrypt a list of ciphertexts

    Output i is the re-encryption of input `psi[i]` with `bold_r_prime[psi[i]]`.
    """
    q = public_key.encryption_group.q
    N = len(bold_e)
    if psi is None:
        psi = list(range(N))
        rand.shuffle(psi)
    bold_r_prime = [0 if zero_randomness else rand.randrange(q) for _ in range(N)]
    bold_e_prime = [
        elgamal.reencrypt(public_key, bold_e[psi[i]], bold_r_prime[psi[i]])
        for i in range(N)
    ]
    return bold_e_prime, bold_r_prime, psi


def gen_permutation_commitment(eg, psi, bold_h, rand):
    N = len(psi)
    bold_c = [None] * N
    bold_r = [None] * N
    for i in range(N):
        j = psi[i]
        bold_r[j] = rand.randrange(eg.q)
        bold_c[j] = util.powmod(eg.g, bold_r[j], eg.p) * bold_h[i] % eg.p
    return CommitmentChain(bold_c, bold_r)


def gen_commitment_chain(eg, bold_u_prime, rand):
    bold_c_hat = []
    bold_r_hat = []
    previous = eg.h
    for u_prime_i in bold_u_prime:
        r_hat_i = rand.randrange(eg.q)
        c_hat_i = util.powmod(eg.g, r_hat_i, eg.p) * util.powmod(previous, u_prime_i, eg.p) % eg.p
        bold_c_hat.append(c_hat_i)
        bold_r_hat.append(r_hat_i)
        previous = c_hat_i
    return CommitmentChain(bold_c_hat, bold_r_hat)


def gen_shuffle_proof(public_parameters, bold_e, bold_e_prime, bold_r_prime, psi, public_key, rand):
    """Reference prover, used to build honest proofs for the verifier"""
    eg = public_parameters.encryption_group
    p, q, g, h = eg.p, eg.q, eg.g, eg.h
    tau = public_parameters.security_parameters.tau
    ga = generalalgorithms.GeneralAlgorithms(eg)
    pk = public_key.public_key
    N = len(bold_e)

    bold_h = ga.get_generators(N)
    permutation_commitment = gen_permutation_commitment(eg, psi, bold_h, rand)
    bold_c, bold_r = permutation_commitment.bold_c, permutation_commitment.bold_r
    bold_u = ga.get_nizkp_challenges(N, (bold_e, bold_e_prime, bold_c), tau)
    bold_u_prime = [bold_u[psi[i]] for i in range(N)]
    chain = gen_commitment_chain(eg, bold_u_prime, rand)
    bold_c_hat, bold_r_hat = chain.bold_c, chain.bold_r

    r_bar = sum(bold_r) % q
    bold_v = [1] * N
    for i in range(N - 1, 0, -1):
        bold_v[i - 1] = bold_u_prime[i] * bold_v[i] % q
    r_hat = sum(r_hat_i * v_i for r_hat_i, v_i in zip(bold_r_hat, bold_v)) % q
    r_tilde = sum(r_i * u_i for r_i, u_i in zip(bold_r, bold_u)) % q
    r_prime = sum(r_prime_i * u_i for r_prime_i, u_i in zip(bold_r_prime, bold_u)) % q

    omega_1, omega_2, omega_3, omega_4 = (rand.randrange(q) for _ in range(4))
    omega_hat = [rand.randrange(q) for _ in range(N)]
    omega_prime = [rand.randrange(q) for _ in range(N)]

    t_1 = util.powmod(g, omega_1, p)
    t_2 = util.powmod(g, omega_2, p)
    t_3 = util.powmod(g, omega_3, p) * util.prod(
        (util.powmod(h_i, w, p) for h_i, w in zip(bold_h, omega_prime)), p) % p
    t_4_1 = util.powmod(pk, -omega_4, p) * util.prod(
        (util.powmod(e.a, w, p) for e, w in zip(bold_e_prime, omega_prime)), p) % p
    t_4_2 = util.powmod(g, -omega_4, p) * util.prod(
        (util.powmod(e.b, w, p) for e, w in zip(bold_e_prime, omega_prime)), p) % p
    tmp_bold_c_hat = [h] + list(bold_c_hat)
    t_hat = [
        util.powmod(g, omega_hat[i], p) * util.powmod(tmp_bold_c_hat[i], omega_prime[i], p) % p
        for i in range(N)
    ]
    t = ShuffleProofT(t_1, t_2, t_3, (t_4_1, t_4_2), t_hat)

    y = (bold_e, bold_e_prime, bold_c, bold_c_hat, pk)
    c = ga.get_nizkp_challenge(y, t.elements_to_hash(), tau)

    s = ShuffleProofS(
        (omega_1 + c * r_bar) % q,
        (omega_2 + c * r_hat) % q,
        (omega_3 + c * r_tilde) % q,
        (omega_4 + c * r_prime) % q,
        [(omega_hat[i] + c * bold_r_hat[i]) % q for i in range(N)],
        [(omega_prime[i] + c * bold_u_prime[i]) % q for i in range(N)],
    )
    return ShuffleProof(t, s, bold_c, bold_c_hat)


def gen_mix(public_parameters, public_key, e_0, rand):
    """Run the whole chain of mixes; returns the proofs and the output lists"""
    bold_pi = []
    bold_E = []
    bold_e = e_0
    for _ in range(public_parameters.s):
        bold_e_prime, bold_r_prime, psi = gen_shuffle(public_key, bold_e, rand)
        bold_pi.append(gen_shuffle_proof(
            public_parameters, bold_e, bold_e_prime, bold_r_prime, psi, public_key, rand))
        bold_E.append(bold_e_prime)
        bold_e = bold_e_prime
    return bold_pi, bold_E


def flip(x, q):
    """Flip the lowest bit of an element of Z_q, staying in Z_q"""
    y = x ^ 1
    return y if y < q else x - 1


def replace_t(pi, **changes):
    values = dict(t_1=pi.t.t_1, t_2=pi.t.t_2, t_3=pi.t.t_3, t_4=pi.t.t_4, t_hat=pi.t.t_hat)
    values.update(changes)
    return ShuffleProof(ShuffleProofT(**values), pi.s, pi.bold_c, pi.bold_c_hat)


def replace_s(pi, **changes):
    values = dict(s_1=pi.s.s_1, s_2=pi.s.s_2, s_3=pi.s.s_3, s_4=pi.s.s_4,
                  s_hat=pi.s.s_hat, s_prime=pi.s.s_prime)
    values.update(changes)
    return ShuffleProof(pi.t, ShuffleProofS(**values), pi.bold_c, pi.bold_c_hat)


def replace_at(sequence, i, value):
    sequence = list(sequence)
    sequence[i] = value
    return sequence


class TestUtil(unittest.TestCase):
    def test_prod(self):
        self.assertEqual(util.prod([]), 1)
        self.assertEqual(util.prod([], 7), 1)
        self.assertEqual(util.prod([3, 4, 5]), 60)
        self.assertEqual(util.prod([3, 4, 5], 7), 4)

    def test_powmod(self):
        self.assertEqual(util.powmod(3, 4, 7), 4)
        self.assertEqual(util.powmod(3, -1, 7), 5)
        self.assertEqual(util.powmod(1, -5, 7), 1)

    def test_parallel_map(self):
        values = list(range(50))
        self.assertEqual(util.parallel_map(lambda x: x*x, values), [x*x for x in values])
        self.assertEqual(util.parallel_map(lambda x: x*x, values, 4), [x*x for x in values])
        self.assertEqual(util.parallel_map(lambda x: x, [], 4), [])

    def test_errors(self):
        self.assertRaises(util.InvalidInput, util.check_argument, False, 'message')
        self.assertRaises(util.SizeMismatch, util.check_size, False, 'message')
        self.assertTrue(issubclass(util.SizeMismatch, util.InvalidInput))
        self.assertTrue(issubclass(util.InvalidInput, ValueError))
        util.check_argument(True, 'message')

    def test_bytes(self):
        self.assertEqual(util.int_to_bytes(0), b'')
        self.assertEqual(util.int_to_bytes(256), b'\x01\x00')
        self.assertEqual(util.bytes_to_int(b'\x01\x00'), 256)


class TestEncryptionGroup(unittest.TestCase):
    def test_valid(self):
        self.assertIn(4, TOY_GROUP)
        self.assertIn(1, TOY_GROUP)
        self.assertNotIn(0, TOY_GROUP)
        self.assertNotIn(TOY_GROUP.p, TOY_GROUP)
        self.assertNotIn(TOY_GROUP.p - 1, TOY_GROUP)  # order 2
        self.assertEqual(TOY_GROUP, elgamal.EncryptionGroup(2879, 1439, 4, 9))
        self.assertNotEqual(TOY_GROUP, DEFAULT_GROUP)

    def test_invalid(self):
        self.assertRaises(util.InvalidInput, elgamal.EncryptionGroup, 2880, 1439, 4, 9)
        self.assertRaises(util.InvalidInput, elgamal.EncryptionGroup, 2879, 1438, 4, 9)
        self.assertRaises(util.InvalidInput, elgamal.EncryptionGroup, 2879, 7, 4, 9)
        self.assertRaises(util.InvalidInput, elgamal.EncryptionGroup, 2879, 1439, 1, 9)
        self.assertRaises(util.InvalidInput, elgamal.EncryptionGroup, 2879, 1439, 4, 2878)


class TestGeneralAlgorithms(unittest.TestCase):
    def setUp(self):
        self.ga = generalalgorithms.GeneralAlgorithms(DEFAULT_GROUP)

    def test_membership(self):
        q = DEFAULT_GROUP.q
        self.assertTrue(self.ga.is_member(DEFAULT_GROUP.g))
        self.assertFalse(self.ga.is_member(0))
        self.assertFalse(self.ga.is_member(DEFAULT_GROUP.p - 1))
        self.assertFalse(self.ga.is_member(None))
        self.assertTrue(self.ga.is_in_zq(0))
        self.assertTrue(self.ga.is_in_zq(q - 1))
        self.assertFalse(self.ga.is_in_zq(q))
        self.assertFalse(self.ga.is_in_zq(-1))

    def test_rec_hash(self):
        self.assertEqual(generalalgorithms.rec_hash(1, 2), generalalgorithms.rec_hash((1, 2)))
        self.assertEqual(generalalgorithms.rec_hash([1, [2, 3]]), generalalgorithms.rec_hash((1, (2, 3))))
        self.assertNotEqual(generalalgorithms.rec_hash([1, 2]), generalalgorithms.rec_hash([2, 1]))
        self.assertNotEqual(generalalgorithms.rec_hash([[1], 2]), generalalgorithms.rec_hash([1, [2]]))
        e = elgamal.Encryption(5, 7)
        self.assertEqual(generalalgorithms.rec_hash(e), generalalgorithms.rec_hash((5, 7)))
        self.assertRaises(TypeError, generalalgorithms.rec_hash, 1.5)
        self.assertRaises(TypeError, generalalgorithms.rec_hash, -1)

    def test_rec_hash_kinds(self):
        rec_hash = generalalgorithms.rec_hash
        # same bytes, different kinds
        self.assertNotEqual(rec_hash('a'), rec_hash(97))
        self.assertNotEqual(rec_hash('a'), rec_hash(b'a'))
        self.assertNotEqual(rec_hash(97), rec_hash(b'a'))
        self.assertNotEqual(rec_hash([]), rec_hash(b''))
        self.assertNotEqual(rec_hash([]), rec_hash(0))
        # a sequence is not the integer read from its encoding
        digest = rec_hash(12345)
        self.assertNotEqual(rec_hash([12345]), rec_hash(util.bytes_to_int(digest)))
        self.assertNotEqual(rec_hash([12345]), rec_hash(digest))
        self.assertNotEqual(rec_hash([[1, 2]]), rec_hash([1, 2]))

    def test_generators(self):
        bold_h = self.ga.get_generators(5)
        self.assertEqual(len(bold_h), 5)
        self.assertEqual(len(set(bold_h)), 5)
        for h_i in bold_h:
            self.assertTrue(self.ga.is_member(h_i))
            self.assertNotEqual(h_i, 1)
        # deterministic, and prefixes are consistent with the cache
        other = generalalgorithms.GeneralAlgorithms(DEFAULT_GROUP)
        self.assertEqual(other.get_generators(3), bold_h[:3])
        self.assertEqual(other.get_generators(5), bold_h)
        self.assertEqual(self.ga.get_generators(0), [])

    def test_generators_toy_group(self):
        ga = generalalgorithms.GeneralAlgorithms(TOY_GROUP)
        for h_i in ga.get_generators(20):
            self.assertIn(h_i, TOY_GROUP)
            self.assertNotEqual(h_i, 1)

    def test_challenges(self):
        q = DEFAULT_GROUP.q
        c = self.ga.get_nizkp_challenge([1, 2], [3], 128)
        self.assertEqual(c, self.ga.get_nizkp_challenge([1, 2], [3], 128))
        self.assertNotEqual(c, self.ga.get_nizkp_challenge([1, 2], [4], 128))
        self.assertLess(c, 2**128)
        self.assertLess(self.ga.get_nizkp_challenge([1, 2], [3], 2048), q)

        bold_u = self.ga.get_nizkp_challenges(4, [1, 2], 128)
        self.assertEqual(len(bold_u), 4)
        self.assertEqual(len(set(bold_u)), 4)
        self.assertTrue(all(0 <= u < 2**128 for u in bold_u))
        self.assertEqual(bold_u, self.ga.get_nizkp_challenges(4, [1, 2], 128))
        self.assertEqual(self.ga.get_nizkp_challenges(0, [1, 2], 128), [])


class RecordingRandomGenerator(RandomGenerator):
    def __init__(self, source=None):
        super().__init__(source)
        self.requested = []

    def random_bytes(self, n):
        self.requested.append(n)
        return super().random_bytes(n)


class TestKeyEstablishment(unittest.TestCase):
    def test_generate_keypair(self):
        rg = RecordingRandomGenerator()
        pk, sk = elgamal.KeyEstablishment(rg).generate_keypair(DEFAULT_GROUP)
        self.assertEqual(rg.requested, [2 * 128])  # q has 1023 bits
        self.assertTrue(0 <= sk.private_key < DEFAULT_GROUP.q)
        self.assertEqual(pk.public_key, util.powmod(DEFAULT_GROUP.g, sk.private_key, DEFAULT_GROUP.p))
        self.assertEqual(pk.encryption_group, DEFAULT_GROUP)
        self.assertEqual(sk.encryption_group, DEFAULT_GROUP)

        # fresh randomness on each call
        pk2, sk2 = elgamal.KeyEstablishment(rg).generate_keypair(DEFAULT_GROUP)
        self.assertNotEqual(sk.private_key, sk2.private_key)

    def test_generate_keypair_toy_group(self):
        rg = RecordingRandomGenerator(random.Random(1))
        key_establishment = elgamal.KeyEstablishment(rg)
        for _ in range(20):
            pk, sk = key_establishment.generate_keypair(TOY_GROUP)
            self.assertTrue(0 <= sk.private_key < TOY_GROUP.q)
            self.assertIn(pk.public_key, TOY_GROUP)
        self.assertEqual(set(rg.requested), {4})  # q has 11 bits

    def test_get_public_key(self):
        key_establishment = elgamal.KeyEstablishment()
        shares = [key_establishment.generate_keypair(DEFAULT_GROUP)[0] for _ in range(3)]
        public_key = elgamal.KeyEstablishment.get_public_key(*shares)
        self.assertEqual(public_key.public_key, util.prod((pk.public_key for pk in shares), DEFAULT_GROUP.p))
        for permutation in itertools.permutations(shares):
            self.assertEqual(elgamal.KeyEstablishment.get_public_key(*permutation), public_key)
        self.assertEqual(elgamal.KeyEstablishment.get_public_key(shares[0]), shares[0])

    def test_get_public_key_invalid(self):
        self.assertRaises(util.InvalidInput, elgamal.KeyEstablishment.get_public_key)
        pk_default, _ = elgamal.KeyEstablishment().generate_keypair(DEFAULT_GROUP)
        pk_toy, _ = elgamal.KeyEstablishment().generate_keypair(TOY_GROUP)
        self.assertRaises(util.InvalidInput, elgamal.KeyEstablishment.get_public_key, pk_default, pk_toy)


class TestProofObjects(unittest.TestCase):
    def test_commitment_chain(self):
        bold_c = [1, 2, 3]
        bold_r = [4, 5, 6]
        chain = CommitmentChain(bold_c, bold_r)
        bold_c.append(7)
        self.assertEqual(chain.bold_c, (1, 2, 3))
        self.assertEqual(len(chain), 3)
        self.assertEqual(chain, CommitmentChain((1, 2, 3), (4, 5, 6)))
        self.assertNotEqual(chain, CommitmentChain((1, 2, 3), (4, 5, 7)))
        self.assertRaises(util.SizeMismatch, CommitmentChain, [1, 2], [3])

    def test_immutable(self):
        chain = CommitmentChain([1, 2], [3, 4])
        with self.assertRaises(AttributeError):
            chain.bold_c = (5, 6)
        with self.assertRaises(AttributeError):
            del chain.bold_r
        self.assertEqual(chain.bold_c, (1, 2))

        t = ShuffleProofT(1, 2, 3, (4, 5), [6])
        s = ShuffleProofS(1, 2, 3, 4, [5], [6])
        pi = ShuffleProof(t, s, [7], [8])
        before = hash(pi)
        for obj, name in [(pi, 'bold_c'), (pi, 't'), (t, 't_hat'), (s, 's_1')]:
            with self.assertRaises(AttributeError):
                setattr(obj, name, [0])
        with self.assertRaises(AttributeError):
            pi.extra = 1
        self.assertEqual(pi.bold_c, (7,))
        self.assertEqual(pi.t.t_hat, (6,))
        self.assertEqual(hash(pi), before)

        proof = DecryptionProof([1, 2], 3)
        with self.assertRaises(AttributeError):
            proof.s = 4
        self.assertEqual(proof, DecryptionProof((1, 2), 3))

    def test_serialization(self):
        rand = random.Random(0)
        public_parameters = make_parameters(s=1)
        pk, _ = elgamal.KeyEstablishment(RandomGenerator(rand)).generate_keypair(DEFAULT_GROUP)
        bold_e = encrypt_messages(pk, [1, 2, 3], rand)
        bold_pi, _ = gen_mix(public_parameters, pk, bold_e, rand)
        pi = bold_pi[0]
        data = json.loads(json.dumps(pi.to_dict()))
        self.assertEqual(ShuffleProof.from_dict(data), pi)

        proof = DecryptionProof([1, 2, 3], 4)
        self.assertEqual(DecryptionProof.from_dict(json.loads(json.dumps(proof.to_dict()))), proof)
        self.assertEqual(elgamal.EncryptionPublicKey.from_dict(pk.to_dict()), pk)


class TestShuffleProof(unittest.TestCase):
    def setUp(self):
        self.rand = random.Random(42)
        self.public_parameters = make_parameters(s=1)
        self.verifier = shuffle.ShuffleVerifier(self.public_parameters)
        self.pk, _ = elgamal.KeyEstablishment(RandomGenerator(self.rand)).generate_keypair(DEFAULT_GROUP)

    def honest_shuffle(self, N):
        bold_e = encrypt_messages(self.pk, range(1, N + 1), self.rand)
        bold_e_prime, bold_r_prime, psi = gen_shuffle(self.pk, bold_e, self.rand)
        pi = gen_shuffle_proof(self.public_parameters, bold_e, bold_e_prime, bold_r_prime, psi, self.pk, self.rand)
        return pi, bold_e, bold_e_prime

    def test_augment(self):
        self.assertEqual(shuffle.augment('h', []), ['h'])
        augmented = shuffle.augment('h', ('c_1', 'c_2', 'c_3'))
        self.assertEqual(augmented[0], 'h')
        self.assertEqual(augmented[1], 'c_1')
        self.assertEqual(augmented[3], 'c_3')
        self.assertEqual(len(augmented), 4)

    def test_valid(self):
        for N in [0, 1, 2, 5]:
            pi, bold_e, bold_e_prime = self.honest_shuffle(N)
            self.assertTrue(self.verifier.check_shuffle_proof(pi, bold_e, bold_e_prime, self.pk))

    def test_valid_parallel(self):
        pi, bold_e, bold_e_prime = self.honest_shuffle(6)
        verifier = shuffle.ShuffleVerifier(make_parameters(s=1, n_workers=4))
        self.assertTrue(verifier.check_shuffle_proof(pi, bold_e, bold_e_prime, self.pk))
        bad_pi = replace_t(pi, t_hat=replace_at(pi.t.t_hat, 5, pi.t.t_hat[5] * DEFAULT_GROUP.g % DEFAULT_GROUP.p))
        self.assertFalse(verifier.check_shuffle_proof(bad_pi, bold_e, bold_e_prime, self.pk))

    def test_scalar_mutations(self):
        q = DEFAULT_GROUP.q
        N = 3
        pi, bold_e, bold_e_prime = self.honest_shuffle(N)
        for name in ['s_1', 's_2', 's_3', 's_4']:
            bad_pi = replace_s(pi, **{name: flip(getattr(pi.s, name), q)})
            self.assertFalse(self.verifier.check_shuffle_proof(bad_pi, bold_e, bold_e_prime, self.pk), name)
        for i in range(N):
            bad_pi = replace_s(pi, s_hat=replace_at(pi.s.s_hat, i, flip(pi.s.s_hat[i], q)))
            self.assertFalse(self.verifier.check_shuffle_proof(bad_pi, bold_e, bold_e_prime, self.pk))
            bad_pi = replace_s(pi, s_prime=replace_at(pi.s.s_prime, i, flip(pi.s.s_prime[i], q)))
            self.assertFalse(self.verifier.check_shuffle_proof(bad_pi, bold_e, bold_e_prime, self.pk))

    def test_element_mutations(self):
        p, g = DEFAULT_GROUP.p, DEFAULT_GROUP.g
        N = 3
        pi, bold_e, bold_e_prime = self.honest_shuffle(N)

        def other(x):
            return x * g % p

        for k in range(2):
            bad_pi = replace_t(pi, t_4=replace_at(pi.t.t_4, k, other(pi.t.t_4[k])))
            self.assertFalse(self.verifier.check_shuffle_proof(bad_pi, bold_e, bold_e_prime, self.pk))
        for name in ['t_1', 't_2', 't_3']:
            bad_pi = replace_t(pi, **{name: other(getattr(pi.t, name))})
            self.assertFalse(self.verifier.check_shuffle_proof(bad_pi, bold_e, bold_e_prime, self.pk))
        # every index, including the first and the last one
        for i in range(N):
            bad_pi = replace_t(pi, t_hat=replace_at(pi.t.t_hat, i, other(pi.t.t_hat[i])))
            self.assertFalse(self.verifier.check_shuffle_proof(bad_pi, bold_e, bold_e_prime, self.pk))
            bad_pi = ShuffleProof(pi.t, pi.s, replace_at(pi.bold_c, i, other(pi.bold_c[i])), pi.bold_c_hat)
            self.assertFalse(self.verifier.check_shuffle_proof(bad_pi, bold_e, bold_e_prime, self.pk))
            bad_pi = ShuffleProof(pi.t, pi.s, pi.bold_c, replace_at(pi.bold_c_hat, i, other(pi.bold_c_hat[i])))
            self.assertFalse(self.verifier.check_shuffle_proof(bad_pi, bold_e, bold_e_prime, self.pk))

    def test_wrong_ciphertexts(self):
        pi, bold_e, bold_e_prime = self.honest_shuffle(3)
        # same proof for a different shuffle
        reordered = [bold_e_prime[1], bold_e_prime[0], bold_e_prime[2]]
        self.assertFalse(self.verifier.check_shuffle_proof(pi, bold_e, reordered, self.pk))
        # the output is not a re-encryption of the input
        fake = list(bold_e_prime)
        fake[2] = encrypt_messages(self.pk, [4], self.rand)[0]
        self.assertFalse(self.verifier.check_shuffle_proof(pi, bold_e, fake, self.pk))

    def test_rejection_is_logged(self):
        pi, bold_e, bold_e_prime = self.honest_shuffle(2)
        bad_pi = replace_s(pi, s_1=flip(pi.s.s_1, DEFAULT_GROUP.q))
        with self.assertLogs('shuffle', level='ERROR'):
            self.assertFalse(self.verifier.check_shuffle_proof(bad_pi, bold_e, bold_e_prime, self.pk))

    def test_size_mismatch(self):
        N = 3
        pi, bold_e, bold_e_prime = self.honest_shuffle(N)
        check = self.verifier.check_shuffle_proof
        self.assertRaises(util.SizeMismatch, check, pi, bold_e, bold_e_prime[:-1], self.pk)
        self.assertRaises(util.SizeMismatch, check, pi, bold_e[:-1], bold_e_prime[:-1], self.pk)
        bad_pi = ShuffleProof(pi.t, pi.s, pi.bold_c[:-1], pi.bold_c_hat)
        self.assertRaises(util.SizeMismatch, check, bad_pi, bold_e, bold_e_prime, self.pk)
        bad_pi = ShuffleProof(pi.t, pi.s, pi.bold_c, pi.bold_c_hat + (1,))
        self.assertRaises(util.SizeMismatch, check, bad_pi, bold_e, bold_e_prime, self.pk)
        bad_pi = replace_t(pi, t_4=pi.t.t_4 + (1,))
        self.assertRaises(util.SizeMismatch, check, bad_pi, bold_e, bold_e_prime, self.pk)
        bad_pi = replace_t(pi, t_hat=pi.t.t_hat[1:])
        self.assertRaises(util.SizeMismatch, check, bad_pi, bold_e, bold_e_prime, self.pk)
        bad_pi = replace_s(pi, s_hat=pi.s.s_hat[1:])
        self.assertRaises(util.SizeMismatch, check, bad_pi, bold_e, bold_e_prime, self.pk)
        bad_pi = replace_s(pi, s_prime=pi.s.s_prime + (0,))
        self.assertRaises(util.SizeMismatch, check, bad_pi, bold_e, bold_e_prime, self.pk)

    def test_invalid_domain(self):
        p, q = DEFAULT_GROUP.p, DEFAULT_GROUP.q
        pi, bold_e, bold_e_prime = self.honest_shuffle(2)
        check = self.verifier.check_shuffle_proof

        for bad_pi in [
                replace_t(pi, t_1=0),
                replace_t(pi, t_3=p - 1),
                replace_t(pi, t_4=(pi.t.t_4[0], p)),
                replace_t(pi, t_hat=replace_at(pi.t.t_hat, 1, p - 1)),
                replace_s(pi, s_2=q),
                replace_s(pi, s_4=-1),
                replace_s(pi, s_hat=replace_at(pi.s.s_hat, 0, q)),
                replace_s(pi, s_prime=replace_at(pi.s.s_prime, 1, q + 5)),
                ShuffleProof(pi.t, pi.s, replace_at(pi.bold_c, 0, 0), pi.bold_c_hat),
                ShuffleProof(pi.t, pi.s, pi.bold_c, replace_at(pi.bold_c_hat, 1, p - 1))]:
            with self.assertRaises(util.InvalidInput) as cm:
                check(bad_pi, bold_e, bold_e_prime, self.pk)
            self.assertNotIsInstance(cm.exception, util.SizeMismatch)

        bad_e = replace_at(bold_e, 0, elgamal.Encryption(p - 1, bold_e[0].b))
        self.assertRaises(util.InvalidInput, check, pi, bad_e, bold_e_prime, self.pk)
        bad_e_prime = replace_at(bold_e_prime, 1, elgamal.Encryption(bold_e_prime[1].a, 0))
        self.assertRaises(util.InvalidInput, check, pi, bold_e, bad_e_prime, self.pk)
        bad_pk = elgamal.EncryptionPublicKey(p - 1, DEFAULT_GROUP)
        self.assertRaises(util.InvalidInput, check, pi, bold_e, bold_e_prime, bad_pk)

    def test_toy_group_identity_shuffle(self):
        rand = random.Random(7)
        public_parameters = make_parameters(TOY_GROUP, s=1, tau=16)
        verifier = shuffle.ShuffleVerifier(public_parameters)
        pk, _ = elgamal.KeyEstablishment(RandomGenerator(rand)).generate_keypair(TOY_GROUP)
        bold_e = [
            elgamal.encrypt(pk, util.powmod(TOY_GROUP.g, 1, TOY_GROUP.p), 1),
            elgamal.encrypt(pk, util.powmod(TOY_GROUP.g, 2, TOY_GROUP.p), 2),
        ]
        bold_e_prime, bold_r_prime, psi = gen_shuffle(pk, bold_e, rand, psi=[0, 1], zero_randomness=True)
        self.assertEqual(bold_e_prime, bold_e)
        pi = gen_shuffle_proof(public_parameters, bold_e, bold_e_prime, bold_r_prime, psi, pk, rand)
        self.assertTrue(verifier.check_shuffle_proof(pi, bold_e, bold_e_prime, pk))
        reordered = [bold_e_prime[1], bold_e_prime[0]]
        self.assertFalse(verifier.check_shuffle_proof(pi, bold_e, reordered, pk))


class TestShuffleProofs(unittest.TestCase):
    def setUp(self):
        self.rand = random.Random(3)
        self.public_parameters = make_parameters(s=3)
        self.verifier = shuffle.ShuffleVerifier(self.public_parameters)
        self.pk, _ = elgamal.KeyEstablishment(RandomGenerator(self.rand)).generate_keypair(DEFAULT_GROUP)
        self.e_0 = encrypt_messages(self.pk, [3, 1, 4, 1], self.rand)

    def test_valid_chain(self):
        bold_pi, bold_E = gen_mix(self.public_parameters, self.pk, self.e_0, self.rand)
        for j in range(3):
            self.assertTrue(self.verifier.check_shuffle_proofs(bold_pi, self.e_0, bold_E, self.pk, j))
        verifier = shuffle.ShuffleVerifier(make_parameters(s=3, n_workers=3))
        self.assertTrue(verifier.check_shuffle_proofs(bold_pi, self.e_0, bold_E, self.pk, 0))

    def test_invalid_chain(self):
        bold_pi, bold_E = gen_mix(self.public_parameters, self.pk, self.e_0, self.rand)
        bad_pi = replace_s(bold_pi[1], s_3=flip(bold_pi[1].s.s_3, DEFAULT_GROUP.q))
        bold_pi = replace_at(bold_pi, 1, bad_pi)
        # the authority does not check its own proof
        self.assertTrue(self.verifier.check_shuffle_proofs(bold_pi, self.e_0, bold_E, self.pk, 1))
        self.assertFalse(self.verifier.check_shuffle_proofs(bold_pi, self.e_0, bold_E, self.pk, 0))
        self.assertFalse(self.verifier.check_shuffle_proofs(bold_pi, self.e_0, bold_E, self.pk, 2))
        verifier = shuffle.ShuffleVerifier(make_parameters(s=3, n_workers=3))
        self.assertFalse(verifier.check_shuffle_proofs(bold_pi, self.e_0, bold_E, self.pk, 0))

    def test_transitions(self):
        e_0 = ['e_0']
        bold_E = [['e_1'], ['e_2'], ['e_3']]
        bold_pi = ['pi_0', 'pi_1', 'pi_2']

        with mock.patch.object(self.verifier, 'check_shuffle_proof', return_value=True) as check:
            self.assertTrue(self.verifier.check_shuffle_proofs(bold_pi, e_0, bold_E, self.pk, 1))
        self.assertEqual(check.call_args_list, [
            mock.call('pi_0', ['e_0'], ['e_1'], self.pk),
            mock.call('pi_2', ['e_2'], ['e_3'], self.pk),
        ])

        for outcomes in [[True, False], [False, True], [False, False]]:
            results = dict(zip(['pi_0', 'pi_2'], outcomes))
            with mock.patch.object(self.verifier, 'check_shuffle_proof',
                                   side_effect=lambda pi, *args: results[pi]) as check:
                self.assertFalse(self.verifier.check_shuffle_proofs(bold_pi, e_0, bold_E, self.pk, 1))
            self.assertNotIn('pi_1', [c[0][0] for c in check.call_args_list])

        # same outcome when the transitions are checked concurrently
        verifier = shuffle.ShuffleVerifier(make_parameters(s=3, n_workers=3))
        with mock.patch.object(verifier, 'check_shuffle_proof',
                               side_effect=lambda pi, *args: pi != 'pi_2') as check:
            self.assertFalse(verifier.check_shuffle_proofs(bold_pi, e_0, bold_E, self.pk, 1))
        self.assertEqual(sorted(c[0][0] for c in check.call_args_list), ['pi_0', 'pi_2'])

    def test_invalid_input(self):
        bold_pi, bold_E = gen_mix(self.public_parameters, self.pk, self.e_0, self.rand)
        check = self.verifier.check_shuffle_proofs
        self.assertRaises(util.InvalidInput, check, bold_pi[:2], self.e_0, bold_E, self.pk, 0)
        self.assertRaises(util.InvalidInput, check, bold_pi, self.e_0, bold_E[:2], self.pk, 0)
        self.assertRaises(util.SizeMismatch, check, bold_pi, self.e_0,
                          replace_at(bold_E, 2, bold_E[2][:-1]), self.pk, 0)
        self.assertRaises(util.InvalidInput, check, bold_pi, self.e_0, bold_E, self.pk, 3)
        self.assertRaises(util.InvalidInput, check, bold_pi, self.e_0, bold_E, self.pk, -1)


class TestDecryption(unittest.TestCase):
    def setUp(self):
        self.rand = random.Random(5)
        self.public_parameters = make_parameters(s=3)
        rg = RandomGenerator(self.rand)
        self.authority = decryption.DecryptionAuthority(self.public_parameters, random_generator=rg)
        key_establishment = elgamal.KeyEstablishment(rg)
        self.keys = [key_establishment.generate_keypair(DEFAULT_GROUP) for _ in range(3)]
        self.pk = elgamal.KeyEstablishment.get_public_key(*(pk for pk, _ in self.keys))
        self.bold_e = encrypt_messages(self.pk, [2, 7, 1, 8], self.rand)

    def test_partial_decryptions(self):
        p = DEFAULT_GROUP.p
        _, sk = self.keys[0]
        bold_b_prime = self.authority.get_partial_decryptions(self.bold_e, sk.private_key)
        self.assertEqual(len(bold_b_prime), len(self.bold_e))
        for e, b_prime in zip(self.bold_e, bold_b_prime):
            self.assertEqual(b_prime, util.powmod(e.b, sk.private_key, p))
        reversed_b_prime = self.authority.get_partial_decryptions(self.bold_e[::-1], sk.private_key)
        self.assertEqual(reversed_b_prime, bold_b_prime[::-1])
        self.assertEqual(self.authority.get_partial_decryptions([], sk.private_key), [])

        bad_e = replace_at(self.bold_e, 3, elgamal.Encryption(self.bold_e[3].a, p - 1))
        self.assertRaises(util.InvalidInput, self.authority.get_partial_decryptions, bad_e, sk.private_key)

    def test_proof(self):
        pk, sk = self.keys[1]
        sk_j, pk_j = sk.private_key, pk.public_key
        bold_b_prime = self.authority.get_partial_decryptions(self.bold_e, sk_j)
        proof = self.authority.gen_decryption_proof(sk_j, pk_j, self.bold_e, bold_b_prime)
        self.assertEqual(len(proof.t), len(self.bold_e) + 1)
        self.assertNotEqual(proof.t[0], 1)
        self.assertTrue(self.authority.check_decryption_proof(proof, pk_j, self.bold_e, bold_b_prime))

        # fresh randomness for each proof
        other_proof = self.authority.gen_decryption_proof(sk_j, pk_j, self.bold_e, bold_b_prime)
        self.assertNotEqual(proof, other_proof)
        self.assertTrue(self.authority.check_decryption_proof(other_proof, pk_j, self.bold_e, bold_b_prime))

        # another key used for the proof
        wrong_sk = (sk_j + 1) % DEFAULT_GROUP.q
        wrong_proof = self.authority.gen_decryption_proof(wrong_sk, pk_j, self.bold_e, bold_b_prime)
        self.assertFalse(self.authority.check_decryption_proof(wrong_proof, pk_j, self.bold_e, bold_b_prime))

        # tampered proofs
        bad_proof = DecryptionProof(proof.t, flip(proof.s, DEFAULT_GROUP.q))
        self.assertFalse(self.authority.check_decryption_proof(bad_proof, pk_j, self.bold_e, bold_b_prime))
        for i in [0, len(self.bold_e)]:
            t = replace_at(proof.t, i, proof.t[i] * DEFAULT_GROUP.g % DEFAULT_GROUP.p)
            bad_proof = DecryptionProof(t, proof.s)
            self.assertFalse(self.authority.check_decryption_proof(bad_proof, pk_j, self.bold_e, bold_b_prime))

        # wrong partial decryption
        bad_b_prime = replace_at(bold_b_prime, 0, bold_b_prime[0] * DEFAULT_GROUP.g % DEFAULT_GROUP.p)
        self.assertFalse(self.authority.check_decryption_proof(proof, pk_j, self.bold_e, bad_b_prime))

    def test_proof_empty(self):
        pk, sk = self.keys[0]
        proof = self.authority.gen_decryption_proof(sk.private_key, pk.public_key, [], [])
        self.assertEqual(len(proof.t), 1)
        self.assertTrue(self.authority.check_decryption_proof(proof, pk.public_key, [], []))

    def test_proof_invalid_input(self):
        p, q = DEFAULT_GROUP.p, DEFAULT_GROUP.q
        pk, sk = self.keys[0]
        sk_j, pk_j = sk.private_key, pk.public_key
        bold_b_prime = self.authority.get_partial_decryptions(self.bold_e, sk_j)
        gen = self.authority.gen_decryption_proof
        self.assertRaises(util.InvalidInput, gen, q, pk_j, self.bold_e, bold_b_prime)
        self.assertRaises(util.InvalidInput, gen, sk_j, p - 1, self.bold_e, bold_b_prime)
        self.assertRaises(util.InvalidInput, gen, sk_j, pk_j, self.bold_e, replace_at(bold_b_prime, 0, 0))
        self.assertRaises(util.SizeMismatch, gen, sk_j, pk_j, self.bold_e, bold_b_prime[:-1])
        self.assertRaises(util.SizeMismatch, gen, sk_j, pk_j, self.bold_e[:-1], bold_b_prime)

        proof = gen(sk_j, pk_j, self.bold_e, bold_b_prime)
        check = self.authority.check_decryption_proof
        self.assertRaises(util.SizeMismatch, check, proof, pk_j, self.bold_e, bold_b_prime[:-1])
        self.assertRaises(util.SizeMismatch, check, DecryptionProof(proof.t[:-1], proof.s),
                          pk_j, self.bold_e, bold_b_prime)
        self.assertRaises(util.InvalidInput, check, DecryptionProof(proof.t, q), pk_j, self.bold_e, bold_b_prime)
        self.assertRaises(util.InvalidInput, check, DecryptionProof(replace_at(proof.t, 0, 0), proof.s),
                          pk_j, self.bold_e, bold_b_prime)

    def shares(self):
        bold_B_prime = []
        bold_pi_prime = []
        for pk, sk in self.keys:
            bold_b_prime = self.authority.get_partial_decryptions(self.bold_e, sk.private_key)
            bold_B_prime.append(bold_b_prime)
            bold_pi_prime.append(self.authority.gen_decryption_proof(
                sk.private_key, pk.public_key, self.bold_e, bold_b_prime))
        bold_pk = [pk.public_key for pk, _ in self.keys]
        return bold_pi_prime, bold_pk, bold_B_prime

    def test_proofs(self):
        bold_pi_prime, bold_pk, bold_B_prime = self.shares()
        for j in range(3):
            self.assertTrue(self.authority.check_decryption_proofs(
                bold_pi_prime, bold_pk, self.bold_e, bold_B_prime, j))

        bold_pi_prime[2] = DecryptionProof(bold_pi_prime[2].t, flip(bold_pi_prime[2].s, DEFAULT_GROUP.q))
        self.assertTrue(self.authority.check_decryption_proofs(
            bold_pi_prime, bold_pk, self.bold_e, bold_B_prime, 2))
        self.assertFalse(self.authority.check_decryption_proofs(
            bold_pi_prime, bold_pk, self.bold_e, bold_B_prime, 0))
        authority = decryption.DecryptionAuthority(make_parameters(s=3, n_workers=2))
        self.assertFalse(authority.check_decryption_proofs(
            bold_pi_prime, bold_pk, self.bold_e, bold_B_prime, 1))

        check = self.authority.check_decryption_proofs
        self.assertRaises(util.InvalidInput, check, bold_pi_prime[:2], bold_pk, self.bold_e, bold_B_prime, 0)
        self.assertRaises(util.InvalidInput, check, bold_pi_prime, bold_pk[:2], self.bold_e, bold_B_prime, 0)
        self.assertRaises(util.InvalidInput, check, bold_pi_prime, bold_pk, self.bold_e, bold_B_prime, 3)

    def test_decryptions(self):
        p, g = DEFAULT_GROUP.p, DEFAULT_GROUP.g
        _, _, bold_B_prime = self.shares()
        plaintexts = self.authority.get_decryptions(self.bold_e, bold_B_prime)
        self.assertEqual(plaintexts, [util.powmod(g, x, p) for x in [2, 7, 1, 8]])

        self.assertRaises(util.InvalidInput, self.authority.get_decryptions, self.bold_e, bold_B_prime[:2])
        self.assertRaises(util.SizeMismatch, self.authority.get_decryptions, self.bold_e,
                          replace_at(bold_B_prime, 0, bold_B_prime[0][:-1]))

        # shares and ciphertexts outside of G_q
        for bad_b_prime in [0, p, p - 1]:
            bad_B_prime = replace_at(bold_B_prime, 1, replace_at(bold_B_prime[1], 2, bad_b_prime))
            with self.assertRaises(util.InvalidInput):
                self.authority.get_decryptions(self.bold_e, bad_B_prime)
        bad_e = replace_at(self.bold_e, 0, elgamal.Encryption(0, self.bold_e[0].b))
        self.assertRaises(util.InvalidInput, self.authority.get_decryptions, bad_e, bold_B_prime)

    def test_mix_and_decrypt(self):
        p, g = DEFAULT_GROUP.p, DEFAULT_GROUP.g
        bold_pi, bold_E = gen_mix(self.public_parameters, self.pk, self.bold_e, self.rand)
        verifier = shuffle.ShuffleVerifier(self.public_parameters)
        self.assertTrue(verifier.check_shuffle_proofs(bold_pi, self.bold_e, bold_E, self.pk, 0))

        bold_e = bold_E[-1]
        bold_B_prime = [
            self.authority.get_partial_decryptions(bold_e, sk.private_key)
            for _, sk in self.keys
        ]
        plaintexts = self.authority.get_decryptions(bold_e, bold_B_prime)
        self.assertEqual(sorted(plaintexts), sorted(util.powmod(g, x, p) for x in [2, 7, 1, 8]))


class TestParameters(unittest.TestCase):
    def test_save_load(self):
        public_parameters = parameters.default_public_parameters(4, n_workers=2)
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, 'params.json')
            parameters.save_public_parameters(public_parameters, path)
            loaded = parameters.load_public_parameters(path)
        self.assertEqual(loaded.encryption_group, DEFAULT_GROUP)
        self.assertEqual(loaded.security_parameters.tau, parameters.DEFAULT_TAU)
        self.assertEqual(loaded.s, 4)
        self.assertEqual(loaded.n_workers, 2)

    def test_malformed(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, 'params.json')
            with open(path, 'w') as f:
                json.dump({'tau': 128}, f)
            self.assertRaises(util.InvalidInput, parameters.load_public_parameters, path)

    def test_generate_encryption_group(self):
        eg = parameters.generate_encryption_group(32)
        self.assertTrue(util.is_prime(eg.p))
        self.assertEqual(eg.p, 2 * eg.q + 1)
        self.assertIn(eg.g, eg)
        self.assertIn(eg.h, eg)
        self.assertRaises(util.InvalidInput, parameters.generate_encryption_group, 4)

    def test_invalid(self):
        self.assertRaises(util.InvalidInput, parameters.SecurityParameters, 0)
        self.assertRaises(util.InvalidInput, make_parameters, s=0)
        self.assertRaises(util.InvalidInput, make_parameters, n_workers=0)


class TestCli(unittest.TestCase):
    def run_cli(self, *argv):
        with contextlib.redirect_stdout(io.StringIO()) as output:
            status = cli.main(['--debug', '0'] + list(argv))
        return status, output.getvalue()

    def test_session(self):
        rand = random.Random(11)
        with tempfile.TemporaryDirectory() as directory:
            def path(name):
                return os.path.join(directory, name)

            self.assertEqual(self.run_cli('params', '--authorities', '2', '-o', path('params.json'))[0], 0)
            for j in range(2):
                self.assertEqual(self.run_cli('keygen', path('params.json'), '-o', path('key{}.json'.format(j)))[0], 0)
            status, _ = self.run_cli('combine', path('params.json'), path('key0.json'), path('key1.json'),
                                     '-o', path('pk.json'))
            self.assertEqual(status, 0)
            with contextlib.redirect_stderr(io.StringIO()):
                with self.assertRaises(SystemExit):
                    self.run_cli('combine', path('params.json'), path('key0.json'), '-o', path('pk1.json'))

            public_parameters = parameters.load_public_parameters(path('params.json'))
            pk = cli.load_public_key(path('pk.json'))
            e_0 = encrypt_messages(pk, [5, 6, 7], rand)
            bold_pi, bold_E = gen_mix(public_parameters, pk, e_0, rand)
            mix = {
                'e_0': [e.to_dict() for e in e_0],
                'bold_E': [[e.to_dict() for e in bold_e] for bold_e in bold_E],
                'bold_pi': [pi.to_dict() for pi in bold_pi],
            }
            with open(path('mix.json'), 'w') as f:
                json.dump(mix, f)
            status, output = self.run_cli('check-shuffles', path('params.json'), path('pk.json'),
                                          path('mix.json'), '--index', '0')
            self.assertEqual(status, 0)

            mix['bold_pi'][1]['s']['s_1'] = str(flip(int(mix['bold_pi'][1]['s']['s_1']), DEFAULT_GROUP.q))
            with open(path('mix.json'), 'w') as f:
                json.dump(mix, f)
            status, output = self.run_cli('check-shuffles', path('params.json'), path('pk.json'),
                                          path('mix.json'), '--index', '0')
            self.assertEqual(status, 1)

            with open(path('ciphertexts.json'), 'w') as f:
                json.dump([e.to_dict() for e in bold_E[-1]], f)
            for j in range(2):
                status, _ = self.run_cli('decrypt', path('params.json'), path('key{}.json'.format(j)),
                                         path('ciphertexts.json'), '-o', path('share{}.json'.format(j)))
                self.assertEqual(status, 0)
            status, _ = self.run_cli('check-decryptions', path('params.json'), path('ciphertexts.json'),
                                     path('share0.json'), path('share1.json'), '--index', '0',
                                     '-o', path('plaintexts.json'))
            self.assertEqual(status, 0)
            with open(path('plaintexts.json')) as f:
                plaintexts = [int(m) for m in json.load(f)]
            self.assertEqual(
                sorted(plaintexts),
                sorted(util.powmod(DEFAULT_GROUP.g, x, DEFAULT_GROUP.p) for x in [5, 6, 7]),
            )

            # authority index out of range
            with contextlib.redirect_stderr(io.StringIO()):
                with self.assertRaises(SystemExit):
                    self.run_cli('check-decryptions', path('params.json'), path('ciphertexts.json'),
                                 path('share0.json'), path('share1.json'), '--index', '2')

            # malformed files
            del mix['bold_pi']
            with open(path('mix.json'), 'w') as f:
                json.dump(mix, f)
            with open(path('share_broken.json'), 'w') as f:
                json.dump({'public_key': '4'}, f)
            with contextlib.redirect_stderr(io.StringIO()):
                with self.assertRaises(SystemExit):
                    self.run_cli('check-shuffles', path('params.json'), path('pk.json'),
                                 path('mix.json'), '--index', '0')
                with self.assertRaises(SystemExit):
                    self.run_cli('check-decryptions', path('params.json'), path('ciphertexts.json'),
                                 path('share0.json'), path('share_broken.json'), '--index', '0')


if __name__ == '__main__':
    unittest.main()
