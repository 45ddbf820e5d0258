#!/usr/bin/env python3
"""Public parameters shared by all the authorities

The parameters can be written to a JSON file so that every authority runs
with the same group and security level:

    {"encryption_group": {"p": "...", "q": "...", "g": "4", "h": "9"},
     "tau": 128, "s": 3, "n_workers": 1}
"""
import json

import util
from elgamal import EncryptionGroup

# 1024-bit MODP group from RFC 2409 (Oakley group 2); p is a safe prime so
# the squares 4 and 9 generate the subgroup of order q = (p-1)/2
_P_HEX = (
    "FFFFFFFFFFFFFFFFC90FDAA22168C234C4C6628B80DC1CD1"
    "29024E088A67CC74020BBEA63B139B22514A08798E3404DD"
    "EF9519B3CD3A431B302B0A6DF25F14374FE1356D6D51C245"
    "E485B576625E7EC6F44C42E9A637ED6B0BFF5CB6F406B7ED"
    "EE386BFB5A899FA5AE9F24117C4B1FE649286651ECE65381"
    "FFFFFFFFFFFFFFFF"
)

DEFAULT_TAU = 128


def default_encryption_group():
    p = int(_P_HEX, 16)
    return EncryptionGroup(p, (p - 1) // 2, 4, 9)


def generate_encryption_group(n_bits):
    """Build a new group from a random safe prime of `n_bits` bits

    As for the default group, the squares 4 and 9 are used as generators.
    """
    util.check_argument(n_bits >= 8, 'the group modulus must have at least 8 bits')
    p = util.genprime(n_bits, safe_prime=True)
    return EncryptionGroup(p, (p - 1) // 2, 4, 9)


class SecurityParameters:
    """Security parameters

    Attributes:
        tau (int): bit length of the Fiat-Shamir challenges
    """
    def __init__(self, tau=DEFAULT_TAU):
        util.check_argument(isinstance(tau, int) and tau > 0, 'tau must be a positive integer')
        self.tau = tau


class PublicParameters:
    """Everything the authorities must agree on before the election

    Attributes:
        encryption_group (EncryptionGroup): the group G_q
        security_parameters (SecurityParameters): the security level
        s (int): the number of authorities
        n_workers (int): number of threads used for the verifications
    """
    def __init__(self, encryption_group, security_parameters, s, n_workers=1):
        util.check_argument(isinstance(s, int) and s >= 1, 'there must be at least one authority')
        util.check_argument(isinstance(n_workers, int) and n_workers >= 1, 'n_workers must be at least 1')
        self.encryption_group = encryption_group
        self.security_parameters = security_parameters
        self.s = s
        self.n_workers = n_workers

    def to_dict(self):
        return {
            'encryption_group': self.encryption_group.to_dict(),
            'tau': self.security_parameters.tau,
            's': self.s,
            'n_workers': self.n_workers,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            EncryptionGroup.from_dict(data['encryption_group']),
            SecurityParameters(data.get('tau', DEFAULT_TAU)),
            data['s'],
            data.get('n_workers', 1),
        )


def default_public_parameters(s, n_workers=1):
    """Parameters using the built-in group and default security level"""
    return PublicParameters(default_encryption_group(), SecurityParameters(), s, n_workers)


def load_public_parameters(path):
    """Read public parameters from a JSON file

    Raises:
        util.InvalidInput: if the file does not describe valid parameters
    """
    with open(path) as f:
        data = json.load(f)
    try:
        return PublicParameters.from_dict(data)
    except (KeyError, TypeError) as e:
        raise util.InvalidInput('malformed parameter file {}: {!r}'.format(path, e)) from e


def save_public_parameters(public_parameters, path):
    """Write public parameters to a JSON file"""
    with open(path, 'w') as f:
        json.dump(public_parameters.to_dict(), f, indent=2)
