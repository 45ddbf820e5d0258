#!/usr/bin/env python3
"""Command line for the mixing authorities

Typical session for three authorities:

    python . params --authorities 3 -o params.json
    python . keygen params.json -o key0.json        # once per authority
    python . combine params.json key0.json key1.json key2.json -o pk.json
    python . check-shuffles params.json pk.json mix.json --index 0
    python . decrypt params.json key0.json ciphertexts.json -o share0.json
    python . check-decryptions params.json ciphertexts.json share0.json \
        share1.json share2.json --index 0

`mix.json` holds `{"e_0": [...], "bold_E": [[...], ...], "bold_pi": [...]}`
where ciphertexts are `{"a": "...", "b": "..."}` and proofs use the format of
`proofs.ShuffleProof.to_dict()`.
"""
import sys
import json
import logging
import argparse

import util
import parameters
from elgamal import Encryption, EncryptionPrivateKey, EncryptionPublicKey, KeyEstablishment
from proofs import DecryptionProof, ShuffleProof
from shuffle import ShuffleVerifier
from decryption import DecryptionAuthority


def load_json(path):
    with open(path) as f:
        return json.load(f)


def save_json(obj, path):
    if path is None or path == '-':
        json.dump(obj, sys.stdout, indent=2)
        print()
    else:
        with open(path, 'w') as f:
            json.dump(obj, f, indent=2)


def load_public_key(path):
    data = load_json(path)
    # accept both key pair files and bare public key files
    if 'private_key' in data:
        data = data['public_key']
    return EncryptionPublicKey.from_dict(data)


def load_encryptions(data):
    return [Encryption.from_dict(e) for e in data]


def cmd_params(args):
    if args.bits is None:
        encryption_group = parameters.default_encryption_group()
    else:
        logging.info('Generating a %d-bit safe prime', args.bits)
        encryption_group = parameters.generate_encryption_group(args.bits)
    public_parameters = parameters.PublicParameters(
        encryption_group,
        parameters.SecurityParameters(args.tau),
        args.authorities,
        args.workers,
    )
    save_json(public_parameters.to_dict(), args.output)
    return 0


def cmd_keygen(args):
    public_parameters = parameters.load_public_parameters(args.params)
    pk, sk = KeyEstablishment().generate_keypair(public_parameters.encryption_group)
    save_json({'public_key': pk.to_dict(), 'private_key': sk.to_dict()}, args.output)
    logging.info('Key pair generated')
    return 0


def cmd_combine(args):
    public_parameters = parameters.load_public_parameters(args.params)
    public_keys = [load_public_key(path) for path in args.keys]
    util.check_argument(
        len(public_keys) == public_parameters.s,
        'expected one public key share per authority',
    )
    public_key = KeyEstablishment.get_public_key(*public_keys)
    util.check_argument(
        public_key.encryption_group == public_parameters.encryption_group,
        'the public key shares do not use the group of the parameters',
    )
    save_json(public_key.to_dict(), args.output)
    logging.info('Combined %d public key shares', len(public_keys))
    return 0


def cmd_check_shuffles(args):
    public_parameters = parameters.load_public_parameters(args.params)
    public_key = load_public_key(args.public_key)
    mix = load_json(args.mix)
    e_0 = load_encryptions(mix['e_0'])
    bold_E = [load_encryptions(bold_e) for bold_e in mix['bold_E']]
    bold_pi = [ShuffleProof.from_dict(pi) for pi in mix['bold_pi']]

    verifier = ShuffleVerifier(public_parameters)
    if verifier.check_shuffle_proofs(bold_pi, e_0, bold_E, public_key, args.index):
        print('All shuffle proofs are valid')
        return 0
    print('Invalid shuffle proof found')
    return 1


def cmd_decrypt(args):
    public_parameters = parameters.load_public_parameters(args.params)
    data = load_json(args.key)
    pk_j = EncryptionPublicKey.from_dict(data['public_key']).public_key
    sk_j = EncryptionPrivateKey.from_dict(data['private_key']).private_key
    bold_e = load_encryptions(load_json(args.ciphertexts))

    authority = DecryptionAuthority(public_parameters)
    bold_b_prime = authority.get_partial_decryptions(bold_e, sk_j)
    proof = authority.gen_decryption_proof(sk_j, pk_j, bold_e, bold_b_prime)
    save_json({
        'public_key': str(pk_j),
        'partial_decryptions': [str(b) for b in bold_b_prime],
        'proof': proof.to_dict(),
    }, args.output)
    return 0


def cmd_check_decryptions(args):
    public_parameters = parameters.load_public_parameters(args.params)
    bold_e = load_encryptions(load_json(args.ciphertexts))
    shares = [load_json(path) for path in args.shares]
    bold_pk = [int(share['public_key']) for share in shares]
    bold_B_prime = [[int(b) for b in share['partial_decryptions']] for share in shares]
    bold_pi_prime = [DecryptionProof.from_dict(share['proof']) for share in shares]

    authority = DecryptionAuthority(public_parameters)
    if not authority.check_decryption_proofs(bold_pi_prime, bold_pk, bold_e, bold_B_prime, args.index):
        print('Invalid decryption proof found')
        return 1
    plaintexts = authority.get_decryptions(bold_e, bold_B_prime)
    save_json([str(m) for m in plaintexts], args.output)
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser()
    parser.description = 'Verifiable mix-net: shuffle proofs and threshold decryption'
    parser.add_argument('--debug', '-d', default=1, type=int)
    sub = parser.add_subparsers(dest='cmd')

    p = sub.add_parser('params', help='write the public parameters')
    p.add_argument('--authorities', '-s', default=3, type=int)
    p.add_argument('--tau', default=parameters.DEFAULT_TAU, type=int)
    p.add_argument('--workers', default=1, type=int)
    p.add_argument('--bits', type=int, help='generate a new group instead of the built-in one')
    p.add_argument('--output', '-o')
    p.set_defaults(func=cmd_params)

    p = sub.add_parser('keygen', help='generate the key pair of an authority')
    p.add_argument('params')
    p.add_argument('--output', '-o')
    p.set_defaults(func=cmd_keygen)

    p = sub.add_parser('combine', help='combine public key shares')
    p.add_argument('params')
    p.add_argument('keys', nargs='+')
    p.add_argument('--output', '-o')
    p.set_defaults(func=cmd_combine)

    p = sub.add_parser('check-shuffles', help='check the shuffle proofs of the other authorities')
    p.add_argument('params')
    p.add_argument('public_key')
    p.add_argument('mix')
    p.add_argument('--index', '-j', required=True, type=int)
    p.set_defaults(func=cmd_check_shuffles)

    p = sub.add_parser('decrypt', help='partially decrypt and prove it')
    p.add_argument('params')
    p.add_argument('key')
    p.add_argument('ciphertexts')
    p.add_argument('--output', '-o')
    p.set_defaults(func=cmd_decrypt)

    p = sub.add_parser('check-decryptions', help='check decryption proofs and combine the shares')
    p.add_argument('params')
    p.add_argument('ciphertexts')
    p.add_argument('shares', nargs='+')
    p.add_argument('--index', '-j', required=True, type=int)
    p.add_argument('--output', '-o')
    p.set_defaults(func=cmd_check_decryptions)

    args = parser.parse_args(argv)

    level = {0: logging.WARNING, 1: logging.INFO}.get(args.debug, logging.DEBUG)
    logging.basicConfig(level=level, format='%(asctime)s %(name)s %(levelname)s %(message)s')

    if args.cmd is None:
        parser.print_help()
        return 2
    try:
        return args.func(args)
    except util.InvalidInput as e:
        parser.error(str(e))
    except (KeyError, TypeError) as e:
        parser.error('malformed input file: {!r}'.format(e))


if __name__ == '__main__':
    sys.exit(main())
