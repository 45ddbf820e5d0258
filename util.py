#!/usr/bin/env python3
"""Some utilities (mostly arithmetic)"""
import random
from multiprocessing.pool import ThreadPool

import gmpy2


class InvalidInput(ValueError):
    """Raised when the caller violates a precondition of an algorithm

    This is a programming or protocol error (wrong domain, wrong index, empty
    or inconsistent arguments). It is never used to report that a proof was
    rejected.
    """


class SizeMismatch(InvalidInput):
    """Raised when sequences that should have the same length do not"""


def check_argument(condition, message):
    """Raise `InvalidInput` with `message` if `condition` is false"""
    if not condition:
        raise InvalidInput(message)


def check_size(condition, message):
    """Raise `SizeMismatch` with `message` if `condition` is false"""
    if not condition:
        raise SizeMismatch(message)


def powmod(x, y, m):
    """Computes `x^y mod m`

    The method `powmod()` from `gmpy2` is faster than Python's builtin
    `powmod()`. However, it does add some overhead which should be skipped for
    `x = 1`.

    Arguments:
        x (int): base of the exponentiation
        y (int): exponent
        m (int): modulus

    Returns:
        int: the result of `x^y mod m`
    """
    if x == 1:
        return 1
    elif y < 0:
        return invert(powmod(x, -y, m), m)
    else:
        return int(gmpy2.powmod(x, y, m))


def invert(x, m):
    """Computes the invert of `x` modulo `m`

    This is a wrapper for `invert() from `gmpy2`.

    Arguments:
        x (int): element to be inverted
        m (int): modulus

    Returns:
        int: y such that `x × y = 1 mod m`
    """
    return int(gmpy2.invert(x, m))


def is_prime(x):
    """Tests whether `x` is probably prime

    This is a wrapper for `is_prime() from `gmpy2`.

    Arguments:
        x (int): the candidate prime

    Returns:
        bool: `True` if `x` is probably prime else `False`
    """
    return bool(gmpy2.is_prime(x))


def genprime(n_bits, safe_prime=False):
    """Generate a probable prime number of n_bits

    This method is based on `next_prime()` from `gmpy2` and adds the safe prime
    feature.

    Arguments:
        n_bits (int): the size of the prime to be generated, in bits
        safe_prime (bool): whether the returned value should be a safe prime a
            just a common prime

    Returns:
        int: a probable prime `x` from `[2^(n_bits-1), 2^n_bits]`

        Is `safe_prime` is `True`, then `x` is also a probable safe prime
    """
    if safe_prime:
        # p of the form 2*q + 1 such that q is prime as well
        while True:
            q = genprime(n_bits - 1)
            p = 2*q + 1
            if is_prime(p):
                return p
    n = random.SystemRandom().randrange(2**(n_bits-1), 2**n_bits) | 1
    return int(gmpy2.next_prime(n))


def prod(elements_iterable, modulus=None):
    """Computes the product of the given elements

    The empty product is 1, the identity of the multiplicative group, so that
    reductions over empty lists (N = 0) are well defined.

    Arguments:
        elements_iterable (iterable): values (int) to be multiplied together
        modulus (int): if provided, the result will be given modulo this value

    Returns:
        int: the product of the elements from elements_iterable

        If modulus is not None, then the result is reduced modulo the provided
        value.
    """
    product = 1
    for element in elements_iterable:
        product *= element
        if modulus is not None:
            product %= modulus
    return product


def parallel_map(func, iterable, n_workers=1):
    """Apply `func` to every element of `iterable`, keeping the input order

    With more than one worker, the calls are spread over a thread pool; the
    returned list is still ordered as the input.

    Arguments:
        func (callable): function of one argument
        iterable (iterable): the arguments
        n_workers (int): number of threads to use; 1 means no pool

    Returns:
        list: `[func(x) for x in iterable]`
    """
    if n_workers <= 1:
        return [func(x) for x in iterable]
    with ThreadPool(n_workers) as pool:
        return pool.map(func, iterable)


def int_to_bytes(x):
    """Minimal big-endian encoding of a non-negative integer (0 gives b'')"""
    return int(x).to_bytes((int(x).bit_length() + 7) // 8, 'big')


def bytes_to_int(data):
    """Big-endian decoding of a byte string"""
    return int.from_bytes(data, 'big')
