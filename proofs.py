#!/usr/bin/env python3
"""Proof objects exchanged between the authorities

All the sequences are stored as tuples when the object is built, and the
attributes cannot be reassigned afterwards.

The `to_dict()` / `from_dict()` methods give a JSON-friendly representation
(integers are written as decimal strings).
"""
import util


def _ints(values):
    return tuple(int(x) for x in values)


def _strs(values):
    return [str(x) for x in values]


class _Immutable:
    """Base of value objects whose attributes are set once by `_init()`"""
    __slots__ = ()

    def _init(self, **values):
        for name, value in values.items():
            object.__setattr__(self, name, value)

    def __setattr__(self, name, value):
        raise AttributeError('{} objects are immutable'.format(type(self).__name__))

    def __delattr__(self, name):
        raise AttributeError('{} objects are immutable'.format(type(self).__name__))


class ShuffleProofT(_Immutable):
    """Commitments of a shuffle proof

    Attributes:
        t_1 (int): element of G_q
        t_2 (int): element of G_q
        t_3 (int): element of G_q
        t_4 (tuple): pair of elements of G_q
        t_hat (tuple): N elements of G_q
    """
    __slots__ = ('t_1', 't_2', 't_3', 't_4', 't_hat')

    def __init__(self, t_1, t_2, t_3, t_4, t_hat):
        self._init(t_1=t_1, t_2=t_2, t_3=t_3, t_4=tuple(t_4), t_hat=tuple(t_hat))

    def elements_to_hash(self):
        return self.t_1, self.t_2, self.t_3, self.t_4, self.t_hat

    def __eq__(self, other):
        if not isinstance(other, ShuffleProofT):
            return NotImplemented
        return self.elements_to_hash() == other.elements_to_hash()

    def __hash__(self):
        return hash(self.elements_to_hash())

    def to_dict(self):
        return {
            't_1': str(self.t_1),
            't_2': str(self.t_2),
            't_3': str(self.t_3),
            't_4': _strs(self.t_4),
            't_hat': _strs(self.t_hat),
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            int(data['t_1']), int(data['t_2']), int(data['t_3']),
            _ints(data['t_4']), _ints(data['t_hat']),
        )


class ShuffleProofS(_Immutable):
    """Responses of a shuffle proof

    Attributes:
        s_1, s_2, s_3, s_4 (int): elements of Z_q
        s_hat (tuple): N elements of Z_q
        s_prime (tuple): N elements of Z_q
    """
    __slots__ = ('s_1', 's_2', 's_3', 's_4', 's_hat', 's_prime')

    def __init__(self, s_1, s_2, s_3, s_4, s_hat, s_prime):
        self._init(s_1=s_1, s_2=s_2, s_3=s_3, s_4=s_4, s_hat=tuple(s_hat), s_prime=tuple(s_prime))

    def _values(self):
        return self.s_1, self.s_2, self.s_3, self.s_4, self.s_hat, self.s_prime

    def __eq__(self, other):
        if not isinstance(other, ShuffleProofS):
            return NotImplemented
        return self._values() == other._values()

    def __hash__(self):
        return hash(self._values())

    def to_dict(self):
        return {
            's_1': str(self.s_1),
            's_2': str(self.s_2),
            's_3': str(self.s_3),
            's_4': str(self.s_4),
            's_hat': _strs(self.s_hat),
            's_prime': _strs(self.s_prime),
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            int(data['s_1']), int(data['s_2']), int(data['s_3']), int(data['s_4']),
            _ints(data['s_hat']), _ints(data['s_prime']),
        )


class ShuffleProof(_Immutable):
    """Proof that a list of ciphertexts is a shuffle of another one

    Attributes:
        t (ShuffleProofT): the commitments
        s (ShuffleProofS): the responses
        bold_c (tuple): commitments to the permutation (N elements of G_q)
        bold_c_hat (tuple): commitment chain (N elements of G_q)
    """
    __slots__ = ('t', 's', 'bold_c', 'bold_c_hat')

    def __init__(self, t, s, bold_c, bold_c_hat):
        self._init(t=t, s=s, bold_c=tuple(bold_c), bold_c_hat=tuple(bold_c_hat))

    def __eq__(self, other):
        if not isinstance(other, ShuffleProof):
            return NotImplemented
        return (self.t, self.s, self.bold_c, self.bold_c_hat) == \
            (other.t, other.s, other.bold_c, other.bold_c_hat)

    def __hash__(self):
        return hash((self.t, self.s, self.bold_c, self.bold_c_hat))

    def __repr__(self):
        return 'ShuffleProof(N={})'.format(len(self.bold_c))

    def to_dict(self):
        return {
            't': self.t.to_dict(),
            's': self.s.to_dict(),
            'bold_c': _strs(self.bold_c),
            'bold_c_hat': _strs(self.bold_c_hat),
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            ShuffleProofT.from_dict(data['t']),
            ShuffleProofS.from_dict(data['s']),
            _ints(data['bold_c']),
            _ints(data['bold_c_hat']),
        )


class DecryptionProof(_Immutable):
    """Proof that partial decryptions were computed with the committed key

    Attributes:
        t (tuple): N+1 elements of G_q; `t[0]` commits to the public key share
            and `t[i+1]` to the i-th partial decryption
        s (int): the response, an element of Z_q
    """
    __slots__ = ('t', 's')

    def __init__(self, t, s):
        self._init(t=tuple(t), s=s)

    def __eq__(self, other):
        if not isinstance(other, DecryptionProof):
            return NotImplemented
        return self.t == other.t and self.s == other.s

    def __hash__(self):
        return hash((self.t, self.s))

    def __repr__(self):
        return 'DecryptionProof(N={})'.format(len(self.t) - 1)

    def to_dict(self):
        return {'t': _strs(self.t), 's': str(self.s)}

    @classmethod
    def from_dict(cls, data):
        return cls(_ints(data['t']), int(data['s']))


class CommitmentChain(_Immutable):
    """Commitment chain `ĉ` together with its openings `r̂`

    Attributes:
        bold_c (tuple): the commitments
        bold_r (tuple): the randomizations used for each commitment
    """
    __slots__ = ('bold_c', 'bold_r')

    def __init__(self, bold_c, bold_r):
        """Constructor

        Raises:
            util.SizeMismatch: if both sequences do not have the same length
        """
        bold_c = tuple(bold_c)
        bold_r = tuple(bold_r)
        util.check_size(
            len(bold_c) == len(bold_r),
            'bold_c and bold_r should have the same length',
        )
        self._init(bold_c=bold_c, bold_r=bold_r)

    def __eq__(self, other):
        if not isinstance(other, CommitmentChain):
            return NotImplemented
        return self.bold_c == other.bold_c and self.bold_r == other.bold_r

    def __hash__(self):
        return hash((self.bold_c, self.bold_r))

    def __len__(self):
        return len(self.bold_c)
