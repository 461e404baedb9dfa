# src/fibfind/fibmath.py
"""
Fibonacci arithmetic on gmpy2 big integers.

jump(k) reaches any index in O(log k) multiplications through
Q^k = [[F(k+1), F(k)], [F(k), F(k-1)]] with Q = [[1, 1], [1, 0]];
iter_fib() then walks forward one addition per term.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

import gmpy2
from gmpy2 import mpz


@dataclass(frozen=True)
class Matrix2x2:
    a11: mpz
    a12: mpz
    a21: mpz
    a22: mpz


IDENTITY = Matrix2x2(mpz(1), mpz(0), mpz(0), mpz(1))
Q = Matrix2x2(mpz(1), mpz(1), mpz(1), mpz(0))


def dot(x: Matrix2x2, y: Matrix2x2) -> Matrix2x2:
    return Matrix2x2(
        a11=x.a11 * y.a11 + x.a12 * y.a21,
        a12=x.a11 * y.a12 + x.a12 * y.a22,
        a21=x.a21 * y.a11 + x.a22 * y.a21,
        a22=x.a21 * y.a12 + x.a22 * y.a22,
    )


def jump(k: int) -> tuple[mpz, mpz]:
    """Return (F(k+1), F(k)) for k >= 0."""
    k = int(k)
    if k < 0:
        raise ValueError(f"Fibonacci index must be >= 0, got {k}")
    acc, base = IDENTITY, Q
    while k > 0:
        if k & 1:
            acc = dot(acc, base)
        base = dot(base, base)
        k >>= 1
    return acc.a11, acc.a12


def iter_fib(first: int, count: int) -> Iterator[tuple[int, mpz]]:
    """Yield (j, F(j)) for j = first .. first+count-1: one jump, then additions."""
    if count <= 0:
        return
    x, y = jump(first)  # x = F(first+1), y = F(first)
    yield first, y
    for j in range(first + 1, first + count):
        yield j, x
        x, y = x + y, x


def digits(value: int | mpz) -> bytes:
    """Shortest decimal representation as ASCII bytes (not subject to int->str limits)."""
    return gmpy2.digits(mpz(value)).encode("ascii")


def contains(value: int | mpz, needle: bytes) -> bool:
    return needle in digits(value)
