"""Attention masks used by the streaming punctuation model."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np


def vad_mask(size: int, vad_pos: int) -> np.ndarray:
    """Square mask of ones hiding the text after ``vad_pos`` from the cached part.

    Rows ``0 .. vad_pos - 2`` are zeroed in columns ``vad_pos`` onward. If
    ``vad_pos`` is not strictly between 0 and ``size`` the mask is all ones.
    """
    if size < 0:
        raise ValueError("mask size must not be negative")
    mask = np.ones((size, size), dtype=np.float32)
    if 0 < vad_pos < size:
        mask[: max(vad_pos - 1, 0), vad_pos:] = 0.0
    return mask


def triangle(text_length: int) -> np.ndarray:
    """Lower-triangular mask of ones (a causal mask) of the given size."""
    if text_length < 0:
        raise ValueError("mask size must not be negative")
    return np.tril(np.ones((text_length, text_length), dtype=np.float32))


def transpose(values: Sequence[float] | np.ndarray, rows: int, cols: int) -> np.ndarray:
    """Treat ``values`` as a ``rows`` x ``cols`` matrix and return its transpose.

    The result has shape ``(cols, rows)``; a size mismatch raises ``ValueError``.
    """
    matrix = np.asarray(values, dtype=np.float32).reshape(rows, cols)
    return np.ascontiguousarray(matrix.T)