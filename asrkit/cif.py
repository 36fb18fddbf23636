"""Streaming pieces of the Paraformer online recogniser.

:class:`PositionalEncoder` adds sinusoidal position embeddings to feature
chunks. The position counter carries on from one chunk to the next.
:class:`CifSearcher` runs continuous integrate-and-fire over encoder
outputs. It accumulates weighted hidden states until the integrated
weight reaches a threshold, then fires an acoustic embedding. The
remainder is carried over to the next chunk.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

_POS_SCALE = -0.0330119726594128


class PositionalEncoder:
    """Adds sinusoidal position embeddings whose positions continue across chunks."""

    def __init__(self) -> None:
        self.offset = 0

    def apply(self, feats: Sequence[Sequence[float]] | np.ndarray) -> np.ndarray:
        """Return ``feats`` plus the embeddings for the next ``len(feats)`` positions.

        Column ``i`` of the first half receives ``sin(exp(i * s) * (p + 1))``.
        Column ``i`` of the second half receives the matching cosine.
        Here ``p`` is the absolute position. When the width is odd, the last
        column is left unchanged. The input is not modified.
        """
        out = np.array(feats, dtype=np.float32)
        if out.size == 0:
            return out.reshape(0, out.shape[1] if out.ndim == 2 else 0)
        if out.ndim != 2:
            raise ValueError("features must be a two-dimensional sequence")
        steps, dim = out.shape
        half = dim // 2
        positions = np.arange(self.offset + 1, self.offset + steps + 1, dtype=np.float64)
        self.offset += steps
        if half == 0:
            return out
        rates = np.exp(np.arange(half, dtype=np.float64) * _POS_SCALE)
        angles = np.outer(positions, rates)
        out[:, :half] += np.sin(angles).astype(np.float32)
        out[:, half:2 * half] += np.cos(angles).astype(np.float32)
        return out

    def reset(self) -> None:
        """Start positions from zero again."""
        self.offset = 0


class CifSearcher:
    """Continuous integrate-and-fire over a stream of encoder chunks."""

    def __init__(
        self,
        chunk_size: Sequence[int],
        hidden_size: int,
        threshold: float = 1.0,
        tail_alpha: float = 0.45,
    ) -> None:
        sizes = [int(value) for value in chunk_size]
        if len(sizes) != 3:
            raise ValueError("chunk_size must hold three values")
        if any(value < 0 for value in sizes):
            raise ValueError("chunk sizes must not be negative")
        if hidden_size < 0:
            raise ValueError("hidden_size must not be negative")
        if threshold <= 0:
            raise ValueError("threshold must be positive")
        self.chunk_size = tuple(sizes)
        self.hidden_size = int(hidden_size)
        self.threshold = float(threshold)
        self.tail_alpha = float(tail_alpha)
        self.reset()

    @property
    def cached_alpha(self) -> float:
        """Integrated weight carried over to the next chunk."""
        return self._alpha_cache

    @property
    def cached_hidden(self) -> np.ndarray:
        """Hidden state carried over to the next chunk."""
        return self._hidden_cache.copy()

    def reset(self) -> None:
        """Return to the initial state: zero weight and a zero hidden state."""
        self._alpha_cache = 0.0
        self._hidden_cache = np.zeros(self.hidden_size, dtype=np.float32)

    def search(
        self,
        hidden: Sequence[Sequence[float]] | np.ndarray,
        alphas: Sequence[float] | np.ndarray,
        is_last_chunk: bool = False,
    ) -> np.ndarray:
        """Integrate one chunk. Return the fired embeddings, one row each.

        Weights in the left look-back region (the first ``chunk_size[0]``
        steps) are cleared. So are weights from ``chunk_size[0] +
        chunk_size[1]`` onward. On the last chunk a zero hidden state with
        weight ``tail_alpha`` is appended, so the remainder can fire.
        """
        alpha = np.array(alphas, dtype=np.float64).ravel()
        states = np.asarray(hidden, dtype=np.float64)
        if states.size == 0:
            states = np.zeros((0, self._hidden_cache.size), dtype=np.float64)
        if states.ndim != 2:
            raise ValueError("hidden must be a two-dimensional sequence")
        if states.shape[0] != alpha.size:
            raise ValueError("hidden and alphas must have the same number of steps")
        width = states.shape[1]
        if width != self._hidden_cache.size:
            raise ValueError("hidden width does not match the cached hidden state")

        alpha[: self.chunk_size[0]] = 0.0
        alpha[self.chunk_size[0] + self.chunk_size[1]:] = 0.0

        states = np.concatenate([self._hidden_cache[None, :].astype(np.float64), states])
        alpha = np.concatenate([[self._alpha_cache], alpha])
        if is_last_chunk:
            states = np.concatenate([states, np.zeros((1, width))])
            alpha = np.concatenate([alpha, [self.tail_alpha]])

        integrate = 0.0
        frame = np.zeros(width, dtype=np.float64)
        fired: list[np.ndarray] = []
        for weight, state in zip(alpha, states):
            weight = float(weight)
            if weight + integrate < self.threshold:
                integrate += weight
                frame += weight * state
            else:
                frame += (self.threshold - integrate) * state
                fired.append(frame.copy())
                integrate += weight - self.threshold
                frame = integrate * state

        self._alpha_cache = integrate
        if integrate > 0.0:
            self._hidden_cache = (frame / integrate).astype(np.float32)
        else:
            self._hidden_cache = frame.astype(np.float32)

        if not fired:
            return np.zeros((0, width), dtype=np.float32)
        return np.stack(fired).astype(np.float32)