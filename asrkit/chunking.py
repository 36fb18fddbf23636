"""Overlapping feature chunks for the streaming Paraformer encoder.

Each chunk fed to the encoder is preceded by context frames kept from the
previous chunk: ``chunk_size[0]`` look-back frames plus ``chunk_size[2]``
look-ahead frames. :class:`ChunkOverlapper` keeps that context and adds it
in front of every new chunk. On the final chunk it pads the result to a
full window when needed.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np


class ChunkOverlapper:
    """Prepends cached context frames to each feature chunk."""

    def __init__(self, chunk_size: Sequence[int], feat_dims: int) -> None:
        sizes = [int(value) for value in chunk_size]
        if len(sizes) != 3:
            raise ValueError("chunk_size must hold three values")
        if any(value < 0 for value in sizes):
            raise ValueError("chunk sizes must not be negative")
        if feat_dims < 1:
            raise ValueError("feat_dims must be positive")
        self.chunk_size = tuple(sizes)
        self.feat_dims = int(feat_dims)
        self.reset()

    @property
    def window(self) -> int:
        """Total frames in a full chunk: look-back, body and look-ahead."""
        return sum(self.chunk_size)

    @property
    def cached(self) -> np.ndarray:
        """Context frames that will be placed in front of the next chunk."""
        return self._cache.copy()

    def reset(self) -> None:
        """Fill the context with zero frames, as at the start of a stream."""
        rows = self.chunk_size[0] + self.chunk_size[2]
        self._cache = np.zeros((rows, self.feat_dims), dtype=np.float32)

    def _tail(self, feats: np.ndarray, count: int) -> np.ndarray:
        if count > feats.shape[0]:
            raise ValueError(
                f"chunk has {feats.shape[0]} frames, fewer than the {count} to cache"
            )
        return feats[feats.shape[0] - count:].copy()

    def add_overlap(
        self,
        feats: Sequence[Sequence[float]] | np.ndarray,
        input_finished: bool = False,
        is_last_chunk: bool = False,
    ) -> np.ndarray:
        """Return ``feats`` with the cached context in front, and update the cache.

        While input continues, the last ``chunk_size[0] + chunk_size[2]``
        frames are kept for the next chunk. When input is finished only the
        last ``chunk_size[0]`` frames are kept. Unless ``is_last_chunk`` is
        set, the result is then padded with zero frames up to a full window.
        """
        chunk = np.asarray(feats, dtype=np.float32)
        if chunk.size == 0:
            chunk = np.zeros((0, self.feat_dims), dtype=np.float32)
        if chunk.ndim != 2:
            raise ValueError("features must be a two-dimensional sequence")
        if chunk.shape[1] != self.feat_dims:
            raise ValueError(
                f"feature width {chunk.shape[1]} does not match {self.feat_dims}"
            )

        merged = np.concatenate([self._cache, chunk])
        if input_finished:
            self._cache = self._tail(merged, self.chunk_size[0])
            if not is_last_chunk:
                missing = self.window - merged.shape[0]
                if missing > 0:
                    padding = np.zeros((missing, self.feat_dims), dtype=np.float32)
                    merged = np.concatenate([merged, padding])
        else:
            self._cache = self._tail(merged, self.chunk_size[0] + self.chunk_size[2])
        return merged