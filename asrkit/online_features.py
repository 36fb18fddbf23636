"""Streaming feature front end for the FSMN voice activity detector.

Audio arrives in arbitrary chunks. :class:`FrameCache` keeps the samples
that do not yet fill a whole analysis frame and hands out only the samples
covering complete frames. :class:`OnlineLfrCmvn` stacks filterbank frames
into low-frame-rate (LFR) windows across chunk boundaries and applies
mean/variance normalisation, keeping the frames a later window still needs.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np


def compute_frame_num(sample_length: int, frame_length: int, frame_shift: int) -> int:
    """Number of whole frames of ``frame_length`` samples, ``frame_shift`` apart."""
    if frame_length < 1 or frame_shift < 1:
        raise ValueError("frame length and frame shift must be positive")
    if sample_length < frame_length:
        return 0
    return (sample_length - frame_length) // frame_shift + 1


class FrameCache:
    """Carries the samples after the last frame start over to the next chunk."""

    def __init__(self, frame_length: int, frame_shift: int) -> None:
        if frame_length < 1 or frame_shift < 1:
            raise ValueError("frame length and frame shift must be positive")
        self.frame_length = frame_length
        self.frame_shift = frame_shift
        self._pending = np.zeros(0, dtype=np.float32)

    @property
    def pending(self) -> np.ndarray:
        """Samples held back for the next chunk."""
        return self._pending.copy()

    def push(self, waves: Sequence[float] | np.ndarray) -> np.ndarray:
        """Add a chunk; return the samples that make up whole frames.

        The held-back samples are placed in front of ``waves``. Everything
        from the start of the first frame that cannot be computed yet is
        kept for the next call. If no whole frame fits, an empty array is
        returned and all samples are kept.
        """
        chunk = np.asarray(waves, dtype=np.float32).ravel()
        samples = np.concatenate([self._pending, chunk])
        count = compute_frame_num(samples.size, self.frame_length, self.frame_shift)
        self._pending = samples[count * self.frame_shift:].copy()
        if count == 0:
            return samples[:0].copy()
        end = (count - 1) * self.frame_shift + self.frame_length
        return samples[:end].copy()

    def reset(self) -> None:
        """Drop the held-back samples."""
        self._pending = np.zeros(0, dtype=np.float32)


class OnlineLfrCmvn:
    """Low-frame-rate stacking and CMVN over a stream of feature chunks."""

    def __init__(
        self,
        lfr_m: int,
        lfr_n: int,
        means: Sequence[float] | np.ndarray,
        variances: Sequence[float] | np.ndarray,
    ) -> None:
        if lfr_m < 1 or lfr_n < 1:
            raise ValueError("lfr_m and lfr_n must be positive")
        self.lfr_m = lfr_m
        self.lfr_n = lfr_n
        self.means = np.asarray(means, dtype=np.float32).ravel()
        self.variances = np.asarray(variances, dtype=np.float32).ravel()
        if self.variances.size < self.means.size:
            raise ValueError("variances are shorter than means")
        self._cache: np.ndarray | None = None
        self.splice_index = 0

    @property
    def left_pad(self) -> int:
        """Copies of the first frame placed in front of a new stream."""
        return (self.lfr_m - 1) // 2

    @property
    def cached_frames(self) -> int:
        """Number of frames kept for the next chunk."""
        return 0 if self._cache is None else self._cache.shape[0]

    def _empty(self, dim: int) -> np.ndarray:
        return np.zeros((0, self.lfr_m * dim), dtype=np.float32)

    def process(
        self,
        frames: Sequence[Sequence[float]] | np.ndarray,
        input_finished: bool = False,
    ) -> np.ndarray:
        """Feed a chunk of frames; return the stacked, normalised rows ready now.

        When ``input_finished`` is true the last window is filled with copies
        of the final frame and the stream state is cleared afterwards.
        """
        feats = np.asarray(frames, dtype=np.float32)
        if feats.size and feats.ndim != 2:
            raise ValueError("frames must be a two-dimensional sequence")

        if self._cache is not None:
            dim = self._cache.shape[1]
        elif feats.ndim == 2:
            dim = feats.shape[1]
        else:
            dim = 0

        if feats.size:
            if self._cache is None or self._cache.shape[0] == 0:
                self._cache = np.repeat(feats[:1], self.left_pad, axis=0)
            if feats.shape[0] + self._cache.shape[0] >= self.lfr_m:
                out = self._stack(np.concatenate([self._cache, feats]), input_finished)
            else:
                self._cache = np.concatenate([self._cache, feats])
                out = self._empty(dim)
        elif input_finished and self.cached_frames > 0:
            out = self._stack(self._cache, True)
        else:
            out = self._empty(dim)

        if input_finished:
            self.reset()
        return out

    def _stack(self, feats: np.ndarray, input_finished: bool) -> np.ndarray:
        total = feats.shape[0]
        windows_wanted = math.ceil((total - self.left_pad) / self.lfr_n)
        splice = windows_wanted
        windows = []
        for index in range(max(windows_wanted, 0)):
            start = index * self.lfr_n
            if self.lfr_m <= total - start:
                windows.append(feats[start:start + self.lfr_m].reshape(-1))
            elif input_finished:
                window = feats[start:]
                missing = self.lfr_m - window.shape[0]
                window = np.concatenate([window, np.repeat(feats[-1:], missing, axis=0)])
                windows.append(window.reshape(-1))
            else:
                splice = index
                break
        splice = max(0, min(total - 1, splice * self.lfr_n))
        self._cache = feats[splice:].copy()
        self.splice_index = splice

        if not windows:
            return self._empty(feats.shape[1])
        out = np.stack(windows)
        count = self.means.size
        if count > out.shape[1]:
            raise ValueError("means are longer than a stacked frame")
        out[:, :count] = (out[:, :count] + self.means) * self.variances[:count]
        return out

    def reset(self) -> None:
        """Forget the frames kept between chunks."""
        self._cache = None
        self.splice_index = 0