"""Offline feature post-processing for the FSMN voice activity detector.

Provides reading of Kaldi-style CMVN statistics and low-frame-rate (LFR)
stacking of filterbank frames followed by mean/variance normalisation.
"""

from __future__ import annotations

import math
import os
from collections.abc import Iterable, Sequence

import numpy as np

_ADD_SHIFT = "<AddShift>"
_RESCALE = "<Rescale>"
_LEARN_RATE_COEF = "<LearnRateCoef>"


def _coefficients(line: str) -> list[float] | None:
    """Values of a ``<LearnRateCoef> 0 [ v1 v2 ... ]`` line, or None if it is not one."""
    items = line.split()
    if not items or items[0] != _LEARN_RATE_COEF:
        return None
    # Skip the marker, the learn rate and the opening bracket; drop the closing one.
    return [float(item) for item in items[3:-1]]


def parse_cmvn(lines: Iterable[str]) -> tuple[np.ndarray, np.ndarray]:
    """Extract the shift (means) and scale (variances) vectors from CMVN text.

    The line following an ``<AddShift>`` or ``<Rescale>`` header is consumed
    as that block's values; if it is not a ``<LearnRateCoef>`` line it is
    skipped. Values from repeated blocks are appended. A malformed number
    raises ``ValueError``.
    """
    means: list[float] = []
    variances: list[float] = []
    stream = iter(lines)
    for line in stream:
        items = line.split()
        if not items:
            continue
        head = items[0]
        if head == _ADD_SHIFT:
            target = means
        elif head == _RESCALE:
            target = variances
        else:
            continue
        following = next(stream, None)
        if following is None:
            break
        values = _coefficients(following)
        if values is not None:
            target.extend(values)
    return np.asarray(means, dtype=np.float32), np.asarray(variances, dtype=np.float32)


def load_cmvn(path: str | os.PathLike[str]) -> tuple[np.ndarray, np.ndarray]:
    """Read CMVN statistics from a file; a missing file raises ``FileNotFoundError``."""
    with open(path, encoding="utf-8") as handle:
        return parse_cmvn(handle)


def lfr_cmvn(
    frames: Sequence[Sequence[float]] | np.ndarray,
    lfr_m: int,
    lfr_n: int,
    means: Sequence[float] | np.ndarray,
    variances: Sequence[float] | np.ndarray,
) -> np.ndarray:
    """Stack ``lfr_m`` frames every ``lfr_n`` frames, then apply CMVN.

    The first frame is repeated ``(lfr_m - 1) // 2`` times at the start; a
    final window that runs short is filled with copies of the last frame.
    Each output row ``x`` becomes ``(x + means) * variances`` over the first
    ``len(means)`` elements; the rest are left unchanged.
    """
    if lfr_m < 1 or lfr_n < 1:
        raise ValueError("lfr_m and lfr_n must be positive")
    feats = np.asarray(frames, dtype=np.float32)
    shift = np.asarray(means, dtype=np.float32).ravel()
    scale = np.asarray(variances, dtype=np.float32).ravel()
    if feats.size == 0:
        width = lfr_m * feats.shape[1] if feats.ndim == 2 else 0
        return np.zeros((0, width), dtype=np.float32)
    if feats.ndim != 2:
        raise ValueError("frames must be a two-dimensional sequence")

    count = feats.shape[0]
    width = lfr_m * feats.shape[1]
    if shift.size > width:
        raise ValueError("means are longer than a stacked frame")
    if scale.size < shift.size:
        raise ValueError("variances are shorter than means")

    left_pad = (lfr_m - 1) // 2
    padded = np.concatenate([np.repeat(feats[:1], left_pad, axis=0), feats])
    last = padded[-1:]
    windows = []
    for index in range(math.ceil(count / lfr_n)):
        start = index * lfr_n
        window = padded[start:start + lfr_m]
        missing = lfr_m - window.shape[0]
        if missing > 0:
            window = np.concatenate([window, np.repeat(last, missing, axis=0)])
        windows.append(window.reshape(-1))
    out = np.stack(windows)

    n = shift.size
    out[:, :n] = (out[:, :n] + shift) * scale[:n]
    return out