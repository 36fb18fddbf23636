import numpy as np
import pytest

from asrkit.features import lfr_cmvn
from asrkit.online_features import FrameCache, OnlineLfrCmvn, compute_frame_num


# ---------------------------------------------------------------- frame counts

def test_compute_frame_num_at_frame_length():
    assert compute_frame_num(400, 400, 160) == 1
    assert compute_frame_num(399, 400, 160) == 0
    assert compute_frame_num(0, 400, 160) == 0


@pytest.mark.parametrize("length", range(0, 2000, 37))
def test_compute_frame_num_invariant(length):
    count = compute_frame_num(length, 400, 160)
    if count == 0:
        assert length < 400
    else:
        assert (count - 1) * 160 + 400 <= length < count * 160 + 400


@pytest.mark.parametrize("shift,length", [(0, 400), (160, 0), (-1, 400)])
def test_compute_frame_num_rejects_bad_sizes(shift, length):
    with pytest.raises(ValueError):
        compute_frame_num(1000, length, shift)


# ---------------------------------------------------------------- frame cache

def test_frame_cache_holds_short_input():
    cache = FrameCache(4, 2)
    first = cache.push([1.0, 2.0, 3.0])
    assert first.size == 0
    np.testing.assert_array_equal(cache.pending, np.array([1, 2, 3], dtype=np.float32))
    second = cache.push([4.0])
    np.testing.assert_array_equal(second, np.array([1, 2, 3, 4], dtype=np.float32))


def test_frame_cache_keeps_samples_after_last_frame_start():
    cache = FrameCache(4, 2)
    signal = np.arange(7, dtype=np.float32)
    out = cache.push(signal)
    frames = compute_frame_num(signal.size, 4, 2)
    np.testing.assert_array_equal(out, signal[: (frames - 1) * 2 + 4])
    np.testing.assert_array_equal(cache.pending, signal[frames * 2:])


def test_frame_cache_stream_matches_whole_signal():
    rng = np.random.default_rng(0)
    signal = rng.standard_normal(1000).astype(np.float32)
    cache = FrameCache(400, 160)
    total_frames = 0
    pos = 0
    for size in (100, 350, 50, 500):
        out = cache.push(signal[pos:pos + size])
        pos += size
        offset = total_frames * 160
        np.testing.assert_array_equal(out, signal[offset:offset + out.size])
        total_frames += compute_frame_num(out.size, 400, 160)
    assert total_frames == compute_frame_num(signal.size, 400, 160)


def test_frame_cache_reset():
    cache = FrameCache(4, 2)
    cache.push([1.0, 2.0])
    cache.reset()
    assert cache.pending.size == 0
    assert cache.push([5.0, 6.0, 7.0]).size == 0


def test_frame_cache_rejects_bad_sizes():
    with pytest.raises(ValueError):
        FrameCache(0, 2)


# ---------------------------------------------------------------- online LFR/CMVN

def _stats(width, seed=1):
    rng = np.random.default_rng(seed)
    means = rng.standard_normal(width).astype(np.float32)
    variances = rng.uniform(0.5, 2.0, width).astype(np.float32)
    return means, variances


@pytest.mark.parametrize("lfr_m,lfr_n", [(5, 1), (7, 6), (1, 1)])
def test_single_finished_call_matches_offline(lfr_m, lfr_n):
    rng = np.random.default_rng(2)
    frames = rng.standard_normal((23, 3)).astype(np.float32)
    means, variances = _stats(lfr_m * 3)
    online = OnlineLfrCmvn(lfr_m, lfr_n, means, variances)
    got = online.process(frames, input_finished=True)
    want = lfr_cmvn(frames, lfr_m, lfr_n, means, variances)
    np.testing.assert_allclose(got, want, rtol=1e-6)


@pytest.mark.parametrize("lfr_m,lfr_n", [(5, 1), (7, 6)])
@pytest.mark.parametrize("sizes", [(4, 9, 2, 8), (1, 1, 1, 20), (23,)])
def test_chunked_stream_matches_offline(lfr_m, lfr_n, sizes):
    rng = np.random.default_rng(3)
    frames = rng.standard_normal((sum(sizes), 4)).astype(np.float32)
    means, variances = _stats(lfr_m * 4)
    online = OnlineLfrCmvn(lfr_m, lfr_n, means, variances)
    parts = []
    pos = 0
    for index, size in enumerate(sizes):
        last = index == len(sizes) - 1
        parts.append(online.process(frames[pos:pos + size], input_finished=last))
        pos += size
    got = np.concatenate(parts)
    want = lfr_cmvn(frames, lfr_m, lfr_n, means, variances)
    np.testing.assert_allclose(got, want, rtol=1e-6)


def test_empty_finishing_chunk_flushes_cache():
    rng = np.random.default_rng(4)
    frames = rng.standard_normal((12, 2)).astype(np.float32)
    means, variances = _stats(10)
    online = OnlineLfrCmvn(5, 1, means, variances)
    first = online.process(frames, input_finished=False)
    assert online.cached_frames > 0
    rest = online.process(np.zeros((0, 2), dtype=np.float32), input_finished=True)
    got = np.concatenate([first, rest])
    want = lfr_cmvn(frames, 5, 1, means, variances)
    np.testing.assert_allclose(got, want, rtol=1e-6)
    assert online.cached_frames == 0


def test_finish_resets_state_for_next_stream():
    rng = np.random.default_rng(5)
    frames = rng.standard_normal((15, 3)).astype(np.float32)
    means, variances = _stats(21)
    online = OnlineLfrCmvn(7, 6, means, variances)
    first = online.process(frames, input_finished=True)
    second = online.process(frames, input_finished=True)
    np.testing.assert_array_equal(first, second)


def test_short_chunk_is_cached_without_output():
    online = OnlineLfrCmvn(5, 1, np.zeros(5), np.ones(5))
    out = online.process([[1.0]], input_finished=False)
    assert out.shape == (0, 5)
    # two left-pad copies plus the frame itself
    assert online.cached_frames == 3


def test_nothing_to_flush_returns_empty():
    online = OnlineLfrCmvn(5, 1, np.zeros(5), np.ones(5))
    out = online.process([], input_finished=True)
    assert out.shape[0] == 0
    assert online.cached_frames == 0


def test_reset_clears_cache():
    online = OnlineLfrCmvn(5, 1, np.zeros(5), np.ones(5))
    online.process([[1.0], [2.0]], input_finished=False)
    online.reset()
    assert online.cached_frames == 0
    assert online.splice_index == 0


def test_cmvn_touches_only_mean_columns():
    frames = np.ones((6, 2), dtype=np.float32)
    online = OnlineLfrCmvn(1, 1, [1.0], [3.0])
    out = online.process(frames, input_finished=True)
    np.testing.assert_array_equal(out[:, 0], np.full(6, 6.0, dtype=np.float32))
    np.testing.assert_array_equal(out[:, 1], frames[:, 1])


@pytest.mark.parametrize("lfr_m,lfr_n", [(0, 1), (5, 0)])
def test_rejects_bad_lfr(lfr_m, lfr_n):
    with pytest.raises(ValueError):
        OnlineLfrCmvn(lfr_m, lfr_n, [], [])


def test_rejects_short_variances():
    with pytest.raises(ValueError):
        OnlineLfrCmvn(5, 1, [0.0, 0.0], [1.0])


def test_rejects_means_longer_than_window():
    online = OnlineLfrCmvn(1, 1, np.zeros(4), np.ones(4))
    with pytest.raises(ValueError):
        online.process(np.ones((3, 2)), input_finished=True)


def test_rejects_one_dimensional_frames():
    online = OnlineLfrCmvn(5, 1, [], [])
    with pytest.raises(ValueError):
        online.process([1.0, 2.0, 3.0])