import numpy as np
import pytest

from asrkit.features import lfr_cmvn, load_cmvn, parse_cmvn

CMVN_TEXT = [
    "<Nnet>",
    "<Splice> 4 4",
    "[ 0 ]",
    "<AddShift> 4 4",
    "<LearnRateCoef> 0 [ -1.5 -2.5 3 4 ]",
    "<Rescale> 4 4",
    "<LearnRateCoef> 0 [ 0.5 0.25 2 1 ]",
    "</Nnet>",
]


def test_parse_cmvn_reads_shift_and_scale():
    means, variances = parse_cmvn(CMVN_TEXT)
    np.testing.assert_allclose(means, [-1.5, -2.5, 3, 4])
    np.testing.assert_allclose(variances, [0.5, 0.25, 2, 1])


def test_parse_cmvn_skips_line_after_header_that_is_not_coefficients():
    lines = [
        "<AddShift> 2 2",
        "<Rescale> 2 2",
        "<LearnRateCoef> 0 [ 7 8 ]",
    ]
    means, variances = parse_cmvn(lines)
    assert means.size == 0
    assert variances.size == 0


def test_parse_cmvn_ignores_blank_lines():
    means, variances = parse_cmvn(["", "   "] + CMVN_TEXT)
    assert means.shape == (4,)
    assert variances.shape == (4,)


def test_parse_cmvn_rejects_bad_number():
    with pytest.raises(ValueError):
        parse_cmvn(["<AddShift> 1 1", "<LearnRateCoef> 0 [ abc ]"])


def test_load_cmvn_from_file(tmp_path):
    path = tmp_path / "am.mvn"
    path.write_text("\n".join(CMVN_TEXT) + "\n", encoding="utf-8")
    means, variances = load_cmvn(path)
    expected_means, expected_vars = parse_cmvn(CMVN_TEXT)
    np.testing.assert_array_equal(means, expected_means)
    np.testing.assert_array_equal(variances, expected_vars)


def test_load_cmvn_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_cmvn(tmp_path / "absent.mvn")


def _frames(count, dim=2):
    return np.arange(count * dim, dtype=np.float32).reshape(count, dim)


def test_lfr_shape_and_padding_with_identity_cmvn():
    feats = _frames(10)
    out = lfr_cmvn(feats, 5, 1, np.zeros(10), np.ones(10))
    assert out.shape == (10, 10)
    first = np.concatenate([feats[0], feats[0], feats[0], feats[1], feats[2]])
    np.testing.assert_array_equal(out[0], first)
    last = np.concatenate([feats[7], feats[8], feats[9], feats[9], feats[9]])
    np.testing.assert_array_equal(out[-1], last)


def test_lfr_row_count_follows_ceiling_of_frames_over_stride():
    feats = _frames(10)
    out = lfr_cmvn(feats, 7, 6, [], [])
    assert out.shape == (2, 14)
    window = np.concatenate([feats[0]] * 3 + [feats[1], feats[2], feats[3], feats[4]])
    np.testing.assert_array_equal(out[0], window)


def test_lfr_cmvn_applies_only_to_leading_elements():
    feats = _frames(3)
    plain = lfr_cmvn(feats, 1, 1, [], [])
    np.testing.assert_array_equal(plain, feats)
    scaled = lfr_cmvn(feats, 1, 1, [1.0], [2.0])
    np.testing.assert_array_equal(scaled[:, 0], (feats[:, 0] + 1.0) * 2.0)
    np.testing.assert_array_equal(scaled[:, 1], feats[:, 1])


def test_lfr_empty_input():
    out = lfr_cmvn(np.zeros((0, 80)), 5, 1, [], [])
    assert out.shape == (0, 400)


def test_lfr_rejects_means_longer_than_frame():
    with pytest.raises(ValueError):
        lfr_cmvn(_frames(4), 1, 1, np.zeros(3), np.ones(3))


def test_lfr_rejects_short_variances():
    with pytest.raises(ValueError):
        lfr_cmvn(_frames(4), 1, 1, [0.0, 0.0], [1.0])


def test_lfr_rejects_non_positive_window():
    with pytest.raises(ValueError):
        lfr_cmvn(_frames(4), 0, 1, [], [])