# asrkit

Building blocks for a streaming speech-recognition front end, written in
Python on top of numpy.

## Installation

From the project directory:

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

### `asrkit.encoding`

Byte-level UTF-8 / UTF-16 helpers. UTF-16 text is a list of 16-bit code
units (Basic Multilingual Plane only). Functions that take `data` accept
`bytes`, `bytearray` or `str`; a `str` is encoded as UTF-8 first.

- `utf8_to_utf16(data)` decodes to code units; each malformed byte becomes
  a `0` unit. `decode_unit(data)` decodes one character and returns
  `(code_unit, bytes_consumed)`.
- `utf16_to_utf8(units, limit=None)` and `encode_unit(code)` encode;
  `utf16_to_utf8_len(units)` counts the bytes the units encode to.
- `swap_endian(units)` swaps the byte order of each unit.
- `is_utf8(data)` checks that the input holds only one- to three-byte
  sequences; `get_utf8_len(data)` gives the number of characters before the
  first invalid sequence, or `0` when the whole input is valid.
- `to_uni(data)` decodes the leading character without range checks,
  returning `DEF_UNI_CHAR` (U+25A1) for broken continuation bytes.
- `utf8_to_charset(data)` splits bytes into per-character chunks judged by
  the lead byte.
- Character-class checks: `is_chinese_character(code)`, `is_all_chinese`,
  `has_alpha`, `is_all_alpha`, `is_all_alpha_and_punct`,
  `is_all_alpha_and_digit`, `is_all_alpha_digit_and_blank` and
  `need_add_tail_blank`.
- `merge_english_word(words, merge_mask)` joins each word whose mask is `1`
  onto the word before it.

### `asrkit.token_parser`

`TokenParser(parse_type)` reads a tagged token stream such as
`date { day: "5" month: "8" }` and `reorder(text)` rewrites every token with
its members in the canonical order for `ParseType.TN` or `ParseType.ITN`
(the default). `Token` holds one parsed token; `Token.render(orders)`
serialises it. Malformed input raises `ValueError`.

### `asrkit.punc_mask`

Attention masks as `float32` numpy arrays: `vad_mask(size, vad_pos)`,
`triangle(text_length)` (lower-triangular) and
`transpose(values, rows, cols)`.

### `asrkit.features`

`parse_cmvn(lines)` and `load_cmvn(path)` read the `<AddShift>` and
`<Rescale>` vectors from Kaldi-style CMVN text and return
`(means, variances)`. `lfr_cmvn(frames, lfr_m, lfr_n, means, variances)`
stacks `lfr_m` frames every `lfr_n` frames (repeating the first frame at the
start and the last frame to fill a short final window) and then applies
`(x + means) * variances`.

### `asrkit.online_features`

Streaming counterparts:

- `compute_frame_num(sample_length, frame_length, frame_shift)` counts whole
  frames.
- `FrameCache(frame_length, frame_shift)`: `push(waves)` returns the samples
  that make up whole frames and keeps the rest for the next call;
  `pending` shows the kept samples; `reset()` drops them.
- `OnlineLfrCmvn(lfr_m, lfr_n, means, variances)`:
  `process(frames, input_finished=False)` returns the stacked, normalised
  rows ready so far and keeps the frames a later window still needs; with
  `input_finished=True` the last window is padded and the state cleared.

### `asrkit.cif`

- `PositionalEncoder`: `apply(feats)` adds sinusoidal position embeddings
  whose positions continue from one call to the next; `reset()` starts again
  at zero.
- `CifSearcher(chunk_size, hidden_size, threshold=1.0, tail_alpha=0.45)`:
  `search(hidden, alphas, is_last_chunk=False)` runs continuous
  integrate-and-fire over one chunk of encoder output and returns the fired
  embeddings, carrying the remaining weight and hidden state over to the next
  call (`cached_alpha`, `cached_hidden`).

### `asrkit.chunking`

`ChunkOverlapper(chunk_size, feat_dims)`:
`add_overlap(feats, input_finished=False, is_last_chunk=False)` puts the
cached context frames in front of a chunk and updates the cache; on finished
input that is not the last chunk it pads with zero frames to a full window
(`window`).

## Example

```python
from asrkit.encoding import utf8_to_charset, is_utf8
from asrkit.token_parser import TokenParser, ParseType

print(utf8_to_charset("你好ab".encode()))  # [b'\xe4\xbd\xa0', b'\xe5\xa5\xbd', b'a', b'b']
print(is_utf8(b"hello"))                     # True

parser = TokenParser(ParseType.ITN)
print(parser.reorder('money { value: "5" currency: "$" }'))
# money { currency: "$" value: "5" }
```

```python
import numpy as np
from asrkit.features import lfr_cmvn

frames = np.random.rand(20, 80).astype(np.float32)
means = np.zeros(400, dtype=np.float32)
variances = np.ones(400, dtype=np.float32)
stacked = lfr_cmvn(frames, lfr_m=5, lfr_n=1, means=means, variances=variances)
print(stacked.shape)  # (20, 400)
```

## What this package does not do

asrkit is a library of front-end pieces only. It does not load audio files,
compute filterbank features from waveforms, run any neural network (voice
activity detection, recognition or punctuation models), apply finite-state
text normalisation grammars, or offer a command-line tool or server. Those
parts must be supplied by the application that uses it.