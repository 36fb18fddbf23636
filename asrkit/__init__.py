"""Front-end helpers for streaming speech recognition: text encoding, token reordering, masks, features, CIF and chunking."""

__version__ = "0.1.0"
__all__ = [
    "encoding",
    "token_parser",
    "punc_mask",
    "features",
    "online_features",
    "cif",
    "chunking",
]