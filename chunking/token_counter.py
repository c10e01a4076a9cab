"""
Token Counter for chunk sizing and context budgets

Uses tiktoken with the cl100k_base encoding. Counts are an approximation
for local embedding and chat models (BERT/LLaMA-style tokenizers), which
tend to produce slightly fewer tokens, so a limit expressed in cl100k
tokens errs on the safe side.

Usage:
    from chunking.token_counter import count_tokens, count_tokens_batch

    n = count_tokens("Luke, I am your father.")
    counts = count_tokens_batch(["INT. DEATH STAR", "EXT. TATOOINE"])
"""

import tiktoken

ENCODING_NAME = "cl100k_base"

# Loaded lazily; building the BPE ranks takes a noticeable moment.
_encoder: tiktoken.Encoding | None = None


def _get_encoder() -> tiktoken.Encoding:
    global _encoder
    if _encoder is None:
        _encoder = tiktoken.get_encoding(ENCODING_NAME)
    return _encoder


def count_tokens(text: str) -> int:
    """Return the number of cl100k tokens in ``text`` (0 for empty text)."""
    if not text:
        return 0
    return len(_get_encoder().encode(text, disallowed_special=()))


def count_tokens_batch(texts: list[str]) -> list[int]:
    """Token counts for several texts, in input order."""
    encoder = _get_encoder()
    return [len(encoder.encode(t, disallowed_special=())) if t else 0 for t in texts]
