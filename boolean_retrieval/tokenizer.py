"""
Tokenizer / Normalizer
Reference: IIR Ch.2 §2.2 (tokenization, normalization, stop words)

Normalization rules (stable, every index and query goes through them):
1. Fancy quotes and dashes are mapped to their ASCII forms.
2. Text is lowercased.
3. Text is split on whitespace and on every non-alphanumeric character,
   so leading/trailing punctuation never survives on a token.
4. Empty tokens and tokens shorter than `min_token_len` are dropped.
5. With `remove_stopwords`, tokens in the stopword set are dropped.

No input raises: None, non-strings and stray bytes simply produce no tokens.
"""
from __future__ import annotations
import re
from typing import Iterable, Iterator, List, Optional, Set
import logging

from spacy.lang.en.stop_words import STOP_WORDS as SPACY_STOP_WORDS

from . import config

log = logging.getLogger(__name__)


class Tokenizer:
    """
    Lowercasing, punctuation-splitting tokenizer with optional stopword removal.

    Quick start:
        tk = Tokenizer(remove_stopwords=True)
        tokens = tk("The cat sat, on the mat!")   # ['cat', 'sat', 'mat']

    Notes:
    - `iter_tokens` is lazy; `tokenize` / `__call__` materialize a list.
    - `normalize` is meant for query words and never filters stopwords, so a
      stopword in a query resolves to a term that is simply not in the index.
    """

    # Alphanumeric runs only; "_" counts as punctuation
    _TOKEN_RE = re.compile(r"[^\W_]+")

    # normalize: fancy quotes/dashes to ascii
    _QUOTES_DASHES = str.maketrans({
        "“": '"', "”": '"', "‘": "'", "’": "'",
        "–": "-", "—": "-", "‐": "-", "−": "-", "·": ".",
    })

    def __init__(
        self,
        remove_stopwords: bool = config.REMOVE_STOPWORDS,
        custom_stopwords: Optional[Iterable[str]] = None,
        min_token_len: int = config.MIN_TOKEN_LEN,
    ) -> None:
        self.remove_stopwords = remove_stopwords
        self.min_token_len = max(0, int(min_token_len))

        self.stopwords: Set[str] = set(SPACY_STOP_WORDS)
        if custom_stopwords:
            self.stopwords |= {w.lower() for w in custom_stopwords}

        log.debug("Created %r", self)

    def __call__(self, text: str) -> List[str]:
        return self.tokenize(text)

    def __repr__(self) -> str:
        return (
            f"Tokenizer(stopwords={'on' if self.remove_stopwords else 'off'}, "
            f"min_len={self.min_token_len})"
        )

    # ---- helpers ----
    def _normalize_surface(self, text: str) -> str:
        return text.translate(self._QUOTES_DASHES).lower()

    def _split(self, text) -> Iterator[str]:
        if not text or not isinstance(text, str):
            return
        for m in self._TOKEN_RE.finditer(self._normalize_surface(text)):
            tok = m.group(0)
            if len(tok) >= self.min_token_len:
                yield tok

    def _should_keep(self, tok: str) -> bool:
        if self.remove_stopwords and tok in self.stopwords:
            return False
        return True

    # ---- public api ----
    def iter_tokens(self, text: str) -> Iterator[str]:
        """Lazily yield the normalized terms of `text`, in order, with repeats."""
        for tok in self._split(text):
            if self._should_keep(tok):
                yield tok

    def tokenize(self, text: str) -> List[str]:
        return list(self.iter_tokens(text))

    def normalize(self, word: str) -> List[str]:
        """
        Normalize a single query word. Usually one term comes back, but a word
        with inner punctuation ("e-mail") yields several and a word made only
        of punctuation yields none.
        """
        return list(self._split(word))
