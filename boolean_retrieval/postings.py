"""
Postings store: term id -> ascending list of doc ids, plus the token positions behind them.
Reference: IIR Ch.1 §1.2 (inverted index), Ch.4 §4.3 (SPIMI-INVERT, postings appended in docID order)
"""
from typing import Dict, List


class PostingsStore:
    """
    Posting lists indexed by term id.

    Documents are ingested in increasing doc id order, so a posting is only ever
    appended at the tail. The tail check makes `add` idempotent within one
    document and keeps every list sorted and duplicate-free without re-sorting.
    """

    def __init__(self):
        self._lists: List[List[int]] = []

    def __len__(self) -> int:
        return len(self._lists)

    def __repr__(self) -> str:
        return f"PostingsStore(terms={len(self._lists)}, postings={self.total_postings()})"

    def add(self, term_id: int, doc_id: int) -> None:
        while term_id >= len(self._lists):
            self._lists.append([])
        postings = self._lists[term_id]
        if postings:
            last = postings[-1]
            if last == doc_id:
                return
            if doc_id < last:
                raise ValueError(
                    f"doc id {doc_id} out of order for term {term_id} (last posting {last})"
                )
        postings.append(doc_id)

    def get(self, term_id: int) -> List[int]:
        """The posting list of `term_id`; empty when the term has no postings. Do not mutate."""
        if 0 <= term_id < len(self._lists):
            return self._lists[term_id]
        return []

    def total_postings(self) -> int:
        return sum(len(p) for p in self._lists)


class PositionsStore:
    """
    Token positions of every (term id, doc id) pair, kept beside the postings
    for proximity queries. Positions are token offsets after stopword removal
    and are appended in increasing order as a document is scanned.
    """

    def __init__(self):
        self._positions: List[Dict[int, List[int]]] = []

    def __len__(self) -> int:
        return len(self._positions)

    def add(self, term_id: int, doc_id: int, position: int) -> None:
        while term_id >= len(self._positions):
            self._positions.append({})
        self._positions[term_id].setdefault(doc_id, []).append(position)

    def get(self, term_id: int, doc_id: int) -> List[int]:
        """Positions of the term in the document; empty when it does not occur. Do not mutate."""
        if 0 <= term_id < len(self._positions):
            return self._positions[term_id].get(doc_id, [])
        return []
