"""
Term dictionary: normalized term <-> dense term id.
Reference: IIR Ch.4 §4.2 (BSBI termID mapping)
"""
from typing import Dict, List, Optional


class TermDictionary:
    """
    Append-only bidirectional map. Ids are handed out in order of first
    sighting, starting at 0, and never change or get reused.
    """

    def __init__(self):
        self._ids: Dict[str, int] = {}
        self._terms: List[str] = []

    def __len__(self) -> int:
        return len(self._terms)

    def __contains__(self, term) -> bool:
        return term in self._ids

    def __repr__(self) -> str:
        return f"TermDictionary(size={len(self._terms)})"

    def intern(self, term: str) -> int:
        """Return the id of `term`, allocating the next id on first sighting."""
        term_id = self._ids.get(term)
        if term_id is None:
            term_id = len(self._terms)
            self._ids[term] = term_id
            self._terms.append(term)
        return term_id

    def lookup(self, term: str) -> Optional[int]:
        return self._ids.get(term)

    def resolve(self, term_id: int) -> str:
        if term_id < 0 or term_id >= len(self._terms):
            raise KeyError(term_id)
        return self._terms[term_id]

    def terms(self) -> List[str]:
        """All terms in id order."""
        return list(self._terms)
