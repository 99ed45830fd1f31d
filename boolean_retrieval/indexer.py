"""
In-memory Boolean Indexer
Based on: Manning et al. IIR Ch.1 §1.2 (building an inverted index), Ch.4 §4.3 (SPIMI)

Documents are indexed in a single pass, one at a time. Each document gets the
next dense doc id, its text is tokenized, every distinct term is interned once
and the doc id is appended to that term's posting list. Document text is not
kept; only an optional title survives for display, plus each term's token
positions for proximity queries.

Lifecycle: IndexBuilder.ingest(...) several times -> IndexBuilder.build() freezes
the Index -> queries read it without locks.
"""
import logging
from typing import Dict, Iterable, List, Optional, Tuple

from tqdm import tqdm

from .dictionary import TermDictionary
from .postings import PositionsStore, PostingsStore
from .tokenizer import Tokenizer

log = logging.getLogger(__name__)


class IndexFrozenError(RuntimeError):
    """Raised when documents are ingested into an index that is already frozen."""


class Index:
    """
    Owns the term dictionary, the postings and positions stores and the document titles.
    """

    def __init__(self):
        self.dictionary = TermDictionary()
        self.postings = PostingsStore()
        self.positions = PositionsStore()
        self.titles: List[Optional[str]] = []
        self._frozen = False

    def __repr__(self) -> str:
        return (
            f"Index(documents={self.num_documents}, terms={len(self.dictionary)}, "
            f"frozen={self._frozen})"
        )

    @property
    def num_documents(self) -> int:
        return len(self.titles)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True

    def postings_for(self, term: str) -> List[int]:
        """Posting list for a normalized term; unknown terms give an empty list."""
        if term not in self.dictionary:
            return []
        return self.postings.get(self.dictionary.lookup(term))

    def positional_postings_for(self, term: str) -> List[Tuple[int, List[int]]]:
        """(doc id, positions) pairs for a normalized term, ascending by doc id."""
        if term not in self.dictionary:
            return []
        term_id = self.dictionary.lookup(term)
        return [(doc_id, self.positions.get(term_id, doc_id)) for doc_id in self.postings.get(term_id)]

    def universe(self) -> range:
        """Every doc id, 0..N-1."""
        return range(self.num_documents)

    def title(self, doc_id: int) -> Optional[str]:
        return self.titles[doc_id]

    def get_statistics(self) -> Dict:
        num_terms = len(self.dictionary)
        total = self.postings.total_postings()
        return {
            'num_documents': self.num_documents,
            'num_terms': num_terms,
            'total_postings': total,
            'avg_postings_per_term': total / num_terms if num_terms else 0,
        }

    # ------------------------- external persistence --------------------------
    def to_dict(self) -> Dict:
        """Plain-data snapshot (JSON friendly) for an external persistence layer."""
        terms = self.dictionary.terms()
        postings = [list(self.postings.get(i)) for i in range(len(terms))]
        return {
            'num_documents': self.num_documents,
            'titles': list(self.titles),
            'terms': terms,
            'postings': postings,
            # positions[t][n] belongs to postings[t][n]
            'positions': [
                [list(self.positions.get(i, doc_id)) for doc_id in docs]
                for i, docs in enumerate(postings)
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Index":
        """Rebuild a frozen index from a `to_dict` snapshot."""
        index = cls()
        titles = data.get('titles')
        if titles is None:
            titles = [None] * int(data['num_documents'])
        index.titles = list(titles)
        positions = data.get('positions') or [[] for _ in data['terms']]
        for term, postings, term_positions in zip(data['terms'], data['postings'], positions):
            term_id = index.dictionary.intern(term)
            for n, doc_id in enumerate(postings):
                if not 0 <= doc_id < index.num_documents:
                    raise ValueError(f"posting {doc_id} for {term!r} outside 0..{index.num_documents - 1}")
                index.postings.add(term_id, doc_id)
                for position in (term_positions[n] if n < len(term_positions) else []):
                    index.positions.add(term_id, doc_id, position)
        index.freeze()
        return index


class IndexBuilder:
    """
    Single writer for an Index. Ingestion is strictly sequential: doc ids are
    assigned in call order and postings are appended in that same order.
    """

    def __init__(self, tokenizer: Optional[Tokenizer] = None, index: Optional[Index] = None):
        self.tokenizer = tokenizer or Tokenizer()
        self.index = index if index is not None else Index()

    def ingest(self, document_text: str, title: Optional[str] = None) -> int:
        """Index one document and return its doc id."""
        index = self.index
        if index.frozen:
            raise IndexFrozenError("index is frozen, no more documents can be ingested")

        doc_id = index.num_documents
        index.titles.append(title)

        # Term ids follow first sighting; the postings tail check keeps one posting per document
        term_ids = set()
        for position, term in enumerate(self.tokenizer.iter_tokens(document_text)):
            term_id = index.dictionary.intern(term)
            index.postings.add(term_id, doc_id)
            index.positions.add(term_id, doc_id, position)
            term_ids.add(term_id)

        log.debug("Indexed doc %d (%s): %d distinct terms", doc_id, title, len(term_ids))
        return doc_id

    def ingest_all(
        self,
        texts: Iterable[str],
        titles: Optional[Iterable[Optional[str]]] = None,
        progress: bool = False,
    ) -> List[int]:
        """Ingest documents in the given order; returns their doc ids."""
        if titles is None:
            pairs: Iterable[Tuple[str, Optional[str]]] = ((t, None) for t in texts)
        else:
            pairs = zip(texts, titles)
        if progress:
            pairs = tqdm(pairs, desc="Indexing", unit="doc")
        return [self.ingest(text, title) for text, title in pairs]

    def build(self) -> Index:
        """Freeze the index and hand it over for querying."""
        self.index.freeze()
        stats = self.index.get_statistics()
        log.info(
            "Index built: %d documents, %d terms, %d postings",
            stats['num_documents'], stats['num_terms'], stats['total_postings'],
        )
        return self.index


def build_index(
    texts: Iterable[str],
    tokenizer: Optional[Tokenizer] = None,
    titles: Optional[Iterable[Optional[str]]] = None,
    progress: bool = False,
) -> Index:
    """Convenience: ingest every text in order and return the frozen index."""
    builder = IndexBuilder(tokenizer)
    builder.ingest_all(texts, titles=titles, progress=progress)
    return builder.build()
