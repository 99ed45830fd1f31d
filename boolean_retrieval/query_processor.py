"""
Boolean query evaluation over sorted posting lists.
Reference: IIR Ch.1 §1.3, Figure 1.6 (INTERSECT); the same merge shape gives union and difference.

Every posting list and every intermediate result is an ascending,
duplicate-free list of doc ids, so each operator is a single linear merge.
"""
import logging
from typing import List, Optional, Sequence, Tuple

from .indexer import Index
from .query_parser import And, Node, Not, Or, Term, is_proximity_query, parse, parse_proximity
from .tokenizer import Tokenizer

log = logging.getLogger(__name__)

PositionalPosting = Tuple[int, List[int]]  # (doc id, token positions)


# --------------------------------------------------------------------------- #
#  Merges                                                                     #
# --------------------------------------------------------------------------- #
def intersect(a: Sequence[int], b: Sequence[int]) -> List[int]:
    """a ∩ b, O(|a| + |b|)."""
    out = []
    i = j = 0
    while i < len(a) and j < len(b):
        if a[i] == b[j]:
            out.append(a[i])
            i += 1
            j += 1
        elif a[i] < b[j]:
            i += 1
        else:
            j += 1
    return out


def union(a: Sequence[int], b: Sequence[int]) -> List[int]:
    """a ∪ b, ids present in both appear once."""
    out = []
    i = j = 0
    while i < len(a) and j < len(b):
        if a[i] == b[j]:
            out.append(a[i])
            i += 1
            j += 1
        elif a[i] < b[j]:
            out.append(a[i])
            i += 1
        else:
            out.append(b[j])
            j += 1
    out.extend(a[i:])
    out.extend(b[j:])
    return out


def difference(a: Sequence[int], b: Sequence[int]) -> List[int]:
    """a − b."""
    out = []
    j = 0
    for doc_id in a:
        while j < len(b) and b[j] < doc_id:
            j += 1
        if j < len(b) and b[j] == doc_id:
            continue
        out.append(doc_id)
    return out


def _within(p1: Sequence[int], p2: Sequence[int], k: int) -> bool:
    """True when some position of p1 and some position of p2 are at most k apart."""
    i = j = 0
    while i < len(p1) and j < len(p2):
        if abs(p1[i] - p2[j]) <= k:
            return True
        if p1[i] < p2[j]:
            i += 1
        else:
            j += 1
    return False


def positional_intersect(
    a: Sequence[PositionalPosting], b: Sequence[PositionalPosting], k: int
) -> List[PositionalPosting]:
    """
    Documents of both lists where the two terms occur within k positions.
    Reference: IIR Ch.2 §2.4.2, Figure 2.12 (POSITIONALINTERSECT)

    Results carry b's positions, so chaining x, y, z checks y against z next.
    """
    out = []
    i = j = 0
    while i < len(a) and j < len(b):
        doc_a, positions_a = a[i]
        doc_b, positions_b = b[j]
        if doc_a == doc_b:
            if _within(positions_a, positions_b, k):
                out.append(b[j])
            i += 1
            j += 1
        elif doc_a < doc_b:
            i += 1
        else:
            j += 1
    return out


# --------------------------------------------------------------------------- #
#  Evaluation                                                                 #
# --------------------------------------------------------------------------- #
def _evaluate(root: Node, index: Index) -> Sequence[int]:
    # Post-order walk with an explicit stack: long AND/OR chains and NOT runs
    # build trees far deeper than the interpreter's recursion limit.
    results: List[Sequence[int]] = []
    stack: List[Tuple[Node, bool]] = [(root, False)]
    while stack:
        node, children_done = stack.pop()
        if isinstance(node, Term):
            # unknown terms are not an error: they match nothing
            results.append(index.postings_for(node.term))
        elif not isinstance(node, (And, Or, Not)):
            raise TypeError(f"Unknown query node: {type(node).__name__}")
        elif not children_done:
            stack.append((node, True))
            if isinstance(node, Not):
                stack.append((node.operand, False))
            else:
                stack.append((node.right, False))
                stack.append((node.left, False))
        elif isinstance(node, Not):
            results.append(difference(index.universe(), results.pop()))
        else:
            right = results.pop()
            left = results.pop()
            merge = intersect if isinstance(node, And) else union
            results.append(merge(left, right))
    return results.pop()


def evaluate(ast: Node, index: Index) -> List[int]:
    """Evaluate a parsed query; returns a new ascending list of doc ids."""
    return list(_evaluate(ast, index))


class QueryProcessor:
    """
    Parses and evaluates boolean queries against a built index.

    The index is only read, so one processor (or many) can serve queries from
    several threads once ingestion is over.
    """

    def __init__(self, index: Index, tokenizer: Optional[Tokenizer] = None):
        self.index = index
        self.tokenizer = tokenizer or Tokenizer()

    def parse(self, query: str) -> Node:
        return parse(query, self.tokenizer)

    def search(self, query: str) -> List[int]:
        result = evaluate(self.parse(query), self.index)
        log.debug("Query %r: %d hits", query, len(result))
        return result

    def search_proximity(self, query: str) -> List[int]:
        """
        "x y z /k": documents where each term occurs within k tokens of the
        previous one.
        """
        terms, k = parse_proximity(query, self.tokenizer)
        postings = self.index.positional_postings_for(terms[0])
        for term in terms[1:]:
            postings = positional_intersect(postings, self.index.positional_postings_for(term), k)
        result = [doc_id for doc_id, _ in postings]
        log.debug("Proximity query %r (k=%d): %d hits", query, k, len(result))
        return result

    def run(self, query: str) -> List[int]:
        """Dispatch on the query shape: a "/k" window makes it a proximity query."""
        if is_proximity_query(query):
            return self.search_proximity(query)
        return self.search(query)

    def search_titles(self, query: str) -> List[Tuple[int, Optional[str]]]:
        return [(doc_id, self.index.title(doc_id)) for doc_id in self.run(query)]
