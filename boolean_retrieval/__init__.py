from .tokenizer import Tokenizer
from .dictionary import TermDictionary
from .postings import PositionsStore, PostingsStore
from .indexer import Index, IndexBuilder, IndexFrozenError, build_index
from .query_parser import QuerySyntaxError, QueryParser, Term, And, Or, Not, parse, parse_proximity
from .query_processor import (
    QueryProcessor, evaluate, intersect, union, difference, positional_intersect,
)

__all__ = [
    # Index construction
    "Tokenizer",
    "TermDictionary",
    "PostingsStore",
    "PositionsStore",
    "Index",
    "IndexBuilder",
    "IndexFrozenError",
    "build_index",
    # Queries
    "QuerySyntaxError",
    "QueryParser",
    "Term",
    "And",
    "Or",
    "Not",
    "parse",
    "parse_proximity",
    "QueryProcessor",
    "evaluate",
    "intersect",
    "union",
    "difference",
    "positional_intersect",
]
