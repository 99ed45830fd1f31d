"""
Boolean query parser
Reference: IIR Ch.1 §1.3 (processing Boolean queries)

Grammar, lowest precedence first:

    or_expr  := and_expr ("OR" and_expr)*
    and_expr := not_expr ("AND" not_expr)*
    not_expr := "NOT" not_expr | primary
    primary  := "(" or_expr ")" | WORD

Operator keywords are case-insensitive. Operators of equal precedence
associate left to right. Leaves keep the normalized term string; resolving it
against an index happens at evaluation time. Parentheses may nest at most
config.MAX_QUERY_DEPTH levels deep.

Proximity queries ("x y /k") have their own small syntax, see parse_proximity.
"""
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from . import config
from .tokenizer import Tokenizer


class QuerySyntaxError(SyntaxError):
    """A malformed boolean query. `position` is the character offset of the problem."""

    def __init__(self, message: str, query: str = "", position: Optional[int] = None):
        if position is not None:
            message = f"{message} (at position {position})"
        super().__init__(message)
        self.query = query
        self.position = position


# --------------------------------------------------------------------------- #
#  AST                                                                        #
# --------------------------------------------------------------------------- #
@dataclass(frozen=True)
class Term:
    term: str

    def __str__(self) -> str:
        return self.term


@dataclass(frozen=True)
class And:
    left: "Node"
    right: "Node"

    def __str__(self) -> str:
        return f"({self.left} AND {self.right})"


@dataclass(frozen=True)
class Or:
    left: "Node"
    right: "Node"

    def __str__(self) -> str:
        return f"({self.left} OR {self.right})"


@dataclass(frozen=True)
class Not:
    operand: "Node"

    def __str__(self) -> str:
        return f"(NOT {self.operand})"


Node = Union[Term, And, Or, Not]


# --------------------------------------------------------------------------- #
#  Lexer                                                                      #
# --------------------------------------------------------------------------- #
LPAREN, RPAREN, AND, OR, NOT, WORD = "(", ")", "AND", "OR", "NOT", "WORD"
_OPERATORS = {AND, OR, NOT}
_TOKEN_RE = re.compile(r"\(|\)|[^\s()]+")

Token = Tuple[str, str, int]  # (kind, text, position)


def lex(query: str) -> List[Token]:
    tokens: List[Token] = []
    for m in _TOKEN_RE.finditer(query):
        text = m.group(0)
        upper = text.upper()
        if text in (LPAREN, RPAREN):
            kind = text
        elif upper in _OPERATORS:
            kind = upper
        else:
            kind = WORD
        tokens.append((kind, text, m.start()))
    return tokens


# --------------------------------------------------------------------------- #
#  Parser                                                                     #
# --------------------------------------------------------------------------- #
class QueryParser:
    def __init__(
        self,
        query: str,
        tokenizer: Optional[Tokenizer] = None,
        max_depth: int = config.MAX_QUERY_DEPTH,
    ):
        self.query = query
        self.tokenizer = tokenizer or Tokenizer()
        self.tokens = lex(query)
        self.pos = 0
        self.depth = 0
        self.max_depth = max_depth

    def _error(self, message: str, position: Optional[int] = None):
        if position is None:
            position = len(self.query)
        return QuerySyntaxError(message, self.query, position)

    def peek(self) -> Optional[Token]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def peek_kind(self) -> Optional[str]:
        token = self.peek()
        return token[0] if token else None

    def consume(self) -> Token:
        token = self.peek()
        if token is None:
            raise self._error("Unexpected end of query")
        self.pos += 1
        return token

    def parse(self) -> Node:
        if not self.tokens:
            raise self._error("Empty query", 0)
        node = self.parse_or()
        token = self.peek()
        if token is not None:
            kind, text, position = token
            if kind == RPAREN:
                raise self._error("Unbalanced ')'", position)
            raise self._error(f"Expected AND, OR or end of query, got {text!r}", position)
        return node

    # Lowest precedence
    def parse_or(self) -> Node:
        left = self.parse_and()
        while self.peek_kind() == OR:
            self.consume()
            right = self.parse_and()
            left = Or(left, right)
        return left

    def parse_and(self) -> Node:
        left = self.parse_not()
        while self.peek_kind() == AND:
            self.consume()
            right = self.parse_not()
            left = And(left, right)
        return left

    def parse_not(self) -> Node:
        negations = 0
        while self.peek_kind() == NOT:
            self.consume()
            negations += 1
        node = self.parse_primary()
        for _ in range(negations):
            node = Not(node)
        return node

    # Highest precedence (parentheses, words)
    def parse_primary(self) -> Node:
        token = self.peek()
        if token is None:
            raise self._error("Unexpected end of query: missing operand")

        kind, text, position = token
        if kind == LPAREN:
            if self.depth >= self.max_depth:
                raise self._error("Query nested too deeply", position)
            self.consume()
            self.depth += 1
            node = self.parse_or()
            self.depth -= 1
            closing = self.peek()
            if closing is None:
                raise self._error("Unbalanced '(': missing ')'", position)
            if closing[0] != RPAREN:
                raise self._error(f"Expected ')', got {closing[1]!r}", closing[2])
            self.consume()
            return node

        if kind == WORD:
            self.consume()
            return self._leaf(text)

        if kind == RPAREN:
            raise self._error("Missing operand before ')'", position)
        raise self._error(f"Missing operand before {text!r}", position)

    def _leaf(self, word: str) -> Node:
        # A word can normalize into several terms ("e-mail") which must all match
        terms = self.tokenizer.normalize(word)
        if not terms:
            return Term("")
        node: Node = Term(terms[0])
        for term in terms[1:]:
            node = And(node, Term(term))
        return node


def parse(query: str, tokenizer: Optional[Tokenizer] = None) -> Node:
    """Parse `query` into an AST, raising QuerySyntaxError when it is malformed."""
    if query is None:
        raise QuerySyntaxError("Empty query", "", 0)
    return QueryParser(query, tokenizer).parse()


# --------------------------------------------------------------------------- #
#  Proximity queries: "x y z /k"                                              #
# --------------------------------------------------------------------------- #
def is_proximity_query(query: str) -> bool:
    return query is not None and any(word.startswith("/") for word in query.split())


def parse_proximity(query: str, tokenizer: Optional[Tokenizer] = None) -> Tuple[List[str], int]:
    """
    Split a proximity query into its terms and window k. Consecutive terms must
    occur within k positions of each other. "/k" may appear anywhere; an
    unreadable or negative k falls back to the default window.
    """
    tokenizer = tokenizer or Tokenizer()
    terms: List[str] = []
    k = config.PROXIMITY_K
    for kind, text, position in lex(query or ""):
        if kind != WORD:
            raise QuerySyntaxError(
                f"{text!r} is not allowed in a proximity query", query, position
            )
        if text.startswith("/"):
            try:
                k = int(text[1:])
            except ValueError:
                k = config.PROXIMITY_K
            if k < 0:
                k = config.PROXIMITY_K
            continue
        terms.extend(tokenizer.normalize(text))
    if not terms:
        raise QuerySyntaxError("Empty query", query or "", 0)
    return terms, k
