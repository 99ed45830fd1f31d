"""
Boolean Retrieval - command line entry point

    boolean-retrieval data/ -q "cat AND NOT dog" -q "(dog OR cat) AND sat"
    boolean-retrieval data/ -q "cat sat /2"
    boolean-retrieval movies.csv --csv-text-column plot --stats
"""
import argparse
import json
import logging
import os
import sys
from typing import List, Optional

from . import config
from .corpus import load_csv, load_folder, load_stopwords
from .indexer import IndexBuilder
from .query_parser import QuerySyntaxError
from .query_processor import QueryProcessor
from .tokenizer import Tokenizer

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="boolean-retrieval",
        description="Answer AND/OR/NOT keyword queries over a document collection.",
    )
    parser.add_argument("corpus", help="Folder of text files or a CSV file")
    parser.add_argument("-q", "--query", action="append", default=[],
                        help="Boolean query, or \"x y /k\" proximity query (repeatable)")
    parser.add_argument("--csv-text-column", default=config.CSV_TEXT_COLUMN)
    parser.add_argument("--csv-title-column", default=config.CSV_TITLE_COLUMN)
    parser.add_argument("--remove-stopwords", action="store_true",
                        default=config.REMOVE_STOPWORDS,
                        help="Drop English stopwords while indexing")
    parser.add_argument("--stopwords", metavar="FILE",
                        help="Extra stopwords, one per line (implies --remove-stopwords)")
    parser.add_argument("--min-token-len", type=int, default=config.MIN_TOKEN_LEN)
    parser.add_argument("--stats", action="store_true", help="Print index statistics")
    parser.add_argument("--dump", action="store_true", help="Print the index as JSON")
    parser.add_argument("--progress", action="store_true", help="Show an indexing progress bar")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    return parser


def _summary(text: str) -> str:
    text = " ".join(text.split())
    if len(text) > config.SUMMARY_LENGTH:
        return text[:config.SUMMARY_LENGTH] + "..."
    return text


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format=config.LOG_FORMAT)

    custom_stopwords = None
    if args.stopwords:
        try:
            custom_stopwords = load_stopwords(args.stopwords)
        except (OSError, UnicodeDecodeError) as e:
            parser.error(str(e))

    tokenizer = Tokenizer(
        remove_stopwords=args.remove_stopwords or bool(custom_stopwords),
        custom_stopwords=custom_stopwords,
        min_token_len=args.min_token_len,
    )

    try:
        if os.path.isdir(args.corpus):
            docs = load_folder(args.corpus)
        else:
            docs = load_csv(args.corpus, args.csv_text_column, args.csv_title_column)
    except (OSError, ValueError) as e:
        parser.error(str(e))

    builder = IndexBuilder(tokenizer)
    builder.ingest_all(
        (text for _, text in docs),
        titles=(title for title, _ in docs),
        progress=args.progress,
    )
    index = builder.build()

    if args.stats:
        for key, value in index.get_statistics().items():
            print(f"{key}: {value:,.1f}" if isinstance(value, float) else f"{key}: {value:,}")

    if args.dump:
        print(json.dumps(index.to_dict(), indent=2))

    qp = QueryProcessor(index, tokenizer)
    failed = False
    for query in args.query:
        try:
            hits = qp.run(query)
        except QuerySyntaxError as e:
            print(f"Invalid query {query!r}: {e}", file=sys.stderr)
            failed = True
            continue

        print(f"\n{query}  ({len(hits)} hits)")
        for doc_id in hits:
            title, text = docs[doc_id]
            print(f"  {doc_id:4d}  {title}  {_summary(text)}")

    return 2 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
