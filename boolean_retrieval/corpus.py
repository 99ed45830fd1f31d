"""
Corpus loading: turns a folder of text files or a CSV file into (title, text)
pairs, in a stable order that becomes the doc id order.
"""
import logging
import os
from typing import Iterable, List, Set, Tuple

import pandas as pd

from . import config

log = logging.getLogger(__name__)


def list_dir_sorted(folder: str) -> List[str]:
    """
    Regular files of `folder`, shortest path first, ties broken
    lexicographically (so 2.txt comes before 10.txt).
    """
    if not os.path.isdir(folder):
        raise FileNotFoundError(f"Directory not found: {folder}")
    files = [os.path.join(folder, name) for name in os.listdir(folder)]
    files = [p for p in files if os.path.isfile(p)]
    return sorted(files, key=lambda p: (len(p), p))


def read_txt(path: str) -> Tuple[str, str]:
    """Read text file: returns (title, content). Undecodable bytes are dropped."""
    with open(path, "r", encoding="utf-8", errors="ignore") as f:
        return os.path.basename(path), f.read()


def load_folder(folder: str, suffixes: Iterable[str] = config.DOCUMENT_SUFFIXES) -> List[Tuple[str, str]]:
    suffixes = tuple(suffixes)
    docs = [
        read_txt(p) for p in list_dir_sorted(folder)
        if not suffixes or p.endswith(suffixes)
    ]
    log.info("Loaded %d documents from %s", len(docs), folder)
    return docs


def load_csv(
    path: str,
    text_column: str = config.CSV_TEXT_COLUMN,
    title_column: str = config.CSV_TITLE_COLUMN,
) -> List[Tuple[str, str]]:
    """
    One document per CSV row, in file order. Missing cells become empty
    strings; a missing title column falls back to the row number.
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(f"File not found: {path}")
    df = pd.read_csv(path)
    if text_column not in df.columns:
        raise ValueError(f"Column '{text_column}' not found in {path}")

    texts = df[text_column].fillna("").astype(str)
    if title_column in df.columns:
        titles = df[title_column].fillna("").astype(str)
    else:
        titles = pd.Series([str(i) for i in range(len(df))])

    docs = list(zip(titles.tolist(), texts.tolist()))
    log.info("Loaded %d documents from %s", len(docs), path)
    return docs


def load_stopwords(path: str) -> Set[str]:
    """Newline separated stopword file; blank lines are ignored."""
    with open(path, "r", encoding="utf-8") as f:
        return {line.strip().lower() for line in f if line.strip()}
