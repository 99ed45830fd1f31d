MIN_TOKEN_LEN = 1  # Tokens shorter than this are dropped
REMOVE_STOPWORDS = False  # Keep stopwords by default, "the" is a searchable term

DOCUMENT_SUFFIXES = (".txt",)  # Files picked up when indexing a folder
CSV_TEXT_COLUMN = "plot"  # Column holding the document text in CSV corpora
CSV_TITLE_COLUMN = "title"  # Column holding the document title in CSV corpora

SUMMARY_LENGTH = 50  # Characters of document text shown next to a hit

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

MAX_QUERY_DEPTH = 100  # Deepest parenthesis nesting accepted in a query
PROXIMITY_K = 1  # Default window of a "x y /k" proximity query
