"""
Keyword indexing and query engine package.

This package provides the pure-Python search core:
- analyzers: Tokenizer and filters (lowercase, lemma, short word, stopword)
- lexicon: Stopwords, lemma table and frequency dictionary loading
- fuzzy: Edit-distance spelling correction
- keyword_index: Weighted insertion and ranked multi-term search
- sqlite_storage: SQLite schema, migrations and statements
"""
