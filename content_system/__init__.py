from .directory import (
    DirectoryEntry,
    list_dir,
    list_directory_contents,
    random_file,
    sort_entries,
)
from .vocabulary import (
    VocabularyDeck,
    VocabularyHeader,
    extract_vocabulary_fields,
    load_vocabulary_deck,
    parse_vocabulary_header,
    split_frontmatter,
)

__all__ = [
    "DirectoryEntry",
    "list_directory_contents",
    "list_dir",
    "random_file",
    "sort_entries",
    "VocabularyDeck",
    "VocabularyHeader",
    "extract_vocabulary_fields",
    "load_vocabulary_deck",
    "parse_vocabulary_header",
    "split_frontmatter",
]
