"""Free-text search over configured record fields."""

from typing import Iterable, List

from job_portal.models import Record


class SearchIndexer:
    """
    Case-insensitive substring search across a list of dotted field paths.

    No stemming or fuzzy matching: a record matches when the trimmed query
    appears verbatim (ignoring case) in at least one field.
    """

    def __init__(self, fields: Iterable[str]):
        self.fields: List[str] = list(fields)
        if not self.fields:
            raise ValueError("SearchIndexer needs at least one field")

    def extract(self, record: Record) -> List[str]:
        """Lower-cased text of every configured field that has a value."""
        texts = []
        for path in self.fields:
            value = record.get(path)
            if value is None:
                continue
            texts.append(str(value).lower())
        return texts

    def matches(self, query: str, record: Record) -> bool:
        """True if ``query`` is empty or found in any configured field."""
        needle = (query or "").strip().lower()
        if not needle:
            return True
        return any(needle in text for text in self.extract(record))
