"""Search history aggregate — a session's recent searches.

Most recent first, de-duplicated case-insensitively and capped at
``MAX_RECENT_SEARCHES``. Suggestions mix the configured trending searches
with the session's own history.
"""

import json

from protean.fields import String, Text

from storefront.domain import storefront
from storefront.search.events import SearchHistoryCleared, SearchRecorded
from storefront.utils.settings import custom_setting

MIN_SUGGESTION_CHARS = 2
MAX_SUGGESTIONS = 5


@storefront.aggregate
class SearchHistory:
    session_id = String(required=True, max_length=255)
    terms = Text()  # JSON array, most recent first

    @classmethod
    def create(cls, session_id):
        return cls(session_id=session_id, terms=json.dumps([]))

    @property
    def recent(self) -> list[str]:
        return json.loads(self.terms) if self.terms else []

    def record(self, term):
        """Put a term at the top of the history. Blank terms are ignored."""
        term = (term or "").strip()
        if not term:
            return self.recent

        terms = [t for t in self.recent if t.lower() != term.lower()]
        terms = [term, *terms][: custom_setting("MAX_RECENT_SEARCHES")]
        self.terms = json.dumps(terms)

        self.raise_(
            SearchRecorded(
                history_id=str(self.id),
                session_id=self.session_id,
                term=term,
            )
        )
        return terms

    def clear(self):
        self.terms = json.dumps([])
        self.raise_(
            SearchHistoryCleared(
                history_id=str(self.id),
                session_id=self.session_id,
            )
        )

    def suggestions(self, term) -> list[str]:
        term = (term or "").strip().lower()
        if len(term) < MIN_SUGGESTION_CHARS:
            return []

        candidates = [*custom_setting("TRENDING_SEARCHES"), *self.recent]
        matches = []
        seen = set()
        for candidate in candidates:
            key = candidate.lower()
            if term in key and key not in seen:
                seen.add(key)
                matches.append(candidate)
        return matches[:MAX_SUGGESTIONS]
