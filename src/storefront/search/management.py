"""Recent search management — commands and handler."""

from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.search.history import SearchHistory


def history_for_session(session_id, create=False):
    """Look up a session's search history, optionally starting a new one."""
    repo = current_domain.repository_for(SearchHistory)
    results = repo._dao.query.filter(session_id=session_id).all()
    if results and results.items:
        return results.first
    return SearchHistory.create(session_id=session_id) if create else None


@storefront.command(part_of="SearchHistory")
class RecordSearch:
    session_id = String(required=True, max_length=255)
    term = String(required=True, max_length=255)


@storefront.command(part_of="SearchHistory")
class ClearSearchHistory:
    session_id = String(required=True, max_length=255)


@storefront.command_handler(part_of=SearchHistory)
class ManageSearchHistoryHandler:
    @handle(RecordSearch)
    def record_search(self, command):
        history = history_for_session(command.session_id, create=True)
        terms = history.record(command.term)
        current_domain.repository_for(SearchHistory).add(history)
        return terms

    @handle(ClearSearchHistory)
    def clear_search_history(self, command):
        history = history_for_session(command.session_id)
        if history is None:
            return
        history.clear()
        current_domain.repository_for(SearchHistory).add(history)
