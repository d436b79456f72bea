"""Domain events for the SearchHistory aggregate."""

from protean.fields import Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="SearchHistory")
class SearchRecorded:
    """A search term was added to the top of a session's recent searches."""

    __version__ = 1

    history_id = Identifier(required=True)
    session_id = String(required=True)
    term = String(required=True)


@storefront.event(part_of="SearchHistory")
class SearchHistoryCleared:
    """A session's recent searches were cleared."""

    __version__ = 1

    history_id = Identifier(required=True)
    session_id = String(required=True)
