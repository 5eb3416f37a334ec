from collections.abc import Iterable

# push, issue_comment and pull_request are the only events kept in the database;
# everything else is logged and dropped.
DEFAULT_PERSISTABLE_EVENT_TYPES: frozenset[str] = frozenset(
    {"push", "issue_comment", "pull_request"}
)


class EventClassifier:
    def __init__(self, persistable: Iterable[str] | None = None) -> None:
        if persistable is None:
            self._persistable = DEFAULT_PERSISTABLE_EVENT_TYPES
        else:
            self._persistable = frozenset(persistable)

    @property
    def persistable_event_types(self) -> frozenset[str]:
        return self._persistable

    def is_persistable(self, event_type: str) -> bool:
        return event_type in self._persistable
