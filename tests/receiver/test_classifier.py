"""Tests for the persistable event-type allow-list."""

import pytest

from services.receiver.app.core.classifier import (
    DEFAULT_PERSISTABLE_EVENT_TYPES,
    EventClassifier,
)


class TestEventClassifier:
    """Tests for EventClassifier.is_persistable."""

    @pytest.mark.parametrize("event_type", ["push", "issue_comment", "pull_request"])
    def test_default_types_are_persistable(self, event_type):
        assert EventClassifier().is_persistable(event_type) is True

    @pytest.mark.parametrize(
        "event_type", ["ping", "", "issues", "workflow_run", "PUSH", " push", "pull_request "]
    )
    def test_other_types_are_not_persistable(self, event_type):
        assert EventClassifier().is_persistable(event_type) is False

    def test_default_allow_list_has_exactly_three_types(self):
        assert DEFAULT_PERSISTABLE_EVENT_TYPES == {"push", "issue_comment", "pull_request"}
        assert isinstance(DEFAULT_PERSISTABLE_EVENT_TYPES, frozenset)

    def test_injected_allow_list_replaces_default(self):
        classifier = EventClassifier(["issues", "release"])

        assert classifier.is_persistable("issues") is True
        assert classifier.is_persistable("release") is True
        assert classifier.is_persistable("push") is False

    def test_injected_allow_list_is_copied(self):
        allowed = ["push"]
        classifier = EventClassifier(allowed)
        allowed.append("ping")

        assert classifier.is_persistable("ping") is False
        assert classifier.persistable_event_types == frozenset({"push"})

    def test_empty_allow_list_persists_nothing(self):
        classifier = EventClassifier([])

        assert classifier.is_persistable("push") is False
