"""Tests for the subscription registry."""

import threading

from newsbridge.subscriptions.registry import SubscriptionRegistry


class TestSubscriptionRegistry:
    def test_starts_empty(self, registry):
        assert registry.is_empty()
        assert registry.list_all() == frozenset()
        assert len(registry) == 0

    def test_subscribe_is_idempotent(self, registry):
        assert registry.subscribe("c1") is True
        assert registry.subscribe("c1") is False
        assert registry.list_all() == {"c1"}
        assert len(registry) == 1

    def test_unsubscribe_is_idempotent(self, registry):
        registry.subscribe("c1")
        assert registry.unsubscribe("c1") is True
        assert registry.unsubscribe("c1") is False
        assert registry.is_empty()

    def test_unsubscribe_absent_chat(self, registry):
        """Removing a chat that never subscribed is not an error."""
        assert registry.unsubscribe("nobody") is False
        assert registry.is_empty()

    def test_contains(self, registry):
        registry.subscribe("c1")
        assert "c1" in registry
        assert "c2" not in registry

    def test_snapshot_not_affected_by_later_changes(self, registry):
        registry.subscribe("c1")
        registry.subscribe("c2")
        snapshot = registry.list_all()

        registry.unsubscribe("c1")
        registry.subscribe("c3")

        assert snapshot == {"c1", "c2"}
        assert registry.list_all() == {"c2", "c3"}

    def test_concurrent_subscribes(self):
        registry = SubscriptionRegistry()

        def worker(offset):
            for i in range(200):
                registry.subscribe(f"chat-{offset + i}")

        threads = [threading.Thread(target=worker, args=(n * 100,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        # Ranges overlap: 0-199, 100-299, 200-399, 300-499
        assert len(registry) == 500
