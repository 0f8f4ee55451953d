"""Tests for observable session values."""

from weather_search.core.observable import Observable


class TestObservable:
    def test_subscribe_delivers_current_value_first(self):
        seen = []
        value = Observable(["initial"])

        value.subscribe(seen.append)

        assert seen == [["initial"]]

    def test_changes_delivered_in_order(self):
        seen = []
        value = Observable(None)
        value.subscribe(seen.append)

        value.value = "Oslo"
        value.value = None

        assert seen == [None, "Oslo", None]

    def test_unsubscribe(self):
        seen = []
        value = Observable(0)
        unsubscribe = value.subscribe(seen.append)

        unsubscribe()
        value.value = 1
        unsubscribe()  # second call is a no-op

        assert seen == [0]

    def test_failing_subscriber_does_not_block_others(self):
        seen = []
        value = Observable(0)

        def broken(new_value):
            if new_value:
                raise ValueError("render failed")

        value.subscribe(broken)
        value.subscribe(seen.append)
        value.value = 1

        assert seen == [0, 1]
        assert value.value == 1

    def test_failing_subscriber_at_subscribe_time_is_contained(self):
        """Test that the initial delivery is guarded like later ones."""
        seen = []
        value = Observable("Oslo")

        def broken(new_value):
            raise ValueError("render failed")

        unsubscribe = value.subscribe(broken)
        value.subscribe(seen.append)
        value.value = "Bergen"

        assert seen == ["Oslo", "Bergen"]
        assert callable(unsubscribe)
