"""Tests for order status descriptors and the order timeline."""

from storefront.order.status import (
    PROGRESSION,
    TERMINAL_STATUSES,
    OrderStatus,
    StatusDescriptor,
    all_descriptors,
    build_timeline,
    describe_status,
)


class TestOrderStatus:
    def test_parse_known_value(self):
        assert OrderStatus.parse("out_for_delivery") == OrderStatus.OUT_FOR_DELIVERY

    def test_parse_matches_exactly(self):
        assert OrderStatus.parse("DELIVERED") == OrderStatus.PLACED
        assert OrderStatus.parse(" delivered") == OrderStatus.PLACED

    def test_unknown_value_falls_back_to_placed(self):
        assert OrderStatus.parse("teleported") == OrderStatus.PLACED

    def test_missing_value_falls_back_to_placed(self):
        assert OrderStatus.parse(None) == OrderStatus.PLACED

    def test_terminal_statuses(self):
        assert TERMINAL_STATUSES == {OrderStatus.DELIVERED, OrderStatus.CANCELLED}

    def test_progression_excludes_cancelled(self):
        assert OrderStatus.CANCELLED not in PROGRESSION
        assert PROGRESSION[0] == OrderStatus.PLACED
        assert PROGRESSION[-1] == OrderStatus.DELIVERED


class TestDescribeStatus:
    def test_placed(self):
        descriptor = describe_status("placed")
        assert isinstance(descriptor, StatusDescriptor)
        assert descriptor.label == "Order Placed"
        assert descriptor.color == "bg-blue-100 text-blue-700"
        assert descriptor.icon == "clock"

    def test_out_for_delivery(self):
        descriptor = describe_status(OrderStatus.OUT_FOR_DELIVERY)
        assert descriptor.label == "Out for Delivery"
        assert descriptor.icon == "truck"

    def test_cancelled(self):
        descriptor = describe_status("cancelled")
        assert descriptor.label == "Cancelled"
        assert descriptor.color == "bg-red-100 text-red-700"
        assert descriptor.icon == "x-circle"

    def test_unknown_status_renders_as_placed(self):
        descriptor = describe_status("lost-in-space")
        assert descriptor.status == "placed"
        assert descriptor.label == "Order Placed"

    def test_differently_cased_status_renders_as_placed(self):
        assert describe_status("Cancelled").label == "Order Placed"

    def test_every_status_has_a_descriptor(self):
        descriptors = all_descriptors()
        assert [d.status for d in descriptors] == [s.value for s in OrderStatus]
        assert all(d.label and d.color and d.icon and d.description for d in descriptors)


class TestBuildTimeline:
    def test_new_order_timeline(self):
        steps = build_timeline("placed")
        assert [s.status for s in steps] == [s.value for s in PROGRESSION]
        assert steps[0].completed and steps[0].current
        assert not any(s.completed for s in steps[1:])

    def test_in_progress_timeline(self):
        steps = build_timeline("picking")
        completed = [s.status for s in steps if s.completed]
        assert completed == ["placed", "confirmed", "picking"]
        current = [s.status for s in steps if s.current]
        assert current == ["picking"]

    def test_delivered_timeline_is_fully_completed(self):
        steps = build_timeline("delivered")
        assert all(s.completed for s in steps)
        assert steps[-1].current

    def test_timeline_uses_history_timestamps_and_notes(self):
        history = [
            {"status": "placed", "timestamp": "2024-03-09T10:00:00+00:00", "note": "Order placed successfully"},
            {"status": "confirmed", "timestamp": "2024-03-09T10:02:00+00:00"},
        ]
        steps = build_timeline("confirmed", history)
        assert steps[0].timestamp == "2024-03-09T10:00:00+00:00"
        assert steps[0].note == "Order placed successfully"
        assert steps[1].timestamp == "2024-03-09T10:02:00+00:00"
        assert steps[2].timestamp is None

    def test_cancelled_timeline_shows_history_up_to_cancellation(self):
        history = [
            {"status": "placed", "timestamp": "2024-03-09T10:00:00+00:00"},
            {"status": "confirmed", "timestamp": "2024-03-09T10:02:00+00:00"},
            {"status": "cancelled", "timestamp": "2024-03-09T10:05:00+00:00", "note": "Out of stock"},
        ]
        steps = build_timeline("cancelled", history)
        assert [s.status for s in steps] == ["placed", "confirmed", "cancelled"]
        assert all(s.completed for s in steps)
        assert steps[-1].current
        assert steps[-1].label == "Order Cancelled"
        assert steps[-1].note == "Out of stock"

    def test_cancelled_timeline_ignores_entries_after_cancellation(self):
        history = [
            {"status": "placed"},
            {"status": "cancelled"},
            {"status": "confirmed"},
        ]
        steps = build_timeline("cancelled", history)
        assert [s.status for s in steps] == ["placed", "cancelled"]

    def test_cancelled_without_recorded_cancellation(self):
        steps = build_timeline("cancelled", [{"status": "placed"}])
        assert [s.status for s in steps] == ["placed", "cancelled"]
        assert steps[-1].current
        assert not steps[0].current
