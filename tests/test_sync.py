"""Tests for the synchronization protocol."""

from arena.client import state as S
from arena.client.models import HOTBAR, INVENTORY, Petal
from arena.client.sync import SyncProtocol, snapshot_seq

from conftest import petal, player, update


class TestOutbound:
    """Tests for flush and the outbound intents."""

    def test_flush_sends_both_containers(self, state, sync, net):
        state.equipment.pick_up(Petal(id="a", type="fire", tier=2))

        assert sync.flush() is True

        assert len(net.sent) == 1
        msg = net.sent[0]
        assert msg["type"] == "updatePetals"
        assert msg["hotbar"] == [None] * 5
        assert msg["inventory"][0]["id"] == "a"
        assert msg["inventory"][1:] == [None] * 9
        assert state.equipment.dirty is False

    def test_flush_when_clean_sends_nothing(self, sync, net):
        assert sync.flush() is False
        assert net.sent == []

    def test_closed_channel_keeps_store_dirty(self, state, sync, net):
        net.close()
        state.equipment.pick_up(Petal(id="a"))

        assert sync.flush() is False
        assert net.sent == []
        assert state.equipment.dirty is True

    def test_combine_needs_exactly_three(self, sync, net):
        assert sync.request_combine([0, 4]) is False
        assert sync.request_combine([0, 1, 2, 3]) is False
        assert sync.request_combine([1, 1, 2]) is False
        assert net.sent == []

    def test_combine_sends_sorted_indices(self, state, sync, net):
        state.equipment.apply_authoritative([], [petal(f"i{i}") for i in range(10)])

        assert sync.request_combine({7, 2, 5}) is True
        assert net.sent == [{"type": "combinePetals", "indices": [2, 5, 7]}]

    def test_combine_rejects_out_of_range(self, state, sync, net):
        state.equipment.apply_authoritative([], [petal(f"i{i}") for i in range(10)])
        assert sync.request_combine([0, 1, 10]) is False
        assert net.sent == []

    def test_combine_rejects_empty_slot(self, state, sync, net):
        state.equipment.apply_authoritative([], [petal("a"), petal("b")])

        assert sync.request_combine([0, 1, 2]) is False
        assert net.sent == []

    def test_set_name_and_chat_reject_blank(self, sync, net):
        assert sync.send_set_name("   ") is False
        assert sync.send_chat("") is False
        assert sync.send_set_name(" Bloom ") is True
        assert sync.send_chat("hi") is True
        assert net.sent == [
            {"type": "setName", "name": "Bloom"},
            {"type": "chat", "message": "hi"},
        ]


class TestInbound:
    """Tests for handle_message."""

    def test_welcome_sets_player_id(self, state, sync):
        assert sync.handle_message({"type": "welcome", "id": 42}) is True
        assert state.player_id == "42"
        assert state.status == S.STATUS_CONNECTED

    def test_init_alias(self, state, sync):
        sync.handle_message({"type": "init", "id": "abc"})
        assert state.player_id == "abc"

    def test_snapshot_applies_own_equipment(self, joined, sync):
        sync.handle_message(update(1, players=[player("me", hotbar=[petal("a")], inventory=[None, petal("b")])]))

        assert joined.equipment.get(HOTBAR, 0).id == "a"
        assert joined.equipment.get(INVENTORY, 1).id == "b"
        assert "me" in joined.world.current.players

    def test_snapshot_overwrites_optimistic_edit(self, joined, sync):
        sync.handle_message(update(1, players=[player("me", inventory=[petal("a")])]))
        joined.equipment.move_item(INVENTORY, 0, HOTBAR, 3)

        sync.handle_message(update(2, players=[player("me", inventory=[petal("a")])]))

        assert joined.equipment.get(INVENTORY, 0).id == "a"
        assert joined.equipment.get(HOTBAR, 3) is None

    def test_stale_snapshot_discarded(self, joined, sync):
        """Sequence 5 arriving after 7 changes nothing."""
        sync.handle_message(update(7, players=[player("me", x=70, inventory=[petal("new")])]))
        world_before = joined.world.current
        hotbar_before, inventory_before = joined.equipment.hotbar, joined.equipment.inventory

        assert sync.handle_message(update(5, players=[player("me", x=50, inventory=[petal("old")])])) is False

        assert joined.world.current is world_before
        assert joined.equipment.hotbar == hotbar_before
        assert joined.equipment.inventory == inventory_before
        assert sync.last_seq == 7

    def test_repeated_sequence_discarded(self, joined, sync):
        sync.handle_message(update(3, players=[player("me")]))
        assert sync.handle_message(update(3, players=[])) is False
        assert "me" in joined.world.current.players

    def test_tick_key_orders_snapshots(self, joined, sync):
        sync.handle_message({"type": "state", "tick": 10, "players": [player("me", x=1)]})
        sync.handle_message({"type": "state", "tick": 9, "players": [player("me", x=2)]})
        assert joined.world.current.players["me"].x == 1

    def test_unsequenced_snapshots_apply_in_arrival_order(self, joined, sync):
        sync.handle_message(update(players=[player("me", x=1)]))
        sync.handle_message(update(players=[player("me", x=2)]))
        assert joined.world.current.players["me"].x == 2

    def test_missing_own_record_leaves_equipment(self, joined, sync):
        sync.handle_message(update(1, players=[player("me", inventory=[petal("a")])]))

        sync.handle_message(update(2, players=[player("other")]))

        assert joined.equipment.get(INVENTORY, 0).id == "a"
        assert joined.local_player() is None

    def test_snapshot_before_welcome_touches_only_world(self, state, sync):
        sync.handle_message(update(1, players=[player("me", inventory=[petal("a")])]))
        assert state.equipment.item_count() == 0
        assert "me" in state.world.current.players

    def test_chat_is_logged(self, state, sync):
        sync.handle_message({"type": "chat", "from": "Rose", "message": "hello"})
        sync.handle_message({"type": "chat", "message": "anon"})
        assert list(state.chat) == [("Rose", "hello"), ("Anonymous", "anon")]

    def test_respawn_shows_notice(self, state, sync):
        state.now = 10.0
        sync.handle_message({"type": "respawn"})
        assert state.showing_respawn()
        assert state.respawned is True

    def test_disconnect_stops_sends(self, state, sync, net):
        sync.handle_message({"type": "_disconnect", "error": "gone"})

        assert state.status == S.STATUS_DISCONNECTED
        assert net.connected is False
        assert sync.send_chat("hello?") is False

    def test_failed_connect_reports_error(self, state, sync):
        sync.handle_message({"type": "_disconnect", "error": "refused", "failed": True})
        assert state.status == S.STATUS_ERROR

    def test_unknown_and_malformed_ignored(self, state, sync):
        assert sync.handle_message({"type": "fireworks"}) is False
        assert sync.handle_message(["update"]) is False
        assert sync.handle_message({"type": "welcome"}) is False
        assert state.player_id is None


class TestSnapshotSeq:
    def test_key_precedence(self):
        assert snapshot_seq({"seq": 3, "tick": 9}) == 3
        assert snapshot_seq({"timestamp": 1700000000.5}) == 1700000000.5
        assert snapshot_seq({}) is None
        assert snapshot_seq({"seq": "soon"}) is None

    def test_unparseable_key_falls_through(self):
        assert snapshot_seq({"seq": "soon", "tick": 4}) == 4
        assert snapshot_seq({"seq": [1], "timestamp": "12.5"}) == 12.5


def test_round_trip_through_server_echo(state, net):
    """What we send, echoed back as authoritative data, reproduces the store."""
    sync = SyncProtocol(state, net)
    sync.handle_message({"type": "welcome", "id": "me"})
    sync.handle_message(update(1, players=[player("me", inventory=[petal("a", "ice", 2, damage=7, cooldown=2.5)])]))
    state.equipment.move_item(INVENTORY, 0, HOTBAR, 4)
    sync.flush()
    sent = net.sent[-1]
    assert sent["hotbar"][4]["damage"] == 7
    assert sent["hotbar"][4]["cooldown"] == 2.5

    before = (state.equipment.hotbar, state.equipment.inventory)
    sync.handle_message(update(2, players=[player("me", hotbar=sent["hotbar"], inventory=sent["inventory"])]))

    assert (state.equipment.hotbar, state.equipment.inventory) == before
