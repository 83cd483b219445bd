"""
Unit tests for the anti-repetition memory.
"""

import threading

import pytest

from chromalab.services.colors.memory import AntiRepetitionMemory, circular_hue_distance


class TestCircularHueDistance:

    @pytest.mark.parametrize("h1,h2,expected", [
        (0, 0, 0), (10, 350, 20), (350, 10, 20), (0, 180, 180), (90, 270, 180), (720, 30, 30),
    ])
    def test_shortest_arc(self, h1, h2, expected):
        assert circular_hue_distance(h1, h2) == pytest.approx(expected)


class TestHexHistory:

    def test_register_and_contains_is_case_insensitive(self):
        memory = AntiRepetitionMemory()
        memory.register_hex("#abcdef")
        assert memory.contains_hex("#ABCDEF")
        assert not memory.contains_hex("#000000")

    def test_fifo_eviction(self):
        memory = AntiRepetitionMemory(hex_capacity=3)
        for hex_color in ["#000001", "#000002", "#000003", "#000004"]:
            memory.register_hex(hex_color)
        assert not memory.contains_hex("#000001")
        assert memory.recent_hexes() == ["#000002", "#000003", "#000004"]

    def test_reregistering_does_not_refresh(self):
        memory = AntiRepetitionMemory(hex_capacity=2)
        memory.register_hex("#000001")
        memory.register_hex("#000002")
        memory.register_hex("#000001")
        memory.register_hex("#000003")
        assert memory.recent_hexes() == ["#000002", "#000003"]


class TestHueHistory:

    def test_proximity_uses_circular_distance(self):
        memory = AntiRepetitionMemory()
        memory.register_hue(355)
        assert memory.hue_recently_used(10, zone=30)
        assert not memory.hue_recently_used(40, zone=30)

    def test_only_last_five_hues_count(self):
        memory = AntiRepetitionMemory(hue_capacity=5)
        for hue in [0, 60, 120, 180, 240, 300]:
            memory.register_hue(hue)
        assert not memory.hue_recently_used(0, zone=10)
        assert memory.hue_recently_used(300, zone=10)
        assert len(memory.recent_hues()) == 5


class TestSignatureHistory:

    def test_bounded_signatures(self):
        memory = AntiRepetitionMemory(signature_capacity=2)
        for sig in ["a", "b", "c"]:
            memory.register_signature(sig)
        assert not memory.contains_signature("a")
        assert memory.contains_signature("c")

    def test_clear_and_snapshot(self):
        memory = AntiRepetitionMemory()
        memory.register_hex("#111111")
        memory.register_hue(42)
        memory.register_signature("x")
        snap = memory.snapshot()
        assert snap["hexes"] == 1 and snap["signatures"] == 1
        assert snap["hues"] == [42.0]
        memory.clear()
        assert memory.snapshot()["hexes"] == 0


class TestConcurrency:

    def test_concurrent_registration_respects_capacity(self):
        memory = AntiRepetitionMemory(hex_capacity=50)

        def worker(offset):
            for i in range(200):
                memory.register_hex(f"#{offset:02X}{i:04X}")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(memory.recent_hexes()) == 50
