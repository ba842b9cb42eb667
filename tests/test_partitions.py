"""Tests for partition state and poll-to-poll deltas."""

import pytest

from diskpanel.monitors.partitions import (
    MissingCountersError,
    Partition,
    PartitionStore,
    build_partitions,
    delta,
    lookup_counters,
)


class TestDelta:
    """Tests for the clamped counter difference."""

    @pytest.mark.parametrize("current,previous,expected", [
        (0, 0, 0),
        (1500, 1000, 500),
        (2 ** 64 - 1, 0, 2 ** 64 - 1),
        (10, 10, 0),
    ])
    def test_non_decreasing_counter(self, current, previous, expected):
        assert delta(current, previous) == expected

    def test_counter_reset_yields_zero(self):
        assert delta(100, 5000) == 0


class TestBuildPartitions:
    """Tests for joining counters with usage."""

    def test_delta_against_prior_poll(self, make_result):
        prior, _ = build_partitions({}, make_result({"sda": (1000, 500)}, [("/dev/sda", "/")]))
        current, _ = build_partitions(prior, make_result({"sda": (1500, 700)}, [("/dev/sda", "/")]))

        sda = current["sda"]
        assert sda.bytes_read == 1500
        assert sda.bytes_written == 700
        assert sda.bytes_read_recently == 500
        assert sda.bytes_written_recently == 200

    def test_first_poll_has_zero_deltas(self, make_result):
        current, _ = build_partitions({}, make_result({"sdb": (200, 100)}, [("/dev/sdb", "/srv")]))

        assert current["sdb"].bytes_read_recently == 0
        assert current["sdb"].bytes_written_recently == 0

    def test_new_device_alongside_known_one(self, make_result):
        prior, _ = build_partitions({}, make_result({"sda": (10, 10)}, [("/dev/sda", "/")]))
        current, _ = build_partitions(prior, make_result(
            {"sda": (30, 15), "sdb": (999, 999)}, [("/dev/sda", "/"), ("/dev/sdb", "/srv")]))

        assert current["sda"].bytes_read_recently == 20
        assert current["sdb"].bytes_read_recently == 0
        assert current["sdb"].bytes_written_recently == 0

    def test_counter_reset_clamps_to_zero(self, make_result):
        prior, _ = build_partitions({}, make_result({"sda": (5000, 5000)}, [("/dev/sda", "/")]))
        current, _ = build_partitions(prior, make_result({"sda": (100, 6000)}, [("/dev/sda", "/")]))

        assert current["sda"].bytes_read_recently == 0
        assert current["sda"].bytes_written_recently == 1000

    def test_write_delta_uses_write_counter(self, make_result):
        prior, _ = build_partitions({}, make_result({"sda": (100, 100)}, [("/dev/sda", "/")]))
        current, _ = build_partitions(prior, make_result({"sda": (900, 100)}, [("/dev/sda", "/")]))

        assert current["sda"].bytes_read_recently == 800
        assert current["sda"].bytes_written_recently == 0

    def test_device_without_counters_is_skipped(self, make_result):
        result = make_result({"sda": (1, 1), "sdc": (2, 2)},
                             [("/dev/sda", "/"), ("/dev/sdb", "/srv"), ("/dev/sdc", "/data")])

        current, skipped = build_partitions({}, result)

        assert sorted(current) == ["sda", "sdc"]
        assert skipped == ["sdb"]

    def test_alias_joins_encrypted_root(self, make_result):
        result = make_result({"dm-0": (10, 20)}, [("/dev/mapper/cryptroot", "/")])

        current, skipped = build_partitions({}, result)

        assert list(current) == ["dm-0"]
        assert current["dm-0"].mountpoint == "/"
        assert skipped == []

    def test_duplicate_mount_keeps_first(self, make_result):
        result = make_result({"sda": (1, 1)}, [("/dev/sda", "/"), ("/dev/sda", "/var/lib/docker")])

        current, _ = build_partitions({}, result)

        assert len(current) == 1
        assert current["sda"].mountpoint == "/"

    def test_usage_fields_carried_over(self, make_result):
        result = make_result({"sda": (1, 1)}, [("/dev/sda", "/")], percent=42.0, free=4096)

        current, _ = build_partitions({}, result)

        assert current["sda"].used_percent == 42.0
        assert current["sda"].bytes_free == 4096


class TestLookupCounters:

    def test_missing_device_raises_lookup_error(self):
        with pytest.raises(LookupError) as excinfo:
            lookup_counters({}, "sdz")
        assert isinstance(excinfo.value, MissingCountersError)
        assert excinfo.value.name == "sdz"


class TestPartitionStore:
    """Tests for PartitionStore state replacement."""

    def test_update_replaces_state(self, make_result):
        store = PartitionStore()
        store.update(make_result({"sda": (1, 1), "sdb": (1, 1)}, [("/dev/sda", "/"), ("/dev/sdb", "/srv")]))
        store.update(make_result({"sda": (5, 5)}, [("/dev/sda", "/")]))

        assert list(store.snapshot()) == ["sda"]
        assert store.snapshot()["sda"].bytes_read_recently == 4

    def test_vanished_device_has_fresh_baseline_on_return(self, make_result):
        store = PartitionStore()
        store.update(make_result({"sdb": (100, 100)}, [("/dev/sdb", "/srv")]))
        store.update(make_result({}, [("/dev/sdb", "/srv")]))
        assert len(store) == 0
        assert store.skipped == ["sdb"]

        store.update(make_result({"sdb": (300, 300)}, [("/dev/sdb", "/srv")]))
        assert store.snapshot()["sdb"].bytes_read_recently == 0

    def test_snapshot_is_read_only(self, make_result):
        store = PartitionStore()
        store.update(make_result({"sda": (1, 1)}, [("/dev/sda", "/")]))

        with pytest.raises(TypeError):
            store.snapshot()["sdz"] = None

    def test_old_snapshot_unaffected_by_update(self, make_result):
        store = PartitionStore()
        store.update(make_result({"sda": (1, 1)}, [("/dev/sda", "/")]))
        before = store.snapshot()

        store.update(make_result({"sdc": (1, 1)}, [("/dev/sdc", "/data")]))

        assert list(before) == ["sda"]
        assert list(store.snapshot()) == ["sdc"]


def test_partition_to_dict():
    partition = Partition("sda", "/", 10, 20, 1, 2, 42.0, 4096)
    assert partition.to_dict() == {
        "name": "sda",
        "mountpoint": "/",
        "bytes_read": 10,
        "bytes_written": 20,
        "bytes_read_recently": 1,
        "bytes_written_recently": 2,
        "used_percent": 42.0,
        "bytes_free": 4096,
    }
