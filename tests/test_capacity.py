"""Tests for the Capacity Resolver."""

from datetime import time

from clinic_booking.services.slots import SettingsSnapshot, load_capacity_table, resolve_capacity

from conftest import MONDAY, add_capacity


class TestResolveCapacity:
    """Lookup order: date row, weekday row, default."""

    def test_default_when_no_rows(self, repo):
        config = SettingsSnapshot(default_slot_capacity=2)
        assert resolve_capacity(repo, 1, time(9, 0), config, MONDAY) == 2

    def test_weekday_row(self, db, repo):
        add_capacity(db, 3, time(9, 0), day_of_week=1)
        assert resolve_capacity(repo, 1, time(9, 0), SettingsSnapshot(), MONDAY) == 3
        assert resolve_capacity(repo, 2, time(9, 0), SettingsSnapshot()) == 1

    def test_date_row_wins(self, db, repo):
        add_capacity(db, 3, time(9, 0), day_of_week=1)
        add_capacity(db, 5, time(9, 0), specific_date=MONDAY)
        assert resolve_capacity(repo, 1, time(9, 0), SettingsSnapshot(), MONDAY) == 5

    def test_seconds_ignored(self, db, repo):
        add_capacity(db, 4, time(9, 30), day_of_week=1)
        assert resolve_capacity(repo, 1, time(9, 30, 0), SettingsSnapshot()) == 4


class TestCapacityTable:
    """load_capacity_table agrees with resolve_capacity and reports the source."""

    def test_lookup_sources(self, db, repo):
        add_capacity(db, 3, time(9, 0), day_of_week=1)
        add_capacity(db, 5, time(10, 0), specific_date=MONDAY)
        table = load_capacity_table(repo, 1, SettingsSnapshot(), MONDAY)

        assert table.lookup(time(9, 0)) == (3, "day")
        assert table.lookup(time(10, 0)) == (5, "date")
        assert table.lookup(time(11, 0)) == (1, "default")

    def test_matches_point_lookup(self, db, repo):
        add_capacity(db, 3, time(9, 0), day_of_week=1)
        add_capacity(db, 2, time(9, 0), specific_date=MONDAY)
        config = SettingsSnapshot(default_slot_capacity=4)
        table = load_capacity_table(repo, 1, config, MONDAY)

        for tod in (time(9, 0), time(9, 30), time(14, 0)):
            assert table.resolve(tod) == resolve_capacity(repo, 1, tod, config, MONDAY)
