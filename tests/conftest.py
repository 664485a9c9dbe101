"""Shared fixtures: small snapshot pairs in the shapes report sections use."""

from typing import Tuple

import pytest

from configdiff.model import ColumnType, Snapshot, Table


def build_flat_pair() -> Tuple[Snapshot, Snapshot]:
    """One table ``Settings(id int, a, b)`` keyed on id, every column shown."""
    pilot = Snapshot("Settings")
    pilot.add_table(Table("Settings", [("id", ColumnType.INTEGER), "a", "b"], primary_key=(0,)))
    pilot.layout.add(0, 0, sort_order=0)
    pilot.layout.add(0, 1)
    pilot.layout.add(0, 2)
    return pilot, pilot.clone_schema()


def build_hierarchy_pair() -> Tuple[Snapshot, Snapshot]:
    """Three levels: Profiles -> Steps -> Partitions.

    Visible cells per output row: profile, description | step, kind | partition.
    """
    pilot = Snapshot("Run Profiles")
    pilot.add_table(Table("Profiles", ["profile", "description"], primary_key=(0,)))
    pilot.add_table(Table("Steps", ["profile", "step", "kind"], primary_key=(0, 1)))
    pilot.add_table(Table("Partitions", ["profile", "step", "partition"], primary_key=(0, 1, 2)))
    pilot.relate(0, [0], [0])
    pilot.relate(1, [0, 1], [0, 1])

    layout = pilot.layout
    layout.add(0, 0, sort_order=0)
    layout.add(0, 1)
    layout.add(1, 0, hidden=True)
    layout.add(1, 1, sort_order=0)
    layout.add(1, 2)
    layout.add(2, 0, hidden=True)
    layout.add(2, 1, hidden=True)
    layout.add(2, 2, sort_order=0)
    return pilot, pilot.clone_schema()


def fill_hierarchy(snapshot: Snapshot, partition_a2: str = "p2") -> Snapshot:
    """Profile A: step s1 (partitions p1, *partition_a2*), step s2 (p3).
    Profile B: step s1 (p1).
    """
    profiles, steps, partitions = snapshot.tables
    profiles.add_row(["A", "Full import"])
    profiles.add_row(["B", "Delta sync"])
    steps.add_row(["A", "s1", "import"])
    steps.add_row(["A", "s2", "sync"])
    steps.add_row(["B", "s1", "sync"])
    partitions.add_row(["A", "s1", "p1"])
    partitions.add_row(["A", "s1", partition_a2])
    partitions.add_row(["A", "s2", "p3"])
    partitions.add_row(["B", "s1", "p1"])
    return snapshot


@pytest.fixture
def flat_pair() -> Tuple[Snapshot, Snapshot]:
    return build_flat_pair()


@pytest.fixture
def hierarchy_pair() -> Tuple[Snapshot, Snapshot]:
    return build_hierarchy_pair()
