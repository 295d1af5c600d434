"""Unit tests for hotspot selection."""

from __future__ import annotations

import pytest

from tests.fixtures.generate_fixtures import SAMPLE_HOTSPOTS, make_hotspot
from thermal_hotspots.services.selection import (
    MAX_CLIMB_KTS,
    apply_filter,
    baseline,
    find_hotspot,
    pilot_counts,
    pilot_tags,
    reconcile_selection,
    toggle_pilot,
)


def _ids(hotspots) -> list[str]:
    return [h.id for h in hotspots]


@pytest.mark.ai_generated
class TestBaseline:
    """Tests for baseline filtering and ordering."""

    def test_excludes_above_ceiling_and_breaks_ties_by_count(self) -> None:
        """Test the documented a/b/c example."""
        hotspots = [
            make_hotspot(id="a", avg_climb_kts=18, count=5),
            make_hotspot(id="b", avg_climb_kts=9, count=2),
            make_hotspot(id="c", avg_climb_kts=9, count=7),
        ]

        assert _ids(baseline(hotspots)) == ["c", "b"]

    def test_ceiling_is_inclusive(self) -> None:
        """Test that exactly 15 kt is still shown."""
        hotspots = [make_hotspot(id="edge", avg_climb_kts=MAX_CLIMB_KTS)]

        assert _ids(baseline(hotspots)) == ["edge"]

    def test_empty(self) -> None:
        assert baseline([]) == []

    def test_sample_order(self) -> None:
        result = baseline(SAMPLE_HOTSPOTS)

        assert _ids(result) == ["hs-field", "hs-ridge", "hs-lake", "hs-quarry", "hs-tower"]
        assert all(h.avg_climb_kts <= MAX_CLIMB_KTS for h in result)
        for a, b in zip(result, result[1:]):
            assert a.avg_climb_kts > b.avg_climb_kts or (
                a.avg_climb_kts == b.avg_climb_kts and a.count >= b.count
            )

    def test_full_ties_keep_input_order(self) -> None:
        hotspots = [
            make_hotspot(id="x", avg_climb_kts=3, count=2),
            make_hotspot(id="y", avg_climb_kts=3, count=2),
            make_hotspot(id="z", avg_climb_kts=3, count=2),
        ]

        assert _ids(baseline(hotspots)) == ["x", "y", "z"]

    def test_does_not_mutate_input(self) -> None:
        hotspots = list(SAMPLE_HOTSPOTS)
        baseline(hotspots)

        assert hotspots == list(SAMPLE_HOTSPOTS)


@pytest.mark.ai_generated
class TestPilotTags:
    """Tests for pilot tag derivation."""

    def test_first_seen_order(self) -> None:
        assert pilot_tags(baseline(SAMPLE_HOTSPOTS)) == ["Kim", "Sam", "Lee"]

    def test_counts(self) -> None:
        assert pilot_counts(baseline(SAMPLE_HOTSPOTS)) == {"Kim": 2, "Sam": 2, "Lee": 1}

    def test_empty(self) -> None:
        assert pilot_tags([]) == []
        assert pilot_counts([]) == {}


@pytest.mark.ai_generated
class TestApplyFilter:
    """Tests for pilot filtering."""

    def test_empty_selection_is_identity(self) -> None:
        base = baseline(SAMPLE_HOTSPOTS)

        assert apply_filter(base, frozenset()) == base

    def test_preserves_relative_order(self) -> None:
        hotspots = [
            make_hotspot(id="0", pilot="Sam"),
            make_hotspot(id="1", pilot="Kim"),
            make_hotspot(id="2", pilot="Sam"),
        ]

        assert _ids(apply_filter(hotspots, {"Sam"})) == ["0", "2"]

    def test_only_selected_pilots(self) -> None:
        result = apply_filter(baseline(SAMPLE_HOTSPOTS), {"Kim", "Lee"})

        assert _ids(result) == ["hs-field", "hs-quarry", "hs-tower"]
        assert all(h.pilot in {"Kim", "Lee"} for h in result)

    def test_unknown_pilot_yields_nothing(self) -> None:
        assert apply_filter(baseline(SAMPLE_HOTSPOTS), {"Nobody"}) == []


@pytest.mark.ai_generated
class TestTogglePilot:
    """Tests for pilot toggling."""

    def test_adds_then_removes(self) -> None:
        selected = toggle_pilot(frozenset(), "Sam")
        assert selected == {"Sam"}

        assert toggle_pilot(selected, "Sam") == frozenset()

    @pytest.mark.parametrize(
        "selected,pilot",
        [
            (frozenset(), "Sam"),
            (frozenset({"Sam"}), "Sam"),
            (frozenset({"Kim", "Lee"}), "Sam"),
            (frozenset({"Kim"}), ""),
        ],
    )
    def test_double_toggle_is_identity(self, selected: frozenset[str], pilot: str) -> None:
        assert toggle_pilot(toggle_pilot(selected, pilot), pilot) == selected

    def test_does_not_mutate_input(self) -> None:
        selected = {"Kim"}
        toggle_pilot(selected, "Sam")

        assert selected == {"Kim"}


@pytest.mark.ai_generated
class TestReconcileSelection:
    """Tests for selection reconciliation."""

    def test_keeps_visible_selection(self) -> None:
        assert reconcile_selection(SAMPLE_HOTSPOTS, "hs-lake") == "hs-lake"

    def test_drops_hidden_selection(self) -> None:
        visible = apply_filter(baseline(SAMPLE_HOTSPOTS), {"Kim"})

        assert reconcile_selection(visible, "hs-lake") is None

    def test_none_and_empty(self) -> None:
        assert reconcile_selection(SAMPLE_HOTSPOTS, None) is None
        assert reconcile_selection([], "hs-lake") is None

    def test_find_hotspot(self) -> None:
        assert find_hotspot(SAMPLE_HOTSPOTS, "hs-quarry").name == "Quarry"
        assert find_hotspot(SAMPLE_HOTSPOTS, "missing") is None
