"""Tests for channel routing conflict detection."""

from __future__ import annotations

import pytest

from ambiance.core.channels import (
    ChannelLayoutCatalog,
    ChannelUsage,
    ConflictingChannel,
    ContainerDescriptor,
    ContainerKey,
    detect_conflicts,
)

QUAD = 1
SURROUND_5_0 = 2
STEREO = 4

AMB_QUAD = ContainerKey("Forest", "Amb_Quad")
AMB_5_0 = ContainerKey("Forest", "Amb_5_0")


class TestNoConflicts:
    """Cases that must come back as None."""

    def test_empty_input(self, catalog: ChannelLayoutCatalog) -> None:
        assert detect_conflicts([], catalog) is None

    def test_identical_stereo_containers(self, catalog: ChannelLayoutCatalog) -> None:
        """Test same labels on the same channels are not a conflict."""
        containers = [
            ContainerDescriptor.create("Forest", "Birds", channel_layout_id=STEREO),
            ContainerDescriptor.create("Forest", "Wind", channel_layout_id=STEREO),
        ]
        assert detect_conflicts(containers, catalog) is None

    def test_disjoint_routings(self, catalog: ChannelLayoutCatalog) -> None:
        """Test containers on separate physical channels never conflict."""
        containers = [
            ContainerDescriptor.create("Forest", "Front", channel_layout_id=QUAD),
            ContainerDescriptor.create(
                "Forest", "Rear", channel_layout_id=QUAD, custom_routing=[5, 6, 7, 8]
            ),
        ]
        assert detect_conflicts(containers, catalog) is None

    def test_custom_routing_avoids_master(self, catalog: ChannelLayoutCatalog) -> None:
        """Test an override moving the quad onto the 5.0's surrounds resolves the clash."""
        containers = [
            ContainerDescriptor.create(
                "Forest", "Amb_Quad", channel_layout_id=QUAD, custom_routing=[1, 2, 4, 5]
            ),
            ContainerDescriptor.create("Forest", "Amb_5_0", channel_layout_id=SURROUND_5_0),
        ]
        assert detect_conflicts(containers, catalog) is None

    def test_layout_zero_skipped(self, catalog: ChannelLayoutCatalog) -> None:
        containers = [
            ContainerDescriptor.create("Forest", "Mono", channel_layout_id=0),
            ContainerDescriptor.create("Forest", "Amb_5_0", channel_layout_id=SURROUND_5_0),
        ]
        assert detect_conflicts(containers, catalog) is None


class TestQuadAgainstSurround:
    """Quad (L R LS RS) against ITU 5.0 (L R C LS RS)."""

    def test_reports_channels_3_and_4(
        self, catalog: ChannelLayoutCatalog, quad_and_surround: list[ContainerDescriptor]
    ) -> None:
        report = detect_conflicts(quad_and_surround, catalog)

        assert report is not None
        assert list(report.conflict_pairs) == [(AMB_QUAD, AMB_5_0)]
        pair = report.conflict_pairs[(AMB_QUAD, AMB_5_0)]
        assert pair.conflicting_channels == [
            ConflictingChannel(channel=3, label1="LS", label2="C"),
            ConflictingChannel(channel=4, label1="RS", label2="LS"),
        ]

    def test_left_right_not_in_conflict(
        self, catalog: ChannelLayoutCatalog, quad_and_surround: list[ContainerDescriptor]
    ) -> None:
        report = detect_conflicts(quad_and_surround, catalog)

        assert report is not None
        assert set(report.containers[AMB_QUAD].conflicts) == {3, 4}
        assert set(report.containers[AMB_5_0].conflicts) == {3, 4}

    def test_conflicts_are_symmetric(
        self, catalog: ChannelLayoutCatalog, quad_and_surround: list[ContainerDescriptor]
    ) -> None:
        """Test each side's conflict entry references the other side."""
        report = detect_conflicts(quad_and_surround, catalog)

        assert report is not None
        quad_entry = report.containers[AMB_QUAD].conflicts[3][0]
        surround_entry = report.containers[AMB_5_0].conflicts[3][0]
        assert quad_entry.conflicting_container == AMB_5_0
        assert surround_entry.conflicting_container == AMB_QUAD
        assert (quad_entry.label, quad_entry.conflicting_label) == ("LS", "C")
        assert (surround_entry.label, surround_entry.conflicting_label) == ("C", "LS")

    def test_channel_usage_in_scan_order(
        self, catalog: ChannelLayoutCatalog, quad_and_surround: list[ContainerDescriptor]
    ) -> None:
        report = detect_conflicts(quad_and_surround, catalog)

        assert report is not None
        assert report.channel_usage[1] == [ChannelUsage("L", AMB_QUAD), ChannelUsage("L", AMB_5_0)]
        assert report.channel_usage[5] == [ChannelUsage("RS", AMB_5_0)]

    def test_pair_key_follows_scan_order(
        self, catalog: ChannelLayoutCatalog, quad_and_surround: list[ContainerDescriptor]
    ) -> None:
        """Test the first-scanned container is always container1."""
        report = detect_conflicts(list(reversed(quad_and_surround)), catalog)

        assert report is not None
        assert list(report.conflict_pairs) == [(AMB_5_0, AMB_QUAD)]
        assert report.conflicts_between(AMB_QUAD, AMB_5_0) is report.conflict_pairs[
            (AMB_5_0, AMB_QUAD)
        ]

    def test_detection_is_idempotent(
        self, catalog: ChannelLayoutCatalog, quad_and_surround: list[ContainerDescriptor]
    ) -> None:
        first = detect_conflicts(quad_and_surround, catalog)
        second = detect_conflicts(quad_and_surround, catalog)

        assert first == second
        assert first is not None and second is not None
        assert list(first.channel_usage) == list(second.channel_usage)

    def test_report_summary(
        self, catalog: ChannelLayoutCatalog, quad_and_surround: list[ContainerDescriptor]
    ) -> None:
        report = detect_conflicts(quad_and_surround, catalog)

        assert report is not None
        assert report.pair_count == 1
        assert report.conflicting_channel_count == 2
        assert [info.key for info in report.masters()] == [AMB_5_0]
        assert [info.key for info in report.subordinates()] == [AMB_QUAD]


class TestVariants:
    """Variant selection feeds the active labels."""

    def test_smpte_against_itu(self, catalog: ChannelLayoutCatalog) -> None:
        """Test SMPTE and ITU 5.0 clash on channels 2 and 3 only."""
        containers = [
            ContainerDescriptor.create("A", "Itu", channel_layout_id=SURROUND_5_0, variant_id=0),
            ContainerDescriptor.create("A", "Smpte", channel_layout_id=SURROUND_5_0, variant_id=1),
        ]
        report = detect_conflicts(containers, catalog)

        assert report is not None
        pair = report.conflict_pairs[(ContainerKey("A", "Itu"), ContainerKey("A", "Smpte"))]
        assert [c.channel for c in pair.conflicting_channels] == [2, 3]

    def test_channel_count_from_base_layout(self, catalog: ChannelLayoutCatalog) -> None:
        containers = [
            ContainerDescriptor.create("A", "Smpte", channel_layout_id=SURROUND_5_0, variant_id=1),
            ContainerDescriptor.create("A", "Quad", channel_layout_id=QUAD),
        ]
        report = detect_conflicts(containers, catalog)

        assert report is not None
        assert report.containers[ContainerKey("A", "Smpte")].channel_count == 5


class TestMalformedInput:
    """Malformed containers never raise."""

    def test_unknown_layout_skipped(self, catalog: ChannelLayoutCatalog) -> None:
        containers = [
            ContainerDescriptor.create("Forest", "Weird", channel_layout_id=42),
            ContainerDescriptor.create("Forest", "Amb_5_0", channel_layout_id=SURROUND_5_0),
        ]
        assert detect_conflicts(containers, catalog) is None

    def test_missing_variant_skipped(self, catalog: ChannelLayoutCatalog) -> None:
        containers = [
            ContainerDescriptor.create("Forest", "Amb_Quad", channel_layout_id=QUAD),
            ContainerDescriptor.create(
                "Forest", "Amb_5_0", channel_layout_id=SURROUND_5_0, variant_id=9
            ),
        ]
        assert detect_conflicts(containers, catalog) is None

    def test_stale_custom_routing_falls_back_to_layout(
        self, catalog: ChannelLayoutCatalog, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test a routing left over from a stereo layout still gets checked."""
        containers = [
            ContainerDescriptor.create(
                "Forest", "Amb_Quad", channel_layout_id=QUAD, custom_routing=[1, 2]
            ),
            ContainerDescriptor.create("Forest", "Amb_5_0", channel_layout_id=SURROUND_5_0),
        ]

        with caplog.at_level("WARNING"):
            report = detect_conflicts(containers, catalog)

        assert report is not None
        assert report.containers[AMB_QUAD].active_routing == (1, 2, 3, 4)
        assert set(report.containers[AMB_QUAD].conflicts) == {3, 4}
        assert "stale custom routing" in caplog.text

    def test_zero_channel_custom_routing_falls_back_to_layout(
        self, catalog: ChannelLayoutCatalog
    ) -> None:
        containers = [
            ContainerDescriptor.create(
                "Forest", "Amb_Quad", channel_layout_id=QUAD, custom_routing=[0, 1, 4, 5]
            ),
            ContainerDescriptor.create("Forest", "Amb_5_0", channel_layout_id=SURROUND_5_0),
        ]

        report = detect_conflicts(containers, catalog)

        assert report is not None
        assert report.containers[AMB_QUAD].active_routing == (1, 2, 3, 4)

    def test_duplicate_key_first_wins(self, catalog: ChannelLayoutCatalog) -> None:
        containers = [
            ContainerDescriptor.create("Forest", "Amb", channel_layout_id=STEREO),
            ContainerDescriptor.create("Forest", "Amb", channel_layout_id=SURROUND_5_0),
        ]
        assert detect_conflicts(containers, catalog) is None


class TestSharedChannels:
    """Three or more containers on one channel."""

    def test_three_way_clash_keeps_every_counterpart(self, catalog: ChannelLayoutCatalog) -> None:
        """Test symmetry holds for every pair, not just the last one seen."""
        a = ContainerKey("G", "A")
        b = ContainerKey("G", "B")
        c = ContainerKey("G", "C")
        containers = [
            ContainerDescriptor.create("G", "A", channel_layout_id=QUAD),
            ContainerDescriptor.create("G", "B", channel_layout_id=SURROUND_5_0, variant_id=0),
            ContainerDescriptor.create("G", "C", channel_layout_id=SURROUND_5_0, variant_id=1),
        ]
        report = detect_conflicts(containers, catalog)

        assert report is not None
        assert set(report.conflict_pairs) == {(a, b), (a, c), (b, c)}
        # Channel 3: A=LS, B=C, C=R
        counterparts_of_a = [e.conflicting_container for e in report.containers[a].conflicts[3]]
        counterparts_of_b = [e.conflicting_container for e in report.containers[b].conflicts[3]]
        assert counterparts_of_a == [b, c]
        assert counterparts_of_b == [a, c]
        assert report.containers[a].conflicting_containers() == [b, c]

    def test_container_does_not_conflict_with_itself(self, catalog: ChannelLayoutCatalog) -> None:
        containers = [
            ContainerDescriptor.create(
                "G", "Folded", channel_layout_id=QUAD, custom_routing=[1, 2, 1, 2]
            ),
        ]
        assert detect_conflicts(containers, catalog) is None

    def test_default_catalog_used_when_omitted(
        self, quad_and_surround: list[ContainerDescriptor]
    ) -> None:
        report = detect_conflicts(quad_and_surround)
        assert report is not None
        assert report.pair_count == 1
