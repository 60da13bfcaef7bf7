"""Tests for BuildDelta — artifact deltas, totals, filters, caching."""

from __future__ import annotations

import re
import threading

import pytest

from build_tracker.core.build_delta import BuildDelta
from build_tracker.models.artifacts import ArtifactDelta


class TestArtifactNames:
    def test_union_of_both_builds(self, base_build, prev_build):
        d = BuildDelta(base_build, prev_build)
        assert d.artifact_names == base_build.artifact_names | prev_build.artifact_names

    def test_filters_applied(self, base_build, prev_build):
        d = BuildDelta(base_build, prev_build, [re.compile("vendor"), "legacy"])
        assert d.artifact_names == frozenset({"main"})


class TestArtifactDeltas:
    def test_growth_scenario(self, make_build):
        base = make_build("base", main=("h1", {"gzip": 120}))
        prev = make_build("prev", main=("h1", {"gzip": 100}))
        d = BuildDelta(base, prev)

        assert d.artifact_deltas == (
            ArtifactDelta(
                name="main",
                hash_changed=False,
                sizes={"gzip": 20},
                percents={"gzip": 20},
            ),
        )
        assert d.total_delta.sizes["gzip"] == 20

    def test_added_artifact(self, make_build):
        base = make_build("base", main=("h1", {"gzip": 1}), vendor=("v1", {"gzip": 50}))
        prev = make_build("prev", main=("h1", {"gzip": 1}))
        vendor = BuildDelta(base, prev).get_artifact_delta("vendor")

        assert vendor.hash_changed is True
        assert vendor.sizes == {"gzip": 50}
        assert vendor.percents == {"gzip": 0}

    def test_removed_artifact(self, base_build, prev_build):
        legacy = BuildDelta(base_build, prev_build).get_artifact_delta("legacy")

        assert legacy.hash_changed is True
        assert legacy.sizes == {"gzip": -30, "stat": -90}
        assert legacy.percents["gzip"] == pytest.approx(-100)

    def test_identical_artifact(self, make_build):
        base = make_build("base", main=("h1", {"gzip": 100, "stat": 400}))
        prev = make_build("prev", main=("h1", {"gzip": 100, "stat": 400}))
        main = BuildDelta(base, prev).get_artifact_delta("main")

        assert main.hash_changed is False
        assert main.sizes == {"gzip": 0, "stat": 0}
        assert main.percents == {"gzip": 0, "stat": 0}
        assert main.is_unchanged

    def test_hash_change_with_same_size(self, make_build):
        base = make_build("base", main=("h2", {"gzip": 100}))
        prev = make_build("prev", main=("h1", {"gzip": 100}))
        main = BuildDelta(base, prev).get_artifact_delta("main")

        assert main.hash_changed is True
        assert main.sizes == {"gzip": 0}

    def test_metrics_follow_previous_artifact(self, make_build):
        """A metric only the base artifact has is not part of the delta."""
        base = make_build("base", main=("h1", {"gzip": 120, "brotli": 90}))
        prev = make_build("prev", main=("h1", {"gzip": 100}))
        main = BuildDelta(base, prev).get_artifact_delta("main")

        assert set(main.sizes) == {"gzip"}
        assert set(main.percents) == {"gzip"}

    def test_metric_missing_from_base_reads_as_zero(self, make_build):
        base = make_build("base", main=("h1", {"gzip": 120}))
        prev = make_build("prev", main=("h1", {"gzip": 100, "stat": 400}))
        main = BuildDelta(base, prev).get_artifact_delta("main")

        assert main.sizes == {"gzip": 20, "stat": -400}

    def test_order_base_then_previous(self, base_build, prev_build):
        names = [d.name for d in BuildDelta(base_build, prev_build).artifact_deltas]
        assert names == ["main", "vendor", "legacy"]

    def test_filtered_artifact_has_no_delta(self, base_build, prev_build):
        d = BuildDelta(base_build, prev_build, ["vendor"])
        assert d.get_artifact_delta("vendor") is None

    def test_unknown_artifact_is_none(self, base_build, prev_build):
        assert BuildDelta(base_build, prev_build).get_artifact_delta("nope") is None

    def test_changed_artifact_deltas(self, make_build):
        base = make_build(
            "base",
            same=("h1", {"gzip": 10}),
            grown=("h2", {"gzip": 20}),
        )
        prev = make_build(
            "prev",
            same=("h1", {"gzip": 10}),
            grown=("h1", {"gzip": 10}),
        )
        changed = BuildDelta(base, prev).changed_artifact_deltas
        assert [d.name for d in changed] == ["grown"]


class TestTotalDelta:
    def test_totals(self, base_build, prev_build):
        total = BuildDelta(base_build, prev_build).total_delta

        # base: 120 + 50 = 170; prev: 100 + 30 = 130
        assert total.sizes["gzip"] == 40
        assert total.percents["gzip"] == pytest.approx(40 / 130 * 100)
        assert total.against_revision == "prev"

    def test_totals_respect_filters(self, base_build, prev_build):
        total = BuildDelta(base_build, prev_build, ["vendor", "legacy"]).total_delta
        assert total.sizes == {"gzip": 20, "stat": 80}
        assert total.percents["gzip"] == pytest.approx(20)

    def test_against_revision_uses_linked_value(self, make_build):
        base = make_build("base", main=("h1", {"gzip": 1}))
        prev = make_build(
            meta={"revision": {"value": "abc", "url": "https://x/abc"}},
            main=("h1", {"gzip": 1}),
        )
        assert BuildDelta(base, prev).total_delta.against_revision == "abc"

    def test_metrics_follow_base_totals(self, make_build):
        base = make_build("base", main=("h1", {"gzip": 10}))
        prev = make_build("prev", main=("h1", {"gzip": 5, "stat": 20}))
        assert set(BuildDelta(base, prev).total_delta.sizes) == {"gzip"}


class TestMetaPassthrough:
    def test_meta_is_base_meta(self, base_build, prev_build):
        d = BuildDelta(base_build, prev_build)
        assert d.meta is base_build.meta
        assert d.timestamp == base_build.timestamp
        assert d.get_meta_value("revision") == "base"
        assert d.get_meta_url("revision") is None


class TestCaching:
    def test_artifact_deltas_identical(self, base_build, prev_build):
        d = BuildDelta(base_build, prev_build)
        assert d.artifact_deltas is d.artifact_deltas

    def test_total_delta_identical(self, base_build, prev_build):
        d = BuildDelta(base_build, prev_build)
        assert d.total_delta is d.total_delta

    def test_artifact_names_identical(self, base_build, prev_build):
        d = BuildDelta(base_build, prev_build)
        assert d.artifact_names is d.artifact_names

    def test_get_artifact_delta_shares_cache(self, base_build, prev_build):
        d = BuildDelta(base_build, prev_build)
        main = d.get_artifact_delta("main")
        assert main is d.artifact_deltas[0]

    def test_new_instance_recomputes(self, base_build, prev_build):
        a = BuildDelta(base_build, prev_build)
        b = BuildDelta(base_build, prev_build)
        assert a.total_delta is not b.total_delta
        assert a.total_delta == b.total_delta

    def test_concurrent_access_computes_once(self, base_build, prev_build):
        d = BuildDelta(base_build, prev_build)
        results: list[object] = []

        def _read() -> None:
            results.append(d.artifact_deltas)

        threads = [threading.Thread(target=_read) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert all(r is results[0] for r in results)

    def test_cached_deltas_cannot_be_mutated(self, base_build, prev_build):
        d = BuildDelta(base_build, prev_build)
        with pytest.raises(TypeError):
            d.artifact_deltas[0].sizes["gzip"] = 999
        with pytest.raises(TypeError):
            d.total_delta.percents["gzip"] = 0
        assert d.get_artifact_delta("main").sizes["gzip"] == 20
        assert d.total_delta.sizes["gzip"] == 40
