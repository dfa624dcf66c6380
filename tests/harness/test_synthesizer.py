# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for the harness synthesizer.

The generated text is compared against golden output byte for byte. If a
template changes on purpose, update the golden strings here in the same commit.
"""

from rtimeit.harness.synthesizer import (
    render_bench_source,
    render_cargo_toml,
    render_timer,
    render_unit,
    synthesize,
)
from rtimeit.snippet.models import WALL_CLOCK, MeasurementMode, Snippet, build_snippet

GOLDEN_CARGO_TOML = '''\
[package]
name = "rtimeit-bench"
version = "0.1.0"
edition = "2021"
publish = false

[dependencies]
criterion = "0.3"
criterion-linux-perf = { version = "0.1", optional = true }

[features]
perf = ["criterion-linux-perf"]

[[bench]]
name = "timeit"
harness = false
'''

GOLDEN_BENCH_SOURCE = '''\
#![allow(unused_imports)]
#![allow(unused_variables)]
#![allow(unused_braces)]
#![allow(redundant_semicolons)]

use criterion::{
    black_box, criterion_group, criterion_main,
    measurement::{Measurement, WallTime},
    Criterion,
};
#[cfg(feature = "perf")]
use criterion_linux_perf::{PerfMeasurement, PerfMode};

fn timeit<M: 'static + Measurement>(crit: &mut Criterion<M>) {
    crit.bench_function("expr0", |bencher| {
        let a = 3; let b = 4;
        bencher.iter(|| black_box({
a + b
        }));
    });

    crit.bench_function("expr1", |bencher| {
        let a = 3; let b = 4;
        bencher.iter(|| black_box({
a * b
        }));
    });
}

criterion_group!(
    name = benches;
    config = Criterion::default().with_measurement(WallTime);
    targets = timeit
);
criterion_main!(benches);
'''


def _units_only(source: str) -> str:
    """The part of the bench source between the function header and its closing brace."""
    start = source.index("fn timeit")
    end = source.index("criterion_group!")
    return source[start:end]


class TestGoldenOutput:
    def test_cargo_toml_matches_golden(self, sample_snippet: Snippet) -> None:
        assert render_cargo_toml(sample_snippet) == GOLDEN_CARGO_TOML

    def test_bench_source_matches_golden(self, sample_snippet: Snippet) -> None:
        assert render_bench_source(sample_snippet) == GOLDEN_BENCH_SOURCE

    def test_synthesize_lays_out_project(self, sample_snippet: Snippet) -> None:
        files = synthesize(sample_snippet)
        assert sorted(files) == ["Cargo.toml", "benches/timeit.rs"]
        assert files["benches/timeit.rs"] == GOLDEN_BENCH_SOURCE


class TestPurity:
    def test_equal_snippets_render_identically(self) -> None:
        first = build_snippet(["x.pow(2)", "x * x"], setup="let x = 7u64", perf="cycles")
        second = build_snippet(["x.pow(2)", "x * x"], setup="let x = 7u64", perf="cycles")
        assert synthesize(first) == synthesize(second)

    def test_repeated_calls_are_identical(self, sample_snippet: Snippet) -> None:
        assert render_bench_source(sample_snippet) == render_bench_source(sample_snippet)


class TestCandidates:
    def test_text_is_inserted_verbatim(self) -> None:
        snippet = build_snippet(["vec![1, 2, 3].iter().sum::<i32>("])
        assert "vec![1, 2, 3].iter().sum::<i32>(\n" in render_bench_source(snippet)

    def test_ids_come_from_positions_not_text(self) -> None:
        snippet = build_snippet(["a + b", "a + b", '"quoted" == "text"'])
        source = render_bench_source(snippet)
        assert source.count('bench_function("expr0"') == 1
        assert source.count('bench_function("expr1"') == 1
        assert source.count('bench_function("expr2"') == 1
        assert 'bench_function("a + b"' not in source

    def test_markers_inside_candidate_text_are_not_expanded(self) -> None:
        snippet = build_snippet(["/*SETUP*/ 1", "/*TIMER*/ 2"], setup="let z = 0")
        source = render_bench_source(snippet)
        assert "/*SETUP*/ 1" in source
        assert "/*TIMER*/ 2" in source

    def test_every_unit_forces_evaluation(self, sample_snippet: Snippet) -> None:
        source = render_bench_source(sample_snippet)
        assert source.count("black_box({") == len(sample_snippet.candidates)

    def test_no_setup_leaves_no_statement(self) -> None:
        candidate = build_snippet(["1 + 1"]).candidates[0]
        assert ";" not in render_unit(candidate, None).split("bencher.iter")[0].split("|bencher| {")[1]


class TestMeasurementMode:
    def test_wall_clock_timer(self) -> None:
        assert render_timer(WALL_CLOCK) == "WallTime"

    def test_counter_timer(self) -> None:
        mode = MeasurementMode.counter_mode("branch-misses")
        assert render_timer(mode) == "PerfMeasurement::new(PerfMode::BranchMisses)"

    def test_mode_switch_does_not_touch_candidate_bodies(self) -> None:
        wall = build_snippet(["a + b", "a * b"], setup="let a = 3; let b = 4")
        counter = build_snippet(["a + b", "a * b"], setup="let a = 3; let b = 4", perf="instructions")

        assert _units_only(render_bench_source(wall)) == _units_only(render_bench_source(counter))
        assert render_cargo_toml(wall) == render_cargo_toml(counter)
        assert "PerfMode::Instructions" in render_bench_source(counter)


class TestPrelude:
    def test_dependencies_and_uses(self) -> None:
        snippet = build_snippet(
            ["rng.gen::<u8>()"],
            setup="let mut rng = rand::thread_rng()",
            dependencies=["rand@0.8", "itertools"],
            uses=["rand::Rng"],
        )
        manifest = render_cargo_toml(snippet)
        source = render_bench_source(snippet)

        assert 'rand = "0.8"\nitertools = "*"\n\n[features]' in manifest
        assert "use rand::Rng;\n\nfn timeit" in source

    def test_includes_are_pasted_before_the_bench_function(self) -> None:
        snippet = build_snippet(["helper()"], includes=["fn helper() -> u32 { 42 }\n"])
        source = render_bench_source(snippet)
        assert "fn helper() -> u32 { 42 }\n\nfn timeit" in source

    def test_criterion_version_is_configurable(self) -> None:
        snippet = build_snippet(["1"], criterion_version="0.3.6")
        assert 'criterion = "0.3.6"' in render_cargo_toml(snippet)
