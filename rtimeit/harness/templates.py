# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Source templates for the generated Cargo project.

Insertion points are marked as /*NAME*/ comments (or @NAME@ in TOML, where
comments would change meaning). The synthesizer substitutes every marker in
a single pass, so text pasted in from the user is never re-scanned for markers.
"""

BENCH_NAME = "timeit"
PACKAGE_NAME = "rtimeit-bench"
PERF_FEATURE = "perf"
PERF_CRATE_VERSION = "0.1"

CARGO_TOML = """\
[package]
name = "@PACKAGE@"
version = "0.1.0"
edition = "2021"
publish = false

[dependencies]
criterion = "@CRITERION@"
criterion-linux-perf = { version = "@PERF_VERSION@", optional = true }
@DEPENDENCIES@
[features]
@FEATURE@ = ["criterion-linux-perf"]

[[bench]]
name = "@BENCH@"
harness = false
"""

BENCH_SOURCE = """\
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

/*PRELUDE*/fn timeit<M: 'static + Measurement>(crit: &mut Criterion<M>) {
/*UNITS*/
}

criterion_group!(
    name = benches;
    config = Criterion::default().with_measurement(/*TIMER*/);
    targets = timeit
);
criterion_main!(benches);
"""

# One measured unit. The setup runs in the routine closure, outside the timed
# iter() call; black_box keeps the optimizer from discarding the expression.
UNIT_SOURCE = """\
    crit.bench_function("/*ID*/", |bencher| {
        /*SETUP*/
        bencher.iter(|| black_box({
/*EXPRESSION*/
        }));
    });
"""

WALL_TIMER = "WallTime"
PERF_TIMER = "PerfMeasurement::new(PerfMode::/*VARIANT*/)"
