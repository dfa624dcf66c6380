# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for rtimeit tests.

Nothing here needs cargo. Child processes are replaced with monkeypatched
fakes and Criterion output is canned text.
"""

import textwrap
from pathlib import Path

import pytest

from rtimeit.snippet.models import Snippet, build_snippet


@pytest.fixture()
def sample_snippet() -> Snippet:
    """Two candidates sharing a setup, measured by wall clock."""
    return build_snippet(["a + b", "a * b"], setup="let a = 3; let b = 4")


@pytest.fixture()
def criterion_output() -> str:
    """What the benchmark binary prints for the two candidates of sample_snippet."""
    return textwrap.dedent("""\
        Benchmarking expr0
        Benchmarking expr0: Warming up for 3.0000 s
        Benchmarking expr0: Collecting 100 samples in estimated 5.0000 s (5.1B iterations)
        Benchmarking expr0: Analyzing
        expr0                   time:   [980.12 ps 1.0012 ns 1.0234 ns]
        Found 3 outliers among 100 measurements (3.00%)
          2 (2.00%) high mild
          1 (1.00%) high severe
        Benchmarking expr1
        Benchmarking expr1: Warming up for 3.0000 s
        Benchmarking expr1: Collecting 100 samples in estimated 5.0000 s (1.2B iterations)
        Benchmarking expr1: Analyzing
        expr1                   time:   [4.9500 ns 5.0000 ns 5.0500 ns]
    """)


@pytest.fixture()
def tmp_config_file(tmp_path: Path) -> Path:
    """A small valid config YAML file."""
    config_content = textwrap.dedent("""\
        global:
          log_level: "DEBUG"
        toolchain:
          criterion_version: "0.3.6"
          offline: true
        defaults:
          dependencies:
            - "rand@0.8"
          uses:
            - "std::collections::HashMap"
    """)
    config_file = tmp_path / "rtimeit.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def invalid_config_file(tmp_path: Path) -> Path:
    """A config file that's valid YAML but fails schema validation (unknown key)."""
    config_content = textwrap.dedent("""\
        toolchain:
          compiler: "rustc"
    """)
    config_file = tmp_path / "invalid_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def broken_yaml_file(tmp_path: Path) -> Path:
    """A file that isn't valid YAML at all."""
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("{{not: yaml: at: all:::", encoding="utf-8")
    return config_file
