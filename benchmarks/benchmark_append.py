"""Benchmark Ovillo appends against the usual Python alternatives.

Run with:
    pytest benchmarks/benchmark_append.py -v --benchmark-only

Or for quick comparison:
    python benchmarks/benchmark_append.py
"""

import io
import time


def make_fragments(count: int = 20_000) -> list[bytes]:
    """Small HTML-ish fragments, the typical renderer workload."""
    return [f"<span class=\"t{i % 7}\">{i}</span>".encode() for i in range(count)]


def build_with_buffer(fragments: list[bytes], growth_factor: float = 2.0) -> bytes:
    from ovillo import Buffer

    with Buffer(64, growth_factor) as buf:
        for frag in fragments:
            buf.push_range(frag)
        return buf.finalize_owned()


def build_with_concat(fragments: list[bytes]) -> bytes:
    out = b""
    for frag in fragments:
        out += frag
    return out


def build_with_join(fragments: list[bytes]) -> bytes:
    parts = []
    for frag in fragments:
        parts.append(frag)
    return b"".join(parts)


def build_with_bytesio(fragments: list[bytes]) -> bytes:
    out = io.BytesIO()
    for frag in fragments:
        out.write(frag)
    return out.getvalue()


def time_it(fn, fragments: list[bytes], iterations: int = 10) -> float:
    fn(fragments)  # warmup
    start = time.perf_counter()
    for _ in range(iterations):
        fn(fragments)
    return (time.perf_counter() - start) / iterations


def growth_factor_report(fragments: list[bytes]) -> None:
    """Print growth counts and copy overhead for several factors."""
    from ovillo.profiling import profiled_buffers

    print(f"{'factor':>8} {'growths':>8} {'copied':>10} {'ratio':>6}")
    for factor in (1.25, 1.5, 2.0, 3.0):
        with profiled_buffers() as acc:
            build_with_buffer(fragments, factor)
        print(
            f"{factor:8.2f} {acc.growth_count:8d} {acc.bytes_copied:10d} {acc.copy_ratio:6.2f}"
        )


def main() -> None:
    fragments = make_fragments()
    print(f"Appending {len(fragments)} fragments ({sum(map(len, fragments))} bytes)\n")

    for name, fn in (
        ("ovillo.Buffer", build_with_buffer),
        ("bytes +=", build_with_concat),
        ("list + join", build_with_join),
        ("io.BytesIO", build_with_bytesio),
    ):
        print(f"{name:20} {time_it(fn, fragments) * 1000:8.2f}ms")

    print()
    growth_factor_report(fragments)


# pytest-benchmark integration
try:
    import pytest

    @pytest.mark.benchmark(group="append")
    def test_benchmark_buffer(benchmark, fragments):
        benchmark(build_with_buffer, fragments)

    @pytest.mark.benchmark(group="append")
    def test_benchmark_join(benchmark, fragments):
        benchmark(build_with_join, fragments)

    @pytest.mark.benchmark(group="append")
    def test_benchmark_bytesio(benchmark, fragments):
        benchmark(build_with_bytesio, fragments)

    @pytest.mark.benchmark(group="text")
    def test_benchmark_stringbuilder_lines(benchmark, large_text):
        from ovillo import StringBuilder

        lines = large_text.splitlines()

        def build():
            with StringBuilder() as sb:
                for line in lines:
                    sb.append_line(line)
                return sb.build()

        benchmark(build)

    @pytest.mark.benchmark(group="growth-factor")
    @pytest.mark.parametrize("factor", [1.25, 1.5, 2.0, 3.0])
    def test_benchmark_growth_factor(benchmark, fragments, factor):
        benchmark(build_with_buffer, fragments, factor)

except ImportError:
    pass


if __name__ == "__main__":
    main()
