"""Compare growth factors with the opt-in profiler."""

from ovillo import StringBuilder
from ovillo.profiling import profiled_buffers

lines = [f"line {i}: " + "x" * (i % 40) for i in range(5000)]

for factor in (1.25, 1.5, 2.0, 4.0):
    with profiled_buffers() as metrics, StringBuilder(16, factor) as sb:
        for line in lines:
            sb.append_line(line)
        sb.build()
    print(f"growth_factor={factor}: {metrics.summary()}")
