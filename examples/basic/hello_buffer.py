"""Build a string in a growable buffer — zero config, zero deps."""

from ovillo import Buffer

with Buffer(4, 2.0) as buf:
    buf.push_string("Hello")
    buf.push(b",")
    buf.push_range(b" World!")
    print(buf.finalize_borrowed().decode())
    print(f"length={buf.length} capacity={buf.capacity}")
