"""Recover from allocation failure with a capped allocator.

A BudgetAllocator refuses requests past its byte budget. The failing
append raises AllocationError and leaves the buffer exactly as it was,
so the caller can flush what it has and carry on.
"""

from ovillo import AllocationError, Buffer, BudgetAllocator

alloc = BudgetAllocator(320)
chunks: list[bytes] = []

with Buffer(32, 2.0, allocator=alloc) as buf:
    for i in range(200):
        record = f"record {i};".encode()
        try:
            buf.push_range(record)
        except AllocationError as e:
            print(f"flushing {buf.length} bytes ({e})")
            chunks.append(buf.finalize_owned())
            buf.reset()
            buf.push_range(record)
    chunks.append(buf.finalize_owned())

print(f"{len(chunks)} chunks, peak {alloc.peak} of {alloc.limit} bytes")
assert b"".join(chunks) == b"".join(f"record {i};".encode() for i in range(200))
