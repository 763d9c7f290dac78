import math
from dataclasses import dataclass

# Largest tensor a single Triton program may materialise.
MAX_TILE_NUMEL = 1 << 20


@dataclass
class NDRange:
    global_size: int
    local_size: int

    def __post_init__(self):
        if self.global_size <= 0 or self.local_size <= 0:
            raise ValueError(
                f"Range sizes must be positive, got global={self.global_size}, "
                f"local={self.local_size}"
            )
        if self.global_size % self.local_size != 0:
            raise ValueError(
                f"Local size {self.local_size} does not divide global size {self.global_size}"
            )

    @property
    def num_groups(self) -> int:
        return self.global_size // self.local_size


def work_group_size(
    compute_units: int,
    n: int,
    max_size: int | None = None,
) -> int:
    if compute_units <= 0 or n <= 0:
        raise ValueError(
            f"compute_units and n must be positive, got {compute_units} and {n}"
        )
    if max_size is not None and max_size <= 0:
        raise ValueError(f"max_size must be positive, got {max_size}")

    size = math.gcd(compute_units, n)
    if max_size is None or size <= max_size:
        return size

    for candidate in range(max_size, 0, -1):
        if size % candidate == 0:
            return candidate
    return 1


def local_memory_bytes(n: int, local_size: int = 1, dtype_bytes: int = 4) -> int:
    # One staged row of A plus local_size staged columns of B.
    return n * (1 + local_size) * dtype_bytes


def max_local_size_for_memory(n: int, budget_bytes: int, dtype_bytes: int = 4) -> int:
    if n <= 0:
        raise ValueError(f"n must be positive, got {n}")
    max_local = budget_bytes // (n * dtype_bytes) - 1
    if max_local < 1:
        raise ValueError(
            f"N={n} needs {local_memory_bytes(n, 1, dtype_bytes)} bytes of local memory "
            f"per work-group even with one worker, above the budget of {budget_bytes}"
        )
    return max_local


def next_power_of_2(x: int) -> int:
    return 1 << (x - 1).bit_length() if x > 1 else 1


def tile_numel(n: int, local_size: int) -> int:
    return next_power_of_2(n) * next_power_of_2(local_size)


def launch_geometry(
    compute_units: int,
    n: int,
    max_work_group_size: int | None = None,
    local_memory_budget: int | None = None,
) -> NDRange:
    max_size = max_work_group_size
    if local_memory_budget is not None:
        memory_cap = max_local_size_for_memory(n, local_memory_budget)
        max_size = memory_cap if max_size is None else min(max_size, memory_cap)

    local = work_group_size(compute_units, n, max_size=max_size)
    return NDRange(global_size=n, local_size=local)


if __name__ == "__main__":
    print("Work-group sizing (gcd of compute units and N)")
    print("=" * 60)
    print(f"{'CUs':>6} {'N':>6} {'local':>6} {'groups':>7} {'tile':>9} {'smem KB':>8}")
    for cus in [46, 82, 108, 132]:
        for n in [256, 1000, 1024]:
            nd = launch_geometry(cus, n, local_memory_budget=48 * 1024)
            print(f"{cus:>6} {n:>6} {nd.local_size:>6} {nd.num_groups:>7} "
                  f"{tile_numel(n, nd.local_size):>9} "
                  f"{local_memory_bytes(n, nd.local_size) / 1024:>8.1f}")
