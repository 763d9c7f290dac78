from dataclasses import dataclass

import torch

from .matrices import check_square_pair
from .timing import Stopwatch, Timing

LOOP_ORDERS = ("ijk", "ikj")


@dataclass
class SerialRun:
    result: torch.Tensor
    timing: Timing
    loop_order: str


def serial_matmul(
    a: torch.Tensor,
    b: torch.Tensor,
    loop_order: str = "ijk",
) -> torch.Tensor:
    if loop_order not in LOOP_ORDERS:
        raise ValueError(f"Unknown loop order {loop_order!r}, expected one of {LOOP_ORDERS}")

    n = check_square_pair(a, b)
    A = a.tolist()
    B = b.tolist()
    C = [[0.0] * n for _ in range(n)]

    if loop_order == "ijk":
        for i in range(n):
            for j in range(n):
                for k in range(n):
                    C[i][j] += A[i][k] * B[k][j]
    else:
        for i in range(n):
            row_a = A[i]
            row_c = C[i]
            for k in range(n):
                a_ik = row_a[k]
                row_b = B[k]
                for j in range(n):
                    row_c[j] += a_ik * row_b[j]

    return torch.tensor(C, dtype=torch.float32)


def run_serial(
    a: torch.Tensor,
    b: torch.Tensor,
    loop_order: str = "ijk",
) -> SerialRun:
    with Stopwatch() as watch:
        result = serial_matmul(a, b, loop_order=loop_order)
    return SerialRun(result=result, timing=watch.timing, loop_order=loop_order)


if __name__ == "__main__":
    from .matrices import init_mat

    print("Serial Matrix Multiplication")
    print("=" * 60)
    for n in [32, 64, 128]:
        a = init_mat(n, n, seed=0)
        b = init_mat(n, n, seed=1)
        for order in LOOP_ORDERS:
            run = run_serial(a, b, loop_order=order)
            print(f"N={n:4d} order={order}: {run.timing.elapsed_ms:10.1f} ms")
