from dataclasses import dataclass

import torch

from .device import DeviceError, DeviceInfo, select_device
from .matrices import alloc_mat, check_square_pair
from .timing import Stopwatch, Timing
from .workgroup import (
    MAX_TILE_NUMEL,
    NDRange,
    launch_geometry,
    next_power_of_2,
    tile_numel,
)

try:
    import triton
    import triton.language as tl
    TRITON_AVAILABLE = True
except ImportError:
    TRITON_AVAILABLE = False


@dataclass
class GpuRun:
    result: torch.Tensor
    nd_range: NDRange
    kernel_ms: float
    upload_ms: float
    download_ms: float
    timing: Timing
    device_name: str

    @property
    def work_group_size(self) -> int:
        return self.nd_range.local_size

    @property
    def total_ms(self) -> float:
        return self.upload_ms + self.kernel_ms + self.download_ms


if TRITON_AVAILABLE:
    @triton.jit
    def matmult_kernel(
        a_ptr, b_ptr, c_ptr,
        N,
        GROUP: tl.constexpr,
        BLOCK_G: tl.constexpr,
        BLOCK_N: tl.constexpr,
    ):
        # One program per work-group, one lane per output column.
        pid = tl.program_id(0)

        lanes = tl.arange(0, BLOCK_G)
        cols = (pid * GROUP + lanes).to(tl.int64)
        col_mask = lanes < GROUP

        offs_k = tl.arange(0, BLOCK_N)
        k_mask = offs_k < N
        # Row offsets in int64, N * N can exceed int32.
        rows_k = offs_k.to(tl.int64) * N

        b_slice = tl.load(
            b_ptr + rows_k[:, None] + cols[None, :],
            mask=k_mask[:, None] & col_mask[None, :],
            other=0.0,
        )

        for i in range(0, N):
            row_start = i.to(tl.int64) * N
            a_row = tl.load(a_ptr + row_start + offs_k, mask=k_mask, other=0.0)
            acc = tl.sum(a_row[:, None] * b_slice, axis=0)
            tl.store(c_ptr + row_start + cols, acc, mask=col_mask)


def plan_launch(n: int, device: DeviceInfo) -> NDRange:
    """Check that the kernel can run for N on ``device`` and return its range.

    The work-group is shrunk to the largest divisor of gcd(compute units, N)
    whose staged row and column slice fit the device's local memory.
    """
    if not TRITON_AVAILABLE:
        raise DeviceError("Unable to create program: Triton is not installed")

    nd = launch_geometry(
        device.compute_units,
        n,
        max_work_group_size=device.max_work_group_size,
        local_memory_budget=device.local_memory_bytes,
    )
    numel = tile_numel(n, nd.local_size)
    if numel > MAX_TILE_NUMEL:
        raise ValueError(
            f"N={n} with work-group size {nd.local_size} needs a {numel}-element tile, "
            f"above the limit of {MAX_TILE_NUMEL}"
        )
    return nd


def _launch(a_dev, b_dev, c_dev, n: int, nd: NDRange) -> None:
    matmult_kernel[(nd.num_groups,)](
        a_dev, b_dev, c_dev,
        n,
        GROUP=nd.local_size,
        BLOCK_G=next_power_of_2(nd.local_size),
        BLOCK_N=next_power_of_2(n),
    )


def tiled_matmul(
    a: torch.Tensor,
    b: torch.Tensor,
    device: DeviceInfo | None = None,
) -> GpuRun:
    n = check_square_pair(a, b)
    if device is None:
        device = select_device()
    nd = plan_launch(n, device)

    with torch.cuda.device(device.index):
        # Untimed launch so Triton compiles the kernel before profiling.
        warm = torch.zeros((n, n), device=device.torch_device, dtype=torch.float32)
        _launch(warm, warm, torch.empty_like(warm), n, nd)
        torch.cuda.synchronize(device.torch_device)

    with torch.cuda.device(device.index), Stopwatch() as watch:
        upload_start = torch.cuda.Event(enable_timing=True)
        kernel_start = torch.cuda.Event(enable_timing=True)
        kernel_end = torch.cuda.Event(enable_timing=True)
        download_end = torch.cuda.Event(enable_timing=True)

        upload_start.record()
        a_dev = a.to(device.torch_device, dtype=torch.float32).contiguous()
        b_dev = b.to(device.torch_device, dtype=torch.float32).contiguous()
        c_dev = torch.empty((n, n), device=device.torch_device, dtype=torch.float32)

        kernel_start.record()
        _launch(a_dev, b_dev, c_dev, n, nd)
        kernel_end.record()

        c = c_dev.cpu()
        download_end.record()
        torch.cuda.synchronize(device.torch_device)

    return GpuRun(
        result=c,
        nd_range=nd,
        kernel_ms=kernel_start.elapsed_time(kernel_end),
        upload_ms=upload_start.elapsed_time(kernel_start),
        download_ms=kernel_end.elapsed_time(download_end),
        timing=watch.timing,
        device_name=device.name,
    )


def emulate_tiled_matmul(
    a: torch.Tensor,
    b: torch.Tensor,
    local_size: int,
) -> torch.Tensor:
    """Run the work-group schedule of ``matmult_kernel`` on the CPU.

    Each group stages its column slice of B once, then stages one row of A
    per output row and lets every lane take a dot product against it.
    """
    n = check_square_pair(a, b)
    nd = NDRange(global_size=n, local_size=local_size)
    a = a.to(torch.float32)
    b = b.to(torch.float32)
    c = alloc_mat(n, n)

    for group in range(nd.num_groups):
        cols = slice(group * local_size, (group + 1) * local_size)
        b_slice = b[:, cols].clone()
        for i in range(n):
            a_row = a[i].clone()
            c[i, cols] = (a_row[:, None] * b_slice).sum(dim=0)

    return c


def explain_tiling() -> str:
    return """
Tiled Matrix Multiplication (column-partitioned)

C = A @ B for square N x N matrices:

1. Launch Geometry:
   - Global range: N workers, one per output column j
   - Work-group size: gcd(compute units, N)
   - The gcd always divides N, so no worker is left over
   - Grid size = N / work-group size (one Triton program per group)

2. Column Staging:
   - Each group loads its N x local_size slice of B once
   - The slice stays in fast memory for the whole kernel

3. Row Loop:
   - For every row i, the group loads row i of A
   - Each lane computes dot(A[i, :], B[:, j]) from the staged data
   - The lane writes the single element C[i][j]

4. Correctness:
   - Inputs are small non-negative integers stored as float32
   - Every partial sum is exact, so the GPU result matches the
     serial triple loop bit for bit regardless of summation order
"""


if __name__ == "__main__":
    print(explain_tiling())

    if not torch.cuda.is_available() or not TRITON_AVAILABLE:
        print("CUDA or Triton not available")
    else:
        from .matrices import compare_mat, init_mat

        device = select_device()
        print(f"Device: {device.name} ({device.compute_units} compute units)")
        print("=" * 60)
        for n in [64, 256, 1000]:
            a = init_mat(n, n, seed=0)
            b = init_mat(n, n, seed=1)
            run = tiled_matmul(a, b, device)
            ok = compare_mat(run.result, torch.matmul(a, b))
            print(f"N={n:5d}: local={run.work_group_size:4d}, "
                  f"kernel {run.kernel_ms:8.2f} ms, total {run.total_ms:8.2f} ms, "
                  f"match={ok}")
