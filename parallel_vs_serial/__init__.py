"""
Parallel vs Serial Matrix Multiplication

This package covers:
- A naive triple-loop serial matmul as the reference
- Device enumeration and vendor-based selection
- Work-group sizing via gcd(compute units, N)
- A column-partitioned tiled GPU kernel in Triton
- Profiling both paths and checking exact agreement
"""

from .benchmark import (
    BenchmarkConfig,
    BenchmarkResult,
    main,
    matmul_flops,
    run_benchmark,
)
from .device import DeviceError, DeviceInfo, list_devices, select_device
from .matrices import alloc_mat, compare_mat, format_mat, init_mat, print_mat
from .serial import run_serial, serial_matmul
from .tiled_matmul import (
    GpuRun,
    emulate_tiled_matmul,
    explain_tiling,
    plan_launch,
    tiled_matmul,
)
from .timing import Timing
from .workgroup import NDRange, local_memory_bytes, work_group_size

__all__ = [
    "alloc_mat",
    "init_mat",
    "format_mat",
    "print_mat",
    "compare_mat",
    "serial_matmul",
    "run_serial",
    "Timing",
    "DeviceError",
    "DeviceInfo",
    "list_devices",
    "select_device",
    "NDRange",
    "work_group_size",
    "local_memory_bytes",
    "GpuRun",
    "plan_launch",
    "tiled_matmul",
    "emulate_tiled_matmul",
    "explain_tiling",
    "BenchmarkConfig",
    "BenchmarkResult",
    "matmul_flops",
    "run_benchmark",
    "main",
]
