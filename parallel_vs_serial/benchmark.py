import argparse
from dataclasses import dataclass

from .device import DEFAULT_VENDOR, DeviceError, select_device
from .matrices import compare_mat, init_mat, print_mat
from .serial import LOOP_ORDERS, run_serial
from .tiled_matmul import plan_launch, tiled_matmul


@dataclass
class BenchmarkConfig:
    size: int = 256
    seed: int = 0
    vendor: str = DEFAULT_VENDOR
    loop_order: str = "ijk"
    print_matrices: bool = False


@dataclass
class BenchmarkResult:
    size: int
    device_name: str
    work_group_size: int
    serial_ms: float
    kernel_ms: float
    upload_ms: float
    download_ms: float
    matrices_equal: bool

    @property
    def speedup(self) -> float:
        if self.kernel_ms == 0:
            return float("inf")
        return self.serial_ms / self.kernel_ms

    def summary(self) -> str:
        flops = matmul_flops(self.size)
        serial_gflops = flops / (self.serial_ms * 1e-3) / 1e9 if self.serial_ms > 0 else 0.0
        kernel_gflops = flops / (self.kernel_ms * 1e-3) / 1e9 if self.kernel_ms > 0 else 0.0
        verdict = "equal" if self.matrices_equal else "not equal"
        return f"""
Parallel vs Serial Matrix Multiplication
========================================
Matrix size: {self.size} x {self.size}
Device: {self.device_name}
Work-group size: {self.work_group_size}

Serial Time Taken in Milliseconds: {self.serial_ms:.1f} ({serial_gflops:.3f} GFLOPS)
GPU kernel time = {self.kernel_ms:.1f} ms ({kernel_gflops:.1f} GFLOPS)
GPU transfers: upload {self.upload_ms:.1f} ms, download {self.download_ms:.1f} ms
Speedup (serial / kernel): {self.speedup:.1f}x

Matrices are {verdict}
"""


def matmul_flops(n: int) -> int:
    return 2 * n * n * n


def run_benchmark(config: BenchmarkConfig) -> BenchmarkResult:
    if config.size <= 0:
        raise ValueError(f"Matrix size must be positive, got {config.size}")
    device = select_device(config.vendor)
    plan_launch(config.size, device)

    a = init_mat(config.size, config.size, seed=config.seed)
    b = init_mat(config.size, config.size, seed=config.seed + 1)

    serial = run_serial(a, b, loop_order=config.loop_order)
    gpu = tiled_matmul(a, b, device)

    if config.print_matrices:
        print_mat(a, "A")
        print_mat(b, "B")
        print_mat(serial.result, "C (serial)")
        print_mat(gpu.result, "C (GPU)")

    return BenchmarkResult(
        size=config.size,
        device_name=gpu.device_name,
        work_group_size=gpu.work_group_size,
        serial_ms=serial.timing.elapsed_ms,
        kernel_ms=gpu.kernel_ms,
        upload_ms=gpu.upload_ms,
        download_ms=gpu.download_ms,
        matrices_equal=compare_mat(gpu.result, serial.result),
    )


def build_parser() -> argparse.ArgumentParser:
    defaults = BenchmarkConfig()
    parser = argparse.ArgumentParser(
        description="Compare a serial triple-loop matmul against a tiled GPU kernel",
    )
    parser.add_argument("--size", type=int, default=defaults.size,
                        help="Dimension N of the square matrices")
    parser.add_argument("--seed", type=int, default=defaults.seed,
                        help="Seed for the random integer inputs")
    parser.add_argument("--vendor", default=defaults.vendor,
                        help="Substring to match against the device name")
    parser.add_argument("--loop-order", choices=LOOP_ORDERS, default=defaults.loop_order,
                        help="Loop nesting of the serial reference")
    parser.add_argument("--print-matrices", action="store_true",
                        help="Print the inputs and both products")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = BenchmarkConfig(
        size=args.size,
        seed=args.seed,
        vendor=args.vendor,
        loop_order=args.loop_order,
        print_matrices=args.print_matrices,
    )

    try:
        result = run_benchmark(config)
    except DeviceError as e:
        print(f"GPU unavailable. Error: {e}")
        return 1
    except ValueError as e:
        print(f"Invalid problem. Error: {e}")
        return 1

    print(result.summary())
    return 0 if result.matrices_equal else 1


if __name__ == "__main__":
    raise SystemExit(main())
