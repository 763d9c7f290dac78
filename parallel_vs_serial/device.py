from dataclasses import dataclass

import torch

DEFAULT_VENDOR = "NVIDIA"


class DeviceError(RuntimeError):
    pass


@dataclass
class DeviceInfo:
    index: int
    name: str
    compute_units: int
    max_work_group_size: int
    local_memory_bytes: int
    total_memory_bytes: int
    compute_capability: tuple

    @property
    def torch_device(self) -> torch.device:
        return torch.device("cuda", self.index)


def get_device_info(index: int) -> DeviceInfo:
    props = torch.cuda.get_device_properties(index)
    return DeviceInfo(
        index=index,
        name=props.name,
        compute_units=props.multi_processor_count,
        max_work_group_size=getattr(props, "max_threads_per_block", 1024),
        local_memory_bytes=getattr(props, "shared_memory_per_block", 48 * 1024),
        total_memory_bytes=props.total_memory,
        compute_capability=(props.major, props.minor),
    )


def list_devices() -> list[DeviceInfo]:
    if not torch.cuda.is_available():
        return []
    return [get_device_info(i) for i in range(torch.cuda.device_count())]


def select_device(vendor: str = DEFAULT_VENDOR) -> DeviceInfo:
    if not torch.cuda.is_available():
        raise DeviceError("No platforms found: CUDA runtime is not available")

    devices = list_devices()
    if not devices:
        raise DeviceError("Could not get device in platform: no CUDA devices visible")

    for device in devices:
        if vendor in device.name:
            return device
    return devices[0]


if __name__ == "__main__":
    devices = list_devices()
    if not devices:
        print("No CUDA GPU available")
    else:
        for device in devices:
            print(f"[{device.index}] {device.name}")
            print(f"  Compute units: {device.compute_units}")
            print(f"  Compute capability: {device.compute_capability}")
            print(f"  Max work-group size: {device.max_work_group_size}")
            print(f"  Local memory/work-group: {device.local_memory_bytes // 1024} KB")
            print(f"  Memory: {device.total_memory_bytes / 1024**3:.1f} GB")
        print(f"\nSelected: {select_device().name}")
