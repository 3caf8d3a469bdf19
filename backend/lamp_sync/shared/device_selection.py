"""
Target device selection.
"""

from typing import Iterable, Optional

from shared.models import Device


def select_latest_device(devices: Iterable[Device], device_type: str = "Lamp") -> Optional[Device]:
    """
    Pick the device of the given type with the highest id.

    Only the devices passed in are considered. The caller fetches a single
    page, so on registries with more devices than one page holds this may not
    be the newest device overall.

    Args:
        devices: Devices returned by the registry
        device_type: Exact, case-sensitive type tag to match

    Returns:
        Matching device with the maximum id, or None if none match
    """
    matching = sorted(
        (device for device in devices if device.type == device_type),
        key=lambda device: device.id
    )
    return matching[-1] if matching else None
