from .models import DeviceProfile, DeviceRegistry

__all__ = ["DeviceProfile", "DeviceRegistry"]
