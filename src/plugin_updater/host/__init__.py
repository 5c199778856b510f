"""Host integration: the service object and the descriptors it hands back."""

from plugin_updater.host.descriptors import (
    PluginInformation,
    PluginUpdateState,
    UpdateDescriptor,
)
from plugin_updater.host.service import UpdateService

__all__ = ["PluginInformation", "PluginUpdateState", "UpdateDescriptor", "UpdateService"]
