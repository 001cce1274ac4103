"""Operation registry: catalog, descriptors and license-aware enablement."""

from .catalog import CapabilityCatalog
from .enablement import EnablementFilter
from .models import OperationDescriptor, ToolCategory, validate_arguments

__all__ = [
    "CapabilityCatalog",
    "EnablementFilter",
    "OperationDescriptor",
    "ToolCategory",
    "validate_arguments",
]
