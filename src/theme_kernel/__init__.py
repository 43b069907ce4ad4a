"""Theme kernel: event dispatcher and versioned configuration validator.

Sub-packages:

- **core**: enums, errors, settings, version parsing, the boot ``Kernel``
- **events**: ``Event`` payload object and the priority-ordered ``EventDispatcher``
- **config**: config schema validation, version compatibility policy, loader, exporter
- **observability**: structlog setup with boot-id correlation
"""

__version__ = "0.1.0"

# Version of the kernel contract, checked against config tolerant windows.
KERNEL_VERSION = "0.1.0"
