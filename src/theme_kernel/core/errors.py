"""Custom exception hierarchy for the theme kernel."""


class KernelError(Exception):
    """Base exception for all theme kernel errors."""


# --- Configuration ---
class ConfigError(KernelError):
    """Invalid kernel configuration."""


class ConfigStructureError(ConfigError):
    """Config shape violation: missing/empty/wrong-typed field, bad section, unknown key."""


class ConfigVersionError(ConfigError):
    """config_version not supported, or validation mode not allowed for it."""


# --- Host boundary ---
class UsageError(KernelError):
    """Invalid CLI invocation, unreadable config file, or non-mapping payload."""


# --- Lifecycle ---
class KernelStateError(KernelError):
    """Kernel used before boot, or booted without a resolvable environment."""
