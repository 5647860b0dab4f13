"""
Context classifier mapping partition paths to SELinux labels
Labels are inferred from path markers and the partition name with two ordered rule tables
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from file_contexts_gen.config import FilesystemType

class SELinuxType(Enum):
    """SELinux file types emitted by the generator"""
    HAL_ALLOCATOR_DEFAULT_EXEC = "hal_allocator_default_exec"
    SYSTEM_FILE = "system_file"
    SYSTEM_LIB_FILE = "system_lib_file"
    VENDOR_QTI_INIT_SHELL_EXEC = "vendor_qti_init_shell_exec"
    VENDOR_CONFIGS_FILE = "vendor_configs_file"
    VENDOR_FIRMWARE_FILE = "vendor_firmware_file"
    VENDOR_APP_FILE = "vendor_app_file"
    VENDOR_FRAMEWORK_FILE = "vendor_framework_file"
    VENDOR_OVERLAY_FILE = "vendor_overlay_file"
    VENDOR_FILE = "vendor_file"

    @property
    def context(self) -> str:
        return f"u:object_r:{self.value}:s0"

class PartitionScope(Enum):
    """Which partitions a rule applies to"""
    ANY = "any"
    VENDOR = "vendor"      # vendor, vendor_dlkm, odm, ...
    SYSTEM = "system"      # everything that is not vendor/odm

def is_vendor_partition(partition: str) -> bool:
    """Substring match so vendor_dlkm, odm_dlkm etc. share the vendor rules"""
    return "vendor" in partition or "odm" in partition

@dataclass(frozen=True)
class ContextRule:
    """A single (predicate, label) rule; empty markers match any path"""
    markers: Tuple[str, ...]
    selinux_type: SELinuxType
    scope: PartitionScope = PartitionScope.ANY

    def matches(self, path: str, vendor: bool) -> bool:
        if self.scope is PartitionScope.VENDOR and not vendor:
            return False
        if self.scope is PartitionScope.SYSTEM and vendor:
            return False
        if not self.markers:
            return True
        return any(marker in path for marker in self.markers)

# Order matters: /bin/hw/ before /bin/
FILE_RULES: Tuple[ContextRule, ...] = (
    ContextRule(("/bin/hw/",), SELinuxType.HAL_ALLOCATOR_DEFAULT_EXEC),
    ContextRule(("/bin/",), SELinuxType.SYSTEM_FILE, PartitionScope.SYSTEM),
    ContextRule(("/bin/",), SELinuxType.VENDOR_QTI_INIT_SHELL_EXEC, PartitionScope.VENDOR),
    ContextRule(("/lib/", "/lib64/"), SELinuxType.SYSTEM_LIB_FILE, PartitionScope.SYSTEM),
    ContextRule(("/etc/",), SELinuxType.VENDOR_CONFIGS_FILE, PartitionScope.VENDOR),
    ContextRule(("/firmware/",), SELinuxType.VENDOR_FIRMWARE_FILE, PartitionScope.VENDOR),
    ContextRule(("/app/", "/priv-app/"), SELinuxType.VENDOR_APP_FILE, PartitionScope.VENDOR),
    ContextRule(("/framework/",), SELinuxType.VENDOR_FRAMEWORK_FILE, PartitionScope.VENDOR),
    ContextRule(("/overlay/",), SELinuxType.VENDOR_OVERLAY_FILE, PartitionScope.VENDOR),
    ContextRule((), SELinuxType.VENDOR_FILE, PartitionScope.VENDOR),
    ContextRule((), SELinuxType.SYSTEM_FILE),
)

# Directory markers carry no trailing slash
DIRECTORY_RULES: Tuple[ContextRule, ...] = (
    ContextRule(("/etc",), SELinuxType.VENDOR_CONFIGS_FILE, PartitionScope.VENDOR),
    ContextRule(("/firmware",), SELinuxType.VENDOR_FIRMWARE_FILE, PartitionScope.VENDOR),
    ContextRule(("/app", "/priv-app"), SELinuxType.VENDOR_APP_FILE, PartitionScope.VENDOR),
    ContextRule(("/framework",), SELinuxType.VENDOR_FRAMEWORK_FILE, PartitionScope.VENDOR),
    ContextRule(("/overlay",), SELinuxType.VENDOR_OVERLAY_FILE, PartitionScope.VENDOR),
    ContextRule((), SELinuxType.VENDOR_FILE, PartitionScope.VENDOR),
    ContextRule((), SELinuxType.SYSTEM_FILE),
)

def match_rule(rules: Tuple[ContextRule, ...], escaped_path: str, partition: str) -> SELinuxType:
    """Return the type of the first matching rule"""
    path = f"/{escaped_path}"
    vendor = is_vendor_partition(partition)
    for rule in rules:
        if rule.matches(path, vendor):
            return rule.selinux_type
    # Both tables end with an unconditional rule
    raise LookupError(f"No context rule matched {path}")

def classify_file(escaped_path: str, partition: str) -> str:
    """
    Build the file_contexts line for a regular file

    Args:
        escaped_path: Relative path with regex metacharacters escaped
        partition: Partition name (basename of the extracted directory)

    Returns:
        Line of the form "/<partition>/<path> u:object_r:<type>:s0"
    """
    selinux_type = match_rule(FILE_RULES, escaped_path, partition)
    return f"/{partition}/{escaped_path} {selinux_type.context}"

def classify_directory(escaped_path: str, partition: str, fstype: FilesystemType) -> str:
    """
    Build the file_contexts line for a directory

    The filesystem folder pattern is appended to the path so ext4 entries
    also cover the directory's descendants.
    """
    selinux_type = match_rule(DIRECTORY_RULES, escaped_path, partition)
    return f"/{partition}/{escaped_path}{fstype.folder_pattern()} {selinux_type.context}"

class ContextClassifier:
    """Classifier bound to one partition and filesystem type"""

    def __init__(self, partition: str, fstype: FilesystemType):
        self.partition = partition
        self.fstype = fstype

    def classify(self, escaped_path: str, is_dir: bool) -> str:
        if is_dir:
            return classify_directory(escaped_path, self.partition, self.fstype)
        return classify_file(escaped_path, self.partition)
