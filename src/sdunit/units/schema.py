"""Static option schema for systemd unit sections.

Option lists follow the systemd.unit(5), systemd.exec(5), systemd.kill(5),
systemd.resource-control(5) and per-type man pages. Order matters: rendered
unit files list options in the order declared here.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sdunit.errors import ValidationError


class UnitType(str, Enum):
    """Unit categories; the value doubles as the unit file suffix."""

    AUTOMOUNT = "automount"
    DEVICE = "device"
    MOUNT = "mount"
    PATH = "path"
    SCOPE = "scope"
    SERVICE = "service"
    SLICE = "slice"
    SOCKET = "socket"
    SWAP = "swap"
    TARGET = "target"
    TIMER = "timer"

    def __str__(self) -> str:
        return self.value


UNIT_SECTION = "unit"
INSTALL_SECTION = "install"


_CONDITIONS = (
    "Architecture",
    "Virtualization",
    "Host",
    "KernelCommandLine",
    "Security",
    "Capability",
    "ACPower",
    "NeedsUpdate",
    "FirstBoot",
    "PathExists",
    "PathExistsGlob",
    "PathIsDirectory",
    "PathIsSymbolicLink",
    "PathIsMountPoint",
    "PathIsReadWrite",
    "DirectoryNotEmpty",
    "FileNotEmpty",
    "FileIsExecutable",
)

UNIT_OPTIONS: tuple[str, ...] = (
    "Description",
    "Documentation",
    "Requires",
    "Requisite",
    "Wants",
    "BindsTo",
    "PartOf",
    "Conflicts",
    "Before",
    "After",
    "OnFailure",
    "PropagatesReloadTo",
    "ReloadPropagatedFrom",
    "JoinsNamespaceOf",
    "RequiresMountsFor",
    "OnFailureJobMode",
    "IgnoreOnIsolate",
    "StopWhenUnneeded",
    "RefuseManualStart",
    "RefuseManualStop",
    "AllowIsolate",
    "DefaultDependencies",
    "JobTimeoutSec",
    "JobTimeoutAction",
    "JobTimeoutRebootArgument",
    "StartLimitIntervalSec",
    "StartLimitBurst",
    "StartLimitAction",
    "RebootArgument",
    "SourcePath",
    *(f"Condition{c}" for c in _CONDITIONS),
    *(f"Assert{c}" for c in _CONDITIONS),
)

# Alias is handled through UnitSpec.aliases, not as a plain option.
INSTALL_OPTIONS: tuple[str, ...] = (
    "WantedBy",
    "RequiredBy",
    "Also",
    "DefaultInstance",
)

EXEC_OPTIONS: tuple[str, ...] = (
    "WorkingDirectory",
    "RootDirectory",
    "User",
    "Group",
    "SupplementaryGroups",
    "Nice",
    "OOMScoreAdjust",
    "IOSchedulingClass",
    "IOSchedulingPriority",
    "CPUSchedulingPolicy",
    "CPUSchedulingPriority",
    "CPUSchedulingResetOnFork",
    "CPUAffinity",
    "UMask",
    "Environment",
    "EnvironmentFile",
    "PassEnvironment",
    "StandardInput",
    "StandardOutput",
    "StandardError",
    "TTYPath",
    "TTYReset",
    "TTYVHangup",
    "TTYVTDisallocate",
    "SyslogIdentifier",
    "SyslogFacility",
    "SyslogLevel",
    "SyslogLevelPrefix",
    "TimerSlackNSec",
    "LimitCPU",
    "LimitFSIZE",
    "LimitDATA",
    "LimitSTACK",
    "LimitCORE",
    "LimitRSS",
    "LimitNOFILE",
    "LimitAS",
    "LimitNPROC",
    "LimitMEMLOCK",
    "LimitLOCKS",
    "LimitSIGPENDING",
    "LimitMSGQUEUE",
    "LimitNICE",
    "LimitRTPRIO",
    "LimitRTTIME",
    "PAMName",
    "CapabilityBoundingSet",
    "AmbientCapabilities",
    "SecureBits",
    "ReadWriteDirectories",
    "ReadOnlyDirectories",
    "InaccessibleDirectories",
    "PrivateTmp",
    "PrivateDevices",
    "PrivateNetwork",
    "ProtectSystem",
    "ProtectHome",
    "MountFlags",
    "UtmpIdentifier",
    "UtmpMode",
    "SELinuxContext",
    "AppArmorProfile",
    "SmackProcessLabel",
    "IgnoreSIGPIPE",
    "NoNewPrivileges",
    "SystemCallFilter",
    "SystemCallErrorNumber",
    "SystemCallArchitectures",
    "RestrictAddressFamilies",
    "Personality",
    "RuntimeDirectory",
    "RuntimeDirectoryMode",
)

KILL_OPTIONS: tuple[str, ...] = (
    "KillMode",
    "KillSignal",
    "SendSIGHUP",
    "SendSIGKILL",
)

RESOURCE_CONTROL_OPTIONS: tuple[str, ...] = (
    "CPUAccounting",
    "CPUShares",
    "StartupCPUShares",
    "CPUQuota",
    "MemoryAccounting",
    "MemoryLimit",
    "TasksAccounting",
    "TasksMax",
    "IOAccounting",
    "IOWeight",
    "StartupIOWeight",
    "IODeviceWeight",
    "IOReadBandwidthMax",
    "IOWriteBandwidthMax",
    "IOReadIOPSMax",
    "IOWriteIOPSMax",
    "BlockIOAccounting",
    "BlockIOWeight",
    "StartupBlockIOWeight",
    "BlockIODeviceWeight",
    "BlockIOReadBandwidth",
    "BlockIOWriteBandwidth",
    "DeviceAllow",
    "DevicePolicy",
    "Slice",
    "Delegate",
)

_PROCESS_OPTIONS = EXEC_OPTIONS + KILL_OPTIONS + RESOURCE_CONTROL_OPTIONS

SERVICE_OPTIONS: tuple[str, ...] = (
    "Type",
    "RemainAfterExit",
    "GuessMainPID",
    "PIDFile",
    "BusName",
    "ExecStart",
    "ExecStartPre",
    "ExecStartPost",
    "ExecReload",
    "ExecStop",
    "ExecStopPost",
    "RestartSec",
    "TimeoutStartSec",
    "TimeoutStopSec",
    "TimeoutSec",
    "RuntimeMaxSec",
    "WatchdogSec",
    "Restart",
    "SuccessExitStatus",
    "RestartPreventExitStatus",
    "RestartForceExitStatus",
    "PermissionsStartOnly",
    "RootDirectoryStartOnly",
    "NonBlocking",
    "NotifyAccess",
    "Sockets",
    "FailureAction",
    "FileDescriptorStoreMax",
    "USBFunctionDescriptors",
    "USBFunctionStrings",
) + _PROCESS_OPTIONS

SOCKET_OPTIONS: tuple[str, ...] = (
    "ListenStream",
    "ListenDatagram",
    "ListenSequentialPacket",
    "ListenFIFO",
    "ListenSpecial",
    "ListenNetlink",
    "ListenMessageQueue",
    "ListenUSBFunction",
    "SocketProtocol",
    "BindIPv6Only",
    "Backlog",
    "BindToDevice",
    "SocketUser",
    "SocketGroup",
    "SocketMode",
    "DirectoryMode",
    "Accept",
    "Writable",
    "MaxConnections",
    "KeepAlive",
    "KeepAliveTimeSec",
    "KeepAliveIntervalSec",
    "KeepAliveProbes",
    "NoDelay",
    "Priority",
    "DeferAcceptSec",
    "ReceiveBuffer",
    "SendBuffer",
    "IPTOS",
    "IPTTL",
    "Mark",
    "ReusePort",
    "SmackLabel",
    "SmackLabelIPIn",
    "SmackLabelIPOut",
    "SELinuxContextFromNet",
    "PipeSize",
    "MessageQueueMaxMessages",
    "MessageQueueMessageSize",
    "FreeBind",
    "Transparent",
    "Broadcast",
    "PassCredentials",
    "PassSecurity",
    "TCPCongestion",
    "ExecStartPre",
    "ExecStartPost",
    "ExecStopPre",
    "ExecStopPost",
    "TimeoutSec",
    "Service",
    "RemoveOnStop",
    "Symlinks",
    "FileDescriptorName",
    "TriggerLimitIntervalSec",
    "TriggerLimitBurst",
) + _PROCESS_OPTIONS

MOUNT_OPTIONS: tuple[str, ...] = (
    "What",
    "Where",
    "Type",
    "Options",
    "SloppyOptions",
    "LazyUnmount",
    "ForceUnmount",
    "DirectoryMode",
    "TimeoutSec",
) + _PROCESS_OPTIONS

AUTOMOUNT_OPTIONS: tuple[str, ...] = (
    "Where",
    "DirectoryMode",
    "TimeoutIdleSec",
)

SWAP_OPTIONS: tuple[str, ...] = (
    "What",
    "Priority",
    "Options",
    "TimeoutSec",
) + _PROCESS_OPTIONS

PATH_OPTIONS: tuple[str, ...] = (
    "PathExists",
    "PathExistsGlob",
    "PathChanged",
    "PathModified",
    "DirectoryNotEmpty",
    "Unit",
    "MakeDirectory",
    "DirectoryMode",
)

TIMER_OPTIONS: tuple[str, ...] = (
    "OnActiveSec",
    "OnBootSec",
    "OnStartupSec",
    "OnUnitActiveSec",
    "OnUnitInactiveSec",
    "OnCalendar",
    "AccuracySec",
    "RandomizedDelaySec",
    "Unit",
    "Persistent",
    "WakeSystem",
    "RemainAfterElapse",
)

SLICE_OPTIONS: tuple[str, ...] = RESOURCE_CONTROL_OPTIONS

SCOPE_OPTIONS: tuple[str, ...] = KILL_OPTIONS + RESOURCE_CONTROL_OPTIONS


@dataclass(frozen=True)
class UnitTypeDescriptor:
    """Everything that distinguishes one unit type from another."""

    conf_type: UnitType
    label: str
    options: tuple[str, ...] = ()

    @property
    def is_stub(self) -> bool:
        """Stub types have no type-specific section."""
        return not self.options


UNIT_TYPES: dict[UnitType, UnitTypeDescriptor] = {
    UnitType.AUTOMOUNT: UnitTypeDescriptor(UnitType.AUTOMOUNT, "Automount", AUTOMOUNT_OPTIONS),
    UnitType.DEVICE: UnitTypeDescriptor(UnitType.DEVICE, "Device"),
    UnitType.MOUNT: UnitTypeDescriptor(UnitType.MOUNT, "Mount", MOUNT_OPTIONS),
    UnitType.PATH: UnitTypeDescriptor(UnitType.PATH, "Path", PATH_OPTIONS),
    UnitType.SCOPE: UnitTypeDescriptor(UnitType.SCOPE, "Scope", SCOPE_OPTIONS),
    UnitType.SERVICE: UnitTypeDescriptor(UnitType.SERVICE, "Service", SERVICE_OPTIONS),
    UnitType.SLICE: UnitTypeDescriptor(UnitType.SLICE, "Slice", SLICE_OPTIONS),
    UnitType.SOCKET: UnitTypeDescriptor(UnitType.SOCKET, "Socket", SOCKET_OPTIONS),
    UnitType.SWAP: UnitTypeDescriptor(UnitType.SWAP, "Swap", SWAP_OPTIONS),
    UnitType.TARGET: UnitTypeDescriptor(UnitType.TARGET, "Target"),
    UnitType.TIMER: UnitTypeDescriptor(UnitType.TIMER, "Timer", TIMER_OPTIONS),
}

STUB_TYPES: frozenset[UnitType] = frozenset(
    t for t, desc in UNIT_TYPES.items() if desc.is_stub
)

_COMMON_SECTIONS: dict[str, tuple[str, tuple[str, ...]]] = {
    UNIT_SECTION: ("Unit", UNIT_OPTIONS),
    INSTALL_SECTION: ("Install", INSTALL_OPTIONS),
}


def parse_unit_type(value: str | UnitType) -> UnitType:
    """Convert a string such as 'service' into a UnitType."""
    if isinstance(value, UnitType):
        return value
    try:
        return UnitType(str(value).lower())
    except ValueError:
        raise ValidationError(
            f"Invalid conf_type: {value!r}. "
            f"Expected one of: {', '.join(t.value for t in UnitType)}"
        ) from None


def get_descriptor(conf_type: str | UnitType) -> UnitTypeDescriptor:
    """Look up the descriptor for a unit type."""
    return UNIT_TYPES[parse_unit_type(conf_type)]


def is_stub_section(section: str) -> bool:
    """Check whether a section identifier names a stub unit type."""
    return section in {t.value for t in STUB_TYPES}


def section_label(section: str) -> str:
    """INI header for a section identifier ('unit' -> 'Unit')."""
    if section in _COMMON_SECTIONS:
        return _COMMON_SECTIONS[section][0]
    return get_descriptor(section).label


def section_options(section: str) -> tuple[str, ...]:
    """Ordered permitted option names for a section identifier."""
    if section in _COMMON_SECTIONS:
        return _COMMON_SECTIONS[section][1]
    return get_descriptor(section).options


_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def snake_case(option: str) -> str:
    """'WantedBy' -> 'wanted_by', 'CPUQuota' -> 'cpu_quota'."""
    return _CAMEL_BOUNDARY.sub("_", option).lower()


def canonical_option(section: str, name: str) -> Optional[str]:
    """
    Resolve an option name as written in config to its systemd spelling.

    Accepts the systemd name itself or its snake_case form. Returns None if
    the section does not declare the option.
    """
    options = section_options(section)
    if name in options:
        return name
    for option in options:
        if snake_case(option) == name:
            return option
    return None
