"""Resource records that the cloud operations read and update in place."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

NETWORK_TYPE_ISOLATED = "Isolated"


@dataclass
class ResourceIdentifier:
    """A CloudStack resource referred to by UUID, name, or both."""

    id: str = ""
    name: str = ""


@dataclass
class DiskOffering:
    """Disk offering requested for a machine's data disk."""

    id: str = ""
    name: str = ""
    custom_size: int = 0
    mount_path: str = ""
    device: str = ""
    filesystem: str = ""
    label: str = ""


@dataclass
class NodeAddress:
    """An address reported for a machine."""

    type: str = ""
    address: str = ""


@dataclass
class MachineSpec:
    """Desired state of a CloudStack machine."""

    instance_id: Optional[str] = None
    provider_id: Optional[str] = None
    offering: ResourceIdentifier = field(default_factory=ResourceIdentifier)
    template: ResourceIdentifier = field(default_factory=ResourceIdentifier)
    disk_offering: DiskOffering = field(default_factory=DiskOffering)
    ssh_key: str = ""
    affinity: str = ""
    affinity_group_ids: List[str] = field(default_factory=list)
    details: Optional[Dict[str, str]] = None


@dataclass
class MachineStatus:
    """Observed state of a CloudStack machine."""

    addresses: List[NodeAddress] = field(default_factory=list)
    instance_state: str = ""
    instance_state_last_updated: Optional[datetime] = None
    status: Optional[str] = None


@dataclass
class CloudStackMachine:
    """Infrastructure machine backed by a CloudStack VM."""

    name: str = ""
    spec: MachineSpec = field(default_factory=MachineSpec)
    status: MachineStatus = field(default_factory=MachineStatus)


@dataclass
class CapiMachine:
    """The owning cluster-level machine."""

    name: str = ""


@dataclass
class Network:
    """A CloudStack guest network."""

    id: str = ""
    name: str = ""
    type: str = ""


@dataclass
class Zone:
    """A CloudStack zone together with the network used in it."""

    id: str = ""
    name: str = ""
    network: Network = field(default_factory=Network)


@dataclass
class FailureDomain:
    """A failure domain, placing machines in a zone."""

    name: str = ""
    zone: Zone = field(default_factory=Zone)


@dataclass
class ControlPlaneEndpoint:
    """Host and port of a cluster's API endpoint."""

    host: str = ""
    port: int = 0


@dataclass
class CloudStackCluster:
    """Infrastructure cluster."""

    name: str = ""
    control_plane_endpoint: ControlPlaneEndpoint = field(
        default_factory=ControlPlaneEndpoint
    )


@dataclass
class IsolatedNetworkSpec:
    """Desired state of an isolated network."""

    id: str = ""
    name: str = ""
    control_plane_endpoint: ControlPlaneEndpoint = field(
        default_factory=ControlPlaneEndpoint
    )


@dataclass
class IsolatedNetworkStatus:
    """Observed state of an isolated network."""

    public_ip_id: str = ""
    lb_rule_id: str = ""


@dataclass
class IsolatedNetwork:
    """An isolated network serving one cluster's control plane."""

    name: str = ""
    spec: IsolatedNetworkSpec = field(default_factory=IsolatedNetworkSpec)
    status: IsolatedNetworkStatus = field(default_factory=IsolatedNetworkStatus)

    def network(self) -> Network:
        """Return a fresh network record for this isolated network."""
        return Network(id=self.spec.id, name=self.spec.name, type=NETWORK_TYPE_ISOLATED)


@dataclass
class AffinityGroupResource:
    """An affinity group resource as referenced by machines."""

    id: str = ""
    name: str = ""
    type: str = ""