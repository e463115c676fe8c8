"""Firewall, public IP and isolated network lookups."""

from __future__ import annotations

from typing import Any, List

from capcloud.base import ClientBase, CloudError
from capcloud.models import CloudStackCluster, FailureDomain, IsolatedNetwork

NETWORK_PROTOCOL_TCP = "tcp"


class PublicIPOperations(ClientBase):
    """Operations on firewall rules, public addresses and isolated networks."""

    def open_firewall_rules(self, iso_net: IsolatedNetwork) -> None:
        """Open the egress firewall of ``iso_net``; an existing rule counts as success."""
        try:
            self.cs.firewall.create_egress_firewall_rule(iso_net.spec.id, NETWORK_PROTOCOL_TCP)
        except Exception as exc:
            if "there is already" in str(exc).lower():
                return
            self._record_error(exc)
            raise

    def get_public_ip(
        self,
        failure_domain: FailureDomain,
        iso_net: IsolatedNetwork,
        cluster: CloudStackCluster,
    ) -> Any:
        """Return the public address to use for the cluster's API endpoint.

        A host named by the cluster's endpoint is used when found.  Otherwise an
        address already allocated to the network (and not its source NAT) is
        preferred, then any unallocated address.
        """
        host = cluster.control_plane_endpoint.host
        params = {"allocated_only": False, "zone_id": failure_domain.zone.id}
        if host:
            params["ip_address"] = host
        with self._recording():
            response = self.cs.address.list_public_ip_addresses(**params)

        addresses = list(response.public_ip_addresses or [])
        if host and response.count == 1:
            return addresses[0]
        if response.count > 0:
            for address in addresses:
                if (
                    address.allocated
                    and address.associated_network_id == iso_net.spec.id
                    and not address.is_source_nat
                ):
                    return address
            for address in addresses:
                if not address.allocated:
                    return address
            raise CloudError("all Public IP Address(es) found were already allocated")
        raise CloudError("no public addresses found in available networks")

    def get_isolated_network(self, iso_net: IsolatedNetwork) -> None:
        """Resolve ``iso_net`` by name, filling its ID, or else by ID, filling its name."""
        errors: List[str] = []
        network_service = self.cs.network
        try:
            found, count = network_service.get_network_by_name(iso_net.spec.name)
        except Exception as exc:
            self._record_error(exc)
            errors.append(f"could not get Network ID from {iso_net.spec.name}: {exc}")
        else:
            if count == 1:
                iso_net.spec.id = found.id
                return
            errors.append(f"expected 1 Network with name {iso_net.name}, but got {count}")

        try:
            found, count = network_service.get_network_by_id(iso_net.spec.id)
        except Exception as exc:
            self._record_error(exc)
            errors.append(f"could not get Network by ID {iso_net.spec.id}: {exc}")
            raise CloudError("; ".join(errors)) from exc
        if count != 1:
            errors.append(f"expected 1 Network with UUID {iso_net.spec.id}, but got {count}")
            raise CloudError("; ".join(errors))
        iso_net.name = found.name