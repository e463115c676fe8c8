"""Load balancer rules and network deletion for isolated networks."""

from __future__ import annotations

from capcloud.base import CloudError
from capcloud.models import CloudStackCluster, FailureDomain, IsolatedNetwork, Network
from capcloud.public_ip import NETWORK_PROTOCOL_TCP, PublicIPOperations

K8S_DEFAULT_API_PORT = 6443
_NO_RULE_FOUND = "no load balancer rule found"


class IsolatedNetworkOperations(PublicIPOperations):
    """Operations on the load balancing and lifetime of isolated networks."""

    def resolve_load_balancer_rule_details(
        self,
        failure_domain: FailureDomain,
        iso_net: IsolatedNetwork,
        cluster: CloudStackCluster,
    ) -> None:
        """Record the ID of the rule on the network's public IP for the endpoint port."""
        try:
            with self._recording():
                response = self.cs.load_balancer.list_load_balancer_rules(
                    public_ip_id=iso_net.status.public_ip_id
                )
        except Exception as exc:
            raise CloudError(f"listing load balancer rules: {exc}") from exc
        wanted_port = str(int(iso_net.spec.control_plane_endpoint.port))
        for rule in response.load_balancer_rules or []:
            if rule.public_port == wanted_port:
                iso_net.status.lb_rule_id = rule.id
                return
        raise CloudError(_NO_RULE_FOUND)

    def get_or_create_load_balancer_rule(
        self,
        failure_domain: FailureDomain,
        iso_net: IsolatedNetwork,
        cluster: CloudStackCluster,
    ) -> None:
        """Find the API server load balancer rule, creating it when missing.

        The cluster's endpoint port wins, then the network's; with neither set
        both are given the default API port.
        """
        cluster_endpoint = cluster.control_plane_endpoint
        net_endpoint = iso_net.spec.control_plane_endpoint
        if cluster_endpoint.port != 0:
            net_endpoint.port = cluster_endpoint.port
        elif net_endpoint.port != 0:
            cluster_endpoint.port = net_endpoint.port
        else:
            cluster_endpoint.port = K8S_DEFAULT_API_PORT
            net_endpoint.port = K8S_DEFAULT_API_PORT

        try:
            self.resolve_load_balancer_rule_details(failure_domain, iso_net, cluster)
            return
        except Exception as exc:
            if _NO_RULE_FOUND not in str(exc).lower():
                raise CloudError(f"resolving load balancer rule details: {exc}") from exc

        with self._recording():
            response = self.cs.load_balancer.create_load_balancer_rule(
                algorithm="roundrobin",
                name="Kubernetes_API_Server",
                private_port=K8S_DEFAULT_API_PORT,
                public_port=int(cluster_endpoint.port),
                network_id=iso_net.spec.id,
                public_ip_id=iso_net.status.public_ip_id,
                protocol=NETWORK_PROTOCOL_TCP,
            )
        iso_net.status.lb_rule_id = response.id

    def assign_vm_to_load_balancer_rule(self, iso_net: IsolatedNetwork, instance_id: str) -> None:
        """Add the VM to the network's load balancer rule unless it is already a member."""
        lb = self.cs.load_balancer
        rule_id = iso_net.status.lb_rule_id
        with self._recording():
            response = lb.list_load_balancer_rule_instances(rule_id)
        if any(vm.id == instance_id for vm in response.load_balancer_rule_instances or []):
            return
        with self._recording():
            lb.assign_to_load_balancer_rule(rule_id, virtual_machine_ids=[instance_id])

    def delete_network(self, network: Network) -> None:
        """Delete ``network``."""
        try:
            with self._recording():
                self.cs.network.delete_network(network.id)
        except Exception as exc:
            raise CloudError(f"deleting network with id {network.id}: {exc}") from exc