# capcloud

Operations against a CloudStack API for running cluster infrastructure:
resolving service offerings, templates and disk offerings for machines,
managing affinity groups, and working with isolated networks, their public
IPs, firewall rules and load balancer rules.

The package has no third-party dependencies.

## Installation

```
pip install capcloud
```

For running the test suite:

```
pip install "capcloud[test]"
pytest
```

## Operation classes

The operations are grouped in classes that all derive from
`capcloud.base.ClientBase`:

- `capcloud.offerings.OfferingOperations`: `resolve_service_offering`,
  `resolve_template`, `resolve_disk_offering`.
- `capcloud.affinity_groups.AffinityGroupOperations`: `fetch_affinity_group`,
  `get_or_create_affinity_group`, `delete_affinity_group`,
  `associate_affinity_group`, `disassociate_affinity_group`.
- `capcloud.public_ip.PublicIPOperations`: `open_firewall_rules`,
  `get_public_ip`, `get_isolated_network`.
- `capcloud.isolated_network.IsolatedNetworkOperations` (a subclass of
  `PublicIPOperations`): `resolve_load_balancer_rule_details`,
  `get_or_create_load_balancer_rule`, `assign_vm_to_load_balancer_rule`,
  `delete_network`.

Each is constructed with a CloudStack API object, and optionally a second one
for calls that may return before the work is done (by default the first one
serves both). They can be combined into one class:

```python
from capcloud.affinity_groups import AffinityGroupOperations
from capcloud.isolated_network import IsolatedNetworkOperations
from capcloud.offerings import OfferingOperations


class CloudClient(OfferingOperations, AffinityGroupOperations, IsolatedNetworkOperations):
    pass


client = CloudClient(api)
```

`ClientBase` keeps an `error_count` of API calls that raised.

## The API object

The API object is supplied by the caller. It is expected to have these
services and methods; lookups return a `(result, count)` pair, and failures
are raised as exceptions:

- `affinity_group`: `get_affinity_group_by_id(id)`,
  `get_affinity_group_by_name(name)`, `create_affinity_group(name=, type=)`,
  `delete_affinity_group(id=, name=)`,
  `update_vm_affinity_group(instance_id, affinity_group_ids=)`.
- `virtual_machine`: `get_virtual_machine_by_id(id)` (the VM's
  `affinity_groups` are read), `stop_virtual_machine(id)`,
  `start_virtual_machine(id)`.
- `service_offering`: `get_service_offering_by_id(id)`,
  `get_service_offering_id(name, zone_id=)`.
- `template`: `get_template_by_id(id, "executable")`,
  `get_template_id(name, "executable", zone_id)`.
- `disk_offering`: `get_disk_offering_id(name, zone_id=)`,
  `get_disk_offering_by_id(id)` (whose result has `is_customized`).
- `firewall`: `create_egress_firewall_rule(network_id, "tcp")`.
- `address`: `list_public_ip_addresses(allocated_only=, zone_id=, ip_address=)`,
  returning an object with `count` and `public_ip_addresses`.
- `network`: `get_network_by_name(name)`, `get_network_by_id(id)`,
  `delete_network(id)`.
- `load_balancer`: `list_load_balancer_rules(public_ip_id=)`,
  `create_load_balancer_rule(...)`, `list_load_balancer_rule_instances(rule_id)`,
  `assign_to_load_balancer_rule(rule_id, virtual_machine_ids=)`.

## Resources

Resources are plain dataclasses from `capcloud.models`: `CloudStackMachine`
(with `MachineSpec` and `MachineStatus`), `CapiMachine`, `CloudStackCluster`,
`ControlPlaneEndpoint`, `FailureDomain`, `Zone`, `Network`, `IsolatedNetwork`
(with `IsolatedNetworkSpec` and `IsolatedNetworkStatus`), `ResourceIdentifier`,
`DiskOffering`, `NodeAddress` and `AffinityGroupResource`. Affinity groups
themselves are `capcloud.affinity_groups.AffinityGroup`. The operations fill
in IDs, names, ports and rule IDs on these records in place. Failures raise
`capcloud.base.CloudError`.

When no endpoint port is set on either the cluster or the isolated network,
`get_or_create_load_balancer_rule` uses 6443 for both.

`capcloud.helpers.compress_and_encode_string` gzip-compresses a string and
returns it base64-encoded, the form machine user data takes.

## What it does not do

The package does not deploy, look up or destroy virtual machines, and it does
not build API objects from configuration files, secrets or URLs, nor cache
them. The caller creates the API object and passes it in.