"""Affinity group lookup, creation, deletion and VM association."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List

from capcloud.base import ClientBase, CloudError
from capcloud.models import CloudStackMachine

ANTI_AFFINITY_GROUP_TYPE = "host anti-affinity"
AFFINITY_GROUP_TYPE = "host affinity"


@dataclass
class AffinityGroup:
    """A CloudStack affinity group."""

    type: str = ""
    name: str = ""
    id: str = ""


def _with_group(groups: Iterable[AffinityGroup], added: AffinityGroup) -> List[AffinityGroup]:
    """Return ``groups`` with ``added`` included, unique by ID."""
    by_id = {added.id: added}
    by_id.update((group.id, group) for group in groups)
    return list(by_id.values())


def _without_group(groups: Iterable[AffinityGroup], removed: AffinityGroup) -> List[AffinityGroup]:
    """Return ``groups`` with any group sharing ``removed``'s ID dropped, unique by ID."""
    by_id = {group.id: group for group in groups}
    by_id.pop(removed.id, None)
    return list(by_id.values())


class AffinityGroupOperations(ClientBase):
    """Operations on CloudStack affinity groups."""

    def fetch_affinity_group(self, group: AffinityGroup) -> None:
        """Fill in ``group`` from CloudStack, looked up by ID or else by name."""
        service = self.cs.affinity_group
        if group.id:
            with self._recording():
                found, count = service.get_affinity_group_by_id(group.id)
            if count > 1:
                raise CloudError("count bad")
            group.name = found.name
            group.type = found.type
            return
        if group.name:
            with self._recording():
                found, count = service.get_affinity_group_by_name(group.name)
            if count > 1:
                raise CloudError("count bad")
            group.id = found.id
            group.type = found.type
            return
        raise CloudError(
            f'could not fetch AffinityGroup by name "{group.name}" or id "{group.id}"'
        )

    def get_or_create_affinity_group(self, group: AffinityGroup) -> None:
        """Fetch ``group``; create it when it cannot be fetched."""
        try:
            self.fetch_affinity_group(group)
        except Exception:
            with self._recording():
                response = self.cs.affinity_group.create_affinity_group(
                    name=group.name, type=group.type
                )
            group.id = response.id

    def delete_affinity_group(self, group: AffinityGroup) -> None:
        """Delete ``group`` using whichever of its ID and name are set."""
        params = {}
        if group.id:
            params["id"] = group.id
        if group.name:
            params["name"] = group.name
        with self._recording():
            self.cs.affinity_group.delete_affinity_group(**params)

    def _current_affinity_groups(self, machine: CloudStackMachine) -> List[AffinityGroup]:
        instance_id = machine.spec.instance_id
        with self._recording():
            vm, count = self.cs.virtual_machine.get_virtual_machine_by_id(instance_id)
        if count > 1:
            raise CloudError(f"found more than one VM for ID: {instance_id}")
        return [
            AffinityGroup(name=g.name, type=g.type, id=g.id)
            for g in (getattr(vm, "affinity_groups", None) or [])
        ]

    def _stop_and_modify_affinity_groups(
        self, machine: CloudStackMachine, groups: List[AffinityGroup]
    ) -> None:
        instance_id = machine.spec.instance_id
        group_ids = [group.id for group in groups]
        vms: Any = self.cs.virtual_machine
        with self._recording():
            vms.stop_virtual_machine(instance_id)
        with self._recording():
            self.cs.affinity_group.update_vm_affinity_group(
                instance_id, affinity_group_ids=group_ids
            )
        with self._recording():
            vms.start_virtual_machine(instance_id)

    def associate_affinity_group(self, machine: CloudStackMachine, group: AffinityGroup) -> None:
        """Add ``group`` to the machine's VM, stopping and restarting it."""
        groups = self._current_affinity_groups(machine)
        self._stop_and_modify_affinity_groups(machine, _with_group(groups, group))

    def disassociate_affinity_group(
        self, machine: CloudStackMachine, group: AffinityGroup
    ) -> None:
        """Remove ``group`` from the machine's VM, stopping and restarting it."""
        groups = self._current_affinity_groups(machine)
        self._stop_and_modify_affinity_groups(machine, _without_group(groups, group))