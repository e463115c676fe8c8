"""Resolution of service offerings, templates and disk offerings for machines."""

from __future__ import annotations

from typing import Any, Callable

from capcloud.base import ClientBase, CloudError
from capcloud.models import CloudStackCluster, CloudStackMachine

TEMPLATE_FILTER = "executable"


class OfferingOperations(ClientBase):
    """Look up the CloudStack offerings and templates a machine asks for."""

    def _lookup(self, description: str, call: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Run an API call, counting and wrapping any error it raises."""
        try:
            with self._recording():
                return call(*args, **kwargs)
        except Exception as exc:
            raise CloudError(f"{description}: {exc}") from exc

    def resolve_service_offering(self, machine: CloudStackMachine, zone_id: str) -> str:
        """Return the service offering ID for ``machine`` in ``zone_id``."""
        offering = machine.spec.offering
        service = self.cs.service_offering
        if offering.id:
            found, count = self._lookup(
                f"could not get Service Offering by ID {offering.id}",
                service.get_service_offering_by_id,
                offering.id,
            )
            if count != 1:
                raise CloudError(
                    f"expected 1 Service Offering with UUID {offering.id}, but got {count}"
                )
            if offering.name and offering.name != found.name:
                raise CloudError(
                    f"offering name {offering.name} does not match name {found.name} "
                    f"returned using UUID {offering.id}"
                )
            return offering.id

        offering_id, count = self._lookup(
            f"could not get Service Offering ID from {offering.name} in zone {zone_id}",
            service.get_service_offering_id,
            offering.name,
            zone_id=zone_id,
        )
        if count != 1:
            raise CloudError(
                f"expected 1 Service Offering with name {offering.name} in zone {zone_id}, "
                f"but got {count}"
            )
        return offering_id

    def resolve_template(
        self, cluster: CloudStackCluster, machine: CloudStackMachine, zone_id: str
    ) -> str:
        """Return the executable template ID for ``machine`` in ``zone_id``."""
        template = machine.spec.template
        service = self.cs.template
        if template.id:
            found, count = self._lookup(
                f"could not get Template by ID {template.id}",
                service.get_template_by_id,
                template.id,
                TEMPLATE_FILTER,
            )
            if count != 1:
                raise CloudError(
                    f"expected 1 Template with UUID {template.id}, but got {count}"
                )
            if template.name and template.name != found.name:
                raise CloudError(
                    f"template name {template.name} does not match name {found.name} "
                    f"returned using UUID {template.id}"
                )
            return template.id

        template_id, count = self._lookup(
            f"could not get Template ID from {template.name}",
            service.get_template_id,
            template.name,
            TEMPLATE_FILTER,
            zone_id,
        )
        if count != 1:
            raise CloudError(
                f"expected 1 Template with name {template.name}, but got {count}"
            )
        return template_id

    def resolve_disk_offering(self, machine: CloudStackMachine, zone_id: str) -> str:
        """Return the disk offering ID for ``machine``, or ``""`` when none is requested.

        A name, when given, is looked up in the zone and must agree with any
        ID that is also given.  The resulting offering is then checked against
        the requested custom size.
        """
        disk = machine.spec.disk_offering
        service = self.cs.disk_offering
        disk_offering_id = disk.id
        if disk.name:
            found_id, count = self._lookup(
                f"could not get DiskOffering ID from {disk.name}",
                service.get_disk_offering_id,
                disk.name,
                zone_id=zone_id,
            )
            if count != 1:
                raise CloudError(
                    f"expected 1 DiskOffering with name {disk.name} in zone {zone_id}, "
                    f"but got {count}"
                )
            if disk.id and found_id != disk.id:
                raise CloudError(
                    f"diskOffering ID {disk.id} does not match ID {found_id} returned "
                    f"using name {disk.name} in zone {zone_id}"
                )
            if not found_id:
                raise CloudError(
                    f"empty diskOffering ID {found_id} returned using name {disk.name} "
                    f"in zone {zone_id}"
                )
            disk_offering_id = found_id
        if not disk_offering_id:
            return ""
        return self._verify_disk_offering(machine, disk_offering_id)

    def _verify_disk_offering(self, machine: CloudStackMachine, disk_offering_id: str) -> str:
        found, count = self._lookup(
            f"could not get DiskOffering by ID {disk_offering_id}",
            self.cs.disk_offering.get_disk_offering_by_id,
            disk_offering_id,
        )
        if count != 1:
            raise CloudError(
                f"expected 1 DiskOffering with UUID {disk_offering_id}, but got {count}"
            )
        custom_size = machine.spec.disk_offering.custom_size
        if found.is_customized and custom_size == 0:
            raise CloudError(
                f"diskOffering with UUID {disk_offering_id} is customized, "
                "disk size can not be 0 GB"
            )
        if not found.is_customized and custom_size > 0:
            raise CloudError(
                f"diskOffering with UUID {disk_offering_id} is not customized, "
                "disk size can not be specified"
            )
        return disk_offering_id