from types import SimpleNamespace
from unittest.mock import MagicMock, call

import pytest

from capcloud.affinity_groups import (
    ANTI_AFFINITY_GROUP_TYPE,
    AffinityGroup,
    AffinityGroupOperations,
)
from capcloud.base import CloudError
from capcloud.models import CloudStackMachine, MachineSpec

INSTANCE_ID = "fake-instance-id"


@pytest.fixture
def api():
    return MagicMock()


@pytest.fixture
def client(api):
    return AffinityGroupOperations(api)


@pytest.fixture
def group():
    return AffinityGroup(type=ANTI_AFFINITY_GROUP_TYPE, name="fake-affinity-group", id="fake-ag-id")


@pytest.fixture
def machine():
    return CloudStackMachine(name="fake-machine", spec=MachineSpec(instance_id=INSTANCE_ID))


def _found(name="", type_="", id_=""):
    return SimpleNamespace(name=name, type=type_, id=id_)


def test_fetches_affinity_group_by_name(api, client, group):
    group.id = ""
    api.affinity_group.get_affinity_group_by_name.return_value = (
        _found(id_="resolved-id", type_=ANTI_AFFINITY_GROUP_TYPE),
        1,
    )
    client.get_or_create_affinity_group(group)
    api.affinity_group.get_affinity_group_by_name.assert_called_once_with("fake-affinity-group")
    api.affinity_group.create_affinity_group.assert_not_called()
    assert group.id == "resolved-id"


def test_fetches_affinity_group_by_id(api, client, group):
    api.affinity_group.get_affinity_group_by_id.return_value = (_found(), 1)
    client.get_or_create_affinity_group(group)
    api.affinity_group.get_affinity_group_by_id.assert_called_once_with("fake-ag-id")
    api.affinity_group.create_affinity_group.assert_not_called()
    assert group.name == ""


def test_creates_affinity_group_when_fetch_by_id_fails(api, client, group):
    api.affinity_group.get_affinity_group_by_id.side_effect = RuntimeError("Fake Error")
    api.affinity_group.create_affinity_group.return_value = SimpleNamespace(id="new-id")
    client.get_or_create_affinity_group(group)
    api.affinity_group.create_affinity_group.assert_called_once_with(
        name="fake-affinity-group", type=ANTI_AFFINITY_GROUP_TYPE
    )
    assert group.id == "new-id"
    assert client.error_count == 1


def test_creates_affinity_group_when_name_returns_many(api, client, group):
    group.id = ""
    api.affinity_group.get_affinity_group_by_name.return_value = (_found(), 2)
    api.affinity_group.create_affinity_group.return_value = SimpleNamespace(id="created")
    client.get_or_create_affinity_group(group)
    assert api.affinity_group.create_affinity_group.call_count == 1
    assert group.id == "created"


def test_creates_affinity_group_when_fetch_by_name_fails(api, client, group):
    group.id = ""
    api.affinity_group.get_affinity_group_by_name.side_effect = RuntimeError("Fake Error")
    api.affinity_group.create_affinity_group.return_value = SimpleNamespace(id="created")
    client.get_or_create_affinity_group(group)
    assert api.affinity_group.create_affinity_group.call_count == 1
    assert group.id == "created"


def test_creates_affinity_group_when_id_returns_many(api, client, group):
    api.affinity_group.get_affinity_group_by_id.return_value = (_found(), 2)
    api.affinity_group.create_affinity_group.return_value = SimpleNamespace(id="created")
    client.get_or_create_affinity_group(group)
    assert api.affinity_group.create_affinity_group.call_count == 1
    assert group.id == "created"


def test_create_failure_propagates(api, client, group):
    api.affinity_group.get_affinity_group_by_id.side_effect = RuntimeError("Fake Error")
    api.affinity_group.create_affinity_group.side_effect = RuntimeError("create failed")
    with pytest.raises(RuntimeError, match="create failed"):
        client.get_or_create_affinity_group(group)
    assert client.error_count == 2


def test_fetch_count_bad(api, client, group):
    api.affinity_group.get_affinity_group_by_id.return_value = (_found(), 2)
    with pytest.raises(CloudError, match="count bad"):
        client.fetch_affinity_group(group)


def test_fetch_without_name_or_id_fails(client):
    with pytest.raises(CloudError, match='could not fetch AffinityGroup by name "" or id ""'):
        client.fetch_affinity_group(AffinityGroup())


def test_delete_affinity_group(api, client, group):
    client.delete_affinity_group(group)
    assert api.affinity_group.delete_affinity_group.call_args_list == [
        call(id="fake-ag-id", name="fake-affinity-group")
    ]
    assert client.error_count == 0


def test_delete_affinity_group_skips_empty_fields(api, client):
    client.delete_affinity_group(AffinityGroup(name="only-name"))
    assert api.affinity_group.delete_affinity_group.call_args_list == [call(name="only-name")]
    assert client.error_count == 0


def test_associate_affinity_group(api, client, group, machine):
    api.virtual_machine.get_virtual_machine_by_id.return_value = (
        SimpleNamespace(affinity_groups=[]),
        1,
    )
    client.associate_affinity_group(machine, group)
    assert api.virtual_machine.stop_virtual_machine.call_args_list == [call(INSTANCE_ID)]
    assert api.affinity_group.update_vm_affinity_group.call_args_list == [
        call(INSTANCE_ID, affinity_group_ids=["fake-ag-id"])
    ]
    assert api.virtual_machine.start_virtual_machine.call_args_list == [call(INSTANCE_ID)]
    assert client.error_count == 0


def test_associate_keeps_existing_groups(api, client, group, machine):
    existing = SimpleNamespace(name="other", type=ANTI_AFFINITY_GROUP_TYPE, id="other-id")
    already = SimpleNamespace(name="fake-affinity-group", type=ANTI_AFFINITY_GROUP_TYPE, id="fake-ag-id")
    api.virtual_machine.get_virtual_machine_by_id.return_value = (
        SimpleNamespace(affinity_groups=[existing, already]),
        1,
    )
    client.associate_affinity_group(machine, group)
    ids = api.affinity_group.update_vm_affinity_group.call_args.kwargs["affinity_group_ids"]
    assert sorted(ids) == ["fake-ag-id", "other-id"]
    assert client.error_count == 0


def test_disassociate_affinity_group(api, client, group, machine):
    current = SimpleNamespace(name="fake-affinity-group", type=ANTI_AFFINITY_GROUP_TYPE, id="fake-ag-id")
    other = SimpleNamespace(name="other", type=ANTI_AFFINITY_GROUP_TYPE, id="other-id")
    api.virtual_machine.get_virtual_machine_by_id.return_value = (
        SimpleNamespace(affinity_groups=[current, other]),
        1,
    )
    client.disassociate_affinity_group(machine, group)
    assert api.virtual_machine.stop_virtual_machine.call_args_list == [call(INSTANCE_ID)]
    assert api.affinity_group.update_vm_affinity_group.call_args_list == [
        call(INSTANCE_ID, affinity_group_ids=["other-id"])
    ]
    assert api.virtual_machine.start_virtual_machine.call_args_list == [call(INSTANCE_ID)]
    assert client.error_count == 0


def test_associate_fails_when_many_vms_found(api, client, group, machine):
    api.virtual_machine.get_virtual_machine_by_id.return_value = (
        SimpleNamespace(affinity_groups=[]),
        2,
    )
    with pytest.raises(CloudError, match=f"found more than one VM for ID: {INSTANCE_ID}"):
        client.associate_affinity_group(machine, group)
    api.virtual_machine.stop_virtual_machine.assert_not_called()


def test_stop_failure_prevents_update(api, client, group, machine):
    api.virtual_machine.get_virtual_machine_by_id.return_value = (
        SimpleNamespace(affinity_groups=[]),
        1,
    )
    api.virtual_machine.stop_virtual_machine.side_effect = RuntimeError("cannot stop")
    with pytest.raises(RuntimeError, match="cannot stop"):
        client.associate_affinity_group(machine, group)
    api.affinity_group.update_vm_affinity_group.assert_not_called()
    assert client.error_count == 1