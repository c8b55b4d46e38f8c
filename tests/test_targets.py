import dataclasses

import pytest

from barekit.targets import (
    HartIntcMapping,
    InterruptController,
    TargetConfig,
    get_target,
    list_targets,
)


def test_list_targets():
    assert list_targets() == ["qemu", "qemu-aia", "qemu-aplic", "riser"]


@pytest.mark.parametrize("name", ["qemu", "qemu-aia", "qemu-aplic", "riser"])
def test_get_target_name_round_trip(name):
    assert get_target(name).name == name


def test_unknown_target():
    with pytest.raises(KeyError):
        get_target("nonexistent")


@pytest.mark.parametrize("name", ["qemu", "qemu-aia", "qemu-aplic", "riser"])
def test_ram_is_at_end_of_sysram(name):
    t = get_target(name)
    assert t.ram_base() + t.ram_size == t.sysram_base + t.sysram_size
    assert t.ram_base() >= t.sysram_base


def test_riser_uart_divisor_matches_documented_example():
    assert get_target("riser").uart_divisor() == 0x1B


@pytest.mark.parametrize("name", ["qemu", "qemu-aia", "qemu-aplic", "riser"])
def test_uart_divisor_fits_byte(name):
    assert 0 <= get_target(name).uart_divisor() <= 0xFF


def test_interrupt_controllers():
    assert get_target("qemu").interrupt_controller() is InterruptController.PLIC
    assert get_target("riser").interrupt_controller() is InterruptController.PLIC
    assert (
        get_target("qemu-aplic").interrupt_controller()
        is InterruptController.APLIC_DIRECT
    )
    assert get_target("qemu-aia").interrupt_controller() is InterruptController.APLIC_MSI


def test_force_direct_overrides_msi():
    aia = get_target("qemu-aia")
    forced = dataclasses.replace(aia, aplic_force_direct=True)
    assert forced.interrupt_controller() is InterruptController.APLIC_DIRECT


def test_no_controller():
    qemu = get_target("qemu")
    bare = dataclasses.replace(qemu, plic_base=0)
    assert bare.interrupt_controller() is InterruptController.NONE


def test_both_controllers_rejected():
    with pytest.raises(ValueError):
        dataclasses.replace(get_target("qemu"), aplic_base=0xC000000)


def test_has_mtimer():
    assert get_target("qemu").has_mtimer() is True
    assert dataclasses.replace(get_target("qemu"), mtimer_freq=0).has_mtimer() is False


def test_mtimer_frequencies():
    assert get_target("qemu").mtimer_freq == 9000000
    assert get_target("qemu-aia").mtimer_freq == 10000000
    assert get_target("riser").mtimer_freq == 32768


@pytest.mark.parametrize("name", ["qemu", "qemu-aia", "qemu-aplic", "riser"])
def test_intc_map_covers_harts_in_order(name):
    t = get_target(name)
    assert [m.hart_id for m in t.intc_map] == list(range(t.max_harts))


def test_qemu_plic_contexts_are_machine_mode():
    assert [m.index for m in get_target("qemu").intc_map] == [0, 2, 4, 6]
    assert {m.kind for m in get_target("qemu").intc_map} == {"ctx_idx"}


def test_mapping_kinds_per_target():
    assert {m.kind for m in get_target("qemu-aplic").intc_map} == {"idc_idx"}
    assert {m.kind for m in get_target("qemu-aia").intc_map} == {"hart_idx"}


def test_bad_mapping_kind():
    with pytest.raises(ValueError):
        HartIntcMapping(0, "bogus", 0)


def test_riser_specifics():
    riser = get_target("riser")
    assert riser.uart_base == 0x40010000000
    assert riser.uart_shifted_io is True
    assert riser.quirk_wfi_epc is True
    assert riser.vectored_traps is False
    assert riser.axidma_base == 0x40011010000
    assert riser.virtio_net_base is None


def test_qemu_virtio_base():
    assert get_target("qemu").virtio_net_base == 0x10008000


def test_targets_are_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        get_target("qemu").max_harts = 8


def test_intc_map_longer_than_harts_rejected():
    riser = get_target("riser")
    with pytest.raises(ValueError):
        dataclasses.replace(
            riser,
            intc_map=(HartIntcMapping(0, "ctx_idx", 0), HartIntcMapping(1, "ctx_idx", 2)),
        )


def test_target_config_copies_compare_equal():
    qemu = get_target("qemu")
    copy = dataclasses.replace(qemu)
    assert type(copy) is TargetConfig
    assert copy == qemu
    assert copy.max_harts == 4
    assert get_target("riser").max_harts == 1