"""Built-in descriptions of the hardware targets the SDK runs on."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

KB = 1024
MB = KB * 1024
GB = MB * 1024


class InterruptController(enum.Enum):
    """Kind of external interrupt controller a target uses."""

    NONE = "none"
    PLIC = "plic"
    APLIC_DIRECT = "aplic-direct"
    APLIC_MSI = "aplic-msi"


@dataclass(frozen=True)
class HartIntcMapping:
    """Routing of one hart to its slot on the interrupt controller.

    ``kind`` is ``"ctx_idx"`` for a PLIC context, ``"idc_idx"`` for an APLIC
    interrupt delivery control, or ``"hart_idx"`` for an APLIC/IMSIC hart index.
    """

    hart_id: int
    kind: str
    index: int

    def __post_init__(self) -> None:
        if self.kind not in ("ctx_idx", "idc_idx", "hart_idx"):
            raise ValueError(f"unknown interrupt target kind: {self.kind!r}")


@dataclass(frozen=True)
class TargetConfig:
    """Platform constants of one target."""

    name: str
    max_harts: int
    hart_freq: int
    sysram_base: int
    sysram_size: int
    rom_base: int
    rom_size: int
    ram_size: int
    stack_size: int
    clint_base: int
    mtimer_freq: int
    plic_base: int
    aplic_base: int
    num_irq_sources: int
    imsic_base: int
    uart_base: int
    uart_clock_hz: int
    uart_baud_rate: int
    uart_reg_shift: int
    uart_shifted_io: bool
    uart_irq: int
    intc_map: tuple[HartIntcMapping, ...] = ()
    mtime_base: int = 0
    mtimecmp_base: int = 0
    mswi_base: int = 0
    plic_max_priority: int | None = None
    boot_hart_id: int = -1
    vectored_traps: bool = True
    imsic_ipi_eiid: int = 0
    aplic_force_direct: bool = False
    no_wfi: bool = False
    quirk_wfi_epc: bool = False
    virtio_net_base: int | None = None
    axidma_base: int | None = None
    emaclite_base: int | None = None
    extra: dict = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        if self.plic_base and self.aplic_base:
            raise ValueError("only one of plic_base and aplic_base may be set")
        if len(self.intc_map) > self.max_harts:
            raise ValueError("interrupt map has more entries than harts")

    def ram_base(self) -> int:
        """Base of the RAM region: the last ram_size bytes of system RAM."""
        return self.sysram_base + self.sysram_size - self.ram_size

    def has_mtimer(self) -> bool:
        """Whether the platform timer is available."""
        return self.mtimer_freq > 0

    def interrupt_controller(self) -> InterruptController:
        """The external interrupt controller in use."""
        if self.plic_base:
            return InterruptController.PLIC
        if self.aplic_base:
            if self.imsic_base and not self.aplic_force_direct:
                return InterruptController.APLIC_MSI
            return InterruptController.APLIC_DIRECT
        return InterruptController.NONE

    def uart_divisor(self) -> int:
        """Value programmed into the UART divisor latch (8 bits)."""
        return (self.uart_clock_hz // (self.uart_baud_rate << 4)) & 0xFF


def _qemu_common(**overrides) -> dict:
    base = dict(
        max_harts=4,
        hart_freq=1000000000,
        sysram_base=0x80000000,
        sysram_size=2 * GB,
        rom_base=0x20000000,
        rom_size=512 * KB,
        ram_size=2 * MB,
        stack_size=8 * KB,
        clint_base=0x2000000,
        uart_base=0x10000000,
        uart_clock_hz=3686400,
        uart_baud_rate=115200,
        uart_reg_shift=0,
        uart_shifted_io=False,
        uart_irq=10,
        virtio_net_base=0x10008000,
        vectored_traps=True,
    )
    base.update(overrides)
    return base


_TARGETS: dict[str, TargetConfig] = {
    "qemu": TargetConfig(
        name="qemu",
        mtimer_freq=9000000,
        plic_base=0xC000000,
        plic_max_priority=7,
        aplic_base=0,
        num_irq_sources=95,
        imsic_base=0,
        intc_map=tuple(HartIntcMapping(h, "ctx_idx", h * 2) for h in range(4)),
        **_qemu_common(),
    ),
    "qemu-aplic": TargetConfig(
        name="qemu-aplic",
        mtimer_freq=9000000,
        plic_base=0,
        plic_max_priority=0,
        aplic_base=0xC000000,
        num_irq_sources=96,
        imsic_base=0,
        intc_map=tuple(HartIntcMapping(h, "idc_idx", h) for h in range(4)),
        **_qemu_common(),
    ),
    "qemu-aia": TargetConfig(
        name="qemu-aia",
        mtimer_freq=10000000,
        plic_base=0,
        aplic_base=0xC000000,
        num_irq_sources=96,
        imsic_base=0x24000000,
        imsic_ipi_eiid=1,
        intc_map=tuple(HartIntcMapping(h, "hart_idx", h) for h in range(4)),
        **_qemu_common(),
    ),
    "riser": TargetConfig(
        name="riser",
        max_harts=1,
        hart_freq=1000000000,
        sysram_base=0x800000400000,
        sysram_size=2 * GB,
        rom_base=0x800000000000,
        rom_size=512 * KB,
        ram_size=2 * MB,
        stack_size=8 * KB,
        clint_base=0x2000000,
        mtimer_freq=32768,
        plic_base=0xC000000,
        plic_max_priority=7,
        aplic_base=0,
        num_irq_sources=0x14,
        imsic_base=0,
        vectored_traps=False,
        quirk_wfi_epc=True,
        intc_map=(HartIntcMapping(0, "ctx_idx", 0),),
        uart_base=0x40010000000,
        uart_clock_hz=50000000,
        uart_baud_rate=115200,
        uart_reg_shift=2,
        uart_shifted_io=True,
        uart_irq=1,
        axidma_base=0x40011010000,
    ),
}


def get_target(name: str) -> TargetConfig:
    """Return the configuration of the named target; KeyError if unknown."""
    try:
        return _TARGETS[name]
    except KeyError:
        raise KeyError(f"unknown target: {name!r}") from None


def list_targets() -> list[str]:
    """Names of all known targets, sorted."""
    return sorted(_TARGETS)