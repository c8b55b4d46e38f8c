"""Driver for an 8250/16550A compatible UART."""

from __future__ import annotations

import logging
from collections.abc import Callable

from .errors import Errno, SdkError

_log = logging.getLogger(__name__)

# Register offsets
RBR = 0x0  # in: receive buffer
THR = 0x0  # out: transmitter holding
DLL = 0x0  # out: divisor latch low
IER = 0x1  # interrupt enable
DLM = 0x1  # out: divisor latch high
FCR = 0x2  # out: FIFO control
IIR = 0x2  # interrupt identification
LCR = 0x3  # out: line control
MCR = 0x4  # out: modem control
LSR = 0x5  # in: line status
MSR = 0x6  # in: modem status
SCR = 0x7  # scratch
MDR1 = 0x8  # mode

# Line status bits
LSR_FIFOE = 0x80
LSR_TEMT = 0x40
LSR_THRE = 0x20
LSR_BI = 0x10
LSR_FE = 0x08
LSR_PE = 0x04
LSR_OE = 0x02
LSR_DR = 0x01
LSR_BRK_ERROR_BITS = 0x1E

# FIFO control bits
FCR_FIFO_EN = 0x1
FCR_RX_FIFO_CLEAR = 0x2
FCR_TX_FIFO_CLEAR = 0x4
FCR_DMA_MODE = 0x8
FCR_FIFO_TRIG_LVL = 0x60


class UartError(SdkError):
    """A line error (break, framing, parity or overrun) was reported."""

    def __init__(self, message: str = "UART line error", lsr: int = 0) -> None:
        super().__init__(Errno.EIO, message)
        self.lsr = lsr


class RegisterFile:
    """Byte-wide UART registers laid out at ``base + (reg << reg_shift)``.

    ``load(address, width)`` and ``store(address, value, width)`` perform the
    bus accesses; width is 8 or 4 bytes for shifted I/O with a shift of 4 or 2,
    else 1. Without them, a private in-memory store is used.
    """

    def __init__(
        self,
        load: Callable[[int, int], int] | None = None,
        store: Callable[[int, int, int], None] | None = None,
        base: int = 0,
        reg_shift: int = 0,
        shifted_io: bool = False,
    ) -> None:
        if (load is None) != (store is None):
            raise ValueError("load and store must be given together")
        self._memory: dict[int, int] = {}
        self._load = load if load is not None else self._memory_load
        self._store = store if store is not None else self._memory_store
        self.base = base
        self.reg_shift = reg_shift
        if shifted_io and reg_shift == 4:
            self.width = 8
        elif shifted_io and reg_shift == 2:
            self.width = 4
        else:
            self.width = 1

    @classmethod
    def for_target(cls, target, load=None, store=None) -> RegisterFile:
        """Register file laid out as the given target configuration describes."""
        return cls(
            load,
            store,
            base=target.uart_base,
            reg_shift=target.uart_reg_shift,
            shifted_io=target.uart_shifted_io,
        )

    def _memory_load(self, address: int, width: int) -> int:
        return self._memory.get(address, 0)

    def _memory_store(self, address: int, value: int, width: int) -> None:
        self._memory[address] = value

    def address(self, reg: int) -> int:
        """Bus address of a register."""
        return self.base + (reg << self.reg_shift)

    def read(self, reg: int) -> int:
        """Read a register; only the low byte is meaningful."""
        return self._load(self.address(reg), self.width) & 0xFF

    def write(self, reg: int, value: int) -> None:
        """Write the low byte of ``value`` to a register."""
        self._store(self.address(reg), value & 0xFF, self.width)


class Uart16550:
    """Polled and interrupt-driven access to a 16550A UART."""

    def __init__(self, bus: RegisterFile, clock_hz: int, baud_rate: int) -> None:
        if baud_rate <= 0:
            raise ValueError("baud rate must be positive")
        self.bus = bus
        self.clock_hz = clock_hz
        self.baud_rate = baud_rate
        self._irq_handler: Callable[[int], None] | None = None

    @property
    def divisor(self) -> int:
        """Divisor latch value for the configured clock and baud rate."""
        return (self.clock_hz // (self.baud_rate << 4)) & 0xFF

    def init(self) -> None:
        """Program 8N1 at the configured baud rate with FIFOs enabled."""
        bus = self.bus
        bus.write(IER, 0)
        bus.write(LCR, 0x80)
        bus.write(DLL, self.divisor)
        bus.write(LCR, 0x03)
        bus.write(MCR, 0x0)
        bus.write(SCR, 0x0)
        bus.write(FCR, FCR_FIFO_EN | FCR_RX_FIFO_CLEAR | FCR_TX_FIFO_CLEAR)
        bus.read(RBR)
        bus.read(LSR)

    def getc(self) -> int | None:
        """Return the next received byte, or None if nothing has arrived.

        Raises UartError if the line status reports an error.
        """
        lsr = self.bus.read(LSR)
        if lsr & LSR_BRK_ERROR_BITS:
            raise UartError(f"line status error 0x{lsr:02x}", lsr)
        if lsr & LSR_DR:
            return self.bus.read(RBR)
        return None

    def putc(self, c: int | str | bytes) -> None:
        """Transmit one byte, following a newline with a carriage return."""
        if isinstance(c, str):
            c = c.encode("latin-1")
        if isinstance(c, (bytes, bytearray)):
            if len(c) != 1:
                raise ValueError("putc takes a single character")
            c = c[0]
        c &= 0xFF
        while not self.bus.read(LSR) & LSR_THRE:
            pass
        self.bus.write(THR, c)
        if c == ord("\n"):
            self.bus.write(THR, ord("\r"))

    def enable_irq(self) -> None:
        """Enable the receive-data interrupt."""
        self.bus.write(IER, 1)

    def disable_irq(self) -> None:
        """Disable all UART interrupts."""
        self.bus.write(IER, 0)

    def set_irq_handler(self, handler: Callable[[int], None] | None) -> None:
        """Install the interrupt handler; None leaves the current one in place."""
        if handler is not None:
            self._irq_handler = handler

    def handle_irq(self, source_id: int) -> None:
        """Dispatch an interrupt from the given source to the handler."""
        if self._irq_handler is not None:
            self._irq_handler(source_id)
        else:
            _log.debug("UART interrupt received but no handler installed")