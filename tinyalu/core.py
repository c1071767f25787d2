from amaranth import *
from amaranth.lib import enum, wiring
from amaranth.lib.wiring import In, Out

from .units.alu import *


__all__ = ["LoadState", "SerialALU", "pack_operands", "unpack_outputs"]


class LoadState(enum.IntEnum, shape=2):
    LOAD_A_LOW       = 0
    LOAD_A_HIGH_OP   = 1
    LOAD_B_LOW       = 2
    LOAD_B_HIGH_EXEC = 3


def pack_operands(src1, src2, op):
    """Serialize a load cycle into the four bytes expected on ``data_in``.

    Only bits [11:0] of ``src1`` are carried by the protocol: the second byte
    shares its high nibble with the opcode.
    """
    if not isinstance(src1, int) or not 0 <= src1 < 1 << 12:
        raise ValueError("First operand must be a 12-bit unsigned integer, not {!r}"
                         .format(src1))
    if not isinstance(src2, int) or not 0 <= src2 < 1 << 16:
        raise ValueError("Second operand must be a 16-bit unsigned integer, not {!r}"
                         .format(src2))
    if not isinstance(op, int) or not 0 <= op < 1 << 4:
        raise ValueError("Opcode must be a 4-bit unsigned integer, not {!r}"
                         .format(op))
    return [
        src1 & 0xff,
        (src1 >> 8) << 4 | op,
        src2 & 0xff,
        src2 >> 8,
    ]


def unpack_outputs(out_lo, out_hi):
    """Decode the output ports into the visible 12-bit result and the flags."""
    result = (out_hi & 0xf) << 8 | out_lo
    flags = {
        "zero":     out_hi >> 7 & 1,
        "carry":    out_hi >> 6 & 1,
        "overflow": out_hi >> 5 & 1,
        "negative": out_hi >> 4 & 1,
    }
    return result, flags


class SerialALU(wiring.Component):
    """16-bit ALU loaded one byte per clock edge.

    A load cycle takes four enabled edges:

    ====================  =========================================
    state                 byte
    ====================  =========================================
    ``LOAD_A_LOW``        ``src1[7:0]``
    ``LOAD_A_HIGH_OP``    ``src1[11:8]`` in [7:4], opcode in [3:0]
    ``LOAD_B_LOW``        ``src2[7:0]``
    ``LOAD_B_HIGH_EXEC``  ``src2[15:8]``, then execute
    ====================  =========================================

    The result and flags are latched on the last edge of the cycle. Only the
    low 12 bits of the result reach the output ports.
    """
    data_in: In(8)
    en:      In(1, init=1)
    rst:     In(1)

    result:  Out(16)
    flags:   Out(flags_layout)
    state:   Out(LoadState)

    out_lo:  Out(8)
    out_hi:  Out(8)

    def __init__(self, *, fast_adder=False):
        self.fast_adder = bool(fast_adder)

        super().__init__()

        self.src1 = Signal(16)
        self.src2 = Signal(16)
        self.op   = Signal(4)

    def elaborate(self, platform):
        m = Module()

        m.submodules.alu = alu = ALU(fast_adder=self.fast_adder)

        # The high byte of src2 is taken from data_in, so that the ALU sees the
        # complete operand on the edge that executes.
        m.d.comb += [
            alu.src1.eq(self.src1),
            alu.src2.eq(Cat(self.src2[:8], self.data_in)),
            alu.op.eq(self.op),
        ]

        with m.If(self.rst):
            m.d.sync += [
                self.src1.eq(0),
                self.src2.eq(0),
                self.op.eq(0),
                self.result.eq(0),
                self.flags.as_value().eq(0),
                self.state.eq(LoadState.LOAD_A_LOW),
            ]
        with m.Elif(self.en):
            with m.Switch(self.state):
                with m.Case(LoadState.LOAD_A_LOW):
                    m.d.sync += [
                        self.src1[:8].eq(self.data_in),
                        self.state.eq(LoadState.LOAD_A_HIGH_OP),
                    ]
                with m.Case(LoadState.LOAD_A_HIGH_OP):
                    m.d.sync += [
                        self.src1[8:].eq(self.data_in[4:]),
                        self.op.eq(self.data_in[:4]),
                        self.state.eq(LoadState.LOAD_B_LOW),
                    ]
                with m.Case(LoadState.LOAD_B_LOW):
                    m.d.sync += [
                        self.src2[:8].eq(self.data_in),
                        self.state.eq(LoadState.LOAD_B_HIGH_EXEC),
                    ]
                with m.Case(LoadState.LOAD_B_HIGH_EXEC):
                    m.d.sync += [
                        self.src2[8:].eq(self.data_in),
                        self.result.eq(alu.result),
                        self.flags.eq(alu.flags),
                        self.state.eq(LoadState.LOAD_A_LOW),
                    ]

        m.d.comb += [
            self.out_lo.eq(self.result[:8]),
            self.out_hi.eq(Cat(self.result[8:12], self.flags.as_value())),
        ]

        return m
