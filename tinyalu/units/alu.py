from amaranth import *
from amaranth.lib import wiring
from amaranth.lib.data import StructLayout
from amaranth.lib.wiring import In, Out

from ..isa import Opcode
from .adder import Adder
from .cla import CarryLookaheadAdder


__all__ = ["flags_layout", "ALU"]


# Packed MSB first as {zero, carry, overflow, negative}.
flags_layout = StructLayout({
    "negative": 1,
    "overflow": 1,
    "carry":    1,
    "zero":     1,
})


class ALU(wiring.Component):
    op:     In(4)
    src1:   In(16)
    src2:   In(16)

    result: Out(16)
    flags:  Out(flags_layout)

    def __init__(self, *, fast_adder=False):
        self.fast_adder = bool(fast_adder)
        super().__init__()

    def elaborate(self, platform):
        m = Module()

        if self.fast_adder:
            m.submodules.adder = adder = CarryLookaheadAdder(width=16)
        else:
            m.submodules.adder = adder = Adder(width=16)

        result   = Signal(16)
        carry    = Signal()
        overflow = Signal()
        product  = Signal(32)

        m.d.comb += [
            adder.a.eq(self.src1),
            adder.b.eq(self.src2),
            product.eq(self.src1 * self.src2),
        ]

        with m.Switch(self.op):
            with m.Case(Opcode.ADD):
                m.d.comb += [
                    result.eq(adder.sum),
                    carry.eq(adder.carry_out),
                    overflow.eq(adder.overflow),
                ]
            with m.Case(Opcode.SUB):
                m.d.comb += [
                    adder.subtract.eq(1),
                    result.eq(adder.sum),
                    carry.eq(~adder.carry_out), # borrow
                    overflow.eq(adder.overflow),
                ]
            with m.Case(Opcode.INC):
                m.d.comb += [
                    adder.b.eq(0),
                    adder.carry_in.eq(1),
                    result.eq(adder.sum),
                    carry.eq(adder.carry_out),
                    overflow.eq(adder.overflow),
                ]
            with m.Case(Opcode.DEC):
                m.d.comb += [
                    adder.b.eq(1),
                    adder.subtract.eq(1),
                    result.eq(adder.sum),
                    carry.eq(~adder.carry_out),
                    overflow.eq(adder.overflow),
                ]
            with m.Case(Opcode.MUL):
                m.d.comb += [
                    result.eq(product[:16]),
                    carry.eq(product[16:].any()),
                ]
            with m.Case(Opcode.DIV):
                # Division by zero saturates instead of trapping.
                m.d.comb += result.eq(Mux(self.src2 == 0, 0xffff, self.src1 // self.src2))
            with m.Case(Opcode.RSVD0, Opcode.RSVD1):
                m.d.comb += result.eq(0)
            with m.Case(Opcode.AND):
                m.d.comb += result.eq(self.src1 & self.src2)
            with m.Case(Opcode.OR):
                m.d.comb += result.eq(self.src1 | self.src2)
            with m.Case(Opcode.XOR):
                m.d.comb += result.eq(self.src1 ^ self.src2)
            with m.Case(Opcode.NOT):
                m.d.comb += result.eq(~self.src1)
            with m.Case(Opcode.PASS_A):
                m.d.comb += result.eq(self.src1)
            with m.Case(Opcode.PASS_B):
                m.d.comb += result.eq(self.src2)
            with m.Case(Opcode.CLEAR):
                m.d.comb += result.eq(0)
            with m.Case(Opcode.SET_ALL):
                m.d.comb += result.eq(0xffff)

        m.d.comb += [
            self.result.eq(result),
            self.flags.zero.eq(result == 0),
            self.flags.carry.eq(carry),
            self.flags.overflow.eq(overflow),
            self.flags.negative.eq(result[-1]),
        ]

        return m
