from amaranth import *
from amaranth.lib import wiring
from amaranth.lib.wiring import In, Out


__all__ = ["Adder"]


class Adder(wiring.Component):
    def __init__(self, width=16):
        if width <= 0:
            raise ValueError("Adder width must be a positive integer, not {!r}"
                             .format(width))
        self.width = width

        super().__init__({
            "a":         In(width),
            "b":         In(width),
            "carry_in":  In(1),
            "subtract":  In(1),
            "sum":       Out(width),
            "carry_out": Out(1),
            "overflow":  Out(1),
        })

    def elaborate(self, platform):
        m = Module()

        b = Signal(self.width)

        m.d.comb += [
            b.eq(Mux(self.subtract, ~self.b, self.b)),
            Cat(self.sum, self.carry_out).eq(self.a + b + (self.carry_in | self.subtract)),
            self.overflow.eq((self.a[-1] == b[-1]) & (self.sum[-1] != self.a[-1])),
        ]

        return m
