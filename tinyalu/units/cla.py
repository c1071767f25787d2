from functools import reduce
from operator import or_

from amaranth import *
from amaranth.lib import wiring
from amaranth.lib.wiring import In, Out


__all__ = ["CarryLookaheadBlock", "CarryLookaheadAdder"]


class CarryLookaheadBlock(wiring.Component):
    """4-bit carry-lookahead adder.

    Every carry is computed from the per-bit generate and propagate terms as a
    two-level sum of products, so no carry waits on the one below it. The block
    generate and propagate outputs allow the block to be composed into wider
    adders.
    """
    a:         In(4)
    b:         In(4)
    carry_in:  In(1)

    sum:       Out(4)
    carry_out: Out(1)
    generate:  Out(1)
    propagate: Out(1)

    def elaborate(self, platform):
        m = Module()

        g = Signal(4)
        p = Signal(4)
        c = Signal(5)

        m.d.comb += [
            g.eq(self.a & self.b),
            p.eq(self.a ^ self.b),
            c[0].eq(self.carry_in),
        ]

        def lookahead(i, carry_in):
            # c[i+1] = g[i] | p[i]g[i-1] | ... | p[i]...p[1]g[0] | p[i]...p[0]c[0]
            terms = [g[i]]
            for j in reversed(range(i)):
                terms.append(p[j+1:i+1].all() & g[j])
            if carry_in is not None:
                terms.append(p[:i+1].all() & carry_in)
            return reduce(or_, terms)

        for i in range(4):
            m.d.comb += c[i+1].eq(lookahead(i, self.carry_in))

        m.d.comb += [
            self.sum.eq(p ^ c[:4]),
            self.carry_out.eq(c[4]),
            self.generate.eq(lookahead(3, None)),
            self.propagate.eq(p.all()),
        ]

        return m


class CarryLookaheadAdder(wiring.Component):
    def __init__(self, width=16):
        if width <= 0 or width % 4:
            raise ValueError("Carry-lookahead adder width must be a positive multiple of 4, "
                             "not {!r}"
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
        m.d.comb += b.eq(Mux(self.subtract, ~self.b, self.b))

        # Blocks are chained on their carries; there is no lookahead across blocks.
        carry = self.carry_in | self.subtract
        for i in range(self.width // 4):
            block = m.submodules["block{}".format(i)] = CarryLookaheadBlock()
            m.d.comb += [
                block.a.eq(self.a[4*i:4*i+4]),
                block.b.eq(b[4*i:4*i+4]),
                block.carry_in.eq(carry),
                self.sum[4*i:4*i+4].eq(block.sum),
            ]
            carry = block.carry_out

        m.d.comb += [
            self.carry_out.eq(carry),
            self.overflow.eq((self.a[-1] == b[-1]) & (self.sum[-1] != self.a[-1])),
        ]

        return m
