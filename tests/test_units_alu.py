import random
import unittest

from amaranth import *
from amaranth.sim import *

from tinyalu.units.alu import *
from tinyalu.isa import Opcode


def alu_case(op, src1, src2, *, result, zero=0, carry=0, overflow=0, negative=0):
    def test(self):
        sim = Simulator(self.dut)

        async def testbench(ctx):
            ctx.set(self.dut.op, op)
            ctx.set(self.dut.src1, src1)
            ctx.set(self.dut.src2, src2)
            self.assertEqual(ctx.get(self.dut.result), result)
            self.assertEqual(ctx.get(self.dut.flags.zero), zero)
            self.assertEqual(ctx.get(self.dut.flags.carry), carry)
            self.assertEqual(ctx.get(self.dut.flags.overflow), overflow)
            self.assertEqual(ctx.get(self.dut.flags.negative), negative)

        sim.add_testbench(testbench)
        sim.run()

    return test


class ALUTestCase(unittest.TestCase):
    def setUp(self):
        self.dut = ALU()

    # ADD ------------------------------------------------------------------------

    test_add_0     = alu_case(Opcode.ADD,     0x0001, 0x0002, result=0x0003)
    test_add_1     = alu_case(Opcode.ADD,     0x0000, 0x0000, result=0x0000, zero=1)
    test_add_2     = alu_case(Opcode.ADD,     0xffff, 0x0001, result=0x0000, zero=1, carry=1)
    test_add_3     = alu_case(Opcode.ADD,     0x7fff, 0x0001, result=0x8000, overflow=1, negative=1)
    test_add_4     = alu_case(Opcode.ADD,     0x8000, 0x8000, result=0x0000, zero=1, carry=1, overflow=1)
    test_add_5     = alu_case(Opcode.ADD,     0xfffe, 0x0001, result=0xffff, negative=1)

    # SUB ------------------------------------------------------------------------

    test_sub_0     = alu_case(Opcode.SUB,     0x0005, 0x0003, result=0x0002)
    test_sub_1     = alu_case(Opcode.SUB,     0x0003, 0x0005, result=0xfffe, carry=1, negative=1)
    test_sub_2     = alu_case(Opcode.SUB,     0x1234, 0x1234, result=0x0000, zero=1)
    test_sub_3     = alu_case(Opcode.SUB,     0x8000, 0x0001, result=0x7fff, overflow=1)
    test_sub_4     = alu_case(Opcode.SUB,     0x7fff, 0xffff, result=0x8000, carry=1, overflow=1, negative=1)

    # INC / DEC ------------------------------------------------------------------

    test_inc_0     = alu_case(Opcode.INC,     0x0134, 0x7856, result=0x0135)
    test_inc_1     = alu_case(Opcode.INC,     0xffff, 0x0000, result=0x0000, zero=1, carry=1)
    test_inc_2     = alu_case(Opcode.INC,     0x7fff, 0x0000, result=0x8000, overflow=1, negative=1)
    test_dec_0     = alu_case(Opcode.DEC,     0x0135, 0x0000, result=0x0134)
    test_dec_1     = alu_case(Opcode.DEC,     0x0000, 0x0000, result=0xffff, carry=1, negative=1)
    test_dec_2     = alu_case(Opcode.DEC,     0x8000, 0x0000, result=0x7fff, overflow=1)
    test_dec_3     = alu_case(Opcode.DEC,     0x0001, 0xffff, result=0x0000, zero=1)

    # MUL / DIV ------------------------------------------------------------------

    test_mul_0     = alu_case(Opcode.MUL,     0x0003, 0x0004, result=0x000c)
    test_mul_1     = alu_case(Opcode.MUL,     0x0100, 0x0100, result=0x0000, zero=1, carry=1)
    test_mul_2     = alu_case(Opcode.MUL,     0xffff, 0xffff, result=0x0001, carry=1)
    test_mul_3     = alu_case(Opcode.MUL,     0x00ff, 0x0101, result=0xffff, negative=1)
    test_mul_4     = alu_case(Opcode.MUL,     0x1234, 0x0000, result=0x0000, zero=1)
    test_div_0     = alu_case(Opcode.DIV,     0x0064, 0x0007, result=0x000e)
    test_div_1     = alu_case(Opcode.DIV,     0x0003, 0x0007, result=0x0000, zero=1)
    test_div_2     = alu_case(Opcode.DIV,     0x1234, 0x0000, result=0xffff, negative=1)
    test_div_3     = alu_case(Opcode.DIV,     0x0000, 0x0000, result=0xffff, negative=1)
    test_div_4     = alu_case(Opcode.DIV,     0xffff, 0x0001, result=0xffff, negative=1)

    # Reserved -------------------------------------------------------------------

    test_rsvd0     = alu_case(Opcode.RSVD0,   0xffff, 0xffff, result=0x0000, zero=1)
    test_rsvd1     = alu_case(Opcode.RSVD1,   0x1234, 0x5678, result=0x0000, zero=1)

    # Logic ----------------------------------------------------------------------

    test_and       = alu_case(Opcode.AND,     0xf0f0, 0xff00, result=0xf000, negative=1)
    test_or        = alu_case(Opcode.OR,      0x0f00, 0x00f0, result=0x0ff0)
    test_xor_0     = alu_case(Opcode.XOR,     0xaaaa, 0xffff, result=0x5555)
    test_xor_1     = alu_case(Opcode.XOR,     0x1234, 0x1234, result=0x0000, zero=1)
    test_not_0     = alu_case(Opcode.NOT,     0x0000, 0x1234, result=0xffff, negative=1)
    test_not_1     = alu_case(Opcode.NOT,     0xffff, 0x0000, result=0x0000, zero=1)

    # Moves ----------------------------------------------------------------------

    test_pass_a    = alu_case(Opcode.PASS_A,  0x8001, 0x1234, result=0x8001, negative=1)
    test_pass_b    = alu_case(Opcode.PASS_B,  0x8001, 0x1234, result=0x1234)
    test_clear     = alu_case(Opcode.CLEAR,   0xffff, 0xffff, result=0x0000, zero=1)
    test_set_all   = alu_case(Opcode.SET_ALL, 0x0000, 0x0000, result=0xffff, negative=1)

    def check_random(self, op, model, *, count=500, seed=0):
        rng = random.Random(seed)
        sim = Simulator(self.dut)

        async def testbench(ctx):
            ctx.set(self.dut.op, op)
            for _ in range(count):
                src1 = rng.getrandbits(16)
                src2 = rng.getrandbits(16)
                ctx.set(self.dut.src1, src1)
                ctx.set(self.dut.src2, src2)
                result, carry = model(src1, src2)
                self.assertEqual(ctx.get(self.dut.result), result)
                self.assertEqual(ctx.get(self.dut.flags.carry), carry)
                self.assertEqual(ctx.get(self.dut.flags.zero), int(result == 0))
                self.assertEqual(ctx.get(self.dut.flags.negative), result >> 15)

        sim.add_testbench(testbench)
        sim.run()

    def test_add_random(self):
        self.check_random(Opcode.ADD, lambda a, b: ((a + b) & 0xffff, int(a + b >= 0x10000)),
                          seed=1)

    def test_sub_random(self):
        self.check_random(Opcode.SUB, lambda a, b: ((a - b) & 0xffff, int(a < b)),
                          seed=2)

    def test_mul_random(self):
        self.check_random(Opcode.MUL, lambda a, b: ((a * b) & 0xffff, int(a * b > 0xffff)),
                          seed=3)

    def test_div_by_zero(self):
        rng = random.Random(4)
        sim = Simulator(self.dut)

        async def testbench(ctx):
            ctx.set(self.dut.op, Opcode.DIV)
            ctx.set(self.dut.src2, 0)
            for src1 in [0x0000, 0x0001, 0x7fff, 0x8000, 0xffff] + \
                        [rng.getrandbits(16) for _ in range(100)]:
                ctx.set(self.dut.src1, src1)
                self.assertEqual(ctx.get(self.dut.result), 0xffff)
                self.assertEqual(ctx.get(self.dut.flags.carry), 0)
                self.assertEqual(ctx.get(self.dut.flags.overflow), 0)

        sim.add_testbench(testbench)
        sim.run()

    def test_not_involution(self):
        rng = random.Random(5)
        sim = Simulator(self.dut)

        async def testbench(ctx):
            ctx.set(self.dut.op, Opcode.NOT)
            for _ in range(200):
                src1 = rng.getrandbits(16)
                ctx.set(self.dut.src1, src1)
                ctx.set(self.dut.src1, ctx.get(self.dut.result))
                self.assertEqual(ctx.get(self.dut.result), src1)

        sim.add_testbench(testbench)
        sim.run()


class FastAdderALUTestCase(ALUTestCase):
    def setUp(self):
        self.dut = ALU(fast_adder=True)
