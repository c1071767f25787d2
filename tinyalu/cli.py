import argparse
import contextlib

from amaranth.back import rtlil, cxxrtl, verilog
from amaranth.sim import Simulator

from .core import SerialALU, pack_operands, unpack_outputs


__all__ = ["main", "simulate"]


def simulate(design, src1, src2, op, vcd_file=None):
    """Run one load cycle of ``design`` and return its ``(out_lo, out_hi)`` ports."""
    data = pack_operands(src1, src2, op)
    outputs = []

    async def testbench(ctx):
        ctx.set(design.rst, 1)
        await ctx.tick()
        ctx.set(design.rst, 0)
        for byte in data:
            ctx.set(design.data_in, byte)
            await ctx.tick()
        outputs.append(ctx.get(design.out_lo))
        outputs.append(ctx.get(design.out_hi))

    sim = Simulator(design)
    sim.add_clock(1e-6)
    sim.add_testbench(testbench)
    if vcd_file is not None:
        writer = sim.write_vcd(vcd_file=vcd_file)
    else:
        writer = contextlib.nullcontext()
    with writer:
        sim.run()

    return tuple(outputs)


def main_parser(parser=None):
    if parser is None:
        parser = argparse.ArgumentParser()

    p_action = parser.add_subparsers(dest="action")

    p_generate = p_action.add_parser("generate",
            help="generate RTLIL, Verilog or CXXRTL from the design")
    p_generate.add_argument("-t", "--type",
            dest="generate_type", metavar="LANGUAGE", choices=["il", "cc", "v"],
            help="generate LANGUAGE (il for RTLIL, v for Verilog, cc for CXXRTL; "
                 "default: file extension of FILE, if given)")
    p_generate.add_argument("--no-src",
            dest="emit_src", default=True, action="store_false",
            help="suppress generation of source location attributes")
    p_generate.add_argument("generate_file",
            metavar="FILE", type=argparse.FileType("w"), nargs="?",
            help="write generated code to FILE")

    p_simulate = p_action.add_parser("simulate",
            help="run one load cycle in the simulator and print the output ports")
    p_simulate.add_argument("src1",
            metavar="SRC1", type=lambda s: int(s, 0),
            help="first operand (12 bits)")
    p_simulate.add_argument("src2",
            metavar="SRC2", type=lambda s: int(s, 0),
            help="second operand (16 bits)")
    p_simulate.add_argument("op",
            metavar="OP", type=lambda s: int(s, 0),
            help="opcode (4 bits)")
    p_simulate.add_argument("--vcd",
            dest="vcd_file", metavar="FILE",
            help="write a VCD trace to FILE")

    return parser


def main_runner(parser, args, design, name="top"):
    if args.action == "generate":
        generate_type = args.generate_type
        if generate_type is None and args.generate_file:
            if args.generate_file.name.endswith(".il"):
                generate_type = "il"
            if args.generate_file.name.endswith(".cc"):
                generate_type = "cc"
            if args.generate_file.name.endswith(".v"):
                generate_type = "v"
        if generate_type is None:
            parser.error("Unable to auto-detect language, specify explicitly with -t/--type")
        if generate_type == "il":
            output = rtlil.convert(design, name=name, emit_src=args.emit_src)
        if generate_type == "cc":
            output = cxxrtl.convert(design, name=name, emit_src=args.emit_src)
        if generate_type == "v":
            output = verilog.convert(design, name=name, emit_src=args.emit_src)
        if args.generate_file:
            with args.generate_file:
                args.generate_file.write(output)
        else:
            print(output)

    if args.action == "simulate":
        try:
            out_lo, out_hi = simulate(design, args.src1, args.src2, args.op,
                                      vcd_file=args.vcd_file)
        except ValueError as e:
            parser.error(str(e))
        result, flags = unpack_outputs(out_lo, out_hi)
        print("out_lo=0x{:02x} out_hi=0x{:02x}".format(out_lo, out_hi))
        print("result=0x{:03x} {}".format(result,
              " ".join("{}={}".format(flag, value) for flag, value in flags.items())))


def main(argv=None):
    parser = argparse.ArgumentParser(formatter_class=argparse.ArgumentDefaultsHelpFormatter)

    parser.add_argument("--fast-adder",
            default=False, action="store_true",
            help="use the carry-lookahead adder in the ALU")

    main_parser(parser)

    args = parser.parse_args(argv)

    design = SerialALU(fast_adder=args.fast_adder)

    main_runner(parser, args, design, name="tinyalu")


if __name__ == "__main__":
    main()
