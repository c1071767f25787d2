class Opcode:
    ADD     = 0x0
    SUB     = 0x1
    INC     = 0x2
    DEC     = 0x3
    MUL     = 0x4
    DIV     = 0x5
    RSVD0   = 0x6
    RSVD1   = 0x7
    AND     = 0x8
    OR      = 0x9
    XOR     = 0xa
    NOT     = 0xb
    PASS_A  = 0xc
    PASS_B  = 0xd
    CLEAR   = 0xe
    SET_ALL = 0xf
