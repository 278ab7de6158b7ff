from chip8.instruction import Instruction, decode


def test_decode_splits_fields():
    op = decode(0xA2F0)

    assert op.raw == 0xA2F0
    assert op.op_type == 0xA
    assert op.x == 0x2
    assert op.y == 0xF
    assert op.n == 0x0
    assert op.nn == 0xF0
    assert op.nnn == 0x2F0


def test_decode_is_total():
    for raw in range(0x10000):
        op = decode(raw)
        assert op.op_type == raw >> 12
        assert op.x == (raw >> 8) & 0xF
        assert op.y == (raw >> 4) & 0xF
        assert op.n == raw & 0xF
        assert op.nn == raw & 0xFF
        assert op.nnn == raw & 0xFFF


def test_decode_masks_to_sixteen_bits():
    assert decode(0x1A2F0).raw == 0xA2F0


def test_equality_and_repr():
    assert decode(0x00E0) == Instruction(0x00E0)
    assert decode(0x00E0) != decode(0x00EE)
    assert repr(decode(0xD015)) == 'Instruction(0xD015)'
