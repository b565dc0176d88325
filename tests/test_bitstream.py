import io

import pytest

from bitstream import BitReader, BitWriter


def test_writer_packs_msb_first():
    out = io.BytesIO()
    w = BitWriter(out)
    w.write_bits("10110000" "1")
    pad = w.close()
    assert out.getvalue() == bytes([0b10110000, 0b10000000])
    assert pad == 7
    assert w.bits_written == 9
    assert w.bytes_written == 2


def test_writer_no_padding_on_byte_boundary():
    out = io.BytesIO()
    with BitWriter(out) as w:
        w.write_bits("11111111")
    assert out.getvalue() == b"\xff"
    assert w.pad_bits == 0


def test_writer_empty_stream():
    out = io.BytesIO()
    with BitWriter(out) as w:
        pass
    assert out.getvalue() == b""
    assert w.pad_bits == 0


def test_writer_drains_in_blocks():
    out = io.BytesIO()
    w = BitWriter(out, buffer_size=2)
    w.write_bits("00000001" * 3)
    # two full bytes reached the stream before close
    assert out.getvalue() == b"\x01\x01"
    w.close()
    assert out.getvalue() == b"\x01\x01\x01"


def test_writer_rejects_bad_bits():
    w = BitWriter(io.BytesIO())
    with pytest.raises(ValueError):
        w.write_bit(2)
    with pytest.raises(ValueError):
        w.write_bits("01x")


def test_writer_error_inside_context_propagates():
    out = io.BytesIO()
    with pytest.raises(RuntimeError):
        with BitWriter(out) as w:
            w.write_bits("1")
            raise RuntimeError("boom")
    assert out.getvalue() == b""
    assert w.closed


def test_writer_error_writes_whole_bytes_only():
    out = io.BytesIO()
    with pytest.raises(RuntimeError):
        with BitWriter(out) as w:
            w.write_bits("10101010" "0110")
            raise RuntimeError("boom")
    # the complete byte reached the stream, the 4 dangling bits did not
    assert out.getvalue() == bytes([0b10101010])
    assert w.bytes_written == 1
    assert w.pad_bits == 0


def test_reader_reads_all_bits():
    r = BitReader(io.BytesIO(bytes([0b10100000, 0b00000001])), chunk_size=1)
    assert list(r) == [1, 0, 1, 0, 0, 0, 0, 0] + [0, 0, 0, 0, 0, 0, 0, 1]


def test_reader_honours_bit_length():
    r = BitReader(io.BytesIO(bytes([0b10110000])), bit_length=4)
    assert list(r) == [1, 0, 1, 1]
    assert not r.has_next()
    with pytest.raises(EOFError):
        r.read_bit()


def test_reader_empty_stream():
    r = BitReader(io.BytesIO(b""))
    assert not r.has_next()
    assert list(r) == []


def test_reader_rejects_bad_arguments():
    with pytest.raises(ValueError):
        BitReader(io.BytesIO(b""), chunk_size=0)
    with pytest.raises(ValueError):
        BitReader(io.BytesIO(b""), bit_length=-1)


def test_writer_then_reader():
    bits = "1101001110001"
    out = io.BytesIO()
    with BitWriter(out) as w:
        w.write_bits(bits)
    r = BitReader(io.BytesIO(out.getvalue()), bit_length=len(bits), chunk_size=1)
    assert "".join(str(b) for b in r) == bits
