import io
import random

import pytest

import compressor as comp
import huffman as huff
from bitstream import BitWriter


@pytest.mark.parametrize("data", [
    b"",
    b"a",
    b"aaaa",
    b"ab",
    b"abracadabra",
    bytes(range(256)),
    b"This is a test" * 100,
])
def test_bytes_roundtrip(data):
    packed, result = comp.compress_bytes(data)
    assert comp.decompress_bytes(packed, result) == data


def test_random_roundtrip():
    rng = random.Random(7)
    for n in (1, 2, 3, 100, 4096):
        data = bytes(rng.getrandbits(8) for _ in range(n))
        packed, result = comp.compress_bytes(data)
        assert comp.decompress_bytes(packed, result) == data


def test_text_symbols_roundtrip():
    text = "she sells sea shells by the sea shore"
    packed, result = comp.compress_symbols(text)
    assert "".join(comp.decompress_symbols(packed, result)) == text


def test_generator_input_is_buffered():
    packed, result = comp.compress_symbols(c for c in "banana")
    assert result.original_size == 6
    assert "".join(comp.decompress_symbols(packed, result)) == "banana"


def test_empty_input():
    packed, result = comp.compress_bytes(b"")
    assert packed == b""
    assert result.root is None
    assert result.code_map is None
    assert result.frequency_table == {}
    assert result.bit_length == 0
    assert comp.decompress_bytes(packed, result) == b""


def test_single_repeated_symbol():
    packed, result = comp.compress_symbols("aaaa")
    assert result.frequency_table == {"a": 4}
    assert result.code_map == {"a": "0"}
    assert result.bit_length == 4
    assert packed == b"\x00"
    assert result.pad_bits == 4
    assert comp.decompress_symbols(packed, result) == ["a"] * 4


def test_padding_not_decoded():
    # padding zeros would decode as extra 'a's if the bit length were ignored
    packed, result = comp.compress_bytes(b"a")
    assert result.bit_length == 1
    assert comp.decompress_bytes(packed, result) == b"a"


def test_compression_effectiveness_on_skewed_input():
    data = b"a" * 900 + b"b" * 90 + b"c" * 10
    packed, result = comp.compress_bytes(data)
    assert result.bit_length < 8 * len(data)
    assert result.compression_ratio < 1.0
    assert result.unique_symbols == 3


def test_encode_symbols_missing_code_raises_lookup_error():
    writer = BitWriter(io.BytesIO())
    with pytest.raises(LookupError):
        comp.encode_symbols("abz", {"a": "0", "b": "1"}, writer)


def test_encode_symbols_absent_code_map_writes_nothing():
    out = io.BytesIO()
    writer = BitWriter(out)
    assert comp.encode_symbols("", None, writer) == 0
    writer.close()
    assert out.getvalue() == b""


def test_pack_bits_from_codes_and_unpack():
    ft = huff.count_frequencies(b"hello")
    root, code_map = comp.build_codec(ft)
    packed, pad_bits = comp.pack_bits_from_codes(b"hello", code_map)
    assert comp.unpack_and_decode(packed, pad_bits, root) == b"hello"


def test_unpack_rejects_bad_pad_bits():
    with pytest.raises(ValueError):
        comp.unpack_and_decode(b"\x00", 8, None)


def test_decode_absent_tree_emits_nothing():
    assert list(comp.decode_bits([0, 1, 1, 0], None)) == []


def test_decode_tolerates_foreign_stream():
    root = huff.build_huffman_tree({"a": 3})
    # bit 1 steps onto the synthetic root's missing right child
    assert list(comp.decode_bits([1, 0, 1, 1, 0], root)) == ["a", "a"]


def test_decode_drops_dangling_partial_code():
    ft = {"a": 4, "b": 2, "c": 1, "d": 1}
    root, code_map = comp.build_codec(ft)
    longest = max(code_map.values(), key=len)
    bits = [int(b) for b in code_map["a"] + longest[:-1]]
    assert list(comp.decode_bits(bits, root)) == ["a"]


def test_file_roundtrip(tmp_path):
    src = tmp_path / "original.txt"
    src.write_bytes(b"We the People of the United States, in Order to form a more perfect Union" * 50)
    packed_path = tmp_path / "original_compressed.bin"
    out_path = tmp_path / "original_decompressed.txt"

    result = comp.compress_file(src, packed_path, chunk_size=7)
    assert packed_path.stat().st_size == result.compressed_size
    assert result.original_size == src.stat().st_size
    assert result.compressed_size < result.original_size

    written = comp.decompress_file(packed_path, out_path, result, chunk_size=5)
    assert written == result.original_size
    assert out_path.read_bytes() == src.read_bytes()


def test_file_matches_memory_pipeline(tmp_path):
    data = b"abracadabra" * 20
    src = tmp_path / "in.bin"
    src.write_bytes(data)
    result = comp.compress_file(src, tmp_path / "out.bin")
    packed, memory_result = comp.compress_bytes(data)
    assert (tmp_path / "out.bin").read_bytes() == packed
    assert result.bit_length == memory_result.bit_length


def test_empty_file(tmp_path):
    src = tmp_path / "empty.txt"
    src.write_bytes(b"")
    result = comp.compress_file(src, tmp_path / "empty_compressed.bin")
    assert result.root is None
    assert (tmp_path / "empty_compressed.bin").read_bytes() == b""
    assert comp.decompress_file(tmp_path / "empty_compressed.bin", tmp_path / "empty_out.txt", result) == 0
    assert (tmp_path / "empty_out.txt").read_bytes() == b""


def test_single_symbol_file(tmp_path):
    src = tmp_path / "a.txt"
    src.write_bytes(b"z" * 13)
    result = comp.compress_file(src, tmp_path / "a.bin")
    assert result.code_map == {ord("z"): "0"}
    comp.decompress_file(tmp_path / "a.bin", tmp_path / "a_out.txt", result)
    assert (tmp_path / "a_out.txt").read_bytes() == b"z" * 13


def test_missing_input_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        comp.compress_file(tmp_path / "does_not_exist.txt", tmp_path / "out.bin")


def test_results_are_independent():
    packed_a, result_a = comp.compress_bytes(b"aaab")
    packed_b, result_b = comp.compress_bytes(b"xyzxyzxyz")
    assert comp.decompress_bytes(packed_a, result_a) == b"aaab"
    assert comp.decompress_bytes(packed_b, result_b) == b"xyzxyzxyz"
