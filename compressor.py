"""
Huffman encode/decode pipelines

Every compress call returns a CompressionResult holding the tree, code table
and exact bit length of the output. The compressed bytes themselves carry no
header, so the matching decompress call needs that result object
"""

from __future__ import annotations

import io
import os
from dataclasses import dataclass, field
from typing import BinaryIO, Dict, Hashable, Iterable, Iterator, List, Optional, Tuple, Union

import huffman as huff
from bitstream import BitReader, BitWriter

PathLike = Union[str, os.PathLike]


@dataclass
class CompressionResult:
    root: Optional[huff.HuffmanNode]
    code_map: Optional[Dict[Hashable, str]]
    frequency_table: Dict[Hashable, int] = field(default_factory=dict)
    bit_length: int = 0
    pad_bits: int = 0
    original_size: int = 0   # symbols in the input
    compressed_size: int = 0 # bytes of packed output

    @property
    def unique_symbols(self) -> int:
        return len(self.frequency_table)

    @property
    def compression_ratio(self) -> float:
        # compressed bytes / original bytes, same convention as the experiment CSVs
        return self.compressed_size / max(1, self.original_size)

    @property
    def average_code_length(self) -> float:
        return huff.average_code_length(self.code_map, self.frequency_table)


def build_codec(frequency_table: Dict[Hashable, int]) -> Tuple[Optional[huff.HuffmanNode], Optional[Dict[Hashable, str]]]:
    root = huff.build_huffman_tree(frequency_table)
    return root, huff.generate_huffman_codes(root)


# Encoding

def encode_symbols(symbols: Iterable[Hashable], code_map: Optional[Dict[Hashable, str]],
                   writer: BitWriter) -> int:
    """
    Writes the code of every symbol, in order, to writer
    Returns the number of bits written. A missing code raises LookupError
    """
    if code_map is None:
        return 0
    start = writer.bits_written
    for symbol in symbols:
        try:
            code = code_map[symbol]
        except KeyError:
            raise LookupError(f"no Huffman code for symbol {symbol!r}") from None
        writer.write_bits(code)
    return writer.bits_written - start


def pack_bits_from_codes(data: Iterable[Hashable], code_map: Optional[Dict[Hashable, str]]) -> Tuple[bytes, int]:
    """
    Converts Huffman codes into packed bytes
    Returns (packed_bytes, pad_bits) where pad_bits is number of 0 bits added at the end
    """
    out = io.BytesIO()
    writer = BitWriter(out)
    encode_symbols(data, code_map, writer)
    pad_bits = writer.close()
    return out.getvalue(), pad_bits


# Decoding

def decode_bits(bits: Iterable[int], root: Optional[huff.HuffmanNode]) -> Iterator[Hashable]:
    """
    Walks the tree one bit at a time and yields a symbol at every leaf

    Streams that did not come from this tree are decoded best effort: a step
    onto a missing child drops the current path and restarts at the root, and
    a partial code left at the end of the stream is discarded
    """
    if root is None:
        return
    node = root
    for bit in bits:
        node = node.right if bit else node.left
        if node is None:
            node = root
            continue
        if node.is_leaf:
            yield node.symbol
            node = root # reset to the root for the next symbol


def _decode_packed(packed: bytes, bit_length: Optional[int], root: Optional[huff.HuffmanNode]) -> List[Hashable]:
    reader = BitReader(io.BytesIO(packed), bit_length=bit_length)
    return list(decode_bits(reader, root))


def unpack_and_decode(packed: bytes, pad_bits: int, root: Optional[huff.HuffmanNode]) -> bytes:
    """
    Decode packed bits using Huffman tree
    """
    if not 0 <= pad_bits <= 7:
        raise ValueError(f"pad_bits must be in 0..7, got {pad_bits}")
    total_bits = max(0, len(packed) * 8 - pad_bits)
    return bytes(_decode_packed(packed, total_bits, root))


# In-memory pipelines

def compress_symbols(symbols: Iterable[Hashable]) -> Tuple[bytes, CompressionResult]:
    data = symbols if isinstance(symbols, (bytes, bytearray, str, list, tuple)) else list(symbols)
    frequency_table = huff.count_frequencies(data)
    root, code_map = build_codec(frequency_table)
    packed, pad_bits = pack_bits_from_codes(data, code_map)

    result = CompressionResult(
        root=root,
        code_map=code_map,
        frequency_table=frequency_table,
        bit_length=len(packed) * 8 - pad_bits,
        pad_bits=pad_bits,
        original_size=len(data),
        compressed_size=len(packed),
    )
    return packed, result


def decompress_symbols(packed: bytes, result: CompressionResult) -> List[Hashable]:
    return _decode_packed(packed, result.bit_length, result.root)


def compress_bytes(data: bytes) -> Tuple[bytes, CompressionResult]:
    return compress_symbols(bytes(data))


def decompress_bytes(packed: bytes, result: CompressionResult) -> bytes:
    return bytes(decompress_symbols(packed, result))


# File pipelines

def _count_file(src: PathLike, chunk_size: int) -> Dict[Hashable, int]:
    with open(src, "rb") as f:
        return huff.count_frequencies(huff.iter_file_symbols(f, chunk_size))


def compress_file(src: PathLike, dst: PathLike, chunk_size: int = huff.DEFAULT_CHUNK_SIZE) -> CompressionResult:
    """
    Compresses src into dst with two streaming passes over src
    (frequency count, then encoding). An empty src gives an empty dst
    """
    frequency_table = _count_file(src, chunk_size)
    root, code_map = build_codec(frequency_table)

    with open(src, "rb") as input_file, open(dst, "wb") as output_file:
        with BitWriter(output_file, buffer_size=chunk_size) as writer:
            bit_length = encode_symbols(huff.iter_file_symbols(input_file, chunk_size), code_map, writer)
        compressed_size = writer.bytes_written

    return CompressionResult(
        root=root,
        code_map=code_map,
        frequency_table=frequency_table,
        bit_length=bit_length,
        pad_bits=writer.pad_bits,
        original_size=sum(frequency_table.values()),
        compressed_size=compressed_size,
    )


def decode_stream(input_file: BinaryIO, output_file: BinaryIO, root: Optional[huff.HuffmanNode],
                  bit_length: Optional[int] = None, chunk_size: int = huff.DEFAULT_CHUNK_SIZE) -> int:
    """
    Decodes bits from input_file, writing byte symbols to output_file in blocks
    Returns the number of symbols written
    """
    written = 0
    block = bytearray()
    for symbol in decode_bits(BitReader(input_file, bit_length=bit_length, chunk_size=chunk_size), root):
        block.append(symbol)
        if len(block) >= chunk_size:
            output_file.write(block)
            written += len(block)
            block.clear()
    if block:
        output_file.write(block)
        written += len(block)
    return written


def decompress_file(src: PathLike, dst: PathLike, result: CompressionResult,
                    chunk_size: int = huff.DEFAULT_CHUNK_SIZE) -> int:
    """
    Restores the output of compress_file using the tree and bit length in result
    Returns the number of bytes written to dst
    """
    with open(src, "rb") as input_file, open(dst, "wb") as output_file:
        return decode_stream(input_file, output_file, result.root, result.bit_length, chunk_size)
