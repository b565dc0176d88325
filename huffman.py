import heapq
from typing import BinaryIO, Dict, Hashable, Iterable, Iterator, List, Optional

DEFAULT_CHUNK_SIZE = 64 * 1024 # bytes read per chunk when scanning files


class HuffmanNode: # Node for Huffman tree
    def __init__(self, symbol, frequency, left=None, right=None):
        self.symbol = symbol    # byte/char for leaves, None for internal nodes
        self.frequency = frequency
        self.left = left
        self.right = right

    def __lt__(self, other):
        return self.frequency < other.frequency # allows heapq to maintain the min-heap property based on frequency

    def __repr__(self):
        return f"HuffmanNode(symbol={self.symbol!r}, frequency={self.frequency})"

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None


# Frequency analysis

def count_frequencies(symbols: Iterable[Hashable]) -> Dict[Hashable, int]:
    """
    Counts occurrences of every symbol in an iterable, consuming it one item at a time
    Symbols that never occur are absent from the result
    """
    frequency_table: Dict[Hashable, int] = {}
    for symbol in symbols:
        frequency_table[symbol] = frequency_table.get(symbol, 0) + 1
    return frequency_table


def iter_file_symbols(stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[int]:
    """
    Yields the bytes (as ints) of a binary stream, reading chunk_size bytes at a time
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            return
        yield from chunk


# Tree construction

def build_huffman_tree(frequency_table: Dict[Hashable, int]) -> Optional[HuffmanNode]: # frequency_table: dict of symbol -> frequency
    for symbol, frequency in frequency_table.items():
        if frequency <= 0:
            raise ValueError(f"frequency for {symbol!r} must be positive, got {frequency}")

    priority_queue = [HuffmanNode(symbol, frequency) for symbol, frequency in frequency_table.items()]
    if not priority_queue:
        return None # empty input -> no tree

    heapq.heapify(priority_queue)

    # One distinct symbol: hang the leaf under a synthetic root so it still gets a 1-bit code
    if len(priority_queue) == 1:
        leaf = heapq.heappop(priority_queue)
        return HuffmanNode(None, leaf.frequency, left=leaf)

    # Build the tree. Equal frequencies are resolved by heap order, so the tree is
    # optimal but not canonical
    while len(priority_queue) > 1:
        left = heapq.heappop(priority_queue)
        right = heapq.heappop(priority_queue)
        merged_node = HuffmanNode(None, left.frequency + right.frequency, left, right) # internal node with combined frequency
        heapq.heappush(priority_queue, merged_node) # add the merged node back to the priority queue

    return priority_queue[0] # root of the tree


# Code table

def generate_huffman_codes(root: Optional[HuffmanNode]) -> Optional[Dict[Hashable, str]]: # root: root of the Huffman tree
    if root is None:
        return None

    codes: Dict[Hashable, str] = {}
    def generate_codes_helper(node, current_code): # recursive helper function to traverse the tree and generate codes
        if node is None:
            return

        # Leaf node -> assign code
        if node.is_leaf:
            codes[node.symbol] = current_code
            return

        generate_codes_helper(node.left, current_code + '0')
        generate_codes_helper(node.right, current_code + '1')

    generate_codes_helper(root, '')
    return codes # return the mapping of symbols to their corresponding Huffman codes


def code_lengths(code_map: Optional[Dict[Hashable, str]]) -> Dict[Hashable, int]:
    if not code_map:
        return {}
    return {symbol: len(code) for symbol, code in code_map.items()}


def average_code_length(code_map: Optional[Dict[Hashable, str]],
                        frequency_table: Dict[Hashable, int]) -> float:
    """
    Frequency-weighted mean code length in bits per symbol (0.0 for empty input)
    """
    total = sum(frequency_table.values())
    if not code_map or total == 0:
        return 0.0
    return sum(len(code_map[s]) * f for s, f in frequency_table.items()) / total


# Inspection helpers

def iter_leaves(root: Optional[HuffmanNode]) -> Iterator[HuffmanNode]:
    stack: List[HuffmanNode] = [root] if root is not None else []
    while stack:
        node = stack.pop()
        if node.is_leaf:
            yield node
            continue
        # right pushed first so leaves come out left to right
        if node.right is not None:
            stack.append(node.right)
        if node.left is not None:
            stack.append(node.left)


def same_structure(a: Optional[HuffmanNode], b: Optional[HuffmanNode]) -> bool:
    """
    True if both trees have the same shape, symbols and frequencies
    """
    if a is None or b is None:
        return a is b
    if a.symbol != b.symbol or a.frequency != b.frequency:
        return False
    return same_structure(a.left, b.left) and same_structure(a.right, b.right)


def format_tree(root: Optional[HuffmanNode], indent: str = "  ") -> str:
    """
    Indented dump of the tree, one "symbol, frequency" line per node, children below their parent
    """
    lines: List[str] = []

    def visit(node, depth):
        lines.append(f"{indent * depth}{node.symbol!r}, {node.frequency}")
        if node.left is not None:
            visit(node.left, depth + 1)
        if node.right is not None:
            visit(node.right, depth + 1)

    if root is not None:
        visit(root, 0)
    return "\n".join(lines)
