import logging
from typing import Iterator, List, Tuple

from hufflzw.bitpack import DEFAULT_BUFFER_SIZE, BitReader, BitWriter

logger = logging.getLogger(__name__)

EOC = 257          # end of compression, outside the byte range
LITERAL_BITS = 9   # raw width of a first-seen symbol

ROOT = 0
NYT = -1           # symbol of the not-yet-transmitted leaf
INTERNAL = -2      # symbol of internal nodes
NONE = -1          # no child / no parent


class AdaptiveHuffmanTree:
    """
    FGK tree kept in slot-indexed parallel lists.

    Slot 0 is the root and children always sit in higher slots than their
    parent. Frequencies never increase with the slot, so the order number
    count - 1 - slot satisfies the sibling property. Child/parent links are
    slots: swapping two subtrees swaps their records and leaves the parent
    links with the slots.
    """

    def __init__(self):
        self.freq = [0]
        self.symbol = [NYT]
        self.parent = [NONE]
        self.left = [NONE]
        self.right = [NONE]
        self.nyt = ROOT
        self.leaf = {}

    def __len__(self):
        return len(self.freq)

    def is_leaf(self, slot: int) -> bool:
        return self.left[slot] == NONE

    def _add(self, freq: int, symbol: int, parent: int) -> int:
        self.freq.append(freq)
        self.symbol.append(symbol)
        self.parent.append(parent)
        self.left.append(NONE)
        self.right.append(NONE)
        return len(self.freq) - 1

    def _split_nyt(self, c: int) -> int:
        """Give NYT a new leaf for c (right) and a new NYT (left); returns where the update climbs on."""
        p = self.nyt
        self.right[p] = self._add(1, c, p)
        self.leaf[c] = self.right[p]
        self.left[p] = self._add(0, NYT, p)
        self.symbol[p] = INTERNAL
        self.nyt = self.left[p]
        if p == ROOT:
            return p
        self.freq[p] = 1
        return self.parent[p]

    def _relink(self, slot: int):
        if self.is_leaf(slot):
            if self.symbol[slot] == NYT:
                self.nyt = slot
            else:
                self.leaf[self.symbol[slot]] = slot
        else:
            self.parent[self.left[slot]] = slot
            self.parent[self.right[slot]] = slot

    def _swap(self, a: int, b: int):
        for arr in (self.freq, self.symbol, self.left, self.right):
            arr[a], arr[b] = arr[b], arr[a]
        self._relink(a)
        self._relink(b)

    def update(self, c: int):
        p = self.leaf.get(c)
        if p is None:
            p = self._split_nyt(c)

        freq = self.freq
        while p != ROOT:
            f = freq[p]
            if freq[p - 1] == f:
                q = p - 1
                while q > 1 and freq[q - 1] == f:
                    q -= 1
                if q != self.parent[p]:
                    self._swap(p, q)
                    p = q
            freq[p] += 1
            p = self.parent[p]
        freq[ROOT] += 1

    def path(self, c: int) -> Tuple[int, int]:
        """(bits, length) of the root-to-node path for c, or for NYT if c is new."""
        p = self.leaf.get(c, self.nyt)
        bits = length = 0
        while p != ROOT:
            f = self.parent[p]
            if self.right[f] == p:
                bits |= 1 << length
            length += 1
            p = f
        return bits, length

    def nodes_by_order(self) -> Iterator[Tuple[int, int, int]]:
        """(order number, frequency, symbol) with order numbers increasing."""
        n = len(self.freq)
        for slot in range(n - 1, -1, -1):
            yield n - 1 - slot, self.freq[slot], self.symbol[slot]

    def sibling_property_holds(self) -> bool:
        n = len(self.freq)
        for slot in range(1, n):
            if self.freq[slot] > self.freq[slot - 1]:
                return False
            # order number of the parent must exceed the child's
            if self.parent[slot] >= slot:
                return False
        for slot in range(n):
            if not self.is_leaf(slot):
                if self.freq[slot] != self.freq[self.left[slot]] + self.freq[self.right[slot]]:
                    return False
        return True


def _node_label(tree: AdaptiveHuffmanTree, slot: int) -> str:
    s = f"({slot},{tree.freq[slot]}"
    c = tree.symbol[slot]
    if c >= 0:
        s += "," + (chr(c) if 32 < c < 127 else str(c))
    return s + ")"


def describe_tree(message: str) -> List[str]:
    """Feed message into an empty tree and list its nodes by slot, root first."""
    tree = AdaptiveHuffmanTree()
    for ch in message:
        tree.update(ord(ch))
    return [_node_label(tree, slot) for slot in range(len(tree))]


def _write_code(tree: AdaptiveHuffmanTree, c: int, bw: BitWriter):
    bits, length = tree.path(c)
    while length > 32:
        length -= 32
        bw.write_bits(bits >> length, 32)
    bw.write_bits(bits, length)
    if c not in tree.leaf:
        bw.write_bits(c, LITERAL_BITS)


def encode_to(data: bytes, bw: BitWriter):
    tree = AdaptiveHuffmanTree()
    for c in data:
        _write_code(tree, c, bw)
        tree.update(c)
    _write_code(tree, EOC, bw)
    logger.debug("adaptive encode: %d bytes, %d tree nodes", len(data), len(tree))


def encode(data: bytes, buffer_size: int = DEFAULT_BUFFER_SIZE) -> bytes:
    with BitWriter(buffer_size=buffer_size) as bw:
        encode_to(data, bw)
        return bw.finish()


def decode_from(br: BitReader) -> bytes:
    tree = AdaptiveHuffmanTree()
    left, right, symbol = tree.left, tree.right, tree.symbol
    out = bytearray()
    while True:
        p = ROOT
        while left[p] != NONE:
            bit = br.read_bit()
            if bit < 0:
                raise EOFError("Unexpected end of bitstream")
            p = right[p] if bit else left[p]

        c = symbol[p]
        if c == NYT:
            c = br.read_bits(LITERAL_BITS)
            if c < 0:
                raise EOFError("Unexpected end of bitstream")
            if c > 255 and c != EOC:
                raise ValueError(f"Invalid literal: {c}")
        if c == EOC:
            break
        out.append(c)
        tree.update(c)
    return bytes(out)


def decode(payload: bytes) -> bytes:
    with BitReader.from_bytes(payload) as br:
        return decode_from(br)
