"""
Bit layout and precomputed masks for the packed tic-tac-toe state.

A position is a single 32-bit integer:

  bits 28-31   depth (moves played, 0-9)
  bits 19-27   occupancy, one bit per cell (cell 0 = bit 27)
  bits  1-18   cell codes, two bits per cell (cell 0 = bits 17-18)
  bit      0   turn (1 = X to move, 0 = O to move)

  0000  000 000 000  00 00 00 00 00 00 00 00 00  0
  depth occupancy    cells                       turn

Cell codes: 10 = X (maximizer), 01 = O (minimizer), 00 = empty.

Cells are numbered row-major from the top left:

   0 | 1 | 2
  ---+---+---
   3 | 4 | 5
  ---+---+---
   6 | 7 | 8
"""

# Board dimensions
ROWS = 3
COLS = 3
NUM_CELLS = ROWS * COLS  # 9

# Field positions
TURN_BIT = 0x1
CELL_SHIFT = 1
OCCUPANCY_SHIFT = CELL_SHIFT + 2 * NUM_CELLS  # 19
DEPTH_SHIFT = OCCUPANCY_SHIFT + NUM_CELLS     # 28

CELLS_MASK = ((1 << (2 * NUM_CELLS)) - 1) << CELL_SHIFT       # 0x0007FFFE
OCCUPANCY_MASK = ((1 << NUM_CELLS) - 1) << OCCUPANCY_SHIFT    # 0x0FF80000
DEPTH_MASK = 0xF << DEPTH_SHIFT                               # 0xF0000000
DEPTH_ONE = 1 << DEPTH_SHIFT
STATE_MASK = 0xFFFFFFFF

# Board is full when every occupancy bit is set
FULL_MASK = OCCUPANCY_MASK

# Two-bit cell codes
EMPTY_CODE = 0b00
MAX_CODE = 0b10
MIN_CODE = 0b01
INVALID_CODE = 0b11

# Winning lines as cell indices
WIN_LINES = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),  # rows
    (0, 3, 6), (1, 4, 7), (2, 5, 8),  # columns
    (0, 4, 8), (2, 4, 6),             # diagonals
)

# Precomputed tables (initialized at module load)
EMPTY_TEST: list[int] = [0] * NUM_CELLS
APPLY_MAX: list[int] = [0] * NUM_CELLS
APPLY_MIN: list[int] = [0] * NUM_CELLS
WIN_MASKS: list[int] = []  # X mask then O mask for each line in WIN_LINES
MAX_WIN_MASKS: list[int] = []
MIN_WIN_MASKS: list[int] = []

# High (X) and low (O) bit of every cell code
MAX_CODES_MASK = 0
MIN_CODES_MASK = 0


def cell_index(row: int, col: int) -> int:
    """Convert (row, col) to cell index."""
    return row * COLS + col


def index_to_rowcol(index: int) -> tuple[int, int]:
    """Convert cell index to (row, col)."""
    return index // COLS, index % COLS


def is_valid_cell(row: int, col: int) -> bool:
    """Check if (row, col) is on the board."""
    return 0 <= row < ROWS and 0 <= col < COLS


def occupancy_bit(index: int) -> int:
    """Return the occupancy bit of a cell."""
    return 1 << (OCCUPANCY_SHIFT + NUM_CELLS - 1 - index)


def code_shift(index: int) -> int:
    """Return the shift of a cell's two-bit code."""
    return CELL_SHIFT + 2 * (NUM_CELLS - 1 - index)


def code_bits(index: int, code: int) -> int:
    """Place a two-bit code at a cell."""
    return code << code_shift(index)


def read_code(bits: int, index: int) -> int:
    """Extract the two-bit code of a cell."""
    return (bits >> code_shift(index)) & 0b11


def popcount(bb: int) -> int:
    """Count number of set bits."""
    return bin(bb).count('1')


def format_bits(bits: int) -> str:
    """Render a state value grouped by field, as in the module docstring."""
    bits &= STATE_MASK
    depth = format((bits & DEPTH_MASK) >> DEPTH_SHIFT, '04b')
    occ = format((bits & OCCUPANCY_MASK) >> OCCUPANCY_SHIFT, '09b')
    codes = format((bits & CELLS_MASK) >> CELL_SHIFT, '018b')
    return "  ".join([
        depth,
        " ".join(occ[i:i + 3] for i in range(0, 9, 3)),
        " ".join(codes[i:i + 2] for i in range(0, 18, 2)),
        str(bits & TURN_BIT),
    ])


def _init_move_masks() -> None:
    """Precompute vacancy tests and mark placement masks for all cells."""
    global MAX_CODES_MASK, MIN_CODES_MASK
    for i in range(NUM_CELLS):
        occ = occupancy_bit(i)
        EMPTY_TEST[i] = occ
        APPLY_MAX[i] = occ | code_bits(i, MAX_CODE)
        APPLY_MIN[i] = occ | code_bits(i, MIN_CODE)
        MAX_CODES_MASK |= code_bits(i, MAX_CODE)
        MIN_CODES_MASK |= code_bits(i, MIN_CODE)


def _init_win_masks() -> None:
    """Precompute one mask per line and mark."""
    for line in WIN_LINES:
        for table, by_mark in ((APPLY_MAX, MAX_WIN_MASKS), (APPLY_MIN, MIN_WIN_MASKS)):
            mask = 0
            for i in line:
                mask |= table[i]
            WIN_MASKS.append(mask)
            by_mark.append(mask)


# Initialize lookup tables at module load
_init_move_masks()
_init_win_masks()
