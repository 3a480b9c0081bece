"""
Test script for engine validation

Tests:
1. Palette and color parsing
2. Connectivity (flood fill, largest region, unification)
3. BoardState creation and diffing
4. Action codec and color map
5. Lock/win/loss state machine
6. Move history records

Usage:
    python test_engine.py
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from colorlock.engine import (
    AttemptHistory,
    BoardState,
    NUM_COLORS,
    TileColor,
    apply_color_change,
    apply_player_move,
    decode_action,
    decode_move,
    encode_action,
    encode_move,
    find_largest_region,
    flood_fill,
    is_board_unified,
)
from colorlock.engine.move import color_for_index, index_for_color
from puzzle_fixtures import make_grid, make_state

R, G, B, Y, P, O = (
    TileColor.RED, TileColor.GREEN, TileColor.BLUE,
    TileColor.YELLOW, TileColor.PURPLE, TileColor.ORANGE,
)


def test_palette():
    """Test palette order and color parsing."""
    print("\n" + "="*60)
    print("TEST: Palette")
    print("="*60)

    assert NUM_COLORS == 6
    assert R.palette_index == 0
    assert O.palette_index == 5
    assert TileColor.from_index(2) == B
    assert TileColor.from_index(6) is None
    assert TileColor.from_index(-1) is None
    assert TileColor.parse("Blue") == B
    assert TileColor.parse(P) is P

    try:
        TileColor.parse("pink")
    except ValueError as e:
        print(f"  Unknown color rejected: {e}")
    else:
        raise AssertionError("parse('pink') should raise ValueError")

    print("  [PASS] Palette tests")


def test_flood_fill():
    """Test 4-connected flood fill."""
    print("\n" + "="*60)
    print("TEST: Flood Fill")
    print("="*60)

    grid = make_grid(["RRG",
                      "RGG",
                      "BBB"])

    region = flood_fill(grid, 0, 0, R)
    print(f"  Red region at (0,0): {sorted(region)}")
    assert region == {(0, 0), (0, 1), (1, 0)}

    # Wrong color or out of bounds gives nothing
    assert flood_fill(grid, 0, 0, G) == set()
    assert flood_fill(grid, 5, 5, R) == set()
    assert flood_fill(grid, -1, 0, R) == set()

    # Diagonals do not connect
    checker = make_grid(["RG",
                         "GR"])
    assert flood_fill(checker, 0, 0, R) == {(0, 0)}

    # Non-square grids
    wide = make_grid(["RRRR",
                      "GGGR"])
    assert flood_fill(wide, 0, 0, R) == {(0, 0), (0, 1), (0, 2), (0, 3), (1, 3)}

    # Plain lists are accepted and left untouched
    as_lists = [list(row) for row in grid]
    before = [row[:] for row in as_lists]
    flood_fill(as_lists, 2, 0, B)
    assert as_lists == before

    print("  [PASS] Flood fill tests")


def test_largest_region():
    """Test largest region discovery and board unification."""
    print("\n" + "="*60)
    print("TEST: Largest Region / Unified")
    print("="*60)

    grid = make_grid(["RRG",
                      "RGG",
                      "GGG"])
    largest = find_largest_region(grid)
    print(f"  Largest region size: {len(largest)}")
    assert len(largest) == 6
    assert all(grid[r][c] == G for r, c in largest)

    # Ties: first region found in row-major order
    tied = make_grid(["RRG",
                      "RGG",
                      "BBB"])
    assert find_largest_region(tied) == {(0, 0), (0, 1), (1, 0)}

    assert find_largest_region(()) == set()

    assert is_board_unified([])
    assert is_board_unified([[]])
    assert is_board_unified(make_grid(["BB", "BB"]))
    assert not is_board_unified(make_grid(["BB", "BR"]))

    print("  [PASS] Largest region tests")


def test_board_state():
    """Test BoardState creation and methods."""
    print("\n" + "="*60)
    print("TEST: BoardState")
    print("="*60)

    sample_board = [
        ["red", "green", "blue"],
        ["red", "red", "blue"],
    ]

    board = BoardState.from_2d_list(sample_board)
    print(f"  Created board: {board.rows}x{board.cols}, area {board.area}")
    assert (board.rows, board.cols, board.area) == (2, 3, 6)
    assert board.get_cell(0, 1) == G
    assert board.get_cell(5, 5) is None

    board2 = BoardState.from_2d_list(sample_board)
    assert board == board2
    assert hash(board) == hash(board2)

    modified = [row[:] for row in sample_board]
    modified[0][0] = "blue"
    diff = board.diff(BoardState.from_2d_list(modified))
    print(f"  Diff test (1 cell changed): {diff}")
    assert diff == [(0, 0)]

    assert board.region_at(1, 1) == {(0, 0), (1, 0), (1, 1)}
    assert board.region_at(9, 9) == set()
    assert len(board.largest_region()) == 3
    assert not board.is_unified()
    assert board.to_list()[1] == [R, R, B]

    print("  [PASS] BoardState tests")


def test_action_codec():
    """Test action ID encoding and color map resolution."""
    print("\n" + "="*60)
    print("TEST: Action Codec")
    print("="*60)

    # Rows are counted from the bottom
    assert encode_action(4, 0, 0, 5) == 0
    assert encode_action(3, 1, 1, 5) == 37
    assert decode_action(37, 5) == (3, 1, 1)
    assert decode_action(30, 5) == (3, 0, 0)
    assert decode_action(6, 5) == (4, 1, 0)

    row, col, color_index = decode_action(encode_action(0, 4, 5, 5), 5)
    assert (row, col, color_index) == (0, 4, 5)

    # Every in-range move survives encode -> decode, for any board and palette size
    checked = 0
    for n in range(1, 8):
        for c in range(1, NUM_COLORS + 1):
            seen = set()
            for r in range(n):
                for col in range(n):
                    for k in range(c):
                        action_id = encode_action(r, col, k, n, c)
                        assert 0 <= action_id < n * n * c
                        assert decode_action(action_id, n, c) == (r, col, k), (r, col, k, n, c)
                        seen.add(action_id)
                        checked += 1
            # One ID per move, no collisions
            assert len(seen) == n * n * c
    print(f"  Round trip checked for {checked} moves")

    # Out-of-range IDs decode to out-of-range rows, not errors
    assert decode_action(999, 5)[0] == -29

    # 3x3 board uses N * C = 18 per row
    assert decode_action(0, 3) == (2, 0, 0)

    # Color map: color_map[color_index] is the palette position
    reversed_map = [5, 4, 3, 2, 1, 0]
    assert color_for_index(1, reversed_map) == P
    assert index_for_color(P, reversed_map) == 1
    # Non-involutive map pins the lookup direction
    rotated = [1, 2, 3, 4, 5, 0]
    assert color_for_index(0, rotated) == G
    assert color_for_index(5, rotated) == R
    assert index_for_color(G, rotated) == 0
    assert index_for_color(R, rotated) == 5
    grid = make_grid(["RRRRR"] * 5)
    assert decode_move(encode_action(2, 3, 0, 5), grid, rotated).color == G
    assert encode_move(2, 3, G, 5, rotated) == encode_action(2, 3, 0, 5)
    assert color_for_index(1, None) == G
    assert color_for_index(6, None) is None
    assert color_for_index(2, [0, 1]) is None
    assert index_for_color(B, [0, 1]) is None

    assert encode_move(2, 3, B, 5) == 80
    assert encode_move(2, 3, B, 5, [0, 1]) is None

    print("  [PASS] Action codec tests")


def test_decode_move():
    """Test decoding actions against a live grid."""
    print("\n" + "="*60)
    print("TEST: Decode Move")
    print("="*60)

    grid = make_grid(["RRRRR"] * 5)

    move = decode_move(80, grid)
    print(f"  Decoded 80: ({move.row},{move.col}) -> {move.color.value}, {move.cell_count} cells")
    assert (move.row, move.col, move.color) == (2, 3, B)
    assert move.action_id == 80
    assert move.cell_count == 25

    assert decode_move(-1, grid) is None
    assert decode_move(999, grid) is None
    assert decode_move("12", grid) is None
    assert decode_move(0, ()) is None

    # Recoloring to the current color is a no-op and never decodes
    assert decode_move(0, grid) is None

    # Color index outside the map
    assert decode_move(2, grid, [0, 1]) is None

    # Connectivity comes from the live grid
    split = make_grid(["RRRRR",
                       "GGGGG",
                       "RRRRR",
                       "GGGGG",
                       "RRRRR"])
    move = decode_move(encode_action(4, 0, 2, 5), split)
    assert move.cells == frozenset((4, c) for c in range(5))

    print("  [PASS] Decode move tests")


def test_color_change_basics():
    """Test no-op handling and copy-on-write."""
    print("\n" + "="*60)
    print("TEST: Color Change Basics")
    print("="*60)

    state = make_state(["RGB",
                        "RGB",
                        "RGB"],
                       locked={(0, 0), (1, 0), (2, 0)})
    original_grid = state.grid

    assert apply_color_change(state, 0, 0, R) is state
    assert apply_color_change(state, 3, 0, G) is state
    assert apply_color_change(state, 0, -1, G) is state

    # Colors outside the palette leave the board alone
    assert apply_color_change(state, 0, 1, "pink") is state
    assert apply_color_change(state, 0, 1, None) is state
    assert apply_color_change(state, 0, 1, 2) is state
    assert state.grid is original_grid

    # Stored string values are accepted
    from_string = apply_color_change(state, 0, 1, "red")
    assert from_string.grid[0][1] is R
    assert from_string.moves_used == 1

    new_state = apply_color_change(state, 0, 1, R)
    print(f"  After (0,1)->red: moves={new_state.moves_used}, locked={len(new_state.locked_cells)}")
    assert new_state is not state
    assert new_state.moves_used == 1
    assert len(new_state.locked_cells) == 6
    assert new_state.locked_color == R
    assert not new_state.is_solved and not new_state.is_lost

    # Input state untouched
    assert state.grid is original_grid
    assert state.grid == make_grid(["RGB", "RGB", "RGB"])
    assert state.moves_used == 0

    print("  [PASS] Color change basics")


def test_sticky_lock():
    """Test that the lock only moves on a strictly larger region."""
    print("\n" + "="*60)
    print("TEST: Sticky Lock")
    print("="*60)

    blue_pair = {(1, 0), (1, 1)}
    state = make_state(["RRG",
                        "BBG",
                        "YPO"],
                       locked=blue_pair)

    # Every region is size 2 now; the lock stays on blue
    state = apply_color_change(state, 2, 1, Y)
    print(f"  After equal-size merge: locked={sorted(state.locked_cells)}")
    assert state.locked_cells == frozenset(blue_pair)

    # Green grows to 3 and takes the lock
    state = apply_color_change(state, 2, 2, G)
    print(f"  After larger merge: locked={sorted(state.locked_cells)}")
    assert state.locked_cells == frozenset({(0, 2), (1, 2), (2, 2)})

    print("  [PASS] Sticky lock tests")


def test_win_and_loss():
    """Test terminal evaluation order."""
    print("\n" + "="*60)
    print("TEST: Win / Loss")
    print("="*60)

    # Win: unified in target, lock cleared
    state = make_state(["BR",
                        "BB"],
                       locked={(0, 0), (1, 0), (1, 1)}, loss_threshold=4)
    won = apply_color_change(state, 0, 1, B)
    print(f"  Win: solved={won.is_solved}, lost={won.is_lost}, locked={len(won.locked_cells)}")
    assert won.is_solved and not won.is_lost
    assert won.locked_cells == frozenset()
    assert won.moves_used == 1

    # Moves on a finished puzzle are ignored
    assert apply_color_change(won, 0, 0, R) is won

    # Loss by unifying in the wrong color
    state = make_state(["RB",
                        "RR"])
    lost = apply_color_change(state, 0, 1, R)
    assert lost.is_lost and not lost.is_solved

    # Loss by wrong-color lock reaching the threshold
    rows = ["RRR",
            "RGB",
            "YPO"]
    state = make_state(rows, target="B", loss_threshold=5)
    lost = apply_color_change(state, 1, 1, R)
    print(f"  Threshold loss: locked={len(lost.locked_cells)}, lost={lost.is_lost}")
    assert len(lost.locked_cells) == 5
    assert lost.is_lost

    # Same lock in the target color is fine
    state = make_state(rows, target="R", loss_threshold=5)
    ok = apply_color_change(state, 1, 1, R)
    assert not ok.is_lost and not ok.is_solved

    # Below the threshold is fine too
    state = make_state(rows, target="B", loss_threshold=6)
    assert not apply_color_change(state, 1, 1, R).is_lost

    print("  [PASS] Win / loss tests")


def test_move_history():
    """Test move records and attempt history serialization."""
    print("\n" + "="*60)
    print("TEST: Move History")
    print("="*60)

    state = make_state(["RRG",
                        "BBG",
                        "YPO"])
    history = AttemptHistory()

    new_state, record = apply_player_move(state, 2, 1, Y)
    assert record.grid_before == state.grid
    assert record.action_id == 9
    history.add(record, new_state)

    same_state, no_record = apply_player_move(new_state, 2, 1, Y)
    assert same_state is new_state
    assert no_record is None
    history.add(no_record, same_state)
    assert len(history.records) == 1

    data = history.to_dict()
    print(f"  History: {data['actions']}")
    assert data["actions"] == [9]
    assert data["states"] == [{"0": ["red", "red", "green"],
                               "1": ["blue", "blue", "green"],
                               "2": ["yellow", "purple", "orange"]}]

    # A finished attempt also records the final grid
    state = make_state(["BR",
                        "BB"],
                       locked={(0, 0), (1, 0), (1, 1)}, loss_threshold=4)
    history.clear()
    won, record = apply_player_move(state, 0, 1, B)
    history.add(record, won)
    data = history.to_dict()
    assert len(data["states"]) == 2
    assert data["states"][1] == {"0": ["blue", "blue"], "1": ["blue", "blue"]}

    print("  [PASS] Move history tests")


def main():
    """Run all tests."""
    print("\n" + "#"*60)
    print("# ENGINE VALIDATION TESTS")
    print("#"*60)

    tests = [
        ("Palette", test_palette),
        ("Flood Fill", test_flood_fill),
        ("Largest Region", test_largest_region),
        ("BoardState", test_board_state),
        ("Action Codec", test_action_codec),
        ("Decode Move", test_decode_move),
        ("Color Change Basics", test_color_change_basics),
        ("Sticky Lock", test_sticky_lock),
        ("Win / Loss", test_win_and_loss),
        ("Move History", test_move_history),
    ]

    results = []
    for name, test in tests:
        try:
            test()
            results.append((name, True))
        except AssertionError as e:
            print(f"  [FAIL] {name}: {e}")
            results.append((name, False))

    print("\n" + "="*60)
    print("SUMMARY")
    print("="*60)

    all_passed = True
    for name, passed in results:
        status = "PASS" if passed else "FAIL"
        print(f"  {name}: [{status}]")
        if not passed:
            all_passed = False

    print()
    if all_passed:
        print("All tests PASSED!")
        return 0
    else:
        print("Some tests FAILED!")
        return 1


if __name__ == "__main__":
    sys.exit(main())
