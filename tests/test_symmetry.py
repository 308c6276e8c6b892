from tictactoe_ai.game_basics import Board, Cell, PlayerId
from tictactoe_ai.solver import negamax
from tictactoe_ai.symmetry import (
    ALL_SYMS,
    apply_action_transform,
    canonical_form,
    relabel,
    symmetry_info,
    transform_board,
)


def test_rot90_matches_clockwise_rotation():
    b = Board.from_string("120000000")
    # top-left X ends up top-right after a clockwise quarter turn
    assert transform_board(b, 'rot90').serialize() == "001002000"
    assert transform_board(b, 'rot270').serialize() == "000200100"


def test_rot90_four_times_identity():
    b = Board.from_string("120201000")
    t = b
    for _ in range(4):
        t = transform_board(t, 'rot90')
    assert t == b


def test_flips_are_involutions():
    b = Board.from_string("120201000")
    for op in ('hflip', 'vflip', 'd1', 'd2', 'rot180'):
        assert transform_board(transform_board(b, op), op) == b


def test_action_transform_follows_board_transform():
    for op in ALL_SYMS:
        for idx in range(9):
            r, c = divmod(idx, 3)
            b = Board()
            b.set((r, c), Cell.CROSS)
            tb = transform_board(b, op)
            assert tb.get(apply_action_transform((r, c), op)) == Cell.CROSS


def test_symmetry_composition_closure_on_actions():
    coords = [(r, c) for r in range(3) for c in range(3)]
    for a in ALL_SYMS:
        for b in ALL_SYMS:
            composed = [apply_action_transform(apply_action_transform(x, a), b) for x in coords]
            assert any(
                composed == [apply_action_transform(x, c) for x in coords] for c in ALL_SYMS
            ), f"composition {a} then {b} not closed"


def test_relabel_swaps_marks():
    assert relabel(Board.from_string("120000000")).serialize() == "210000000"


def test_symmetry_info():
    info = symmetry_info(Board())
    assert info['orbit_size'] == 1
    corner = symmetry_info(Board.from_string("100000000"))
    assert corner['orbit_size'] == 4
    assert corner['canonical_form'] == "000000001"
    assert canonical_form(Board.from_string("001000000")) == Board.from_string("000000001")


def test_value_invariant_under_symmetry():
    boards = ["200010000", "120010000", "020221011"]
    for raw in boards:
        b = Board.from_string(raw)
        for p in PlayerId:
            base = negamax(b, p)
            for op in ALL_SYMS:
                assert negamax(transform_board(b, op), p) == base
