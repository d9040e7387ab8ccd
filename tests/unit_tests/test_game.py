import random
from typing import List

import pytest

from klondike.actions import DealFromStock, DrawCount, FlipCard, MoveCard, NewGame, Undo
from klondike.cards import Card, Rank, Suit
from klondike.config import GameConfig
from klondike.errors import ErrorKind, RulesError
from klondike.game import Game, dispatch
from klondike.positions import STOCK, Foundation, Tableau, Waste


def up(suit: Suit, rank: int) -> Card:
    return Card(suit, rank, True)


def down(suit: Suit, rank: int) -> Card:
    return Card(suit, rank, False)


def new_game(draw_count=DrawCount.THREE, seed=7, **config) -> Game:
    return Game(GameConfig(draw_count=draw_count, **config), rng=random.Random(seed))


def expect_error(game: Game, action, kind: ErrorKind) -> None:
    before = game.state.snapshot()
    history = list(game.history)
    with pytest.raises(RulesError) as info:
        game.dispatch(action)
    assert info.value.kind is kind
    # rejected actions leave everything untouched
    assert game.state == before
    assert list(game.history) == history


# ---------- DealFromStock ----------
def test_deal_one_moves_exactly_one_card() -> None:
    game = new_game(DrawCount.ONE)
    top = game.stock[-1]
    game.dispatch(DealFromStock())
    assert len(game.stock) == 23
    assert game.waste == (top.flipped(),)
    assert game.move_count == 1


def test_deal_three_moves_three_in_deal_order() -> None:
    game = new_game(DrawCount.THREE)
    s = game.stock
    game.dispatch(DealFromStock())
    assert game.waste == (s[-1].flipped(), s[-2].flipped(), s[-3].flipped())
    assert len(game.stock) == 21
    assert all(c.face_up for c in game.waste)


def test_deal_three_is_capped_by_stock_size(build_state) -> None:
    state = build_state()
    state.waste = [c.flipped() for c in state.stock[:-2]]
    state.stock = state.stock[-2:]
    game = Game(GameConfig(draw_count=DrawCount.THREE), state=state)
    game.dispatch(DealFromStock())
    assert game.stock == ()
    assert len(game.waste) == 52
    assert game.state.invariant_violations() == []


def test_recycle_moves_waste_back_face_down() -> None:
    game = new_game(DrawCount.ONE)
    first = game.stock[-1]
    for _ in range(24):
        game.dispatch(DealFromStock())
    waste = game.waste
    assert game.stock == ()

    game.dispatch(DealFromStock())
    assert game.waste == ()
    assert len(game.stock) == 24
    assert all(not c.face_up for c in game.stock)
    assert game.stock == tuple(c.flipped() for c in reversed(waste))
    assert game.move_count == 25
    assert game.state.stock_cycles_used == 1

    # the next pass deals in the same order as the first
    game.dispatch(DealFromStock())
    assert game.waste == (first.flipped(),)


def test_deal_with_no_cards_left(build_state) -> None:
    full = [[up(suit, rank) for rank in Rank] for suit in Suit]
    game = Game(state=build_state(foundations=full, fill_stock=False))
    expect_error(game, DealFromStock(), ErrorKind.EMPTY_PILES)


def test_stock_cycle_limit() -> None:
    game = new_game(DrawCount.THREE, stock_cycles=1)
    for _ in range(8):
        game.dispatch(DealFromStock())
    game.dispatch(DealFromStock())  # first recycle is allowed
    for _ in range(8):
        game.dispatch(DealFromStock())
    assert game.stock == ()
    expect_error(game, DealFromStock(), ErrorKind.NO_STOCK_CYCLES)


# ---------- FlipCard ----------
@pytest.fixture
def flip_game(build_state) -> Game:
    state = build_state(
        tableau=[
            [down(Suit.SPADES, Rank.ACE)],
            [down(Suit.CLUBS, Rank.NINE), up(Suit.HEARTS, Rank.FOUR)],
        ]
    )
    return Game(state=state)


def test_flip_face_down_top_card(flip_game: Game) -> None:
    flip_game.dispatch(FlipCard(Tableau(0, 0)))
    assert flip_game.tableau[0] == (up(Suit.SPADES, Rank.ACE),)
    assert flip_game.move_count == 1


@pytest.mark.parametrize(
    "position, kind",
    [
        (Foundation(0), ErrorKind.WRONG_PILE_KIND),
        (STOCK, ErrorKind.WRONG_PILE_KIND),
        (Waste(0), ErrorKind.WRONG_PILE_KIND),
        (Tableau(7, 0), ErrorKind.INVALID_COLUMN),
        (Tableau(-1, 0), ErrorKind.INVALID_COLUMN),
        (Tableau(0, 5), ErrorKind.INVALID_INDEX),
        (Tableau(2, 0), ErrorKind.INVALID_INDEX),
        (Tableau(1, 0), ErrorKind.NOT_TOP_CARD),
        (Tableau(1, 1), ErrorKind.ALREADY_FACE_UP),
    ],
)
def test_flip_errors(flip_game: Game, position, kind: ErrorKind) -> None:
    expect_error(flip_game, FlipCard(position), kind)


# ---------- MoveCard ----------
@pytest.fixture
def table(build_state) -> Game:
    state = build_state(
        tableau=[
            [down(Suit.CLUBS, Rank.TWO), up(Suit.HEARTS, Rank.KING), up(Suit.SPADES, Rank.QUEEN), up(Suit.DIAMONDS, Rank.JACK)],
            [],
            [up(Suit.SPADES, Rank.TEN)],
            [up(Suit.HEARTS, Rank.ACE)],
            [up(Suit.DIAMONDS, Rank.KING)],
            [down(Suit.CLUBS, Rank.THREE)],
        ],
        foundations=[[up(Suit.SPADES, Rank.ACE)]],
        waste=[up(Suit.CLUBS, Rank.FOUR), up(Suit.HEARTS, Rank.NINE)],
    )
    return Game(state=state)


def test_waste_to_tableau(table: Game) -> None:
    table.dispatch(MoveCard(Waste(1), Tableau(2, 1)))
    assert table.tableau[2] == (up(Suit.SPADES, Rank.TEN), up(Suit.HEARTS, Rank.NINE))
    assert table.waste == (up(Suit.CLUBS, Rank.FOUR),)
    assert table.move_count == 1
    assert table.state.invariant_violations() == []


def test_sequence_move_to_empty_column_then_flip(table: Game) -> None:
    table.dispatch(MoveCard(Tableau(0, 1), Tableau(1, 0)))
    assert [c.rank for c in table.tableau[1]] == [Rank.KING, Rank.QUEEN, Rank.JACK]
    assert table.tableau[0] == (down(Suit.CLUBS, Rank.TWO),)
    table.dispatch(FlipCard(Tableau(0, 0)))
    assert table.tableau[0][-1].face_up
    assert table.move_count == 2


def test_ace_to_empty_foundation(table: Game) -> None:
    table.dispatch(MoveCard(Tableau(3, 0), Foundation(1)))
    assert table.foundations[1] == (up(Suit.HEARTS, Rank.ACE),)
    assert table.tableau[3] == ()


def test_foundation_card_can_return_to_tableau(build_state) -> None:
    state = build_state(
        tableau=[[up(Suit.HEARTS, Rank.THREE)]],
        foundations=[[up(Suit.SPADES, Rank.ACE), up(Suit.SPADES, Rank.TWO)]],
    )
    game = Game(state=state)
    game.dispatch(MoveCard(Foundation(0), Tableau(0, 1)))
    assert game.tableau[0] == (up(Suit.HEARTS, Rank.THREE), up(Suit.SPADES, Rank.TWO))
    assert game.foundations[0] == (up(Suit.SPADES, Rank.ACE),)


def test_foundation_follows_suit(build_state) -> None:
    state = build_state(
        tableau=[[up(Suit.HEARTS, Rank.TWO)]],
        foundations=[[up(Suit.SPADES, Rank.ACE)], [up(Suit.HEARTS, Rank.ACE)]],
    )
    game = Game(state=state)
    expect_error(game, MoveCard(Tableau(0, 0), Foundation(0)), ErrorKind.ILLEGAL_FOUNDATION_PLACEMENT)
    game.dispatch(MoveCard(Tableau(0, 0), Foundation(1)))
    assert len(game.foundations[1]) == 2


@pytest.mark.parametrize(
    "source, target, kind",
    [
        (STOCK, Tableau(1, 0), ErrorKind.NO_MOVABLE_CARDS),
        (Tableau(0, 0), Tableau(1, 0), ErrorKind.NO_MOVABLE_CARDS),
        (Tableau(1, 0), Tableau(2, 1), ErrorKind.NO_MOVABLE_CARDS),
        (Waste(0), Tableau(1, 0), ErrorKind.NO_MOVABLE_CARDS),
        (Tableau(9, 0), Tableau(1, 0), ErrorKind.NO_MOVABLE_CARDS),
        (Tableau(0, 1), Foundation(1), ErrorKind.INVALID_SEQUENCE_TARGET),
        (Tableau(0, 2), Waste(2), ErrorKind.INVALID_SEQUENCE_TARGET),
        (Tableau(0, 1), Tableau(0, 4), ErrorKind.NO_OP_MOVE),
        (Foundation(0), Foundation(0), ErrorKind.NO_OP_MOVE),
        (Tableau(0, 1), Tableau(7, 0), ErrorKind.INVALID_COLUMN),
        (Tableau(3, 0), Foundation(4), ErrorKind.INVALID_INDEX),
        (Tableau(4, 0), Tableau(2, 1), ErrorKind.ILLEGAL_TABLEAU_PLACEMENT),
        (Waste(1), Tableau(1, 0), ErrorKind.ILLEGAL_TABLEAU_PLACEMENT),
        (Tableau(0, 3), Tableau(5, 1), ErrorKind.ILLEGAL_TABLEAU_PLACEMENT),
        (Tableau(2, 0), Tableau(4, 1), ErrorKind.ILLEGAL_TABLEAU_PLACEMENT),
        (Waste(1), Foundation(0), ErrorKind.ILLEGAL_FOUNDATION_PLACEMENT),
        (Waste(1), STOCK, ErrorKind.WRONG_PILE_KIND),
        (Tableau(3, 0), Waste(2), ErrorKind.WRONG_PILE_KIND),
    ],
)
def test_move_errors(table: Game, source, target, kind: ErrorKind) -> None:
    expect_error(table, MoveCard(source, target), kind)


def test_red_queen_cannot_go_on_red_king(build_state) -> None:
    state = build_state(tableau=[[up(Suit.HEARTS, Rank.KING)], [up(Suit.DIAMONDS, Rank.QUEEN)]])
    game = Game(state=state)
    expect_error(game, MoveCard(Tableau(1, 0), Tableau(0, 1)), ErrorKind.ILLEGAL_TABLEAU_PLACEMENT)


# ---------- Win ----------
def test_win_after_last_king_reaches_foundation(build_state) -> None:
    foundations: List[List[Card]] = [[up(suit, rank) for rank in Rank if rank != Rank.KING] for suit in Suit]
    kings = [[up(suit, Rank.KING)] for suit in Suit]
    game = Game(state=build_state(tableau=kings, foundations=foundations))
    assert game.stock == ()

    for pile in range(3):
        game.dispatch(MoveCard(Tableau(pile, 0), Foundation(pile)))
        assert not game.game_won
    game.dispatch(MoveCard(Tableau(3, 0), Foundation(3)))
    assert game.game_won
    assert all(len(f) == 13 for f in game.foundations)


# ---------- NewGame / Undo ----------
def test_new_game_keeps_draw_count() -> None:
    game = new_game(DrawCount.ONE)
    game.dispatch(DealFromStock())
    game.dispatch(NewGame())
    assert game.draw_count is DrawCount.ONE
    assert game.move_count == 0
    assert len(game.stock) == 24
    assert [len(p) for p in game.tableau] == [1, 2, 3, 4, 5, 6, 7]


def test_undo_with_empty_history() -> None:
    expect_error(new_game(), Undo(), ErrorKind.NOTHING_TO_UNDO)


def test_undo_restores_previous_snapshot(table: Game) -> None:
    actions = [
        MoveCard(Waste(1), Tableau(2, 1)),
        MoveCard(Tableau(0, 1), Tableau(1, 0)),
        FlipCard(Tableau(0, 0)),
        DealFromStock(),
        NewGame(),
    ]
    for action in actions:
        before = table.state.snapshot()
        table.dispatch(action)
        table.dispatch(Undo())
        assert table.state == before
        table.dispatch(action)
    assert table.can_undo()


def test_undo_history_is_bounded() -> None:
    game = new_game(DrawCount.ONE, undo_limit=2)
    for _ in range(3):
        game.dispatch(DealFromStock())
    game.dispatch(Undo())
    game.dispatch(Undo())
    assert game.move_count == 1
    expect_error(game, Undo(), ErrorKind.NOTHING_TO_UNDO)


def test_module_level_dispatch_and_unknown_action() -> None:
    game = new_game()
    dispatch(game, DealFromStock())
    assert game.move_count == 1
    with pytest.raises(TypeError):
        game.dispatch("deal")


def test_random_play_conserves_cards() -> None:
    rng = random.Random(99)
    game = new_game(DrawCount.THREE, seed=1234)
    original = sorted(c.card_id for c in game.state.all_cards())

    for _ in range(400):
        candidates = [DealFromStock()]
        for col, pile in enumerate(game.tableau):
            if pile and not pile[-1].face_up:
                candidates.append(FlipCard(Tableau(col, len(pile) - 1)))
            for idx in range(len(pile)):
                for target in game.legal_targets(Tableau(col, idx)):
                    candidates.append(MoveCard(Tableau(col, idx), target))
        if game.waste:
            for target in game.legal_targets(Waste(len(game.waste) - 1)):
                candidates.append(MoveCard(Waste(len(game.waste) - 1), target))

        moves_before = game.move_count
        action = rng.choice(candidates)
        try:
            game.dispatch(action)
        except RulesError as exc:
            assert exc.kind is ErrorKind.EMPTY_PILES
            assert game.move_count == moves_before
        else:
            assert game.move_count == moves_before + 1

        assert game.state.invariant_violations() == []
        assert sorted(c.card_id for c in game.state.all_cards()) == original
