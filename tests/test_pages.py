from __future__ import annotations

import itertools

import pytest

from spellcards.constants import CARD_HEIGHT, CARD_WIDTH, SLOT_GAP
from spellcards.layout import CardFormat, CardLayout, LayoutStatus
from spellcards.pages import PageComposer, PageState

N = CardFormat.NORMAL
D = CardFormat.DOUBLE


def fit(card_format=N):
    return CardLayout(LayoutStatus.FIT, card_format.content_height, used_height=10.0)


def slots(page):
    return [(card.key, card.row, card.column) for card in page.cards]


def overlaps(a, b):
    return a.x < b.x + b.width and b.x < a.x + a.width and a.y < b.y + b.height and b.y < a.y + a.height


def test_normal_cards_fill_left_to_right_then_top_to_bottom():
    composer = PageComposer()
    for i in range(4):
        composer.add_card(N, fit(), key=str(i))
    pages = composer.finish()

    assert len(pages) == 1
    assert slots(pages[0]) == [("0", 0, 0), ("1", 0, 1), ("2", 0, 2), ("3", 1, 0)]


def test_tenth_normal_card_starts_a_second_page():
    composer = PageComposer()
    for i in range(10):
        composer.add_card(N, fit(), key=str(i))
    pages = composer.finish()

    assert [len(page.cards) for page in pages] == [9, 1]
    assert [page.number for page in pages] == [1, 2]
    assert slots(pages[1]) == [("9", 0, 0)]


def test_double_takes_the_slot_below_and_later_cards_skip_it():
    composer = PageComposer()
    composer.add_card(D, fit(D), key="d")
    for key in "abc":
        composer.add_card(N, fit(), key=key)
    page = composer.finish()[0]

    # (1, 0) is covered by the double card
    assert slots(page) == [("d", 0, 0), ("a", 0, 1), ("b", 0, 2), ("c", 1, 1)]


def test_double_on_last_row_flushes_the_page_without_backfilling():
    composer = PageComposer()
    for i in range(6):
        composer.add_card(N, fit(), key=f"n{i}")
    composer.add_card(D, fit(D), key="d")
    composer.add_card(N, fit(), key="after")
    pages = composer.finish()

    assert len(pages) == 2
    assert len(pages[0].cards) == 6  # last row left empty
    assert slots(pages[1]) == [("d", 0, 0), ("after", 0, 1)]


def test_six_slot_rows_hold_exactly_three_doubles():
    page_size = (CARD_WIDTH, 6 * CARD_HEIGHT + 5 * SLOT_GAP)
    composer = PageComposer(columns=1, rows=6, page_size=page_size)
    for key in "abc":
        composer.add_card(D, fit(D), key=key)

    assert composer.state is PageState.FULL
    composer.add_card(N, fit(), key="next")
    pages = composer.finish()

    assert slots(pages[0]) == [("a", 0, 0), ("b", 2, 0), ("c", 4, 0)]
    assert slots(pages[1]) == [("next", 0, 0)]
    bottom = pages[0].cards[-1]
    assert bottom.y >= -1e-6
    assert bottom.y + bottom.height <= pages[0].cards[1].y + 1e-6


def test_state_machine_transitions():
    page_size = (CARD_WIDTH, 2 * CARD_HEIGHT + SLOT_GAP)
    composer = PageComposer(columns=1, rows=2, page_size=page_size)
    assert composer.state is PageState.EMPTY

    composer.add_card(N, fit())
    assert composer.state is PageState.PARTIAL
    composer.add_card(N, fit())
    assert composer.state is PageState.FULL
    assert composer.pages == []

    composer.add_card(N, fit())
    assert composer.state is PageState.PARTIAL
    assert len(composer.pages) == 1

    assert len(composer.finish()) == 2
    assert composer.state is PageState.EMPTY


def test_finish_without_cards_returns_no_pages():
    assert PageComposer().finish() == []


def test_cards_never_overlap_and_stay_on_the_page():
    composer = PageComposer()
    sequence = [N, D, N, N, D, N, D, D, N, N, N, D, N]
    for i, card_format in enumerate(sequence):
        composer.add_card(card_format, fit(card_format), key=str(i))
    pages = composer.finish()

    placed = [card for page in pages for card in page.cards]
    assert [card.key for card in placed] == [str(i) for i in range(len(sequence))]
    for page in pages:
        for a, b in itertools.combinations(page.cards, 2):
            assert not overlaps(a, b)
        for card in page.cards:
            assert 0 <= card.x and card.x + card.width <= composer.page_width
            assert 0 <= card.y and card.y + card.height <= composer.page_height


def test_reading_order_matches_request_order_on_each_page():
    composer = PageComposer()
    for i, card_format in enumerate([D, N, D, N, N, N, N]):
        composer.add_card(card_format, fit(card_format), key=str(i))
    for page in composer.finish():
        reading_order = sorted(page.cards, key=lambda card: (card.row, card.column))
        assert reading_order == page.cards


def test_overflowing_layout_is_refused():
    overflow = CardLayout(LayoutStatus.OVERFLOW, N.content_height, excess=5.0)
    with pytest.raises(ValueError):
        PageComposer().add_card(N, overflow)


def test_single_row_grid_is_rejected_up_front():
    # a double card could never be placed on it
    with pytest.raises(ValueError, match="two rows"):
        PageComposer(columns=3, rows=1)


def test_two_row_grid_takes_a_double_after_singles():
    composer = PageComposer(columns=3, rows=2)
    composer.add_card(N, fit(), key="a")
    composer.add_card(N, fit(), key="b")
    composer.add_card(D, fit(D), key="big")
    composer.add_card(N, fit(), key="c")
    pages = composer.finish()

    assert [slots(page) for page in pages] == [[("a", 0, 0), ("b", 0, 1), ("big", 0, 2), ("c", 1, 0)]]


def test_grid_larger_than_page_is_rejected():
    with pytest.raises(ValueError):
        PageComposer(columns=4, rows=3)
    with pytest.raises(ValueError):
        PageComposer(columns=0, rows=3)
