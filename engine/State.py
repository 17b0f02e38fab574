from dataclasses import dataclass, field
from typing import Union

from engine.Cards import COLUMN_COUNT, SUITS, dealColumns, encodeStack


@dataclass(frozen=True)
class WasteSource:
    pass


@dataclass(frozen=True)
class FoundationSource:
    pass


@dataclass(frozen=True)
class TableauSource:
    columnIndex: int


MoveSource = Union[WasteSource, FoundationSource, TableauSource]

WASTE = WasteSource()
FOUNDATION = FoundationSource()


@dataclass(frozen=True)
class FoundationTarget:
    suit: str


@dataclass(frozen=True)
class TableauTarget:
    columnIndex: int


MoveTarget = Union[FoundationTarget, TableauTarget]


def _emptyFoundations():
    return [[] for _ in SUITS]


def _emptyTableau():
    return [[] for _ in range(COLUMN_COUNT)]


@dataclass
class GameState:
    """
    The four areas of the board. Every pile keeps its top card at the end of the list.
    Foundations are indexed in SUITS order.
    """

    stock: list = field(default_factory=list)
    waste: list = field(default_factory=list)
    foundations: list = field(default_factory=_emptyFoundations)
    tableau: list = field(default_factory=_emptyTableau)

    @staticmethod
    def deal(deck):
        tableau, stock = dealColumns(deck)
        return GameState(stock=stock, tableau=tableau)

    def foundationFor(self, suit):
        return self.foundations[SUITS.index(suit)]

    def allCards(self):
        cards = list(self.stock) + list(self.waste)
        for pile in self.foundations:
            cards.extend(pile)
        for column in self.tableau:
            cards.extend(column)
        return cards

    def restore(self, other):
        # in place, so references held by the caller stay valid
        self.stock[:] = other.stock
        self.waste[:] = other.waste
        self.foundations[:] = other.foundations
        self.tableau[:] = other.tableau

    def encode(self):
        """Text form of every pile, comparable with == and independent of card identity."""
        return (
            encodeStack(self.stock),
            encodeStack(self.waste),
            tuple(encodeStack(p) for p in self.foundations),
            tuple(encodeStack(c) for c in self.tableau),
        )
