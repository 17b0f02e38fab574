import random

SUITS = ("spades", "hearts", "diamonds", "clubs")
RED_SUITS = frozenset(("hearts", "diamonds"))
NUM_PER_SUIT = 13
ACE = 1
KING = 13
COLUMN_COUNT = 7


class Card:
    SYMBOLS = "♠♥♦♣"
    NUMS = ("A ", "2 ", "3 ", "4 ", "5 ", "6 ", "7 ", "8 ", "9 ", "10", "J ", "Q ", "K ")

    def __init__(self, suit, rank, faceUp=False):
        self.suit = suit
        self.rank = rank
        self.faceUp = faceUp

    @property
    def id(self):
        return SUITS.index(self.suit) * NUM_PER_SUIT + self.rank - 1

    def isRed(self):
        return self.suit in RED_SUITS

    def gameStr(self):
        if not self.faceUp:
            return "---"
        return Card.SYMBOLS[SUITS.index(self.suit)] + Card.NUMS[self.rank - 1]

    def __str__(self):
        if self.faceUp:
            return str(self.id)
        return str(self.id) + "H"

    def __repr__(self):
        return f"Card({self.suit!r}, {self.rank}, faceUp={self.faceUp})"

    @staticmethod
    def fromId(id, faceUp=False):
        if id < 0 or id >= len(SUITS) * NUM_PER_SUIT:
            raise ValueError(f"card id out of range: {id}")
        return Card(SUITS[id // NUM_PER_SUIT], id % NUM_PER_SUIT + 1, faceUp)


def createDeck():
    return [Card(suit, rank) for suit in SUITS for rank in range(ACE, KING + 1)]


def shuffleDeck(deck, rng=None):
    """
    Fisher-Yates shuffle in place.
    :param rng: a random.Random-like object, module-level random if omitted
    """
    rng = rng if rng is not None else random
    for i in range(len(deck) - 1, 0, -1):
        j = rng.randint(0, i)
        deck[i], deck[j] = deck[j], deck[i]
    return deck


def dealColumns(deck):
    """
    Deals columns of sizes 1..7 from the front of the deck.

    :return: (tableau, stock); the stock's last element is the next card drawn
    """
    tableau = [[] for _ in range(COLUMN_COUNT)]
    idx = 0
    for col in range(COLUMN_COUNT):
        for row in range(col + 1):
            card = deck[idx]
            idx += 1
            card.faceUp = row == col
            tableau[col].append(card)
    stock = deck[idx:]
    stock.reverse()
    for card in stock:
        card.faceUp = False
    return tableau, stock


def decodeStack(code: str):
    code = code.strip()
    if code.startswith("empty"):
        return []
    cards = code.split(",")

    def decodeCard(s: str):
        data = s.split()
        hidden = data[1] == "1"
        return Card.fromId(int(data[0]), faceUp=not hidden)

    return list(map(decodeCard, cards))


def encodeStack(stack: list):
    if len(stack) == 0:
        return "empty"

    def encodeCard(card: Card):
        s = str(card.id)
        if card.faceUp:
            return s + " 0"
        return s + " 1"

    return ",".join(map(encodeCard, stack))
