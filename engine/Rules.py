from engine.Cards import ACE, KING


def canMoveToFoundation(card, foundationPile) -> bool:
    if len(foundationPile) == 0:
        return card.rank == ACE
    top = foundationPile[-1]
    return card.suit == top.suit and card.rank == top.rank + 1


def canMoveToTableau(card, targetColumn) -> bool:
    if len(targetColumn) == 0:
        return card.rank == KING
    top = targetColumn[-1]
    if not top.faceUp:
        return False
    return card.isRed() != top.isRed() and card.rank == top.rank - 1


def isValidRun(cards) -> bool:
    if len(cards) == 0:
        return False
    base = cards[0]
    if not base.faceUp:
        return False
    for upper in cards[1:]:
        if not upper.faceUp:
            return False
        if upper.isRed() == base.isRed() or upper.rank != base.rank - 1:
            return False
        base = upper
    return True


def canMoveRunToTableau(cards, targetColumn) -> bool:
    return isValidRun(cards) and canMoveToTableau(cards[0], targetColumn)


def validRunStarts(column):
    """
    Indices i such that column[i:] is a valid run, from the top of the column downwards.
    """
    starts = []
    idx = len(column) - 1
    while idx >= 0 and isValidRun(column[idx:]):
        starts.append(idx)
        idx -= 1
    return starts


def canRecycle(passLimit, stockPassesUsed) -> bool:
    return passLimit == 0 or stockPassesUsed < passLimit
