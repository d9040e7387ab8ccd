"""Rejection reasons for player actions."""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    INVALID_COLUMN = "invalid column"
    INVALID_INDEX = "invalid index"
    NOT_TOP_CARD = "not the top card"
    ALREADY_FACE_UP = "card is already face-up"
    WRONG_PILE_KIND = "wrong kind of pile"
    EMPTY_PILES = "stock and waste are both empty"
    NO_MOVABLE_CARDS = "no movable cards there"
    INVALID_SEQUENCE_TARGET = "a sequence can only move to the tableau"
    ILLEGAL_TABLEAU_PLACEMENT = "illegal tableau placement"
    ILLEGAL_FOUNDATION_PLACEMENT = "illegal foundation placement"
    NO_OP_MOVE = "source and destination are the same pile"
    NOTHING_TO_UNDO = "nothing to undo"
    NO_STOCK_CYCLES = "no more stock cycles"


class RulesError(ValueError):
    """An action was rejected. The game state is left untouched."""

    def __init__(self, kind: ErrorKind, detail: str = ""):
        self.kind = kind
        self.detail = detail
        message = kind.value if not detail else f"{kind.value}: {detail}"
        super().__init__(message)


__all__ = ["ErrorKind", "RulesError"]
