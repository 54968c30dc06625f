"""
Board assembly: turns approved questions into the N x N play grid.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .questions import Question
from ..errors import NotFound


@dataclass
class Cell:
    """One board slot: an approved question (or nothing) plus its reveal flag."""
    question: Optional[Question] = None
    revealed: bool = False

    @property
    def is_empty(self) -> bool:
        return self.question is None

    @property
    def is_playable(self) -> bool:
        return self.question is not None and not self.revealed

    def to_dict(self, include_answer: bool = False) -> Dict[str, Any]:
        data: Dict[str, Any] = {"revealed": self.revealed, "points": None, "creator_id": None}
        if self.question is not None:
            data["points"] = self.question.points
            data["creator_id"] = self.question.creator_id
            if include_answer or self.revealed:
                data["question"] = self.question.prompt
                data["answer"] = self.question.answer
        return data


class Board:
    """
    Grid of cells; rows are point tiers and columns are categories.

    The shape is fixed at assembly time. Only the reveal flags change during
    play.
    """

    def __init__(self, categories: Sequence[str], cells: List[List[Cell]]):
        self.categories = list(categories)
        self.cells = cells

    @property
    def size(self) -> int:
        return len(self.cells)

    def cell(self, row: int, column: int) -> Cell:
        if not (0 <= row < self.size and 0 <= column < self.size):
            raise NotFound(f"No cell at row {row}, column {column}")
        return self.cells[row][column]

    def iter_cells(self) -> Iterable[Tuple[int, int, Cell]]:
        for row, cells in enumerate(self.cells):
            for column, cell in enumerate(cells):
                yield row, column, cell

    def is_exhausted(self) -> bool:
        """True once every cell is revealed or was never filled."""
        return all(cell.revealed or cell.is_empty for _, _, cell in self.iter_cells())

    def remaining_cells(self) -> List[Tuple[int, int]]:
        return [(row, column) for row, column, cell in self.iter_cells() if cell.is_playable]

    def grid_signature(self) -> List[List[Optional[str]]]:
        """Question ids per cell, used to compare two assemblies."""
        return [
            [cell.question.question_id if cell.question else None for cell in row]
            for row in self.cells
        ]

    def to_dict(self, include_answers: bool = False) -> Dict[str, Any]:
        return {
            "categories": self.categories,
            "cells": [[cell.to_dict(include_answers) for cell in row] for row in self.cells],
        }


def assemble_board(categories: Sequence[str], approved_questions: Sequence[Question], board_size: int) -> Board:
    """
    Build the board from the category set and approved questions.

    For column c and row r the first approved question (in input order) with
    category c and points (r + 1) * 100 fills the cell. Later questions that
    collide on the same slot are left off the board.
    """
    cells = [[Cell() for _ in range(board_size)] for _ in range(board_size)]

    for column, category in enumerate(list(categories)[:board_size]):
        in_category = [q for q in approved_questions if q.is_approved and q.category == category]
        for row in range(board_size):
            points = (row + 1) * 100
            match = next((q for q in in_category if q.points == points), None)
            if match is not None:
                cells[row][column] = Cell(question=match, revealed=False)

    return Board(categories, cells)
