"""
Crossword Data Models

The grid is produced by an external builder; the game only treats its
entries as correctness units and its cells as input positions.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..config.game_settings import DEFAULT_CLUE

Cell = Tuple[int, int]


@dataclass
class CrosswordCell:
    letter: str = ""
    number: Optional[int] = None
    is_blank: bool = True


@dataclass
class CrosswordEntry:
    word: str
    number: int
    direction: str  # "across" or "down"
    row: int
    col: int
    clue: str = DEFAULT_CLUE

    def positions(self) -> List[Cell]:
        """Grid coordinates covered by this entry, in letter order."""
        if self.direction == "across":
            return [(self.row, self.col + i) for i in range(len(self.word))]
        return [(self.row + i, self.col) for i in range(len(self.word))]

    def answer_from(self, inputs: Dict[Cell, str]) -> str:
        return "".join(inputs.get(pos, "") for pos in self.positions())

    def is_solved(self, inputs: Dict[Cell, str]) -> bool:
        return self.answer_from(inputs).upper() == self.word.upper()


@dataclass
class CrosswordGrid:
    rows: int
    cols: int
    entries: List[CrosswordEntry] = field(default_factory=list)
    cells: List[List[CrosswordCell]] = field(default_factory=list)

    def is_open(self, row: int, col: int) -> bool:
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            return False
        return not self.cells[row][col].is_blank

    def to_public_dict(self) -> Dict:
        """Grid layout and clues without the solution letters."""
        return {
            'rows': self.rows,
            'cols': self.cols,
            'cells': [
                [{'number': cell.number, 'is_blank': cell.is_blank} for cell in row]
                for row in self.cells
            ],
            'entries': [
                {
                    'number': entry.number,
                    'direction': entry.direction,
                    'row': entry.row,
                    'col': entry.col,
                    'length': len(entry.word),
                    'clue': entry.clue,
                }
                for entry in self.entries
            ],
        }


def build_stacked_grid(words: List[str], clues: List[str]) -> CrosswordGrid:
    """
    Default grid layout: every word across, one per alternate row.

    Stands in for a real intersection builder; any callable with the same
    signature can be passed to the game service instead.
    """
    if not words:
        return CrosswordGrid(rows=0, cols=0)

    upper_words = [word.upper() for word in words]
    rows = len(upper_words) * 2 - 1
    cols = max(len(word) for word in upper_words)
    cells = [[CrosswordCell() for _ in range(cols)] for _ in range(rows)]
    entries = []

    for index, word in enumerate(upper_words):
        row = index * 2
        clue = clues[index] if index < len(clues) and clues[index] else DEFAULT_CLUE
        entries.append(CrosswordEntry(word=word, number=index + 1, direction="across", row=row, col=0, clue=clue))
        for col, letter in enumerate(word):
            cells[row][col] = CrosswordCell(letter=letter, is_blank=False)
        cells[row][0].number = index + 1

    return CrosswordGrid(rows=rows, cols=cols, entries=entries, cells=cells)
