"""
Layout notation: the checkers equivalent of the position part of a FEN string.

ex. standard starting layout:
1b1b1b1b/b1b1b1b1/1b1b1b1b/8/8/w1w1w1w1/1w1w1w1w/w1w1w1w1
means:
* row 0 (the top, where White is heading) comes first, row 7 last; rows are separated by '/'
* 'b' is a black piece, 'w' a white piece. Upper case marks the (reserved) queen flag.
* a number denotes that many empty squares after each other
"""

from src.checkers.pieces import LAYOUT_TO_COLOR
from src.checkers.square import BOARD_DIMENSIONS, square_id
from src.core.exceptions import InvalidLayoutError
from src.core.shared_types import Color

STARTING_LAYOUT = "1b1b1b1b/b1b1b1b1/1b1b1b1b/8/8/w1w1w1w1/1w1w1w1w/w1w1w1w1"
EMPTY_LAYOUT = "/".join(["8"] * BOARD_DIMENSIONS[0])

# square id -> (color, is_queen)
ParsedLayout = dict[int, tuple[Color, bool]]


def is_valid_layout(layout: str) -> bool:
    try:
        parse_layout(layout)
    except InvalidLayoutError:
        return False
    return True


def parse_layout(layout: str) -> ParsedLayout:
    """Read the layout string into the pieces found per square id."""
    num_rows, num_cols = BOARD_DIMENSIONS
    row_layouts = layout.split("/")
    if len(row_layouts) != num_rows:
        raise InvalidLayoutError(
            f"Layout needs {num_rows} rows separated by '/', found {len(row_layouts)}: {layout!r}"
        )

    pieces: ParsedLayout = {}
    for row, row_layout in enumerate(row_layouts):
        col = 0
        for character in row_layout:
            if character.isdigit():
                col += int(character)
            elif character.lower() in LAYOUT_TO_COLOR:
                if col >= num_cols:
                    raise InvalidLayoutError(
                        f"Row {row} of layout {layout!r} runs past column {num_cols - 1}"
                    )
                color = LAYOUT_TO_COLOR[character.lower()]
                pieces[square_id(row, col)] = (color, character.isupper())
                col += 1
            else:
                raise InvalidLayoutError(
                    f"Unknown character {character!r} in row {row} of layout {layout!r}"
                )
        # every row must describe exactly all columns
        if col != num_cols:
            raise InvalidLayoutError(
                f"Row {row} of layout {layout!r} covers {col} squares instead of {num_cols}"
            )
    return pieces


def row_to_layout(row_pieces: list[str | None]) -> str:
    """Layout string of a single row. Entries are piece characters, or None for an empty square."""
    characters: list[str] = []
    empty_count = 0
    for character in row_pieces:
        if character is None:
            empty_count += 1
            continue
        if empty_count > 0:
            characters.append(str(empty_count))
            empty_count = 0
        characters.append(character)

    # an entirely empty row still gets its number
    if empty_count > 0:
        characters.append(str(empty_count))
    return "".join(characters)
