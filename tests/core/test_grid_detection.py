from leave_reconcile.core.grid import detect_table, find_column_span, find_header_row


HEADER = ["Pers.No.", "Date", "A/AType", "Hours"]
DATA = [
    ["12345", "28.04.2025", "1110", 7.5],
    ["12345", "29.04.2025", "1120", 4.0],
    ["12345", "30.04.2025", "1110", 7.5],
    ["12345", "01.05.2025", "1150", 2.0],
]


def _clean_grid() -> list[list]:
    return [HEADER] + [list(row) for row in DATA]


def _padded_grid() -> list[list]:
    """Same table with title rows, blank rows and blank leading/trailing columns."""
    width = len(HEADER) + 3
    grid = [
        [None, "DRMIS Time Sheet Report"] + [None] * (width - 2),
        [None] * width,
        [None] * width,
        [None, None] + HEADER + [None],
    ]
    for row in DATA:
        grid.append([None, None] + list(row) + [None])
    grid.append([None] * width)
    return grid


def test_find_header_row_prefers_keyword_row() -> None:
    assert find_header_row(_clean_grid()) == 0
    assert find_header_row(_padded_grid()) == 3


def test_detect_table_same_logical_table_with_padding() -> None:
    clean = detect_table(_clean_grid())
    padded = detect_table(_padded_grid())

    assert clean.headers == HEADER
    assert padded.headers == HEADER
    assert padded.rows == clean.rows
    assert padded.column_span == (2, 5)
    assert len(padded.rows) == 4


def test_detect_table_skips_blank_rows_and_pads_short_rows() -> None:
    grid = _clean_grid()
    grid.insert(2, [None, "  ", None, None])
    grid.append(["12345", "02.05.2025"])

    table = detect_table(grid)

    assert len(table.rows) == 5
    assert table.rows[-1] == {"Pers.No.": "12345", "Date": "02.05.2025", "A/AType": None, "Hours": None}


def test_detect_table_empty_grid() -> None:
    table = detect_table([])

    assert table.is_empty is True
    assert table.headers == []
    assert table.header_index is None


def test_find_column_span_keeps_full_width_when_nothing_qualifies() -> None:
    grid = [["Date", "Hours", "Leave Code"], ["01.04.2025", None, None]]

    assert find_column_span(grid, 0) == (0, 2)


def test_header_tie_goes_to_earliest_row() -> None:
    grid = [
        ["a", "b", "c"],
        ["d", "e", "f"],
        [1, 2, 3],
    ]

    assert find_header_row(grid) == 0


def test_to_frame_uses_headers_as_columns() -> None:
    frame = detect_table(_clean_grid()).to_frame()

    assert list(frame.columns) == HEADER
    assert frame.shape == (4, 4)
