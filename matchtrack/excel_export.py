"""Spreadsheet export of player standings."""

import logging
from pathlib import Path
from typing import Optional, Sequence

import openpyxl
from openpyxl.styles import Font

from .models import Player, PlayerAverages

logger = logging.getLogger('matchtrack.excel_export')

PLAYER_HEADERS = ['Name', 'Games', 'Kills', 'Deaths', 'Assists', 'KDA', 'Handicap']


def export_player_stats(
    excel_path: str | Path,
    players: Sequence[Player],
    averages: Optional[Sequence[PlayerAverages]] = None,
    sheet_name: str = 'Players',
) -> Path:
    """
    Write cumulative player stats to an Excel workbook.

    One row per player in roster order: name, games played, total kills,
    deaths and assists, KDA and handicap. Games and KDA come from the
    averages when given (blank otherwise).

    Args:
        excel_path: Output .xlsx path (overwritten if it exists)
        players: Players carrying cumulative totals and handicaps
        averages: Optional output of calculate_player_averages
        sheet_name: Worksheet name

    Returns:
        Path of the written workbook
    """
    excel_path = Path(excel_path)
    excel_path.parent.mkdir(parents=True, exist_ok=True)

    by_id = {a.player_id: a for a in averages or []}

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = sheet_name

    for col, header in enumerate(PLAYER_HEADERS, start=1):
        cell = ws.cell(row=1, column=col, value=header)
        cell.font = Font(bold=True)

    for row, player in enumerate(players, start=2):
        avg = by_id.get(player.id)
        values = [
            player.name,
            avg.games if avg else None,
            player.kills,
            player.deaths,
            player.assists,
            avg.kda if avg else None,
            player.handicap,
        ]
        for col, value in enumerate(values, start=1):
            ws.cell(row=row, column=col, value=value)

    ws.freeze_panes = 'A2'
    wb.save(excel_path)
    wb.close()

    logger.info(f'Wrote stats for {len(players)} player(s) to {excel_path}')
    return excel_path
