# utils/productivity/export.py
"""
Formatted Excel Export for the Productivity Dashboard

Creates Excel reports with:
- Cover sheet with filter summary and metric cards
- Agent ranking
- Weekly series
- Raw productivity records (optional)

Uses openpyxl for formatting capabilities.
"""

import logging
from datetime import datetime
from io import BytesIO
from typing import Any, Dict, List, Tuple

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from .aggregation import WEEKLY_BASE_COLUMNS
from .constants import EXCEL_STYLES, PERIOD_DESCRIPTIONS

logger = logging.getLogger(__name__)

RANKING_COLUMNS = [
    ('agent_name', 'Agente', 28),
    ('total_updates', 'Total de atualizações', 20),
    ('weekly_updates', 'Semana atual', 14),
    ('daily_average', 'Média diária', 14),
    ('last_update', 'Última atualização', 18),
]

RECORD_EXPORT_COLUMNS = [
    ('date', 'Data', 14),
    ('agent_name', 'Agente', 28),
    ('leadership_role_name', 'Função de liderança', 26),
    ('updates_count', 'Atualizações', 14),
    ('created_at', 'Registrado em', 20),
]


class ProductivityExport:
    """
    Excel report generator for the productivity dashboard.

    Usage:
        exporter = ProductivityExport()
        excel_bytes = exporter.create_report(
            metrics=metrics,
            performance_df=performance_df,
            weekly_df=weekly_df,
            filters=filters
        )

        st.download_button(
            label="Baixar relatório",
            data=excel_bytes,
            file_name="produtividade.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
    """

    def __init__(self):
        """Initialize with default styles."""
        self.wb = None
        self._init_styles()

    def _init_styles(self):
        """Initialize reusable styles."""
        self.header_fill = PatternFill(
            start_color=EXCEL_STYLES['header_fill_color'],
            end_color=EXCEL_STYLES['header_fill_color'],
            fill_type='solid'
        )

        self.header_font = Font(
            bold=True,
            color=EXCEL_STYLES['header_font_color'],
            size=11
        )

        self.title_font = Font(bold=True, size=16)
        self.subtitle_font = Font(bold=True, size=12)

        thin_border = Side(style='thin', color='000000')
        self.cell_border = Border(
            left=thin_border,
            right=thin_border,
            top=thin_border,
            bottom=thin_border
        )

        self.center_align = Alignment(horizontal='center', vertical='center')
        self.right_align = Alignment(horizontal='right', vertical='center')

        self.number_format = EXCEL_STYLES['number_format']
        self.date_format = EXCEL_STYLES['date_format']

    # =========================================================================
    # MAIN EXPORT METHOD
    # =========================================================================

    def create_report(
        self,
        metrics: Dict,
        performance_df: pd.DataFrame,
        weekly_df: pd.DataFrame,
        filters: Dict,
        records_df: pd.DataFrame = None
    ) -> BytesIO:
        """
        Create formatted Excel report with multiple sheets.

        Args:
            metrics: Output of compute_metrics
            performance_df: Output of compute_agent_performance
            weekly_df: Output of compute_weekly_series
            filters: Filter values from the dashboard sidebar
            records_df: Optional raw records

        Returns:
            BytesIO containing Excel file
        """
        self.wb = Workbook()

        self._create_cover_sheet(metrics, filters)
        self._create_ranking_sheet(performance_df)
        self._create_weekly_sheet(weekly_df)

        if records_df is not None and not records_df.empty:
            self._create_records_sheet(records_df)

        output = BytesIO()
        self.wb.save(output)
        output.seek(0)

        logger.info("Excel report created successfully")
        return output

    # =========================================================================
    # COVER SHEET
    # =========================================================================

    def _create_cover_sheet(self, metrics: Dict, filters: Dict):
        """Create cover page with metric summary."""
        ws = self.wb.active
        ws.title = "Resumo"

        row = 1

        ws.cell(row=row, column=1, value="Relatório de Produtividade")
        ws.cell(row=row, column=1).font = self.title_font
        ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=3)
        row += 2

        if filters.get('use_custom_range'):
            start = filters.get('start_date')
            end = filters.get('end_date')
            period_text = (
                f"{start.strftime('%d/%m/%Y') if start else 'início'} a "
                f"{end.strftime('%d/%m/%Y') if end else 'hoje'}"
            )
        else:
            period_text = PERIOD_DESCRIPTIONS.get(filters.get('period'), '')

        info_rows = [
            ("Período:", period_text),
            ("Agente:", filters.get('agent_name') or "Todos os agentes"),
            ("Gerado em:", datetime.now().strftime('%d/%m/%Y %H:%M')),
        ]
        for label, value in info_rows:
            ws.cell(row=row, column=1, value=label)
            ws.cell(row=row, column=2, value=value)
            row += 1

        row += 1

        ws.cell(row=row, column=1, value="Indicadores")
        ws.cell(row=row, column=1).font = self.subtitle_font
        row += 1

        top = metrics.get('top_performer', {})
        metric_rows = [
            ("Total de atualizações", metrics.get('total_updates', 0)),
            ("Agentes ativos", metrics.get('total_agents', 0)),
            ("Média por agente", metrics.get('average_updates_per_agent', 0)),
            ("Destaque", top.get('agent_name', 'N/A')),
            ("Atualizações do destaque", top.get('updates_count', 0)),
        ]

        for label, value in metric_rows:
            ws.cell(row=row, column=1, value=label)
            cell = ws.cell(row=row, column=2, value=value)
            cell.alignment = self.right_align
            if isinstance(value, int):
                cell.number_format = self.number_format
            row += 1

        ws.column_dimensions['A'].width = 28
        ws.column_dimensions['B'].width = 24

    # =========================================================================
    # DATA SHEETS
    # =========================================================================

    def _create_ranking_sheet(self, df: pd.DataFrame):
        """Create agent ranking sheet."""
        if df is None or df.empty:
            return

        ws = self.wb.create_sheet("Ranking")
        columns = [('rank', '#', 6)] + RANKING_COLUMNS

        ranked = df.reset_index(drop=True).copy()
        ranked.insert(0, 'rank', range(1, len(ranked) + 1))

        self._write_table(ws, ranked, columns)

    def _create_weekly_sheet(self, df: pd.DataFrame):
        """Create weekly series sheet (one column per agent)."""
        if df is None or df.empty:
            return

        ws = self.wb.create_sheet("Semanal")
        columns = [
            ('week_start', 'Início da semana', 16),
            ('week_label', 'Semana', 14),
            ('total_updates', 'Total', 12),
        ]
        columns += [
            (col, str(col), max(12, len(str(col)) + 2))
            for col in df.columns if col not in WEEKLY_BASE_COLUMNS
        ]

        self._write_table(ws, df, columns)

    def _create_records_sheet(self, df: pd.DataFrame):
        """Create raw records sheet."""
        columns = [c for c in RECORD_EXPORT_COLUMNS if c[0] in df.columns]
        if not columns:
            return

        ws = self.wb.create_sheet("Registros")
        self._write_table(ws, df, columns)

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _write_table(
        self,
        ws,
        df: pd.DataFrame,
        columns: List[Tuple[str, str, int]]
    ):
        """Write header + rows with borders and formats, freeze the header."""
        for col_idx, (_, header, width) in enumerate(columns, 1):
            cell = ws.cell(row=1, column=col_idx, value=header)
            cell.fill = self.header_fill
            cell.font = self.header_font
            cell.alignment = self.center_align
            cell.border = self.cell_border
            ws.column_dimensions[get_column_letter(col_idx)].width = width

        for row_idx, record in enumerate(df.to_dict('records'), 2):
            for col_idx, (col_name, _, _) in enumerate(columns, 1):
                value = self._cell_value(record.get(col_name))
                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                cell.border = self.cell_border

                if isinstance(value, datetime):
                    cell.number_format = self.date_format
                    cell.alignment = self.center_align
                elif isinstance(value, int):
                    cell.number_format = self.number_format
                    cell.alignment = self.right_align

        ws.freeze_panes = 'A2'

    @staticmethod
    def _cell_value(value: Any) -> Any:
        """Convert pandas/numpy scalars to values openpyxl writes natively."""
        if value is None:
            return None
        if isinstance(value, pd.Timestamp):
            return None if pd.isna(value) else value.to_pydatetime()
        if pd.api.types.is_scalar(value) and pd.isna(value):
            return None
        if hasattr(value, 'item'):
            return value.item()
        return value
