import logging
import math
from typing import List, Optional

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment
from openpyxl.utils import get_column_letter

from constants import EXCEL_REPORT_FILENAME
from optimization_engine import METRIC_HEADERS, SolverExperimentResult
from problem import Problem
from route_model import Solution, format_hours

logger = logging.getLogger(__name__)

HEADER_FILL = PatternFill(start_color="D3D3D3", end_color="D3D3D3", fill_type="solid")
HEADER_FONT = Font(bold=True)

def write_header(ws, row: int, headers: List[str], width: int = 15):
    for col, header in enumerate(headers, 1):
        cell = ws.cell(row=row, column=col, value=header)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = Alignment(horizontal='center', wrap_text=True)
        ws.column_dimensions[get_column_letter(col)].width = width

def create_metrics_sheet(wb, metrics: List[SolverExperimentResult]): #one row per solver option
    ws = wb.create_sheet("Solver Metrics")
    ws.cell(row=1, column=1, value="Deviation from Greedy and execution time").font = Font(bold=True, size=14)
    write_header(ws, 3, METRIC_HEADERS, width=18)
    for row, result in enumerate(metrics, 4):
        for col, value in enumerate(result.as_row(), 1):
            ws.cell(row=row, column=col, value=value)
    return ws

def create_solution_sheet(wb, solution: Solution, title: Optional[str] = None): #one row per leg
    option = getattr(solution.solver_option, "label", None)
    ws = wb.create_sheet(title or f"Solution {option or ''}".strip())
    ws.cell(row=1, column=1, value=f"Route ({option or 'unnamed'})").font = Font(bold=True, size=14)
    headers = ["Leg", "Start Base", "End Base", "Targets", "Target Count", "Weight", "Time In Air (h)", "Time In Air"]
    write_header(ws, 3, headers)
    ws.column_dimensions[get_column_letter(4)].width = 40

    row = 4
    for leg, sub_path in enumerate(solution.sub_paths, 1):
        ws.cell(row=row, column=1, value=leg)
        ws.cell(row=row, column=2, value=sub_path.start_base.id)
        ws.cell(row=row, column=3, value=sub_path.end_base.id)
        ws.cell(row=row, column=4, value=", ".join(str(i) for i in sub_path.target_ids) or "-")
        ws.cell(row=row, column=5, value=len(sub_path))
        ws.cell(row=row, column=6, value=sub_path.total_weight)
        ws.cell(row=row, column=7, value=round(sub_path.time_in_air, 4))
        ws.cell(row=row, column=8, value=format_hours(sub_path.time_in_air))
        row += 1

    summary_row = row + 1 #summary
    ws.cell(row=summary_row, column=1, value="Summary").font = Font(bold=True)
    ws.cell(row=summary_row + 1, column=1, value="Total Weight:")
    ws.cell(row=summary_row + 1, column=2, value=solution.total_weight)
    ws.cell(row=summary_row + 2, column=1, value="Time In Air:")
    ws.cell(row=summary_row + 2, column=2, value=format_hours(solution.total_time_in_air))
    ws.cell(row=summary_row + 3, column=1, value="Total Time:")
    ws.cell(row=summary_row + 3, column=2, value=format_hours(solution.total_time))
    if solution.execution_time is not None:
        ws.cell(row=summary_row + 4, column=1, value="Execution (ms):")
        ws.cell(row=summary_row + 4, column=2, value=round(solution.execution_time * 1000, 2))
    return ws

def point_labels(problem: Problem) -> List[str]: #matrix order: targets, then bases
    return [f"T{t.id}" for t in problem.targets] + [f"B{b.id}" for b in problem.bases]

def create_matrix_sheet(wb, problem: Problem, decimals: int = 2):
    """
    Dump both layers of the movement matrix: value density first, flight
    time below it. Rows are destinations, columns are origins; the
    point-to-itself cells are left as "-".
    """
    problem.require_initialized()
    ws = wb.create_sheet("Movement Matrix")
    labels = point_labels(problem)
    row = 1
    for title, average_weight in (("Average Weight", True), ("Time (h)", False)):
        ws.cell(row=row, column=1, value=title).font = Font(bold=True, size=14)
        write_header(ws, row + 1, ["to \\ from"] + labels, width=8)
        for offset, values in enumerate(problem.matrix.as_rows(average_weight, decimals)):
            current = row + 2 + offset
            ws.cell(row=current, column=1, value=labels[offset]).font = HEADER_FONT
            for col, value in enumerate(values, 2):
                ws.cell(row=current, column=col, value=value if math.isfinite(value) else "-")
        row += len(labels) + 3
    return ws

def create_excel_report(
        solutions: List[Solution],
        metrics: Optional[List[SolverExperimentResult]] = None,
        filename: str = EXCEL_REPORT_FILENAME,
        problem: Optional[Problem] = None
) -> str:
    wb = Workbook()
    wb.remove(wb.active)  #remove default sheet
    if metrics:
        create_metrics_sheet(wb, metrics)
    used_titles = set()
    for number, solution in enumerate(solutions, 1):
        label = getattr(solution.solver_option, "label", None) or f"Solution {number}"
        title = label[:31] if label not in used_titles else f"{label[:26]} ({number})" #sheet titles max 31 chars
        used_titles.add(label)
        create_solution_sheet(wb, solution, title)
    if problem is not None:
        create_matrix_sheet(wb, problem)
    if not wb.sheetnames:
        wb.create_sheet("Empty")
    wb.save(filename)
    logger.info(f"excel report saved: {filename}")
    return filename
