from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Font

from clinical.models import SummativeEvaluation
from clinical.services import scoring

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'


def _cell(value):
    if value is None:
        return ''
    if hasattr(value, 'isoformat'):
        return value.isoformat()
    return value


def evaluation_workbook(evaluation: SummativeEvaluation, student_id=None) -> bytes:
    """Score sheet for one evaluation session, one row per student."""
    wb = Workbook()
    ws = wb.active
    ws.title = 'scores'

    ws.append(['Summative Evaluation'])
    ws['A1'].font = Font(bold=True, size=14)
    ws.append(['Scenario', f'{evaluation.scenario.scenario_number}. {evaluation.scenario.title}'])
    ws.append(['Cohort', evaluation.cohort.label if evaluation.cohort else ''])
    ws.append(['Date', _cell(evaluation.evaluation_date)])
    ws.append(['Examiner', evaluation.examiner_name])
    ws.append(['Location', evaluation.location])
    ws.append(['Status', evaluation.get_status_display()])
    ws.append([])

    headers = ['Student']
    headers += [label for _, label in scoring.SCORE_CATEGORIES]
    headers += [f'Total (/{scoring.MAX_SCORE})']
    headers += [label for _, label in scoring.CRITICAL_CRITERIA]
    headers += ['Critical Notes', 'Result', 'Graded At', 'Examiner Notes', 'Feedback']
    ws.append(headers)
    for cell in ws[ws.max_row]:
        cell.font = Font(bold=True)

    scores = evaluation.scores.select_related('student')
    if student_id:
        scores = scores.filter(student_id=student_id)
    for score in scores:
        row = [score.student.full_name]
        row += [_cell(getattr(score, key)) for key in scoring.SCORE_FIELDS]
        row.append(scoring.total_score(score))
        row += ['Yes' if getattr(score, key) else 'No' for key, _ in scoring.CRITICAL_CRITERIA]
        row += [
            score.critical_criteria_notes,
            scoring.result_label(score.passed),
            _cell(score.graded_at.replace(tzinfo=None) if score.graded_at else None),
            score.examiner_notes,
            score.feedback_provided,
        ]
        ws.append(row)

    ws.column_dimensions['A'].width = 28
    buf = BytesIO()
    wb.save(buf)
    buf.seek(0)
    return buf.getvalue()
