from datetime import date, datetime

from issuedesk.models.issue import Issue
from issuedesk.services.issue_filters import DateFilter, IssueFilters, date_range, filter_issues

TODAY = date(2025, 6, 18)


def make_issue(code, title="", **fields):
    return Issue(project_id=1, issue_code=code, title=title, **fields)


ISSUES = [
    make_issue("PRJ-062025-001", "Login fails", status="Awaiting", developer="Dana",
               due_date=datetime(2025, 6, 20, 17, 0)),
    make_issue("PRJ-062025-002", "Slow report", status="Complete", developer="Lee",
               due_date=datetime(2025, 5, 31, 8, 0), complete_date=datetime(2025, 6, 1)),
    make_issue("PRJ-012025-001", "Typo on invoice", status="Complete", developer="Dana"),
]


def codes(issues):
    return [i.issue_code for i in issues]


def test_date_range_types():
    assert date_range(DateFilter(type="thisMonth"), TODAY) == (date(2025, 6, 1), date(2025, 6, 30))
    assert date_range(DateFilter(type="thisYear"), TODAY) == (date(2025, 1, 1), date(2025, 12, 31))
    assert date_range(DateFilter(type="customMonth", value=date(2024, 2, 10)), TODAY) == (
        date(2024, 2, 1), date(2024, 2, 29))
    assert date_range(DateFilter(type="customYear", value=date(2023, 7, 1)), TODAY) == (
        date(2023, 1, 1), date(2023, 12, 31))
    assert date_range(DateFilter(type="customRange", value=date(2025, 1, 1)), TODAY) == (date(2025, 1, 1), None)


def test_unknown_or_empty_filter_type_does_not_filter():
    assert date_range(DateFilter(type="lastWeek"), TODAY) == (None, None)
    assert date_range(DateFilter(), TODAY) == (None, None)


def test_no_filters_keep_everything():
    assert codes(filter_issues(ISSUES, IssueFilters(), TODAY)) == codes(ISSUES)


def test_keyword_matches_code_or_title_case_insensitively():
    assert codes(filter_issues(ISSUES, IssueFilters(keyword="slow"), TODAY)) == ["PRJ-062025-002"]
    assert codes(filter_issues(ISSUES, IssueFilters(keyword="012025"), TODAY)) == ["PRJ-012025-001"]


def test_exact_match_fields():
    filters = IssueFilters(status="Complete", developer="Dana")
    assert codes(filter_issues(ISSUES, filters, TODAY)) == ["PRJ-012025-001"]


def test_due_date_this_month_excludes_issues_without_due_date():
    filters = IssueFilters(due_date=DateFilter(type="thisMonth"))
    assert codes(filter_issues(ISSUES, filters, TODAY)) == ["PRJ-062025-001"]


def test_custom_range_is_inclusive_by_day():
    filters = IssueFilters(
        due_date=DateFilter(type="customRange", value=date(2025, 5, 31), end=date(2025, 6, 20)),
    )
    assert codes(filter_issues(ISSUES, filters, TODAY)) == ["PRJ-062025-001", "PRJ-062025-002"]
