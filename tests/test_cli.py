"""
Test the blotter CLI.
"""

from datetime import date

import pytest
from click.testing import CliRunner

from blotter.cli.main import cli
from blotter.core.workflow.statuses import CaseStatus


@pytest.fixture
def runner():
    return CliRunner()


def test_version(runner):
    """Test the version option."""
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_list_cases(runner, make_case):
    """Test listing cases."""
    case = make_case(CaseStatus.FILED)

    result = runner.invoke(cli, ["cases", "list"])
    assert result.exit_code == 0, result.output
    assert case.case_number in result.output
    assert "Maria Santos" in result.output


def test_list_cases_empty(runner, db_session):
    """Test listing when nothing has been filed."""
    result = runner.invoke(cli, ["cases", "list", "--status", "FILED"])
    assert result.exit_code == 0, result.output
    assert "No cases found." in result.output


def test_show_case(runner, make_case):
    """Test showing a case by number."""
    case = make_case(CaseStatus.SUMMONED, summon_date=date(2024, 1, 12))

    result = runner.invoke(cli, ["cases", "show", case.case_number])
    assert result.exit_code == 0, result.output
    assert "Respondent Summoned" in result.output
    assert "Next: MEDIATION" in result.output


def test_show_unknown_case(runner, db_session):
    """Test showing a case that does not exist."""
    result = runner.invoke(cli, ["cases", "show", "BLT-1999-0001"])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_advance_case(runner, make_case, db_session):
    """Test proposing a transition from the command line."""
    case = make_case(CaseStatus.FILED)

    result = runner.invoke(cli, [
        "cases", "advance", case.case_number,
        "--status", "DOCKETED",
        "--set", "docketDate=2024-01-10",
        "--remarks", "Received by the secretary",
        "--actor", "secretary",
    ])
    assert result.exit_code == 0, result.output
    assert "FILED -> DOCKETED" in result.output

    db_session.expire_all()
    db_session.refresh(case)
    assert case.status == "DOCKETED"
    assert case.docket_date == date(2024, 1, 10)

    result = runner.invoke(cli, ["cases", "history", str(case.id)])
    assert result.exit_code == 0, result.output
    assert "FILED -> DOCKETED by secretary" in result.output
    assert "Received by the secretary" in result.output


def test_advance_decision_point(runner, make_case):
    """Test that the outcome decides the status reported by the CLI."""
    case = make_case(CaseStatus.MEDIATION, mediation_start_date=date(2024, 2, 1))

    result = runner.invoke(cli, [
        "cases", "advance", case.case_number,
        "--status", "MEDIATION",
        "--set", "mediationOutcome=UNRESOLVED",
    ])
    assert result.exit_code == 0, result.output
    assert "MEDIATION -> CONCILIATION" in result.output


def test_advance_rejected(runner, make_case):
    """Test that workflow errors are printed and exit non-zero."""
    case = make_case(CaseStatus.FILED)

    result = runner.invoke(cli, ["cases", "advance", case.case_number, "--status", "CERTIFIED"])
    assert result.exit_code == 1
    assert "Cannot move case from FILED to CERTIFIED" in result.output


def test_advance_bad_field(runner, make_case):
    """Test the key=value format of --set."""
    case = make_case(CaseStatus.FILED)

    result = runner.invoke(cli, ["cases", "advance", case.case_number, "--status", "DOCKETED", "--set", "docketDate"])
    assert result.exit_code == 2
    assert "key=value" in result.output


def test_pay_fee(runner, make_case):
    """Test confirming the filing fee."""
    case = make_case(CaseStatus.FILED)

    result = runner.invoke(cli, ["cases", "pay-fee", case.case_number])
    assert result.exit_code == 0, result.output
    assert "status DOCKETED" in result.output


def test_steps(runner, make_case):
    """Test the progress steps output."""
    case = make_case(CaseStatus.DOCKETED, docket_date=date(2024, 1, 10))

    result = runner.invoke(cli, ["cases", "steps", case.case_number])
    assert result.exit_code == 0, result.output
    assert "[x] 1. File Complaint" in result.output
    assert "2. Receive in Docket  2024-01-10 <" in result.output


def test_db_stats(runner, make_case):
    """Test database statistics."""
    make_case(CaseStatus.FILED)

    result = runner.invoke(cli, ["db", "stats"])
    assert result.exit_code == 0, result.output
    assert "Cases: 1" in result.output
    assert "FILED: 1" in result.output
