"""Case administration CLI commands."""

import uuid
from typing import Optional, Tuple

import click

from blotter.core.config import get_settings
from blotter.core.database import get_db_session
from blotter.core.services.case_service import CaseFilters, CaseService
from blotter.core.workflow.display import compute_display_steps
from blotter.core.workflow.engine import WorkflowEngine
from blotter.core.workflow.errors import WorkflowError
from blotter.core.workflow.statuses import CaseStatus, allowed_next_statuses, status_label

STATUS_CHOICE = click.Choice([s.value for s in CaseStatus], case_sensitive=False)


@click.group()
def cases():
    """Blotter case commands."""
    pass


def _find_case(service: CaseService, ref: str):
    """Look a case up by UUID or by case number."""
    try:
        case_id = uuid.UUID(ref)
    except ValueError:
        return service.get_case_by_number(ref)
    return service.get_case(case_id)


def _parse_fields(values: Tuple[str, ...]) -> dict:
    fields = {}
    for value in values:
        key, sep, raw = value.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected key=value, got {value!r}", param_hint="--set")
        fields[key.strip()] = raw.strip()
    return fields


@cases.command("list")
@click.option("--status", "-s", type=STATUS_CHOICE, help="Filter by status")
@click.option("--search", "-q", help="Search case number, incident and party names")
@click.option("--limit", "-l", default=20, help="Maximum cases to show")
def list_cases(status: Optional[str], search: Optional[str], limit: int):
    """List cases, newest report first."""
    with get_db_session() as session:
        service = CaseService(session)
        filters = CaseFilters(status=CaseStatus(status.upper()) if status else None, search=search)
        items, total = service.list_cases(filters, limit=limit)

        if not items:
            click.echo("No cases found.")
            return

        click.echo(f"\nShowing {len(items)} of {total} cases:")
        for case in items:
            complainant = case.complainant.full_name if case.complainant else "-"
            click.echo(
                f"  {case.case_number}  {case.status:<12} {case.report_date}  "
                f"{case.incident_type} ({complainant})"
            )


@cases.command("show")
@click.argument("case_ref")
def show_case(case_ref: str):
    """Show a case by id or case number."""
    with get_db_session() as session:
        service = CaseService(session)
        try:
            case = _find_case(service, case_ref)
        except WorkflowError as e:
            raise click.ClickException(e.detail)

        click.echo(f"\n{case.case_number} - {status_label(case.case_status)} ({case.status})")
        click.echo(f"  Version: {case.version}")
        click.echo(f"  Priority: {case.priority}")
        click.echo(f"  Incident: {case.incident_type} on {case.incident_date} at {case.incident_location}")
        click.echo(f"  Reported: {case.report_date}")
        paid = "paid" if case.filing_fee_paid else "unpaid"
        click.echo(f"  Filing fee: {case.filing_fee} ({paid})")

        click.echo("\n  Parties:")
        for party in case.parties:
            click.echo(f"    {party.party_type}: {party.full_name}, {party.address}")

        next_statuses = [s.value for s in CaseStatus if s in allowed_next_statuses(case.case_status)]
        click.echo(f"\n  Next: {', '.join(next_statuses) or '(none)'}")


@cases.command("steps")
@click.argument("case_ref")
def show_steps(case_ref: str):
    """Show the progress steps of a case."""
    with get_db_session() as session:
        service = CaseService(session)
        try:
            case = _find_case(service, case_ref)
        except WorkflowError as e:
            raise click.ClickException(e.detail)

        click.echo(f"\n{case.case_number} ({case.status}):")
        for step in compute_display_steps(case):
            if step.skipped:
                mark = "-"
            elif step.completed:
                mark = "x"
            else:
                mark = " "
            current = " <" if step.current else ""
            description = f"  {step.description}" if step.description else ""
            click.echo(f"  [{mark}] {step.number}. {step.label}{description}{current}")


@cases.command("history")
@click.argument("case_ref")
def show_history(case_ref: str):
    """Show the status history of a case."""
    with get_db_session() as session:
        service = CaseService(session)
        try:
            case = _find_case(service, case_ref)
            updates = service.get_history(case.id)
        except WorkflowError as e:
            raise click.ClickException(e.detail)

        if not updates:
            click.echo(f"{case.case_number}: no status changes yet.")
            return

        click.echo(f"\n{case.case_number} history:")
        for update in updates:
            requested = f" (requested {update.requested_status})" if update.requested_status != update.status else ""
            click.echo(
                f"  #{update.sequence} {update.created_at:%Y-%m-%d %H:%M} "
                f"{update.from_status} -> {update.status}{requested} by {update.actor}"
            )
            if update.remarks:
                click.echo(f"      {update.remarks}")


@cases.command("advance")
@click.argument("case_ref")
@click.option("--status", "-s", "status", required=True, type=STATUS_CHOICE, help="Status to move to")
@click.option("--set", "fields", multiple=True, metavar="KEY=VALUE",
              help="Stage field, e.g. --set docketDate=2024-01-10 (repeatable)")
@click.option("--remarks", "-r", help="Remarks recorded with the change")
@click.option("--expected", "-e", type=STATUS_CHOICE, help="Status you expect the case to be in")
@click.option("--expected-version", type=int, help="Case version you expect (see `cases show`)")
@click.option("--actor", "-a", help="Who is making the change")
def advance(
    case_ref: str,
    status: str,
    fields: Tuple[str, ...],
    remarks: Optional[str],
    expected: Optional[str],
    expected_version: Optional[int],
    actor: Optional[str],
):
    """Propose a status transition for a case."""
    payload = _parse_fields(fields)
    if remarks:
        payload["remarks"] = remarks

    with get_db_session() as session:
        service = CaseService(session)
        engine = WorkflowEngine(session, get_settings())
        try:
            case = _find_case(service, case_ref)
            previous = case.status
            case = engine.propose_transition(
                case.id,
                requested_status=status.upper(),
                payload=payload,
                expected_status=expected.upper() if expected else None,
                actor=actor,
                expected_version=expected_version,
            )
        except WorkflowError as e:
            raise click.ClickException(e.detail)

        click.echo(f"{case.case_number}: {previous} -> {case.status}")


@cases.command("pay-fee")
@click.argument("case_ref")
@click.option("--unpaid", is_flag=True, help="Mark the fee as not paid instead")
@click.option("--actor", "-a", help="Who is making the change")
def pay_fee(case_ref: str, unpaid: bool, actor: Optional[str]):
    """Confirm the filing fee (dockets a FILED case)."""
    with get_db_session() as session:
        service = CaseService(session)
        try:
            case = _find_case(service, case_ref)
            case = service.confirm_filing_fee(case.id, paid=not unpaid, actor=actor)
        except WorkflowError as e:
            raise click.ClickException(e.detail)

        paid = "unpaid" if unpaid else "paid"
        click.echo(f"{case.case_number}: filing fee {paid}, status {case.status}")
