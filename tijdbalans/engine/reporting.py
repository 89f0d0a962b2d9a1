# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Personal and team reporting on top of computed balances."""

from collections.abc import Sequence
from dataclasses import dataclass, field

from .aggregator import TimeBalance
from .enums import EscalationLevel, Severity
from .formatting import format_duration, safe_percentage
from .ledger import CompensationLedger
from .shortage import ShortageAlert, detect_shortages


@dataclass(frozen=True)
class PersonalAlert:
    """Alert shown to a person about their own balance."""

    type: str
    message: str
    action: str
    priority: str


@dataclass(frozen=True)
class TeamSummary:
    """Totals over a set of balances."""

    total_employees: int
    total_hours_worked: float
    total_regular_hours: float
    total_overtime_hours: float
    total_compensation_balance: float
    total_shortage_hours: float
    average_productivity: int | None


@dataclass(frozen=True)
class TeamInsight:
    type: str
    title: str
    value: str
    details: str
    trend: str


@dataclass(frozen=True)
class TimeReport:
    """Team report: summary, shortage alerts and recommendations."""

    summary: TeamSummary
    alerts: list[ShortageAlert]
    recommendations: list[str]
    insights: list[TeamInsight] = field(default_factory=list)


def generate_personal_recommendations(balance: TimeBalance) -> list[str]:
    """Advice for a person based on their balance."""
    recommendations = []
    productivity = safe_percentage(balance.actual_hours, balance.expected_hours)
    compensation = balance.net_compensation_hours

    if balance.shortage_hours > 0:
        recommendations.append(
            f"WAARSCHUWING: Je hebt {format_duration(balance.shortage_hours)} "
            "te kort gewerkt deze periode"
        )
        if balance.shortage_hours <= 4:
            recommendations.append(
                "ADVIES: Plan 1-2 extra uren deze week om het tekort in te halen"
            )
        else:
            recommendations.append(
                "URGENT: Plan een inhaaldag om het tekort weg te werken"
            )

    if balance.overtime_hours > 8:
        recommendations.append(
            f"OVERTIME: Je hebt veel overtime gemaakt "
            f"({format_duration(balance.overtime_hours)}). Vergeet niet om te "
            "pauzeren!"
        )

    if compensation > 16:
        recommendations.append(
            f"COMPENSATIE: Je hebt {format_duration(compensation)} compensatie "
            "uren. Tijd voor een vrije dag?"
        )

    if balance.weekend_hours > 0:
        recommendations.append(
            f"WEEKEND: Je hebt {format_duration(balance.weekend_hours)} weekend "
            "uren gemaakt"
        )

    if balance.evening_hours > 0:
        recommendations.append(
            f"AVOND: Je hebt {format_duration(balance.evening_hours)} avond uren "
            "gemaakt"
        )

    if productivity is not None:
        if productivity > 110:
            recommendations.append(
                f"UITSTEKEND: Excellente productiviteit ({productivity}%)! Zorg "
                "wel voor goede work-life balance"
            )
        elif productivity < 90:
            recommendations.append(
                f"VERBETERING: Productiviteit kan beter ({productivity}%). "
                "Bespreek eventuele obstakels met je manager"
            )

    if balance.auto_break_deducted > 0:
        recommendations.append(
            f"PAUZES: {format_duration(balance.auto_break_deducted)} automatische "
            "pauze afgetrokken. Vergeet niet handmatig pauzes in te klokken"
        )

    if balance.invalid_entry_count:
        recommendations.append(
            f"CONTROLE: {balance.invalid_entry_count} registratie(s) met een "
            "uitkloktijd voor de inkloktijd niet meegeteld"
        )

    return recommendations


def generate_personal_alerts(balance: TimeBalance) -> list[PersonalAlert]:
    """Alerts for a person based on their balance."""
    alerts = []
    compensation = balance.net_compensation_hours

    if balance.shortage_hours >= 8:
        alerts.append(
            PersonalAlert(
                type="CRITICAL_SHORTAGE",
                message=f"Kritiek tekort: {format_duration(balance.shortage_hours)}",
                action="Plan inhaaldag deze week",
                priority="HIGH",
            )
        )

    if compensation > 40:
        alerts.append(
            PersonalAlert(
                type="HIGH_COMPENSATION",
                message=f"Hoog compensatie saldo: {format_duration(compensation)}",
                action="Plan vrije dagen om saldo te gebruiken",
                priority="MEDIUM",
            )
        )

    if balance.auto_break_deducted > 2:
        alerts.append(
            PersonalAlert(
                type="MISSING_BREAKS",
                message=(
                    "Veel automatische pauzes: "
                    f"{format_duration(balance.auto_break_deducted)}"
                ),
                action="Klok pauzes handmatig in voor nauwkeurigere registratie",
                priority="LOW",
            )
        )

    if balance.invalid_entry_count:
        alerts.append(
            PersonalAlert(
                type="INVALID_ENTRIES",
                message=(
                    f"{balance.invalid_entry_count} ongeldige registratie(s) "
                    "uitgesloten van de balans"
                ),
                action="Laat een beheerder de registraties corrigeren",
                priority="MEDIUM",
            )
        )

    return alerts


def generate_compensation_recommendations(ledger: CompensationLedger) -> list[str]:
    """Advice based on a compensation ledger."""
    recommendations = []
    balance = ledger.balance

    if balance > 40:
        recommendations.append(
            f"VERLOF: Hoog compensatie saldo ({format_duration(balance)}) - plan "
            "vrije dagen"
        )
    if ledger.weekend_hours > 8:
        recommendations.append(
            f"WEEKEND: Veel weekend uren ({format_duration(ledger.weekend_hours)}) "
            "- zorg voor voldoende rust"
        )
    if ledger.evening_hours > 16:
        recommendations.append(
            f"AVOND: Veel avond uren ({format_duration(ledger.evening_hours)}) - "
            "monitor work-life balance"
        )
    if ledger.capped_hours > 0:
        recommendations.append(
            f"PLAFOND: {format_duration(ledger.capped_hours)} niet opgebouwd, "
            "maximaal saldo bereikt"
        )

    return recommendations


def generate_team_shortage_recommendations(
    alerts: Sequence[ShortageAlert],
) -> list[str]:
    """Advice for managers based on the team's shortage alerts."""
    recommendations = []
    critical = sum(1 for a in alerts if a.severity == Severity.CRITICAL)
    escalations = sum(1 for a in alerts if a.escalation_level == EscalationLevel.HIGH)
    structural = sum(1 for a in alerts if a.consecutive_weeks_short >= 2)

    if critical:
        recommendations.append(
            f"KRITIEK: {critical} medewerkers hebben kritieke tekorten - directe "
            "actie vereist"
        )
    if escalations:
        recommendations.append(
            f"ESCALATIE: {escalations} medewerkers vereisen escalatie naar "
            "management"
        )
    if len(alerts) > 5:
        recommendations.append(
            f"PLANNING: Hoog aantal tekorten ({len(alerts)}) - evalueer team "
            "planning en werkbelasting"
        )
    if structural:
        recommendations.append(
            f"STRUCTUREEL: {structural} medewerkers hebben structurele tekorten - "
            "HR gesprek aanbevolen"
        )

    return recommendations


def summarize_team(balances: Sequence[TimeBalance]) -> TeamSummary:
    """Add up balances; productivity averages only over contracted hours.

    Zero-hours contracts have no productivity figure and are left out of
    the average. With no contracted hours at all the average is None.
    """
    productivities = [
        p
        for p in (safe_percentage(b.actual_hours, b.expected_hours) for b in balances)
        if p is not None
    ]
    average = (
        round(sum(productivities) / len(productivities)) if productivities else None
    )

    return TeamSummary(
        total_employees=len(balances),
        total_hours_worked=sum(b.actual_hours for b in balances),
        total_regular_hours=sum(b.regular_hours for b in balances),
        total_overtime_hours=sum(b.overtime_hours for b in balances),
        total_compensation_balance=sum(b.net_compensation_hours for b in balances),
        total_shortage_hours=sum(b.shortage_hours for b in balances),
        average_productivity=average,
    )


def generate_team_insights(
    summary: TeamSummary, balances: Sequence[TimeBalance]
) -> list[TeamInsight]:
    """Headline figures for the team dashboard."""
    productivities = [
        safe_percentage(b.actual_hours, b.expected_hours) for b in balances
    ]
    high = sum(1 for p in productivities if p is not None and p > 110)
    low = sum(1 for p in productivities if p is not None and p < 90)
    overtime_users = sum(1 for b in balances if b.overtime_hours > 8)
    shortage_users = sum(1 for b in balances if b.shortage_hours > 4)

    average = summary.average_productivity
    return [
        TeamInsight(
            type="PRODUCTIVITY",
            title="Team Productiviteit",
            value=f"{average}%" if average is not None else "n.v.t.",
            details=f"{high} hoge presteerders, {low} onder gemiddelde",
            trend="UP" if average is not None and average > 100 else "DOWN",
        ),
        TeamInsight(
            type="OVERTIME",
            title="Overtime Verdeling",
            value=format_duration(summary.total_overtime_hours),
            details=f"{overtime_users} medewerkers met significante overtime",
            trend=(
                "UP" if overtime_users > summary.total_employees * 0.3 else "STABLE"
            ),
        ),
        TeamInsight(
            type="SHORTAGE",
            title="Tekorten",
            value=format_duration(summary.total_shortage_hours),
            details=f"{shortage_users} medewerkers met tekorten",
            trend="UP" if shortage_users > 0 else "DOWN",
        ),
    ]


def generate_recommendations(
    summary: TeamSummary, alerts: Sequence[ShortageAlert]
) -> list[str]:
    """Team-level recommendations."""
    recommendations = []

    if summary.total_shortage_hours > 20:
        recommendations.append(
            "WAARSCHUWING: Er zijn significante tekorten gedetecteerd. Overweeg "
            "rooster aanpassingen."
        )
    if summary.total_overtime_hours > summary.total_regular_hours * 0.2:
        recommendations.append(
            "OVERTIME: Hoge overtime uren. Mogelijk extra personeel nodig."
        )
    if summary.total_compensation_balance > 200:
        recommendations.append(
            "COMPENSATIE: Veel opgebouwde compensatie uren. Stimuleer opname om "
            "burnout te voorkomen."
        )
    if summary.average_productivity is not None and summary.average_productivity < 80:
        recommendations.append(
            "PRODUCTIVITEIT: Lage productiviteit gedetecteerd. Analyseer oorzaken "
            "en ondersteun medewerkers."
        )
    if alerts:
        recommendations.append(
            f"TEKORTEN: {len(alerts)} medewerkers hebben tekorten. Directe "
            "aandacht vereist."
        )

    return recommendations


def generate_time_report(
    balances: Sequence[TimeBalance],
    alerts: Sequence[ShortageAlert] | None = None,
) -> TimeReport:
    """Build the team report for a set of balances.

    Args:
        balances: One balance per team member.
        alerts: Precomputed shortage alerts; detected without history
            when omitted.

    Returns:
        The team report.
    """
    summary = summarize_team(balances)
    if alerts is None:
        alerts = detect_shortages(balances)
    alerts = list(alerts)
    return TimeReport(
        summary=summary,
        alerts=alerts,
        recommendations=generate_recommendations(summary, alerts),
        insights=generate_team_insights(summary, balances),
    )
