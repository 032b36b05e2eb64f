"""
Metric reporters.

Each reporter turns the text of one router page into the values of one Munin
graph.  Reporters are pure functions; :data:`REPORTERS` records which page each
one needs so the caller can fetch it first.
"""

from dataclasses import dataclass
from typing import Callable

from .config import CONNECTED_LABEL
from .extract import FieldSpec, extract, extract_region, extract_text

SECONDS_PER_DAY = 86400

# Unit suffix -> seconds, as written on the system page ("3 jours 4 heures …")
_UPTIME_UNITS = (
    (" jour",    SECONDS_PER_DAY),
    (" heure",   3600),
    (" minute",  60),
    (" seconde", 1),
)

TEMPERATURE_FIELDS = (
    ("tcpum", FieldSpec("Temperature CPUm", " °C")),
    ("tcpub", FieldSpec("Temperature CPUb", " °C")),
    ("tsw",   FieldSpec("Temperature SW",   " °C")),
)
FAN_FIELD = FieldSpec("Fan speed", " RPM")
ATM_FIELDS = (
    ("atm_down", FieldSpec(None, " kbit/s", 1)),
    ("atm_up",   FieldSpec(None, " kbit/s", 2)),
)
ATTENUATION_FIELDS = (
    ("attenuation_down", FieldSpec(None, " dB", 1)),
    ("attenuation_up",   FieldSpec(None, " dB", 2)),
)
SNR_FIELDS = (
    ("snr_down", FieldSpec(None, " dB", 3)),
    ("snr_up",   FieldSpec(None, " dB", 4)),
)


@dataclass(frozen=True)
class MetricReport:
    """One Munin field value; ``None`` means the field was not found."""

    name: str
    value: int | float | None

    def render(self) -> str:
        if self.value is None:
            value = ""
        elif isinstance(self.value, float):
            value = f"{self.value:.2f}"
        else:
            value = str(self.value)
        return f"{self.name}.value {value}\n"


def render_reports(reports: list[MetricReport]) -> str:
    return "".join(report.render() for report in reports)


def _specs(page_text: str, fields) -> list[MetricReport]:
    return [MetricReport(name, spec.extract(page_text)) for name, spec in fields]


# ---------------------------------------------------------------------------
# Reporters
# ---------------------------------------------------------------------------

def report_status(page_text: str) -> list[MetricReport]:
    state = extract_text(page_text, "conn_state")
    return [MetricReport("status", 1 if state == CONNECTED_LABEL else 0)]


def uptime_days(text: str) -> float:
    """
    Convert a duration such as ``"3 jours 4 heures 5 minutes 6 secondes"``
    into fractional days, rounded to two decimals.  Missing components count
    as zero.
    """
    seconds = 0
    for unit, factor in _UPTIME_UNITS:
        count = extract(text, None, unit)
        seconds += (count or 0) * factor
    return round(seconds / SECONDS_PER_DAY, 2)


def report_uptime(page_text: str) -> list[MetricReport]:
    region = extract_region(page_text, "Uptime since")
    return [MetricReport("uptime", None if region is None else uptime_days(region))]


def report_temp(page_text: str) -> list[MetricReport]:
    return _specs(page_text, TEMPERATURE_FIELDS)


def report_fan(page_text: str) -> list[MetricReport]:
    # Firmwares without a fan sensor omit the line entirely
    return [MetricReport("fan", FAN_FIELD.extract(page_text) or 0)]


def report_atm(page_text: str) -> list[MetricReport]:
    return _specs(page_text, ATM_FIELDS)


def report_attenuation(page_text: str) -> list[MetricReport]:
    return _specs(page_text, ATTENUATION_FIELDS)


def report_snr(page_text: str) -> list[MetricReport]:
    return _specs(page_text, SNR_FIELDS)


@dataclass(frozen=True)
class Reporter:
    page: str
    report: Callable[[str], list[MetricReport]]


# Metric name -> (page key in config.PAGES, reporter)
REPORTERS: dict[str, Reporter] = {
    "status":      Reporter("conn_status", report_status),
    "uptime":      Reporter("system",      report_uptime),
    "temp":        Reporter("system",      report_temp),
    "fan":         Reporter("system",      report_fan),
    "atm":         Reporter("adsl_stats",  report_atm),
    "attenuation": Reporter("adsl_stats",  report_attenuation),
    "snr":         Reporter("adsl_stats",  report_snr),
}
