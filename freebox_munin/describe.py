"""Static Munin graph configuration (the ``config`` run mode)."""

from dataclasses import dataclass

from .config import MUNIN_CATEGORY


@dataclass(frozen=True)
class GraphConfig:
    title: str
    vlabel: str
    fields: tuple[tuple[str, str], ...]


GRAPHS: dict[str, GraphConfig] = {
    "status": GraphConfig(
        title="Freebox connection status",
        vlabel="connected",
        fields=(("status", "Connected"),),
    ),
    "uptime": GraphConfig(
        title="Freebox uptime",
        vlabel="days",
        fields=(("uptime", "Uptime"),),
    ),
    "temp": GraphConfig(
        title="Freebox temperatures",
        vlabel="°C",
        fields=(
            ("tcpum", "CPU M"),
            ("tcpub", "CPU B"),
            ("tsw",   "Switch"),
        ),
    ),
    "fan": GraphConfig(
        title="Freebox fan speed",
        vlabel="RPM",
        fields=(("fan", "Fan"),),
    ),
    "atm": GraphConfig(
        title="Freebox ATM bandwidth",
        vlabel="kbit/s",
        fields=(
            ("atm_down", "Download"),
            ("atm_up",   "Upload"),
        ),
    ),
    "attenuation": GraphConfig(
        title="Freebox line attenuation",
        vlabel="dB",
        fields=(
            ("attenuation_down", "Downstream"),
            ("attenuation_up",   "Upstream"),
        ),
    ),
    "snr": GraphConfig(
        title="Freebox SNR margin",
        vlabel="dB",
        fields=(
            ("snr_down", "Downstream"),
            ("snr_up",   "Upstream"),
        ),
    ),
}


def render_config(metric: str) -> str:
    """
    Return the Munin ``config`` output for *metric*.

    Raises:
        KeyError: *metric* is not a known graph
    """
    graph = GRAPHS[metric]
    lines = [
        f"graph_title {graph.title}",
        f"graph_category {MUNIN_CATEGORY}",
        f"graph_vlabel {graph.vlabel}",
    ]
    lines.extend(f"{name}.label {label}" for name, label in graph.fields)
    return "\n".join(lines) + "\n"
