"""Terminal rendering of progress and results."""

import sys
from typing import TextIO

from geolocate.analysis import analyze_results
from geolocate.models import GeolocationResult, LocationCandidate, PhaseResult, ProgressUpdate
from geolocate.regions import continent_name, country_continent, country_name, state_name

BAR_LENGTH = 40
LINE_WIDTH = 100
RULE = "─" * 49
DOUBLE_RULE = "═" * 51


def display_name(phase: str, key: str) -> str:
    """Human-readable name of a location key of the given phase."""
    if phase == "continent":
        return continent_name(key)
    if phase == "country":
        return country_name(key)
    if phase == "state":
        return state_name(key)
    return key


def _phase_key(phase: str, candidate: LocationCandidate) -> str:
    if phase == "state":
        return candidate.state or "Unknown"
    return candidate.country


def format_location(candidate: LocationCandidate) -> str:
    city = candidate.city or "Unknown"
    if candidate.country == "US":
        return f"{city}, {state_name(candidate.state or 'Unknown')}, USA"
    return f"{city}, {country_name(candidate.country)}"


def progress_line(update: ProgressUpdate) -> str:
    """One-line progress bar: filled cells, percentage, counts and leader."""
    ratio = update.percent / 100.0
    filled = round(ratio * BAR_LENGTH)
    bar = "█" * filled + "░" * (BAR_LENGTH - filled)
    counts = f"{update.finished}/{update.expected}"

    line = f"  [{bar}] {update.percent:5.1f}% {counts:>7}"
    if update.leader is not None and update.leader_rtt is not None:
        name = display_name(update.phase, update.leader)
        line += f" - Best: {name} ({update.leader_rtt:.2f} ms)"
    return line


class ConsoleReporter:
    """Reporter writing the progress stream to a text stream."""

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream or sys.stdout

    def _write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()

    def phase_started(self, title: str, number: int, probes_count: int) -> None:
        self._write(f"Phase {number}: {title}...\n")
        self._write(f"  Measuring from {probes_count} probes...\n\n")

    def progress(self, update: ProgressUpdate) -> None:
        self._write("\r" + progress_line(update).ljust(LINE_WIDTH))

    def phase_finished(self, result: PhaseResult) -> None:
        self._write("\n\n")
        if result.phase == "city" or result.winner is None:
            return

        if result.phase == "continent":
            for candidate in result.highlights:
                self._write(f"  {continent_name(candidate.continent)}: {candidate.avg_rtt:.2f} ms\n")
            best = result.winner
            self._write(f"\nBest continent: {continent_name(best.continent)} ({best.avg_rtt:.2f} ms)\n\n")
            return

        for candidate in result.highlights:
            name = display_name(result.phase, _phase_key(result.phase, candidate))
            self._write(f"  {name}: {candidate.min_rtt:.2f}ms\n")

        best = result.winner
        name = display_name(result.phase, _phase_key(result.phase, best))
        self._write(f"\nBest {result.phase}: {name} ({best.min_rtt:.2f}ms)\n\n")


def print_results(result: GeolocationResult, stream: TextIO | None = None) -> None:
    """Print the top three locations and a summary box.

    Anycast targets get a notice instead of the summary: their address
    answers from many places at once and has no single location.
    """
    out = stream or sys.stdout
    candidates = result.candidates

    if not candidates:
        out.write("No results to display\n")
        return

    if result.anycast:
        out.write(f"{result.target} appears to be an anycast address: it answers from\n")
        out.write("several locations at once, so it cannot be pinned to one place.\n")
        return

    analysis = analyze_results(candidates)
    best = analysis.ranked[0]

    out.write("Top 3 Locations:\n")
    out.write(RULE + "\n")
    for i, candidate in enumerate(analysis.ranked[:3], start=1):
        location = format_location(candidate).ljust(40)
        out.write(f"  {i}. {location} {candidate.min_rtt:.2f} ms\n")

    out.write("\n")
    out.write(DOUBLE_RULE + "\n")
    out.write("SUMMARY".center(len(DOUBLE_RULE)).rstrip() + "\n")
    out.write(DOUBLE_RULE + "\n")

    if best.country == "US":
        out.write(f"  Location: {format_location(best)}\n")
    else:
        region = country_continent(best.country) or "Unknown"
        out.write(f"  Location: {format_location(best)}, {region}\n")

    out.write(f"  Minimum Latency: {analysis.min_rtt:.2f} ms\n")
    out.write(f"  Confidence: {analysis.confidence}\n")
    out.write(DOUBLE_RULE + "\n")
