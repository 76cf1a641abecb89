"""Command line interface for talking to PPG gauges."""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

import typer

from ppg_link.address import Address, Unicast, parse_address
from ppg_link.config import DEFAULT_PORT, SERIAL_SETTINGS, setup_logging
from ppg_link.exceptions import GaugeError, TransportError
from ppg_link.session import GaugeSession
from ppg_link.simulator import GaugeSimulator
from ppg_link.transport import SerialTransport, list_ports

logger = logging.getLogger(__name__)

app = typer.Typer(context_settings={"help_option_names": ["-h", "--help"]})


@dataclass
class CliState:
    port: str
    address: Address
    gauge_type: str
    simulate: bool
    baudrate: int
    timeout: float


@contextmanager
def open_session(state: CliState) -> Iterator[GaugeSession]:
    if state.simulate:
        device_id = state.address.device_id if isinstance(state.address, Unicast) else 253
        simulator = GaugeSimulator(device_id=device_id, gauge_type=state.gauge_type)
        yield GaugeSession(simulator, state.address, state.gauge_type)
        return
    settings = {"baudrate": state.baudrate, "timeout": state.timeout}
    with SerialTransport(state.port, settings) as transport:
        yield GaugeSession(transport, state.address, state.gauge_type)


def _fail(message: str) -> None:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


@contextmanager
def _session_or_exit(ctx: typer.Context) -> Iterator[GaugeSession]:
    try:
        with open_session(ctx.obj) as session:
            yield session
    except (GaugeError, OSError, ValueError) as exc:
        _fail(str(exc))


@app.callback()
def main(
    ctx: typer.Context,
    port: str = typer.Option(DEFAULT_PORT, "--port", "-p", help="Serial port of the gauge."),
    address: str = typer.Option("broadcast", "--address", "-a", help="Gauge id (0-253) or 'broadcast'."),
    gauge_type: str = typer.Option("PPG550", "--gauge", help="Gauge model: PPG550 or PPG570."),
    simulate: bool = typer.Option(False, "--simulate", help="Talk to a simulated gauge instead of a port."),
    baudrate: int = typer.Option(SERIAL_SETTINGS["baudrate"], "--baudrate", help="Serial baud rate."),
    timeout: float = typer.Option(SERIAL_SETTINGS["timeout"], "--timeout", help="Read timeout in seconds."),
    debug: bool = typer.Option(False, "--debug", help="Log every frame on the wire."),
) -> None:
    """Query and configure PPG550/PPG570 gauges over RS232/RS485."""

    setup_logging("ppg_link", logging.DEBUG if debug else logging.WARNING)
    try:
        parsed = parse_address(address)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--address")
    if gauge_type not in ("PPG550", "PPG570"):
        raise typer.BadParameter(f"Unsupported gauge type: {gauge_type}", param_hint="--gauge")
    ctx.obj = CliState(port, parsed, gauge_type, simulate, baudrate, timeout)


@app.command()
def query(ctx: typer.Context, name: str = typer.Argument(..., help="Mnemonic, e.g. PR3.")) -> None:
    """Send '<name>?' and print the reply."""

    with _session_or_exit(ctx) as session:
        typer.echo(session.query(name))


@app.command()
def command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Mnemonic, e.g. U."),
    parameter: str = typer.Argument("", help="Value to set, e.g. TORR."),
) -> None:
    """Send '<name>!<parameter>' and print the reply."""

    with _session_or_exit(ctx) as session:
        typer.echo(session.command(name, parameter))


@app.command()
def send(ctx: typer.Context, message: str = typer.Argument(..., help="Raw message body, e.g. PR3?.")) -> None:
    """Send a raw message body and print the reply."""

    with _session_or_exit(ctx) as session:
        typer.echo(session.send(message))


@app.command()
def pressure(ctx: typer.Context) -> None:
    """Read the current pressure."""

    with _session_or_exit(ctx) as session:
        typer.echo(f"{session.read_pressure():.3E}")


@app.command()
def poll(
    ctx: typer.Context,
    name: str = typer.Option("PR3", "--name", help="Mnemonic to query on every cycle."),
    interval: float = typer.Option(1.0, "--interval", help="Seconds between queries."),
    count: Optional[int] = typer.Option(None, "--count", help="Stop after this many queries."),
) -> None:
    """Query a value repeatedly until Ctrl+C or --count is reached."""

    done = 0
    with _session_or_exit(ctx) as session:
        try:
            while count is None or done < count:
                try:
                    typer.echo(session.query(name))
                except TransportError:
                    raise
                except GaugeError as exc:
                    # A bad reply only costs this cycle.
                    typer.echo(f"Error: {exc}", err=True)
                done += 1
                if count is None or done < count:
                    time.sleep(interval)
        except KeyboardInterrupt:
            logger.info("Polling stopped (Ctrl+C)")


@app.command()
def ports() -> None:
    """List available serial ports."""

    names = list_ports()
    if not names:
        typer.echo("No serial ports found")
    for name in names:
        typer.echo(name)


def run() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    run()
