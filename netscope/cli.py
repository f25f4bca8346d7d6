"""Command-line interface for netscope."""

import logging
import time
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from netscope.channel import SocketChannel, channel_pair
from netscope.config import MonitorConfig, load_config, load_topology, save_topology
from netscope.errors import NetscopeError
from netscope.layout import compute_layout
from netscope.protocol.commands import COMMAND_TYPES
from netscope.protocol.events import EVENT_TYPES
from netscope.simulator import LoopbackSimulator
from netscope.sync import MonitorSession
from netscope.topology import create_topology

app = typer.Typer(
    name="netscope",
    help="netscope: live monitor for simulated relay networks",
    add_completion=False
)
console = Console()


@app.command()
def layout(
    topology_path: Path = typer.Argument(..., help="Topology description (YAML/JSON)"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Monitor configuration file"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Override layout seed"),
    output: Optional[Path] = typer.Option(None, "--output", help="Write a PNG of the layout"),
):
    """Compute node positions for a topology.

    Example:
        netscope layout topologies/ring.yaml --seed 7 --output ring.png
    """
    try:
        config = _load(config_path, seed)
        topology = load_topology(topology_path)

        console.print(
            f"[bold blue]Laying out[/bold blue] {topology.num_nodes} nodes "
            f"with {config.layout.algorithm}"
        )
        positions = compute_layout(topology, config.layout, config.canvas)

        classes = topology.node_classes()
        table = Table(title="Layout")
        table.add_column("Node", style="cyan")
        table.add_column("Class", style="magenta")
        table.add_column("X", style="green")
        table.add_column("Y", style="green")
        for node_id in topology.node_ids():
            x, y = positions[node_id]
            table.add_row(str(node_id), classes[node_id].value, f"{x:.1f}", f"{y:.1f}")
        console.print(table)

        if output:
            from netscope.core import AnimationState, TopologyModel
            from netscope.render import render_snapshot

            model = TopologyModel()
            model.bootstrap(topology, positions)
            render_snapshot(model, AnimationState(), output, now=0.0, canvas=config.canvas)
            console.print(f"[bold green]✓ Saved layout to {output}[/bold green]")

    except (FileNotFoundError, ValueError, NetscopeError) as e:
        console.print(f"\n[bold red]Error:[/bold red] {str(e)}")
        raise typer.Exit(1)


@app.command()
def demo(
    topology_path: Path = typer.Argument(..., help="Topology description (YAML/JSON)"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Monitor configuration file"),
    ticks: int = typer.Option(200, "--ticks", min=1, help="Number of update ticks"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for layout and traffic"),
    output: Optional[Path] = typer.Option(None, "--output", help="Write a PNG of the final state"),
):
    """Run the monitor against the built-in loopback simulator.

    Example:
        netscope demo topologies/ring.yaml --ticks 500
    """
    try:
        config = _load(config_path, seed)
        topology = load_topology(topology_path)

        monitor, backend = channel_pair()
        simulator = LoopbackSimulator(backend, topology, seed=seed)
        session = MonitorSession(monitor, config)

        console.print(f"[bold blue]Running demo:[/bold blue] {ticks} ticks")
        simulator.start()
        applied = 0
        for _ in range(ticks):
            simulator.process_commands()
            simulator.step()
            if not session.tick():
                break
            applied += 1

        _display_summary(session, applied)

        if output:
            from netscope.render import render_snapshot

            render_snapshot(
                session.model, session.animation, output,
                now=session.clock(), canvas=config.canvas,
            )
            console.print(f"[bold green]✓ Saved snapshot to {output}[/bold green]")

    except (FileNotFoundError, ValueError, NetscopeError) as e:
        console.print(f"\n[bold red]Error:[/bold red] {str(e)}")
        raise typer.Exit(1)


@app.command()
def watch(
    config_path: Optional[Path] = typer.Option(None, "--config", help="Monitor configuration file"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
    port: Optional[int] = typer.Option(None, "--port", help="Override backend port"),
    ticks: int = typer.Option(1000, "--ticks", min=1, help="Number of update ticks"),
    interval: float = typer.Option(0.016, "--interval", min=0.0, help="Seconds between ticks"),
):
    """Follow a running backend over TCP without a UI.

    Example:
        netscope watch --host localhost --port 5555
    """
    try:
        config = _load(config_path)
        host = host or config.backend.host
        port = port or config.backend.port

        channel = SocketChannel.connect(host, port, timeout=config.backend.connect_timeout)
        session = MonitorSession(channel, config)

        console.print(f"[bold blue]Watching backend at {host}:{port}[/bold blue]")
        started = time.monotonic()
        completed = session.run(ticks, interval)
        console.print(f"Ran {completed} ticks in {time.monotonic() - started:.1f}s")
        _display_summary(session, completed)
        session.close()

        if session.disconnected and completed < ticks:
            console.print("[bold red]Backend disconnected[/bold red]")
            raise typer.Exit(1)

    except (FileNotFoundError, ValueError, NetscopeError) as e:
        console.print(f"\n[bold red]Error:[/bold red] {str(e)}")
        raise typer.Exit(1)


@app.command()
def generate(
    kind: str = typer.Argument(..., help="Relay topology (ring/line/fully/erdos/k-regular)"),
    relays: int = typer.Option(..., "--relays", help="Number of relays"),
    clients: int = typer.Option(0, "--clients", help="Number of clients"),
    servers: int = typer.Option(0, "--servers", help="Number of servers"),
    p: float = typer.Option(0.3, "--p", help="Edge probability for erdos"),
    k: int = typer.Option(2, "--k", help="Degree for k-regular"),
    pdr: float = typer.Option(0.0, "--pdr", help="Packet drop rate of every relay"),
    seed: int = typer.Option(12345, "--seed", help="Random seed"),
    output: Path = typer.Option(..., "--output", help="Output file (YAML/JSON)"),
):
    """Write a sample topology description.

    Example:
        netscope generate ring --relays 6 --clients 2 --servers 1 --output ring.yaml
    """
    try:
        topology = create_topology(kind, relays, clients, servers, p=p, k=k, pdr=pdr, seed=seed)
        save_topology(topology, output)
        console.print(
            f"[bold green]✓ Wrote {kind} topology[/bold green] "
            f"({len(topology.drones)} relays, {len(topology.clients)} clients, "
            f"{len(topology.servers)} servers) to {output}"
        )
    except (FileNotFoundError, ValueError) as e:
        console.print(f"\n[bold red]Error:[/bold red] {str(e)}")
        raise typer.Exit(1)


@app.command()
def list_components(
    component_type: str = typer.Argument(..., help="Component type (layouts/commands/events/topologies)")
):
    """List available components.

    Example:
        netscope list-components layouts
        netscope list-components commands
    """
    if component_type == "layouts":
        console.print("[bold]Available Layouts:[/bold]")
        console.print("  • fruchterman-reingold - Force-directed (repulsion + spring attraction)")
        console.print("  • circular - Evenly spaced on a circle")

    elif component_type == "topologies":
        console.print("[bold]Available Topologies:[/bold]")
        console.print("  • ring - Ring of relays (each relay connects to 2 neighbors)")
        console.print("  • line - Relays in a chain")
        console.print("  • fully - Fully connected relays (all-to-all)")
        console.print("  • erdos - Erdős-Rényi random graph (requires p parameter)")
        console.print("  • k-regular - k-regular graph (requires k parameter)")

    elif component_type == "commands":
        console.print("[bold]Commands (monitor → backend):[/bold]")
        for cls in COMMAND_TYPES:
            console.print(f"  • {cls.__name__}")

    elif component_type == "events":
        console.print("[bold]Events (backend → monitor):[/bold]")
        for cls in EVENT_TYPES:
            console.print(f"  • {cls.__name__}")

    else:
        console.print(f"[red]Unknown component type: {component_type}[/red]")
        console.print("Available types: layouts, commands, events, topologies")


def _load(config_path: Optional[Path], seed: Optional[int] = None) -> MonitorConfig:
    """Load configuration, apply overrides and set up logging."""
    config = load_config(config_path)
    if seed is not None:
        config.layout.seed = seed
    _setup_logging(config.logging.level)
    return config


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _display_summary(session: MonitorSession, ticks: int) -> None:
    """Display final monitor state in a table."""
    model = session.model

    table = Table(title="Monitor State")
    table.add_column("Node", style="cyan")
    table.add_column("Class", style="magenta")
    table.add_column("Neighbors", style="green")
    table.add_column("PDR", style="yellow")
    table.add_column("Color", style="blue")

    for node_id in model.node_ids():
        node = model.nodes[node_id]
        table.add_row(
            str(node_id),
            node.label(),
            ", ".join(str(n) for n in sorted(node.neighbors)) or "-",
            f"{node.reliability:.2f}" if node.is_relay else "-",
            session.animation.color_of(node_id, node.color),
        )

    console.print(table)
    console.print(
        f"Ticks: {ticks}  Nodes: {len(model)}  Edges: {len(model.edges())}  "
        f"Active markers: {len(session.animation.active_nodes())}  "
        f"Ready: {model.ready}"
    )


if __name__ == "__main__":
    app()
