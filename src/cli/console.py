"""Rich console output helpers."""

from rich.console import Console
from rich.table import Table

console = Console()


def ok(msg: str):
    """Print success message."""
    console.print(f"  [green]✓[/green] {msg}")


def dim(msg: str):
    """Print dimmed message."""
    console.print(f"  [dim]{msg}[/dim]")


def header(msg: str):
    """Print bold header."""
    console.print(f"\n[bold]{msg}[/bold]")


def solution_table(solution) -> Table:
    """Summary table with one row per simulated variable."""
    table = Table(title=f"Solution on {solution.domain}")
    table.add_column("variable", style="cyan")
    table.add_column("realizations", justify="right")
    table.add_column("conditioning", justify="right")
    table.add_column("workers", justify="right")
    table.add_column("mean", justify="right")
    table.add_column("std", justify="right")
    table.add_column("time [s]", justify="right")

    for var in solution.variables:
        m = solution.metrics.get(var)
        reals = solution[var]
        table.add_row(
            var,
            str(reals.shape[0]),
            str(m.n_conditioning) if m else "-",
            str(m.n_workers) if m else "-",
            f"{reals.mean():.4g}",
            f"{reals.std():.4g}",
            f"{m.wall_time_seconds:.2f}" if m else "-",
        )
    return table


def print_solution(solution):
    """Print the solution summary table."""
    console.print(solution_table(solution))
