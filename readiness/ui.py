from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.markup import escape

from readiness.inventory import ClusterInventory
from readiness.provisioning import ValidationResult


class ReadinessUI:
    def __init__(self, console: Console = None):
        self.console = console or Console()

    def display_initial_banner(self, inventory: ClusterInventory, namespace: str):
        """Displays the cluster facts before the check starts."""
        self.console.print("\n")
        self.console.print(Panel(
            f"[bold white]Kubernetes Version: [green]{inventory.version}[/green]\n"
            f"Cloud Provider: [blue]{inventory.cloud_provider}[/blue]\n"
            f"Distribution: [blue]{inventory.distribution}[/blue]\n"
            f"Nodes: [yellow]{inventory.total_node_count}[/yellow]  "
            f"vCPUs: [yellow]{inventory.total_vcpu_count}[/yellow]\n"
            f"Test Namespace: [magenta]{namespace}[/magenta]",
            title="[bold cyan]CLUSTER READINESS CHECK",
            border_style="cyan",
            padding=(1, 2)
        ))

    def display_validation_result(self, result: ValidationResult):
        """Displays the per-node table and the overall PV provisioning result."""
        if result.node_results:
            table = Table(
                title="[bold]PV PROVISIONING BY NODE",
                header_style="bold cyan",
                border_style="blue",
            )
            table.add_column("Node", style="dim")
            table.add_column("Result", justify="center")
            table.add_column("Duration", justify="right")
            table.add_column("Details")
            
            for node_result in result.node_results:
                status = "[green]Passed[/green]" if node_result.passed else "[red]Failed[/red]"
                table.add_row(
                    escape(node_result.node_name),
                    status,
                    f"{node_result.duration_seconds:.2f}s",
                    escape(node_result.reason)
                )
            self.console.print(table)
        
        if result.all_passed:
            color = "green"
        elif result.trials_ran and result.passed_count > 0:
            color = "yellow"
        else:
            color = "red"
        
        self.console.print(Panel(
            f"[bold white]Result: [{color}]{escape(result.result_message)}[/{color}]\n"
            f"Nodes: {result.total_nodes}  Passed: {result.passed_count}  Failed: {result.failed_count}",
            title=f"[bold {color}]PV PROVISIONING",
            border_style=color,
            padding=(1, 2)
        ))

    def display_output_written(self, path: str):
        self.console.print(f"[green]Results written to {path}[/green]")
