"""CLI entry point for visibility conditions."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.tree import Tree

from condition_core.config import ConditionsConfig, load_config
from condition_core.config.loader import DEFAULT_CONFIG_TEMPLATE
from condition_core.interfaces import Condition, ConditionServices
from condition_core.plugins import PluginLoader, PluginNotFoundError
from condition_core.resolver import resolve_conditions
from condition_lite import Account, Role, load_registry

logger = logging.getLogger("conditions")

app = typer.Typer(
    name="conditions",
    help="Inspect and evaluate permission-based visibility conditions.",
)

config_app = typer.Typer(help="Manage conditions configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: ConditionsConfig | None = None

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return json.dumps({
            "time": self.formatTime(record),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        })


def _configure_logging(cfg: ConditionsConfig) -> None:
    handler = logging.StreamHandler()
    if cfg.log_format == "json":
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    logging.basicConfig(level=_LOG_LEVELS[cfg.log_level], handlers=[handler], force=True)


def _get_config() -> ConditionsConfig:
    if _config is None:
        return load_config()
    return _config


def _fail(message: str) -> None:
    rprint(f"[red]Error:[/red] {escape(message)}")
    raise typer.Exit(1)


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to conditions.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        _fail(str(e))
    _configure_logging(_config)


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------


def _instantiate(plugin_cls: type, registry_path: str | None) -> object:
    """Build a collaborator, from the registry file when there is one and the class supports it."""
    from_file = getattr(plugin_cls, "from_file", None)
    if from_file is None or registry_path is None:
        return plugin_cls()
    return from_file(registry_path)


def _build_services(cfg: ConditionsConfig, loader: PluginLoader) -> ConditionServices:
    registry_path: str | None = cfg.registry.path
    if not Path(registry_path).is_file():
        logger.warning("Registry file %s not found, using an empty registry", registry_path)
        registry_path = None
    catalog = _instantiate(loader.load_catalog(), registry_path)
    resolver = _instantiate(loader.load_resolver(), registry_path)
    return ConditionServices(catalog=catalog, resolver=resolver)


def _build_account(cfg: ConditionsConfig, roles: list[str], grants: list[str]) -> Account:
    assigned: list[Role] = []
    if roles:
        registry = load_registry(cfg.registry.path)
        for role_id in roles:
            if role_id not in registry.roles:
                raise ValueError(f"Unknown role: {role_id!r} (valid: {list(registry.roles)})")
            assigned.append(registry.roles[role_id])
    if grants:
        assigned.append(Role(id="cli", label="Granted on the command line", permissions=grants))
    return Account(name="cli", roles=assigned)


def _bind_user(condition: Condition, account: Account) -> None:
    condition.set_context_value("user", account, cache_contexts=["user"])


RoleOption = Annotated[
    list[str] | None, typer.Option("--role", "-r", help="Role from the registry (repeatable)")
]
GrantOption = Annotated[
    list[str] | None, typer.Option("--grant", "-g", help="Grant a permission directly (repeatable)")
]


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def options(
    format: Annotated[
        str, typer.Option("--format", "-f", help="Output format: tree or json")
    ] = "tree",
) -> None:
    """Show the permission options offered by the configuration form."""
    cfg = _get_config()
    loader = PluginLoader(cfg)
    try:
        condition = loader.create_condition("user_permission", _build_services(cfg, loader))
    except (ValueError, PluginNotFoundError) as e:
        _fail(str(e))

    grouped = condition.build_options()
    if format == "json":
        typer.echo(json.dumps(grouped, indent=2))
        return

    if not grouped:
        rprint("[yellow]No permissions registered.[/yellow]")
        return

    total = sum(len(perms) for perms in grouped.values())
    tree = Tree(f"[bold]Permissions[/bold] ({total})")
    for display_name, perms in grouped.items():
        branch = tree.add(f"[cyan]{escape(display_name)}[/cyan]")
        for perm_id, title in perms.items():
            branch.add(f"[green]{escape(perm_id)}[/green] [dim]{escape(title)}[/dim]")
    rprint(tree)


@app.command()
def summary(
    permission: str = typer.Argument("", help="Permission id"),
    negate: bool = typer.Option(False, "--negate", help="Negate the condition"),
) -> None:
    """Print the summary sentence for a permission condition."""
    cfg = _get_config()
    loader = PluginLoader(cfg)
    try:
        condition = loader.create_condition(
            "user_permission",
            _build_services(cfg, loader),
            {"permission": permission, "negate": negate},
        )
    except (ValueError, PluginNotFoundError) as e:
        _fail(str(e))
    typer.echo(condition.summary())


@app.command()
def evaluate(
    permission: str = typer.Argument("", help="Permission id"),
    negate: bool = typer.Option(False, "--negate", help="Negate the condition"),
    role: RoleOption = None,
    grant: GrantOption = None,
) -> None:
    """Evaluate a permission condition for a user built from roles and grants."""
    cfg = _get_config()
    loader = PluginLoader(cfg)
    try:
        condition = loader.create_condition(
            "user_permission",
            _build_services(cfg, loader),
            {"permission": permission, "negate": negate},
        )
        account = _build_account(cfg, role or [], grant or [])
    except (ValueError, PluginNotFoundError) as e:
        _fail(str(e))

    _bind_user(condition, account)
    passed = condition.execute()
    status = "[green]PASS[/green]" if passed else "[red]FAIL[/red]"
    rprint(Panel(
        f"[dim]Summary:[/dim]        {escape(condition.summary())}\n"
        f"[dim]Result:[/dim]         {status}\n"
        f"[dim]Grants:[/dim]         {escape(', '.join(sorted(account.get_permissions())) or '-')}\n"
        f"[dim]Cache contexts:[/dim] {', '.join(condition.get_cache_contexts()) or '-'}",
        title="Condition",
        border_style="green" if passed else "red",
    ))


@app.command()
def check(
    role: RoleOption = None,
    grant: GrantOption = None,
) -> None:
    """Resolve every configured condition; exit 1 when access is denied."""
    cfg = _get_config()
    if not cfg.conditions:
        rprint("[yellow]No conditions configured.[/yellow]")
        raise typer.Exit(0)

    loader = PluginLoader(cfg)
    try:
        services = _build_services(cfg, loader)
        account = _build_account(cfg, role or [], grant or [])
        conditions = [
            loader.create_condition(inst.plugin, services, inst.configuration)
            for inst in cfg.conditions
        ]
    except (ValueError, PluginNotFoundError) as e:
        _fail(str(e))

    table = Table(title=f"Conditions ({len(conditions)}, {cfg.conjunction})")
    table.add_column("Summary", style="cyan")
    table.add_column("Status", justify="center")
    for condition in conditions:
        _bind_user(condition, account)
        status = "[green]PASS[/green]" if condition.execute() else "[red]FAIL[/red]"
        table.add_row(escape(condition.summary()), status)
    rprint(table)

    if resolve_conditions(conditions, cfg.conjunction):
        rprint("\n[green]Access granted.[/green]")
    else:
        rprint("\n[red]Access denied.[/red]")
        raise typer.Exit(code=1)


@app.command()
def plugins() -> None:
    """List plugins registered through entry points."""
    loader = PluginLoader(_get_config())
    table = Table(title="Registered Plugins")
    table.add_column("Type", style="cyan")
    table.add_column("Names", style="green")
    for plugin_type, names in loader.discover().items():
        table.add_row(plugin_type, ", ".join(names) if names else "-")
    rprint(table)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False, sort_keys=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default conditions.yaml in current directory."""
    target = Path("conditions.yaml")
    if target.exists() and not force:
        rprint("[yellow]conditions.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")
