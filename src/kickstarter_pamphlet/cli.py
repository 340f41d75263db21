"""CLI entry point for the pamphlet adapters."""

from __future__ import annotations

import asyncio
import json
import sys
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from kickstarter_pamphlet.api.client import KickstarterClient
from kickstarter_pamphlet.api.errors import KickstarterAPIError
from kickstarter_pamphlet.api.query_data import project_from_query
from kickstarter_pamphlet.models.navigation import Param
from kickstarter_pamphlet.models.project import Project
from kickstarter_pamphlet.models.reward import Reward
from kickstarter_pamphlet.utils.config import load_config
from kickstarter_pamphlet.utils.logging import setup_logging

console = Console()

LOG_LEVELS = click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"])


def _setup(config: str, log_level: Optional[str]) -> dict:
    cfg = load_config(config)
    log_cfg = cfg.get("logging", {})
    setup_logging(
        level=log_level or log_cfg.get("level", "INFO"),
        log_dir=log_cfg.get("log_dir"),
        log_file=log_cfg.get("log_file", "pamphlet.log"),
    )
    return cfg


def _rewards_table(title: str, rewards: list[Reward]) -> Table:
    table = Table(title=title)
    table.add_column("ID", justify="right")
    table.add_column("Title")
    table.add_column("Minimum", justify="right")
    table.add_column("Converted", justify="right")
    table.add_column("Backers", justify="right")
    table.add_column("Shipping")
    table.add_column("Rules", justify="right")
    for reward in rewards:
        rules = reward.shipping_rules_expanded or reward.shipping_rules or []
        table.add_row(
            str(reward.id),
            "(no reward)" if reward.is_no_reward else (reward.title or ""),
            f"{reward.minimum:,.2f}",
            f"{reward.converted_minimum:,.2f}",
            "" if reward.backers_count is None else str(reward.backers_count),
            reward.shipping.preference.value if reward.shipping.preference else "",
            str(len(rules)),
        )
    return table


def _print_project(project: Project, backing_id: Optional[int] = None, as_json: bool = False):
    if as_json:
        click.echo(project.model_dump_json(indent=2))
        return

    summary = Table(show_header=False, title=f"[bold]{project.name}[/]")
    summary.add_column("Field", style="cyan")
    summary.add_column("Value")
    for key, value in project.to_flat_dict().items():
        summary.add_row(key, "" if value is None else str(value))
    if backing_id is not None:
        summary.add_row("backing_id", str(backing_id))
    console.print(summary)

    console.print(_rewards_table("Rewards", project.rewards))
    if project.add_ons is not None:
        console.print(_rewards_table("Add-ons", project.add_ons))


@click.group()
def main():
    """Kickstarter project pamphlet tools."""


@main.command()
@click.argument("project")
@click.option("--config", "-c", default="configs/pamphlet.yaml", help="Path to config file.")
@click.option("--log-level", "-l", default=None, type=LOG_LEVELS)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the model as JSON.")
def project(project: str, config: str, log_level: Optional[str], as_json: bool):
    """Fetch a project by id or slug and print it."""
    cfg = _setup(config, log_level)
    param = Param.parse(project)

    async def fetch():
        async with KickstarterClient.from_config(cfg) as client:
            return await client.fetch_project(param)

    try:
        data = asyncio.run(fetch())
    except KickstarterAPIError as e:
        console.print(f"[red]Fetch failed:[/] {e}")
        sys.exit(1)

    _print_project(data.project, data.backing_id, as_json=as_json)


@main.command(name="add-ons")
@click.argument("slug")
@click.option("--location-id", type=int, default=None, help="Expand shipping rules for a location.")
@click.option("--config", "-c", default="configs/pamphlet.yaml")
@click.option("--log-level", "-l", default=None, type=LOG_LEVELS)
def add_ons(slug: str, location_id: Optional[int], config: str, log_level: Optional[str]):
    """Fetch a project's add-ons with expanded shipping rules."""
    cfg = _setup(config, log_level)

    async def fetch():
        async with KickstarterClient.from_config(cfg) as client:
            return await client.fetch_add_ons(slug, location_id=location_id)

    try:
        fetched = asyncio.run(fetch())
    except KickstarterAPIError as e:
        console.print(f"[red]Fetch failed:[/] {e}")
        sys.exit(1)

    console.print(_rewards_table(f"Add-ons for {fetched.name}", fetched.add_ons or []))


@main.command()
@click.argument("response_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the model as JSON.")
def parse(response_path: str, as_json: bool):
    """Convert a saved GraphQL project response into a Project."""
    with open(response_path, encoding="utf-8") as f:
        document = json.load(f)

    data = document.get("data", document) if isinstance(document, dict) else None
    parsed, backing_id = project_from_query(data)
    if parsed is None:
        console.print(f"[red]Could not parse project from[/] {response_path}")
        sys.exit(1)

    _print_project(parsed, backing_id, as_json=as_json)


if __name__ == "__main__":
    main()
