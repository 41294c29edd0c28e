from __future__ import annotations

from aksgate.cli.context import build_context
from aksgate.output.console import Style


def _flag(value: bool) -> str:
    return "yes" if value else ""


def profiles() -> None:
    """List environment profiles and their branch patterns."""
    ctx = build_context()
    config = ctx.config

    ctx.console.print(f"config: {config.source or 'built-in defaults'}", Style.DIM)
    ctx.console.table(
        ["environment", "aliases", "branches", "cluster secret", "resource group secret", "release", "protected"],
        [
            [
                p.name,
                ", ".join(p.aliases),
                ", ".join(p.branch_patterns),
                p.cluster_secret_key,
                p.resource_group_secret_key,
                _flag(p.creates_release),
                _flag(p.protected),
            ]
            for p in config.profiles
        ],
    )
