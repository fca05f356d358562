"""
Name Cache Command Line

Entry point for resolving host names and classifying addresses through the
name cache from a shell.
"""

import asyncio
import json
import platform
from dataclasses import replace
from typing import Awaitable, Callable, TypeVar

import click
import yaml

from .config.loader import ConfigLoader
from .config.schema import NameCacheConfig
from .dns_logging import get_logger, log_exception, setup_logging, shutdown_logging
from .errors import InvalidHost
from .metrics import render_metrics
from .service import NameCacheService, set_service

T = TypeVar("T")


def run_async(coro: Awaitable[T]) -> T:
    """Run a coroutine on uvloop where available"""
    if platform.system() != "Windows":
        import uvloop

        return uvloop.run(coro)
    return asyncio.run(coro)


async def with_service(
    config: NameCacheConfig, action: Callable[[NameCacheService], Awaitable[T]]
) -> T:
    """Run action against a started service and shut it down afterwards"""
    logger = get_logger("dns_namecache.cli")
    service = NameCacheService(config)
    set_service(service)
    await service.start()
    try:
        return await action(service)
    except InvalidHost as e:
        raise click.BadParameter(str(e))
    except Exception as e:
        log_exception(logger, "Name cache command failed", e)
        raise
    finally:
        await service.shutdown()
        set_service(None)


@click.group()
@click.option(
    "--config",
    "-c",
    "config_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="Configuration file path (YAML or JSON)",
)
@click.option("--log-level", default=None, help="Override the configured log level")
@click.pass_context
def cli(ctx: click.Context, config_path, log_level) -> None:
    """Caching host name resolver"""
    try:
        config = ConfigLoader(config_path).load_config()
        if log_level:
            config.logging = replace(config.logging, level=log_level.upper())
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise click.ClickException(f"Invalid configuration: {e}")

    setup_logging(config.logging)
    ctx.call_on_close(shutdown_logging)
    ctx.obj = config


@cli.command()
@click.argument("hosts", nargs=-1, required=True)
@click.option("--refresh", is_flag=True, help="Ignore cached results")
@click.pass_obj
def resolve(config: NameCacheConfig, hosts, refresh: bool) -> None:
    """Resolve HOSTS through the cache"""

    async def action(service: NameCacheService):
        for host in hosts:
            if refresh:
                address = await service.facade.refresh(host)
            else:
                address = await service.resolve(host)
            click.echo(f"{host} -> {address if address is not None else 'unresolvable'}")

    run_async(with_service(config, action))


@cli.command("is-local")
@click.argument("addresses", nargs=-1, required=True)
@click.pass_obj
def is_local(config: NameCacheConfig, addresses) -> None:
    """Classify ADDRESSES as local or public"""

    async def action(service: NameCacheService):
        for address in addresses:
            local = await service.is_local(address)
            click.echo(f"{address}: {'local' if local else 'public'}")

    run_async(with_service(config, action))


@cli.command("my-ip")
@click.pass_obj
def my_ip(config: NameCacheConfig) -> None:
    """Print this host's public-looking address"""

    async def action(service: NameCacheService):
        click.echo(await service.classifier.my_public_ip())

    run_async(with_service(config, action))


@cli.command()
@click.argument("hosts", nargs=-1)
@click.option("--prometheus", is_flag=True, help="Print Prometheus text format")
@click.pass_obj
def stats(config: NameCacheConfig, hosts, prometheus: bool) -> None:
    """Resolve optional HOSTS, then print cache statistics"""

    async def action(service: NameCacheService):
        for host in hosts:
            await service.resolve(host)
        if prometheus:
            click.echo(render_metrics(service), nl=False)
        else:
            click.echo(json.dumps(service.get_stats(), indent=2, default=str))

    run_async(with_service(config, action))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
