"""Thin CLI wrapper for cdk8s_image.

This module provides the command-line interface using Typer.
Image building is delegated to the `Image` construct.
"""

import json
import logging
from typing import Annotated

import typer
from cdk8s import App, Chart
from rich.console import Console

from cdk8s_image import __version__
from cdk8s_image.config import get_settings, print_settings_json
from cdk8s_image.errors import ImageError
from cdk8s_image.image import Image
from cdk8s_image.options import ALLOWED_BUILD_OPTIONS, DockerBuildCommandOptionBuilder

app = typer.Typer(
    name="cdk8s-image",
    help="cdk8s image - build and push docker images for cdk8s charts",
    no_args_is_help=True,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"cdk8s-image version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """cdk8s image - build and push docker images for cdk8s charts."""
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def config(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Show effective configuration."""
    settings = get_settings()
    if json_output:
        console.print(print_settings_json(settings))
    else:
        console.print("[bold]Effective Configuration:[/bold]")
        console.print(f"  Registry:            {settings.registry}")
        console.print(f"  Docker executable:   {settings.docker_executable}")
        console.print(f"  Log level:           {settings.log_level}")


@app.command()
def options(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """List the supported `docker build` options."""
    if json_output:
        console.print(json.dumps(list(ALLOWED_BUILD_OPTIONS), indent=2))
        return
    console.print(f"[bold]Supported options ({len(ALLOWED_BUILD_OPTIONS)}):[/bold]")
    for opt in ALLOWED_BUILD_OPTIONS:
        console.print(f"  {opt}")


@app.command()
def build(
    directory: Annotated[
        str,
        typer.Argument(help="Docker build context directory"),
    ],
    registry: Annotated[
        str | None,
        typer.Option("--registry", "-r", help="Registry prefix for the image"),
    ] = None,
    name: Annotated[
        str,
        typer.Option("--name", "-n", help="Chart name used to derive the tag"),
    ] = "image",
    target: Annotated[
        str | None,
        typer.Option("--target", help="Build stage to target"),
    ] = None,
    platform: Annotated[
        str | None,
        typer.Option("--platform", help="Target platform, e.g. linux/amd64"),
    ] = None,
    file: Annotated[
        str | None,
        typer.Option("--file", "-f", help="Path to the Dockerfile"),
    ] = None,
    build_args: Annotated[
        list[str] | None,
        typer.Option("--build-arg", help="Build-time variable (can be repeated)"),
    ] = None,
    labels: Annotated[
        list[str] | None,
        typer.Option("--label", help="Image label (can be repeated)"),
    ] = None,
    tags: Annotated[
        list[str] | None,
        typer.Option("--tag", "-t", help="Additional tag (can be repeated)"),
    ] = None,
    no_cache: Annotated[
        bool,
        typer.Option("--no-cache", help="Do not use cache when building"),
    ] = False,
    pull: Annotated[
        bool,
        typer.Option("--pull", help="Always attempt to pull newer base images"),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Build and push an image from DIRECTORY and print its URL."""
    builder = DockerBuildCommandOptionBuilder()
    if target:
        builder.target(target)
    if platform:
        builder.platform(platform)
    if file:
        builder.docker_file(file)
    if build_args:
        builder.build_args(build_args)
    if labels:
        builder.labels(labels)
    if tags:
        builder.tag(*tags)
    if no_cache:
        builder.no_cache()
    if pull:
        builder.pull()

    chart = Chart(App(), name)
    try:
        image = Image(
            chart,
            "image",
            dir=directory,
            registry=registry,
            cmd_opts=builder.build(),
        )
    except ImageError as e:
        if json_output:
            console.print(json.dumps(e.to_dict(), indent=2))
        else:
            console.print(f"[red]Build failed: {e}[/red]")
        raise typer.Exit(code=1) from None

    if json_output:
        output = {"url": image.url, "tag": image.tag, "digest": image.digest}
        console.print(json.dumps(output, indent=2))
    else:
        console.print(image.url)


if __name__ == "__main__":
    app()
