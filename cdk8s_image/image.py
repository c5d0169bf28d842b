"""Docker image construct.

The image is built with `docker build` and pushed with `docker push` while
the construct is being created, i.e. during synthesis. The digest reported
by the push is appended to the tag so the resulting URL always points at
the exact image that was built.
"""

from __future__ import annotations

import logging
import re
import sys
from collections.abc import Sequence

from cdk8s import Names
from constructs import Construct
from pydantic import BaseModel, ConfigDict, Field

from cdk8s_image.config import get_settings
from cdk8s_image.errors import DigestNotFoundError
from cdk8s_image.shell import shell

logger = logging.getLogger(__name__)

PARSE_DIGEST = re.compile(r"digest: (sha256:[0-9a-f]+)")


class ImageProps(BaseModel):
    """Props for `Image`.

    Attributes:
        dir: The docker build context directory (where `Dockerfile` is).
        registry: Registry used as the image name prefix, e.g.
            ``localhost:5000`` for a local registry. Defaults to the
            configured registry (``docker.io/library``).
        cmd_opts: Extra `docker build` tokens, usually produced by
            `DockerBuildCommandOptionBuilder.build`.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    dir: str = Field(min_length=1)
    registry: str | None = Field(default=None, min_length=1)
    cmd_opts: list[str] = Field(default_factory=list)


def parse_digest(output: str) -> str:
    """Extract the image digest from `docker push` output.

    Args:
        output: Captured push output.

    Returns:
        Digest in the form ``sha256:<hex>``.

    Raises:
        DigestNotFoundError: If the output has no ``digest: sha256:...`` line.
    """
    match = PARSE_DIGEST.search(output)
    if match is None:
        raise DigestNotFoundError(output)
    return match.group(1)


def compute_tag(registry: str, label: str) -> str:
    return f"{registry}/{label}"


def build_and_push(
    directory: str,
    tag: str,
    cmd_opts: Sequence[str] = (),
    docker: str = "docker",
) -> str:
    """Build and push an image, returning its digest-pinned URL.

    Args:
        directory: Build context directory.
        tag: Tag applied to the built image and pushed.
        cmd_opts: Extra `docker build` tokens placed before ``--tag``.
        docker: Container CLI executable.

    Returns:
        ``<tag>@<digest>``.

    Raises:
        ShellCommandError: If either docker invocation fails.
        DigestNotFoundError: If the push output has no digest.
    """
    print(f'building docker image "{directory}"...', file=sys.stderr)
    shell(docker, "build", *cmd_opts, "--tag", tag, directory)

    print(f'pushing docker image "{directory}"...', file=sys.stderr)
    push = shell(docker, "push", tag)

    digest = parse_digest(push)
    logger.info("Pushed %s with digest %s", tag, digest)
    return f"{tag}@{digest}"


class Image(Construct):
    """A docker image built during synthesis from a context directory (`dir`)
    with a `Dockerfile`.

    The image is built using `docker build` and then pushed through
    `docker push`. The URL of the pushed image is available as `image.url`.

    To push to a registry other than docker hub, pass its URL through
    `registry`.

    Attributes:
        props: The validated `ImageProps` the image was built from.
        tag: Registry prefix plus the DNS label of the construct path.
        url: ``<tag>@<digest>``, the digest-pinned image URL.
        digest: Digest reported by `docker push`.
    """

    def __init__(
        self,
        scope: Construct,
        id: str,
        *,
        dir: str,
        registry: str | None = None,
        cmd_opts: Sequence[str] | None = None,
    ) -> None:
        super().__init__(scope, id)
        props = ImageProps(
            dir=dir,
            registry=registry,
            cmd_opts=list(cmd_opts or []),
        )
        settings = get_settings()

        self.props = props
        self.tag = compute_tag(
            props.registry or settings.registry, Names.to_dns_label(self)
        )
        self.url = build_and_push(
            props.dir,
            self.tag,
            props.cmd_opts,
            docker=settings.docker_executable,
        )
        self.digest = self.url.rsplit("@", 1)[1]


__all__ = [
    "PARSE_DIGEST",
    "Image",
    "ImageProps",
    "build_and_push",
    "compute_tag",
    "parse_digest",
]
