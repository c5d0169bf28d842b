"""Fluent builder for `docker build` command-line options.

Options are accumulated in insertion order and flattened into an argument
list by `DockerBuildCommandOptionBuilder.build`. Each flag can be set once;
the first value registered for a flag is kept.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal, Union

logger = logging.getLogger(__name__)

# None marks a boolean flag.
OptionValue = Union[str, int, list[str], None]

ProgressType = Literal["auto", "plain", "tty"]

ALLOWED_BUILD_OPTIONS: tuple[str, ...] = (
    "--add-host",
    "--build-arg",
    "--cache-from",
    "--cgroup-parent",
    "--compress",
    "--cpu-period",
    "--cpu-quota",
    "--cpu-shares",
    "--cpuset-cpus",
    "--cpuset-mems",
    "--disable-content-trust",
    "--file",
    "--force-rm",
    "--iidfile",
    "--isolation",
    "--label",
    "--memory",
    "--memory-swap",
    "--network",
    "--no-cache",
    "--output",
    "--platform",
    "--progress",
    "--pull",
    "--quiet",
    "--rm",
    "--secret",
    "--security-opt",
    "--shm-size",
    "--squash",
    "--ssh",
    "--stream",
    "--tag",
    "--target",
    "--ulimit",
)

_PROGRESS_TYPES = ("auto", "plain", "tty")


@dataclass(frozen=True)
class BuildOutput:
    """A `--output` destination, rendered as ``type=<type>,dest=<dest>``."""

    type: str
    dest: str

    def render(self) -> str:
        return f"type={self.type},dest={self.dest}"


class DockerBuildCommandOptionBuilder:
    """Accumulates allow-listed `docker build` flags.

    Example:
        >>> opts = DockerBuildCommandOptionBuilder().target("prod").no_cache().build()
        >>> opts
        ['--target', 'prod', '--no-cache']
    """

    @staticmethod
    def remove_unknown_options(opts: Iterable[str]) -> list[str]:
        """Keep only tokens that are allow-listed flags.

        Unknown tokens are dropped, and relative order of the kept ones is
        preserved.

        Args:
            opts: Arbitrary command-line tokens.

        Returns:
            Tokens present verbatim in ALLOWED_BUILD_OPTIONS.
        """
        kept: list[str] = []
        for opt in opts:
            if opt in ALLOWED_BUILD_OPTIONS:
                kept.append(opt)
            else:
                logger.warning("Dropping unsupported docker build option: %s", opt)
        return kept

    def __init__(self) -> None:
        self._cmd_opts: dict[str, OptionValue] = {}

    @property
    def cmd_opts(self) -> Mapping[str, OptionValue]:
        """Read-only view of the accumulated options."""
        return MappingProxyType(self._cmd_opts)

    def add_hosts(self, hosts: list[str]) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--add-host", list(hosts))
        return self

    def build_args(self, args: list[str]) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--build-arg", list(args))
        return self

    def cache_from(self, caches: list[str]) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--cache-from", list(caches))
        return self

    def cgroup_parent(self, cgroup: str) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--cgroup-parent", cgroup)
        return self

    def compress(self) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--compress")
        return self

    def cpu_period(self, period: int) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--cpu-period", period)
        return self

    def cpu_quota(self, quota: int) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--cpu-quota", quota)
        return self

    def cpu_shares(self, shares: int) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--cpu-shares", shares)
        return self

    def cpuset_cpus(self, cpus: str) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--cpuset-cpus", cpus)
        return self

    def cpuset_mems(self, mems: str) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--cpuset-mems", mems)
        return self

    def disable_content_trust(self) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--disable-content-trust")
        return self

    def docker_file(self, file: str) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--file", file)
        return self

    def force_rm(self) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--force-rm")
        return self

    def iid_file(self, file: str) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--iidfile", file)
        return self

    def isolation(self, isolation: str) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--isolation", isolation)
        return self

    def labels(self, labels: list[str]) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--label", list(labels))
        return self

    def memory(self, num_bytes: int) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--memory", num_bytes)
        return self

    def memory_swap(self, num_bytes: int) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--memory-swap", num_bytes)
        return self

    def network(self, network: str) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--network", network)
        return self

    def no_cache(self) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--no-cache")
        return self

    def output(self, outputs: list[BuildOutput]) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--output", [o.render() for o in outputs])
        return self

    def platform(self, platform: str) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--platform", platform)
        return self

    def progress(self, progress_type: ProgressType) -> DockerBuildCommandOptionBuilder:
        """Set the progress output type.

        Raises:
            ValueError: If progress_type is not one of auto, plain or tty.
        """
        if progress_type not in _PROGRESS_TYPES:
            raise ValueError(
                f"Invalid progress type {progress_type!r}, "
                f"expected one of: {', '.join(_PROGRESS_TYPES)}"
            )
        self._add_opt("--progress", progress_type)
        return self

    def pull(self) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--pull")
        return self

    def quiet(self) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--quiet")
        return self

    def rm(self) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--rm")
        return self

    def secret(self, secrets: list[str]) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--secret", list(secrets))
        return self

    def security_opt(self, opts: list[str]) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--security-opt", list(opts))
        return self

    def shm_size(self, num_bytes: int) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--shm-size", num_bytes)
        return self

    def squash(self) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--squash")
        return self

    def ssh(self, keys_or_agents: list[str]) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--ssh", list(keys_or_agents))
        return self

    def stream(self) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--stream")
        return self

    def tag(self, *tags: str) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--tag", list(tags))
        return self

    def target(self, target: str) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--target", target)
        return self

    def ulimit(self, ulimits: list[str]) -> DockerBuildCommandOptionBuilder:
        self._add_opt("--ulimit", list(ulimits))
        return self

    def build(self) -> list[str]:
        """Flatten the accumulated options into command-line tokens.

        Boolean flags emit the flag alone, scalar flags emit the flag followed
        by the value, and list flags repeat the flag before each element.

        Returns:
            Token list in the order flags were first registered.
        """
        opts: list[str] = []
        for flag, value in self._cmd_opts.items():
            if value is None:
                opts.append(flag)
            elif isinstance(value, list):
                for item in value:
                    opts.extend([flag, str(item)])
            else:
                opts.extend([flag, str(value)])
        return opts

    def _add_opt(self, flag: str, value: OptionValue = None) -> None:
        if flag in self._cmd_opts:
            logger.debug("Ignoring repeated docker build option: %s", flag)
            return
        self._cmd_opts[flag] = value


__all__ = [
    "ALLOWED_BUILD_OPTIONS",
    "BuildOutput",
    "DockerBuildCommandOptionBuilder",
    "OptionValue",
    "ProgressType",
]
