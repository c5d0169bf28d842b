"""Tests for image.py module.

Docker is never invoked: the shell helper is patched and returns canned
push output.
"""

import os
from unittest.mock import call, patch

import cdk8s
import pytest
from pydantic import ValidationError

from cdk8s_image import DockerBuildCommandOptionBuilder, Image
from cdk8s_image.errors import DigestNotFoundError, ShellCommandError
from cdk8s_image.image import (
    ImageProps,
    build_and_push,
    compute_tag,
    parse_digest,
)

PUSH_OUTPUT = "text\ntext\n\ndigest: sha256:a1b2c3\n"
EXPECTED_TAG = "docker.io/library/test-my-image-c80f3600"


@pytest.fixture
def mock_shell():
    """Patch the shell helper used by the image module."""
    with patch("cdk8s_image.image.shell", return_value=PUSH_OUTPUT) as mock:
        yield mock


class TestParseDigest:
    """Tests for parse_digest function."""

    def test_extracts_digest(self):
        """Should return sha256:<hex> from push output."""
        assert parse_digest(PUSH_OUTPUT) == "sha256:a1b2c3"

    def test_docker_push_line(self):
        """Should parse a realistic docker push summary line."""
        output = (
            "The push refers to repository [docker.io/library/app]\n"
            "5f70bf18a086: Pushed\n"
            "latest: digest: sha256:0123456789abcdef size: 528\n"
        )
        assert parse_digest(output) == "sha256:0123456789abcdef"

    def test_missing_digest_raises(self):
        """Should raise an error naming the captured output."""
        with pytest.raises(DigestNotFoundError) as exc_info:
            parse_digest("no digest here")
        assert "no digest here" in str(exc_info.value)
        assert exc_info.value.output == "no digest here"
        assert exc_info.value.code == "digest_not_found"

    def test_uppercase_hex_not_matched(self):
        """Digest must be lowercase hex."""
        with pytest.raises(DigestNotFoundError):
            parse_digest("digest: sha256:ABCDEF")


class TestComputeTag:
    """Tests for compute_tag function."""

    def test_joins_registry_and_label(self):
        assert compute_tag("localhost:5000", "chart-img") == "localhost:5000/chart-img"


class TestBuildAndPush:
    """Tests for build_and_push function."""

    def test_invocations(self, mock_shell):
        """Should build with options then push the tag."""
        url = build_and_push("ctx", "reg/app", ["--pull"])

        assert url == "reg/app@sha256:a1b2c3"
        assert mock_shell.call_args_list == [
            call("docker", "build", "--pull", "--tag", "reg/app", "ctx"),
            call("docker", "push", "reg/app"),
        ]

    def test_custom_executable(self, mock_shell):
        """Should invoke the configured executable."""
        build_and_push("ctx", "reg/app", docker="podman")
        assert mock_shell.call_args_list[0].args[0] == "podman"
        assert mock_shell.call_args_list[1].args[0] == "podman"

    def test_progress_messages_on_stderr(self, mock_shell, capsys):
        """Should announce build and push on stderr."""
        build_and_push("ctx", "reg/app")
        captured = capsys.readouterr()
        assert 'building docker image "ctx"...' in captured.err
        assert 'pushing docker image "ctx"...' in captured.err
        assert captured.out == ""

    def test_build_failure_skips_push(self):
        """A failed build should propagate and never push."""
        error = ShellCommandError("boom", command="docker", arguments=["build"])
        with (
            patch("cdk8s_image.image.shell", side_effect=error) as mock,
            pytest.raises(ShellCommandError),
        ):
            build_and_push("ctx", "reg/app")
        assert mock.call_count == 1


class TestImageProps:
    """Tests for ImageProps model."""

    def test_defaults(self):
        props = ImageProps(dir="app")
        assert props.registry is None
        assert props.cmd_opts == []

    def test_empty_dir_rejected(self):
        with pytest.raises(ValidationError):
            ImageProps(dir="")

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            ImageProps(dir="app", tag="x")  # type: ignore[call-arg]

    def test_frozen(self):
        props = ImageProps(dir="app")
        with pytest.raises(ValidationError):
            props.dir = "other"  # type: ignore[misc]


class TestImage:
    """Tests for the Image construct."""

    def test_minimal_usage(self, mock_shell):
        """End to end with target and tag options."""
        chart = cdk8s.Testing.chart()
        cmd_opts = (
            DockerBuildCommandOptionBuilder()
            .target("production")
            .tag("image1", "image2")
            .build()
        )

        image = Image(chart, "my-image", dir="foobar", cmd_opts=cmd_opts)

        assert image.url == f"{EXPECTED_TAG}@sha256:a1b2c3"
        assert mock_shell.call_count == 2
        mock_shell.assert_any_call(
            "docker",
            "build",
            "--target",
            "production",
            "--tag",
            "image1",
            "--tag",
            "image2",
            "--tag",
            EXPECTED_TAG,
            "foobar",
        )
        mock_shell.assert_any_call("docker", "push", EXPECTED_TAG)

    def test_tag_and_digest_exposed(self, mock_shell):
        """Should expose tag and digest separately."""
        image = Image(cdk8s.Testing.chart(), "my-image", dir="foobar")
        assert image.tag == EXPECTED_TAG
        assert image.digest == "sha256:a1b2c3"

    def test_no_options(self, mock_shell):
        """Without options the build gets only --tag and the directory."""
        Image(cdk8s.Testing.chart(), "my-image", dir="foobar")
        mock_shell.assert_any_call("docker", "build", "--tag", EXPECTED_TAG, "foobar")

    def test_custom_registry(self, mock_shell):
        """Registry prop should replace the default prefix."""
        image = Image(
            cdk8s.Testing.chart(), "my-image", dir="foobar", registry="localhost:5000"
        )
        assert image.url == "localhost:5000/test-my-image-c80f3600@sha256:a1b2c3"
        mock_shell.assert_any_call(
            "docker", "push", "localhost:5000/test-my-image-c80f3600"
        )

    def test_registry_from_env(self, mock_shell):
        """Registry should fall back to CDK8S_IMAGE_REGISTRY."""
        with patch.dict(os.environ, {"CDK8S_IMAGE_REGISTRY": "ghcr.io/acme"}):
            image = Image(cdk8s.Testing.chart(), "my-image", dir="foobar")
        assert image.tag == "ghcr.io/acme/test-my-image-c80f3600"

    def test_explicit_registry_beats_env(self, mock_shell):
        """Props should take precedence over environment."""
        with patch.dict(os.environ, {"CDK8S_IMAGE_REGISTRY": "ghcr.io/acme"}):
            image = Image(
                cdk8s.Testing.chart(), "my-image", dir="foobar", registry="r.io"
            )
        assert image.tag.startswith("r.io/")

    def test_missing_digest_fails_construction(self):
        """Push output without digest should abort construction."""
        with (
            patch("cdk8s_image.image.shell", return_value="pushed\n"),
            pytest.raises(DigestNotFoundError, match="pushed"),
        ):
            Image(cdk8s.Testing.chart(), "my-image", dir="foobar")

    def test_empty_dir_rejected(self, mock_shell):
        """An empty build context should fail before running docker."""
        with pytest.raises(ValidationError):
            Image(cdk8s.Testing.chart(), "my-image", dir="")
        mock_shell.assert_not_called()

    def test_props_exposed(self, mock_shell):
        """Validated props should be available on the construct."""
        image = Image(
            cdk8s.Testing.chart(), "my-image", dir="foobar", cmd_opts=["--pull"]
        )
        assert image.props == ImageProps(dir="foobar", cmd_opts=["--pull"])
