"""Allow running as `python -m cdk8s_image`."""

from cdk8s_image.cli import app

app()
