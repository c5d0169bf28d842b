"""cdk8s-image - build and push docker images during cdk8s synthesis.

The `Image` construct runs `docker build` and `docker push` while the chart
is being synthesized and exposes the pushed, digest-pinned image URL.
"""

from cdk8s_image.image import Image, ImageProps
from cdk8s_image.options import BuildOutput, DockerBuildCommandOptionBuilder

__version__ = "0.1.0"
__all__ = [
    "BuildOutput",
    "DockerBuildCommandOptionBuilder",
    "Image",
    "ImageProps",
    "__version__",
]
