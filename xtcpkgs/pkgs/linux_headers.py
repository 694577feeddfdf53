"""Linux kernel API headers, installed to ``<prefix>/usr/include``.

Runs inside the kernel source tree. ``headers_check`` is only a
consistency check and newer kernels dropped it, so its failure is a
warning; ``mrproper`` and ``headers_install`` are mandatory.
"""

from xtc.config import BootstrapConfig
from xtc.stage import Command, Stage


def make_linux_headers(config: BootstrapConfig) -> Stage:
    arch = f"ARCH={config.kernel_arch}"
    return Stage(
        name="linux-headers",
        cwd=config.paths["linux"].source,
        commands=(
            Command(("make", "mrproper"), phase="build"),
            Command(("make", arch, "headers_check"), phase="build", advisory=True),
            Command(
                ("make", arch, f"INSTALL_HDR_PATH={config.prefix / 'usr'}",
                 "headers_install"),
                phase="install", privileged=True,
            ),
        ),
        description="Installing Linux kernel headers",
    )
