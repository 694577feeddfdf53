"""CMake — host build tool installed alongside the toolchain.

Shipped as a tarball that is unpacked on first use. Bootstrapped out of
tree from its own build dir with the host compiler.
"""

from xtc.config import BootstrapConfig
from xtc.stage import Command, Stage
from xtcpkgs.helpers import HOST_OVERLAY
from xtcpkgs.mk_stage import install_command, make_command


def make_cmake(config: BootstrapConfig, gcc_pass2: Stage) -> Stage:
    paths = config.paths["cmake"]
    return Stage(
        name="cmake",
        cwd=paths.build,
        commands=(
            Command(
                (str(paths.source / "bootstrap"),
                 f"--prefix={config.prefix}", f"--parallel={config.jobs}"),
                phase="configure",
            ),
            make_command(config),
            install_command("install"),
        ),
        overlay=HOST_OVERLAY,
        source=paths.source,
        archive=paths.archive,
        requires=(gcc_pass2.name,),
        description=f"Building CMake {config.cmake_version}",
    )
