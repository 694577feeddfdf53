"""``<prefix>/usr/lib -> lib64`` compatibility symlink.

glibc installs its x86_64 libraries into ``usr/lib64`` while gcc pass 2
also searches ``usr/lib``. The link is only created when nothing named
``lib`` exists yet, so re-running the stage is a no-op.
"""

from xtc.config import BootstrapConfig
from xtc.stage import Command, Stage


def make_usr_lib_symlink(config: BootstrapConfig, glibc: Stage) -> Stage:
    return Stage(
        name="usr-lib-symlink",
        cwd=config.prefix / "usr",
        commands=(
            Command(("ln", "-s", "lib64", "lib"),
                    phase="install", privileged=True, creates="lib"),
        ),
        requires=(glibc.name,),
        description="Ensuring /usr/lib -> lib64 symlink",
    )
